from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from dayguess.api.deps import get_session
from dayguess.api.streaks import streak_payload
from dayguess.features.daily.clock import format_countdown
from dayguess.features.game.service import GameSession
from dayguess.models.daily import DailyChallenge, DailyPlayState

router = APIRouter()


class GuessRequest(BaseModel):
    guessed_real: bool


def _entry_payload(challenge: DailyChallenge, reveal: bool) -> dict:
    entry = challenge.selected_entry
    payload = {"id": entry.id, "name": entry.name}
    if reveal:
        # the answer stays hidden until the day's guess is locked in
        payload.update(
            {
                "is_real": entry.is_real,
                "date": entry.date,
                "description": entry.description,
                "source_url": entry.source_url,
            }
        )
    return payload


def _play_payload(state: DailyPlayState) -> dict:
    return {
        "date": state.date,
        "guessed": state.has_guessed,
        "guessed_correctly": state.guessed_correctly,
        "guessed_real": state.guessed_real,
        "timestamp": state.timestamp_ms,
    }


@router.get("/v1/daily/today")
def get_today(session: GameSession = Depends(get_session)):
    """Today's challenge for the player's local date, plus play and streak state."""
    snapshot = session.today()
    remaining = snapshot.time_until_next_day
    return {
        "date": snapshot.challenge.date,
        "timezone": snapshot.challenge.timezone_name,
        "entry": _entry_payload(snapshot.challenge, reveal=snapshot.play_state.has_guessed),
        "play_state": _play_payload(snapshot.play_state),
        "streak": streak_payload(snapshot.streak),
        "seconds_until_next_day": max(0, int(remaining.total_seconds())),
        "countdown": format_countdown(remaining),
    }


@router.post("/v1/daily/guess")
def post_guess(req: GuessRequest, session: GameSession = Depends(get_session)):
    """Lock in today's guess. Repeat guesses return the first result."""
    outcome = session.guess(req.guessed_real)
    return {
        "accepted": outcome.accepted,
        "correct": outcome.correct,
        "date": outcome.challenge.date,
        "entry": _entry_payload(outcome.challenge, reveal=True),
        "play_state": _play_payload(outcome.play_state),
        "streak": streak_payload(outcome.streak),
        "previous_best": outcome.previous_best,
    }
