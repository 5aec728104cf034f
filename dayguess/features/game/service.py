from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, tzinfo
from typing import Optional, Sequence

from dayguess.core.errors import invariant
from dayguess.core.logging import log_event
from dayguess.core.storage import KeyValueStorage, NamespacedStorage
from dayguess.features.daily.clock import current_local_date, local_timezone_name, time_until_next_day
from dayguess.features.daily.selector import get_daily_challenge
from dayguess.features.daily.service import DailyStateStore, submit_guess
from dayguess.features.share.service import build_share_data, format_share_message
from dayguess.features.streaks.service import StreakStore, record_guess
from dayguess.models.daily import DailyChallenge, DailyPlayState
from dayguess.models.pool import PoolEntry
from dayguess.models.streak import StreakState

DEFAULT_PLAYER_ID = "local"


@dataclass(frozen=True)
class TodaySnapshot:
    challenge: DailyChallenge
    play_state: DailyPlayState
    streak: StreakState
    time_until_next_day: timedelta


@dataclass(frozen=True)
class GuessOutcome:
    """Result of a guess attempt. ``accepted`` is False for repeat guesses."""

    challenge: DailyChallenge
    play_state: DailyPlayState
    streak: StreakState
    accepted: bool
    previous_best: int

    @property
    def correct(self) -> bool:
        return bool(self.play_state.guessed_correctly)


class GameSession:
    """One player's daily game, wired to a storage port."""

    def __init__(
        self,
        storage: KeyValueStorage,
        pool: Sequence[PoolEntry],
        *,
        player_id: str = DEFAULT_PLAYER_ID,
        tz: Optional[tzinfo] = None,
        timezone_name: Optional[str] = None,
        share_url: str = "https://bull-jazz-day.vercel.app",
    ):
        scoped = NamespacedStorage(storage, player_id)
        self.player_id = player_id
        self.pool = pool
        self.tz = tz
        self.timezone_name = timezone_name or local_timezone_name(tz)
        self.share_url = share_url
        self.daily = DailyStateStore(scoped)
        self.streaks = StreakStore(scoped)

    def current_date(self, now: Optional[datetime] = None) -> str:
        return current_local_date(now, self.tz)

    def challenge(self, now: Optional[datetime] = None) -> DailyChallenge:
        return get_daily_challenge(self.current_date(now), self.pool, self.timezone_name)

    def today(self, now: Optional[datetime] = None) -> TodaySnapshot:
        challenge = self.challenge(now)
        return TodaySnapshot(
            challenge=challenge,
            play_state=self.daily.load(challenge.date),
            streak=self.streaks.load(),
            time_until_next_day=time_until_next_day(now, self.tz),
        )

    def guess(self, guessed_real: bool, now: Optional[datetime] = None) -> GuessOutcome:
        """
        Record today's guess.

        Only the first guess of a local day counts; it updates the daily record
        and then the streak. Repeat guesses return the locked-in result.
        """
        challenge = self.challenge(now)
        state = self.daily.load(challenge.date)
        streak = self.streaks.load()

        if state.has_guessed:
            return GuessOutcome(challenge, state, streak, accepted=False, previous_best=streak.best_streak)

        now_ms = int(now.timestamp() * 1000) if now is not None else None
        state = submit_guess(state, challenge, guessed_real, now_ms=now_ms)
        self.daily.save(state)

        previous_best = streak.best_streak
        streak = record_guess(streak, challenge.date, bool(state.guessed_correctly))
        self.streaks.save(streak)

        log_event(
            "info",
            "game.guess",
            player_id=self.player_id,
            event_type="game.guess",
            extra={
                "date": challenge.date,
                "entry_id": challenge.selected_entry.id,
                "correct": state.guessed_correctly,
                "current_streak": streak.current_streak,
            },
        )
        return GuessOutcome(challenge, state, streak, accepted=True, previous_best=previous_best)

    def share(self, now: Optional[datetime] = None) -> str:
        """Share message for today's recorded guess."""
        challenge = self.challenge(now)
        state = self.daily.load(challenge.date)
        invariant(state.has_guessed, "no guess recorded for today")

        entry = challenge.selected_entry
        guessed_real = state.guessed_real
        if guessed_real is None:
            # older records only kept correctness
            guessed_real = entry.is_real if state.guessed_correctly else not entry.is_real

        data = build_share_data(entry, guessed_real, self.streaks.load())
        return format_share_message(data, self.share_url)
