from __future__ import annotations

from fastapi import APIRouter, Depends

from dayguess.api.deps import get_session
from dayguess.features.game.service import GameSession
from dayguess.features.streaks.milestones import exact_milestone
from dayguess.models.streak import StreakState

router = APIRouter()


def streak_payload(streak: StreakState) -> dict:
    milestone = exact_milestone(streak.current_streak)
    return {
        "current_streak": streak.current_streak,
        "best_streak": streak.best_streak,
        "milestone_color": streak.current_milestone_color,
        "milestone_reached": milestone.value if milestone else None,
        "last_guess_date": streak.last_guess_date,
    }


@router.get("/v1/streaks/current")
def get_current_streak(session: GameSession = Depends(get_session)):
    """Return the current streak state for the player."""
    return streak_payload(session.streaks.load())
