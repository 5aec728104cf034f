from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class StreakState:
    """
    Consecutive-day correct-guess run. Calendar-day keyed, local dates only.
    """

    current_streak: int = 0
    best_streak: int = 0
    current_milestone_color: Optional[str] = None
    last_guess_date: Optional[str] = None  # YYYY-MM-DD


@dataclass(frozen=True)
class MilestoneThreshold:
    value: int
    color: str
