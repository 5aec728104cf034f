from __future__ import annotations

import math
from typing import Optional, Tuple

from dayguess.core.errors import PreconditionViolation, invariant
from dayguess.models.streak import MilestoneThreshold

# Ascending by value.
MILESTONE_THRESHOLDS: Tuple[MilestoneThreshold, ...] = (
    MilestoneThreshold(3, "text-blue-500"),
    MilestoneThreshold(5, "text-green-500"),
    MilestoneThreshold(10, "text-purple-500"),
    MilestoneThreshold(15, "text-orange-500"),
    MilestoneThreshold(20, "text-red-500"),
    MilestoneThreshold(30, "text-yellow-500"),  # gold
    MilestoneThreshold(50, "text-cyan-500"),
    MilestoneThreshold(100, "text-magenta-500"),
)

MILESTONE_VALUES = tuple(m.value for m in MILESTONE_THRESHOLDS)


def _check_streak_count(streak) -> None:
    if isinstance(streak, bool) or not isinstance(streak, (int, float)):
        raise PreconditionViolation("Streak count must be an integer")
    if isinstance(streak, float):
        invariant(math.isfinite(streak), "Streak count must be finite")
        invariant(streak.is_integer(), "Streak count must be an integer")
    invariant(streak >= 0, "Streak count must be non-negative")


def exact_milestone(streak: int) -> Optional[MilestoneThreshold]:
    """
    Milestone whose value equals ``streak`` exactly, else None.

    >>> exact_milestone(3)
    MilestoneThreshold(value=3, color='text-blue-500')
    >>> exact_milestone(4) is None
    True
    """
    _check_streak_count(streak)
    for milestone in MILESTONE_THRESHOLDS:
        if milestone.value == streak:
            return milestone
    return None


def color_for(streak: int) -> Optional[str]:
    """
    Color of the highest milestone at or below ``streak``.

    The color persists between milestones (7 keeps the color of 5) and past
    the last one; below the first milestone there is no color.
    """
    _check_streak_count(streak)
    for milestone in reversed(MILESTONE_THRESHOLDS):
        if milestone.value <= streak:
            return milestone.color
    return None
