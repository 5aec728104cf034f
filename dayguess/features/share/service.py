from __future__ import annotations

from typing import List, Optional

from dayguess.core.errors import invariant
from dayguess.features.streaks.milestones import exact_milestone
from dayguess.models.pool import PoolEntry
from dayguess.models.share import ShareMessageData
from dayguess.models.streak import StreakState

# Milestones from this value up earn the trophy instead of the medal.
TROPHY_MILESTONE = 30


def milestone_text(current_streak: int) -> Optional[str]:
    if not exact_milestone(current_streak):
        return None
    emoji = "🏆" if current_streak >= TROPHY_MILESTONE else "🎖️"
    return f"{emoji} Milestone reached: {current_streak}-day streak!"


def new_best_text(current_streak: int) -> str:
    return f"🔥 New personal best: {current_streak}-day streak!"


def build_share_data(
    entry: PoolEntry,
    guessed_real: bool,
    streak: StreakState,
    previous_best: Optional[int] = None,
) -> ShareMessageData:
    """
    Assemble share data for a finished day.

    ``previous_best`` is the best streak before this guess. When unknown (the
    guess happened in an earlier request) a current streak equal to the best
    counts as a new best.
    """
    current = streak.current_streak
    if previous_best is None:
        is_new_best = current > 0 and current == streak.best_streak
    else:
        is_new_best = current > previous_best

    return ShareMessageData(
        day_name=entry.name,
        day_type="real" if entry.is_real else "fake",
        player_guess="real" if guessed_real else "fake",
        is_correct=guessed_real == entry.is_real,
        current_streak=current,
        milestone_text=milestone_text(current),
        new_best_text=new_best_text(current) if is_new_best else None,
    )


def format_share_message(data: ShareMessageData, url: str) -> str:
    """Plain-text result message, one section per block."""
    invariant(data.day_name.strip(), "dayName must not be empty")
    invariant(data.current_streak >= 0, "currentStreak must be non-negative")
    invariant(url and url.strip(), "share url must not be empty")

    lines: List[str] = [
        "🎉 Correct!" if data.is_correct else "❌ Incorrect!",
        "",
        f"{data.day_name} is {data.day_type}!",
        f"My guess: {data.player_guess.capitalize()}",
    ]

    if data.current_streak > 0:
        lines.append("")
        lines.append(f"Current streak: {data.current_streak}")
        if data.milestone_text is not None:
            lines.append(data.milestone_text)
        if data.new_best_text is not None:
            lines.append(data.new_best_text)

    lines.append("")
    lines.append(f"🔗 {url}")
    return "\n".join(lines)
