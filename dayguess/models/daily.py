from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from dayguess.models.pool import PoolEntry


@dataclass(frozen=True)
class DailyChallenge:
    """The pool entry assigned to one calendar date. Derived, never persisted."""

    date: str  # YYYY-MM-DD
    selected_entry: PoolEntry
    timezone_name: str


@dataclass(frozen=True)
class DailyPlayState:
    """Whether the player has already guessed on ``date``."""

    date: str  # YYYY-MM-DD
    guessed_correctly: Optional[bool] = None
    timestamp_ms: int = 0
    guessed_real: Optional[bool] = None

    @property
    def has_guessed(self) -> bool:
        return self.guessed_correctly is not None
