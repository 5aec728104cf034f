from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Optional

DayType = Literal["real", "fake"]


@dataclass(frozen=True)
class ShareMessageData:
    day_name: str
    day_type: DayType
    player_guess: DayType
    is_correct: bool
    current_streak: int
    milestone_text: Optional[str] = None
    new_best_text: Optional[str] = None
