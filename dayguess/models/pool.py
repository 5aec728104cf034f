from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class PoolEntry:
    """
    One international day, real or invented. Read-only dataset record.

    Real entries carry an ``MM-DD`` date and a source URL; fake ones carry neither.
    """

    id: str
    name: str
    is_real: bool
    date: Optional[str]
    description: str
    source_url: Optional[str] = None
