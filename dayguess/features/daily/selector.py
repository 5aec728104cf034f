from __future__ import annotations

import re
from typing import Optional, Sequence

from dayguess.core.errors import invariant
from dayguess.features.daily.clock import local_timezone_name
from dayguess.features.daily.random import generator_for
from dayguess.models.daily import DailyChallenge
from dayguess.models.pool import PoolEntry

DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")

# Share of days that show a real observance when one falls on the date.
DATE_MATCH_PREFERENCE = 0.6


def select_daily_entry(date: str, pool: Sequence[PoolEntry]) -> PoolEntry:
    """
    Deterministically pick the entry for ``date``.

    Algorithm:
    1. Collect real entries whose MM-DD equals the date's MM-DD
    2. Seed mulberry32 with xmur3(date) and draw once to choose the branch
    3. Draw again to index either the date matches or the whole pool

    The second draw happens in both branches; the draw order is part of the
    contract, changing it changes every day's pick.
    """
    invariant(DATE_PATTERN.fullmatch(date), f"date must be YYYY-MM-DD, got {date!r}")
    invariant(len(pool) > 0, "pool must not be empty")

    mmdd = date[5:]
    matching_real = [entry for entry in pool if entry.is_real and entry.date == mmdd]

    rng = generator_for(date)
    branch_draw = rng.next()

    if matching_real and branch_draw < DATE_MATCH_PREFERENCE:
        return matching_real[int(rng.next() * len(matching_real))]
    return pool[int(rng.next() * len(pool))]


def get_daily_challenge(
    date: str,
    pool: Sequence[PoolEntry],
    timezone_name: Optional[str] = None,
) -> DailyChallenge:
    """Build the challenge for ``date`` (same date + same pool = same entry id)."""
    if timezone_name is None:
        timezone_name = local_timezone_name()

    return DailyChallenge(
        date=date,
        selected_entry=select_daily_entry(date, pool),
        timezone_name=timezone_name,
    )
