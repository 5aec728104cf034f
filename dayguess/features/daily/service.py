from __future__ import annotations

import json
import logging
import time
from dataclasses import replace
from typing import Optional

from dayguess.core.storage import KeyValueStorage
from dayguess.models.daily import DailyChallenge, DailyPlayState
from dayguess.models.results import LoadResult

logger = logging.getLogger("dayguess")

DAILY_STATE_KEY = "daily-game-state"


def _now_ms() -> int:
    return int(time.time() * 1000)


def fresh_daily_state(current_date: str, now_ms: Optional[int] = None) -> DailyPlayState:
    return DailyPlayState(
        date=current_date,
        guessed_correctly=None,
        timestamp_ms=_now_ms() if now_ms is None else now_ms,
        guessed_real=None,
    )


def submit_guess(
    state: DailyPlayState,
    challenge: DailyChallenge,
    guessed_real: bool,
    now_ms: Optional[int] = None,
) -> DailyPlayState:
    """
    Lock in the day's first guess. Later guesses return ``state`` unchanged.

    The caller persists the returned state.
    """
    if state.has_guessed:
        return state

    return replace(
        state,
        guessed_correctly=(guessed_real == challenge.selected_entry.is_real),
        guessed_real=guessed_real,
        timestamp_ms=_now_ms() if now_ms is None else now_ms,
    )


def serialize_daily_state(state: DailyPlayState) -> str:
    return json.dumps(
        {
            "date": state.date,
            "guessedCorrectly": state.guessed_correctly,
            "guessedReal": state.guessed_real,
            "timestamp": state.timestamp_ms,
        }
    )


def deserialize_daily_state(raw: str) -> DailyPlayState:
    """Parse a stored record. Raises ValueError on anything malformed."""
    data = json.loads(raw)
    if not isinstance(data, dict) or not isinstance(data.get("date"), str):
        raise ValueError("daily state must be an object with a date")

    guessed_correctly = data.get("guessedCorrectly")
    guessed_real = data.get("guessedReal")
    timestamp = data.get("timestamp", 0)
    if guessed_correctly is not None and not isinstance(guessed_correctly, bool):
        raise ValueError("guessedCorrectly must be a bool or null")
    if guessed_real is not None and not isinstance(guessed_real, bool):
        raise ValueError("guessedReal must be a bool or null")
    if isinstance(timestamp, bool) or not isinstance(timestamp, (int, float)):
        raise ValueError("timestamp must be a number")

    return DailyPlayState(
        date=data["date"],
        guessed_correctly=guessed_correctly,
        timestamp_ms=int(timestamp),
        guessed_real=guessed_real,
    )


class DailyStateStore:
    """Reads and writes the per-day play record in a single storage slot."""

    def __init__(self, storage: KeyValueStorage, key: str = DAILY_STATE_KEY):
        self._storage = storage
        self.key = key

    def read(self, current_date: str, now_ms: Optional[int] = None) -> LoadResult[DailyPlayState]:
        """
        Return the stored record for ``current_date``.

        Absent, corrupt or stale records fall back to a fresh unguessed state.
        Never raises.
        """
        try:
            raw = self._storage.get(self.key)
        except Exception as e:
            logger.warning(f"[daily] storage read failed: {e}", extra={"event_type": "daily.read_failed", "key": self.key})
            return LoadResult(fresh_daily_state(current_date, now_ms), "fresh", "read_failed")

        if raw is None:
            return LoadResult(fresh_daily_state(current_date, now_ms), "fresh", "absent")

        try:
            stored = deserialize_daily_state(raw)
        except (ValueError, OverflowError, RecursionError) as e:
            logger.warning(f"[daily] discarding corrupt state: {e}", extra={"event_type": "daily.corrupt", "key": self.key})
            return LoadResult(fresh_daily_state(current_date, now_ms), "fresh", "corrupt")

        if stored.date != current_date:
            return LoadResult(fresh_daily_state(current_date, now_ms), "fresh", "stale")

        return LoadResult(stored, "stored")

    def load(self, current_date: str, now_ms: Optional[int] = None) -> DailyPlayState:
        return self.read(current_date, now_ms).state

    def save(self, state: DailyPlayState) -> bool:
        """Persist ``state``. Failures are logged and reported as False."""
        try:
            ok = self._storage.set(self.key, serialize_daily_state(state))
        except Exception as e:
            logger.error(f"[daily] storage write failed: {e}", extra={"event_type": "daily.write_failed", "key": self.key})
            return False
        if not ok:
            logger.error("[daily] storage write rejected", extra={"event_type": "daily.write_failed", "key": self.key})
        return bool(ok)
