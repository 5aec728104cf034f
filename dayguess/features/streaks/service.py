from __future__ import annotations

import json
import logging
import re
from dataclasses import replace
from datetime import date

from dayguess.core.errors import InvariantViolation, PreconditionViolation, invariant
from dayguess.core.storage import KeyValueStorage
from dayguess.features.streaks.milestones import color_for
from dayguess.models.results import LoadResult
from dayguess.models.streak import StreakState

logger = logging.getLogger("dayguess")

STREAK_STATE_KEY = "streak-state"

ISO_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")

INITIAL_STREAK_STATE = StreakState()


def parse_calendar_date(value: str) -> date:
    """Strict ``YYYY-MM-DD`` parse."""
    if not isinstance(value, str) or not ISO_DATE_PATTERN.fullmatch(value):
        raise PreconditionViolation(f"Expected a YYYY-MM-DD date, got {value!r}")
    try:
        return date.fromisoformat(value)
    except ValueError as e:
        raise PreconditionViolation(f"Expected a YYYY-MM-DD date, got {value!r}") from e


def days_between(first: str, second: str) -> int:
    """Absolute number of calendar days between two dates. Pure date math."""
    return abs((parse_calendar_date(second) - parse_calendar_date(first)).days)


def record_correct_guess(state: StreakState, guess_date: str) -> StreakState:
    """
    Advance the streak for a correct guess on ``guess_date``.

    Same-day repeats are no-ops. A consecutive day extends the run; a first
    guess or any gap starts a new run of 1 (the guess itself counts).
    """
    parse_calendar_date(guess_date)

    if state.last_guess_date == guess_date:
        return state

    if state.last_guess_date is None or days_between(state.last_guess_date, guess_date) != 1:
        current = 1
    else:
        current = state.current_streak + 1

    best = max(state.best_streak, current)

    invariant(current >= 0, "Streak cannot be negative after increment", error=InvariantViolation)
    invariant(best >= current, "Best streak must be >= current streak", error=InvariantViolation)

    return StreakState(
        current_streak=current,
        best_streak=best,
        current_milestone_color=color_for(current),
        last_guess_date=guess_date,
    )


def record_incorrect_guess(state: StreakState, guess_date: str) -> StreakState:
    """Break the run. Best streak is preserved."""
    parse_calendar_date(guess_date)
    return replace(
        state,
        current_streak=0,
        current_milestone_color=None,
        last_guess_date=guess_date,
    )


def record_guess(state: StreakState, guess_date: str, correct: bool) -> StreakState:
    if correct:
        return record_correct_guess(state, guess_date)
    return record_incorrect_guess(state, guess_date)


def serialize_streak_state(state: StreakState) -> str:
    return json.dumps(
        {
            "currentStreak": state.current_streak,
            "bestStreak": state.best_streak,
            "currentMilestoneColor": state.current_milestone_color,
            "lastGuessDate": state.last_guess_date,
        }
    )


def _is_count(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


def deserialize_streak_state(raw: str) -> StreakState:
    """Parse a stored record. Raises ValueError on anything malformed."""
    data = json.loads(raw)
    required = ("currentStreak", "bestStreak", "currentMilestoneColor", "lastGuessDate")
    if not isinstance(data, dict) or any(k not in data for k in required):
        raise ValueError("streak state is missing required fields")

    current = data["currentStreak"]
    best = data["bestStreak"]
    color = data["currentMilestoneColor"]
    last = data["lastGuessDate"]
    if not _is_count(current) or not _is_count(best) or best < current:
        raise ValueError("streak counts must be integers with best >= current >= 0")
    if color is not None and not isinstance(color, str):
        raise ValueError("currentMilestoneColor must be a string or null")
    if last is not None:
        try:
            parse_calendar_date(last)
        except PreconditionViolation as e:
            raise ValueError(str(e)) from e

    return StreakState(
        current_streak=current,
        best_streak=best,
        current_milestone_color=color,
        last_guess_date=last,
    )


class StreakStore:
    """Reads and writes the streak record in a single storage slot."""

    def __init__(self, storage: KeyValueStorage, key: str = STREAK_STATE_KEY):
        self._storage = storage
        self.key = key

    def read(self) -> LoadResult[StreakState]:
        """Stored streak, or the zero state when absent or corrupt. Never raises."""
        try:
            raw = self._storage.get(self.key)
        except Exception as e:
            logger.warning(f"[streaks] storage read failed: {e}", extra={"event_type": "streak.read_failed", "key": self.key})
            return LoadResult(INITIAL_STREAK_STATE, "default", "read_failed")

        if raw is None:
            return LoadResult(INITIAL_STREAK_STATE, "default", "absent")

        try:
            return LoadResult(deserialize_streak_state(raw), "stored")
        except (ValueError, RecursionError) as e:
            logger.warning(f"[streaks] discarding corrupt state: {e}", extra={"event_type": "streak.corrupt", "key": self.key})
            return LoadResult(INITIAL_STREAK_STATE, "default", "corrupt")

    def load(self) -> StreakState:
        return self.read().state

    def save(self, state: StreakState) -> bool:
        """Persist ``state``. Failures are logged and reported as False."""
        try:
            ok = self._storage.set(self.key, serialize_streak_state(state))
        except Exception as e:
            logger.error(f"[streaks] storage write failed: {e}", extra={"event_type": "streak.write_failed", "key": self.key})
            return False
        if not ok:
            logger.error("[streaks] storage write rejected", extra={"event_type": "streak.write_failed", "key": self.key})
        return bool(ok)
