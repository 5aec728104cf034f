from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from dayguess.core.errors import PreconditionViolation
from dayguess.features.game.service import GameSession
from dayguess.tests.mocks import RejectingStorage

UTC = ZoneInfo("UTC")
DAY_ONE = datetime(2025, 10, 5, 12, 0, tzinfo=timezone.utc)


def _session(storage, pool, player_id="local", tz=UTC):
    return GameSession(storage, pool, player_id=player_id, tz=tz, share_url="https://example.com/play")


def _right_answer(session, now):
    return session.challenge(now).selected_entry.is_real


def test_today_before_guess(storage, small_pool):
    snapshot = _session(storage, small_pool).today(DAY_ONE)
    assert snapshot.challenge.date == "2025-10-05"
    assert snapshot.challenge.timezone_name == "UTC"
    assert not snapshot.play_state.has_guessed
    assert snapshot.streak.current_streak == 0
    assert snapshot.time_until_next_day == timedelta(hours=12)


def test_correct_guess_updates_day_and_streak(storage, small_pool):
    session = _session(storage, small_pool)
    outcome = session.guess(_right_answer(session, DAY_ONE), DAY_ONE)
    assert outcome.accepted
    assert outcome.correct
    assert outcome.previous_best == 0
    assert outcome.streak.current_streak == 1
    assert outcome.play_state.timestamp_ms == int(DAY_ONE.timestamp() * 1000)

    snapshot = session.today(DAY_ONE)
    assert snapshot.play_state.guessed_correctly is True
    assert snapshot.streak.last_guess_date == "2025-10-05"


def test_repeat_guess_is_not_accepted(storage, small_pool):
    session = _session(storage, small_pool)
    answer = _right_answer(session, DAY_ONE)
    first = session.guess(answer, DAY_ONE)
    second = session.guess(not answer, DAY_ONE + timedelta(hours=3))
    assert not second.accepted
    assert second.play_state == first.play_state
    assert second.streak == first.streak
    assert second.correct


def test_state_survives_new_session_objects(storage, small_pool):
    _session(storage, small_pool).guess(True, DAY_ONE)
    again = _session(storage, small_pool).guess(False, DAY_ONE)
    assert not again.accepted


def test_streak_across_consecutive_days_and_gap(storage, small_pool):
    session = _session(storage, small_pool)
    for offset in range(3):
        now = DAY_ONE + timedelta(days=offset)
        outcome = session.guess(_right_answer(session, now), now)
        assert outcome.streak.current_streak == offset + 1
    assert outcome.streak.current_milestone_color == "text-blue-500"

    later = DAY_ONE + timedelta(days=5)
    outcome = session.guess(_right_answer(session, later), later)
    assert outcome.streak.current_streak == 1
    assert outcome.streak.best_streak == 3
    assert outcome.previous_best == 3


def test_wrong_guess_breaks_streak(storage, small_pool):
    session = _session(storage, small_pool)
    session.guess(_right_answer(session, DAY_ONE), DAY_ONE)
    tomorrow = DAY_ONE + timedelta(days=1)
    outcome = session.guess(not _right_answer(session, tomorrow), tomorrow)
    assert not outcome.correct
    assert outcome.streak.current_streak == 0
    assert outcome.streak.best_streak == 1


def test_players_are_isolated(storage, small_pool):
    alice = _session(storage, small_pool, player_id="alice")
    bob = _session(storage, small_pool, player_id="bob")
    alice.guess(_right_answer(alice, DAY_ONE), DAY_ONE)
    assert not bob.today(DAY_ONE).play_state.has_guessed
    assert bob.today(DAY_ONE).streak.current_streak == 0
    assert "alice:streak-state" in storage.keys()


def test_local_date_follows_session_zone(storage, small_pool):
    instant = datetime(2025, 10, 5, 23, 30, tzinfo=timezone.utc)
    tokyo = _session(storage, small_pool, player_id="t", tz=ZoneInfo("Asia/Tokyo"))
    la = _session(storage, small_pool, player_id="l", tz=ZoneInfo("America/Los_Angeles"))
    assert tokyo.current_date(instant) == "2025-10-06"
    assert la.current_date(instant) == "2025-10-05"
    assert tokyo.challenge(instant).timezone_name == "Asia/Tokyo"


def test_share_requires_a_guess(storage, small_pool):
    with pytest.raises(PreconditionViolation):
        _session(storage, small_pool).share(DAY_ONE)


def test_share_after_guess(storage, small_pool):
    session = _session(storage, small_pool)
    answer = _right_answer(session, DAY_ONE)
    session.guess(answer, DAY_ONE)
    message = session.share(DAY_ONE)
    name = session.challenge(DAY_ONE).selected_entry.name
    assert message.startswith("🎉 Correct!")
    assert f"{name} is {'real' if answer else 'fake'}!" in message
    assert "Current streak: 1" in message
    assert "🔥 New personal best: 1-day streak!" in message
    assert message.endswith("🔗 https://example.com/play")


def test_failed_writes_do_not_break_the_guess(small_pool):
    storage = RejectingStorage()
    session = _session(storage, small_pool)
    outcome = session.guess(_right_answer(session, DAY_ONE), DAY_ONE)
    assert outcome.accepted
    assert outcome.streak.current_streak == 1
    assert storage.write_attempts == 2
    # nothing was persisted
    assert not session.today(DAY_ONE).play_state.has_guessed
