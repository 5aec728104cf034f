import pytest

from dayguess.core.errors import PreconditionViolation
from dayguess.features.share.service import (
    build_share_data,
    format_share_message,
    milestone_text,
    new_best_text,
)
from dayguess.models.share import ShareMessageData
from dayguess.models.streak import StreakState
from dayguess.tests.mocks import make_entry

URL = "https://bull-jazz-day.vercel.app"


def _data(**overrides):
    values = dict(
        day_name="International Women's Day",
        day_type="real",
        player_guess="real",
        is_correct=True,
        current_streak=0,
    )
    values.update(overrides)
    return ShareMessageData(**values)


def test_correct_guess_without_streak():
    message = format_share_message(_data(), URL)
    assert message == (
        "🎉 Correct!\n"
        "\n"
        "International Women's Day is real!\n"
        "My guess: Real\n"
        "\n"
        f"🔗 {URL}"
    )


def test_incorrect_guess():
    message = format_share_message(
        _data(day_name="Day of Socks", day_type="fake", player_guess="real", is_correct=False), URL
    )
    assert message.startswith("❌ Incorrect!\n")
    assert "Day of Socks is fake!" in message
    assert "My guess: Real" in message
    assert "Current streak" not in message


def test_streak_block_with_milestone_and_new_best():
    message = format_share_message(
        _data(
            current_streak=5,
            milestone_text="🎖️ Milestone reached: 5-day streak!",
            new_best_text="🔥 New personal best: 5-day streak!",
        ),
        URL,
    )
    lines = message.split("\n")
    assert lines[4:8] == [
        "",
        "Current streak: 5",
        "🎖️ Milestone reached: 5-day streak!",
        "🔥 New personal best: 5-day streak!",
    ]
    assert lines[-2:] == ["", f"🔗 {URL}"]


def test_streak_block_without_extras():
    message = format_share_message(_data(current_streak=2), URL)
    assert "Current streak: 2" in message
    assert "Milestone" not in message
    assert "personal best" not in message


def test_milestone_text():
    assert milestone_text(4) is None
    assert milestone_text(3) == "🎖️ Milestone reached: 3-day streak!"
    assert milestone_text(30) == "🏆 Milestone reached: 30-day streak!"
    assert milestone_text(100) == "🏆 Milestone reached: 100-day streak!"


def test_new_best_text():
    assert new_best_text(12) == "🔥 New personal best: 12-day streak!"


def test_build_share_data_with_previous_best():
    entry = make_entry("womens-day", real=True, date="03-08", name="International Women's Day")
    streak = StreakState(current_streak=5, best_streak=5, current_milestone_color="text-green-500", last_guess_date="2025-10-05")
    data = build_share_data(entry, True, streak, previous_best=4)
    assert data.day_type == "real"
    assert data.player_guess == "real"
    assert data.is_correct is True
    assert data.milestone_text == "🎖️ Milestone reached: 5-day streak!"
    assert data.new_best_text == "🔥 New personal best: 5-day streak!"

    assert build_share_data(entry, True, streak, previous_best=5).new_best_text is None


def test_build_share_data_unknown_previous_best():
    entry = make_entry("fake-socks")
    on_best = StreakState(current_streak=2, best_streak=2, current_milestone_color=None, last_guess_date="2025-10-05")
    below_best = StreakState(current_streak=2, best_streak=9, current_milestone_color=None, last_guess_date="2025-10-05")
    broken = StreakState(current_streak=0, best_streak=9, current_milestone_color=None, last_guess_date="2025-10-05")
    assert build_share_data(entry, False, on_best).new_best_text is not None
    assert build_share_data(entry, False, below_best).new_best_text is None

    data = build_share_data(entry, True, broken)
    assert data.is_correct is False
    assert data.day_type == "fake"
    assert data.player_guess == "real"
    assert data.new_best_text is None


def test_format_rejects_bad_input():
    with pytest.raises(PreconditionViolation, match="dayName"):
        format_share_message(_data(day_name="  "), URL)
    with pytest.raises(PreconditionViolation):
        format_share_message(_data(current_streak=-1), URL)
    with pytest.raises(PreconditionViolation):
        format_share_message(_data(), "")
