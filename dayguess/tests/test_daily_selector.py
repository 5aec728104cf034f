from datetime import date, timedelta

import pytest

from dayguess.core.errors import PreconditionViolation
from dayguess.features.daily.random import generator_for
from dayguess.features.daily.selector import get_daily_challenge, select_daily_entry
from dayguess.features.pool.loader import load_pool
from dayguess.tests.mocks import make_entry


def _expected(date_str, pool):
    """Reference walk of the two draws."""
    mmdd = date_str[5:]
    matching = [e for e in pool if e.is_real and e.date == mmdd]
    rng = generator_for(date_str)
    r1 = rng.next()
    r2 = rng.next()
    if matching and r1 < 0.6:
        return matching[int(r2 * len(matching))]
    return pool[int(r2 * len(pool))]


def test_same_date_same_entry_100_times(small_pool):
    ids = {get_daily_challenge("2025-10-05", small_pool, "UTC").selected_entry.id for _ in range(100)}
    assert len(ids) == 1


def test_challenge_fields(small_pool):
    challenge = get_daily_challenge("2025-10-05", small_pool, "Europe/Paris")
    assert challenge.date == "2025-10-05"
    assert challenge.timezone_name == "Europe/Paris"
    assert challenge.selected_entry in small_pool


def test_default_timezone_name_is_a_string(small_pool):
    challenge = get_daily_challenge("2025-10-05", small_pool)
    assert isinstance(challenge.timezone_name, str)
    assert challenge.timezone_name


def test_fallback_path_uses_second_draw(small_pool):
    # no real entry on 06-13 in the small pool
    for year in range(2000, 2050):
        day = f"{year}-06-13"
        rng = generator_for(day)
        rng.next()
        expected = small_pool[int(rng.next() * len(small_pool))]
        assert select_daily_entry(day, small_pool) == expected


def test_date_match_branch_follows_draw_order(small_pool):
    for year in range(1900, 2100):
        day = f"{year}-03-08"
        assert select_daily_entry(day, small_pool) == _expected(day, small_pool)


def test_date_match_preference_dominates(small_pool):
    hits = 0
    for year in range(1900, 2100):
        entry = select_daily_entry(f"{year}-03-08", small_pool)
        if entry.is_real and entry.date == "03-08":
            hits += 1
    # ~60% branch + a small share of full-pool picks
    assert hits > 100


def test_matching_ignores_fake_and_other_dates():
    pool = (
        make_entry("real-0101", real=True, date="01-01"),
        make_entry("fake-a"),
        make_entry("fake-b"),
    )
    for year in range(2000, 2100):
        entry = select_daily_entry(f"{year}-07-04", pool)
        assert entry == _expected(f"{year}-07-04", pool)


def test_single_entry_pool_always_selected():
    only = make_entry("only-one", real=True, date="01-01")
    for offset in range(30):
        day = (date(2025, 1, 1) + timedelta(days=offset)).isoformat()
        assert select_daily_entry(day, (only,)) is only


def test_empty_pool_is_a_precondition_violation():
    with pytest.raises(PreconditionViolation):
        select_daily_entry("2025-10-05", ())


def test_malformed_date_is_a_precondition_violation(small_pool):
    with pytest.raises(PreconditionViolation):
        select_daily_entry("10/05/2025", small_pool)


def test_bundled_pool_distributes_across_dates():
    pool = load_pool()
    start = date(2025, 1, 1)
    ids = {
        select_daily_entry((start + timedelta(days=i)).isoformat(), pool).id
        for i in range(100)
    }
    assert len(ids) > 10


def test_leap_day_and_year_boundary(small_pool):
    assert get_daily_challenge("2024-02-29", small_pool, "UTC").date == "2024-02-29"
    assert get_daily_challenge("2024-12-31", small_pool, "UTC").date == "2024-12-31"
    assert get_daily_challenge("2025-01-01", small_pool, "UTC").date == "2025-01-01"


def test_pinned_pick_without_date_match(small_pool):
    # second draw for 2025-10-05 is 0.6471388877835125 -> index 38 of 60
    assert select_daily_entry("2025-10-05", small_pool).id == "fake-35"
