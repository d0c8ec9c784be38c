import random
from datetime import date, datetime, timedelta

from core import digest_store
from core.digest import (
    EMPTY_DOT_COLOR,
    WEEKLY_MESSAGES,
    calculate_digest_data,
    find_peak_hour,
    health_indicator,
    streak_message,
    week_category,
)
from core.journal_store import HEALTH_COLORS

# a Wednesday; last week is Mon 2024-06-03 .. Sun 2024-06-09
TODAY = date(2024, 6, 12)


def _last_week(make_history, types_by_day):
    logs = []
    for offset, types in types_by_day.items():
        d = date(2024, 6, 3) + timedelta(days=offset)
        for i, t in enumerate(types):
            logs.append((datetime(d.year, d.month, d.day, 8 + i, 0), t))
    return make_history(*logs)


def test_health_indicator_bands():
    assert health_indicator(3.2)["id"] == "excellent"
    assert health_indicator(4.5)["id"] == "excellent"
    assert health_indicator(2.7)["id"] == "good"
    assert health_indicator(5.0)["id"] == "good"
    assert health_indicator(2.0)["id"] == "fair"
    assert health_indicator(5.5)["id"] == "fair"
    assert health_indicator(1.5)["id"] == "needs_attention"
    assert health_indicator(None) is None


def test_streak_message_tiers():
    assert streak_message(2) is None
    assert streak_message(3) == streak_message(6)
    assert streak_message(7) != streak_message(6)
    assert streak_message(30) == "Legendary streak!"


def test_digest_covers_last_full_week(make_history):
    history = _last_week(make_history, {0: [3, 3], 2: [3], 4: [4, 3]})
    history += make_history((datetime(2024, 6, 11, 9), 7))

    digest = calculate_digest_data(history, today=TODAY, rng=random.Random(3))

    assert digest["dateRange"] == "Jun 3 - Jun 9"
    assert digest["totalLogs"] == 5
    assert digest["avgType"] == 3.2
    assert digest["healthIndicator"]["id"] == "excellent"
    assert digest["weekCategory"] == "excellent"
    assert digest["message"] in WEEKLY_MESSAGES["excellent"]
    assert digest["peakHour"] == "Morning"

    dots = digest["dailyDots"]
    assert [d["day"] for d in dots] == ["M", "T", "W", "T", "F", "S", "S"]
    assert dots[0]["date"] == "2024-06-03"
    assert dots[0]["hasData"] and dots[0]["color"] == HEALTH_COLORS["healthy"]
    assert not dots[1]["hasData"] and dots[1]["color"] == EMPTY_DOT_COLOR
    assert dots[4]["avgType"] == 4


def test_digest_is_deterministic_apart_from_message(make_history):
    history = _last_week(make_history, {0: [1, 2], 3: [6], 5: [4]})

    a = calculate_digest_data(history, today=TODAY, rng=random.Random(1))
    b = calculate_digest_data(history, today=TODAY, rng=random.Random(99))

    a.pop("message")
    b.pop("message")
    assert a == b


def test_streak_resets_when_last_log_is_old(make_history):
    history = _last_week(make_history, {5: [4], 6: [4]})
    assert calculate_digest_data(history, today=TODAY)["streak"] == 0


def test_empty_and_sparse_weeks(make_history):
    empty = calculate_digest_data([], today=TODAY)
    assert empty["weekCategory"] == "no_data"
    assert empty["avgType"] is None
    assert empty["healthIndicator"] is None
    assert empty["message"] in WEEKLY_MESSAGES["no_data"]

    sparse = calculate_digest_data(_last_week(make_history, {1: [4, 4]}), today=TODAY)
    assert sparse["weekCategory"] == "low_data"
    assert sparse["peakHour"] is None


def test_fair_average_uses_needs_attention_messages(make_entry):
    entries = [make_entry(t, datetime(2024, 6, 4, 9)) for t in (5, 5, 6, 5, 5)]
    assert week_category(entries, 5.2) == "needs_attention"


def test_peak_hour_needs_a_real_winner(make_entry):
    spread = [
        make_entry(4, datetime(2024, 6, 4, 6)),
        make_entry(4, datetime(2024, 6, 4, 12)),
        make_entry(4, datetime(2024, 6, 4, 23)),
    ]
    assert find_peak_hour(spread) is None

    evening = spread + [make_entry(4, datetime(2024, 6, 5, 19)), make_entry(4, datetime(2024, 6, 6, 20))]
    assert find_peak_hour(evening) == "Evening"


def test_digest_shows_once_on_monday():
    monday = date(2024, 6, 10)

    assert digest_store.should_show_digest(monday)
    assert not digest_store.should_show_digest(monday + timedelta(days=1))

    digest_store.dismiss_digest(now=datetime(2024, 6, 10, 8, 0))
    assert not digest_store.should_show_digest(monday)
    assert digest_store.should_show_digest(monday + timedelta(days=7))

    digest_store.reset_digest_state()
    assert digest_store.should_show_digest(monday)
