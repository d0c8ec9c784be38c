from datetime import date, datetime

from core.calculations import (
    average_type,
    calculate_stats,
    color_distribution,
    gut_health_score,
    round_half_up,
    tag_correlations,
    type_distribution,
)


def test_round_half_up_rounds_halves_away_from_even():
    assert round_half_up(2.25, 1) == 2.3
    assert round_half_up(2.5) == 3
    assert round_half_up(3.5) == 4
    assert round_half_up(3.44, 1) == 3.4


def test_gut_health_score(make_entry):
    at = datetime(2024, 6, 1, 9)

    assert gut_health_score([make_entry(4, at), make_entry(4, at)]) is None
    assert gut_health_score([make_entry(4, at)] * 3) == 100
    assert gut_health_score([make_entry(1, at)] * 3) == 10
    assert gut_health_score([make_entry(7, at)] * 3) == 10
    # avg 3.3 -> 100 - 0.7 * 30
    assert gut_health_score([make_entry(3, at), make_entry(3, at), make_entry(4, at)]) == 79


def test_average_type(make_entry):
    at = datetime(2024, 6, 1, 9)
    assert average_type([]) is None
    assert average_type([make_entry(3, at), make_entry(4, at), make_entry(4, at)]) == 3.7


def test_calculate_stats_uses_last_week(make_history):
    history = make_history(
        (datetime(2024, 6, 10, 9), 4),
        (datetime(2024, 6, 9, 9), 4),
        (datetime(2024, 6, 8, 9), 4),
        (datetime(2024, 5, 1, 9), 1),
    )

    stats = calculate_stats(history, today=date(2024, 6, 10))

    assert stats["streak"] == 3
    assert stats["weekCount"] == 3
    assert stats["avgType"] == 4.0
    assert stats["healthScore"] == 100


def test_distributions(make_entry):
    history = [
        {"date": "2024-06-01", "entries": [
            make_entry(4, datetime(2024, 6, 1, 9), tags=["coffee"], color="brown"),
            make_entry(6, datetime(2024, 6, 1, 12), tags=["coffee", "stress"], color="brown"),
            make_entry(2, datetime(2024, 6, 1, 20), color="green"),
        ]},
    ]

    types = {row["type"]: row["count"] for row in type_distribution(history)}
    assert types == {1: 0, 2: 1, 3: 0, 4: 1, 5: 0, 6: 1, 7: 0}

    colors = color_distribution(history)
    assert [c["id"] for c in colors] == ["brown", "green"]

    tags = tag_correlations(history)
    assert tags[0]["id"] == "coffee"
    assert tags[0]["count"] == 2
    assert tags[0]["avgType"] == 5.0
