import random
from datetime import datetime, timedelta

from core.patterns import (
    detect_constipation,
    detect_patterns,
    is_tip_appropriate,
    profile_effects,
    ranking_key,
)
from core.wellness_tips import WELLNESS_TIPS, tip_by_id

NOW = datetime(2024, 6, 10, 20, 0)


class FixedRandom:
    """Deterministic stand-in for random.Random."""

    def __init__(self, value):
        self.value = value

    def random(self):
        return self.value

    def choice(self, seq):
        return seq[0]


def _entries(make_entry, types, tags=None):
    # oldest first, one per hour ending an hour before NOW
    start = NOW - timedelta(hours=len(types))
    return [
        make_entry(t, start + timedelta(hours=i), tags=tags)
        for i, t in enumerate(types)
    ]


def test_constipation_detected_and_tip_matches(make_entry):
    entries = _entries(make_entry, [1, 2, 2, 4])

    result = detect_patterns(entries, now=NOW, rng=random.Random(7))

    assert [p["type"] for p in result["patterns"]] == ["consecutive_type_1_2"]
    assert result["patterns"][0]["confidence"] == 0.75
    assert result["recommendedTip"]["patternType"] == "consecutive_type_1_2"


def test_looseness_outranks_constipation(make_entry):
    entries = _entries(make_entry, [1, 2, 6, 7, 1])

    result = detect_patterns(entries, now=NOW, rng=FixedRandom(0.9))

    types = [p["type"] for p in result["patterns"]]
    assert types[:2] == ["consecutive_type_6_7", "consecutive_type_1_2"]
    assert result["recommendedTip"]["patternType"] == "consecutive_type_6_7"


def test_expected_pattern_is_pushed_down(make_entry):
    entries = _entries(make_entry, [1, 2, 6, 7, 1])
    profile = {"conditions": ["lactose-intolerant"]}

    result = detect_patterns(entries, profile=profile, now=NOW, rng=FixedRandom(0.9))

    first, second = result["patterns"][:2]
    assert first["type"] == "consecutive_type_1_2"
    assert second["type"] == "consecutive_type_6_7"
    assert second["isExpected"]
    assert ranking_key(second) == 51


def test_fiber_tips_filtered_for_sensitive_profiles(make_entry):
    effects = profile_effects({"conditions": ["ibd"]})
    assert effects["avoid_fiber_tips"]
    assert not is_tip_appropriate(tip_by_id("constipation_fiber"), effects)
    assert is_tip_appropriate(tip_by_id("constipation_hydration"), effects)

    entries = _entries(make_entry, [1, 1, 1, 1])
    for seed in range(20):
        tip = detect_patterns(
            entries, profile={"conditions": ["ibd"]}, now=NOW, rng=random.Random(seed)
        )["recommendedTip"]
        assert tip["id"] != "constipation_fiber"


def test_age_implies_slower_transit():
    effects = profile_effects({"ageRange": "60+", "conditions": []})
    assert effects["slower_transit"]
    assert effects["expect_constipation"]


def test_no_entries_pattern_after_three_quiet_days(make_entry):
    entries = [make_entry(4, NOW - timedelta(days=5))]

    result = detect_patterns(entries, now=NOW, rng=FixedRandom(0.9))

    assert result["patterns"][0]["type"] == "no_entries_days"
    assert result["patterns"][0]["confidence"] == 5 / 7
    assert result["recommendedTip"]["id"] == "no_entries_check"


def test_tag_correlation_uses_logged_tag_ids(make_entry):
    entries = _entries(make_entry, [6, 5, 7, 4], tags=["coffee"])

    result = detect_patterns(entries, now=NOW, rng=FixedRandom(0.9))

    assert "coffee_correlation" in [p["type"] for p in result["patterns"]]


def test_general_tip_is_a_random_branch(make_entry):
    entries = _entries(make_entry, [3, 5, 4])

    hit = detect_patterns(entries, now=NOW, rng=FixedRandom(0.1))
    miss = detect_patterns(entries, now=NOW, rng=FixedRandom(0.9))

    assert hit["patterns"] == []
    assert hit["recommendedTip"]["patternType"] == "general"
    assert miss["recommendedTip"] is None


def test_excluded_tips_are_never_recommended(make_entry):
    entries = _entries(make_entry, [1, 2, 2, 4])
    hard_tips = [t["id"] for t in WELLNESS_TIPS if t["patternType"] == "consecutive_type_1_2"]

    result = detect_patterns(
        entries, now=NOW, rng=FixedRandom(0.9), exclude=hard_tips[1:]
    )

    assert result["recommendedTip"]["id"] == hard_tips[0]


def test_detectors_need_enough_entries(make_entry):
    assert detect_constipation(_entries(make_entry, [1])) is None
    assert detect_patterns(_entries(make_entry, [1, 1]), now=NOW)["patterns"] == []
