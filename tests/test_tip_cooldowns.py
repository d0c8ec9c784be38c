import random
from datetime import datetime, timedelta

from core import storage, tip_store

T = datetime(2024, 6, 10, 9, 0)


def _hard_entries(make_entry, count=4):
    return [
        make_entry(1, T - timedelta(hours=count - i))
        for i in range(count)
    ]


def test_no_tips_before_three_entries(make_entry):
    state = tip_store.load_tip_state()
    assert not tip_store.can_show_tip(state, 2, now=T)
    assert tip_store.select_tip(_hard_entries(make_entry, 2), now=T) is None


def test_same_tip_cools_down_but_another_is_eligible(make_entry):
    entries = _hard_entries(make_entry)

    first = tip_store.select_tip(entries, now=T, rng=random.Random(1))
    assert first is not None

    # global cooldown
    assert tip_store.select_tip(entries, now=T + timedelta(hours=23), rng=random.Random(1)) is None

    later = T + timedelta(hours=25)
    second = tip_store.select_tip(entries, now=later, rng=random.Random(1))
    assert second is not None
    assert second["id"] != first["id"]
    assert second["patternType"] == first["patternType"]

    state = tip_store.load_tip_state()
    assert state["lastShownTimestamp"] == state["shownTips"][second["id"]]
    assert first["id"] in tip_store.cooling_down(state, now=T + timedelta(days=6))
    assert first["id"] not in tip_store.cooling_down(state, now=T + timedelta(days=7, hours=1))


def test_snooze_silences_everything(make_entry):
    entries = _hard_entries(make_entry)
    tip_store.snooze_tips(now=T)

    assert tip_store.select_tip(entries, now=T + timedelta(hours=11)) is None
    assert tip_store.select_tip(entries, now=T + timedelta(hours=13)) is not None


def test_dismiss_and_feedback():
    tip_store.dismiss_tip("general_water", now=T)
    state = tip_store.load_tip_state()
    assert "general_water" in tip_store.cooling_down(state, now=T + timedelta(days=2))
    assert "general_water" not in tip_store.cooling_down(state, now=T + timedelta(days=3, hours=1))

    tip_store.mark_helpful("general_fiber", True, now=T)
    tip_store.mark_helpful("general_sleep", False, now=T)
    state = tip_store.load_tip_state()
    assert state["helpfulCount"] == 1
    assert state["notHelpfulCount"] == 1
    assert "general_fiber" in state["dismissedTips"]


def test_reset_restores_defaults(make_entry):
    tip_store.select_tip(_hard_entries(make_entry), now=T)
    tip_store.reset_tip_state()

    state = tip_store.load_tip_state()
    assert state["shownTips"] == {}
    assert state["lastShownTimestamp"] == 0


def test_corrupt_state_falls_back_per_field(make_entry):
    storage.save_json(storage.STORAGE_KEYS["WELLNESS_TIPS"], {
        "lastShownTimestamp": None,
        "shownTips": None,
        "dismissedTips": {"general_water": "yesterday", "general_fiber": 5},
        "snoozedUntil": "soon",
        "helpfulCount": -2,
        "notHelpfulCount": True,
    })

    state = tip_store.load_tip_state()
    assert state["lastShownTimestamp"] == 0
    assert state["shownTips"] == {}
    assert state["dismissedTips"] == {"general_fiber": 5}
    assert state["snoozedUntil"] is None
    assert state["helpfulCount"] == 0
    assert state["notHelpfulCount"] == 0

    assert tip_store.cooling_down(state, now=T) == []
    assert tip_store.select_tip(_hard_entries(make_entry), now=T) is not None


def test_next_tip_keeps_the_current_one_and_refills_after_cooldown(make_entry):
    entries = _hard_entries(make_entry)

    shown = tip_store.next_tip(None, entries, now=T, rng=random.Random(1))
    assert shown is not None
    assert tip_store.next_tip(shown, entries, now=T + timedelta(hours=1)) is shown

    # dismissed on screen; the global cooldown still holds
    assert tip_store.next_tip(None, entries, now=T + timedelta(hours=1)) is None

    later = tip_store.next_tip(None, entries, now=T + timedelta(hours=25), rng=random.Random(1))
    assert later is not None
