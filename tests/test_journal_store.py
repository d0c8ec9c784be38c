from datetime import datetime

import pytest

from core import journal_store, storage

NOW = datetime(2024, 6, 10, 14, 45)


def test_add_entry_validates_input():
    with pytest.raises(ValueError):
        journal_store.add_entry(8, now=NOW)
    with pytest.raises(ValueError):
        journal_store.add_entry(4, color="purple", now=NOW)
    with pytest.raises(ValueError):
        journal_store.add_entry(4, for_date="2024-06-11", now=NOW)
    with pytest.raises(ValueError):
        journal_store.add_entry(4, for_date="10/06/2024", now=NOW)
    with pytest.raises(ValueError):
        journal_store.add_entry(4, for_date="2024-06-01", for_time="25:00", now=NOW)

    assert journal_store.load_history() == []


@pytest.mark.parametrize("bristol_type", [4.0, True, "4", None])
def test_non_integer_types_are_rejected_up_front(bristol_type):
    with pytest.raises(ValueError):
        journal_store.add_entry(bristol_type, now=NOW)

    assert journal_store.load_history() == []


def test_saved_entry_survives_reload():
    journal_store.add_entry(4, now=NOW)
    journal_store.add_entry(7, now=NOW)

    days = journal_store.load_history()
    assert [e["type"] for e in days[0]["entries"]] == [4, 7]


def test_load_drops_boolean_types():
    storage.save_json(storage.STORAGE_KEYS["HISTORY"], [
        {"date": "2024-06-10", "entries": [
            {"id": "a", "type": True, "time": "09:00", "tags": [], "createdAt": 1},
            {"id": "b", "type": 3, "time": "10:00", "tags": [], "createdAt": 2},
        ]},
    ])

    days = journal_store.load_history()
    assert [e["id"] for e in days[0]["entries"]] == ["b"]


def test_today_uses_now_and_past_days_default_to_noon():
    today = journal_store.add_entry(4, tags=["coffee", "coffee", "water"], now=NOW)
    past = journal_store.add_entry(3, for_date="2024-06-01", now=NOW)
    timed = journal_store.add_entry(5, for_date="2024-06-01", for_time="07:15", now=NOW)

    assert today["time"] == "14:45"
    assert today["tags"] == ["coffee", "water"]
    assert past["time"] == "12:00"
    assert timed["time"] == "07:15"

    history = journal_store.load_history()
    assert [d["date"] for d in history] == ["2024-06-10", "2024-06-01"]
    assert len(history[1]["entries"]) == 2


def test_deleting_last_entry_drops_the_day():
    entry = journal_store.add_entry(4, now=NOW)

    assert not journal_store.delete_entry("2024-06-10", "missing")
    assert journal_store.delete_entry("2024-06-10", entry["id"])
    assert journal_store.load_history() == []


def test_load_heals_duplicate_and_broken_days():
    raw = [
        {"date": "2024-06-01", "entries": [
            {"id": "a", "type": 4, "time": "08:00", "tags": [], "createdAt": 1},
        ]},
        {"date": "2024-06-02", "entries": [
            {"id": "b", "type": 9, "time": "08:00", "tags": [], "createdAt": 2},
        ]},
        {"date": "2024-06-01", "entries": [
            {"id": "c", "type": 3, "time": "09:00", "tags": [], "createdAt": 3},
        ]},
        {"date": "not a date", "entries": []},
    ]
    storage.save_json(storage.STORAGE_KEYS["HISTORY"], raw)

    history = journal_store.load_history()

    assert [d["date"] for d in history] == ["2024-06-01"]
    assert [e["id"] for e in history[0]["entries"]] == ["a", "c"]
    assert storage.load_json(storage.STORAGE_KEYS["HISTORY"]) == history


def test_legacy_history_is_migrated_once():
    legacy = [{"date": "2024-06-01", "entries": [
        {"id": "a", "type": 4, "time": "08:00", "tags": [], "createdAt": 1},
    ]}]
    storage.save_json(storage.LEGACY_HISTORY_KEY, legacy)

    history = journal_store.load_history()

    assert history == legacy
    assert storage.get_item(storage.LEGACY_HISTORY_KEY) is None
    assert storage.load_json(storage.STORAGE_KEYS["HISTORY"]) == legacy


def test_malformed_history_falls_back_to_empty():
    storage.set_item(storage.STORAGE_KEYS["HISTORY"], "{broken json")
    assert journal_store.load_history() == []
