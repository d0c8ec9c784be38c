import random
from datetime import datetime, timedelta

import pytest

from core import profile_store, rating_store, settings_store


def test_profile_none_is_exclusive():
    assert profile_store.normalize_conditions(["none", "ibs"]) == ["ibs"]
    assert profile_store.normalize_conditions(["none", "none"]) == ["none"]
    assert profile_store.normalize_conditions(["made-up"]) == []


def test_save_profile_rejects_unknown_values():
    with pytest.raises(ValueError):
        profile_store.save_profile({"ageRange": "ancient", "conditions": []})
    with pytest.raises(ValueError):
        profile_store.save_profile({"conditions": ["flu"]})

    saved = profile_store.save_profile({"ageRange": "31-45", "conditions": ["thyroid"]})
    assert profile_store.load_profile() == saved
    assert profile_store.condition_notes(saved)


def test_theme():
    assert settings_store.get_theme() == settings_store.DEFAULT_THEME
    settings_store.set_theme("blush")
    assert settings_store.get_theme() == "blush"
    with pytest.raises(ValueError):
        settings_store.set_theme("neon")


def test_enabling_reminders_replaces_the_schedule():
    now = datetime(2024, 6, 10, 22, 0)

    settings_store.save_reminder_settings(True, 21, 0, rng=random.Random(1), now=now)
    first = settings_store.scheduled_reminder()
    assert first["message"] in settings_store.REMINDER_MESSAGES
    assert settings_store.next_reminder_at(now) == datetime(2024, 6, 11, 21, 0)

    settings_store.save_reminder_settings(True, 7, 30, now=now)
    assert settings_store.scheduled_reminder()["hour"] == 7
    assert settings_store.load_reminder_settings() == {"enabled": True, "hour": 7, "minute": 30}

    settings_store.save_reminder_settings(False, 7, 30)
    assert settings_store.scheduled_reminder() is None
    assert settings_store.next_reminder_at(now) is None

    with pytest.raises(ValueError):
        settings_store.save_reminder_settings(True, 24, 0)


def test_rating_prompt_rules():
    start = datetime(2024, 6, 1, 9, 0)
    data = rating_store.load_rating_data(now=start)
    for _ in range(5):
        data = rating_store.increment_entry_count(now=start)

    assert not rating_store.should_request_rating(data, now=start + timedelta(days=2))
    assert rating_store.should_request_rating(data, now=start + timedelta(days=3))

    asked = start + timedelta(days=3)
    data = rating_store.mark_rating_requested(now=asked)
    assert not rating_store.should_request_rating(data, now=asked + timedelta(days=89))
    assert rating_store.should_request_rating(data, now=asked + timedelta(days=90))


def test_reminder_is_due_after_its_time_until_something_is_logged():
    morning = datetime(2024, 6, 10, 8, 0)
    assert settings_store.reminder_due(0, now=morning) is None

    settings_store.save_reminder_settings(True, 20, 30, rng=random.Random(3), now=morning)
    message = settings_store.scheduled_reminder()["message"]

    assert settings_store.reminder_due(0, now=datetime(2024, 6, 10, 20, 29)) is None
    assert settings_store.reminder_due(0, now=datetime(2024, 6, 10, 20, 30)) == message
    assert settings_store.reminder_due(0, now=datetime(2024, 6, 10, 23, 0)) in settings_store.REMINDER_MESSAGES
    assert settings_store.reminder_due(1, now=datetime(2024, 6, 10, 23, 0)) is None

    settings_store.save_reminder_settings(False, 20, 30)
    assert settings_store.reminder_due(0, now=datetime(2024, 6, 10, 23, 0)) is None
