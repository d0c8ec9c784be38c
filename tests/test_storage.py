from core import app_state, achievement_store, storage


def test_raw_and_json_access():
    assert storage.get_item("flushy_theme") is None
    assert storage.set_item("flushy_theme", "mono")
    assert storage.get_item("flushy_theme") == "mono"

    storage.save_json("flushy_user_profile", {"conditions": ["ibs"]})
    assert storage.load_json("flushy_user_profile") == {"conditions": ["ibs"]}


def test_malformed_json_is_treated_as_missing():
    storage.set_item("flushy_achievements", "{not json")
    assert storage.load_json("flushy_achievements", default={}) == {}
    assert achievement_store.load_achievement_state()["unlockedAchievements"] == []


def test_multi_set_writes_each_key():
    written = storage.multi_set([("flushy_theme", "dark"), ("flushy_onboarding_done", "true")])
    assert written == 2
    assert storage.multi_get(["flushy_theme", "flushy_last_backup"]) == {
        "flushy_theme": "dark",
        "flushy_last_backup": None,
    }


def test_reset_app_clears_everything():
    app_state.complete_onboarding()
    storage.set_item("flushy_theme", "nature")
    achievement_store.increment_insights_views(achievement_store.load_achievement_state())

    app_state.reset_app()

    assert not app_state.is_onboarded()
    assert storage.get_item("flushy_theme") is None
    assert achievement_store.load_achievement_state()["insightsViews"] == 0
