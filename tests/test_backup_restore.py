import json
from datetime import datetime, timedelta

from core import backup, storage

HISTORY_KEY = storage.STORAGE_KEYS["HISTORY"]
THEME_KEY = storage.STORAGE_KEYS["THEME"]


def _backup_text(version=1, data=None, created_at="2024-06-01T10:00:00"):
    return json.dumps({
        "version": version,
        "createdAt": created_at,
        "appVersion": "1.0.0",
        "data": data if data is not None else {HISTORY_KEY: "[]"},
    })


def test_newer_backup_is_rejected_without_touching_storage():
    storage.set_item(HISTORY_KEY, '[{"date": "2024-06-01", "entries": []}]')
    before = storage.multi_get(storage.ALL_STORAGE_KEYS)

    result = backup.restore_backup(_backup_text(
        version=backup.BACKUP_VERSION + 1,
        data={HISTORY_KEY: "[]", THEME_KEY: "light"},
    ))

    assert result["success"] is False
    assert "update the app" in result["message"]
    assert storage.multi_get(storage.ALL_STORAGE_KEYS) == before


def test_invalid_inputs():
    assert backup.restore_backup(None) == {"success": False, "message": "No file selected."}
    assert "not valid JSON" in backup.restore_backup("{oops")["message"]
    assert "Missing required fields" in backup.restore_backup('{"version": 1}')["message"]
    assert "Missing required fields" in backup.restore_backup('[1, 2]')["message"]

    empty = backup.restore_backup(_backup_text(data={HISTORY_KEY: None}))
    assert empty == {"success": False, "message": "The backup file is empty."}


def test_restore_writes_known_keys_and_reports_count():
    result = backup.restore_backup(_backup_text(data={
        HISTORY_KEY: "[]",
        THEME_KEY: "nature",
        storage.STORAGE_KEYS["USER_PROFILE"]: None,
        "../../etc/passwd": "nope",
    }))

    assert result["success"] is True
    assert result["message"] == "Restored 2 items from backup (2024-06-01)."
    assert storage.get_item(THEME_KEY) == "nature"


def test_create_backup_round_trips(isolated_storage):
    storage.set_item(HISTORY_KEY, "[]")
    storage.set_item(THEME_KEY, "blush")
    now = datetime(2024, 6, 10, 12, 0)

    path = backup.create_backup(now=now)

    saved = json.loads(path.read_text())
    assert saved["version"] == backup.BACKUP_VERSION
    assert saved["data"][THEME_KEY] == "blush"
    assert saved["data"][storage.STORAGE_KEYS["USER_PROFILE"]] is None
    assert backup.last_backup_date() == now.isoformat()

    storage.clear_all()
    result = backup.restore_backup(path.read_text())
    assert result["success"]
    assert storage.get_item(THEME_KEY) == "blush"


def test_backup_reminder():
    now = datetime(2024, 6, 10, 12, 0)
    assert not backup.should_show_backup_reminder(now)

    week = [{"date": f"2024-06-0{i}", "entries": []} for i in range(1, 8)]
    storage.save_json(HISTORY_KEY, week)
    assert backup.should_show_backup_reminder(now)

    storage.set_item(storage.STORAGE_KEYS["LAST_BACKUP"], (now - timedelta(days=10)).isoformat())
    assert not backup.should_show_backup_reminder(now)
    assert backup.should_show_backup_reminder(now + timedelta(days=21))
