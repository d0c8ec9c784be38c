import uuid
from datetime import datetime

import pytest

from core import backup, report_exporter, settings_store, storage
from utils.dates import to_millis


@pytest.fixture(autouse=True)
def isolated_storage(tmp_path, monkeypatch):
    """Every test gets its own empty data directory."""
    monkeypatch.setattr(storage, "STORAGE_DIR", tmp_path / "data")
    monkeypatch.setattr(backup, "BACKUP_DIR", tmp_path / "backups")
    monkeypatch.setattr(report_exporter, "EXPORT_DIR", tmp_path / "exports")
    settings_store.cancel_all()
    return tmp_path


@pytest.fixture
def make_entry():
    def _make(bristol_type: int, when: datetime, tags=None, color=None, notes=None):
        entry = {
            "id": uuid.uuid4().hex[:12],
            "type": bristol_type,
            "time": when.strftime("%H:%M"),
            "tags": list(tags or []),
            "createdAt": to_millis(when),
        }
        if color:
            entry["color"] = color
        if notes:
            entry["notes"] = notes
        return entry

    return _make


@pytest.fixture
def make_history(make_entry):
    """
    Build DayRecords from (datetime, type) or (datetime, type, tags) tuples,
    newest date first like the journal store keeps them.
    """
    def _build(*logs):
        days = {}
        for log in logs:
            when, bristol_type = log[0], log[1]
            tags = log[2] if len(log) > 2 else None
            days.setdefault(when.date().isoformat(), []).append(
                make_entry(bristol_type, when, tags=tags)
            )
        return [
            {"date": d, "entries": days[d]}
            for d in sorted(days, reverse=True)
        ]

    return _build
