# core/backup.py
"""
Backup / restore of the user's data keys.

File format:
  {version, createdAt (ISO-8601), appVersion, data: {key: raw string | null}}

Restore never touches storage unless the whole file checks out.
"""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

from core import storage
from utils.dates import parse_day

logger = logging.getLogger(__name__)

# ==================================================
# CONSTANTS
# ==================================================
BACKUP_DIR = Path("data/backups")
BACKUP_VERSION = 1
APP_VERSION = "1.0.0"

# user data only, not UI state
BACKUP_KEYS = [
    storage.STORAGE_KEYS["HISTORY"],
    storage.STORAGE_KEYS["USER_PROFILE"],
    storage.STORAGE_KEYS["ACHIEVEMENTS"],
    storage.STORAGE_KEYS["THEME"],
]

REMINDER_AFTER_DAYS = 30
MIN_DAYS_BEFORE_FIRST_REMINDER = 7


def _result(success: bool, message: str) -> Dict[str, Any]:
    return {"success": success, "message": message}


# ==================================================
# CREATE
# ==================================================
def build_backup(now: datetime = None) -> Dict[str, Any]:
    now = now or datetime.now()
    return {
        "version": BACKUP_VERSION,
        "createdAt": now.isoformat(),
        "appVersion": APP_VERSION,
        "data": storage.multi_get(BACKUP_KEYS),
    }


def create_backup(now: datetime = None) -> Path:
    """Write a backup file and remember when it happened."""
    now = now or datetime.now()
    backup = build_backup(now)

    BACKUP_DIR.mkdir(parents=True, exist_ok=True)
    path = BACKUP_DIR / f"flushy-backup-{now.date().isoformat()}.json"
    path.write_text(json.dumps(backup, indent=2), encoding="utf-8")

    storage.set_item(storage.STORAGE_KEYS["LAST_BACKUP"], now.isoformat())
    logger.info("Backup written to %s", path)
    return path


# ==================================================
# RESTORE
# ==================================================
def restore_backup(content: Optional[str]) -> Dict[str, Any]:
    """
    content is the uploaded file text, or None when nothing was picked.
    Returns {"success": bool, "message": str}.
    """
    if content is None:
        return _result(False, "No file selected.")

    try:
        backup = json.loads(content)
    except ValueError:
        return _result(False, "Invalid backup file. The file is not valid JSON.")

    if (
        not isinstance(backup, dict)
        or not backup.get("version")
        or not isinstance(backup.get("data"), dict)
    ):
        return _result(False, "Invalid backup file. Missing required fields.")

    try:
        version = int(backup["version"])
    except (TypeError, ValueError):
        return _result(False, "Invalid backup file. Missing required fields.")

    if version > BACKUP_VERSION:
        logger.warning("Rejected backup with version %s", version)
        return _result(
            False,
            "This backup was created with a newer version of Flushy. "
            "Please update the app first.",
        )

    pairs = []
    for key, value in backup["data"].items():
        if value is None:
            continue
        if key not in storage.ALL_STORAGE_KEYS or not isinstance(value, str):
            logger.warning("Skipping unexpected backup key %s", key)
            continue
        pairs.append((key, value))

    if not pairs:
        return _result(False, "The backup file is empty.")

    written = storage.multi_set(pairs)
    if written < len(pairs):
        return _result(False, "Failed to restore backup. Please try again.")

    created = str(backup.get("createdAt") or "").split("T")[0] or "unknown date"
    logger.info("Restored %s keys from backup", written)
    return _result(True, f"Restored {written} items from backup ({created}).")


# ==================================================
# REMINDER
# ==================================================
def last_backup_date() -> Optional[str]:
    return storage.get_item(storage.STORAGE_KEYS["LAST_BACKUP"])


def should_show_backup_reminder(now: datetime = None) -> bool:
    """
    Never backed up: remind once there are 7+ days of history.
    Otherwise remind 30 days after the last backup.
    """
    now = now or datetime.now()
    last = last_backup_date()

    if not last:
        history = storage.load_json(storage.STORAGE_KEYS["HISTORY"])
        return isinstance(history, list) and len(history) >= MIN_DAYS_BEFORE_FIRST_REMINDER

    try:
        last_dt = datetime.fromisoformat(last)
    except ValueError:
        d = parse_day(last)
        if d is None:
            return True
        last_dt = datetime.combine(d, datetime.min.time())

    return (now - last_dt).total_seconds() / 86400 >= REMINDER_AFTER_DAYS
