# core/storage.py
"""
Local key-value storage for Flushy

- One JSON file per storage key under STORAGE_DIR
- Values are raw strings (what a backup file carries)
- Every key is written on its own, atomically
- I/O failures are logged and never raised
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple

logger = logging.getLogger(__name__)

# ==================================================
# PATHS
# ==================================================
STORAGE_DIR = Path("data")

# ==================================================
# KEYS
# ==================================================
STORAGE_KEYS = {
    "HISTORY": "flushy_history",
    "USER_PROFILE": "flushy_user_profile",
    "THEME": "flushy_theme",
    "WELLNESS_TIPS": "flushy_wellness_tips",
    "ONBOARDING": "flushy_onboarding_done",
    "APP_RATING": "flushy_app_rating",
    "WEEKLY_DIGEST": "flushy_weekly_digest",
    "ACHIEVEMENTS": "flushy_achievements",
    "LAST_BACKUP": "flushy_last_backup",
    "NOTIFICATION_SETTINGS": "flushy_notification_settings",
}

ALL_STORAGE_KEYS = list(STORAGE_KEYS.values())

# history written by builds released under the old name
LEGACY_HISTORY_KEY = "plop_history"


# ==================================================
# INTERNAL HELPERS
# ==================================================
def _path_for(key: str) -> Path:
    return STORAGE_DIR / f"{key}.json"


def _ensure_dir():
    STORAGE_DIR.mkdir(parents=True, exist_ok=True)


def _atomic_write(path: Path, raw: str):
    tmp = path.with_suffix(".tmp")
    with open(tmp, "w", encoding="utf-8") as f:
        f.write(raw)
    tmp.replace(path)


# ==================================================
# RAW ACCESS
# ==================================================
def get_item(key: str) -> Optional[str]:
    path = _path_for(key)
    if not path.exists():
        return None

    try:
        return path.read_text(encoding="utf-8")
    except OSError:
        logger.exception("Failed to read storage key %s", key)
        return None


def set_item(key: str, raw: str) -> bool:
    try:
        _ensure_dir()
        _atomic_write(_path_for(key), raw)
        return True
    except OSError:
        logger.exception("Failed to write storage key %s", key)
        return False


def remove_item(key: str) -> bool:
    try:
        _path_for(key).unlink(missing_ok=True)
        return True
    except OSError:
        logger.exception("Failed to remove storage key %s", key)
        return False


def multi_get(keys: Iterable[str]) -> Dict[str, Optional[str]]:
    return {k: get_item(k) for k in keys}


def multi_set(pairs: List[Tuple[str, str]]) -> int:
    """
    Write each pair independently.
    Returns how many keys were actually written.
    """
    written = 0
    for key, raw in pairs:
        if set_item(key, raw):
            written += 1
    return written


def clear_all() -> None:
    for key in ALL_STORAGE_KEYS + [LEGACY_HISTORY_KEY]:
        remove_item(key)


# ==================================================
# JSON ACCESS
# ==================================================
def load_json(key: str, default: Any = None) -> Any:
    """
    Parsed value for key, or default when the key is
    missing or holds malformed JSON.
    """
    raw = get_item(key)
    if raw is None:
        return default

    try:
        return json.loads(raw)
    except ValueError:
        logger.warning("Malformed JSON under %s, using defaults", key)
        return default


def save_json(key: str, value: Any) -> bool:
    return set_item(key, json.dumps(value, indent=2, default=str))
