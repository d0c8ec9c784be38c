# core/digest_store.py

import logging
from datetime import date, datetime
from typing import Any, Dict

from core import storage
from utils.dates import current_week_start, to_millis

logger = logging.getLogger(__name__)


# ---------------------------
# Internal helpers
# ---------------------------
def _safe_default() -> Dict[str, Any]:
    return {"lastSeenTimestamp": None, "lastSeenWeekStart": None}


def _load() -> Dict[str, Any]:
    data = storage.load_json(storage.STORAGE_KEYS["WEEKLY_DIGEST"])
    state = _safe_default()
    if isinstance(data, dict):
        state.update({k: v for k, v in data.items() if k in state})
    return state


# ---------------------------
# Public API
# ---------------------------
def should_show_digest(today: date = None) -> bool:
    """Mondays only, once per week."""
    today = today or date.today()
    if today.weekday() != 0:
        return False

    return _load()["lastSeenWeekStart"] != current_week_start(today).isoformat()


def dismiss_digest(now: datetime = None) -> Dict[str, Any]:
    now = now or datetime.now()
    state = {
        "lastSeenTimestamp": to_millis(now),
        "lastSeenWeekStart": current_week_start(now.date()).isoformat(),
    }
    storage.save_json(storage.STORAGE_KEYS["WEEKLY_DIGEST"], state)
    return state


def reset_digest_state() -> None:
    storage.remove_item(storage.STORAGE_KEYS["WEEKLY_DIGEST"])
    logger.info("Digest state reset")
