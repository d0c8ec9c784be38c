# core/rating_store.py
"""App rating prompt bookkeeping."""

import logging
from datetime import datetime
from typing import Any, Dict

from core import storage

logger = logging.getLogger(__name__)

MIN_DAYS_BEFORE_PROMPT = 3
MIN_ENTRIES_BEFORE_PROMPT = 5
# once asked, wait this long before asking again
DAYS_BETWEEN_PROMPTS = 90


def _safe_default(now: datetime = None) -> Dict[str, Any]:
    return {
        "firstOpenDate": (now or datetime.now()).isoformat(),
        "hasRequestedRating": False,
        "lastRequestDate": None,
        "entryCount": 0,
    }


def _days_since(iso: str, now: datetime) -> int:
    try:
        return (now - datetime.fromisoformat(iso)).days
    except (TypeError, ValueError):
        return 0


def load_rating_data(now: datetime = None) -> Dict[str, Any]:
    """First call records the first-open date."""
    data = storage.load_json(storage.STORAGE_KEYS["APP_RATING"])
    if not isinstance(data, dict) or not data.get("firstOpenDate"):
        return save_rating_data(_safe_default(now))

    state = _safe_default(now)
    state.update({k: v for k, v in data.items() if k in state})
    return state


def save_rating_data(data: Dict[str, Any]) -> Dict[str, Any]:
    storage.save_json(storage.STORAGE_KEYS["APP_RATING"], data)
    return data


def increment_entry_count(now: datetime = None) -> Dict[str, Any]:
    data = load_rating_data(now)
    return save_rating_data({**data, "entryCount": data["entryCount"] + 1})


def should_request_rating(data: Dict[str, Any], now: datetime = None) -> bool:
    now = now or datetime.now()

    if _days_since(data["firstOpenDate"], now) < MIN_DAYS_BEFORE_PROMPT:
        return False
    if data["entryCount"] < MIN_ENTRIES_BEFORE_PROMPT:
        return False

    if data["hasRequestedRating"]:
        if not data.get("lastRequestDate"):
            return False
        return _days_since(data["lastRequestDate"], now) >= DAYS_BETWEEN_PROMPTS

    return True


def mark_rating_requested(now: datetime = None) -> Dict[str, Any]:
    now = now or datetime.now()
    data = load_rating_data(now)
    logger.info("Rating prompt shown")
    return save_rating_data({
        **data,
        "hasRequestedRating": True,
        "lastRequestDate": now.isoformat(),
    })


def reset_rating_data() -> None:
    storage.remove_item(storage.STORAGE_KEYS["APP_RATING"])
