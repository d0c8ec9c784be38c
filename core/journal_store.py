# core/journal_store.py
"""
Journal store for Flushy

- One DayRecord per calendar date
- Entries are immutable once logged (delete only)
- Empty days are dropped, never stored
"""

import logging
import uuid
from datetime import date, datetime, time
from typing import Any, Dict, List, Optional

from core import storage
from utils.dates import parse_day, to_millis

logger = logging.getLogger(__name__)

# ==================================================
# CONSTANTS (SCHEMA)
# ==================================================
BRISTOL_TYPES = {
    1: {"name": "Separate lumps", "desc": "Hard to pass", "health": "constipated"},
    2: {"name": "Lumpy sausage", "desc": "Slightly hard", "health": "constipated"},
    3: {"name": "Cracked sausage", "desc": "Normal", "health": "healthy"},
    4: {"name": "Smooth snake", "desc": "Ideal", "health": "healthy"},
    5: {"name": "Soft blobs", "desc": "Soft pieces", "health": "warning"},
    6: {"name": "Mushy", "desc": "Mild diarrhea", "health": "warning"},
    7: {"name": "Liquid", "desc": "Diarrhea", "health": "alert"},
}

STOOL_COLORS = {
    "brown": {"name": "Brown", "hex": "#8B4513", "health": "normal"},
    "dark-brown": {"name": "Dark Brown", "hex": "#4A2C0A", "health": "normal"},
    "light-brown": {"name": "Light Brown", "hex": "#C4A265", "health": "normal"},
    "green": {"name": "Green", "hex": "#3A7D44", "health": "attention"},
    "yellow": {"name": "Yellow", "hex": "#D4A017", "health": "attention"},
    "black": {"name": "Black", "hex": "#1C1C1C", "health": "alert"},
    "red": {"name": "Red", "hex": "#B22222", "health": "alert"},
    "white-pale": {"name": "White / Pale", "hex": "#D3CBC2", "health": "alert"},
}

QUICK_TAGS = {
    "coffee": "Coffee",
    "spicy": "Spicy food",
    "alcohol": "Alcohol",
    "fiber": "High fiber",
    "water": "Hydrated",
    "stress": "Stressed",
    "meds": "Medication",
    "travel": "Traveling",
    "period": "Period",
    "dairy": "Dairy",
    "exercise": "Exercise",
}

HEALTH_COLORS = {
    "healthy": "#4ADE80",
    "warning": "#FBBF24",
    "alert": "#F87171",
    "constipated": "#A78BFA",
}


def bristol_health(bristol_type: int) -> Optional[str]:
    info = BRISTOL_TYPES.get(bristol_type)
    return info["health"] if info else None


# ==================================================
# INTERNAL HELPERS
# ==================================================
def _safe_default() -> List[Dict[str, Any]]:
    return []


def _new_id() -> str:
    return uuid.uuid4().hex[:12]


def _valid_time(t: Any) -> bool:
    if not isinstance(t, str):
        return False
    try:
        datetime.strptime(t, "%H:%M")
        return True
    except ValueError:
        return False


def _valid_type(t: Any) -> bool:
    # bool is an int and 4.0 hashes like 4; neither is a Bristol type
    return isinstance(t, int) and not isinstance(t, bool) and t in BRISTOL_TYPES


def _validate_entry(e: Any) -> Optional[Dict[str, Any]]:
    if not isinstance(e, dict):
        return None

    bristol_type = e.get("type")
    if not _valid_type(bristol_type):
        return None

    if not _valid_time(e.get("time")):
        return None

    created_at = e.get("createdAt")
    if not isinstance(created_at, (int, float)):
        return None

    color = e.get("color")
    if color not in STOOL_COLORS:
        color = None

    tags = e.get("tags") or []
    if not isinstance(tags, list):
        tags = []

    entry = {
        "id": str(e.get("id") or _new_id()),
        "type": bristol_type,
        "time": e["time"],
        "tags": list(dict.fromkeys(str(t) for t in tags)),
        "createdAt": int(created_at),
    }
    if color:
        entry["color"] = color
    if e.get("notes"):
        entry["notes"] = str(e["notes"])
    return entry


def _normalize(raw: Any) -> List[Dict[str, Any]]:
    """
    Validate, merge duplicate dates, drop empty days,
    sort newest date first.
    """
    if not isinstance(raw, list):
        return _safe_default()

    days: Dict[str, List[Dict[str, Any]]] = {}
    for day in raw:
        if not isinstance(day, dict):
            continue

        d = parse_day(day.get("date", ""))
        if not d:
            continue

        entries = [
            v for v in (_validate_entry(e) for e in day.get("entries") or [])
            if v
        ]
        days.setdefault(d.isoformat(), []).extend(entries)

    return sorted(
        (
            {"date": d, "entries": entries}
            for d, entries in days.items()
            if entries
        ),
        key=lambda x: x["date"],
        reverse=True,
    )


# ==================================================
# LOAD / SAVE (VALIDATED)
# ==================================================
def _migrate_legacy() -> Optional[Any]:
    legacy = storage.load_json(storage.LEGACY_HISTORY_KEY)
    if legacy is None:
        return None

    logger.info("Migrating journal history from legacy key")
    storage.save_json(storage.STORAGE_KEYS["HISTORY"], legacy)
    storage.remove_item(storage.LEGACY_HISTORY_KEY)
    return legacy


def load_history() -> List[Dict[str, Any]]:
    raw = storage.load_json(storage.STORAGE_KEYS["HISTORY"])

    if raw is None:
        raw = _migrate_legacy()

    if raw is None:
        return _safe_default()

    history = _normalize(raw)
    if history != raw:
        logger.info("Journal history auto-healed on load")
        save_history(history)
    return history


def save_history(history: List[Dict[str, Any]]) -> bool:
    return storage.save_json(storage.STORAGE_KEYS["HISTORY"], history)


# ==================================================
# ENTRY OPERATIONS
# ==================================================
def get_day(history: List[Dict[str, Any]], date_str: str) -> Optional[Dict[str, Any]]:
    for day in history:
        if day.get("date") == date_str:
            return day
    return None


def add_entry(
    bristol_type: int,
    tags: List[str] = None,
    notes: str = None,
    color: str = None,
    for_date: str = None,
    for_time: str = None,
    now: datetime = None,
) -> Dict[str, Any]:
    """
    Log one bowel movement.
    Today's entries use the current time; past dates use
    for_time (HH:MM) or fall back to noon.
    """
    if not _valid_type(bristol_type):
        raise ValueError("Bristol type must be a whole number between 1 and 7")

    if color is not None and color not in STOOL_COLORS:
        raise ValueError(f"Unknown stool color: {color}")

    now = now or datetime.now()
    target = parse_day(for_date) if for_date else now.date()
    if target is None:
        raise ValueError("Date must be YYYY-MM-DD")
    if target > now.date():
        raise ValueError("Cannot log entries in the future")

    if target == now.date():
        moment = now
    elif for_time:
        if not _valid_time(for_time):
            raise ValueError("Time must be HH:MM")
        moment = datetime.combine(target, datetime.strptime(for_time, "%H:%M").time())
    else:
        moment = datetime.combine(target, time(12, 0))

    entry = {
        "id": _new_id(),
        "type": bristol_type,
        "time": moment.strftime("%H:%M"),
        "tags": list(dict.fromkeys(tags or [])),
        "createdAt": to_millis(moment),
    }
    if color:
        entry["color"] = color
    if notes and notes.strip():
        entry["notes"] = notes.strip()

    history = load_history()
    date_key = target.isoformat()

    day = get_day(history, date_key)
    if day:
        day["entries"].append(entry)
    else:
        history.append({"date": date_key, "entries": [entry]})

    history.sort(key=lambda x: x["date"], reverse=True)
    save_history(history)
    logger.info("Logged type %s entry for %s", bristol_type, date_key)
    return entry


def delete_entry(date_str: str, entry_id: str) -> bool:
    """
    Remove one entry; the day goes with its last entry.
    Returns False when nothing matched.
    """
    history = load_history()
    day = get_day(history, date_str)
    if not day:
        return False

    before = len(day["entries"])
    day["entries"] = [e for e in day["entries"] if e["id"] != entry_id]
    if len(day["entries"]) == before:
        return False

    history = [d for d in history if d["entries"]]
    save_history(history)
    logger.info("Deleted entry %s from %s", entry_id, date_str)
    return True


def today_entries(history: List[Dict[str, Any]], today: date = None) -> List[Dict[str, Any]]:
    day = get_day(history, (today or date.today()).isoformat())
    if not day:
        return []
    return sorted(day["entries"], key=lambda e: e["createdAt"])
