from datetime import date, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, List, Optional

from core.journal_store import BRISTOL_TYPES, QUICK_TAGS, STOOL_COLORS
from core.streaks import all_entries, consecutive_days_with_logs
from utils.dates import parse_day

MIN_ENTRIES_FOR_SCORE = 3


def round_half_up(value: float, digits: int = 0) -> float:
    """
    Round like a person would: 2.25 → 2.3, 3.5 → 4.
    Python's round() is banker's rounding.
    """
    q = Decimal(1).scaleb(-digits)
    rounded = Decimal(str(value)).quantize(q, rounding=ROUND_HALF_UP)
    return float(rounded) if digits else int(rounded)


def average_type(entries: List[Dict[str, Any]]) -> Optional[float]:
    if not entries:
        return None
    return round_half_up(sum(e["type"] for e in entries) / len(entries), 1)


def entries_between(history: List[Dict[str, Any]], start: date, end: date) -> List[Dict[str, Any]]:
    found = []
    for day in history:
        d = parse_day(day.get("date", ""))
        if d and start <= d <= end:
            found.extend(day.get("entries") or [])
    return found


def gut_health_score(entries: List[Dict[str, Any]]) -> Optional[int]:
    """
    0-100, only an average of exactly type 4 scores 100.
    Distance from 4: 0→100, 1→70, 2→40, 3→10.
    None below MIN_ENTRIES_FOR_SCORE entries.
    """
    if len(entries) < MIN_ENTRIES_FOR_SCORE:
        return None

    distance = abs(average_type(entries) - 4)
    return max(0, min(100, round_half_up(100 - distance * 30)))


def calculate_stats(history: List[Dict[str, Any]], today: date = None) -> Dict[str, Any]:
    today = today or date.today()
    week = entries_between(history, today - timedelta(days=7), today)

    return {
        "streak": consecutive_days_with_logs(history, today=today),
        "weekCount": len(week),
        "avgType": average_type(week),
        "healthScore": gut_health_score(week),
    }


# ==================================================
# DISTRIBUTIONS
# ==================================================
def type_distribution(history: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    entries = all_entries(history)
    return [
        {
            "type": t,
            "name": info["name"],
            "health": info["health"],
            "count": sum(1 for e in entries if e["type"] == t),
        }
        for t, info in BRISTOL_TYPES.items()
    ]


def color_distribution(history: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    entries = all_entries(history)
    rows = [
        {
            "id": cid,
            "name": info["name"],
            "hex": info["hex"],
            "health": info["health"],
            "count": sum(1 for e in entries if e.get("color") == cid),
        }
        for cid, info in STOOL_COLORS.items()
    ]
    return sorted((r for r in rows if r["count"] > 0), key=lambda r: r["count"], reverse=True)


def tag_correlations(history: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Per quick tag: how often it was used and the average type alongside it."""
    entries = all_entries(history)

    rows = []
    for tag_id, label in QUICK_TAGS.items():
        tagged = [e for e in entries if tag_id in (e.get("tags") or [])]
        if not tagged:
            continue
        rows.append({
            "id": tag_id,
            "label": label,
            "count": len(tagged),
            "avgType": average_type(tagged),
        })

    return sorted(rows, key=lambda r: r["count"], reverse=True)
