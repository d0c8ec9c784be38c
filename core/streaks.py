# core/streaks.py
"""
Streak and window helpers over journal history.

Pure functions. History is a list of DayRecords
({date, entries}) in any order.
"""

from datetime import date, timedelta
from typing import Any, Callable, Dict, List

from utils.dates import parse_day

DayPredicate = Callable[[List[Dict[str, Any]]], bool]


# ==================================================
# INTERNAL HELPERS
# ==================================================
def _days_by_date(history: List[Dict[str, Any]]) -> Dict[date, List[Dict[str, Any]]]:
    days = {}
    for day in history:
        d = parse_day(day.get("date", ""))
        if d:
            days.setdefault(d, []).extend(day.get("entries") or [])
    return days


def _anchor(days: Dict[date, List[Dict[str, Any]]], today: date) -> date:
    """Today if it has entries, else yesterday."""
    if days.get(today):
        return today
    return today - timedelta(days=1)


# ==================================================
# STREAKS
# ==================================================
def consecutive_days_with_logs(history: List[Dict[str, Any]], today: date = None) -> int:
    """
    Consecutive calendar days with at least one entry,
    counted back from today (or yesterday while today is empty).
    """
    return current_streak_with_condition(history, lambda entries: True, today=today)


def current_streak_with_condition(
    history: List[Dict[str, Any]],
    predicate: DayPredicate,
    today: date = None,
) -> int:
    days = _days_by_date(history)
    if not days:
        return 0

    cursor = _anchor(days, today or date.today())
    streak = 0

    while days.get(cursor) and predicate(days[cursor]):
        streak += 1
        cursor -= timedelta(days=1)

    return streak


def consecutive_days_with_condition(
    history: List[Dict[str, Any]],
    required_days: int,
    predicate: DayPredicate,
) -> bool:
    """
    True if any run of `required_days` calendar-consecutive days
    all satisfy the predicate. Gaps and empty days reset the run.
    """
    if required_days <= 0:
        return True

    days = _days_by_date(history)
    if len(days) < required_days:
        return False

    run = 0
    previous = None

    for d in sorted(days, reverse=True):
        if previous is not None and (previous - d).days != 1:
            run = 0

        entries = days[d]
        if entries and predicate(entries):
            run += 1
            if run >= required_days:
                return True
        else:
            run = 0

        previous = d

    return False


# ==================================================
# TIMING
# ==================================================
def _minutes_of(time_str: str) -> int:
    hours, minutes = time_str.split(":")
    return int(hours) * 60 + int(minutes)


def _first_entry(entries: List[Dict[str, Any]]) -> Dict[str, Any]:
    return min(entries, key=lambda e: e.get("createdAt", 0))


def has_consistent_timing(
    history: List[Dict[str, Any]],
    required_days: int,
    tolerance_minutes: int,
) -> bool:
    """
    The first log of each of the most recent `required_days` days
    sits within tolerance of their average time.
    """
    days = _days_by_date(history)
    recent = sorted(days, reverse=True)[:required_days]
    if len(recent) < required_days:
        return False

    times = []
    for d in recent:
        if not days[d]:
            return False
        times.append(_minutes_of(_first_entry(days[d])["time"]))

    avg = sum(times) / len(times)
    return all(abs(t - avg) <= tolerance_minutes for t in times)


def consistent_timing_progress(
    history: List[Dict[str, Any]],
    required_days: int,
    tolerance_minutes: int,
) -> int:
    days = _days_by_date(history)

    times = []
    for d in sorted(days, reverse=True):
        if not days[d]:
            break
        times.append(_minutes_of(_first_entry(days[d])["time"]))
        if len(times) >= required_days:
            break

    if len(times) < 2:
        return len(times)

    avg = sum(times) / len(times)
    count = 0
    for t in times:
        if abs(t - avg) > tolerance_minutes:
            break
        count += 1
    return count


# ==================================================
# COUNTS
# ==================================================
def all_entries(history: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Every entry, oldest first by createdAt."""
    entries = [e for day in history for e in day.get("entries") or []]
    return sorted(entries, key=lambda e: e.get("createdAt", 0))


def count_total_entries(history: List[Dict[str, Any]]) -> int:
    return sum(len(day.get("entries") or []) for day in history)


def count_total_days_with_entries(history: List[Dict[str, Any]]) -> int:
    return sum(1 for day in history if day.get("entries"))


def count_logs_with_tags(history: List[Dict[str, Any]]) -> int:
    return sum(1 for e in all_entries(history) if e.get("tags"))


def count_tag_usage(history: List[Dict[str, Any]]) -> Dict[str, int]:
    counts: Dict[str, int] = {}
    for e in all_entries(history):
        for tag in e.get("tags") or []:
            counts[tag] = counts.get(tag, 0) + 1
    return counts


def consecutive_entries_with_color(history: List[Dict[str, Any]]) -> int:
    """Most recent entries in a row that carry a color."""
    count = 0
    for e in reversed(all_entries(history)):
        if not (e.get("color") or "").strip():
            break
        count += 1
    return count


def _irregular(e: Dict[str, Any]) -> bool:
    return e["type"] <= 2 or e["type"] >= 6


def _ideal(e: Dict[str, Any]) -> bool:
    return 3 <= e["type"] <= 4


def has_improved_after_tag(history: List[Dict[str, Any]], tag_id: str) -> bool:
    """
    An irregular entry carrying the tag followed by a type 3-4:
    the very next entry that day, or any entry on the next logged day.
    """
    days = _days_by_date(history)
    ordered = sorted(days)

    for i, d in enumerate(ordered):
        entries = sorted(days[d], key=lambda e: e.get("createdAt", 0))

        for j, e in enumerate(entries):
            if _irregular(e) and tag_id in (e.get("tags") or []):
                if j + 1 < len(entries) and _ideal(entries[j + 1]):
                    return True
                if i + 1 < len(ordered) and any(_ideal(n) for n in days[ordered[i + 1]]):
                    return True

    return False
