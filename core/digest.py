# core/digest.py
"""
Weekly digest for the previous Monday..Sunday.

Everything here is derived from history and never stored.
Only `message` is random; the rest is deterministic for a
given history and `today`.
"""

import random
from datetime import date, timedelta
from typing import Any, Dict, List, Optional

from core.calculations import average_type, entries_between, round_half_up
from core.journal_store import HEALTH_COLORS, bristol_health
from core.streaks import consecutive_days_with_logs
from utils.dates import format_date_range, from_millis, last_week_range

# ==================================================
# CONSTANTS
# ==================================================
DAY_LETTERS = ["M", "T", "W", "T", "F", "S", "S"]
EMPTY_DOT_COLOR = "rgba(255, 255, 255, 0.1)"

WEEKLY_MESSAGES = {
    "excellent": [
        "Your gut is thriving!",
        "Excellent week! Keep it up",
        "Smooth sailing this week!",
        "Your body thanks you!",
        "Peak performance this week!",
    ],
    "good": [
        "Solid week overall!",
        "You're on the right track!",
        "Good consistency this week!",
        "Nice and steady!",
        "Keep up the good work!",
    ],
    "needs_attention": [
        "A bit irregular this week. That's okay!",
        "Some ups and downs, so listen to your body",
        "Room for improvement, small changes help!",
        "Not your best week, but tomorrow is new!",
        "Your body is telling you something",
    ],
    "low_data": [
        "Not much data this week",
        "Log consistently to see patterns",
        "More logs = better insights!",
        "Track more to understand your body",
    ],
    "no_data": [
        "No logs this week",
        "Start tracking to see your progress!",
    ],
}

HEALTH_INDICATORS = {
    "excellent": {"id": "excellent", "label": "Excellent", "color": "#10B981"},
    "good": {"id": "good", "label": "Good", "color": "#3B82F6"},
    "fair": {"id": "fair", "label": "Fair", "color": "#F59E0B"},
    "needs_attention": {"id": "needs_attention", "label": "Needs attention", "color": "#EC4899"},
}

STREAK_MESSAGES = {
    "short": "Nice streak going!",       # 3-6 days
    "medium": "Impressive streak!",      # 7-13 days
    "long": "Amazing consistency!",      # 14-29 days
    "epic": "Legendary streak!",         # 30+ days
}

# (label, first hour, end hour); anything else is Night
PEAK_BUCKETS = [
    ("Morning", 5, 11),
    ("Midday", 11, 14),
    ("Afternoon", 14, 18),
    ("Evening", 18, 22),
]


# ==================================================
# PIECES
# ==================================================
def health_indicator(avg: Optional[float]) -> Optional[Dict[str, str]]:
    if avg is None:
        return None
    if 3 <= avg <= 4.5:
        return HEALTH_INDICATORS["excellent"]
    if 2.5 <= avg < 3 or 4.5 < avg <= 5:
        return HEALTH_INDICATORS["good"]
    if 2 <= avg < 2.5 or 5 < avg <= 5.5:
        return HEALTH_INDICATORS["fair"]
    return HEALTH_INDICATORS["needs_attention"]


def streak_message(streak: int) -> Optional[str]:
    if streak < 3:
        return None
    if streak < 7:
        return STREAK_MESSAGES["short"]
    if streak < 14:
        return STREAK_MESSAGES["medium"]
    if streak < 30:
        return STREAK_MESSAGES["long"]
    return STREAK_MESSAGES["epic"]


def _bucket_for(hour: int) -> str:
    for label, start, end in PEAK_BUCKETS:
        if start <= hour < end:
            return label
    return "Night"


def find_peak_hour(entries: List[Dict[str, Any]]) -> Optional[str]:
    """
    Busiest time-of-day bucket. Needs 3+ entries and a winner
    with 2+; ties go to the earlier bucket in the day.
    """
    if len(entries) < 3:
        return None

    counts = {label: 0 for label, _, _ in PEAK_BUCKETS}
    counts["Night"] = 0
    for e in entries:
        counts[_bucket_for(from_millis(e["createdAt"]).hour)] += 1

    best, best_count = None, 0
    for label, count in counts.items():
        if count > best_count:
            best, best_count = label, count

    return best if best_count >= 2 else None


def week_category(entries: List[Dict[str, Any]], avg: Optional[float]) -> str:
    # the fair band shares the needs_attention message pool
    if not entries:
        return "no_data"
    if len(entries) < 3 or avg is None:
        return "low_data"
    if 3 <= avg <= 4.5:
        return "excellent"
    if 2.5 <= avg <= 5:
        return "good"
    return "needs_attention"


def _day_color(entries: List[Dict[str, Any]]) -> str:
    if not entries:
        return EMPTY_DOT_COLOR
    rounded = round_half_up(sum(e["type"] for e in entries) / len(entries))
    return HEALTH_COLORS.get(bristol_health(rounded), EMPTY_DOT_COLOR)


def daily_dots(history: List[Dict[str, Any]], week_start: date) -> List[Dict[str, Any]]:
    by_date = {}
    for day in history:
        by_date.setdefault(day.get("date"), []).extend(day.get("entries") or [])

    dots = []
    for i in range(7):
        d = week_start + timedelta(days=i)
        entries = by_date.get(d.isoformat(), [])
        dots.append({
            "day": DAY_LETTERS[d.weekday()],
            "date": d.isoformat(),
            "color": _day_color(entries),
            "hasData": bool(entries),
            "avgType": (
                round_half_up(sum(e["type"] for e in entries) / len(entries))
                if entries else None
            ),
        })
    return dots


# ==================================================
# DIGEST
# ==================================================
def calculate_digest_data(
    history: List[Dict[str, Any]],
    today: date = None,
    rng: random.Random = None,
) -> Dict[str, Any]:
    today = today or date.today()
    rng = rng or random.Random()

    start, end = last_week_range(today)
    entries = entries_between(history, start, end)
    avg = average_type(entries)
    category = week_category(entries, avg)
    streak = consecutive_days_with_logs(history, today=today)

    return {
        "totalLogs": len(entries),
        "dailyDots": daily_dots(history, start),
        "avgType": avg,
        "healthIndicator": health_indicator(avg),
        "streak": streak,
        "streakMessage": streak_message(streak),
        "peakHour": find_peak_hour(entries),
        "message": rng.choice(WEEKLY_MESSAGES[category]),
        "dateRange": format_date_range(start, end),
        "weekCategory": category,
    }


def has_digest_data(digest: Dict[str, Any]) -> bool:
    return digest["totalLogs"] > 0 or any(d["hasData"] for d in digest["dailyDots"])
