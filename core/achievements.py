# core/achievements.py
"""
Achievement catalog and evaluator.

Each catalog entry carries a pure condition(history, stats) -> bool
and optionally progress(history, stats) -> {current, total}.
check_achievements() reconciles the catalog against persisted state.
"""

import logging
from datetime import date, datetime
from typing import Any, Callable, Dict, List, Optional, Tuple

from core import achievement_store
from core.streaks import (
    all_entries,
    consecutive_days_with_condition,
    consecutive_days_with_logs,
    consecutive_entries_with_color,
    consistent_timing_progress,
    count_logs_with_tags,
    count_tag_usage,
    count_total_entries,
    current_streak_with_condition,
    has_consistent_timing,
    has_improved_after_tag,
)

logger = logging.getLogger(__name__)

CATEGORIES = {
    "consistency": "Consistency",
    "health": "Digestive Health",
    "timing": "Timing",
    "insights": "Insights",
    "special": "Special",
}


# ==================================================
# RULE BUILDERS
# ==================================================
def _all_ideal(entries) -> bool:
    return bool(entries) and all(3 <= e["type"] <= 4 for e in entries)


def _all_type_4(entries) -> bool:
    return bool(entries) and all(e["type"] == 4 for e in entries)


def _stat_at_least(key: str, total: int) -> Tuple[Callable, Callable]:
    return (
        lambda history, stats: stats[key] >= total,
        lambda history, stats: {"current": min(stats[key], total), "total": total},
    )


def _ideal_run(days: int) -> Tuple[Callable, Callable]:
    return (
        lambda history, stats: consecutive_days_with_condition(history, days, _all_ideal),
        lambda history, stats: {
            "current": min(current_streak_with_condition(history, _all_ideal), days),
            "total": days,
        },
    )


def _counted(counter: Callable, total: int) -> Tuple[Callable, Callable]:
    return (
        lambda history, stats: counter(history, stats) >= total,
        lambda history, stats: {"current": min(counter(history, stats), total), "total": total},
    )


def _any_entry(test: Callable) -> Callable:
    return lambda history, stats: any(test(e) for e in all_entries(history))


def _hour(e) -> int:
    return int(e["time"].split(":")[0])


def _bounced_back(history, stats) -> bool:
    """A type 3-4 day preceded by 3 logged days with irregular stools."""
    days = sorted(
        (d for d in history if d.get("entries")),
        key=lambda d: d["date"],
        reverse=True,
    )
    for i, day in enumerate(days):
        if not any(3 <= e["type"] <= 4 for e in day["entries"]):
            continue
        irregular = sum(
            1 for prev in days[i + 1:i + 4]
            if any(e["type"] <= 2 or e["type"] >= 6 for e in prev["entries"])
        )
        if irregular >= 3:
            return True
    return False


def _fiber_friend(history, stats) -> bool:
    if stats["tagUsageCount"].get("fiber", 0) < 10:
        return False

    fiber = [e for e in all_entries(history) if "fiber" in (e.get("tags") or [])]
    if not fiber:
        return False
    avg = sum(e["type"] for e in fiber) / len(fiber)
    return 3 <= avg <= 4


def _notes_count(history, stats) -> int:
    return sum(1 for e in all_entries(history) if (e.get("notes") or "").strip())


def _achievement(aid, name, description, hint, category, condition, progress=None):
    return {
        "id": aid,
        "name": name,
        "description": description,
        "hint": hint,
        "category": category,
        "condition": condition,
        "progress": progress,
    }


def _with_progress(aid, name, description, hint, category, rule):
    condition, progress = rule
    return _achievement(aid, name, description, hint, category, condition, progress)


# ==================================================
# CATALOG
# ==================================================
ACHIEVEMENTS: List[Dict[str, Any]] = [
    # ---------------- Consistency ----------------
    _achievement(
        "first_flush", "First Flush",
        "Welcome! Your gut health journey begins",
        "Log your first bowel movement", "consistency",
        lambda history, stats: count_total_entries(history) >= 1,
    ),
    _with_progress(
        "threes_company", "Three's Company", "Building a healthy habit!",
        "Log for 3 days in a row", "consistency", _stat_at_least("currentStreak", 3),
    ),
    _with_progress(
        "week_warrior", "Week Warrior", "A full week of tracking!",
        "Log for 7 days in a row", "consistency", _stat_at_least("currentStreak", 7),
    ),
    _with_progress(
        "fortnight_fighter", "Fortnight Fighter", "Two weeks strong!",
        "Log for 14 days in a row", "consistency", _stat_at_least("currentStreak", 14),
    ),
    _with_progress(
        "monthly_master", "Monthly Master", "A month of mindful tracking!",
        "Log for 30 days in a row", "consistency", _stat_at_least("currentStreak", 30),
    ),
    # ---------------- Digestive health ----------------
    _achievement(
        "golden_standard", "Golden Standard", "The ideal type! Your gut is happy",
        "Log a Type 4 bowel movement", "health",
        _any_entry(lambda e: e["type"] == 4),
    ),
    _with_progress(
        "smooth_operator", "Smooth Operator", "A week of perfect digestion!",
        "Log Type 3 or 4 for 7 days straight", "health", _ideal_run(7),
    ),
    _with_progress(
        "gut_feeling", "Gut Feeling", "Your gut is in great shape!",
        "Log Type 3 or 4 for 14 days straight", "health", _ideal_run(14),
    ),
    _with_progress(
        "digestive_zen", "Digestive Zen", "Mastery achieved! Incredible consistency",
        "Log Type 3 or 4 for 30 days straight", "health", _ideal_run(30),
    ),
    _achievement(
        "bounce_back", "Bounce Back", "Great recovery! Your body is resilient",
        "Log Type 3-4 after 3+ days of irregular stools", "health", _bounced_back,
    ),
    # ---------------- Timing ----------------
    _achievement(
        "early_bird", "Early Bird", "Early morning productivity!",
        "Log before 7:00 AM", "timing", _any_entry(lambda e: _hour(e) < 7),
    ),
    _achievement(
        "night_owl", "Night Owl", "Burning the midnight oil!",
        "Log after 11:00 PM", "timing", _any_entry(lambda e: _hour(e) >= 23),
    ),
    _achievement(
        "clockwork", "Clockwork", "Your body loves routine!",
        "Log at the same time (±1 hour) for 7 days", "timing",
        lambda history, stats: has_consistent_timing(history, 7, 60),
        lambda history, stats: {
            "current": min(consistent_timing_progress(history, 7, 60), 7),
            "total": 7,
        },
    ),
    # ---------------- Insights ----------------
    _with_progress(
        "tag_team", "Tag Team", "Great job tracking factors!",
        "Use tags in 10 different logs", "insights",
        _counted(lambda history, stats: count_logs_with_tags(history), 10),
    ),
    _with_progress(
        "tag_explorer", "Tag Explorer", "Curious about every factor!",
        "Use 5 different tags", "insights",
        _counted(lambda history, stats: len(stats["tagUsageCount"]), 5),
    ),
    _with_progress(
        "note_taker", "Note Taker", "The details tell the story!",
        "Add notes to 10 logs", "insights", _counted(_notes_count, 10),
    ),
    _with_progress(
        "pattern_spotter", "Pattern Spotter", "Knowledge is power!",
        "View the Insights tab 5 times", "insights", _stat_at_least("insightsViews", 5),
    ),
    _with_progress(
        "self_aware", "Self Aware", "A month of gut awareness!",
        "Use the app for 30 different days", "insights",
        _stat_at_least("totalDaysUsed", 30),
    ),
    # ---------------- Special ----------------
    _achievement(
        "perfect_week", "Perfect Week", "Flawless! Absolutely perfect week",
        "Log exactly Type 4, every day, for a full week", "special",
        lambda history, stats: consecutive_days_with_condition(history, 7, _all_type_4),
    ),
    _with_progress(
        "half_century", "Half Century", "50 logs and counting!",
        "Log 50 bowel movements total", "special", _stat_at_least("totalLogs", 50),
    ),
    _with_progress(
        "centurion", "Centurion", "100 logs! Dedication pays off",
        "Log 100 bowel movements total", "special", _stat_at_least("totalLogs", 100),
    ),
    _achievement(
        "fiber_friend", "Fiber Friend", "Fiber is your friend indeed!",
        "Use the fiber tag 10 times while maintaining healthy stools", "special",
        _fiber_friend,
        lambda history, stats: {
            "current": min(stats["tagUsageCount"].get("fiber", 0), 10),
            "total": 10,
        },
    ),
    _achievement(
        "hydration_hero", "Hydration Hero", "Hydration for the win!",
        "See improvement after staying hydrated", "special",
        lambda history, stats: has_improved_after_tag(history, "water"),
    ),
    _with_progress(
        "color_conscious", "Color Conscious", "Tracking every detail!",
        "Log color for 10 entries in a row", "special",
        _counted(lambda history, stats: consecutive_entries_with_color(history), 10),
    ),
]


def achievement_by_id(achievement_id: str) -> Optional[Dict[str, Any]]:
    return next((a for a in ACHIEVEMENTS if a["id"] == achievement_id), None)


def achievements_by_category(category: str) -> List[Dict[str, Any]]:
    return [a for a in ACHIEVEMENTS if a["category"] == category]


# ==================================================
# EVALUATION
# ==================================================
def calculate_user_stats(
    history: List[Dict[str, Any]],
    state: Dict[str, Any],
    today: date = None,
) -> Dict[str, Any]:
    streak = consecutive_days_with_logs(history, today=today)
    return {
        "totalLogs": count_total_entries(history),
        "currentStreak": streak,
        # TODO: persist the best run in achievement state so this survives a broken streak
        "longestStreak": streak,
        "insightsViews": state["insightsViews"],
        "totalDaysUsed": state["totalDaysUsed"],
        "tagUsageCount": count_tag_usage(history),
    }


def get_progress(
    achievement: Dict[str, Any],
    history: List[Dict[str, Any]],
    stats: Dict[str, Any],
) -> Optional[Dict[str, int]]:
    """Progress bar values, `current` clamped to [0, total]."""
    if not achievement.get("progress"):
        return None

    try:
        p = achievement["progress"](history, stats)
    except Exception:
        logger.exception("Progress failed for achievement %s", achievement["id"])
        return None

    total = max(0, int(p["total"]))
    return {"current": max(0, min(int(p["current"]), total)), "total": total}


def check_achievements(
    history: List[Dict[str, Any]],
    state: Dict[str, Any] = None,
    now: datetime = None,
) -> Tuple[Dict[str, Any], List[Dict[str, Any]]]:
    """
    Unlock every catalog entry whose condition now holds.
    A condition that raises counts as not met for this pass.
    Returns (state, newly unlocked achievements in catalog order).
    """
    now = now or datetime.now()
    if state is None:
        state = achievement_store.load_achievement_state()

    stats = calculate_user_stats(history, state, today=now.date())
    newly = []

    for a in ACHIEVEMENTS:
        if achievement_store.is_unlocked(state, a["id"]):
            continue
        try:
            if a["condition"](history, stats):
                newly.append(a)
        except Exception:
            logger.exception("Error checking achievement %s", a["id"])

    if newly:
        state = achievement_store.add_unlocked(state, [a["id"] for a in newly], now=now)
        logger.info("Unlocked achievements: %s", ", ".join(a["id"] for a in newly))

    return state, newly


def track_insights_view(
    history: List[Dict[str, Any]],
    now: datetime = None,
) -> Tuple[Dict[str, Any], List[Dict[str, Any]]]:
    state = achievement_store.increment_insights_views(
        achievement_store.load_achievement_state()
    )
    return check_achievements(history, state, now=now)


def track_daily_activity(
    history: List[Dict[str, Any]],
    now: datetime = None,
) -> Tuple[Dict[str, Any], List[Dict[str, Any]]]:
    """Count today as a day of use, then re-check since streaks move with the date."""
    now = now or datetime.now()
    state = achievement_store.update_daily_activity(
        achievement_store.load_achievement_state(), today=now.date()
    )
    return check_achievements(history, state, now=now)
