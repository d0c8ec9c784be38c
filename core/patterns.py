# core/patterns.py
"""
Pattern detection over the recent journal window.

Each detector is pure and looks at a slice of entries
(oldest first). detect_patterns() ranks what was found and
picks at most one wellness tip for it.
"""

import random
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from core.profile_store import AGE_EFFECTS, CONDITION_EFFECTS
from core.wellness_tips import DAY_MS, PATTERN_PRIORITY, WELLNESS_TIPS
from utils.dates import to_millis

DAYS_TO_ANALYZE = 7
MIN_ENTRIES_FOR_PATTERN = 3
EXPECTED_PENALTY = 50
# chance of a general tip when no pattern produced one
GENERAL_TIP_CHANCE = 0.3
FIBER_KEYWORDS = ["fiber", "whole grains", "legumes"]


# ==================================================
# PROFILE
# ==================================================
def profile_effects(profile: Dict[str, Any] = None) -> Dict[str, Any]:
    effects = {
        "expect_constipation": False,
        "expect_loose": False,
        "avoid_fiber_tips": False,
        "slower_transit": False,
        "conditions": [],
    }
    if not profile:
        return effects

    for condition in profile.get("conditions", []):
        if condition == "none":
            continue
        effects["conditions"].append(condition)

        c = CONDITION_EFFECTS.get(condition, {})
        for key in ("expect_constipation", "expect_loose", "avoid_fiber_tips"):
            if c.get(key):
                effects[key] = True

    if AGE_EFFECTS.get(profile.get("ageRange"), {}).get("slower_transit"):
        effects["slower_transit"] = True
        effects["expect_constipation"] = True

    return effects


def is_tip_appropriate(tip: Dict[str, Any], effects: Dict[str, Any]) -> bool:
    if effects.get("avoid_fiber_tips"):
        text = f"{tip['title']} {tip['message']}".lower()
        if any(k in text for k in FIBER_KEYWORDS):
            return False
    return True


# ==================================================
# DETECTORS
# ==================================================
def _pattern(kind: str, confidence: float, relevant: List[Dict[str, Any]]) -> Dict[str, Any]:
    return {
        "type": kind,
        "confidence": confidence,
        "relevantEntries": relevant,
        "isExpected": False,
    }


def detect_constipation(entries: List[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    window = entries[-5:]
    hard = [e for e in window if e["type"] <= 2]
    if window and len(hard) >= 2 and len(hard) / len(window) >= 0.5:
        return _pattern("consecutive_type_1_2", len(hard) / len(window), hard)
    return None


def detect_diarrhea(entries: List[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    window = entries[-5:]
    loose = [e for e in window if e["type"] >= 6]
    if window and len(loose) >= 2 and len(loose) / len(window) >= 0.4:
        return _pattern("consecutive_type_6_7", len(loose) / len(window), loose)
    return None


def detect_healthy(entries: List[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    window = entries[-7:]
    if len(window) < 5:
        return None

    healthy = [e for e in window if 3 <= e["type"] <= 4]
    ratio = len(healthy) / len(window)
    if ratio >= 0.7:
        return _pattern("consistent_healthy", ratio, healthy)
    return None


def _tag_correlation(entries, tag, matches, threshold, kind):
    tagged = [e for e in entries if tag in (e.get("tags") or [])]
    if len(tagged) < 3:
        return None

    hits = [e for e in tagged if matches(e["type"])]
    ratio = len(hits) / len(tagged)
    if ratio >= threshold:
        return _pattern(kind, ratio, hits)
    return None


def detect_coffee_correlation(entries: List[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    return _tag_correlation(entries, "coffee", lambda t: t >= 5, 0.6, "coffee_correlation")


def detect_stress_correlation(entries: List[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    return _tag_correlation(
        entries, "stress", lambda t: t <= 2 or t >= 6, 0.5, "stress_correlation"
    )


def detect_fiber_improvement(entries: List[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    return _tag_correlation(entries, "fiber", lambda t: 3 <= t <= 4, 0.6, "fiber_improvement")


def detect_no_entries(entries: List[Dict[str, Any]], days_since_last: float) -> Optional[Dict[str, Any]]:
    if entries and days_since_last >= 3:
        return _pattern("no_entries_days", min(days_since_last / 7, 1), [])
    return None


# ==================================================
# RANKING
# ==================================================
def ranking_key(pattern: Dict[str, Any]) -> int:
    base = PATTERN_PRIORITY.get(pattern["type"], 99)
    return base + (EXPECTED_PENALTY if pattern.get("isExpected") else 0)


def _eligible_tips(pattern_type, total_entries, effects, exclude):
    return [
        t for t in WELLNESS_TIPS
        if t["patternType"] == pattern_type
        and total_entries >= t["minEntriesRequired"]
        and is_tip_appropriate(t, effects)
        and t["id"] not in exclude
    ]


def detect_patterns(
    history_entries: List[Dict[str, Any]],
    profile: Dict[str, Any] = None,
    now: datetime = None,
    rng: random.Random = None,
    exclude: Iterable[str] = (),
) -> Dict[str, Any]:
    """
    Returns {"patterns": [...], "recommendedTip": tip | None}.
    Patterns come back sorted by ranking key; tips listed in
    `exclude` are never recommended.
    """
    rng = rng or random.Random()
    exclude = set(exclude)
    now_ms = to_millis(now or datetime.now())

    entries = sorted(history_entries, key=lambda e: e.get("createdAt", 0))
    cutoff = now_ms - DAYS_TO_ANALYZE * DAY_MS
    recent = [e for e in entries if e["createdAt"] >= cutoff]
    effects = profile_effects(profile)

    days_since_last = (
        (now_ms - entries[-1]["createdAt"]) / DAY_MS if entries else float("inf")
    )

    patterns = []
    found = detect_no_entries(entries, days_since_last)
    if found:
        patterns.append(found)

    if len(recent) >= MIN_ENTRIES_FOR_PATTERN:
        found = detect_diarrhea(recent)
        if found:
            found["isExpected"] = effects["expect_loose"]
            patterns.append(found)

        found = detect_constipation(recent)
        if found:
            found["isExpected"] = effects["expect_constipation"] or effects["slower_transit"]
            patterns.append(found)

        for detector in (
            detect_coffee_correlation,
            detect_stress_correlation,
            detect_fiber_improvement,
            detect_healthy,
        ):
            found = detector(recent)
            if found:
                patterns.append(found)

    patterns.sort(key=ranking_key)

    recommended = None
    for p in patterns:
        tips = _eligible_tips(p["type"], len(entries), effects, exclude)
        if tips:
            recommended = rng.choice(tips)
            break

    if recommended is None and len(entries) >= 3 and rng.random() < GENERAL_TIP_CHANCE:
        tips = _eligible_tips("general", len(entries), effects, exclude)
        if tips:
            recommended = rng.choice(tips)

    return {"patterns": patterns, "recommendedTip": recommended}


def pattern_summary(history_entries: List[Dict[str, Any]], now: datetime = None) -> Optional[str]:
    now_ms = to_millis(now or datetime.now())
    cutoff = now_ms - DAYS_TO_ANALYZE * DAY_MS
    recent = [e for e in history_entries if e["createdAt"] >= cutoff]
    if len(recent) < 3:
        return None

    avg = sum(e["type"] for e in recent) / len(recent)
    if avg <= 2.5:
        return "Your stools have been on the harder side recently."
    if avg >= 5.5:
        return "Your stools have been on the looser side recently."
    if 3 <= avg <= 4:
        return "Your gut health looks good! Keep it up."
    return None
