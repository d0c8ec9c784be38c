# core/tip_store.py
"""
Wellness tip presentation state.

Per tip: not shown → shown (7 day cooldown) → maybe dismissed (3 day cooldown).
Globally: 24h between any two tips, 12h snooze silences everything,
and nothing shows before the journal has 3 entries.
"""

import logging
import random
from datetime import datetime
from typing import Any, Dict, List, Optional

from core import storage
from core.patterns import detect_patterns
from core.wellness_tips import MIN_ENTRIES_FOR_TIPS, TIP_COOLDOWNS
from utils.dates import to_millis

logger = logging.getLogger(__name__)


def _safe_default() -> Dict[str, Any]:
    return {
        "lastShownTimestamp": 0,
        "shownTips": {},
        "dismissedTips": {},
        "snoozedUntil": None,
        "helpfulCount": 0,
        "notHelpfulCount": 0,
    }


def _now_ms(now: datetime = None) -> int:
    return to_millis(now or datetime.now())


def _is_millis(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and value >= 0


def _validate(data: Any) -> Dict[str, Any]:
    state = _safe_default()
    if not isinstance(data, dict):
        return state

    if _is_millis(data.get("lastShownTimestamp")):
        state["lastShownTimestamp"] = int(data["lastShownTimestamp"])
    if _is_millis(data.get("snoozedUntil")):
        state["snoozedUntil"] = int(data["snoozedUntil"])

    for key in ("shownTips", "dismissedTips"):
        tips = data.get(key)
        if isinstance(tips, dict):
            state[key] = {str(k): int(v) for k, v in tips.items() if _is_millis(v)}

    for counter in ("helpfulCount", "notHelpfulCount"):
        value = data.get(counter)
        if isinstance(value, int) and not isinstance(value, bool) and value >= 0:
            state[counter] = value

    return state


# ==================================================
# LOAD / SAVE
# ==================================================
def load_tip_state() -> Dict[str, Any]:
    return _validate(storage.load_json(storage.STORAGE_KEYS["WELLNESS_TIPS"]))


def save_tip_state(state: Dict[str, Any]) -> Dict[str, Any]:
    """
    Persist and hand back the state. A failed write is logged by
    storage; the caller keeps using the returned state regardless.
    """
    storage.save_json(storage.STORAGE_KEYS["WELLNESS_TIPS"], state)
    return state


def reset_tip_state() -> Dict[str, Any]:
    return save_tip_state(_safe_default())


# ==================================================
# RULES
# ==================================================
def can_show_tip(state: Dict[str, Any], total_entries: int, now: datetime = None) -> bool:
    now_ms = _now_ms(now)

    snoozed_until = state.get("snoozedUntil")
    if snoozed_until and now_ms < snoozed_until:
        return False

    if now_ms - state.get("lastShownTimestamp", 0) < TIP_COOLDOWNS["anyTip"]:
        return False

    return total_entries >= MIN_ENTRIES_FOR_TIPS


def cooling_down(state: Dict[str, Any], now: datetime = None) -> List[str]:
    """Tip ids that are not eligible right now."""
    now_ms = _now_ms(now)
    blocked = set()

    for tip_id, ts in state.get("shownTips", {}).items():
        if now_ms - ts < TIP_COOLDOWNS["sameTip"]:
            blocked.add(tip_id)

    for tip_id, ts in state.get("dismissedTips", {}).items():
        if now_ms - ts < TIP_COOLDOWNS["afterDismiss"]:
            blocked.add(tip_id)

    return sorted(blocked)


# ==================================================
# ACTIONS
# ==================================================
def select_tip(
    history_entries: List[Dict[str, Any]],
    profile: Dict[str, Any] = None,
    now: datetime = None,
    rng: random.Random = None,
) -> Optional[Dict[str, Any]]:
    """
    Pick at most one tip and record it as shown.
    The per-tip and global timestamps go out in a single write.
    """
    state = load_tip_state()
    if not can_show_tip(state, len(history_entries), now):
        return None

    result = detect_patterns(
        history_entries,
        profile=profile,
        now=now,
        rng=rng,
        exclude=cooling_down(state, now),
    )
    tip = result["recommendedTip"]
    if not tip:
        return None

    now_ms = _now_ms(now)
    save_tip_state({
        **state,
        "lastShownTimestamp": now_ms,
        "shownTips": {**state["shownTips"], tip["id"]: now_ms},
    })
    logger.info("Showing wellness tip %s", tip["id"])
    return tip


def next_tip(
    current: Optional[Dict[str, Any]],
    history_entries: List[Dict[str, Any]],
    profile: Dict[str, Any] = None,
    now: datetime = None,
    rng: random.Random = None,
) -> Optional[Dict[str, Any]]:
    """Keep the tip on screen, or try for a new one once the cooldowns allow."""
    if current:
        return current
    return select_tip(history_entries, profile=profile, now=now, rng=rng)


def dismiss_tip(tip_id: str, now: datetime = None) -> Dict[str, Any]:
    state = load_tip_state()
    return save_tip_state({
        **state,
        "dismissedTips": {**state["dismissedTips"], tip_id: _now_ms(now)},
    })


def snooze_tips(now: datetime = None) -> Dict[str, Any]:
    state = load_tip_state()
    return save_tip_state({
        **state,
        "snoozedUntil": _now_ms(now) + TIP_COOLDOWNS["snooze"],
    })


def mark_helpful(tip_id: str, helpful: bool, now: datetime = None) -> Dict[str, Any]:
    """Feedback also dismisses the tip."""
    state = load_tip_state()
    state = {
        **state,
        "helpfulCount": state["helpfulCount"] + (1 if helpful else 0),
        "notHelpfulCount": state["notHelpfulCount"] + (0 if helpful else 1),
        "dismissedTips": {**state["dismissedTips"], tip_id: _now_ms(now)},
    }
    return save_tip_state(state)
