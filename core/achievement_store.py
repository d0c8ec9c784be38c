# core/achievement_store.py
"""
Persisted achievement state and the unlock presentation queue.

Unlocks are monotonic: an id is written once and only a full
reset (which also zeroes the counters) removes it.
"""

import logging
from collections import deque
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Optional

from core import storage
from utils.dates import to_millis

logger = logging.getLogger(__name__)

TOAST_SECONDS = 4.5
DISMISS_GAP_SECONDS = 0.3


def _safe_default() -> Dict[str, Any]:
    return {
        "unlockedAchievements": [],
        "insightsViews": 0,
        "totalDaysUsed": 0,
        "lastActiveDate": None,
    }


def _validate(data: Any) -> Dict[str, Any]:
    state = _safe_default()
    if not isinstance(data, dict):
        return state

    seen = set()
    for u in data.get("unlockedAchievements") or []:
        if not isinstance(u, dict) or not u.get("id") or u["id"] in seen:
            continue
        seen.add(u["id"])
        state["unlockedAchievements"].append({
            "id": u["id"],
            "unlockedAt": int(u.get("unlockedAt") or 0),
        })

    for counter in ("insightsViews", "totalDaysUsed"):
        value = data.get(counter)
        if isinstance(value, int) and value >= 0:
            state[counter] = value

    if isinstance(data.get("lastActiveDate"), str):
        state["lastActiveDate"] = data["lastActiveDate"]

    return state


# ==================================================
# LOAD / SAVE
# ==================================================
def load_achievement_state() -> Dict[str, Any]:
    return _validate(storage.load_json(storage.STORAGE_KEYS["ACHIEVEMENTS"]))


def save_achievement_state(state: Dict[str, Any]) -> Dict[str, Any]:
    storage.save_json(storage.STORAGE_KEYS["ACHIEVEMENTS"], state)
    return state


def reset_achievement_state() -> Dict[str, Any]:
    logger.info("Achievement state reset")
    return save_achievement_state(_safe_default())


# ==================================================
# UPDATES
# ==================================================
def add_unlocked(
    state: Dict[str, Any],
    achievement_ids: Iterable[str],
    now: datetime = None,
) -> Dict[str, Any]:
    """
    Unlock every id in one write, sharing one timestamp.
    Ids already present are left alone.
    """
    unlocked_at = to_millis(now or datetime.now())
    existing = {u["id"] for u in state["unlockedAchievements"]}

    added = []
    for aid in achievement_ids:
        if aid in existing:
            continue
        existing.add(aid)
        added.append({"id": aid, "unlockedAt": unlocked_at})

    if not added:
        return state

    return save_achievement_state({
        **state,
        "unlockedAchievements": state["unlockedAchievements"] + added,
    })


def increment_insights_views(state: Dict[str, Any]) -> Dict[str, Any]:
    return save_achievement_state({
        **state,
        "insightsViews": state["insightsViews"] + 1,
    })


def update_daily_activity(state: Dict[str, Any], today: date = None) -> Dict[str, Any]:
    """Count a new day of use at most once per calendar day."""
    today_key = (today or date.today()).isoformat()
    if state.get("lastActiveDate") == today_key:
        return state

    return save_achievement_state({
        **state,
        "totalDaysUsed": state["totalDaysUsed"] + 1,
        "lastActiveDate": today_key,
    })


# ==================================================
# READ HELPERS
# ==================================================
def is_unlocked(state: Dict[str, Any], achievement_id: str) -> bool:
    return any(u["id"] == achievement_id for u in state["unlockedAchievements"])


def unlock_date(state: Dict[str, Any], achievement_id: str) -> Optional[int]:
    for u in state["unlockedAchievements"]:
        if u["id"] == achievement_id:
            return u["unlockedAt"]
    return None


def recent_unlocks(state: Dict[str, Any], days: int = 7, now: datetime = None) -> List[Dict[str, Any]]:
    cutoff = to_millis(now or datetime.now()) - days * 24 * 60 * 60 * 1000
    return [u for u in state["unlockedAchievements"] if u["unlockedAt"] >= cutoff]


# ==================================================
# PRESENTATION QUEUE
# ==================================================
class UnlockQueue:
    """
    Shows one unlock at a time, FIFO.
    The next one appears after dismiss() (plus a short gap) or once
    the current toast has been up for TOAST_SECONDS. Time is passed
    in explicitly; nothing runs in the background.
    """

    def __init__(self):
        self._pending = deque()
        self.current = None
        self._shown_at = None
        self._ready_at = None

    def __len__(self):
        return len(self._pending) + (1 if self.current else 0)

    def push(self, achievements: Iterable[Dict[str, Any]], now: float) -> None:
        self._pending.extend(achievements)
        self.tick(now)

    def dismiss(self, now: float) -> None:
        self.current = None
        self._shown_at = None
        self._ready_at = now + DISMISS_GAP_SECONDS

    def tick(self, now: float) -> Optional[Dict[str, Any]]:
        """Advance the queue to `now` (seconds) and return what is showing."""
        if self.current and now - self._shown_at >= TOAST_SECONDS:
            self.current = None
            self._ready_at = now

        if self.current is None and self._pending:
            if self._ready_at is None or now >= self._ready_at:
                self.current = self._pending.popleft()
                self._shown_at = now
                self._ready_at = None

        return self.current

    def clear(self) -> None:
        self._pending.clear()
        self.current = None
        self._shown_at = None
        self._ready_at = None
