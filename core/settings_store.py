# core/settings_store.py
"""
Theme and daily reminder settings.

Reminders are a single daily schedule. Saving settings with
reminders enabled replaces whatever was scheduled before;
disabling cancels it.
"""

import logging
import random
from datetime import datetime, timedelta
from typing import Any, Dict, Optional

from core import storage

logger = logging.getLogger(__name__)

# ==================================================
# THEMES
# ==================================================
THEMES = {
    "dark": {"name": "Dark", "primary": "#8B5CF6", "background": "#1a1a2e", "text": "#FFFFFF"},
    "light": {"name": "Light", "primary": "#7C3AED", "background": "#F8FAFC", "text": "#1E293B"},
    "nature": {"name": "Nature", "primary": "#16A34A", "background": "#132A13", "text": "#ECFDF5"},
    "blush": {"name": "Blush", "primary": "#EC4899", "background": "#FFF1F2", "text": "#4C0519"},
    "mono": {"name": "Mono", "primary": "#A3A3A3", "background": "#171717", "text": "#FAFAFA"},
}
DEFAULT_THEME = "dark"


def get_theme() -> str:
    theme = storage.get_item(storage.STORAGE_KEYS["THEME"])
    return theme if theme in THEMES else DEFAULT_THEME


def set_theme(theme_id: str) -> str:
    if theme_id not in THEMES:
        raise ValueError(f"Unknown theme: {theme_id}")
    storage.set_item(storage.STORAGE_KEYS["THEME"], theme_id)
    return theme_id


# ==================================================
# REMINDERS
# ==================================================
REMINDER_MESSAGES = [
    "How was your gut today? Take a moment to log.",
    "Don't forget to track today's bowel movement!",
    "Quick check-in: how's your digestion today?",
    "Time for your daily log. Keep your streak going!",
    "A minute to log now saves a trip to remember later.",
]

# the active daily schedule, one at most
_scheduled: Optional[Dict[str, Any]] = None


def _default_reminders() -> Dict[str, Any]:
    return {"enabled": False, "hour": 21, "minute": 0}


def _validate_reminders(data: Any) -> Dict[str, Any]:
    settings = _default_reminders()
    if not isinstance(data, dict):
        return settings

    if isinstance(data.get("enabled"), bool):
        settings["enabled"] = data["enabled"]
    if isinstance(data.get("hour"), int) and 0 <= data["hour"] <= 23:
        settings["hour"] = data["hour"]
    if isinstance(data.get("minute"), int) and 0 <= data["minute"] <= 59:
        settings["minute"] = data["minute"]
    return settings


def load_reminder_settings() -> Dict[str, Any]:
    return _validate_reminders(storage.load_json(storage.STORAGE_KEYS["NOTIFICATION_SETTINGS"]))


def schedule_daily(hour: int, minute: int, rng: random.Random = None, now: datetime = None) -> Dict[str, Any]:
    global _scheduled
    cancel_all()

    rng = rng or random.Random()
    _scheduled = {
        "hour": hour,
        "minute": minute,
        "message": rng.choice(REMINDER_MESSAGES),
        "scheduledAt": (now or datetime.now()).isoformat(),
    }
    logger.info("Daily reminder scheduled for %02d:%02d", hour, minute)
    return _scheduled


def cancel_all() -> None:
    global _scheduled
    _scheduled = None


def scheduled_reminder() -> Optional[Dict[str, Any]]:
    return _scheduled


def save_reminder_settings(
    enabled: bool,
    hour: int,
    minute: int,
    rng: random.Random = None,
    now: datetime = None,
) -> Dict[str, Any]:
    if not 0 <= hour <= 23 or not 0 <= minute <= 59:
        raise ValueError("Reminder time must be a valid HH:MM")

    settings = {"enabled": bool(enabled), "hour": hour, "minute": minute}
    storage.save_json(storage.STORAGE_KEYS["NOTIFICATION_SETTINGS"], settings)

    if settings["enabled"]:
        schedule_daily(hour, minute, rng=rng, now=now)
    else:
        cancel_all()
    return settings


def restore_schedule(rng: random.Random = None) -> Optional[Dict[str, Any]]:
    """Re-create the schedule from saved settings after a restart."""
    settings = load_reminder_settings()
    if not settings["enabled"]:
        cancel_all()
        return None
    return schedule_daily(settings["hour"], settings["minute"], rng=rng)


def next_reminder_at(now: datetime = None) -> Optional[datetime]:
    if _scheduled is None:
        return None

    now = now or datetime.now()
    target = now.replace(
        hour=_scheduled["hour"], minute=_scheduled["minute"], second=0, microsecond=0
    )
    if target <= now:
        target += timedelta(days=1)
    return target


def reminder_due(entries_today: int, now: datetime = None) -> Optional[str]:
    """
    The scheduled message once today's reminder time has passed
    and nothing has been logged today, else None.
    """
    if _scheduled is None or entries_today:
        return None

    now = now or datetime.now()
    due_at = now.replace(
        hour=_scheduled["hour"], minute=_scheduled["minute"], second=0, microsecond=0
    )
    if now < due_at:
        return None
    return _scheduled["message"]
