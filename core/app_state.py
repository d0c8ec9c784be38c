# core/app_state.py
"""Onboarding flag and full app reset."""

import logging

from core import achievement_store, settings_store, storage, tip_store

logger = logging.getLogger(__name__)


def is_onboarded() -> bool:
    return storage.get_item(storage.STORAGE_KEYS["ONBOARDING"]) == "true"


def complete_onboarding() -> None:
    storage.set_item(storage.STORAGE_KEYS["ONBOARDING"], "true")


def reset_app() -> None:
    """
    Delete every stored key and cancel reminders.
    Achievement and tip state come back as fresh defaults.
    """
    storage.clear_all()
    settings_store.cancel_all()
    achievement_store.reset_achievement_state()
    tip_store.reset_tip_state()
    logger.warning("App reset: all local data cleared")
