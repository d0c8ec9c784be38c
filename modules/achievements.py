# modules/achievements.py

import time

import streamlit as st

from core.achievement_store import load_achievement_state, recent_unlocks, unlock_date
from core.achievements import (
    ACHIEVEMENTS,
    CATEGORIES,
    achievement_by_id,
    achievements_by_category,
    calculate_user_stats,
    check_achievements,
    get_progress,
)
from core.journal_store import load_history
from modules.home import render_unlock_toast, unlock_queue
from utils.dates import from_millis


def render_achievements():
    st.subheader("🏆 Achievements")

    history = load_history()
    state, newly = check_achievements(history, load_achievement_state())
    unlock_queue().push(newly, time.monotonic())
    render_unlock_toast()

    stats = calculate_user_stats(history, state)

    unlocked = len(state["unlockedAchievements"])
    st.progress(unlocked / len(ACHIEVEMENTS), text=f"{unlocked} of {len(ACHIEVEMENTS)} unlocked")

    recent = recent_unlocks(state)
    if recent:
        names = [achievement_by_id(u["id"])["name"] for u in recent if achievement_by_id(u["id"])]
        st.success("New this week: " + ", ".join(names))

    for category, label in CATEGORIES.items():
        st.markdown(f"### {label}")

        for a in achievements_by_category(category):
            ts = unlock_date(state, a["id"])
            c1, c2 = st.columns([3, 2])

            if ts:
                c1.markdown(f"✅ **{a['name']}**  \n{a['description']}")
                c2.caption(f"Unlocked {from_millis(ts).strftime('%d %b %Y')}")
                continue

            c1.markdown(f"🔒 **{a['name']}**  \n{a['hint']}")
            progress = get_progress(a, history, stats)
            if progress and progress["total"]:
                c2.progress(
                    progress["current"] / progress["total"],
                    text=f"{progress['current']} / {progress['total']}",
                )
