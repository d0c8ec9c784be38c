# modules/home.py
"""
Home page: today's stats, the log form, the wellness tip
and achievement unlock toasts.
"""

import time
from datetime import date, datetime

import streamlit as st

from core.achievement_store import UnlockQueue
from core.achievements import check_achievements, track_daily_activity
from core.calculations import calculate_stats
from core.digest import calculate_digest_data
from core.digest_store import dismiss_digest, should_show_digest
from core.journal_store import (
    BRISTOL_TYPES,
    HEALTH_COLORS,
    QUICK_TAGS,
    STOOL_COLORS,
    add_entry,
    load_history,
    today_entries,
)
from core.profile_store import load_profile
from core.rating_store import (
    increment_entry_count,
    load_rating_data,
    mark_rating_requested,
    should_request_rating,
)
from core.settings_store import reminder_due
from core.streaks import all_entries
from core.tip_store import dismiss_tip, mark_helpful, next_tip, snooze_tips
from core.wellness_tips import WELLNESS_DISCLAIMER


def unlock_queue() -> UnlockQueue:
    if "unlock_queue" not in st.session_state:
        st.session_state["unlock_queue"] = UnlockQueue()
    return st.session_state["unlock_queue"]


# ==================================================
# SECTIONS
# ==================================================
def render_unlock_toast():
    queue = unlock_queue()
    current = queue.tick(time.monotonic())
    if not current:
        return

    st.success(f"🏆 Achievement unlocked: **{current['name']}**. {current['description']}")
    if st.button("Nice!", key="dismiss_unlock"):
        queue.dismiss(time.monotonic())
        st.rerun()


def render_stats(history):
    stats = calculate_stats(history)

    c1, c2, c3, c4 = st.columns(4)
    c1.metric("🔥 Streak", f"{stats['streak']} days")
    c2.metric("📅 This week", stats["weekCount"])
    c3.metric("📊 Avg type", stats["avgType"] if stats["avgType"] is not None else "—")
    c4.metric(
        "💚 Gut score",
        stats["healthScore"] if stats["healthScore"] is not None else "—",
    )


def render_digest(history):
    if not should_show_digest():
        return

    digest = calculate_digest_data(history)
    with st.container(border=True):
        st.markdown(f"### 📬 Your week: {digest['dateRange']}")
        st.markdown(digest["message"])
        st.caption(f"{digest['totalLogs']} logs last week")
        if st.button("Got it", key="dismiss_digest"):
            dismiss_digest()
            st.rerun()


def render_tip(history):
    st.session_state["current_tip"] = next_tip(
        st.session_state.get("current_tip"), all_entries(history), load_profile()
    )

    tip = st.session_state["current_tip"]
    if not tip:
        return

    with st.container(border=True):
        st.markdown(f"#### 💡 {tip['title']}")
        st.markdown(tip["message"])
        if tip.get("source"):
            st.caption(f"Source: {tip['source']}")
        st.caption(WELLNESS_DISCLAIMER)

        c1, c2, c3, c4 = st.columns(4)
        if c1.button("👍 Helpful", key="tip_helpful"):
            mark_helpful(tip["id"], True)
            st.session_state["current_tip"] = None
            st.rerun()
        if c2.button("👎 Not for me", key="tip_unhelpful"):
            mark_helpful(tip["id"], False)
            st.session_state["current_tip"] = None
            st.rerun()
        if c3.button("Dismiss", key="tip_dismiss"):
            dismiss_tip(tip["id"])
            st.session_state["current_tip"] = None
            st.rerun()
        if c4.button("Snooze 12h", key="tip_snooze"):
            snooze_tips()
            st.session_state["current_tip"] = None
            st.rerun()


def render_log_form():
    st.markdown("### ➕ Log a movement")

    with st.form("log_entry", clear_on_submit=True):
        bristol_type = st.radio(
            "Bristol type *",
            list(BRISTOL_TYPES),
            format_func=lambda t: f"Type {t}: {BRISTOL_TYPES[t]['name']} ({BRISTOL_TYPES[t]['desc']})",
            index=3,
            horizontal=False,
        )

        c1, c2 = st.columns(2)
        with c1:
            color = st.selectbox(
                "Color (optional)",
                [None] + list(STOOL_COLORS),
                format_func=lambda c: "—" if c is None else STOOL_COLORS[c]["name"],
            )
            entry_date = st.date_input("Date", value=date.today(), max_value=date.today())
        with c2:
            tags = st.multiselect(
                "Tags",
                list(QUICK_TAGS),
                format_func=lambda t: QUICK_TAGS[t],
            )
            entry_time = st.time_input("Time (past days only)", value=datetime.now().time())

        notes = st.text_input("Notes (optional)")
        submitted = st.form_submit_button("Save log")

    if not submitted:
        return

    try:
        add_entry(
            bristol_type,
            tags=tags,
            notes=notes,
            color=color,
            for_date=entry_date.isoformat(),
            for_time=entry_time.strftime("%H:%M"),
        )
    except ValueError as e:
        st.error(str(e))
        return

    increment_entry_count()
    _, newly = check_achievements(load_history())
    unlock_queue().push(newly, time.monotonic())
    st.success("Logged ✅")
    st.rerun()


def render_today(history):
    entries = today_entries(history)
    st.markdown("### 🗓️ Today")
    if not entries:
        st.info("Nothing logged yet today.")
        return

    for e in entries:
        health = BRISTOL_TYPES[e["type"]]["health"]
        st.markdown(
            f"<span style='color:{HEALTH_COLORS[health]}'>●</span> "
            f"**{e['time']}** · Type {e['type']} ({BRISTOL_TYPES[e['type']]['name']})",
            unsafe_allow_html=True,
        )


def render_reminder(history):
    message = reminder_due(len(today_entries(history)))
    if message:
        st.info(f"⏰ {message}")


def render_rating_prompt():
    data = load_rating_data()
    if not should_request_rating(data):
        return

    st.info("Enjoying Flushy? A quick rating helps a lot 🙏")
    if st.button("Maybe later", key="rating_later"):
        mark_rating_requested()
        st.rerun()


# ==================================================
# MAIN RENDER
# ==================================================
def render_home():
    st.subheader("🚽 Flushy")

    history = load_history()
    _, newly = track_daily_activity(history)
    unlock_queue().push(newly, time.monotonic())

    render_unlock_toast()
    render_reminder(history)
    render_digest(history)
    render_stats(history)
    render_tip(history)

    st.markdown("---")
    render_log_form()

    st.markdown("---")
    render_today(history)
    render_rating_prompt()
