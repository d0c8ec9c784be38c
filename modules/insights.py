# modules/insights.py
"""
Insights page: distributions, detected patterns and the
weekly digest on demand.
"""

import time

import pandas as pd
import streamlit as st

from core.achievements import track_insights_view
from core.calculations import color_distribution, tag_correlations, type_distribution
from core.digest import calculate_digest_data, has_digest_data
from core.journal_store import load_history
from core.patterns import detect_patterns, pattern_summary
from core.profile_store import condition_notes, load_profile
from core.streaks import all_entries
from modules.home import render_unlock_toast, unlock_queue

PATTERN_LABELS = {
    "consecutive_type_1_2": "Harder stools lately",
    "consecutive_type_6_7": "Looser stools lately",
    "no_entries_days": "No logs for a few days",
    "consistent_healthy": "Consistently healthy",
    "coffee_correlation": "Coffee and looser stools",
    "stress_correlation": "Stress and irregular stools",
    "fiber_improvement": "Fiber is helping",
}


def render_digest(history):
    digest = calculate_digest_data(history)
    if not has_digest_data(digest):
        st.info("No weekly digest yet. Log during a full week to see one.")
        return

    st.markdown(f"**{digest['dateRange']}**: {digest['message']}")

    cols = st.columns(7)
    for col, dot in zip(cols, digest["dailyDots"]):
        col.markdown(
            f"<div style='text-align:center'>{dot['day']}<br>"
            f"<span style='color:{dot['color']};font-size:1.6rem'>●</span></div>",
            unsafe_allow_html=True,
        )

    c1, c2, c3 = st.columns(3)
    c1.metric("Logs", digest["totalLogs"])
    indicator = digest["healthIndicator"]
    c2.metric("Health", indicator["label"] if indicator else "—")
    c3.metric("Peak time", digest["peakHour"] or "—")

    if digest["streakMessage"]:
        st.success(f"🔥 {digest['streak']} day streak. {digest['streakMessage']}")


def render_insights():
    st.subheader("🔍 Insights")

    history = load_history()

    # count each visit once, not on every rerun
    if not st.session_state.get("insights_tracked"):
        _, newly = track_insights_view(history)
        st.session_state["insights_tracked"] = True
        unlock_queue().push(newly, time.monotonic())
    render_unlock_toast()

    if not history:
        st.info("Log a few movements to unlock insights.")
        return

    summary = pattern_summary(all_entries(history))
    if summary:
        st.markdown(f"> {summary}")

    profile = load_profile()
    patterns = detect_patterns(all_entries(history), profile=profile)["patterns"]
    if patterns:
        st.markdown("### 🧩 Patterns")
        for p in patterns:
            label = PATTERN_LABELS.get(p["type"], p["type"])
            note = " (expected for your profile)" if p["isExpected"] else ""
            st.markdown(f"• **{label}** · {round(p['confidence'] * 100)}% confidence{note}")

    for note in condition_notes(profile):
        st.caption(note)

    # --------------------------------------------------
    # Distributions
    # --------------------------------------------------
    st.markdown("### 📊 Bristol types")
    types = pd.DataFrame(type_distribution(history))
    st.bar_chart(types.set_index("type")["count"])

    colors = color_distribution(history)
    if colors:
        st.markdown("### 🎨 Colors")
        st.dataframe(
            pd.DataFrame(colors)[["name", "count"]].rename(columns={"name": "Color", "count": "Logs"}),
            use_container_width=True,
            hide_index=True,
        )

    tags = tag_correlations(history)
    if tags:
        st.markdown("### 🏷️ Tags")
        st.dataframe(
            pd.DataFrame(tags)[["label", "count", "avgType"]].rename(
                columns={"label": "Tag", "count": "Logs", "avgType": "Avg type"}
            ),
            use_container_width=True,
            hide_index=True,
        )

    st.markdown("---")
    st.markdown("### 📬 Last week")
    render_digest(history)
