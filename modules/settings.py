# modules/settings.py
"""
Settings page for Flushy

Profile, theme, reminders, backup / restore,
report export and the full reset.
"""

from datetime import date, time

import streamlit as st

from core.app_state import reset_app
from core.backup import build_backup, create_backup, last_backup_date, restore_backup, should_show_backup_reminder
from core.journal_store import load_history
from core.profile_store import (
    AGE_RANGES,
    BIOLOGICAL_SEXES,
    CONDITION_LABELS,
    HEALTH_CONDITIONS,
    load_profile,
    save_profile,
)
from core.report_exporter import (
    MONTHS,
    build_report_html,
    export_report_docx,
    export_report_pdf,
)
from core.settings_store import (
    THEMES,
    get_theme,
    load_reminder_settings,
    next_reminder_at,
    save_reminder_settings,
    set_theme,
)
from utils.dates import now_millis


# ==================================================
# SECTIONS
# ==================================================
def render_profile():
    st.markdown("### 👤 Profile")
    profile = load_profile()

    with st.form("profile_form"):
        age = st.selectbox(
            "Age range",
            [None] + AGE_RANGES,
            index=([None] + AGE_RANGES).index(profile.get("ageRange")),
            format_func=lambda a: "Prefer not to say" if a is None else a,
        )
        sex = st.selectbox(
            "Biological sex",
            [None] + BIOLOGICAL_SEXES,
            index=([None] + BIOLOGICAL_SEXES).index(profile.get("biologicalSex")),
            format_func=lambda s: "Prefer not to say" if s is None else s,
        )
        conditions = st.multiselect(
            "Health conditions",
            HEALTH_CONDITIONS,
            default=profile["conditions"],
            format_func=lambda c: CONDITION_LABELS.get(c, c),
        )
        submitted = st.form_submit_button("Save profile")

    if submitted:
        try:
            save_profile({
                "ageRange": age,
                "biologicalSex": sex,
                "conditions": conditions,
                "profileCompletedAt": now_millis(),
            })
            st.success("Profile saved")
        except ValueError as e:
            st.error(str(e))


def render_theme():
    st.markdown("### 🎨 Theme")
    current = get_theme()
    ids = list(THEMES)
    choice = st.selectbox(
        "Theme",
        ids,
        index=ids.index(current),
        format_func=lambda t: THEMES[t]["name"],
    )
    if choice != current:
        set_theme(choice)
        st.rerun()


def render_reminders():
    st.markdown("### 🔔 Daily reminder")
    settings = load_reminder_settings()

    with st.form("reminder_form"):
        enabled = st.checkbox("Remind me to log", value=settings["enabled"])
        at = st.time_input("At", value=time(settings["hour"], settings["minute"]))
        submitted = st.form_submit_button("Save reminder")

    if submitted:
        save_reminder_settings(enabled, at.hour, at.minute)
        st.success("Reminder saved")

    upcoming = next_reminder_at()
    if upcoming:
        st.caption(f"Next reminder: {upcoming.strftime('%a %d %b, %H:%M')}")


def render_backup():
    st.markdown("### 💾 Backup")

    if should_show_backup_reminder():
        st.warning("It's been a while since your last backup.")

    last = last_backup_date()
    st.caption(f"Last backup: {last.split('T')[0] if last else 'never'}")

    if st.button("Create backup"):
        path = create_backup()
        st.download_button(
            "⬇️ Download backup",
            data=path.read_bytes(),
            file_name=path.name,
            mime="application/json",
        )

    uploaded = st.file_uploader("Restore from backup", type=["json"])
    if st.button("Restore", disabled=uploaded is None):
        content = uploaded.getvalue().decode("utf-8", errors="replace") if uploaded else None
        result = restore_backup(content)
        if result["success"]:
            st.success(result["message"])
        elif content is not None:
            st.error(result["message"])

    with st.expander("Preview backup contents"):
        st.json(build_backup())


def render_export():
    st.markdown("### 📄 Export report")
    history = load_history()

    period = st.radio("Period", ["all", "month"], format_func=lambda p: "All time" if p == "all" else "Month", horizontal=True)
    year = month = None
    if period == "month":
        c1, c2 = st.columns(2)
        year = c1.number_input("Year", min_value=2000, max_value=2100, value=date.today().year)
        month = c2.selectbox(
            "Month",
            list(range(1, 13)),
            index=date.today().month - 1,
            format_func=lambda m: MONTHS[m - 1],
        )
        year = int(year)

    c1, c2, c3 = st.columns(3)
    c1.download_button(
        "HTML",
        data=build_report_html(history, period, year, month),
        file_name="flushy_report.html",
        mime="text/html",
    )
    if c2.button("PDF"):
        path = export_report_pdf(history, period, year, month)
        st.download_button("⬇️ Download PDF", data=path.read_bytes(), file_name=path.name)
    if c3.button("DOCX"):
        path = export_report_docx(history, period, year, month)
        st.download_button("⬇️ Download DOCX", data=path.read_bytes(), file_name=path.name)


def render_reset():
    st.markdown("### ⚠️ Reset")
    st.caption("Deletes all logs, profile and settings. This cannot be undone.")
    confirm = st.checkbox("I understand")
    if st.button("Reset everything", disabled=not confirm):
        reset_app()
        st.session_state.clear()
        st.rerun()


# ==================================================
# MAIN RENDER
# ==================================================
def render_settings():
    st.subheader("⚙️ Settings")

    render_profile()
    st.markdown("---")
    render_theme()
    st.markdown("---")
    render_reminders()
    st.markdown("---")
    render_backup()
    st.markdown("---")
    render_export()
    st.markdown("---")
    render_reset()
