import logging

import streamlit as st

from core.app_state import complete_onboarding, is_onboarded
from core.settings_store import THEMES, get_theme, restore_schedule, scheduled_reminder
from modules.achievements import render_achievements
from modules.home import render_home
from modules.insights import render_insights
from modules.settings import render_settings
from modules.timeline import render_timeline
from utils.logger import setup_logger

setup_logger()
logger = logging.getLogger("flushy")

st.set_page_config(page_title="Flushy", page_icon="🚽", layout="wide")


def apply_theme():
    theme = THEMES[get_theme()]
    st.markdown(
        f"""
        <style>
        .flushy-card {{
            padding: 1rem;
            border-radius: 12px;
            border-left: 4px solid {theme['primary']};
            margin-bottom: 1rem;
        }}
        .flushy-muted {{ color: #9ca3af; font-size: 0.9rem; }}
        </style>
        """,
        unsafe_allow_html=True,
    )


def render_onboarding():
    st.title("Welcome to Flushy 🚽")
    st.markdown(
        "Track your bowel movements with the Bristol Stool Scale, "
        "spot patterns, and build healthy habits. Everything stays on this device."
    )
    if st.button("Get started", type="primary"):
        complete_onboarding()
        st.rerun()


def render_error_screen():
    st.error("Oops! Something went wrong.")
    st.markdown("The app ran into an unexpected problem. Your data is safe.")
    if st.button("Try again"):
        st.rerun()


apply_theme()

if "reminder_restored" not in st.session_state:
    if scheduled_reminder() is None:
        restore_schedule()
    st.session_state["reminder_restored"] = True

st.sidebar.title("Flushy")

page = st.sidebar.radio(
    "Navigate",
    ["Home", "Timeline", "Insights", "Achievements", "Settings"]
)

try:
    if not is_onboarded():
        render_onboarding()
    elif page == "Home":
        render_home()
    elif page == "Timeline":
        render_timeline()
    elif page == "Insights":
        render_insights()
    elif page == "Achievements":
        render_achievements()
    elif page == "Settings":
        render_settings()
except Exception:
    logger.exception("Unhandled error while rendering %s", page)
    render_error_screen()
