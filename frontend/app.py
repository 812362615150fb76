"""Streamlit entrypoint — navigation controller.

Handles auth-conditional routing via st.navigation():
- Signed out:        Login only (hidden from sidebar)
- Not onboarded:     Onboarding only
- Onboarded:         Dashboard, assistants, scanners, calendar (+ Admin for admins),
                     listed with st.page_link; the profile editor stays off the menu

Each page also calls ``utils.guard()`` so a stale link still lands on the
right route.

Run with:
    streamlit run frontend/app.py
"""

import logging

import streamlit as st
from utils import PAGE_FILES, get_auth, show_sidebar, t

from fitboost.config import settings
from fitboost.routing import Route

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

st.set_page_config(
    page_title="FitBoost AI",
    page_icon="💪",
    layout="wide",
    initial_sidebar_state="expanded",
)

if "lang" not in st.session_state:
    st.session_state["lang"] = settings.language

user = get_auth().user


def _page(route: Route, title: str, icon: str, default: bool = False) -> st.Page:
    return st.Page(
        PAGE_FILES[route],
        title=title,
        icon=icon,
        url_path=route.value.replace("-", "_"),
        default=default,
    )


# ── Navigation routing ─────────────────────────────────────────────────────────
if user is None:
    pg = st.navigation([_page(Route.LOGIN, "Login", "🔑", default=True)], position="hidden")
elif not user.onboarded:
    pg = st.navigation(
        [_page(Route.ONBOARDING, t("onboarding_title"), "📝", default=True)],
        position="hidden",
    )
else:
    menu = [
        _page(Route.DASHBOARD, t("nav_dashboard"), "🏠", default=True),
        _page(Route.TRAINER, t("nav_trainer"), "🏋️"),
        _page(Route.NUTRITIONIST, t("nav_nutritionist"), "🥗"),
        _page(Route.BODY_SCAN, t("nav_body_scan"), "🧍"),
        _page(Route.FOOD_SCAN, t("nav_food_scan"), "📷"),
        _page(Route.WORKOUT_CALENDAR, t("nav_calendar"), "📅"),
    ]
    if user.is_admin:
        menu.append(_page(Route.ADMIN, t("nav_admin"), "🛡️"))
    # The profile editor is registered but only reachable through the
    # sidebar's edit button, which sets the editing flag.
    editor = _page(Route.ONBOARDING, t("nav_profile"), "📝")
    pg = st.navigation(menu + [editor], position="hidden")
    with st.sidebar:
        for page in menu:
            st.page_link(page)
    show_sidebar()

pg.run()
