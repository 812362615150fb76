"""Dashboard page — entry cards for every module."""

import streamlit as st
from utils import go, require_user, t

from fitboost.routing import Route

user = require_user(Route.DASHBOARD)

st.title(t("dashboard_greeting", name=user.name))
st.caption(t("dashboard_subtitle"))

_MODULES = [
    (Route.TRAINER, "🏋️", "nav_trainer", "module_trainer_desc"),
    (Route.NUTRITIONIST, "🥗", "nav_nutritionist", "module_nutritionist_desc"),
    (Route.BODY_SCAN, "🧍", "nav_body_scan", "module_body_scan_desc"),
    (Route.FOOD_SCAN, "📷", "nav_food_scan", "module_food_scan_desc"),
    (Route.WORKOUT_CALENDAR, "📅", "nav_calendar", "module_calendar_desc"),
]

cols = st.columns(2)
for i, (route, icon, title_key, desc_key) in enumerate(_MODULES):
    with cols[i % 2]:
        with st.container(border=True):
            st.markdown(f"### {icon} {t(title_key)}")
            st.write(t(desc_key))
            if st.button(t("module_open"), key=f"_open_{route.value}", use_container_width=True):
                go(route)

if user.goal:
    st.divider()
    c1, c2, c3 = st.columns(3)
    c1.metric(t("field_goal"), user.goal.value)
    c2.metric(t("field_level"), user.level.value if user.level else "—")
    c3.metric(t("field_weight"), f"{user.weight:g} kg" if user.weight else "—")
