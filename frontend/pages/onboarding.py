"""Onboarding page — collects the coaching profile; doubles as the profile editor."""

import streamlit as st
from pydantic import ValidationError
from utils import get_auth, go, require_user, t

from fitboost.models import TrainingLevel, UserGoal
from fitboost.routing import Route

user = require_user(Route.ONBOARDING)

editing = user.onboarded and st.session_state.get("editing_profile", False)

st.title(t("onboarding_edit_title") if editing else t("onboarding_title"))
st.caption(t("onboarding_subtitle"))

levels = list(TrainingLevel)
goals = list(UserGoal)

with st.form("onboarding_form"):
    col1, col2, col3 = st.columns(3)
    with col1:
        age = st.number_input(t("field_age"), min_value=12, max_value=100, value=user.age or 25, step=1)
    with col2:
        height = st.number_input(
            t("field_height"), min_value=100.0, max_value=250.0,
            value=float(user.height or 170.0), step=0.5,
        )
    with col3:
        weight = st.number_input(
            t("field_weight"), min_value=30.0, max_value=300.0,
            value=float(user.weight or 70.0), step=0.5,
        )

    level = st.selectbox(
        t("field_level"),
        options=levels,
        format_func=lambda lv: lv.value,
        index=levels.index(user.level) if user.level else 0,
    )
    goal = st.selectbox(
        t("field_goal"),
        options=goals,
        format_func=lambda g: g.value,
        index=goals.index(user.goal) if user.goal else 0,
    )

    col_save, col_cancel = st.columns([3, 1])
    with col_save:
        submitted = st.form_submit_button(t("onboarding_submit"), type="primary", use_container_width=True)
    with col_cancel:
        cancelled = st.form_submit_button(t("onboarding_cancel"), use_container_width=True, disabled=not editing)

if cancelled:
    st.session_state.pop("editing_profile", None)
    go(Route.DASHBOARD)

if submitted:
    try:
        get_auth().update_profile(
            age=int(age),
            height=float(height),
            weight=float(weight),
            level=level,
            goal=goal,
            onboarded=True,
        )
    except (ValueError, ValidationError) as exc:
        st.error(str(exc))
    else:
        st.session_state.pop("editing_profile", None)
        if editing:
            go(Route.DASHBOARD)
        # First onboarding: the navigation is rebuilt with the full page set.
        st.rerun()
