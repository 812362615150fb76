"""Personal Trainer page — chat plus the schedule and technique helpers."""

import streamlit as st
from utils import get_auth, queue_prompt, require_user, render_chat, t

from fitboost.coaching import EXERCISE_DATABASE, schedule_prompt, technique_prompt
from fitboost.models import WEEKDAYS
from fitboost.routing import Route

user = require_user(Route.TRAINER)

st.title(f"🏋️ {t('trainer_title')}")

col_schedule, col_technique = st.columns(2)

with col_schedule:
    with st.expander(f"📅 {t('schedule_button')}"):
        with st.form("schedule_form"):
            days = st.multiselect(t("schedule_days"), options=WEEKDAYS, default=user.workout_days or [])
            create = st.form_submit_button(t("schedule_create"))
        if create and days:
            get_auth().update_profile(workout_days=days)
            queue_prompt("trainer", schedule_prompt(days, user.goal))

with col_technique:
    with st.expander(f"🎯 {t('technique_button')}"):
        body_part = st.selectbox(t("technique_body_part"), options=list(EXERCISE_DATABASE))
        exercise = st.selectbox(t("technique_exercise"), options=EXERCISE_DATABASE[body_part])
        if st.button(t("technique_send"), use_container_width=True):
            queue_prompt("trainer", technique_prompt(exercise))

render_chat("trainer")
