"""Workout calendar page — month view of training days and the weekly split."""

from datetime import date

import streamlit as st
from utils import go, queue_prompt, require_user, t

from fitboost.models import WEEKDAYS
from fitboost.routing import Route
from fitboost.schedule import month_grid, slot_for, workout_prompt, workout_split

user = require_user(Route.WORKOUT_CALENDAR)

st.title(f"📅 {t('calendar_title')}")

today = date.today()
split = workout_split(user.workout_days)

if not split:
    st.info(t("calendar_no_days"))
    if st.button(t("nav_trainer")):
        go(Route.TRAINER)
    st.stop()

today_slot = slot_for(user, today)
if today_slot:
    st.success(t("calendar_today_workout", split=today_slot.split))
else:
    st.info(t("calendar_rest_day"))

# ── Month grid ────────────────────────────────────────────────────────────────
header = st.columns(7)
for col, name in zip(header, WEEKDAYS):
    col.markdown(f"**{name[:3]}**")

for week in month_grid(today.year, today.month):
    cols = st.columns(7)
    for col, day in zip(cols, week):
        if day is None:
            col.write("")
            continue
        slot = slot_for(user, day)
        label = f"{day.day}"
        if day == today:
            label = f"**[{label}]**"
        if slot:
            label += f"  \n🏋️ {slot.split[-1]}"
        col.markdown(label)

# ── Weekly split ──────────────────────────────────────────────────────────────
st.divider()
for slot in split:
    col_name, col_btn = st.columns([4, 1])
    col_name.markdown(f"**{slot.split}** — {slot.day}")
    if col_btn.button(t("calendar_open_workout"), key=f"_open_split_{slot.index}"):
        queue_prompt("trainer", workout_prompt(slot, user.goal))
        go(Route.TRAINER)
