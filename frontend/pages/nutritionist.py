"""Nutritionist page."""

import streamlit as st
from utils import guard, render_chat, t

from fitboost.routing import Route

guard(Route.NUTRITIONIST)

st.title(f"🥗 {t('nutritionist_title')}")

render_chat("nutritionist")
