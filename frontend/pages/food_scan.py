"""Food scanner page — one plate photo, nutrition table."""

import streamlit as st
from utils import guard, render_scanner, t

from fitboost.routing import Route

guard(Route.FOOD_SCAN)

st.title(f"📷 {t('food_scan_title')}")
st.caption(t("food_scan_desc"))

render_scanner("food")
