"""Body scanner page — front and back photos, physique report."""

import streamlit as st
from utils import guard, render_scanner, t

from fitboost.routing import Route

guard(Route.BODY_SCAN)

st.title(f"🧍 {t('body_scan_title')}")
st.caption(t("body_scan_desc"))

render_scanner("body")
