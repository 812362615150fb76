"""Login page — passwordless sign-in by email with auto-registration."""

import logging

import streamlit as st
from utils import get_auth, guard, run_async, t

from fitboost.profile_store import InvalidEmailError
from fitboost.routing import Route

logger = logging.getLogger(__name__)

guard(Route.LOGIN)

_, col, _ = st.columns([1, 1.5, 1])
with col:
    st.markdown(
        f"<h2 style='text-align:center;margin-bottom:0.4rem;'>💪 {t('login_title')}</h2>",
        unsafe_allow_html=True,
    )
    st.caption(t("login_subtitle"))

    with st.form("login_form"):
        email = st.text_input(t("login_email"), placeholder="voce@gmail.com")
        submitted = st.form_submit_button(t("login_button"), use_container_width=True)

    if submitted:
        try:
            with st.spinner():
                run_async(get_auth().login(email))
        except InvalidEmailError as exc:
            st.error(t(str(exc)))
        except Exception:
            logger.exception("Login failed")
            st.error(t("login_error_generic"))
        else:
            st.rerun()
