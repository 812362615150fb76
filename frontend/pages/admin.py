"""Admin page — list, search and remove users."""

import streamlit as st
from utils import get_auth, require_user, t

from fitboost.routing import Route

user = require_user(Route.ADMIN)

auth = get_auth()

st.title(f"🛡️ {t('admin_title')}")

search = st.text_input(t("admin_search")).strip().lower()
users = [
    u for u in auth.get_all_users()
    if search in u.name.lower() or search in u.email.lower()
]
st.caption(t("admin_users_count", count=len(users)))

pending = st.session_state.get("_confirm_delete")
if pending:
    st.warning(t("admin_confirm", name=pending["name"], email=pending["email"]))
    col_yes, col_no = st.columns(2)
    if col_yes.button(t("admin_confirm_button"), type="primary"):
        auth.delete_user(pending["email"])
        st.session_state.pop("_confirm_delete", None)
        st.toast(t("admin_deleted", email=pending["email"]))
        st.rerun()
    if col_no.button(t("onboarding_cancel")):
        st.session_state.pop("_confirm_delete", None)
        st.rerun()

for u in users:
    with st.container(border=True):
        col_info, col_action = st.columns([5, 1])
        with col_info:
            badge = f" `{t('admin_badge')}`" if u.is_admin else ""
            st.markdown(f"**{u.name}**{badge}  \n{u.email}")
            details = [v for v in (
                u.goal.value if u.goal else None,
                u.level.value if u.level else None,
                f"{u.age}" if u.age else None,
            ) if v]
            if details:
                st.caption(" · ".join(details))
        with col_action:
            if st.button(t("admin_delete"), key=f"_del_user_{u.email}", disabled=u.is_admin):
                if u.email == user.email:
                    st.error(t("admin_self_delete"))
                else:
                    st.session_state["_confirm_delete"] = {"email": u.email, "name": u.name}
                    st.rerun()
