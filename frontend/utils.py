"""Shared UI utilities used across all Streamlit pages.

Import at the top of each page:
    from utils import guard, show_sidebar, t
"""

import asyncio
from collections.abc import Coroutine
from typing import Any, TypeVar

import streamlit as st

from fitboost.capture import CaptureError, ScanSession
from fitboost.chat_store import ChatSessionStore
from fitboost.coaching import GREETINGS, QUICK_ACTIONS
from fitboost.config import settings
from fitboost.conversation import ConversationController
from fitboost.i18n_service import get_supported_languages, translate
from fitboost.models import AssistantType, ChatMessage, ScanType, UserProfile
from fitboost.profile_store import AuthContext
from fitboost.routing import Route, resolve_route
from fitboost.storage import LocalStorage, MemoryStorage, create_storage

T = TypeVar("T")

PAGE_FILES: dict[Route, str] = {
    Route.LOGIN: "pages/login.py",
    Route.ONBOARDING: "pages/onboarding.py",
    Route.DASHBOARD: "pages/dashboard.py",
    Route.TRAINER: "pages/trainer.py",
    Route.NUTRITIONIST: "pages/nutritionist.py",
    Route.BODY_SCAN: "pages/body_scan.py",
    Route.FOOD_SCAN: "pages/food_scan.py",
    Route.WORKOUT_CALENDAR: "pages/workout_calendar.py",
    Route.ADMIN: "pages/admin.py",
}

# Per-user widget state dropped on logout.
_USER_STATE_PREFIXES = ("conversation_", "scan_", "_pending_prompt_", "_confirm_delete")


# ── Context ───────────────────────────────────────────────────────────────────

@st.cache_resource
def get_storage() -> LocalStorage:
    """Profiles and chat histories, shared by every browser session."""
    return create_storage(settings)


def get_auth() -> AuthContext:
    """Return this browser session's auth context.

    The session pointer lives in a device store held by the context itself,
    so it never leaks to another browser session.
    """
    if "auth" not in st.session_state:
        st.session_state["auth"] = AuthContext(get_storage(), settings, device=MemoryStorage())
    return st.session_state["auth"]


def current_lang() -> str:
    return st.session_state.get("lang", settings.language)


def t(key: str, **fmt: object) -> str:
    """Translate *key* into the session's language."""
    return translate(key, current_lang(), **fmt)


def run_async(coro: Coroutine[Any, Any, T]) -> T:
    """Drive a coroutine from Streamlit's synchronous script thread."""
    return asyncio.run(coro)


# ── Navigation ────────────────────────────────────────────────────────────────

def guard(route: Route) -> UserProfile | None:
    """Redirect away from *route* when the current user may not see it.

    Call this as the **first statement** in every page (after imports).
    """
    auth = get_auth()
    target = resolve_route(route, auth.user, st.session_state.get("editing_profile", False))
    if target is not route:
        st.switch_page(PAGE_FILES[target])
    return auth.user


def require_user(route: Route) -> UserProfile:
    """Guard *route* and return the signed-in profile, halting the page otherwise."""
    user = guard(route)
    if user is None:
        st.stop()
    return user


def go(route: Route) -> None:
    st.switch_page(PAGE_FILES[route])


def logout() -> None:
    """End the session and forget all per-user widget state."""
    get_auth().logout()
    for key in list(st.session_state.keys()):
        if str(key).startswith(_USER_STATE_PREFIXES) or key == "editing_profile":
            st.session_state.pop(key, None)


def show_sidebar() -> None:
    """Render the signed-in user's panel: language, profile edit, logout."""
    user = get_auth().user
    if user is None:
        return
    with st.sidebar:
        st.divider()
        st.markdown(f"**{user.name}**  \n{user.email}")

        languages = {lang["code"]: lang["name"] for lang in get_supported_languages()}
        codes = list(languages)
        selected = st.selectbox(
            t("language_label"),
            options=codes,
            format_func=lambda c: languages[c],
            index=codes.index(current_lang()) if current_lang() in codes else 0,
            key="_lang_selector",
        )
        if selected != current_lang():
            st.session_state["lang"] = selected
            st.rerun()

        if st.button(f"✏️ {t('edit_profile')}", use_container_width=True):
            st.session_state["editing_profile"] = True
            go(Route.ONBOARDING)
        if st.button(f"🚪 {t('logout')}", use_container_width=True):
            logout()
            st.rerun()


# ── Chat widget ───────────────────────────────────────────────────────────────

def get_conversation(role: AssistantType) -> ConversationController:
    """Return the controller for *role*, one per user per browser session."""
    auth = get_auth()
    user = auth.user
    if user is None:
        st.stop()
    key = f"conversation_{role}_{user.email}"
    if key not in st.session_state:
        store = ChatSessionStore(get_storage(), user.email, role, GREETINGS[role])
        st.session_state[key] = ConversationController(auth, store, language=current_lang())
    controller: ConversationController = st.session_state[key]
    controller.language = current_lang()
    return controller


def queue_prompt(role: AssistantType, prompt: str) -> None:
    """Schedule *prompt* to be sent the next time the *role* chat renders."""
    st.session_state[f"_pending_prompt_{role}"] = prompt


def _render_message(message: ChatMessage) -> None:
    avatar = "🧑" if message.role == "user" else "🤖"
    with st.chat_message(message.role, avatar=avatar):
        st.markdown(message.text)
        grounding = message.grounding_metadata
        if grounding and grounding.sources:
            with st.expander(f"🌐 {t('chat_sources')}"):
                for source in grounding.sources:
                    st.markdown(f"- [{source.title or source.uri}]({source.uri})")


def _render_history(controller: ConversationController) -> None:
    with st.sidebar:
        st.divider()
        st.markdown(f"**{t('chat_history')}**")
        if st.button(f"➕ {t('chat_new')}", use_container_width=True, key="_chat_new"):
            controller.new_chat()
            st.rerun()

        sessions = controller.sessions()
        if not sessions:
            st.caption(t("chat_history_empty"))
        for session in sessions:
            col_load, col_del = st.columns([5, 1])
            with col_load:
                label = session.last_message
                if session.id == controller.session_id:
                    label = f"▶ {label}"
                if st.button(label, key=f"_load_{session.id}", use_container_width=True):
                    controller.load(session)
                    st.rerun()
            with col_del:
                if st.button("✕", key=f"_del_{session.id}", help=t("chat_delete")):
                    controller.delete(session.id)
                    st.rerun()


def render_chat(role: AssistantType) -> None:
    """Render the transcript, history panel, quick actions and input for *role*."""
    controller = get_conversation(role)
    _render_history(controller)

    actions = QUICK_ACTIONS[role]
    if actions:
        st.caption(t("chat_quick_actions"))
        cols = st.columns(len(actions))
        for col, action in zip(cols, actions):
            if col.button(action.label, key=f"_qa_{role}_{action.label}", use_container_width=True):
                queue_prompt(role, action.prompt)

    for message in controller.messages:
        _render_message(message)

    typed = st.chat_input(t("chat_placeholder"), disabled=controller.busy)
    prompt = typed or st.session_state.pop(f"_pending_prompt_{role}", None)
    if prompt:
        with st.chat_message("user", avatar="🧑"):
            st.markdown(prompt)
        with st.spinner(t("chat_thinking")):
            run_async(controller.send(prompt))
        st.rerun()


# ── Scanner widget ────────────────────────────────────────────────────────────

def get_scan_session(scan_type: ScanType) -> ScanSession:
    key = f"scan_{scan_type}"
    if key not in st.session_state:
        st.session_state[key] = ScanSession(scan_type, language=current_lang())
    scan: ScanSession = st.session_state[key]
    scan.language = current_lang()
    return scan


def render_scanner(scan_type: ScanType) -> None:
    """Upload or camera capture for every slot, then the analysis."""
    scan = get_scan_session(scan_type)

    mode = st.radio(
        t("scan_mode"),
        options=["upload", "camera"],
        format_func=lambda m: t(f"scan_mode_{m}"),
        horizontal=True,
        key=f"_scan_mode_{scan_type}",
    )
    # The camera widget is only mounted while camera mode is on; leaving the
    # mode unmounts it and the browser releases the stream.
    if mode == "camera":
        scan.start_camera()
    else:
        scan.stop_camera()

    cols = st.columns(len(scan.slots))
    for col, slot in zip(cols, scan.slots):
        with col:
            st.markdown(f"**{t(f'scan_slot_{slot}')}**")
            if scan.camera_active:
                shot = st.camera_input(t("scan_take_photo"), key=f"_cam_{scan_type}_{slot}")
            else:
                shot = st.file_uploader(
                    t("scan_mode_upload"),
                    type=["jpg", "jpeg", "png", "webp"],
                    key=f"_file_{scan_type}_{slot}",
                )
            if shot is not None:
                marker = f"_captured_{scan_type}_{slot}"
                if st.session_state.get(marker) != shot.file_id:
                    try:
                        scan.capture(slot, shot.getvalue())
                        st.session_state[marker] = shot.file_id
                    except CaptureError:
                        st.error(t("scan_capture_error"))
            image = scan.image(slot)
            if image is not None:
                st.image(image.data_url, use_container_width=True)

    col_go, col_reset = st.columns([2, 1])
    with col_go:
        if st.button(t("scan_analyze"), type="primary", disabled=not scan.ready,
                     use_container_width=True):
            with st.spinner(t("scan_analyzing")):
                run_async(scan.analyze())
    with col_reset:
        if st.button(t("scan_reset"), use_container_width=True):
            scan.reset()
            for key in list(st.session_state.keys()):
                if str(key).startswith((f"_captured_{scan_type}", f"_file_{scan_type}",
                                        f"_cam_{scan_type}")):
                    st.session_state.pop(key, None)
            st.rerun()

    if not scan.ready:
        st.info(t("scan_waiting"))
    if scan.result is not None:
        st.divider()
        st.markdown(scan.result.text)
