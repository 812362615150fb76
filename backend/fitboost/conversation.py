"""Conversation controller: the send-message flow for one chat widget.

``Idle -> Sending -> Idle``. While a send is in flight further sends are
ignored. Each send appends the user message, awaits the gateway, then
appends exactly one assistant message and persists the transcript.

A reply whose conversation was swapped out mid-flight (new chat, load or
delete of the active session) is discarded rather than appended to the
wrong transcript.
"""

import logging
from collections.abc import Awaitable, Callable
from enum import Enum

from fitboost import llm_service
from fitboost.chat_store import ChatSessionStore
from fitboost.config import settings
from fitboost.i18n_service import translate
from fitboost.models import (
    AIResponse,
    AssistantType,
    ChatMessage,
    ChatSession,
    UserProfile,
    new_id,
)
from fitboost.profile_store import AuthContext

logger = logging.getLogger(__name__)

SendFn = Callable[
    [str, list[ChatMessage], UserProfile, AssistantType, str],
    Awaitable[AIResponse],
]


class ConversationState(str, Enum):
    IDLE = "idle"
    SENDING = "sending"


async def _default_send(
    message: str,
    history: list[ChatMessage],
    profile: UserProfile,
    role: AssistantType,
    language: str,
) -> AIResponse:
    return await llm_service.send_message_to_ai(message, history, profile, role, language)


class ConversationController:
    """Orchestrates one assistant conversation."""

    def __init__(
        self,
        auth: AuthContext,
        sessions: ChatSessionStore,
        send_fn: SendFn | None = None,
        language: str | None = None,
    ) -> None:
        self._auth = auth
        self._sessions = sessions
        self._send_fn = send_fn or _default_send
        self.language = language or settings.language
        self._state = ConversationState.IDLE

    @property
    def role(self) -> AssistantType:
        return self._sessions.assistant_type

    @property
    def state(self) -> ConversationState:
        return self._state

    @property
    def busy(self) -> bool:
        return self._state is ConversationState.SENDING

    @property
    def messages(self) -> list[ChatMessage]:
        return self._sessions.messages

    @property
    def session_id(self) -> str:
        return self._sessions.session_id

    def _token(self) -> tuple[str, int]:
        return (self._sessions.session_id, self._sessions.revision)

    def _save(self) -> None:
        """Persist the transcript. A failed write is logged and the chat carries on."""
        try:
            self._sessions.save_current()
        except OSError:
            logger.exception("Could not save %s transcript %s", self.role, self.session_id)

    async def send(self, text: str) -> ChatMessage | None:
        """Send *text* to the assistant.

        Returns:
            The appended assistant message, or ``None`` when the send was
            ignored (blank text, busy, signed out) or its reply went stale.
        """
        profile = self._auth.user
        if not text.strip() or self.busy or profile is None:
            return None

        history = self._sessions.messages
        self._sessions.append(ChatMessage(id=new_id(), role="user", text=text))

        token = self._token()
        self._state = ConversationState.SENDING
        try:
            self._save()
            response = await self._send_fn(text, history, profile, self.role, self.language)
        except Exception:
            logger.exception("Send failed in %s conversation", self.role)
            response = AIResponse(text=translate("errors.chat_comm", self.language))
        finally:
            self._state = ConversationState.IDLE

        if self._token() != token:
            logger.info("Discarding stale %s reply for session %s", self.role, token[0])
            return None

        reply = ChatMessage(
            id=new_id(),
            role="assistant",
            text=response.text,
            grounding_metadata=response.grounding_metadata,
        )
        self._sessions.append(reply)
        self._save()
        return reply

    # ── Session management ────────────────────────────────────────────────────

    def sessions(self) -> list[ChatSession]:
        return self._sessions.list_sessions()

    def new_chat(self) -> str:
        return self._sessions.start_new_chat()

    def load(self, session: ChatSession) -> None:
        self._sessions.load_session(session)

    def delete(self, session_id: str) -> None:
        self._sessions.delete_session(session_id)
