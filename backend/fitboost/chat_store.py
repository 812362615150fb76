"""Chat session store.

Transcripts are partitioned by (user email, assistant type): each
partition is one storage key holding a JSON array of ``ChatSession``
records, newest first. A store instance is bound to a single partition
and also holds the in-memory transcript of the active conversation.
"""

import logging

from pydantic import TypeAdapter, ValidationError

from fitboost.models import (
    ASSISTANT_TYPES,
    AssistantType,
    ChatMessage,
    ChatSession,
    new_id,
    now_ms,
)
from fitboost.storage import LocalStorage, history_key

logger = logging.getLogger(__name__)

GREETING_ID = "greeting"
PREVIEW_LENGTH = 60

_SESSIONS = TypeAdapter(list[ChatSession])


def delete_user_histories(storage: LocalStorage, email: str) -> None:
    """Remove every chat-history partition owned by *email*."""
    for assistant_type in ASSISTANT_TYPES:
        storage.remove_item(history_key(email, assistant_type))


def make_preview(messages: list[ChatMessage]) -> str:
    """Short preview string derived from the last message."""
    return messages[-1].text[:PREVIEW_LENGTH] + "..."


class ChatSessionStore:
    """Persistence plus active-transcript state for one partition."""

    def __init__(
        self,
        storage: LocalStorage,
        user_email: str,
        assistant_type: AssistantType,
        greeting: str,
    ) -> None:
        self._storage = storage
        self.user_email = user_email
        self.assistant_type = assistant_type
        self.greeting = greeting
        self._key = history_key(user_email, assistant_type)
        self._session_id = new_id()
        self._messages: list[ChatMessage] = [self._greeting_message()]
        self._revision = 0

    # ── Active transcript ─────────────────────────────────────────────────────

    @property
    def session_id(self) -> str:
        return self._session_id

    @property
    def messages(self) -> list[ChatMessage]:
        return list(self._messages)

    @property
    def revision(self) -> int:
        """Bumped whenever the active transcript is swapped out."""
        return self._revision

    def _greeting_message(self) -> ChatMessage:
        return ChatMessage(id=GREETING_ID, role="assistant", text=self.greeting)

    def append(self, message: ChatMessage) -> None:
        self._messages.append(message)

    def start_new_chat(self) -> str:
        """Begin a fresh transcript. Nothing is written until a real message is saved."""
        self._session_id = new_id()
        self._messages = [self._greeting_message()]
        self._revision += 1
        return self._session_id

    def load_session(self, session: ChatSession) -> None:
        """Replace the active transcript with a stored one (no merge)."""
        self._check_partition(session)
        self._session_id = session.id
        self._messages = list(session.messages)
        self._revision += 1

    # ── Persistence ───────────────────────────────────────────────────────────

    def _check_partition(self, session: ChatSession) -> None:
        if session.user_id != self.user_email or session.type != self.assistant_type:
            raise ValueError(
                f"Session {session.id} belongs to {session.user_id}/{session.type}, "
                f"not {self.user_email}/{self.assistant_type}."
            )

    def _read(self) -> list[ChatSession]:
        """Read the partition. Raises on malformed data."""
        raw = self._storage.get_item(self._key)
        if raw is None:
            return []
        return _SESSIONS.validate_json(raw)

    def _write(self, sessions: list[ChatSession]) -> None:
        self._storage.set_item(self._key, _SESSIONS.dump_json(sessions).decode("utf-8"))

    def list_sessions(self) -> list[ChatSession]:
        """Return the partition's sessions, most recently updated first.

        A malformed partition yields an empty list.
        """
        try:
            sessions = self._read()
        except ValidationError as exc:
            logger.error("Error loading history %s: %s", self._key, exc)
            return []
        return sorted(sessions, key=lambda s: s.timestamp, reverse=True)

    def save_session(self, session: ChatSession) -> bool:
        """Insert or replace *session* at the head of the partition.

        Sessions holding only the greeting are not persisted.

        Returns:
            ``True`` if the partition was written.

        Raises:
            ValueError: If *session* belongs to another partition.
        """
        self._check_partition(session)
        if len(session.messages) <= 1:
            return False

        try:
            sessions = self._read()
        except ValidationError as exc:
            logger.warning("Replacing corrupted history %s: %s", self._key, exc)
            sessions = []

        filtered = [s for s in sessions if s.id != session.id]
        self._write([session] + filtered)
        return True

    def current_session(self) -> ChatSession:
        """Snapshot the active transcript as a ``ChatSession``."""
        return ChatSession(
            id=self._session_id,
            user_id=self.user_email,
            type=self.assistant_type,
            timestamp=now_ms(),
            last_message=make_preview(self._messages),
            messages=list(self._messages),
        )

    def save_current(self) -> bool:
        """Persist the active transcript (skipped while it is greeting-only)."""
        return self.save_session(self.current_session())

    def delete_session(self, session_id: str) -> None:
        """Remove a stored session. Deleting the active one starts a new chat."""
        remaining = [s for s in self.list_sessions() if s.id != session_id]
        self._write(remaining)
        if session_id == self._session_id:
            self.start_new_chat()
