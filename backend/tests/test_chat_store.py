"""Unit tests for the chat session store.

Tests cover:
- replace-by-id saving (filter-then-prepend) and the greeting-only threshold
- listing order and fail-closed parsing of malformed partitions
- new chat / load / delete semantics of the active transcript
- partition isolation between users and assistant types
"""

import pytest

from fitboost.chat_store import ChatSessionStore, delete_user_histories, make_preview
from fitboost.models import ChatMessage, ChatSession
from fitboost.storage import MemoryStorage, history_key

EMAIL = "user@x.com"
GREETING = "**Sessão Iniciada.**"


def _store(storage: MemoryStorage, role: str = "trainer", email: str = EMAIL) -> ChatSessionStore:
    return ChatSessionStore(storage, email, role, GREETING)  # type: ignore[arg-type]


def _msg(text: str, role: str = "user", msg_id: str | None = None) -> ChatMessage:
    return ChatMessage(id=msg_id or text, role=role, text=text)  # type: ignore[arg-type]


def _session(
    session_id: str,
    timestamp: int,
    texts: list[str],
    role: str = "trainer",
) -> ChatSession:
    messages = [_msg(GREETING, "assistant", "greeting")] + [_msg(t) for t in texts]
    return ChatSession(
        id=session_id,
        user_id=EMAIL,
        type=role,  # type: ignore[arg-type]
        timestamp=timestamp,
        last_message=make_preview(messages),
        messages=messages,
    )


# ── save / list ───────────────────────────────────────────────────────────────


class TestSaveSession:
    def test_saving_same_id_twice_keeps_one_entry(self) -> None:
        store = _store(MemoryStorage())
        store.save_session(_session("S1", 100, ["first"]))
        store.save_session(_session("S1", 200, ["second"]))

        sessions = store.list_sessions()
        assert [s.id for s in sessions] == ["S1"]
        assert sessions[0].messages[-1].text == "second"

    def test_new_entry_is_prepended(self) -> None:
        storage = MemoryStorage()
        store = _store(storage)
        store.save_session(_session("S1", 100, ["a"]))
        store.save_session(_session("S2", 50, ["b"]))

        raw = storage.get_item(history_key(EMAIL, "trainer")) or ""
        assert raw.index('"S2"') < raw.index('"S1"')

    def test_greeting_only_session_not_saved(self) -> None:
        storage = MemoryStorage()
        store = _store(storage)
        assert store.save_session(_session("S1", 100, [])) is False
        assert storage.get_item(history_key(EMAIL, "trainer")) is None

    def test_other_partition_rejected(self) -> None:
        store = _store(MemoryStorage())
        with pytest.raises(ValueError, match="belongs to"):
            store.save_session(_session("S1", 100, ["a"], role="nutritionist"))

    def test_corrupted_partition_is_replaced_on_save(self) -> None:
        storage = MemoryStorage()
        storage.set_item(history_key(EMAIL, "trainer"), "[{broken")
        store = _store(storage)
        store.save_session(_session("S1", 100, ["a"]))
        assert [s.id for s in store.list_sessions()] == ["S1"]


class TestListSessions:
    def test_sorted_newest_first(self) -> None:
        store = _store(MemoryStorage())
        store.save_session(_session("old", 100, ["a"]))
        store.save_session(_session("new", 300, ["b"]))
        store.save_session(_session("mid", 200, ["c"]))
        assert [s.id for s in store.list_sessions()] == ["new", "mid", "old"]

    def test_malformed_partition_yields_empty_list(self) -> None:
        storage = MemoryStorage()
        storage.set_item(history_key(EMAIL, "trainer"), '[{"id": "S1"}]')
        assert _store(storage).list_sessions() == []

    def test_partitions_are_isolated(self) -> None:
        storage = MemoryStorage()
        _store(storage, "trainer").save_session(_session("T1", 100, ["a"]))
        assert _store(storage, "nutritionist").list_sessions() == []
        assert _store(storage, "trainer", email="other@x.com").list_sessions() == []


# ── active transcript ─────────────────────────────────────────────────────────


class TestActiveTranscript:
    def test_starts_with_greeting(self) -> None:
        store = _store(MemoryStorage())
        assert len(store.messages) == 1
        assert store.messages[0].role == "assistant"
        assert store.messages[0].text == GREETING

    def test_new_chat_without_messages_persists_nothing(self) -> None:
        storage = MemoryStorage()
        store = _store(storage)
        store.save_session(_session("S1", 100, ["a"]))
        before = store.list_sessions()

        store.start_new_chat()
        store.save_current()
        assert store.list_sessions() == before

    def test_new_chat_issues_fresh_id(self) -> None:
        store = _store(MemoryStorage())
        first = store.session_id
        second = store.start_new_chat()
        assert second != first
        assert store.session_id == second
        assert store.revision == 1

    def test_save_current_builds_preview(self) -> None:
        store = _store(MemoryStorage())
        store.append(_msg("x" * 100))
        store.save_current()
        saved = store.list_sessions()[0]
        assert saved.id == store.session_id
        assert saved.last_message == "x" * 60 + "..."
        assert saved.user_id == EMAIL
        assert saved.type == "trainer"

    def test_load_session_replaces_transcript(self) -> None:
        store = _store(MemoryStorage())
        store.append(_msg("unsaved"))
        stored = _session("S9", 100, ["q1", "q2"])

        store.load_session(stored)
        assert store.session_id == "S9"
        assert [m.text for m in store.messages] == [GREETING, "q1", "q2"]

    def test_load_session_from_other_partition_rejected(self) -> None:
        store = _store(MemoryStorage())
        with pytest.raises(ValueError):
            store.load_session(_session("N1", 100, ["a"], role="nutritionist"))

    def test_messages_is_a_copy(self) -> None:
        store = _store(MemoryStorage())
        store.messages.append(_msg("sneaky"))
        assert len(store.messages) == 1


# ── delete ────────────────────────────────────────────────────────────────────


class TestDeleteSession:
    def test_delete_inactive_keeps_transcript(self) -> None:
        store = _store(MemoryStorage())
        store.save_session(_session("S1", 100, ["a"]))
        store.append(_msg("current"))
        active = store.session_id

        store.delete_session("S1")
        assert "S1" not in [s.id for s in store.list_sessions()]
        assert store.session_id == active
        assert store.messages[-1].text == "current"

    def test_delete_active_resets_to_greeting(self) -> None:
        store = _store(MemoryStorage())
        store.append(_msg("hello"))
        store.save_current()
        active = store.session_id

        store.delete_session(active)
        assert store.list_sessions() == []
        assert store.session_id != active
        assert len(store.messages) == 1
        assert store.messages[0].text == GREETING

    def test_delete_user_histories_removes_both_partitions(self) -> None:
        storage = MemoryStorage()
        _store(storage, "trainer").save_session(_session("T1", 100, ["a"]))
        _store(storage, "nutritionist").save_session(_session("N1", 100, ["a"], role="nutritionist"))

        delete_user_histories(storage, EMAIL)
        assert storage.keys() == []
