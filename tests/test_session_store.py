"""
Tests for the in-memory session store.
"""

from __future__ import annotations

from carrierbot.domain.entities.dialogue_state import DialogueState
from carrierbot.infrastructure.store.memory_store import MemorySessionStore


class FakeClock:
    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


def test_get_creates_idle_session():
    """An unknown conversation starts in IDLE with empty data."""
    store = MemorySessionStore(clock=FakeClock())
    session = store.get("5215550001111")
    assert session.id == "5215550001111"
    assert session.state == DialogueState.IDLE
    assert session.data == {}
    assert session.last_activity == 1000.0
    assert len(store) == 1


def test_set_merges_data_patch():
    store = MemorySessionStore()
    store.set("c1", DialogueState.APPT_DATE_INPUT, {"name": "Ana López"})
    store.set("c1", DialogueState.APPT_DATE_CONFIRM, {"date": "2025-08-17"})
    session = store.get("c1")
    assert session.state == DialogueState.APPT_DATE_CONFIRM
    assert session.data == {"name": "Ana López", "date": "2025-08-17"}


def test_set_without_patch_keeps_data():
    store = MemorySessionStore()
    store.set("c1", DialogueState.RECHARGE_AMOUNT, {"recharge_number": "7771234567"})
    store.set("c1", DialogueState.IDLE)
    assert store.get("c1").data == {"recharge_number": "7771234567"}


def test_returned_session_is_a_snapshot():
    store = MemorySessionStore()
    before = store.get("c1")
    store.set("c1", DialogueState.HANDOFF, {"x": 1})
    assert before.state == DialogueState.IDLE
    assert before.data == {}


def test_reset_is_idempotent():
    store = MemorySessionStore()
    store.set("c1", DialogueState.PORTABILITY_INTAKE, {"portability_details": "IMEI 123"})
    first = store.reset("c1")
    second = store.reset("c1")
    assert first.state == second.state == DialogueState.IDLE
    assert first.data == second.data == {}


def test_get_refreshes_last_activity():
    clock = FakeClock(10.0)
    store = MemorySessionStore(clock=clock)
    store.get("c1")
    clock.now = 25.0
    assert store.get("c1").last_activity == 25.0


def test_idle_sessions_expire_after_ttl():
    """A session idle past the TTL comes back as a fresh IDLE session."""
    clock = FakeClock(0.0)
    store = MemorySessionStore(ttl_seconds=60, clock=clock)
    store.set("c1", DialogueState.RECHARGE_NUMBER)

    clock.now = 59.0
    assert store.get("c1").state == DialogueState.RECHARGE_NUMBER

    clock.now = 59.0 + 61.0
    session = store.get("c1")
    assert session.state == DialogueState.IDLE
    assert session.data == {}


def test_sessions_never_expire_without_ttl():
    clock = FakeClock(0.0)
    store = MemorySessionStore(clock=clock)
    store.set("c1", DialogueState.HANDOFF)
    clock.now = 10 ** 9
    assert store.get("c1").state == DialogueState.HANDOFF


def test_mark_processed_detects_duplicates():
    store = MemorySessionStore()
    assert store.mark_processed("wamid.1") is True
    assert store.mark_processed("wamid.1") is False
    assert store.mark_processed("wamid.2") is True


def test_processed_ids_are_bounded():
    store = MemorySessionStore(processed_limit=2)
    for message_id in ("a", "b", "c"):
        assert store.mark_processed(message_id)
    # "a" was evicted, so it is accepted again
    assert store.mark_processed("a") is True
    assert store.mark_processed("c") is False
