"""Tests for the kiosk session registry."""

from kiosk_print.services.sessions import SessionRegistry
from tests.conftest import FakeChannel


def test_register_overwrites_previous_handle() -> None:
    registry = SessionRegistry()
    first, second = FakeChannel(), FakeChannel()

    registry.register_kiosk("KIOSK1", first)
    registry.register_kiosk("KIOSK1", second)

    assert registry.resolve_kiosk("KIOSK1") is second


def test_stale_handle_does_not_evict_newer_session() -> None:
    registry = SessionRegistry()
    first, second = FakeChannel(), FakeChannel()
    registry.register_kiosk("KIOSK1", first)
    registry.register_kiosk("KIOSK1", second)

    removed = registry.unregister_if_owner("KIOSK1", first)

    assert removed is False
    assert registry.resolve_kiosk("KIOSK1") is second


def test_owner_disconnect_removes_entry() -> None:
    registry = SessionRegistry()
    handle = FakeChannel()
    registry.register_kiosk("KIOSK1", handle)

    assert registry.unregister_if_owner("KIOSK1", handle) is True
    assert registry.resolve_kiosk("KIOSK1") is None
    assert registry.online_kiosks() == []


def test_empty_kiosk_id_is_ignored() -> None:
    registry = SessionRegistry()

    registry.register_kiosk("", FakeChannel())

    assert registry.online_kiosks() == []


def test_unregister_unknown_kiosk_is_noop() -> None:
    registry = SessionRegistry()

    assert registry.unregister_if_owner("KIOSK9", FakeChannel()) is False
