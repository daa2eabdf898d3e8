"""Tests for the room relay."""

import asyncio

from kiosk_print.domain.events import FileReadyPayload, RelayEvent
from kiosk_print.services.relay import RelayHub
from tests.conftest import FakeChannel


def test_publish_to_empty_room_is_dropped() -> None:
    hub = RelayHub()

    delivered = asyncio.run(hub.publish("KIOSK1", RelayEvent.FILE_READY, {"a": 1}))
    late = FakeChannel()
    hub.join(late, "KIOSK1")

    assert delivered == 0
    assert late.frames == []


def test_join_twice_delivers_once() -> None:
    hub = RelayHub()
    handle = FakeChannel()
    hub.join(handle, "KIOSK1")
    hub.join(handle, "KIOSK1")

    delivered = asyncio.run(hub.publish("KIOSK1", "ping", {"n": 1}))

    assert delivered == 1
    assert handle.events() == ["ping"]


def test_events_arrive_in_publish_order() -> None:
    hub = RelayHub()
    handle = FakeChannel()
    hub.join(handle, "KIOSK1")

    async def publish_all() -> None:
        for index in range(5):
            await hub.publish("KIOSK1", "tick", {"n": index})

    asyncio.run(publish_all())

    assert [data["n"] for data in handle.data_for("tick")] == [0, 1, 2, 3, 4]


def test_publish_only_reaches_room_members() -> None:
    hub = RelayHub()
    inside, outside = FakeChannel(), FakeChannel()
    hub.join(inside, "KIOSK1")
    hub.join(outside, "KIOSK2")

    asyncio.run(hub.publish("KIOSK1", "ping", None))

    assert inside.events() == ["ping"]
    assert outside.frames == []


def test_broken_channel_does_not_block_fan_out() -> None:
    hub = RelayHub()
    broken, healthy = FakeChannel(closed=True), FakeChannel()
    hub.join(broken, "KIOSK1")
    hub.join(healthy, "KIOSK1")

    delivered = asyncio.run(hub.publish("KIOSK1", "ping", {}))

    assert delivered == 1
    assert healthy.events() == ["ping"]


def test_typed_payload_is_sent_with_wire_names() -> None:
    hub = RelayHub()
    handle = FakeChannel()
    hub.join(handle, "KIOSK1")
    payload = FileReadyPayload(
        file_id="f-1",
        filename="report.pdf",
        url="http://testserver/api/file/f-1",
        size=2048,
        content_type="application/pdf",
        user_id="u-1",
    )

    asyncio.run(hub.publish("KIOSK1", RelayEvent.FILE_READY, payload))

    assert handle.frames == [
        {
            "event": "fileReceived",
            "data": {
                "fileId": "f-1",
                "filename": "report.pdf",
                "url": "http://testserver/api/file/f-1",
                "size": 2048,
                "contentType": "application/pdf",
                "userId": "u-1",
            },
        }
    ]


def test_on_event_runs_for_matching_deliveries_only() -> None:
    hub = RelayHub()
    handle = FakeChannel()
    hub.join(handle, "KIOSK1")
    seen: list[object] = []

    async def record(data: object) -> None:
        seen.append(data)

    hub.on_event(handle, RelayEvent.PRINT_REQUESTED, record)

    async def scenario() -> None:
        await hub.publish("KIOSK1", RelayEvent.FILE_READY, {"fileId": "a"})
        await hub.publish("KIOSK1", RelayEvent.PRINT_REQUESTED, {"jobId": "j1"})
        await hub.deliver(handle, RelayEvent.PRINT_REQUESTED, {"jobId": "j2"})

    asyncio.run(scenario())

    assert seen == [{"jobId": "j1"}, {"jobId": "j2"}]
    assert hub.is_subscribed(handle, RelayEvent.PRINT_REQUESTED)


def test_failing_callback_does_not_stop_delivery() -> None:
    hub = RelayHub()
    first, second = FakeChannel(), FakeChannel()
    hub.join(first, "KIOSK1")
    hub.join(second, "KIOSK1")
    seen: list[object] = []

    async def broken(_data: object) -> None:
        raise RuntimeError("status store unavailable")

    async def record(data: object) -> None:
        seen.append(data)

    hub.on_event(first, RelayEvent.PRINT_REQUESTED, broken)
    hub.on_event(first, RelayEvent.PRINT_REQUESTED, record)

    delivered = asyncio.run(
        hub.publish("KIOSK1", RelayEvent.PRINT_REQUESTED, {"jobId": "j1"})
    )

    assert delivered == 2
    assert seen == [{"jobId": "j1"}]
    assert second.events() == ["printFile"]


def test_leave_all_drops_rooms_and_subscriptions() -> None:
    hub = RelayHub()
    handle = FakeChannel()
    hub.join(handle, "KIOSK1")
    hub.join(handle, "KIOSK2")

    async def noop(_data: object) -> None:
        return None

    hub.on_event(handle, "ping", noop)

    hub.leave_all(handle)

    assert hub.members("KIOSK1") == []
    assert hub.members("KIOSK2") == []
    assert hub.rooms_of(handle) == set()
    assert not hub.is_subscribed(handle, "ping")


def test_leave_keeps_other_members() -> None:
    hub = RelayHub()
    first, second = FakeChannel(), FakeChannel()
    hub.join(first, "KIOSK1")
    hub.join(second, "KIOSK1")

    hub.leave(first, "KIOSK1")

    assert hub.members("KIOSK1") == [second]
