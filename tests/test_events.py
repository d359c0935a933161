"""
Unit Tests for Domain Events and the EventBus

Tests for:
- Event defaults and immutability
- Subscribe / publish / unsubscribe
- Handler isolation when one handler fails
- Global bus singleton reset
"""

import pytest
from pydantic import ValidationError

from group_jukebox.domain.shared.events import (
    EventBus,
    PlaybackActivated,
    QueueFlushed,
    RegionUnavailable,
    TracksEnqueued,
    get_event_bus,
    reset_event_bus,
)


class TestDomainEvents:
    def test_events_get_id_and_timestamp(self):
        first = QueueFlushed(device_name="Kitchen")
        second = QueueFlushed(device_name="Kitchen")

        assert first.event_id != second.event_id
        assert first.occurred_at.tzinfo is not None

    def test_events_are_frozen(self):
        event = TracksEnqueued(queued_count=3)

        with pytest.raises(ValidationError):
            event.queued_count = 4

    def test_negative_counts_rejected(self):
        with pytest.raises(ValidationError):
            TracksEnqueued(failed_count=-1)

    def test_playback_activated_defaults(self):
        assert PlaybackActivated().queue_ready is True


class TestEventBus:
    @pytest.mark.asyncio
    async def test_publish_reaches_subscribers_of_type(self):
        bus = EventBus()
        seen = []

        async def on_flushed(event):
            seen.append(("flushed", event.device_name))

        async def on_region(event):
            seen.append(("region", event.item_name))

        bus.subscribe(QueueFlushed, on_flushed)
        bus.subscribe(RegionUnavailable, on_region)

        await bus.publish(QueueFlushed(device_name="Kitchen"))

        assert seen == [("flushed", "Kitchen")]

    @pytest.mark.asyncio
    async def test_failing_handler_does_not_block_others(self, caplog):
        bus = EventBus()
        seen = []

        async def broken(event):
            raise RuntimeError("handler bug")

        async def working(event):
            seen.append(event)

        bus.subscribe(QueueFlushed, broken)
        bus.subscribe(QueueFlushed, working)

        await bus.publish(QueueFlushed())

        assert len(seen) == 1
        assert "Error in handler for QueueFlushed" in caplog.text

    @pytest.mark.asyncio
    async def test_unsubscribe(self):
        bus = EventBus()
        seen = []

        async def handler(event):
            seen.append(event)

        bus.subscribe(QueueFlushed, handler)
        bus.unsubscribe(QueueFlushed, handler)
        bus.unsubscribe(QueueFlushed, handler)

        await bus.publish(QueueFlushed())

        assert seen == []
        assert bus.handler_count(QueueFlushed) == 0

    @pytest.mark.asyncio
    async def test_publish_without_handlers(self):
        await EventBus().publish(QueueFlushed())

    def test_global_bus_singleton(self):
        bus = get_event_bus()

        assert get_event_bus() is bus
        reset_event_bus()
        assert get_event_bus() is not bus
