"""Tests for EventBus infrastructure."""

import pytest
from tidemark.infrastructure.event_bus import EventBus
from tidemark.domain.events.event_base import DomainEvent
from tidemark.domain.events import RollbackConfirmedEvent, RollbackRequestedEvent


class TestEventBus:
    @pytest.mark.asyncio
    async def test_publish_to_subscriber(self):
        bus = EventBus()
        received = []

        async def handler(event):
            received.append(event)

        bus.subscribe(RollbackRequestedEvent, handler)

        event = RollbackRequestedEvent(
            aggregate_id="starfleet", service_name="starfleet", target_id="Galaxy-Class"
        )
        await bus.publish([event])

        assert len(received) == 1
        assert received[0].aggregate_id == "starfleet"

    @pytest.mark.asyncio
    async def test_no_subscriber(self):
        bus = EventBus()
        event = RollbackRequestedEvent(aggregate_id="starfleet")
        # Should not raise
        await bus.publish([event])

    @pytest.mark.asyncio
    async def test_multiple_subscribers(self):
        bus = EventBus()
        received_a = []
        received_b = []

        async def handler_a(event):
            received_a.append(event)

        async def handler_b(event):
            received_b.append(event)

        bus.subscribe(RollbackRequestedEvent, handler_a)
        bus.subscribe(RollbackRequestedEvent, handler_b)

        await bus.publish([RollbackRequestedEvent(aggregate_id="starfleet")])

        assert len(received_a) == 1
        assert len(received_b) == 1

    @pytest.mark.asyncio
    async def test_type_filtering(self):
        bus = EventBus()
        received = []

        async def handler(event):
            received.append(event)

        bus.subscribe(RollbackConfirmedEvent, handler)

        await bus.publish(
            [DomainEvent(aggregate_id="starfleet"), RollbackRequestedEvent(aggregate_id="starfleet")]
        )

        assert len(received) == 0

    @pytest.mark.asyncio
    async def test_base_type_receives_every_event(self):
        bus = EventBus()
        received = []

        async def handler(event):
            received.append(event)

        bus.subscribe(DomainEvent, handler)

        await bus.publish(
            [RollbackRequestedEvent(aggregate_id="a"), RollbackConfirmedEvent(aggregate_id="a")]
        )

        assert [e.event_type for e in received] == [
            "RollbackRequestedEvent",
            "RollbackConfirmedEvent",
        ]
