"""Unit tests for EventBus."""

import asyncio
import pytest
from communication.bus import EventBus


async def receive(sub):
    return await asyncio.wait_for(sub.queue.get(), timeout=1.0)


class TestEventBus:
    """Tests for EventBus class."""

    @pytest.mark.asyncio
    async def test_subscribe_and_unsubscribe(self):
        """Subscribers come and go by name."""
        bus = EventBus(queue_size=10)
        sub = await bus.subscribe("page")
        assert sub.name == "page"
        assert sub.queue.maxsize == 10
        assert await bus.unsubscribe("page") is True
        assert await bus.unsubscribe("page") is False

    @pytest.mark.asyncio
    async def test_subscribe_twice_returns_same(self):
        """Re-subscribing under a taken name returns the existing subscriber."""
        bus = EventBus(queue_size=10)
        first = await bus.subscribe("page", max_queue_size=50)
        second = await bus.subscribe("page")
        assert first is second
        assert second.queue.maxsize == 50

    @pytest.mark.asyncio
    async def test_publish_delivers_topic_and_item(self):
        """Items arrive tagged with their topic."""
        bus = EventBus(queue_size=10)
        sub = await bus.subscribe("page")

        await bus.publish({"kind": "score", "score": 3}, topic="event")

        topic, msg = await receive(sub)
        assert topic == "event"
        assert msg["score"] == 3

    @pytest.mark.asyncio
    async def test_topic_filter(self):
        """Topic-filtered subscribers only see their topics."""
        bus = EventBus(queue_size=10)
        everything = await bus.subscribe("page")
        events_only = await bus.subscribe("logger", topics={"event"})

        delivered = await bus.publish("frame-1", topic="frame")
        await bus.publish({"kind": "game_over"}, topic="event")

        assert delivered == 1
        assert everything.queue.qsize() == 2
        assert events_only.queue.qsize() == 1
        topic, msg = await receive(events_only)
        assert (topic, msg["kind"]) == ("event", "game_over")

    @pytest.mark.asyncio
    async def test_full_queue_drops_instead_of_blocking(self):
        """A slow subscriber loses frames; the publisher never waits."""
        bus = EventBus(queue_size=2)
        sub = await bus.subscribe("slow-page")

        for n in range(5):
            await bus.publish(n, topic="frame")

        assert sub.dropped == 3
        assert bus.get_stats()["total_dropped"] == 3

    @pytest.mark.asyncio
    async def test_get_stats(self):
        """Bus returns statistics."""
        bus = EventBus(queue_size=10)
        await bus.subscribe("page")
        await bus.subscribe("logger", topics={"event"})
        await bus.publish("frame-1", topic="frame")

        stats = bus.get_stats()
        assert stats["subscriber_count"] == 2
        assert stats["total_published"] == 1
        assert stats["total_delivered"] == 1
        assert stats["by_topic"] == {"frame": 1}

    @pytest.mark.asyncio
    async def test_counts_per_topic(self):
        """Frames and game events are counted separately."""
        bus = EventBus(queue_size=10)
        await bus.subscribe("page")
        for n in range(3):
            await bus.publish(n, topic="frame")
        await bus.publish({"kind": "score", "score": 1}, topic="event")
        assert bus.get_stats()["by_topic"] == {"frame": 3, "event": 1}

    @pytest.mark.asyncio
    async def test_get_subscriber_info(self):
        """Bus returns subscriber details."""
        bus = EventBus(queue_size=10)
        sub = await bus.subscribe("logger", topics={"event"})
        await bus.publish({"kind": "restart"}, topic="event")
        await sub.queue.get()

        info = await bus.get_subscriber_info()
        assert info == [{"name": "logger", "topics": ["event"], "queued": 0, "received": 1, "dropped": 0}]
