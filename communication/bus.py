import asyncio
import time
from collections import Counter
from internal.logging import get_logger

class Subscriber:
    """One reader of the bus: an SSE page, the event file logger, a test."""

    __slots__ = ("name", "queue", "topics", "created_at", "received", "dropped")

    def __init__(self, name, queue, topics=None):
        self.name = name
        self.queue = queue
        self.topics = topics or set()
        self.created_at = time.time()
        self.received = 0
        self.dropped = 0

    def wants(self, topic):
        return not self.topics or topic in self.topics

    def offer(self, topic, item):
        """Queue `(topic, item)` without waiting; False when the reader is behind."""
        try:
            self.queue.put_nowait((topic, item))
        except asyncio.QueueFull:
            self.dropped += 1
            return False
        self.received += 1
        return True

    def info(self):
        return {
            "name": self.name,
            "topics": sorted(self.topics),
            "queued": self.queue.qsize(),
            "received": self.received,
            "dropped": self.dropped,
        }

class EventBus:
    """Fan-out of game frames and game events to bounded subscriber queues.

    The frame loop publishes without taking the lock; (un)subscribing swaps
    in a new reader list. A reader whose queue is full misses the item and
    picks up at the next frame.
    """

    def __init__(self, queue_size=50):
        self._lock = asyncio.Lock()
        self._subscribers = {}
        self._readers = ()
        self._queue_size = queue_size
        self._log = get_logger()
        self.by_topic = Counter()
        self.total_published = 0
        self.total_delivered = 0
        self.total_dropped = 0

    async def subscribe(self, name, max_queue_size=None, topics=None):
        async with self._lock:
            existing = self._subscribers.get(name)
            if existing is not None:
                return existing
            queue = asyncio.Queue(maxsize=max_queue_size or self._queue_size)
            subscriber = Subscriber(name, queue, set(topics or ()))
            self._subscribers[name] = subscriber
            self._readers = tuple(self._subscribers.values())
            self._log.info("reader joined", reader=name, topics=sorted(subscriber.topics) or "all")
            return subscriber

    async def unsubscribe(self, name):
        async with self._lock:
            subscriber = self._subscribers.pop(name, None)
            if subscriber is None:
                return False
            self._readers = tuple(self._subscribers.values())
            self._log.info("reader left", reader=name, received=subscriber.received,
                           dropped=subscriber.dropped)
            return True

    async def publish(self, item, topic=""):
        """Offer `item` to every reader of `topic`; returns how many took it."""
        outcomes = [reader.offer(topic, item) for reader in self._readers if reader.wants(topic)]
        delivered = sum(outcomes)
        self.by_topic[topic] += 1
        self.total_published += 1
        self.total_delivered += delivered
        self.total_dropped += len(outcomes) - delivered
        return delivered

    def get_stats(self):
        return {
            "subscriber_count": len(self._readers),
            "total_published": self.total_published,
            "total_delivered": self.total_delivered,
            "total_dropped": self.total_dropped,
            "by_topic": dict(self.by_topic),
        }

    async def get_subscriber_info(self):
        return [reader.info() for reader in self._readers]
