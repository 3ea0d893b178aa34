"""
Module: queues.py
Description: Bounded per-kind event queues.

Each webhook event kind gets one fixed-capacity FIFO queue. Producers
only ever offer: when a queue is full the event is dropped and
counted, so a slow consumer of one kind never blocks the webhook
sender or the other kinds. Delivery to consumers is lossy under
saturation.

Key Components:
- EventQueue: asyncio.Queue with non-blocking offer and drop counter
- EventQueues: The four queues of one pipeline, one per EventKind

Dependencies: asyncio, typing
"""

import asyncio
from typing import Dict, Generic, Iterator, Tuple, TypeVar

from ..models.events import (
    CourierUpdateEvent,
    DeliveryDeadlineEvent,
    DeliveryReturnEvent,
    DeliveryStatusEvent,
    EventKind,
    WebhookEvent,
)

DEFAULT_QUEUE_SIZE = 512

EventT = TypeVar("EventT", bound=WebhookEvent)


class EventQueue(Generic[EventT]):
    """Fixed-capacity FIFO of decoded events of one kind."""

    def __init__(self, kind: EventKind, maxsize: int = DEFAULT_QUEUE_SIZE):
        if maxsize < 1:
            raise ValueError("maxsize must be at least 1")
        self.kind = kind
        self.maxsize = int(maxsize)
        self.dropped = 0
        self._queue: asyncio.Queue = asyncio.Queue(maxsize=self.maxsize)

    @property
    def depth(self) -> int:
        return self._queue.qsize()

    def offer(self, event: EventT) -> bool:
        """
        Enqueue without waiting.

        Returns:
            True if the event was queued, False if it was dropped
        """
        try:
            self._queue.put_nowait(event)
            return True
        except asyncio.QueueFull:
            self.dropped += 1
            return False

    async def get(self) -> EventT:
        """Wait for and remove the oldest event."""
        return await self._queue.get()

    def get_nowait(self) -> EventT:
        """
        Remove the oldest event without waiting.

        Raises:
            asyncio.QueueEmpty: If no event is queued
        """
        return self._queue.get_nowait()

    def empty(self) -> bool:
        return self._queue.empty()

    def full(self) -> bool:
        return self._queue.full()

    def metrics(self) -> Dict[str, int]:
        return {"depth": self.depth, "dropped": self.dropped, "maxsize": self.maxsize}


class EventQueues:
    """
    The queues owned by one webhook pipeline.

    Created once and kept for the lifetime of the pipeline; consumers
    read from the typed attributes, the pipeline writes through
    for_kind().
    """

    def __init__(self, maxsize: int = DEFAULT_QUEUE_SIZE):
        self.delivery_status: EventQueue[DeliveryStatusEvent] = EventQueue(
            EventKind.DELIVERY_STATUS, maxsize
        )
        self.delivery_deadline: EventQueue[DeliveryDeadlineEvent] = EventQueue(
            EventKind.DELIVERY_DEADLINE, maxsize
        )
        self.courier_update: EventQueue[CourierUpdateEvent] = EventQueue(
            EventKind.COURIER_UPDATE, maxsize
        )
        self.delivery_return: EventQueue[DeliveryReturnEvent] = EventQueue(
            EventKind.DELIVERY_RETURN, maxsize
        )
        self._by_kind: Dict[EventKind, EventQueue] = {
            queue.kind: queue
            for queue in (
                self.delivery_status,
                self.delivery_deadline,
                self.courier_update,
                self.delivery_return,
            )
        }

    def for_kind(self, kind: EventKind) -> EventQueue:
        return self._by_kind[kind]

    def __iter__(self) -> Iterator[EventQueue]:
        return iter(self._by_kind.values())

    def items(self) -> Iterator[Tuple[EventKind, EventQueue]]:
        return iter(self._by_kind.items())

    def metrics(self) -> Dict[str, Dict[str, int]]:
        """Per-queue depth, drop count and capacity keyed by kind value."""
        return {kind.value: queue.metrics() for kind, queue in self._by_kind.items()}
