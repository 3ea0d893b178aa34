"""
Module: consumers.py
Description: Background tasks draining the per-kind event queues.

The pipeline defines no consumer behaviour; the hosting application
decides what to do with events by passing a handler here. Each queue
is drained by its own task, so a slow handler for one kind only fills
that kind's queue.

Dependencies: asyncio, typing
"""

import asyncio
import inspect
from typing import Any, Awaitable, Callable, List, Union

from ..models.events import WebhookEvent
from ..utils.logger import get_logger
from .queues import EventQueue, EventQueues

logger = get_logger(__name__)

EventHandler = Callable[[WebhookEvent], Union[Awaitable[Any], Any]]


async def drain(queue: EventQueue, handler: EventHandler) -> None:
    """
    Pass every event of one queue to handler, oldest first, forever.

    Handler failures are logged and the loop moves on to the next
    event. The loop ends only when its task is cancelled.
    """
    while True:
        event = await queue.get()
        try:
            result = handler(event)
            if inspect.isawaitable(result):
                await result
        except Exception as e:
            logger.error(
                "Event handler failed",
                kind=queue.kind.value,
                event_id=event.id,
                error=str(e),
                error_type=type(e).__name__
            )


def start_consumers(queues: EventQueues, handler: EventHandler) -> List[asyncio.Task]:
    """
    Start one drain task per queue on the running event loop.

    Returns:
        The created tasks; cancel them to stop consuming
    """
    tasks = [
        asyncio.create_task(drain(queue, handler), name=f"drain:{kind.value}")
        for kind, queue in queues.items()
    ]
    logger.info("Event consumers started", count=len(tasks))
    return tasks


async def stop_consumers(tasks: List[asyncio.Task]) -> None:
    """Cancel drain tasks and wait for them to finish."""
    for task in tasks:
        task.cancel()
    await asyncio.gather(*tasks, return_exceptions=True)
    logger.info("Event consumers stopped", count=len(tasks))


def log_event(event: WebhookEvent) -> None:
    """Default handler: log the event with its delivery snapshot status."""
    logger.info(
        "Webhook event received",
        kind=event.kind.value,
        event_id=event.id,
        delivery_id=event.delivery_id,
        delivery_status=event.delivery.status if event.delivery else None,
        live_mode=event.live_mode
    )
