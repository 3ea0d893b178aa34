"""
Module: webhook
Description: Package initialization for the webhook ingestion pipeline.

- pipeline: Two-phase decode and non-blocking routing
- queues: Bounded per-kind event queues
- consumers: Drain tasks for the hosting application
"""

from .consumers import drain, log_event, start_consumers, stop_consumers
from .pipeline import MAX_BODY_BYTES, WebhookPipeline
from .queues import DEFAULT_QUEUE_SIZE, EventQueue, EventQueues

__all__ = [
    "WebhookPipeline",
    "MAX_BODY_BYTES",
    "EventQueue",
    "EventQueues",
    "DEFAULT_QUEUE_SIZE",
    "drain",
    "log_event",
    "start_consumers",
    "stop_consumers",
]
