"""
Postmates delivery tracker.

Pull deliveries from the paginated Postmates API and ingest delivery
webhook events into bounded per-kind queues.
"""

from .client import PostmatesClient
from .errors import PostmatesAPIError, UnsupportedEventKindError, WebhookPayloadError
from .webhook import EventQueues, WebhookPipeline

__version__ = "0.1.0"

__all__ = [
    "PostmatesClient",
    "PostmatesAPIError",
    "UnsupportedEventKindError",
    "WebhookPayloadError",
    "EventQueues",
    "WebhookPipeline",
]
