"""
Module: pipeline.py
Description: Webhook classification, decoding and routing.

Turns a bounded inbound body into a typed event and offers it to the
queue of its kind:

    body -> EventKindProbe (tag only) -> EVENT_MODELS[kind] -> queue.offer

Decoding errors are raised before any queue is touched. A full queue
is not an error: the event is dropped and the caller still reports
success to the sender, who could not fix local backpressure anyway.

Key Components:
- WebhookPipeline: Owns the per-kind queues and the body size cap
- MAX_BODY_BYTES: Default inbound body cap (64 KiB)

Dependencies: pydantic, typing
"""

from pydantic import ValidationError

from ..errors import UnsupportedEventKindError, WebhookPayloadError
from ..models.events import EVENT_MODELS, EventKind, EventKindProbe, WebhookEvent
from ..utils.logger import get_logger
from .queues import DEFAULT_QUEUE_SIZE, EventQueues

logger = get_logger(__name__)

MAX_BODY_BYTES = 64 << 10


def _first_error(exc: ValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return str(exc)
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    message = first.get("msg", "invalid payload")
    return f"{location}: {message}" if location else message


class WebhookPipeline:
    """
    Decode-and-route stage behind the webhook endpoint.

    One pipeline owns one set of queues; construct it once per process
    and hand pipeline.queues to the consumers.
    """

    def __init__(
        self,
        queue_size: int = DEFAULT_QUEUE_SIZE,
        max_body_bytes: int = MAX_BODY_BYTES
    ):
        if max_body_bytes < 1:
            raise ValueError("max_body_bytes must be at least 1")
        self.max_body_bytes = max_body_bytes
        self.queues = EventQueues(maxsize=queue_size)

    def sniff_kind(self, body: bytes) -> EventKind:
        """
        First pass: read only the kind tag.

        Raises:
            WebhookPayloadError: If the body is not a JSON object with a string kind
            UnsupportedEventKindError: If the kind is not accepted
        """
        try:
            probe = EventKindProbe.model_validate_json(body)
        except ValidationError as e:
            raise WebhookPayloadError(_first_error(e)) from e

        try:
            return EventKind(probe.kind)
        except ValueError:
            raise UnsupportedEventKindError(probe.kind) from None

    def decode(self, body: bytes) -> WebhookEvent:
        """
        Decode a body into the event variant its kind selects.

        Raises:
            WebhookPayloadError: If either decode pass fails
        """
        kind = self.sniff_kind(body)
        try:
            return EVENT_MODELS[kind].model_validate_json(body)
        except ValidationError as e:
            raise WebhookPayloadError(_first_error(e)) from e

    def route(self, event: WebhookEvent) -> bool:
        """
        Offer an event to the queue of its kind.

        Returns:
            True if queued, False if the queue was full and the event dropped
        """
        queue = self.queues.for_kind(event.kind)
        if queue.offer(event):
            return True

        logger.warning(
            "Event queue full, event dropped",
            kind=event.kind.value,
            event_id=event.id,
            delivery_id=event.delivery_id,
            dropped=queue.dropped
        )
        return False

    def dispatch(self, body: bytes) -> bool:
        """
        Decode and route one inbound body.

        The body is cut to max_body_bytes first; a payload that no
        longer parses after the cut fails like any malformed payload.

        Returns:
            True if the event was queued, False if it was dropped

        Raises:
            WebhookPayloadError: If the payload cannot be decoded
        """
        event = self.decode(body[:self.max_body_bytes])
        queued = self.route(event)

        logger.debug(
            "Webhook event routed",
            kind=event.kind.value,
            event_id=event.id,
            delivery_id=event.delivery_id,
            queued=queued
        )
        return queued
