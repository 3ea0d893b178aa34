"""
Module: events.py
Description: Webhook event models for the Postmates delivery tracker.

Webhook payloads are a tagged union keyed by the "kind" field. The
payload shape depends on the kind, so decoding happens in two passes:
EventKindProbe reads only the tag, then the model registered for that
kind in EVENT_MODELS decodes the full payload.

Key Components:
- EventKind: Accepted discriminator values
- EventKindProbe: Tag-only first pass
- DeliveryStatusEvent, DeliveryDeadlineEvent, CourierUpdateEvent,
  DeliveryReturnEvent: Variant payloads
- EVENT_MODELS: Kind to model registry

Dependencies: pydantic, datetime, typing, enum
"""

from datetime import datetime
from enum import Enum
from typing import Dict, Optional, Type, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .delivery import Delivery, Location


class EventKind(str, Enum):
    """Discriminator values accepted by the webhook endpoint."""

    DELIVERY_STATUS = "event.delivery_status"
    DELIVERY_DEADLINE = "event.delivery_deadline"
    COURIER_UPDATE = "event.courier_update"
    DELIVERY_RETURN = "event.delivery_return"


class EventKindProbe(BaseModel):
    """First decode pass: the discriminator only, everything else ignored."""

    model_config = ConfigDict(extra="ignore")

    kind: str = ""


class WebhookEvent(BaseModel):
    """
    Fields common to every webhook event.

    Attributes:
        id: Event identifier
        kind: Event kind discriminator
        created: When the remote system emitted the event
        delivery_id: Delivery the event refers to
        live_mode: False for events from the test environment
        delivery: Updated delivery snapshot, sent as "data"
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: Optional[str] = None
    kind: EventKind
    created: Optional[datetime] = None
    delivery_id: Optional[str] = None
    live_mode: bool = False
    delivery: Optional[Delivery] = Field(default=None, alias="data")

    @field_validator("live_mode", mode="before")
    @classmethod
    def _null_live_mode(cls, value):
        return False if value is None else value


class DeliveryStatusEvent(WebhookEvent):
    """Sent each time the status field on a delivery changes."""

    status: Optional[str] = None


class DeliveryDeadlineEvent(WebhookEvent):
    """Sent when the dropoff deadline of a delivery has changed."""

    dropoff_deadline: Optional[datetime] = None


class CourierUpdateEvent(WebhookEvent):
    """Sent periodically as the courier changes location."""

    location: Optional[Location] = None


class DeliveryReturnEvent(WebhookEvent):
    """Sent when a delivery has been returned to the pickup location."""

    status: Optional[str] = None


AnyWebhookEvent = Union[
    DeliveryStatusEvent,
    DeliveryDeadlineEvent,
    CourierUpdateEvent,
    DeliveryReturnEvent,
]

EVENT_MODELS: Dict[EventKind, Type[WebhookEvent]] = {
    EventKind.DELIVERY_STATUS: DeliveryStatusEvent,
    EventKind.DELIVERY_DEADLINE: DeliveryDeadlineEvent,
    EventKind.COURIER_UPDATE: CourierUpdateEvent,
    EventKind.DELIVERY_RETURN: DeliveryReturnEvent,
}
