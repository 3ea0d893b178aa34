"""
Module: models
Description: Package initialization for Pydantic data models.

This package contains the data models shared by the API client and
the webhook pipeline:
- Delivery and its nested shapes, DeliveryPage, DeliveryQuote
- Webhook event variants and the kind registry

All models are exported here for convenient importing.
"""

from .delivery import (
    ALL_DELIVERIES,
    ALL_FILTER,
    ONGOING_FILTER,
    Address,
    Courier,
    Delivery,
    DeliveryPage,
    DeliveryQuote,
    DeliverySpot,
    DeliveryStatus,
    Location,
    Manifest,
    RelatedDelivery,
    RelationshipType,
    Spot,
    VehicleType,
)
from .events import (
    EVENT_MODELS,
    AnyWebhookEvent,
    CourierUpdateEvent,
    DeliveryDeadlineEvent,
    DeliveryReturnEvent,
    DeliveryStatusEvent,
    EventKind,
    EventKindProbe,
    WebhookEvent,
)

__all__ = [
    "ALL_DELIVERIES",
    "ALL_FILTER",
    "ONGOING_FILTER",
    "Address",
    "Courier",
    "Delivery",
    "DeliveryPage",
    "DeliveryQuote",
    "DeliverySpot",
    "DeliveryStatus",
    "Location",
    "Manifest",
    "RelatedDelivery",
    "RelationshipType",
    "Spot",
    "VehicleType",
    "EVENT_MODELS",
    "AnyWebhookEvent",
    "CourierUpdateEvent",
    "DeliveryDeadlineEvent",
    "DeliveryReturnEvent",
    "DeliveryStatusEvent",
    "EventKind",
    "EventKindProbe",
    "WebhookEvent",
]
