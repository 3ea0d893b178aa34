"""
Module: test_events.py
Description: Unit tests for webhook event models.
"""

import pytest

from postmates_tracker.models.events import (
    EVENT_MODELS,
    CourierUpdateEvent,
    DeliveryDeadlineEvent,
    DeliveryReturnEvent,
    DeliveryStatusEvent,
    EventKind,
    EventKindProbe,
)

from tests.conftest import make_event


class TestEventModels:
    """Test cases for event decoding."""

    def test_registry_covers_every_kind(self):
        assert set(EVENT_MODELS) == set(EventKind)
        assert EVENT_MODELS[EventKind.DELIVERY_STATUS] is DeliveryStatusEvent
        assert EVENT_MODELS[EventKind.DELIVERY_DEADLINE] is DeliveryDeadlineEvent
        assert EVENT_MODELS[EventKind.COURIER_UPDATE] is CourierUpdateEvent
        assert EVENT_MODELS[EventKind.DELIVERY_RETURN] is DeliveryReturnEvent

    def test_kind_values(self):
        assert [k.value for k in EventKind] == [
            "event.delivery_status",
            "event.delivery_deadline",
            "event.courier_update",
            "event.delivery_return",
        ]

    def test_probe_reads_only_kind(self):
        probe = EventKindProbe.model_validate_json(
            b'{"kind": "event.courier_update", "location": "not checked", "data": 12}'
        )

        assert probe.kind == "event.courier_update"

    def test_probe_defaults_to_empty_kind(self):
        assert EventKindProbe.model_validate_json(b"{}").kind == ""

    def test_data_decoded_as_delivery(self):
        event = DeliveryStatusEvent.model_validate(make_event("event.delivery_status"))

        assert event.kind is EventKind.DELIVERY_STATUS
        assert event.status == "pickup"
        assert event.delivery.id == "del_1"
        assert event.delivery.status == "pickup"

    def test_courier_update_location(self):
        event = CourierUpdateEvent.model_validate(make_event("event.courier_update"))

        assert event.location.lat == pytest.approx(40.75)
        assert event.location.lng == pytest.approx(-73.99)

    def test_deadline_event(self):
        event = DeliveryDeadlineEvent.model_validate(make_event("event.delivery_deadline"))

        assert event.dropoff_deadline.minute == 30

    def test_event_without_data(self):
        event = DeliveryReturnEvent.model_validate({"kind": "event.delivery_return", "id": "evt_9"})

        assert event.delivery is None
        assert event.status is None
