"""
Module: test_webhook.py
Description: Unit tests for the webhook HTTP endpoint.

Posts raw payloads through FastAPI's TestClient and checks status
codes, response bodies and which queue received the event.
"""

import json

import pytest
from fastapi.testclient import TestClient

from postmates_tracker.main import create_app
from postmates_tracker.webhook.pipeline import WebhookPipeline

from tests.conftest import make_event

WEBHOOK_PATH = "/webhooks/postmates"


def _depths(pipeline: WebhookPipeline) -> dict:
    return {kind.value: queue.depth for kind, queue in pipeline.queues.items()}


@pytest.fixture
def make_client(test_settings):
    """Build a TestClient around a given pipeline (consumers not started)."""
    def _make(pipeline: WebhookPipeline) -> TestClient:
        return TestClient(create_app(settings=test_settings, pipeline=pipeline))
    return _make


class TestWebhookEndpoint:
    """Test cases for POST /webhooks/postmates."""

    def test_courier_update_routed(self, make_client, pipeline):
        client = make_client(pipeline)

        response = client.post(WEBHOOK_PATH, json=make_event("event.courier_update"))

        assert response.status_code == 200
        assert response.content == b""
        assert _depths(pipeline) == {
            "event.delivery_status": 0,
            "event.delivery_deadline": 0,
            "event.courier_update": 1,
            "event.delivery_return": 0,
        }
        event = pipeline.queues.courier_update.get_nowait()
        assert event.location.lat == pytest.approx(40.75)

    @pytest.mark.parametrize("kind", [
        "event.delivery_status",
        "event.delivery_deadline",
        "event.courier_update",
        "event.delivery_return",
    ])
    def test_each_kind_accepted(self, make_client, pipeline, kind):
        client = make_client(pipeline)

        response = client.post(WEBHOOK_PATH, json=make_event(kind))

        assert response.status_code == 200
        assert _depths(pipeline)[kind] == 1

    def test_unknown_kind(self, make_client, pipeline):
        client = make_client(pipeline)

        response = client.post(WEBHOOK_PATH, json={"kind": "event.bogus"})

        assert response.status_code == 400
        assert response.text == "unsupported event kind: event.bogus"
        assert response.headers["content-type"].startswith("text/plain")
        assert set(_depths(pipeline).values()) == {0}

    @pytest.mark.parametrize("body", [b"", b"{not json", b'{"kind": "event.delivery_status"'])
    def test_undecodable_body(self, make_client, pipeline, body):
        client = make_client(pipeline)

        response = client.post(WEBHOOK_PATH, content=body, headers={"Content-Type": "application/json"})

        assert response.status_code == 400
        assert response.text
        assert response.headers["content-type"].startswith("text/plain")
        assert set(_depths(pipeline).values()) == {0}

    @pytest.mark.parametrize("method", ["GET", "PUT", "PATCH", "DELETE"])
    def test_method_not_allowed(self, make_client, pipeline, method):
        client = make_client(pipeline)

        response = client.request(method, WEBHOOK_PATH, json=make_event("event.delivery_status"))

        assert response.status_code == 405
        assert response.content == b""
        assert response.headers["allow"] == "POST"
        assert set(_depths(pipeline).values()) == {0}

    @pytest.mark.parametrize("method", ["TRACE", "PROPFIND"])
    def test_unregistered_method_not_allowed(self, make_client, pipeline, method):
        client = make_client(pipeline)

        response = client.request(method, WEBHOOK_PATH)

        assert response.status_code == 405
        assert response.content == b""
        assert response.headers["allow"] == "POST"

    def test_other_routes_keep_default_405(self, make_client, pipeline):
        client = make_client(pipeline)

        response = client.post("/health")

        assert response.status_code == 405
        assert response.json() == {"detail": "Method Not Allowed"}

    def test_minimal_delivery_snapshot_accepted(self, make_client, pipeline):
        client = make_client(pipeline)
        payload = {
            "kind": "event.courier_update",
            "delivery_id": "del_1",
            "location": {"lat": 40.75, "lng": -73.99},
            "data": {"id": "del_1"},
        }

        response = client.post(WEBHOOK_PATH, json=payload)

        assert response.status_code == 200
        event = pipeline.queues.courier_update.get_nowait()
        assert event.delivery.id == "del_1"
        assert event.delivery.status == ""

    def test_null_fields_in_snapshot_accepted(self, make_client, pipeline):
        client = make_client(pipeline)
        payload = make_event("event.delivery_status")
        payload["live_mode"] = None
        payload["data"]["related_deliveries"] = None
        payload["data"]["complete"] = None

        response = client.post(WEBHOOK_PATH, json=payload)

        assert response.status_code == 200
        event = pipeline.queues.delivery_status.get_nowait()
        assert event.live_mode is False
        assert event.delivery.related_deliveries == []
        assert event.delivery.complete is False

    def test_full_queue_still_succeeds(self, make_client):
        pipeline = WebhookPipeline(queue_size=2)
        client = make_client(pipeline)

        statuses = [
            client.post(WEBHOOK_PATH, json=make_event("event.delivery_status", event_id=f"evt_{i}")).status_code
            for i in range(3)
        ]

        assert statuses == [200, 200, 200]
        queue = pipeline.queues.delivery_status
        assert queue.depth == 2
        assert queue.dropped == 1
        assert [queue.get_nowait().id for _ in range(2)] == ["evt_0", "evt_1"]

    def test_fifo_per_kind(self, make_client, pipeline):
        client = make_client(pipeline)
        for i in range(5):
            client.post(WEBHOOK_PATH, json=make_event("event.delivery_deadline", event_id=f"evt_{i}"))

        queue = pipeline.queues.delivery_deadline
        assert [queue.get_nowait().id for _ in range(5)] == [f"evt_{i}" for i in range(5)]

    def test_oversized_body_truncated_then_rejected(self, make_client, pipeline):
        """A body over 64 KiB is cut at the cap and no longer parses."""
        client = make_client(pipeline)
        payload = make_event("event.delivery_status")
        payload["data"]["manifest"]["description"] = "x" * (70 * 1024)
        body = json.dumps(payload).encode("utf-8")
        assert len(body) > pipeline.max_body_bytes

        response = client.post(WEBHOOK_PATH, content=body, headers={"Content-Type": "application/json"})

        assert response.status_code == 400
        assert set(_depths(pipeline).values()) == {0}

    def test_oversized_body_with_valid_prefix(self, make_client, pipeline):
        """Truncation, not rejection: trailing padding past the cap is ignored."""
        client = make_client(pipeline)
        body = json.dumps(make_event("event.delivery_return")).encode("utf-8")
        body += b" " * (pipeline.max_body_bytes + 1024)

        response = client.post(WEBHOOK_PATH, content=body, headers={"Content-Type": "application/json"})

        assert response.status_code == 200
        assert pipeline.queues.delivery_return.depth == 1

    def test_custom_webhook_path(self, test_settings, pipeline):
        settings = test_settings.model_copy(update={"webhook_path": "/_postmates/34f1d489"})
        client = TestClient(create_app(settings=settings, pipeline=pipeline))

        assert client.post("/_postmates/34f1d489", json=make_event("event.delivery_status")).status_code == 200
        assert client.post(WEBHOOK_PATH, json=make_event("event.delivery_status")).status_code == 404
