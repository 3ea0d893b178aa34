"""
Module: conftest.py
Description: Shared pytest fixtures for delivery tracker tests.

Provides test settings, sample delivery and webhook payloads, and a
scripted page server for exercising the paginated retrieval engine
through httpx.MockTransport.
"""

from typing import Any, Dict, List, Optional

import httpx
import pytest

from postmates_tracker.config.settings import Settings
from postmates_tracker.webhook.pipeline import WebhookPipeline


TEST_CUSTOMER_ID = "cus_test"
TEST_API_KEY = "test-api-key"
API_BASE = "https://api.postmates.com"


def make_delivery(delivery_id: str, status: str = "pending") -> Dict[str, Any]:
    """Build a delivery record as the remote API returns it."""
    return {
        "kind": "delivery",
        "id": delivery_id,
        "status": status,
        "complete": False,
        "created": "2015-05-19T20:31:03Z",
        "updated": "2015-05-19T20:35:10Z",
        "dropoff_eta": "2015-05-19T21:05:00Z",
        "currency": "usd",
        "fee": 799,
        "courier": {
            "name": "Robert",
            "vehicle_type": "bicycle",
            "phone_number": "555-555-5555",
            "location": {"lat": 40.74527, "lng": -74.007889}
        },
        "pickup": {
            "name": "Pickup spot",
            "address": "555 W 18th St, New York, NY 10011",
            "detailed_address": {
                "street_address_1": "555 W 18th St",
                "city": "New York",
                "state": "NY",
                "zip_code": "10011",
                "country": "US"
            },
            "location": {"lat": 40.74527, "lng": -74.007889}
        },
        "dropoff": {
            "name": "Dropoff spot",
            "address": "620 8th Ave, New York, NY, 10018",
            "location": {"lat": 40.75626, "lng": -73.990501}
        },
        "manifest": {"description": "a box of kittens", "reference": "ref-1"},
        "related_deliveries": [],
        "live_mode": False,
        "undocumented_field": "ignored"
    }


def make_event(kind: str, event_id: str = "evt_1", delivery_id: str = "del_1") -> Dict[str, Any]:
    """Build a webhook payload of the given kind."""
    payload: Dict[str, Any] = {
        "kind": kind,
        "id": event_id,
        "created": "2015-05-19T20:40:00Z",
        "delivery_id": delivery_id,
        "live_mode": False,
        "data": make_delivery(delivery_id, status="pickup"),
    }
    if kind in ("event.delivery_status", "event.delivery_return"):
        payload["status"] = "pickup"
    elif kind == "event.delivery_deadline":
        payload["dropoff_deadline"] = "2015-05-19T21:30:00Z"
    elif kind == "event.courier_update":
        payload["location"] = {"lat": 40.75, "lng": -73.99}
    return payload


class PageServer:
    """
    Scripted deliveries collection.

    Serves pages[i] for the i-th page; each page but the last carries a
    cursor to the next one. Every request seen is recorded.
    """

    def __init__(
        self,
        pages: List[List[Dict[str, Any]]],
        fail_at: Optional[int] = None,
        error_status: int = 500,
        error_body: Optional[Dict[str, Any]] = None,
        total_count: Optional[int] = None
    ):
        self.pages = pages
        self.fail_at = fail_at
        self.error_status = error_status
        self.error_body = error_body
        self.total_count = total_count
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        index = int(request.url.params.get("page", "0"))

        if index == self.fail_at:
            if self.error_body is None:
                return httpx.Response(self.error_status, content=b"upstream failure")
            return httpx.Response(self.error_status, json=self.error_body)

        next_href = ""
        if index + 1 < len(self.pages):
            filter_value = request.url.params.get("filter", "")
            next_href = (
                f"{API_BASE}/v1/customers/{TEST_CUSTOMER_ID}/deliveries"
                f"?filter={filter_value}&page={index + 1}"
            )

        total = self.total_count
        if total is None:
            total = sum(len(page) for page in self.pages)

        return httpx.Response(200, json={
            "object": "list",
            "url": str(request.url),
            "data": self.pages[index],
            "next_href": next_href,
            "total_count": total
        })

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


@pytest.fixture
def test_settings():
    """
    Provide test configuration settings.

    Disables .env loading and background consumers for predictable tests.
    """
    return Settings(
        _env_file=None,
        app_name="Delivery Tracker Test",
        app_version="0.1.0-test",
        stage="test",
        postmates_api_key=TEST_API_KEY,
        postmates_customer_id=TEST_CUSTOMER_ID,
        postmates_timeout=2,
        log_webhook_events=False
    )


@pytest.fixture
def sample_delivery():
    """Provide a single delivery record."""
    return make_delivery("del_abc123")


@pytest.fixture
def three_pages():
    """Three pages of two deliveries each."""
    return [
        [make_delivery("del_1"), make_delivery("del_2")],
        [make_delivery("del_3"), make_delivery("del_4")],
        [make_delivery("del_5"), make_delivery("del_6")],
    ]


@pytest.fixture
def pipeline():
    """Provide a pipeline with default limits."""
    return WebhookPipeline()
