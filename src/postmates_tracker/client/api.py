"""
Module: api.py
Description: Postmates API client.

One-shot resource calls (quote, create, get, cancel, return) plus the
paginated delivery listing. Calls are never retried: transport errors
propagate as httpx exceptions and rejected calls raise
PostmatesAPIError.

Key Components:
- PostmatesClient: Synchronous API client bound to one customer
"""

from typing import List, Optional, Type, TypeVar
from urllib.parse import quote

import httpx
from pydantic import BaseModel

from ..config.settings import Settings
from ..errors import PostmatesAPIError
from ..models.delivery import (
    ALL_DELIVERIES,
    ALL_FILTER,
    ONGOING_FILTER,
    Delivery,
    DeliveryQuote,
    DeliverySpot,
    Manifest,
)
from ..utils.logger import get_logger
from .pagination import DeliveryPaginator
from .transport import API_HOST, PostmatesTransport

logger = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def _segment(value: str) -> str:
    return quote(value, safe="")


class PostmatesClient:
    """
    HTTP client for the Postmates deliveries API.

    Example:
        >>> with PostmatesClient("cus_123", "key") as client:
        ...     ongoing = client.get_ongoing_deliveries(10)
    """

    def __init__(
        self,
        customer_id: str,
        api_key: str,
        timeout: float = 5.0,
        transport: Optional[httpx.BaseTransport] = None,
        host: str = API_HOST
    ):
        """
        Initialize API client.

        Args:
            customer_id: Customer the requests are made for
            api_key: API key used for basic auth
            timeout: Timeout in seconds applied to every request
            transport: Transport that performs requests (wrapped with auth and host rewrite)
            host: API host

        Raises:
            ValueError: If customer_id or api_key is empty
        """
        if not customer_id or not isinstance(customer_id, str):
            raise ValueError("customer_id must be a non-empty string")

        self.customer_id = customer_id
        self._http = httpx.Client(
            base_url=f"https://{host}",
            transport=PostmatesTransport(api_key, host=host, wrapped=transport),
            timeout=httpx.Timeout(timeout),
        )
        self._customer_path = f"/v1/customers/{_segment(customer_id)}"

        logger.info(
            "Postmates client initialized",
            customer_id=customer_id,
            host=host,
            timeout_seconds=timeout
        )

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        transport: Optional[httpx.BaseTransport] = None
    ) -> "PostmatesClient":
        """
        Build a client from application settings.

        Raises:
            ValueError: If the API key or customer id is not configured
        """
        if not settings.postmates_api_key or not settings.postmates_customer_id:
            raise ValueError(
                "POSTMATES_API_KEY and POSTMATES_CUSTOMER_ID must be configured"
            )
        return cls(
            customer_id=settings.postmates_customer_id,
            api_key=settings.postmates_api_key,
            timeout=settings.postmates_timeout,
            transport=transport,
            host=settings.postmates_api_host,
        )

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "PostmatesClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _decode(self, response: httpx.Response, model: Type[ModelT]) -> ModelT:
        if not response.is_success:
            error = PostmatesAPIError.from_response(response)
            logger.warning(
                "Postmates request rejected",
                method=response.request.method,
                path=response.request.url.path,
                status_code=error.status_code,
                code=error.code
            )
            raise error
        return model.model_validate_json(response.content)

    def get_quote(self, pickup_address: str, dropoff_address: str) -> DeliveryQuote:
        """
        Request a delivery quote.

        POST /v1/customers/:customer_id/delivery_quotes

        Args:
            pickup_address: e.g. "20 McAllister St, San Francisco, CA"
            dropoff_address: e.g. "101 Market St, San Francisco, CA"

        Returns:
            Quote with fee and ETA
        """
        response = self._http.post(
            f"{self._customer_path}/delivery_quotes",
            data={
                "pickup_address": pickup_address,
                "dropoff_address": dropoff_address,
            },
        )
        return self._decode(response, DeliveryQuote)

    def create_delivery(
        self,
        manifest: Manifest,
        pickup: DeliverySpot,
        dropoff: DeliverySpot,
        quote: Optional[DeliveryQuote] = None
    ) -> Delivery:
        """
        Create a delivery.

        POST /v1/customers/:customer_id/deliveries

        Args:
            manifest: Description of the goods
            pickup: Where the courier collects the goods
            dropoff: Where the courier delivers them
            quote: Quote to honour, if one was requested

        Returns:
            The created delivery
        """
        if not manifest.description:
            raise ValueError("manifest description must not be empty")

        form = {
            "manifest": manifest.description,
            "manifest_reference": manifest.reference or "",
        }
        form.update(pickup.form_fields("pickup"))
        form.update(dropoff.form_fields("dropoff"))
        if quote is not None:
            form["quote_id"] = quote.id

        response = self._http.post(f"{self._customer_path}/deliveries", data=form)
        delivery = self._decode(response, Delivery)

        logger.info("Delivery created", delivery_id=delivery.id, status=delivery.status)
        return delivery

    def get_deliveries(self, filter: str = ALL_FILTER, limit: int = ALL_DELIVERIES) -> List[Delivery]:
        """
        List deliveries, following pagination cursors.

        GET /v1/customers/:customer_id/deliveries?filter=...

        Args:
            filter: "ongoing" or "" for all deliveries
            limit: Maximum number of deliveries, or ALL_DELIVERIES

        Returns:
            Deliveries in server order
        """
        paginator = DeliveryPaginator(self._http, f"{self._customer_path}/deliveries")
        return paginator.fetch(filter=filter, limit=limit)

    def get_ongoing_deliveries(self, limit: int = ALL_DELIVERIES) -> List[Delivery]:
        return self.get_deliveries(ONGOING_FILTER, limit)

    def get_delivery(self, delivery_id: str) -> Delivery:
        """GET /v1/customers/:customer_id/deliveries/:delivery_id"""
        response = self._http.get(f"{self._customer_path}/deliveries/{_segment(delivery_id)}")
        return self._decode(response, Delivery)

    def cancel_delivery(self, delivery_id: str) -> Delivery:
        """POST /v1/customers/:customer_id/deliveries/:delivery_id/cancel"""
        response = self._http.post(
            f"{self._customer_path}/deliveries/{_segment(delivery_id)}/cancel"
        )
        delivery = self._decode(response, Delivery)

        logger.info("Delivery canceled", delivery_id=delivery.id, status=delivery.status)
        return delivery

    def return_delivery(self, delivery_id: str) -> Delivery:
        """
        Return a delivery to its pickup location.

        POST /v1/customers/:customer_id/deliveries/:delivery_id/return

        Returns:
            The new return delivery
        """
        response = self._http.post(
            f"{self._customer_path}/deliveries/{_segment(delivery_id)}/return"
        )
        delivery = self._decode(response, Delivery)

        logger.info(
            "Delivery return created",
            delivery_id=delivery_id,
            return_delivery_id=delivery.id
        )
        return delivery
