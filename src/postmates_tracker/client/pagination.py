"""
Module: pagination.py
Description: Cursor-paginated retrieval of delivery listings.

Implements the fetch-decode-follow loop over the deliveries
collection. Pages are requested strictly one after another since each
request needs the cursor of the previous page.

Key Components:
- DeliveryPaginator: Drives the loop for one collection URL
- validate_limit(): Checks a limit argument against the sentinel

Dependencies: httpx, pydantic, typing
"""

from typing import List

import httpx

from ..errors import PostmatesAPIError
from ..models.delivery import ALL_DELIVERIES, ALL_FILTER, Delivery, DeliveryPage
from ..utils.logger import get_logger

logger = get_logger(__name__)


def validate_limit(limit: int) -> int:
    """
    Validate a retrieval limit.

    Args:
        limit: Non-negative cap, or ALL_DELIVERIES for no cap

    Returns:
        The limit unchanged

    Raises:
        ValueError: If limit is negative and not ALL_DELIVERIES
    """
    if not isinstance(limit, int) or isinstance(limit, bool):
        raise ValueError("limit must be an integer")
    if limit < 0 and limit != ALL_DELIVERIES:
        raise ValueError("limit must be non-negative or ALL_DELIVERIES")
    return limit


class DeliveryPaginator:
    """
    Reconstructs a delivery list from a cursor-paginated collection.

    The paginator owns no connection state of its own: it issues
    requests through the given httpx client, whose transport supplies
    host, authentication and timeout.
    """

    def __init__(self, http: httpx.Client, collection_path: str):
        """
        Initialize paginator.

        Args:
            http: Client used for every page request
            collection_path: Path of the first page, without query string
        """
        self._http = http
        self.collection_path = collection_path

    def fetch(self, filter: str = ALL_FILTER, limit: int = ALL_DELIVERIES) -> List[Delivery]:
        """
        Fetch deliveries page by page.

        Records are returned in the order the server listed them. The
        loop stops once the limit is reached, the cursor is empty, or a
        page comes back without records; the server's total_count hint
        never bounds it.

        Args:
            filter: Server-side filter value ("ongoing" or "" for all)
            limit: Maximum number of records, or ALL_DELIVERIES

        Returns:
            At most `limit` deliveries

        Raises:
            ValueError: If limit is invalid
            PostmatesAPIError: If any page is rejected; earlier pages are discarded
            httpx.TransportError: On connection failures and timeouts
            pydantic.ValidationError: If a page body cannot be decoded
        """
        validate_limit(limit)
        if limit == 0:
            return []

        deliveries: List[Delivery] = []
        pages = 0
        total_count_hint = 0
        url = self.collection_path
        params = {"filter": filter}

        while True:
            # get() reads and closes the response, so the connection is
            # back in the pool before the next page is requested
            response = self._http.get(url, params=params)
            pages += 1

            if not response.is_success:
                error = PostmatesAPIError.from_response(response)
                logger.warning(
                    "Delivery page rejected",
                    page=pages,
                    status_code=error.status_code,
                    code=error.code,
                    discarded=len(deliveries)
                )
                raise error

            page = DeliveryPage.model_validate_json(response.content)
            deliveries.extend(page.data)
            total_count_hint = page.total_count

            logger.debug(
                "Delivery page fetched",
                page=pages,
                records=len(page.data),
                accumulated=len(deliveries),
                has_next=page.has_next
            )

            if limit != ALL_DELIVERIES and len(deliveries) >= limit:
                break
            if not page.has_next or not page.data:
                break

            # the cursor already carries the query string
            url = page.next_href
            params = None

        if limit != ALL_DELIVERIES:
            deliveries = deliveries[:limit]
        elif total_count_hint and total_count_hint != len(deliveries):
            logger.warning(
                "Delivery count differs from server total_count",
                fetched=len(deliveries),
                total_count=total_count_hint,
                filter=filter
            )

        logger.info(
            "Deliveries fetched",
            count=len(deliveries),
            pages=pages,
            filter=filter,
            limit=limit
        )
        return deliveries
