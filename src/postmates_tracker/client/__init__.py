"""
Module: client
Description: Package initialization for the Postmates API client.

- api: PostmatesClient with one-shot calls and paginated listing
- pagination: Cursor-following retrieval loop
- transport: Host rewriting, authenticating httpx transport
"""

from .api import PostmatesClient
from .pagination import DeliveryPaginator
from .transport import API_HOST, API_VERSION, PostmatesTransport

__all__ = [
    "PostmatesClient",
    "DeliveryPaginator",
    "PostmatesTransport",
    "API_HOST",
    "API_VERSION",
]
