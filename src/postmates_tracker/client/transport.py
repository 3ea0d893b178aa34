"""
Module: transport.py
Description: Authenticated httpx transport for the Postmates API.

Every request leaving the client passes through PostmatesTransport,
which pins it to the API host over https and adds the version and
basic auth headers before handing it to the wrapped transport. Paths
and cursor URLs can therefore be passed around without a host.
"""

import base64
from typing import Optional

import httpx


API_VERSION = "20150519"
API_HOST = "api.postmates.com"


class PostmatesTransport(httpx.BaseTransport):
    """
    Request-rewriting transport decorator.

    Args:
        api_key: API key, sent as the basic auth username with an empty password
        host: Host every request is rewritten to
        wrapped: Transport that performs the request (defaults to httpx.HTTPTransport)
    """

    def __init__(
        self,
        api_key: str,
        host: str = API_HOST,
        wrapped: Optional[httpx.BaseTransport] = None
    ):
        if not api_key or not isinstance(api_key, str):
            raise ValueError("api_key must be a non-empty string")

        self.host = host
        name, _, port = host.partition(":")
        self._host_name = name
        self._port = int(port) if port else None
        self._wrapped = wrapped or httpx.HTTPTransport()
        token = base64.b64encode(f"{api_key}:".encode("utf-8")).decode("ascii")
        self._authorization = f"Basic {token}"

    def handle_request(self, request: httpx.Request) -> httpx.Response:
        request.url = request.url.copy_with(
            scheme="https", host=self._host_name, port=self._port
        )
        request.headers["Host"] = self.host
        request.headers["X-Postmates-Version"] = API_VERSION
        request.headers["Authorization"] = self._authorization
        return self._wrapped.handle_request(request)

    def close(self) -> None:
        self._wrapped.close()
