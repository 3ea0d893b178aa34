"""
Module: errors.py
Description: Exception types raised by the API client and the webhook pipeline.

Key Components:
- PostmatesAPIError: Non-success response from the remote API
- ErrorCode: Error codes the remote API is known to return
- WebhookPayloadError: Inbound webhook body could not be decoded
- UnsupportedEventKindError: Inbound webhook declared an unknown kind

Dependencies: httpx, json, enum, typing
"""

import json
from enum import Enum
from typing import Any, Dict, Optional

import httpx


ERROR_KIND = "error"


class ErrorCode(str, Enum):
    """Error codes returned in the body of rejected requests."""

    INVALID_PARAMS = "invalid_params"
    UNKNOWN_LOCATION = "unknown_location"  # address not understood or not exact enough
    REQUEST_RATE_LIMIT_EXCEEDED = "request_rate_limit_exceeded"
    ACCOUNT_SUSPENDED = "account_suspended"
    NOT_FOUND = "not_found"
    SERVICE_UNAVAILABLE = "service_unavailable"
    DELIVERY_LIMIT_EXCEEDED = "delivery_limit_exceeded"  # too many ongoing deliveries
    ADDRESS_UNDELIVERABLE = "address_undeliverable"


class PostmatesAPIError(Exception):
    """
    Remote rejection of an API call.

    The status code and reason phrase are always set. The structured
    kind/code/message/params fields are filled from the response body
    when it carries them and left empty when the body is malformed.
    """

    def __init__(
        self,
        status_code: int,
        status: str = "",
        kind: str = "",
        code: str = "",
        message: str = "",
        params: Optional[Dict[str, Any]] = None
    ):
        self.status_code = status_code
        self.status = status
        self.kind = kind
        self.code = code
        self.message = message
        self.params = params or {}
        super().__init__(str(self))

    @classmethod
    def from_response(cls, response: httpx.Response) -> "PostmatesAPIError":
        """
        Build an error from a non-success response.

        Args:
            response: Response whose body has already been read

        Returns:
            PostmatesAPIError with as many structured fields as the body allows
        """
        body: Dict[str, Any] = {}
        try:
            decoded = json.loads(response.content or b"")
            if isinstance(decoded, dict):
                body = decoded
        except ValueError:
            pass

        params = body.get("params")
        return cls(
            status_code=response.status_code,
            status=response.reason_phrase,
            kind=str(body.get("kind") or ""),
            code=str(body.get("code") or ""),
            message=str(body.get("message") or ""),
            params=params if isinstance(params, dict) else None,
        )

    def __str__(self) -> str:
        text = f"Postmates API Error ({self.status_code} {self.status})"
        if self.kind:
            text += (
                f" Kind: {self.kind}, Code: {self.code},"
                f" Message: {self.message}, Params: {self.params}"
            )
        return text


class WebhookPayloadError(ValueError):
    """Inbound webhook payload is malformed, truncated or of the wrong shape."""


class UnsupportedEventKindError(WebhookPayloadError):
    """Inbound webhook payload declares a kind this endpoint does not accept."""

    def __init__(self, kind: str):
        self.kind = kind
        super().__init__(f"unsupported event kind: {kind}" if kind else "unsupported event kind")
