"""
Module: webhook.py
Description: HTTP endpoint receiving Postmates webhook events.

Accepts POSTed event payloads, reads at most the pipeline's body cap,
and hands the bytes to the WebhookPipeline for decoding and routing.

Key Components:
- receive_event(): Webhook endpoint (any method; only POST is processed)
- get_pipeline(): Dependency returning the application's pipeline
- read_bounded_body(): Reads a request body up to a byte limit
- method_not_allowed(): Empty 405 response, also used by the app for
  verbs the router never registered

Responses:
- 200, empty body: event queued, or dropped because its queue was full
- 400, plain text: payload undecodable, truncated or of an unsupported kind
- 405, empty body: method other than POST

Dependencies: FastAPI
"""

from fastapi import APIRouter, Depends, Request
from fastapi import status as status_codes
from fastapi.responses import PlainTextResponse, Response

from ..errors import UnsupportedEventKindError, WebhookPayloadError
from ..utils.logger import get_logger
from ..webhook.pipeline import WebhookPipeline

router = APIRouter(tags=["webhook"])
logger = get_logger(__name__)

ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def method_not_allowed() -> Response:
    """405 with no body, advertising POST as the only accepted method."""
    return Response(
        status_code=status_codes.HTTP_405_METHOD_NOT_ALLOWED,
        headers={"Allow": "POST"}
    )


def get_pipeline(request: Request) -> WebhookPipeline:
    """Dependency to get the pipeline created with the application."""
    return request.app.state.webhook_pipeline


async def read_bounded_body(request: Request, limit: int) -> bytes:
    """
    Read the request body, keeping at most `limit` bytes.

    Reading stops once the limit is reached; the rest of the body is
    never buffered.
    """
    body = bytearray()
    async for chunk in request.stream():
        body.extend(chunk[:limit - len(body)])
        if len(body) >= limit:
            break
    return bytes(body)


@router.api_route("", methods=ALL_METHODS, include_in_schema=False)
async def receive_event(
    request: Request,
    pipeline: WebhookPipeline = Depends(get_pipeline)
) -> Response:
    """
    Receive one webhook event.

    Example:
        POST /webhooks/postmates
        {"kind": "event.courier_update", "delivery_id": "del_123", "location": {...}, "data": {...}}

        Response (200): empty body
    """
    if request.method != "POST":
        return method_not_allowed()

    body = await read_bounded_body(request, pipeline.max_body_bytes)

    try:
        pipeline.dispatch(body)
    except UnsupportedEventKindError as e:
        logger.warning("Unsupported webhook event kind", kind=e.kind)
        return PlainTextResponse(str(e), status_code=status_codes.HTTP_400_BAD_REQUEST)
    except WebhookPayloadError as e:
        logger.warning(
            "Invalid webhook payload",
            error=str(e),
            body_bytes=len(body),
            truncated=len(body) >= pipeline.max_body_bytes
        )
        return PlainTextResponse(str(e), status_code=status_codes.HTTP_400_BAD_REQUEST)

    return Response(status_code=status_codes.HTTP_200_OK)
