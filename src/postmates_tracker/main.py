"""
Module: main.py
Description: FastAPI application entry point for the delivery tracker.

Builds the application that hosts the Postmates webhook endpoint. The
application owns exactly one WebhookPipeline, created in create_app()
and stored on app.state, and drains its queues with background tasks
while it runs.
"""

from typing import Optional

from fastapi import FastAPI, Request
from fastapi import status as status_codes
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config.settings import Settings, settings as default_settings
from .handlers.webhook import method_not_allowed, router as webhook_router
from .utils.logger import get_logger
from .webhook.consumers import log_event, start_consumers, stop_consumers
from .webhook.pipeline import WebhookPipeline

logger = get_logger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    pipeline: Optional[WebhookPipeline] = None
) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        settings: Settings to use (defaults to the environment settings)
        pipeline: Pipeline to mount (defaults to one built from settings)

    Returns:
        Configured FastAPI application
    """
    settings = settings or default_settings
    if pipeline is None:
        pipeline = WebhookPipeline(
            queue_size=settings.webhook_queue_size,
            max_body_bytes=settings.webhook_max_body_bytes
        )

    app = FastAPI(
        title=settings.app_name,
        description="Postmates delivery webhook ingestion",
        version=settings.app_version,
    )
    app.state.settings = settings
    app.state.webhook_pipeline = pipeline
    app.state.consumer_tasks = []

    app.include_router(webhook_router, prefix=settings.webhook_path)

    @app.get("/health")
    async def health_check():
        """
        Health check endpoint.

        Reports queue depth and drop counts so that consumers falling
        behind are visible from outside.
        """
        return {
            "status": "ok",
            "version": settings.app_version,
            "environment": settings.stage,
            "queues": pipeline.queues.metrics(),
        }

    @app.exception_handler(StarletteHTTPException)
    async def webhook_method_exception_handler(request: Request, exc: StarletteHTTPException):
        """Keep 405s on the webhook path bodyless, whatever the verb."""
        if (
            exc.status_code == status_codes.HTTP_405_METHOD_NOT_ALLOWED
            and request.url.path == settings.webhook_path
        ):
            return method_not_allowed()
        return await http_exception_handler(request, exc)

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Log unexpected exceptions and return a generic error response."""
        logger.error(
            "Unhandled exception occurred",
            error=str(exc),
            error_type=type(exc).__name__,
            path=request.url.path,
            method=request.method
        )
        return JSONResponse(
            status_code=500,
            content={
                "error": {
                    "code": 500,
                    "message": "Internal server error",
                    "type": "internal_error"
                }
            }
        )

    @app.on_event("startup")
    async def startup_event():
        """Start queue consumers."""
        logger.info(
            "Starting delivery tracker",
            version=settings.app_version,
            stage=settings.stage,
            webhook_path=settings.webhook_path,
            queue_size=settings.webhook_queue_size
        )
        if settings.log_webhook_events:
            app.state.consumer_tasks = start_consumers(pipeline.queues, log_event)

    @app.on_event("shutdown")
    async def shutdown_event():
        """Stop queue consumers."""
        await stop_consumers(app.state.consumer_tasks)
        app.state.consumer_tasks = []
        logger.info("Shutting down delivery tracker")

    return app


app = create_app()
