"""FastAPI application initialization."""

from contextlib import asynccontextmanager

import logfire
import sentry_sdk
import uvicorn
from fastapi import FastAPI
from sentry_sdk.integrations.fastapi import FastApiIntegration

from src.api import health, webhook
from src.config import Settings, get_settings
from src.logging_config import mask_pii, setup_logfire
from src.middleware.correlation_id import CorrelationIDMiddleware
from src.services.message_service import MessageService, get_message_service
from src.services.messaging_protocol import MessagingService, get_messaging_service
from src.services.messenger_service import MessengerService

APP_VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    settings: Settings = app.state.settings

    # Initialize Logfire for observability
    setup_logfire(app, settings)

    # Initialize Sentry if DSN is provided
    if settings.sentry_dsn:
        sentry_sdk.init(
            dsn=settings.sentry_dsn,
            traces_sample_rate=settings.sentry_traces_sample_rate,
            environment=settings.env,
            integrations=[FastApiIntegration()],
        )

    logfire.info(
        "Application startup complete",
        environment=settings.env,
        webhook_path=settings.webhook_path,
        send_message_url=settings.send_message_url,
        access_token=mask_pii(settings.access_token),
    )

    yield

    logfire.info("Application shutdown complete")


def create_app(
    settings: Settings | None = None,
    *,
    message_service: MessageService | None = None,
    messaging_service: MessagingService | None = None,
) -> FastAPI:
    """Build the application.

    Args:
        settings: Configuration; loaded from the environment if omitted
        message_service: Optional responder (defaults to the sample echo responder)
        messaging_service: Optional delivery transport (defaults to Facebook)

    Returns:
        Configured FastAPI application
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="Messenger Relay",
        description="Facebook Messenger webhook relay",
        version=APP_VERSION,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.messenger_service = MessengerService(
        verify_token=settings.token,
        message_service=message_service or get_message_service(),
        messaging_service=messaging_service or get_messaging_service(settings),
    )

    # Correlation ID middleware (must be first for request tracing)
    app.add_middleware(CorrelationIDMiddleware)

    app.include_router(health.router, tags=["health"])
    app.include_router(webhook.router, prefix=settings.webhook_path, tags=["webhook"])

    return app


def run() -> None:
    """Start the server on the configured host and port."""
    settings = get_settings()
    uvicorn.run(
        "src.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        reload=settings.env == "local",
    )


if __name__ == "__main__":
    run()
