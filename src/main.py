"""FastAPI application initialization."""

from contextlib import asynccontextmanager

import logfire
import sentry_sdk
from fastapi import FastAPI
from sentry_sdk.integrations.fastapi import FastApiIntegration

from src.api import health, notify, webhook
from src.config import get_settings
from src.constants import APP_TITLE, APP_VERSION
from src.db.recipient_registry import InMemoryRecipientRegistry
from src.logging_config import setup_logfire
from src.middleware.correlation_id import CorrelationIDMiddleware


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: observability setup and startup validation."""
    settings = get_settings()

    setup_logfire(app, settings)

    if settings.sentry_dsn:
        sentry_sdk.init(
            dsn=settings.sentry_dsn,
            traces_sample_rate=settings.sentry_traces_sample_rate,
            # PSIDs and alert texts must not leave the process
            send_default_pii=False,
            integrations=[FastApiIntegration()],
        )

    # Startup boundary: the app still serves /status without secrets
    if not settings.has_access_token:
        logfire.warning("PAGE_ACCESS_TOKEN is not set, sends will fail")
    if not settings.has_verify_token:
        logfire.warning("VERIFY_TOKEN is not set, webhook verification will fail")

    logfire.info(
        "Application startup complete",
        environment=settings.env,
        port=settings.port,
        auto_reply_enabled=settings.auto_reply_enabled,
        notify_max_concurrency=settings.notify_max_concurrency,
    )

    yield

    registry = app.state.recipient_registry
    logfire.info(
        "Application shutdown complete",
        # Registry is in-memory only and is lost here
        recipient_count=registry.size(),
    )


def create_app() -> FastAPI:
    """Build the application with a fresh, empty recipient registry."""
    application = FastAPI(
        title=APP_TITLE,
        description="Relays IoT sensor alerts to Facebook Messenger recipients",
        version=APP_VERSION,
        lifespan=lifespan,
    )
    application.state.recipient_registry = InMemoryRecipientRegistry()

    # Correlation ID middleware (must be first for request tracing)
    application.add_middleware(CorrelationIDMiddleware)

    application.include_router(health.router, tags=["health"])
    application.include_router(webhook.router, prefix="/webhook", tags=["webhook"])
    application.include_router(notify.router, prefix="/notify", tags=["notify"])
    return application


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "src.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.env == "local",
    )
