"""FastAPI application entrypoint."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, HTTPException, Request, Response, status
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import get_settings
from app.core.database import close_engine, ping_database
from app.core.metrics import build_metrics_response, instrument_http_request
from app.modules.assistant.client import (
    GeminiClient,
    GenerativeClient,
    UnconfiguredGenerativeClient,
)
from app.modules.assistant.router import router as assistant_router
from app.modules.courses.router import router as courses_router
from app.modules.enrollments.router import router as enrollments_router
from app.modules.notifications.router import router as notifications_router
from app.modules.orders.router import router as orders_router
from app.modules.payments.gateway import PayPalGateway
from app.shared.exceptions import register_exception_handlers
from app.shared.utils import utc_now

settings = get_settings()
logger = logging.getLogger(__name__)


def _build_generative_client() -> GenerativeClient:
    if not settings.gemini_api_key:
        logger.warning("GEMINI_API_KEY is not set, assistant endpoints are disabled")
        return UnconfiguredGenerativeClient()
    return GeminiClient(api_key=settings.gemini_api_key, model_name=settings.gemini_model)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build external clients on startup and release them on shutdown."""
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    logger.info("Starting %s (%s)", settings.app_name, settings.app_env)

    http_client = httpx.AsyncClient(timeout=settings.payment_gateway_timeout_seconds)
    app.state.payment_gateway = PayPalGateway.from_settings(http_client, settings)
    app.state.generative_client = _build_generative_client()
    logger.info("PayPal gateway ready in %s mode", settings.paypal_mode)

    try:
        yield
    finally:
        logger.info("Shutting down %s", settings.app_name)
        await http_client.aclose()
        await close_engine()


app = FastAPI(
    title=settings.app_name,
    debug=settings.debug,
    lifespan=lifespan,
)
app.middleware("http")(instrument_http_request)
app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.allowed_origins),
    allow_methods=["GET", "POST", "DELETE", "PUT"],
    allow_headers=["Content-Type", "Authorization"],
    allow_credentials=True,
)

register_exception_handlers(app)

app.include_router(orders_router, prefix=settings.api_prefix)
app.include_router(enrollments_router, prefix=settings.api_prefix)
app.include_router(courses_router, prefix=settings.api_prefix)
app.include_router(notifications_router, prefix=settings.api_prefix)
app.include_router(assistant_router, prefix=settings.api_prefix)


@app.get("/health")
async def healthcheck() -> dict[str, str]:
    """Liveness probe endpoint."""
    return {"status": "ok"}


async def _is_database_ready() -> bool:
    return await ping_database()


@app.get("/ready")
async def readiness_check() -> dict[str, str]:
    """Readiness probe endpoint with DB dependency check."""
    if not await _is_database_ready():
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Database is not ready",
        )
    return {
        "status": "ready",
        "database": "ok",
        "timestamp": utc_now().isoformat(),
    }


@app.get("/metrics", include_in_schema=False)
async def metrics_endpoint(_: Request) -> Response:
    """Prometheus metrics endpoint."""
    return build_metrics_response()
