"""Rentora API application: routers, middleware, error handlers and health checks."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response
from prometheus_client import CONTENT_TYPE_LATEST

from rentora.api.v1.admin import router as admin_router
from rentora.api.v1.auth import router as auth_router
from rentora.api.v1.bookings import router as bookings_router
from rentora.api.v1.dashboard import router as dashboard_router
from rentora.api.v1.marketplace import router as marketplace_router
from rentora.api.v1.messages import router as messages_router
from rentora.api.v1.notifications import router as notifications_router
from rentora.api.v1.properties import router as properties_router
from rentora.api.v1.reviews import router as reviews_router
from rentora.api.v1.services import router as services_router
from rentora.api.v1.users import router as users_router
from rentora.config import settings
from rentora.database import engine, utcnow
from rentora.errors import register_exception_handlers
from rentora.metrics import RequestMetrics, metrics_middleware

# rentora.* loggers propagate to the root handler on stderr.
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Start with zeroed request counters; release pooled connections on shutdown."""
    app.state.metrics.reset()
    yield
    await engine.dispose()


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Rental marketplace: listings, bookings, reviews, local services, second-hand items and messaging.",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)
app.state.metrics = RequestMetrics()

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.middleware("http")(metrics_middleware(app.state.metrics))

register_exception_handlers(app)

# Routers
app.include_router(auth_router)
app.include_router(users_router)
app.include_router(properties_router)
app.include_router(bookings_router)
app.include_router(reviews_router)
app.include_router(services_router)
app.include_router(marketplace_router)
app.include_router(notifications_router)
app.include_router(messages_router)
app.include_router(dashboard_router)
app.include_router(admin_router)


@app.get("/health", tags=["health"])
async def health_check() -> dict[str, str]:
    """Liveness check with the running version."""
    return {
        "status": "ok",
        "timestamp": utcnow().isoformat() + "Z",
        "version": settings.app_version,
    }


@app.get("/metrics", tags=["health"])
async def metrics() -> Response:
    """Request counters in the Prometheus text format."""
    return Response(content=app.state.metrics.render(), media_type=CONTENT_TYPE_LATEST)


@app.get("/", tags=["root"])
async def root() -> dict[str, str]:
    """Service banner pointing at the interactive docs."""
    return {
        "service": settings.app_name,
        "version": settings.app_version,
        "docs": "/docs",
    }
