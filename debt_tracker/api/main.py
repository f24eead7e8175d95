"""FastAPI application factory"""

from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from debt_tracker.api.middleware import RequestIDMiddleware, MetricsMiddleware
from debt_tracker.api.v1 import analysis, debts, payments, report
from debt_tracker.config import settings
from debt_tracker.domain.exceptions import NotFoundError, ValidationError
from debt_tracker.domain.state import TrackerState
from debt_tracker.infrastructure.database.repositories import SqlBlobStore
from debt_tracker.infrastructure.database.session import build_engine, build_session_factory
from debt_tracker.infrastructure.observability.logging import setup_logging
from debt_tracker.infrastructure.storage.store import DebtStore

# Setup structured logging
setup_logging(settings.log_level)


def build_default_state() -> TrackerState:
    """Load the store from the configured database (migrating legacy data on first run)"""
    session_factory = build_session_factory(build_engine(settings.database_url))
    store = DebtStore(SqlBlobStore(session_factory), settings)
    store.load()
    return TrackerState(store)


def create_app(state: TrackerState | None = None) -> FastAPI:
    """
    Create and configure FastAPI application.

    Args:
        state: Preloaded tracker state; when omitted it is loaded from the
            configured database at startup
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if getattr(app.state, "tracker", None) is None:
            app.state.tracker = build_default_state()
        yield

    app = FastAPI(
        title="Debt Tracker",
        description="Personal debt and payment tracking with payoff progress",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.tracker = state

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError):
        return JSONResponse(status_code=422, content={"detail": str(exc)})

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError):
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(debts.router, prefix="/v1", tags=["debts"])
    app.include_router(payments.router, prefix="/v1", tags=["payments"])
    app.include_router(analysis.router, prefix="/v1", tags=["analysis"])
    app.include_router(report.router, prefix="/v1", tags=["report"])

    return app


app = create_app()
