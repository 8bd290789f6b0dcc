"""FastAPI application factory"""

from contextlib import asynccontextmanager
from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from jodjod_api.api.middleware import RequestIDMiddleware, MetricsMiddleware
from jodjod_api.api.v1 import transactions, users
from jodjod_api.infrastructure.database.session import init_db
from jodjod_api.infrastructure.observability.logging import setup_logging
from jodjod_api.config import settings

# Setup structured logging
setup_logging(settings.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Jod-Jod Personal Finance API",
        description="Spender accounts, transaction records, summaries and balances",
        version=settings.service_version,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name, "version": settings.service_version}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    app.include_router(users.router, prefix="/v1/users", tags=["users"])
    app.include_router(transactions.router, prefix="/v1/transactions", tags=["transactions"])

    return app


app = create_app()
