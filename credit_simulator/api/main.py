"""FastAPI application factory"""

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from credit_simulator.api.middleware import RequestIDMiddleware, MetricsMiddleware
from credit_simulator.api.v1 import simulation, calculators, comparison, scenarios
from credit_simulator.domain.comparison import ComparisonStore
from credit_simulator.infrastructure.observability.logging import setup_logging
from credit_simulator.config import settings

setup_logging(settings.log_level)


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Credit Simulator",
        description="Loan comparison, amortization and UVA projection service",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Comparison baskets live for the lifetime of the process
    app.state.comparison_store = ComparisonStore()

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    app.include_router(simulation.router, prefix="/v1", tags=["simulations"])
    app.include_router(calculators.router, prefix="/v1", tags=["calculators"])
    app.include_router(comparison.router, prefix="/v1", tags=["comparison"])
    app.include_router(scenarios.router, prefix="/v1", tags=["saved-simulations"])

    return app


app = create_app()
