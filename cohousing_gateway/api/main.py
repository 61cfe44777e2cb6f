"""FastAPI application factory"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from cohousing_gateway.api.middleware import RequestIDMiddleware, MetricsMiddleware
from cohousing_gateway.api.v1 import analytics, contributions, recompute
from cohousing_gateway.infrastructure.cache import InMemoryResultStore, ResultCache, ResultStore
from cohousing_gateway.infrastructure.observability.logging import setup_logging
from cohousing_gateway.config import settings

# Setup structured logging
setup_logging(settings.log_level)


def create_app(result_store: ResultStore | None = None) -> FastAPI:
    """
    Create and configure FastAPI application.

    ``result_store`` plugs in a cache backend; defaults to an in-process store.
    """
    app = FastAPI(
        title="Cohousing Affordability Gateway",
        description="Group affordability metrics and contribution splitting service",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    if settings.cache_enabled:
        app.state.result_cache = ResultCache(
            store=result_store or InMemoryResultStore(max_entries=settings.cache_max_entries),
            ttl_seconds=settings.cache_ttl_seconds,
        )
    else:
        app.state.result_cache = None

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError):
        # Offending input is not echoed back; it may be NaN or Infinity
        errors = [{"loc": e["loc"], "msg": e["msg"], "type": e["type"]} for e in exc.errors()]
        return JSONResponse(status_code=422, content={"detail": errors})

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(analytics.router, prefix="/v1", tags=["analytics"])
    app.include_router(contributions.router, prefix="/v1", tags=["contributions"])
    app.include_router(recompute.router, prefix="/v1", tags=["recompute"])

    return app


app = create_app()
