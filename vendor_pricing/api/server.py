"""FastAPI application: routers, request-metrics middleware and the metrics drain task."""

import asyncio
from contextlib import asynccontextmanager
from time import perf_counter
from typing import Any

from fastapi import FastAPI, Request

from vendor_pricing.api.offer_routes import router as offer_router
from vendor_pricing.api.reference_routes import router as reference_router
from vendor_pricing.api.upload_routes import router as upload_router
from vendor_pricing.api.user_routes import router as user_router
from vendor_pricing.api.vendor_routes import router as vendor_router
from vendor_pricing.config import METRICS_BUFFER_SIZE, METRICS_DRAIN_INTERVAL_SECONDS
from vendor_pricing.db import init_db
from vendor_pricing.utils.logger import get_logger
from vendor_pricing.utils.metrics import MetricsBuffer
from vendor_pricing.utils.tracing import init_tracing, shutdown_tracing

logger = get_logger("vendor_pricing.api.server")


async def _drain_metrics(app: FastAPI, interval: float) -> None:
    """Every `interval` seconds, drain the buffer and log one summary line. Stops on CancelledError."""
    buffer: MetricsBuffer = app.state.metrics
    try:
        while True:
            await asyncio.sleep(interval)
            samples = buffer.drain()
            if samples:
                logger.info("metrics.drained", **buffer.summary(samples))
    except asyncio.CancelledError:
        logger.debug("metrics.drain_stopped")
        raise


async def _shutdown_tasks(app: FastAPI) -> None:
    task = getattr(app.state, "_drain_task", None)
    if task is None:
        return
    task.cancel()
    try:
        await asyncio.wait_for(asyncio.gather(task, return_exceptions=True), timeout=5.0)
    except asyncio.TimeoutError:
        logger.warning("api.lifespan.shutdown_timeout", timeout=5.0)
    app.state._drain_task = None


@asynccontextmanager
async def _lifespan(app: FastAPI, drain_interval: float):
    init_db()
    init_tracing()
    app.state._drain_task = None
    if drain_interval > 0:
        app.state._drain_task = asyncio.create_task(_drain_metrics(app, drain_interval))
    logger.info("api.lifespan.started", metrics_capacity=app.state.metrics.capacity, drain_interval=drain_interval)

    yield

    await _shutdown_tasks(app)
    shutdown_tracing()


def create_app(
    metrics_capacity: int = METRICS_BUFFER_SIZE,
    drain_interval: float = METRICS_DRAIN_INTERVAL_SECONDS,
) -> FastAPI:
    """Create the FastAPI app. Each app owns its own metrics buffer."""
    app = FastAPI(
        title="Vendor Tier Pricing",
        version="0.1.0",
        lifespan=lambda app: _lifespan(app, drain_interval),
    )
    app.state.metrics = MetricsBuffer(metrics_capacity)

    @app.middleware("http")
    async def record_request_metrics(request: Request, call_next):
        start = perf_counter()
        status = 500
        try:
            response = await call_next(request)
            status = response.status_code
            return response
        finally:
            route = request.scope.get("route")
            path = getattr(route, "path", None) or request.url.path
            app.state.metrics.record(
                f"{request.method} {path}",
                (perf_counter() - start) * 1000,
                status,
            )

    app.include_router(upload_router)
    app.include_router(vendor_router)
    app.include_router(offer_router)
    app.include_router(reference_router)
    app.include_router(user_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/metrics")
    async def metrics() -> dict[str, Any]:
        """Summary of requests buffered since the last drain."""
        buffer: MetricsBuffer = app.state.metrics
        return {"capacity": buffer.capacity, **buffer.summary()}

    return app
