import logging
from contextlib import asynccontextmanager
from typing import List, Optional

from fastapi import FastAPI, Response
from fastapi.responses import ORJSONResponse, PlainTextResponse

from sitewatch.context import MonitorContext
from sitewatch.contracts.site import SiteReport

logger = logging.getLogger(__name__)


def _not_found(message: str) -> PlainTextResponse:
    return PlainTextResponse(message, status_code=404)


def create_app(context: Optional[MonitorContext] = None) -> FastAPI:
    """
    Build the HTTP API around a monitor context. The scheduler runs for the
    lifetime of the application.
    """
    context = context or MonitorContext.from_config()

    @asynccontextmanager
    async def lifespan(app):
        await context.start()
        logger.info("sitewatch API ready.")
        yield
        await context.stop()
        logger.info("sitewatch API shut down.")

    app = FastAPI(lifespan=lifespan, default_response_class=ORJSONResponse)
    app.state.context = context
    app.middleware("http")(context.metrics_manager.prometheus_middleware)

    @app.get("/site", response_class=PlainTextResponse)
    async def site(name: Optional[str] = None):
        if not name:
            return PlainTextResponse(
                "Missing 'name' query parameter.", status_code=400
            )
        status = await context.query_service.find_by_name(name)
        if status is None:
            return _not_found(f"Site not found: {name}")
        context.request_counter.increment("/site")
        availability = "true" if status.available else "false"
        return (
            f"Site: {status.url}, Availability: {availability}, "
            f"Response Time: {status.display_latency}"
        )

    @app.get("/min", response_class=PlainTextResponse)
    async def min_latency():
        status = await context.query_service.min_latency()
        if status is None:
            return _not_found("No available sites.")
        context.request_counter.increment("/min")
        return (
            f"Site with minimum response time: {status.url}, "
            f"Response Time: {status.display_latency}"
        )

    @app.get("/max", response_class=PlainTextResponse)
    async def max_latency():
        status = await context.query_service.max_latency()
        if status is None:
            return _not_found("No available sites.")
        context.request_counter.increment("/max")
        return (
            f"Site with maximum response time: {status.url}, "
            f"Response Time: {status.display_latency}"
        )

    @app.get("/stats", response_class=PlainTextResponse)
    async def stats():
        lines = ["Request statistics:"]
        for route, count in context.request_counter.snapshot().items():
            lines.append(f"{route}: {count}")
        return "\n".join(lines) + "\n"

    @app.get("/sites", response_model=List[SiteReport])
    async def sites():
        return [
            SiteReport.from_status(s) for s in await context.registry.list_sites()
        ]

    @app.get("/metrics")
    def metrics():
        return Response(
            context.metrics_manager.render(),
            media_type=context.metrics_manager.content_type,
        )

    return app

