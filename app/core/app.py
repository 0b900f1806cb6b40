from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Awaitable, Callable
from uuid import uuid4

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from prometheus_fastapi_instrumentator import Instrumentator
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response
from starlette.types import ASGIApp

from app.api.health import router as health_router
from app.core.clock import Clock
from app.core.config import AppBaseSettings, settings as global_settings
from app.core.logging import logger, reset_request_context, setup_logging, update_request_context
from app.domains.timezones.docs import router as docs_router
from app.domains.timezones.exceptions import TimeComputationError, TimeServiceError
from app.domains.timezones.routes import router as time_router, time_service_error_handler
from app.domains.timezones.state import TimeServiceState
from app.infra.metrics.opentelemetry import ObservabilityController
from app.infra.metrics.prometheus import REPORT_FAILURES


class RequestContextMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        request_id = request.headers.get("x-request-id") or str(uuid4())
        trace_id = request.headers.get("x-trace-id") or str(uuid4())
        request.state.request_id = request_id
        update_request_context(
            request_id=request_id,
            trace_id=trace_id,
            path=str(request.url.path),
            method=request.method,
        )
        logger.bind(event="request", stage="start").info("Handling request")
        try:
            response = await call_next(request)
        finally:
            reset_request_context()
        response.headers.setdefault("x-request-id", request_id)
        response.headers.setdefault("x-trace-id", trace_id)
        return response


def cors_headers(allow_origin: str = "*") -> dict[str, str]:
    return {
        "Access-Control-Allow-Origin": allow_origin,
        "Access-Control-Allow-Methods": "GET, OPTIONS",
        "Access-Control-Allow-Headers": "Content-Type",
    }


class CORSHeadersMiddleware(BaseHTTPMiddleware):
    """Adds the permissive CORS headers to every response, errors included."""

    def __init__(self, app: ASGIApp, *, allow_origin: str = "*") -> None:
        super().__init__(app)
        self._headers = cors_headers(allow_origin)

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        response = await call_next(request)
        for name, value in self._headers.items():
            response.headers.setdefault(name, value)
        return response


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    # Rendered by the outermost server-error layer, so the CORS middleware never sees it.
    REPORT_FAILURES.inc()
    logger.bind(error=type(exc).__name__).opt(exception=exc).error("Unhandled error while serving request")
    allow_origin = request.app.state.settings.CORS_ALLOW_ORIGIN
    return JSONResponse(
        {"error": TimeComputationError().message},
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        headers=cors_headers(allow_origin),
    )


def create_app(settings: AppBaseSettings | None = None, *, clock: Clock | None = None) -> FastAPI:
    """create and configure a FASTAPI application instance"""
    cfg = settings or global_settings
    setup_logging(cfg)

    state = TimeServiceState.from_settings(cfg, clock=clock)
    observability = ObservabilityController(cfg)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.bind(event="lifespan", stage="startup").info("Application startup")
        observability.startup(app)
        yield
        await observability.shutdown()
        app.state.time_state.close()
        logger.bind(event="lifespan", stage="shutdown").info("Application shutdown")

    app = FastAPI(
        title=cfg.APP_NAME,
        debug=cfg.DEBUG,
        version=cfg.VERSION,
        lifespan=lifespan,
    )
    app.state.settings = cfg
    app.state.time_state = state

    app.add_middleware(RequestContextMiddleware)
    app.add_middleware(CORSHeadersMiddleware, allow_origin=cfg.CORS_ALLOW_ORIGIN)
    app.add_exception_handler(TimeServiceError, time_service_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    app.include_router(docs_router)
    app.include_router(health_router, prefix=cfg.API_PREFIX)
    app.include_router(time_router, prefix=cfg.API_PREFIX)

    Instrumentator(should_group_status_codes=True, should_ignore_untemplated=True).instrument(app).expose(
        app,
        endpoint="/metrics",
        include_in_schema=False,
        tags=["metrics"],
    )

    return app
