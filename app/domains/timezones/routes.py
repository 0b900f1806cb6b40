from __future__ import annotations

import json
from typing import Annotated, Any

from fastapi import APIRouter, Query, Request, Response, status
from fastapi.responses import JSONResponse

from app.core.dependencies import ClientId, SettingsDep, TimeServiceDep
from app.core.logging import logger, update_request_context
from app.domains.timezones.exceptions import TimeServiceError
from app.domains.timezones.schemas import ErrorResponse, TimeReport, TimezoneCollection

router = APIRouter(tags=["time"])

_ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse, "description": "Missing, malformed or unknown timezone"},
    status.HTTP_429_TOO_MANY_REQUESTS: {"model": ErrorResponse, "description": "Rate limit exceeded"},
    status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse, "description": "Report could not be computed"},
}


class IndentedJSONResponse(JSONResponse):
    def render(self, content: Any) -> bytes:
        return json.dumps(content, indent=2, ensure_ascii=False).encode("utf-8")


def cache_control_header(ttl_ms: int) -> str:
    return f"public, max-age={max(1, ttl_ms // 1000)}"


def first_query_values(request: Request) -> dict[str, str]:
    """Query parameters with a repeated name reduced to its first occurrence."""
    values: dict[str, str] = {}
    for name, value in request.query_params.multi_items():
        values.setdefault(name, value)
    return values


@router.get("", response_model=TimeReport, responses=_ERROR_RESPONSES, summary="Current time in a timezone")
async def get_time_endpoint(
    request: Request,
    service: TimeServiceDep,
    settings: SettingsDep,
    client_id: ClientId,
    timezone: Annotated[
        str | None,
        Query(description="IANA timezone identifier, e.g. Pacific/Auckland"),
    ] = None,
) -> Response:
    # Query params are read as a whole so unrelated parameters still shape the cache key.
    update_request_context(client_id=client_id)
    report = service.report_for(first_query_values(request), client_id)
    return IndentedJSONResponse(
        report.model_dump(),
        headers={"Cache-Control": cache_control_header(settings.CACHE_TTL_MS)},
    )


@router.options("", status_code=status.HTTP_204_NO_CONTENT, include_in_schema=False)
async def preflight_endpoint() -> Response:
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/timezones", response_model=TimezoneCollection, summary="Supported timezone identifiers")
async def list_timezones_endpoint(service: TimeServiceDep) -> TimezoneCollection:
    timezones = service.list_timezones()
    return TimezoneCollection(timezones=timezones, count=len(timezones))


async def time_service_error_handler(request: Request, exc: TimeServiceError) -> JSONResponse:
    logger.bind(status_code=exc.status_code, error=type(exc).__name__).info("Request rejected")
    return JSONResponse({"error": exc.message}, status_code=exc.status_code)


__all__ = [
    "router",
    "time_service_error_handler",
    "IndentedJSONResponse",
    "cache_control_header",
    "first_query_values",
]
