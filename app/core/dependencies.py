from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from app.core.config import AppBaseSettings
from app.domains.timezones.ratelimit import UNKNOWN_CLIENT
from app.domains.timezones.service import TimeService
from app.domains.timezones.state import TimeServiceState


def get_settings(request: Request) -> AppBaseSettings:
    return request.app.state.settings


def get_service_state(request: Request) -> TimeServiceState:
    return request.app.state.time_state


SettingsDep = Annotated[AppBaseSettings, Depends(get_settings)]
StateDep = Annotated[TimeServiceState, Depends(get_service_state)]


def get_time_service(state: StateDep, settings: SettingsDep) -> TimeService:
    return TimeService(state, format_check=settings.TIMEZONE_FORMAT_CHECK)


def get_client_id(request: Request, settings: SettingsDep) -> str:
    """Identity used for rate limiting.

    Clients without the configured IP header share the ``unknown`` bucket
    unless ``RATE_LIMIT_FALLBACK_TO_PEER`` is set.
    """
    client_ip = request.headers.get(settings.CLIENT_IP_HEADER)
    if client_ip:
        return client_ip.strip()
    if settings.RATE_LIMIT_FALLBACK_TO_PEER and request.client is not None:
        return request.client.host
    return UNKNOWN_CLIENT


TimeServiceDep = Annotated[TimeService, Depends(get_time_service)]
ClientId = Annotated[str, Depends(get_client_id)]

__all__ = [
    "ClientId",
    "SettingsDep",
    "StateDep",
    "TimeServiceDep",
    "get_client_id",
    "get_service_state",
    "get_settings",
    "get_time_service",
]
