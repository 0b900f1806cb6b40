from __future__ import annotations

import logging
import os
import socket
import sys
from typing import Final

from loguru import logger as _logger

from app.core.config import AppBaseSettings, settings as global_settings
from app.core.context import (
    get_request_context,
    reset_request_context,
    update_request_context,
)

_LOGGER_CONFIGURED: bool = False

_LOGGER_NAMES_TO_INTERCEPT: Final = (
    "uvicorn",
    "uvicorn.error",
    "uvicorn.access",
    "uvicorn.asgi",
)


def _static_extra(cfg: AppBaseSettings) -> dict[str, str | int]:
    """Fields attached to every log record of this process"""
    return {
        "app": cfg.APP_NAME,
        "environment": cfg.ENVIRONMENT,
        "version": cfg.VERSION,
        "host": socket.gethostname(),
        "pid": os.getpid(),
    }


class InterceptHandler(logging.Handler):
    def emit(self, record: logging.LogRecord) -> None:  # noqa: D401
        try:
            level = _logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        _logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def _setup_stdlib_logging(level: int) -> None:
    handler = InterceptHandler()
    logging.basicConfig(handlers=[handler], level=level, force=True)

    for name in _LOGGER_NAMES_TO_INTERCEPT:
        std_logger = logging.getLogger(name)
        std_logger.handlers = [handler]
        std_logger.propagate = False
        std_logger.setLevel(level)


def _patch_record(record: dict) -> None:
    """Inject request context into every log record"""
    filtered = get_request_context()
    if filtered:
        record.setdefault("extra", {}).update(filtered)


def setup_logging(cfg: AppBaseSettings | None = None) -> None:
    global _LOGGER_CONFIGURED
    if _LOGGER_CONFIGURED:
        return

    cfg = cfg or global_settings

    _logger.remove()
    _logger.configure(extra=_static_extra(cfg), patcher=_patch_record)  # type: ignore[arg-type]

    level_name = cfg.LOG_LEVEL.upper()
    level = getattr(logging, level_name, logging.INFO)

    if cfg.LOG_CONSOLE_ENABLED:
        _logger.add(
            sys.stdout,
            level=level_name,
            serialize=True,
            enqueue=True,
            backtrace=cfg.DEBUG,
            diagnose=cfg.DEBUG,
        )

    _setup_stdlib_logging(level)

    _LOGGER_CONFIGURED = True


logger = _logger

__all__ = ["logger", "setup_logging", "update_request_context", "reset_request_context", "get_request_context"]
