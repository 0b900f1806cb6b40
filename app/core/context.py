from __future__ import annotations

from contextvars import ContextVar

request_id_ctx: ContextVar[str | None] = ContextVar("request_id", default=None)
trace_id_ctx: ContextVar[str | None] = ContextVar("trace_id", default=None)
path_ctx: ContextVar[str | None] = ContextVar("path", default=None)
method_ctx: ContextVar[str | None] = ContextVar("method", default=None)
client_id_ctx: ContextVar[str | None] = ContextVar("client_id", default=None)

_CONTEXT_VARS: dict[str, ContextVar[str | None]] = {
    "request_id": request_id_ctx,
    "trace_id": trace_id_ctx,
    "path": path_ctx,
    "method": method_ctx,
    "client_id": client_id_ctx,
}


def reset_request_context() -> None:
    for var in _CONTEXT_VARS.values():
        var.set(None)


def update_request_context(**kwargs: object) -> None:
    for name, value in kwargs.items():
        var = _CONTEXT_VARS.get(name)
        if var is not None:
            var.set(_stringify(value))


def get_request_context() -> dict[str, str]:
    context = {name: var.get() for name, var in _CONTEXT_VARS.items()}
    return {key: value for key, value in context.items() if value}


def _stringify(value: object | None) -> str | None:
    if value is None:
        return None
    return str(value)


__all__ = [
    "request_id_ctx",
    "trace_id_ctx",
    "path_ctx",
    "method_ctx",
    "client_id_ctx",
    "reset_request_context",
    "update_request_context",
    "get_request_context",
]
