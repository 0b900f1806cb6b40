from __future__ import annotations

from html import escape

from fastapi import APIRouter
from fastapi.responses import HTMLResponse

from app.core.dependencies import SettingsDep, TimeServiceDep

router = APIRouter(tags=["docs"])

_PAGE = """<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>{title}</title>
</head>
<body>
<h1>{title}</h1>
<p>Request the current time for any IANA timezone:</p>
<pre>GET {endpoint}?timezone=Pacific/Auckland</pre>
<p>Responses are JSON and are cached for about one second. Each client may make
{max_requests} requests per {window_seconds} seconds.</p>
<h2>Errors</h2>
<ul>
<li><code>400</code> missing, malformed or unknown <code>timezone</code></li>
<li><code>429</code> rate limit exceeded</li>
<li><code>500</code> internal error</li>
</ul>
<h2>Supported timezones ({count})</h2>
<ul>
{items}
</ul>
</body>
</html>
"""


def render_docs_page(
    *,
    title: str,
    endpoint: str,
    timezones: list[str],
    max_requests: int,
    window_seconds: int,
) -> str:
    items = "\n".join(f"<li><code>{escape(name)}</code></li>" for name in timezones)
    return _PAGE.format(
        title=escape(title),
        endpoint=escape(endpoint),
        max_requests=max_requests,
        window_seconds=window_seconds,
        count=len(timezones),
        items=items,
    )


@router.get("/", response_class=HTMLResponse, include_in_schema=False)
async def docs_page_endpoint(service: TimeServiceDep, settings: SettingsDep) -> HTMLResponse:
    page = render_docs_page(
        title=settings.APP_NAME,
        endpoint=settings.API_PREFIX,
        timezones=service.list_timezones(),
        max_requests=settings.RATE_LIMIT_MAX_REQUESTS,
        window_seconds=settings.RATE_LIMIT_WINDOW_MS // 1000,
    )
    return HTMLResponse(page)


__all__ = ["router", "render_docs_page"]
