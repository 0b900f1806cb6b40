from __future__ import annotations

import uvicorn

from app.core.app import create_app
from app.core.config import settings

app = create_app()


def run() -> None:
    uvicorn.run(
        "app.main:app",
        host=settings.HOST,
        port=settings.PORT,
        log_config=None,
        proxy_headers=True,
    )


if __name__ == "__main__":
    run()
