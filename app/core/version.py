"""Version lookup for the application.

The version comes from the installed distribution metadata, with an
``APP_VERSION`` environment override for container images built from a
source checkout.
"""

from __future__ import annotations

import os
from importlib.metadata import PackageNotFoundError, version

DISTRIBUTION_NAME = "timezone-clock-api"
_FALLBACK_VERSION = "0.0.0-dev"


def get_app_version() -> str:
    """Return the running application version.

    Priority order:
    1. APP_VERSION environment variable (Docker/CI override)
    2. Installed package metadata
    3. ``0.0.0-dev`` when running from an uninstalled checkout

    Examples:
        >>> get_app_version()  # doctest: +SKIP
        '0.1.0'
    """
    env_version = os.getenv("APP_VERSION")
    if env_version:
        return env_version

    try:
        return version(DISTRIBUTION_NAME)
    except PackageNotFoundError:
        return _FALLBACK_VERSION


__all__ = ["DISTRIBUTION_NAME", "get_app_version"]
