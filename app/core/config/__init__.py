from __future__ import annotations

import os
from pathlib import Path
from typing import Type

from .base import AppBaseSettings
from .dev import DevelopmentSettings
from .prod import ProductionSettings

EnvironmentSettings = Type[AppBaseSettings]

_ENVIRONMENT_CLASS_MAP: dict[str, EnvironmentSettings] = {
    "development": DevelopmentSettings,
    "dev": DevelopmentSettings,
    "production": ProductionSettings,
    "prod": ProductionSettings,
}

_DEFAULT_ENVIRONMENT = "development"


def _read_env_hint(env_file: Path = Path(".env")) -> str | None:
    """Find the ENVIRONMENT value before the settings class is chosen"""
    candidate = os.environ.get("ENVIRONMENT")
    if candidate:
        return candidate

    if not env_file.exists():
        return None

    try:
        lines = env_file.read_text(encoding="utf-8").splitlines()
    except (OSError, UnicodeDecodeError):
        return None

    for line in lines:
        key, sep, value = line.strip().partition("=")
        if sep and key.strip() == "ENVIRONMENT":
            return value.strip().strip("'\"")
    return None


def _collect_env_files(env_name: str) -> list[Path]:
    env_candidates = [Path(".env"), Path(f".env.{env_name}")]
    return [path for path in env_candidates if path.exists()]


def load_settings(env_name: str | None = None) -> AppBaseSettings:
    name = (env_name or _read_env_hint() or _DEFAULT_ENVIRONMENT).strip().lower()
    settings_cls = _ENVIRONMENT_CLASS_MAP.get(name, DevelopmentSettings)

    configured_cls = settings_cls.with_env_files(_collect_env_files(name))
    return configured_cls()  # type: ignore[call-arg]


settings: AppBaseSettings = load_settings()

__all__ = ["settings", "load_settings", "AppBaseSettings", "DevelopmentSettings", "ProductionSettings"]
