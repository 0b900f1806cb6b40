from __future__ import annotations
from .base import AppBaseSettings

class ProductionSettings(AppBaseSettings):
    """Defaults tuned for production deployments"""

    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    RATE_LIMIT_FALLBACK_TO_PEER: bool = True
