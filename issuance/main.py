from __future__ import annotations

import logging

from issuance.core.clock import Clock, LogicalClock, WallClock
from issuance.core.config import Settings, load_settings
from issuance.core.logging import setup_logging
from issuance.services.registry import IssuanceRegistry

logger = logging.getLogger(__name__)


def build_clock(settings: Settings) -> Clock:
    if settings.registry_clock == "wall":
        return WallClock()
    return LogicalClock()


def create_registry(settings: Settings | None = None) -> IssuanceRegistry:
    """Configure logging and build an empty registry owned by the configured admin."""
    settings = settings if settings is not None else load_settings()
    setup_logging(settings.log_level, json_format=settings.log_json)

    registry = IssuanceRegistry(settings.registry_admin, clock=build_clock(settings))
    logger.info(
        "issuance registry started  env=%s log_level=%s admin=%s clock=%s",
        settings.app_env,
        settings.log_level,
        settings.registry_admin,
        settings.registry_clock,
    )
    return registry
