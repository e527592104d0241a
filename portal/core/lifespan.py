"""Application lifespan: build, start and close PortalServices.

A container already placed on app.state (tests) is reused; only its
vault sweep is stopped on exit, closing it is left to its owner.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from portal.core.config import get_settings
from portal.core.container import PortalServices
from portal.shared.telemetry.telemetry import TelemetryConfig, get_telemetry, set_telemetry

logger = logging.getLogger(__name__)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings = get_settings()

    preset = getattr(app.state, "services", None)
    services = preset or PortalServices.build(settings)
    app.state.services = services
    services.start()
    logger.info(
        "Portal services started (profile store=%s, email=%s, credential TTL=%ss)",
        settings.profile_store_backend,
        settings.email_backend,
        settings.credential_ttl_seconds,
    )

    if settings.telemetry_enabled:
        telemetry = TelemetryConfig.from_settings(settings)
        if telemetry.setup_telemetry() is not None:
            telemetry.instrument(app)
            set_telemetry(telemetry)

    try:
        yield
    finally:
        if preset is None:
            await services.close()
            app.state.services = None
        else:
            await services.vault.stop()
        telemetry_instance = get_telemetry()
        if telemetry_instance is not None:
            telemetry_instance.shutdown()
            set_telemetry(None)
