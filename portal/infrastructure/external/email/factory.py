"""Notifier selection from settings."""

import httpx

from portal.application.interfaces.services import INotifier
from portal.core.config import Settings
from portal.infrastructure.external.email.log_notifier import LogOnlyNotifier
from portal.infrastructure.external.email.resend_notifier import ResendNotifier
from portal.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


def create_notifier(
    settings: Settings, *, http_client: httpx.AsyncClient | None = None
) -> INotifier:
    """Return the notifier named by settings.email_backend ("log" or "resend")."""
    if settings.email_backend == "resend" and settings.resend_api_key:
        logger.info("Using Resend notifier (sender %s)", settings.email_from)
        return ResendNotifier(
            api_key=settings.resend_api_key.get_secret_value(),
            sender=settings.email_from,
            base_url=settings.resend_base_url,
            http_client=http_client,
        )
    logger.info("Using log-only notifier; credential emails are not delivered")
    return LogOnlyNotifier()
