"""Notifier that logs instead of sending email."""

import logging

from portal.application.dtos.account import CredentialEmail, NotificationReceipt
from portal.shared.utils.generators import generate_prefixed_id

logger = logging.getLogger(__name__)


class LogOnlyNotifier:
    """INotifier for local development: records the send, never the secret.

    Use when no email API key is configured.
    """

    async def send_credential_email(self, email: CredentialEmail) -> NotificationReceipt:
        message_id = generate_prefixed_id("log")
        logger.info(
            "Credential email: would send to %s (%s, clinic=%r) as %s",
            email.recipient_email,
            email.user_type.value,
            email.clinic_name,
            message_id,
        )
        return NotificationReceipt(message_id=message_id)
