"""Credential notifier backed by the Resend HTTP API."""

from __future__ import annotations

import logging

import httpx

from portal.application.dtos.account import CredentialEmail, NotificationReceipt
from portal.domain.exceptions import ConfigurationException, NotificationException
from portal.infrastructure.external.email.message import credential_subject, credential_text

logger = logging.getLogger(__name__)

DEFAULT_SENDER = "UniHealth Admin <noreply@resend.dev>"


class ResendNotifier:
    """POSTs credential emails to ``/emails`` and returns the Resend message id."""

    def __init__(
        self,
        api_key: str,
        sender: str = DEFAULT_SENDER,
        base_url: str = "https://api.resend.com",
        *,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        if "@" not in sender:
            raise ConfigurationException(
                'Invalid sender email format. Use "Name <email@domain.com>" or "email@domain.com"',
                setting="email_from",
            )
        self._api_key = api_key
        self._sender = sender
        self._base_url = base_url.rstrip("/")
        self._http = http_client if http_client is not None else httpx.AsyncClient(timeout=30.0)
        self._owns_http = http_client is None

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()

    async def send_credential_email(self, email: CredentialEmail) -> NotificationReceipt:
        payload = {
            "from": self._sender,
            "to": [email.recipient_email],
            "subject": credential_subject(email),
            "text": credential_text(email),
        }
        try:
            resp = await self._http.post(
                f"{self._base_url}/emails",
                headers={"Authorization": f"Bearer {self._api_key}"},
                json=payload,
            )
        except httpx.HTTPError as e:
            raise NotificationException(
                f"Email service unreachable: {e.__class__.__name__}",
                recipient=email.recipient_email,
            ) from e
        if resp.status_code >= 400:
            try:
                detail = resp.json().get("message") or resp.reason_phrase
            except ValueError:
                detail = resp.reason_phrase
            raise NotificationException(
                f"Resend API error: {detail}", recipient=email.recipient_email
            )
        message_id = (resp.json() or {}).get("id")
        logger.debug("Resend accepted email for %s: %s", email.recipient_email, message_id)
        return NotificationReceipt(message_id=message_id)
