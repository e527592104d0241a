"""Service interfaces (ports) for the provisioning subsystem.

The core depends only on these Protocols; concrete adapters live in
portal.infrastructure and are wired in portal.core.container.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

from portal.domain.enums import UserType

if TYPE_CHECKING:
    from portal.application.dtos.account import (
        CredentialEmail,
        IdentityToken,
        NotificationReceipt,
    )


class IIdentityProvider(Protocol):
    """Account creation and authentication backend.

    create_account has a side effect the rest of the design is built
    around: on success the calling context is signed in as the new
    account, and whatever session was active before is gone.
    """

    async def create_account(self, email: str, secret: str) -> str:
        """Create the account and return its provider user id."""

    async def sign_in(self, email: str, secret: str) -> IdentityToken:
        """Authenticate and make the account the current user."""

    async def sign_out(self) -> None:
        """Clear the current user. No-op when nobody is signed in."""


class IProfileStore(Protocol):
    """External document store holding business profiles and admin records."""

    async def save_profile(
        self, user_type: UserType, user_id: str, data: dict[str, Any]
    ) -> None:
        """Write the profile document keyed by the provider user id."""

    async def get_admin(self, user_id: str) -> dict[str, Any] | None:
        """Return the admin record for a provider user id, or None."""


class INotifier(Protocol):
    """Email transport for credential notifications."""

    async def send_credential_email(self, email: CredentialEmail) -> NotificationReceipt:
        """Send the email. Raises NotificationException on failure."""


class ISecretCipher(Protocol):
    """Symmetric cipher used by the credential vault."""

    def encrypt(self, plaintext: str) -> str:
        """Return a storable token for plaintext."""

    def decrypt(self, token: str) -> str:
        """Return the plaintext for a token produced by encrypt."""
