"""In-process test doubles for the identity provider, notifier, profile store and clock."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

from portal.application.dtos.account import (
    CredentialEmail,
    IdentityToken,
    NotificationReceipt,
)
from portal.domain.enums import UserType
from portal.domain.exceptions import (
    AuthenticationException,
    DuplicateAccountException,
    NotificationException,
)
from portal.infrastructure.persistence.in_memory_profile_store import InMemoryProfileStore

ADMIN_UID = "uid-admin"
ADMIN_EMAIL = "admin@unihealth.org"
ADMIN_PASSWORD = "AdminPass1!"
VALID_SECRET = "Xy9!za02Qr"


class FakeClock:
    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


class RecordingSleeper:
    """Async sleeper that records requested delays instead of waiting."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


class FakeIdentityProvider:
    """Identity provider double that switches its current user on create_account."""

    def __init__(self) -> None:
        self.accounts: dict[str, tuple[str, str]] = {}
        self.current: IdentityToken | None = None
        self.calls: list[tuple[str, str | None]] = []
        self.create_errors: dict[str, Exception] = {}

    def add_account(self, email: str, secret: str, uid: str | None = None) -> str:
        uid = uid or f"uid-{len(self.accounts) + 1}"
        self.accounts[email] = (uid, secret)
        return uid

    def count(self, method: str) -> int:
        return sum(1 for name, _ in self.calls if name == method)

    async def create_account(self, email: str, secret: str) -> str:
        self.calls.append(("create_account", email))
        if email in self.create_errors:
            raise self.create_errors[email]
        if email in self.accounts:
            raise DuplicateAccountException(email)
        uid = self.add_account(email, secret, uid=f"uid-{email.split('@')[0]}")
        self.current = IdentityToken(user_id=uid, email=email, id_token=f"token-{uid}")
        return uid

    async def sign_in(self, email: str, secret: str) -> IdentityToken:
        self.calls.append(("sign_in", email))
        account = self.accounts.get(email)
        if account is None or account[1] != secret:
            raise AuthenticationException("Invalid email or password")
        self.current = IdentityToken(user_id=account[0], email=email, id_token=f"token-{account[0]}")
        return self.current

    async def sign_out(self) -> None:
        self.calls.append(("sign_out", None))
        self.current = None


class FakeNotifier:
    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.sent: list[CredentialEmail] = []

    async def send_credential_email(self, email: CredentialEmail) -> NotificationReceipt:
        if self.fail:
            raise NotificationException("Resend API error: rejected", recipient=email.recipient_email)
        self.sent.append(email)
        return NotificationReceipt(message_id=f"msg-{len(self.sent)}")


class FlakyProfileStore(InMemoryProfileStore):
    """InMemoryProfileStore whose profile writes can be made to fail."""

    def __init__(self, admins: dict[str, dict[str, Any]] | None = None) -> None:
        super().__init__(admins=admins)
        self.fail_saves = False

    async def save_profile(
        self, user_type: UserType, user_id: str, data: dict[str, Any]
    ) -> None:
        if self.fail_saves:
            raise RuntimeError("profile store unavailable")
        await super().save_profile(user_type, user_id, data)
