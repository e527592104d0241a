"""DTOs for single-account provisioning, sign-in and notifications."""

from dataclasses import dataclass, field
from typing import Any

from portal.domain.enums import ProvisioningState, UserType


@dataclass(frozen=True)
class AccountProfile:
    """Profile fields submitted for a new doctor or patient account.

    ``attributes`` carries the remaining business fields (specialty,
    address, ...) which are persisted as-is.
    """

    email: str
    first_name: str
    last_name: str
    user_type: UserType = UserType.DOCTOR
    middle_name: str | None = None
    phone: str | None = None
    clinic_name: str | None = None
    created_by: str | None = None
    attributes: dict[str, Any] = field(default_factory=dict)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


@dataclass(frozen=True)
class AdminCredentials:
    """Administrator email/password supplied per call for reauthentication. Never stored."""

    email: str
    password: str

    def __repr__(self) -> str:
        return f"AdminCredentials(email={self.email!r}, password='***')"


@dataclass(frozen=True)
class IdentityToken:
    """Result of a provider sign-in."""

    user_id: str
    email: str
    id_token: str


@dataclass(frozen=True)
class ErrorInfo:
    """Typed error attached to a result instead of being raised."""

    code: str
    message: str

    @classmethod
    def from_exception(cls, exc: Exception) -> "ErrorInfo":
        code = getattr(exc, "error_code", None) or "INTERNAL_ERROR"
        message = getattr(exc, "message", None) or str(exc) or exc.__class__.__name__
        return cls(code=code, message=message)


@dataclass(frozen=True)
class AccountCreationResult:
    """Outcome of ProvisioningOrchestrator.create_account.

    The account-creation outcome is authoritative: a failed reauthentication
    or email is reported here, not raised.
    """

    user_id: str
    credential_id: str
    secret: str
    email: str
    user_type: UserType
    email_sent: bool
    session_restored: bool
    message_id: str | None = None
    notification_error: ErrorInfo | None = None
    reauthentication_error: ErrorInfo | None = None
    states: tuple[ProvisioningState, ...] = ()

    def __repr__(self) -> str:
        return (
            f"AccountCreationResult(user_id={self.user_id!r}, credential_id={self.credential_id!r}, "
            f"email={self.email!r}, email_sent={self.email_sent}, session_restored={self.session_restored})"
        )


@dataclass(frozen=True)
class CredentialEmail:
    """Message handed to the notifier. Contains the plaintext secret; never log it."""

    recipient_email: str
    recipient_name: str
    secret: str
    user_type: UserType
    admin_name: str
    clinic_name: str
    login_url: str

    def __repr__(self) -> str:
        return (
            f"CredentialEmail(recipient_email={self.recipient_email!r}, "
            f"user_type={self.user_type.value!r}, secret='***')"
        )


@dataclass(frozen=True)
class NotificationReceipt:
    """Returned by a notifier after a successful send."""

    message_id: str | None


@dataclass(frozen=True)
class CredentialEmailResult:
    """Outcome of send_credential_email: ``{success, message_id?, error?}``."""

    success: bool
    message_id: str | None = None
    error: ErrorInfo | None = None
