"""Domain exceptions for the admin portal.

Every failure the provisioning subsystem reports is a PortalException
subclass carrying a machine-readable error_code. The HTTP layer maps
error codes to status codes; the batch scheduler copies them into
per-item results.
"""

from typing import Any


class PortalException(Exception):
    """Base exception for all portal errors.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. field, credential_id).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON body used by the HTTP exception handler."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationException(PortalException):
    """Raised when provisioning input is missing or malformed.

    Raised before any external call is made.
    """

    def __init__(self, message: str, field: str | None = None) -> None:
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class ConfigurationException(PortalException):
    """Raised at construction time when required configuration is malformed."""

    def __init__(self, message: str, setting: str | None = None) -> None:
        details = {"setting": setting} if setting else {}
        super().__init__(message, "CONFIGURATION_ERROR", details)


class AuthenticationException(PortalException):
    """Raised when sign-in fails (bad credentials, unknown or inactive admin)."""

    def __init__(self, message: str = "Authentication failed") -> None:
        super().__init__(message, "AUTHENTICATION_ERROR")


class AuthorizationException(PortalException):
    """Raised when the current admin lacks the permission for an operation."""

    def __init__(self, permission: str | None = None) -> None:
        message = (
            f"Permission denied: {permission}" if permission else "Permission denied"
        )
        details = {"permission": permission} if permission else {}
        super().__init__(message, "PERMISSION_DENIED", details)


class IdentityProviderException(PortalException):
    """Raised for identity provider failures without a more specific type."""

    def __init__(
        self,
        message: str = "Identity provider request failed",
        provider_code: str | None = None,
    ) -> None:
        details = {"provider_code": provider_code} if provider_code else {}
        super().__init__(message, "IDENTITY_PROVIDER_ERROR", details)


class DuplicateAccountException(PortalException):
    """Raised when the identity provider already has an account for the email."""

    def __init__(self, email: str) -> None:
        super().__init__(
            "An account with this email already exists",
            "DUPLICATE_ACCOUNT",
            {"email": email},
        )


class WeakSecretException(PortalException):
    """Raised when the identity provider rejects the secret as too weak."""

    def __init__(self, message: str = "Password is too weak") -> None:
        super().__init__(message, "WEAK_SECRET")


class RateLimitException(PortalException):
    """Raised when the identity provider throttles the caller."""

    def __init__(
        self, message: str = "Too many requests. Please try again later"
    ) -> None:
        super().__init__(message, "RATE_LIMITED")


class ReauthenticationException(PortalException):
    """Raised when the admin session cannot be restored after account creation."""

    def __init__(
        self,
        message: str = "Could not restore the administrator session",
        email: str | None = None,
    ) -> None:
        details = {"email": email} if email else {}
        super().__init__(message, "REAUTHENTICATION_ERROR", details)


class NotificationException(PortalException):
    """Raised by a notifier when the credential email could not be sent.

    Non-fatal for provisioning: the orchestrator records it on the result.
    """

    def __init__(self, message: str, recipient: str | None = None) -> None:
        details = {"recipient": recipient} if recipient else {}
        super().__init__(message, "NOTIFICATION_ERROR", details)


class ExpiredCredentialException(PortalException):
    """Raised when a temporary credential is past expiry or already sent."""

    def __init__(self, credential_id: str, reason: str = "expired") -> None:
        super().__init__(
            f"Temporary credential is no longer available: {credential_id}",
            "CREDENTIAL_EXPIRED",
            {"credential_id": credential_id, "reason": reason},
        )


class CredentialNotFoundException(PortalException):
    """Raised when no temporary credential exists for the id."""

    def __init__(self, credential_id: str) -> None:
        super().__init__(
            f"Temporary credential not found: {credential_id}",
            "CREDENTIAL_NOT_FOUND",
            {"credential_id": credential_id},
        )


class PartiallyProvisionedException(PortalException):
    """Raised when the provider account exists but its profile could not be written.

    The provider account is not rolled back; details carry what an operator
    needs to reconcile it by hand.
    """

    def __init__(
        self,
        email: str,
        user_id: str,
        reason: str,
        session_restored: bool,
    ) -> None:
        super().__init__(
            f"Account {email} was created but its profile could not be saved",
            "PARTIALLY_PROVISIONED",
            {
                "email": email,
                "user_id": user_id,
                "reason": reason,
                "session_restored": session_restored,
            },
        )
