"""Domain enumerations for the admin portal."""

from enum import Enum


class UserType(str, Enum):
    """Kind of account the portal provisions."""

    DOCTOR = "doctor"
    PATIENT = "patient"

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid user type values as strings."""
        return [member.value for member in cls]


class AdminRole(str, Enum):
    """Role of an administrator signed in to the portal."""

    SUPERADMIN = "superadmin"
    ADMIN = "admin"
    MODERATOR = "moderator"


class ProvisioningState(str, Enum):
    """States of the per-account provisioning state machine.

    A successful run always passes through AWAITING_REAUTH and
    REAUTHENTICATING because creating a provider account replaces the
    caller's session.
    """

    IDLE = "idle"
    VALIDATING_INPUT = "validating_input"
    CREATING_ACCOUNT = "creating_account"
    PERSISTING_PROFILE = "persisting_profile"
    AWAITING_REAUTH = "awaiting_reauth"
    REAUTHENTICATING = "reauthenticating"
    NOTIFYING_EMAIL = "notifying_email"
    COMPLETED = "completed"
    FAILED = "failed"
