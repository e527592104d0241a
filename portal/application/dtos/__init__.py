"""Application DTOs (plain dataclasses, no transport or persistence types)."""

from portal.application.dtos.account import (
    AccountCreationResult,
    AccountProfile,
    AdminCredentials,
    CredentialEmail,
    CredentialEmailResult,
    ErrorInfo,
    IdentityToken,
    NotificationReceipt,
)
from portal.application.dtos.batch import (
    BatchMetrics,
    BatchSummary,
    BulkProvisioningOutcome,
    PacingPolicy,
    ProvisioningRequest,
    ProvisioningResult,
)

__all__ = [
    "AccountCreationResult",
    "AccountProfile",
    "AdminCredentials",
    "BatchMetrics",
    "BatchSummary",
    "BulkProvisioningOutcome",
    "CredentialEmail",
    "CredentialEmailResult",
    "ErrorInfo",
    "IdentityToken",
    "NotificationReceipt",
    "PacingPolicy",
    "ProvisioningRequest",
    "ProvisioningResult",
]
