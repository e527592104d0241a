"""Account provisioning API schemas."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from portal.application.dtos.account import AccountProfile
from portal.domain.enums import ProvisioningState, UserType
from portal.schemas.common import ErrorOut


class AccountProfileIn(BaseModel):
    """Profile fields for one account.

    Email and secret are checked by the provisioning service so that bulk
    imports report bad rows per record instead of rejecting the request.
    """

    email: str = Field(..., description="Login email of the new account")
    first_name: str = ""
    last_name: str = ""
    middle_name: str | None = None
    phone: str | None = None
    clinic_name: str | None = None
    temporary_password: str = Field(default="", description="Temporary password chosen by the admin")
    attributes: dict[str, Any] = Field(default_factory=dict, description="Other profile fields, stored as-is")

    def to_profile(self, user_type: UserType, created_by: str | None) -> AccountProfile:
        return AccountProfile(
            email=self.email,
            first_name=self.first_name,
            last_name=self.last_name,
            user_type=user_type,
            middle_name=self.middle_name,
            phone=self.phone,
            clinic_name=self.clinic_name,
            created_by=created_by,
            attributes=dict(self.attributes),
        )


class CreateAccountRequest(BaseModel):
    """Request body for POST /accounts/doctors and /accounts/patients."""

    profile: AccountProfileIn
    admin_password: str = Field(
        ..., min_length=1, description="Current admin's password, used to restore the session"
    )
    send_email: bool = True


class CreateAccountResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user_id: str
    credential_id: str
    secret: str
    email: str
    user_type: UserType
    email_sent: bool
    session_restored: bool
    message_id: str | None = None
    notification_error: ErrorOut | None = None
    reauthentication_error: ErrorOut | None = None
    states: list[ProvisioningState] = Field(default_factory=list)


class BulkCreateRequest(BaseModel):
    """Request body for POST /accounts/doctors/bulk."""

    records: list[AccountProfileIn]
    batch_size: int | None = Field(default=None, description="Defaults to BULK_BATCH_SIZE")
    admin_password: str = Field(..., min_length=1)
    send_email: bool = True


class ProvisioningResultOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    index: int
    email: str
    success: bool
    user_id: str | None = None
    credential_id: str | None = None
    email_sent: bool = False
    session_restored: bool = False
    message_id: str | None = None
    error: ErrorOut | None = None
    notification_error: ErrorOut | None = None
    reauthentication_error: ErrorOut | None = None


class BatchSummaryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    total: int
    successful: int
    failed: int
    emails_sent: int
    error_breakdown: dict[str, int] = Field(default_factory=dict)


class BatchMetricsOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    batch_number: int
    record_count: int
    successful: int
    failed: int
    duration_seconds: float


class BulkCreateResponse(BaseModel):
    """``{summary, results[], errors[]}`` plus per-batch metrics."""

    summary: BatchSummaryOut
    results: list[ProvisioningResultOut]
    errors: list[ProvisioningResultOut]
    batches: list[BatchMetricsOut]
