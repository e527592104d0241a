"""Temporary credential API schemas."""

from pydantic import BaseModel, ConfigDict

from portal.schemas.common import ErrorOut


class SendCredentialRequest(BaseModel):
    """Optional overrides for the credential email."""

    recipient_name: str | None = None
    admin_name: str | None = None
    clinic_name: str | None = None
    login_url: str | None = None


class CredentialEmailResponse(BaseModel):
    """``{success, message_id?, error?}``"""

    model_config = ConfigDict(from_attributes=True)

    success: bool
    message_id: str | None = None
    error: ErrorOut | None = None


class VaultStatsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    total: int
    expired: int
    sent: int


class SweepResponse(BaseModel):
    removed: int
