"""Admin auth API schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from portal.domain.entities.admin import ROLE_PERMISSIONS
from portal.domain.entities.session import AdminSession
from portal.domain.enums import AdminRole


class SignInRequest(BaseModel):
    email: EmailStr = Field(...)
    password: str = Field(..., min_length=1)


class ReauthenticateRequest(BaseModel):
    """Request body for POST /auth/reauthenticate."""

    admin_email: EmailStr = Field(...)
    admin_password: str = Field(..., min_length=1)


class SessionResponse(BaseModel):
    """The administrator session (never includes tokens)."""

    model_config = ConfigDict(from_attributes=True)

    session_id: str
    user_id: str
    email: str
    role: AdminRole
    created_at: datetime
    last_activity: datetime
    expires_at: datetime
    is_active: bool
    permissions: list[str] = Field(default_factory=list)

    @classmethod
    def from_session(cls, session: AdminSession) -> "SessionResponse":
        response = cls.model_validate(session)
        response.permissions = list(ROLE_PERMISSIONS.get(session.role, ()))
        return response


class SignOutResponse(BaseModel):
    signed_out: bool = True
