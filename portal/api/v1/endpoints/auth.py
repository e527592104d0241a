"""Admin auth API: sign in, sign out, reauthenticate and current session."""

from fastapi import APIRouter, Depends, Request

from portal.api.v1.dependencies import get_current_session, get_services
from portal.core.container import PortalServices
from portal.core.limiter import limit_sign_in
from portal.domain.entities.session import AdminSession
from portal.schemas.auth import (
    ReauthenticateRequest,
    SessionResponse,
    SignInRequest,
    SignOutResponse,
)

router = APIRouter()


@router.post("/sign-in", response_model=SessionResponse)
@limit_sign_in
async def sign_in(
    request: Request,
    body: SignInRequest,
    services: PortalServices = Depends(get_services),
):
    session = await services.auth_service.sign_in(body.email, body.password)
    return SessionResponse.from_session(session)


@router.post("/reauthenticate", response_model=SessionResponse)
@limit_sign_in
async def reauthenticate(
    request: Request,
    body: ReauthenticateRequest,
    services: PortalServices = Depends(get_services),
):
    """Sign out and back in as the admin. On failure the old session stays destroyed."""
    session = await services.auth_service.reauthenticate(body.admin_email, body.admin_password)
    return SessionResponse.from_session(session)


@router.post("/sign-out", response_model=SignOutResponse)
async def sign_out(services: PortalServices = Depends(get_services)):
    await services.auth_service.sign_out()
    return SignOutResponse()


@router.get("/session", response_model=SessionResponse)
async def current_session(session: AdminSession = Depends(get_current_session)):
    return SessionResponse.from_session(session)
