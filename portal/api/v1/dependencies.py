"""Request dependencies: the service container and the admin session guard."""

from __future__ import annotations

from collections.abc import Callable

from fastapi import Depends, Request

from portal.core.container import PortalServices
from portal.domain.entities.session import AdminSession
from portal.domain.exceptions import AuthenticationException, AuthorizationException

PERMISSION_DOCTORS_WRITE = "doctors:write"


def get_services(request: Request) -> PortalServices:
    """PortalServices built in the lifespan (composition root)."""
    services = getattr(request.app.state, "services", None)
    if services is None:
        raise RuntimeError("Portal services are not initialized")
    return services


def get_current_session(
    services: PortalServices = Depends(get_services),
) -> AdminSession:
    """Return the current admin session and record activity on it.

    Raises:
        AuthenticationException: Nobody is signed in, or the session expired.
    """
    session = services.session_manager.current_session()
    if session is None:
        raise AuthenticationException("No active admin session")
    services.session_manager.record_activity(session.session_id)
    return session


def require_permission(permission: str) -> Callable[..., AdminSession]:
    """Dependency factory: the current session must grant permission."""

    def _check(session: AdminSession = Depends(get_current_session)) -> AdminSession:
        if not session.allows(permission):
            raise AuthorizationException(permission)
        return session

    return _check
