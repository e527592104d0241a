"""Administrator sign-in, sign-out and session restoration."""

from __future__ import annotations

import logging
from typing import Any

from portal.application.interfaces.services import IIdentityProvider, IProfileStore
from portal.application.services.session_manager import SessionManager
from portal.domain.entities.admin import AdminUser
from portal.domain.entities.session import AdminSession
from portal.domain.enums import AdminRole
from portal.domain.exceptions import (
    AuthenticationException,
    PortalException,
    ReauthenticationException,
)
from portal.shared.telemetry.tracing import traced

logger = logging.getLogger(__name__)

DEFAULT_DISPLAY_NAME = "Admin User"


class AuthService:
    """Signs administrators in against the identity provider and opens their session."""

    def __init__(
        self,
        identity_provider: IIdentityProvider,
        profile_store: IProfileStore,
        session_manager: SessionManager,
    ) -> None:
        self.identity_provider = identity_provider
        self.profile_store = profile_store
        self.session_manager = session_manager

    @traced("auth.sign_in")
    async def sign_in(self, email: str, password: str) -> AdminSession:
        """Authenticate, load the admin record and create the session.

        Raises:
            AuthenticationException: Bad credentials, no admin record, or inactive admin.
            RateLimitException / IdentityProviderException: Provider failures.
        """
        token = await self.identity_provider.sign_in(email, password)
        record = await self.profile_store.get_admin(token.user_id)
        if record is None:
            logger.warning("Sign-in rejected for %s: no admin record", email)
            await self.identity_provider.sign_out()
            raise AuthenticationException("User not found in admin records")
        user = self._admin_from_record(token.user_id, token.email or email, record)
        if not user.is_active:
            logger.warning("Sign-in rejected for %s: admin is inactive", email)
            await self.identity_provider.sign_out()
            raise AuthenticationException("Admin account is inactive")
        session = self.session_manager.create_session(user)
        logger.info("Admin %s signed in with role %s", user.email, user.role.value)
        return session

    @traced("auth.sign_out")
    async def sign_out(self) -> None:
        """Destroy the current session (if any) and sign out of the provider."""
        session = self.session_manager.current_session()
        if session is not None:
            self.session_manager.destroy_session(session.session_id)
        await self.identity_provider.sign_out()
        logger.info("Admin signed out")

    @traced("auth.reauthenticate")
    async def reauthenticate(self, admin_email: str, admin_password: str) -> AdminSession:
        """Restore the administrator session after the provider switched it.

        The current session is destroyed first and stays destroyed if the
        new sign-in fails.

        Raises:
            ReauthenticationException: Any failure, with the cause chained.
        """
        logger.info("Restoring admin session for %s", admin_email)
        try:
            current = self.session_manager.current_session()
            if current is not None:
                self.session_manager.destroy_session(current.session_id)
            await self.identity_provider.sign_out()
            return await self.sign_in(admin_email, admin_password)
        except PortalException as e:
            logger.warning("Admin session restore failed for %s: %s", admin_email, e.message)
            raise ReauthenticationException(
                f"Failed to restore admin session: {e.message}", email=admin_email
            ) from e
        except Exception as e:
            logger.exception("Admin session restore failed for %s", admin_email)
            raise ReauthenticationException(email=admin_email) from e

    @staticmethod
    def has_permission(user: AdminUser | None, permission: str) -> bool:
        return user is not None and user.has_permission(permission)

    @staticmethod
    def _admin_from_record(uid: str, email: str, record: dict[str, Any]) -> AdminUser:
        raw_role = record.get("role") or AdminRole.ADMIN.value
        try:
            role = AdminRole(raw_role)
        except ValueError as e:
            raise AuthenticationException(f"Unknown admin role: {raw_role}") from e
        is_active = record.get("is_active", record.get("isActive", True)) is not False
        return AdminUser.with_role_permissions(
            uid=uid,
            email=record.get("email") or email,
            display_name=record.get("display_name")
            or record.get("displayName")
            or DEFAULT_DISPLAY_NAME,
            role=role,
            is_active=is_active,
        )
