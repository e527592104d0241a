"""Administrator session entity."""

from dataclasses import dataclass
from datetime import datetime

from portal.domain.entities.admin import ROLE_PERMISSIONS
from portal.domain.enums import AdminRole


@dataclass
class AdminSession:
    """The administrator's signed-in session.

    At most one session is current per process; SessionManager
    deactivates the previous one when a new session is created.
    """

    session_id: str
    user_id: str
    email: str
    role: AdminRole
    created_at: datetime
    last_activity: datetime
    expires_at: datetime
    is_active: bool = True

    def is_expired(self, now: datetime) -> bool:
        return now > self.expires_at

    def is_valid(self, now: datetime) -> bool:
        """Return True when the session is active and not past its fixed expiry."""
        return self.is_active and not self.is_expired(now)

    def allows(self, permission: str) -> bool:
        """Return True if the session's role grants the permission."""
        return self.is_active and permission in ROLE_PERMISSIONS.get(self.role, ())
