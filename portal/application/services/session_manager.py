"""Process-wide administrator session.

Holds the single current AdminSession. A new session supersedes the
current one and a superseded, destroyed or expired session is dropped, so
repeated reauthentication never accumulates state. There is no renewal
beyond the fixed lifetime.
"""

from __future__ import annotations

import logging
from datetime import timedelta

from portal.domain.entities.admin import AdminUser
from portal.domain.entities.session import AdminSession
from portal.shared.utils.datetime import Clock, utc_now
from portal.shared.utils.generators import generate_prefixed_id

logger = logging.getLogger(__name__)

DEFAULT_SESSION_TTL_HOURS = 24


class SessionManager:
    """Creates, tracks and destroys the administrator session."""

    def __init__(
        self,
        ttl_hours: int = DEFAULT_SESSION_TTL_HOURS,
        clock: Clock = utc_now,
    ) -> None:
        self._ttl = timedelta(hours=ttl_hours)
        self._clock = clock
        self._sessions: dict[str, AdminSession] = {}
        self._current_id: str | None = None
        self._tracking_id: str | None = None

    def create_session(self, user: AdminUser) -> AdminSession:
        """Open a session for user, superseding the current one, and start activity tracking."""
        previous = self._current_id
        if previous is not None:
            self._deactivate(previous)
        now = self._clock()
        session = AdminSession(
            session_id=generate_prefixed_id("ses"),
            user_id=user.uid,
            email=user.email,
            role=user.role,
            created_at=now,
            last_activity=now,
            expires_at=now + self._ttl,
            is_active=True,
        )
        self._sessions[session.session_id] = session
        self._current_id = session.session_id
        self._tracking_id = session.session_id
        logger.info(
            "Admin session %s created for %s (expires %s)",
            session.session_id,
            user.email,
            session.expires_at.isoformat(),
        )
        return session

    def destroy_session(self, session_id: str) -> None:
        """Mark the session inactive and stop tracking it. Idempotent."""
        session = self._sessions.get(session_id)
        if session is None or not session.is_active:
            return
        self._deactivate(session_id)
        logger.info("Admin session %s destroyed", session_id)

    def current_session(self) -> AdminSession | None:
        """Return the current session, or None when absent, destroyed or expired."""
        if self._current_id is None:
            return None
        session = self._sessions.get(self._current_id)
        if session is None or not session.is_active:
            return None
        if session.is_expired(self._clock()):
            logger.info("Admin session %s expired", session.session_id)
            self._deactivate(session.session_id)
            return None
        return session

    def record_activity(self, session_id: str) -> None:
        """Update last_activity for the tracked session; ignored for any other id."""
        if session_id != self._tracking_id:
            return
        session = self._sessions.get(session_id)
        if session is not None and session.is_active:
            session.last_activity = self._clock()

    @property
    def is_tracking(self) -> bool:
        return self._tracking_id is not None

    def clear(self) -> None:
        """Deactivate every session (process shutdown)."""
        for session_id in list(self._sessions):
            self._deactivate(session_id)

    @property
    def session_count(self) -> int:
        """Sessions held; never more than one."""
        return len(self._sessions)

    def _deactivate(self, session_id: str) -> None:
        session = self._sessions.pop(session_id, None)
        if session is not None:
            session.is_active = False
        if self._tracking_id == session_id:
            self._tracking_id = None
        if self._current_id == session_id:
            self._current_id = None
