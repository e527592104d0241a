"""Temporary credential entity (vault entry).

Holds only the encrypted form of the secret. The plaintext exists in
memory while an account is created and while its email is dispatched.
"""

from dataclasses import dataclass
from datetime import datetime

from portal.domain.enums import UserType


@dataclass
class TemporaryCredential:
    """Short-lived, single-use secret issued when an account is created."""

    id: str
    email: str
    encrypted_secret: str
    user_type: UserType
    user_id: str
    created_at: datetime
    expires_at: datetime
    sent: bool = False

    def is_expired(self, now: datetime) -> bool:
        """Return True once ``now`` is past ``expires_at``."""
        return now > self.expires_at

    def is_retired(self, now: datetime) -> bool:
        """Return True if the entry can no longer be read (sent or expired)."""
        return self.sent or self.is_expired(now)
