"""UTC time source.

Every timestamp in the portal (credential expiry, session expiry, activity)
is timezone-aware UTC. Services take a ``clock`` callable defaulting to
``utc_now`` so tests can move time forward without sleeping.
"""

from collections.abc import Callable
from datetime import UTC, datetime

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(UTC)
