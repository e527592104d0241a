"""In-memory vault of encrypted temporary credentials.

Entries are single use: once marked sent, or once past their TTL, a read
fails even if the background sweep has not removed them yet. The sweep
runs as an asyncio task started and stopped with the service container.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import timedelta

from portal.application.interfaces.services import ISecretCipher
from portal.application.services.secret_policy import generate_secret
from portal.domain.entities.credential import TemporaryCredential
from portal.domain.enums import UserType
from portal.domain.exceptions import (
    CredentialNotFoundException,
    ExpiredCredentialException,
)
from portal.shared.utils.datetime import Clock, utc_now
from portal.shared.utils.generators import generate_prefixed_id

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 10 * 60
DEFAULT_SWEEP_INTERVAL_SECONDS = 5 * 60


@dataclass(frozen=True)
class VaultStats:
    """Counts over entries still held (swept entries are gone)."""

    total: int
    expired: int
    sent: int


class CredentialVault:
    """TTL store of encrypted temporary secrets with a periodic expiry sweep."""

    def __init__(
        self,
        cipher: ISecretCipher,
        ttl_seconds: int = DEFAULT_TTL_SECONDS,
        sweep_interval_seconds: float = DEFAULT_SWEEP_INTERVAL_SECONDS,
        clock: Clock = utc_now,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._cipher = cipher
        self._ttl = timedelta(seconds=ttl_seconds)
        self._sweep_interval = sweep_interval_seconds
        self._clock = clock
        self._sleep = sleep
        self._entries: dict[str, TemporaryCredential] = {}
        self._sweep_task: asyncio.Task[None] | None = None

    @staticmethod
    def generate() -> str:
        """Return a new random secret meeting the generated-secret policy."""
        return generate_secret()

    def put(self, email: str, user_type: UserType, user_id: str, secret: str) -> str:
        """Encrypt and store a secret; return the new credential id."""
        now = self._clock()
        credential_id = generate_prefixed_id("tmp")
        self._entries[credential_id] = TemporaryCredential(
            id=credential_id,
            email=email,
            encrypted_secret=self._cipher.encrypt(secret),
            user_type=UserType(user_type),
            user_id=user_id,
            created_at=now,
            expires_at=now + self._ttl,
        )
        logger.info(
            "Temporary credential %s created for %s (%s), expires at %s",
            credential_id,
            email,
            UserType(user_type).value,
            (now + self._ttl).isoformat(),
        )
        return credential_id

    def lookup(self, credential_id: str) -> TemporaryCredential:
        """Return entry metadata without decrypting; fails like get() for dead entries."""
        entry = self._entries.get(credential_id)
        if entry is None:
            raise CredentialNotFoundException(credential_id)
        if entry.sent:
            raise ExpiredCredentialException(credential_id, reason="already_sent")
        if entry.is_expired(self._clock()):
            raise ExpiredCredentialException(credential_id, reason="expired")
        return entry

    def get(self, credential_id: str) -> str:
        """Decrypt and return the secret if the entry is unsent and unexpired.

        Raises:
            CredentialNotFoundException: No entry for the id.
            ExpiredCredentialException: Entry already sent or past expiry.
        """
        entry = self.lookup(credential_id)
        return self._cipher.decrypt(entry.encrypted_secret)

    def mark_sent(self, credential_id: str) -> None:
        """Retire the entry after its email went out."""
        entry = self._entries.get(credential_id)
        if entry is None:
            raise CredentialNotFoundException(credential_id)
        entry.sent = True
        logger.info("Temporary credential %s marked as sent", credential_id)

    def delete(self, credential_id: str) -> None:
        """Remove an entry. Idempotent."""
        if self._entries.pop(credential_id, None) is not None:
            logger.info("Temporary credential %s deleted", credential_id)

    def sweep(self) -> int:
        """Remove every sent or expired entry; return how many were removed."""
        now = self._clock()
        dead = [cid for cid, entry in list(self._entries.items()) if entry.is_retired(now)]
        for cid in dead:
            self._entries.pop(cid, None)
        if dead:
            logger.info("Swept %d retired temporary credentials", len(dead))
        return len(dead)

    def stats(self) -> VaultStats:
        now = self._clock()
        entries = list(self._entries.values())
        return VaultStats(
            total=len(entries),
            expired=sum(1 for e in entries if e.is_expired(now)),
            sent=sum(1 for e in entries if e.sent),
        )

    def __len__(self) -> int:
        return len(self._entries)

    # ---- Background sweep ----

    @property
    def is_sweeping(self) -> bool:
        return self._sweep_task is not None and not self._sweep_task.done()

    def start(self) -> None:
        """Start the periodic sweep task on the running loop. Idempotent."""
        if self.is_sweeping:
            return
        self._sweep_task = asyncio.create_task(self._sweep_loop())
        logger.info(
            "Credential vault sweep started (every %ss)", self._sweep_interval
        )

    async def stop(self) -> None:
        """Cancel the sweep task and wait for it to finish."""
        task, self._sweep_task = self._sweep_task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.info("Credential vault sweep stopped")

    async def _sweep_loop(self) -> None:
        while True:
            await self._sleep(self._sweep_interval)
            try:
                self.sweep()
            except Exception:
                logger.exception("Credential vault sweep failed")
