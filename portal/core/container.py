"""Service container for the provisioning subsystem.

Built once at startup (FastAPI lifespan or the bulk import script),
started to launch the vault sweep, and closed at shutdown. Holds the
process-wide admin session and credential vault.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

import httpx

from portal.application.dtos.batch import PacingPolicy
from portal.application.interfaces.services import (
    IIdentityProvider,
    INotifier,
    IProfileStore,
)
from portal.application.services.auth_service import AuthService
from portal.application.services.batch_scheduler import BatchScheduler
from portal.application.services.credential_vault import CredentialVault
from portal.application.services.provisioning_orchestrator import ProvisioningOrchestrator
from portal.application.services.session_manager import SessionManager
from portal.core.config import Settings
from portal.domain.enums import AdminRole
from portal.infrastructure.external.email.factory import create_notifier
from portal.infrastructure.firebase.client import build_firestore_client
from portal.infrastructure.firebase.identity_toolkit import FirebaseIdentityProvider
from portal.infrastructure.firebase.repositories.profile_repo_firestore import (
    FirestoreProfileStore,
)
from portal.infrastructure.persistence.in_memory_profile_store import InMemoryProfileStore
from portal.infrastructure.security.encryption import FernetSecretCipher

logger = logging.getLogger(__name__)


def pacing_policy_from_settings(settings: Settings) -> PacingPolicy:
    return PacingPolicy(
        batch_size=settings.bulk_batch_size,
        item_delay_seconds=settings.bulk_item_delay_seconds,
        batch_delay_seconds=settings.bulk_batch_delay_seconds,
        max_records=settings.bulk_max_records,
    )


def _build_profile_store(settings: Settings) -> IProfileStore:
    if settings.profile_store_backend == "memory":
        admins = {
            uid.strip(): {"role": AdminRole.SUPERADMIN.value, "is_active": True}
            for uid in settings.memory_admin_uids.split(",")
            if uid.strip()
        }
        logger.warning("Using in-memory profile store; profiles are lost on restart")
        return InMemoryProfileStore(admins=admins)
    return FirestoreProfileStore(build_firestore_client(settings))


@dataclass
class PortalServices:
    """Wired services plus the collaborators they share."""

    settings: Settings
    vault: CredentialVault
    session_manager: SessionManager
    identity_provider: IIdentityProvider
    profile_store: IProfileStore
    notifier: INotifier
    auth_service: AuthService
    orchestrator: ProvisioningOrchestrator
    scheduler: BatchScheduler
    _closables: list[Any] = field(default_factory=list, repr=False)

    @classmethod
    def build(
        cls,
        settings: Settings,
        *,
        identity_provider: IIdentityProvider | None = None,
        profile_store: IProfileStore | None = None,
        notifier: INotifier | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> PortalServices:
        """Construct every service from settings; collaborators may be injected.

        Raises:
            ConfigurationException: Malformed vault key or Firestore credentials.
        """
        cipher = FernetSecretCipher(settings.temp_password_encryption_key.get_secret_value())
        vault = CredentialVault(
            cipher,
            ttl_seconds=settings.credential_ttl_seconds,
            sweep_interval_seconds=settings.credential_sweep_interval_seconds,
        )
        session_manager = SessionManager(ttl_hours=settings.session_ttl_hours)
        if identity_provider is None:
            identity_provider = FirebaseIdentityProvider(
                api_key=settings.firebase_api_key.get_secret_value(),
                base_url=settings.identity_toolkit_base_url,
                http_client=http_client,
            )
        if profile_store is None:
            profile_store = _build_profile_store(settings)
        if notifier is None:
            notifier = create_notifier(settings, http_client=http_client)

        auth_service = AuthService(identity_provider, profile_store, session_manager)
        orchestrator = ProvisioningOrchestrator(
            vault=vault,
            identity_provider=identity_provider,
            profile_store=profile_store,
            notifier=notifier,
            auth_service=auth_service,
            login_url=settings.login_url,
            default_clinic_name=settings.default_clinic_name,
            default_admin_name=settings.default_admin_name,
        )
        scheduler = BatchScheduler(orchestrator, policy=pacing_policy_from_settings(settings))
        return cls(
            settings=settings,
            vault=vault,
            session_manager=session_manager,
            identity_provider=identity_provider,
            profile_store=profile_store,
            notifier=notifier,
            auth_service=auth_service,
            orchestrator=orchestrator,
            scheduler=scheduler,
            _closables=[identity_provider, profile_store, notifier],
        )

    def start(self) -> None:
        """Start background work (vault sweep). Requires a running event loop."""
        self.vault.start()

    async def close(self) -> None:
        """Stop the sweep, drop sessions and close HTTP clients owned by adapters."""
        await self.vault.stop()
        self.session_manager.clear()
        for closable in self._closables:
            aclose = getattr(closable, "aclose", None)
            if aclose is not None:
                await aclose()
        logger.info("Portal services closed")
