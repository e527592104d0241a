"""Application services: vault, sessions, auth, provisioning and bulk scheduling."""

from portal.application.services.auth_service import AuthService
from portal.application.services.batch_scheduler import BatchScheduler
from portal.application.services.credential_vault import CredentialVault, VaultStats
from portal.application.services.provisioning_orchestrator import ProvisioningOrchestrator
from portal.application.services.session_manager import SessionManager

__all__ = [
    "AuthService",
    "BatchScheduler",
    "CredentialVault",
    "ProvisioningOrchestrator",
    "SessionManager",
    "VaultStats",
]
