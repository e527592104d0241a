"""Temporary credential API: resend email, vault statistics and manual sweep."""

from fastapi import APIRouter, Depends, Request

from portal.api.v1.dependencies import (
    PERMISSION_DOCTORS_WRITE,
    get_current_session,
    get_services,
    require_permission,
)
from portal.core.container import PortalServices
from portal.core.limiter import limit_writes
from portal.domain.entities.session import AdminSession
from portal.schemas.credential import (
    CredentialEmailResponse,
    SendCredentialRequest,
    SweepResponse,
    VaultStatsResponse,
)

router = APIRouter()


@router.post("/{credential_id}/send", response_model=CredentialEmailResponse)
@limit_writes
async def send_credential_email(
    request: Request,
    credential_id: str,
    body: SendCredentialRequest | None = None,
    session: AdminSession = Depends(require_permission(PERMISSION_DOCTORS_WRITE)),
    services: PortalServices = Depends(get_services),
):
    """Email a stored temporary credential; it is retired once the email is accepted.

    404 for an unknown id, 410 when expired or already sent.
    """
    overrides = body or SendCredentialRequest()
    result = await services.orchestrator.send_credential_email(
        credential_id,
        recipient_name=overrides.recipient_name,
        admin_name=overrides.admin_name or session.email,
        clinic_name=overrides.clinic_name,
        login_url=overrides.login_url,
    )
    return CredentialEmailResponse.model_validate(result)


@router.get("/stats", response_model=VaultStatsResponse)
async def vault_stats(
    session: AdminSession = Depends(get_current_session),
    services: PortalServices = Depends(get_services),
):
    return VaultStatsResponse.model_validate(services.vault.stats())


@router.post("/sweep", response_model=SweepResponse)
@limit_writes
async def sweep_credentials(
    request: Request,
    session: AdminSession = Depends(get_current_session),
    services: PortalServices = Depends(get_services),
):
    """Remove sent and expired credentials now instead of waiting for the timer."""
    return SweepResponse(removed=services.vault.sweep())
