"""Health check endpoint for liveness probes."""

from fastapi import APIRouter, Depends

from portal.api.v1.dependencies import get_services
from portal.core.container import PortalServices
from portal.schemas.health import HealthResponse

router = APIRouter()


@router.get("", response_model=HealthResponse)
def health_check(services: PortalServices = Depends(get_services)) -> HealthResponse:
    return HealthResponse(
        version=services.settings.app_version,
        credential_sweep_running=services.vault.is_sweeping,
    )
