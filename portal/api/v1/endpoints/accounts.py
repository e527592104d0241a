"""Account provisioning API: single doctor/patient creation and bulk doctor import.

Creating an account switches the provider session to the new account;
the admin password in the body is used to sign the admin back in.
"""

from fastapi import APIRouter, Depends, Request

from portal.api.v1.dependencies import (
    PERMISSION_DOCTORS_WRITE,
    get_services,
    require_permission,
)
from portal.application.dtos.account import AdminCredentials
from portal.application.dtos.batch import ProvisioningRequest
from portal.core.container import PortalServices
from portal.core.limiter import limit_account_create, limit_bulk_import
from portal.domain.entities.session import AdminSession
from portal.domain.enums import UserType
from portal.schemas.account import (
    BatchMetricsOut,
    BatchSummaryOut,
    BulkCreateRequest,
    BulkCreateResponse,
    CreateAccountRequest,
    CreateAccountResponse,
    ProvisioningResultOut,
)

router = APIRouter()


async def _create(
    user_type: UserType,
    body: CreateAccountRequest,
    session: AdminSession,
    services: PortalServices,
) -> CreateAccountResponse:
    result = await services.orchestrator.create_account(
        body.profile.to_profile(user_type, created_by=session.email),
        body.profile.temporary_password,
        admin_credentials=AdminCredentials(email=session.email, password=body.admin_password),
        send_email=body.send_email,
    )
    return CreateAccountResponse.model_validate(result)


@router.post("/doctors", response_model=CreateAccountResponse, status_code=201)
@limit_account_create
async def create_doctor(
    request: Request,
    body: CreateAccountRequest,
    session: AdminSession = Depends(require_permission(PERMISSION_DOCTORS_WRITE)),
    services: PortalServices = Depends(get_services),
):
    """Create a doctor account, store its temporary credential and email it."""
    return await _create(UserType.DOCTOR, body, session, services)


@router.post("/patients", response_model=CreateAccountResponse, status_code=201)
@limit_account_create
async def create_patient(
    request: Request,
    body: CreateAccountRequest,
    session: AdminSession = Depends(require_permission(PERMISSION_DOCTORS_WRITE)),
    services: PortalServices = Depends(get_services),
):
    return await _create(UserType.PATIENT, body, session, services)


@router.post("/doctors/bulk", response_model=BulkCreateResponse)
@limit_bulk_import
async def bulk_create_doctors(
    request: Request,
    body: BulkCreateRequest,
    session: AdminSession = Depends(require_permission(PERMISSION_DOCTORS_WRITE)),
    services: PortalServices = Depends(get_services),
):
    """Create many doctor accounts in paced batches; failures are reported per record.

    The request stays open until every batch has run.
    """
    requests = [
        ProvisioningRequest(
            profile=record.to_profile(UserType.DOCTOR, created_by=session.email),
            secret=record.temporary_password,
        )
        for record in body.records
    ]
    outcome = await services.scheduler.run(
        requests,
        AdminCredentials(email=session.email, password=body.admin_password),
        batch_size=body.batch_size,
        send_email=body.send_email,
    )
    return BulkCreateResponse(
        summary=BatchSummaryOut.model_validate(outcome.summary),
        results=[ProvisioningResultOut.model_validate(r) for r in outcome.results],
        errors=[ProvisioningResultOut.model_validate(r) for r in outcome.errors],
        batches=[BatchMetricsOut.model_validate(b) for b in outcome.batches],
    )
