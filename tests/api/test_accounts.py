"""Tests for account provisioning endpoints."""

from httpx import AsyncClient

from portal.domain.enums import UserType
from tests.doubles import ADMIN_EMAIL, ADMIN_PASSWORD, VALID_SECRET


def _body(email: str = "doc@x.com", secret: str = VALID_SECRET, **extra) -> dict:
    return {
        "profile": {
            "email": email,
            "first_name": "Ada",
            "last_name": "Lovelace",
            "temporary_password": secret,
            "attributes": {"specialty": "cardiology"},
        },
        "admin_password": ADMIN_PASSWORD,
        **extra,
    }


async def test_create_doctor_requires_session(client: AsyncClient, identity_provider) -> None:
    response = await client.post("/api/v1/accounts/doctors", json=_body())
    assert response.status_code == 401
    assert identity_provider.count("create_account") == 0


async def test_create_doctor_requires_write_permission(
    client: AsyncClient, services, identity_provider, profile_store
) -> None:
    identity_provider.add_account("mod@unihealth.org", "ModPass1!", uid="uid-mod")
    profile_store.add_admin("uid-mod", {"email": "mod@unihealth.org", "role": "moderator", "isActive": True})
    await services.auth_service.sign_in("mod@unihealth.org", "ModPass1!")

    response = await client.post("/api/v1/accounts/doctors", json=_body())

    assert response.status_code == 403
    assert response.json()["details"] == {"permission": "doctors:write"}
    assert identity_provider.count("create_account") == 0


async def test_create_doctor(client: AsyncClient, signed_in, services, profile_store, notifier) -> None:
    response = await client.post("/api/v1/accounts/doctors", json=_body())

    assert response.status_code == 201
    body = response.json()
    assert body["email"] == "doc@x.com"
    assert body["user_type"] == "doctor"
    assert body["secret"] == VALID_SECRET
    assert body["email_sent"] is True
    assert body["session_restored"] is True
    assert body["states"][-1] == "completed"

    profile = profile_store.get_profile(UserType.DOCTOR, body["user_id"])
    assert profile["specialty"] == "cardiology"
    assert profile["created_by"] == ADMIN_EMAIL
    assert notifier.sent[0].recipient_email == "doc@x.com"

    session = await client.get("/api/v1/auth/session")
    assert session.status_code == 200
    assert session.json()["email"] == ADMIN_EMAIL


async def test_create_patient(client: AsyncClient, signed_in, profile_store) -> None:
    response = await client.post("/api/v1/accounts/patients", json=_body("pat@x.com", send_email=False))
    assert response.status_code == 201
    body = response.json()
    assert body["user_type"] == "patient"
    assert body["email_sent"] is False
    assert profile_store.get_profile(UserType.PATIENT, body["user_id"]) is not None


async def test_create_doctor_weak_secret_returns_400(client: AsyncClient, signed_in, identity_provider) -> None:
    response = await client.post("/api/v1/accounts/doctors", json=_body(secret="weak"))
    assert response.status_code == 400
    assert response.json()["details"] == {"field": "secret"}
    assert identity_provider.count("create_account") == 0


async def test_create_doctor_duplicate_returns_409(client: AsyncClient, signed_in, identity_provider) -> None:
    identity_provider.add_account("doc@x.com", "Other-pass1")
    response = await client.post("/api/v1/accounts/doctors", json=_body())
    assert response.status_code == 409
    assert response.json()["error"] == "DUPLICATE_ACCOUNT"


async def test_create_doctor_wrong_admin_password_reports_lost_session(
    client: AsyncClient, signed_in
) -> None:
    body = _body()
    body["admin_password"] = "wrong"
    response = await client.post("/api/v1/accounts/doctors", json=body)

    assert response.status_code == 201
    assert response.json()["session_restored"] is False
    assert response.json()["reauthentication_error"]["code"] == "REAUTHENTICATION_ERROR"
    assert (await client.get("/api/v1/auth/session")).status_code == 401


async def test_bulk_create_doctors(client: AsyncClient, signed_in, services, identity_provider) -> None:
    services.scheduler._sleep = _no_sleep
    identity_provider.add_account("doc1@x.com", "Taken-pass1")
    records = [_body(f"doc{i}@x.com")["profile"] for i in range(3)]

    response = await client.post(
        "/api/v1/accounts/doctors/bulk",
        json={"records": records, "batch_size": 2, "admin_password": ADMIN_PASSWORD},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["summary"]["total"] == 3
    assert body["summary"]["successful"] == 2
    assert body["summary"]["error_breakdown"] == {"DUPLICATE_ACCOUNT": 1}
    assert [r["index"] for r in body["errors"]] == [1]
    assert [b["record_count"] for b in body["batches"]] == [2, 1]
    assert VALID_SECRET not in response.text


async def test_bulk_create_reports_email_failure_per_record(
    client: AsyncClient, signed_in, services, notifier
) -> None:
    services.scheduler._sleep = _no_sleep
    notifier.fail = True

    response = await client.post(
        "/api/v1/accounts/doctors/bulk",
        json={"records": [_body("doc0@x.com")["profile"]], "admin_password": ADMIN_PASSWORD},
    )

    assert response.status_code == 200
    body = response.json()
    (result,) = body["results"]
    assert result["success"] is True
    assert result["email_sent"] is False
    assert result["error"] is None
    assert result["notification_error"]["code"] == "NOTIFICATION_ERROR"
    assert body["errors"] == []
    assert body["summary"]["error_breakdown"] == {}


async def test_bulk_create_empty_records_returns_400(client: AsyncClient, signed_in) -> None:
    response = await client.post(
        "/api/v1/accounts/doctors/bulk", json={"records": [], "admin_password": ADMIN_PASSWORD}
    )
    assert response.status_code == 400
    assert response.json()["details"] == {"field": "records"}


async def _no_sleep(seconds: float) -> None:
    return None
