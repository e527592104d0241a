"""Tests for temporary credential endpoints."""

from httpx import AsyncClient

from portal.domain.enums import UserType
from tests.doubles import VALID_SECRET


def _store(services, email: str = "doc@x.com") -> str:
    return services.vault.put(email, UserType.DOCTOR, "uid-doc", VALID_SECRET)


async def test_send_credential_email(client: AsyncClient, signed_in, services, notifier) -> None:
    credential_id = _store(services)

    response = await client.post(
        f"/api/v1/credentials/{credential_id}/send", json={"recipient_name": "Dr. Ada"}
    )

    assert response.status_code == 200
    assert response.json() == {"success": True, "message_id": "msg-1", "error": None}
    sent = notifier.sent[0]
    assert sent.recipient_name == "Dr. Ada"
    assert sent.admin_name == signed_in.email
    assert sent.secret == VALID_SECRET


async def test_send_twice_returns_410(client: AsyncClient, signed_in, services) -> None:
    credential_id = _store(services)
    assert (await client.post(f"/api/v1/credentials/{credential_id}/send")).status_code == 200

    response = await client.post(f"/api/v1/credentials/{credential_id}/send")

    assert response.status_code == 410
    assert response.json()["details"]["reason"] == "already_sent"


async def test_send_unknown_credential_returns_404(client: AsyncClient, signed_in) -> None:
    response = await client.post("/api/v1/credentials/tmp_missing/send")
    assert response.status_code == 404
    assert response.json()["error"] == "CREDENTIAL_NOT_FOUND"


async def test_send_failure_keeps_credential(client: AsyncClient, signed_in, services, notifier) -> None:
    credential_id = _store(services)
    notifier.fail = True

    response = await client.post(f"/api/v1/credentials/{credential_id}/send")

    assert response.status_code == 200
    assert response.json()["success"] is False
    assert response.json()["error"]["code"] == "NOTIFICATION_ERROR"
    assert services.vault.get(credential_id) == VALID_SECRET


async def test_send_requires_session(client: AsyncClient, services) -> None:
    credential_id = _store(services)
    response = await client.post(f"/api/v1/credentials/{credential_id}/send")
    assert response.status_code == 401


async def test_stats_and_sweep(client: AsyncClient, signed_in, services) -> None:
    sent_id = _store(services, "a@x.com")
    _store(services, "b@x.com")
    services.vault.mark_sent(sent_id)

    stats = await client.get("/api/v1/credentials/stats")
    assert stats.json() == {"total": 2, "expired": 0, "sent": 1}

    sweep = await client.post("/api/v1/credentials/sweep")
    assert sweep.json() == {"removed": 1}
    assert (await client.get("/api/v1/credentials/stats")).json()["total"] == 1
