"""Tests for CredentialVault: TTL, single use, sweep and the background task."""

import asyncio

import pytest

from portal.application.services.credential_vault import CredentialVault
from portal.domain.enums import UserType
from portal.domain.exceptions import (
    CredentialNotFoundException,
    ExpiredCredentialException,
)


@pytest.fixture
def vault(cipher, clock) -> CredentialVault:
    return CredentialVault(cipher, ttl_seconds=600, clock=clock)


def test_put_then_get_returns_secret(vault: CredentialVault) -> None:
    cid = vault.put("a@x.com", UserType.DOCTOR, "uid-a", "Xy9!za02Qr")
    assert cid.startswith("tmp_")
    assert vault.get(cid) == "Xy9!za02Qr"


def test_secret_is_stored_encrypted(vault: CredentialVault) -> None:
    cid = vault.put("a@x.com", UserType.DOCTOR, "uid-a", "Xy9!za02Qr")
    entry = vault.lookup(cid)
    assert entry.encrypted_secret != "Xy9!za02Qr"
    assert "Xy9!za02Qr" not in repr(entry)


def test_get_after_expiry_fails(vault: CredentialVault, clock) -> None:
    cid = vault.put("a@x.com", UserType.PATIENT, "uid-a", "Xy9!za02Qr")
    clock.advance(seconds=600)
    assert vault.get(cid) == "Xy9!za02Qr"
    clock.advance(seconds=1)
    with pytest.raises(ExpiredCredentialException) as exc_info:
        vault.get(cid)
    assert exc_info.value.details["reason"] == "expired"


def test_get_after_mark_sent_fails(vault: CredentialVault) -> None:
    cid = vault.put("a@x.com", UserType.DOCTOR, "uid-a", "Xy9!za02Qr")
    vault.mark_sent(cid)
    with pytest.raises(ExpiredCredentialException) as exc_info:
        vault.get(cid)
    assert exc_info.value.details["reason"] == "already_sent"


def test_unknown_id_raises_not_found(vault: CredentialVault) -> None:
    with pytest.raises(CredentialNotFoundException):
        vault.get("tmp_missing")
    with pytest.raises(CredentialNotFoundException):
        vault.mark_sent("tmp_missing")


def test_sweep_removes_only_sent_and_expired(vault: CredentialVault, clock) -> None:
    old = vault.put("old@x.com", UserType.DOCTOR, "uid-1", "Xy9!za02Qr")
    clock.advance(seconds=300)
    sent = vault.put("sent@x.com", UserType.DOCTOR, "uid-2", "Xy9!za02Qr")
    live = vault.put("live@x.com", UserType.DOCTOR, "uid-3", "Xy9!za02Qr")
    vault.mark_sent(sent)
    clock.advance(seconds=301)

    stats = vault.stats()
    assert (stats.total, stats.expired, stats.sent) == (3, 1, 1)

    assert vault.sweep() == 2
    assert len(vault) == 1
    assert vault.get(live) == "Xy9!za02Qr"
    with pytest.raises(CredentialNotFoundException):
        vault.get(old)
    assert vault.sweep() == 0


def test_delete_is_idempotent(vault: CredentialVault) -> None:
    cid = vault.put("a@x.com", UserType.DOCTOR, "uid-a", "Xy9!za02Qr")
    vault.delete(cid)
    vault.delete(cid)
    assert len(vault) == 0


def test_generate_meets_policy() -> None:
    secret = CredentialVault.generate()
    assert len(secret) >= 12


async def test_background_sweep_runs_until_stopped(cipher, clock) -> None:
    intervals: list[float] = []
    blocker = asyncio.Event()

    async def sleep(seconds: float) -> None:
        intervals.append(seconds)
        if len(intervals) > 1:
            await blocker.wait()

    vault = CredentialVault(
        cipher, ttl_seconds=60, sweep_interval_seconds=300, clock=clock, sleep=sleep
    )
    vault.put("a@x.com", UserType.DOCTOR, "uid-a", "Xy9!za02Qr")
    clock.advance(seconds=61)

    vault.start()
    vault.start()
    for _ in range(5):
        await asyncio.sleep(0)

    assert vault.is_sweeping
    assert len(vault) == 0
    assert intervals == [300, 300]

    await vault.stop()
    assert not vault.is_sweeping
    await vault.stop()
