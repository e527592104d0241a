"""Tests for the ProvisioningOrchestrator state machine."""

import pytest

from portal.application.dtos.account import AccountProfile, AdminCredentials
from portal.core.container import PortalServices
from portal.domain.enums import ProvisioningState as S
from portal.domain.enums import UserType
from portal.domain.exceptions import (
    CredentialNotFoundException,
    DuplicateAccountException,
    ExpiredCredentialException,
    PartiallyProvisionedException,
    RateLimitException,
    ValidationException,
)
from tests.doubles import ADMIN_EMAIL, ADMIN_PASSWORD, VALID_SECRET

ADMIN = AdminCredentials(email=ADMIN_EMAIL, password=ADMIN_PASSWORD)
FULL_RUN = [
    S.IDLE,
    S.VALIDATING_INPUT,
    S.CREATING_ACCOUNT,
    S.PERSISTING_PROFILE,
    S.AWAITING_REAUTH,
    S.REAUTHENTICATING,
    S.NOTIFYING_EMAIL,
    S.COMPLETED,
]


def _profile(email: str = "a@x.com", **kwargs) -> AccountProfile:
    return AccountProfile(email=email, first_name="A", last_name="B", **kwargs)


async def test_create_then_send_marks_credential_sent(services: PortalServices, signed_in) -> None:
    orchestrator = services.orchestrator
    result = await orchestrator.create_account(
        _profile(), VALID_SECRET, admin_credentials=ADMIN, send_email=False
    )
    assert result.user_id
    assert result.credential_id
    assert result.secret == VALID_SECRET
    assert result.email_sent is False
    assert services.vault.get(result.credential_id) == VALID_SECRET

    sent = await orchestrator.send_credential_email(result.credential_id)

    assert sent.success is True
    assert sent.message_id == "msg-1"
    with pytest.raises(ExpiredCredentialException) as exc_info:
        services.vault.get(result.credential_id)
    assert exc_info.value.details["reason"] == "already_sent"


async def test_full_run_traverses_every_state(services, signed_in, notifier, profile_store) -> None:
    seen: list[S] = []
    result = await services.orchestrator.create_account(
        _profile(clinic_name="North Clinic"),
        VALID_SECRET,
        admin_credentials=ADMIN,
        on_transition=seen.append,
    )
    assert seen == FULL_RUN
    assert list(result.states) == FULL_RUN
    assert result.session_restored is True
    assert result.email_sent is True
    assert notifier.sent[0].recipient_email == "a@x.com"
    assert notifier.sent[0].clinic_name == "North Clinic"
    assert notifier.sent[0].recipient_name == "A B"

    document = profile_store.get_profile(UserType.DOCTOR, result.user_id)
    assert document["temporary_credential_id"] == result.credential_id
    assert document["user_type"] == "doctor"
    assert "secret" not in document and VALID_SECRET not in document.values()


async def test_admin_session_is_recreated(services, signed_in, identity_provider) -> None:
    await services.orchestrator.create_account(_profile(), VALID_SECRET, admin_credentials=ADMIN)
    current = services.session_manager.current_session()
    assert not signed_in.is_active
    assert current is not None and current.session_id != signed_in.session_id
    assert current.email == ADMIN_EMAIL
    assert identity_provider.current.email == ADMIN_EMAIL


@pytest.mark.parametrize("secret", ["", "   "])
async def test_empty_secret_fails_validation_without_provider_calls(
    services, identity_provider, secret
) -> None:
    seen: list[S] = []
    with pytest.raises(ValidationException) as exc_info:
        await services.orchestrator.create_account(
            _profile(), secret, admin_credentials=ADMIN, on_transition=seen.append
        )
    assert exc_info.value.details == {"field": "secret"}
    assert identity_provider.calls == []
    assert seen == [S.IDLE, S.VALIDATING_INPUT, S.FAILED]
    assert len(services.vault) == 0


@pytest.mark.parametrize(
    ("profile", "field"),
    [
        (AccountProfile(email="not-an-email", first_name="A", last_name="B"), "email"),
        (AccountProfile(email="", first_name="A", last_name="B"), "email"),
        (AccountProfile(email="a@x.com", first_name=" ", last_name="B"), "first_name"),
        (AccountProfile(email="a@x.com", first_name="A", last_name=""), "last_name"),
    ],
)
async def test_missing_fields_fail_validation(services, identity_provider, profile, field) -> None:
    with pytest.raises(ValidationException) as exc_info:
        await services.orchestrator.create_account(profile, VALID_SECRET, admin_credentials=ADMIN)
    assert exc_info.value.details == {"field": field}
    assert identity_provider.count("create_account") == 0


async def test_weak_secret_fails_validation(services, identity_provider) -> None:
    with pytest.raises(ValidationException):
        await services.orchestrator.create_account(_profile(), "password", admin_credentials=ADMIN)
    assert identity_provider.calls == []


async def test_duplicate_account_fails_before_profile(
    services, signed_in, identity_provider, profile_store
) -> None:
    identity_provider.add_account("a@x.com", "Other-pass1")
    seen: list[S] = []
    with pytest.raises(DuplicateAccountException):
        await services.orchestrator.create_account(
            _profile(), VALID_SECRET, admin_credentials=ADMIN, on_transition=seen.append
        )
    assert seen[-2:] == [S.CREATING_ACCOUNT, S.FAILED]
    assert len(services.vault) == 0
    assert signed_in.is_active


async def test_rate_limited_creation_propagates(services, identity_provider) -> None:
    identity_provider.create_errors["a@x.com"] = RateLimitException()
    with pytest.raises(RateLimitException):
        await services.orchestrator.create_account(_profile(), VALID_SECRET, admin_credentials=ADMIN)


async def test_reauthentication_failure_is_not_overall_failure(
    services, signed_in, notifier
) -> None:
    result = await services.orchestrator.create_account(
        _profile(),
        VALID_SECRET,
        admin_credentials=AdminCredentials(email=ADMIN_EMAIL, password="wrong"),
    )
    assert result.user_id
    assert result.session_restored is False
    assert result.reauthentication_error.code == "REAUTHENTICATION_ERROR"
    assert result.email_sent is True
    assert not signed_in.is_active
    assert services.session_manager.current_session() is None


async def test_missing_admin_credentials_tears_down_session(services, signed_in) -> None:
    result = await services.orchestrator.create_account(_profile(), VALID_SECRET)
    assert result.session_restored is False
    assert result.reauthentication_error.code == "REAUTHENTICATION_ERROR"
    assert services.session_manager.current_session() is None
    assert S.REAUTHENTICATING in result.states


async def test_notification_failure_keeps_credential_eligible(
    services, signed_in, notifier
) -> None:
    notifier.fail = True
    result = await services.orchestrator.create_account(_profile(), VALID_SECRET, admin_credentials=ADMIN)
    assert result.email_sent is False
    assert result.notification_error.code == "NOTIFICATION_ERROR"
    assert result.states[-1] is S.COMPLETED
    assert services.vault.get(result.credential_id) == VALID_SECRET

    notifier.fail = False
    retry = await services.orchestrator.send_credential_email(result.credential_id)
    assert retry.success is True


async def test_profile_failure_raises_partially_provisioned_after_reauth(
    services, signed_in, profile_store, identity_provider, notifier
) -> None:
    profile_store.fail_saves = True
    seen: list[S] = []
    with pytest.raises(PartiallyProvisionedException) as exc_info:
        await services.orchestrator.create_account(
            _profile(), VALID_SECRET, admin_credentials=ADMIN, on_transition=seen.append
        )
    details = exc_info.value.details
    assert details["email"] == "a@x.com"
    assert details["user_id"] == "uid-a"
    assert details["session_restored"] is True
    assert seen[-3:] == [S.AWAITING_REAUTH, S.REAUTHENTICATING, S.FAILED]
    assert "a@x.com" in identity_provider.accounts
    assert notifier.sent == []
    assert services.session_manager.current_session().email == ADMIN_EMAIL


async def test_vault_failure_after_creation_still_reauthenticates(
    services, signed_in, identity_provider, notifier, monkeypatch
) -> None:
    def broken_put(*args, **kwargs):
        raise RuntimeError("cipher unavailable")

    monkeypatch.setattr(services.vault, "put", broken_put)
    seen: list[S] = []
    with pytest.raises(PartiallyProvisionedException) as exc_info:
        await services.orchestrator.create_account(
            _profile(), VALID_SECRET, admin_credentials=ADMIN, on_transition=seen.append
        )
    details = exc_info.value.details
    assert details["user_id"] == "uid-a"
    assert details["session_restored"] is True
    assert seen[-4:] == [S.PERSISTING_PROFILE, S.AWAITING_REAUTH, S.REAUTHENTICATING, S.FAILED]
    assert identity_provider.current.email == ADMIN_EMAIL
    assert services.session_manager.current_session().email == ADMIN_EMAIL
    assert notifier.sent == []


async def test_credential_swept_during_send_still_reports_success(
    services, signed_in, notifier, monkeypatch
) -> None:
    result = await services.orchestrator.create_account(
        _profile(), VALID_SECRET, admin_credentials=ADMIN, send_email=False
    )
    deliver = notifier.send_credential_email

    async def send_then_sweep(email):
        receipt = await deliver(email)
        services.vault.delete(result.credential_id)
        return receipt

    monkeypatch.setattr(notifier, "send_credential_email", send_then_sweep)

    sent = await services.orchestrator.send_credential_email(result.credential_id)

    assert sent.success is True
    assert sent.message_id == "msg-1"
    assert len(notifier.sent) == 1
    with pytest.raises(CredentialNotFoundException):
        services.vault.lookup(result.credential_id)


async def test_send_credential_email_unknown_or_retired(services, signed_in) -> None:
    with pytest.raises(CredentialNotFoundException):
        await services.orchestrator.send_credential_email("tmp_missing")

    result = await services.orchestrator.create_account(_profile(), VALID_SECRET, admin_credentials=ADMIN)
    with pytest.raises(ExpiredCredentialException):
        await services.orchestrator.send_credential_email(result.credential_id)


async def test_send_credential_email_failure_is_returned(services, signed_in, notifier) -> None:
    result = await services.orchestrator.create_account(
        _profile(user_type=UserType.PATIENT), VALID_SECRET, admin_credentials=ADMIN, send_email=False
    )
    notifier.fail = True
    sent = await services.orchestrator.send_credential_email(result.credential_id, recipient_name="Pat")
    assert sent.success is False
    assert sent.error.code == "NOTIFICATION_ERROR"
    assert services.vault.get(result.credential_id) == VALID_SECRET


async def test_reprs_hide_secrets(services, signed_in) -> None:
    result = await services.orchestrator.create_account(_profile(), VALID_SECRET, admin_credentials=ADMIN)
    assert VALID_SECRET not in repr(result)
    assert ADMIN_PASSWORD not in repr(ADMIN)
