"""Per-account provisioning state machine.

Creating a provider account signs the calling context in as the new
account, so every run that gets past CREATING_ACCOUNT goes through
AWAITING_REAUTH and REAUTHENTICATING before it can finish. The provider
account is never rolled back: a profile write that fails after creation
surfaces as PartiallyProvisionedException for manual reconciliation.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from email_validator import EmailNotValidError, validate_email

from portal.application.dtos.account import (
    AccountCreationResult,
    AccountProfile,
    AdminCredentials,
    CredentialEmail,
    CredentialEmailResult,
    ErrorInfo,
)
from portal.application.interfaces.services import (
    IIdentityProvider,
    INotifier,
    IProfileStore,
)
from portal.application.services.auth_service import AuthService
from portal.application.services.credential_vault import CredentialVault
from portal.application.services.secret_policy import supplied_secret_violations
from portal.domain.enums import ProvisioningState, UserType
from portal.domain.exceptions import (
    CredentialNotFoundException,
    NotificationException,
    PartiallyProvisionedException,
    PortalException,
    ReauthenticationException,
    ValidationException,
)
from portal.shared.telemetry.tracing import add_span_attributes, add_span_event, traced
from portal.shared.utils.datetime import Clock, utc_now

logger = logging.getLogger(__name__)

DEFAULT_CLINIC_NAME = "UniHealth Medical System"
DEFAULT_ADMIN_NAME = "System Administrator"

StateListener = Callable[[ProvisioningState], None]


class _StateTrace:
    """Ordered record of the states one run passed through."""

    def __init__(self, email: str, listener: StateListener | None) -> None:
        self.email = email
        self.states: list[ProvisioningState] = [ProvisioningState.IDLE]
        self._listener = listener
        if listener:
            listener(ProvisioningState.IDLE)

    def enter(self, state: ProvisioningState) -> None:
        self.states.append(state)
        logger.debug("Provisioning %s: %s", self.email, state.value)
        add_span_event("provisioning.state", {"state": state.value})
        if self._listener:
            self._listener(state)

    def fail(self, error: Exception) -> Exception:
        self.enter(ProvisioningState.FAILED)
        return error


class ProvisioningOrchestrator:
    """Creates one account end to end and restores the admin session afterwards."""

    def __init__(
        self,
        vault: CredentialVault,
        identity_provider: IIdentityProvider,
        profile_store: IProfileStore,
        notifier: INotifier,
        auth_service: AuthService,
        login_url: str,
        default_clinic_name: str = DEFAULT_CLINIC_NAME,
        default_admin_name: str = DEFAULT_ADMIN_NAME,
        clock: Clock = utc_now,
    ) -> None:
        self.vault = vault
        self.identity_provider = identity_provider
        self.profile_store = profile_store
        self.notifier = notifier
        self.auth_service = auth_service
        self.login_url = login_url
        self.default_clinic_name = default_clinic_name
        self.default_admin_name = default_admin_name
        self._clock = clock

    @traced("provisioning.create_account")
    async def create_account(
        self,
        profile: AccountProfile,
        secret: str,
        admin_credentials: AdminCredentials | None = None,
        send_email: bool = True,
        on_transition: StateListener | None = None,
    ) -> AccountCreationResult:
        """Provision one account.

        Args:
            profile: Profile fields for the new doctor or patient.
            secret: Temporary secret chosen by the administrator.
            admin_credentials: Used to sign the administrator back in. Without
                them the admin session is torn down and session_restored is False.
            send_email: When False the credential stays in the vault for a
                later send_credential_email call.
            on_transition: Called with every state entered, in order.

        Raises:
            ValidationException: Bad input; nothing external was called.
            DuplicateAccountException, WeakSecretException, RateLimitException,
            IdentityProviderException: Account creation failed.
            PartiallyProvisionedException: Account exists but its profile was not saved.
        """
        trace = _StateTrace(profile.email, on_transition)

        trace.enter(ProvisioningState.VALIDATING_INPUT)
        try:
            email = self._validate(profile, secret)
        except ValidationException as e:
            logger.info("Provisioning input rejected: %s", e.message)
            raise trace.fail(e)

        trace.enter(ProvisioningState.CREATING_ACCOUNT)
        try:
            user_id = await self.identity_provider.create_account(email, secret)
        except PortalException as e:
            logger.warning("Account creation failed for %s: %s", email, e.error_code)
            raise trace.fail(e)
        logger.info("Provider account %s created for %s", user_id, email)
        add_span_attributes(user_id=user_id, user_type=profile.user_type.value)

        # From here on the account exists: nothing may skip reauthentication.
        trace.enter(ProvisioningState.PERSISTING_PROFILE)
        profile_error: Exception | None = None
        try:
            credential_id = self.vault.put(email, profile.user_type, user_id, secret)
            await self.profile_store.save_profile(
                profile.user_type,
                user_id,
                self._profile_document(profile, email, credential_id),
            )
        except Exception as e:
            logger.exception("Storing credential or profile failed for %s (%s)", email, user_id)
            profile_error = e

        trace.enter(ProvisioningState.AWAITING_REAUTH)
        trace.enter(ProvisioningState.REAUTHENTICATING)
        reauth_error = await self._restore_admin_session(admin_credentials)
        session_restored = reauth_error is None

        if profile_error is not None:
            raise trace.fail(
                PartiallyProvisionedException(
                    email=email,
                    user_id=user_id,
                    reason=str(profile_error) or profile_error.__class__.__name__,
                    session_restored=session_restored,
                )
            ) from profile_error

        trace.enter(ProvisioningState.NOTIFYING_EMAIL)
        email_sent = False
        message_id: str | None = None
        notification_error: ErrorInfo | None = None
        if send_email:
            message = CredentialEmail(
                recipient_email=email,
                recipient_name=profile.full_name,
                secret=secret,
                user_type=profile.user_type,
                admin_name=profile.created_by or self.default_admin_name,
                clinic_name=profile.clinic_name or self.default_clinic_name,
                login_url=self.login_url,
            )
            outcome = await self._deliver(credential_id, message)
            email_sent = outcome.success
            message_id = outcome.message_id
            notification_error = outcome.error

        trace.enter(ProvisioningState.COMPLETED)
        logger.info(
            "Provisioned %s %s (session_restored=%s, email_sent=%s)",
            profile.user_type.value,
            email,
            session_restored,
            email_sent,
        )
        return AccountCreationResult(
            user_id=user_id,
            credential_id=credential_id,
            secret=secret,
            email=email,
            user_type=profile.user_type,
            email_sent=email_sent,
            session_restored=session_restored,
            message_id=message_id,
            notification_error=notification_error,
            reauthentication_error=reauth_error,
            states=tuple(trace.states),
        )

    @traced("provisioning.send_credential_email")
    async def send_credential_email(
        self,
        credential_id: str,
        recipient_name: str | None = None,
        admin_name: str | None = None,
        clinic_name: str | None = None,
        login_url: str | None = None,
    ) -> CredentialEmailResult:
        """Email a stored temporary credential and retire it on success.

        Raises:
            CredentialNotFoundException: Unknown credential id.
            ExpiredCredentialException: Credential expired or already sent.
        """
        entry = self.vault.lookup(credential_id)
        message = CredentialEmail(
            recipient_email=entry.email,
            recipient_name=recipient_name or entry.email,
            secret=self.vault.get(credential_id),
            user_type=entry.user_type,
            admin_name=admin_name or self.default_admin_name,
            clinic_name=clinic_name or self.default_clinic_name,
            login_url=login_url or self.login_url,
        )
        return await self._deliver(credential_id, message)

    async def _deliver(self, credential_id: str, message: CredentialEmail) -> CredentialEmailResult:
        try:
            receipt = await self.notifier.send_credential_email(message)
        except NotificationException as e:
            logger.warning("Credential email to %s failed: %s", message.recipient_email, e.message)
            return CredentialEmailResult(success=False, error=ErrorInfo.from_exception(e))
        except Exception as e:
            logger.exception("Credential email to %s failed", message.recipient_email)
            wrapped = NotificationException(str(e) or "Email delivery failed", message.recipient_email)
            return CredentialEmailResult(success=False, error=ErrorInfo.from_exception(wrapped))
        try:
            self.vault.mark_sent(credential_id)
        except CredentialNotFoundException:
            # swept while the send was in flight; the email itself went out
            logger.warning("Credential %s left the vault before it was marked sent", credential_id)
        logger.info("Credential email sent to %s (message %s)", message.recipient_email, receipt.message_id)
        return CredentialEmailResult(success=True, message_id=receipt.message_id)

    async def _restore_admin_session(
        self, admin_credentials: AdminCredentials | None
    ) -> ErrorInfo | None:
        if admin_credentials is None:
            # The provider now holds the new account; the old admin session is void.
            await self.auth_service.sign_out()
            logger.warning("No admin credentials supplied; admin session not restored")
            return ErrorInfo.from_exception(
                ReauthenticationException("Admin credentials were not supplied")
            )
        try:
            await self.auth_service.reauthenticate(
                admin_credentials.email, admin_credentials.password
            )
        except ReauthenticationException as e:
            return ErrorInfo.from_exception(e)
        return None

    def _validate(self, profile: AccountProfile, secret: str) -> str:
        """Check required fields and the secret; return the trimmed email."""
        email = (profile.email or "").strip()
        if not email:
            raise ValidationException("Email is required", field="email")
        try:
            validate_email(email, check_deliverability=False)
        except EmailNotValidError as e:
            raise ValidationException(f"Invalid email address: {e}", field="email") from e
        if not (profile.first_name or "").strip():
            raise ValidationException("First name is required", field="first_name")
        if not (profile.last_name or "").strip():
            raise ValidationException("Last name is required", field="last_name")
        if not isinstance(profile.user_type, UserType):
            raise ValidationException(
                f"user_type must be one of {UserType.values()}", field="user_type"
            )
        problems = supplied_secret_violations(secret or "")
        if problems:
            raise ValidationException(
                "Temporary password " + "; ".join(problems), field="secret"
            )
        return email

    def _profile_document(
        self, profile: AccountProfile, email: str, credential_id: str
    ) -> dict[str, Any]:
        document: dict[str, Any] = dict(profile.attributes)
        document.update(
            {
                "email": email,
                "first_name": profile.first_name.strip(),
                "last_name": profile.last_name.strip(),
                "middle_name": profile.middle_name,
                "phone": profile.phone,
                "clinic_name": profile.clinic_name,
                "created_by": profile.created_by,
                "user_type": profile.user_type.value,
                "temporary_credential_id": credential_id,
                "is_active": True,
                "created_at": self._clock().isoformat(),
            }
        )
        return {key: value for key, value in document.items() if value is not None}
