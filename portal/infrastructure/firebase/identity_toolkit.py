"""Firebase Authentication adapter over the Identity Toolkit REST API.

accounts:signUp signs the caller in as the account it creates, the same
way the client SDK's createUserWithEmailAndPassword does. This adapter
mirrors that: the provider's current user after create_account is the
new account, and the previous user is gone.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from portal.application.dtos.account import IdentityToken
from portal.domain.exceptions import (
    AuthenticationException,
    DuplicateAccountException,
    IdentityProviderException,
    PortalException,
    RateLimitException,
    WeakSecretException,
)

logger = logging.getLogger(__name__)

_AUTH_FAILURE_CODES = frozenset({
    "INVALID_PASSWORD",
    "EMAIL_NOT_FOUND",
    "INVALID_LOGIN_CREDENTIALS",
    "USER_DISABLED",
    "INVALID_EMAIL",
})
_AUTH_FAILURE_MESSAGES = {
    "INVALID_PASSWORD": "Invalid password",
    "EMAIL_NOT_FOUND": "No user found with this email address",
    "INVALID_LOGIN_CREDENTIALS": "Invalid email or password",
    "USER_DISABLED": "This account has been disabled",
    "INVALID_EMAIL": "Invalid email address",
}
ADMIN_RESTRICTED_MESSAGE = (
    "Identity provider admin restriction: the email domain may not be authorized "
    "or too many rapid requests"
)


def _provider_code(response: httpx.Response) -> str:
    """Extract the error code from ``{"error": {"message": "CODE : detail"}}``."""
    try:
        payload = response.json()
    except ValueError:
        return ""
    message = str((payload.get("error") or {}).get("message") or "")
    return message.split(":", 1)[0].strip()


def map_provider_error(
    status_code: int, code: str, email: str | None = None
) -> PortalException:
    """Translate an Identity Toolkit error into a portal exception."""
    if code == "EMAIL_EXISTS":
        return DuplicateAccountException(email or "")
    if code == "WEAK_PASSWORD":
        return WeakSecretException("Password should be at least 6 characters")
    if code == "TOO_MANY_ATTEMPTS_TRY_LATER" or status_code == 429:
        return RateLimitException()
    if code in _AUTH_FAILURE_CODES:
        return AuthenticationException(_AUTH_FAILURE_MESSAGES[code])
    if code == "ADMIN_ONLY_OPERATION":
        return IdentityProviderException(ADMIN_RESTRICTED_MESSAGE, provider_code=code)
    return IdentityProviderException(
        f"Identity provider request failed ({code or status_code})",
        provider_code=code or None,
    )


class FirebaseIdentityProvider:
    """IIdentityProvider backed by Firebase Authentication."""

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://identitytoolkit.googleapis.com/v1",
        *,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._http = http_client if http_client is not None else httpx.AsyncClient(timeout=30.0)
        self._owns_http = http_client is None
        self._current: IdentityToken | None = None

    @property
    def current_user(self) -> IdentityToken | None:
        """The account the provider currently considers signed in."""
        return self._current

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()

    async def create_account(self, email: str, secret: str) -> str:
        token = await self._post("accounts:signUp", email, secret)
        previous = self._current
        self._current = token
        if previous is not None:
            logger.info("Provider session switched from %s to new account %s", previous.email, email)
        return token.user_id

    async def sign_in(self, email: str, secret: str) -> IdentityToken:
        token = await self._post("accounts:signInWithPassword", email, secret)
        self._current = token
        return token

    async def sign_out(self) -> None:
        self._current = None

    async def _post(self, method: str, email: str, secret: str) -> IdentityToken:
        body: dict[str, Any] = {"email": email, "password": secret, "returnSecureToken": True}
        try:
            resp = await self._http.post(
                f"{self._base_url}/{method}", params={"key": self._api_key}, json=body
            )
        except httpx.HTTPError as e:
            logger.warning("Identity provider %s unreachable: %s", method, e.__class__.__name__)
            raise IdentityProviderException(
                "Identity provider is unreachable"
            ) from e
        if resp.status_code != 200:
            code = _provider_code(resp)
            logger.info("Identity provider %s rejected for %s: %s", method, email, code or resp.status_code)
            raise map_provider_error(resp.status_code, code, email)
        data = resp.json()
        return IdentityToken(
            user_id=data["localId"],
            email=data.get("email") or email,
            id_token=data.get("idToken", ""),
        )
