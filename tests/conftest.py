"""Pytest configuration and fixtures for the admin portal.

Environment is set before portal.main is imported so settings validate
without real Firebase or Resend credentials. HTTP tests run against the
app through ASGITransport with a PortalServices container built from
test doubles; no network and no real sleeps.
"""

import os

os.environ["TEMP_PASSWORD_ENCRYPTION_KEY"] = "0123456789abcdef0123456789abcdef"
os.environ["FIREBASE_API_KEY"] = "test-firebase-api-key"
os.environ["PROFILE_STORE_BACKEND"] = "memory"
os.environ["EMAIL_BACKEND"] = "log"
os.environ["TELEMETRY_ENABLED"] = "false"

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from portal.core.config import get_settings  # noqa: E402
from portal.core.container import PortalServices  # noqa: E402
from portal.core.limiter import limiter  # noqa: E402
from portal.infrastructure.security.encryption import FernetSecretCipher  # noqa: E402
from portal.main import create_app  # noqa: E402
from tests.doubles import (  # noqa: E402
    ADMIN_EMAIL,
    ADMIN_PASSWORD,
    ADMIN_UID,
    FakeClock,
    FakeIdentityProvider,
    FakeNotifier,
    FlakyProfileStore,
)

TEST_VAULT_KEY = os.environ["TEMP_PASSWORD_ENCRYPTION_KEY"]

get_settings.cache_clear()
limiter.enabled = False


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cipher() -> FernetSecretCipher:
    return FernetSecretCipher(TEST_VAULT_KEY)


@pytest.fixture
def identity_provider() -> FakeIdentityProvider:
    provider = FakeIdentityProvider()
    provider.add_account(ADMIN_EMAIL, ADMIN_PASSWORD, uid=ADMIN_UID)
    return provider


@pytest.fixture
def profile_store() -> FlakyProfileStore:
    return FlakyProfileStore(
        admins={
            ADMIN_UID: {
                "email": ADMIN_EMAIL,
                "displayName": "Clinic Admin",
                "role": "admin",
                "isActive": True,
            }
        }
    )


@pytest.fixture
def notifier() -> FakeNotifier:
    return FakeNotifier()


@pytest.fixture
async def services(identity_provider, profile_store, notifier):
    """PortalServices wired to the doubles; closed after the test."""
    built = PortalServices.build(
        get_settings(),
        identity_provider=identity_provider,
        profile_store=profile_store,
        notifier=notifier,
    )
    yield built
    await built.close()


@pytest.fixture
async def client(services: PortalServices) -> AsyncClient:
    """Async HTTP client against a fresh app (ASGI) sharing the services fixture."""
    app = create_app()
    app.state.services = services
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
async def signed_in(services: PortalServices):
    """Sign the test admin in and return the session."""
    return await services.auth_service.sign_in(ADMIN_EMAIL, ADMIN_PASSWORD)
