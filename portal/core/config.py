"""Application configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support. Keys and backend choices are validated at load time
so a malformed vault key stops the process before any account is created.
"""

from functools import lru_cache

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

VAULT_KEY_LENGTH = 32


class Settings(BaseSettings):
    """Application settings loaded from environment and .env.

    Required: TEMP_PASSWORD_ENCRYPTION_KEY (exactly 32 characters),
    FIREBASE_API_KEY, and the Firestore service account when the profile
    store backend is 'firestore'.
    """

    # App
    app_name: str = "admin-portal"
    app_version: str = "1.0.0"
    debug: bool = False

    # CORS
    allowed_origins: str = "http://localhost:3000"

    # Request / middleware
    request_id_header: str = "X-Request-ID"

    # Temporary credential vault
    temp_password_encryption_key: SecretStr = SecretStr("")
    credential_ttl_seconds: int = 10 * 60
    credential_sweep_interval_seconds: int = 5 * 60

    # Admin session
    session_ttl_hours: int = 24

    # Bulk provisioning pacing (provider rate limits)
    bulk_batch_size: int = 5
    bulk_item_delay_seconds: float = 1.0
    bulk_batch_delay_seconds: float = 2.0
    bulk_max_records: int = 500

    # Identity provider (Firebase Authentication REST API)
    firebase_api_key: SecretStr | None = None
    identity_toolkit_base_url: str = "https://identitytoolkit.googleapis.com/v1"

    # Profile store: "firestore" (Firestore REST) or "memory" (local development)
    profile_store_backend: str = "firestore"
    firebase_service_account_key: SecretStr | None = None
    firebase_service_account_path: str | None = None
    # Comma-separated provider uids seeded as superadmins in the memory store
    memory_admin_uids: str = ""

    # Notifications: "log" (log only) or "resend" (Resend HTTP API)
    email_backend: str = "log"
    resend_api_key: SecretStr | None = None
    resend_base_url: str = "https://api.resend.com"
    email_from: str = "UniHealth Admin <noreply@resend.dev>"
    app_url: str = "http://localhost:3000"
    default_clinic_name: str = "UniHealth Medical System"
    default_admin_name: str = "System Administrator"

    # OpenTelemetry
    telemetry_enabled: bool = False
    telemetry_exporter: str = "console"
    telemetry_otlp_endpoint: str | None = None
    telemetry_sample_rate: float = 1.0
    telemetry_environment: str = "development"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @property
    def login_url(self) -> str:
        return f"{self.app_url.rstrip('/')}/login"

    @model_validator(mode="after")
    def validate_required_and_backends(self) -> "Settings":
        """Validate keys, backend choices and pacing values."""
        key = self.temp_password_encryption_key.get_secret_value()
        if len(key) != VAULT_KEY_LENGTH:
            raise ValueError(
                f"TEMP_PASSWORD_ENCRYPTION_KEY must be exactly {VAULT_KEY_LENGTH} characters long. "
                "Generate with: openssl rand -hex 16"
            )
        if not (self.firebase_api_key and self.firebase_api_key.get_secret_value()):
            raise ValueError(
                "FIREBASE_API_KEY is required (Firebase project settings → Web API key)."
            )
        if self.profile_store_backend == "firestore":
            has_key = (
                self.firebase_service_account_key
                and self.firebase_service_account_key.get_secret_value()
            )
            if not has_key and not self.firebase_service_account_path:
                raise ValueError(
                    "When profile_store_backend is 'firestore', set FIREBASE_SERVICE_ACCOUNT_KEY "
                    "(full JSON string) or FIREBASE_SERVICE_ACCOUNT_PATH (path to JSON file)."
                )
        elif self.profile_store_backend != "memory":
            raise ValueError(
                "profile_store_backend must be 'firestore' or 'memory', "
                f"got: {self.profile_store_backend!r}"
            )
        if self.email_backend == "resend":
            if not (self.resend_api_key and self.resend_api_key.get_secret_value()):
                raise ValueError(
                    "RESEND_API_KEY is required when email_backend is 'resend'."
                )
        elif self.email_backend != "log":
            raise ValueError(
                f"email_backend must be 'log' or 'resend', got: {self.email_backend!r}"
            )
        if self.bulk_batch_size < 1:
            raise ValueError("BULK_BATCH_SIZE must be at least 1")
        if self.bulk_item_delay_seconds < 0 or self.bulk_batch_delay_seconds < 0:
            raise ValueError("Bulk pacing delays must not be negative")
        if self.credential_ttl_seconds <= 0 or self.credential_sweep_interval_seconds <= 0:
            raise ValueError("Credential TTL and sweep interval must be positive")
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings (single instance per process).

    Validation runs on first call, not at import time. In tests, call
    get_settings.cache_clear() after changing environment variables.
    """
    return Settings()
