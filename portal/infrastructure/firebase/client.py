"""Firestore client construction from the service account settings.

The key comes from FIREBASE_SERVICE_ACCOUNT_KEY (JSON string) or
FIREBASE_SERVICE_ACCOUNT_PATH (file path).
"""

import json
import logging
from pathlib import Path

from portal.core.config import Settings
from portal.domain.exceptions import ConfigurationException
from portal.infrastructure.firebase._rest_client import FirestoreRESTClient, _get_credentials

logger = logging.getLogger(__name__)


def _load_key_dict(settings: Settings) -> dict:
    """Return the service account dict from the env key or the file path."""
    key_json = (
        settings.firebase_service_account_key.get_secret_value()
        if settings.firebase_service_account_key
        else None
    )
    if key_json:
        try:
            return json.loads(key_json)
        except json.JSONDecodeError as e:
            raise ConfigurationException(
                "FIREBASE_SERVICE_ACCOUNT_KEY is not valid JSON",
                setting="firebase_service_account_key",
            ) from e
    path = settings.firebase_service_account_path
    resolved = Path(path).expanduser().resolve() if path else None
    if resolved is None or not resolved.is_file():
        raise ConfigurationException(
            f"Firebase service account file not found: {path}",
            setting="firebase_service_account_path",
        )
    with open(resolved, encoding="utf-8") as f:
        return json.load(f)


def build_firestore_client(settings: Settings) -> FirestoreRESTClient:
    """Create the Firestore REST client.

    Raises:
        ConfigurationException: Missing or malformed service account.
    """
    key_dict = _load_key_dict(settings)
    project_id = key_dict.get("project_id")
    if not project_id:
        raise ConfigurationException(
            "Firebase service account JSON missing 'project_id'",
            setting="firebase_service_account_key",
        )
    client = FirestoreRESTClient(project_id, _get_credentials(key_dict))
    logger.info("Firestore client initialized for project %s", project_id)
    return client
