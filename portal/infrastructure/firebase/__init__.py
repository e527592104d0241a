"""Firebase integration: Identity Toolkit auth and Firestore profile storage."""

from portal.infrastructure.firebase.client import build_firestore_client
from portal.infrastructure.firebase.identity_toolkit import FirebaseIdentityProvider

__all__ = ["FirebaseIdentityProvider", "build_firestore_client"]
