"""Firestore-backed repositories."""

from portal.infrastructure.firebase.repositories.profile_repo_firestore import (
    FirestoreProfileStore,
)

__all__ = ["FirestoreProfileStore"]
