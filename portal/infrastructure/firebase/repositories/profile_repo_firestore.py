"""Firestore-backed profile store (implements IProfileStore)."""

from __future__ import annotations

from typing import Any

from portal.domain.enums import UserType
from portal.infrastructure.firebase._rest_client import FirestoreRESTClient
from portal.infrastructure.firebase.collections import COLLECTION_USERS, PROFILE_COLLECTIONS


class FirestoreProfileStore:
    """Writes doctor/patient profiles and reads admin records from Firestore."""

    def __init__(self, client: FirestoreRESTClient) -> None:
        self._client = client

    async def save_profile(
        self, user_type: UserType, user_id: str, data: dict[str, Any]
    ) -> None:
        collection = PROFILE_COLLECTIONS[UserType(user_type)]
        await self._client.collection(collection).document(user_id).set(data)

    async def get_admin(self, user_id: str) -> dict[str, Any] | None:
        return await self._client.collection(COLLECTION_USERS).document(user_id).get()

    async def aclose(self) -> None:
        await self._client.aclose()
