"""Dict-backed profile store for local development and tests."""

from __future__ import annotations

import copy
from typing import Any

from portal.domain.enums import UserType


class InMemoryProfileStore:
    """IProfileStore keeping profiles per user type and admin records by uid."""

    def __init__(self, admins: dict[str, dict[str, Any]] | None = None) -> None:
        self._profiles: dict[UserType, dict[str, dict[str, Any]]] = {
            user_type: {} for user_type in UserType
        }
        self._admins: dict[str, dict[str, Any]] = dict(admins or {})

    async def save_profile(
        self, user_type: UserType, user_id: str, data: dict[str, Any]
    ) -> None:
        self._profiles[UserType(user_type)][user_id] = copy.deepcopy(data)

    async def get_admin(self, user_id: str) -> dict[str, Any] | None:
        record = self._admins.get(user_id)
        return copy.deepcopy(record) if record is not None else None

    def add_admin(self, user_id: str, record: dict[str, Any]) -> None:
        self._admins[user_id] = dict(record)

    def get_profile(self, user_type: UserType, user_id: str) -> dict[str, Any] | None:
        return self._profiles[UserType(user_type)].get(user_id)
