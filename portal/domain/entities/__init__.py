"""Domain entities.

Pure domain models; no persistence or transport concerns.
"""

from portal.domain.entities.admin import ROLE_PERMISSIONS, AdminUser
from portal.domain.entities.credential import TemporaryCredential
from portal.domain.entities.session import AdminSession

__all__ = [
    "ROLE_PERMISSIONS",
    "AdminSession",
    "AdminUser",
    "TemporaryCredential",
]
