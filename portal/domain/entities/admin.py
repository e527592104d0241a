"""Administrator identity and role permissions."""

from dataclasses import dataclass, field

from portal.domain.enums import AdminRole

ROLE_PERMISSIONS: dict[AdminRole, tuple[str, ...]] = {
    AdminRole.SUPERADMIN: (
        "doctors:read",
        "doctors:write",
        "doctors:delete",
        "feedback:read",
        "feedback:write",
        "feedback:delete",
        "schedules:read",
        "schedules:write",
        "schedules:delete",
        "clinics:read",
        "clinics:write",
        "clinics:delete",
        "admin:read",
        "admin:write",
        "admin:delete",
        "system:settings",
    ),
    AdminRole.ADMIN: (
        "doctors:read",
        "doctors:write",
        "feedback:read",
        "feedback:write",
        "schedules:read",
        "schedules:write",
        "clinics:read",
        "clinics:write",
    ),
    AdminRole.MODERATOR: (
        "doctors:read",
        "feedback:read",
        "feedback:write",
        "schedules:read",
        "clinics:read",
    ),
}


@dataclass(frozen=True)
class AdminUser:
    """Administrator resolved at sign-in (identity provider uid + admin record)."""

    uid: str
    email: str
    display_name: str
    role: AdminRole
    is_active: bool = True
    permissions: tuple[str, ...] = field(default=())

    @classmethod
    def with_role_permissions(
        cls,
        uid: str,
        email: str,
        display_name: str,
        role: AdminRole,
        is_active: bool = True,
    ) -> "AdminUser":
        """Build an AdminUser whose permissions are derived from its role."""
        return cls(
            uid=uid,
            email=email,
            display_name=display_name,
            role=role,
            is_active=is_active,
            permissions=ROLE_PERMISSIONS.get(role, ()),
        )

    def has_permission(self, permission: str) -> bool:
        """Return True if the admin is active and holds the permission."""
        return self.is_active and permission in self.permissions
