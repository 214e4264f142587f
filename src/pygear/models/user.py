"""Session user model."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict


class UserRole(StrEnum):
    ADMIN = "admin"
    USER = "user"


# Fixed identities handed out at login; notifications are addressed to these ids.
_ROLE_IDENTITIES: dict[UserRole, tuple[str, str]] = {
    UserRole.ADMIN: ("admin-1", "Pr. Carlos (Admin)"),
    UserRole.USER: ("user-1", "João (Técnico)"),
}


class User(BaseModel):
    """The logged-in user. Never persisted."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    role: UserRole

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    @classmethod
    def for_role(cls, role: UserRole | str) -> User:
        """Derive the session user from a role choice."""
        resolved = UserRole(role)
        user_id, name = _ROLE_IDENTITIES[resolved]
        return cls(id=user_id, name=name, role=resolved)
