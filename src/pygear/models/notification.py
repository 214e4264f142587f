"""Notification models.

A notification is addressed through a tagged :data:`NotificationTarget`
rather than two optional recipient fields:

* :class:`RoleTarget` broadcasts to everyone holding a role.
* :class:`UserTarget` is addressed to a single user id.
* :class:`EitherTarget` only appears when a stored record carries both
  ``recipientRole`` and ``recipientUserId``; it matches if either does.
* :class:`NoTarget` is given to stored records with neither field; nobody
  sees them, but they stay in the collection.

Records stored in the flat form (``recipientRole`` / ``recipientUserId``)
are lifted into a target on load.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Annotated, Any, Literal

from pydantic import Field, model_validator

from pygear.models._base import GearBaseModel, GearTimestamp
from pygear.models.user import UserRole


class NotificationType(StrEnum):
    ALERT = "alert"
    SUCCESS = "success"
    INFO = "info"
    WARNING = "warning"


class RoleTarget(GearBaseModel):
    kind: Literal["role"] = "role"
    role: UserRole

    def matches(self, user_id: str, role: UserRole | str) -> bool:
        return self.role == role


class UserTarget(GearBaseModel):
    kind: Literal["user"] = "user"
    user_id: str

    def matches(self, user_id: str, role: UserRole | str) -> bool:
        return self.user_id == user_id


class EitherTarget(GearBaseModel):
    kind: Literal["either"] = "either"
    role: UserRole
    user_id: str

    def matches(self, user_id: str, role: UserRole | str) -> bool:
        return self.role == role or self.user_id == user_id


class NoTarget(GearBaseModel):
    kind: Literal["none"] = "none"

    def matches(self, user_id: str, role: UserRole | str) -> bool:
        return False


NotificationTarget = Annotated[
    RoleTarget | UserTarget | EitherTarget | NoTarget,
    Field(discriminator="kind"),
]


def _lift_recipients(values: dict[str, Any]) -> dict[str, Any]:
    """Replace flat recipient fields with a tagged ``target`` dict."""
    if "target" in values:
        return values
    merged = dict(values)
    role = merged.pop("recipientRole", None) or merged.pop("recipient_role", None)
    user_id = merged.pop("recipientUserId", None) or merged.pop("recipient_user_id", None)
    if role and user_id:
        merged["target"] = {"kind": "either", "role": role, "userId": user_id}
    elif role:
        merged["target"] = {"kind": "role", "role": role}
    elif user_id:
        merged["target"] = {"kind": "user", "userId": user_id}
    else:
        merged["target"] = {"kind": "none"}
    return merged


class NotificationDraft(GearBaseModel):
    """Caller-supplied part of a notification; id, date and read flag are assigned on create."""

    message: str
    type: NotificationType = NotificationType.INFO
    target: NotificationTarget
    related_equipment_id: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _lift_flat_recipients(cls, values: Any) -> Any:
        if not isinstance(values, dict):
            return values
        return _lift_recipients(values)


class AppNotification(NotificationDraft):
    """A stored notification."""

    id: str
    created_at: GearTimestamp = Field(alias="date")
    """Creation time (stored as ``date``)."""
    read: bool = False

    @property
    def recipient_role(self) -> UserRole | None:
        target = self.target
        return target.role if isinstance(target, (RoleTarget, EitherTarget)) else None

    @property
    def recipient_user_id(self) -> str | None:
        target = self.target
        return target.user_id if isinstance(target, (UserTarget, EitherTarget)) else None

    def is_visible_to(self, user_id: str, role: UserRole | str) -> bool:
        return self.target.matches(user_id, role)
