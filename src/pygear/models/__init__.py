"""Data models for pygear records."""

from pygear.models._base import GearBaseModel, GearTimestamp, parse_timestamp
from pygear.models.equipment import Equipment, EquipmentStatus, MaintenanceLog
from pygear.models.notification import (
    AppNotification,
    EitherTarget,
    NoTarget,
    NotificationDraft,
    NotificationTarget,
    NotificationType,
    RoleTarget,
    UserTarget,
)
from pygear.models.user import User, UserRole

__all__ = [
    "AppNotification",
    "EitherTarget",
    "Equipment",
    "EquipmentStatus",
    "GearBaseModel",
    "GearTimestamp",
    "MaintenanceLog",
    "NoTarget",
    "NotificationDraft",
    "NotificationTarget",
    "NotificationType",
    "RoleTarget",
    "User",
    "UserRole",
    "UserTarget",
    "parse_timestamp",
]
