"""pygear - Async equipment inventory and maintenance tracker."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pygear")
except PackageNotFoundError:
    __version__ = "0+local"
from pygear.client import GearClient, InventorySnapshot
from pygear.config import GearConfig
from pygear.exceptions import (
    GearConfigError,
    GearError,
    GearNotLoggedInError,
    GearStorageError,
)
from pygear.models import (
    AppNotification,
    EitherTarget,
    Equipment,
    EquipmentStatus,
    MaintenanceLog,
    NoTarget,
    NotificationDraft,
    NotificationType,
    RoleTarget,
    User,
    UserRole,
    UserTarget,
)
from pygear.repository import CollectionRepository, Repository
from pygear.services import EquipmentService, NotificationService
from pygear.storage import JsonFileKeyValueStore, KeyValueStore, MemoryKeyValueStore

__all__ = [
    "__version__",
    "AppNotification",
    "CollectionRepository",
    "EitherTarget",
    "Equipment",
    "EquipmentService",
    "EquipmentStatus",
    "GearClient",
    "GearConfig",
    "GearConfigError",
    "GearError",
    "GearNotLoggedInError",
    "GearStorageError",
    "InventorySnapshot",
    "JsonFileKeyValueStore",
    "KeyValueStore",
    "MaintenanceLog",
    "MemoryKeyValueStore",
    "NoTarget",
    "NotificationDraft",
    "NotificationService",
    "NotificationType",
    "Repository",
    "RoleTarget",
    "User",
    "UserRole",
    "UserTarget",
]
