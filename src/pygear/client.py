"""High-level async client for the equipment inventory."""

from __future__ import annotations

import asyncio
import contextlib
import inspect
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any

from pygear.config import GearConfig
from pygear.exceptions import GearConfigError, GearNotLoggedInError
from pygear.models._base import utcnow
from pygear.models.equipment import Equipment, EquipmentStatus, MaintenanceLog
from pygear.models.notification import AppNotification
from pygear.models.user import User, UserRole
from pygear.repository import CollectionRepository
from pygear.services._common import generate_id
from pygear.services.equipment import EquipmentService
from pygear.services.notifications import NotificationService
from pygear.storage import JsonFileKeyValueStore, KeyValueStore, MemoryKeyValueStore

_logger = logging.getLogger(__name__)

SnapshotCallback = Callable[["InventorySnapshot"], Awaitable[None] | None]


@dataclass(slots=True)
class InventorySnapshot:
    """Result of one refresh: everything a view needs to re-render."""

    equipment: list[Equipment] = field(default_factory=list)
    notifications: list[AppNotification] = field(default_factory=list)

    @property
    def unread_count(self) -> int:
        return sum(1 for n in self.notifications if not n.read)


class GearClient:
    """Async client for the equipment inventory.

    Usage::

        async with GearClient(GearConfig.from_env()) as client:
            client.login("user")
            await client.report_issue("2", "Channel 4 is dead")
            snapshot = await client.refresh()
    """

    def __init__(
        self,
        config: GearConfig | None = None,
        *,
        store: KeyValueStore | None = None,
    ) -> None:
        self._config = config or GearConfig()
        self._external_store = store is not None
        self._store = store
        self._equipment: EquipmentService | None = None
        self._notifications: NotificationService | None = None
        self._user: User | None = None
        self._poll_task: asyncio.Task[None] | None = None

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> GearClient:
        self.open()
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.stop_polling()
        if not self._external_store:
            self._store = None
        self._equipment = None
        self._notifications = None

    def open(self) -> None:
        """Wire the store, repositories and services.

        Called by ``__aenter__``; call it directly when not using the
        client as a context manager.
        """
        if self._store is None:
            path = self._config.storage_path
            self._store = JsonFileKeyValueStore(path) if path is not None else MemoryKeyValueStore()
        self._notifications = NotificationService(
            CollectionRepository(self._store, self._config.notifications_key, AppNotification),
        )
        self._equipment = EquipmentService(
            CollectionRepository(self._store, self._config.equipment_key, Equipment),
            self._notifications,
            read_delay=self._config.read_delay,
            write_delay=self._config.write_delay,
            seed_demo_data=self._config.seed_demo_data,
        )

    # ------------------------------------------------------------------
    # Session
    # ------------------------------------------------------------------

    @property
    def user(self) -> User | None:
        return self._user

    def login(self, role: UserRole | str) -> User:
        """Start a session for the fixed identity behind ``role``."""
        self._user = User.for_role(role)
        _logger.debug("Logged in as %s (%s)", self._user.id, self._user.role)
        return self._user

    def logout(self) -> None:
        self._user = None

    def _require_user(self) -> User:
        if self._user is None:
            raise GearNotLoggedInError("Call login() before user-bound operations")
        return self._user

    @property
    def equipment(self) -> EquipmentService:
        if self._equipment is None:
            self.open()
        assert self._equipment is not None
        return self._equipment

    @property
    def notifications(self) -> NotificationService:
        if self._notifications is None:
            self.open()
        assert self._notifications is not None
        return self._notifications

    # ------------------------------------------------------------------
    # Equipment
    # ------------------------------------------------------------------

    async def get_equipment(self) -> list[Equipment]:
        return await self.equipment.list_all()

    async def get_item(self, item_id: str) -> Equipment | None:
        return await self.equipment.get(item_id)

    async def save_equipment(self, item: Equipment) -> Equipment:
        return await self.equipment.upsert(item)

    async def delete_equipment(self, item_id: str) -> bool:
        return await self.equipment.delete(item_id)

    async def set_status(self, item_id: str, status: EquipmentStatus | str) -> Equipment | None:
        return await self.equipment.set_status(item_id, status)

    async def report_issue(self, item_id: str, description: str) -> Equipment | None:
        """Report a problem on ``item_id`` as the logged-in user."""
        user = self._require_user()
        log = MaintenanceLog(
            id=generate_id(),
            created_at=utcnow(),
            description=description,
            reported_by=user.name,
            reported_by_id=user.id,
        )
        return await self.equipment.report_issue(item_id, log)

    async def resolve(self, item_id: str) -> Equipment | None:
        return await self.equipment.resolve(item_id)

    # ------------------------------------------------------------------
    # Notifications for the logged-in user
    # ------------------------------------------------------------------

    async def get_notifications(self) -> list[AppNotification]:
        user = self._require_user()
        return await self.notifications.list_for(user.id, user.role)

    async def mark_read(self, notification_id: str) -> bool:
        return await self.notifications.mark_read(notification_id)

    async def mark_all_read(self) -> int:
        user = self._require_user()
        return await self.notifications.mark_all_read(user.id, user.role)

    async def unread_count(self) -> int:
        user = self._require_user()
        return await self.notifications.unread_count(user.id, user.role)

    # ------------------------------------------------------------------
    # Refresh / polling
    # ------------------------------------------------------------------

    async def refresh(self) -> InventorySnapshot:
        """Re-read equipment and, when logged in, the user's notifications."""
        snapshot = InventorySnapshot(equipment=await self.get_equipment())
        if self._user is not None:
            snapshot.notifications = await self.get_notifications()
        return snapshot

    @property
    def is_polling(self) -> bool:
        return self._poll_task is not None and not self._poll_task.done()

    def start_polling(self, callback: SnapshotCallback, *, interval: float | None = None) -> None:
        """Refresh every ``interval`` seconds (default ``config.poll_interval``).

        The first refresh runs immediately. Each snapshot is handed to
        ``callback``, which may be a plain function or a coroutine function.

        Raises :class:`GearConfigError` if the interval is not positive.
        """
        if self.is_polling:
            return
        period = self._config.poll_interval if interval is None else interval
        if period <= 0:
            raise GearConfigError(f"poll interval must be positive, got {period!r}")
        self._poll_task = asyncio.get_running_loop().create_task(self._poll_loop(callback, period))

    async def stop_polling(self) -> None:
        task = self._poll_task
        self._poll_task = None
        if task is None:
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task

    async def _poll_loop(self, callback: SnapshotCallback, interval: float) -> None:
        while True:
            try:
                snapshot = await self.refresh()
            except Exception:
                _logger.warning("Inventory refresh failed", exc_info=True)
            else:
                try:
                    result = callback(snapshot)
                    if inspect.isawaitable(result):
                        await result
                except Exception:
                    _logger.warning("Polling callback failed", exc_info=True)
            await asyncio.sleep(interval)
