"""Equipment store operations.

Every operation awaits its artificial latency first and then runs the
whole read-modify-write without awaiting again, so a write and the
notification it triggers land within one scheduling turn.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from pygear._seed import demo_equipment
from pygear.models._base import utcnow
from pygear.models.equipment import Equipment, EquipmentStatus, MaintenanceLog
from pygear.models.notification import NotificationDraft, NotificationType, RoleTarget, UserTarget
from pygear.models.user import UserRole
from pygear.repository import Repository
from pygear.services._common import simulate_latency
from pygear.services.notifications import NotificationService

_logger = logging.getLogger(__name__)


class EquipmentService:
    """CRUD plus the report/resolve maintenance cycle."""

    def __init__(
        self,
        repository: Repository[Equipment],
        notifications: NotificationService,
        *,
        read_delay: float = 0.0,
        write_delay: float = 0.0,
        seed_demo_data: bool = True,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._repository = repository
        self._notifications = notifications
        self._read_delay = read_delay
        self._write_delay = write_delay
        self._seed_demo_data = seed_demo_data
        self._clock = clock

    def _load(self) -> list[Equipment]:
        """Load the collection, seeding the demo records into an empty store."""
        if self._seed_demo_data and not self._repository.is_initialized():
            items = demo_equipment()
            self._repository.save_all(items)
            _logger.debug("Seeded %d demo equipment records", len(items))
            return items
        return self._repository.load()

    def _find(self, item_id: str) -> Equipment | None:
        for item in self._load():
            if item.id == item_id:
                return item
        return None

    async def list_all(self) -> list[Equipment]:
        """All equipment, in stored order."""
        await simulate_latency(self._read_delay)
        return self._load()

    async def get(self, item_id: str) -> Equipment | None:
        await simulate_latency(self._read_delay)
        return self._find(item_id)

    async def upsert(self, item: Equipment) -> Equipment:
        """Replace the record with the same id, or append it."""
        await simulate_latency(self._write_delay)
        self._load()
        replaced = self._repository.upsert(item)
        _logger.debug("%s equipment %s", "Replaced" if replaced else "Added", item.id)
        return item

    async def delete(self, item_id: str) -> bool:
        await simulate_latency(self._write_delay)
        self._load()
        removed = self._repository.delete(item_id)
        if removed:
            _logger.debug("Deleted equipment %s", item_id)
        return removed

    async def set_status(self, item_id: str, status: EquipmentStatus | str) -> Equipment | None:
        """Set the status by hand. Returns ``None`` for an unknown id."""
        await simulate_latency(self._write_delay)
        item = self._find(item_id)
        if item is None:
            return None
        item.status = EquipmentStatus(status)
        self._repository.upsert(item)
        return item

    async def report_issue(self, item_id: str, log: MaintenanceLog) -> Equipment | None:
        """Append ``log``, put the item into maintenance and alert the admins.

        Returns ``None`` (and changes nothing) for an unknown id.
        """
        await simulate_latency(self._write_delay)
        item = self._find(item_id)
        if item is None:
            return None
        item.logs.append(log)
        item.status = EquipmentStatus.MAINTENANCE
        self._repository.upsert(item)

        self._notifications.record(
            NotificationDraft(
                message=f"{log.reported_by} reported a problem with: {item.name}",
                type=NotificationType.ALERT,
                target=RoleTarget(role=UserRole.ADMIN),
                related_equipment_id=item.id,
            )
        )
        _logger.info("Issue %s reported on %s (%s) by %s", log.id, item.id, item.name, log.reported_by_id)
        return item

    async def resolve(self, item_id: str) -> Equipment | None:
        """Make the item available again and tell the reporter of the last log.

        The last log's resolution time is stamped only if it is still open.
        Returns ``None`` (and changes nothing) for an unknown id.
        """
        await simulate_latency(self._write_delay)
        item = self._find(item_id)
        if item is None:
            return None
        item.status = EquipmentStatus.AVAILABLE

        reporter_id: str | None = None
        latest = item.latest_log
        if latest is not None:
            latest.mark_resolved(self._clock())
            reporter_id = latest.reported_by_id or None

        self._repository.upsert(item)

        if reporter_id:
            self._notifications.record(
                NotificationDraft(
                    message=f"{item.name} has been repaired and is available.",
                    type=NotificationType.SUCCESS,
                    target=UserTarget(user_id=reporter_id),
                    related_equipment_id=item.id,
                )
            )
        _logger.info("Resolved maintenance on %s (%s)", item.id, item.name)
        return item
