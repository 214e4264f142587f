"""Notification store operations."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from pygear.models._base import utcnow
from pygear.models.notification import AppNotification, NotificationDraft
from pygear.models.user import UserRole
from pygear.repository import Repository
from pygear.services._common import generate_id

_logger = logging.getLogger(__name__)


class NotificationService:
    """Create, list and acknowledge role- or user-targeted notifications.

    Visibility is the same everywhere: a notification is visible to a
    caller when its target matches the caller's role or user id.
    """

    def __init__(
        self,
        repository: Repository[AppNotification],
        *,
        clock: Callable[[], datetime] = utcnow,
        id_factory: Callable[[], str] = generate_id,
    ) -> None:
        self._repository = repository
        self._clock = clock
        self._id_factory = id_factory

    def _visible(self, user_id: str, role: UserRole | str) -> list[AppNotification]:
        return [n for n in self._repository.load() if n.is_visible_to(user_id, role)]

    async def list_for(self, user_id: str, role: UserRole | str) -> list[AppNotification]:
        """Notifications visible to ``user_id``/``role``, most recent first."""
        visible = self._visible(user_id, role)
        # Stable sort: for equal dates the stored (newest-first) order is kept.
        return sorted(visible, key=lambda n: n.created_at, reverse=True)

    def record(self, draft: NotificationDraft) -> AppNotification:
        """Store a new notification synchronously and return it.

        Used by the equipment service so a state change and its
        notification are written within the same scheduling turn.
        """
        notification = AppNotification(
            id=self._id_factory(),
            created_at=self._clock(),
            read=False,
            message=draft.message,
            type=draft.type,
            target=draft.target,
            related_equipment_id=draft.related_equipment_id,
        )
        self._repository.save_all([notification, *self._repository.load()])
        _logger.debug("Created %s notification %s for %s", notification.type, notification.id, notification.target)
        return notification

    async def create(self, draft: NotificationDraft) -> AppNotification:
        return self.record(draft)

    async def mark_read(self, notification_id: str) -> bool:
        """Flag one notification as read; returns ``False`` if it does not exist."""
        notifications = self._repository.load()
        for notification in notifications:
            if notification.id == notification_id:
                notification.read = True
                self._repository.save_all(notifications)
                return True
        return False

    async def mark_all_read(self, user_id: str, role: UserRole | str) -> int:
        """Flag every notification visible to ``user_id``/``role`` as read.

        Returns how many notifications changed from unread to read.
        """
        if not self._repository.is_initialized():
            return 0
        notifications = self._repository.load()
        changed = 0
        for notification in notifications:
            if notification.is_visible_to(user_id, role) and not notification.read:
                notification.read = True
                changed += 1
        self._repository.save_all(notifications)
        return changed

    async def unread_count(self, user_id: str, role: UserRole | str) -> int:
        return sum(1 for n in self._visible(user_id, role) if not n.read)
