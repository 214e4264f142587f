"""Store operations over the equipment and notification repositories."""

from pygear.services.equipment import EquipmentService
from pygear.services.notifications import NotificationService

__all__ = ["EquipmentService", "NotificationService"]
