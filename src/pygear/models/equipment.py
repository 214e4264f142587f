"""Equipment and maintenance log models."""

from __future__ import annotations

import datetime as dt
from enum import StrEnum

from pydantic import Field

from pygear.models._base import GearBaseModel, GearTimestamp, OptionalGearTimestamp


class EquipmentStatus(StrEnum):
    AVAILABLE = "available"
    IN_USE = "in_use"
    MAINTENANCE = "maintenance"


class MaintenanceLog(GearBaseModel):
    """One reported problem and its optional resolution."""

    id: str
    """Log identifier."""
    created_at: GearTimestamp = Field(alias="date")
    """When the problem was reported (stored as ``date``)."""
    description: str = ""
    """Free-text description of the problem."""
    reported_by: str = ""
    """Display name of the reporter."""
    reported_by_id: str = ""
    """User id of the reporter; resolution notifications are sent here."""
    resolved_at: OptionalGearTimestamp = None
    """When the problem was resolved, ``None`` while still open."""

    @property
    def is_resolved(self) -> bool:
        return self.resolved_at is not None

    def mark_resolved(self, at: dt.datetime) -> bool:
        """Stamp the resolution time.

        The timestamp is set at most once; returns ``False`` when the log
        was already resolved and nothing changed.
        """
        if self.resolved_at is not None:
            return False
        self.resolved_at = at
        return True


class Equipment(GearBaseModel):
    """A trackable physical asset.

    ``status`` is ``maintenance`` whenever the most recent log is still
    open. :class:`~pygear.services.equipment.EquipmentService` keeps that
    true through ``report_issue`` and ``resolve``; ``in_use`` is only ever
    set by hand.
    """

    id: str
    name: str
    brand: str = ""
    category: str = ""
    status: EquipmentStatus = EquipmentStatus.AVAILABLE
    purchase_date: dt.date | None = None
    logs: list[MaintenanceLog] = Field(default_factory=list)

    @property
    def latest_log(self) -> MaintenanceLog | None:
        return self.logs[-1] if self.logs else None

    @property
    def has_open_issue(self) -> bool:
        """Whether the most recent log has not been resolved yet."""
        latest = self.latest_log
        return latest is not None and not latest.is_resolved
