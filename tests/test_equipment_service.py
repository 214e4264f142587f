from __future__ import annotations

import json
from datetime import UTC, date, datetime, timedelta

import pytest

from pygear.config import EQUIPMENT_KEY, NOTIFICATIONS_KEY
from pygear.models.equipment import Equipment, EquipmentStatus, MaintenanceLog
from pygear.models.notification import AppNotification, RoleTarget, UserTarget
from pygear.models.user import UserRole
from pygear.repository import CollectionRepository
from pygear.services.equipment import EquipmentService
from pygear.services.notifications import NotificationService
from pygear.storage import MemoryKeyValueStore


class _TickClock:
    """Returns a strictly increasing UTC time on every call."""

    def __init__(self) -> None:
        self._now = datetime(2026, 1, 1, tzinfo=UTC)

    def __call__(self) -> datetime:
        self._now += timedelta(seconds=1)
        return self._now


def _build(store: MemoryKeyValueStore | None = None, *, seed: bool = True):
    store = store if store is not None else MemoryKeyValueStore()
    clock = _TickClock()
    counter = iter(range(1, 1000))
    notifications = NotificationService(
        CollectionRepository(store, NOTIFICATIONS_KEY, AppNotification),
        clock=clock,
        id_factory=lambda: f"n-{next(counter)}",
    )
    equipment = EquipmentService(
        CollectionRepository(store, EQUIPMENT_KEY, Equipment),
        notifications,
        seed_demo_data=seed,
        clock=clock,
    )
    return store, equipment, notifications


def _log(log_id: str = "log-9", reporter_id: str = "user-1") -> MaintenanceLog:
    return MaintenanceLog(
        id=log_id,
        created_at=datetime(2026, 2, 1, tzinfo=UTC),
        description="Hum on channel 3",
        reported_by="João (Técnico)",
        reported_by_id=reporter_id,
    )


@pytest.mark.asyncio
async def test_first_list_seeds_four_demo_records() -> None:
    store, equipment, _ = _build()
    assert store.get(EQUIPMENT_KEY) is None

    items = await equipment.list_all()

    assert [item.id for item in items] == ["1", "2", "3", "4"]
    assert store.get(EQUIPMENT_KEY) is not None
    again = await equipment.list_all()
    assert [item.name for item in again] == ["Shure SM58", "Behringer X32", "Cabo XLR 10m", "Yamaha DBR10"]
    assert again[1].status == EquipmentStatus.IN_USE
    assert again[2].status == EquipmentStatus.MAINTENANCE
    assert again[2].has_open_issue
    assert again[0].purchase_date == date(2023, 1, 15)


@pytest.mark.asyncio
async def test_seeding_happens_only_once() -> None:
    _, equipment, _ = _build()
    await equipment.list_all()
    for item_id in ("1", "2", "3", "4"):
        await equipment.delete(item_id)

    assert await equipment.list_all() == []


@pytest.mark.asyncio
async def test_seeding_can_be_disabled() -> None:
    _, equipment, _ = _build(seed=False)
    assert await equipment.list_all() == []


@pytest.mark.asyncio
async def test_upsert_existing_id_replaces_in_place() -> None:
    _, equipment, _ = _build()
    before = await equipment.list_all()

    changed = before[1].model_copy(update={"name": "Behringer X32 Compact"})
    await equipment.upsert(changed)

    after = await equipment.list_all()
    assert len(after) == len(before)
    assert after[1].id == "2"
    assert after[1].name == "Behringer X32 Compact"


@pytest.mark.asyncio
async def test_upsert_unknown_id_appends() -> None:
    _, equipment, _ = _build()
    before = await equipment.list_all()

    await equipment.upsert(Equipment(id="5", name="DI Box", brand="Radial", category="Acessórios"))

    after = await equipment.list_all()
    assert len(after) == len(before) + 1
    assert after[-1].id == "5"
    assert after[-1].status == EquipmentStatus.AVAILABLE


@pytest.mark.asyncio
async def test_upsert_into_empty_store_keeps_seed_records() -> None:
    _, equipment, _ = _build()

    await equipment.upsert(Equipment(id="5", name="DI Box"))

    assert [item.id for item in await equipment.list_all()] == ["1", "2", "3", "4", "5"]


@pytest.mark.asyncio
async def test_delete_removes_exactly_one_record_and_leaves_others_untouched() -> None:
    store, equipment, _ = _build()
    await equipment.list_all()
    before = {record["id"]: record for record in json.loads(store.get(EQUIPMENT_KEY) or "[]")}

    assert await equipment.delete("2") is True

    after = {record["id"]: record for record in json.loads(store.get(EQUIPMENT_KEY) or "[]")}
    assert set(after) == {"1", "3", "4"}
    for item_id, record in after.items():
        assert json.dumps(record, sort_keys=True) == json.dumps(before[item_id], sort_keys=True)


@pytest.mark.asyncio
async def test_delete_unknown_id_is_noop() -> None:
    _, equipment, _ = _build()
    await equipment.list_all()

    assert await equipment.delete("missing") is False
    assert len(await equipment.list_all()) == 4


@pytest.mark.asyncio
async def test_set_status_persists() -> None:
    _, equipment, _ = _build()

    updated = await equipment.set_status("1", "in_use")

    assert updated is not None
    assert updated.status == EquipmentStatus.IN_USE
    assert (await equipment.get("1")).status == EquipmentStatus.IN_USE  # type: ignore[union-attr]


@pytest.mark.asyncio
async def test_set_status_unknown_id_returns_none() -> None:
    _, equipment, _ = _build()
    assert await equipment.set_status("missing", EquipmentStatus.AVAILABLE) is None


@pytest.mark.asyncio
async def test_report_issue_moves_item_to_maintenance_and_alerts_admins() -> None:
    _, equipment, notifications = _build()

    item = await equipment.report_issue("2", _log())

    assert item is not None
    stored = await equipment.get("2")
    assert stored is not None
    assert stored.status == EquipmentStatus.MAINTENANCE
    assert len(stored.logs) == 1
    assert stored.logs[-1].id == "log-9"
    assert stored.has_open_issue

    admin_view = await notifications.list_for("admin-1", UserRole.ADMIN)
    assert len(admin_view) == 1
    alert = admin_view[0]
    assert alert.type == "alert"
    assert alert.target == RoleTarget(role=UserRole.ADMIN)
    assert alert.related_equipment_id == "2"
    assert alert.message == "João (Técnico) reported a problem with: Behringer X32"
    assert alert.read is False

    assert await notifications.list_for("user-1", UserRole.USER) == []


@pytest.mark.asyncio
async def test_report_issue_appends_to_existing_logs() -> None:
    _, equipment, notifications = _build()

    await equipment.report_issue("3", _log("log-2"))

    stored = await equipment.get("3")
    assert stored is not None
    assert [log.id for log in stored.logs] == ["log-1", "log-2"]
    assert len(await notifications.list_for("admin-1", "admin")) == 1


@pytest.mark.asyncio
async def test_report_issue_unknown_id_is_noop() -> None:
    store, equipment, _ = _build()

    assert await equipment.report_issue("missing", _log()) is None
    assert store.get(NOTIFICATIONS_KEY) is None


@pytest.mark.asyncio
async def test_resolve_stamps_last_log_and_notifies_reporter() -> None:
    _, equipment, notifications = _build()
    await equipment.report_issue("1", _log(reporter_id="user-7"))

    item = await equipment.resolve("1")

    assert item is not None
    stored = await equipment.get("1")
    assert stored is not None
    assert stored.status == EquipmentStatus.AVAILABLE
    assert stored.logs[-1].resolved_at is not None
    assert not stored.has_open_issue

    reporter_view = await notifications.list_for("user-7", UserRole.USER)
    assert len(reporter_view) == 1
    success = reporter_view[0]
    assert success.type == "success"
    assert success.target == UserTarget(user_id="user-7")
    assert success.related_equipment_id == "1"
    assert success.message == "Shure SM58 has been repaired and is available."

    # The admin only sees the original alert.
    assert [n.type for n in await notifications.list_for("admin-1", UserRole.ADMIN)] == ["alert"]


@pytest.mark.asyncio
async def test_resolve_seeded_open_log() -> None:
    _, equipment, notifications = _build()

    await equipment.resolve("3")

    stored = await equipment.get("3")
    assert stored is not None
    assert stored.status == EquipmentStatus.AVAILABLE
    assert stored.logs[0].resolved_at is not None
    assert len(await notifications.list_for("user-1", UserRole.USER)) == 1


@pytest.mark.asyncio
async def test_resolve_does_not_restamp_a_resolved_log() -> None:
    _, equipment, _ = _build()
    await equipment.resolve("3")
    first = (await equipment.get("3")).logs[0].resolved_at  # type: ignore[union-attr]

    await equipment.resolve("3")

    assert (await equipment.get("3")).logs[0].resolved_at == first  # type: ignore[union-attr]


@pytest.mark.asyncio
async def test_resolve_without_logs_sends_no_notification() -> None:
    store, equipment, _ = _build()
    await equipment.set_status("2", EquipmentStatus.MAINTENANCE)

    item = await equipment.resolve("2")

    assert item is not None
    assert item.status == EquipmentStatus.AVAILABLE
    assert store.get(NOTIFICATIONS_KEY) is None


@pytest.mark.asyncio
async def test_resolve_unknown_id_is_noop() -> None:
    _, equipment, _ = _build()
    assert await equipment.resolve("missing") is None


@pytest.mark.asyncio
async def test_configured_latency_is_awaited(monkeypatch: pytest.MonkeyPatch) -> None:
    delays: list[float] = []

    async def fake_sleep(seconds: float) -> None:
        delays.append(seconds)

    monkeypatch.setattr("pygear.services._common.asyncio.sleep", fake_sleep)
    store = MemoryKeyValueStore()
    notifications = NotificationService(CollectionRepository(store, NOTIFICATIONS_KEY, AppNotification))
    equipment = EquipmentService(
        CollectionRepository(store, EQUIPMENT_KEY, Equipment),
        notifications,
        read_delay=0.3,
        write_delay=0.2,
    )

    await equipment.list_all()
    await equipment.set_status("1", EquipmentStatus.IN_USE)

    assert delays == [0.3, 0.2]
