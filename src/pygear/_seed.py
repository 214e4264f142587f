"""Demo records written the first time an empty store is listed."""

from __future__ import annotations

from datetime import UTC, date, datetime

from pygear.models.equipment import Equipment, EquipmentStatus, MaintenanceLog


def demo_equipment() -> list[Equipment]:
    """Return fresh copies of the four demo records."""
    return [
        Equipment(
            id="1",
            name="Shure SM58",
            brand="Shure",
            category="Microfones",
            status=EquipmentStatus.AVAILABLE,
            purchase_date=date(2023, 1, 15),
        ),
        Equipment(
            id="2",
            name="Behringer X32",
            brand="Behringer",
            category="Mesas de Som",
            status=EquipmentStatus.IN_USE,
            purchase_date=date(2022, 5, 20),
        ),
        Equipment(
            id="3",
            name="Cabo XLR 10m",
            brand="Santo Angelo",
            category="Cabos",
            status=EquipmentStatus.MAINTENANCE,
            purchase_date=date(2023, 8, 10),
            logs=[
                MaintenanceLog(
                    id="log-1",
                    created_at=datetime(2023, 10, 25, tzinfo=UTC),
                    description="Conector com mau contato",
                    reported_by="Usuário Padrão",
                    reported_by_id="user-1",
                )
            ],
        ),
        Equipment(
            id="4",
            name="Yamaha DBR10",
            brand="Yamaha",
            category="Caixas de Som",
            status=EquipmentStatus.AVAILABLE,
            purchase_date=date(2021, 11, 5),
        ),
    ]
