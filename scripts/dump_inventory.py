#!/usr/bin/env python3
"""Dump the equipment inventory and a role's notifications.

Logs in as the chosen role, lists every equipment record with its
maintenance history, then lists the notifications visible to that role.

Usage
-----
Point the client at a store file and run::

    export GEAR_STORAGE_PATH="~/.pygear/store.json"
    python scripts/dump_inventory.py --role admin

Options::

    --role admin|user    Session role (default: admin)
    --json               Output as machine-readable JSON
    --output FILE        Write JSON output to FILE instead of stdout
    --mark-read          Mark the listed notifications as read afterwards
    --verbose            Enable debug logging
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

# Allow running from the repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from pygear import AppNotification, Equipment, GearClient, GearConfig  # noqa: E402

# ── helpers ──────────────────────────────────────────────────


def _section(title: str) -> str:
    line = "=" * 60
    return f"\n{line}\n  {title}\n{line}"


def _format_item(item: Equipment, out: list[str]) -> None:
    out.append(f"  [{item.id}] {item.name} ({item.brand}, {item.category})")
    out.append(f"      status   : {item.status.value}")
    out.append(f"      purchased: {item.purchase_date or '-'}")
    for log in item.logs:
        state = f"resolved {log.resolved_at.isoformat()}" if log.resolved_at else "OPEN"
        out.append(f"      - {log.created_at.date()} {log.description!r} by {log.reported_by} [{state}]")


def _format_notification(notification: AppNotification, out: list[str]) -> None:
    marker = " " if notification.read else "*"
    out.append(f"  {marker} {notification.created_at.isoformat()} [{notification.type.value}] {notification.message}")


# ── main ─────────────────────────────────────────────────────


async def main() -> None:
    parser = argparse.ArgumentParser(
        description="Dump the pygear inventory and notifications for debugging / development.",
    )
    parser.add_argument("--role", choices=["admin", "user"], default="admin", help="Session role")
    parser.add_argument("--json", action="store_true", dest="json_mode", help="Output machine-readable JSON")
    parser.add_argument("--output", "-o", help="Write JSON output to FILE instead of stdout")
    parser.add_argument("--mark-read", action="store_true", help="Mark listed notifications as read")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING)

    config = GearConfig.from_env(read_delay=0.0, write_delay=0.0)

    async with GearClient(config) as client:
        user = client.login(args.role)
        snapshot = await client.refresh()
        if args.mark_read:
            await client.mark_all_read()

    result: dict[str, Any] = {
        "timestamp": datetime.now(UTC).isoformat(),
        "storage_path": str(config.storage_path) if config.storage_path else None,
        "user": user.model_dump(mode="json"),
        "equipment": [item.to_storage() for item in snapshot.equipment],
        "notifications": [n.to_storage() for n in snapshot.notifications],
    }

    if args.json_mode or args.output:
        payload = json.dumps(result, indent=2, ensure_ascii=False)
        if args.output:
            Path(args.output).write_text(payload, encoding="utf-8")
            print(f"JSON written to {args.output}", file=sys.stderr)
        else:
            print(payload)
        return

    out: list[str] = [_section("pygear dump_inventory")]
    out.append(f"  time      : {result['timestamp']}")
    out.append(f"  store     : {result['storage_path'] or '<memory>'}")
    out.append(f"  user      : {user.name} ({user.id}, {user.role.value})")

    out.append(_section(f"EQUIPMENT ({len(snapshot.equipment)})"))
    for item in snapshot.equipment:
        _format_item(item, out)

    out.append(_section(f"NOTIFICATIONS ({snapshot.unread_count} unread)"))
    for notification in snapshot.notifications:
        _format_notification(notification, out)

    print("\n".join(out))


if __name__ == "__main__":
    asyncio.run(main())
