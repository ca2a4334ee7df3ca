#!/usr/bin/env python3
"""Interactive map scan tool.

Opens a map store (simulated, or REST when ``ROBOVAC_BASE_URL`` is set),
runs a scan and prints the derived aggregates and zones. Optionally
deletes a zone and scans again to show the delete surviving the refresh.

Configuration comes from ``ROBOVAC_*`` environment variables; see
:class:`pyrobovac.config.RobovacConfig`.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from pyrobovac import MapStore, RobovacClient, RobovacConfig, RobovacError  # noqa: E402


def _print_map(store: MapStore) -> None:
    view = store.view
    print(f"Mapped area : {view.mapped_area_m2:g} m²")
    print(f"Obstacles   : {view.obstacle_count}")
    print(f"Zones       : {view.zone_count}")
    print(f"Updated     : {view.last_updated.isoformat() if view.last_updated else 'never'}")
    if store.is_stale():
        print("Data may be outdated.")
    for zone in store.state.zones:
        rect = zone.rect
        marker = " (pending)" if zone.pending else ""
        print(f"  - {zone.id:<14} {zone.name:<16} {rect.x:g},{rect.y:g} {rect.width:g}x{rect.height:g}{marker}")
    pose = store.state.pose
    print(f"Robot at    : ({pose.x:.1f}, {pose.y:.1f})")


async def _run(args: argparse.Namespace) -> int:
    overrides: dict[str, object] = {}
    if args.mock:
        overrides["mock_enabled"] = True
    if args.delay is not None:
        overrides["mock_delay"] = args.delay
    config = RobovacConfig.from_env(**overrides)

    async with RobovacClient(config) as client:
        store = client.open_map()
        try:
            result = await store.scan()
            print(result.message)
            if not result.ok:
                return 1
            _print_map(store)

            if args.delete:
                if not store.delete_zone(args.delete):
                    print(f"Zone {args.delete} not found")
                    return 1
                result = await store.scan()
                print(result.message)
                _print_map(store)

            if args.export:
                print(store.export_map().summary)
        finally:
            store.close()
    return 0


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("--mock", action="store_true", help="Force the simulated snapshot source")
    parser.add_argument("--delay", type=float, default=None, help="Simulated fetch latency in seconds")
    parser.add_argument("--delete", metavar="ZONE_ID", help="Delete a zone and re-scan")
    parser.add_argument("--export", action="store_true", help="Print the export summary")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)
    try:
        return asyncio.run(_run(args))
    except RobovacError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
