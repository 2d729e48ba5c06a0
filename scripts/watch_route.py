#!/usr/bin/env python3
"""Watch a route direction on a headless map.

Drives the full selection flow against the live NexTrip service with an
in-memory renderer and prints what the map would show after each vehicle
refresh.

Usage
-----
::

    python scripts/watch_route.py 5                 # list directions of route 5
    python scripts/watch_route.py 5 --direction 0   # watch direction 0

Options::

    --direction ID      Direction to activate (default: list directions and exit)
    --geometry FILE     GeoJSON route geometry dataset (or NEXTRIP_GEOMETRY_PATH)
    --cycles N          Stop after N vehicle refreshes (default: 3)
    --verbose, -v       Enable debug logging
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

# Allow running from the repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from pynextrip import (  # noqa: E402
    InMemoryMapRenderer,
    NexTripClient,
    NexTripConfig,
    NexTripConfigError,
    SelectionStateMachine,
)
from pynextrip.map import MarkerKind  # noqa: E402


def _print_map(renderer: InMemoryMapRenderer) -> None:
    print(f"  map: {renderer.summary()}")
    for spec in renderer.markers.values():
        if spec.kind == MarkerKind.VEHICLE:
            print(f"    bus {spec.key:<12} lat={spec.lat:.5f} lon={spec.lon:.5f}")


async def main() -> int:
    parser = argparse.ArgumentParser(description="Watch live vehicles of a NexTrip route direction.")
    parser.add_argument("route", help="Route id (e.g. 5, 901)")
    parser.add_argument("--direction", help="Direction id to activate")
    parser.add_argument("--geometry", help="GeoJSON route geometry dataset")
    parser.add_argument("--cycles", type=int, default=3, help="Vehicle refreshes to show before exiting")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING)

    overrides = {"geometry_path": args.geometry} if args.geometry else {}
    try:
        config = NexTripConfig.from_env(**overrides)
    except NexTripConfigError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 2

    renderer = InMemoryMapRenderer()
    async with NexTripClient(config) as client:
        async with SelectionStateMachine(client, renderer, config=config) as machine:
            routes = await machine.load_routes()
            labels = {route.route_id: route.route_label for route in routes}
            print(f"Route {args.route}: {labels.get(args.route, '(not in route list)')}")

            task = machine.select_route(args.route)
            if task is not None:
                await task
            if not machine.directions:
                print("  no directions available")
                return 1

            if args.direction is None:
                for direction in machine.directions:
                    print(f"  direction {direction.direction_id}: {direction.direction_name}")
                return 0

            chosen = next((d for d in machine.directions if d.direction_id == args.direction), None)
            if chosen is None:
                print(f"  unknown direction {args.direction}", file=sys.stderr)
                return 1

            stops_task = machine.select_direction(chosen)
            if stops_task is not None:
                stops = await stops_task
                print(f"  {chosen.direction_name}: {stops} stops rendered")

            for cycle in range(1, args.cycles + 1):
                print(f"-- refresh {cycle}")
                _print_map(renderer)
                if cycle < args.cycles:
                    await asyncio.sleep(config.vehicle_poll_interval)
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
