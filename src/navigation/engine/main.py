# main.py
# Entry point: simulates a position feed driving the Navigator.
# In production, replace the scripted positions with the device's fixes.
#
# Usage:
#   python -m navigation.engine.main                 # live OSRM
#   python -m navigation.engine.main --offline       # canned route, no network
#   python -m navigation.engine.main --dest-lat 40.2338 --dest-lon -111.6585 --dest-name "Slate Canyon"

import argparse
import asyncio
import logging
from typing import List

from .models import Coord, Destination, Instruction, PositionSample, RouteStatus
from .nav_config import NavConfig
from .navigator import NavigationListener, Navigator
from .osrm_provider import OSRMRouteProvider, StaticRouteProvider
from . import polyline

# ------------------------------------------------------------------
# Simulation coordinates (north Provo → Slate Canyon)
# ------------------------------------------------------------------
DESTINATION = Destination(
    coord=Coord(40.2338, -111.6585),
    name="The Quarry at Slate Canyon",
    description="A hidden swimming spot locals love",
    arrival_radius_m=75,
)

test_locations: List[Coord] = [
    Coord(40.2480, -111.6585),   # Start
    Coord(40.2455, -111.6585),   # heading south
    Coord(40.2430, -111.6585),
    Coord(40.2420, -111.6560),   # drifts off the road
    Coord(40.2415, -111.6550),   # still off
    Coord(40.2400, -111.6585),   # back on
    Coord(40.2370, -111.6585),
    Coord(40.2345, -111.6585),   # arrival
]


def demo_response(end: Coord = DESTINATION.coord) -> dict:
    """A straight single-leg OSRM response along the simulated road, ending at `end`."""
    start, bend = Coord(40.2480, -111.6585), Coord(40.2400, -111.6585)

    def step(kind, modifier, at, name, nxt):
        return {
            "maneuver": {"type": kind, "modifier": modifier, "location": [at.lon, at.lat]},
            "name": name,
            "distance": 0.0 if nxt is None else 900.0,
            "duration": 0.0 if nxt is None else 70.0,
            "geometry": polyline.encode([at] if nxt is None else [at, nxt]),
        }

    return {
        "code": "Ok",
        "routes": [{
            "distance": 1580.0,
            "duration": 125.0,
            "geometry": polyline.encode([start, bend, end]),
            "legs": [{"steps": [
                step("depart", None, start, "North Canyon Road", bend),
                step("continue", "straight", bend, "Slate Canyon Drive", end),
                step("arrive", None, end, "", None),
            ]}],
        }],
    }


class ConsoleListener(NavigationListener):
    def show_instruction(self, instruction: Instruction) -> None:
        print(f"  {instruction.icon}  {instruction.road_name}  {instruction.distance_text}")

    def show_recalculating(self, active: bool) -> None:
        print("  ⟳  Recalculating..." if active else "  ✓  Route updated.")

    def arrived(self, destination: Destination) -> None:
        print(f"  ⚑  Arrived: {destination.name}. {destination.description}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Replay a position feed through the navigator.")
    parser.add_argument("--dest-lat", type=float, default=DESTINATION.coord.lat, help="destination latitude")
    parser.add_argument("--dest-lon", type=float, default=DESTINATION.coord.lon, help="destination longitude")
    parser.add_argument("--dest-name", default=None, help="destination label shown on arrival")
    parser.add_argument("--offline", action="store_true", help="use a canned route instead of OSRM")
    parser.add_argument("--osrm-url", default=NavConfig.osrm_base_url, help="OSRM base URL")
    parser.add_argument("--log-dir", default=None, help="write route snapshots and events here")
    parser.add_argument("--interval", type=float, default=0.05, help="seconds between fixes")
    parser.add_argument("--verbose", "-v", action="store_true", help="debug logging")
    return parser


def destination_from_args(args: argparse.Namespace) -> Destination:
    """The simulated destination unless the command line moves it."""
    coord = Coord(args.dest_lat, args.dest_lon)
    if not (-90.0 <= coord.lat <= 90.0 and -180.0 <= coord.lon <= 180.0):
        raise ValueError(f"Destination out of range: {coord}")
    if coord == DESTINATION.coord and args.dest_name is None:
        return DESTINATION
    return Destination(
        coord=coord,
        name=args.dest_name or f"{coord.lat:.5f}, {coord.lon:.5f}",
        arrival_radius_m=DESTINATION.arrival_radius_m,
    )


async def run(args: argparse.Namespace) -> None:
    config = NavConfig(osrm_base_url=args.osrm_url, log_dir=args.log_dir)
    destination = destination_from_args(args)
    if args.offline:
        provider = StaticRouteProvider([demo_response(destination.coord)], config)
    else:
        provider = OSRMRouteProvider(config)

    nav = Navigator(provider, config, listener=ConsoleListener())
    await nav.start_trip(PositionSample(test_locations[0]), destination)

    print("\n--- Position Loop Active ---")
    for position in test_locations:
        result = nav.update(PositionSample(position))
        print(f"  GPS {position} → [{result.status.name}] {result.message}")

        if result.status == RouteStatus.ARRIVED:
            break
        await asyncio.sleep(args.interval)

    await nav.wait_for_reroute()
    print("\n--- Session complete ---")
    if config.log_dir:
        print(f"    Log files written to: {config.log_dir}/")


def main() -> None:
    parser = build_parser()
    args = parser.parse_args()
    try:
        destination_from_args(args)
    except ValueError as e:
        parser.error(str(e))

    # ------------------------------------------------------------------
    # Logging setup, configured once here; all modules inherit
    # ------------------------------------------------------------------
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )
    asyncio.run(run(args))


if __name__ == "__main__":
    main()
