import math
from typing import List, Optional

import pytest

from navigation.engine.geo_utils import EARTH_RADIUS_M
from navigation.engine.models import (
    Coord, Destination, Maneuver, NavigationSession, Route, Step,
)
from navigation.engine import polyline


ORIGIN = Coord(40.2500, -111.6585)


def offset(c: Coord, north_m: float = 0.0, east_m: float = 0.0) -> Coord:
    """Move c by metres along the meridian / parallel (spherical earth)."""
    d_lat = math.degrees(north_m / EARTH_RADIUS_M)
    d_lon = math.degrees(east_m / (EARTH_RADIUS_M * math.cos(math.radians(c.lat))))
    return Coord(c.lat + d_lat, c.lon + d_lon)


def make_step(kind: str, at: Coord, name: str = "Main Street",
              modifier: Optional[str] = None, distance: float = 0.0,
              duration: float = 0.0, geometry=()) -> Step:
    return Step(
        maneuver=Maneuver(type=kind, location=at, modifier=modifier),
        road_name=name,
        distance_m=distance,
        duration_s=duration,
        geometry=tuple(geometry),
    )


def straight_route() -> Route:
    """
    Due-south route from ORIGIN: depart, turn left after 500 m, arrive
    after another 500 m.
    """
    turn = offset(ORIGIN, north_m=-500)
    end = offset(turn, east_m=500)
    steps = (
        make_step("depart", ORIGIN, "North Road", distance=500, duration=40,
                  geometry=[ORIGIN, turn]),
        make_step("turn", turn, "East Avenue", modifier="left", distance=500, duration=40,
                  geometry=[turn, end]),
        make_step("arrive", end, "East Avenue"),
    )
    return Route(distance_m=1000, duration_s=80, geometry=(ORIGIN, turn, end), steps=steps)


def osrm_step(kind, at: Coord, name="", modifier=None, distance=0.0, duration=0.0,
              geometry: Optional[List[Coord]] = None) -> dict:
    raw = {
        "maneuver": {"type": kind, "location": [at.lon, at.lat]},
        "name": name,
        "distance": distance,
        "duration": duration,
    }
    if modifier:
        raw["maneuver"]["modifier"] = modifier
    if geometry is not None:
        raw["geometry"] = polyline.encode(geometry)
    return raw


def osrm_response(route: Route) -> dict:
    """OSRM-shaped response carrying the same steps as route."""
    return {
        "code": "Ok",
        "routes": [{
            "distance": route.distance_m,
            "duration": route.duration_s,
            "geometry": polyline.encode(route.geometry),
            "legs": [{"steps": [
                osrm_step(
                    s.maneuver.type, s.maneuver.location, s.road_name,
                    s.maneuver.modifier, s.distance_m, s.duration_s,
                    list(s.geometry) or None,
                )
                for s in route.steps
            ]}],
        }],
    }


class FakeClock:
    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def route() -> Route:
    return straight_route()


@pytest.fixture
def destination(route) -> Destination:
    return Destination(coord=route.steps[-1].maneuver.location, name="The Quarry",
                       description="Swimming spot", arrival_radius_m=75)


@pytest.fixture
def session(route, destination) -> NavigationSession:
    return NavigationSession(destination=destination, current_position=ORIGIN, route=route)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()
