# route_parser.py
# Turns an already-decoded provider response into a Route.
# Provider coordinates arrive as [lon, lat]; everything internal is (lat, lon).

import logging
from typing import Any, Dict, List, Optional

from .errors import MalformedRoute, NoRouteFound
from .models import Coord, Maneuver, Route, Step
from .nav_config import NavConfig
from . import polyline

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _require(obj: Dict[str, Any], key: str, where: str) -> Any:
    if not isinstance(obj, dict) or key not in obj or obj[key] is None:
        raise MalformedRoute(f"Missing '{key}' in {where}.")
    return obj[key]


def _number(value: Any, key: str, where: str) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError) as e:
        raise MalformedRoute(f"'{key}' in {where} is not a number: {value!r}") from e
    if number < 0:
        raise MalformedRoute(f"'{key}' in {where} is negative: {number}")
    return number


def _decode(encoded: Any, where: str) -> List[Coord]:
    if not isinstance(encoded, str):
        raise MalformedRoute(f"Geometry in {where} is not an encoded polyline.")
    try:
        return polyline.decode(encoded)
    except ValueError as e:
        raise MalformedRoute(f"Bad polyline in {where}: {e}") from e


def _lonlat_to_coord(location: Any, where: str) -> Coord:
    try:
        lon, lat = float(location[0]), float(location[1])
    except (TypeError, ValueError, IndexError, KeyError) as e:
        raise MalformedRoute(f"Bad maneuver location in {where}: {location!r}") from e
    return Coord(lat, lon)


def _parse_step(raw: Dict[str, Any], index: int, config: NavConfig) -> Step:
    where = f"step {index}"
    raw_maneuver = _require(raw, "maneuver", where)
    maneuver = Maneuver(
        type=str(_require(raw_maneuver, "type", where)),
        modifier=raw_maneuver.get("modifier") or None,
        location=_lonlat_to_coord(_require(raw_maneuver, "location", where), where),
    )
    geometry = raw.get("geometry")
    return Step(
        maneuver=maneuver,
        road_name=raw.get("name") or config.unnamed_road,
        distance_m=_number(raw.get("distance", 0.0), "distance", where),
        duration_s=_number(raw.get("duration", 0.0), "duration", where),
        geometry=tuple(_decode(geometry, where)) if geometry else (),
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def parse_route(raw: Dict[str, Any], config: Optional[NavConfig] = None) -> Route:
    """
    Build a Route from one provider route object.

    Expects {distance, duration, geometry, legs: [{steps: [...]}]}; only
    single-leg routes are supported.

    Raises:
        MalformedRoute: required fields missing, bad geometry, or several legs.
    """
    config = config or NavConfig()
    legs = _require(raw, "legs", "route")
    if not isinstance(legs, list) or len(legs) != 1:
        count = len(legs) if isinstance(legs, list) else "invalid"
        raise MalformedRoute(f"Expected exactly one leg, got {count}.")

    raw_steps = _require(legs[0], "steps", "leg 0")
    if not isinstance(raw_steps, list):
        raise MalformedRoute("'steps' in leg 0 is not a list.")

    steps = tuple(_parse_step(s, i, config) for i, s in enumerate(raw_steps))
    route = Route(
        distance_m=_number(_require(raw, "distance", "route"), "distance", "route"),
        duration_s=_number(_require(raw, "duration", "route"), "duration", "route"),
        geometry=tuple(_decode(_require(raw, "geometry", "route"), "route")),
        steps=steps,
    )
    logger.debug(
        f"Parsed route: {len(route.steps)} steps, {len(route.geometry)} points, "
        f"{route.distance_m:.0f} m"
    )
    return route


def route_from_response(data: Dict[str, Any], config: Optional[NavConfig] = None) -> Route:
    """
    Pick the first route out of a full provider response.

    Raises:
        NoRouteFound:   status is not "Ok" or the route list is empty.
        MalformedRoute: the chosen route cannot be parsed.
    """
    if not isinstance(data, dict):
        raise MalformedRoute("Provider response is not an object.")
    code = data.get("code")
    if code != "Ok":
        raise NoRouteFound(f"Provider error: {data.get('message') or code or 'unknown'}")
    routes = data.get("routes")
    if not routes:
        raise NoRouteFound("Provider returned no routes.")
    return parse_route(routes[0], config)
