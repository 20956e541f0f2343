# geo_utils.py
# Pure mathematical / geographic helper functions.
# No side effects, no imports from other project modules except models.

import math
from dataclasses import dataclass
from typing import Optional, Sequence

from .models import Coord


EARTH_RADIUS_M = 6_371_000.0


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Great-circle distance between two points in metres.

    Args:
        lat1, lon1: Origin in decimal degrees.
        lat2, lon2: Destination in decimal degrees.

    Returns:
        Distance in metres.
    """
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1))
        * math.cos(math.radians(lat2))
        * math.sin(d_lon / 2) ** 2
    )
    # rounding can push a just outside [0, 1] for near-antipodal points
    a = min(1.0, max(0.0, a))
    return EARTH_RADIUS_M * 2 * math.asin(math.sqrt(a))


def calculate_bearing(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Forward azimuth (bearing) from point 1 to point 2 in degrees [0, 360).

    Args:
        lat1, lon1: Origin in decimal degrees.
        lat2, lon2: Destination in decimal degrees.

    Returns:
        Bearing in degrees.
    """
    rlat1, rlon1 = math.radians(lat1), math.radians(lon1)
    rlat2, rlon2 = math.radians(lat2), math.radians(lon2)
    d_lon = rlon2 - rlon1
    y = math.sin(d_lon) * math.cos(rlat2)
    x = math.cos(rlat1) * math.sin(rlat2) - math.sin(rlat1) * math.cos(rlat2) * math.cos(d_lon)
    bearing = (math.degrees(math.atan2(y, x)) + 360) % 360
    # -0.0 % 360 and tiny negatives can land on 360.0
    return 0.0 if bearing >= 360.0 else bearing


def distance_m(a: Coord, b: Coord) -> float:
    """Haversine distance between two coordinates in metres."""
    if a == b:
        return 0.0
    return haversine_distance(a.lat, a.lon, b.lat, b.lon)


def bearing_deg(a: Coord, b: Coord) -> float:
    """Initial bearing from a to b in degrees [0, 360)."""
    return calculate_bearing(a.lat, a.lon, b.lat, b.lon)


# ---------------------------------------------------------------------------
# Projection onto route geometry
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Projection:
    """Nearest point on a segment or polyline, with its distance in metres."""
    point: Optional[Coord]
    distance_m: float
    segment_index: Optional[int] = None

    @property
    def found(self) -> bool:
        return self.point is not None


NO_PROJECTION = Projection(point=None, distance_m=math.inf, segment_index=None)


def closest_point_on_segment(p: Coord, start: Coord, end: Coord) -> Projection:
    """
    Point of the segment start→end nearest to p.

    The projection parameter is computed in plain degree space and clamped to
    [0, 1], so the result always lies on the segment itself. A zero-length
    segment collapses to its start point.
    """
    c = end.lat - start.lat
    d = end.lon - start.lon
    len_sq = c * c + d * d

    if len_sq == 0:
        return Projection(point=start, distance_m=distance_m(p, start))

    t = ((p.lat - start.lat) * c + (p.lon - start.lon) * d) / len_sq
    t = min(1.0, max(0.0, t))
    if t == 0.0:
        closest = start
    elif t == 1.0:
        closest = end
    else:
        closest = Coord(start.lat + t * c, start.lon + t * d)
    return Projection(point=closest, distance_m=distance_m(p, closest))


def closest_point_on_polyline(p: Coord, coords: Sequence[Coord]) -> Projection:
    """
    Scan every consecutive segment of coords and keep the nearest hit.

    Returns NO_PROJECTION (infinite distance, no segment) for fewer than two
    points; callers treat that as "no off-route signal available".
    """
    best = NO_PROJECTION
    for i in range(len(coords) - 1):
        hit = closest_point_on_segment(p, coords[i], coords[i + 1])
        if hit.distance_m < best.distance_m:
            best = Projection(point=hit.point, distance_m=hit.distance_m, segment_index=i)
    return best
