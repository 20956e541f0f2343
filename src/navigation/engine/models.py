# models.py
# Shared data structures and enums used across all modules.

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple


# ---------------------------------------------------------------------------
# Coordinate
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Coord:
    """Immutable geographic coordinate (WGS84, decimal degrees)."""
    lat: float
    lon: float

    def to_pair(self) -> Tuple[float, float]:
        return (self.lat, self.lon)


# ---------------------------------------------------------------------------
# Route
# ---------------------------------------------------------------------------

# Maneuver types the engine treats specially. Providers may send others.
DEPART = "depart"
ARRIVE = "arrive"
TURN = "turn"
CONTINUE = "continue"
ROUNDABOUT = "roundabout"
ROTARY = "rotary"


@dataclass(frozen=True)
class Maneuver:
    type: str
    location: Coord
    modifier: Optional[str] = None   # "left" | "slight right" | "straight" | ...


@dataclass(frozen=True)
class Step:
    """One leg of the route, ending at its maneuver point."""
    maneuver: Maneuver
    road_name: str
    distance_m: float = 0.0
    duration_s: float = 0.0
    geometry: Tuple[Coord, ...] = ()

    def to_dict(self) -> dict:
        return {
            "maneuver": {
                "type": self.maneuver.type,
                "modifier": self.maneuver.modifier,
                "location": {"lat": self.maneuver.location.lat, "lon": self.maneuver.location.lon},
            },
            "road_name": self.road_name,
            "distance_m": self.distance_m,
            "duration_s": self.duration_s,
            "geometry_points": len(self.geometry),
        }


@dataclass(frozen=True)
class Route:
    """A fetched route. Replaced as a whole on reroute, never edited."""
    distance_m: float
    duration_s: float
    geometry: Tuple[Coord, ...]
    steps: Tuple[Step, ...]

    def to_dict(self) -> dict:
        return {
            "distance_m": self.distance_m,
            "duration_s": self.duration_s,
            "geometry_points": len(self.geometry),
            "steps": [s.to_dict() for s in self.steps],
        }


@dataclass(frozen=True)
class Destination:
    coord: Coord
    name: str = ""
    description: str = ""
    arrival_radius_m: Optional[float] = None   # falls back to NavConfig.arrival_radius_m


# ---------------------------------------------------------------------------
# Position input
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class PositionSample:
    """One fix from the position source. heading=None means unknown, not north."""
    coord: Coord
    heading: Optional[float] = None
    accuracy_m: Optional[float] = None
    timestamp: Optional[float] = None


# ---------------------------------------------------------------------------
# Live session
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class NavigationSession:
    """State of the one live trip. Transitions return a new instance."""
    destination: Destination
    current_position: Coord
    current_heading: Optional[float] = None
    route: Optional[Route] = None
    current_step_index: int = 0
    distance_to_route: Optional[float] = None
    off_route_since: Optional[float] = None
    is_rerouting: bool = False
    last_reroute_at: Optional[float] = None
    last_failed_reroute_at: Optional[float] = None
    trip_active: bool = True
    arrived: bool = False
    trip_id: int = 0

    @property
    def is_off_route(self) -> bool:
        return self.off_route_since is not None

    @property
    def steps(self) -> Tuple[Step, ...]:
        return self.route.steps if self.route is not None else ()

    @property
    def current_step(self) -> Optional[Step]:
        steps = self.steps
        if 0 <= self.current_step_index < len(steps):
            return steps[self.current_step_index]
        return None


# ---------------------------------------------------------------------------
# Outputs
# ---------------------------------------------------------------------------

class RouteStatus(Enum):
    INACTIVE          = "inactive"
    PROGRESSING       = "progressing"
    STEP_ADVANCED     = "step_advanced"
    OFF_ROUTE         = "off_route"
    BACK_ON_ROUTE     = "back_on_route"
    REROUTE_REQUESTED = "reroute_requested"
    REROUTE_DEBOUNCED = "reroute_debounced"
    ARRIVED           = "arrived"


@dataclass(frozen=True)
class Instruction:
    """The single instruction shown to the user."""
    icon: str
    road_name: str
    distance_text: str
    text: str = ""


@dataclass(frozen=True)
class TripStats:
    time_remaining_text: str
    distance_remaining_text: str


@dataclass
class ProgressResult:
    """Returned by Navigator.update() every position update."""
    status: RouteStatus
    message: str
    effects: List[RouteStatus] = field(default_factory=list)
    instruction: Optional[Instruction] = None
    stats: Optional[TripStats] = None
    step_index: int = 0
    distance_to_route: Optional[float] = None
    recalculating: bool = False
