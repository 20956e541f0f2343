# Turn-by-turn navigation engine: step tracking, off-route detection,
# rerouting and instruction formatting over a streamed position feed.

from .errors import (
    GeometryUnavailable, MalformedRoute, NavigationError, NoRouteFound,
    RerouteDebounced, RerouteInFlight, RerouteSkipped, RouteError,
)
from .models import (
    Coord, Destination, Instruction, Maneuver, NavigationSession,
    PositionSample, ProgressResult, Route, RouteStatus, Step, TripStats,
)
from .nav_config import NavConfig
from .navigator import NavigationListener, Navigator
from .osrm_provider import OSRMRouteProvider, StaticRouteProvider

__all__ = [
    "Coord", "Destination", "GeometryUnavailable", "Instruction", "Maneuver",
    "MalformedRoute", "NavConfig", "NavigationError", "NavigationListener",
    "NavigationSession", "Navigator", "NoRouteFound", "OSRMRouteProvider",
    "PositionSample", "ProgressResult", "RerouteDebounced", "RerouteInFlight",
    "RerouteSkipped", "Route", "RouteError", "RouteStatus", "StaticRouteProvider",
    "Step", "TripStats",
]
