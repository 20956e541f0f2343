# errors.py
# Exception types raised by the navigation engine.


class NavigationError(Exception):
    """Base class for every engine error."""


# ---------------------------------------------------------------------------
# Route construction
# ---------------------------------------------------------------------------

class RouteError(NavigationError):
    """A route could not be obtained or built."""


class MalformedRoute(RouteError):
    """Provider payload is missing required fields or has several legs."""


class NoRouteFound(RouteError):
    """Provider reported failure, returned no routes, or could not be reached."""


# ---------------------------------------------------------------------------
# Rerouting (normal no-op outcomes, never shown to the user)
# ---------------------------------------------------------------------------

class RerouteSkipped(NavigationError):
    """A reroute request was refused by the coordinator."""


class RerouteDebounced(RerouteSkipped):
    """The last reroute happened too recently."""


class RerouteInFlight(RerouteSkipped):
    """Another reroute is still outstanding for this session."""


# ---------------------------------------------------------------------------
# Geometry
# ---------------------------------------------------------------------------

class GeometryUnavailable(NavigationError):
    """Route geometry has fewer than two points; no deviation can be measured."""
