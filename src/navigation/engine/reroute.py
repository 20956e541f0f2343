# reroute.py
# Single-flight, debounced rerouting.
# The coordinator is the only place a new route replaces the live one mid-trip.

import logging
import time
from dataclasses import replace
from typing import Callable, Optional, Protocol

from .errors import RerouteDebounced, RerouteInFlight, RerouteSkipped, RouteError
from .models import Coord, NavigationSession, Route
from .nav_config import NavConfig

logger = logging.getLogger(__name__)


class RouteFetcher(Protocol):
    """Anything that can fetch a route between two coordinates."""

    async def fetch_route(self, origin: Coord, destination: Coord) -> Route:
        ...


SessionGetter = Callable[[], Optional[NavigationSession]]
SessionSetter = Callable[[NavigationSession], None]


def debounce_reason(session: NavigationSession, now: float, window: float) -> Optional[str]:
    """Why a reroute at `now` falls inside the debounce window, or None if it does not."""
    for label, stamp in (
        ("last reroute", session.last_reroute_at),
        ("last failed attempt", session.last_failed_reroute_at),
    ):
        if stamp is not None and now - stamp < window:
            return f"{now - stamp:.1f} s since {label}, waiting for {window:.0f} s."
    return None


class RerouteCoordinator:
    """
    Rate-limits reroute requests and applies their results.

    Args:
        fetcher: Route provider used for every reroute.
        config:  NavConfig with the debounce window.
        clock:   Returns the current time in seconds; time.monotonic by default.
    """

    def __init__(
        self,
        fetcher: RouteFetcher,
        config: Optional[NavConfig] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.fetcher = fetcher
        self.config = config or NavConfig()
        self._clock = clock

    # ------------------------------------------------------------------
    # Admission
    # ------------------------------------------------------------------

    def ensure_allowed(self, session: NavigationSession, now: float) -> None:
        """
        Raises:
            RerouteInFlight:  a reroute is already outstanding.
            RerouteDebounced: the last success, or the last failed attempt,
                              is younger than the debounce window.
            RerouteSkipped:   the trip is not active.
        """
        if not session.trip_active:
            raise RerouteSkipped("Trip is not active.")
        if session.is_rerouting:
            raise RerouteInFlight("A reroute is already in flight.")

        reason = debounce_reason(session, now, self.config.reroute_debounce_s)
        if reason is not None:
            raise RerouteDebounced(reason)

    # ------------------------------------------------------------------
    # Session transitions
    # ------------------------------------------------------------------

    def apply_success(self, session: NavigationSession, route: Route, now: float) -> NavigationSession:
        return replace(
            session,
            route=route,
            current_step_index=0,
            last_reroute_at=now,
            off_route_since=None,
            distance_to_route=None,
            is_rerouting=False,
        )

    def apply_failure(self, session: NavigationSession, started_at: float) -> NavigationSession:
        # route, step index and last_reroute_at stay as they were
        return replace(session, last_failed_reroute_at=started_at, is_rerouting=False)

    # ------------------------------------------------------------------
    # Request
    # ------------------------------------------------------------------

    async def request_reroute(self, get_session: SessionGetter, set_session: SessionSetter) -> bool:
        """
        Fetch a fresh route from the current position if allowed.

        The session is read and written through get_session/set_session so
        position updates processed while the fetch is pending are kept.
        A result arriving after the trip ended, or after another trip
        started, is discarded.

        Returns:
            True when a new route was installed.
        """
        session = get_session()
        if session is None:
            return False

        started_at = self._clock()
        try:
            self.ensure_allowed(session, started_at)
        except RerouteSkipped as e:
            logger.info(f"Reroute skipped: {e}")
            return False

        set_session(replace(session, is_rerouting=True))
        origin = session.current_position
        logger.info(f"Rerouting from {origin} to {session.destination.coord}")

        trip_id = session.trip_id

        def same_trip(current: Optional[NavigationSession]) -> bool:
            return current is not None and current.trip_id == trip_id

        installed = False
        try:
            route = await self.fetcher.fetch_route(origin, session.destination.coord)
            current = get_session()
            if not same_trip(current) or not current.trip_active:
                logger.info("Trip ended while rerouting; discarding new route.")
            else:
                set_session(self.apply_success(current, route, self._clock()))
                installed = True
                logger.info(f"Reroute complete: {len(route.steps)} steps, {route.distance_m:.0f} m")
        except RouteError as e:
            logger.warning(f"Reroute failed, keeping current route: {e}")
            current = get_session()
            if same_trip(current):
                set_session(self.apply_failure(current, started_at))
        finally:
            # a later trip owns its own is_rerouting flag
            current = get_session()
            if same_trip(current) and current.is_rerouting:
                set_session(replace(current, is_rerouting=False))
        return installed
