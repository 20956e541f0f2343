# off_route.py
# Deviation check against the full route geometry, with a hysteresis window.
# A reading beyond the threshold opens the window; a reroute is only asked for
# once the deviation has lasted off_route_duration_s. Any single reading back
# within the threshold closes the window again.

import logging
from dataclasses import replace
from typing import List, Optional, Tuple

from .errors import GeometryUnavailable
from .geo_utils import closest_point_on_polyline
from .models import NavigationSession, RouteStatus
from .nav_config import NavConfig
from .reroute import debounce_reason

logger = logging.getLogger(__name__)


class OffRouteMonitor:
    """
    Args:
        config: NavConfig with the threshold and duration.
    """

    def __init__(self, config: Optional[NavConfig] = None) -> None:
        self.config = config or NavConfig()

    def route_distance(self, session: NavigationSession) -> float:
        """
        Distance in metres from the current position to the route polyline.

        Raises:
            GeometryUnavailable: no route, or fewer than two geometry points.
        """
        if session.route is None:
            raise GeometryUnavailable("No route loaded.")
        hit = closest_point_on_polyline(session.current_position, session.route.geometry)
        if not hit.found:
            raise GeometryUnavailable(
                f"Route geometry has {len(session.route.geometry)} point(s)."
            )
        return hit.distance_m

    def check(
        self, session: NavigationSession, now: float
    ) -> Tuple[NavigationSession, List[RouteStatus]]:
        """
        Run one deviation check.

        Args:
            session: Session holding the latest position.
            now:     Current time in seconds (monotonic).

        Returns:
            (new_session, effects). effects may hold OFF_ROUTE, BACK_ON_ROUTE,
            REROUTE_REQUESTED, or REROUTE_DEBOUNCED when the window has elapsed
            but the last attempt is too recent.
        """
        if session.route is None:
            return session, []

        try:
            dist = self.route_distance(session)
        except GeometryUnavailable as e:
            logger.debug(f"Off-route check skipped: {e}")
            return replace(session, distance_to_route=None), []

        session = replace(session, distance_to_route=dist)
        effects: List[RouteStatus] = []

        if dist > self.config.off_route_threshold_m:
            effects.append(RouteStatus.OFF_ROUTE)
            if session.off_route_since is None:
                logger.info(f"Off-route suspected ({dist:.0f} m from route), starting timer.")
                return replace(session, off_route_since=now), effects

            elapsed = now - session.off_route_since
            if elapsed >= self.config.off_route_duration_s and not session.is_rerouting:
                reason = debounce_reason(session, now, self.config.reroute_debounce_s)
                if reason is not None:
                    logger.debug(f"Off-route for {elapsed:.1f} s, reroute held back: {reason}")
                    effects.append(RouteStatus.REROUTE_DEBOUNCED)
                else:
                    logger.info(f"Off-route for {elapsed:.1f} s ({dist:.0f} m), requesting reroute.")
                    effects.append(RouteStatus.REROUTE_REQUESTED)
            return session, effects

        if session.off_route_since is not None:
            logger.info(f"Back on route ({dist:.0f} m).")
            effects.append(RouteStatus.BACK_ON_ROUTE)
        return replace(session, off_route_since=None), effects
