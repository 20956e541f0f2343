# engine.py
# The position-update transition. Synchronous and free of I/O: it takes the
# current session and a sample and returns the next session plus what happened.
# Fetching a route for a requested reroute is left to the caller.

import logging
from dataclasses import replace
from typing import List, Optional, Tuple

from .models import NavigationSession, PositionSample, RouteStatus
from .nav_config import NavConfig
from .off_route import OffRouteMonitor
from .step_tracker import StepTracker

logger = logging.getLogger(__name__)


def on_position_update(
    session: NavigationSession,
    sample: PositionSample,
    now: float,
    config: Optional[NavConfig] = None,
) -> Tuple[NavigationSession, List[RouteStatus]]:
    """
    Feed one position sample through the engine.

    Order: arrival first, then step tracking, then the off-route monitor.

    Args:
        session: Current session.
        sample:  New position sample.
        now:     Current time in seconds (monotonic).
        config:  NavConfig; defaults to NavConfig().

    Returns:
        (new_session, effects)
    """
    config = config or NavConfig()
    session = replace(
        session,
        current_position=sample.coord,
        current_heading=sample.heading,
    )

    if not session.trip_active:
        return session, [RouteStatus.INACTIVE]

    tracker = StepTracker(config)

    # 1. Arrival wins over everything else
    if tracker.has_arrived(session):
        logger.info(f"Arrived at {session.destination.name or session.destination.coord}")
        return replace(session, arrived=True, trip_active=False), [RouteStatus.ARRIVED]

    effects: List[RouteStatus] = []

    # 2. Step tracking
    new_index = tracker.advance(session)
    if new_index != session.current_step_index:
        logger.info(f"Now on step {new_index}")
        session = replace(session, current_step_index=new_index)
        effects.append(RouteStatus.STEP_ADVANCED)

    # 3. Off-route monitor
    session, off_route_effects = OffRouteMonitor(config).check(session, now)
    effects.extend(off_route_effects)

    if not effects:
        effects.append(RouteStatus.PROGRESSING)
    return session, effects
