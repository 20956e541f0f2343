# step_tracker.py
# Works out which route step the user is on, and whether they have arrived.
# Call advance() on every position update; it never moves backwards.

import logging
from typing import Optional, Sequence

from .geo_utils import distance_m
from .models import Coord, Destination, NavigationSession, Step
from .nav_config import NavConfig

logger = logging.getLogger(__name__)


def advance_step_index(
    steps: Sequence[Step],
    position: Coord,
    index: int,
    radius_m: float,
) -> int:
    """
    Skip every step whose maneuver point is within radius_m of position.

    Stops at the last step, so the arrive step is never passed. A depart step
    whose maneuver sits at the trip start is skipped on the first update.

    Args:
        steps:    Route steps in traversal order.
        position: Current position.
        index:    Current step index.
        radius_m: Step completion radius.

    Returns:
        The new (possibly unchanged) index; 0 for an empty step list.
    """
    if not steps:
        return 0
    index = min(max(index, 0), len(steps) - 1)
    while index < len(steps) - 1:
        dist = distance_m(position, steps[index].maneuver.location)
        if dist >= radius_m:
            break
        index += 1
        logger.debug(f"Step {index - 1} complete ({dist:.1f} m from maneuver)")
    return index


def has_arrived(
    position: Coord,
    destination: Destination,
    config: Optional[NavConfig] = None,
) -> bool:
    """True when position is within the destination's arrival radius."""
    config = config or NavConfig()
    radius = destination.arrival_radius_m
    if radius is None:
        radius = config.arrival_radius_m
    return distance_m(position, destination.coord) <= radius


class StepTracker:
    """
    Step tracking bound to a NavConfig.

    Usage:
        tracker = StepTracker(config)
        index = tracker.advance(session)
    """

    def __init__(self, config: Optional[NavConfig] = None) -> None:
        self.config = config or NavConfig()

    def advance(self, session: NavigationSession) -> int:
        return advance_step_index(
            session.steps,
            session.current_position,
            session.current_step_index,
            self.config.step_completion_radius_m,
        )

    def has_arrived(self, session: NavigationSession) -> bool:
        return has_arrived(session.current_position, session.destination, self.config)
