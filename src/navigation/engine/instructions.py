# instructions.py
# Builds what the UI shows: the single visible instruction, trip stats and
# the partial route line for the current step.

import math
from typing import List, Optional

from .geo_utils import distance_m
from .models import (
    ARRIVE, DEPART, ROTARY, ROUNDABOUT,
    Coord, Instruction, NavigationSession, Step, TripStats,
)
from .nav_config import NavConfig


METERS_PER_MILE = 1609.34
FEET_PER_METER = 3.28084

ICON_ARRIVE = "⚑"
ICON_STRAIGHT = "↑"
ICON_ROUNDABOUT = "⟳"
ICON_LEFT = "↰"
ICON_SLIGHT_LEFT = "↖"
ICON_RIGHT = "↱"
ICON_SLIGHT_RIGHT = "↗"

_MODIFIER_ICONS = {
    "left": ICON_LEFT,
    "sharp left": ICON_LEFT,
    "slight left": ICON_SLIGHT_LEFT,
    "right": ICON_RIGHT,
    "sharp right": ICON_RIGHT,
    "slight right": ICON_SLIGHT_RIGHT,
}

_MODIFIER_TEXT = {
    "left": "Turn left onto",
    "sharp left": "Sharp left onto",
    "slight left": "Bear left onto",
    "right": "Turn right onto",
    "sharp right": "Sharp right onto",
    "slight right": "Bear right onto",
}

CALCULATING = Instruction(
    icon=ICON_STRAIGHT,
    road_name="Calculating route...",
    distance_text="",
    text="Calculating route...",
)


def _round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


# ---------------------------------------------------------------------------
# Formatting
# ---------------------------------------------------------------------------

def format_distance(meters: float) -> str:
    """
    Imperial distance text: one-decimal miles from 0.1 mi up, otherwise
    feet rounded to the nearest 50.
    """
    miles = meters / METERS_PER_MILE
    if miles >= 0.1:
        return f"{miles:.1f} mi"
    feet = meters * FEET_PER_METER
    return f"{_round_half_up(feet / 50) * 50} ft"


def format_duration(seconds: float) -> str:
    """Whole minutes below an hour, "Hh Mm" from 60 minutes up."""
    minutes = _round_half_up(seconds / 60)
    if minutes < 60:
        return f"{minutes} min"
    return f"{minutes // 60}h {minutes % 60}m"


def maneuver_icon(maneuver_type: str, modifier: Optional[str]) -> str:
    if maneuver_type == ARRIVE:
        return ICON_ARRIVE
    if maneuver_type == DEPART:
        return ICON_STRAIGHT
    if maneuver_type in (ROUNDABOUT, ROTARY):
        return ICON_ROUNDABOUT
    return _MODIFIER_ICONS.get(modifier or "", ICON_STRAIGHT)


def maneuver_text(maneuver_type: str, modifier: Optional[str]) -> str:
    if maneuver_type == ARRIVE:
        return "Arrive at"
    if maneuver_type == DEPART:
        return "Head toward"
    if maneuver_type in (ROUNDABOUT, ROTARY):
        return "Take the roundabout to"
    return _MODIFIER_TEXT.get(modifier or "", "Continue onto")


# ---------------------------------------------------------------------------
# Instruction
# ---------------------------------------------------------------------------

class InstructionFormatter:
    """
    Derives the visible instruction from the session.

    The step at current_step_index is the one being approached, so its
    maneuver is what the user is told about next. A depart step is never
    described itself; the following maneuver is shown instead.
    """

    def __init__(self, config: Optional[NavConfig] = None) -> None:
        self.config = config or NavConfig()

    def current_instruction(self, session: Optional[NavigationSession]) -> Instruction:
        if session is None or not session.steps:
            return CALCULATING

        steps = session.steps
        index = min(session.current_step_index, len(steps) - 1)
        step = steps[index]
        position = session.current_position

        if step.maneuver.type == ARRIVE:
            dest = session.destination
            return Instruction(
                icon=ICON_ARRIVE,
                road_name="Arrive at your destination",
                distance_text=format_distance(distance_m(position, dest.coord)),
                text=f"Arrive at {dest.name or 'your destination'}",
            )

        if step.maneuver.type == DEPART:
            if index + 1 < len(steps):
                upcoming = steps[index + 1]
                dist = distance_m(position, upcoming.maneuver.location)
                return self._describe(upcoming, dist, current_road=step.road_name)
            dist = distance_m(position, step.maneuver.location)
            return Instruction(
                icon=ICON_STRAIGHT,
                road_name=step.road_name,
                distance_text=format_distance(dist),
                text=f"Head toward {step.road_name}",
            )

        current_road = steps[index - 1].road_name if index > 0 else step.road_name
        dist = distance_m(position, step.maneuver.location)
        return self._describe(step, dist, current_road=current_road)

    def _describe(self, step: Step, dist: float, current_road: str) -> Instruction:
        distance_text = format_distance(dist)
        if dist > self.config.long_stretch_m:
            return Instruction(
                icon=ICON_STRAIGHT,
                road_name=f"Continue on {current_road}",
                distance_text=distance_text,
                text=f"Continue on {current_road} for {distance_text}",
            )
        if step.maneuver.type == ARRIVE:
            return Instruction(
                icon=ICON_ARRIVE,
                road_name="Your destination",
                distance_text=distance_text,
                text=f"In {distance_text}, arrive at your destination",
            )
        verb = maneuver_text(step.maneuver.type, step.maneuver.modifier)
        return Instruction(
            icon=maneuver_icon(step.maneuver.type, step.maneuver.modifier),
            road_name=step.road_name,
            distance_text=distance_text,
            text=f"In {distance_text}, {verb[0].lower()}{verb[1:]} {step.road_name}",
        )

    # ------------------------------------------------------------------
    # Trip stats / geometry
    # ------------------------------------------------------------------

    def trip_stats(self, session: NavigationSession) -> TripStats:
        """
        Remaining distance and time. Along the route when one is loaded,
        straight-line at average speed otherwise.
        """
        position = session.current_position
        steps = session.steps
        speed = self.config.average_speed_mps

        if steps:
            index = min(session.current_step_index, len(steps) - 1)
            to_maneuver = distance_m(position, steps[index].maneuver.location)
            remaining = steps[index:]
            dist = to_maneuver + sum(s.distance_m for s in remaining)
            secs = to_maneuver / speed + sum(s.duration_s for s in remaining)
        else:
            dist = distance_m(position, session.destination.coord)
            secs = dist / speed

        return TripStats(
            time_remaining_text=format_duration(secs),
            distance_remaining_text=format_distance(dist),
        )

    def current_step_geometry(self, session: Optional[NavigationSession]) -> List[Coord]:
        """
        Line for the current step: the user's position followed by the step's
        own geometry, or a straight line to the next maneuver when it has none.
        """
        if session is None or not session.steps:
            return []
        steps = session.steps
        if session.current_step_index >= len(steps):
            return []

        position = session.current_position
        step = steps[session.current_step_index]
        if step.geometry:
            return [position, *step.geometry]

        upcoming = steps[min(session.current_step_index + 1, len(steps) - 1)]
        return [position, upcoming.maneuver.location]
