# nav_config.py
# All tuneable constants in one place.
# Pass a NavConfig instance to every module that needs settings.

import os
from dataclasses import dataclass
from typing import Optional


# ---------------------------------------------------------------------------
# Engine constants
# ---------------------------------------------------------------------------

STEP_COMPLETION_RADIUS_M: float = 30.0
ARRIVAL_RADIUS_M: float = 75.0
OFF_ROUTE_THRESHOLD_M: float = 75.0
LONG_STRETCH_M: float = 3218.69         # ~2 miles
UNNAMED_ROAD: str = "Unnamed road"


# ---------------------------------------------------------------------------
# Main config
# ---------------------------------------------------------------------------

@dataclass
class NavConfig:
    # Step tracking / arrival
    step_completion_radius_m: float = STEP_COMPLETION_RADIUS_M
    arrival_radius_m: float = ARRIVAL_RADIUS_M   # used when a destination sets none

    # Off-route detection
    off_route_threshold_m: float = OFF_ROUTE_THRESHOLD_M
    off_route_duration_s: float = 3.0      # deviation must persist this long

    # Rerouting
    reroute_debounce_s: float = 10.0       # minimum gap between reroutes

    # Instructions / trip stats
    long_stretch_m: float = LONG_STRETCH_M
    average_speed_mps: float = 13.4        # 30 mph
    unnamed_road: str = UNNAMED_ROAD

    # Route provider
    osrm_base_url: str = "https://router.project-osrm.org"
    osrm_profile: str = "driving"
    request_timeout_s: float = 10.0

    # Logging (None disables file output)
    log_dir: Optional[str] = None
    route_filename: str = "active_route.json"
    events_filename: str = "nav_session.jsonl"

    @property
    def route_filepath(self) -> Optional[str]:
        if self.log_dir is None:
            return None
        return os.path.join(self.log_dir, self.route_filename)

    @property
    def events_filepath(self) -> Optional[str]:
        if self.log_dir is None:
            return None
        return os.path.join(self.log_dir, self.events_filename)
