# nav_logger.py
# Diagnostic file output for the navigation engine.
# Writes a JSON snapshot of each installed route and one JSON line per update.
# Nothing here is read back; a failed write never stops navigation.

import json
import os
import logging
from datetime import datetime
from typing import Optional

from .models import Coord, ProgressResult, Route
from .nav_config import NavConfig

# Standard Python logger, configured at the app entry point
logger = logging.getLogger(__name__)


class NavLogger:
    """
    Persists route snapshots and navigation events to JSON files.
    Does nothing when config.log_dir is None.

    Args:
        config: NavConfig instance for file paths and directories.
    """

    def __init__(self, config: Optional[NavConfig] = None) -> None:
        self.config = config or NavConfig()
        if self.enabled:
            os.makedirs(self.config.log_dir, exist_ok=True)

    @property
    def enabled(self) -> bool:
        return self.config.log_dir is not None

    # ------------------------------------------------------------------
    # Route snapshot
    # ------------------------------------------------------------------

    def save_route(self, route: Route, reason: str = "initial") -> bool:
        """
        Serialize a route to JSON, replacing the previous snapshot.

        Args:
            route:  Route that was just installed.
            reason: "initial" or "reroute".

        Returns:
            True on success, False on failure or when disabled.
        """
        filepath = self.config.route_filepath
        if filepath is None:
            return False
        try:
            data = {
                "saved_at": datetime.now().isoformat(),
                "reason": reason,
                "step_count": len(route.steps),
                "route": route.to_dict(),
            }
            with open(filepath, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False, indent=2)
            logger.info(f"Route saved to {filepath} ({len(route.steps)} steps).")
            return True
        except OSError as e:
            logger.error(f"Failed to save route to {filepath}: {e}")
            return False

    # ------------------------------------------------------------------
    # Session event logging
    # ------------------------------------------------------------------

    def log_event(self, result: ProgressResult, position: Coord) -> None:
        """
        Append a single navigation event to the session log file.

        Args:
            result:   ProgressResult from Navigator.update().
            position: Position the result was computed for.
        """
        event_file = self.config.events_filepath
        if event_file is None:
            return
        entry = {
            "timestamp": datetime.now().isoformat(),
            "lat": position.lat,
            "lon": position.lon,
            "status": result.status.value,
            "effects": [e.value for e in result.effects],
            "message": result.message,
            "step_index": result.step_index,
            "distance_to_route": result.distance_to_route,
            "recalculating": result.recalculating,
        }
        try:
            with open(event_file, "a", encoding="utf-8") as f:
                f.write(json.dumps(entry, ensure_ascii=False) + "\n")
        except OSError as e:
            logger.error(f"Failed to write event log: {e}")
