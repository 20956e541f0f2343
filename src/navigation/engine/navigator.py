# navigator.py
# Public entry point for the navigation engine.
# Owns the live session and wires the specialist modules together; the
# navigation rules themselves live in engine.py and the modules it calls.

import asyncio
import itertools
import logging
import time
from typing import Callable, List, Optional

from .engine import on_position_update
from .instructions import InstructionFormatter
from .models import (
    Coord, Destination, Instruction, NavigationSession, PositionSample,
    ProgressResult, RouteStatus, TripStats,
)
from .nav_config import NavConfig
from .nav_logger import NavLogger
from .reroute import RerouteCoordinator, RouteFetcher

logger = logging.getLogger(__name__)

# Most significant first; decides ProgressResult.status
_STATUS_PRIORITY = (
    RouteStatus.ARRIVED,
    RouteStatus.REROUTE_REQUESTED,
    RouteStatus.REROUTE_DEBOUNCED,
    RouteStatus.OFF_ROUTE,
    RouteStatus.BACK_ON_ROUTE,
    RouteStatus.STEP_ADVANCED,
    RouteStatus.PROGRESSING,
    RouteStatus.INACTIVE,
)


class NavigationListener:
    """
    UI and arrival sink. Override what you need; every hook is a no-op here.
    """

    def show_instruction(self, instruction: Instruction) -> None:
        pass

    def show_trip_stats(self, stats: TripStats) -> None:
        pass

    def show_recalculating(self, active: bool) -> None:
        pass

    def show_step_geometry(self, coords: List[Coord]) -> None:
        pass

    def arrived(self, destination: Destination) -> None:
        pass


class Navigator:
    """
    High-level navigation facade.

    Typical lifecycle:
        nav = Navigator(OSRMRouteProvider(config), config)
        await nav.start_trip(first_fix, destination)

        # position loop, inside the event loop:
        result = nav.update(sample)

    Args:
        provider: Route fetcher used for the initial route and reroutes.
        config:   Optional NavConfig; defaults to NavConfig().
        listener: Optional NavigationListener receiving UI updates.
        clock:    Time source in seconds; time.monotonic by default.
    """

    def __init__(
        self,
        provider: RouteFetcher,
        config: Optional[NavConfig] = None,
        listener: Optional[NavigationListener] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.config = config or NavConfig()
        self._provider = provider
        self._listener = listener or NavigationListener()
        self._clock = clock

        # Specialist modules
        self._formatter   = InstructionFormatter(self.config)
        self._coordinator = RerouteCoordinator(provider, self.config, clock)
        self._logger      = NavLogger(self.config)

        self._session: Optional[NavigationSession] = None
        self._reroute_task: Optional[asyncio.Task] = None
        self._trip_ids = itertools.count(1)

    # ------------------------------------------------------------------
    # Trip control
    # ------------------------------------------------------------------

    async def start_trip(self, sample: PositionSample, destination: Destination) -> NavigationSession:
        """
        Fetch the first route and begin tracking. Any trip already running
        is ended first.

        Raises:
            NoRouteFound, MalformedRoute: the trip cannot start.
        """
        self.end_trip()
        logger.info(f"Calculating route: {sample.coord} → {destination.coord}")
        route = await self._provider.fetch_route(sample.coord, destination.coord)

        self._session = NavigationSession(
            destination=destination,
            current_position=sample.coord,
            current_heading=sample.heading,
            route=route,
            trip_id=next(self._trip_ids),
        )
        self._logger.save_route(route, "initial")
        logger.info(f"Route ready: {len(route.steps)} steps, {route.distance_m:.0f} m.")
        self._publish()
        return self._session

    def end_trip(self) -> None:
        """Forcibly end the current trip and cancel its in-flight reroute."""
        if self._reroute_task is not None and not self._reroute_task.done():
            logger.info("Cancelling in-flight reroute.")
            self._reroute_task.cancel()
        self._reroute_task = None
        if self._session is not None:
            logger.info("Trip ended by user.")
        self._session = None

    # ------------------------------------------------------------------
    # Position update, call this on every fix
    # ------------------------------------------------------------------

    def update(self, sample: PositionSample) -> ProgressResult:
        """
        Process a new position sample.

        Must be called from inside a running event loop if reroutes are to
        be dispatched.

        Returns:
            ProgressResult with status, effects, instruction and stats.
        """
        if self._session is None:
            return ProgressResult(
                status=RouteStatus.INACTIVE,
                message="Navigation is not active.",
                effects=[RouteStatus.INACTIVE],
            )

        session, effects = on_position_update(self._session, sample, self._clock(), self.config)
        self._set_session(session)

        if RouteStatus.REROUTE_REQUESTED in effects:
            self._dispatch_reroute()

        instruction = None
        stats = None
        if RouteStatus.ARRIVED in effects:
            message = "You have reached your destination."
            self._listener.arrived(session.destination)
        elif RouteStatus.INACTIVE in effects:
            message = "Navigation is not active."
        else:
            instruction, stats = self._publish()
            message = instruction.text

        status = next(s for s in _STATUS_PRIORITY if s in effects)
        result = ProgressResult(
            status=status,
            message=message,
            effects=effects,
            instruction=instruction,
            stats=stats,
            step_index=self._session.current_step_index,
            distance_to_route=self._session.distance_to_route,
            recalculating=self._session.is_rerouting,
        )
        self._logger.log_event(result, sample.coord)
        return result

    # ------------------------------------------------------------------
    # Rerouting
    # ------------------------------------------------------------------

    def _get_session(self) -> Optional[NavigationSession]:
        return self._session

    def _set_session(self, session: NavigationSession) -> None:
        previous = self._session
        self._session = session
        if previous is not None and previous.is_rerouting != session.is_rerouting:
            self._listener.show_recalculating(session.is_rerouting)

    def _dispatch_reroute(self) -> None:
        if self._reroute_task is not None and not self._reroute_task.done():
            logger.debug("Reroute already scheduled.")
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning("No running event loop; reroute not dispatched.")
            return
        self._reroute_task = loop.create_task(self._reroute())
        self._reroute_task.add_done_callback(self._on_reroute_done)

    async def _reroute(self) -> bool:
        installed = await self._coordinator.request_reroute(self._get_session, self._set_session)
        if installed and self._session is not None and self._session.route is not None:
            self._logger.save_route(self._session.route, "reroute")
            self._publish()
        return installed

    def _on_reroute_done(self, task: asyncio.Task) -> None:
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error(f"Reroute task crashed: {error!r}")

    async def wait_for_reroute(self) -> Optional[bool]:
        """Await the in-flight reroute, if any. Returns whether it installed a route."""
        if self._reroute_task is None:
            return None
        return await self._reroute_task

    # ------------------------------------------------------------------
    # UI output
    # ------------------------------------------------------------------

    def current_instruction(self) -> Instruction:
        return self._formatter.current_instruction(self._session)

    def trip_stats(self) -> Optional[TripStats]:
        if self._session is None:
            return None
        return self._formatter.trip_stats(self._session)

    def current_step_geometry(self) -> List[Coord]:
        return self._formatter.current_step_geometry(self._session)

    def _publish(self):
        instruction = self.current_instruction()
        stats = self.trip_stats()
        self._listener.show_instruction(instruction)
        if stats is not None:
            self._listener.show_trip_stats(stats)
        self._listener.show_step_geometry(self.current_step_geometry())
        return instruction, stats

    # ------------------------------------------------------------------
    # Convenience read-only properties
    # ------------------------------------------------------------------

    @property
    def session(self) -> Optional[NavigationSession]:
        return self._session

    @property
    def is_active(self) -> bool:
        return self._session is not None and self._session.trip_active

    @property
    def is_rerouting(self) -> bool:
        return self._session is not None and self._session.is_rerouting

    @property
    def remaining_steps(self) -> int:
        if self._session is None:
            return 0
        return max(0, len(self._session.steps) - self._session.current_step_index)
