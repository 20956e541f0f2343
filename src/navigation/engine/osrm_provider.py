# osrm_provider.py
# Route providers. OSRMRouteProvider talks to an OSRM server over HTTP;
# StaticRouteProvider serves canned responses for simulation and tests.
# Both return Route objects via route_parser.

import logging
from typing import Any, Dict, List, Optional

import httpx

from .errors import NoRouteFound
from .models import Coord, Route
from .nav_config import NavConfig
from .route_parser import route_from_response

logger = logging.getLogger(__name__)


class OSRMRouteProvider:
    """
    OSRM /route client.

    Converts internal (lat, lon) to OSRM's lon,lat order, asks for full
    polyline geometry with steps, and parses the first route.

    Args:
        config: NavConfig with base URL, profile and timeout.
        client: Optional shared httpx.AsyncClient; one is created per call
                when omitted.
    """

    def __init__(
        self,
        config: Optional[NavConfig] = None,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.config = config or NavConfig()
        self._client = client

    def route_url(self, origin: Coord, destination: Coord) -> str:
        base = self.config.osrm_base_url.rstrip("/")
        coords = f"{origin.lon},{origin.lat};{destination.lon},{destination.lat}"
        return f"{base}/route/v1/{self.config.osrm_profile}/{coords}"

    async def _get_json(self, client: httpx.AsyncClient, url: str) -> Dict[str, Any]:
        params = {"overview": "full", "steps": "true", "geometries": "polyline"}
        try:
            response = await client.get(url, params=params, timeout=self.config.request_timeout_s)
        except httpx.HTTPError as e:
            raise NoRouteFound(f"OSRM request failed: {e}") from e

        if response.status_code >= 500:
            raise NoRouteFound(f"OSRM API error: {response.status_code}")
        # OSRM answers "no route" with a 400 and a JSON body carrying the code
        try:
            data = response.json()
        except ValueError as e:
            raise NoRouteFound(f"OSRM API error: {response.status_code}") from e
        if response.status_code >= 400 and not isinstance(data, dict):
            raise NoRouteFound(f"OSRM API error: {response.status_code}")
        return data

    async def fetch_route(self, origin: Coord, destination: Coord) -> Route:
        """
        Fetch a route from origin to destination.

        Raises:
            NoRouteFound:   transport failure or OSRM reported no route.
            MalformedRoute: the response could not be parsed.
        """
        url = self.route_url(origin, destination)
        logger.info(f"Fetching route from OSRM: {origin} → {destination}")

        if self._client is not None:
            data = await self._get_json(self._client, url)
        else:
            async with httpx.AsyncClient() as client:
                data = await self._get_json(client, url)

        return route_from_response(data, self.config)


class StaticRouteProvider:
    """
    Serves pre-recorded OSRM responses in order, repeating the last one.
    An Exception instance in the list is raised instead of returned.

    Args:
        responses: Decoded OSRM responses (or exceptions).
        config:    NavConfig passed to the parser.
    """

    def __init__(self, responses: List[Any], config: Optional[NavConfig] = None) -> None:
        if not responses:
            raise ValueError("StaticRouteProvider needs at least one response.")
        self.config = config or NavConfig()
        self._responses = list(responses)
        self.calls: List[tuple] = []

    async def fetch_route(self, origin: Coord, destination: Coord) -> Route:
        index = min(len(self.calls), len(self._responses) - 1)
        self.calls.append((origin, destination))
        response = self._responses[index]
        if isinstance(response, Exception):
            raise response
        return route_from_response(response, self.config)
