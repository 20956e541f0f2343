from urllib.parse import unquote

import httpx
import pytest

from navigation.engine.errors import MalformedRoute, NoRouteFound
from navigation.engine.models import Coord
from navigation.engine.nav_config import NavConfig
from navigation.engine.osrm_provider import OSRMRouteProvider, StaticRouteProvider

from conftest import osrm_response


ORIGIN = Coord(40.25, -111.6585)
DEST = Coord(40.2338, -111.6585)


def provider_for(handler, **config):
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return OSRMRouteProvider(NavConfig(osrm_base_url="http://osrm.test/", **config), client=client)


@pytest.mark.asyncio
async def test_request_shape_and_parse(route):
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json=osrm_response(route))

    parsed = await provider_for(handler).fetch_route(ORIGIN, DEST)

    request = seen[0]
    assert request.method == "GET"
    assert unquote(request.url.path) == "/route/v1/driving/-111.6585,40.25;-111.6585,40.2338"
    assert request.url.params["overview"] == "full"
    assert request.url.params["steps"] == "true"
    assert request.url.params["geometries"] == "polyline"
    assert len(parsed.steps) == 3


@pytest.mark.asyncio
async def test_profile_comes_from_config(route):
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json=osrm_response(route))

    await provider_for(handler, osrm_profile="car").fetch_route(ORIGIN, DEST)
    assert unquote(seen[0].url.path).startswith("/route/v1/car/")


@pytest.mark.asyncio
async def test_no_route_body_raises_no_route_found():
    def handler(request):
        return httpx.Response(400, json={"code": "NoRoute", "message": "Impossible route"})

    with pytest.raises(NoRouteFound):
        await provider_for(handler).fetch_route(ORIGIN, DEST)


@pytest.mark.asyncio
async def test_server_error_raises_no_route_found():
    def handler(request):
        return httpx.Response(503, text="unavailable")

    with pytest.raises(NoRouteFound, match="503"):
        await provider_for(handler).fetch_route(ORIGIN, DEST)


@pytest.mark.asyncio
async def test_transport_error_raises_no_route_found():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(NoRouteFound) as raised:
        await provider_for(handler).fetch_route(ORIGIN, DEST)
    assert isinstance(raised.value.__cause__, httpx.ConnectError)


@pytest.mark.asyncio
async def test_malformed_route_propagates():
    def handler(request):
        return httpx.Response(200, json={"code": "Ok", "routes": [{"distance": 1}]})

    with pytest.raises(MalformedRoute):
        await provider_for(handler).fetch_route(ORIGIN, DEST)


@pytest.mark.asyncio
async def test_static_provider_replays_in_order(route):
    provider = StaticRouteProvider([NoRouteFound("first"), osrm_response(route)])

    with pytest.raises(NoRouteFound):
        await provider.fetch_route(ORIGIN, DEST)
    assert len((await provider.fetch_route(ORIGIN, DEST)).steps) == 3
    # last response repeats
    assert len((await provider.fetch_route(ORIGIN, DEST)).steps) == 3
    assert provider.calls == [(ORIGIN, DEST)] * 3


def test_static_provider_needs_responses():
    with pytest.raises(ValueError):
        StaticRouteProvider([])
