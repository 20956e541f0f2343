from dataclasses import replace

import pytest

from navigation.engine.errors import GeometryUnavailable
from navigation.engine.models import Route, RouteStatus
from navigation.engine.off_route import OffRouteMonitor

from conftest import ORIGIN, offset


ON_ROAD = offset(ORIGIN, north_m=-200)


def at(session, east_m):
    return replace(session, current_position=offset(ON_ROAD, east_m=east_m))


@pytest.fixture
def monitor():
    return OffRouteMonitor()


def test_single_far_sample_only_starts_timer(monitor, session):
    checked, effects = monitor.check(at(session, 80), now=100.0)

    assert checked.off_route_since == 100.0
    assert checked.is_off_route
    assert checked.distance_to_route == pytest.approx(80, rel=1e-2)
    assert effects == [RouteStatus.OFF_ROUTE]


def test_sustained_deviation_requests_reroute(monitor, session):
    s, _ = monitor.check(at(session, 80), now=100.0)
    s, effects = monitor.check(at(s, 90), now=103.1)

    assert RouteStatus.REROUTE_REQUESTED in effects
    assert effects.count(RouteStatus.REROUTE_REQUESTED) == 1
    # timer keeps its original start
    assert s.off_route_since == 100.0


def test_not_yet_long_enough(monitor, session):
    s, _ = monitor.check(at(session, 80), now=100.0)
    s, effects = monitor.check(at(s, 80), now=102.9)
    assert RouteStatus.REROUTE_REQUESTED not in effects


def test_on_route_sample_cancels_pending_deviation(monitor, session):
    s, _ = monitor.check(at(session, 80), now=100.0)
    s, effects = monitor.check(at(s, 70), now=101.0)

    assert s.off_route_since is None
    assert effects == [RouteStatus.BACK_ON_ROUTE]

    # far again: the window restarts instead of firing
    s, effects = monitor.check(at(s, 80), now=110.0)
    assert s.off_route_since == 110.0
    assert RouteStatus.REROUTE_REQUESTED not in effects


def test_recent_reroute_holds_back_request(monitor, session):
    s, _ = monitor.check(at(replace(session, last_reroute_at=98.0), 80), now=100.0)
    s, effects = monitor.check(at(s, 80), now=103.5)

    assert effects == [RouteStatus.OFF_ROUTE, RouteStatus.REROUTE_DEBOUNCED]

    s, effects = monitor.check(at(s, 80), now=108.0)
    assert effects == [RouteStatus.OFF_ROUTE, RouteStatus.REROUTE_REQUESTED]


def test_recent_failed_attempt_holds_back_request(monitor, session):
    s, _ = monitor.check(at(replace(session, last_failed_reroute_at=95.0), 80), now=100.0)
    s, effects = monitor.check(at(s, 80), now=104.0)

    assert RouteStatus.REROUTE_DEBOUNCED in effects
    assert RouteStatus.REROUTE_REQUESTED not in effects


def test_no_trigger_while_rerouting(monitor, session):
    s, _ = monitor.check(at(session, 80), now=100.0)
    s, effects = monitor.check(replace(at(s, 80), is_rerouting=True), now=105.0)

    assert RouteStatus.REROUTE_REQUESTED not in effects
    assert s.distance_to_route == pytest.approx(80, rel=1e-2)


def test_no_route_is_a_no_op(monitor, session):
    bare = replace(session, route=None)
    checked, effects = monitor.check(at(bare, 500), now=100.0)
    assert effects == []
    assert checked.off_route_since is None


def test_short_geometry_disables_check(monitor, session):
    stub = Route(distance_m=0, duration_s=0, geometry=(ORIGIN,), steps=session.route.steps)
    short = replace(at(session, 500), route=stub)

    with pytest.raises(GeometryUnavailable):
        monitor.route_distance(short)

    checked, effects = monitor.check(short, now=100.0)
    assert effects == []
    assert checked.distance_to_route is None
    assert checked.off_route_since is None
