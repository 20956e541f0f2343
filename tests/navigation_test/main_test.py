import pytest

from navigation.engine.main import DESTINATION, build_parser, demo_response, destination_from_args
from navigation.engine.models import Coord
from navigation.engine.route_parser import route_from_response


def parse(*argv):
    return build_parser().parse_args(list(argv))


def test_default_destination_is_the_simulated_one():
    args = parse()
    assert destination_from_args(args) is DESTINATION
    assert not args.offline


def test_destination_flags():
    args = parse("--dest-lat", "40.2401", "--dest-lon", "-111.6490", "--dest-name", "Trailhead")
    destination = destination_from_args(args)

    assert destination.coord == Coord(40.2401, -111.6490)
    assert destination.name == "Trailhead"
    assert destination.arrival_radius_m == DESTINATION.arrival_radius_m


def test_unnamed_destination_is_labelled_by_position():
    destination = destination_from_args(parse("--dest-lat", "40.5", "--dest-lon", "-111.5"))
    assert destination.name == "40.50000, -111.50000"


def test_out_of_range_destination_is_rejected():
    with pytest.raises(ValueError):
        destination_from_args(parse("--dest-lat", "95", "--dest-lon", "0"))


def test_non_numeric_coordinate_exits():
    with pytest.raises(SystemExit):
        parse("--dest-lat", "north")


def test_offline_route_ends_at_destination():
    end = Coord(40.2300, -111.6585)
    route = route_from_response(demo_response(end))

    assert route.steps[-1].maneuver.location == end
    assert route.geometry[-1] == end
