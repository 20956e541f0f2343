import json

from navigation.engine.models import ProgressResult, RouteStatus
from navigation.engine.nav_config import NavConfig
from navigation.engine.nav_logger import NavLogger

from conftest import ORIGIN


def test_disabled_without_log_dir(route):
    nav_logger = NavLogger(NavConfig())
    assert not nav_logger.enabled
    assert nav_logger.save_route(route) is False
    nav_logger.log_event(ProgressResult(RouteStatus.PROGRESSING, "ok"), ORIGIN)


def test_creates_log_dir_and_saves(route, tmp_path):
    log_dir = tmp_path / "logs"
    nav_logger = NavLogger(NavConfig(log_dir=str(log_dir)))

    assert nav_logger.save_route(route, reason="reroute")
    data = json.loads((log_dir / "active_route.json").read_text(encoding="utf-8"))
    assert data["reason"] == "reroute"
    assert data["route"]["steps"][1]["maneuver"]["modifier"] == "left"


def test_write_failure_is_not_fatal(route, tmp_path):
    config = NavConfig(log_dir=str(tmp_path), route_filename="no/such/dir/route.json",
                       events_filename="no/such/dir/events.jsonl")
    nav_logger = NavLogger(config)

    assert nav_logger.save_route(route) is False
    nav_logger.log_event(ProgressResult(RouteStatus.OFF_ROUTE, "off"), ORIGIN)
    assert not (tmp_path / "no").exists()
