import pytest

from cmdflow.debug.status import DebugStatus, StatusMonitor, status_string
from cmdflow.errors import StatusDecodeError


def test_round_trip_for_every_member() -> None:
    for status in DebugStatus:
        assert DebugStatus.from_string(str(status)) is status


def test_names_are_literal_member_names() -> None:
    assert str(DebugStatus.NOT_INIT) == "NotInit"
    assert str(DebugStatus.FINISHED) == "Finished"
    assert str(DebugStatus.STATUS_N) == "StatusN"


def test_decode_is_exact() -> None:
    with pytest.raises(StatusDecodeError, match="Bogus is not a valid option"):
        DebugStatus.from_string("Bogus")
    with pytest.raises(ValueError):
        DebugStatus.from_string("running")


def test_out_of_range_values_format_numerically() -> None:
    assert status_string(3) == "Ready"
    assert status_string(9) == "Status(9)"
    assert status_string(-1) == "Status(-1)"


def test_monitor_notifies_on_update() -> None:
    monitor = StatusMonitor()
    seen: list[DebugStatus] = []
    monitor.subscribe(seen.append)
    assert monitor.status is DebugStatus.NOT_INIT

    monitor.update(DebugStatus.BUILDING)
    monitor.update(DebugStatus.READY)

    assert monitor.status is DebugStatus.READY
    assert seen == [DebugStatus.BUILDING, DebugStatus.READY]
