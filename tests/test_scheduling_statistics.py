"""Regression tests for derived plan statistics."""

import pytest

from satlink.domain import ConnectionWindow, SatelliteParams, SatelliteTransaction, StationTransaction
from satlink.scheduling import (
    statistics_satellite_memory_trace,
    statistics_station_received_amounts,
    statistics_station_stats,
    statistics_station_time_limits,
)


def test_statistics_station_time_limits_measures_window_union() -> None:
    windows = [ConnectionWindow(0, 0, 0, 100), ConnectionWindow(0, 1, 50, 150), ConnectionWindow(0, 0, 300, 400)]

    assert statistics_station_time_limits(windows, station_count=2) == (250, 0)


def test_statistics_station_stats_summarises_each_station() -> None:
    windows = [ConnectionWindow(0, 0, 0, 1000), ConnectionWindow(0, 1, 500, 2000), ConnectionWindow(1, 1, 0, 10)]
    station_transactions = [
        [StationTransaction(0, 0, 400), StationTransaction(1, 500, 1500), StationTransaction(0, 1600, 1700)],
        [],
    ]

    stats = statistics_station_stats(station_transactions, windows)

    assert [(item.receive_time, item.time_limit, item.satellite_count) for item in stats] == [(1500, 2000, 2), (0, 10, 0)]


def test_statistics_station_received_amounts_uses_satellite_bandwidth() -> None:
    amounts = statistics_station_received_amounts(
        [[StationTransaction(0, 0, 2000), StationTransaction(1, 3000, 4000)]],
        [SatelliteParams(10, 4, 100), SatelliteParams(10, 16, 25)],
    )

    assert amounts == (pytest.approx(225.0),)


def test_statistics_satellite_memory_trace_clamps_to_capacity_and_reports_idle_time() -> None:
    """Replay shooting and downlink intervals against a small memory capacity.

    Returns:
        None: Assertions validate memory and idle values.

    Raises:
        AssertionError: Raised when replayed memory values are incorrect.
    """

    transactions = [
        SatelliteTransaction(-1, 0, 1999),
        SatelliteTransaction(0, 2000, 3000),
        SatelliteTransaction(-1, 3001, 10000),
    ]

    trace = statistics_satellite_memory_trace(transactions, SatelliteParams(5000, 2, 100))

    assert [(entry.memory_on_start, entry.memory_on_stop, entry.sent_amount, entry.idle_time) for entry in trace] == [
        (0, 1999, 0, 0),
        (1999, 1499, 500, 0),
        (1499, 5000, 0, 3498),
    ]


def test_statistics_satellite_memory_trace_rounds_single_unit_overshoot_to_zero() -> None:
    transactions = [SatelliteTransaction(-1, 0, 1), SatelliteTransaction(0, 10, 16)]

    trace = statistics_satellite_memory_trace(transactions, SatelliteParams(100, 3, 10))

    assert trace[-1].sent_amount == 2
    assert trace[-1].memory_on_stop == 0
