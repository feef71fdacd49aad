"""Regression tests for FIFO downlink resolution."""

from __future__ import annotations

from datetime import datetime

import pytest

from satlink.domain import (
    ConnectionSchedule,
    ConnectionWindow,
    FlybySchedule,
    FlybyWindow,
    SatelliteParams,
    SatelliteTransaction,
    SkipRecord,
    SkipType,
    StationTransaction,
)
from satlink.scheduling import (
    DownlinkResolutionRequest,
    fifo_quantize_windows,
    fifo_resolve_downlinks,
    fifo_stored_amount,
    integrity_verify_resolution,
)

_EPOCH = datetime(2027, 6, 1)


def _build_request(
    connections: list[ConnectionWindow],
    flybys: list[FlybyWindow],
    params: tuple[SatelliteParams, ...],
    station_count: int = 1,
    time_step: int = 100000,
) -> DownlinkResolutionRequest:
    satellite_names = tuple(f"Sat{index}" for index in range(len(params)))
    return DownlinkResolutionRequest(
        connection_schedule=ConnectionSchedule(
            start_instant=_EPOCH,
            station_names=tuple(f"Station{index}" for index in range(station_count)),
            satellite_names=satellite_names,
            records=tuple(connections),
        ),
        flyby_schedule=FlybySchedule(start_instant=_EPOCH, satellite_names=satellite_names, records=tuple(flybys)),
        satellite_params=params,
        time_step=time_step,
    )


def test_fifo_resolve_downlinks_limits_upload_to_stored_data() -> None:
    """Cap downlink by stored data and skip windows once memory is drained.

    Returns:
        None: Assertions validate transactions and skip records.

    Raises:
        AssertionError: Raised when the plan differs from the expected FIFO outcome.
    """

    request = _build_request(
        connections=[ConnectionWindow(0, 0, 6000, 7000), ConnectionWindow(0, 0, 2000, 5000)],
        flybys=[FlybyWindow(0, 0, 1000)],
        params=(SatelliteParams(1000, 2, 100),),
    )

    result = fifo_resolve_downlinks(request)

    assert result.station_transactions == ((StationTransaction(0, 2000, 4000),),)
    assert result.satellite_transactions == (
        (SatelliteTransaction(-1, 0, 1000), SatelliteTransaction(0, 2000, 4000)),
    )
    assert result.skip_records == (SkipRecord(SkipType.SATELLITE_MEMORY_EMPTY, 0, 0, 6000, 7000),)
    integrity_verify_resolution(result)


def test_fifo_resolve_downlinks_records_station_busy_skip() -> None:
    request = _build_request(
        connections=[ConnectionWindow(0, 0, 2000, 5000), ConnectionWindow(0, 1, 2500, 3500)],
        flybys=[FlybyWindow(0, 0, 1000), FlybyWindow(1, 0, 1000)],
        params=(SatelliteParams(1000, 2, 100), SatelliteParams(1000, 2, 100)),
    )

    result = fifo_resolve_downlinks(request)

    assert result.skip_records == (SkipRecord(SkipType.STATION_BUSY, 0, 1, 2500, 3500),)
    assert result.satellite_transactions[1] == (SatelliteTransaction(-1, 0, 1000),)
    integrity_verify_resolution(result)


def test_fifo_resolve_downlinks_records_satellite_busy_skip() -> None:
    request = _build_request(
        connections=[ConnectionWindow(0, 0, 2000, 5000), ConnectionWindow(1, 0, 2500, 3500)],
        flybys=[FlybyWindow(0, 0, 1000)],
        params=(SatelliteParams(1000, 2, 100),),
        station_count=2,
    )

    result = fifo_resolve_downlinks(request)

    assert result.skip_records == (SkipRecord(SkipType.SATELLITE_BUSY, 1, 0, 2500, 3500),)
    assert result.station_transactions[1] == ()
    integrity_verify_resolution(result)


def test_fifo_resolve_downlinks_records_both_skip_reasons_for_one_window() -> None:
    request = _build_request(
        connections=[ConnectionWindow(0, 0, 2000, 3000), ConnectionWindow(0, 0, 2500, 2900)],
        flybys=[FlybyWindow(0, 0, 10000)],
        params=(SatelliteParams(100000, 2, 100),),
    )

    result = fifo_resolve_downlinks(request)

    assert result.skip_records == (
        SkipRecord(SkipType.STATION_BUSY, 0, 0, 2500, 2900),
        SkipRecord(SkipType.SATELLITE_BUSY, 0, 0, 2500, 2900),
    )


def test_fifo_resolve_downlinks_splits_spanning_shooting_interval() -> None:
    """Carve a downlink out of the middle of a longer shooting interval."""

    request = _build_request(
        connections=[ConnectionWindow(0, 0, 2000, 3000)],
        flybys=[FlybyWindow(0, 0, 10000)],
        params=(SatelliteParams(100000, 2, 100),),
    )

    result = fifo_resolve_downlinks(request)

    assert result.satellite_transactions == (
        (
            SatelliteTransaction(-1, 0, 1999),
            SatelliteTransaction(0, 2000, 3000),
            SatelliteTransaction(-1, 3001, 10000),
        ),
    )
    integrity_verify_resolution(result)


def test_fifo_resolve_downlinks_trims_overlapping_shooting_edge() -> None:
    request = _build_request(
        connections=[ConnectionWindow(0, 0, 2000, 4000)],
        flybys=[FlybyWindow(0, 2500, 6000), FlybyWindow(0, 0, 1000)],
        params=(SatelliteParams(100000, 1, 100),),
    )

    result = fifo_resolve_downlinks(request)

    assert result.satellite_transactions == (
        (
            SatelliteTransaction(-1, 0, 1000),
            SatelliteTransaction(0, 2000, 3000),
            SatelliteTransaction(-1, 3001, 6000),
        ),
    )
    integrity_verify_resolution(result)


def test_fifo_resolve_downlinks_is_independent_of_input_order() -> None:
    connections = [
        ConnectionWindow(0, 0, 2000, 5000),
        ConnectionWindow(1, 1, 2200, 4000),
        ConnectionWindow(0, 1, 6000, 9000),
        ConnectionWindow(1, 0, 7000, 8000),
    ]
    flybys = [FlybyWindow(0, 0, 1500), FlybyWindow(1, 500, 1800)]
    params = (SatelliteParams(5000, 2, 100), SatelliteParams(5000, 4, 25))

    forward = fifo_resolve_downlinks(_build_request(connections, flybys, params, station_count=2))
    backward = fifo_resolve_downlinks(
        _build_request(list(reversed(connections)), list(reversed(flybys)), params, station_count=2)
    )

    assert forward == backward
    integrity_verify_resolution(forward)


def test_fifo_resolve_downlinks_rejects_non_positive_time_step() -> None:
    request = _build_request(
        connections=[ConnectionWindow(0, 0, 0, 10)],
        flybys=[],
        params=(SatelliteParams(10, 1, 1),),
        time_step=0,
    )

    with pytest.raises(ValueError, match="time_step"):
        fifo_resolve_downlinks(request)


def test_fifo_quantize_windows_splits_long_windows_into_steps() -> None:
    windows = [
        ConnectionWindow(0, 0, 0, 3500),
        ConnectionWindow(0, 1, 10000, 12000),
        ConnectionWindow(1, 0, 20000, 22001),
    ]

    chunks = fifo_quantize_windows(windows, time_step=1000)

    assert chunks == (
        ConnectionWindow(0, 0, 0, 999),
        ConnectionWindow(0, 0, 1000, 1999),
        ConnectionWindow(0, 0, 2000, 3500),
        ConnectionWindow(0, 1, 10000, 12000),
        ConnectionWindow(1, 0, 20000, 20999),
        ConnectionWindow(1, 0, 21000, 22001),
    )


def test_fifo_stored_amount_caps_shooting_and_subtracts_elapsed_downlink() -> None:
    timeline = [SatelliteTransaction(-1, 0, 5000), SatelliteTransaction(0, 5001, 5501)]

    assert fifo_stored_amount(timeline, 4000, transmit_ratio=2, max_time_amount=1000) == 1000
    assert fifo_stored_amount(timeline, 6000, transmit_ratio=2, max_time_amount=1000) == 750
    assert fifo_stored_amount(timeline, 5201, transmit_ratio=2, max_time_amount=1000) == 900
