"""Regression tests for schedule and statistics report files."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

import pytest

from satlink.domain import ConnectionSchedule, ConnectionWindow, FlybySchedule, FlybyWindow, SatelliteParams
from satlink.reports import STATION_SCHEDULE_HEADER, STATION_SCHEDULE_RULE, ReportWriter, ReportWriterConfig
from satlink.scheduling import DownlinkResolutionRequest, DownlinkResolutionResult, fifo_resolve_downlinks

_EPOCH = datetime(2027, 6, 1)


@pytest.fixture
def connection_schedule() -> ConnectionSchedule:
    return ConnectionSchedule(
        start_instant=_EPOCH,
        station_names=("Anadyr",),
        satellite_names=("SatA",),
        records=(ConnectionWindow(0, 0, 2000, 3000), ConnectionWindow(0, 0, 2500, 2900)),
    )


@pytest.fixture
def resolution(connection_schedule: ConnectionSchedule) -> DownlinkResolutionResult:
    return fifo_resolve_downlinks(
        DownlinkResolutionRequest(
            connection_schedule=connection_schedule,
            flyby_schedule=FlybySchedule(
                start_instant=_EPOCH,
                satellite_names=("SatA",),
                records=(FlybyWindow(0, 0, 10000),),
            ),
            satellite_params=(SatelliteParams(5000, 2, 100),),
            time_step=60000,
        )
    )


@pytest.fixture
def report_writer(tmp_path: Path, connection_schedule: ConnectionSchedule) -> ReportWriter:
    return ReportWriter(
        config=ReportWriterConfig(
            results_path=tmp_path / "results",
            statistics_path=tmp_path / "statistics",
            report_timestamp_format="%d %b %Y %H:%M:%S.%f",
            statistics_timestamp_format="%Y-%m-%d %H:%M:%S.%f",
        ),
        connection_schedule=connection_schedule,
        satellite_params=(SatelliteParams(5000, 2, 100),),
    )


def _read_lines(path: Path) -> list[str]:
    return path.read_text(encoding="utf-8").splitlines()


def test_reports_write_all_creates_every_report_file(
    tmp_path: Path,
    report_writer: ReportWriter,
    resolution: DownlinkResolutionResult,
) -> None:
    """Write all statistics files and one schedule per station into fresh directories.

    Returns:
        None: Assertions validate the written file set.

    Raises:
        AssertionError: Raised when a report file is missing.
    """

    written_paths = report_writer.reports_write_all(resolution)

    assert [path.name for path in written_paths] == [
        "StationStats.csv",
        "StationsSchedules.csv",
        "ShootingSchedules.csv",
        "StationTransactions.csv",
        "SatelliteTransactions.csv",
        "SkipWindowStats.csv",
        "StationDataAmountReceived.csv",
        "Anadyr-Schedule.txt",
    ]
    assert all(path.is_file() for path in written_paths)
    assert (tmp_path / "results" / "Anadyr-Schedule.txt") in written_paths


def test_reports_statistics_rows_use_statistics_timestamp_format(
    tmp_path: Path,
    report_writer: ReportWriter,
    resolution: DownlinkResolutionResult,
) -> None:
    report_writer.reports_write_all(resolution)
    statistics_path = tmp_path / "statistics"

    assert _read_lines(statistics_path / "StationTransactions.csv") == [
        "StationId, SatelliteId, StartTime(UTC), StopTime(UTC), Duration(ms)",
        "0, 0, 2027-06-01 00:00:02.000, 2027-06-01 00:00:03.000, 1000",
    ]
    assert _read_lines(statistics_path / "StationStats.csv") == [
        "StationId, ReceiveTime, TimeLimit, SatellitesNumber",
        "0, 1000, 1000, 1",
    ]
    assert _read_lines(statistics_path / "ShootingSchedules.csv")[1:] == [
        "0, 2027-06-01 00:00:00.000, 2027-06-01 00:00:10.000, 10000",
    ]
    assert _read_lines(statistics_path / "SkipWindowStats.csv")[1:] == [
        "STATION_BUSY, 0, 0, 2027-06-01 00:00:02.500, 2027-06-01 00:00:02.900, 400",
        "SATELLITE_BUSY, 0, 0, 2027-06-01 00:00:02.500, 2027-06-01 00:00:02.900, 400",
    ]
    assert _read_lines(statistics_path / "StationDataAmountReceived.csv") == [
        "Station name, Received amount(MB)",
        "Anadyr,    100.000",
    ]


def test_reports_satellite_transactions_include_memory_trace(
    tmp_path: Path,
    report_writer: ReportWriter,
    resolution: DownlinkResolutionResult,
) -> None:
    report_writer.reports_write_satellite_transactions(resolution)

    assert _read_lines(tmp_path / "statistics" / "SatelliteTransactions.csv")[1:] == [
        "-1, 0, 2027-06-01 00:00:00.000, 2027-06-01 00:00:01.999, 1999, 0, 1999, 0, 0",
        "0, 0, 2027-06-01 00:00:02.000, 2027-06-01 00:00:03.000, 1000, 1999, 1499, 500, 0",
        "-1, 0, 2027-06-01 00:00:03.001, 2027-06-01 00:00:10.000, 6999, 1499, 5000, 0, 3498",
    ]


def test_reports_station_schedule_uses_fixed_width_rows(
    tmp_path: Path,
    report_writer: ReportWriter,
    resolution: DownlinkResolutionResult,
) -> None:
    report_writer.reports_write_station_schedules(resolution)

    assert _read_lines(tmp_path / "results" / "Anadyr-Schedule.txt") == [
        "Anadyr",
        STATION_SCHEDULE_RULE,
        STATION_SCHEDULE_HEADER,
        "%30s%30s%30.3f%30s%30.3f"
        % ("01 Jun 2027 00:00:02.000", "01 Jun 2027 00:00:03.000", 1.0, "SatA", 100.0),
    ]
