"""Regression tests for the scheduling job lifecycle and failure mapping."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

import pytest

from satlink.config import AppSettings
from satlink.jobs import DownlinkSchedulingJob, SchedulingJobConfig


@pytest.fixture
def scheduling_settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> AppSettings:
    """Build settings pointing every input and output directory into `tmp_path`.

    Returns:
        AppSettings: Isolated runtime settings.

    Raises:
        RuntimeError: This fixture does not raise runtime errors.
    """

    monkeypatch.chdir(tmp_path)
    return AppSettings(
        connection_schedules_path=tmp_path / "connection",
        flyby_schedules_path=tmp_path / "flyby",
        results_path=tmp_path / "results",
        statistics_path=tmp_path / "statistics",
    )


def _build_job(settings: AppSettings) -> DownlinkSchedulingJob:
    return DownlinkSchedulingJob(
        settings=settings,
        config=SchedulingJobConfig(
            connection_schedules_path=settings.connection_schedules_path,
            flyby_schedules_path=settings.flyby_schedules_path,
            time_step_ms=settings.time_step_ms,
        ),
    )


def _write_inputs(settings: AppSettings, write_access_report) -> None:
    write_access_report(
        settings.connection_schedules_path,
        "Facility-Anadyr.txt",
        [("Anadyr-To-SatA", [(datetime(2027, 6, 1, 1, 0), datetime(2027, 6, 1, 1, 5))])],
    )
    write_access_report(
        settings.flyby_schedules_path,
        "AreaTarget-Russia-To-SatA.txt",
        [("Russia-To-SatA", [(datetime(2027, 6, 1, 0, 0), datetime(2027, 6, 1, 0, 30))])],
    )


def test_job_execute_writes_reports_and_records_stage_timeline(
    scheduling_settings: AppSettings,
    write_access_report,
) -> None:
    """Run the full workflow against one station and one satellite.

    Returns:
        None: Assertions validate status, outputs, and timeline stages.

    Raises:
        AssertionError: Raised when the workflow result differs from expectations.
    """

    _write_inputs(scheduling_settings, write_access_report)

    result = _build_job(scheduling_settings).job_execute(job_name="schedule")

    assert result.status == "success"
    assert result.error_code is None
    assert [(event["stage"], event["status"]) for event in result.diagnostics] == [
        ("run", "started"),
        ("load", "started"),
        ("load", "completed"),
        ("resolve", "started"),
        ("resolve", "completed"),
        ("verify", "started"),
        ("verify", "completed"),
        ("report", "started"),
        ("report", "completed"),
        ("run", "success"),
    ]
    assert (scheduling_settings.results_path / "Anadyr-Schedule.txt").is_file()
    station_rows = (
        (scheduling_settings.statistics_path / "StationTransactions.csv").read_text(encoding="utf-8").splitlines()
    )
    assert station_rows[1] == "0, 0, 2027-06-01 01:00:00.000, 2027-06-01 01:00:59.999, 59999"
    assert len(station_rows) == 5


def test_job_execute_maps_missing_input_directory_to_load_error(scheduling_settings: AppSettings) -> None:
    result = _build_job(scheduling_settings).job_execute(job_name="schedule")

    assert result.status == "failed"
    assert result.error_code == "SCHEDULE_LOAD_ERROR"
    assert result.diagnostics[-1]["details"]["error_type"] == "ScheduleLoadError"


def test_job_execute_maps_malformed_report_to_parse_error(
    scheduling_settings: AppSettings,
    write_access_report,
) -> None:
    _write_inputs(scheduling_settings, write_access_report)
    broken_report = scheduling_settings.connection_schedules_path / "Facility-Broken.txt"
    broken_report.write_text(
        "Broken-To-SatA\n-------------------------\n\n  heading\n  ------\nnot a data row\n",
        encoding="utf-8",
    )

    result = _build_job(scheduling_settings).job_execute(job_name="schedule")

    assert result.status == "failed"
    assert result.error_code == "SCHEDULE_PARSE_ERROR"
    assert str(broken_report.resolve()) in result.diagnostics[-1]["details"]["error_message"]


def test_job_execute_rejects_unsupported_job_name(scheduling_settings: AppSettings) -> None:
    job = _build_job(scheduling_settings)

    assert job.job_supported_names() == ("schedule",)
    with pytest.raises(ValueError, match="unsupported job_name"):
        job.job_execute(job_name="reprocess")
