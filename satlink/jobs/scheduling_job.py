"""Job-layer downlink scheduling orchestrator with stage timeline diagnostics."""

from __future__ import annotations

import logging
import traceback
from dataclasses import dataclass
from pathlib import Path

from satlink.config import AppSettings
from satlink.domain import domain_build_stage_event
from satlink.errors import SatLinkError
from satlink.loaders import (
    loader_build_connection_schedule,
    loader_build_flyby_schedule,
    loader_build_satellite_params,
    loader_load_connection_records,
    loader_load_flyby_records,
)
from satlink.reports import ReportWriter, ReportWriterConfig
from satlink.scheduling import DownlinkResolutionRequest, fifo_resolve_downlinks, integrity_verify_resolution

from .interfaces import JobExecutionResult, JobOrchestratorPort

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SchedulingJobConfig:
    """Configuration values for one scheduling run.

    Attributes:
        connection_schedules_path: Directory holding connection reports.
        flyby_schedules_path: Directory holding flyby reports.
        time_step_ms: Quantization step in milliseconds.
        verify_results: Whether plan consistency checks run before reporting.
    """

    connection_schedules_path: Path
    flyby_schedules_path: Path
    time_step_ms: int
    verify_results: bool = True


class DownlinkSchedulingJob(JobOrchestratorPort):
    """Load reports, resolve the FIFO downlink plan, verify it, and write reports."""

    _SCHEDULING_JOB_NAME = "schedule"

    def __init__(self, settings: AppSettings, config: SchedulingJobConfig):
        """Initialize scheduling job dependencies.

        Args:
            settings: Runtime settings for parsing formats, satellite profiles, and outputs.
            config: Scheduling run configuration.

        Raises:
            ValueError: Raised when config values are invalid.
        """

        if settings is None:
            raise ValueError("settings must not be None")
        if config.time_step_ms <= 0:
            raise ValueError("config.time_step_ms must be positive")

        self._settings = settings
        self._config = config

    def job_supported_names(self) -> tuple[str, ...]:
        return (self._SCHEDULING_JOB_NAME,)

    def job_execute(self, job_name: str) -> JobExecutionResult:
        """Execute the scheduling workflow.

        Args:
            job_name: Name of job to execute.

        Returns:
            JobExecutionResult: Final status with stage timeline diagnostics.

        Raises:
            ValueError: Raised when job name is unsupported.
        """

        normalized_job_name = job_name.strip()
        if normalized_job_name != self._SCHEDULING_JOB_NAME:
            raise ValueError(f"unsupported job_name={normalized_job_name}")

        timeline: list[dict[str, object]] = [domain_build_stage_event(stage="run", status="started")]

        try:
            timeline.append(domain_build_stage_event(stage="load", status="started"))
            connection_records = loader_load_connection_records(
                self._config.connection_schedules_path,
                self._settings,
            )
            connection_schedule = loader_build_connection_schedule(connection_records)
            flyby_records = loader_load_flyby_records(self._config.flyby_schedules_path, self._settings)
            flyby_schedule = loader_build_flyby_schedule(flyby_records, connection_schedule)
            satellite_params = loader_build_satellite_params(connection_schedule.satellite_names, self._settings)
            timeline.append(
                domain_build_stage_event(
                    stage="load",
                    status="completed",
                    details={
                        "station_count": len(connection_schedule.station_names),
                        "satellite_count": len(connection_schedule.satellite_names),
                        "connection_window_count": len(connection_schedule.records),
                        "flyby_window_count": len(flyby_schedule.records),
                        "start_instant": connection_schedule.start_instant.isoformat(),
                    },
                )
            )
            logger.info("Input schedules loaded.")

            timeline.append(domain_build_stage_event(stage="resolve", status="started"))
            resolution = fifo_resolve_downlinks(
                DownlinkResolutionRequest(
                    connection_schedule=connection_schedule,
                    flyby_schedule=flyby_schedule,
                    satellite_params=satellite_params,
                    time_step=self._config.time_step_ms,
                )
            )
            timeline.append(
                domain_build_stage_event(
                    stage="resolve",
                    status="completed",
                    details={
                        "quantized_window_count": len(resolution.quantized_windows),
                        "station_transaction_count": sum(len(items) for items in resolution.station_transactions),
                        "skip_count": len(resolution.skip_records),
                    },
                )
            )

            if self._config.verify_results:
                timeline.append(domain_build_stage_event(stage="verify", status="started"))
                integrity_verify_resolution(resolution)
                timeline.append(domain_build_stage_event(stage="verify", status="completed"))

            timeline.append(domain_build_stage_event(stage="report", status="started"))
            writer = ReportWriter(
                config=ReportWriterConfig(
                    results_path=self._settings.results_path,
                    statistics_path=self._settings.statistics_path,
                    report_timestamp_format=self._settings.report_timestamp_format,
                    statistics_timestamp_format=self._settings.statistics_timestamp_format,
                ),
                connection_schedule=connection_schedule,
                satellite_params=satellite_params,
            )
            written_paths = writer.reports_write_all(resolution)
            timeline.append(
                domain_build_stage_event(
                    stage="report",
                    status="completed",
                    details={"written_file_count": len(written_paths)},
                )
            )
        except (SatLinkError, OSError, ValueError) as error:
            error_code = self._job_error_code_for_exception(error)
            logger.error("Scheduling run failed with %s: %s", error_code, error)
            timeline.append(
                domain_build_stage_event(
                    stage="run",
                    status="failed",
                    details={
                        "error_code": error_code,
                        "error_type": type(error).__name__,
                        "error_message": str(error),
                        "traceback": traceback.format_exc(),
                    },
                )
            )
            return JobExecutionResult(
                job_name=normalized_job_name,
                status="failed",
                error_code=error_code,
                diagnostics=tuple(timeline),
            )

        timeline.append(domain_build_stage_event(stage="run", status="success"))
        logger.info("Schedule calculation complete.")
        return JobExecutionResult(job_name=normalized_job_name, status="success", diagnostics=tuple(timeline))

    def _job_error_code_for_exception(self, error: Exception) -> str:
        """Map a caught workflow exception to a deterministic error code."""

        if isinstance(error, SatLinkError):
            return error.error_code
        if isinstance(error, OSError):
            return "SCHEDULING_IO_ERROR"
        return "SCHEDULING_CONTRACT_ERROR"
