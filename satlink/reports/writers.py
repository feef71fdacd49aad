"""Schedule and statistics report writers.

Statistics files are comma-and-space separated CSV written under the
statistics directory. Per-station schedules are fixed-width text files written
under the results directory.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from satlink.domain import (
    ConnectionSchedule,
    SatelliteParams,
    StationTransaction,
    domain_format_timestamp,
    domain_instant_at,
)
from satlink.scheduling import (
    DownlinkResolutionResult,
    statistics_satellite_memory_trace,
    statistics_station_received_amounts,
    statistics_station_stats,
)

logger = logging.getLogger(__name__)

STATION_SCHEDULE_RULE = "-------------------------"
STATION_SCHEDULE_HEADER = "Start Time (UTCG) * Stop Time (UTCG) * Duration (sec) * Satname * Data (Mbytes)"


@dataclass(frozen=True)
class ReportWriterConfig:
    """Output locations and timestamp formats for report writing.

    Attributes:
        results_path: Directory for per-station schedule text files.
        statistics_path: Directory for CSV statistics.
        report_timestamp_format: Timestamp pattern for station schedules.
        statistics_timestamp_format: Timestamp pattern for CSV statistics.
    """

    results_path: Path
    statistics_path: Path
    report_timestamp_format: str
    statistics_timestamp_format: str


class ReportWriter:
    """Write every schedule and statistics report for one resolved plan."""

    def __init__(
        self,
        config: ReportWriterConfig,
        connection_schedule: ConnectionSchedule,
        satellite_params: tuple[SatelliteParams, ...],
    ):
        self._config = config
        self._schedule = connection_schedule
        self._satellite_params = satellite_params

    def reports_write_all(self, result: DownlinkResolutionResult) -> list[Path]:
        """Write statistics and station schedules.

        Args:
            result: Resolver output.

        Returns:
            list[Path]: Written file paths in write order.

        Raises:
            OSError: Raised when an output directory or file cannot be written.
        """

        written_paths = [
            self.reports_write_station_stats(result),
            self.reports_write_stations_schedules(result),
            self.reports_write_shooting_schedules(result),
            self.reports_write_station_transactions(result),
            self.reports_write_satellite_transactions(result),
            self.reports_write_skip_window_stats(result),
            self.reports_write_station_received_amounts(result),
        ]
        written_paths.extend(self.reports_write_station_schedules(result))
        logger.info("Wrote %d report files.", len(written_paths))
        return written_paths

    def reports_write_station_stats(self, result: DownlinkResolutionResult) -> Path:
        stats = statistics_station_stats(result.station_transactions, result.connection_windows)
        return self._reports_write_statistics_file(
            "StationStats.csv",
            "StationId, ReceiveTime, TimeLimit, SatellitesNumber",
            (
                f"{item.station_id}, {item.receive_time}, {item.time_limit}, {item.satellite_count}"
                for item in stats
            ),
        )

    def reports_write_stations_schedules(self, result: DownlinkResolutionResult) -> Path:
        return self._reports_write_statistics_file(
            "StationsSchedules.csv",
            "StationId, SatelliteId, StartTime(UTC), StopTime(UTC), Duration(ms)",
            (
                f"{window.station_id}, {window.satellite_id}, "
                f"{self._reports_statistics_time(window.start_time)}, "
                f"{self._reports_statistics_time(window.stop_time)}, "
                f"{window.stop_time - window.start_time}"
                for window in result.connection_windows
            ),
        )

    def reports_write_shooting_schedules(self, result: DownlinkResolutionResult) -> Path:
        return self._reports_write_statistics_file(
            "ShootingSchedules.csv",
            "SatelliteId, StartTime(UTC), StopTime(UTC), Duration(ms)",
            (
                f"{window.satellite_id}, "
                f"{self._reports_statistics_time(window.start_time)}, "
                f"{self._reports_statistics_time(window.stop_time)}, "
                f"{window.stop_time - window.start_time}"
                for window in result.flyby_windows
            ),
        )

    def reports_write_station_transactions(self, result: DownlinkResolutionResult) -> Path:
        return self._reports_write_statistics_file(
            "StationTransactions.csv",
            "StationId, SatelliteId, StartTime(UTC), StopTime(UTC), Duration(ms)",
            (
                f"{station_id}, {transaction.satellite_id}, "
                f"{self._reports_statistics_time(transaction.start_time)}, "
                f"{self._reports_statistics_time(transaction.stop_time)}, "
                f"{transaction.duration}"
                for station_id, transactions in enumerate(result.station_transactions)
                for transaction in transactions
            ),
        )

    def reports_write_satellite_transactions(self, result: DownlinkResolutionResult) -> Path:
        rows: list[str] = []
        for satellite_id, transactions in enumerate(result.satellite_transactions):
            trace = statistics_satellite_memory_trace(transactions, self._satellite_params[satellite_id])
            for entry in trace:
                transaction = entry.transaction
                rows.append(
                    f"{transaction.station_id}, {satellite_id}, "
                    f"{self._reports_statistics_time(transaction.start_time)}, "
                    f"{self._reports_statistics_time(transaction.stop_time)}, "
                    f"{transaction.duration}, {entry.memory_on_start}, {entry.memory_on_stop}, "
                    f"{entry.sent_amount}, {entry.idle_time}"
                )
        return self._reports_write_statistics_file(
            "SatelliteTransactions.csv",
            "StationId, SatelliteId, StartTime(UTC), StopTime(UTC), Duration(ms), "
            "MemoryOnStart(ms), MemoryOnStop(ms), SentAmount(ms), IdleTime(ms)",
            rows,
        )

    def reports_write_skip_window_stats(self, result: DownlinkResolutionResult) -> Path:
        return self._reports_write_statistics_file(
            "SkipWindowStats.csv",
            "SkipType, StationId, SatelliteId, StartTime(UTC), StopTime(UTC), Duration(ms)",
            (
                f"{record.skip_type.value}, {record.station_id}, {record.satellite_id}, "
                f"{self._reports_statistics_time(record.start_time)}, "
                f"{self._reports_statistics_time(record.stop_time)}, "
                f"{record.stop_time - record.start_time}"
                for record in result.skip_records
            ),
        )

    def reports_write_station_received_amounts(self, result: DownlinkResolutionResult) -> Path:
        amounts = statistics_station_received_amounts(result.station_transactions, self._satellite_params)
        return self._reports_write_statistics_file(
            "StationDataAmountReceived.csv",
            "Station name, Received amount(MB)",
            (
                f"{self._schedule.station_names[station_id]}, {amount:10.3f}"
                for station_id, amount in enumerate(amounts)
            ),
        )

    def reports_write_station_schedules(self, result: DownlinkResolutionResult) -> list[Path]:
        """Write one fixed-width schedule file per station."""

        return [
            self._reports_write_station_schedule(self._schedule.station_names[station_id], transactions)
            for station_id, transactions in enumerate(result.station_transactions)
        ]

    def _reports_write_station_schedule(
        self,
        station_name: str,
        transactions: Iterable[StationTransaction],
    ) -> Path:
        lines = [station_name, STATION_SCHEDULE_RULE, STATION_SCHEDULE_HEADER]
        for transaction in transactions:
            duration_seconds = transaction.duration * 0.001
            satellite_id = transaction.satellite_id
            data_amount = self._satellite_params[satellite_id].bandwidth * duration_seconds
            lines.append(
                "%30s%30s%30.3f%30s%30.3f"
                % (
                    self._reports_result_time(transaction.start_time),
                    self._reports_result_time(transaction.stop_time),
                    duration_seconds,
                    self._schedule.satellite_names[satellite_id],
                    data_amount,
                )
            )
        return _reports_write_lines(self._config.results_path / f"{station_name}-Schedule.txt", lines)

    def _reports_write_statistics_file(self, file_name: str, header: str, rows: Iterable[str]) -> Path:
        return _reports_write_lines(self._config.statistics_path / file_name, [header, *rows])

    def _reports_statistics_time(self, offset_ms: int) -> str:
        instant = domain_instant_at(self._schedule.start_instant, offset_ms)
        return domain_format_timestamp(instant, self._config.statistics_timestamp_format)

    def _reports_result_time(self, offset_ms: int) -> str:
        instant = domain_instant_at(self._schedule.start_instant, offset_ms)
        return domain_format_timestamp(instant, self._config.report_timestamp_format)


def _reports_write_lines(output_path: Path, lines: Iterable[str]) -> Path:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with output_path.open("w", encoding="utf-8", newline="\n") as output_file:
        for line in lines:
            output_file.write(line)
            output_file.write("\n")
    return output_path
