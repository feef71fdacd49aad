"""Schedule loading from access report directories into indexed schedules."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from pathlib import Path

from satlink.config import AppSettings
from satlink.domain import (
    ConnectionReportRecord,
    ConnectionSchedule,
    ConnectionWindow,
    FlybyReportRecord,
    FlybySchedule,
    FlybyWindow,
    SatelliteParams,
    domain_day_start,
    domain_offset_ms,
    domain_report_parse_connection_file,
    domain_report_parse_flyby_file,
)
from satlink.errors import ScheduleLoadError

logger = logging.getLogger(__name__)


def loader_list_report_files(directory_path: Path, file_filter: Callable[[Path], bool]) -> list[Path]:
    """List regular files in a directory accepted by a filter, sorted by name.

    Args:
        directory_path: Directory to scan (non-recursive).
        file_filter: Predicate selecting report files.

    Returns:
        list[Path]: Accepted files in deterministic name order.

    Raises:
        ScheduleLoadError: Raised when the directory is missing or unreadable.
    """

    if not directory_path.is_dir():
        raise ScheduleLoadError(f"Schedule directory not found: {directory_path}")
    try:
        candidates = sorted(directory_path.iterdir())
    except OSError as error:
        raise ScheduleLoadError(f"Failed to list schedule directory: {directory_path}") from error
    return [candidate for candidate in candidates if candidate.is_file() and file_filter(candidate)]


def loader_load_connection_records(directory_path: Path, settings: AppSettings) -> list[ConnectionReportRecord]:
    """Parse every connection report in a directory.

    Raises:
        ScheduleLoadError: Raised when the directory cannot be listed.
        ScheduleParseError: Raised when a report file is malformed.
    """

    prefix = settings.connection_schedule_filename_start
    records: list[ConnectionReportRecord] = []
    for report_file in loader_list_report_files(directory_path, lambda path: path.name.startswith(prefix)):
        file_records = domain_report_parse_connection_file(report_file, settings.report_timestamp_format)
        logger.debug("Parsed %d connection rows from %s", len(file_records), report_file.name)
        records.extend(file_records)
    return records


def loader_load_flyby_records(directory_path: Path, settings: AppSettings) -> list[FlybyReportRecord]:
    """Parse every flyby report in a directory.

    Raises:
        ScheduleLoadError: Raised when the directory cannot be listed.
        ScheduleParseError: Raised when a report file is malformed.
    """

    prefix = settings.flyby_schedule_filename_start
    records: list[FlybyReportRecord] = []
    for report_file in loader_list_report_files(directory_path, lambda path: path.name.startswith(prefix)):
        file_records = domain_report_parse_flyby_file(report_file, settings.report_timestamp_format)
        logger.debug("Parsed %d flyby rows from %s", len(file_records), report_file.name)
        records.extend(file_records)
    return records


def loader_build_connection_schedule(records: Sequence[ConnectionReportRecord]) -> ConnectionSchedule:
    """Index connection records by sorted station and satellite names.

    The schedule epoch is midnight of the day holding the earliest start time.

    Args:
        records: Parsed connection records.

    Returns:
        ConnectionSchedule: Indexed schedule in millisecond offsets.

    Raises:
        ScheduleLoadError: Raised when no connection records are available.
    """

    if not records:
        raise ScheduleLoadError("No connection schedule records found")

    station_names = tuple(sorted({record.station_name for record in records}))
    satellite_names = tuple(sorted({record.satellite_name for record in records}))
    station_index = {name: index for index, name in enumerate(station_names)}
    satellite_index = {name: index for index, name in enumerate(satellite_names)}
    start_instant = domain_day_start(min(record.start_time for record in records))

    windows = tuple(
        ConnectionWindow(
            station_id=station_index[record.station_name],
            satellite_id=satellite_index[record.satellite_name],
            start_time=domain_offset_ms(start_instant, record.start_time),
            stop_time=domain_offset_ms(start_instant, record.stop_time),
        )
        for record in records
    )
    return ConnectionSchedule(
        start_instant=start_instant,
        station_names=station_names,
        satellite_names=satellite_names,
        records=windows,
    )


def loader_build_flyby_schedule(
    records: Sequence[FlybyReportRecord],
    connection_schedule: ConnectionSchedule,
) -> FlybySchedule:
    """Index flyby records onto the connection schedule epoch and satellite ids.

    Records for satellites that never appear in the connection schedule cannot
    be downlinked and are dropped.

    Args:
        records: Parsed flyby records.
        connection_schedule: Connection schedule providing epoch and satellite index.

    Returns:
        FlybySchedule: Flyby windows sharing the connection schedule time base.
    """

    satellite_index = {name: index for index, name in enumerate(connection_schedule.satellite_names)}
    start_instant = connection_schedule.start_instant

    windows: list[FlybyWindow] = []
    unknown_satellites: set[str] = set()
    for record in records:
        satellite_id = satellite_index.get(record.satellite_name)
        if satellite_id is None:
            unknown_satellites.add(record.satellite_name)
            continue
        windows.append(
            FlybyWindow(
                satellite_id=satellite_id,
                start_time=domain_offset_ms(start_instant, record.start_time),
                stop_time=domain_offset_ms(start_instant, record.stop_time),
            )
        )

    if unknown_satellites:
        logger.warning(
            "Dropped flyby windows for %d satellites without station visibility: %s",
            len(unknown_satellites),
            ", ".join(sorted(unknown_satellites)),
        )

    return FlybySchedule(
        start_instant=start_instant,
        satellite_names=connection_schedule.satellite_names,
        records=tuple(windows),
    )


def loader_build_satellite_params(
    satellite_names: Sequence[str],
    settings: AppSettings,
) -> tuple[SatelliteParams, ...]:
    """Assign storage and downlink profiles to satellites by id.

    Args:
        satellite_names: Satellite names ordered by id.
        settings: Runtime settings holding the primary and secondary profiles.

    Returns:
        tuple[SatelliteParams, ...]: Parameters ordered by satellite id.
    """

    primary = SatelliteParams(
        max_time_amount=settings.primary_max_time_amount,
        transmit_ratio=settings.primary_transmit_ratio,
        bandwidth=settings.primary_bandwidth,
    )
    secondary = SatelliteParams(
        max_time_amount=settings.secondary_max_time_amount,
        transmit_ratio=settings.secondary_transmit_ratio,
        bandwidth=settings.secondary_bandwidth,
    )
    return tuple(
        primary if satellite_id < settings.primary_fleet_size else secondary
        for satellite_id in range(len(satellite_names))
    )
