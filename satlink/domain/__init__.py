"""Domain models, report parsing, and shared helpers."""

from .models import (
    SHOOTING_STATION_ID,
    ConnectionReportRecord,
    ConnectionSchedule,
    ConnectionWindow,
    FlybyReportRecord,
    FlybySchedule,
    FlybyWindow,
    SatelliteParams,
    SatelliteTransaction,
    SkipRecord,
    SkipType,
    StationTransaction,
)
from .report_parsing import (
    ReportParserState,
    domain_report_parse_connection_file,
    domain_report_parse_connection_lines,
    domain_report_parse_flyby_file,
    domain_report_parse_flyby_lines,
)
from .timeline import domain_build_stage_event
from .timestamps import domain_day_start, domain_format_timestamp, domain_instant_at, domain_offset_ms

__all__ = [
    "SHOOTING_STATION_ID",
    "ConnectionReportRecord",
    "ConnectionSchedule",
    "ConnectionWindow",
    "FlybyReportRecord",
    "FlybySchedule",
    "FlybyWindow",
    "SatelliteParams",
    "SatelliteTransaction",
    "SkipRecord",
    "SkipType",
    "StationTransaction",
    "ReportParserState",
    "domain_report_parse_connection_file",
    "domain_report_parse_connection_lines",
    "domain_report_parse_flyby_file",
    "domain_report_parse_flyby_lines",
    "domain_build_stage_event",
    "domain_day_start",
    "domain_format_timestamp",
    "domain_instant_at",
    "domain_offset_ms",
]
