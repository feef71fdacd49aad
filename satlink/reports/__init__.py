"""Report layer package for schedule and statistics output files."""

from .writers import STATION_SCHEDULE_HEADER, STATION_SCHEDULE_RULE, ReportWriter, ReportWriterConfig

__all__ = ["STATION_SCHEDULE_HEADER", "STATION_SCHEDULE_RULE", "ReportWriter", "ReportWriterConfig"]
