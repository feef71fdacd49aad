"""Loader layer package for report discovery and schedule indexing."""

from .schedules import (
    loader_build_connection_schedule,
    loader_build_flyby_schedule,
    loader_build_satellite_params,
    loader_list_report_files,
    loader_load_connection_records,
    loader_load_flyby_records,
)

__all__ = [
    "loader_build_connection_schedule",
    "loader_build_flyby_schedule",
    "loader_build_satellite_params",
    "loader_list_report_files",
    "loader_load_connection_records",
    "loader_load_flyby_records",
]
