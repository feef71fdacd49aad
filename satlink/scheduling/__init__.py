"""Scheduling layer package for FIFO downlink resolution and plan checks."""

from .fifo_engine import (
    DownlinkResolutionRequest,
    DownlinkResolutionResult,
    fifo_quantize_windows,
    fifo_resolve_downlinks,
    fifo_sort_connection_windows,
    fifo_stored_amount,
)
from .integrity import (
    integrity_check_input_duplicates,
    integrity_check_satellite_transactions,
    integrity_check_shooting_transactions,
    integrity_check_station_transactions,
    integrity_check_timeline_continuity,
    integrity_verify_resolution,
)
from .statistics import (
    SatelliteMemoryTrace,
    StationStats,
    statistics_satellite_memory_trace,
    statistics_station_received_amounts,
    statistics_station_stats,
    statistics_station_time_limits,
)

__all__ = [
    "DownlinkResolutionRequest",
    "DownlinkResolutionResult",
    "fifo_quantize_windows",
    "fifo_resolve_downlinks",
    "fifo_sort_connection_windows",
    "fifo_stored_amount",
    "integrity_check_input_duplicates",
    "integrity_check_satellite_transactions",
    "integrity_check_shooting_transactions",
    "integrity_check_station_transactions",
    "integrity_check_timeline_continuity",
    "integrity_verify_resolution",
    "SatelliteMemoryTrace",
    "StationStats",
    "statistics_satellite_memory_trace",
    "statistics_station_received_amounts",
    "statistics_station_stats",
    "statistics_station_time_limits",
]
