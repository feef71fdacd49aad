"""Typed domain models shared across loading, scheduling, and reporting layers.

All scheduling times are integer milliseconds relative to a schedule epoch.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

SHOOTING_STATION_ID = -1


class SkipType(Enum):
    """Reason a connection window was not used for downlink."""

    STATION_BUSY = "STATION_BUSY"
    SATELLITE_BUSY = "SATELLITE_BUSY"
    SATELLITE_MEMORY_EMPTY = "SATELLITE_MEMORY_EMPTY"


@dataclass(frozen=True)
class ConnectionReportRecord:
    """One parsed row of a station-to-satellite access report.

    Attributes:
        station_name: Ground station name from the block header.
        satellite_name: Satellite name from the block header.
        access: Access number within the block.
        start_time: Access start timestamp (naive UTC).
        stop_time: Access stop timestamp (naive UTC).
        duration: Reported access duration in seconds.
    """

    station_name: str
    satellite_name: str
    access: int
    start_time: datetime
    stop_time: datetime
    duration: float


@dataclass(frozen=True)
class FlybyReportRecord:
    """One parsed row of an imaging-area access report.

    Attributes:
        satellite_name: Satellite name from the block header.
        access: Access number within the block.
        start_time: Flyby start timestamp (naive UTC).
        stop_time: Flyby stop timestamp (naive UTC).
        duration: Reported flyby duration in seconds.
    """

    satellite_name: str
    access: int
    start_time: datetime
    stop_time: datetime
    duration: float


@dataclass(frozen=True)
class ConnectionWindow:
    """Interval during which a satellite is visible from a station."""

    station_id: int
    satellite_id: int
    start_time: int
    stop_time: int


@dataclass(frozen=True)
class FlybyWindow:
    """Interval during which a satellite records imaging data."""

    satellite_id: int
    start_time: int
    stop_time: int


@dataclass(frozen=True)
class ConnectionSchedule:
    """Indexed connection windows sharing one epoch.

    Attributes:
        start_instant: Schedule epoch (midnight of the earliest window start).
        station_names: Station names ordered by station id.
        satellite_names: Satellite names ordered by satellite id.
        records: Connection windows in millisecond offsets from the epoch.
    """

    start_instant: datetime
    station_names: tuple[str, ...]
    satellite_names: tuple[str, ...]
    records: tuple[ConnectionWindow, ...]


@dataclass(frozen=True)
class FlybySchedule:
    """Indexed flyby windows sharing the connection schedule epoch.

    Attributes:
        start_instant: Schedule epoch.
        satellite_names: Satellite names ordered by satellite id.
        records: Flyby windows in millisecond offsets from the epoch.
    """

    start_instant: datetime
    satellite_names: tuple[str, ...]
    records: tuple[FlybyWindow, ...]


@dataclass(frozen=True)
class SatelliteParams:
    """On-board storage and downlink parameters for one satellite.

    Attributes:
        max_time_amount: Memory capacity expressed in milliseconds of shooting.
        transmit_ratio: Milliseconds of downlink needed per millisecond of stored shooting.
        bandwidth: Downlink bandwidth in MB/s.
    """

    max_time_amount: int
    transmit_ratio: int
    bandwidth: int


@dataclass(frozen=True)
class StationTransaction:
    """Downlink interval allocated on a station timeline."""

    satellite_id: int
    start_time: int
    stop_time: int

    @property
    def duration(self) -> int:
        return self.stop_time - self.start_time


@dataclass(frozen=True)
class SatelliteTransaction:
    """Shooting or downlink interval on a satellite timeline.

    Attributes:
        station_id: Receiving station id, or `SHOOTING_STATION_ID` for shooting.
        start_time: Interval start offset.
        stop_time: Interval stop offset.
    """

    station_id: int
    start_time: int
    stop_time: int

    @property
    def is_shooting(self) -> bool:
        return self.station_id < 0

    @property
    def duration(self) -> int:
        return self.stop_time - self.start_time


@dataclass(frozen=True)
class SkipRecord:
    """Connection window rejected by the resolver and the reason."""

    skip_type: SkipType
    station_id: int
    satellite_id: int
    start_time: int
    stop_time: int
