"""FIFO downlink resolution primitives.

Connection windows are served strictly in start order. Each window is granted
to its satellite as soon as both the station and the satellite are free, for as
long as the satellite has stored imaging data left to transmit.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from satlink.domain import (
    SHOOTING_STATION_ID,
    ConnectionSchedule,
    ConnectionWindow,
    FlybySchedule,
    FlybyWindow,
    SatelliteParams,
    SatelliteTransaction,
    SkipRecord,
    SkipType,
    StationTransaction,
)


@dataclass(frozen=True)
class DownlinkResolutionRequest:
    """Input contract for one downlink plan computation.

    Attributes:
        connection_schedule: Station visibility windows.
        flyby_schedule: Imaging windows on the same epoch and satellite index.
        satellite_params: Per-satellite parameters ordered by satellite id.
        time_step: Quantization step in milliseconds.
    """

    connection_schedule: ConnectionSchedule
    flyby_schedule: FlybySchedule
    satellite_params: tuple[SatelliteParams, ...]
    time_step: int


@dataclass(frozen=True)
class DownlinkResolutionResult:
    """Output payload for downlink plan computation.

    Attributes:
        connection_windows: Input connection windows sorted by start and stop.
        flyby_windows: Input flyby windows sorted by satellite and start.
        quantized_windows: Windows after splitting into time-step chunks.
        station_transactions: Downlink intervals per station id.
        satellite_transactions: Shooting and downlink intervals per satellite id.
        skip_records: Windows rejected during resolution, in processing order.
    """

    connection_windows: tuple[ConnectionWindow, ...]
    flyby_windows: tuple[FlybyWindow, ...]
    quantized_windows: tuple[ConnectionWindow, ...]
    station_transactions: tuple[tuple[StationTransaction, ...], ...]
    satellite_transactions: tuple[tuple[SatelliteTransaction, ...], ...]
    skip_records: tuple[SkipRecord, ...]


@dataclass
class _TimelineInterval:
    """Mutable satellite timeline interval used during resolution."""

    station_id: int
    start_time: int
    stop_time: int


def fifo_resolve_downlinks(request: DownlinkResolutionRequest) -> DownlinkResolutionResult:
    """Compute the FIFO downlink plan for all stations and satellites.

    Args:
        request: Resolution request.

    Returns:
        DownlinkResolutionResult: Deterministic station and satellite timelines.

    Raises:
        ValueError: Raised when request values are inconsistent.
    """

    if request is None:
        raise ValueError("request must not be None")
    if request.time_step <= 0:
        raise ValueError("request.time_step must be positive")

    station_count = len(request.connection_schedule.station_names)
    satellite_count = len(request.connection_schedule.satellite_names)
    if len(request.satellite_params) < satellite_count:
        raise ValueError("request.satellite_params must cover every satellite")

    connection_windows = fifo_sort_connection_windows(request.connection_schedule.records)
    flyby_windows = tuple(
        sorted(request.flyby_schedule.records, key=lambda window: (window.satellite_id, window.start_time))
    )
    quantized_windows = fifo_quantize_windows(connection_windows, request.time_step)

    station_timelines: list[list[StationTransaction]] = [[] for _ in range(station_count)]
    satellite_timelines: list[list[_TimelineInterval]] = [[] for _ in range(satellite_count)]
    for flyby in flyby_windows:
        if not 0 <= flyby.satellite_id < satellite_count:
            raise ValueError(f"flyby satellite_id={flyby.satellite_id} is outside the connection satellite index")
        satellite_timelines[flyby.satellite_id].append(
            _TimelineInterval(SHOOTING_STATION_ID, flyby.start_time, flyby.stop_time)
        )

    skip_records: list[SkipRecord] = []

    for window in quantized_windows:
        station_timeline = station_timelines[window.station_id]
        satellite_timeline = satellite_timelines[window.satellite_id]
        params = request.satellite_params[window.satellite_id]

        station_free_time = _fifo_station_free_time(station_timeline, window.start_time)
        satellite_free_time = _fifo_satellite_free_time(satellite_timeline, window.start_time)
        current_time = max(station_free_time, satellite_free_time, window.start_time)

        if window.stop_time <= current_time:
            if window.stop_time <= station_free_time:
                skip_records.append(_fifo_skip(SkipType.STATION_BUSY, window))
            if window.stop_time <= satellite_free_time:
                skip_records.append(_fifo_skip(SkipType.SATELLITE_BUSY, window))
            continue

        stored_amount = fifo_stored_amount(
            satellite_timeline,
            current_time,
            params.transmit_ratio,
            params.max_time_amount,
        )
        upload_length = min(window.stop_time - current_time, stored_amount * params.transmit_ratio)
        if upload_length <= 0:
            skip_records.append(_fifo_skip(SkipType.SATELLITE_MEMORY_EMPTY, window))
            continue

        upload_stop_time = current_time + upload_length
        station_timeline.append(StationTransaction(window.satellite_id, current_time, upload_stop_time))
        _fifo_insert_downlink(satellite_timeline, window.station_id, current_time, upload_stop_time)

    return DownlinkResolutionResult(
        connection_windows=connection_windows,
        flyby_windows=flyby_windows,
        quantized_windows=quantized_windows,
        station_transactions=tuple(tuple(timeline) for timeline in station_timelines),
        satellite_transactions=tuple(
            tuple(
                SatelliteTransaction(interval.station_id, interval.start_time, interval.stop_time)
                for interval in timeline
            )
            for timeline in satellite_timelines
        ),
        skip_records=tuple(skip_records),
    )


def fifo_sort_connection_windows(windows: Sequence[ConnectionWindow]) -> tuple[ConnectionWindow, ...]:
    """Sort connection windows by start, then stop, keeping input order for ties."""

    return tuple(sorted(windows, key=lambda window: (window.start_time, window.stop_time)))


def fifo_quantize_windows(windows: Sequence[ConnectionWindow], time_step: int) -> tuple[ConnectionWindow, ...]:
    """Split long connection windows into time-step chunks.

    Windows shorter than two steps are kept whole. Longer windows are cut into
    `[t, t + time_step - 1]` chunks while more than two steps remain, and the
    remainder forms one final chunk ending at the window's stop time.

    Args:
        windows: Connection windows.
        time_step: Chunk length in milliseconds.

    Returns:
        tuple[ConnectionWindow, ...]: Chunks sorted by start and stop.
    """

    chunks: list[ConnectionWindow] = []
    for window in windows:
        duration = window.stop_time - window.start_time
        if duration < 2 * time_step:
            chunks.append(window)
            continue

        chunk_start = window.start_time
        while duration > 2 * time_step:
            chunks.append(
                ConnectionWindow(window.station_id, window.satellite_id, chunk_start, chunk_start + time_step - 1)
            )
            chunk_start += time_step
            duration -= time_step
        chunks.append(ConnectionWindow(window.station_id, window.satellite_id, chunk_start, window.stop_time))

    return fifo_sort_connection_windows(chunks)


def fifo_stored_amount(
    satellite_timeline: Sequence[_TimelineInterval | SatelliteTransaction],
    current_time: int,
    transmit_ratio: int,
    max_time_amount: int,
) -> int:
    """Compute stored imaging data, in shooting milliseconds, at `current_time`.

    Shooting adds its elapsed length capped at capacity. Downlink removes its
    elapsed length divided by the transmit ratio. Intervals starting at or after
    `current_time` are ignored.

    Args:
        satellite_timeline: Satellite intervals ordered by start time.
        current_time: Evaluation instant.
        transmit_ratio: Downlink milliseconds per stored shooting millisecond.
        max_time_amount: Storage capacity.

    Returns:
        int: Stored amount; may be negative when rounding overshoots.
    """

    stored_amount = 0
    for interval in satellite_timeline:
        if interval.start_time >= current_time:
            break
        elapsed_stop = min(interval.stop_time, current_time)
        if interval.station_id < 0:
            stored_amount = min(stored_amount + elapsed_stop - interval.start_time, max_time_amount)
        else:
            stored_amount -= (elapsed_stop - interval.start_time) // transmit_ratio
    return stored_amount


def _fifo_station_free_time(station_timeline: Sequence[StationTransaction], minimum_time: int) -> int:
    if not station_timeline:
        return minimum_time
    return station_timeline[-1].stop_time + 1


def _fifo_satellite_free_time(satellite_timeline: Sequence[_TimelineInterval], minimum_time: int) -> int:
    for interval in reversed(satellite_timeline):
        if interval.station_id >= 0:
            return interval.stop_time + 1
    return minimum_time


def _fifo_insert_downlink(
    satellite_timeline: list[_TimelineInterval],
    station_id: int,
    start_time: int,
    stop_time: int,
) -> None:
    """Insert a downlink interval, carving it out of overlapping shooting.

    Intervals fully covered by the downlink are removed, intervals overlapping
    one edge are trimmed, and an interval spanning the downlink is split around
    it. The timeline stays ordered by start time.
    """

    satellite_timeline[:] = [
        interval
        for interval in satellite_timeline
        if not (interval.start_time >= start_time and interval.stop_time <= stop_time)
    ]

    insert_index = -1
    split_interval: _TimelineInterval | None = None
    for index, interval in enumerate(satellite_timeline):
        if interval.start_time < start_time and start_time <= interval.stop_time <= stop_time:
            interval.stop_time = start_time - 1
            insert_index = index + 1
        if start_time <= interval.start_time <= stop_time and interval.stop_time > stop_time:
            interval.start_time = stop_time + 1
        if interval.start_time < start_time and interval.stop_time > stop_time:
            split_interval = _TimelineInterval(interval.station_id, stop_time + 1, interval.stop_time)
            interval.stop_time = start_time - 1
            insert_index = index + 1
        if interval.start_time > stop_time:
            if insert_index == -1:
                insert_index = index
            break

    downlink = _TimelineInterval(station_id, start_time, stop_time)
    if insert_index == -1:
        satellite_timeline.append(downlink)
        insert_index = len(satellite_timeline) - 1
    else:
        satellite_timeline.insert(insert_index, downlink)

    if split_interval is not None:
        satellite_timeline.insert(insert_index + 1, split_interval)


def _fifo_skip(skip_type: SkipType, window: ConnectionWindow) -> SkipRecord:
    return SkipRecord(
        skip_type=skip_type,
        station_id=window.station_id,
        satellite_id=window.satellite_id,
        start_time=window.start_time,
        stop_time=window.stop_time,
    )
