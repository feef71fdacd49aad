"""Derived station and satellite statistics for a downlink plan."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from satlink.domain import ConnectionWindow, SatelliteParams, SatelliteTransaction, StationTransaction


@dataclass(frozen=True)
class StationStats:
    """Per-station utilisation summary.

    Attributes:
        station_id: Station id.
        receive_time: Total allocated downlink milliseconds.
        time_limit: Length of the union of the station's visibility windows.
        satellite_count: Number of distinct satellites served.
    """

    station_id: int
    receive_time: int
    time_limit: int
    satellite_count: int


@dataclass(frozen=True)
class SatelliteMemoryTrace:
    """Memory state around one satellite timeline interval.

    Attributes:
        transaction: Timeline interval.
        memory_on_start: Stored amount before the interval.
        memory_on_stop: Stored amount after the interval, clamped to capacity.
        sent_amount: Stored amount removed by a downlink (0 for shooting).
        idle_time: Shooting milliseconds lost because memory was full.
    """

    transaction: SatelliteTransaction
    memory_on_start: int
    memory_on_stop: int
    sent_amount: int
    idle_time: int


def statistics_station_time_limits(
    connection_windows: Sequence[ConnectionWindow],
    station_count: int,
) -> tuple[int, ...]:
    """Measure each station's total visibility as the union of its windows.

    Args:
        connection_windows: Connection windows of all stations.
        station_count: Number of stations.

    Returns:
        tuple[int, ...]: Union length in milliseconds per station id.
    """

    limits = [0] * station_count
    windows_by_station: list[list[ConnectionWindow]] = [[] for _ in range(station_count)]
    for window in connection_windows:
        windows_by_station[window.station_id].append(window)

    for station_id, windows in enumerate(windows_by_station):
        merged_start: int | None = None
        merged_stop = 0
        for window in sorted(windows, key=lambda item: (item.start_time, item.stop_time)):
            if merged_start is None:
                merged_start, merged_stop = window.start_time, window.stop_time
                continue
            if window.start_time > merged_stop:
                limits[station_id] += merged_stop - merged_start
                merged_start = window.start_time
            merged_stop = max(merged_stop, window.stop_time)
        if merged_start is not None:
            limits[station_id] += merged_stop - merged_start
    return tuple(limits)


def statistics_station_stats(
    station_transactions: Sequence[Sequence[StationTransaction]],
    connection_windows: Sequence[ConnectionWindow],
) -> tuple[StationStats, ...]:
    """Summarise receive time, visibility limit, and satellites served per station."""

    time_limits = statistics_station_time_limits(connection_windows, len(station_transactions))
    return tuple(
        StationStats(
            station_id=station_id,
            receive_time=sum(transaction.duration for transaction in transactions),
            time_limit=time_limits[station_id],
            satellite_count=len({transaction.satellite_id for transaction in transactions}),
        )
        for station_id, transactions in enumerate(station_transactions)
    )


def statistics_station_received_amounts(
    station_transactions: Sequence[Sequence[StationTransaction]],
    satellite_params: Sequence[SatelliteParams],
) -> tuple[float, ...]:
    """Return megabytes received per station id."""

    return tuple(
        sum(
            transaction.duration * 0.001 * satellite_params[transaction.satellite_id].bandwidth
            for transaction in transactions
        )
        for transactions in station_transactions
    )


def statistics_satellite_memory_trace(
    transactions: Sequence[SatelliteTransaction],
    params: SatelliteParams,
) -> tuple[SatelliteMemoryTrace, ...]:
    """Replay one satellite timeline and record memory around each interval.

    Args:
        transactions: Satellite timeline ordered by start time.
        params: Satellite parameters.

    Returns:
        tuple[SatelliteMemoryTrace, ...]: One trace entry per interval.
    """

    trace: list[SatelliteMemoryTrace] = []
    memory_on_stop = 0
    for transaction in transactions:
        idle_time = 0
        memory_on_start = memory_on_stop
        if transaction.is_shooting:
            sent_amount = 0
            memory_on_stop += transaction.duration
        else:
            sent_amount = transaction.duration // params.transmit_ratio
            memory_on_stop -= sent_amount
        # integer division leaves at most one unit of overshoot
        if memory_on_stop == -1:
            memory_on_stop = 0
        if memory_on_stop > params.max_time_amount:
            idle_time = memory_on_stop - params.max_time_amount
            memory_on_stop = params.max_time_amount
        trace.append(
            SatelliteMemoryTrace(
                transaction=transaction,
                memory_on_start=memory_on_start,
                memory_on_stop=memory_on_stop,
                sent_amount=sent_amount,
                idle_time=idle_time,
            )
        )
    return tuple(trace)
