"""Consistency checks over a computed downlink plan."""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Sequence

from satlink.domain import ConnectionWindow, FlybyWindow, SatelliteTransaction, StationTransaction
from satlink.errors import ResultIntegrityError

from .fifo_engine import DownlinkResolutionResult

logger = logging.getLogger(__name__)


def integrity_verify_resolution(result: DownlinkResolutionResult) -> None:
    """Run every plan consistency check.

    Args:
        result: Resolver output including the sorted input windows.

    Returns:
        None: Returns only when all checks pass.

    Raises:
        ResultIntegrityError: Raised on the first violated check.
    """

    integrity_check_input_duplicates(result.connection_windows)
    integrity_check_station_transactions(result.station_transactions, result.connection_windows)
    integrity_check_timeline_continuity(result.station_transactions, timeline_kind="station")
    integrity_check_timeline_continuity(result.satellite_transactions, timeline_kind="satellite")
    integrity_check_shooting_transactions(result.satellite_transactions, result.flyby_windows)
    integrity_check_satellite_transactions(result.satellite_transactions, result.station_transactions)


def integrity_check_input_duplicates(connection_windows: Sequence[ConnectionWindow]) -> None:
    """Reject connection schedules containing the same window twice."""

    seen_windows: set[ConnectionWindow] = set()
    for window in connection_windows:
        if window in seen_windows:
            _integrity_fail(
                "Found doubles in input schedule. "
                f"Station: {window.station_id}, Satellite: {window.satellite_id}, "
                f"StartTime: {window.start_time}, StopTime: {window.stop_time}"
            )
        seen_windows.add(window)


def integrity_check_station_transactions(
    station_transactions: Sequence[Sequence[StationTransaction]],
    connection_windows: Sequence[ConnectionWindow],
) -> None:
    """Require every station transaction to lie inside a matching visibility window."""

    windows_by_pair: dict[tuple[int, int], list[ConnectionWindow]] = defaultdict(list)
    for window in connection_windows:
        windows_by_pair[(window.station_id, window.satellite_id)].append(window)

    for station_id, transactions in enumerate(station_transactions):
        for transaction in transactions:
            candidates = windows_by_pair.get((station_id, transaction.satellite_id), [])
            if not any(
                window.start_time <= transaction.start_time and window.stop_time >= transaction.stop_time
                for window in candidates
            ):
                _integrity_fail(
                    f"Transaction mismatched schedule! Station: {station_id}, Satellite: {transaction.satellite_id}"
                )


def integrity_check_timeline_continuity(
    timelines: Sequence[Sequence[StationTransaction | SatelliteTransaction]],
    timeline_kind: str,
) -> None:
    """Require each timeline to be ordered, non-overlapping, and non-inverted."""

    for owner_id, transactions in enumerate(timelines):
        previous_stop_time: int | None = None
        for transaction in transactions:
            if transaction.stop_time < transaction.start_time or (
                previous_stop_time is not None and previous_stop_time >= transaction.start_time
            ):
                _integrity_fail(
                    f"Continuity check failed for {timeline_kind} {owner_id} "
                    f"at StartTime: {transaction.start_time}, StopTime: {transaction.stop_time}"
                )
            previous_stop_time = transaction.stop_time


def integrity_check_shooting_transactions(
    satellite_transactions: Sequence[Sequence[SatelliteTransaction]],
    flyby_windows: Sequence[FlybyWindow],
) -> None:
    """Require every shooting interval to lie inside one of its flyby windows."""

    windows_by_satellite: dict[int, list[FlybyWindow]] = defaultdict(list)
    for window in flyby_windows:
        windows_by_satellite[window.satellite_id].append(window)

    for satellite_id, transactions in enumerate(satellite_transactions):
        for transaction in transactions:
            if not transaction.is_shooting:
                continue
            if not any(
                window.start_time <= transaction.start_time and window.stop_time >= transaction.stop_time
                for window in windows_by_satellite.get(satellite_id, [])
            ):
                _integrity_fail(f"Shooting mismatched schedule! Satellite: {satellite_id}")


def integrity_check_satellite_transactions(
    satellite_transactions: Sequence[Sequence[SatelliteTransaction]],
    station_transactions: Sequence[Sequence[StationTransaction]],
) -> None:
    """Require every satellite downlink to mirror a station transaction exactly."""

    for satellite_id, transactions in enumerate(satellite_transactions):
        for transaction in transactions:
            if transaction.is_shooting:
                continue
            mirror = StationTransaction(satellite_id, transaction.start_time, transaction.stop_time)
            if mirror not in station_transactions[transaction.station_id]:
                _integrity_fail(
                    f"StationId: {transaction.station_id}, SatelliteId: {satellite_id}, "
                    f"StartTime: {transaction.start_time}, StopTime: {transaction.stop_time}"
                )


def _integrity_fail(message: str) -> None:
    logger.error(message)
    raise ResultIntegrityError(message)
