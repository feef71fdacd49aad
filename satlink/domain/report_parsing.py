"""Fixed-column access report parsing.

Access reports consist of blocks. Each block is introduced by a title line such
as `Anadyr1-To-KinoSat_110101` underlined with dashes, followed by column
headings, a dashed column underline, data rows, and a terminating blank line.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path

from satlink.errors import ScheduleParseError

from .models import ConnectionReportRecord, FlybyReportRecord

logger = logging.getLogger(__name__)

HEADER_MARKER = "-----"
BLOCK_TITLE_MARKER = "-To-"

_ACCESS_COLUMN = slice(0, 24)
_START_COLUMN = slice(28, 52)
_STOP_COLUMN = slice(56, 80)
_DURATION_COLUMN = slice(85, 98)


class ReportParserState(Enum):
    """Block parser states in cyclic order."""

    SEARCH_BLOCK_START = 0
    SEARCH_DATA_START = 1
    PARSING_DATA = 2

    def next_state(self) -> ReportParserState:
        """Return the state following this one in the block cycle."""

        members = list(ReportParserState)
        return members[(members.index(self) + 1) % len(members)]


@dataclass(frozen=True)
class ReportDataRow:
    """One data row with the title parts of the block that contains it.

    Attributes:
        title_parts: Block title split on `-` (for example `["Anadyr1", "To", "KinoSat_110101"]`).
        access: Access number.
        start_time: Access start timestamp.
        stop_time: Access stop timestamp.
        duration: Access duration in seconds.
    """

    title_parts: tuple[str, ...]
    access: int
    start_time: datetime
    stop_time: datetime
    duration: float


def domain_report_iter_rows(lines: Iterable[str], timestamp_format: str) -> Iterator[ReportDataRow]:
    """Walk report lines through the block state machine and yield data rows.

    Args:
        lines: Report lines without trailing newlines.
        timestamp_format: strptime pattern for start and stop columns.

    Returns:
        Iterator[ReportDataRow]: Parsed rows in file order.

    Raises:
        ValueError: Raised when a data row has malformed columns.
    """

    parser_state = ReportParserState.SEARCH_BLOCK_START
    previous_line: str | None = None
    title_parts: tuple[str, ...] = ()

    for line_number, current_line in enumerate(lines, start=1):
        if parser_state is ReportParserState.SEARCH_BLOCK_START:
            if (
                current_line.startswith(HEADER_MARKER)
                and previous_line is not None
                and BLOCK_TITLE_MARKER in previous_line
            ):
                title_parts = tuple(previous_line.strip().split("-"))
                parser_state = parser_state.next_state()
        elif parser_state is ReportParserState.SEARCH_DATA_START:
            if current_line.strip().startswith(HEADER_MARKER):
                parser_state = parser_state.next_state()
        elif not current_line.strip():
            parser_state = parser_state.next_state()
        else:
            try:
                yield _domain_report_parse_data_line(current_line, title_parts, timestamp_format)
            except ValueError as error:
                raise ValueError(f"malformed data row at line {line_number}: {error}") from error
        previous_line = current_line


def domain_report_parse_connection_lines(
    lines: Iterable[str],
    timestamp_format: str,
) -> list[ConnectionReportRecord]:
    """Parse station-to-satellite report lines into connection records.

    Args:
        lines: Report lines.
        timestamp_format: strptime pattern for timestamps.

    Returns:
        list[ConnectionReportRecord]: Records in file order.

    Raises:
        ValueError: Raised when a row or block title is malformed.
    """

    records: list[ConnectionReportRecord] = []
    for row in domain_report_iter_rows(lines, timestamp_format):
        if len(row.title_parts) < 3:
            raise ValueError(f"block title does not name station and satellite: {'-'.join(row.title_parts)}")
        records.append(
            ConnectionReportRecord(
                station_name=row.title_parts[0],
                satellite_name=row.title_parts[2],
                access=row.access,
                start_time=row.start_time,
                stop_time=row.stop_time,
                duration=row.duration,
            )
        )
    return records


def domain_report_parse_flyby_lines(lines: Iterable[str], timestamp_format: str) -> list[FlybyReportRecord]:
    """Parse imaging-area report lines into flyby records.

    Args:
        lines: Report lines.
        timestamp_format: strptime pattern for timestamps.

    Returns:
        list[FlybyReportRecord]: Records in file order.

    Raises:
        ValueError: Raised when a row or block title is malformed.
    """

    records: list[FlybyReportRecord] = []
    for row in domain_report_iter_rows(lines, timestamp_format):
        if len(row.title_parts) < 3:
            raise ValueError(f"block title does not name satellite: {'-'.join(row.title_parts)}")
        records.append(
            FlybyReportRecord(
                satellite_name=row.title_parts[2],
                access=row.access,
                start_time=row.start_time,
                stop_time=row.stop_time,
                duration=row.duration,
            )
        )
    return records


def domain_report_parse_connection_file(file_path: Path, timestamp_format: str) -> list[ConnectionReportRecord]:
    """Read and parse one connection report file.

    Raises:
        ScheduleParseError: Raised when the file cannot be read or parsed.
    """

    try:
        lines = _domain_report_read_lines(file_path)
        return domain_report_parse_connection_lines(lines, timestamp_format)
    except (OSError, ValueError) as error:
        raise _domain_report_parse_error(file_path, error) from error


def domain_report_parse_flyby_file(file_path: Path, timestamp_format: str) -> list[FlybyReportRecord]:
    """Read and parse one flyby report file.

    Raises:
        ScheduleParseError: Raised when the file cannot be read or parsed.
    """

    try:
        lines = _domain_report_read_lines(file_path)
        return domain_report_parse_flyby_lines(lines, timestamp_format)
    except (OSError, ValueError) as error:
        raise _domain_report_parse_error(file_path, error) from error


def _domain_report_read_lines(file_path: Path) -> list[str]:
    return file_path.read_text(encoding="utf-8").splitlines()


def _domain_report_parse_error(file_path: Path, error: Exception) -> ScheduleParseError:
    absolute_path = str(file_path.resolve())
    logger.error("Failed to parse file %s: %s", absolute_path, error)
    return ScheduleParseError(f"Failed to parse file {absolute_path}", file_path=absolute_path)


def _domain_report_parse_data_line(
    line: str,
    title_parts: tuple[str, ...],
    timestamp_format: str,
) -> ReportDataRow:
    if len(line) < _DURATION_COLUMN.stop:
        raise ValueError(f"row is shorter than the {_DURATION_COLUMN.stop} report columns")
    return ReportDataRow(
        title_parts=title_parts,
        access=int(line[_ACCESS_COLUMN].strip()),
        start_time=datetime.strptime(line[_START_COLUMN].strip(), timestamp_format),
        stop_time=datetime.strptime(line[_STOP_COLUMN].strip(), timestamp_format),
        duration=float(line[_DURATION_COLUMN].strip()),
    )
