"""Shared fixtures for rendering fixed-column access reports."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from datetime import datetime
from pathlib import Path

import pytest

ReportBlock = tuple[str, Sequence[tuple[datetime, datetime]]]

_COLUMN_HEADINGS = (
    "                  Access        Start Time (UTCG)           Stop Time (UTCG)        Duration (sec)"
)
_COLUMN_UNDERLINE = (
    "                  ------    ------------------------    ------------------------    --------------"
)


def _format_report_timestamp(value: datetime) -> str:
    return f"{value.day} {value:%b %Y %H:%M:%S}.{value.microsecond // 1000:03d}"


def _render_access_report(blocks: Sequence[ReportBlock]) -> str:
    lines = ["Access report", ""]
    for title, windows in blocks:
        lines.append(title)
        lines.append("-" * max(len(title), 25))
        lines.append("")
        lines.append(_COLUMN_HEADINGS)
        lines.append(_COLUMN_UNDERLINE)
        for access, (start_time, stop_time) in enumerate(windows, start=1):
            duration = (stop_time - start_time).total_seconds()
            lines.append(
                f"{access:>24}    {_format_report_timestamp(start_time):>24}    "
                f"{_format_report_timestamp(stop_time):>24}     {duration:>13.3f}"
            )
        lines.append("")
        lines.append("Global Statistics")
        lines.append("")
    return "\n".join(lines) + "\n"


@pytest.fixture
def render_access_report() -> Callable[[Sequence[ReportBlock]], str]:
    """Return a renderer producing access report text for title/window blocks."""

    return _render_access_report


@pytest.fixture
def write_access_report() -> Callable[[Path, str, Sequence[ReportBlock]], Path]:
    """Return a helper writing one rendered access report file."""

    def _write(directory: Path, file_name: str, blocks: Sequence[ReportBlock]) -> Path:
        directory.mkdir(parents=True, exist_ok=True)
        report_path = directory / file_name
        report_path.write_text(_render_access_report(blocks), encoding="utf-8")
        return report_path

    return _write
