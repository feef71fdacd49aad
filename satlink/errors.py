"""Project-native typed exceptions for schedule loading, resolution, and packaging."""

from __future__ import annotations


class SatLinkError(Exception):
    """Base exception for SatLink failures.

    Attributes:
        error_code: Deterministic error code surfaced in job diagnostics.
    """

    error_code = "SATLINK_UNEXPECTED_ERROR"


class ScheduleLoadError(SatLinkError):
    """Input schedule directory cannot be listed or is missing."""

    error_code = "SCHEDULE_LOAD_ERROR"


class ScheduleParseError(SatLinkError, ValueError):
    """Access report file could not be read or parsed.

    Attributes:
        file_path: Absolute path of the failing report file.
    """

    error_code = "SCHEDULE_PARSE_ERROR"

    def __init__(self, message: str, file_path: str | None = None):
        super().__init__(message)
        self.file_path = file_path


class ResultIntegrityError(SatLinkError, RuntimeError):
    """Computed downlink plan violates a consistency rule."""

    error_code = "RESULT_INTEGRITY_ERROR"


class ArchiveAssemblyError(SatLinkError):
    """Executable archive inputs cannot be resolved or merged."""

    error_code = "ARCHIVE_ASSEMBLY_ERROR"
