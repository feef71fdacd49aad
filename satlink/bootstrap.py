"""Application bootstrap wiring for startup validation and dependency assembly."""

from __future__ import annotations

from pathlib import Path

import satlink
from satlink.config import AppSettings
from satlink.jobs import DownlinkSchedulingJob, SchedulingJobConfig
from satlink.packaging import (
    ArchiveManifest,
    ArchiveSource,
    InstalledDistributionSource,
    packaging_resolve_runtime_distributions,
)

DISTRIBUTION_NAME = "satlink"
ENTRY_POINT = "satlink.main:main"


def bootstrap_create_scheduling_job(settings: AppSettings) -> DownlinkSchedulingJob:
    """Build the scheduling job from validated settings.

    Args:
        settings: Validated runtime settings.

    Returns:
        DownlinkSchedulingJob: Fully wired scheduling job.
    """

    return DownlinkSchedulingJob(
        settings=settings,
        config=SchedulingJobConfig(
            connection_schedules_path=settings.connection_schedules_path,
            flyby_schedules_path=settings.flyby_schedules_path,
            time_step_ms=settings.time_step_ms,
        ),
    )


def bootstrap_create_archive_manifest(settings: AppSettings) -> ArchiveManifest:
    """Build the manifest identifying this application inside an archive."""

    return ArchiveManifest(title=settings.application_title, version=satlink.__version__, entry_point=ENTRY_POINT)


def bootstrap_default_project_sources() -> list[ArchiveSource]:
    """Return the installed `satlink` package directory as the project input."""

    package_directory = Path(satlink.__file__).resolve().parent
    return [ArchiveSource(path=package_directory, prefix=package_directory.name)]


def bootstrap_installed_dependency_sources() -> list[InstalledDistributionSource]:
    """Resolve installed runtime dependencies of this distribution.

    Raises:
        ArchiveAssemblyError: Raised when the distribution or a requirement is not installed.
    """

    return [
        InstalledDistributionSource(distribution_name=name)
        for name in packaging_resolve_runtime_distributions(DISTRIBUTION_NAME)
    ]
