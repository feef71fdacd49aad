"""Main module entrypoint for local runtime execution.

This module validates startup configuration and runs the scheduling job or
assembles the executable archive.
"""

from __future__ import annotations

import argparse
import logging
from collections.abc import Sequence
from pathlib import Path

import satlink
from satlink.bootstrap import (
    bootstrap_create_archive_manifest,
    bootstrap_create_scheduling_job,
    bootstrap_default_project_sources,
    bootstrap_installed_dependency_sources,
)
from satlink.config import AppSettings, config_configure_logging, config_load_settings
from satlink.errors import ArchiveAssemblyError
from satlink.packaging import ArchiveInput, ArchiveSource, packaging_assemble_archive

logger = logging.getLogger(__name__)


def main_build_argument_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser."""

    argument_parser = argparse.ArgumentParser(prog="satlink", description="SatLink downlink scheduler")
    argument_parser.add_argument(
        "command",
        nargs="?",
        default="schedule",
        choices=("schedule", "package"),
        help="Runtime command: `schedule` computes downlink schedules and statistics, "
        "`package` assembles a self-contained executable archive",
        type=str,
    )
    argument_parser.add_argument(
        "--env-file",
        dest="env_file",
        type=Path,
        help="Optional dotenv file overriding the default `.env` lookup",
    )
    argument_parser.add_argument(
        "--output",
        dest="output",
        type=Path,
        help="Archive path for `package` (default: dist/satlink-<version>.pyz)",
    )
    argument_parser.add_argument(
        "--source",
        dest="sources",
        action="append",
        type=Path,
        default=[],
        help="Project source directory for `package`; repeatable (default: the installed satlink package)",
    )
    argument_parser.add_argument(
        "--dependency",
        dest="dependencies",
        action="append",
        type=Path,
        default=[],
        help="Runtime dependency directory or archive for `package`; repeatable",
    )
    argument_parser.add_argument(
        "--installed",
        dest="include_installed",
        action="store_true",
        help="Also merge installed runtime dependency distributions into the archive",
    )
    return argument_parser


def main(argv: Sequence[str] | None = None) -> None:
    """Run selected runtime command with validated startup configuration.

    Args:
        argv: Optional argument list; defaults to `sys.argv[1:]`.

    Returns:
        None: This function does not return a runtime value.

    Raises:
        SettingsLoadError: Raised when configuration validation fails.
        SystemExit: Raised with status 1 when the selected command fails.
    """

    parsed_arguments = main_build_argument_parser().parse_args(argv)
    settings = config_load_settings(env_file=parsed_arguments.env_file)
    config_configure_logging(settings.log_level)
    logger.info("Config loaded.")

    if parsed_arguments.command == "package":
        main_run_package(settings, parsed_arguments)
        return

    scheduling_job = bootstrap_create_scheduling_job(settings)
    execution_result = scheduling_job.job_execute(job_name="schedule")
    if execution_result.status != "success":
        raise SystemExit(1)


def main_run_package(settings: AppSettings, parsed_arguments: argparse.Namespace) -> None:
    """Assemble the executable archive from CLI inputs.

    Raises:
        SystemExit: Raised with status 1 when archive inputs cannot be resolved.
    """

    output_path = parsed_arguments.output or Path("dist") / f"satlink-{satlink.__version__}.pyz"
    project_sources: list[ArchiveInput] = [ArchiveSource(path=path) for path in parsed_arguments.sources]
    if not project_sources:
        project_sources.extend(bootstrap_default_project_sources())
    dependency_sources: list[ArchiveInput] = [ArchiveSource(path=path) for path in parsed_arguments.dependencies]

    try:
        if parsed_arguments.include_installed:
            dependency_sources.extend(bootstrap_installed_dependency_sources())
        assembly_result = packaging_assemble_archive(
            output_path=output_path,
            dependency_sources=dependency_sources,
            project_sources=project_sources,
            manifest=bootstrap_create_archive_manifest(settings),
        )
    except ArchiveAssemblyError as error:
        logger.error("Archive assembly failed: %s", error)
        raise SystemExit(1) from error

    print(assembly_result.output_path)


if __name__ == "__main__":
    main()
