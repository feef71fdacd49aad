"""Self-contained executable archive assembly.

Runtime dependencies and project sources are merged into one Python zip
application. Directory inputs are copied as-is, archive inputs (wheels, zips,
pyz files) are unpacked, and installed distributions contribute the files their
metadata records. When several inputs provide the same archive path the first
one wins and later copies are discarded.
"""

from __future__ import annotations

import json
import logging
import re
import stat
import zipfile
from collections.abc import Callable, Iterator, Sequence
from dataclasses import dataclass
from importlib import metadata
from pathlib import Path, PurePosixPath

from packaging.requirements import InvalidRequirement, Requirement
from packaging.utils import canonicalize_name

from satlink.errors import ArchiveAssemblyError

logger = logging.getLogger(__name__)

MANIFEST_ENTRY_NAME = "MANIFEST.json"
MAIN_ENTRY_NAME = "__main__.py"
INTERPRETER_LINE = b"#!/usr/bin/env python3\n"

_ENTRY_POINT_PATTERN = re.compile(r"^(?P<module>[A-Za-z_][\w.]*):(?P<callable>[A-Za-z_]\w*)$")
_EXCLUDED_PARTS = frozenset({"__pycache__"})
_EXCLUDED_SUFFIXES = frozenset({".pyc", ".pyo"})


@dataclass(frozen=True)
class ArchiveManifest:
    """Manifest attributes identifying the archive and its startup routine.

    Attributes:
        title: Implementation title.
        version: Implementation version.
        entry_point: Startup callable in `module:callable` form.
    """

    title: str
    version: str
    entry_point: str

    def manifest_attributes(self) -> dict[str, str]:
        return {
            "Implementation-Title": self.title,
            "Implementation-Version": self.version,
            "Main-Entry-Point": self.entry_point,
        }


@dataclass(frozen=True)
class ArchiveSource:
    """Directory or archive input, optionally placed under an archive prefix."""

    path: Path
    prefix: str = ""


@dataclass(frozen=True)
class InstalledDistributionSource:
    """Installed distribution whose recorded files are merged into the archive."""

    distribution_name: str


@dataclass(frozen=True)
class ArchiveAssemblyResult:
    """Output payload for archive assembly.

    Attributes:
        output_path: Written archive path.
        entry_count: Number of entries written, manifest entries included.
        duplicate_count: Number of discarded duplicate entries.
        manifest: Manifest written into the archive.
    """

    output_path: Path
    entry_count: int
    duplicate_count: int
    manifest: ArchiveManifest


ArchiveInput = ArchiveSource | InstalledDistributionSource


def packaging_assemble_archive(
    output_path: Path,
    dependency_sources: Sequence[ArchiveInput],
    project_sources: Sequence[ArchiveInput],
    manifest: ArchiveManifest,
) -> ArchiveAssemblyResult:
    """Merge dependencies and project sources into one executable archive.

    Args:
        output_path: Archive file to create or overwrite.
        dependency_sources: Runtime dependency inputs, merged first.
        project_sources: Project inputs, merged after dependencies.
        manifest: Manifest attributes.

    Returns:
        ArchiveAssemblyResult: Entry counts and the written manifest.

    Raises:
        ArchiveAssemblyError: Raised when an input cannot be resolved or the entry point is malformed.
        OSError: Raised when the archive cannot be written.
    """

    main_source = packaging_render_main_module(manifest.entry_point)
    resolved_output_path = output_path.resolve()
    sources = [*dependency_sources, *project_sources]
    for source in sources:
        packaging_validate_source(source)

    output_path.parent.mkdir(parents=True, exist_ok=True)
    seen_names: set[str] = {MANIFEST_ENTRY_NAME, MAIN_ENTRY_NAME}
    duplicate_count = 0

    with output_path.open("wb") as output_file:
        output_file.write(INTERPRETER_LINE)
        with zipfile.ZipFile(output_file, "w", compression=zipfile.ZIP_DEFLATED) as archive:
            archive.writestr(MANIFEST_ENTRY_NAME, json.dumps(manifest.manifest_attributes(), indent=2) + "\n")
            archive.writestr(MAIN_ENTRY_NAME, main_source)
            for source in sources:
                for entry_name, read_entry in packaging_iter_source_entries(
                    source,
                    excluded_path=resolved_output_path,
                ):
                    if entry_name in seen_names:
                        duplicate_count += 1
                        logger.debug("Skipped duplicate archive entry %s", entry_name)
                        continue
                    seen_names.add(entry_name)
                    archive.writestr(entry_name, read_entry())

    output_path.chmod(output_path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    logger.info(
        "Assembled %s with %d entries (%d duplicates discarded).",
        output_path,
        len(seen_names),
        duplicate_count,
    )
    return ArchiveAssemblyResult(
        output_path=output_path,
        entry_count=len(seen_names),
        duplicate_count=duplicate_count,
        manifest=manifest,
    )


def packaging_validate_source(source: ArchiveInput) -> None:
    """Reject inputs that are neither directories, archives, nor installed distributions.

    Raises:
        ArchiveAssemblyError: Raised when the input cannot be used.
    """

    if isinstance(source, InstalledDistributionSource):
        try:
            metadata.distribution(source.distribution_name)
        except metadata.PackageNotFoundError as error:
            raise ArchiveAssemblyError(f"Distribution is not installed: {source.distribution_name}") from error
        return
    if source.path.is_dir():
        return
    if not source.path.exists():
        raise ArchiveAssemblyError(f"Archive input not found: {source.path}")
    if not zipfile.is_zipfile(source.path):
        raise ArchiveAssemblyError(f"Archive input is neither a directory nor a zip archive: {source.path}")


def packaging_iter_source_entries(
    source: ArchiveInput,
    excluded_path: Path | None = None,
) -> Iterator[tuple[str, Callable[[], bytes]]]:
    """Yield `(archive name, reader)` pairs for one input in deterministic order.

    Args:
        source: Archive input.
        excluded_path: Resolved file path never yielded from directory inputs,
            typically the archive being written.

    Raises:
        ArchiveAssemblyError: Raised when the input cannot be used.
    """

    if isinstance(source, InstalledDistributionSource):
        yield from _packaging_iter_distribution_entries(source.distribution_name)
    elif source.path.is_dir():
        yield from _packaging_iter_directory_entries(source.path, source.prefix, excluded_path)
    else:
        packaging_validate_source(source)
        yield from _packaging_iter_zip_entries(source.path, source.prefix)


def packaging_render_main_module(entry_point: str) -> str:
    """Render the `__main__.py` that invokes the startup callable.

    Raises:
        ArchiveAssemblyError: Raised when the entry point is not `module:callable`.
    """

    match = _ENTRY_POINT_PATTERN.match(entry_point.strip())
    if match is None:
        raise ArchiveAssemblyError(f"Entry point must use module:callable form: {entry_point}")
    return (
        "import sys\n"
        "\n"
        f"from {match.group('module')} import {match.group('callable')}\n"
        "\n"
        f"sys.exit({match.group('callable')}())\n"
    )


def packaging_resolve_runtime_distributions(distribution_name: str) -> list[str]:
    """Resolve installed runtime dependencies of a distribution, transitively.

    Requirement markers are evaluated against the running interpreter with no
    extra selected, so optional and platform-specific requirements that do not
    apply are skipped.

    Args:
        distribution_name: Root distribution name.

    Returns:
        list[str]: Dependency distribution names in breadth-first order, root excluded.

    Raises:
        ArchiveAssemblyError: Raised when the root or an applicable requirement is not installed,
            or when recorded requirement metadata is malformed.
    """

    try:
        metadata.distribution(distribution_name)
    except metadata.PackageNotFoundError as error:
        raise ArchiveAssemblyError(f"Distribution is not installed: {distribution_name}") from error

    resolved: list[str] = []
    visited = {canonicalize_name(distribution_name)}
    pending = [distribution_name]
    while pending:
        current_name = pending.pop(0)
        for requirement_text in metadata.requires(current_name) or []:
            requirement = _packaging_parse_requirement(requirement_text, current_name)
            if requirement.marker is not None and not requirement.marker.evaluate({"extra": ""}):
                continue
            normalized_name = canonicalize_name(requirement.name)
            if normalized_name in visited:
                continue
            visited.add(normalized_name)
            try:
                metadata.distribution(requirement.name)
            except metadata.PackageNotFoundError as error:
                raise ArchiveAssemblyError(
                    f"Runtime requirement {requirement.name} of {current_name} is not installed"
                ) from error
            resolved.append(requirement.name)
            pending.append(requirement.name)
    return resolved


def _packaging_iter_directory_entries(
    directory_path: Path,
    prefix: str,
    excluded_path: Path | None,
) -> Iterator[tuple[str, Callable[[], bytes]]]:
    for file_path in sorted(directory_path.rglob("*")):
        if not file_path.is_file():
            continue
        if excluded_path is not None and file_path.resolve() == excluded_path:
            continue
        relative_path = PurePosixPath(file_path.relative_to(directory_path).as_posix())
        if _packaging_is_excluded(relative_path):
            continue
        yield _packaging_join(prefix, relative_path), file_path.read_bytes


def _packaging_iter_zip_entries(archive_path: Path, prefix: str) -> Iterator[tuple[str, Callable[[], bytes]]]:
    with zipfile.ZipFile(archive_path) as source_archive:
        for info in source_archive.infolist():
            if info.is_dir():
                continue
            relative_path = PurePosixPath(info.filename)
            if _packaging_is_excluded(relative_path):
                continue
            yield _packaging_join(prefix, relative_path), _packaging_zip_reader(source_archive, info.filename)


def _packaging_iter_distribution_entries(distribution_name: str) -> Iterator[tuple[str, Callable[[], bytes]]]:
    distribution = metadata.distribution(distribution_name)
    for package_path in sorted(distribution.files or [], key=str):
        relative_path = PurePosixPath(str(package_path))
        if ".." in relative_path.parts or _packaging_is_excluded(relative_path):
            continue
        located_path = Path(distribution.locate_file(package_path))
        if not located_path.is_file():
            continue
        yield relative_path.as_posix(), located_path.read_bytes


def _packaging_zip_reader(source_archive: zipfile.ZipFile, entry_name: str) -> Callable[[], bytes]:
    return lambda: source_archive.read(entry_name)


def _packaging_is_excluded(relative_path: PurePosixPath) -> bool:
    return bool(_EXCLUDED_PARTS.intersection(relative_path.parts)) or relative_path.suffix in _EXCLUDED_SUFFIXES


def _packaging_join(prefix: str, relative_path: PurePosixPath) -> str:
    if not prefix:
        return relative_path.as_posix()
    return (PurePosixPath(prefix) / relative_path).as_posix()


def _packaging_parse_requirement(requirement_text: str, distribution_name: str) -> Requirement:
    try:
        return Requirement(requirement_text)
    except InvalidRequirement as error:
        raise ArchiveAssemblyError(
            f"Malformed requirement {requirement_text!r} recorded by {distribution_name}"
        ) from error
