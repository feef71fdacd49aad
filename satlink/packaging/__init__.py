"""Packaging layer for self-contained executable archives."""

from .archive import (
    MAIN_ENTRY_NAME,
    MANIFEST_ENTRY_NAME,
    ArchiveAssemblyResult,
    ArchiveInput,
    ArchiveManifest,
    ArchiveSource,
    InstalledDistributionSource,
    packaging_assemble_archive,
    packaging_iter_source_entries,
    packaging_render_main_module,
    packaging_resolve_runtime_distributions,
)

__all__ = [
    "MAIN_ENTRY_NAME",
    "MANIFEST_ENTRY_NAME",
    "ArchiveAssemblyResult",
    "ArchiveInput",
    "ArchiveManifest",
    "ArchiveSource",
    "InstalledDistributionSource",
    "packaging_assemble_archive",
    "packaging_iter_source_entries",
    "packaging_render_main_module",
    "packaging_resolve_runtime_distributions",
]
