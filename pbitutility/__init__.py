"""
Power BI template (PBIT) file management for git workflows.

PBIT files are ZIP-based packages containing UTF-16 JSON parts.
This module provides tools to export them into trackable directories
and regenerate the PBIT files for Power BI.
"""

from pbitutility.types import (
    PackageManifest,
    PartEntry,
    ExportResult,
    GenerateResult,
    PbitError,
    Ok,
    Err,
)
from pbitutility.paths import CustomVisualRegistry
from pbitutility.export import export_pbit
from pbitutility.generate import generate_pbit

__all__ = [
    "PackageManifest",
    "PartEntry",
    "ExportResult",
    "GenerateResult",
    "PbitError",
    "Ok",
    "Err",
    "CustomVisualRegistry",
    "export_pbit",
    "generate_pbit",
]
