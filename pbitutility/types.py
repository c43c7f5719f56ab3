"""
Immutable data types for PBIT file operations.

All types are frozen dataclasses to enforce immutability.
Operations return Result types for explicit error handling.
"""

from dataclasses import dataclass
from enum import Enum, auto
from pathlib import Path
from typing import Tuple


class PbitError(Enum):
    """Error types for PBIT operations."""
    FILE_NOT_FOUND = auto()
    DIRECTORY_NOT_FOUND = auto()
    INVALID_SUFFIX = auto()
    NOT_A_ZIP = auto()
    WRITE_FAILED = auto()
    ENCODING_FAILED = auto()
    JSON_PARSE_ERROR = auto()
    INVALID_REGISTRY = auto()
    INVALID_PART_NAME = auto()
    INVALID_PACKAGE = auto()
    DUPLICATE_PART = auto()


class EncodingConversion(Enum):
    """Text encoding conversion applied while copying a part."""
    NONE = auto()
    UTF16_TO_UTF8 = auto()
    UTF8_TO_UTF16 = auto()


class Compression(Enum):
    """Compression applied to a part written into a package."""
    NORMAL = auto()
    NOT_COMPRESSED = auto()


@dataclass(frozen=True)
class PartEntry:
    """
    Metadata for a single part within a PBIT package.

    Tracks the part name, content type, and compression info.
    """
    name: str
    content_type: str
    size_bytes: int
    compressed_size: int


@dataclass(frozen=True)
class PackageManifest:
    """
    Catalog of parts within a PBIT package.

    Provides immutable access to package contents without extraction.
    """
    source_path: Path
    entries: Tuple[PartEntry, ...]

    @property
    def total_size(self) -> int:
        """Sum of uncompressed part sizes."""
        return sum(e.size_bytes for e in self.entries)

    @property
    def part_names(self) -> Tuple[str, ...]:
        """Part names in archive order."""
        return tuple(e.name for e in self.entries)


@dataclass(frozen=True)
class ExportResult:
    """
    Result of exporting a PBIT file to a directory.

    Contains the manifest and output location on success.
    """
    manifest: PackageManifest
    output_dir: Path
    files_written: int
    json_files_prettified: int
    custom_visuals: Tuple[str, ...]


@dataclass(frozen=True)
class GenerateResult:
    """
    Result of generating a PBIT file from a directory.

    Contains the output path and file statistics.
    """
    output_path: Path
    parts_packed: int
    json_files_minified: int
    total_size: int
    compressed_size: int


@dataclass(frozen=True)
class Ok:
    """Success result wrapper."""
    value: object


@dataclass(frozen=True)
class Err:
    """Error result wrapper."""
    error: PbitError
    message: str
