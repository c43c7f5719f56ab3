"""
Minimal Open Packaging Conventions container on top of zipfile.

A PBIT file is a ZIP archive whose entries are "parts" named like
``/Report/Layout``. Content types are declared in ``[Content_Types].xml``
at the archive root, either per part (Override) or per extension (Default).
Only what the exporter and generator need is supported: listing and
reading parts, and creating parts with a content type and compression.
"""

import time
import zipfile
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import BinaryIO, Dict, Iterator, Tuple

from pbitutility.types import Compression, PackageManifest, PartEntry


CONTENT_TYPES_NAME = "[Content_Types].xml"
CONTENT_TYPES_NS = "http://schemas.openxmlformats.org/package/2006/content-types"

_ZIP_COMPRESSION = {
    Compression.NORMAL: zipfile.ZIP_DEFLATED,
    Compression.NOT_COMPRESSED: zipfile.ZIP_STORED,
}


class PackageError(Exception):
    """Raised for malformed packages and invalid part names."""


class DuplicatePartError(PackageError):
    """Raised when a part name is created twice."""


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _part_extension(name: str) -> str:
    last = name.rsplit("/", 1)[-1]
    if "." not in last:
        return ""
    return last.rsplit(".", 1)[-1].lower()


def _validate_part_name(name: str) -> None:
    if not name.startswith("/") or name.endswith("/") or "//" in name:
        raise PackageError(f"Invalid part name: {name!r}")
    if name[1:] == CONTENT_TYPES_NAME:
        raise PackageError(f"Reserved part name: {name!r}")


class Package:
    """
    An open PBIT package.

    Use Package.open() as a context manager; a package opened for
    writing declares the content types of its parts when closed.
    """

    def __init__(self, path: Path, zf: zipfile.ZipFile, writable: bool):
        self.path = path
        self._zf = zf
        self._writable = writable
        self._defaults: Dict[str, str] = {}
        self._overrides: Dict[str, str] = {}
        self._created: Dict[str, Tuple[str, str]] = {}
        if not writable:
            self._read_content_types()

    @classmethod
    def open(cls, path: Path, mode: str = "r") -> "Package":
        """
        Open a package for reading ("r") or create it for writing ("w").

        Raises:
            zipfile.BadZipFile: If a package opened for reading is not a ZIP
            PackageError: If its content types cannot be parsed
            OSError: If the file cannot be opened
        """
        if mode not in ("r", "w"):
            raise ValueError(f"Unsupported mode: {mode!r}")
        path = Path(path)
        zf = zipfile.ZipFile(path, mode, compression=zipfile.ZIP_DEFLATED)
        try:
            return cls(path, zf, writable=(mode == "w"))
        except Exception:
            zf.close()
            raise

    def __enter__(self) -> "Package":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _read_content_types(self) -> None:
        try:
            data = self._zf.read(CONTENT_TYPES_NAME)
        except KeyError:
            return
        try:
            root = ET.fromstring(data)
        except ET.ParseError as e:
            raise PackageError(f"Invalid {CONTENT_TYPES_NAME}: {e}") from e
        for element in root:
            tag = _local_name(element.tag)
            content_type = element.get("ContentType", "")
            if tag == "Default" and element.get("Extension") is not None:
                self._defaults[element.get("Extension").lower()] = content_type
            elif tag == "Override" and element.get("PartName") is not None:
                self._overrides[element.get("PartName").lower()] = content_type

    def content_type(self, name: str) -> str:
        """Resolve the declared content type of a part, or an empty string."""
        override = self._overrides.get(name.lower())
        if override is not None:
            return override
        return self._defaults.get(_part_extension(name), "")

    def _infos(self) -> Iterator[zipfile.ZipInfo]:
        for info in self._zf.infolist():
            if info.is_dir() or info.filename == CONTENT_TYPES_NAME:
                continue
            yield info

    def manifest(self) -> PackageManifest:
        """Build a manifest of the parts in archive order."""
        entries = []
        for info in self._infos():
            name = "/" + info.filename
            entries.append(PartEntry(
                name=name,
                content_type=self.content_type(name),
                size_bytes=info.file_size,
                compressed_size=info.compress_size,
            ))
        return PackageManifest(source_path=self.path, entries=tuple(entries))

    def open_part(self, name: str) -> BinaryIO:
        """Open a part for reading."""
        return self._zf.open(name[1:], "r")

    def create_part(
        self,
        name: str,
        content_type: str = "",
        compression: Compression = Compression.NORMAL,
    ) -> BinaryIO:
        """
        Create a part and open it for writing.

        Only one part may be open for writing at a time.

        Raises:
            PackageError: If the name is invalid
            DuplicatePartError: If the name is already used
        """
        if not self._writable:
            raise PackageError("Package is open for reading")
        _validate_part_name(name)
        key = name.lower()
        if key in self._created:
            raise DuplicatePartError(f"Duplicate part name: {name}")
        self._created[key] = (name, content_type)

        info = zipfile.ZipInfo(name[1:], date_time=time.localtime(time.time())[:6])
        info.compress_type = _ZIP_COMPRESSION[compression]
        info.external_attr = 0o600 << 16
        return self._zf.open(info, "w")

    def _write_content_types(self) -> None:
        root = ET.Element("Types", {"xmlns": CONTENT_TYPES_NS})
        for name, content_type in self._created.values():
            ET.SubElement(root, "Override", {
                "PartName": name,
                "ContentType": content_type,
            })
        data = ET.tostring(root, encoding="utf-8", xml_declaration=True)
        self._zf.writestr(CONTENT_TYPES_NAME, data)

    def close(self) -> None:
        if self._zf.fp is None:
            return
        try:
            if self._writable:
                self._write_content_types()
        finally:
            self._zf.close()
