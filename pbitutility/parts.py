"""
Static table of the well-known parts of a PBIT package.

Each known part gets a file extension on disk, a flag telling whether
Power BI stores it as UTF-16 inside the package, and a content type.
Lookups accept the package form (``/Report/Layout``) as well as the
file-system form with the extension appended (``Report/Layout.json``
or ``\\Report\\Layout.json``). Only exact names match.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping


PBIT_SUFFIX = ".pbit"
CONTENTS_SUFFIX = ".contents"
README_NAME = "ReadMe.txt"
CUSTOM_VISUALS_PARENT = ("Report", "CustomVisuals")
TABLE_OF_CONTENTS = CUSTOM_VISUALS_PARENT + ("TableOfContents.json",)
IGNORED_NAMES = ("SecurityBindings",)
JSON_EXTENSION = ".json"
JSON_CONTENT_TYPE = "application/json"


@dataclass(frozen=True)
class PartInfo:
    """How a known part is laid out on disk and inside the package."""
    extension: str
    is_utf16: bool
    content_type: str = ""


UNKNOWN_PART = PartInfo(extension="", is_utf16=False)

KNOWN_PARTS: Mapping[str, PartInfo] = MappingProxyType({
    "/Connections": PartInfo(".json", False),
    "/DataModelSchema": PartInfo(".json", True),
    "/DiagramLayout": PartInfo(".json", True),
    "/DiagramState": PartInfo(".json", True),
    "/Metadata": PartInfo(".json", True, JSON_CONTENT_TYPE),
    "/Settings": PartInfo(".json", True, JSON_CONTENT_TYPE),
    "/Version": PartInfo(".txt", True),
    "/Report/Layout": PartInfo(".json", True),
})

_BY_FILE_NAME: Mapping[str, PartInfo] = MappingProxyType({
    name + info.extension: info for name, info in KNOWN_PARTS.items()
})


def _normalize(name: str) -> str:
    name = name.replace("\\", "/")
    if not name.startswith("/"):
        name = "/" + name
    return name


def lookup(name: str) -> PartInfo:
    """
    Find the table entry for a part or exported file name.

    Args:
        name: Part name (``/Version``) or relative file name (``Version.txt``)

    Returns:
        The matching PartInfo, or UNKNOWN_PART when nothing matches.
    """
    name = _normalize(name)
    info = KNOWN_PARTS.get(name)
    if info is None:
        info = _BY_FILE_NAME.get(name, UNKNOWN_PART)
    return info


def lookup_file(name: str) -> PartInfo:
    """Like lookup, but only matches exported file names (extension included)."""
    return _BY_FILE_NAME.get(_normalize(name), UNKNOWN_PART)


def extension_for(name: str) -> str:
    """Return the extension added on export, or an empty string."""
    return lookup(name).extension


def content_type_for(name: str) -> str:
    """Return the MIME content type to declare for the part."""
    return lookup(name).content_type
