"""
Helpers building small PBIT packages for tests.

Packages are written with zipfile directly, the way Power BI lays
them out: ``[Content_Types].xml`` first, then one entry per part.
"""

import json
import zipfile
from pathlib import Path
from typing import Dict, Tuple

from pbitutility.package import Package


CONTENT_TYPES_TEMPLATE = (
    '<?xml version="1.0" encoding="utf-8"?>'
    '<Types xmlns="http://schemas.openxmlformats.org/package/2006/content-types">'
    '<Default Extension="json" ContentType="" />'
    "{overrides}"
    "</Types>"
)

VISUAL = "MyVisual123456789"

LAYOUT = {"id": 0, "sections": [{"name": "Päge 1", "visualContainers": []}]}
SCHEMA = {"name": "model", "compatibilityLevel": 1550, "model": {"tables": []}}
METADATA = {"Version": 5, "AutoCreatedRelationships": [], "FileDescription": ""}
SETTINGS = {"Version": 4, "ReportSettings": {}, "QueriesSettings": {"TypeDetectionEnabled": True}}
DIAGRAM = {"version": "1.1.0", "diagrams": [{"ordinal": 0, "name": "All tables"}]}
CONNECTIONS = {"Version": 1, "Connections": []}


def minified(value) -> str:
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def utf16(text: str) -> bytes:
    return text.encode("utf-16-le")


def table_parts() -> Dict[str, Tuple[str, bytes]]:
    """Parts from the fixed part table, as Power BI stores them."""
    return {
        "/Version": ("", utf16("1.28")),
        "/DataModelSchema": ("", utf16(minified(SCHEMA))),
        "/DiagramLayout": ("", utf16(minified(DIAGRAM))),
        "/DiagramState": ("", utf16(minified(DIAGRAM))),
        "/Report/Layout": ("", utf16(minified(LAYOUT))),
        "/Settings": ("application/json", utf16(minified(SETTINGS))),
        "/Metadata": ("application/json", utf16(minified(METADATA))),
        "/Connections": ("", minified(CONNECTIONS).encode("utf-8")),
    }


def custom_visual_parts(name: str = VISUAL) -> Dict[str, Tuple[str, bytes]]:
    prefix = f"/Report/CustomVisuals/{name}"
    return {
        f"{prefix}/package.json": ("", b'{"visual":{"name":"' + name.encode() + b'"}}'),
        f"{prefix}/resources/{name}.pbiviz.json": ("", b'{"guid":"' + name.encode() + b'"}'),
    }


def write_pbit(path: Path, part_map: Dict[str, Tuple[str, bytes]]) -> Path:
    """Write a PBIT package with the given {name: (content_type, data)} parts."""
    overrides = "".join(
        f'<Override PartName="{name}" ContentType="{content_type}" />'
        for name, (content_type, _) in part_map.items()
    )
    with zipfile.ZipFile(path, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        zf.writestr("[Content_Types].xml", CONTENT_TYPES_TEMPLATE.format(overrides=overrides))
        for name, (_, data) in part_map.items():
            zf.writestr(name[1:], data)
    return path


def read_pbit(path: Path) -> Dict[str, Tuple[str, bytes]]:
    """Read every part of a package as {name: (content_type, data)}."""
    result = {}
    with Package.open(path, "r") as package:
        for entry in package.manifest().entries:
            with package.open_part(entry.name) as stream:
                result[entry.name] = (entry.content_type, stream.read())
    return result
