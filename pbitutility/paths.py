"""
Mapping between package part names and exported file paths.

Part names are slash-delimited (``/Report/Layout``). On disk every
part becomes one file under nested folders mirroring its name, with
the Part Table extension appended.

Custom visuals live under ``/Report/CustomVisuals/<name>/``, where the
visual names are long enough to push paths over the limits some git
clients enforce. Export replaces each visual folder name with its
index in a CustomVisualRegistry; generate puts the names back.
"""

import json
from dataclasses import dataclass
from pathlib import Path, PurePath
from typing import Dict, Optional, Sequence, Tuple, Union

from pbitutility import parts


PBIVIZ_SUFFIX = ".pbiviz.json"

Segments = Tuple[str, ...]


@dataclass(frozen=True)
class CustomVisualRegistry:
    """
    Ordered custom visual folder names.

    The position of a name is the index that replaces it on disk.
    Registering never changes the index of an existing name.
    """
    names: Tuple[str, ...] = ()

    def __len__(self) -> int:
        return len(self.names)

    def index_of(self, name: str) -> Optional[int]:
        """Return the index assigned to name, or None if unregistered."""
        try:
            return self.names.index(name)
        except ValueError:
            return None

    def register(self, name: str) -> Tuple["CustomVisualRegistry", int]:
        """
        Assign an index to a custom visual name.

        Returns:
            (registry, index) where registry includes name. The original
            registry is returned unchanged if name was already known.
        """
        index = self.index_of(name)
        if index is not None:
            return self, index
        return CustomVisualRegistry(self.names + (name,)), len(self.names)

    def by_index(self) -> Dict[str, str]:
        """Map the on-disk index strings back to the original names."""
        return {str(i): name for i, name in enumerate(self.names)}

    def to_json(self) -> str:
        """Serialize the names as a JSON array, index order."""
        return json.dumps(list(self.names))

    @classmethod
    def from_json(cls, text: str) -> "CustomVisualRegistry":
        """
        Parse a table of contents written by to_json.

        Raises:
            ValueError: If the text is not a JSON array of distinct strings
        """
        names = json.loads(text)
        if not isinstance(names, list) or not all(isinstance(n, str) for n in names):
            raise ValueError("Table of contents must be a JSON array of strings")
        if len(set(names)) != len(names):
            raise ValueError("Table of contents contains duplicate names")
        return cls(tuple(names))


def split_part_name(part_name: str) -> Segments:
    """
    Split ``/Report/Layout`` into ``("Report", "Layout")``.

    Raises:
        ValueError: If a segment would escape the export root
    """
    segments = tuple(s for s in part_name.split("/") if s)
    if not segments or any(s in (".", "..") for s in segments):
        raise ValueError(f"Unsafe part name: {part_name!r}")
    return segments


def join_part_name(segments: Sequence[str]) -> str:
    return "/" + "/".join(segments)


def is_custom_visual_path(segments: Sequence[str]) -> bool:
    """Check if segments point inside a custom visual folder."""
    parent = parts.CUSTOM_VISUALS_PARENT
    return len(segments) > len(parent) + 1 and tuple(segments[:len(parent)]) == parent


def _rename_segment(segment: str, old: str, new: str) -> str:
    if segment == old:
        return new
    if segment == old + PBIVIZ_SUFFIX:
        return new + PBIVIZ_SUFFIX
    return segment


def rename_custom_visual(segments: Segments, old: str, new: str) -> Segments:
    """
    Rename a custom visual folder and the files that repeat its name.

    The folder segment itself is always replaced. Below it, segments equal
    to the old name, or to ``<old>.pbiviz.json``, are replaced as well.
    """
    depth = len(parts.CUSTOM_VISUALS_PARENT)
    head = segments[:depth]
    rest = tuple(_rename_segment(s, old, new) for s in segments[depth + 1:])
    return head + (new,) + rest


def encode_part_name(
    part_name: str, registry: CustomVisualRegistry
) -> Tuple[Segments, CustomVisualRegistry]:
    """
    Compute the on-disk segments for a part, without extension.

    Args:
        part_name: Part name as listed in the package
        registry: Custom visuals registered so far

    Returns:
        (segments, registry) where registry includes the part's custom
        visual if it has one.

    Raises:
        ValueError: If a file below the visual folder is named after the
            visual's index, which generate would rename to the visual
    """
    segments = split_part_name(part_name)
    if not is_custom_visual_path(segments):
        return segments, registry

    depth = len(parts.CUSTOM_VISUALS_PARENT)
    visual = segments[depth]
    registry, index = registry.register(visual)
    for segment in segments[depth + 1:]:
        if segment != visual and _rename_segment(segment, str(index), visual) != segment:
            raise ValueError(
                f"Part name {part_name!r} clashes with custom visual index {index}"
            )
    return rename_custom_visual(segments, visual, str(index)), registry


def decode_segments(segments: Segments, registry: CustomVisualRegistry) -> str:
    """
    Restore the part name for on-disk segments (extension already removed).

    Indexes with no registry entry are left as they are.
    """
    if is_custom_visual_path(segments):
        index = segments[len(parts.CUSTOM_VISUALS_PARENT)]
        name = registry.by_index().get(index)
        if name is not None:
            segments = rename_custom_visual(segments, index, name)
    return join_part_name(segments)


def export_path(
    root: Path, part_name: str, registry: CustomVisualRegistry
) -> Tuple[Path, CustomVisualRegistry]:
    """
    Compute the file a part is exported to.

    Returns:
        (file_path, registry) with the Part Table extension appended.
    """
    segments, registry = encode_part_name(part_name, registry)
    extension = parts.extension_for(part_name)
    segments = segments[:-1] + (segments[-1] + extension,)
    return Path(root).joinpath(*segments), registry


def relative_name(root: Path, file_path: Union[Path, PurePath]) -> str:
    """Return ``/Report/Layout.json`` for ``<root>/Report/Layout.json``."""
    relative = PurePath(file_path).relative_to(root)
    return join_part_name(relative.parts)


def part_name_for_file(
    root: Path, file_path: Union[Path, PurePath], registry: CustomVisualRegistry
) -> str:
    """
    Compute the part name a generated file is imported as.

    Strips the root, then the Part Table extension, then restores
    custom visual names from the registry.
    """
    name = relative_name(root, file_path)
    extension = parts.lookup_file(name).extension
    if extension:
        name = name[:-len(extension)]
    return decode_segments(split_part_name(name), registry)
