"""
Generate PBIT packages from exported directories.

Creates PBIT packages from .pbit.contents directories, converting
the known parts back to UTF-16 and minifying JSON. All parts use
normal (DEFLATE) compression.
"""

import json
import logging
from pathlib import Path
from typing import Union

from pbitutility import jsonfmt, parts
from pbitutility.package import DuplicatePartError, Package, PackageError
from pbitutility.paths import CustomVisualRegistry, part_name_for_file
from pbitutility.transcode import transcode
from pbitutility.types import (
    Compression,
    EncodingConversion,
    GenerateResult,
    Ok,
    Err,
    PbitError,
)


logger = logging.getLogger(__name__)

MINIFIED_SUFFIX = "_minified"


def pbit_path_for(directory: Path) -> Path:
    """Return ``<name>.pbit`` next to ``<name>.pbit.contents``."""
    return directory.parent / directory.name[:-len(parts.CONTENTS_SUFFIX)]


def _is_ignored(directory: Path, path: Path) -> bool:
    """
    Check if an exported file must not be imported back.

    Skips the read-me, the custom visual table of contents and the
    security bindings Power BI rebuilds on its next save.
    """
    relative = path.relative_to(directory).parts
    if relative == (parts.README_NAME,) or relative == parts.TABLE_OF_CONTENTS:
        return True
    return path.name in parts.IGNORED_NAMES


def _collect_files(directory: Path) -> list[Path]:
    """Collect all files to import, in a stable order."""
    files = []
    for path in sorted(directory.rglob("*")):
        if path.is_dir():
            continue
        if _is_ignored(directory, path):
            logger.info("Skipping %s", path.relative_to(directory))
            continue
        files.append(path)
    return files


def read_registry(directory: Path) -> CustomVisualRegistry:
    """
    Read the custom visual table of contents, if the directory has one.

    Raises:
        ValueError: If the table of contents is malformed
    """
    toc_path = directory.joinpath(*parts.TABLE_OF_CONTENTS)
    if not toc_path.is_file():
        return CustomVisualRegistry()
    return CustomVisualRegistry.from_json(toc_path.read_text(encoding="utf-8-sig"))


def _import_file(
    package: Package, part_name: str, fs_path: Path, conversion: EncodingConversion
) -> int:
    content_type = parts.content_type_for(part_name)
    with fs_path.open("rb") as source, package.create_part(
        part_name, content_type, Compression.NORMAL
    ) as target:
        return transcode(source, target, conversion)


def generate_pbit(directory: Path) -> Union[Ok, Err]:
    """
    Generate a PBIT package from a .pbit.contents directory.

    The PBIT file is created alongside the directory by removing the
    .contents suffix. An existing file at that path is replaced.

    Args:
        directory: Path to the .pbit.contents directory

    Returns:
        Ok(GenerateResult) on success, Err on failure
    """
    directory = Path(directory).resolve()

    if not directory.is_dir():
        return Err(
            PbitError.DIRECTORY_NOT_FOUND,
            f"The folder {directory} does not exist.",
        )

    suffix = parts.PBIT_SUFFIX + parts.CONTENTS_SUFFIX
    if not directory.name.endswith(suffix):
        return Err(
            PbitError.INVALID_SUFFIX,
            f'{directory} must end with "{suffix}".',
        )

    output_path = pbit_path_for(directory)

    try:
        try:
            registry = read_registry(directory)
        except ValueError as e:
            return Err(PbitError.INVALID_REGISTRY, f"Invalid table of contents: {e}")

        if output_path.exists():
            output_path.unlink()

        files = _collect_files(directory)
        total_size = 0
        json_minified = 0

        with Package.open(output_path, "w") as package:
            for fs_path in files:
                relative = fs_path.relative_to(directory).as_posix()
                part_name = part_name_for_file(directory, fs_path, registry)
                info = parts.lookup_file(relative)
                conversion = (
                    EncodingConversion.UTF8_TO_UTF16
                    if info.is_utf16
                    else EncodingConversion.NONE
                )
                logger.debug("Importing %s as %s", relative, part_name)

                if info.extension == parts.JSON_EXTENSION:
                    minified = fs_path.with_name(fs_path.name + MINIFIED_SUFFIX)
                    try:
                        jsonfmt.write_minified(fs_path, minified)
                        total_size += _import_file(package, part_name, minified, conversion)
                    finally:
                        minified.unlink(missing_ok=True)
                    json_minified += 1
                else:
                    total_size += _import_file(package, part_name, fs_path, conversion)

        result = GenerateResult(
            output_path=output_path,
            parts_packed=len(files),
            json_files_minified=json_minified,
            total_size=total_size,
            compressed_size=output_path.stat().st_size,
        )
        return Ok(result)

    except DuplicatePartError as e:
        return Err(PbitError.DUPLICATE_PART, str(e))
    except PackageError as e:
        return Err(PbitError.INVALID_PART_NAME, str(e))
    except UnicodeError as e:
        return Err(PbitError.ENCODING_FAILED, f"Encoding conversion failed: {e}")
    except json.JSONDecodeError as e:
        return Err(PbitError.JSON_PARSE_ERROR, f"Invalid JSON: {e}")
    except ValueError as e:
        return Err(PbitError.INVALID_PART_NAME, str(e))
    except OSError as e:
        return Err(PbitError.WRITE_FAILED, f"Write failed: {e}")
