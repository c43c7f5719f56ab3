"""
Export PBIT packages to trackable directories.

PBIT files are ZIP-based packages. This module extracts them while:
- Converting UTF-16 parts to UTF-8 for better diffs
- Pretty-printing JSON parts
- Shortening custom visual folder names to indexes
"""

import json
import logging
import shutil
import zipfile
from importlib import resources
from pathlib import Path
from typing import Union

from pbitutility import jsonfmt, parts
from pbitutility.package import Package, PackageError
from pbitutility.paths import CustomVisualRegistry, export_path
from pbitutility.transcode import transcode
from pbitutility.types import (
    EncodingConversion,
    ExportResult,
    Ok,
    Err,
    PbitError,
)


logger = logging.getLogger(__name__)


def contents_dir_for(pbit_path: Path) -> Path:
    """Return ``<name>.pbit.contents`` next to ``<name>.pbit``."""
    return pbit_path.parent / (pbit_path.name + parts.CONTENTS_SUFFIX)


def _write_readme(output_dir: Path) -> None:
    readme = resources.files("pbitutility").joinpath(parts.README_NAME)
    (output_dir / parts.README_NAME).write_bytes(readme.read_bytes())


def _write_table_of_contents(output_dir: Path, registry: CustomVisualRegistry) -> Path:
    toc_path = output_dir.joinpath(*parts.TABLE_OF_CONTENTS)
    toc_path.parent.mkdir(parents=True, exist_ok=True)
    toc_path.write_text(registry.to_json(), encoding="utf-8")
    return toc_path


def export_pbit(pbit_path: Path) -> Union[Ok, Err]:
    """
    Export a PBIT package to a .pbit.contents directory.

    The output directory is created alongside the PBIT file and is
    deleted first if it already exists. Parts stored as UTF-16 are
    written as UTF-8, and known JSON parts are pretty-printed.

    Args:
        pbit_path: Path to the PBIT file

    Returns:
        Ok(ExportResult) on success, Err on failure
    """
    pbit_path = Path(pbit_path).resolve()

    if not pbit_path.is_file():
        return Err(PbitError.FILE_NOT_FOUND, f"The file {pbit_path} does not exist.")

    if not pbit_path.name.endswith(parts.PBIT_SUFFIX):
        return Err(
            PbitError.INVALID_SUFFIX,
            f"{pbit_path} must be a {parts.PBIT_SUFFIX} file.",
        )

    if not zipfile.is_zipfile(pbit_path):
        return Err(PbitError.NOT_A_ZIP, f"Not a valid ZIP file: {pbit_path}")

    output_dir = contents_dir_for(pbit_path)

    try:
        if output_dir.exists():
            shutil.rmtree(output_dir)
        output_dir.mkdir()

        registry = CustomVisualRegistry()
        files_written = 0
        json_prettified = 0

        with Package.open(pbit_path, "r") as package:
            manifest = package.manifest()

            for entry in manifest.entries:
                out_path, registry = export_path(output_dir, entry.name, registry)
                out_path.parent.mkdir(parents=True, exist_ok=True)

                info = parts.lookup(entry.name)
                conversion = (
                    EncodingConversion.UTF16_TO_UTF8
                    if info.is_utf16
                    else EncodingConversion.NONE
                )
                logger.debug("Exporting %s -> %s", entry.name, out_path)
                with package.open_part(entry.name) as source, out_path.open("wb") as target:
                    transcode(source, target, conversion)
                files_written += 1

                if info.extension == parts.JSON_EXTENSION:
                    jsonfmt.prettify_file(out_path)
                    json_prettified += 1

        _write_readme(output_dir)

        if len(registry):
            toc_path = _write_table_of_contents(output_dir, registry)
            logger.info("Wrote %d custom visual names to %s", len(registry), toc_path)

        result = ExportResult(
            manifest=manifest,
            output_dir=output_dir,
            files_written=files_written,
            json_files_prettified=json_prettified,
            custom_visuals=registry.names,
        )
        return Ok(result)

    except zipfile.BadZipFile as e:
        return Err(PbitError.NOT_A_ZIP, f"Corrupt ZIP file: {e}")
    except PackageError as e:
        return Err(PbitError.INVALID_PACKAGE, str(e))
    except UnicodeError as e:
        return Err(PbitError.ENCODING_FAILED, f"Encoding conversion failed: {e}")
    except json.JSONDecodeError as e:
        return Err(PbitError.JSON_PARSE_ERROR, f"Invalid JSON: {e}")
    except ValueError as e:
        return Err(PbitError.INVALID_PART_NAME, str(e))
    except OSError as e:
        return Err(PbitError.WRITE_FAILED, f"Write failed: {e}")
