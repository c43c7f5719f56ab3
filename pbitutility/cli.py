"""
Command-line interface for PBIT file management.

Usage:
    python -m pbitutility -e <file.pbit>
    python -m pbitutility -g <folder.pbit.contents>
    python -m pbitutility <file.pbit | folder.pbit.contents>
"""

import logging
import os
import sys
from pathlib import Path
from typing import Optional, Sequence

from pbitutility.types import Err
from pbitutility.export import export_pbit
from pbitutility.generate import generate_pbit


LOG_LEVEL_ENV = "PBITUTILITY_LOG_LEVEL"


def print_usage() -> None:
    print("Usage:")
    print('\t"pbitutility -e <file.pbit>" exports the contents of the PBIT file to flat files.')
    print('\t"pbitutility -g <folder.pbit.contents>" re-generates a PBIT file from the flat files.')


def cmd_export(path: str) -> int:
    """Handle the export command."""
    result = export_pbit(Path(path))

    if isinstance(result, Err):
        print(f"Error: {result.message}")
        return 1

    export_result = result.value
    print(f"Exported: {export_result.manifest.source_path}")
    print(f"      To: {export_result.output_dir}")
    print(f"   Files: {export_result.files_written}")
    print(f"    JSON: {export_result.json_files_prettified} prettified")
    if export_result.custom_visuals:
        print(f" Visuals: {len(export_result.custom_visuals)} renamed to indexes")
    return 0


def cmd_generate(path: str) -> int:
    """Handle the generate command."""
    directory = Path(path)
    result = generate_pbit(directory)

    if isinstance(result, Err):
        print(f"Error: {result.message}")
        return 1

    generate_result = result.value
    ratio = (
        generate_result.compressed_size / generate_result.total_size
        if generate_result.total_size
        else 1.0
    )
    print(f"Generated: {generate_result.output_path}")
    print(f"     From: {directory}")
    print(f"    Parts: {generate_result.parts_packed}")
    print(f"     JSON: {generate_result.json_files_minified} minified")
    print(
        f"     Size: {generate_result.total_size:,} -> "
        f"{generate_result.compressed_size:,} ({ratio:.1%})"
    )
    return 0


def _configure_logging() -> None:
    level = os.environ.get(LOG_LEVEL_ENV, "WARNING").upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format="%(levelname)s: %(message)s",
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point."""
    args = list(sys.argv[1:] if argv is None else argv)
    _configure_logging()

    if len(args) == 1:
        # A single path picks the command from the item type.
        if Path(args[0]).is_dir():
            return cmd_generate(args[0])
        return cmd_export(args[0])

    if len(args) == 2:
        commands = {
            "-e": cmd_export,
            "-g": cmd_generate,
        }
        if args[0] in commands:
            return commands[args[0]](args[1])

    print_usage()
    return 1


if __name__ == "__main__":
    sys.exit(main())
