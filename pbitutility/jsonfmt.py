"""
JSON pretty-printing for export and minification for generate.

Non-ASCII characters are written as-is rather than escaped, which
keeps exported files readable and their diffs small. Unpaired
surrogates, which have no UTF-8 encoding, stay escaped.
"""

import json
import re
from pathlib import Path


JSON_INDENT = 2

_SURROGATE = re.compile("[\ud800-\udfff]")


def _escape_surrogates(text: str) -> str:
    return _SURROGATE.sub(lambda m: "\\u%04x" % ord(m.group()), text)


def prettify_json(text: str) -> str:
    """
    Re-serialize a JSON document with indentation.

    Raises:
        json.JSONDecodeError: If text is not valid JSON
    """
    return _escape_surrogates(
        json.dumps(json.loads(text), indent=JSON_INDENT, ensure_ascii=False)
    )


def minify_json(text: str) -> str:
    """
    Re-serialize a JSON document without extraneous whitespace.

    Raises:
        json.JSONDecodeError: If text is not valid JSON
    """
    return _escape_surrogates(
        json.dumps(json.loads(text), separators=(",", ":"), ensure_ascii=False)
    )


def _read_text(path: Path) -> str:
    # utf-8-sig drops a byte order mark, which the JSON parser rejects
    return Path(path).read_text(encoding="utf-8-sig")


def prettify_file(path: Path) -> None:
    """Pretty-print a UTF-8 JSON file in place."""
    path = Path(path)
    path.write_bytes(prettify_json(_read_text(path)).encode("utf-8"))


def write_minified(source: Path, target: Path) -> None:
    """Write a minified UTF-8 copy of the JSON file source to target."""
    Path(target).write_bytes(minify_json(_read_text(source)).encode("utf-8"))
