"""
Text codec for settings files: canonical JSON and the relaxed Hjson dialect.

**Conceptual**: A settings file is either canonical JSON or Hjson, the
human-friendly superset (comments, unquoted keys and values, trailing
commas, no braces around the root object). Which one is decided purely by
the file extension: ``.hjson`` means Hjson, anything else means JSON.

Reading always goes through canonical JSON: Hjson text is first normalised
to JSON text, then decoded. Writing goes the other way: the record is
serialised to canonical JSON, and for Hjson files converted to Hjson with
the root braces removed.

Hjson parsing and emitting is done by the ``hjson`` library; canonical JSON
by the standard ``json`` module.
"""

import json
from decimal import Decimal
from pathlib import Path
from typing import Any, Union

import hjson

from src.settings_store.errors import SettingsParseError


RELAXED_SUFFIX = ".hjson"

# Indent used when emitting Hjson; strip_root_braces removes exactly one level
HJSON_INDENT = "  "


def is_relaxed(path: Union[str, Path]) -> bool:
    """True if ``path`` names an Hjson file (by extension)."""
    return Path(path).suffix.lower() == RELAXED_SUFFIX


def _json_default(obj: Any) -> Any:
    # Decimals are written as text so no precision is lost on the way back
    if isinstance(obj, Decimal):
        return str(obj)
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


def relaxed_to_json(text: str) -> str:
    """
    Normalise Hjson text into canonical JSON text.

    Raises:
        SettingsParseError: If the text is not valid Hjson.
    """
    try:
        value = hjson.loads(text)
    except hjson.HjsonDecodeError as e:
        raise SettingsParseError(f"Invalid Hjson: {e}") from e
    return hjson.dumpsJSON(value, indent=2)


def strip_root_braces(text: str) -> str:
    """
    Remove the braces around a root object and unindent its body by one
    level. Lines inside multi-line strings keep any further whitespace,
    including lines that hold nothing but spaces.

    Text that does not start with a "{" line and end with a "}" line is
    returned unchanged.
    """
    lines = text.strip().splitlines()
    if len(lines) >= 2 and lines[0].strip() == "{" and lines[-1].strip() == "}":
        body = [
            line[len(HJSON_INDENT):] if line.startswith(HJSON_INDENT) else line
            for line in lines[1:-1]
        ]
        return "\n".join(body)
    if len(lines) == 1 and lines[0].strip() == "{}":
        return ""
    return text


def strip_stray_quotes(text: str) -> str:
    """
    Cosmetic cleanup: drop quote characters wrapping the whole document.

    A braceless Hjson root always starts with a key or a comment, so a
    leading single quote can only be a leftover from quoting the document
    as one string. Only then are leading and trailing quotes stripped.
    """
    if text.startswith("'"):
        return text.strip("'")
    return text


def json_to_relaxed(text: str, emit_root_braces: bool = False) -> str:
    """
    Convert canonical JSON text into Hjson text.

    Args:
        text: Canonical JSON.
        emit_root_braces: Keep the "{ ... }" around a root object. Hjson
                          convention for settings files is to omit them.

    Raises:
        SettingsParseError: If the text is not valid JSON.
    """
    try:
        value = hjson.loads(text)
    except hjson.HjsonDecodeError as e:
        raise SettingsParseError(f"Invalid JSON: {e}") from e
    relaxed = hjson.dumps(value, indent=HJSON_INDENT)
    if not emit_root_braces and isinstance(value, dict):
        relaxed = strip_root_braces(relaxed)
    return relaxed


def decode(text: str, relaxed: bool) -> Any:
    """
    Decode settings file text into plain Python values.

    Args:
        text: File content.
        relaxed: True for Hjson content, False for canonical JSON.

    Returns:
        The decoded value (normally a dict; may be None for "null").

    Raises:
        SettingsParseError: If the text cannot be decoded.
    """
    canonical = relaxed_to_json(text) if relaxed else text
    try:
        return json.loads(canonical)
    except json.JSONDecodeError as e:
        raise SettingsParseError(f"Invalid JSON: {e}") from e


def encode(value: Any, relaxed: bool) -> str:
    """
    Encode plain Python values as settings file text.

    The value is first serialised to canonical JSON; for relaxed output it
    is then converted to braceless Hjson and passed through the quote
    cleanup. The result always ends with a newline.
    """
    canonical = json.dumps(value, indent=2, ensure_ascii=False, default=_json_default)
    if not relaxed:
        return canonical + "\n"
    text = strip_stray_quotes(json_to_relaxed(canonical))
    return text.rstrip("\n") + "\n"
