"""Split .osu text into sectioned content lines.

The format is line oriented::

    osu file format v14

    [General]
    AudioFilename: audio.mp3
    // comment
    [HitObjects]
    256,192,1000,1,0,0:0:0:0:

Each content line is routed to the handler of the section it sits in.
"""

from __future__ import annotations

import re
from typing import Iterator

from osu_beatmap.errors import MalformedHeader

VERSION_PREFIX = "osu file format v"
COMMENT_PREFIX = "//"
BOM = "\ufeff"

_SECTION_RE = re.compile(r"^\[(\w+)\]$")
_KEY_VALUE_RE = re.compile(r"^(\w+)\s*:\s*(.*)$")


def parse_int(value: str, default: int = 0) -> int:
    """Parse an integer field, accepting decimal text like ``"1.0"``."""
    value = value.strip()
    try:
        return int(value)
    except ValueError:
        pass
    try:
        return int(float(value))
    except (ValueError, OverflowError):
        return default


def parse_float(value: str, default: float = 0.0) -> float:
    try:
        return float(value.strip())
    except ValueError:
        return default


def parse_version(line: str) -> int:
    """Extract N from ``osu file format vN``.

    Raises:
        MalformedHeader: If the suffix is not an integer.
    """
    suffix = line[len(VERSION_PREFIX):].strip()
    try:
        return int(suffix)
    except ValueError:
        raise MalformedHeader(f"Unparseable format version: {line!r}") from None


def section_name(line: str) -> str | None:
    """Return the section name if *line* is a ``[Section]`` header."""
    match = _SECTION_RE.match(line)
    return match.group(1) if match else None


def read_key_value(line: str) -> tuple[str, str] | None:
    """Split a ``Key: value`` line; None if the line is not one."""
    match = _KEY_VALUE_RE.match(line.strip())
    if match is None:
        return None
    return match.group(1), match.group(2).strip()


def iter_lines(text: str) -> Iterator[tuple[int, str | None, str]]:
    """Yield ``(line_index, section, line)`` for every content line.

    Comments, blank lines and section headers are consumed here. Only the
    version line is yielded with section None; any other line that sits
    before the first header is dropped.
    """
    section = None
    for index, raw in enumerate(text.splitlines()):
        line = raw.lstrip(BOM).strip()
        if not line or line.startswith(COMMENT_PREFIX):
            continue

        name = section_name(line)
        if name is not None:
            section = name
            continue

        if line.startswith(VERSION_PREFIX):
            yield index, None, line
            continue

        if section is None:
            continue

        yield index, section, line
