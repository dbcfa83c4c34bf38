"""Read .osu files from disk."""

import hashlib
from pathlib import Path

from osu_beatmap.errors import BeatmapIOError


def read_osu_bytes(filepath: Path) -> bytes:
    try:
        return Path(filepath).read_bytes()
    except OSError as exc:
        raise BeatmapIOError(f"Cannot read beatmap file {filepath}: {exc}") from exc


def read_osu_file(filepath: Path, encoding: str = "utf-8-sig") -> str:
    """Read a whole .osu file as text. Undecodable bytes are replaced."""
    return read_osu_bytes(filepath).decode(encoding, errors="replace")


def compute_beatmap_hash(data: bytes) -> str:
    """MD5 of the raw file, the checksum the game identifies beatmaps by."""
    return hashlib.md5(data).hexdigest()
