"""Process individual .osu files into parsed beatmaps."""

import logging
from pathlib import Path

from osu_beatmap.config import DEFAULT_CONFIG, ParserConfig
from osu_beatmap.parsers.beatmap_parser import parse_beatmap
from osu_beatmap.parsers.osu_reader import compute_beatmap_hash, read_osu_bytes
from osu_beatmap.schemas.beatmap import Beatmap

logger = logging.getLogger(__name__)


def process_beatmap_file(
    path: Path, config: ParserConfig | None = None
) -> Beatmap | None:
    """Parse one .osu file and stamp its checksum, or return None on failure."""
    config = config or DEFAULT_CONFIG
    try:
        data = read_osu_bytes(path)
        beatmap = parse_beatmap(data.decode(config.encoding, errors="replace"), config)
        beatmap.checksum = compute_beatmap_hash(data)
        return beatmap
    except Exception:
        logger.exception("Failed to process %s", path)
        return None
