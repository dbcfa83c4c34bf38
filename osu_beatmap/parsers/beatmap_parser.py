"""Top-level orchestrator: parse .osu text into a Beatmap."""

import logging
from pathlib import Path

from osu_beatmap.config import DEFAULT_CONFIG, ParserConfig
from osu_beatmap.errors import MalformedField, MalformedHeader
from osu_beatmap.geometry.stacking import apply_stacking
from osu_beatmap.parsers.hit_object_parser import parse_hit_object
from osu_beatmap.parsers.metadata_parser import (
    apply_difficulty,
    apply_general,
    apply_metadata,
)
from osu_beatmap.parsers.osu_reader import read_osu_file
from osu_beatmap.parsers.sections import iter_lines, parse_version
from osu_beatmap.parsers.timing_parser import parse_timing_point
from osu_beatmap.schemas.beatmap import Beatmap

logger = logging.getLogger(__name__)


def parse_beatmap(text: str, config: ParserConfig | None = None) -> Beatmap:
    """Parse the contents of a .osu file.

    Lines that cannot be turned into a hit object are logged, recorded in
    ``Beatmap.errors`` and skipped; the rest of the file still parses.
    """
    config = config or DEFAULT_CONFIG
    beatmap = Beatmap()
    approach_rate_set = False
    hit_object_lines: list[tuple[int, str]] = []

    for index, section, line in iter_lines(text):
        if section is None:
            try:
                beatmap.format_version = parse_version(line)
            except MalformedHeader as exc:
                logger.warning("%s; assuming version 0", exc)
                beatmap.format_version = 0
                beatmap.errors.append(exc)
        elif section == "General":
            apply_general(beatmap, line)
        elif section == "Difficulty":
            if apply_difficulty(beatmap, line) == "ApproachRate":
                approach_rate_set = True
        elif section == "Metadata":
            apply_metadata(beatmap, line)
        elif section == "TimingPoints":
            parse_timing_point(line, beatmap)
        elif section == "HitObjects":
            # Sliders need every timing point and difficulty value first
            hit_object_lines.append((index, line))

    # Old maps have no ApproachRate; it was tied to OverallDifficulty
    if not approach_rate_set:
        beatmap.difficulty.approach_rate = beatmap.difficulty.overall_difficulty

    for index, line in hit_object_lines:
        try:
            beatmap.hit_objects.append(
                parse_hit_object(line, beatmap, line_index=index, config=config)
            )
        except MalformedField as exc:
            logger.warning("Skipping hit object: %s", exc)
            beatmap.errors.append(exc)

    if config.apply_stacking:
        apply_stacking(
            beatmap.hit_objects,
            approach_rate=beatmap.difficulty.approach_rate,
            stack_leniency=beatmap.stack_leniency,
            stack_distance=config.stack_distance,
        )

    logger.debug(
        "Parsed v%d beatmap %r: %d timing points, %d hit objects, %d errors",
        beatmap.format_version,
        beatmap.difficulty_name,
        len(beatmap.timing_points),
        len(beatmap.hit_objects),
        len(beatmap.errors),
    )
    return beatmap


def parse_beatmap_file(path: Path, config: ParserConfig | None = None) -> Beatmap:
    """Read and parse a .osu file.

    Raises:
        BeatmapIOError: If the file cannot be read.
    """
    config = config or DEFAULT_CONFIG
    return parse_beatmap(read_osu_file(Path(path), encoding=config.encoding), config)
