"""Parse every .osu file under a directory, in parallel."""

import logging
import os
from concurrent.futures import ProcessPoolExecutor, as_completed
from dataclasses import dataclass, field
from pathlib import Path

from osu_beatmap.config import ParserConfig
from osu_beatmap.pipeline.processor import process_beatmap_file
from osu_beatmap.schemas.beatmap import Beatmap

logger = logging.getLogger(__name__)


@dataclass
class BatchResult:
    beatmaps: dict[Path, Beatmap] = field(default_factory=dict)
    failed: list[Path] = field(default_factory=list)
    total_hit_objects: int = 0


def find_beatmap_files(root: Path) -> list[Path]:
    return sorted(p for p in Path(root).rglob("*.osu") if p.is_file())


def parse_beatmap_directory(
    root: Path,
    config: ParserConfig | None = None,
    max_workers: int | None = None,
) -> BatchResult:
    """Parse all .osu files below *root*. Files that fail are listed, not raised.

    Parses share no state, so each file runs in its own worker process.
    """
    paths = find_beatmap_files(root)
    result = BatchResult()
    if not paths:
        logger.warning("No .osu files found under %s", root)
        return result

    if max_workers is None:
        max_workers = min(os.cpu_count() or 4, 8)

    with ProcessPoolExecutor(max_workers=max_workers) as executor:
        futures = {
            executor.submit(process_beatmap_file, path, config): path
            for path in paths
        }
        for i, future in enumerate(as_completed(futures), 1):
            path = futures[future]
            beatmap = future.result()
            if beatmap is None:
                result.failed.append(path)
            else:
                result.beatmaps[path] = beatmap
                result.total_hit_objects += len(beatmap.hit_objects)
            if i % 500 == 0 or i == len(futures):
                logger.info("Beatmap parse progress: %d/%d", i, len(futures))

    result.failed.sort()
    logger.info(
        "Parsed %d beatmaps (%d hit objects), %d failed",
        len(result.beatmaps),
        result.total_hit_objects,
        len(result.failed),
    )
    return result
