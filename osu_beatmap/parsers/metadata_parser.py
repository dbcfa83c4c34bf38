"""Fill Beatmap fields from [General], [Difficulty] and [Metadata] lines."""

from osu_beatmap.parsers.sections import parse_float, parse_int, read_key_value
from osu_beatmap.schemas.beatmap import Beatmap, Gamemode


def apply_general(beatmap: Beatmap, line: str) -> None:
    pair = read_key_value(line)
    if pair is None:
        return
    key, value = pair

    if key == "AudioFilename":
        beatmap.audio.filename = value
    elif key == "AudioLeadIn":
        beatmap.audio.lead_in = parse_int(value)
    elif key == "PreviewTime":
        beatmap.metadata.preview_time = parse_int(value)
    elif key == "Mode":
        beatmap.gamemode = Gamemode.parse(value)
    elif key == "StackLeniency":
        beatmap.stack_leniency = parse_float(value)


_DIFFICULTY_FIELDS = {
    "HPDrainRate": "hp_drain",
    "CircleSize": "circle_size",
    "OverallDifficulty": "overall_difficulty",
    "ApproachRate": "approach_rate",
    "SliderMultiplier": "slider_multiplier",
    "SliderTickRate": "slider_tick_rate",
}

# Accepted range of the slider settings; values outside are clamped.
_DIFFICULTY_LIMITS = {
    "SliderMultiplier": (0.4, 3.6),
    "SliderTickRate": (0.5, 8.0),
}


def apply_difficulty(beatmap: Beatmap, line: str) -> str | None:
    """Apply one difficulty setting. Returns the key that was set, if any."""
    pair = read_key_value(line)
    if pair is None:
        return None
    key, value = pair

    attr = _DIFFICULTY_FIELDS.get(key)
    if attr is None:
        return None
    number = parse_float(value)
    if key in _DIFFICULTY_LIMITS:
        low, high = _DIFFICULTY_LIMITS[key]
        number = min(max(number, low), high)
    setattr(beatmap.difficulty, attr, number)
    return key


def apply_metadata(beatmap: Beatmap, line: str) -> None:
    pair = read_key_value(line)
    if pair is None:
        return
    key, value = pair

    if key == "Title":
        beatmap.title = value
    elif key == "TitleUnicode":
        beatmap.title_unicode = value
    elif key == "Artist":
        beatmap.artist = value
    elif key == "ArtistUnicode":
        beatmap.artist_unicode = value
    elif key == "Creator":
        beatmap.creator = value
    elif key == "Version":
        beatmap.difficulty_name = value
    elif key == "Source":
        beatmap.source = value
    elif key == "Tags":
        beatmap.metadata.tags = value.split()
    elif key == "BeatmapID":
        beatmap.beatmap_id = parse_int(value)
    elif key == "BeatmapSetID":
        beatmap.beatmap_set_id = parse_int(value, default=-1)
