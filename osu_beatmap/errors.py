"""Exceptions raised while reading and parsing .osu beatmap files."""


class BeatmapError(Exception):
    """Base class for all beatmap parsing errors."""


class BeatmapIOError(BeatmapError, OSError):
    """The beatmap file could not be read. Fatal: raised before parsing starts."""


class MalformedHeader(BeatmapError, ValueError):
    """A version or section header line could not be interpreted."""


class MalformedField(BeatmapError, ValueError):
    """A mandatory positional field is missing or not numeric.

    Only the object on the offending line is dropped; parsing continues.
    """

    def __init__(self, message: str, line_index: int = -1, line: str = ""):
        super().__init__(message)
        self.line_index = line_index
        self.line = line

    def __str__(self) -> str:
        msg = super().__str__()
        if self.line_index >= 0:
            return f"line {self.line_index}: {msg}"
        return msg


class MalformedSliderDescriptor(MalformedField):
    """The slider bit is set but the curve descriptor field is absent or empty."""
