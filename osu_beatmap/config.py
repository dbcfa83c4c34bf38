"""Parser configuration: numeric tolerances and switches in one dataclass."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, fields
from pathlib import Path


@dataclass
class ParserConfig:
    """Tunables for parsing and geometry derivation.

    The defaults reproduce the game client's behaviour and should only be
    changed for experiments.
    """

    # File reading
    encoding: str = "utf-8-sig"  # strips a leading BOM

    # Slider curve approximation
    bezier_tolerance: float = 0.25
    circular_arc_tolerance: float = 0.1
    catmull_detail: int = 50  # samples per Catmull-Rom segment
    linear_tolerance: float = 0.001  # |cross| at or below this makes a 3-point arc linear

    # Slider events
    max_slider_length: float = 100000.0
    legacy_tick_offset: float = 36.0  # ms the slider end is pulled back from the true end

    # Stacking
    apply_stacking: bool = True
    stack_distance: float = 3.0  # osu! pixels

    def save(self, path: Path) -> None:
        """Save config to JSON file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(asdict(self), indent=2), encoding="utf-8")

    @classmethod
    def load(cls, path: Path) -> ParserConfig:
        """Load config from JSON file."""
        data = json.loads(Path(path).read_text(encoding="utf-8"))
        # Only pass known fields to handle forward/backward compat
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})


DEFAULT_CONFIG = ParserConfig()
