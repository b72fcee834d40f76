"""Named canvas sizes for common social media placements."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List


@dataclass(frozen=True)
class CanvasPreset:
    name: str
    width: int
    height: int

    @property
    def slug(self) -> str:
        """Lowercase, dash-separated key usable on the command line."""
        cleaned = "".join(c if c.isalnum() else " " for c in self.name.lower())
        return "-".join(cleaned.split())


PRESETS: List[CanvasPreset] = [
    CanvasPreset("Instagram Portrait 4:5", 1080, 1350),
    CanvasPreset("Insta Square 1:1", 1350, 1350),
    CanvasPreset("Instagram Story 9:16", 1080, 1920),
    CanvasPreset("LinkedIn Personal Cover", 1584, 396),
    CanvasPreset("Facebook Page Cover", 1640, 664),
    CanvasPreset("Facebook Event Image", 1920, 1080),
    CanvasPreset("Facebook Group Header", 1640, 856),
    CanvasPreset("YouTube Thumbnail", 1280, 720),
    CanvasPreset("YouTube Profile", 800, 800),
    CanvasPreset("YouTube Cover", 2560, 1440),
    CanvasPreset("Twitter Profile", 400, 400),
    CanvasPreset("Twitter Header", 1500, 500),
]

DEFAULT_PRESET = PRESETS[0]

_BY_KEY: Dict[str, CanvasPreset] = {}
for _preset in PRESETS:
    _BY_KEY[_preset.slug] = _preset
    _BY_KEY[_preset.name.lower()] = _preset


def get_preset(name: str) -> CanvasPreset:
    """
    Look up a preset by display name or slug (case-insensitive).

    Raises:
        KeyError: If no preset matches

    Example:
        >>> get_preset("youtube-thumbnail").width
        1280
    """
    key = name.strip().lower()
    if key in _BY_KEY:
        return _BY_KEY[key]
    raise KeyError(f"Unknown preset: {name!r}")
