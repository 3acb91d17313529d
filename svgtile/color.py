from __future__ import annotations

import colorsys
import math
import random
from dataclasses import dataclass

from .errors import ColorGenerationError


@dataclass(frozen=True)
class BackgroundColor:
    hue: float
    saturation: float
    lightness: float
    red: float
    green: float
    blue: float
    alpha: float = 1.0

    @property
    def rgb(self) -> tuple[float, float, float]:
        return self.red, self.green, self.blue

    @property
    def rgba8(self) -> tuple[int, int, int, int]:
        r, g, b = (round(c * 255) for c in self.rgb)
        return r, g, b, round(self.alpha * 255)


def _check_unit(name: str, v: float) -> None:
    if math.isnan(v) or not 0.0 <= v <= 1.0:
        raise ColorGenerationError(f"{name} out of range [0, 1]: {v!r}")


def pastel_color(
    rng: random.Random,
    saturation: float = 0.75,
    lightness: float = 0.75,
    hue_max: float = 360.0,
) -> BackgroundColor:
    """Draw one hue from ``rng`` and build an opaque HSL color from it.

    Consumes exactly one sample from the random source.
    """
    _check_unit("saturation", saturation)
    _check_unit("lightness", lightness)
    # random() is in [0, 1), so hue stays below hue_max
    hue = rng.random() * hue_max
    r, g, b = colorsys.hls_to_rgb(hue / 360.0, lightness, saturation)
    for name, v in (("red", r), ("green", g), ("blue", b)):
        _check_unit(name, v)
    return BackgroundColor(
        hue=hue, saturation=saturation, lightness=lightness, red=r, green=g, blue=b
    )
