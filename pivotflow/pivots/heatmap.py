"""Heatmap colors for probability tables.

``color_for`` maps a probability (percent) to an RGB color:

* ``0`` is the "no data" sentinel and always gets the neutral background color
  of the current mode, whatever the scheme.
* Anything above 0 is scaled to ``[0, 1]``, reshaped with
  ``fraction ** (1 / intensity)`` (intensity > 1 pushes small values toward
  the saturated end) and then placed on the scheme's gradient.

``green`` is a simple two-channel ramp with separate dark/light variants; the
other schemes interpolate between ten control points of the matplotlib
palettes of the same name.
"""

from __future__ import annotations

import math
import re
from enum import Enum
from typing import NamedTuple, Sequence


class RGB(NamedTuple):
    r: int
    g: int
    b: int


class HeatmapScheme(str, Enum):
    GREEN = "green"
    VIRIDIS = "viridis"
    PLASMA = "plasma"
    INFERNO = "inferno"
    TURBO = "turbo"
    BLUES = "blues"


class TextColor(str, Enum):
    DARK = "#000000"
    LIGHT = "#ffffff"


NEUTRAL_DARK = RGB(30, 30, 30)
NEUTRAL_LIGHT = RGB(250, 250, 250)

PALETTES: dict[HeatmapScheme, tuple[RGB, ...]] = {
    HeatmapScheme.VIRIDIS: (
        RGB(68, 1, 84),
        RGB(72, 40, 120),
        RGB(62, 73, 137),
        RGB(49, 104, 142),
        RGB(38, 130, 142),
        RGB(31, 158, 137),
        RGB(53, 183, 121),
        RGB(110, 206, 88),
        RGB(181, 222, 43),
        RGB(253, 231, 37),
    ),
    HeatmapScheme.PLASMA: (
        RGB(13, 8, 135),
        RGB(75, 3, 161),
        RGB(125, 3, 168),
        RGB(168, 34, 150),
        RGB(203, 70, 121),
        RGB(229, 107, 93),
        RGB(248, 148, 65),
        RGB(253, 195, 40),
        RGB(250, 239, 85),
        RGB(240, 249, 33),
    ),
    HeatmapScheme.INFERNO: (
        RGB(0, 0, 4),
        RGB(40, 11, 84),
        RGB(101, 21, 110),
        RGB(159, 42, 99),
        RGB(212, 72, 66),
        RGB(245, 108, 39),
        RGB(252, 153, 21),
        RGB(248, 201, 37),
        RGB(240, 240, 110),
        RGB(252, 255, 164),
    ),
    HeatmapScheme.TURBO: (
        RGB(48, 18, 59),
        RGB(62, 73, 137),
        RGB(33, 145, 140),
        RGB(53, 183, 121),
        RGB(159, 218, 58),
        RGB(253, 231, 37),
        RGB(254, 178, 35),
        RGB(240, 92, 42),
        RGB(189, 21, 47),
        RGB(122, 4, 3),
    ),
    HeatmapScheme.BLUES: (
        RGB(247, 251, 255),
        RGB(222, 235, 247),
        RGB(198, 219, 239),
        RGB(158, 202, 225),
        RGB(107, 174, 214),
        RGB(66, 146, 198),
        RGB(33, 113, 181),
        RGB(8, 81, 156),
        RGB(8, 48, 107),
        RGB(3, 19, 43),
    ),
}

_RGB_CSS_RE = re.compile(r"rgb\((\d+),\s*(\d+),\s*(\d+)\)")


def _round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def interpolate_color(palette: Sequence[RGB], value: float) -> RGB:
    """Linear interpolation between the two control points around ``value`` in [0, 1]."""
    value = min(1.0, max(0.0, value))
    idx = value * (len(palette) - 1)
    lower = math.floor(idx)
    upper = math.ceil(idx)
    if lower == upper:
        return palette[lower]

    t = idx - lower
    lo = palette[lower]
    hi = palette[upper]
    return RGB(
        _round_half_up(lo.r + (hi.r - lo.r) * t),
        _round_half_up(lo.g + (hi.g - lo.g) * t),
        _round_half_up(lo.b + (hi.b - lo.b) * t),
    )


def _green_ramp(intensity: float, dark_mode: bool) -> RGB:
    if dark_mode:
        return RGB(
            math.floor(15 + intensity * 40),
            math.floor(40 + intensity * 120),
            math.floor(15 + intensity * 40),
        )
    return RGB(
        math.floor(200 - intensity * 150),
        math.floor(220 - intensity * 50),
        math.floor(255 - intensity * 100),
    )


def color_for(
    probability: float,
    dark_mode: bool = False,
    scheme: HeatmapScheme | str = HeatmapScheme.GREEN,
    intensity: float = 1.0,
) -> RGB:
    """Heatmap color for a probability in percent.

    Args:
        probability: 0-100; values outside are clamped, ``nan`` counts as 0.
        dark_mode: pick the dark-background variant.
        scheme: palette name or ``HeatmapScheme``.
        intensity: exponent ``> 0``; values above 1 saturate low probabilities faster.

    Raises:
        ValueError: unknown scheme or non-positive intensity.
    """

    scheme = HeatmapScheme(scheme)
    if not intensity > 0:
        raise ValueError(f"intensity must be > 0, got {intensity!r}")

    if not probability > 0:
        return NEUTRAL_DARK if dark_mode else NEUTRAL_LIGHT

    fraction = min(100.0, float(probability)) / 100.0
    fraction = fraction ** (1.0 / intensity)

    if scheme is HeatmapScheme.GREEN:
        return _green_ramp(fraction, dark_mode)
    return interpolate_color(PALETTES[scheme], fraction)


def text_color_for(rgb: RGB | Sequence[int]) -> TextColor:
    """Readable text color on top of ``rgb``: dark on bright backgrounds."""
    r, g, b = rgb
    luminance = (0.299 * r + 0.587 * g + 0.114 * b) / 255
    return TextColor.DARK if luminance > 0.5 else TextColor.LIGHT


def rgb_css(rgb: RGB | Sequence[int]) -> str:
    r, g, b = rgb
    return f"rgb({r}, {g}, {b})"


def parse_rgb_css(value: str) -> RGB | None:
    """Parse ``"rgb(r, g, b)"``; returns None for anything else."""
    match = _RGB_CSS_RE.search(value or "")
    if not match:
        return None
    return RGB(int(match.group(1)), int(match.group(2)), int(match.group(3)))
