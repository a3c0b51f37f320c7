"""Colour ramps, computed once at startup.

Every lookup clamps its index into the table, so renderers can pass raw
levels without checking them first.
"""

import colorsys
import random

import numpy as np


class Palette:
    """Immutable table of RGB triples indexed by intensity level."""

    def __init__(self, colors):
        table = np.array(colors, dtype=np.uint8).reshape(-1, 3)
        table.setflags(write=False)
        self.table = table

    def __len__(self) -> int:
        return len(self.table)

    def __getitem__(self, index: int) -> tuple[int, int, int]:
        r, g, b = self.table[min(max(int(index), 0), len(self.table) - 1)]
        return int(r), int(g), int(b)

    @property
    def top(self) -> tuple[int, int, int]:
        return self[len(self.table) - 1]

    def colors(self, indices: np.ndarray) -> np.ndarray:
        """Vectorised lookup; returns an array of shape indices.shape + (3,)."""
        return self.table[np.clip(indices, 0, len(self.table) - 1)]


def spectrogram_palette(levels: int = 240) -> Palette:
    """Black -> blue -> green -> yellow -> red, in four equal segments."""
    r = g = b = 0
    seg = levels // 4
    colors = []
    for t in range(levels):
        if t < seg:
            b += 2
        elif t < 2 * seg:
            b -= 2
            g += 2
        elif t < 3 * seg:
            r += 4
        else:
            g -= 2
        colors.append((min(max(r, 0), 255), min(max(g, 0), 255), min(max(b, 0), 255)))
    return Palette(colors)


def spectrum_palette(levels: int = 180) -> Palette:
    """Dark blue -> green -> yellow/orange -> red, bottom row to top row."""
    r, g, b = 0, 0, 60
    seg = levels // 3
    colors = []
    for t in range(levels):
        colors.append((min(r, 255), max(min(g, 255), 0), max(b, 0)))
        if t < seg:
            g += 2
        elif t < 2 * seg:
            r += 4
            b -= 1
        else:
            g -= 2
    return Palette(colors)


def vu_color(c: int) -> tuple[int, int, int]:
    """Colour of the c-th VU pixel counted from the centre."""
    if c < 25:
        return (0, 8 * c, 0)
    if c < 50:
        return ((c - 25) * 10, 200, 0)
    if c < 75:
        return (250, 200 - (c - 50) * 8, 0)
    return (255, 0, 0)


def vu_palette() -> Palette:
    """Green -> yellow -> red; the last entry (red) is the peak marker."""
    return Palette([vu_color(c) for c in range(76)])


def glow_palette(scale: int = 15) -> Palette:
    """Hit count 0..16 -> pale green glow, saturating green first."""
    colors = []
    for i in range(17):
        colors.append((scale * i, scale * min(2 * i, 16), scale * i))
    return Palette(colors)


def hue_ramp(levels: int, hue: float, saturation: float = 1.0, scale: float = 1.0) -> Palette:
    """Single-hue ramp from black to full brightness."""
    colors = []
    for t in range(levels):
        v = t / max(levels - 1, 1)
        r, g, b = colorsys.hsv_to_rgb(hue, saturation, v)
        colors.append(tuple(min(int(c * 255 * scale), 255) for c in (r, g, b)))
    return Palette(colors)


def random_ramp(levels: int, rng: random.Random | None = None) -> Palette:
    """Single-hue ramp with a randomly seeded hue."""
    rng = rng or random.Random()
    return hue_ramp(levels, rng.random(), saturation=0.85)


GLOW_STYLES = ("glow", "hue", "random")


def glow_style_palette(style: str, hue: float = 0.33, rng: random.Random | None = None) -> Palette:
    """17-level hit count palette for the glow waveform in the requested style."""
    if style == "glow":
        return glow_palette()
    if style == "hue":
        return hue_ramp(17, hue, saturation=0.85)
    if style == "random":
        return random_ramp(17, rng)
    raise ValueError(f"palette style must be one of {GLOW_STYLES}, got {style!r}")
