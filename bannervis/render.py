"""Painters for each visual mode. All of them draw into an existing grid."""

import numpy as np

from bannervis.config import (
    BARS_SIZE,
    GLOW_SAMPLES_PER_COLUMN,
    GLOW_SCALE,
    WAVE_COLOR,
    WAVE_SAMPLES_PER_COLUMN,
)
from bannervis.grid import PixelGrid
from bannervis.palette import Palette


def _trunc_div(a, b) -> np.ndarray:
    """Integer division rounding towards zero (C semantics)."""
    return np.trunc(np.asarray(a, dtype=np.float64) / b).astype(np.int64)


def draw_spectrogram(grid: PixelGrid, levels: np.ndarray, palette: Palette, bars: int = BARS_SIZE) -> None:
    """Scroll the history left, add the newest column, redraw the bar chart.

    levels[0] is the lowest band and lands on the bottom row.
    """
    px = grid.pixels
    column = grid.width - bars - 1
    grid.scroll_left(grid.width - bars)

    ncolors = len(palette)
    bar_colors = np.arange(bars) * ncolors // bars
    for band, level in enumerate(levels[: grid.height]):
        yy = grid.height - 1 - band
        grid[yy, column] = palette[level]
        lit = bar_colors <= level
        px[yy, grid.width - bars:] = 0
        px[yy, grid.width - bars:][lit] = palette.colors(bar_colors[lit])


def fade_shift(grid: PixelGrid, factor: float = 0.75) -> None:
    """Move the previous frame one pixel right and up, dimmed (pseudo-3d trail)."""
    px = grid.pixels
    shifted = np.zeros_like(px)
    shifted[:-1, 1:] = (px[1:, :-1] * factor).astype(np.uint8)
    px[:] = shifted


def draw_spectrum(grid: PixelGrid, heights: np.ndarray, palette: Palette, clear: bool = True) -> None:
    """One vertical bar per column, coloured by row from the palette."""
    if clear:
        grid.clear()
    px = grid.pixels
    rows = np.arange(grid.height)
    row_colors = palette.colors(rows * (len(palette) - 1) // max(grid.height - 1, 1))
    for x, h in enumerate(heights[: grid.width]):
        for y in rows[rows < h]:
            px[grid.height - 1 - y, x] = row_colors[y]


def _vu_pixel(grid: PixelGrid, x: int, rgb: tuple[int, int, int]) -> None:
    x = min(max(x, 2), grid.width - 3)
    grid.pixels[2:grid.height - 2, x] = rgb


def draw_vumeter(
    grid: PixelGrid,
    left: int,
    right: int,
    peak_left: int,
    peak_right: int,
    palette: Palette,
) -> None:
    """Dual VU growing outwards from the centre, inside a blue border."""
    w = grid.width
    px = grid.pixels
    grid.clear()
    px[0, :, 2] = 0xFF
    px[-1, :, 2] = 0xFF
    px[:, 0, 2] = 0xFF
    px[:, -1, 2] = 0xFF

    for i in range(left):
        _vu_pixel(grid, (w - i - 1) // 2, palette[i])
    for i in range(right):
        _vu_pixel(grid, (w + i + 1) // 2, palette[i])

    _vu_pixel(grid, (w - peak_left - 1) // 2, palette.top)
    _vu_pixel(grid, (w + peak_right + 1) // 2, palette.top)


def draw_waveform(
    grid: PixelGrid,
    frames: np.ndarray,
    color: tuple[int, int, int] = WAVE_COLOR,
    per_column: int = WAVE_SAMPLES_PER_COLUMN,
) -> None:
    """Additive trace of L+R, `per_column` frames per pixel column."""
    grid.clear()
    frames = frames[: grid.width * per_column]
    mono = frames[:, 0].astype(np.int64) + frames[:, 1]
    rows = _trunc_div(grid.height - 1 + _trunc_div(mono, 512), 2)
    rows = np.clip(rows, 0, grid.height - 1)
    cols = np.arange(len(mono)) // per_column

    hits = np.zeros((grid.height, grid.width), dtype=np.int64)
    np.add.at(hits, (rows, cols), 1)
    total = hits[:, :, None] * np.asarray(color, dtype=np.int64)
    grid.pixels[:] = np.minimum(total, 255)


def draw_glow(
    grid: PixelGrid,
    samples: np.ndarray,
    gain: float,
    palette: Palette,
    per_column: int = GLOW_SAMPLES_PER_COLUMN,
    scale: float = GLOW_SCALE,
) -> np.ndarray:
    """Waveform as an intensity map: count hits per pixel, then colour the counts.

    Returns the hit counts.
    """
    samples = samples[: grid.width * per_column]
    h = (samples * (scale / gain)).astype(np.int64)
    rows = np.clip(_trunc_div(grid.height + h - 1, 2), 0, grid.height - 1)
    cols = np.arange(len(samples)) // per_column

    intensity = np.zeros((grid.height, grid.width), dtype=np.int64)
    np.add.at(intensity, (rows, cols), 1)
    grid.pixels[:] = palette.colors(intensity)
    return intensity
