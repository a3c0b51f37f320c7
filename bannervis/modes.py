"""Visual modes.

Each mode owns all of its state (read cursor, gain, previous waveform, peak
markers, pixel grid) and turns one snapshot of the shared buffer into either
a finished frame or None when there was nothing new to draw.
"""

import logging

import numpy as np

from bannervis import config
from bannervis.align import WaveformAligner
from bannervis.extract import SlidingExtractor, SnapshotExtractor
from bannervis.gain import GainController
from bannervis.grid import PixelGrid
from bannervis.meter import PeakHold, channel_rms, vu_length
from bannervis.palette import glow_style_palette, spectrogram_palette, spectrum_palette, vu_palette
from bannervis.render import (
    draw_glow,
    draw_spectrogram,
    draw_spectrum,
    draw_vumeter,
    draw_waveform,
    fade_shift,
)
from bannervis.shm import VisSnapshot
from bannervis.spectral import SpectralAnalyzer, band_levels, linear_band_bins, octave_band_bins

logger = logging.getLogger(__name__)


class Mode:
    name = ""
    poll_interval = config.POLL_INTERVAL

    def __init__(self, width: int = config.WIDTH, height: int = config.HEIGHT):
        self.grid = PixelGrid(width, height)

    def tick(self, snap: VisSnapshot) -> PixelGrid | None:
        raise NotImplementedError

    @property
    def level(self) -> float:
        """Current gain/level, reported in the once-a-second stats line."""
        return 0.0


class SpectrogramMode(Mode):
    """Scrolling octave spectrogram with a bar chart on the right."""

    name = "spectrogram"

    def __init__(
        self,
        width: int = config.WIDTH,
        height: int = config.HEIGHT,
        fft_size: int = config.FFT_SIZE,
        gain_tau: float = config.GAIN_TAU,
        bars: int = config.BARS_SIZE,
    ):
        if width <= bars:
            raise ValueError(f"width {width} leaves no room for history beside a {bars}-wide bar chart")
        super().__init__(width, height)
        self.bars = bars
        self.palette = spectrogram_palette(config.SPECTROGRAM_COLORS)
        self.analyzer = SpectralAnalyzer(fft_size, octave_band_bins(fft_size, height))
        self.extractor = SlidingExtractor(fft_size, fold="sum", windowed=True)
        self.gain = GainController(gain_tau)

    def tick(self, snap: VisSnapshot) -> PixelGrid | None:
        window = self.extractor.extract(snap)
        if window is None:
            return None
        energies, rms = self.analyzer.analyze(window)
        levels = band_levels(energies, self.gain.value, config.SPECTROGRAM_K, len(self.palette))
        draw_spectrogram(self.grid, levels, self.palette, self.bars)
        self.gain.update(rms)
        return self.grid

    @property
    def level(self) -> float:
        return self.gain.value


class SpectrumMode(Mode):
    """Linear spectrum, one bar per column, optionally with a fading trail."""

    name = "spectrum"

    def __init__(
        self,
        width: int = config.WIDTH,
        height: int = config.HEIGHT,
        fft_size: int = config.FFT_SIZE,
        gain_tau: float = config.GAIN_TAU,
        trail: bool = False,
    ):
        super().__init__(width, height)
        self.trail = trail
        self.palette = spectrum_palette(config.SPECTRUM_COLORS)
        self.analyzer = SpectralAnalyzer(fft_size, linear_band_bins(width))
        self.extractor = SlidingExtractor(fft_size, fold="sum", windowed=True)
        self.gain = GainController(gain_tau)
        self.frames = 0

    def tick(self, snap: VisSnapshot) -> PixelGrid | None:
        window = self.extractor.extract(snap)
        if window is None:
            return None
        energies, rms = self.analyzer.analyze(window)
        # bar height in rows, 0..height
        heights = band_levels(energies, self.gain.value, config.SPECTRUM_K, self.grid.height + 1)

        if self.trail:
            self.frames = (self.frames + 1) % 3
            if self.frames == 0:
                fade_shift(self.grid)
            draw_spectrum(self.grid, heights, self.palette, clear=False)
        else:
            draw_spectrum(self.grid, heights, self.palette)
        self.gain.update(rms)
        return self.grid

    @property
    def level(self) -> float:
        return self.gain.value


class VUMeterMode(Mode):
    """Dual VU meter with peak hold markers."""

    name = "vumeter"
    poll_interval = config.VU_POLL_INTERVAL

    def __init__(self, width: int = config.WIDTH, height: int = config.HEIGHT, hold: int = config.VU_PEAK_HOLD):
        super().__init__(width, height)
        self.palette = vu_palette()
        self.extractor = SnapshotExtractor()
        self.left = GainController(config.VU_SMOOTH_TAU, initial=0.0, floor=None)
        self.right = GainController(config.VU_SMOOTH_TAU, initial=0.0, floor=None)
        self.peak_left = PeakHold(hold)
        self.peak_right = PeakHold(hold)

    def tick(self, snap: VisSnapshot) -> PixelGrid | None:
        frames = self.extractor.extract(snap)
        if frames is None:
            return None
        rms_l, rms_r = channel_rms(frames)
        il = vu_length(self.left.update(rms_l), self.grid.width)
        ir = vu_length(self.right.update(rms_r), self.grid.width)
        draw_vumeter(
            self.grid,
            il,
            ir,
            self.peak_left.update(il),
            self.peak_right.update(ir),
            self.palette,
        )
        return self.grid

    @property
    def level(self) -> float:
        return (self.left.value + self.right.value) / 2


class WaveformMode(Mode):
    """Plain additive waveform trace of the most recent audio."""

    name = "waveform"
    poll_interval = config.WAVE_POLL_INTERVAL

    def __init__(self, width: int = config.WIDTH, height: int = config.HEIGHT):
        super().__init__(width, height)
        self.extractor = SnapshotExtractor()

    def tick(self, snap: VisSnapshot) -> PixelGrid | None:
        frames = self.extractor.extract(snap)
        if frames is None:
            return None
        draw_waveform(self.grid, frames[-self.grid.width * config.WAVE_SAMPLES_PER_COLUMN:])
        return self.grid


class WaveformGlowMode(Mode):
    """Phase-aligned waveform rendered as a glowing intensity map, with auto-gain."""

    name = "waveformf"

    def __init__(
        self,
        width: int = config.WIDTH,
        height: int = config.HEIGHT,
        gain_tau: float = config.GAIN_TAU,
        palette: str = config.GLOW_PALETTE,
        hue: float = config.GLOW_HUE,
    ):
        super().__init__(width, height)
        self.length = config.GLOW_SAMPLES_PER_COLUMN * width
        self.palette = glow_style_palette(palette, hue)
        self.extractor = SlidingExtractor(2 * self.length, fold="mean")
        self.aligner = WaveformAligner(self.length, config.GLOW_MATCH_STEP)
        self.gain = GainController(gain_tau)

    def tick(self, snap: VisSnapshot) -> PixelGrid | None:
        buf = self.extractor.extract(snap)
        if buf is None:
            return None
        self.aligner.align(buf)
        matched = self.aligner.prev
        draw_glow(self.grid, matched, self.gain.value, self.palette)
        rms = float(np.sqrt(np.mean(matched ** 2)))
        self.gain.update(rms)
        return self.grid

    @property
    def level(self) -> float:
        return self.gain.value


MODES: dict[str, type[Mode]] = {
    mode.name: mode
    for mode in (SpectrogramMode, SpectrumMode, VUMeterMode, WaveformMode, WaveformGlowMode)
}


def create_mode(name: str, **kwargs) -> Mode:
    """Instantiate a mode by name."""
    try:
        cls = MODES[name]
    except KeyError:
        raise ValueError(f"unknown mode {name!r}, expected one of {sorted(MODES)}") from None
    mode = cls(**kwargs)
    logger.info(f"Mode: {name} ({mode.grid.width}x{mode.grid.height})")
    return mode
