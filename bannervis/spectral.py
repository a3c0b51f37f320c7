"""FFT band analysis for the spectrogram and spectrum modes.

A real FFT of the windowed mono signal is grouped into bands by summing
power (re^2 + im^2) over each band's bin range. Two schedules:
  - octave: one band per display row, width doubling per band, starting
    just above DC (bin 2 at 2048 points / 44.1 kHz, ~43 Hz)
  - linear: one band per display column, width growing as 2^(x/8) / 20

No dB scale here: band levels are the double square root of energy relative
to the running gain, which compresses the range into something that looks
even on a handful of LEDs.
"""

import logging

import numpy as np

from bannervis.config import SPECTRUM_FIRST_BIN
from bannervis.errors import TransformSetupFailure

logger = logging.getLogger(__name__)


def octave_band_bins(fft_size: int, num_bands: int) -> list[tuple[int, int]]:
    """Bin ranges (lo, hi) for octave bands, one per display row.

    Starts at bin fft_size/1024 with the same width, then doubles.
    """
    size = max(1, fft_size // 1024)
    index = size
    edges = []
    for _ in range(num_bands):
        edges.append((index, index + size))
        index += size
        size *= 2
    return edges


def linear_band_bins(num_bands: int, first_bin: int = SPECTRUM_FIRST_BIN) -> list[tuple[int, int]]:
    """Bin ranges (lo, hi) for the linear spectrum, one per display column."""
    index = first_bin
    edges = []
    for x in range(num_bands):
        size = max(1, int(2.0 ** (x / 8.0) / 20.0))
        edges.append((index, index + size))
        index += size
    return edges


def band_levels(energies: np.ndarray, gain: float, k: float, levels: int) -> np.ndarray:
    """Map band energies to integer levels 0..levels-1.

    level = K * sqrt(sqrt(energy) / gain), truncated and clamped.
    """
    raw = k * np.sqrt(np.sqrt(energies) / gain)
    return np.clip(raw.astype(np.int64), 0, levels - 1)


class SpectralAnalyzer:
    """Forward real FFT plus band energy aggregation."""

    def __init__(self, fft_size: int, band_bins: list[tuple[int, int]]):
        if fft_size < 2 or fft_size & (fft_size - 1):
            raise TransformSetupFailure(f"FFT size must be a power of two, got {fft_size}")
        if not band_bins:
            raise TransformSetupFailure("no bands to analyse")
        num_bins = fft_size // 2 + 1
        for lo, hi in band_bins:
            if lo < 0 or hi <= lo or hi > num_bins:
                raise TransformSetupFailure(
                    f"band ({lo}, {hi}) outside the {num_bins} bins of a {fft_size}-point FFT"
                )
        self.fft_size = fft_size
        self.band_bins = band_bins
        self.end_bin = band_bins[-1][1]
        logger.debug(
            f"Analyzer: {fft_size}-point FFT, {len(band_bins)} bands, "
            f"bins {band_bins[0][0]}..{self.end_bin - 1}"
        )

    def transform(self, window: np.ndarray) -> np.ndarray:
        """fft_size real samples -> fft_size/2 + 1 complex bins."""
        if len(window) != self.fft_size:
            raise ValueError(f"expected {self.fft_size} samples, got {len(window)}")
        return np.fft.rfft(window)

    def band_energies(self, spectrum: np.ndarray) -> np.ndarray:
        """Summed power per band."""
        power = spectrum.real ** 2 + spectrum.imag ** 2
        return np.array([power[lo:hi].sum() for lo, hi in self.band_bins], dtype=np.float64)

    def analyze(self, window: np.ndarray) -> tuple[np.ndarray, float]:
        """Band energies plus the RMS-like statistic that drives the gain.

        The statistic is sqrt(total band energy / end_bin): bins below the
        first band count as silent bins.
        """
        energies = self.band_energies(self.transform(window))
        stat = float(np.sqrt(energies.sum() / self.end_bin))
        return energies, stat
