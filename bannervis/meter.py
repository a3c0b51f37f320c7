"""Level metering for the VU mode: channel RMS and peak hold."""

from dataclasses import dataclass

import numpy as np

from bannervis.config import VU_PEAK_HOLD, VU_RMS_PER_STEP


def channel_rms(frames: np.ndarray) -> tuple[float, float]:
    """RMS of the left and right channel in sample units (0..32768)."""
    if len(frames) == 0:
        return 0.0, 0.0
    power = np.mean(frames.astype(np.float64) ** 2, axis=0)
    return float(np.sqrt(power[0])), float(np.sqrt(power[1]))


def vu_length(rms: float, width: int, per_step: float = VU_RMS_PER_STEP) -> int:
    """Number of lit VU pixels for an RMS value, capped at width - 1."""
    return min(int(rms / per_step), width - 1)


@dataclass
class PeakHold:
    """Peak marker: jumps up at once, holds, then falls one step per tick."""

    hold_ticks: int = VU_PEAK_HOLD
    level: int = 0
    hold: int = 0

    def update(self, level: int) -> int:
        if level > self.level:
            self.level = level
            self.hold = self.hold_ticks
        elif self.hold > 0:
            self.hold -= 1
        elif self.level > 0:
            self.level -= 1
        return self.level
