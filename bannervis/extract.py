"""Pull audio windows out of the shared ring buffer.

Two policies:
  - SlidingExtractor: waits until a full window of new entries is available,
    reads it relative to our own read cursor, then advances the cursor.
    If we fall behind, the producer simply overwrites what we missed.
  - SnapshotExtractor: whenever the write cursor has moved, unwraps the whole
    ring into a linear array, oldest frame first.
"""

import numpy as np

from bannervis.config import CHANNELS, VIS_BUF_SIZE
from bannervis.ring import available, indices, offset_fix
from bannervis.shm import VisSnapshot

FOLD_MODES = ("sum", "mean")


def triangular_window(n: int) -> np.ndarray:
    """Weights rising 0 -> 1 over the first half and falling back over the second."""
    half = n / 2.0
    i = np.arange(n, dtype=np.float64)
    return np.where(i < half, i / half, (n - i) / half)


def fold_stereo(left: np.ndarray, right: np.ndarray, fold: str) -> np.ndarray:
    """Fold two channels to mono, summed or averaged."""
    if fold == "sum":
        return left + right
    return (left + right) * 0.5


class SlidingExtractor:
    """Reads `window` stereo frames each time `window` new entries have arrived.

    The frames span entries [read - window, read + window) of the ring, so
    consecutive windows overlap by half.
    """

    def __init__(
        self,
        window: int,
        fold: str = "sum",
        windowed: bool = False,
        size: int = VIS_BUF_SIZE,
    ):
        if fold not in FOLD_MODES:
            raise ValueError(f"fold must be one of {FOLD_MODES}, got {fold!r}")
        if CHANNELS * window > size:
            raise ValueError(f"window of {window} frames does not fit a ring of {size}")
        self.window = window
        self.fold = fold
        self.size = size
        self.read_cursor = 0
        self._weights = triangular_window(window) if windowed else None

    def extract(self, snap: VisSnapshot) -> np.ndarray | None:
        """Next window, or None when not enough new audio has arrived."""
        if available(snap.write_cursor, self.read_cursor, self.size) < self.window:
            return None

        idx = indices(self.read_cursor - self.window, self.window, CHANNELS, self.size)
        left = snap.samples[idx].astype(np.float64)
        right = snap.samples[(idx + 1) % self.size].astype(np.float64)
        out = fold_stereo(left, right, self.fold)
        if self._weights is not None:
            out = out * self._weights

        self.read_cursor = offset_fix(self.read_cursor + self.window, self.size)
        return out


class SnapshotExtractor:
    """Unwraps the full ring whenever the producer has written anything.

    Channels stay separate, for consumers that need left and right apart.
    """

    def __init__(self, size: int = VIS_BUF_SIZE):
        self.size = size
        self.last_cursor = 0

    def extract(self, snap: VisSnapshot) -> np.ndarray | None:
        """All frames as an (n, 2) int32 array, oldest first; None if nothing moved."""
        if snap.write_cursor == self.last_cursor:
            return None
        self.last_cursor = snap.write_cursor

        # keep L/R pairs together even if the cursor is mid-frame
        start = offset_fix(snap.write_cursor, self.size)
        start -= start % CHANNELS
        ring = snap.samples[: self.size]
        linear = np.concatenate((ring[start:], ring[:start])).astype(np.int32)
        return linear.reshape(-1, CHANNELS)
