"""Phase-lock successive waveform windows to stop the trace from jittering.

Audio blocks start at arbitrary points of the waveform period. Before
drawing, the new block is shifted to wherever it best matches what was
drawn last time (brute-force cross-correlation, every `step`-th sample).
"""

import numpy as np
from numpy.lib.stride_tricks import sliding_window_view


def find_match(prev: np.ndarray, buf: np.ndarray, step: int = 8, shift_max: int | None = None) -> int:
    """Shift s in [0, shift_max) maximising sum_j prev[j] * buf[j + s].

    The first shift to strictly beat the running best (starting at 0) wins,
    so ties go to the smallest shift and an all-negative correlation gives 0.
    """
    length = len(prev)
    if shift_max is None:
        shift_max = length
    if len(buf) < length + shift_max - 1:
        raise ValueError(f"buf needs {length + shift_max - 1} samples, has {len(buf)}")

    windows = sliding_window_view(buf[: length + shift_max - 1], length)[:, ::step]
    sums = windows @ prev[::step]
    best = int(np.argmax(sums))
    if sums[best] <= 0:
        return 0
    return best


class WaveformAligner:
    """Keeps the previously drawn window and aligns each new one against it."""

    def __init__(self, length: int, step: int = 8):
        self.length = length
        self.step = step
        self.prev = np.zeros(length, dtype=np.float64)

    def align(self, buf: np.ndarray) -> int:
        """Align buf (at least 2*length - 1 samples) and keep the match in self.prev."""
        shift = find_match(self.prev, buf, self.step)
        self.prev[:] = buf[shift:shift + self.length]
        return shift
