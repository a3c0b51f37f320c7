"""Index arithmetic for the circular visualisation buffer.

The buffer is owned by squeezelite; we only ever compute offsets into it.
All offsets are normalised into [0, size), negative intermediates included.
"""

import numpy as np

from bannervis.config import VIS_BUF_SIZE


def offset_fix(offset: int, size: int = VIS_BUF_SIZE) -> int:
    """Normalise an offset into the range 0..size-1."""
    return ((offset % size) + size) % size


def available(write: int, read: int, size: int = VIS_BUF_SIZE) -> int:
    """Number of unread entries between the read and write cursors.

    write == read means nothing new, never a full buffer.
    """
    return offset_fix(write - read, size)


def indices(start: int, count: int, step: int = 1, size: int = VIS_BUF_SIZE) -> np.ndarray:
    """Normalised offsets of `count` reads starting at `start`, `step` apart."""
    raw = start + step * np.arange(count, dtype=np.int64)
    return np.mod(raw, size)
