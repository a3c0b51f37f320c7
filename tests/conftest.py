"""Shared fixtures: an in-memory stand-in for squeezelite's shared buffer."""

import contextlib
from pathlib import Path

import numpy as np
import pytest

from bannervis.config import VIS_BUF_SIZE
from bannervis.ring import indices, offset_fix
from bannervis.shm import VisRecord, VisSnapshot

SAMPLE_RATE = 44100


class FakeVisSource:
    """Ring buffer producer/reader pair living in process memory."""

    def __init__(self, size: int = VIS_BUF_SIZE, running: bool = True):
        self.samples = np.zeros(size, dtype=np.int16)
        self.write_cursor = 0
        self.running = running
        self.rate = SAMPLE_RATE
        self.locked = 0

    def push(self, frames: np.ndarray) -> None:
        """Append interleaved stereo frames, wrapping like squeezelite does."""
        flat = np.asarray(frames, dtype=np.int16).reshape(-1)
        idx = indices(self.write_cursor, len(flat), 1, len(self.samples))
        self.samples[idx] = flat
        self.write_cursor = offset_fix(self.write_cursor + len(flat), len(self.samples))

    def snapshot(self) -> VisSnapshot:
        return VisSnapshot(self.write_cursor, self.running, self.samples.copy(), self.rate, 0)

    @contextlib.contextmanager
    def read_locked(self):
        self.locked += 1
        yield


def stereo_tone(freq: float, start: int, count: int, amplitude: float = 10000.0) -> np.ndarray:
    """count frames of a sine on both channels, phase-continuous from `start`."""
    t = np.arange(start, start + count)
    wave = amplitude * np.sin(2 * np.pi * freq * t / SAMPLE_RATE)
    return np.stack((wave, wave), axis=1).astype(np.int16)


def write_vis_file(path: Path, cursor: int = 0, running: bool = True,
                   samples: np.ndarray | None = None) -> Path:
    """Write a squeezelite-style visualisation record to `path`."""
    rec = VisRecord()
    rec.buf_size = VIS_BUF_SIZE
    rec.buf_index = cursor
    rec.running = running
    rec.rate = SAMPLE_RATE
    rec.updated = 1700000000
    if samples is not None:
        np.ctypeslib.as_array(rec.buffer)[: len(samples)] = samples
    path.write_bytes(bytes(rec))
    return path


@pytest.fixture
def source() -> FakeVisSource:
    return FakeVisSource()
