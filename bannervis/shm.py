"""Read-only port onto squeezelite's shared visualisation buffer.

squeezelite (built with -DVISEXPORT, run with -v) publishes its output audio
in a memory-mapped file under /dev/shm. The record is a C struct:

    pthread_rwlock_t rwlock;
    u32_t buf_size;
    u32_t buf_index;     write cursor, in int16 entries
    bool running;
    u32_t rate;
    time_t updated;
    s16_t buffer[VIS_BUF_SIZE];   interleaved L/R

The producer overwrites the buffer continuously and only takes the write
lock briefly, so by default we read without locking and accept the odd
torn sample. Pass use_locks=True to take the embedded read lock around
each snapshot (this needs a read/write mapping).
"""

import ctypes
import ctypes.util
import logging
import mmap
import os
from contextlib import contextmanager
from typing import Iterator, NamedTuple

import numpy as np

from bannervis.config import VIS_BUF_SIZE
from bannervis.errors import ResourceUnavailable

logger = logging.getLogger(__name__)

# glibc pthread_rwlock_t is 56 bytes on 64-bit targets, 32 bytes on 32-bit ARM
RWLOCK_SIZE = 56 if ctypes.sizeof(ctypes.c_void_p) == 8 else 32


class VisRecord(ctypes.Structure):
    """Native layout of squeezelite's struct vis_t."""

    _fields_ = [
        ("rwlock", ctypes.c_byte * RWLOCK_SIZE),
        ("buf_size", ctypes.c_uint32),
        ("buf_index", ctypes.c_uint32),
        ("running", ctypes.c_bool),
        ("rate", ctypes.c_uint32),
        ("updated", ctypes.c_long),  # time_t
        ("buffer", ctypes.c_int16 * VIS_BUF_SIZE),
    ]


class VisHeader(ctypes.Structure):
    """Everything in VisRecord before the sample array."""

    _fields_ = VisRecord._fields_[:-1]


VIS_RECORD_SIZE = ctypes.sizeof(VisRecord)
SAMPLES_OFFSET = VisRecord.buffer.offset


class VisSnapshot(NamedTuple):
    write_cursor: int
    running: bool
    samples: np.ndarray  # int16 copy, length VIS_BUF_SIZE
    rate: int
    updated: int


class SharedVisBuffer:
    """Memory-mapped view of the producer's visualisation record."""

    def __init__(self, path: str, use_locks: bool = False):
        self.path = path
        self.use_locks = use_locks
        self._fd: int | None = None
        self._mm: mmap.mmap | None = None
        self._samples: np.ndarray | None = None
        self._lock_ref: ctypes.c_char | None = None
        self._libc = None
        self._open()

    def _open(self) -> None:
        flags = os.O_RDWR if self.use_locks else os.O_RDONLY
        try:
            self._fd = os.open(self.path, flags)
        except OSError as e:
            raise ResourceUnavailable(f"open failed: {self.path}: {e}") from e

        try:
            size = os.fstat(self._fd).st_size
            if size < VIS_RECORD_SIZE:
                raise ResourceUnavailable(
                    f"{self.path} is {size} bytes, expected at least {VIS_RECORD_SIZE}"
                )
            access = mmap.ACCESS_WRITE if self.use_locks else mmap.ACCESS_READ
            self._mm = mmap.mmap(self._fd, VIS_RECORD_SIZE, access=access)
        except OSError as e:
            self.close()
            raise ResourceUnavailable(f"mmap failed: {self.path}: {e}") from e
        except ResourceUnavailable:
            self.close()
            raise

        self._samples = np.frombuffer(
            self._mm, dtype=np.int16, count=VIS_BUF_SIZE, offset=SAMPLES_OFFSET
        )
        if self.use_locks:
            self._lock_ref = ctypes.c_char.from_buffer(self._mm)
            self._libc = ctypes.CDLL(ctypes.util.find_library("c"), use_errno=True)

        header = self.header()
        logger.info(
            f"Mapped {self.path}: rate={header.rate}, buf_size={header.buf_size}, "
            f"locks={'on' if self.use_locks else 'off'}"
        )

    def header(self) -> VisHeader:
        """Copy of the record header (cursor, flags, rate)."""
        return VisHeader.from_buffer_copy(self._mm, 0)

    @contextmanager
    def read_locked(self) -> Iterator[None]:
        """Hold the producer's read lock, or do nothing when locks are off."""
        if not self.use_locks:
            yield
            return
        lock = ctypes.c_void_p(ctypes.addressof(self._lock_ref))
        rc = self._libc.pthread_rwlock_rdlock(lock)
        if rc != 0:
            raise OSError(rc, os.strerror(rc))
        try:
            yield
        finally:
            self._libc.pthread_rwlock_unlock(lock)

    def snapshot(self) -> VisSnapshot:
        """Current cursor, running flag and a copy of the sample ring.

        The copy itself is not atomic: the producer may be writing while we
        read, which at worst tears a few samples.
        """
        header = self.header()
        return VisSnapshot(
            write_cursor=int(header.buf_index),
            running=bool(header.running),
            samples=self._samples.copy(),
            rate=int(header.rate),
            updated=int(header.updated),
        )

    def close(self) -> None:
        """Unmap and close the file."""
        self._samples = None
        self._lock_ref = None
        if self._mm is not None:
            self._mm.close()
            self._mm = None
        if self._fd is not None:
            os.close(self._fd)
            self._fd = None

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()
