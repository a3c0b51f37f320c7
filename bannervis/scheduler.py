"""Poll loop: one tick per iteration, a short fixed sleep in between.

The clock and sleep functions are injected so tests can drive ticks
without real delays.
"""

import logging
import time
from typing import Callable, ContextManager, Protocol

from bannervis.grid import PixelGrid
from bannervis.modes import Mode
from bannervis.shm import VisSnapshot

logger = logging.getLogger(__name__)


class VisSource(Protocol):
    def snapshot(self) -> VisSnapshot: ...

    def read_locked(self) -> ContextManager[None]: ...


class FrameWriter(Protocol):
    def write(self, grid: PixelGrid) -> None: ...


class Scheduler:
    def __init__(
        self,
        source: VisSource,
        mode: Mode,
        sink: FrameWriter | None = None,
        runtime: int = 0,
        clock: Callable[[], float] = time.time,
        sleep: Callable[[float], None] = time.sleep,
        poll_interval: float | None = None,
    ):
        self.source = source
        self.mode = mode
        self.sink = sink
        self.runtime = runtime
        self.clock = clock
        self.sleep = sleep
        self.poll_interval = mode.poll_interval if poll_interval is None else poll_interval

        self.running = True
        self.seconds = 0
        self.fps = 0
        self.frames = 0
        self._then = int(clock())

    def tick(self) -> PixelGrid | None:
        """Run one poll-analyse-render-output cycle.

        Returns the frame that was written, or None if there was nothing new
        (or the producer has stopped).
        """
        # lock covers the copy only; analysis runs on the snapshot
        with self.source.read_locked():
            snap = self.source.snapshot()

        frame = None
        if snap.running:
            frame = self.mode.tick(snap)
        else:
            self.running = False

        if frame is not None:
            if self.sink is not None:
                self.sink.write(frame)
            self.fps += 1
            self.frames += 1

        self._stats()
        return frame

    def _stats(self) -> None:
        now = int(self.clock())
        if now != self._then:
            logger.info(f"fps={self.fps}, rms={self.mode.level:.6f}")
            self._then = now
            self.fps = 0
            self.seconds += 1

    def expired(self) -> bool:
        return self.runtime > 0 and self.seconds > self.runtime

    def run(self) -> int:
        """Tick until the producer stops or the runtime budget is spent.

        Returns the number of frames written.
        """
        logger.info(
            f"Polling every {self.poll_interval * 1000:.0f}ms"
            + (f" for {self.runtime}s" if self.runtime > 0 else "")
        )
        while True:
            self.tick()
            if not self.running:
                logger.info("Producer stopped, exiting")
                break
            if self.expired():
                logger.info(f"Runtime of {self.runtime}s reached, exiting")
                break
            self.sleep(self.poll_interval)
        return self.frames
