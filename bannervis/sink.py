"""Frame output: raw RGB bytes, one whole frame per write."""

import sys
from typing import BinaryIO

from bannervis.grid import PixelGrid


class FrameSink:
    """Writes complete frames to a byte stream (stdout by default).

    No header or length prefix; the reader syncs on H * W * 3 bytes.
    """

    def __init__(self, stream: BinaryIO | None = None):
        self.stream = stream if stream is not None else sys.stdout.buffer

    def write(self, grid: PixelGrid) -> None:
        self.stream.write(grid.tobytes())
        self.stream.flush()
