"""Fixed-size RGB pixel grid for the LED banner."""

import numpy as np


class PixelGrid:
    """height x width RGB pixels, row-major, mutated in place every frame.

    Point accessors are bounds-checked; renderers that paint whole rows or
    columns work on `pixels` (the underlying uint8 array) directly.
    """

    def __init__(self, width: int, height: int):
        if width <= 0 or height <= 0:
            raise ValueError(f"invalid grid size {width}x{height}")
        self.width = width
        self.height = height
        self.pixels = np.zeros((height, width, 3), dtype=np.uint8)

    def _check(self, y: int, x: int) -> None:
        if not (0 <= y < self.height and 0 <= x < self.width):
            raise IndexError(f"pixel ({y}, {x}) outside {self.height}x{self.width} grid")

    def __getitem__(self, pos: tuple[int, int]) -> tuple[int, int, int]:
        y, x = pos
        self._check(y, x)
        r, g, b = self.pixels[y, x]
        return int(r), int(g), int(b)

    def __setitem__(self, pos: tuple[int, int], rgb: tuple[int, int, int]) -> None:
        y, x = pos
        self._check(y, x)
        self.pixels[y, x] = rgb

    def clear(self) -> None:
        self.pixels.fill(0)

    def scroll_left(self, stop: int | None = None) -> None:
        """Shift columns [1, stop) one pixel left, dropping column 0."""
        stop = self.width if stop is None else stop
        if stop > 1:
            self.pixels[:, : stop - 1] = self.pixels[:, 1:stop]

    def tobytes(self) -> bytes:
        """Raw frame: row-major, 3 bytes per pixel, no header."""
        return self.pixels.tobytes()
