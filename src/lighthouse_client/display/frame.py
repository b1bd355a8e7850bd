"""
Pixel Frame
===========

Fixed-geometry grid of colors; the unit of display state.

A PixelFrame is one complete snapshot of what the display shows. It is
built by a producer, handed to the connection, and encoded by FrameCodec.

Design Rules:
    - Pixel count always equals rows * cols of its geometry
    - Pixel i sits at row i // cols, column i % cols
    - Immutable once built; equality and hashing are structural
    - Does NOT perform any I/O or encoding
"""

from dataclasses import dataclass
from typing import Callable, Iterable, Iterator, Tuple

import numpy as np

from lighthouse_client.errors import ShapeError
from lighthouse_client.models.color import Color


LIGHTHOUSE_ROWS = 28
LIGHTHOUSE_COLS = 14
LIGHTHOUSE_SIZE = LIGHTHOUSE_ROWS * LIGHTHOUSE_COLS


@dataclass(frozen=True, slots=True)
class Geometry:
    """
    Display dimensions.

    Attributes:
        rows: Number of pixel rows (height)
        cols: Number of pixel columns (width)
    """

    rows: int
    cols: int

    def __post_init__(self) -> None:
        if self.rows < 1 or self.cols < 1:
            raise ValueError(
                f"geometry must be at least 1x1, got {self.rows}x{self.cols}"
            )

    @property
    def size(self) -> int:
        """Total number of pixels."""
        return self.rows * self.cols

    def index(self, x: int, y: int) -> int:
        """Pixel index of column x, row y."""
        if not (0 <= x < self.cols and 0 <= y < self.rows):
            raise IndexError(
                f"({x}, {y}) outside {self.cols}x{self.rows} display"
            )
        return y * self.cols + x


LIGHTHOUSE_GEOMETRY = Geometry(LIGHTHOUSE_ROWS, LIGHTHOUSE_COLS)


class PixelFrame:
    """
    Immutable grid of colors matching a display geometry.

    Attributes:
        geometry: Display dimensions this frame is laid out for
        pixels: Row-major tuple of colors, length geometry.size

    Example:
        frame = PixelFrame.fill(BLACK)
        frame = PixelFrame.generate(lambda x, y: Color(x * 18, y * 9, 0))
    """

    __slots__ = ("_geometry", "_pixels", "_hash")

    def __init__(
        self,
        pixels: Iterable[Color],
        geometry: Geometry = LIGHTHOUSE_GEOMETRY,
    ) -> None:
        """
        Build a frame from a pre-sized pixel sequence.

        Args:
            pixels: Colors in row-major order
            geometry: Display dimensions

        Raises:
            ShapeError: If the pixel count differs from geometry.size
        """
        pixels = tuple(pixels)
        if len(pixels) != geometry.size:
            raise ShapeError(
                f"expected {geometry.size} pixels for a "
                f"{geometry.cols}x{geometry.rows} display, got {len(pixels)}"
            )
        self._geometry = geometry
        self._pixels: Tuple[Color, ...] = pixels
        self._hash = hash((geometry, pixels))

    @classmethod
    def fill(
        cls, color: Color, geometry: Geometry = LIGHTHOUSE_GEOMETRY
    ) -> "PixelFrame":
        """Build a frame where every pixel is `color`."""
        return cls((color,) * geometry.size, geometry)

    @classmethod
    def generate(
        cls,
        f: Callable[[int, int], Color],
        geometry: Geometry = LIGHTHOUSE_GEOMETRY,
    ) -> "PixelFrame":
        """
        Build a frame by calling f(x, y) for every coordinate.

        Coordinates are visited row by row (y outer, x inner), so the
        call order matches the pixel index y * cols + x.
        """
        return cls(
            (f(x, y) for y in range(geometry.rows) for x in range(geometry.cols)),
            geometry,
        )

    @classmethod
    def from_array(cls, array: np.ndarray) -> "PixelFrame":
        """
        Build a frame from a (rows, cols, 3) uint8 array.

        Raises:
            ShapeError: If the array is not three-dimensional with 3 channels
        """
        if array.ndim != 3 or array.shape[2] != 3:
            raise ShapeError(f"expected a (rows, cols, 3) array, got {array.shape}")
        if array.dtype != np.uint8:
            raise ShapeError(f"expected uint8 pixels, got {array.dtype}")
        rows, cols = int(array.shape[0]), int(array.shape[1])
        flat = array.reshape(-1, 3).tolist()
        return cls((Color(r, g, b) for r, g, b in flat), Geometry(rows, cols))

    @property
    def geometry(self) -> Geometry:
        return self._geometry

    @property
    def pixels(self) -> Tuple[Color, ...]:
        return self._pixels

    def get(self, x: int, y: int) -> Color:
        """Color at column x, row y."""
        return self._pixels[self._geometry.index(x, y)]

    def with_pixel(self, x: int, y: int, color: Color) -> "PixelFrame":
        """Return a copy with the pixel at (x, y) replaced."""
        i = self._geometry.index(x, y)
        return PixelFrame(
            self._pixels[:i] + (color,) + self._pixels[i + 1:], self._geometry
        )

    def to_array(self) -> np.ndarray:
        """Return the frame as a (rows, cols, 3) uint8 array."""
        return np.array(
            [c.as_tuple() for c in self._pixels], dtype=np.uint8
        ).reshape(self._geometry.rows, self._geometry.cols, 3)

    def __len__(self) -> int:
        return len(self._pixels)

    def __iter__(self) -> Iterator[Color]:
        return iter(self._pixels)

    def __getitem__(self, index: int) -> Color:
        return self._pixels[index]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PixelFrame):
            return NotImplemented
        return self._geometry == other._geometry and self._pixels == other._pixels

    def __hash__(self) -> int:
        return self._hash

    def __repr__(self) -> str:
        """Compact repr that doesn't dump every pixel."""
        distinct = len(set(self._pixels))
        return (
            f"PixelFrame({self._geometry.cols}x{self._geometry.rows}, "
            f"distinct_colors={distinct})"
        )
