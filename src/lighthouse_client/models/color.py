"""
Color Model
===========

RGB color value used for every pixel of a frame.

Design Rules:
    - Immutable and hashable, so frames built from colors are too
    - Channels are plain ints in [0, 255]
    - No color-space handling; the device takes raw RGB
"""

import random
from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True, slots=True)
class Color:
    """
    A single RGB color.

    Attributes:
        red: Red channel, 0-255
        green: Green channel, 0-255
        blue: Blue channel, 0-255
    """

    red: int
    green: int
    blue: int

    def __post_init__(self) -> None:
        for name in ("red", "green", "blue"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"{name} must be an int, got {value!r}")
            if not 0 <= value <= 255:
                raise ValueError(f"{name} must be in [0, 255], got {value}")

    def as_tuple(self) -> Tuple[int, int, int]:
        """Return the channels as an (r, g, b) tuple."""
        return (self.red, self.green, self.blue)

    @classmethod
    def random(cls, rng: Optional[random.Random] = None) -> "Color":
        """Draw a uniformly random color."""
        rng = rng or random
        return cls(rng.randrange(256), rng.randrange(256), rng.randrange(256))

    def __repr__(self) -> str:
        return f"Color({self.red}, {self.green}, {self.blue})"


BLACK = Color(0, 0, 0)
WHITE = Color(255, 255, 255)
RED = Color(255, 0, 0)
GREEN = Color(0, 255, 0)
BLUE = Color(0, 0, 255)
YELLOW = Color(255, 255, 0)
CYAN = Color(0, 255, 255)
MAGENTA = Color(255, 0, 255)
