from dataclasses import dataclass
from typing import Tuple

import numpy as np

from .errors import ConfigError


@dataclass(frozen=True)
class Roi:
    x: int
    y: int
    w: int
    h: int

    @property
    def x1(self) -> int:
        return self.x + self.w

    @property
    def y1(self) -> int:
        return self.y + self.h

    @classmethod
    def from_tuple(cls, rect: Tuple[int, int, int, int]) -> "Roi":
        x, y, w, h = rect
        return cls(x=int(x), y=int(y), w=int(w), h=int(h))

    def validate(self, width: int, height: int, name: str = "roi") -> None:
        """
        Rectangle must be non-empty and lie fully inside a width x height frame.
        Checked once at startup, never per frame.
        """
        if self.w <= 0 or self.h <= 0:
            raise ConfigError(f"{name}: empty rectangle {self}")
        if self.x < 0 or self.y < 0 or self.x1 > width or self.y1 > height:
            raise ConfigError(
                f"{name}: {self} does not fit inside {width}x{height} frame"
            )

    def crop(self, frame: np.ndarray) -> np.ndarray:
        # view, not a copy: callers must not draw into it
        return frame[self.y:self.y1, self.x:self.x1]
