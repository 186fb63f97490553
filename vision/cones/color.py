from dataclasses import dataclass
from typing import Tuple

import cv2
import numpy as np

from .errors import ConfigError

# OpenCV 8-bit HSV: hue is halved to fit 0..179
HUE_MAX = 179
CHANNEL_MAX = 255


@dataclass(frozen=True)
class HsvRange:
    h_min: int
    h_max: int
    s_min: int
    s_max: int
    v_min: int
    v_max: int

    @classmethod
    def from_tuple(cls, values: Tuple[int, int, int, int, int, int]) -> "HsvRange":
        h_min, h_max, s_min, s_max, v_min, v_max = (int(v) for v in values)
        return cls(h_min, h_max, s_min, s_max, v_min, v_max)

    @property
    def lower(self) -> np.ndarray:
        return np.array([self.h_min, self.s_min, self.v_min], dtype=np.uint8)

    @property
    def upper(self) -> np.ndarray:
        return np.array([self.h_max, self.s_max, self.v_max], dtype=np.uint8)

    def validate(self, name: str = "hsv") -> None:
        limits = (
            ("hue", self.h_min, self.h_max, HUE_MAX),
            ("saturation", self.s_min, self.s_max, CHANNEL_MAX),
            ("value", self.v_min, self.v_max, CHANNEL_MAX),
        )
        for channel, lo, hi, top in limits:
            if not (0 <= lo <= top and 0 <= hi <= top):
                raise ConfigError(f"{name}: {channel} bounds ({lo}, {hi}) outside 0..{top}")
            if lo > hi:
                raise ConfigError(f"{name}: {channel} min {lo} > max {hi}")


def to_hsv(view: np.ndarray) -> np.ndarray:
    # BGR2HSV accepts 3 or 4 channel input, alpha is dropped
    return cv2.cvtColor(view, cv2.COLOR_BGR2HSV)


def segment(view: np.ndarray, rng: HsvRange) -> np.ndarray:
    """
    Binary mask (0/255, uint8) of pixels whose H, S and V all fall inside
    the inclusive bounds of `rng`.
    """
    return cv2.inRange(to_hsv(view), rng.lower, rng.upper)
