import numpy as np
import pytest

from vision.cones.presets import default_config
from vision.cones.roi import Roi

# BGRA colors inside the default HSV ranges
# (200, 100, 50) -> HSV (110, 191, 200), (40, 200, 230) -> HSV (25, 211, 230)
BLUE = (200, 100, 50, 255)
YELLOW = (40, 200, 230, 255)

WIDTH = 640
HEIGHT = 480


def paint(frame: np.ndarray, roi: Roi, color, w: int = 40, h: int = 30) -> np.ndarray:
    """Fill a w x h patch in the middle of roi."""
    cx = roi.x + roi.w // 2
    cy = roi.y + roi.h // 2
    frame[cy - h // 2:cy + h // 2, cx - w // 2:cx + w // 2] = color
    return frame


@pytest.fixture
def cfg():
    return default_config()


@pytest.fixture
def make_frame(cfg):
    """
    make_frame(side=None, center=None) -> black BGRA frame with optional
    color patches in the side / center windows.
    """
    def _make(side=None, center=None, width=WIDTH, height=HEIGHT):
        frame = np.zeros((height, width, 4), dtype=np.uint8)
        frame[..., 3] = 255
        if side is not None:
            paint(frame, cfg.side_roi, side)
        if center is not None:
            paint(frame, cfg.center_roi, center)
        return frame

    return _make
