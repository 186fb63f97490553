import numpy as np
import pytest

from vision.cones.errors import ConfigError
from vision.cones.roi import Roi


def test_crop_is_a_view_of_the_rectangle():
    frame = np.arange(10 * 12 * 4, dtype=np.uint8).reshape(10, 12, 4)
    roi = Roi(x=2, y=3, w=5, h=4)

    view = roi.crop(frame)

    assert view.shape == (4, 5, 4)
    assert np.shares_memory(view, frame)
    assert np.array_equal(view, frame[3:7, 2:7])


def test_from_tuple():
    roi = Roi.from_tuple((410, 255, 230, 100))
    assert (roi.x, roi.y, roi.w, roi.h) == (410, 255, 230, 100)
    assert (roi.x1, roi.y1) == (640, 355)


def test_validate_accepts_rectangle_touching_the_edges():
    Roi(410, 255, 230, 100).validate(640, 480)


@pytest.mark.parametrize(
    "roi",
    [
        Roi(411, 255, 230, 100),   # one pixel past the right edge
        Roi(0, 400, 10, 81),       # past the bottom edge
        Roi(-1, 0, 10, 10),
        Roi(0, 0, 0, 10),
    ],
)
def test_validate_rejects_rectangles_outside_the_frame(roi):
    with pytest.raises(ConfigError):
        roi.validate(640, 480)
