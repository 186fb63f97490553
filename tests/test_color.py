import numpy as np
import pytest

from vision.cones.color import HsvRange, segment
from vision.cones.errors import ConfigError

BLUE = (200, 100, 50, 255)
YELLOW = (40, 200, 230, 255)


def _patch(color, shape=(6, 8)):
    img = np.zeros(shape + (4,), dtype=np.uint8)
    img[:, :] = color
    return img


def test_segment_marks_pixels_inside_the_range(cfg):
    img = _patch((0, 0, 0, 255))
    img[2:4, 3:6] = BLUE

    mask = segment(img, cfg.blue)

    assert mask.shape == (6, 8)
    assert mask.dtype == np.uint8
    assert int(np.count_nonzero(mask)) == 6
    assert mask[2, 3] == 255
    assert mask[0, 0] == 0


def test_colors_are_segmented_independently(cfg):
    blue = _patch(BLUE)
    yellow = _patch(YELLOW)

    assert np.all(segment(blue, cfg.blue) == 255)
    assert not np.any(segment(blue, cfg.yellow))
    assert np.all(segment(yellow, cfg.yellow) == 255)
    assert not np.any(segment(yellow, cfg.blue))


def test_three_channel_input_is_accepted(cfg):
    img = _patch(BLUE)[..., :3].copy()
    assert np.all(segment(img, cfg.blue) == 255)


def test_bounds_are_inclusive():
    # pure gray (128,128,128) -> H=0, S=0, V=128
    img = _patch((128, 128, 128, 255))
    rng = HsvRange(0, 0, 0, 0, 128, 128)
    assert np.all(segment(img, rng) == 255)

    rng = HsvRange(0, 0, 0, 0, 129, 255)
    assert not np.any(segment(img, rng))


def test_from_tuple_keeps_min_max_order():
    rng = HsvRange.from_tuple((36, 147, 85, 202, 46, 222))
    assert list(rng.lower) == [36, 85, 46]
    assert list(rng.upper) == [147, 202, 222]


@pytest.mark.parametrize(
    "values",
    [
        (50, 40, 0, 255, 0, 255),    # hue min > max
        (0, 180, 0, 255, 0, 255),    # hue above 179
        (0, 10, 0, 256, 0, 255),     # saturation above 255
        (0, 10, 0, 255, -1, 255),
    ],
)
def test_malformed_ranges_are_rejected(values):
    with pytest.raises(ConfigError):
        HsvRange(*values).validate("test")
