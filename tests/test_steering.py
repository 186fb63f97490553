import random

import pytest

from vision.cones.calibration import Direction
from vision.cones.errors import ConfigError
from vision.cones.steering import DetectionStrategy, SteeringConfig, SteeringEstimator

CW = Direction.CLOCKWISE
CCW = Direction.COUNTER_CLOCKWISE
STEP = 0.025


def _estimator(angle=0.0, **kw):
    est = SteeringEstimator(SteeringConfig(**kw))
    est.state.angle = angle
    return est


def test_starts_straight():
    assert SteeringEstimator(SteeringConfig()).angle == 0.0


@pytest.mark.parametrize(
    "direction, blue, yellow, expected",
    [
        (CW, True, None, -STEP),
        (CCW, True, None, STEP),
        (CW, False, True, STEP),
        (CCW, False, True, -STEP),
    ],
)
def test_single_step_per_frame(direction, blue, yellow, expected):
    est = _estimator(angle=0.1)
    assert est.update(blue, yellow, direction) == pytest.approx(0.1 + expected)


def test_no_marker_resets_to_straight():
    est = _estimator(angle=0.2)
    assert est.update(False, False, CW) == 0.0
    assert est.update(False, False, CW) == 0.0
    assert est.state.resets == 2


def test_out_of_range_angle_is_reset():
    est = _estimator(angle=0.5)
    assert est.update(True, None, CCW) == 0.0


def test_angle_is_clamped_at_the_bounds():
    est = _estimator()
    for _ in range(20):
        est.update(True, None, CCW)
    assert est.angle == pytest.approx(0.3)
    assert est.angle <= 0.3

    for _ in range(40):
        est.update(False, True, CCW)
    assert est.angle == pytest.approx(-0.3)
    assert est.angle >= -0.3


def test_blue_priority_ignores_yellow():
    est = _estimator()
    assert est.update(True, True, CW) == pytest.approx(-STEP)


def test_average_strategy_cancels_when_both_present():
    est = _estimator(angle=0.1, strategy=DetectionStrategy.AVERAGE)
    assert est.update(True, True, CW) == pytest.approx(0.1)
    assert est.update(True, False, CW) == pytest.approx(0.1 - STEP)
    assert est.update(False, True, CW) == pytest.approx(0.1)


@pytest.mark.parametrize("strategy", list(DetectionStrategy))
@pytest.mark.parametrize("direction", [CW, CCW])
def test_angle_stays_in_bounds_for_any_sequence(strategy, direction):
    rnd = random.Random(1234)
    est = _estimator(strategy=strategy, steering_min=-0.29, steering_max=0.29)
    for _ in range(2000):
        blue = rnd.random() < 0.6
        yellow = rnd.random() < 0.3
        angle = est.update(blue, yellow, direction)
        assert -0.29 <= angle <= 0.29


@pytest.mark.parametrize(
    "kw",
    [
        dict(steering_min=0.3, steering_max=-0.3),
        dict(steering_min=0.1, steering_max=0.3),
        dict(step=0.0),
    ],
)
def test_invalid_config_is_rejected(kw):
    with pytest.raises(ConfigError):
        SteeringEstimator(SteeringConfig(**kw))


def test_estimator_has_no_external_reset():
    assert not hasattr(SteeringEstimator, "reset")
