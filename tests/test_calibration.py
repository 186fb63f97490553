from vision.cones.calibration import DEFAULT_DIRECTION, Direction, DirectionCalibrator


def test_default_is_counter_clockwise():
    cal = DirectionCalibrator(5)
    for _ in range(4):
        cal.observe(False)
    assert cal.freeze() == Direction.COUNTER_CLOCKWISE
    assert DEFAULT_DIRECTION == Direction.COUNTER_CLOCKWISE
    assert cal.hits == 0


def test_single_blue_hit_means_clockwise():
    cal = DirectionCalibrator(5)
    cal.observe(False)
    assert cal.observe(True) == Direction.CLOCKWISE
    # later misses do not undo it
    assert cal.observe(False) == Direction.CLOCKWISE
    assert cal.freeze() == Direction.CLOCKWISE
    assert cal.hits == 1
    assert cal.frames_seen == 3


def test_frozen_calibrator_ignores_observations():
    cal = DirectionCalibrator(5)
    cal.freeze()
    assert cal.frozen
    assert cal.observe(True) == Direction.COUNTER_CLOCKWISE
    assert cal.frames_seen == 0


def test_phase_boundary():
    cal = DirectionCalibrator(5)
    assert cal.is_calibrating(1)
    assert cal.is_calibrating(4)
    assert not cal.is_calibrating(5)
    assert not cal.is_calibrating(6)


def test_zero_sample_size_is_frozen_from_the_start():
    cal = DirectionCalibrator(0)
    assert cal.frozen
    assert not cal.is_calibrating(1)
    assert cal.direction == Direction.COUNTER_CLOCKWISE


def test_repeated_hits_keep_clockwise_and_count():
    cal = DirectionCalibrator(5)
    for _ in range(4):
        assert cal.observe(True) == Direction.CLOCKWISE
    assert cal.hits == 4
    assert cal.freeze() == Direction.CLOCKWISE
