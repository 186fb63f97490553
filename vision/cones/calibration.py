from enum import Enum


class Direction(Enum):
    CLOCKWISE = "cw"
    COUNTER_CLOCKWISE = "ccw"


# No blue marker on the side window during calibration means the track runs
# counter-clockwise. This is the policy, not a fallback for a failed run.
DEFAULT_DIRECTION = Direction.COUNTER_CLOCKWISE


class DirectionCalibrator:
    """
    Decides the turning sense from the first `sample_size` frames.

    While calibrating, every frame reports whether a blue blob was seen on
    the side window. One hit is enough for CLOCKWISE. Once the window has
    elapsed the direction is frozen for the rest of the run.
    """

    def __init__(self, sample_size: int):
        self.sample_size = int(sample_size)
        self._direction = DEFAULT_DIRECTION
        self._frozen = self.sample_size <= 0
        self.hits = 0
        self.frames_seen = 0

    @property
    def direction(self) -> Direction:
        return self._direction

    @property
    def frozen(self) -> bool:
        return self._frozen

    def is_calibrating(self, frame_counter: int) -> bool:
        return frame_counter < self.sample_size

    def observe(self, blue_found: bool) -> Direction:
        if self._frozen:
            return self._direction

        self.frames_seen += 1
        if blue_found:
            self.hits += 1
            if self._direction is DEFAULT_DIRECTION:
                self._direction = Direction.CLOCKWISE
        return self._direction

    def freeze(self) -> Direction:
        """Close the calibration window. Returns the final direction."""
        self._frozen = True
        return self._direction
