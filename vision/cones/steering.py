from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .calibration import Direction
from .errors import ConfigError


class DetectionStrategy(Enum):
    # yellow is only looked at when no blue marker was found
    BLUE_PRIORITY = "blue_priority"
    # both colors are evaluated; when both are present their nudges are averaged
    AVERAGE = "average"


@dataclass(frozen=True)
class SteeringConfig:
    steering_min: float = -0.3
    steering_max: float = 0.3
    step: float = 0.025
    strategy: DetectionStrategy = DetectionStrategy.BLUE_PRIORITY

    def validate(self) -> None:
        if not self.steering_min < self.steering_max:
            raise ConfigError(
                f"steering bounds inverted: [{self.steering_min}, {self.steering_max}]"
            )
        if not (self.steering_min <= 0.0 <= self.steering_max):
            raise ConfigError("steering bounds must contain 0.0 (the reset angle)")
        if self.step <= 0:
            raise ConfigError(f"steering step must be > 0, got {self.step}")


@dataclass
class SteeringState:
    angle: float = 0.0
    resets: int = 0


class SteeringEstimator:
    """
    Incremental nudge controller.

    Every steady-state frame moves the angle by one fixed step towards the
    side the detected marker calls for. It knows nothing about where the
    marker is inside the window, only whether it is there.
    """

    def __init__(self, cfg: SteeringConfig):
        cfg.validate()
        self.cfg = cfg
        self.state = SteeringState()

    @property
    def angle(self) -> float:
        return self.state.angle

    def in_bounds(self, angle: float) -> bool:
        return self.cfg.steering_min <= angle <= self.cfg.steering_max

    def _clamp(self, angle: float) -> float:
        return max(self.cfg.steering_min, min(self.cfg.steering_max, angle))

    def _blue_delta(self, direction: Direction) -> float:
        return -self.cfg.step if direction == Direction.CLOCKWISE else self.cfg.step

    def _yellow_delta(self, direction: Direction) -> float:
        return -self._blue_delta(direction)

    def update(
        self,
        blue_detected: bool,
        yellow_detected: Optional[bool],
        direction: Direction,
    ) -> float:
        """
        Apply one frame. Rules, first match wins:
          1. no marker at all          -> 0.0
          2. angle already out of range -> 0.0
          3. blue                       -> CW: -step, CCW: +step
          4. yellow                     -> mirror image of 3
        The result is clamped to [steering_min, steering_max].

        With BLUE_PRIORITY, yellow_detected is ignored when blue is present
        (callers may pass None since they skip evaluating it).
        """
        st = self.state
        yellow = bool(yellow_detected)

        if not blue_detected and not yellow:
            st.angle = 0.0
            st.resets += 1
            return st.angle

        if not self.in_bounds(st.angle):
            st.angle = 0.0
            st.resets += 1
            return st.angle

        if blue_detected and yellow and self.cfg.strategy == DetectionStrategy.AVERAGE:
            delta = (self._blue_delta(direction) + self._yellow_delta(direction)) / 2.0
        elif blue_detected:
            delta = self._blue_delta(direction)
        else:
            delta = self._yellow_delta(direction)

        st.angle = self._clamp(st.angle + delta)
        return st.angle
