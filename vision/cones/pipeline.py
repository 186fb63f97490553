from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict, Optional

import cv2
import numpy as np

from .blobs import marker_present
from .calibration import Direction, DirectionCalibrator
from .color import HsvRange, segment
from .errors import ConfigError
from .morphology import clean_mask
from .roi import Roi
from .steering import DetectionStrategy, SteeringConfig, SteeringEstimator


class Phase(Enum):
    CALIBRATING = "calibrating"
    CALIBRATED = "calibrated"


@dataclass(frozen=True)
class PipelineConfig:
    side_roi: Roi
    center_roi: Roi
    blue: HsvRange
    yellow: HsvRange
    min_area: float = 72.0
    sample_size: int = 5
    steering: SteeringConfig = field(default_factory=SteeringConfig)

    def with_strategy(self, strategy: DetectionStrategy) -> "PipelineConfig":
        return replace(self, steering=replace(self.steering, strategy=strategy))

    def validate(self, width: int, height: int) -> None:
        """All startup checks. Raises ConfigError, the loop must not start."""
        self.side_roi.validate(width, height, "side_roi")
        self.center_roi.validate(width, height, "center_roi")
        self.blue.validate("blue")
        self.yellow.validate("yellow")
        if self.min_area < 0:
            raise ConfigError(f"min_area must be >= 0, got {self.min_area}")
        if self.sample_size < 0:
            raise ConfigError(f"sample_size must be >= 0, got {self.sample_size}")
        self.steering.validate()


@dataclass
class FrameResult:
    frame: int
    phase: Phase
    direction: Direction
    angle: float
    blue: Optional[bool] = None
    yellow: Optional[bool] = None
    # set on the single frame where calibration closes
    direction_frozen: bool = False
    # only filled when the pipeline keeps masks for display
    masks: Dict[str, np.ndarray] = field(default_factory=dict)

    def summary(self) -> dict:
        return {
            "frame": self.frame,
            "phase": self.phase.value,
            "direction": self.direction.value,
            "angle": self.angle,
            "blue": self.blue,
            "yellow": self.yellow,
            "direction_frozen": self.direction_frozen,
        }


class ConePipeline:
    """
    Per-frame analysis: region selection, color segmentation, mask cleaning,
    blob presence, then either direction calibration or a steering update.
    Strictly synchronous; one call per frame.
    """

    def __init__(self, cfg: PipelineConfig, *, keep_masks: bool = False):
        self.cfg = cfg
        self.keep_masks = keep_masks
        self.calibrator = DirectionCalibrator(cfg.sample_size)
        self.estimator = SteeringEstimator(cfg.steering)
        self._counter = 0

    @property
    def frame_counter(self) -> int:
        return self._counter

    @property
    def direction(self) -> Direction:
        return self.calibrator.direction

    @property
    def angle(self) -> float:
        return self.estimator.angle

    def detect(self, frame: np.ndarray, roi: Roi, rng: HsvRange, mask_name: Optional[str] = None,
               masks: Optional[Dict[str, np.ndarray]] = None) -> bool:
        """Segment -> clean -> blob presence for one color on one window."""
        if frame is None or frame.size == 0:
            return False
        try:
            mask = clean_mask(segment(roi.crop(frame), rng))
        except cv2.error as e:
            print(f"[WARN] frame {self._counter}: analysis failed, treated as no marker: {e}")
            return False
        if masks is not None and mask_name:
            masks[mask_name] = mask
        return marker_present(mask, self.cfg.min_area)

    def process(self, frame: np.ndarray) -> FrameResult:
        self._counter += 1
        counter = self._counter
        cfg = self.cfg
        masks: Optional[Dict[str, np.ndarray]] = {} if self.keep_masks else None

        if self.calibrator.is_calibrating(counter):
            found = self.detect(frame, cfg.side_roi, cfg.blue, "side_blue", masks)
            direction = self.calibrator.observe(found)
            return FrameResult(
                frame=counter,
                phase=Phase.CALIBRATING,
                direction=direction,
                angle=self.estimator.angle,
                blue=found,
                masks=masks or {},
            )

        frozen_now = False
        if not self.calibrator.frozen:
            self.calibrator.freeze()
            frozen_now = True
        direction = self.calibrator.direction

        blue = self.detect(frame, cfg.center_roi, cfg.blue, "center_blue", masks)
        yellow: Optional[bool] = None
        if not blue or cfg.steering.strategy == DetectionStrategy.AVERAGE:
            yellow = self.detect(frame, cfg.center_roi, cfg.yellow, "center_yellow", masks)

        angle = self.estimator.update(blue, yellow, direction)

        return FrameResult(
            frame=counter,
            phase=Phase.CALIBRATED,
            direction=direction,
            angle=angle,
            blue=blue,
            yellow=yellow,
            direction_frozen=frozen_now,
            masks=masks or {},
        )
