"""
Cone-marker perception for track following.

Frames are cropped to a side window (direction calibration) and a center
window (steering). Each window is segmented per color in HSV, cleaned with
blur + dilate/erode, and reduced to a yes/no marker presence. The steering
estimator turns those into a bounded angle.
"""

from .calibration import Direction, DirectionCalibrator
from .color import HsvRange, segment
from .errors import ConfigError, FrameSourceError
from .pipeline import ConePipeline, FrameResult, Phase, PipelineConfig
from .roi import Roi
from .steering import DetectionStrategy, SteeringConfig, SteeringEstimator

__all__ = [
    "ConePipeline",
    "ConfigError",
    "DetectionStrategy",
    "Direction",
    "DirectionCalibrator",
    "FrameResult",
    "FrameSourceError",
    "HsvRange",
    "Phase",
    "PipelineConfig",
    "Roi",
    "SteeringConfig",
    "SteeringEstimator",
    "segment",
]
