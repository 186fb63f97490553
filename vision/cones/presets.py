"""
Named threshold sets.

`default` is built from the root config module. The other presets are the
threshold sets used across tuning rounds on the track; they only differ in
blob area and steering range.
"""

from dataclasses import replace
from typing import Dict

import config

from .color import HsvRange
from .errors import ConfigError
from .pipeline import PipelineConfig
from .roi import Roi
from .steering import SteeringConfig


def default_config() -> PipelineConfig:
    return PipelineConfig(
        side_roi=Roi.from_tuple(config.SIDE_ROI),
        center_roi=Roi.from_tuple(config.CENTER_ROI),
        blue=HsvRange.from_tuple(config.BLUE_HSV),
        yellow=HsvRange.from_tuple(config.YELLOW_HSV),
        min_area=float(config.MIN_AREA),
        sample_size=int(config.SAMPLE_SIZE),
        steering=SteeringConfig(
            steering_min=float(config.STEERING_MIN),
            steering_max=float(config.STEERING_MAX),
            step=float(config.STEERING_STEP),
        ),
    )


def _tight() -> PipelineConfig:
    base = default_config()
    return replace(
        base,
        min_area=222.0,
        steering=replace(base.steering, steering_min=-0.29, steering_max=0.29),
    )


def _wide() -> PipelineConfig:
    base = default_config()
    return replace(base, min_area=150.0)


PRESETS = {
    "default": default_config,
    "tight": _tight,
    "wide": _wide,
}


def preset_names():
    return sorted(PRESETS)


def load_preset(name: str) -> PipelineConfig:
    try:
        factory = PRESETS[name]
    except KeyError:
        raise ConfigError(f"unknown preset '{name}' (known: {', '.join(preset_names())})") from None
    return factory()


def all_presets() -> Dict[str, PipelineConfig]:
    return {name: factory() for name, factory in PRESETS.items()}
