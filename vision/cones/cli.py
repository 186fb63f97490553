from dataclasses import dataclass, replace
from typing import Optional
import argparse

import config

from .errors import ConfigError
from .pipeline import PipelineConfig
from .presets import load_preset, preset_names
from .steering import DetectionStrategy


@dataclass(frozen=True)
class AppConfig:
    cid: int
    name: str
    width: int
    height: int
    verbose: bool
    show_masks: bool
    tag: str

    reference: Optional[str]
    log_dir: Optional[str]
    max_frames: int
    servo: bool

    # analysis
    pipeline: PipelineConfig


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        description="Cone track steering: blue/yellow marker detection -> steering angle"
    )

    p.add_argument("--cid", type=int, required=True, help="Session id, shown in the startup line and window titles.")
    p.add_argument("--name", required=True,
                   help="Frame source: 'picamera', a camera index or a video file.")
    p.add_argument("--width", type=int, required=True, help="Frame width in pixels.")
    p.add_argument("--height", type=int, required=True, help="Frame height in pixels.")
    p.add_argument("--verbose", action="store_true", help="Show the annotated frame.")
    p.add_argument("--show-masks", action="store_true", help="Show cleaned masks per color.")
    p.add_argument("--tag", default=None, help=f"Log line tag. Default: {config.LOG_TAG}")

    # Analysis
    p.add_argument("--preset", default="default", choices=preset_names())
    p.add_argument("--strategy", default=DetectionStrategy.BLUE_PRIORITY.value,
                   choices=[s.value for s in DetectionStrategy],
                   help="How to treat frames where both colors are visible.")
    p.add_argument("--min-area", type=float, default=None, help="Override blob area threshold.")
    p.add_argument("--sample-size", type=int, default=None, help="Override calibration frame count.")

    # Outputs
    p.add_argument("--reference", default=None, help="CSV (ts_us,ground_steering) replayed as reference.")
    p.add_argument("--log-dir", default=None, help="Write per-frame JSONL + snapshots here.")
    p.add_argument("--max-frames", type=int, default=0, help="Stop after N frames (0 = no limit).")
    p.add_argument("--servo", action="store_true", help="Drive the steering servo.")

    return p


def parse_config(argv=None) -> AppConfig:
    args = build_arg_parser().parse_args(argv)

    if args.width <= 0 or args.height <= 0:
        raise ConfigError(f"frame size must be positive, got {args.width}x{args.height}")

    pipeline = load_preset(args.preset).with_strategy(DetectionStrategy(args.strategy))
    if args.min_area is not None:
        pipeline = replace(pipeline, min_area=args.min_area)
    if args.sample_size is not None:
        pipeline = replace(pipeline, sample_size=args.sample_size)

    tag = args.tag if args.tag else config.LOG_TAG

    return AppConfig(
        cid=args.cid,
        name=args.name,
        width=args.width,
        height=args.height,
        verbose=args.verbose,
        show_masks=args.show_masks,
        tag=tag,
        reference=args.reference,
        log_dir=args.log_dir,
        max_frames=max(0, args.max_frames),
        servo=args.servo,
        pipeline=pipeline,
    )
