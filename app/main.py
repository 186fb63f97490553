# app/main.py

import os
import sys
from typing import Callable, Optional

import config

from app.bus import ReferenceFeed, SessionBus, load_reference_csv
from app.event_logger import FrameLogger

from control.controller import SteeringController

from hardware.camera import FrameSource, open_source

from vision.cones.cli import parse_config
from vision.cones.errors import ConfigError, FrameSourceError
from vision.cones.overlay import CENTER_COLOR, SIDE_COLOR, DebugWindows, draw_overlay
from vision.cones.pipeline import ConePipeline, Phase
from vision.cones.snapshot import SnapshotWriter


# =========================================================
# Helpers
# =========================================================

def build_steering_controller(steering_min: float, steering_max: float) -> Optional[SteeringController]:
    try:
        from hardware.servo import Servo

        servo = Servo(
            channel=config.SERVO_CHANNEL,
            center_us=config.SERVO_CENTER_US,
            left_us=config.SERVO_LEFT_US,
            right_us=config.SERVO_RIGHT_US,
        )
    except Exception as e:
        print("[WARN] Servo not available:", e)
        return None
    return SteeringController(servo, steering_min, steering_max)


# =========================================================
# Frame loop
# =========================================================

def run_loop(
    pipeline: ConePipeline,
    source: FrameSource,
    bus: SessionBus,
    *,
    log: FrameLogger,
    max_frames: int = 0,
    controller: Optional[SteeringController] = None,
    snap: Optional[SnapshotWriter] = None,
    windows: Optional[DebugWindows] = None,
    emit: Callable[[str], None] = print,
) -> int:
    """
    Runs until the session stops, the source runs dry or max_frames is hit.
    Returns the number of processed frames.
    """
    processed = 0
    cfg = pipeline.cfg

    while bus.is_running():
        if max_frames and processed >= max_frames:
            break

        captured = source.wait_frame()
        if captured is None:
            print("[SYSTEM] Frame source exhausted")
            break

        result = pipeline.process(captured.image)
        processed += 1

        # -----------------------------------------------------
        # Actuation
        # -----------------------------------------------------

        if controller and result.phase == Phase.CALIBRATED:
            controller.update(result.angle)

        # -----------------------------------------------------
        # Diagnostics
        # -----------------------------------------------------

        reference = bus.reference.value()
        summary = result.summary()
        emit(log.frame(captured.ts_us, summary, reference=reference))

        if snap and result.phase == Phase.CALIBRATING and result.blue and pipeline.calibrator.hits == 1:
            snap.write("direction_hit", summary, masks=result.masks)

        if result.direction_frozen:
            print(f"[SYSTEM] Direction: {result.direction.name} "
                  f"({pipeline.calibrator.hits}/{pipeline.calibrator.frames_seen} calibration hits)")
            if snap:
                snap.write("direction_frozen", summary, masks=result.masks,
                           hits=pipeline.calibrator.hits, frames=pipeline.calibrator.frames_seen)

        if windows and windows.enabled:
            shown = None
            if windows.show_frame:
                shown = draw_overlay(
                    captured.image,
                    captured.ts_us,
                    log.tag,
                    rois=((cfg.side_roi, SIDE_COLOR), (cfg.center_roi, CENTER_COLOR)),
                    angle=result.angle,
                )
            windows.show(shown, result.masks)

    return processed


# =========================================================
# Main
# =========================================================

def main(argv=None) -> int:
    try:
        app = parse_config(argv)
        pipe_cfg = app.pipeline
        pipe_cfg.validate(app.width, app.height)
    except ConfigError as e:
        print(f"[ERROR] Bad configuration: {e}", file=sys.stderr)
        return 1

    try:
        source = open_source(app.name, app.width, app.height)
    except FrameSourceError as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        return 1

    bus = SessionBus()
    feed = None
    if app.reference:
        try:
            samples = load_reference_csv(app.reference)
        except OSError as e:
            print(f"[WARN] Reference not loaded: {e}")
        else:
            feed = ReferenceFeed(bus, samples)
            feed.start()
            print(f"[SYSTEM] Reference feed: {len(samples)} samples")

    keep_masks = app.show_masks or bool(app.log_dir)
    pipeline = ConePipeline(pipe_cfg, keep_masks=keep_masks)

    controller = None
    if app.servo:
        controller = build_steering_controller(
            pipe_cfg.steering.steering_min, pipe_cfg.steering.steering_max
        )

    log = FrameLogger(app.tag, log_dir=app.log_dir)
    snap = SnapshotWriter(os.path.join(app.log_dir, "vision")) if app.log_dir else None
    windows = DebugWindows(f"cid {app.cid}: {app.name}", show_frame=app.verbose, show_masks=app.show_masks)

    print(f"[SYSTEM] Session {app.cid}: {app.width}x{app.height}, "
          f"calibrating on {pipe_cfg.sample_size} frames, strategy={pipe_cfg.steering.strategy.value}")

    processed = 0
    try:
        processed = run_loop(
            pipeline,
            source,
            bus,
            log=log,
            max_frames=app.max_frames,
            controller=controller,
            snap=snap,
            windows=windows,
        )
    except KeyboardInterrupt:
        print("[SYSTEM] Keyboard interrupt")
    except FrameSourceError as e:
        print(f"[ERROR] Frame source lost: {e}", file=sys.stderr)
        return 1

    finally:
        print(f"[SYSTEM] Shutting down after {processed} frames")
        bus.stop()
        if feed:
            feed.stop()
        if controller:
            controller.close()
        source.close()
        windows.close()
        log.close()
        if snap:
            snap.close()

    return 0


if __name__ == "__main__":
    sys.exit(main())
