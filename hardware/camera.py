from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Iterable, Iterator, Optional, Union

import cv2
import numpy as np

from vision.cones.errors import FrameSourceError

try:
    import picamera2
    PICAMERA2_AVAILABLE = True
except ImportError:
    PICAMERA2_AVAILABLE = False


@dataclass
class CapturedFrame:
    image: np.ndarray  # (h, w, 4) uint8, BGRA
    ts_us: int         # capture time, microseconds


def now_us() -> int:
    return time.time_ns() // 1000


def to_bgra(image: np.ndarray) -> np.ndarray:
    if image.ndim == 2:
        return cv2.cvtColor(image, cv2.COLOR_GRAY2BGRA)
    if image.shape[2] == 3:
        return cv2.cvtColor(image, cv2.COLOR_BGR2BGRA)
    return image


class FrameSource:
    """
    Blocking frame transport: open() once, then wait_frame() per iteration.
    wait_frame() returns None when the source has no more frames.
    """

    width: int
    height: int

    def open(self) -> None:
        raise NotImplementedError

    def wait_frame(self) -> Optional[CapturedFrame]:
        raise NotImplementedError

    def close(self) -> None:
        pass

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, *exc):
        self.close()
        return False

    def _check_size(self, image: np.ndarray) -> np.ndarray:
        h, w = image.shape[:2]
        if (w, h) != (self.width, self.height):
            image = cv2.resize(image, (self.width, self.height))
        return to_bgra(image)


class VideoCaptureSource(FrameSource):
    """USB camera (index or /dev/videoN) or a recorded video file via OpenCV."""

    def __init__(self, device: Union[int, str], width: int, height: int):
        self.device = device
        self.width = int(width)
        self.height = int(height)
        self._cap: Optional[cv2.VideoCapture] = None
        self._last_ts = 0

    def open(self) -> None:
        if isinstance(self.device, int):
            cap = cv2.VideoCapture(self.device, cv2.CAP_V4L2)
        else:
            cap = cv2.VideoCapture(self.device)
        if not cap.isOpened():
            raise FrameSourceError(f"cannot open video source {self.device!r}")
        if isinstance(self.device, int):
            # keep the driver buffer short so frames are not stale
            cap.set(cv2.CAP_PROP_BUFFERSIZE, 1)
            cap.set(cv2.CAP_PROP_FRAME_WIDTH, self.width)
            cap.set(cv2.CAP_PROP_FRAME_HEIGHT, self.height)
        self._cap = cap
        print(f"[CAM] Opened {self.device!r} ({self.width}x{self.height})")

    def wait_frame(self) -> Optional[CapturedFrame]:
        if self._cap is None:
            raise FrameSourceError("video source is not open")
        ok, image = self._cap.read()
        if not ok or image is None:
            return None
        if isinstance(self.device, int):
            ts_us = now_us()
        else:
            # recorded file: position in the container, 0 for the first frame
            ts_us = int(self._cap.get(cv2.CAP_PROP_POS_MSEC) * 1000)
        # some backends report a stale or reset position; never go backwards
        ts_us = max(ts_us, self._last_ts)
        self._last_ts = ts_us
        return CapturedFrame(image=self._check_size(image), ts_us=ts_us)

    def close(self) -> None:
        if self._cap is not None:
            self._cap.release()
            self._cap = None


class Picamera2Source(FrameSource):
    """Raspberry Pi CSI camera via picamera2."""

    def __init__(self, width: int, height: int):
        self.width = int(width)
        self.height = int(height)
        self._cam = None

    def open(self) -> None:
        if not PICAMERA2_AVAILABLE:
            raise FrameSourceError("picamera2 not installed (sudo apt install python3-picamera2)")
        if len(picamera2.Picamera2.global_camera_info()) == 0:
            raise FrameSourceError("no CSI camera detected")

        self._cam = picamera2.Picamera2()
        cfg = self._cam.create_preview_configuration(
            buffer_count=2,
            queue=False,
            main={"format": "XRGB8888", "size": (self.width, self.height)},
        )
        self._cam.configure(cfg)
        self._cam.start()
        print(f"[CAM] PiCamera started ({self.width}x{self.height})")

    def wait_frame(self) -> Optional[CapturedFrame]:
        if self._cam is None:
            raise FrameSourceError("picamera is not open")
        request = self._cam.capture_request()
        try:
            image = request.make_array("main")
            md = request.get_metadata()
        finally:
            request.release()
        # SensorTimestamp is in nanoseconds
        sensor_ns = md.get("SensorTimestamp") if md else None
        ts_us = int(sensor_ns) // 1000 if sensor_ns else now_us()
        return CapturedFrame(image=self._check_size(image), ts_us=ts_us)

    def close(self) -> None:
        if self._cam is not None:
            self._cam.stop()
            self._cam = None


class ArraySource(FrameSource):
    """Replays frames already in memory. Timestamps advance by `period_us`."""

    def __init__(self, frames: Iterable[np.ndarray], width: int, height: int,
                 start_us: int = 0, period_us: int = 33_333):
        self._frames = frames
        self._it: Optional[Iterator[np.ndarray]] = None
        self.width = int(width)
        self.height = int(height)
        self._ts = int(start_us)
        self.period_us = int(period_us)

    def open(self) -> None:
        self._it = iter(self._frames)

    def wait_frame(self) -> Optional[CapturedFrame]:
        if self._it is None:
            raise FrameSourceError("array source is not open")
        image = next(self._it, None)
        if image is None:
            return None
        frame = CapturedFrame(image=self._check_size(image), ts_us=self._ts)
        self._ts += self.period_us
        return frame


def parse_source_name(name: str) -> Union[int, str]:
    """'3' -> camera index 3, anything else is a path or 'picamera'."""
    return int(name) if name.isdigit() else name


def open_source(name: str, width: int, height: int) -> FrameSource:
    """
    Build and open a source. Any failure is fatal for the caller: there is
    no per-frame retry.
    """
    target = parse_source_name(name)
    if target == "picamera":
        src: FrameSource = Picamera2Source(width, height)
    else:
        src = VideoCaptureSource(target, width, height)
    try:
        src.open()
    except FrameSourceError:
        raise
    except Exception as e:
        raise FrameSourceError(f"failed to open frame source {name!r}: {e}") from e
    return src
