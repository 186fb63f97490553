"""
Diagnostics drawn on top of the frame. Presentation only: nothing here feeds
back into the pipeline.
"""

import time
from typing import Dict, Iterable, Optional, Tuple

import cv2
import numpy as np

from .roi import Roi

TEXT_ORIGIN = (25, 50)
TEXT_COLOR = (154, 250, 0)  # BGR of RGB(0, 250, 154)
SIDE_COLOR = (0, 165, 255)
CENTER_COLOR = (0, 0, 255)


def status_text(ts_us: int, tag: str, now: Optional[float] = None) -> str:
    """Now: <utc iso>; ts: <capture us>; <tag>"""
    if now is None:
        now = time.time()
    utc = time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime(int(now)))
    return f"Now: {utc}; ts: {ts_us}; {tag}"


def draw_overlay(
    frame: np.ndarray,
    ts_us: int,
    tag: str,
    rois: Iterable[Tuple[Roi, Tuple[int, int, int]]] = (),
    angle: Optional[float] = None,
) -> np.ndarray:
    # draw on a copy, the pipeline may still hold views into the frame
    img = frame.copy()
    cv2.putText(img, status_text(ts_us, tag), TEXT_ORIGIN, cv2.FONT_HERSHEY_DUPLEX, 0.5, TEXT_COLOR)
    if angle is not None:
        cv2.putText(img, f"angle: {angle:+.3f}", (TEXT_ORIGIN[0], TEXT_ORIGIN[1] + 20),
                    cv2.FONT_HERSHEY_DUPLEX, 0.5, TEXT_COLOR)
    for roi, color in rois:
        cv2.rectangle(img, (roi.x, roi.y), (roi.x1, roi.y1), color, 1)
    return img


class DebugWindows:
    """cv2.imshow wrapper; windows are only created when enabled."""

    def __init__(self, title: str, show_frame: bool = False, show_masks: bool = False):
        self.title = title
        self.show_frame = show_frame
        self.show_masks = show_masks
        self._opened = set()

    @property
    def enabled(self) -> bool:
        return self.show_frame or self.show_masks

    def show(self, frame: Optional[np.ndarray], masks: Optional[Dict[str, np.ndarray]] = None) -> None:
        if not self.enabled:
            return
        if self.show_frame and frame is not None:
            cv2.imshow(self.title, frame)
            self._opened.add(self.title)
        if self.show_masks and masks:
            for name, mask in masks.items():
                win = f"{self.title} {name}"
                cv2.imshow(win, mask)
                self._opened.add(win)
        cv2.waitKey(1)

    def close(self) -> None:
        if self._opened:
            cv2.destroyAllWindows()
            self._opened.clear()
