import json
import os
import time
from typing import Optional

import config


class FrameLogger:
    """
    Per-frame diagnostics for one session.

    Every frame gets a text line "tag;capture ts (us);angle;reference".
    With a log directory the frame summary is also appended as a JSON line.
    """

    def __init__(self, tag: str = config.LOG_TAG, log_dir: Optional[str] = None,
                 filename: Optional[str] = None):
        self.tag = tag
        self.path = None
        self._f = None
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
            if filename is None:
                filename = time.strftime("steer_%Y%m%d_%H%M%S.jsonl")
            self.path = os.path.join(log_dir, filename)
            self._f = open(self.path, "a", buffering=1)  # line-buffered
            print(f"[LOG] Writing frames to: {self.path}")

    def line(self, ts_us: int, angle: float, reference: Optional[float] = None) -> str:
        ref = "" if reference is None else f"{reference:.6f}"
        return f"{self.tag};{ts_us};{angle:.6f};{ref}"

    def frame(self, ts_us: int, summary: dict, reference: Optional[float] = None) -> str:
        """Record one processed frame. Returns its text line."""
        if self._f is not None:
            rec = {"ts_us": ts_us, "tag": self.tag, **summary, "reference": reference}
            self._f.write(json.dumps(rec, ensure_ascii=False) + "\n")
        return self.line(ts_us, summary["angle"], reference)

    def close(self):
        if self._f is None:
            return
        try:
            self._f.close()
        except OSError:
            pass
        self._f = None
