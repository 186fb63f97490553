import json
import os
import time
from enum import Enum
from typing import Any, Dict, Optional

import numpy as np
from PIL import Image


def _safe(obj: Any) -> Any:
    """
    Convert enums / numpy scalars / tuples to JSON-serializable structures.
    """
    if obj is None:
        return None
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, np.generic):
        return obj.item()
    if isinstance(obj, dict):
        return {str(k): _safe(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [_safe(v) for v in obj]
    if isinstance(obj, (str, int, float, bool)):
        return obj
    return str(obj)


class SnapshotWriter:
    """
    Writes calibration / steering snapshots as JSON Lines (.jsonl),
    plus the binary masks of that frame as JPEG files.
    """

    def __init__(self, out_dir: str = "logs/vision", filename: Optional[str] = None):
        os.makedirs(out_dir, exist_ok=True)
        self._img_dir = os.path.join(out_dir, "masks")
        os.makedirs(self._img_dir, exist_ok=True)
        if filename is None:
            filename = time.strftime("cones_%Y%m%d_%H%M%S.jsonl")
        self.path = os.path.join(out_dir, filename)
        self._f = open(self.path, "a", buffering=1)
        print(f"[SNAP] Vision snapshots: {self.path}")

    def close(self) -> None:
        try:
            self._f.close()
        except OSError:
            pass

    def _save_mask(self, event: str, frame_id: Optional[int], name: str, mask: np.ndarray) -> Optional[str]:
        ts = time.strftime("%Y%m%d_%H%M%S")
        fname = f"{event}_{ts}"
        if frame_id is not None:
            fname += f"_f{frame_id}"
        fname += f"_{name}.jpg"
        path = os.path.join(self._img_dir, fname)
        try:
            Image.fromarray(np.ascontiguousarray(mask)).convert("L").save(path, format="JPEG", quality=85)
        except (OSError, ValueError) as e:
            print(f"[SNAP] mask {name} not saved: {e}")
            return None
        return path

    def write(self, event: str, state: Dict[str, Any], masks: Optional[Dict[str, np.ndarray]] = None,
              **extra: Any) -> None:
        rec: Dict[str, Any] = {
            "ts": time.time(),
            "event": event,
            "state": _safe(state),
        }
        if masks:
            frame_id = state.get("frame") if state else None
            paths = {}
            for name, mask in masks.items():
                p = self._save_mask(event, frame_id, name, mask)
                if p:
                    paths[name] = p
            if paths:
                rec["masks"] = paths
        if extra:
            rec["extra"] = {k: _safe(v) for k, v in extra.items()}
        self._f.write(json.dumps(rec, ensure_ascii=False) + "\n")
