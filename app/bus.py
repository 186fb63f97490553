from __future__ import annotations

import csv
import threading
from dataclasses import dataclass
from typing import List, Optional


@dataclass(frozen=True)
class ReferenceSample:
    ts_us: int
    ground_steering: float


class ReferenceCell:
    """
    Latest externally computed steering value.
    One writer (the feed thread), any number of readers; every access holds
    the lock. Purely observational: the estimator never reads it.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._value: Optional[ReferenceSample] = None

    def set(self, sample: ReferenceSample) -> None:
        with self._lock:
            self._value = sample

    def get(self) -> Optional[ReferenceSample]:
        with self._lock:
            return self._value

    def value(self) -> Optional[float]:
        s = self.get()
        return s.ground_steering if s is not None else None


class SessionBus:
    """Liveness of the control session plus the reference value."""

    def __init__(self):
        self.reference = ReferenceCell()
        self._stop_evt = threading.Event()

    def is_running(self) -> bool:
        return not self._stop_evt.is_set()

    def stop(self) -> None:
        self._stop_evt.set()


def load_reference_csv(path: str) -> List[ReferenceSample]:
    """
    Rows of `ts_us,ground_steering`. A header row and blank / comment lines
    are skipped. Malformed rows are reported and dropped.
    """
    samples: List[ReferenceSample] = []
    with open(path, newline="") as f:
        for lineno, row in enumerate(csv.reader(f), start=1):
            if not row or row[0].strip().startswith("#"):
                continue
            try:
                samples.append(ReferenceSample(int(row[0]), float(row[1])))
            except (ValueError, IndexError):
                if lineno != 1:
                    print(f"[WARN] {path}:{lineno}: bad reference row {row!r}")
    samples.sort(key=lambda s: s.ts_us)
    return samples


class ReferenceFeed:
    """
    Background publisher of recorded reference values into the bus, paced
    by the gaps between recorded timestamps.
    """

    def __init__(self, bus: SessionBus, samples: List[ReferenceSample], speed: float = 1.0):
        self.bus = bus
        self.samples = samples
        self.speed = float(speed) if speed > 0 else 1.0

        self._th: Optional[threading.Thread] = None
        self._stop_evt = threading.Event()
        self.published = 0

    def start(self) -> None:
        if self._th is not None:
            return
        self._stop_evt.clear()
        self._th = threading.Thread(target=self._run, name="ReferenceFeed", daemon=True)
        self._th.start()

    def stop(self) -> None:
        self._stop_evt.set()
        th = self._th
        self._th = None
        if th:
            th.join(timeout=2.0)

    def join(self, timeout: Optional[float] = None) -> None:
        if self._th:
            self._th.join(timeout)

    def _run(self) -> None:
        prev_ts: Optional[int] = None
        for sample in self.samples:
            if self._stop_evt.is_set() or not self.bus.is_running():
                return
            if prev_ts is not None:
                gap = (sample.ts_us - prev_ts) / 1e6 / self.speed
                if gap > 0 and self._stop_evt.wait(gap):
                    return
            self.bus.reference.set(sample)
            self.published += 1
            prev_ts = sample.ts_us
