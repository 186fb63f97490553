from dataclasses import dataclass
from typing import List, Tuple

import cv2
import numpy as np


@dataclass
class Blob:
    area: float
    bbox: Tuple[int, int, int, int]  # x, y, w, h in ROI coordinates


def _contours(mask: np.ndarray):
    # findContours treats every non-zero pixel as foreground
    contours, _ = cv2.findContours(mask, cv2.RETR_EXTERNAL, cv2.CHAIN_APPROX_SIMPLE)
    return contours


def find_blobs(mask: np.ndarray, min_area: float) -> List[Blob]:
    """
    All connected regions whose contour area is strictly greater than
    min_area. Order is whatever OpenCV returns; nothing is ranked.
    """
    blobs = []
    for cnt in _contours(mask):
        area = cv2.contourArea(cnt)
        if area <= min_area:
            continue
        x, y, w, h = cv2.boundingRect(cnt)
        blobs.append(Blob(area=float(area), bbox=(x, y, w, h)))
    return blobs


def marker_present(mask: np.ndarray, min_area: float) -> bool:
    # existence test only, stop at the first qualifying contour
    for cnt in _contours(mask):
        if cv2.contourArea(cnt) > min_area:
            return True
    return False
