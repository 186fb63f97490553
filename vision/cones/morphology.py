"""
Noise suppression for binary color masks.

Blur + dilate/erode fills small holes first, the trailing erode/dilate pair
then knocks out small false positives. The order is part of the behaviour:
`clean_mask` always runs blur -> dilate -> erode -> erode -> dilate.
"""

import cv2
import numpy as np

BLUR_KSIZE = (5, 5)
KERNEL = cv2.getStructuringElement(cv2.MORPH_RECT, (3, 3))


def blur(mask: np.ndarray) -> np.ndarray:
    return cv2.GaussianBlur(mask, BLUR_KSIZE, 0)


def dilate(mask: np.ndarray) -> np.ndarray:
    return cv2.dilate(mask, KERNEL, iterations=1)


def erode(mask: np.ndarray) -> np.ndarray:
    return cv2.erode(mask, KERNEL, iterations=1)


CLEAN_STEPS = (blur, dilate, erode, erode, dilate)


def clean_mask(mask: np.ndarray) -> np.ndarray:
    out = mask
    for step in CLEAN_STEPS:
        out = step(out)
    return out
