from __future__ import annotations
from typing import Optional

import cv2
import numpy as np
from PySide6.QtGui import QImage


def qimage_from_cv_bgr(bgr) -> QImage:
    rgb = bgr[..., ::-1].copy()
    h, w, _ = rgb.shape
    return QImage(rgb.data, w, h, 3 * w, QImage.Format.Format_RGB888).copy()


def qimage_from_cv_bgra(bgra) -> QImage:
    rgba = cv2.cvtColor(bgra, cv2.COLOR_BGRA2RGBA)
    h, w, _ = rgba.shape
    return QImage(rgba.data, w, h, 4 * w, QImage.Format.Format_RGBA8888).copy()


def _to_8bit(arr):
    if arr.dtype == np.uint8:
        return arr
    if arr.dtype == np.uint16:
        return (arr >> 8).astype(np.uint8)
    return cv2.normalize(arr, None, 0, 255, cv2.NORM_MINMAX).astype(np.uint8)


def decode_image(data: bytes) -> Optional[QImage]:
    '''cv2.imdecode over an in-memory buffer; None when bytes are not an image.

    Alpha is kept, so transparent PNGs come back as RGBA.
    '''
    if not data:
        return None
    buf = np.frombuffer(data, dtype=np.uint8)
    try:
        arr = cv2.imdecode(buf, cv2.IMREAD_UNCHANGED)
        if arr is None or arr.size == 0:
            return None
        arr = _to_8bit(arr)
        if arr.ndim == 2 or arr.shape[2] == 1:
            arr = cv2.cvtColor(arr, cv2.COLOR_GRAY2BGR)
    except cv2.error:
        return None
    image = qimage_from_cv_bgra(arr) if arr.shape[2] == 4 else qimage_from_cv_bgr(arr)
    return None if image.isNull() else image
