"""Image I/O utilities for loading and converting diagram images.

This module provides functions for:
- Loading diagram images from files (OpenCV)
- Converting NumPy arrays to QImage for Qt display
- Validating image file extensions
"""

import logging
from pathlib import Path
from typing import Union

import cv2
import numpy as np
from PySide6.QtGui import QImage

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = {".png", ".jpg", ".jpeg", ".tif", ".tiff", ".bmp", ".gif", ".webp"}

_QIMAGE_FORMATS = {
    (2, 1): QImage.Format_Grayscale8,
    (3, 3): QImage.Format_RGB888,
    (3, 4): QImage.Format_RGBA8888,
}


def numpy_to_qimage(arr: np.ndarray) -> QImage:
    """Wrap a uint8 diagram array (as returned by ``load_image``) in a QImage.

    Grayscale (H, W), RGB (H, W, 3) and RGBA (H, W, 4) arrays are supported.
    The QImage owns a copy of the pixels, so ``arr`` may be released.

    Raises:
        ValueError: For any other shape
    """
    if arr is None:
        return QImage()
    data = np.ascontiguousarray(arr, dtype=np.uint8)
    h, w = data.shape[:2]
    channels = 1 if data.ndim == 2 else data.shape[2]
    fmt = _QIMAGE_FORMATS.get((data.ndim, channels))
    if fmt is None:
        raise ValueError(f"Unsupported diagram array shape {data.shape}")
    return QImage(data.data, w, h, channels * w, fmt).copy()


def cv2_imread_unicode(path: str):
    data = np.fromfile(path, dtype=np.uint8)
    return cv2.imdecode(data, cv2.IMREAD_UNCHANGED)


def load_image(path: Union[str, Path]) -> np.ndarray:
    """Load a diagram image into a NumPy array.

    Color images are converted from OpenCV's BGR/BGRA order to RGB/RGBA.
    Grayscale images are returned as 2-D arrays. 16-bit images are reduced
    to 8 bits for display.

    Args:
        path: Path to the image file (str or pathlib.Path).

    Returns:
        np.ndarray: uint8 image data

    Raises:
        RuntimeError: If the file is not a supported image or cannot be decoded.
    """
    path_str = str(path)
    if not is_image_file(path_str):
        raise RuntimeError(f"Cannot open image: {path_str} (unsupported format)")
    try:
        img = cv2_imread_unicode(path_str)
    except OSError as e:
        raise RuntimeError(f"Cannot open image: {path_str} ({e})") from e
    if img is None:
        raise RuntimeError(f"Cannot open image: {path_str}")

    if img.dtype == np.uint16:
        img = (img >> 8).astype(np.uint8)
    if img.ndim == 3 and img.shape[2] == 4:
        img = cv2.cvtColor(img, cv2.COLOR_BGRA2RGBA)
    elif img.ndim == 3 and img.shape[2] == 3:
        img = cv2.cvtColor(img, cv2.COLOR_BGR2RGB)
    logger.info("Loaded diagram %s (%dx%d)", Path(path_str).name, img.shape[1], img.shape[0])
    return img


def is_image_file(path: Union[str, Path]) -> bool:
    """Return True if the given path has a supported image file suffix.

    This is a lightweight check that relies solely on the filename suffix
    (case-insensitive). It does not attempt to open the file.
    """
    return Path(path).suffix.lower() in IMAGE_EXTENSIONS
