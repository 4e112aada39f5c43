# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
EditionForge — Image I/O and Conversion Utilities
All compositing uses BGRA uint8 numpy arrays (OpenCV convention).
Conversion to PIL happens only at the GIF encoding boundary.
"""

from pathlib import Path

import cv2
import numpy as np
from PIL import Image


# ─── Load / Save ─────────────────────────────────────────────────────────────

def load_image_bgra(path: Path) -> np.ndarray:
    """
    Load an image from disk as a BGRA uint8 numpy array.
    Grayscale and BGR images gain an opaque alpha channel.
    Raises FileNotFoundError if path does not exist.
    Raises ValueError if the file cannot be decoded as an image.
    """
    if not path.exists():
        raise FileNotFoundError(f"Image not found: {path}")
    img = cv2.imread(str(path), cv2.IMREAD_UNCHANGED)
    if img is None:
        raise ValueError(f"Could not decode image: {path}")
    return to_bgra(img)


def save_png(img: np.ndarray, path: Path) -> None:
    """
    Save a BGRA numpy array as PNG (lossless, alpha preserved).
    Creates parent directories if they don't exist.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    if not cv2.imwrite(str(path), img):
        raise OSError(f"Could not write image: {path}")


# ─── Channel Layout ──────────────────────────────────────────────────────────

def to_bgra(img: np.ndarray) -> np.ndarray:
    if img.dtype == np.uint16:
        img = (img // 257).astype(np.uint8)
    if img.ndim == 2:
        return cv2.cvtColor(img, cv2.COLOR_GRAY2BGRA)
    channels = img.shape[2]
    if channels == 4:
        return img
    if channels == 3:
        return cv2.cvtColor(img, cv2.COLOR_BGR2BGRA)
    if channels == 1:
        return cv2.cvtColor(img[:, :, 0], cv2.COLOR_GRAY2BGRA)
    raise ValueError(f"Unsupported channel count: {channels}")


def resize_to(img: np.ndarray, width: int, height: int, smooth: bool) -> np.ndarray:
    """Scale img to width×height; nearest-neighbour unless smooth."""
    h, w = img.shape[:2]
    if (w, h) == (width, height):
        return img
    interp = cv2.INTER_LINEAR if smooth else cv2.INTER_NEAREST
    return cv2.resize(img, (width, height), interpolation=interp)


# ─── PIL Bridge ──────────────────────────────────────────────────────────────

def bgra_to_pil(img: np.ndarray) -> Image.Image:
    """Convert BGRA numpy array to PIL Image (RGBA mode)."""
    return Image.fromarray(cv2.cvtColor(img, cv2.COLOR_BGRA2RGBA))
