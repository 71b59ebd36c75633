"""Utility functions for the security system."""

import os
from typing import Any

import numpy as np
from PIL import Image


def ensure_directory_exists(path: str) -> None:
    """Ensure a directory exists, create if it doesn't."""
    if path and not os.path.exists(path):
        os.makedirs(path, exist_ok=True)


def load_image(image: Any) -> np.ndarray:
    """Convert a file path, PIL image or array into a numpy array.

    Colour images come back as RGB, grayscale images as a 2-D array.
    """
    if isinstance(image, np.ndarray):
        return image

    if isinstance(image, (str, os.PathLike)):
        if not os.path.exists(image):
            raise FileNotFoundError(f"Image file not found: {image}")
        with Image.open(image) as pil_image:
            return _pil_to_array(pil_image)

    if isinstance(image, Image.Image):
        return _pil_to_array(image)

    raise TypeError(f"Unsupported image type: {type(image).__name__}")


def _pil_to_array(pil_image: Image.Image) -> np.ndarray:
    if pil_image.mode not in ("L", "RGB"):
        pil_image = pil_image.convert("RGB")
    return np.asarray(pil_image, dtype=np.uint8)
