"""Utility functions for the security system."""

import os
from datetime import datetime

import numpy as np
from PIL import Image, UnidentifiedImageError


def ensure_directory_exists(path: str) -> None:
    """Ensure a directory exists, create if it doesn't."""
    if not os.path.exists(path):
        os.makedirs(path, exist_ok=True)


def format_timestamp(dt: datetime) -> str:
    """Format datetime for consistent display."""
    return dt.strftime("%Y-%m-%d %H:%M:%S")


def load_frame(image_path: str) -> np.ndarray:
    """Load an image file as an RGB frame (height x width x 3, uint8)."""
    if not os.path.exists(image_path):
        raise FileNotFoundError(f"Image not found: {image_path}")

    try:
        with Image.open(image_path) as image:
            return np.asarray(image.convert("RGB"), dtype=np.uint8)
    except (UnidentifiedImageError, OSError) as e:
        raise ValueError(f"Cannot read image {image_path}: {e}") from e
