"""
Image file loading and saving.
"""

from pathlib import Path
from typing import Union
import logging

import cv2
import numpy as np
from PIL import Image

logger = logging.getLogger(__name__)


def load_image(image_path: Union[str, Path]) -> np.ndarray:
    """
    Load an image file as an RGB array.

    Args:
        image_path: Path to image file

    Returns:
        image: uint8 RGB image of shape (H, W, 3)

    Raises:
        FileNotFoundError: If image file doesn't exist
        ValueError: If image cannot be decoded
    """
    image_path = Path(image_path)

    if not image_path.exists():
        raise FileNotFoundError(f"Image not found: {image_path}")

    # Load image using OpenCV
    img = cv2.imread(str(image_path), cv2.IMREAD_COLOR)

    if img is None:
        raise ValueError(f"Could not load image from {image_path}")

    # Convert BGR to RGB (OpenCV loads as BGR)
    img = cv2.cvtColor(img, cv2.COLOR_BGR2RGB)

    logger.debug(f"Loaded {image_path}: {img.shape}")
    return img


def save_image(image: Union[Image.Image, np.ndarray], output_path: Union[str, Path]) -> Path:
    """
    Save a PIL image (or uint8 array) to disk, creating parent directories.

    Returns:
        The path written to
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    if isinstance(image, np.ndarray):
        image = Image.fromarray(image.astype(np.uint8))

    image.save(output_path)
    logger.info(f"Saved image to {output_path}")
    return output_path
