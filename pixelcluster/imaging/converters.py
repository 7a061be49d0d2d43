"""
Image <-> Array Conversion

Turns an image into row-major pixel samples normalized to [min, max] and
back. Channel values [0, 255] map linearly onto the configured range.
"""

from typing import Union
import numpy as np
from PIL import Image

from ..exceptions import DimensionMismatchError, InvalidParameterError


def _check_range(min_value: float, max_value: float):
    if not min_value < max_value:
        raise InvalidParameterError(
            f"min ({min_value}) must be < max ({max_value})"
        )


class ImageToArray:
    """
    Convert an image to a (H*W, C) array of normalized samples.

    Example:
        >>> converter = ImageToArray(min=-1, max=1)
        >>> pixels = converter.convert(image)  # image: PIL Image or (H, W, 3) uint8
        >>> pixels.shape
        (H*W, 3)
    """

    def __init__(self, min: float = -1.0, max: float = 1.0):
        _check_range(min, max)
        self.min = float(min)
        self.max = float(max)

    def convert(self, image: Union[Image.Image, np.ndarray]) -> np.ndarray:
        """
        Extract pixel samples in raster (row-major) order.

        Args:
            image: PIL Image, (H, W, C) array or (H, W) grayscale array,
                   channel values in [0, 255]

        Returns:
            samples: float64 array of shape (H*W, C), values in [min, max]

        Raises:
            DimensionMismatchError: If the array is not 2D or 3D
        """
        if isinstance(image, Image.Image):
            if image.mode not in ('L', 'RGB', 'RGBA'):
                image = image.convert('RGB')
            image = np.asarray(image)

        image = np.asarray(image)
        if image.ndim == 2:
            image = image[:, :, None]
        if image.ndim != 3:
            raise DimensionMismatchError(
                f"Image must be (H, W) or (H, W, C), got shape {image.shape}"
            )

        samples = image.reshape(-1, image.shape[2]).astype(np.float64)
        return samples / 255.0 * (self.max - self.min) + self.min


class ArrayToImage:
    """
    Rebuild an image of a fixed size from normalized samples.

    Inverse of ImageToArray: values in [min, max] are mapped back to
    [0, 255], rounded and clipped.
    """

    def __init__(self, width: int, height: int, min: float = -1.0, max: float = 1.0):
        if width < 1 or height < 1:
            raise InvalidParameterError(
                f"Image dimensions must be positive, got width={width}, height={height}"
            )
        _check_range(min, max)
        self.width = width
        self.height = height
        self.min = float(min)
        self.max = float(max)

    def denormalize(self, samples: np.ndarray) -> np.ndarray:
        """Map samples from [min, max] to uint8 channel values."""
        values = (np.asarray(samples, dtype=np.float64) - self.min) / (self.max - self.min) * 255.0
        return np.clip(np.rint(values), 0, 255).astype(np.uint8)

    def to_array(self, samples: np.ndarray) -> np.ndarray:
        """
        Rebuild the image as a uint8 array.

        Args:
            samples: Array of shape (width*height, C) or (width*height,)

        Returns:
            image: uint8 array of shape (height, width, C)

        Raises:
            DimensionMismatchError: If the sample count doesn't match width*height
        """
        samples = np.asarray(samples)
        if samples.ndim == 1:
            samples = samples[:, None]
        if samples.ndim != 2:
            raise DimensionMismatchError(f"samples must be 1D or 2D, got shape {samples.shape}")

        n_pixels = self.width * self.height
        if len(samples) != n_pixels:
            raise DimensionMismatchError(
                f"Image size {self.width}x{self.height} doesn't match "
                f"{len(samples)} samples"
            )

        return self.denormalize(samples).reshape(self.height, self.width, samples.shape[1])

    def convert(self, samples: np.ndarray) -> Image.Image:
        """
        Rebuild the image as a PIL Image.

        One channel gives an 'L' image, three 'RGB', four 'RGBA'.

        Raises:
            DimensionMismatchError: If sizes or channel count don't fit an image
        """
        pixels = self.to_array(samples)
        n_channels = pixels.shape[2]

        if n_channels == 1:
            return Image.fromarray(pixels[:, :, 0])
        if n_channels in (3, 4):
            return Image.fromarray(pixels)

        raise DimensionMismatchError(
            f"Cannot build an image with {n_channels} channels (expected 1, 3 or 4)"
        )
