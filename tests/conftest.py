import numpy as np
import pytest
from PIL import Image


BLOB_CENTERS = np.array([
    [0.0, 0.0, 0.0],
    [5.0, 5.0, 5.0],
    [-5.0, 5.0, 0.0],
])


@pytest.fixture
def blobs():
    """Three tight, well separated 3D blobs of 50 points each."""
    rng = np.random.default_rng(0)
    points = [center + rng.normal(scale=0.3, size=(50, 3)) for center in BLOB_CENTERS]
    return np.vstack(points)


@pytest.fixture
def two_color_image():
    """8x6 RGB image: left half red, right half blue."""
    image = np.zeros((6, 8, 3), dtype=np.uint8)
    image[:, :4] = (255, 0, 0)
    image[:, 4:] = (0, 0, 255)
    return image


@pytest.fixture
def two_color_png(tmp_path, two_color_image):
    path = tmp_path / 'two_colors.png'
    Image.fromarray(two_color_image).save(path)
    return path
