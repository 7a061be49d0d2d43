import numpy as np
import pytest
from PIL import Image

from pixelcluster import DimensionMismatchError, InvalidParameterError
from pixelcluster.imaging import (
    load_image,
    quantize_image,
    quantize_image_meanshift,
    recolor,
    save_image,
)
from pixelcluster.kmeans import KMeansConfig, KMeansResult
from pixelcluster.meanshift import MeanShiftConfig, MeanShiftResult


# ============================================================================
# recolor
# ============================================================================

def test_recolor_substitutes_centroids():
    centroids = np.array([[0.0, 0.0, 0.0], [1.0, 0.5, -1.0]])
    labels = np.array([1, 0, 1])

    recolored = recolor(labels, centroids)

    np.testing.assert_array_equal(recolored, [[1.0, 0.5, -1.0], [0.0, 0.0, 0.0], [1.0, 0.5, -1.0]])


def test_recolor_returns_a_new_array():
    centroids = np.array([[0.0], [1.0]])
    recolored = recolor(np.array([0, 1]), centroids)

    recolored[0, 0] = 9.0

    assert centroids[0, 0] == 0.0


@pytest.mark.parametrize("labels", [[0, 2], [-1, 0]])
def test_recolor_rejects_unknown_labels(labels):
    with pytest.raises(InvalidParameterError):
        recolor(np.array(labels), np.zeros((2, 3)))


def test_recolor_rejects_2d_labels():
    with pytest.raises(DimensionMismatchError):
        recolor(np.zeros((2, 2), dtype=int), np.zeros((2, 3)))


# ============================================================================
# K-Means pipeline
# ============================================================================

def test_two_color_image_is_reproduced_exactly(two_color_image):
    quantized = quantize_image(two_color_image, KMeansConfig(n_clusters=2, tol=0.05))

    np.testing.assert_array_equal(np.asarray(quantized.image), two_color_image)
    assert sorted(map(tuple, quantized.palette.tolist())) == [(0, 0, 255), (255, 0, 0)]
    assert quantized.labels.shape == (6, 8)
    assert quantized.n_colors == 2
    assert isinstance(quantized.result, KMeansResult)


def test_labels_match_image_regions(two_color_image):
    quantized = quantize_image(two_color_image, KMeansConfig(n_clusters=2))

    left, right = quantized.labels[:, :4], quantized.labels[:, 4:]
    assert len(np.unique(left)) == 1
    assert len(np.unique(right)) == 1
    assert left[0, 0] != right[0, 0]


def test_output_has_at_most_k_colors():
    rng = np.random.default_rng(5)
    image = rng.integers(0, 256, size=(12, 10, 3), dtype=np.uint8)

    quantized = quantize_image(Image.fromarray(image), KMeansConfig(n_clusters=3))

    colors = np.unique(np.asarray(quantized.image).reshape(-1, 3), axis=0)
    assert len(colors) <= 3
    assert quantized.image.size == (10, 12)


def test_palette_uses_requested_range(two_color_image):
    quantized = quantize_image(two_color_image, KMeansConfig(n_clusters=2), min=0, max=1)

    np.testing.assert_allclose(
        sorted(quantized.result.centroids.tolist()),
        [[0.0, 0.0, 1.0], [1.0, 0.0, 0.0]]
    )


def test_too_many_clusters_for_image():
    image = np.zeros((2, 2, 3), dtype=np.uint8)
    with pytest.raises(InvalidParameterError):
        quantize_image(image, KMeansConfig(n_clusters=5))


# ============================================================================
# Mean-Shift pipeline
# ============================================================================

def test_meanshift_finds_both_colors(two_color_image):
    quantized = quantize_image_meanshift(two_color_image, MeanShiftConfig(bandwidth=0.5))

    assert isinstance(quantized.result, MeanShiftResult)
    assert quantized.n_colors == 2
    np.testing.assert_array_equal(np.asarray(quantized.image), two_color_image)


# ============================================================================
# File I/O
# ============================================================================

def test_load_image_returns_rgb(two_color_png, two_color_image):
    image = load_image(two_color_png)

    assert image.dtype == np.uint8
    np.testing.assert_array_equal(image, two_color_image)


def test_save_creates_parent_directories(tmp_path, two_color_image):
    output = tmp_path / 'nested' / 'out.png'

    written = save_image(Image.fromarray(two_color_image), output)

    assert written == output
    np.testing.assert_array_equal(load_image(output), two_color_image)


def test_save_accepts_arrays(tmp_path, two_color_image):
    output = save_image(two_color_image, tmp_path / 'array.png')

    np.testing.assert_array_equal(load_image(output), two_color_image)


def test_load_missing_image(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_image(tmp_path / 'missing.png')


def test_load_undecodable_image(tmp_path):
    path = tmp_path / 'not_an_image.png'
    path.write_text('plain text')

    with pytest.raises(ValueError):
        load_image(path)
