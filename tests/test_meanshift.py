import numpy as np
import pytest

from pixelcluster import InvalidParameterError
from pixelcluster.meanshift import MeanShiftClusterer, MeanShiftConfig


@pytest.fixture
def two_blobs():
    rng = np.random.default_rng(0)
    return np.vstack([
        rng.normal(loc=(0.0, 0.0), scale=0.1, size=(60, 2)),
        rng.normal(loc=(5.0, 5.0), scale=0.1, size=(60, 2)),
    ])


def test_finds_one_mode_per_blob(two_blobs):
    result = MeanShiftClusterer(MeanShiftConfig(bandwidth=1.0)).fit_predict(two_blobs)

    assert result.n_clusters == 2
    assert result.bandwidth == 1.0
    assert len(set(result.labels[:60])) == 1
    assert len(set(result.labels[60:])) == 1
    assert result.labels[0] != result.labels[60]

    modes = result.modes[np.argsort(result.modes[:, 0])]
    np.testing.assert_allclose(modes, [[0.0, 0.0], [5.0, 5.0]], atol=0.1)


def test_estimates_bandwidth_when_missing(two_blobs):
    result = MeanShiftClusterer(MeanShiftConfig(quantile=0.2)).fit_predict(two_blobs)

    assert result.bandwidth > 0
    assert result.n_clusters >= 1
    assert result.labels.shape == (120,)


def test_estimated_bandwidth_of_constant_data_is_rejected():
    clusterer = MeanShiftClusterer()

    with pytest.raises(InvalidParameterError):
        clusterer.fit_predict(np.ones((20, 3)))


@pytest.mark.parametrize("kwargs", [
    {'bandwidth': 0.0},
    {'bandwidth': -1.0},
    {'quantile': 0.0},
    {'quantile': 1.5},
    {'n_samples': 0},
    {'max_iter': 0},
])
def test_config_validation(kwargs):
    with pytest.raises(InvalidParameterError):
        MeanShiftConfig(**kwargs)


def test_result_requires_fit():
    with pytest.raises(RuntimeError):
        MeanShiftClusterer().result
