"""
Test Suite for Sample Transforms.

Channel layout, channel selection and per-channel normalization,
including the zero-variance (degenerate channel) cases.
"""

# Third-Party Imports
import numpy as np
import pytest

# Internal Imports
from gliacnn.core import DataLoadError
from gliacnn.data_handler import normalize_channels, select_channels, to_channels_first


# LAYOUT
@pytest.mark.unit
def test_grayscale_gets_channel_axis():
    assert to_channels_first(np.zeros((8, 8))).shape == (1, 8, 8)


@pytest.mark.unit
def test_channels_last_is_transposed():
    arr = np.zeros((8, 8, 3))
    assert to_channels_first(arr, in_channels=3).shape == (3, 8, 8)
    assert to_channels_first(arr).shape == (3, 8, 8)


@pytest.mark.unit
def test_channels_first_is_kept():
    arr = np.zeros((3, 8, 8))
    assert to_channels_first(arr, in_channels=3).shape == (3, 8, 8)


@pytest.mark.unit
def test_four_dimensional_input_rejected():
    with pytest.raises(DataLoadError):
        to_channels_first(np.zeros((1, 3, 8, 8)))


# SELECTION
@pytest.mark.unit
def test_select_channels_in_order():
    image = np.stack([np.full((4, 4), i, dtype=float) for i in range(4)])
    selected = select_channels(image, [3, 1])

    assert selected.shape == (2, 4, 4)
    assert selected[0, 0, 0] == 3
    assert selected[1, 0, 0] == 1


@pytest.mark.unit
def test_select_out_of_range_channel():
    with pytest.raises(DataLoadError, match="out of range"):
        select_channels(np.zeros((2, 4, 4)), [0, 5])


# NORMALIZATION
@pytest.mark.unit
def test_normalized_channels_have_zero_mean_unit_std():
    rng = np.random.default_rng(0)
    image = rng.integers(0, 4096, size=(3, 16, 16)).astype(np.uint16)

    out = normalize_channels(image)

    assert out.dtype == np.float32
    np.testing.assert_allclose(out.mean(axis=(1, 2)), 0.0, atol=1e-5)
    np.testing.assert_allclose(out.std(axis=(1, 2)), 1.0, atol=1e-4)


@pytest.mark.unit
@pytest.mark.parametrize("fill", [0.0, 7.0, -3.0])
def test_constant_channel_normalizes_to_finite_zeros(fill):
    """Zero range or zero variance never produces NaN or infinity."""
    image = np.full((2, 8, 8), fill)
    image[1] = np.arange(64).reshape(8, 8)

    out = normalize_channels(image, epsilon=1e-8)

    assert np.all(np.isfinite(out))
    np.testing.assert_array_equal(out[0], 0.0)
    assert out[1].std() == pytest.approx(1.0, abs=1e-4)


@pytest.mark.unit
def test_normalization_does_not_mutate_input():
    image = np.arange(16, dtype=float).reshape(1, 4, 4)
    original = image.copy()
    normalize_channels(image)
    np.testing.assert_array_equal(image, original)
