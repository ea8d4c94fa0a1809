"""
Tests for BinaryVolume construction and box-size resolution.
"""

import numpy as np
import pytest

from lacunastack import (
    BinaryVolume,
    InvalidBoxSizeError,
    InvalidDimensionError,
    InvalidOccupancyError,
    LacunarityError,
    get_sizes,
    resolve_box_sizes,
)


def test_volume_wraps_read_only_copy():
    array = np.zeros((2, 3, 4))
    array[1, 2, 3] = 5
    vol = BinaryVolume(array)

    assert vol.shape == (2, 3, 4)
    assert (vol.nx, vol.ny, vol.nz) == (2, 3, 4)
    assert vol[1, 2, 3] == 5.0

    array[1, 2, 3] = 0
    assert vol[1, 2, 3] == 5.0, "Volume must not alias the caller's array"

    with pytest.raises(ValueError):
        vol.values[0, 0, 0] = 1.0


def test_volume_properties():
    array = np.zeros((2, 2, 2), dtype=bool)
    array[0, 0, 0] = True
    array[1, 1, 1] = True
    vol = BinaryVolume(array)

    assert vol.occupancy == pytest.approx(0.25)
    assert vol.total_mass == 2.0
    assert vol.is_binary
    assert not BinaryVolume(array * 3).is_binary


def test_from_flat_orders():
    values = np.arange(24)
    c_vol = BinaryVolume.from_flat(values, (2, 3, 4))
    f_vol = BinaryVolume.from_flat(values, (2, 3, 4), order='F')

    assert c_vol[0, 0, 1] == 1.0
    assert f_vol[1, 0, 0] == 1.0
    assert c_vol == BinaryVolume(values.reshape(2, 3, 4))


def test_from_flat_length_mismatch():
    with pytest.raises(InvalidDimensionError):
        BinaryVolume.from_flat(np.ones(7), (2, 2, 2))


@pytest.mark.parametrize("shape", [(0, 4, 4), (4, 0, 4), (4, 4, 0)])
def test_zero_length_axis_rejected(shape):
    with pytest.raises(InvalidDimensionError) as excinfo:
        BinaryVolume(np.zeros(shape))
    assert excinfo.value.shape == shape


def test_non_3d_rejected():
    with pytest.raises(InvalidDimensionError):
        BinaryVolume(np.ones((4, 4)))


def test_negative_and_nan_values_rejected():
    array = np.ones((2, 2, 2))
    array[0, 1, 0] = -1
    with pytest.raises(InvalidOccupancyError):
        BinaryVolume(array)

    array[0, 1, 0] = np.nan
    with pytest.raises(InvalidOccupancyError):
        BinaryVolume(array)


def test_errors_are_value_errors():
    assert issubclass(InvalidBoxSizeError, LacunarityError)
    assert issubclass(LacunarityError, ValueError)


def test_resolve_all():
    np.testing.assert_array_equal(resolve_box_sizes('all', (4, 5, 6)), [1, 2, 3, 4])
    np.testing.assert_array_equal(resolve_box_sizes('ALL', (3, 3, 3)), [1, 2, 3])


def test_resolve_explicit_sorted_and_deduplicated():
    sizes = resolve_box_sizes([4, 2, 2, 1.0, np.int32(3)], (4, 4, 4))
    np.testing.assert_array_equal(sizes, [1, 2, 3, 4])
    assert sizes.dtype == np.int64


def test_resolve_single_integer():
    np.testing.assert_array_equal(resolve_box_sizes(2, (4, 4, 4)), [2])


@pytest.mark.parametrize("bad", [0, -1, 5, 2.5])
def test_resolve_rejects_invalid_size(bad):
    with pytest.raises(InvalidBoxSizeError) as excinfo:
        resolve_box_sizes([1, bad], (4, 4, 4))
    assert excinfo.value.box_size == bad
    assert excinfo.value.limit == 4


def test_resolve_rejects_empty_and_unknown_token():
    with pytest.raises(InvalidBoxSizeError):
        resolve_box_sizes([], (4, 4, 4))
    with pytest.raises(InvalidBoxSizeError):
        resolve_box_sizes('some', (4, 4, 4))


def test_get_sizes_geometric():
    assert get_sizes(5, 1, 100) == [1, 3, 10, 32, 100]
    assert get_sizes(10, 2, 5) == [2, 3, 4, 5]
