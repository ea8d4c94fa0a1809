"""
Tests for the summed-volume table, gliding-box scans and mass statistics.

Masses from the table are checked against a brute-force window sum.
"""

import numpy as np
import pytest

from lacunastack import (
    EmptySampleError,
    InvalidBoxSizeError,
    MassStatistics,
    build_svt,
    gliding_box_masses,
    mass_statistics,
    numba_gliding_moments,
    window_count,
)


def brute_force_masses(array, size):
    """Sum every size³ window directly."""
    nx, ny, nz = array.shape
    masses = []
    for i in range(nx - size + 1):
        for j in range(ny - size + 1):
            for k in range(nz - size + 1):
                masses.append(array[i:i + size, j:j + size, k:k + size].sum())
    return np.array(masses, dtype=np.float64)


def random_volume(shape=(7, 5, 6), p=0.3, seed=42):
    rng = np.random.default_rng(seed)
    return (rng.random(shape) < p).astype(np.float64)


def test_svt_corners():
    array = random_volume()
    svt = build_svt(array)

    assert svt.shape == (8, 6, 7)
    assert np.all(svt[0] == 0) and np.all(svt[:, 0] == 0) and np.all(svt[:, :, 0] == 0)
    assert svt[-1, -1, -1] == array.sum()
    assert svt[3, 2, 4] == array[:3, :2, :4].sum()
    assert not svt.flags.writeable


@pytest.mark.parametrize("size", [1, 2, 3, 5])
def test_masses_match_brute_force(size):
    array = random_volume()
    svt = build_svt(array)

    masses = gliding_box_masses(svt, size)

    assert masses.shape == (window_count(array.shape, size),)
    np.testing.assert_array_equal(masses, brute_force_masses(array, size))


def test_masses_with_point_counts():
    rng = np.random.default_rng(7)
    array = rng.integers(0, 20, size=(5, 6, 4)).astype(np.float64)
    svt = build_svt(array)

    np.testing.assert_array_equal(gliding_box_masses(svt, 3), brute_force_masses(array, 3))


def test_size_one_scan_is_the_cells():
    array = random_volume()
    masses = gliding_box_masses(build_svt(array), 1)

    np.testing.assert_array_equal(masses, array.ravel())
    mean, var = mass_statistics(masses)
    assert mean == pytest.approx(array.mean())
    assert var == pytest.approx(array.var())


def test_full_size_window_is_total_mass():
    array = random_volume(shape=(4, 4, 4))
    masses = gliding_box_masses(build_svt(array), 4)
    np.testing.assert_array_equal(masses, [array.sum()])


def test_masses_reject_oversized_box():
    svt = build_svt(np.ones((4, 4, 4)))
    with pytest.raises(InvalidBoxSizeError):
        gliding_box_masses(svt, 5)


def test_fused_kernel_matches_sample_path():
    array = random_volume(shape=(9, 8, 7), p=0.4, seed=3)
    svt = build_svt(array)
    sizes = np.arange(1, 8, dtype=np.int64)

    mean_mass, variance, counts = numba_gliding_moments(svt, sizes)

    for idx, size in enumerate(sizes):
        masses = gliding_box_masses(svt, size)
        assert counts[idx] == masses.size
        assert mean_mass[idx] == pytest.approx(masses.mean(), rel=1e-12)
        assert variance[idx] == pytest.approx(masses.var(), rel=1e-9, abs=1e-12)


def test_fused_kernel_leaves_oversized_slots_empty():
    svt = build_svt(np.ones((3, 3, 3)))
    mean_mass, variance, counts = numba_gliding_moments(svt, np.array([1, 4], dtype=np.int64))

    np.testing.assert_array_equal(counts, [27, 0])
    assert mean_mass[0] == 1.0
    assert variance[0] == 0.0


def test_mass_statistics_matches_numpy():
    rng = np.random.default_rng(0)
    samples = rng.normal(1e6, 3.0, size=10_000)

    mean, var = mass_statistics(samples)

    assert mean == pytest.approx(samples.mean(), rel=1e-12)
    assert var == pytest.approx(samples.var(), rel=1e-6)


def test_mass_statistics_incremental_updates():
    stats = MassStatistics()
    for value in [1.0, 2.0]:
        stats.update(value)
    stats.update_many(np.array([3.0, 4.0]))

    assert stats.count == 4
    assert stats.mean == pytest.approx(2.5)
    assert stats.variance == pytest.approx(1.25)


def test_mass_statistics_constant_stream_has_zero_variance():
    mean, var = mass_statistics(np.full(1000, 27.0))
    assert mean == 27.0
    assert var == 0.0


def test_empty_samples_raise():
    with pytest.raises(EmptySampleError):
        mass_statistics(np.array([]))
    with pytest.raises(EmptySampleError):
        MassStatistics().mean
