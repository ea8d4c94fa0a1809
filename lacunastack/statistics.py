import numpy as np
from numba import njit

from .errors import EmptySampleError


@njit(nogil=True, cache=True)
def welford_update(count, mean, m2, value):
    """
    One step of Welford's running mean/variance update.

    Returns the new (count, mean, m2) where m2 is the running sum of squared
    deviations from the mean. Population variance is m2 / count.
    """
    count += 1
    delta = value - mean
    mean += delta / count
    m2 += delta * (value - mean)
    return count, mean, m2


@njit(nogil=True, cache=True)
def _welford_accumulate(values, count, mean, m2):
    for idx in range(values.shape[0]):
        count, mean, m2 = welford_update(count, mean, m2, values[idx])
    return count, mean, m2


class MassStatistics:
    """
    Single-pass mean and population variance of a stream of box masses.

    Uses Welford's update instead of accumulating a sum of squares, which
    loses precision to cancellation when there are many large masses.

    Examples
    --------
    >>> stats = MassStatistics()
    >>> stats.update_many(np.array([1.0, 2.0, 3.0, 4.0]))
    >>> stats.mean, stats.variance
    (2.5, 1.25)
    """

    def __init__(self):
        self.count = 0
        self._mean = 0.0
        self._m2 = 0.0

    def update(self, value):
        self.count, self._mean, self._m2 = welford_update(
            self.count, self._mean, self._m2, float(value)
        )

    def update_many(self, values):
        values = np.ascontiguousarray(values, dtype=np.float64).ravel()
        if values.size == 0:
            return
        self.count, self._mean, self._m2 = _welford_accumulate(
            values, self.count, self._mean, self._m2
        )

    def _check_samples(self):
        if self.count == 0:
            raise EmptySampleError("No mass samples were accumulated")

    @property
    def mean(self):
        self._check_samples()
        return float(self._mean)

    @property
    def variance(self):
        self._check_samples()
        return max(float(self._m2) / self.count, 0.0)


def mass_statistics(samples):
    """
    Mean and population variance of `samples` in one pass.

    Parameters
    ----------
    samples : array-like
        Box mass values. Order does not matter.

    Returns
    -------
    tuple of float
        (mean, variance)

    Raises
    ------
    EmptySampleError
        If `samples` is empty.
    """
    stats = MassStatistics()
    stats.update_many(samples)
    return stats.mean, stats.variance
