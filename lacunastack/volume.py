import numpy as np

from .errors import InvalidDimensionError, InvalidOccupancyError


class BinaryVolume:
    """
    Immutable 3D occupancy grid.

    Cell values are non-negative numbers: a 0/1 indicator or a point count.
    A cell is occupied when its value is greater than zero. The wrapped array
    is a private read-only float64 copy, so the volume can be shared between
    worker threads without locking.

    Parameters
    ----------
    array : array-like
        3D array of shape (nx, ny, nz). Boolean arrays are stored as 0/1.

    Raises
    ------
    InvalidDimensionError
        If the array is not 3D or any axis has length zero.
    InvalidOccupancyError
        If any value is negative, NaN or infinite.

    Examples
    --------
    >>> vol = BinaryVolume(np.ones((4, 4, 4)))
    >>> vol.shape
    (4, 4, 4)
    >>> vol[0, 1, 2]
    1.0
    """

    def __init__(self, array):
        values = np.asarray(array)
        if values.ndim != 3 or 0 in values.shape:
            raise InvalidDimensionError(values.shape)

        values = np.array(values, dtype=np.float64, order='C', copy=True)
        if not np.all(np.isfinite(values)):
            raise InvalidOccupancyError("Volume contains NaN or infinite values")
        if np.any(values < 0):
            raise InvalidOccupancyError(
                f"Volume contains negative values (min={values.min():g})"
            )

        values.flags.writeable = False
        self._values = values

    @classmethod
    def from_flat(cls, values, dims, order='C'):
        """
        Build a volume from a flat ordered sequence of cell values.

        Parameters
        ----------
        values : sequence of float
            Cell values, nx * ny * nz of them.
        dims : tuple of int
            (nx, ny, nz).
        order : {'C', 'F'}, default 'C'
            'C' if the last index varies fastest, 'F' if the first does
            (column-major dumps such as armadillo cubes).
        """
        dims = tuple(int(d) for d in dims)
        if len(dims) != 3 or any(d <= 0 for d in dims):
            raise InvalidDimensionError(dims)
        flat = np.asarray(values).ravel()
        if flat.size != dims[0] * dims[1] * dims[2]:
            raise InvalidDimensionError(
                dims, f"Expected {dims[0] * dims[1] * dims[2]} values for dims {dims}, got {flat.size}"
            )
        return cls(flat.reshape(dims, order=order))

    def __getitem__(self, index):
        return self._values[index]

    def __repr__(self):
        return f"BinaryVolume(shape={self.shape}, occupancy={self.occupancy:.4f})"

    def __eq__(self, other):
        if not isinstance(other, BinaryVolume):
            return NotImplemented
        return self.shape == other.shape and np.array_equal(self._values, other._values)

    __hash__ = None

    @property
    def values(self):
        """Read-only view of the cell values."""
        return self._values

    @property
    def shape(self):
        return self._values.shape

    @property
    def nx(self):
        return self._values.shape[0]

    @property
    def ny(self):
        return self._values.shape[1]

    @property
    def nz(self):
        return self._values.shape[2]

    @property
    def size(self):
        return self._values.size

    @property
    def total_mass(self):
        return float(self._values.sum())

    @property
    def occupancy(self):
        """Fraction of occupied cells."""
        return float(np.count_nonzero(self._values)) / self._values.size

    @property
    def is_binary(self):
        return bool(np.all((self._values == 0) | (self._values == 1)))
