import numbers

import numpy as np

from .errors import InvalidBoxSizeError, InvalidDimensionError

ALL_SIZES = 'all'


def resolve_box_sizes(box_sizes, shape):
    """
    Resolve a box-size request into the validated set of scales to scan.

    Parameters
    ----------
    box_sizes : str or iterable of int
        Either the token 'all' (every integer from 1 to the smallest axis)
        or an explicit list of cube edge lengths in voxels.
    shape : tuple of int
        (nx, ny, nz) of the volume that will be scanned.

    Returns
    -------
    np.ndarray
        Ascending, duplicate-free int64 array of box sizes.

    Raises
    ------
    InvalidBoxSizeError
        If any requested size is not an integer, is <= 0, or exceeds
        min(shape); also for an empty request or an unknown string token.

    Examples
    --------
    >>> resolve_box_sizes('all', (4, 5, 6))
    array([1, 2, 3, 4])
    >>> resolve_box_sizes([3, 1, 3], (4, 4, 4))
    array([1, 3])
    """
    if len(shape) != 3 or min(shape) <= 0:
        raise InvalidDimensionError(shape)
    limit = int(min(shape))

    if isinstance(box_sizes, str):
        if box_sizes.strip().lower() != ALL_SIZES:
            raise InvalidBoxSizeError(
                box_sizes, limit, f"Unknown box size option {box_sizes!r}, use 'all' or a list of integers"
            )
        return np.arange(1, limit + 1, dtype=np.int64)

    if isinstance(box_sizes, numbers.Number):
        box_sizes = [box_sizes]

    validated = set()
    for size in box_sizes:
        if isinstance(size, (bool, np.bool_)) or not isinstance(size, numbers.Real):
            raise InvalidBoxSizeError(size, limit)
        if not float(size).is_integer():
            raise InvalidBoxSizeError(size, limit)
        size_int = int(size)
        if size_int <= 0 or size_int > limit:
            raise InvalidBoxSizeError(size, limit)
        validated.add(size_int)

    if not validated:
        raise InvalidBoxSizeError(None, limit, "No box sizes requested")

    return np.array(sorted(validated), dtype=np.int64)


def get_sizes(num_sizes, min_size, max_size):
    """
    Generate a geometric sequence of unique integer box sizes.

    Sizes are spaced roughly evenly in log space between `min_size` and
    `max_size` (both inclusive). Rounding collisions are resolved by bumping
    the later size up by one, so fewer than `num_sizes` values may come back
    when the range is narrow.

    Examples
    --------
    >>> get_sizes(5, 1, 100)
    [1, 3, 10, 32, 100]
    >>> get_sizes(10, 2, 5)
    [2, 3, 4, 5]
    """
    if min_size < 1 or max_size < min_size:
        raise InvalidBoxSizeError(
            (min_size, max_size), None, f"Invalid size range [{min_size}, {max_size}]"
        )
    sizes = [int(s) for s in np.around(np.geomspace(min_size, max_size, num_sizes))]
    for index in range(1, len(sizes)):
        size = sizes[index]
        prev_size = sizes[index - 1]
        if size <= prev_size:
            sizes[index] = prev_size + 1
            if prev_size == max_size:
                return sizes[:index]
    return sizes
