import numpy as np
import pandas as pd
from numba import njit

from .errors import InvalidDimensionError, InvalidOccupancyError
from .volume import BinaryVolume


def _as_values(volume):
    if isinstance(volume, BinaryVolume):
        return volume.values
    return BinaryVolume(volume).values


def _normalize_pad_width(pad_width):
    """Turn an int, 3 ints, or 3 (before, after) pairs into 3 (before, after) pairs."""
    if np.isscalar(pad_width):
        pairs = [(pad_width, pad_width)] * 3
    else:
        pad_width = list(pad_width)
        if len(pad_width) != 3:
            raise ValueError(f"pad_width needs one entry per axis, got {pad_width!r}")
        pairs = []
        for entry in pad_width:
            if np.isscalar(entry):
                pairs.append((entry, entry))
            else:
                before, after = entry
                pairs.append((before, after))

    normalized = []
    for before, after in pairs:
        if int(before) != before or int(after) != after or before < 0 or after < 0:
            raise ValueError(f"Padding amounts must be non-negative integers, got {pad_width!r}")
        normalized.append((int(before), int(after)))
    return tuple(normalized)


def pad_volume(volume, pad_width):
    """
    Extend a volume with empty (zero) cells along each axis.

    Parameters
    ----------
    volume : BinaryVolume or array-like
        Volume to pad.
    pad_width : int, or sequence of 3 ints, or sequence of 3 (before, after) pairs
        Number of empty cells added to each axis. A single int pads every
        side by that amount; three ints pad both sides of each axis.

    Returns
    -------
    BinaryVolume
        New volume; the input is left untouched.

    Examples
    --------
    >>> pad_volume(np.ones((2, 2, 2)), (1, 0, (0, 2))).shape
    (4, 2, 4)
    """
    values = _as_values(volume)
    pairs = _normalize_pad_width(pad_width)
    return BinaryVolume(np.pad(values, pairs, mode='constant', constant_values=0))


def pad_volume_for_lacunarity(volume, max_size, pad_factor=1, manual_pad=0):
    """
    Pad a volume symmetrically so each axis is a multiple of `max_size`.

    The new length of each axis is ceil(n / max_size) * max_size * pad_factor
    + manual_pad, split as evenly as possible between both sides. Padding
    cells are empty so no artificial structure is introduced.

    Parameters
    ----------
    volume : BinaryVolume or array-like
        Volume to pad.
    max_size : int
        Largest box size that will be scanned.
    pad_factor : float, default 1
        Multiplier on the rounded-up axis length; values > 1 add more room.
    manual_pad : int, default 0
        Extra cells added to every axis after scaling.

    Returns
    -------
    BinaryVolume
    """
    if max_size <= 0:
        raise ValueError(f"max_size must be positive, got {max_size}")
    values = _as_values(volume)

    pairs = []
    for n in values.shape:
        new_n = int(np.ceil(n / max_size) * max_size * pad_factor + manual_pad)
        extra = max(new_n - n, 0)
        before = extra // 2
        pairs.append((before, extra - before))

    return pad_volume(values, pairs)


@njit(nogil=True, cache=True)
def get_bounding_box_3d(array):
    """
    Compute the tight bounding box of all non-zero voxels in a 3D array.

    Parameters
    ----------
    array : np.ndarray
        3D array to analyze

    Returns
    -------
    tuple
        (min_x, min_y, min_z, max_x, max_y, max_z) with exclusive upper
        bounds, or all zeros when no voxel is occupied.
    """
    D, H, W = array.shape

    x_has_data = np.zeros(D, dtype=np.bool_)
    y_has_data = np.zeros(H, dtype=np.bool_)
    z_has_data = np.zeros(W, dtype=np.bool_)

    for i in range(D):
        for j in range(H):
            for k in range(W):
                if array[i, j, k] > 0:
                    x_has_data[i] = True
                    y_has_data[j] = True
                    z_has_data[k] = True

    min_x, max_x = D, -1
    min_y, max_y = H, -1
    min_z, max_z = W, -1

    for i in range(D):
        if x_has_data[i]:
            if min_x == D:
                min_x = i
            max_x = i

    for j in range(H):
        if y_has_data[j]:
            if min_y == H:
                min_y = j
            max_y = j

    for k in range(W):
        if z_has_data[k]:
            if min_z == W:
                min_z = k
            max_z = k

    if min_x == D:  # No non-zero voxels found
        return 0, 0, 0, 0, 0, 0

    return min_x, min_y, min_z, max_x + 1, max_y + 1, max_z + 1


def crop_to_bounding_box(volume):
    """
    Crop a volume to the bounding box of its occupied cells.

    Raises
    ------
    InvalidDimensionError
        If the volume has no occupied cell, since the crop would be empty.
    """
    values = _as_values(volume)
    min_x, min_y, min_z, max_x, max_y, max_z = get_bounding_box_3d(values)
    if max_x == 0:
        raise InvalidDimensionError((0, 0, 0), "Volume has no occupied cells to crop to")
    return BinaryVolume(values[min_x:max_x, min_y:max_y, min_z:max_z])


def volume_from_voxels(voxels, threshold=0, shape=None, columns=('x', 'y', 'z', 'count'), binary=True):
    """
    Convert a voxel table into a BinaryVolume.

    Parameters
    ----------
    voxels : pd.DataFrame
        One row per non-empty voxel, with integer grid indices and a point
        count. Voxels absent from the table are empty.
    threshold : float, default 0
        A voxel is occupied when its count is strictly greater than this.
    shape : tuple of int, optional
        (nx, ny, nz) of the output grid. Defaults to the smallest grid that
        holds every listed voxel, i.e. max index + 1 per axis.
    columns : tuple of str, default ('x', 'y', 'z', 'count')
        Names of the three index columns and the count column.
    binary : bool, default True
        Store occupied voxels as 1. When False the count itself is stored.

    Returns
    -------
    BinaryVolume

    Examples
    --------
    >>> voxels = pd.DataFrame({'x': [0, 1], 'y': [0, 2], 'z': [0, 0], 'count': [5, 1]})
    >>> volume_from_voxels(voxels, threshold=2).values.sum()
    1.0
    """
    x_col, y_col, z_col, count_col = columns
    missing = [c for c in columns if c not in voxels.columns]
    if missing:
        raise KeyError(f"Voxel table is missing columns {missing}")

    idx = voxels[[x_col, y_col, z_col]].to_numpy()
    if idx.size and (not np.all(np.mod(idx, 1) == 0) or np.any(idx < 0)):
        raise InvalidOccupancyError("Voxel indices must be non-negative integers")
    idx = idx.astype(np.int64)
    counts = voxels[count_col].to_numpy(dtype=np.float64)

    if shape is None:
        if idx.shape[0] == 0:
            raise InvalidDimensionError((0, 0, 0), "Empty voxel table and no shape given")
        shape = tuple(int(n) for n in idx.max(axis=0) + 1)
    shape = tuple(int(n) for n in shape)
    if len(shape) != 3 or min(shape) <= 0:
        raise InvalidDimensionError(shape)
    if idx.shape[0] and np.any(idx >= np.array(shape)):
        raise InvalidDimensionError(shape, f"Voxel indices exceed grid shape {shape}")

    grid = np.zeros(shape, dtype=np.float64)
    occupied = counts > threshold
    if binary:
        grid[idx[occupied, 0], idx[occupied, 1], idx[occupied, 2]] = 1.0
    else:
        # duplicate rows for one voxel accumulate
        np.add.at(grid, (idx[occupied, 0], idx[occupied, 1], idx[occupied, 2]), counts[occupied])
    return BinaryVolume(grid)
