import numpy as np
from numba import njit, prange

from .errors import InvalidBoxSizeError
from .statistics import welford_update


# ──────────────────────────────────────────────────────────────────────────────
# Summed‑volume table (SVT) with a one‑voxel zero border
# ──────────────────────────────────────────────────────────────────────────────
def build_svt(values: np.ndarray) -> np.ndarray:
    """
    Summed‑volume table with a 1‑voxel zero border on each low face.

    Entry [i, j, k] holds the total of values[:i, :j, :k], so the mass of any
    r×r×r window is available from eight corner lookups. The table is built
    once per volume in O(nx·ny·nz) and returned read-only so it can be shared
    by every box-size scan.

    Parameters
    ----------
    values : np.ndarray
        (nx, ny, nz) non-negative cell values.

    Returns
    -------
    np.ndarray
        (nx+1, ny+1, nz+1) float64 table.
    """
    nx, ny, nz = values.shape
    svt = np.zeros((nx + 1, ny + 1, nz + 1), dtype=np.float64)
    svt[1:, 1:, 1:] = values

    # Three in‑place cumulative passes → C‑speed
    svt.cumsum(axis=0, out=svt)
    svt.cumsum(axis=1, out=svt)
    svt.cumsum(axis=2, out=svt)
    svt.flags.writeable = False
    return svt


@njit(nogil=True, cache=True)
def _mass_from_svt(svt, i, j, k, size):
    """
    Mass of the size³ window anchored at (i, j, k) via inclusion–exclusion.
    """
    i1 = i + size
    j1 = j + size
    k1 = k + size
    return (
        svt[i1, j1, k1]
        - svt[i, j1, k1]
        - svt[i1, j, k1]
        - svt[i1, j1, k]
        + svt[i, j, k1]
        + svt[i, j1, k]
        + svt[i1, j, k]
        - svt[i, j, k]
    )


def window_count(shape, size):
    """Number of fully-inside gliding positions for a cube of edge `size`."""
    nx, ny, nz = shape
    return (nx - size + 1) * (ny - size + 1) * (nz - size + 1)


def gliding_box_masses(svt, size):
    """
    Masses of every fully-inside size³ window, unit stride, no wraparound.

    Parameters
    ----------
    svt : np.ndarray
        Summed-volume table from `build_svt`.
    size : int
        Cube edge length in voxels.

    Returns
    -------
    np.ndarray
        Flat float64 array of (nx-r+1)(ny-r+1)(nz-r+1) window masses, in
        C order of the anchor (i, j, k).
    """
    Xm, Ym, Zm = svt.shape[0] - 1, svt.shape[1] - 1, svt.shape[2] - 1   # volume extents
    s = int(size)
    if s <= 0 or s > min(Xm, Ym, Zm):
        raise InvalidBoxSizeError(size, min(Xm, Ym, Zm))

    # Eight SVT corner sub‑arrays (all the same shape)
    c111 = svt[s:Xm + 1,     s:Ym + 1,     s:Zm + 1]
    c011 = svt[0:Xm + 1 - s, s:Ym + 1,     s:Zm + 1]
    c101 = svt[s:Xm + 1,     0:Ym + 1 - s, s:Zm + 1]
    c110 = svt[s:Xm + 1,     s:Ym + 1,     0:Zm + 1 - s]
    c001 = svt[0:Xm + 1 - s, 0:Ym + 1 - s, s:Zm + 1]
    c010 = svt[0:Xm + 1 - s, s:Ym + 1,     0:Zm + 1 - s]
    c100 = svt[s:Xm + 1,     0:Ym + 1 - s, 0:Zm + 1 - s]
    c000 = svt[0:Xm + 1 - s, 0:Ym + 1 - s, 0:Zm + 1 - s]

    # Inclusion–exclusion on a scratch buffer
    buf = np.array(c111, dtype=np.float64)
    buf -= c011
    buf -= c101
    buf -= c110
    buf += c001
    buf += c010
    buf += c100
    buf -= c000
    return buf.ravel()


@njit(nogil=True, parallel=True, cache=True)
def numba_gliding_moments(svt, sizes):
    """
    Mean and population variance of gliding-box masses for every box size.

    Each size is scanned independently against the shared read-only table
    and writes into its own slot of the output arrays, so results line up
    with `sizes` regardless of which thread finishes first.

    Parameters
    ----------
    svt : np.ndarray
        (nx+1, ny+1, nz+1) summed-volume table from `build_svt`.
    sizes : np.ndarray
        1D int64 array of validated box sizes.

    Returns
    -------
    tuple of np.ndarray
        (mean_mass, variance, window_counts), each of length len(sizes).
        Sizes that do not fit inside the volume leave a zero window count.
    """
    Xm, Ym, Zm = svt.shape[0] - 1, svt.shape[1] - 1, svt.shape[2] - 1
    n_sizes = sizes.shape[0]
    mean_mass = np.zeros(n_sizes, dtype=np.float64)
    variance = np.zeros(n_sizes, dtype=np.float64)
    window_counts = np.zeros(n_sizes, dtype=np.int64)

    for idx in prange(n_sizes):                  # ← parallel over box sizes
        s = sizes[idx]
        if s <= 0 or s > Xm or s > Ym or s > Zm:
            continue

        count = 0
        mean = 0.0
        m2 = 0.0
        for i in range(Xm - s + 1):
            for j in range(Ym - s + 1):
                for k in range(Zm - s + 1):
                    mass = _mass_from_svt(svt, i, j, k, s)
                    count, mean, m2 = welford_update(count, mean, m2, mass)

        window_counts[idx] = count
        mean_mass[idx] = mean
        var_val = m2 / count
        if var_val < 0.0:
            var_val = 0.0
        variance[idx] = var_val

    return mean_mass, variance, window_counts
