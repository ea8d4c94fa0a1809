import time

import numpy as np
import pandas as pd
from tqdm.auto import tqdm # type: ignore

from .box_sizes import ALL_SIZES, resolve_box_sizes
from .errors import EmptySampleError
from .gliding_box import build_svt, numba_gliding_moments
from .volume import BinaryVolume
from .volume_processing import pad_volume

EMBEDDING_DIMENSION = 3

RESULT_COLUMNS = [
    'box_size',
    'mean_mass',
    'variance_mass',
    'lacunarity',
    'normalized_lacunarity',
    'h_r',
]


def normalized_lacunarity(lac):
    """
    Rescale a lacunarity curve so it starts at 1 and decays toward 0.

    normΛ(r) = log Λ(r) / log Λ(r_min), where r_min is the first (smallest)
    box size. The first entry is 1 by definition. Entries with Λ(r) = 1 carry
    no heterogeneity and are 0. When Λ(r_min) = 1 but a larger scale is
    heterogeneous the ratio is undefined and NaN is returned for it; NaN
    lacunarity (an empty volume) propagates as NaN.

    Parameters
    ----------
    lac : array-like
        Raw lacunarity values ordered by ascending box size.

    Returns
    -------
    np.ndarray
        float64 array of the same length.

    Examples
    --------
    >>> normalized_lacunarity([4.0, 2.0, 1.0])
    array([1. , 0.5, 0. ])
    """
    lac = np.asarray(lac, dtype=np.float64)
    norm = np.full(lac.shape, np.nan, dtype=np.float64)
    if lac.size == 0 or not np.isfinite(lac[0]):
        return norm

    log_lac = np.log(lac)
    log_ref = log_lac[0]

    norm[0] = 1.0
    rest = log_lac[1:]
    homogeneous = rest == 0.0
    if log_ref > 0.0:
        with np.errstate(invalid='ignore'):
            norm[1:] = rest / log_ref
    norm[1:][homogeneous] = 0.0
    return norm


def hurst_exponent(box_sizes, norm_lac):
    """
    Hurst-like exponent H(r) of a normalized lacunarity curve.

    Uses the local log-log slope d(r) = d log normΛ / d log r (finite
    differences) and maps it onto [0, 1] as

        H(r) = 1 + d(r) / (2 * E)

    with E = 3 the embedding dimension. Uncorrelated (Brownian) structure
    has Λ(r) - 1 ∝ r^-E, so d = -E and H = 0.5. Slower decay gives H > 0.5
    (persistence), faster decay gives H < 0.5 (anti-persistence).

    This is one of several published readings of Feagin's transform; pass a
    different callable as `h_transform` to `lacunarity` to swap it without
    touching the raw or normalized curves.

    Parameters
    ----------
    box_sizes : array-like
        Ascending box sizes.
    norm_lac : array-like
        Normalized lacunarity at those sizes.

    Returns
    -------
    np.ndarray
        H(r), NaN where normΛ is not positive or where fewer than two sizes
        have positive normΛ.
    """
    sizes = np.asarray(box_sizes, dtype=np.float64)
    norm = np.asarray(norm_lac, dtype=np.float64)
    h_r = np.full(norm.shape, np.nan, dtype=np.float64)

    valid = np.isfinite(norm) & (norm > 0)
    if np.count_nonzero(valid) < 2:
        return h_r

    slope = np.gradient(np.log(norm[valid]), np.log(sizes[valid]))
    h_r[valid] = 1.0 + slope / (2.0 * EMBEDDING_DIMENSION)
    return h_r


def lacunarity(volume,
               box_sizes=ALL_SIZES,
               h_transform=hurst_exponent,
               pad_width=None,
               verbose=False):
    """
    Multi-scale gliding-box lacunarity of a 3D occupancy volume.

    For each box size r a cube of edge r glides over every fully-inside
    position with unit stride. With M the box mass, lacunarity is

        Λ(r) = var(M) / mean(M)^2 + 1

    (Allain & Cloitre, 1991), so Λ(r) >= 1 and for a 0/1 volume
    Λ(1) = 1 / occupancy. Box masses come from a summed-volume table built
    once and shared by every scale; sizes are scanned in parallel.

    Parameters
    ----------
    volume : BinaryVolume or array-like
        3D non-negative occupancy values (indicator or point counts).
    box_sizes : 'all' or iterable of int, default 'all'
        Scales to evaluate. 'all' means every integer from 1 to the smallest
        axis; explicit lists are deduplicated and sorted.
    h_transform : callable, default hurst_exponent
        f(box_sizes, normalized_lacunarity) -> H(r) array.
    pad_width : int or sequence, optional
        Empty cells added around the volume before scanning, see
        `pad_volume`. Box sizes are validated against the padded shape.
    verbose : bool, default False
        Print sizes and timings.

    Returns
    -------
    pd.DataFrame
        One row per box size in ascending order with columns box_size,
        mean_mass, variance_mass, lacunarity, normalized_lacunarity, h_r.
        An empty volume yields zero mass and NaN for the derived columns.

    Raises
    ------
    InvalidDimensionError
        If the volume is not 3D or has a zero-length axis.
    InvalidBoxSizeError
        If a requested size is <= 0 or exceeds the smallest axis.

    Examples
    --------
    >>> lacunarity(np.ones((4, 4, 4)))['normalized_lacunarity'].tolist()
    [1.0, 0.0, 0.0, 0.0]
    """
    if not isinstance(volume, BinaryVolume):
        volume = BinaryVolume(volume)
    if pad_width is not None:
        volume = pad_volume(volume, pad_width)

    sizes_arr = resolve_box_sizes(box_sizes, volume.shape)

    if verbose:
        print(f"Volume shape: {volume.shape}, occupancy: {volume.occupancy:.4f}")
        print(f"Evaluating {len(sizes_arr)} box sizes from {sizes_arr[0]} to {sizes_arr[-1]}")

    start_time = time.perf_counter()
    svt = build_svt(volume.values)
    end_time = time.perf_counter()
    if verbose:
        print(f"Time taken to build summed volume table: {end_time - start_time} seconds")

    start_time = time.perf_counter()
    mean_mass, variance, window_counts = numba_gliding_moments(svt, sizes_arr)
    end_time = time.perf_counter()
    if verbose:
        print(f"Time taken to scan gliding boxes: {end_time - start_time} seconds")

    if np.any(window_counts == 0):
        bad = int(sizes_arr[np.argmax(window_counts == 0)])
        raise EmptySampleError(f"No gliding-box positions for box size {bad}")

    with np.errstate(divide='ignore', invalid='ignore'):
        lac = np.where(mean_mass > 0, variance / (mean_mass * mean_mass) + 1.0, np.nan)

    if verbose and np.isnan(lac).all():
        print("Volume has no occupied cells; lacunarity is undefined")

    norm_lac = normalized_lacunarity(lac)
    h_r = np.asarray(h_transform(sizes_arr, norm_lac), dtype=np.float64)

    return pd.DataFrame({
        'box_size': sizes_arr.astype(np.int64),
        'mean_mass': mean_mass,
        'variance_mass': variance,
        'lacunarity': lac,
        'normalized_lacunarity': norm_lac,
        'h_r': h_r,
    }, columns=RESULT_COLUMNS)


def analyze_volumes(volumes,
                    box_sizes=ALL_SIZES,
                    h_transform=hurst_exponent,
                    pad_width=None,
                    verbose=False):
    """
    Lacunarity curves for a batch of named volumes.

    Parameters
    ----------
    volumes : mapping of str to BinaryVolume or array-like
        Volumes to analyse, keyed by a name that is carried into the output.
    box_sizes, h_transform, pad_width, verbose
        Forwarded to `lacunarity` for every volume.

    Returns
    -------
    pd.DataFrame
        Long table: a leading 'name' column followed by the `lacunarity`
        columns, volumes in input order and box sizes ascending within each.
    """
    frames = []
    for name, volume in tqdm(volumes.items(), desc='Computing lacunarity...'):
        curve = lacunarity(volume, box_sizes=box_sizes, h_transform=h_transform,
                           pad_width=pad_width, verbose=verbose)
        curve.insert(0, 'name', name)
        frames.append(curve)

        if verbose:
            print(f"{name}: Λ(r_min) = {curve['lacunarity'].iloc[0]:.4f}, "
                  f"{len(curve)} box sizes")

    if not frames:
        return pd.DataFrame(columns=['name'] + RESULT_COLUMNS)

    return pd.concat(frames, ignore_index=True)
