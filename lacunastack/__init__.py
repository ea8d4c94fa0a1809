from .volume import BinaryVolume
from .box_sizes import (
    ALL_SIZES,
    resolve_box_sizes,
    get_sizes,
)
from .gliding_box import (
    build_svt,
    gliding_box_masses,
    numba_gliding_moments,
    window_count,
)
from .statistics import (
    MassStatistics,
    mass_statistics,
)
from .volume_processing import (
    pad_volume,
    pad_volume_for_lacunarity,
    get_bounding_box_3d,
    crop_to_bounding_box,
    volume_from_voxels,
)
from .errors import (
    LacunarityError,
    InvalidDimensionError,
    InvalidBoxSizeError,
    InvalidOccupancyError,
    EmptySampleError,
)

from .core import (
    lacunarity,
    normalized_lacunarity,
    hurst_exponent,
    analyze_volumes,
)

__version__ = '0.1.0'
__author__ = 'DillyDilly'

__all__ = [
    # Core functionality
    'lacunarity',
    'normalized_lacunarity',
    'hurst_exponent',
    'analyze_volumes',
    'BinaryVolume',
    'ALL_SIZES',
    'resolve_box_sizes',
    'get_sizes',

    # Gliding box kernels
    'build_svt',
    'gliding_box_masses',
    'numba_gliding_moments',
    'window_count',
    'MassStatistics',
    'mass_statistics',

    # Volume processing
    'pad_volume',
    'pad_volume_for_lacunarity',
    'get_bounding_box_3d',
    'crop_to_bounding_box',
    'volume_from_voxels',

    # Errors
    'LacunarityError',
    'InvalidDimensionError',
    'InvalidBoxSizeError',
    'InvalidOccupancyError',
    'EmptySampleError',
]
