class LacunarityError(ValueError):
    """Base class for invalid input to the lacunarity pipeline."""


class InvalidDimensionError(LacunarityError):
    """
    Raised when a volume is not three dimensional or has a zero-length axis.

    Attributes
    ----------
    shape : tuple
        Shape of the offending array.
    """

    def __init__(self, shape, message=None):
        self.shape = tuple(int(s) for s in shape)
        if message is None:
            message = f"Volume must be 3D with non-zero axes, got shape {self.shape}"
        super().__init__(message)


class InvalidBoxSizeError(LacunarityError):
    """
    Raised when a requested box size cannot be scanned on the volume.

    Attributes
    ----------
    box_size : object
        The offending value as requested (None when the request was empty).
    limit : int or None
        Largest valid box size, i.e. the smallest volume axis.
    """

    def __init__(self, box_size, limit=None, message=None):
        self.box_size = box_size
        self.limit = limit
        if message is None:
            message = f"Invalid box size {box_size!r}: must be an integer in [1, {limit}]"
        super().__init__(message)


class InvalidOccupancyError(LacunarityError):
    """Raised when a volume holds negative or non-finite cell values."""


class EmptySampleError(LacunarityError):
    """Raised when statistics are requested from zero mass samples."""
