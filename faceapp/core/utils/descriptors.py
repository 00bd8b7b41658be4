"""
Face descriptor utility functions.
"""
from typing import Optional, Sequence, Union

import numpy as np

from faceapp.core.exceptions import InvalidDescriptorError

DescriptorLike = Union[np.ndarray, Sequence[float]]


def as_descriptor(values: DescriptorLike, length: Optional[int] = None) -> np.ndarray:
    """Convert raw values to a read-only float64 descriptor vector.

    Args:
        values: Descriptor values (list, tuple or numpy array)
        length: Expected number of dimensions, unchecked when None

    Returns:
        numpy.ndarray: One-dimensional, non-writeable descriptor

    Raises:
        InvalidDescriptorError: If the values are not a finite vector of the expected length
    """
    try:
        vector = np.array(values, dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise InvalidDescriptorError(f"Descriptor is not numeric: {str(e)}")

    if vector.ndim != 1 or vector.size == 0:
        raise InvalidDescriptorError(
            "Descriptor must be a non-empty one-dimensional vector",
            details={"shape": list(vector.shape)}
        )
    if length is not None and vector.size != length:
        raise InvalidDescriptorError(
            f"Descriptor must have {length} dimensions, got {vector.size}",
            details={"expected": length, "actual": int(vector.size)}
        )
    if not np.all(np.isfinite(vector)):
        raise InvalidDescriptorError("Descriptor contains NaN or infinite values")

    vector.setflags(write=False)
    return vector


def euclidean_distance(a: np.ndarray, b: np.ndarray) -> float:
    """Euclidean (L2) distance between two descriptors of equal length."""
    return float(np.linalg.norm(a - b))
