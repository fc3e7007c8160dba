# utils.py

import numpy as np
from numpy import asarray as np_asarray
from numpy import float64 as np_float64
from numpy import ndarray
from typing import Union, Iterable, Optional

# default tolerance for approximate comparisons
EPSILON = 1e-5


def approx_eq(a: Union[float, Iterable], b: Union[float, Iterable], epsilon: float = EPSILON) -> bool:
    """
    Compare two scalars or arrays element-wise within an absolute tolerance.

    Args:
        a: scalar or array-like.
        b: scalar or array-like, broadcastable against `a`.
        epsilon: absolute tolerance.

    Returns:
        True if every element of `a` is within `epsilon` of `b`.
    """
    return bool(np.all(np.abs(np_asarray(a, dtype=np_float64) - np_asarray(b, dtype=np_float64)) <= epsilon))


def is_approx_zero(value: Union[float, Iterable], epsilon: float = EPSILON) -> bool:
    """True if `value` (scalar or array) is within `epsilon` of zero."""
    return bool(np.all(np.abs(np_asarray(value, dtype=np_float64)) <= epsilon))


def as_vector(value: Iterable, size: Optional[int] = None, name: str = "vector") -> ndarray:
    """
    Convert `value` to a 1D float64 array, checking its length.

    Args:
        value: array-like of numbers.
        size: required length; 2 or 3 when None.
        name: label used in the error message.

    Returns:
        A float64 array.

    Raises:
        ValueError: if the shape does not match.
    """
    arr = np_asarray(value, dtype=np_float64)
    if size is None:
        if arr.shape not in ((2,), (3,)):
            raise ValueError(f"{name} must be a 2D or 3D vector, got shape {arr.shape}")
    elif arr.shape != (size,):
        raise ValueError(f"{name} must have shape ({size},), got {arr.shape}")
    return arr


def as_matrix(value: Iterable, size: int, name: str = "matrix") -> ndarray:
    """Convert `value` to a float64 `size` x `size` array, checking its shape."""
    arr = np_asarray(value, dtype=np_float64)
    if arr.shape != (size, size):
        raise ValueError(f"{name} must be {size}x{size}, got {arr.shape}")
    return arr


def check_look_at(direction: ndarray, up: ndarray, epsilon: float = EPSILON) -> None:
    """
    Reject look-at inputs that leave the viewer frame undefined: a zero
    viewing direction, or (in 3D) an `up` parallel to it.

    Raises:
        ValueError: naming the degenerate input.
    """
    d_norm = float(np.linalg.norm(direction))
    if d_norm <= epsilon:
        raise ValueError(f"look-at direction is zero: {direction.tolist()}")
    if direction.shape == (3,):
        u_norm = float(np.linalg.norm(up))
        if u_norm <= epsilon:
            raise ValueError(f"look-at up vector is zero: {up.tolist()}")
        if np.linalg.norm(np.cross(direction, up)) <= epsilon * d_norm * u_norm:
            raise ValueError(
                f"look-at up vector {up.tolist()} is parallel to direction {direction.tolist()}")
