# affine_matrix.py

import logging
from typing import Iterable, List, Optional, Union
import numpy as np
from numpy import abs as np_abs
from numpy import append as np_append
from numpy import array_equal as np_array_equal
from numpy import asarray as np_asarray
from numpy import diag as np_diag
from numpy import eye as np_eye
from numpy import float64 as np_float64
from numpy import ndarray
from numpy import shape as np_shape
from polyaffine.base_transform import Transform3
from polyaffine.geometry import look_at_matrix
from polyaffine.math import det4, inv4
from polyaffine.rotation import Rotation3
from polyaffine.utils import EPSILON, approx_eq, as_matrix, as_vector, check_look_at

logger = logging.getLogger(__name__)

# preallocate the identity matrix for performance
_EYE4 = np_eye(4, dtype=np_float64)


class AffineMatrix3(Transform3):
    """
    A 3D affine transformation stored as one 4x4 homogeneous matrix acting on
    column vectors (`mat @ [x, y, z, 1]`).

    The bottom row is expected to stay [0, 0, 0, 1]; it is not validated.

    Attributes:
        mat (ndarray): 4x4 transformation matrix.
    """
    __slots__ = ("mat",)

    def __init__(self, mat: Union[None, Iterable] = None):
        if mat is None:
            self.mat = _EYE4.copy()
        else:
            self.mat = as_matrix(mat, 4)

    @classmethod
    def identity(cls) -> "AffineMatrix3":
        """
        Create an identity AffineMatrix3.

        Returns:
            A new AffineMatrix3 whose `mat` is the identity matrix.
        """
        return cls(_EYE4.copy())

    @classmethod
    def look_at(cls, eye: Iterable, center: Iterable, up: Iterable) -> "AffineMatrix3":
        """
        Create a right-handed view matrix: `eye` maps to the origin and the
        direction towards `center` maps onto -z.

        Raises:
            ValueError: if `eye` equals `center` or `up` is parallel to the
                viewing direction.
        """
        eye = as_vector(eye, 3, name="eye")
        center = as_vector(center, 3, name="center")
        up = as_vector(up, 3, name="up")
        check_look_at(center - eye, up)
        return cls(look_at_matrix(eye, center, up))

    @classmethod
    def from_translation(cls, translation: Iterable) -> "AffineMatrix3":
        """
        Create an AffineMatrix3 from a translation vector.

        Args:
            translation: length-3 array to place in the last column.
        """
        mat = _EYE4.copy()
        mat[:3, 3] = as_vector(translation, 3, name="translation")
        return cls(mat)

    @classmethod
    def from_rotation(cls, rotation: Union[Rotation3, Iterable]) -> "AffineMatrix3":
        """
        Create an AffineMatrix3 from a rotation.

        Args:
            rotation: a `Rotation3` or a 3x3 matrix for the upper-left block.
        """
        if isinstance(rotation, Rotation3):
            rotation = rotation.to_matrix3()
        mat = _EYE4.copy()
        mat[:3, :3] = as_matrix(rotation, 3, name="rotation")
        return cls(mat)

    @classmethod
    def from_scale(cls, scale: Union[float, Iterable]) -> "AffineMatrix3":
        """
        Create an AffineMatrix3 from a scale.

        Args:
            scale: a scalar for uniform scale, or length-3 per-axis factors.
        """
        shape = np_shape(scale)
        if shape == ():
            s = float(scale)
            S = np_diag([s, s, s])
        elif shape == (3,):
            S = np_diag(np_asarray(scale, dtype=np_float64))
        else:
            raise ValueError(f"Invalid scale shape: {shape}")
        mat = _EYE4.copy()
        mat[:3, :3] = S
        return cls(mat)

    @classmethod
    def from_flat_array(cls, flat_array: Iterable) -> "AffineMatrix3":
        """
        Create an AffineMatrix3 from a flat array.

        Args:
            flat_array: 16 floats in row-major order.
        """
        shape = np_shape(flat_array)
        if shape != (16,):
            raise ValueError(f"Invalid flat array shape: {shape}")
        return cls(np_asarray(flat_array, dtype=np_float64).reshape((4, 4)))

    @classmethod
    def from_list(cls, list_array: List[float]) -> "AffineMatrix3":
        """Create an AffineMatrix3 from a list of 16 floats in row-major order."""
        if len(list_array) != 16:
            raise ValueError(f"Invalid list array length: {len(list_array)}")
        return cls(np.array(list_array, dtype=np_float64).reshape((4, 4)))

    ########
    # Transform methods
    #

    def transform_vector(self, vec: Iterable) -> ndarray:
        """
        Apply the transform to a direction: w = 0, so translation is ignored.
        """
        v = np_append(as_vector(vec, 3), 0.0)
        return (self.mat @ v)[:3]

    def transform_point(self, point: Iterable) -> ndarray:
        """
        Apply the transform to a point: w = 1, then divide back out of
        homogeneous coordinates.

        Raises:
            ZeroDivisionError: if the resulting w coordinate is zero, which
                only happens for a matrix that is not affine.
        """
        ph = self.mat @ np_append(as_vector(point, 3, name="point"), 1.0)
        w = ph[3]
        if w == 1.0:
            return ph[:3]
        # guard against w≈0
        if abs(w) < 1e-12:
            raise ZeroDivisionError("projective w coordinate is zero")
        return ph[:3] / w

    def concat(self, other: "AffineMatrix3") -> "AffineMatrix3":
        """
        Compose with `other`, applying `self` first. Points are column
        vectors, so the product is `other.mat @ self.mat`.
        """
        if not isinstance(other, AffineMatrix3):
            raise TypeError(
                f"Cannot concatenate {type(self).__name__} with {type(other).__name__}")
        return self.__class__(other.mat @ self.mat)

    def invert(self, *, epsilon: float = EPSILON) -> Optional["AffineMatrix3"]:
        """
        Invert the matrix analytically.

        Args:
            epsilon: relative tolerance. The matrix is treated as singular
                when its linear block is within `epsilon` of zero, or when its
                determinant is within `epsilon` of zero relative to the cube
                of that block's largest entry.

        Returns:
            The inverse, or None when the matrix is singular.
        """
        size = float(np_abs(self.mat[:3, :3]).max())
        if size <= epsilon or abs(det4(self.mat)) <= epsilon * size**3:
            logger.debug("AffineMatrix3 is singular and has no inverse")
            return None
        return self.__class__(inv4(self.mat))

    def _assign(self, other: "AffineMatrix3") -> None:
        self.mat = other.mat

    ########
    # Conversion
    #

    def to_matrix4(self) -> ndarray:
        return self.mat.copy()

    def to_list(self) -> List[float]:
        """
        Convert the matrix to a list of floats.

        Returns:
            A list of 16 floats in row-major order.
        """
        return self.mat.flatten().tolist()

    def to_flat_array(self) -> ndarray:
        """
        Convert the matrix to a flat array.

        Returns:
            A 1D array of 16 floats in row-major order.
        """
        return self.mat.flatten()

    def approx_eq(self, other: "AffineMatrix3", epsilon: float = EPSILON) -> bool:
        return isinstance(other, AffineMatrix3) and approx_eq(self.mat, other.mat, epsilon)

    #########
    # Dunder methods
    #

    def __eq__(self, other: "AffineMatrix3") -> bool:
        return type(self) == type(other) and np_array_equal(self.mat, other.mat)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(mat={self.mat.tolist()})"

    def __copy__(self) -> "AffineMatrix3":
        return self.__class__(self.mat.copy())

    def __reduce__(self):
        return (self.__class__, (self.mat.copy(),))
