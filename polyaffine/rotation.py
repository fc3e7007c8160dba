# rotation.py

from abc import ABC, abstractmethod
from typing import Iterable, Union
import numpy as np
from numpy import array_equal as np_array_equal
from numpy import eye as np_eye
from numpy import float64 as np_float64
from numpy import ndarray
from polyaffine.geometry import (
    angle_to_rotation,
    axis_angle_to_quaternion,
    euler_to_quaternion,
    euler_to_rotation,
    look_at_rotation,
    quaternion_multiply,
    quaternion_rotate,
    quaternion_to_rotation,
    rotation_to_quaternion,
    signed_angle,
)
from polyaffine.utils import EPSILON, approx_eq, as_matrix, as_vector, check_look_at

# preallocate identities for performance
_EYE2 = np_eye(2, dtype=np_float64)
_EYE3 = np_eye(3, dtype=np_float64)
_QUAT_IDENTITY = np.array([0.0, 0.0, 0.0, 1.0], dtype=np_float64)
# local axis a 2D viewer looks along
_AHEAD2 = np.array([0.0, 1.0], dtype=np_float64)


class Rotation(ABC):
    """
    A proper rotation of 2D or 3D space.

    Every implementation composes in the same order as transforms do:
    `a.concat(b)` rotates by `a` first, then by `b`.
    """
    __slots__ = ()

    # number of spatial dimensions the rotation acts on
    dimension: int

    @classmethod
    @abstractmethod
    def identity(cls) -> "Rotation":
        """The rotation that leaves every vector unchanged."""

    @classmethod
    @abstractmethod
    def look_at(cls, direction: Iterable, up: Iterable) -> "Rotation":
        """
        Create the rotation that brings a viewer looking along `direction`,
        oriented by `up`, into its local frame.
        """

    @abstractmethod
    def rotate_vector(self, vec: Iterable) -> ndarray:
        """Rotate a free vector."""

    def rotate_point(self, point: Iterable) -> ndarray:
        """Rotate a point about the origin."""
        return self.rotate_vector(point)

    @abstractmethod
    def concat(self, other: "Rotation") -> "Rotation":
        """Rotation equivalent to applying `self`, then `other`."""

    @abstractmethod
    def invert(self) -> "Rotation":
        """The rotation that undoes this one."""

    @abstractmethod
    def to_matrix(self) -> ndarray:
        """Square rotation matrix acting on column vectors."""

    def approx_eq(self, other: "Rotation", epsilon: float = EPSILON) -> bool:
        """
        Compare two rotations by their matrices, so rotations of different
        representations (and quaternions q and -q) compare equal.
        """
        if not isinstance(other, Rotation) or other.dimension != self.dimension:
            return False
        return approx_eq(self.to_matrix(), other.to_matrix(), epsilon)

    def _check_concat(self, other: "Rotation") -> None:
        if type(other) is not type(self):
            raise TypeError(
                f"Cannot concatenate {type(self).__name__} with {type(other).__name__}")


class Rotation2(Rotation):
    """A rotation of the plane."""
    __slots__ = ()
    dimension = 2

    @abstractmethod
    def to_matrix2(self) -> ndarray:
        """2x2 rotation matrix."""

    def to_matrix(self) -> ndarray:
        return self.to_matrix2()


class Rotation3(Rotation):
    """A rotation of 3D space."""
    __slots__ = ()
    dimension = 3

    @abstractmethod
    def to_matrix3(self) -> ndarray:
        """3x3 rotation matrix."""

    def to_matrix(self) -> ndarray:
        return self.to_matrix3()

    def to_quaternion(self) -> "Quaternion":
        """Equivalent unit quaternion."""
        return Quaternion(rotation_to_quaternion(self.to_matrix3()))


class Basis2(Rotation2):
    """
    A 2D rotation stored as a 2x2 orthonormal matrix.

    Attributes:
        mat (ndarray): 2x2 rotation matrix.
    """
    __slots__ = ("mat",)

    def __init__(self, mat: Union[None, Iterable] = None):
        if mat is None:
            self.mat = _EYE2.copy()
        else:
            self.mat = as_matrix(mat, 2, name="rotation")

    @classmethod
    def identity(cls) -> "Basis2":
        return cls(_EYE2.copy())

    @classmethod
    def from_angle(cls, angle: float, degrees: bool = False) -> "Basis2":
        """
        Create a counter-clockwise rotation.

        Args:
            angle: rotation angle.
            degrees: if True, `angle` is in degrees, else radians.
        """
        if degrees:
            angle = np.radians(angle)
        return cls(angle_to_rotation(float(angle)))

    @classmethod
    def look_at(cls, direction: Iterable, up: Iterable) -> "Basis2":
        """
        Rotation mapping `direction` onto +y. A plane rotation has no roll
        left to fix, so `up` is only shape-checked.

        Raises:
            ValueError: if `direction` is zero.
        """
        direction = as_vector(direction, 2, name="direction")
        up = as_vector(up, 2, name="up")
        check_look_at(direction, up)
        return cls(angle_to_rotation(signed_angle(direction, _AHEAD2)))

    @property
    def angle(self) -> float:
        """Counter-clockwise angle of the rotation in radians."""
        return float(np.arctan2(self.mat[1, 0], self.mat[0, 0]))

    def rotate_vector(self, vec: Iterable) -> ndarray:
        return self.mat @ as_vector(vec, 2)

    def concat(self, other: "Basis2") -> "Basis2":
        self._check_concat(other)
        return self.__class__(other.mat @ self.mat)

    def invert(self) -> "Basis2":
        return self.__class__(self.mat.T.copy())

    def to_matrix2(self) -> ndarray:
        return self.mat.copy()

    def __eq__(self, other: "Basis2") -> bool:
        return type(self) == type(other) and np_array_equal(self.mat, other.mat)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(mat={self.mat.tolist()})"

    def __copy__(self) -> "Basis2":
        return self.__class__(self.mat.copy())

    def __reduce__(self):
        return (self.__class__, (self.mat.copy(),))


class Basis3(Rotation3):
    """
    A 3D rotation stored as a 3x3 orthonormal matrix.

    Attributes:
        mat (ndarray): 3x3 rotation matrix.
    """
    __slots__ = ("mat",)

    def __init__(self, mat: Union[None, Iterable] = None):
        if mat is None:
            self.mat = _EYE3.copy()
        else:
            self.mat = as_matrix(mat, 3, name="rotation")

    @classmethod
    def identity(cls) -> "Basis3":
        return cls(_EYE3.copy())

    @classmethod
    def from_axis_angle(cls, axis: Iterable, angle: float, degrees: bool = False) -> "Basis3":
        """
        Create a right-handed rotation about `axis`.

        Args:
            axis: length-3 rotation axis, need not be normalized.
            angle: rotation angle.
            degrees: if True, `angle` is in degrees, else radians.
        """
        if degrees:
            angle = np.radians(angle)
        q = axis_angle_to_quaternion(as_vector(axis, 3, name="axis"), float(angle))
        return cls(quaternion_to_rotation(q))

    @classmethod
    def from_euler_angles(cls, roll: float, pitch: float, yaw: float, degrees: bool = True) -> "Basis3":
        """
        Create a rotation from Euler angles, R = Rz(yaw) @ Ry(pitch) @ Rx(roll).
        """
        return cls(euler_to_rotation(float(roll), float(pitch), float(yaw), degrees))

    @classmethod
    def from_quaternion(cls, quaternion: Iterable, w_last: bool = True) -> "Basis3":
        """Create a rotation from a unit quaternion array."""
        q = as_vector(quaternion, 4, name="quaternion")
        return cls(quaternion_to_rotation(q, w_last))

    @classmethod
    def look_at(cls, direction: Iterable, up: Iterable) -> "Basis3":
        """
        Rotation mapping `direction` onto +z and the projection of `up`
        onto +y.

        Raises:
            ValueError: if `direction` is zero or parallel to `up`.
        """
        direction = as_vector(direction, 3, name="direction")
        up = as_vector(up, 3, name="up")
        check_look_at(direction, up)
        return cls(look_at_rotation(direction, up))

    def rotate_vector(self, vec: Iterable) -> ndarray:
        return self.mat @ as_vector(vec, 3)

    def concat(self, other: "Basis3") -> "Basis3":
        self._check_concat(other)
        return self.__class__(other.mat @ self.mat)

    def invert(self) -> "Basis3":
        return self.__class__(self.mat.T.copy())

    def to_matrix3(self) -> ndarray:
        return self.mat.copy()

    def __eq__(self, other: "Basis3") -> bool:
        return type(self) == type(other) and np_array_equal(self.mat, other.mat)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(mat={self.mat.tolist()})"

    def __copy__(self) -> "Basis3":
        return self.__class__(self.mat.copy())

    def __reduce__(self):
        return (self.__class__, (self.mat.copy(),))


class Quaternion(Rotation3):
    """
    A 3D rotation stored as a unit quaternion.

    Attributes:
        q (ndarray): components in [x, y, z, w] order.
    """
    __slots__ = ("q",)

    def __init__(self, q: Union[None, Iterable] = None, w_last: bool = True):
        if q is None:
            self.q = _QUAT_IDENTITY.copy()
            return
        q = as_vector(q, 4, name="quaternion")
        if not w_last:
            q = np.array([q[1], q[2], q[3], q[0]], dtype=np_float64)
        self.q = q

    @classmethod
    def identity(cls) -> "Quaternion":
        return cls(_QUAT_IDENTITY.copy())

    @classmethod
    def from_axis_angle(cls, axis: Iterable, angle: float, degrees: bool = False) -> "Quaternion":
        """
        Create a right-handed rotation about `axis`.

        Args:
            axis: length-3 rotation axis, need not be normalized.
            angle: rotation angle.
            degrees: if True, `angle` is in degrees, else radians.
        """
        if degrees:
            angle = np.radians(angle)
        return cls(axis_angle_to_quaternion(as_vector(axis, 3, name="axis"), float(angle)))

    @classmethod
    def from_euler_angles(cls, roll: float, pitch: float, yaw: float, degrees: bool = True) -> "Quaternion":
        """Same rotation as `Basis3.from_euler_angles`."""
        return cls(euler_to_quaternion(float(roll), float(pitch), float(yaw), degrees))

    @classmethod
    def from_matrix(cls, rotation: Iterable) -> "Quaternion":
        """Create a quaternion from a 3x3 rotation matrix."""
        return cls(rotation_to_quaternion(as_matrix(rotation, 3, name="rotation")))

    @classmethod
    def look_at(cls, direction: Iterable, up: Iterable) -> "Quaternion":
        """Quaternion form of `Basis3.look_at`."""
        direction = as_vector(direction, 3, name="direction")
        up = as_vector(up, 3, name="up")
        check_look_at(direction, up)
        return cls(rotation_to_quaternion(look_at_rotation(direction, up)))

    @property
    def w(self) -> float:
        return float(self.q[3])

    @property
    def vector(self) -> ndarray:
        """The imaginary part (x, y, z)."""
        return self.q[:3].copy()

    def as_array(self, w_last: bool = True) -> ndarray:
        """Components as [x, y, z, w], or [w, x, y, z] when `w_last` is False."""
        if w_last:
            return self.q.copy()
        return np.array([self.q[3], self.q[0], self.q[1], self.q[2]], dtype=np_float64)

    def rotate_vector(self, vec: Iterable) -> ndarray:
        return quaternion_rotate(self.q, as_vector(vec, 3))

    def concat(self, other: "Quaternion") -> "Quaternion":
        self._check_concat(other)
        return self.__class__(quaternion_multiply(other.q, self.q))

    def invert(self) -> "Quaternion":
        # conjugate over squared magnitude
        conj = self.q * np.array([-1.0, -1.0, -1.0, 1.0])
        return self.__class__(conj / np.dot(self.q, self.q))

    def to_matrix3(self) -> ndarray:
        return quaternion_to_rotation(self.q)

    def to_quaternion(self) -> "Quaternion":
        return self.__copy__()

    def __eq__(self, other: "Quaternion") -> bool:
        return type(self) == type(other) and np_array_equal(self.q, other.q)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(q={self.q.tolist()})"

    def __copy__(self) -> "Quaternion":
        return self.__class__(self.q.copy())

    def __reduce__(self):
        return (self.__class__, (self.q.copy(),))
