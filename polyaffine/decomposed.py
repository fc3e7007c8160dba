# decomposed.py

import copy
import logging
from typing import Iterable, Optional, Tuple, Type, Union
from numpy import array_equal as np_array_equal
from numpy import full as np_full
from numpy import ndarray
from numpy import zeros as np_zeros
from polyaffine.affine_matrix import AffineMatrix3
from polyaffine.base_transform import (
    CompositeTransform,
    CompositeTransform2,
    CompositeTransform3,
)
from polyaffine.math import to_homogeneous_matrix
from polyaffine.rotation import Basis2, Basis3, Rotation, Rotation2, Rotation3
from polyaffine.utils import EPSILON, approx_eq, as_vector, is_approx_zero

logger = logging.getLogger(__name__)


class Decomposed(CompositeTransform):
    """
    An affine transformation kept as separate uniform scale, rotation and
    displacement:

        transform_point(p)  = rot.rotate_point(p * scale) + disp
        transform_vector(v) = rot.rotate_vector(v * scale)

    `disp` is the image of the origin. Works in whichever dimension `rot`
    acts on; `Decomposed2` and `Decomposed3` pin the dimension and add
    matrix conversion.

    Attributes:
        scale (float): uniform scale factor.
        rot (Rotation): rotation applied after scaling.
        disp (ndarray): displacement applied last.
    """
    __slots__ = ("scale", "rot", "disp")

    # rotation used by identity() / look_at() when none is given
    _rotation_type: Optional[Type[Rotation]] = None
    # every rotation stored must be an instance of this
    _rotation_base: Type[Rotation] = Rotation

    def __init__(self, scale: float = 1.0, rot: Optional[Rotation] = None, disp: Union[None, Iterable] = None):
        if rot is None:
            rot = self._resolve_rotation_type(None).identity()
        elif not isinstance(rot, self._rotation_base):
            raise TypeError(
                f"{self.__class__.__name__} needs a {self._rotation_base.__name__}, got {type(rot).__name__}")

        self.scale = float(scale)
        self.rot = rot
        if disp is None:
            self.disp = np_zeros(rot.dimension)
        else:
            self.disp = as_vector(disp, rot.dimension, name="displacement")

    @classmethod
    def _resolve_rotation_type(cls, rotation_type: Optional[Type[Rotation]]) -> Type[Rotation]:
        if rotation_type is None:
            rotation_type = cls._rotation_type
        if rotation_type is None:
            raise TypeError(
                f"{cls.__name__} has no default rotation type; pass rotation_type")
        if not issubclass(rotation_type, cls._rotation_base):
            raise TypeError(
                f"{cls.__name__} needs a {cls._rotation_base.__name__}, got {rotation_type.__name__}")
        return rotation_type

    #########
    # Creation
    #

    @classmethod
    def identity(cls, rotation_type: Optional[Type[Rotation]] = None) -> "Decomposed":
        """
        Create an identity transform: unit scale, identity rotation and zero
        displacement.

        Args:
            rotation_type: rotation representation to use; defaults to the
                class's own.
        """
        rotation_type = cls._resolve_rotation_type(rotation_type)
        return cls(1.0, rotation_type.identity(), np_zeros(rotation_type.dimension))

    @classmethod
    def look_at(
        cls,
        eye: Iterable,
        center: Iterable,
        up: Iterable,
        rotation_type: Optional[Type[Rotation]] = None,
    ) -> "Decomposed":
        """
        Create the transform into the frame of a viewer at `eye` looking at
        `center`. The rotation comes from the rotation type's own look-at
        construction, the displacement is that rotation applied to
        `origin - eye`, and the scale is 1.

        Args:
            eye: viewer position.
            center: point being looked at.
            up: vertical reference vector.
            rotation_type: rotation representation to use; defaults to the
                class's own.
        """
        rotation_type = cls._resolve_rotation_type(rotation_type)
        n = rotation_type.dimension
        eye = as_vector(eye, n, name="eye")
        center = as_vector(center, n, name="center")
        rot = rotation_type.look_at(center - eye, up)
        disp = rot.rotate_vector(-eye)
        return cls(1.0, rot, disp)

    @classmethod
    def from_translation(cls, translation: Iterable, rotation_type: Optional[Type[Rotation]] = None) -> "Decomposed":
        """Create a pure translation."""
        rotation_type = cls._resolve_rotation_type(rotation_type)
        return cls(1.0, rotation_type.identity(), translation)

    @classmethod
    def from_scale(cls, scale: float, rotation_type: Optional[Type[Rotation]] = None) -> "Decomposed":
        """Create a pure uniform scale about the origin."""
        rotation_type = cls._resolve_rotation_type(rotation_type)
        return cls(scale, rotation_type.identity())

    @classmethod
    def from_rotation(cls, rot: Rotation) -> "Decomposed":
        """Create a pure rotation about the origin."""
        return cls(1.0, rot)

    #########
    # Properties
    #

    @property
    def dimension(self) -> int:
        return self.rot.dimension

    ########
    # Transform methods
    #

    def transform_vector(self, vec: Iterable) -> ndarray:
        vec = as_vector(vec, self.rot.dimension)
        return self.rot.rotate_vector(vec * self.scale)

    def transform_point(self, point: Iterable) -> ndarray:
        point = as_vector(point, self.rot.dimension, name="point")
        return self.rot.rotate_point(point * self.scale) + self.disp

    def concat(self, other: "Decomposed") -> "Decomposed":
        """
        Fold two decomposed transforms into one without building a matrix.

        Applying `self` then `other` to p gives

            other.scale * other.rot(self.scale * self.rot(p) + self.disp) + other.disp

        so the scales multiply, the rotations chain, and self's displacement
        is carried through `other` as a point.
        """
        if type(other) is not type(self):
            raise TypeError(
                f"Cannot concatenate {type(self).__name__} with {type(other).__name__}")
        return self.__class__(
            self.scale * other.scale,
            self.rot.concat(other.rot),
            other.transform_as_point(self.disp),
        )

    def invert(self, *, epsilon: float = EPSILON) -> Optional["Decomposed"]:
        """
        Closed-form inverse of scale-rotate-translate.

        Args:
            epsilon: a scale within this distance of zero is treated as
                degenerate.

        Returns:
            The inverse, or None when the scale is approximately zero.
        """
        if is_approx_zero(self.scale, epsilon):
            logger.debug("Decomposed transform with scale %r has no inverse", self.scale)
            return None

        s = 1.0 / self.scale
        r = self.rot.invert()
        d = r.rotate_vector(self.disp) * -s
        return self.__class__(s, r, d)

    def _assign(self, other: "Decomposed") -> None:
        self.scale, self.rot, self.disp = other.scale, other.rot, other.disp

    ########
    # Components
    #

    def decompose(self) -> Tuple[ndarray, Rotation, ndarray]:
        """
        Returns:
            (scale broadcast to a vector, copy of the rotation, copy of the displacement)
        """
        return (
            np_full(self.rot.dimension, self.scale),
            copy.copy(self.rot),
            self.disp.copy(),
        )

    def to_tuple(self) -> Tuple[float, Rotation, ndarray]:
        """The stored (scale, rotation, displacement) fields, copied."""
        return self.scale, copy.copy(self.rot), self.disp.copy()

    def approx_eq(self, other: "Decomposed", epsilon: float = EPSILON) -> bool:
        """Compare field by field within `epsilon`."""
        return (
            isinstance(other, Decomposed)
            and approx_eq(self.scale, other.scale, epsilon)
            and self.rot.approx_eq(other.rot, epsilon)
            and approx_eq(self.disp, other.disp, epsilon)
        )

    #########
    # Dunder methods
    #

    def __eq__(self, other: "Decomposed") -> bool:
        return (
            type(self) == type(other)
            and self.scale == other.scale
            and self.rot == other.rot
            and np_array_equal(self.disp, other.disp)
        )

    def __repr__(self) -> str:
        return f"(scale({self.scale!r}), rot({self.rot!r}), disp({self.disp.tolist()!r}))"

    def __copy__(self) -> "Decomposed":
        return self.__class__(self.scale, copy.copy(self.rot), self.disp.copy())

    def __reduce__(self):
        return (self.__class__, (self.scale, self.rot, self.disp.copy()))


class Decomposed2(Decomposed, CompositeTransform2):
    """A `Decomposed` transform of the plane; defaults to `Basis2` rotations."""
    __slots__ = ()
    _rotation_type = Basis2
    _rotation_base = Rotation2

    def to_matrix3(self) -> ndarray:
        """
        3x3 homogeneous matrix of the same map: the scaled rotation in the
        upper-left block and (disp, 1) in the last column.
        """
        return to_homogeneous_matrix(self.rot.to_matrix2(), self.scale, self.disp)


class Decomposed3(Decomposed, CompositeTransform3):
    """A `Decomposed` transform of 3D space; defaults to `Basis3` rotations."""
    __slots__ = ()
    _rotation_type = Basis3
    _rotation_base = Rotation3

    def to_matrix4(self) -> ndarray:
        """
        4x4 homogeneous matrix of the same map: the scaled rotation in the
        upper-left block and (disp, 1) in the last column.
        """
        return to_homogeneous_matrix(self.rot.to_matrix3(), self.scale, self.disp)

    def to_affine_matrix(self) -> AffineMatrix3:
        """Equivalent `AffineMatrix3`."""
        return AffineMatrix3(self.to_matrix4())
