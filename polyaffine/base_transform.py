# base_transform.py

from abc import ABC, abstractmethod
from typing import Iterable, Optional, Tuple, Union
from numpy import asarray as np_asarray
from numpy import float64 as np_float64
from numpy import ndarray
from polyaffine.ray import Ray
from polyaffine.rotation import Rotation


class NotInvertibleError(ValueError):
    """Raised when a transform is forced to invert but has no inverse."""


class Transform(ABC):
    """
    An affine transformation of 2D or 3D space: uniform scale, rotation and
    translation, applicable to points, free vectors and rays.

    Composition reads left to right: `a.concat(b)` applies `a` first, then
    `b`, so for every point p

        a.concat(b).transform_point(p) == b.transform_point(a.transform_point(p))

    Subclasses implement the primitives; ray and point-as-vector mapping and
    the in-place variants are derived from them.
    """
    __slots__ = ()

    @classmethod
    @abstractmethod
    def identity(cls) -> "Transform":
        """
        Create an identity transformation, which maps every point and vector
        to itself.
        """

    @classmethod
    @abstractmethod
    def look_at(cls, eye: Iterable, center: Iterable, up: Iterable) -> "Transform":
        """
        Create the transformation into the frame of a viewer standing at
        `eye`, looking at `center`, using `up` for orientation. `eye` maps to
        the origin.
        """

    @abstractmethod
    def transform_vector(self, vec: Iterable) -> ndarray:
        """Apply the linear part (scale and rotation) to a free vector."""

    @abstractmethod
    def transform_point(self, point: Iterable) -> ndarray:
        """Apply scale, rotation and then translation to a point."""

    def transform_ray(self, ray: Ray) -> Ray:
        """
        Transform a ray: its origin as a point and its direction as a vector.
        The direction is not renormalized.
        """
        return Ray(self.transform_point(ray.origin), self.transform_vector(ray.direction))

    def transform_as_point(self, vec: Iterable) -> ndarray:
        """Transform a vector as though it were the point at that offset from the origin."""
        return self.transform_point(np_asarray(vec, dtype=np_float64))

    @abstractmethod
    def concat(self, other: "Transform") -> "Transform":
        """Transformation equivalent to applying `self`, then `other`."""

    @abstractmethod
    def invert(self) -> Optional["Transform"]:
        """
        Create the transformation that undoes this one.

        Returns:
            The inverse, or None when this transformation is not invertible.
        """

    @abstractmethod
    def _assign(self, other: "Transform") -> None:
        """Overwrite this transform's state with `other`'s."""

    def concat_self(self, other: "Transform") -> "Transform":
        """
        Combine this transform with another, in place.

        Returns:
            self
        """
        self._assign(self.concat(other))
        return self

    def invert_self(self) -> "Transform":
        """
        Invert this transform in place.

        Returns:
            self

        Raises:
            NotInvertibleError: if the transform has no inverse. The receiver
                is left unchanged.
        """
        inverse = self.invert()
        if inverse is None:
            raise NotInvertibleError(f"{self!r} is not invertible")
        self._assign(inverse)
        return self

    def __matmul__(self, other: Union["Transform", ndarray, Iterable]) -> Union["Transform", ndarray]:
        """
        Function-composition shorthand: `b @ a` applies `a` first, then `b`
        (i.e. `a.concat(b)`), and `t @ p` transforms the point `p`.
        """
        if isinstance(other, Transform):
            if type(other) is not type(self):
                return NotImplemented
            return other.concat(self)
        return self.transform_point(other)


class Transform2(Transform):
    """A transformation of the plane, convertible to a 3x3 homogeneous matrix."""
    __slots__ = ()

    @abstractmethod
    def to_matrix3(self) -> ndarray:
        """3x3 homogeneous matrix acting on column vectors."""


class Transform3(Transform):
    """A transformation of 3D space, convertible to a 4x4 homogeneous matrix."""
    __slots__ = ()

    @abstractmethod
    def to_matrix4(self) -> ndarray:
        """4x4 homogeneous matrix acting on column vectors."""


class ToComponents(ABC):
    """A transformation that can expose its (scale, rotation, translation) parts."""
    __slots__ = ()

    @abstractmethod
    def decompose(self) -> Tuple[ndarray, Rotation, ndarray]:
        """
        Extract the components.

        Returns:
            (scale vector, rotation, translation vector)
        """


class CompositeTransform(Transform, ToComponents):
    __slots__ = ()


class CompositeTransform2(Transform2, ToComponents):
    __slots__ = ()


class CompositeTransform3(Transform3, ToComponents):
    __slots__ = ()
