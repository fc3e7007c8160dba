# ray.py

from dataclasses import dataclass
from numpy import array_equal as np_array_equal
from numpy import ndarray
from polyaffine.utils import as_vector


@dataclass(slots=True)
class Ray:
    """
    A half-line in 2D or 3D space.

    Attributes:
        origin (ndarray): the point the ray starts from.
        direction (ndarray): the direction vector; not required to be unit length.
    """

    origin: ndarray
    direction: ndarray

    def __post_init__(self):
        self.origin = as_vector(self.origin, name="origin")
        self.direction = as_vector(
            self.direction, self.origin.shape[0], name="direction")

    def point_at(self, t: float) -> ndarray:
        """
        Evaluate the ray at parameter `t`.

        Returns:
            origin + t * direction
        """
        return self.origin + t * self.direction

    def __eq__(self, other: "Ray") -> bool:
        return (
            type(self) == type(other)
            and np_array_equal(self.origin, other.origin)
            and np_array_equal(self.direction, other.direction)
        )

    def __reduce__(self):
        return (self.__class__, (self.origin.copy(), self.direction.copy()))
