"""
Polyaffine: affine transformations (uniform scale, rotation, translation) in 2D and 3D,
with interchangeable decomposed and homogeneous-matrix representations that share one contract.
"""

__version__ = version = "0.1.0"

# exposing the public API of the package
from polyaffine.affine_matrix import AffineMatrix3
from polyaffine.base_transform import (
    CompositeTransform,
    CompositeTransform2,
    CompositeTransform3,
    NotInvertibleError,
    ToComponents,
    Transform,
    Transform2,
    Transform3,
)
from polyaffine.decomposed import Decomposed, Decomposed2, Decomposed3
from polyaffine.ray import Ray
from polyaffine.rotation import Basis2, Basis3, Quaternion, Rotation, Rotation2, Rotation3

__all__ = [
    "AffineMatrix3",
    "Basis2",
    "Basis3",
    "CompositeTransform",
    "CompositeTransform2",
    "CompositeTransform3",
    "Decomposed",
    "Decomposed2",
    "Decomposed3",
    "NotInvertibleError",
    "Quaternion",
    "Ray",
    "Rotation",
    "Rotation2",
    "Rotation3",
    "ToComponents",
    "Transform",
    "Transform2",
    "Transform3",
]
