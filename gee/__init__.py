"""
gee: small 2D geometry primitives built around affine transforms.

Provides value types for vectors, points, sizes, rects and angles, a 2D
affine `Transform` (3x2, with decomposition into translation, rotation, skew
and scale) and a 4x4 homogeneous `Transform3d` with projection builders.
The Y axis points down throughout.
"""

__version__ = version = "0.1.0"

# exposing the public API of the package
from gee.angle import Angle
from gee.primitives import Point, Quad, Rect, Size, Vector
from gee.scalar import EPSILON, approx_eq, lerp, normalize_radians
from gee.transform import DecomposedTransform, Transform
from gee.transform3d import Transform3d

__all__ = [
    "Angle",
    "DecomposedTransform",
    "EPSILON",
    "Point",
    "Quad",
    "Rect",
    "Size",
    "Transform",
    "Transform3d",
    "Vector",
    "approx_eq",
    "lerp",
    "normalize_radians",
]
