# transform.py

# Licensed under the Apache License, Version 2.0 (the "License")

import logging
from dataclasses import dataclass, field
from functools import total_ordering
from typing import Iterable, List, Optional, Tuple, Union

import numpy as np
from numpy import allclose as np_allclose
from numpy import array2string as np_array2string
from numpy import array_equal as np_array_equal
from numpy import float64 as np_float64
from numpy import ndarray

from gee.angle import Angle
from gee.kernels import apply3x2, decompose3x2, det3x2, inv3x2, mul3x2, recompose3x2
from gee.primitives import Point, Rect, Vector
from gee.scalar import EPSILON
from gee.utils import as_xy, frozen

logger = logging.getLogger(__name__)

_IDENTITY = np.array([[1.0, 0.0],
                      [0.0, 1.0],
                      [0.0, 0.0]], dtype=np_float64)
_IDENTITY.setflags(write=False)


@dataclass(frozen=True, slots=True)
class DecomposedTransform:
    """
    A 2D affine transform expressed as translation, rotation, skew and scale.

    A negative `scale.dy` (with positive `scale.dx`) marks a reflection; in
    that case `skew` is measured against the flipped y axis.
    """

    translation: Vector = field(default_factory=Vector.zero)
    scale: Vector = field(default_factory=lambda: Vector(1.0, 1.0))
    rotation: Angle = field(default_factory=Angle.zero)
    skew: Angle = field(default_factory=Angle.zero)

    @classmethod
    def identity(cls) -> "DecomposedTransform":
        return cls()

    def to_transform(self) -> "Transform":
        return Transform.from_decomposed(self)


@total_ordering
class Transform:
    """
    A 2D affine transform stored as a row-major 3x2 matrix.

        | m11 m12 |
        | m21 m22 |
        | m31 m32 |

    Points are row vectors multiplied on the left, so (x, y) maps to
    (x*m11 + y*m21 + m31, x*m12 + y*m22 + m32). The implicit third column is
    [0, 0, 1], so the transform is always affine.

    Attributes:
        matrix (ndarray): read-only (3, 2) float64 array.
    """
    __slots__ = ("matrix",)

    def __init__(self, matrix: Optional[Union[ndarray, List, Tuple]] = None):
        if matrix is None:
            self.matrix = _IDENTITY
        else:
            matrix = np.array(matrix, dtype=np_float64)
            if matrix.shape != (3, 2):
                raise ValueError(f"Invalid matrix shape: {matrix.shape}")
            self.matrix = frozen(matrix)

    @classmethod
    def from_unsafe(cls, matrix: ndarray) -> "Transform":
        """Wrap a freshly computed (3, 2) float64 array without checking it."""
        instance = object.__new__(cls)
        instance.matrix = frozen(matrix)
        return instance

    @classmethod
    def row_major(cls, m11: float, m12: float, m21: float, m22: float, m31: float, m32: float) -> "Transform":
        return cls.from_unsafe(np.array([[m11, m12],
                                         [m21, m22],
                                         [m31, m32]], dtype=np_float64))

    @classmethod
    def identity(cls) -> "Transform":
        """
        Create the multiplicative identity.

        Returns:
            A Transform whose `matrix` is [1, 0, 0, 1, 0, 0].
        """
        return cls.from_unsafe(_IDENTITY.copy())

    @classmethod
    def from_scale(cls, x: float, y: float) -> "Transform":
        return cls.row_major(x, 0.0, 0.0, y, 0.0, 0.0)

    @classmethod
    def from_translation(cls, x: float, y: float) -> "Transform":
        return cls.row_major(1.0, 0.0, 0.0, 1.0, x, y)

    @classmethod
    def from_rotation_about_origin(cls, theta: Angle) -> "Transform":
        """
        Rotation about (0, 0). With the Y axis pointing down, +90 degrees
        takes (1, 0) to (0, -1).
        """
        sin, cos = theta.sin_cos()
        return cls.row_major(cos, -sin, sin, cos, 0.0, 0.0)

    @classmethod
    def from_rotation(cls, theta: Angle, center: Point) -> "Transform":
        """
        Rotation by `theta` about `center`.

        Args:
            theta: rotation angle.
            center: the fixed point of the rotation.

        Returns:
            translate(-center), then rotate, then translate(center).
        """
        return (
            cls.from_rotation_about_origin(theta)
            .pre_translate(-center.x, -center.y)
            .post_translate(center.x, center.y)
        )

    @classmethod
    def from_skew(cls, theta: Angle) -> "Transform":
        sin, cos = theta.sin_cos()
        return cls.row_major(1.0, 0.0, -sin, cos, 0.0, 0.0)

    @classmethod
    def ortho(cls, left: float, right: float, bottom: float, top: float) -> "Transform":
        """
        2D orthographic projection: `left`/`right` map to x = -1/+1 and
        `bottom`/`top` to y = -1/+1.
        """
        return cls.row_major(
            2.0 / (right - left), 0.0,
            0.0, 2.0 / (top - bottom),
            -(right + left) / (right - left), -(top + bottom) / (top - bottom),
        )

    @classmethod
    def from_decomposed(cls, decomposed: DecomposedTransform) -> "Transform":
        """
        Rebuild a transform from its translation, rotation, skew and scale.

        This is the inverse of `decompose`, reflections included.
        """
        return cls.from_unsafe(recompose3x2(
            float(decomposed.translation.dx),
            float(decomposed.translation.dy),
            float(decomposed.scale.dx),
            float(decomposed.scale.dy),
            float(decomposed.rotation.radians),
            float(decomposed.skew.radians),
        ))

    @classmethod
    def from_flat_array(cls, flat_array: Union[ndarray, Iterable[float]]) -> "Transform":
        """
        Create a Transform from six values in row-major order.

        Raises:
            ValueError: if there are not exactly six values.
        """
        flat_array = np.array(flat_array, dtype=np_float64)
        if flat_array.shape != (6,):
            raise ValueError(f"Invalid flat array shape: {flat_array.shape}")
        return cls.from_unsafe(flat_array.reshape((3, 2)))

    #########
    # Fields
    #

    @property
    def m11(self) -> float:
        return float(self.matrix[0, 0])

    @property
    def m12(self) -> float:
        return float(self.matrix[0, 1])

    @property
    def m21(self) -> float:
        return float(self.matrix[1, 0])

    @property
    def m22(self) -> float:
        return float(self.matrix[1, 1])

    @property
    def m31(self) -> float:
        return float(self.matrix[2, 0])

    @property
    def m32(self) -> float:
        return float(self.matrix[2, 1])

    ########
    # Composition
    #

    def post_mul(self, other: "Transform") -> "Transform":
        """
        Compose so that `self` is applied first and `other` second.
        """
        return self.__class__.from_unsafe(mul3x2(self.matrix, other.matrix))

    def pre_mul(self, other: "Transform") -> "Transform":
        """
        Compose so that `other` is applied first and `self` second.
        """
        return other.post_mul(self)

    def post_translate(self, x: float, y: float) -> "Transform":
        return self.post_mul(Transform.from_translation(x, y))

    def pre_translate(self, x: float, y: float) -> "Transform":
        return self.pre_mul(Transform.from_translation(x, y))

    def post_scale(self, x: float, y: float) -> "Transform":
        return self.post_mul(Transform.from_scale(x, y))

    def pre_scale(self, x: float, y: float) -> "Transform":
        return self.pre_mul(Transform.from_scale(x, y))

    def post_rotate(self, theta: Angle, center: Optional[Point] = None) -> "Transform":
        return self.post_mul(_rotation(theta, center))

    def pre_rotate(self, theta: Angle, center: Optional[Point] = None) -> "Transform":
        return self.pre_mul(_rotation(theta, center))

    def post_skew(self, theta: Angle) -> "Transform":
        return self.post_mul(Transform.from_skew(theta))

    def pre_skew(self, theta: Angle) -> "Transform":
        return self.pre_mul(Transform.from_skew(theta))

    ########
    # Application
    #

    def transform_point(self, point: Point) -> Point:
        m = self.matrix
        return Point(
            float(point.x * m[0, 0] + point.y * m[1, 0] + m[2, 0]),
            float(point.x * m[0, 1] + point.y * m[1, 1] + m[2, 1]),
        )

    def transform_vector(self, vector: Vector) -> Vector:
        # free vectors ignore the translation row
        m = self.matrix
        return Vector(
            float(vector.dx * m[0, 0] + vector.dy * m[1, 0]),
            float(vector.dx * m[0, 1] + vector.dy * m[1, 1]),
        )

    def transform_rect(self, rect: Rect) -> Rect:
        """
        Transform the four corners of `rect` and return their axis-aligned
        bounding rect. Rotation or skew therefore grows the result; use
        `Transform3d.transform_rect` to keep the exact corners.
        """
        return Rect.from_points(self.transform_point(c) for c in rect.corners())

    def transform_points(self, points: ndarray) -> ndarray:
        """
        Transform an (N, 2) array of points.

        Returns:
            A new (N, 2) float64 array.
        """
        return apply3x2(self.matrix, as_xy(points), True)

    def transform_vectors(self, vectors: ndarray) -> ndarray:
        """
        Transform an (N, 2) array of free vectors (translation ignored).
        """
        return apply3x2(self.matrix, as_xy(vectors), False)

    ########
    # Inversion
    #

    def determinant(self) -> float:
        return float(det3x2(self.matrix))

    def inverse(self) -> Optional["Transform"]:
        """
        Closed-form inverse.

        Returns:
            The inverse, or None if the determinant is exactly zero.
        """
        det = self.determinant()
        if det == 0.0:
            logger.debug("Transform %r is singular, no inverse", self.to_tuple())
            return None
        return self.__class__.from_unsafe(inv3x2(self.matrix, det))

    ########
    # Decomposition
    #

    def decompose(self) -> DecomposedTransform:
        """
        Split this transform into translation, rotation, skew and scale.

        Rotation is the angle of the x basis row. Skew is zero for an
        orthogonal basis. A reflection is reported as a negative y scale.
        A zero-length basis row is given angle 0 and scale 0, which still
        recomposes to the same matrix.

        Returns:
            DecomposedTransform such that `Transform.from_decomposed` of it
            reproduces this transform up to rounding.
        """
        tx, ty, sx, sy, rotation, skew = decompose3x2(self.matrix)
        if sx == 0.0 or sy == 0.0:
            logger.debug("Decomposing %r with a zero-length basis row", self.to_tuple())
        return DecomposedTransform(
            translation=Vector(float(tx), float(ty)),
            scale=Vector(float(sx), float(sy)),
            rotation=Angle(float(rotation)),
            skew=Angle(float(skew)),
        )

    #########
    # To-styled/representation methods
    #

    def is_identity(self) -> bool:
        return bool(np_array_equal(self.matrix, _IDENTITY))

    def approx_eq(self, other: "Transform", atol: float = EPSILON) -> bool:
        """
        True if every field of `other` is within `atol` of this one.
        """
        return bool(np_allclose(self.matrix, other.matrix, rtol=0.0, atol=atol))

    def to_tuple(self) -> Tuple[float, float, float, float, float, float]:
        return tuple(self.matrix.flatten().tolist())

    def to_list(self) -> List[float]:
        return self.matrix.flatten().tolist()

    def to_mat3(self) -> ndarray:
        """
        The full 3x3 homogeneous matrix, with [0, 0, 1] as last column.
        """
        out = np.zeros((3, 3), dtype=np_float64)
        out[:, :2] = self.matrix
        out[2, 2] = 1.0
        return out

    #########
    # Dunder methods
    #

    def __matmul__(self, other: "Transform") -> "Transform":
        """
        `a @ b` is `a.post_mul(b)`: a is applied first, matching the product
        of the homogeneous row-major matrices.
        """
        if not isinstance(other, Transform):
            return NotImplemented
        return self.post_mul(other)

    def __eq__(self, other: object) -> bool:
        """
        Structural equality: every field must match exactly.
        """
        if not isinstance(other, Transform):
            return NotImplemented
        return bool(np_array_equal(self.matrix, other.matrix))

    def __lt__(self, other: "Transform") -> bool:
        if not isinstance(other, Transform):
            return NotImplemented
        return self.to_tuple() < other.to_tuple()

    def __hash__(self) -> int:
        return hash(self.to_tuple())

    def __repr__(self) -> str:
        cls = self.__class__.__name__
        mat = np_array2string(self.matrix, precision=6, separator=', ')
        return f"{cls}(matrix=\n{mat}\n)"

    def __copy__(self) -> "Transform":
        return self.__class__.from_unsafe(self.matrix.copy())

    def __deepcopy__(self, memo) -> "Transform":
        return self.__copy__()

    def __reduce__(self):
        return (self.__class__, (self.matrix.copy(),))


def _rotation(theta: Angle, center: Optional[Point]) -> Transform:
    if center is None:
        return Transform.from_rotation_about_origin(theta)
    return Transform.from_rotation(theta, center)
