# transform3d.py

# Licensed under the Apache License, Version 2.0 (the "License")

import logging
import math
from functools import total_ordering
from typing import List, Optional, Sequence, Tuple, Union

import numpy as np
from numpy import allclose as np_allclose
from numpy import array2string as np_array2string
from numpy import array_equal as np_array_equal
from numpy import eye as np_eye
from numpy import float64 as np_float64
from numpy import ndarray

from gee.angle import Angle
from gee.kernels import apply4, det4, inv4, mul4
from gee.primitives import Point, Quad, Rect, Size, Vector
from gee.scalar import EPSILON
from gee.transform import Transform
from gee.utils import as_xy, frozen

logger = logging.getLogger(__name__)

# preallocate the identity matrix
_EYE4 = np_eye(4, dtype=np_float64)
_EYE4.setflags(write=False)


@total_ordering
class Transform3d:
    """
    A 4x4 homogeneous transformation, row-major, row vectors on the left.

    Unlike `Transform` this may hold a projective map (non-trivial last
    column). 2D operands are lifted to (x, y, 0, 1) and truncated back to
    (x, y) without a perspective divide.

    Attributes:
        matrix (ndarray): read-only (4, 4) float64 array.
    """
    __slots__ = ("matrix",)

    def __init__(self, matrix: Optional[Union[ndarray, List, Tuple]] = None):
        if matrix is None:
            self.matrix = _EYE4
        else:
            matrix = np.array(matrix, dtype=np_float64)
            if matrix.shape != (4, 4):
                raise ValueError(f"Invalid matrix shape: {matrix.shape}")
            self.matrix = frozen(matrix)

    @classmethod
    def from_unsafe(cls, matrix: ndarray) -> "Transform3d":
        """Wrap a freshly computed (4, 4) float64 array without checking it."""
        instance = object.__new__(cls)
        instance.matrix = frozen(matrix)
        return instance

    @classmethod
    def row_major(
        cls,
        m11: float, m12: float, m13: float, m14: float,
        m21: float, m22: float, m23: float, m24: float,
        m31: float, m32: float, m33: float, m34: float,
        m41: float, m42: float, m43: float, m44: float,
    ) -> "Transform3d":
        return cls.from_unsafe(np.array([[m11, m12, m13, m14],
                                         [m21, m22, m23, m24],
                                         [m31, m32, m33, m34],
                                         [m41, m42, m43, m44]], dtype=np_float64))

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[float]]) -> "Transform3d":
        """
        Create a Transform3d from four rows of four values.

        Raises:
            ValueError: if `rows` is not 4x4.
        """
        return cls(rows)

    @classmethod
    def identity(cls) -> "Transform3d":
        return cls.from_unsafe(_EYE4.copy())

    @classmethod
    def from_scale(cls, x: float, y: float, z: float) -> "Transform3d":
        mat = _EYE4.copy()
        mat[0, 0] = x
        mat[1, 1] = y
        mat[2, 2] = z
        return cls.from_unsafe(mat)

    @classmethod
    def from_translation(cls, x: float, y: float, z: float) -> "Transform3d":
        mat = _EYE4.copy()
        mat[3, :3] = (x, y, z)
        return cls.from_unsafe(mat)

    @classmethod
    def from_transform(cls, transform: Transform) -> "Transform3d":
        """
        Lift a 2D affine transform. The linear block is copied as is and the
        translation row lands in m41, m42.
        """
        mat = _EYE4.copy()
        mat[:2, :2] = transform.matrix[:2, :]
        mat[3, :2] = transform.matrix[2, :]
        return cls.from_unsafe(mat)

    #########
    # Projections
    #

    @classmethod
    def ortho(cls, left: float, right: float, bottom: float, top: float, near: float, far: float) -> "Transform3d":
        """
        Orthographic projection onto normalized device coordinates.

        `left`/`right` map to x = -1/+1, `bottom`/`top` to y = -1/+1, and
        `near`/`far` to z = -1/+1.
        """
        return cls.from_scale(
            2.0 / (right - left),
            2.0 / (top - bottom),
            -2.0 / (far - near),
        ).post_mul(cls.from_translation(
            -(right + left) / (right - left),
            -(top + bottom) / (top - bottom),
            -(far + near) / (far - near),
        ))

    @classmethod
    def ortho_from_rect(cls, rect: Rect) -> "Transform3d":
        """
        Orthographic projection of a Y-down screen rect: its top edge lands
        on y = +1 and its bottom edge on y = -1.
        """
        return cls.ortho(rect.left(), rect.right(), rect.bottom(), rect.top(), 1.0, -1.0)

    @classmethod
    def persp(cls, size: Size, fov: Angle, near: float, far: float) -> "Transform3d":
        """
        Perspective projection.

        Args:
            size: viewport size, only its aspect ratio is used.
            fov: vertical field of view.
            near: distance to the near plane.
            far: distance to the far plane.
        """
        f = 1.0 / math.tan(fov.halved().radians)
        depth = near - far
        return cls.row_major(
            f / size.aspect_ratio(), 0.0, 0.0, 0.0,
            0.0, f, 0.0, 0.0,
            0.0, 0.0, far / depth, -1.0,
            0.0, 0.0, near * far / depth, 0.0,
        )

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
    def m13(self) -> float:
        return float(self.matrix[0, 2])

    @property
    def m14(self) -> float:
        return float(self.matrix[0, 3])

    @property
    def m21(self) -> float:
        return float(self.matrix[1, 0])

    @property
    def m22(self) -> float:
        return float(self.matrix[1, 1])

    @property
    def m23(self) -> float:
        return float(self.matrix[1, 2])

    @property
    def m24(self) -> float:
        return float(self.matrix[1, 3])

    @property
    def m31(self) -> float:
        return float(self.matrix[2, 0])

    @property
    def m32(self) -> float:
        return float(self.matrix[2, 1])

    @property
    def m33(self) -> float:
        return float(self.matrix[2, 2])

    @property
    def m34(self) -> float:
        return float(self.matrix[2, 3])

    @property
    def m41(self) -> float:
        return float(self.matrix[3, 0])

    @property
    def m42(self) -> float:
        return float(self.matrix[3, 1])

    @property
    def m43(self) -> float:
        return float(self.matrix[3, 2])

    @property
    def m44(self) -> float:
        return float(self.matrix[3, 3])

    ########
    # Composition
    #

    def post_mul(self, other: "Transform3d") -> "Transform3d":
        """Compose so that `self` is applied first and `other` second."""
        return self.__class__.from_unsafe(mul4(self.matrix, other.matrix))

    def pre_mul(self, other: "Transform3d") -> "Transform3d":
        """Compose so that `other` is applied first and `self` second."""
        return other.post_mul(self)

    def post_translate(self, x: float, y: float, z: float) -> "Transform3d":
        return self.post_mul(Transform3d.from_translation(x, y, z))

    def pre_translate(self, x: float, y: float, z: float) -> "Transform3d":
        return self.pre_mul(Transform3d.from_translation(x, y, z))

    def post_scale(self, x: float, y: float, z: float) -> "Transform3d":
        return self.post_mul(Transform3d.from_scale(x, y, z))

    def pre_scale(self, x: float, y: float, z: float) -> "Transform3d":
        return self.pre_mul(Transform3d.from_scale(x, y, z))

    ########
    # Application
    #

    def transform_vector(self, vector: Vector) -> Vector:
        """
        Lift to (dx, dy, 0, 1), multiply, keep (x, y).

        Note the lift uses w = 1, so the translation row applies here too,
        and there is no perspective divide.
        """
        m = self.matrix
        return Vector(
            float(vector.dx * m[0, 0] + vector.dy * m[1, 0] + m[3, 0]),
            float(vector.dx * m[0, 1] + vector.dy * m[1, 1] + m[3, 1]),
        )

    def transform_point(self, point: Point) -> Point:
        return self.transform_vector(point.to_vector()).to_point()

    def transform_rect(self, rect: Rect) -> Quad:
        """
        Transform each corner of `rect` independently.

        Returns:
            Quad(a=top-left, b=top-right, c=bottom-right, d=bottom-left),
            not reduced to a bounding box.
        """
        return Quad(*(self.transform_point(c) for c in rect.corners()))

    def transform_points(self, points: ndarray) -> ndarray:
        """Transform an (N, 2) array of points."""
        return apply4(self.matrix, as_xy(points))

    ########
    # Inversion
    #

    def determinant(self) -> float:
        return float(det4(self.matrix))

    def inverse(self) -> Optional["Transform3d"]:
        """
        Analytic inverse.

        Returns:
            The inverse, or None if the determinant is exactly zero.
        """
        inv, det = inv4(self.matrix)
        if det == 0.0:
            logger.debug("Transform3d is singular, no inverse")
            return None
        return self.__class__.from_unsafe(inv)

    #########
    # To-styled/representation methods
    #

    def is_identity(self) -> bool:
        return bool(np_array_equal(self.matrix, _EYE4))

    def approx_eq(self, other: "Transform3d", atol: float = EPSILON) -> bool:
        return bool(np_allclose(self.matrix, other.matrix, rtol=0.0, atol=atol))

    def to_tuple(self) -> Tuple[float, ...]:
        return tuple(self.matrix.flatten().tolist())

    def to_list(self) -> List[float]:
        return self.matrix.flatten().tolist()

    #########
    # Dunder methods
    #

    def __matmul__(self, other: "Transform3d") -> "Transform3d":
        if not isinstance(other, Transform3d):
            return NotImplemented
        return self.post_mul(other)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Transform3d):
            return NotImplemented
        return bool(np_array_equal(self.matrix, other.matrix))

    def __lt__(self, other: "Transform3d") -> bool:
        if not isinstance(other, Transform3d):
            return NotImplemented
        return self.to_tuple() < other.to_tuple()

    def __hash__(self) -> int:
        return hash(self.to_tuple())

    def __repr__(self) -> str:
        cls = self.__class__.__name__
        mat = np_array2string(self.matrix, precision=6, separator=', ')
        return f"{cls}(matrix=\n{mat}\n)"

    def __copy__(self) -> "Transform3d":
        return self.__class__.from_unsafe(self.matrix.copy())

    def __deepcopy__(self, memo) -> "Transform3d":
        return self.__copy__()

    def __reduce__(self):
        return (self.__class__, (self.matrix.copy(),))
