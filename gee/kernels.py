# kernels.py

# Licensed under the Apache License, Version 2.0 (the "License")

import math
import numpy as np
from numba import njit
from numba.core.errors import NumbaPerformanceWarning
import warnings
warnings.filterwarnings("ignore", category=NumbaPerformanceWarning)


@njit(cache=True)
def mul3x2(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """Compose two 3x2 row-major affine matrices, `a` applied first."""
    out = np.empty((3, 2), dtype=np.float64)
    out[0, 0] = a[0, 0] * b[0, 0] + a[0, 1] * b[1, 0]
    out[0, 1] = a[0, 0] * b[0, 1] + a[0, 1] * b[1, 1]
    out[1, 0] = a[1, 0] * b[0, 0] + a[1, 1] * b[1, 0]
    out[1, 1] = a[1, 0] * b[0, 1] + a[1, 1] * b[1, 1]
    out[2, 0] = a[2, 0] * b[0, 0] + a[2, 1] * b[1, 0] + b[2, 0]
    out[2, 1] = a[2, 0] * b[0, 1] + a[2, 1] * b[1, 1] + b[2, 1]
    return out


@njit(cache=True)
def det3x2(m: np.ndarray) -> float:
    """Determinant of the linear 2x2 block."""
    return m[0, 0] * m[1, 1] - m[0, 1] * m[1, 0]


@njit(cache=True)
def inv3x2(m: np.ndarray, det: float) -> np.ndarray:
    """
    Closed-form inverse of a 3x2 affine matrix (adjugate over determinant).
    The caller guarantees `det != 0`.
    """
    inv_det = 1.0 / det
    out = np.empty((3, 2), dtype=np.float64)
    out[0, 0] = inv_det * m[1, 1]
    out[0, 1] = inv_det * -m[0, 1]
    out[1, 0] = inv_det * -m[1, 0]
    out[1, 1] = inv_det * m[0, 0]
    out[2, 0] = inv_det * (m[1, 0] * m[2, 1] - m[1, 1] * m[2, 0])
    out[2, 1] = inv_det * (m[2, 0] * m[0, 1] - m[0, 0] * m[2, 1])
    return out


@njit(cache=True)
def angle_of(x: float, y: float) -> float:
    """Angle of (x, y) in the Y-down convention. A zero vector has angle 0."""
    return math.atan2(-y, x)


@njit(cache=True)
def wrap_radians(r: float) -> float:
    """Wrap an angle into (-pi, pi]."""
    tau = 2.0 * math.pi
    shifted = r + math.pi
    w = shifted - tau * math.floor(shifted / tau)
    if w <= 0.0:
        w += tau
    return w - math.pi


@njit(cache=True)
def decompose3x2(m: np.ndarray) -> np.ndarray:
    """
    Split a 3x2 affine matrix into translation, rotation, skew and scale.

    Returns:
        np.ndarray: [tx, ty, sx, sy, rotation, skew], angles in radians.

    Notes:
        Rotation is the angle of the x row. The raw skew is the (wrapped)
        angle from the y row to the x row, which is +pi/2 for an unsheared
        basis. A negative raw skew means the basis is reflected: the raw
        skew is replaced by its absolute value and the y scale is negated.
        Subtracting the raw skew from pi/2 reports zero for an orthogonal
        basis.
    """
    rotation_x = angle_of(m[0, 0], m[0, 1])
    rotation_y = angle_of(m[1, 0], m[1, 1])

    skew = wrap_radians(rotation_x - rotation_y)
    y_sign = 1.0
    if skew < 0.0:
        skew = -skew
        y_sign = -1.0

    out = np.empty(6, dtype=np.float64)
    out[0] = m[2, 0]
    out[1] = m[2, 1]
    out[2] = math.hypot(m[0, 0], m[0, 1])
    out[3] = math.hypot(m[1, 0], m[1, 1]) * y_sign
    out[4] = rotation_x
    out[5] = 0.5 * math.pi - skew
    return out


@njit(cache=True)
def recompose3x2(tx: float, ty: float, sx: float, sy: float, rotation: float, skew: float) -> np.ndarray:
    """Inverse of `decompose3x2`."""
    # a flip reverses the y row, so the skew is measured the other way round.
    # copysign keeps the flip of a negative sy when sx is zero
    if math.copysign(1.0, sx) * math.copysign(1.0, sy) < 0.0:
        skew = -skew
    out = np.empty((3, 2), dtype=np.float64)
    out[0, 0] = math.cos(rotation) * sx
    out[0, 1] = -math.sin(rotation) * sx
    out[1, 0] = math.sin(rotation + skew) * sy
    out[1, 1] = math.cos(rotation + skew) * sy
    out[2, 0] = tx
    out[2, 1] = ty
    return out


@njit(cache=True)
def apply3x2(m: np.ndarray, xy: np.ndarray, translate: bool) -> np.ndarray:
    """Transform N row vectors (N x 2) by a 3x2 matrix."""
    n = xy.shape[0]
    out = np.empty((n, 2), dtype=np.float64)
    tx = m[2, 0] if translate else 0.0
    ty = m[2, 1] if translate else 0.0
    for i in range(n):
        x = xy[i, 0]
        y = xy[i, 1]
        out[i, 0] = x * m[0, 0] + y * m[1, 0] + tx
        out[i, 1] = x * m[0, 1] + y * m[1, 1] + ty
    return out


@njit(cache=True, fastmath=True)
def mul4(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """
    Compose two 4x4 row-major matrices, `a` applied first.
    fastmath lets LLVM fuse each row-column product into multiply-adds.
    """
    out = np.empty((4, 4), dtype=np.float64)
    for i in range(4):
        for j in range(4):
            out[i, j] = (
                a[i, 0] * b[0, j]
                + a[i, 1] * b[1, j]
                + a[i, 2] * b[2, j]
                + a[i, 3] * b[3, j]
            )
    return out


@njit(cache=True, inline="always")
def _minors4(m: np.ndarray):
    """
    The twelve 2x2 minors shared by `det4` and `inv4`.

    Returns:
        (s0..s5, c0..c5): s from rows 0-1, c from rows 2-3.
    """
    s0 = m[0, 0] * m[1, 1] - m[1, 0] * m[0, 1]
    s1 = m[0, 0] * m[1, 2] - m[1, 0] * m[0, 2]
    s2 = m[0, 0] * m[1, 3] - m[1, 0] * m[0, 3]
    s3 = m[0, 1] * m[1, 2] - m[1, 1] * m[0, 2]
    s4 = m[0, 1] * m[1, 3] - m[1, 1] * m[0, 3]
    s5 = m[0, 2] * m[1, 3] - m[1, 2] * m[0, 3]

    c0 = m[2, 0] * m[3, 1] - m[3, 0] * m[2, 1]
    c1 = m[2, 0] * m[3, 2] - m[3, 0] * m[2, 2]
    c2 = m[2, 0] * m[3, 3] - m[3, 0] * m[2, 3]
    c3 = m[2, 1] * m[3, 2] - m[3, 1] * m[2, 2]
    c4 = m[2, 1] * m[3, 3] - m[3, 1] * m[2, 3]
    c5 = m[2, 2] * m[3, 3] - m[3, 2] * m[2, 3]
    return s0, s1, s2, s3, s4, s5, c0, c1, c2, c3, c4, c5


@njit(cache=True, inline="always")
def _det_from_minors(s0, s1, s2, s3, s4, s5, c0, c1, c2, c3, c4, c5):
    return s0 * c5 - s1 * c4 + s2 * c3 + s3 * c2 - s4 * c1 + s5 * c0


@njit(cache=True)
def det4(m: np.ndarray) -> float:
    """Determinant of a 4x4 matrix from its twelve 2x2 minors."""
    s0, s1, s2, s3, s4, s5, c0, c1, c2, c3, c4, c5 = _minors4(m)
    return _det_from_minors(s0, s1, s2, s3, s4, s5, c0, c1, c2, c3, c4, c5)


@njit(cache=True)
def inv4(m: np.ndarray):
    """
    Analytic inverse of a 4x4 matrix (adjugate over determinant).

    Returns:
        (inverse, det). When `det` is exactly zero the inverse is all zeros
        and must not be used.
    """
    s0, s1, s2, s3, s4, s5, c0, c1, c2, c3, c4, c5 = _minors4(m)
    det = _det_from_minors(s0, s1, s2, s3, s4, s5, c0, c1, c2, c3, c4, c5)
    out = np.zeros((4, 4), dtype=np.float64)
    if det == 0.0:
        return out, det
    inv_det = 1.0 / det

    # each entry is a signed cofactor, transposed
    x0, x1, x2, x3 = m[0, 0], m[0, 1], m[0, 2], m[0, 3]
    y0, y1, y2, y3 = m[1, 0], m[1, 1], m[1, 2], m[1, 3]
    z0, z1, z2, z3 = m[2, 0], m[2, 1], m[2, 2], m[2, 3]
    w0, w1, w2, w3 = m[3, 0], m[3, 1], m[3, 2], m[3, 3]

    out[0, 0] = inv_det * (y1 * c5 - y2 * c4 + y3 * c3)
    out[1, 0] = inv_det * (y2 * c2 - y0 * c5 - y3 * c1)
    out[2, 0] = inv_det * (y0 * c4 - y1 * c2 + y3 * c0)
    out[3, 0] = inv_det * (y1 * c1 - y0 * c3 - y2 * c0)

    out[0, 1] = inv_det * (x2 * c4 - x1 * c5 - x3 * c3)
    out[1, 1] = inv_det * (x0 * c5 - x2 * c2 + x3 * c1)
    out[2, 1] = inv_det * (x1 * c2 - x0 * c4 - x3 * c0)
    out[3, 1] = inv_det * (x0 * c3 - x1 * c1 + x2 * c0)

    out[0, 2] = inv_det * (w1 * s5 - w2 * s4 + w3 * s3)
    out[1, 2] = inv_det * (w2 * s2 - w0 * s5 - w3 * s1)
    out[2, 2] = inv_det * (w0 * s4 - w1 * s2 + w3 * s0)
    out[3, 2] = inv_det * (w1 * s1 - w0 * s3 - w2 * s0)

    out[0, 3] = inv_det * (z2 * s4 - z1 * s5 - z3 * s3)
    out[1, 3] = inv_det * (z0 * s5 - z2 * s2 + z3 * s1)
    out[2, 3] = inv_det * (z1 * s2 - z0 * s4 - z3 * s0)
    out[3, 3] = inv_det * (z0 * s3 - z1 * s1 + z2 * s0)
    return out, det


@njit(cache=True)
def apply4(m: np.ndarray, xy: np.ndarray) -> np.ndarray:
    """
    Lift N row vectors (N x 2) to (x, y, 0, 1), multiply by a 4x4 matrix and
    truncate to (x, y). No perspective divide is performed.
    """
    n = xy.shape[0]
    out = np.empty((n, 2), dtype=np.float64)
    for i in range(n):
        x = xy[i, 0]
        y = xy[i, 1]
        out[i, 0] = x * m[0, 0] + y * m[1, 0] + m[3, 0]
        out[i, 1] = x * m[0, 1] + y * m[1, 1] + m[3, 1]
    return out
