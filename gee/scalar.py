# scalar.py

# Licensed under the Apache License, Version 2.0 (the "License")

from gee.kernels import wrap_radians

# default absolute tolerance for approximate comparisons
EPSILON = 1e-9


def lerp(a: float, b: float, t: float) -> float:
    """Linear interpolation from `a` (t=0) to `b` (t=1)."""
    return a + (b - a) * t


def approx_eq(a: float, b: float, atol: float = EPSILON) -> bool:
    return abs(a - b) <= atol


def normalize_radians(radians: float) -> float:
    """
    Wrap an angle into the half-open interval (-pi, pi].

    Args:
        radians: any finite angle.

    Returns:
        The equivalent angle in (-pi, pi].
    """
    return float(wrap_radians(float(radians)))
