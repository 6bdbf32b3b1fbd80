# angle.py

# Licensed under the Apache License, Version 2.0 (the "License")

import math
from dataclasses import dataclass
from typing import Tuple

from gee.kernels import angle_of
from gee.primitives import Vector
from gee.scalar import normalize_radians


@dataclass(frozen=True, slots=True, order=True)
class Angle:
    """
    An angle in radians.

    The library works in a Y-down coordinate system: an angle of +90 degrees
    points along (0, -1), i.e. up on a screen.
    """

    radians: float = 0.0

    @classmethod
    def zero(cls) -> "Angle":
        return cls(0.0)

    @classmethod
    def from_radians(cls, radians: float) -> "Angle":
        return cls(float(radians))

    @classmethod
    def from_degrees(cls, degrees: float) -> "Angle":
        return cls(math.radians(degrees))

    @classmethod
    def from_xy(cls, x: float, y: float) -> "Angle":
        """
        Angle of the vector (x, y), measured from the positive x axis.

        A zero vector has angle 0.
        """
        return cls(float(angle_of(float(x), float(y))))

    @property
    def degrees(self) -> float:
        return math.degrees(self.radians)

    def sin_cos(self) -> Tuple[float, float]:
        return math.sin(self.radians), math.cos(self.radians)

    def unit_vector(self) -> Vector:
        """Unit vector pointing along this angle; inverse of `from_xy`."""
        sin, cos = self.sin_cos()
        return Vector(cos, -sin)

    def normalize(self) -> "Angle":
        """The equivalent angle in (-pi, pi]."""
        return Angle(normalize_radians(self.radians))

    def abs(self) -> "Angle":
        return Angle(abs(self.radians))

    def halved(self) -> "Angle":
        return Angle(self.radians * 0.5)

    def __add__(self, other: "Angle") -> "Angle":
        if not isinstance(other, Angle):
            return NotImplemented
        return Angle(self.radians + other.radians)

    def __sub__(self, other: "Angle") -> "Angle":
        if not isinstance(other, Angle):
            return NotImplemented
        return Angle(self.radians - other.radians)

    def __neg__(self) -> "Angle":
        return Angle(-self.radians)

    def __mul__(self, factor: float) -> "Angle":
        if isinstance(factor, Angle):
            return NotImplemented
        return Angle(self.radians * factor)

    __rmul__ = __mul__

    def __truediv__(self, divisor: float) -> "Angle":
        if isinstance(divisor, Angle):
            return NotImplemented
        return Angle(self.radians / divisor)
