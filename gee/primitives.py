# primitives.py

# Licensed under the Apache License, Version 2.0 (the "License")

import math
from dataclasses import dataclass
from typing import Iterable, Optional, Tuple, TYPE_CHECKING

from gee.scalar import lerp

if TYPE_CHECKING:
    from gee.angle import Angle


@dataclass(frozen=True, slots=True, order=True)
class Vector:
    """A free 2D displacement. Transforms never apply translation to it."""

    dx: float = 0.0
    dy: float = 0.0

    @classmethod
    def zero(cls) -> "Vector":
        return cls(0.0, 0.0)

    def magnitude(self) -> float:
        return math.hypot(self.dx, self.dy)

    def normalized(self) -> "Vector":
        return self / self.magnitude()

    def dot(self, other: "Vector") -> float:
        return self.dx * other.dx + self.dy * other.dy

    def angle(self) -> "Angle":
        from gee.angle import Angle
        return Angle.from_xy(self.dx, self.dy)

    def lerp(self, other: "Vector", t: float) -> "Vector":
        return Vector(lerp(self.dx, other.dx, t), lerp(self.dy, other.dy, t))

    def to_point(self) -> "Point":
        return Point(self.dx, self.dy)

    def to_tuple(self) -> Tuple[float, float]:
        return (self.dx, self.dy)

    def __add__(self, other: "Vector") -> "Vector":
        if not isinstance(other, Vector):
            return NotImplemented
        return Vector(self.dx + other.dx, self.dy + other.dy)

    def __sub__(self, other: "Vector") -> "Vector":
        if not isinstance(other, Vector):
            return NotImplemented
        return Vector(self.dx - other.dx, self.dy - other.dy)

    def __neg__(self) -> "Vector":
        return Vector(-self.dx, -self.dy)

    def __mul__(self, factor: float) -> "Vector":
        if isinstance(factor, (Vector, Point)):
            return NotImplemented
        return Vector(self.dx * factor, self.dy * factor)

    __rmul__ = __mul__

    def __truediv__(self, divisor: float) -> "Vector":
        if isinstance(divisor, (Vector, Point)):
            return NotImplemented
        return Vector(self.dx / divisor, self.dy / divisor)


@dataclass(frozen=True, slots=True, order=True)
class Point:
    """A 2D position."""

    x: float = 0.0
    y: float = 0.0

    @classmethod
    def zero(cls) -> "Point":
        return cls(0.0, 0.0)

    def to_vector(self) -> Vector:
        return Vector(self.x, self.y)

    def to_tuple(self) -> Tuple[float, float]:
        return (self.x, self.y)

    def lerp(self, other: "Point", t: float) -> "Point":
        return Point(lerp(self.x, other.x, t), lerp(self.y, other.y, t))

    def __add__(self, other: Vector) -> "Point":
        if not isinstance(other, Vector):
            return NotImplemented
        return Point(self.x + other.dx, self.y + other.dy)

    def __sub__(self, other):
        if isinstance(other, Point):
            return Vector(self.x - other.x, self.y - other.y)
        if isinstance(other, Vector):
            return Point(self.x - other.dx, self.y - other.dy)
        return NotImplemented


@dataclass(frozen=True, slots=True, order=True)
class Size:
    """A non-negative width and height."""

    width: float = 0.0
    height: float = 0.0

    def __post_init__(self):
        if self.width < 0 or self.height < 0:
            raise ValueError(
                f"width or height is less than 0: ({self.width}, {self.height})")

    @classmethod
    def try_new(cls, width: float, height: float) -> Optional["Size"]:
        if width >= 0 and height >= 0:
            return cls(width, height)
        return None

    @classmethod
    def square(cls, dim: float) -> "Size":
        return cls(dim, dim)

    def area(self) -> float:
        return self.width * self.height

    def aspect_ratio(self) -> float:
        return self.width / self.height


@dataclass(frozen=True, slots=True, order=True)
class Rect:
    """
    An axis-aligned rectangle in Y-down screen space.

    Attributes:
        origin (Point): the top-left corner.
        size (Size): the extent to the right and downward.
    """

    origin: Point = Point()
    size: Size = Size()

    @classmethod
    def from_ltrb(cls, left: float, top: float, right: float, bottom: float) -> "Rect":
        return cls(Point(left, top), Size(right - left, bottom - top))

    @classmethod
    def from_points(cls, points: Iterable[Point]) -> "Rect":
        """
        Smallest rect containing every point.

        Raises:
            ValueError: if `points` is empty.
        """
        points = list(points)
        if not points:
            raise ValueError("cannot bound an empty set of points")
        xs = [p.x for p in points]
        ys = [p.y for p in points]
        return cls.from_ltrb(min(xs), min(ys), max(xs), max(ys))

    def left(self) -> float:
        return self.origin.x

    def right(self) -> float:
        return self.origin.x + self.size.width

    def top(self) -> float:
        return self.origin.y

    def bottom(self) -> float:
        return self.origin.y + self.size.height

    def width(self) -> float:
        return self.size.width

    def height(self) -> float:
        return self.size.height

    def top_left(self) -> Point:
        return Point(self.left(), self.top())

    def top_right(self) -> Point:
        return Point(self.right(), self.top())

    def bottom_left(self) -> Point:
        return Point(self.left(), self.bottom())

    def bottom_right(self) -> Point:
        return Point(self.right(), self.bottom())

    def corners(self) -> Tuple[Point, Point, Point, Point]:
        """Corners in winding order: top-left, top-right, bottom-right, bottom-left."""
        return (self.top_left(), self.top_right(), self.bottom_right(), self.bottom_left())

    def area(self) -> float:
        return self.size.area()

    def contains_point(self, point: Point) -> bool:
        return (self.left() <= point.x <= self.right()
                and self.top() <= point.y <= self.bottom())


@dataclass(frozen=True, slots=True, order=True)
class Quad:
    """
    Four points with no guarantee about their relationship.

    This is what a Rect becomes under a transform that may rotate, shear or
    project it.
    """

    a: Point
    b: Point
    c: Point
    d: Point

    def points(self) -> Tuple[Point, Point, Point, Point]:
        return (self.a, self.b, self.c, self.d)

    def bounding_rect(self) -> Rect:
        return Rect.from_points(self.points())

    def area(self) -> float:
        # shoelace over a -> b -> c -> d
        pts = self.points()
        twice = 0.0
        for i in range(4):
            p, q = pts[i], pts[(i + 1) % 4]
            twice += p.x * q.y - q.x * p.y
        return abs(twice) * 0.5
