"""
Geometric Primitives in the canvas frame (pixels, Y axis pointing down).
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import TYPE_CHECKING
import math

import numpy as np

if TYPE_CHECKING:
    import numpy.typing as npt


@dataclass
class Vector:
    """
    A displacement in the plane, e.g. a drag gesture.
    """
    x: float
    y: float

    @property
    def magnitude(self) -> float:
        return math.sqrt(self.x**2 + self.y**2)


@dataclass
class Point:
    """A simple geometric point in the plane."""
    x: float
    y: float

    def __add__(self, other: Vector) -> Point:
        # Point + Vector = Point (Translation)
        if isinstance(other, Vector):
            return Point(self.x + other.x, self.y + other.y)
        raise TypeError("Can only add a Vector to a Point.")

    def __sub__(self, other: Vector | Point) -> Vector | Point:
        # Point - Point = Vector (Direction)
        if isinstance(other, Point):
            return Vector(self.x - other.x, self.y - other.y)
        # Point - Vector = Point (Inverse translation)
        if isinstance(other, Vector):
            return Point(self.x - other.x, self.y - other.y)
        raise TypeError("Can only subtract a Vector or Point from a Point.")

    def to_array(self) -> npt.NDArray[np.float64]:
        return np.array([self.x, self.y])

    @staticmethod
    def from_array(arr: npt.ArrayLike) -> Point:
        x, y = np.asarray(arr, dtype=float)[:2]
        return Point(float(x), float(y))


@dataclass(frozen=True)
class BoundingRect:
    """Axis-aligned rectangle; `top` is the smallest Y since Y points down."""
    left: float
    top: float
    width: float
    height: float

    @property
    def bottom(self) -> float:
        return self.top + self.height

    @property
    def right(self) -> float:
        return self.left + self.width

    @staticmethod
    def from_points(points: npt.NDArray[np.float64]) -> BoundingRect:
        """Smallest rectangle enclosing an (N, 2) array of points."""
        mins = points.min(axis=0)
        maxs = points.max(axis=0)
        return BoundingRect(
            left=float(mins[0]),
            top=float(mins[1]),
            width=float(maxs[0] - mins[0]),
            height=float(maxs[1] - mins[1]),
        )


def rotation_matrix(angle_rad: float) -> npt.NDArray[np.float64]:
    """2x2 rotation matrix; apply to (N, 2) row vectors as `points @ R.T`."""
    cos_a = math.cos(angle_rad)
    sin_a = math.sin(angle_rad)
    return np.array([[cos_a, -sin_a], [sin_a, cos_a]])
