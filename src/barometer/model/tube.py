"""
Tube (Geometry + Fluid State Record)
====================================
A rigid, open-ended vessel the user can drag and rotate on the canvas.

Why is this file needed?
------------------------
1. Geometry: It maps the tube's local outline into the shared canvas frame
   (translation + rotation) and derives the bounding rectangle and the two
   mouth positions the physics needs.
2. State: It carries the fluid-state scalars (depth, volume fraction, air
   fraction). Only `barometer.controller.fluid_state` writes them; the input
   layer only moves and rotates the tube.

Drawing is NOT done here. Renderers read this record.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING
import itertools
import logging
import math

import numpy as np
from matplotlib.path import Path

from barometer import config
from barometer.model.geometry_primitives import BoundingRect, Point, Vector, rotation_matrix

if TYPE_CHECKING:
    import numpy.typing as npt

logger = logging.getLogger(__name__)

_tube_ids = itertools.count(1)


class TubeShape(StrEnum):
    PLAIN = "Plain"
    SLIM = "Slim"
    ZIGZAG = "Zigzag"


# Local outlines; first and last vertex are the mouths.
TUBE_OUTLINES: dict[TubeShape, list[tuple[float, float]]] = {
    TubeShape.PLAIN: [(0, 0), (0, 300), (100, 300), (100, 0)],
    TubeShape.SLIM: [(0, 0), (0, 300), (50, 300), (50, 0)],
    TubeShape.ZIGZAG: [
        (0, 0), (0, 50), (-20, 100), (20, 200), (0, 250), (0, 300),
        (50, 300), (50, 250), (70, 200), (30, 100), (50, 50), (50, 0),
    ],
}


@dataclass(eq=False)
class Tube:
    """
    Geometry and fluid state of one tube.

    Geometry is given by the local `outline`, the world position of the
    outline's bounding-box centre (`center`) and a clockwise rotation `angle`
    in degrees. A new tube is empty: no liquid, full of air at ambient pressure.
    """
    outline: npt.NDArray[np.float64]
    center: Point = field(default_factory=lambda: Point(config.CANVAS_WIDTH / 2, config.CANVAS_HEIGHT / 2))
    angle: float = 0.0
    name: str = ""

    depth: float = 0.0
    volume_fraction: float = 0.0
    air_fraction: float = 1.0

    def __post_init__(self) -> None:
        self.outline = np.asarray(self.outline, dtype=float)
        if self.outline.ndim != 2 or self.outline.shape[0] < 2 or self.outline.shape[1] != 2:
            raise ValueError(f"Tube outline must be an (N, 2) array with N >= 2, got shape {self.outline.shape}")
        self.angle = normalize_angle(self.angle)
        if not self.name:
            self.name = f"Tube {next(_tube_ids)}"

    @classmethod
    def from_shape(cls, shape: TubeShape | str, center: Point | None = None, angle: float = 0.0) -> Tube:
        try:
            shape = TubeShape(shape)
        except ValueError:
            raise ValueError(f"Unknown tube shape: {shape}")
        tube = cls(outline=np.array(TUBE_OUTLINES[shape], dtype=float), angle=angle)
        if center is not None:
            tube.center = center
        return tube

    # ------------------------------------------------------------------
    # Input layer (drag / rotate)
    # ------------------------------------------------------------------
    def move_to(self, x: float, y: float) -> None:
        self.center = Point(x, y)

    def move_by(self, dx: float, dy: float) -> None:
        self.center = self.center + Vector(dx, dy)

    def rotate_to(self, angle: float) -> None:
        self.angle = normalize_angle(angle)

    # ------------------------------------------------------------------
    # Geometry
    # ------------------------------------------------------------------
    @property
    def path_offset(self) -> npt.NDArray[np.float64]:
        """Centre of the outline's own bounding box, in local coordinates."""
        return (self.outline.min(axis=0) + self.outline.max(axis=0)) / 2.0

    def to_global(self, local_points: npt.ArrayLike) -> npt.NDArray[np.float64]:
        """Map (N, 2) local outline points into the canvas frame."""
        relative = np.asarray(local_points, dtype=float) - self.path_offset
        rotated = relative @ rotation_matrix(math.radians(self.angle)).T
        return rotated + self.center.to_array()

    def global_points(self) -> npt.NDArray[np.float64]:
        return self.to_global(self.outline)

    def bounding_rect(self) -> BoundingRect:
        return BoundingRect.from_points(self.global_points())

    @property
    def top(self) -> float:
        return self.bounding_rect().top

    @property
    def height(self) -> float:
        return self.bounding_rect().height

    def global_opening(self) -> tuple[Point, Point]:
        """The two mouths in the canvas frame."""
        ends = self.to_global(self.outline[[0, -1]])
        return Point.from_array(ends[0]), Point.from_array(ends[1])

    def global_depth(self) -> float:
        """Canvas Y of the liquid surface inside the tube."""
        rect = self.bounding_rect()
        return rect.top + rect.height - self.depth

    def is_upside_down(self, angle_threshold: float = config.ANGLE_THRESHOLD) -> bool:
        return abs(self.angle - 180.0) < angle_threshold

    def contains(self, x: float, y: float) -> bool:
        """Hit test against the outline closed across its mouths."""
        return Path(self.global_points(), closed=False).contains_point((x, y))

    # ------------------------------------------------------------------
    # Fluid state
    # ------------------------------------------------------------------
    def set_fluid_state(self, depth: float, volume_fraction: float, air_fraction: float) -> None:
        self.depth = depth
        self.volume_fraction = volume_fraction
        self.air_fraction = air_fraction

    def empty(self) -> None:
        self.set_fluid_state(0.0, 0.0, 1.0)

    def fill(self) -> None:
        self.set_fluid_state(self.height, 1.0, 0.0)


def normalize_angle(angle: float) -> float:
    """Map any angle in degrees into [0, 360)."""
    return float(angle) % 360.0
