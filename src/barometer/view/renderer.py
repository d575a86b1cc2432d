"""
Scene Renderer (matplotlib)
===========================
Draws a `Simulation` the way the canvas shows it: the basin of liquid below
the reference level, every tube outline, the liquid column inside each tube,
the 1 m scale bar and, optionally, the probe reading.

The renderer only READS tube and environment records; it never changes them.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Optional

import matplotlib.pyplot as plt
from matplotlib.patches import Polygon, Rectangle

from barometer import config
from barometer.controller.probe import format_pressure
from barometer.utils import to_precision

if TYPE_CHECKING:
    from matplotlib.axes import Axes
    from barometer.controller.probe import ProbeReading
    from barometer.controller.simulation import Simulation
    from barometer.model.tube import Tube

AIR_COLOR = (1.0, 1.0, 1.0, 0.8)


class SceneRenderer:
    def __init__(self, width: float = config.CANVAS_WIDTH, height: float = config.CANVAS_HEIGHT) -> None:
        self.width = width
        self.height = height

    def draw(self, simulation: Simulation, ax: Optional[Axes] = None, probe: Optional[tuple[float, float]] = None) -> Axes:
        """
        Render the scene into `ax` (a new figure is created when omitted).

        Args:
            simulation: The scene to draw.
            ax: Target axes.
            probe: Optional (x, y) canvas position of the measurement probe.

        Returns:
            The axes that were drawn into.
        """
        if ax is None:
            _, ax = plt.subplots(figsize=(self.width / 100, self.height / 100))

        env = simulation.environment
        ax.set_xlim(0, self.width)
        ax.set_ylim(self.height, 0)  # canvas Y points down
        ax.set_aspect("equal")
        ax.set_xticks([])
        ax.set_yticks([])

        ax.add_patch(Rectangle(
            (0, env.reference_level), self.width, self.height - env.reference_level,
            facecolor=env.liquid.color, edgecolor="none", zorder=0,
        ))

        for tube in simulation.tubes:
            self._draw_tube(ax, tube, env.liquid.color)

        self._draw_scale(ax, env.reference_level, env.pixels_per_metre)

        if probe is not None and simulation.measurement_mode:
            x, y = probe
            self._draw_probe(ax, x, simulation.measure(x, y), simulation.measurement_visible)

        return ax

    def _draw_tube(self, ax: Axes, tube: Tube, liquid_color: str) -> None:
        points = tube.global_points()
        surface = tube.global_depth()

        air = Polygon(points, closed=True, facecolor=AIR_COLOR, edgecolor="none", zorder=1)
        ax.add_patch(air)
        air.set_clip_path(Rectangle((0, 0), self.width, surface, transform=ax.transData))

        liquid = Polygon(points, closed=True, facecolor=liquid_color, edgecolor="none", zorder=1)
        ax.add_patch(liquid)
        liquid.set_clip_path(Rectangle((0, surface), self.width, self.height - surface, transform=ax.transData))

        # The outline stays open across the mouths.
        ax.add_patch(Polygon(points, closed=False, fill=False, edgecolor="black", lw=config.STROKE / 2, zorder=2))

    def _draw_scale(self, ax: Axes, level: float, pixels_per_metre: float) -> None:
        x = self.width - config.MARGIN
        top = level - pixels_per_metre
        ax.plot([x, x], [top, level], color="grey", lw=1, zorder=3)
        ax.plot([x - 6, x + 6], [top, top], color="grey", lw=1, zorder=3)
        ax.plot([x - 6, x + 6], [level, level], color="grey", lw=1, zorder=3)
        ax.text(x - config.PIXEL_THRESHOLD, level - pixels_per_metre / 2, "1 m", ha="right", va="center", color="grey")

    def _draw_probe(self, ax: Axes, x: float, reading: ProbeReading, show_values: bool) -> None:
        y = reading.snapped_y
        ax.axhline(y, color="red", lw=1, zorder=4)
        ax.text(
            config.MARGIN, y - config.PIXEL_THRESHOLD,
            f"{to_precision(reading.altitude, config.PRECISION)} m", color="red", va="bottom",
        )
        if show_values:
            ax.plot([x], [y], "o", color="blue", zorder=5)
            ax.text(x, y - config.MARGIN, format_pressure(reading.pressure), color="blue", ha="center")


def plot_scene(simulation: Simulation, probe: Optional[tuple[float, float]] = None) -> None:
    """Show the scene in a matplotlib window."""
    plt.rcParams["figure.constrained_layout.use"] = True
    SceneRenderer().draw(simulation, probe=probe)
    plt.show()
