"""
Measurement Probe
=================
Hydrostatic pressure at an arbitrary canvas height, for the measurement overlay.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional
import logging

from barometer import config
from barometer.utils import with_prefix

if TYPE_CHECKING:
    from barometer.model.environment import Environment
    from barometer.model.tube import Tube

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProbeReading:
    """Result of one probe measurement."""
    snapped_y: float
    pressure: float     # Pa
    depth: float        # m of liquid head above the probe, 0 in air
    altitude: float     # m above the reference level


def measure(y: float, environment: Environment, tube: Optional[Tube] = None) -> ProbeReading:
    """
    Measure pressure at canvas height `y`.

    Args:
        y: Canvas Y of the probe.
        environment: Ambient conditions.
        tube: The tube the probe currently hovers over, if any.

    Returns:
        The reading at the snapped probe height.
    """
    level = environment.reference_level
    pixel_threshold = environment.tolerances.pixel_threshold

    snapped_y = y
    if abs(y - level) < pixel_threshold:
        snapped_y = level

    # Outside any tube the basin surface is the reference.
    head_y = snapped_y if snapped_y > level else level
    surface_y = level

    if tube is not None:
        tube_surface = tube.global_depth()
        if abs(y - tube_surface) < pixel_threshold:
            snapped_y = tube_surface

        first, last = tube.global_opening()
        connected = first.y > level or last.y > level
        if connected:
            # The column inside hangs from the basin: above the internal
            # surface the pressure is the one at that surface.
            head_y = snapped_y if snapped_y > tube_surface else tube_surface
        else:
            # Isolated liquid only feels its own column.
            surface_y = tube_surface
            head_y = snapped_y if snapped_y > tube_surface else tube_surface

    pressure = environment.hydrostatic_pressure(head_y, surface_y)
    depth = environment.to_metres(head_y - surface_y)

    if pressure < environment.tolerances.threshold:
        pressure = 0.0

    return ProbeReading(
        snapped_y=snapped_y,
        pressure=pressure,
        depth=depth,
        altitude=environment.to_metres(level - snapped_y),
    )


def probe_pressure(y: float, environment: Environment, tube: Optional[Tube] = None) -> float:
    return measure(y, environment, tube).pressure


def format_pressure(value: float, precision: int = config.PRECISION) -> str:
    """'101 kPa', '1.52 MPa', '500 Pa'."""
    return f"{with_prefix(value, precision)}Pa"
