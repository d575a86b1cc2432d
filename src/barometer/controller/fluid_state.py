"""
Fluid State Updater
===================
Recomputes the liquid column inside a tube for the current instant.

Every tick each tube is classified from scratch into one of three regimes:

1. LIQUID_CONSERVED: both mouths are above the basin level and above the
   tube's own liquid surface. The liquid volume cannot change, only the depth
   is re-derived from the preserved volume fraction.
2. AIR_CONSERVED: both mouths are below the basin level and either below the
   internal surface or the tube is upside down. The trapped air can neither
   escape nor be replenished, so the new depth follows from Boyle's law.
3. OPEN: anything else. The internal surface simply follows the basin level,
   limited by the mouths, and the result is snapped to empty/full near the
   ends. With both mouths submerged the trapped air can only shrink; this is
   a modelling simplification, not a derived law.

The only memory carried between ticks is `volume_fraction` and
`air_fraction` on the tube record.
"""
from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING, Optional
import logging
import math

from barometer.utils import clamp

if TYPE_CHECKING:
    from barometer.model.environment import Environment
    from barometer.model.tube import Tube

logger = logging.getLogger(__name__)


class Regime(StrEnum):
    LIQUID_CONSERVED = "liquid_conserved"
    AIR_CONSERVED = "air_conserved"
    OPEN = "open"


def classify_tube(tube: Tube, environment: Environment) -> Regime:
    """Pick the conservation regime from the mouth positions."""
    first, last = tube.global_opening()
    level = environment.reference_level
    global_depth = tube.global_depth()

    opening_above_level = first.y <= level and last.y <= level
    opening_above_surface = first.y <= global_depth and last.y <= global_depth
    if opening_above_level and opening_above_surface:
        return Regime.LIQUID_CONSERVED

    opening_below_level = first.y >= level and last.y >= level
    opening_below_surface = first.y >= global_depth and last.y >= global_depth
    upside_down = tube.is_upside_down(environment.tolerances.angle_threshold)
    if opening_below_level and (opening_below_surface or upside_down):
        return Regime.AIR_CONSERVED

    return Regime.OPEN


def smaller_root(a: float, b: float, c: float) -> Optional[float]:
    """Smaller real root of a·x² + b·x + c = 0 (a > 0), or None if there is none."""
    discriminant = b * b - 4.0 * a * c
    if discriminant < 0.0:
        return None
    return (-b - math.sqrt(discriminant)) / (2.0 * a)


def solve_boyle_depth(top: float, height: float, air_fraction: float, environment: Environment) -> float:
    """
    Depth of liquid in a submerged tube holding a fixed amount of trapped air.

    With D the liquid column, H the tube length and T the height of the
    tube bottom below the basin level (all in metres), Boyle's law reads

        (atm + ρg(T - D)) · (H - D) = atm · a0 · H

    which is the quadratic ρg·D² + B·D + C = 0 solved below.

    Args:
        top: Canvas Y of the tube's upper bound (pixels).
        height: Vertical extent of the tube (pixels).
        air_fraction: Trapped air as a fraction of the tube at ambient pressure.
        environment: Ambient conditions.

    Returns:
        Depth in pixels, clamped to [0, height].
    """
    s = environment.pixels_per_metre
    atm = environment.ambient_pressure
    level = environment.reference_level

    a = environment.specific_weight
    b = -(atm + (2.0 * height + top - level) / s * a)
    c = height / s * ((top + height - level) / s * a + atm * (1.0 - air_fraction))

    if a <= 0.0:
        # No hydrostatic head: b·D + c = 0
        depth = -c / b * s
        return clamp(depth, 0.0, height)

    root = smaller_root(a, b, c)
    if root is None:
        vertex = -b / (2.0 * a) * s
        depth = 0.0 if vertex < height / 2.0 else height
        logger.debug(f"Negative discriminant for air fraction {air_fraction:.4f}; depth forced to {depth:.1f}")
        return depth

    return clamp(root * s, 0.0, height)


def update_tube(tube: Tube, environment: Environment) -> Optional[Regime]:
    """
    Overwrite the tube's depth, volume fraction and air fraction.

    Returns:
        The regime that was applied, or None when the tube was skipped
        because its geometry is degenerate.
    """
    rect = tube.bounding_rect()
    top, height = rect.top, rect.height
    if not height > 0.0:
        logger.warning(f"{tube.name}: zero height, fluid state left unchanged")
        return None

    regime = classify_tube(tube, environment)

    if regime == Regime.LIQUID_CONSERVED:
        tube.depth = tube.volume_fraction * height
        tube.air_fraction = 1.0 - tube.volume_fraction

    elif regime == Regime.AIR_CONSERVED:
        # air_fraction is the conserved quantity and stays as it is.
        tube.depth = solve_boyle_depth(top, height, tube.air_fraction, environment)
        tube.volume_fraction = tube.depth / height

    else:
        _update_open_tube(tube, environment, top, height)
        _snap_to_ends(tube, environment.tolerances.threshold)

    logger.debug(
        f"{tube.name}: {regime} depth={tube.depth:.2f} "
        f"volume={tube.volume_fraction:.4f} air={tube.air_fraction:.4f}"
    )
    return regime


def _update_open_tube(tube: Tube, environment: Environment, top: float, height: float) -> None:
    first, last = tube.global_opening()
    upper_opening = min(first.y, last.y)
    lower_opening = max(first.y, last.y)
    level = environment.reference_level
    opening_below_level = first.y >= level and last.y >= level

    if opening_below_level:
        # No fresh air supply: the surface rises to the level or the upper mouth.
        surface = max(level, upper_opening)
    else:
        # Air supply present: the surface cannot rise past the lower mouth.
        surface = min(level, lower_opening)

    tube.depth = _depth_for_surface(surface, top, height)
    tube.volume_fraction = tube.depth / height

    if opening_below_level:
        pressure_at_depth = environment.hydrostatic_pressure(tube.global_depth(), level)
        air_fraction = pressure_at_depth * (1.0 - tube.volume_fraction) / environment.ambient_pressure
        # Air may escape through the mouths but never re-enters.
        tube.air_fraction = clamp(min(tube.air_fraction, air_fraction), 0.0, 1.0)
    else:
        tube.air_fraction = 1.0 - tube.volume_fraction


def _depth_for_surface(surface: float, top: float, height: float) -> float:
    if surface < top:
        return height
    if surface > top + height:
        return 0.0
    return top + height - surface


def _snap_to_ends(tube: Tube, threshold: float) -> None:
    if abs(tube.volume_fraction) < threshold:
        tube.empty()
    if abs(tube.air_fraction) < threshold:
        tube.fill()
