"""
Environment (Ambient Conditions)
================================
This module defines the shared ambient conditions every tube is solved against.

Why is this file needed?
------------------------
1. Single source of truth: atmospheric pressure, gravity, the active liquid,
   the basin's free-surface level and the drawing scale live in one object
   that is passed explicitly to the updater and the probe.
2. Presets: altitude and scale selections are translated into pressure and
   pixels-per-metre here, so input layers only have to call one method.

Classes:
    Tolerances: Snapping thresholds used by the updater and the probe.
    Environment: The ambient state container.
    AltitudePreset: Selectable altitudes.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
import logging

from barometer import config
from barometer.model.liquids import LiquidKind, LiquidType, builtin_liquid

logger = logging.getLogger(__name__)

# Physical constants
ATM = 101325.0       # Pa, sea level standard atmospheric pressure
T0 = 288.15          # K, sea level standard temperature
G = 9.80665          # m/s², standard gravity
R = 8.31447          # J/(mol·K), ideal gas constant
L = 0.0065           # K/m, temperature lapse rate
M = 0.0289644        # kg/mol, molar mass of dry air
RHO_AIR = 1.2754     # kg/m³, density of air at STP
ALTITUDE_LIMIT = T0 / L  # m, the linear temperature profile reaches 0 K here

SCALE_PRESETS: tuple[float, ...] = (20.0, 50.0, 100.0, 200.0)


class AltitudePreset(Enum):
    """Selectable altitudes in metres above sea level."""
    SEA_LEVEL = 0.0
    ONE_KM = 1000.0
    TEN_KM = 10000.0

    @property
    def label(self) -> str:
        return {
            AltitudePreset.SEA_LEVEL: "Sea Level",
            AltitudePreset.ONE_KM: "1 km Above Sea",
            AltitudePreset.TEN_KM: "10 km Above Sea",
        }[self]


@dataclass
class Tolerances:
    threshold: float = config.THRESHOLD
    angle_threshold: float = config.ANGLE_THRESHOLD
    pixel_threshold: float = config.PIXEL_THRESHOLD


@dataclass
class Environment:
    """
    Ambient conditions shared by all tubes.
    Mutated between ticks by configuration actions, read-only during a tick.
    """
    ambient_pressure: float = ATM
    gravity: float = G
    liquid: LiquidType = field(default_factory=lambda: builtin_liquid(LiquidKind.MERCURY))
    reference_level: float = config.DEFAULT_LEVEL
    pixels_per_metre: float = config.DEFAULT_PIXELS_PER_METRE
    tolerances: Tolerances = field(default_factory=Tolerances)

    def __post_init__(self) -> None:
        _require_positive("ambient_pressure", self.ambient_pressure)
        _require_positive("gravity", self.gravity)
        _require_positive("pixels_per_metre", self.pixels_per_metre)

    @property
    def liquid_density(self) -> float:
        return self.liquid.density

    @property
    def specific_weight(self) -> float:
        """ρ·g of the active liquid, in Pa per metre of head."""
        return self.liquid.density * self.gravity

    def to_metres(self, pixels: float) -> float:
        return pixels / self.pixels_per_metre

    def hydrostatic_pressure(self, y: float, surface_y: float) -> float:
        """Pressure at canvas height `y` under a free surface at `surface_y` open to the atmosphere."""
        return self.ambient_pressure + self.to_metres(y - surface_y) * self.specific_weight

    def set_liquid(self, liquid: LiquidType) -> None:
        self.liquid = liquid
        logger.info(f"Liquid set to {liquid.name} ({liquid.density:g} kg/m³)")

    def set_custom_liquid(self, density: float, color: str, name: str = "Custom") -> None:
        self.set_liquid(LiquidType(name=name, color=color, density=density))

    def set_ambient_pressure(self, pressure: float) -> None:
        _require_positive("ambient_pressure", pressure)
        self.ambient_pressure = pressure
        logger.info(f"Ambient pressure set to {pressure:.1f} Pa")

    def set_scale(self, pixels_per_metre: float) -> None:
        _require_positive("pixels_per_metre", pixels_per_metre)
        self.pixels_per_metre = pixels_per_metre
        logger.info(f"Scale set to 1 m = {pixels_per_metre:g} pixels")

    def pressure_at_altitude(self, altitude: float) -> float:
        """
        International barometric formula.

        Args:
            altitude: Height above sea level in metres.

        Returns:
            Atmospheric pressure in Pa, using this environment's gravity.

        Raises:
            ValueError: At or above the altitude where the model's temperature reaches 0 K.
        """
        if altitude >= ALTITUDE_LIMIT:
            raise ValueError(f"Altitude must be below {ALTITUDE_LIMIT:.0f} m, got {altitude}")
        return ATM * (1.0 - L * altitude / T0) ** (self.gravity * M / (R * L))

    def simple_pressure_at_altitude(self, altitude: float) -> float:
        """Linear approximation assuming a uniform air column of density RHO_AIR."""
        return ATM - altitude * RHO_AIR * self.gravity

    def set_altitude(self, altitude: float) -> None:
        self.set_ambient_pressure(self.pressure_at_altitude(altitude))

    def set_altitude_preset(self, preset: AltitudePreset) -> None:
        logger.info(f"Altitude preset: {preset.label}")
        self.set_altitude(preset.value)


def pressure_at_altitude(altitude: float, environment: Environment) -> float:
    return environment.pressure_at_altitude(altitude)


def _require_positive(name: str, value: float) -> None:
    if not value > 0.0:
        raise ValueError(f"{name} must be positive, got {value}")
