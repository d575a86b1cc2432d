"""Barometer tube simulator."""
from barometer.controller.fluid_state import Regime, classify_tube, solve_boyle_depth, update_tube
from barometer.controller.probe import ProbeReading, format_pressure, measure, probe_pressure
from barometer.controller.simulation import Simulation
from barometer.model.environment import AltitudePreset, Environment, Tolerances, pressure_at_altitude
from barometer.model.liquids import LiquidKind, LiquidLibrary, LiquidType
from barometer.model.tube import Tube, TubeShape

__all__ = [
    "AltitudePreset",
    "Environment",
    "LiquidKind",
    "LiquidLibrary",
    "LiquidType",
    "ProbeReading",
    "Regime",
    "Simulation",
    "Tolerances",
    "Tube",
    "TubeShape",
    "classify_tube",
    "format_pressure",
    "measure",
    "pressure_at_altitude",
    "probe_pressure",
    "solve_boyle_depth",
    "update_tube",
]
