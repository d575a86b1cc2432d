"""
Simulation Session
==================
Owns the environment and the tube list, and exposes the actions an input
layer can trigger.

Why is this file needed?
------------------------
1. Orchestration: `step()` is the per-tick entry point that runs the fluid
   state updater on every tube.
2. Explicit actions: Instead of UI callbacks mutating globals, every user
   action (select liquid, change altitude, add/delete tube, submit a guess)
   is a method call on this object.
3. Puzzles: It keeps the mystery liquid/altitude in sync with the environment.
"""
from __future__ import annotations

from typing import Dict, List, Optional
import logging

import numpy as np

from barometer.controller.fluid_state import Regime, update_tube
from barometer.controller.mystery import ALTITUDE, DENSITY, GuessResult, MysteryPuzzle
from barometer.controller.probe import ProbeReading, measure
from barometer.model.environment import SCALE_PRESETS, AltitudePreset, Environment
from barometer.model.geometry_primitives import Point
from barometer.model.liquids import LiquidKind, LiquidType, builtin_liquid
from barometer.model.tube import Tube, TubeShape

logger = logging.getLogger(__name__)


class Simulation:
    """
    One barometer scene: environment, tubes, measurement mode and puzzles.
    """
    def __init__(self, environment: Optional[Environment] = None, rng: Optional[np.random.Generator] = None) -> None:
        self.environment = environment if environment is not None else Environment()
        self.tubes: List[Tube] = []
        self.measurement_mode = False

        rng = rng if rng is not None else np.random.default_rng()
        self.density_puzzle = MysteryPuzzle(DENSITY, rng=rng)
        self.altitude_puzzle = MysteryPuzzle(ALTITUDE, rng=rng)
        self.mystery_liquid = builtin_liquid(LiquidKind.MYSTERY)
        self.mystery_liquid.density = self.density_puzzle.target
        self.mystery_liquid_active = False
        self.mystery_altitude_active = False

    # ------------------------------------------------------------------
    # Tubes
    # ------------------------------------------------------------------
    def add_tube(self, shape: TubeShape | str = TubeShape.PLAIN, center: Optional[tuple[float, float]] = None) -> Tube:
        tube = Tube.from_shape(shape)
        if center is not None:
            tube.move_to(*center)
        self.tubes.append(tube)
        logger.info(f"Added {tube.name} ({TubeShape(shape)})")
        return tube

    def remove_tube(self, tube: Tube) -> None:
        if tube in self.tubes:
            self.tubes.remove(tube)
            logger.info(f"Removed {tube.name}")

    def tube_at(self, x: float, y: float) -> Optional[Tube]:
        """Topmost tube under the given canvas point."""
        for tube in reversed(self.tubes):
            if tube.contains(x, y):
                return tube
        return None

    def drag(self, start: Point, end: Point) -> Optional[Tube]:
        """Move the tube grabbed at `start` so the grab point follows to `end`."""
        tube = self.tube_at(start.x, start.y)
        delta = end - start
        if tube is None or delta.magnitude == 0.0:
            return tube
        tube.move_by(delta.x, delta.y)
        return tube

    def rotate_tube(self, tube: Tube, angle: float) -> None:
        tube.rotate_to(angle)
        logger.debug(f"{tube.name} rotated to {tube.angle:g} deg")

    def step(self) -> Dict[Tube, Optional[Regime]]:
        """Run one tick: update every tube against the current environment, keyed by tube."""
        return {tube: update_tube(tube, self.environment) for tube in self.tubes}

    # ------------------------------------------------------------------
    # Configuration actions
    # ------------------------------------------------------------------
    def select_liquid(self, kind: LiquidKind | str) -> None:
        kind = LiquidKind(kind)
        if kind == LiquidKind.MYSTERY:
            self.mystery_liquid_active = True
            self.environment.set_liquid(self.mystery_liquid)
        else:
            self.mystery_liquid_active = False
            self.environment.set_liquid(builtin_liquid(kind))

    def use_liquid(self, liquid: LiquidType) -> None:
        self.mystery_liquid_active = False
        self.environment.set_liquid(liquid)

    def select_altitude(self, preset: AltitudePreset) -> None:
        self.mystery_altitude_active = False
        self.environment.set_altitude_preset(preset)

    def select_mystery_altitude(self) -> None:
        self.mystery_altitude_active = True
        self._apply_mystery_altitude()

    def set_scale(self, pixels_per_metre: float) -> None:
        if pixels_per_metre not in SCALE_PRESETS:
            logger.warning(f"Scale {pixels_per_metre:g} px/m is not one of the presets {SCALE_PRESETS}")
        self.environment.set_scale(pixels_per_metre)

    def toggle_measurement(self) -> bool:
        self.measurement_mode = not self.measurement_mode
        return self.measurement_mode

    # ------------------------------------------------------------------
    # Puzzles
    # ------------------------------------------------------------------
    def check_density_guess(self, text: str) -> GuessResult:
        result = self.density_puzzle.submit(text)
        if result.accepted:
            self.mystery_liquid.density = self.density_puzzle.target
        return result

    def check_altitude_guess(self, text: str) -> GuessResult:
        result = self.altitude_puzzle.submit(text)
        if result.accepted and self.mystery_altitude_active:
            self._apply_mystery_altitude()
        return result

    def _apply_mystery_altitude(self) -> None:
        self.environment.set_ambient_pressure(
            self.environment.simple_pressure_at_altitude(self.altitude_puzzle.target)
        )

    # ------------------------------------------------------------------
    # Measurement
    # ------------------------------------------------------------------
    @property
    def measurement_visible(self) -> bool:
        """Readings are hidden while a puzzle is running."""
        return self.measurement_mode and not (self.mystery_liquid_active or self.mystery_altitude_active)

    def measure(self, x: float, y: float) -> ProbeReading:
        return measure(y, self.environment, self.tube_at(x, y))
