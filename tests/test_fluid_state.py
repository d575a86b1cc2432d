"""
Tests for the fluid state updater.

Covers regime selection, the Boyle's-law solve for trapped air, the open
regime with its empty/full snapping and the guards against degenerate input.
"""
import math

import numpy as np
import pytest

from barometer.controller.fluid_state import (
    Regime,
    classify_tube,
    smaller_root,
    solve_boyle_depth,
    update_tube,
)
from barometer.model.environment import Environment
from barometer.model.geometry_primitives import Point
from barometer.model.liquids import LiquidKind, builtin_liquid
from barometer.model.tube import Tube, TubeShape


def surface_pressure(tube: Tube, env: Environment) -> float:
    """Pressure of the trapped air = pressure at the internal surface."""
    return env.hydrostatic_pressure(tube.global_depth(), env.reference_level)


def trapped_air_length(tube: Tube, env: Environment) -> float:
    return (tube.height - tube.depth) / env.pixels_per_metre


# ─────────────────────────────────────────────────────────────────────
# Regime (a): liquid conserved
# ─────────────────────────────────────────────────────────────────────

class TestLiquidConserved:

    def test_half_full_tube_above_level(self, plain_tube, water_env):
        plain_tube.set_fluid_state(0.0, 0.5, 0.5)

        assert classify_tube(plain_tube, water_env) == Regime.LIQUID_CONSERVED
        assert update_tube(plain_tube, water_env) == Regime.LIQUID_CONSERVED
        assert plain_tube.depth == pytest.approx(150.0)
        assert plain_tube.air_fraction == pytest.approx(0.5)

    def test_idempotent(self, plain_tube, water_env):
        plain_tube.set_fluid_state(0.0, 0.5, 0.5)
        update_tube(plain_tube, water_env)
        first = plain_tube.depth
        for _ in range(5):
            update_tube(plain_tube, water_env)
        assert plain_tube.depth == first

    def test_volume_preserved_when_rotated_out_of_liquid(self, water_env):
        tube = Tube.from_shape(TubeShape.PLAIN, center=Point(400.0, 150.0), angle=10.0)
        tube.set_fluid_state(0.0, 0.4, 0.6)
        update_tube(tube, water_env)
        assert tube.volume_fraction == pytest.approx(0.4)
        assert tube.depth == pytest.approx(0.4 * tube.height)


# ─────────────────────────────────────────────────────────────────────
# Regime (b): air conserved (Boyle's law)
# ─────────────────────────────────────────────────────────────────────

class TestAirConserved:

    @pytest.fixture
    def inverted_tube(self) -> Tube:
        # Closed end at y=250, mouth at y=550 (150 px under the level).
        return Tube.from_shape(TubeShape.PLAIN, center=Point(400.0, 400.0), angle=180.0)

    def test_sealed_tube_lowered_into_water(self, inverted_tube, water_env):
        assert classify_tube(inverted_tube, water_env) == Regime.AIR_CONSERVED
        update_tube(inverted_tube, water_env)

        assert 0.0 < inverted_tube.depth < inverted_tube.height
        assert inverted_tube.depth == pytest.approx(18.01, abs=0.05)
        assert inverted_tube.volume_fraction == pytest.approx(inverted_tube.depth / inverted_tube.height)

    def test_boyle_product_holds(self, inverted_tube, water_env):
        update_tube(inverted_tube, water_env)

        p_v = surface_pressure(inverted_tube, water_env) * trapped_air_length(inverted_tube, water_env)
        p0_v0 = water_env.ambient_pressure * inverted_tube.air_fraction * inverted_tube.height / water_env.pixels_per_metre
        assert p_v == pytest.approx(p0_v0, rel=1e-9)

    def test_air_amount_carried_over(self, inverted_tube, water_env):
        update_tube(inverted_tube, water_env)
        assert inverted_tube.air_fraction == 1.0

        depth = inverted_tube.depth
        update_tube(inverted_tube, water_env)
        assert inverted_tube.depth == pytest.approx(depth, rel=1e-12)

    def test_deeper_means_more_compression(self, inverted_tube, water_env):
        depths = []
        for y in np.arange(400.0, 601.0, 50.0):
            inverted_tube.move_to(400.0, y)
            update_tube(inverted_tube, water_env)
            depths.append(inverted_tube.depth)
        assert np.all(np.diff(depths) > 0.0)
        assert depths[-1] < inverted_tube.height

    def test_torricelli_column(self, mercury_env):
        tube = Tube.from_shape(TubeShape.SLIM, center=Point(300.0, 650.0))

        # Submerged upright: fills completely.
        assert update_tube(tube, mercury_env) == Regime.OPEN
        assert tube.volume_fraction == 1.0
        assert tube.air_fraction == 0.0

        # Flipped under the surface: still full.
        tube.rotate_to(180.0)
        assert update_tube(tube, mercury_env) == Regime.AIR_CONSERVED
        assert tube.volume_fraction == pytest.approx(1.0)

        # Raised with the mouth 10 px under the surface.
        tube.move_to(300.0, 260.0)
        assert update_tube(tube, mercury_env) == Regime.AIR_CONSERVED

        column = (mercury_env.reference_level - tube.global_depth()) / mercury_env.pixels_per_metre
        expected = mercury_env.ambient_pressure / mercury_env.specific_weight
        assert column == pytest.approx(expected, rel=1e-6)
        assert surface_pressure(tube, mercury_env) == pytest.approx(0.0, abs=1e-6)

    def test_nearly_inverted_tube_traps_air(self, water_env):
        # Tilted 3 degrees: the upper mouth is still above the empty tube's
        # surface, only the upside-down tolerance seals it.
        tube = Tube.from_shape(TubeShape.PLAIN, center=Point(400.0, 450.0), angle=177.0)
        first, last = tube.global_opening()
        assert min(first.y, last.y) == pytest.approx(597.18, abs=0.01)
        assert min(first.y, last.y) < tube.global_depth()
        assert tube.is_upside_down(water_env.tolerances.angle_threshold)

        assert update_tube(tube, water_env) == Regime.AIR_CONSERVED
        assert tube.depth == pytest.approx(24.2, abs=0.1)
        assert tube.air_fraction == 1.0

    def test_tilt_beyond_tolerance_is_open(self, water_env):
        tube = Tube.from_shape(TubeShape.PLAIN, center=Point(400.0, 450.0), angle=170.0)
        assert not tube.is_upside_down(water_env.tolerances.angle_threshold)
        assert classify_tube(tube, water_env) == Regime.OPEN

    def test_column_shorter_at_altitude(self, mercury_env):
        tube = Tube.from_shape(TubeShape.SLIM, center=Point(300.0, 260.0), angle=180.0)
        tube.fill()
        update_tube(tube, mercury_env)
        sea_level = tube.depth

        mercury_env.set_altitude(1000.0)
        update_tube(tube, mercury_env)
        assert tube.depth < sea_level


class TestBoyleSolver:

    def test_smaller_root(self):
        assert smaller_root(1.0, -3.0, 2.0) == pytest.approx(1.0)
        assert smaller_root(1.0, 0.0, 1.0) is None

    def test_negative_discriminant_is_clamped(self, water_env):
        depth = solve_boyle_depth(top=250.0, height=300.0, air_fraction=-10.0, environment=water_env)
        assert math.isfinite(depth)
        assert depth == 300.0

    def test_negative_discriminant_with_vertex_above_middle_empties(self, water_env):
        # Tube far above the basin: the parabola vertex is above the tube's top.
        depth = solve_boyle_depth(top=-3000.0, height=300.0, air_fraction=-2.0, environment=water_env)
        assert depth == 0.0

    def test_no_air_fills_to_boundary(self, water_env):
        # Deep tube, no air: liquid fills it entirely.
        assert solve_boyle_depth(top=500.0, height=50.0, air_fraction=0.0, environment=water_env) == pytest.approx(50.0)

    def test_result_clamped_to_tube(self, water_env):
        depth = solve_boyle_depth(top=0.0, height=300.0, air_fraction=1.0, environment=water_env)
        assert 0.0 <= depth <= 300.0


# ─────────────────────────────────────────────────────────────────────
# Regime (c): open
# ─────────────────────────────────────────────────────────────────────

class TestOpen:

    def test_drag_with_mouth_straddling_level(self, water_env):
        tube = Tube.from_shape(TubeShape.PLAIN, center=Point(400.0, 510.0), angle=30.0)
        level = water_env.reference_level

        volumes = []
        for y in np.arange(510.0, 541.0, 5.0):
            tube.move_to(400.0, y)
            first, last = tube.global_opening()
            assert min(first.y, last.y) < level < max(first.y, last.y)

            assert update_tube(tube, water_env) == Regime.OPEN
            assert tube.global_depth() == pytest.approx(level)
            assert tube.air_fraction == pytest.approx(1.0 - tube.volume_fraction)
            volumes.append(tube.volume_fraction)

        assert np.all(np.diff(volumes) > 0.0)

    def test_drag_fully_under_clamps_at_bound(self, water_env):
        tube = Tube.from_shape(TubeShape.PLAIN, center=Point(400.0, 530.0), angle=30.0)
        update_tube(tube, water_env)

        tube.move_to(400.0, 600.0)
        first, last = tube.global_opening()
        assert min(first.y, last.y) > water_env.reference_level

        assert update_tube(tube, water_env) == Regime.OPEN
        assert tube.depth == pytest.approx(tube.height)
        assert tube.volume_fraction == 1.0
        assert tube.air_fraction == 0.0

    def test_snaps_to_empty(self, water_env):
        # On its side, 1 px of the tube below the level.
        tube = Tube.from_shape(TubeShape.PLAIN, center=Point(400.0, 351.0), angle=90.0)
        update_tube(tube, water_env)
        assert (tube.depth, tube.volume_fraction, tube.air_fraction) == (0.0, 0.0, 1.0)

        update_tube(tube, water_env)
        assert (tube.depth, tube.volume_fraction, tube.air_fraction) == (0.0, 0.0, 1.0)

    def test_snaps_to_full(self, water_env):
        tube = Tube.from_shape(TubeShape.PLAIN, center=Point(400.0, 449.0), angle=90.0)
        update_tube(tube, water_env)
        assert tube.depth == pytest.approx(tube.height)
        assert (tube.volume_fraction, tube.air_fraction) == (1.0, 0.0)

        update_tube(tube, water_env)
        assert (tube.volume_fraction, tube.air_fraction) == (1.0, 0.0)

    def test_air_fraction_never_grows_while_submerged(self, water_env):
        tube = Tube.from_shape(TubeShape.PLAIN, center=Point(400.0, 650.0))
        tube.set_fluid_state(0.0, 0.0, 0.3)
        update_tube(tube, water_env)
        assert tube.air_fraction <= 0.3


# ─────────────────────────────────────────────────────────────────────
# Guards and invariants
# ─────────────────────────────────────────────────────────────────────

class TestGuards:

    def test_zero_height_tube_is_skipped(self, water_env):
        tube = Tube(outline=np.array([[0.0, 0.0], [100.0, 0.0]]), center=Point(400.0, 500.0))
        tube.set_fluid_state(0.0, 0.3, 0.7)

        assert update_tube(tube, water_env) is None
        assert (tube.depth, tube.volume_fraction, tube.air_fraction) == (0.0, 0.3, 0.7)

    @pytest.mark.parametrize("liquid", [LiquidKind.WATER, LiquidKind.MERCURY, LiquidKind.OIL])
    def test_state_stays_in_bounds(self, liquid):
        env = Environment(liquid=builtin_liquid(liquid))
        for shape in TubeShape:
            tube = Tube.from_shape(shape)
            for angle in (0.0, 45.0, 90.0, 135.0, 180.0, 200.0, 270.0):
                tube.rotate_to(angle)
                for y in range(100, 751, 50):
                    tube.move_to(400.0, float(y))
                    update_tube(tube, env)
                    assert -1e-9 <= tube.depth <= tube.height + 1e-9
                    assert 0.0 <= tube.volume_fraction <= 1.0
                    assert 0.0 <= tube.air_fraction <= 1.0
