"""
Application Initialization
==========================
Headless demonstration of the barometer simulator.

Why is this file needed?
------------------------
It acts as the "Dependency Injection" root. It:
1. Configures logging.
2. Builds the Environment and the Simulation.
3. Plays the role of the input layer: it adds tubes, drags and rotates them
   and steps the simulation, logging the fluid state after every move.
4. Hands the final scene to the matplotlib renderer.

The scripted scene is Torricelli's experiment: a tube is filled under the
mercury surface, turned upside down and raised, leaving a column held up by
the atmosphere.
"""
import logging
import os

from barometer.config import DEFAULT_LIQUIDS_PATH
from barometer.controller.probe import format_pressure
from barometer.controller.simulation import Simulation
from barometer.logging_config import setup_logging
from barometer.model.environment import AltitudePreset
from barometer.model.geometry_primitives import Vector
from barometer.model.liquids import LiquidKind, LiquidLibrary
from barometer.model.tube import TubeShape

logger = logging.getLogger(__name__)


def run_torricelli(simulation: Simulation) -> None:
    env = simulation.environment
    tube = simulation.add_tube(TubeShape.SLIM, center=(300.0, 650.0))

    # 1. Submerge upright so it fills.
    simulation.step()
    logger.info(f"Submerged: volume={tube.volume_fraction:.3f}")

    # 2. Flip it over under the surface.
    simulation.rotate_tube(tube, 180.0)
    simulation.step()

    # 3. Raise it until the mouth is just below the basin surface.
    while tube.global_opening()[0].y > env.reference_level + 10.0:
        if simulation.drag(tube.center, tube.center + Vector(0.0, -10.0)) is None:
            break
        simulation.step()

    column = (env.reference_level - tube.global_depth()) / env.pixels_per_metre
    logger.info(f"Column height above the basin: {column:.3f} m")

    reading = simulation.measure(tube.center.x, tube.top + 5.0)
    logger.info(f"Pressure above the column: {format_pressure(reading.pressure)}")


def main(show_plot: bool = True) -> None:
    setup_logging()

    simulation = Simulation()
    simulation.toggle_measurement()

    run_torricelli(simulation)

    # Same tube on a mountain: the column drops.
    simulation.select_altitude(AltitudePreset.TEN_KM)
    simulation.step()

    if os.path.exists(DEFAULT_LIQUIDS_PATH):
        library = LiquidLibrary.from_file(DEFAULT_LIQUIDS_PATH)
        logger.info(f"Available liquids: {', '.join(library.get_names())}")
        glycerine = library.get_liquid("Glycerine")
        if glycerine is not None:
            simulation.use_liquid(glycerine)
            simulation.step()
            logger.info(f"Internal surface in {glycerine.name}: y={simulation.tubes[0].global_depth():.1f}")

    simulation.select_altitude(AltitudePreset.SEA_LEVEL)
    simulation.select_liquid(LiquidKind.MERCURY)
    simulation.step()

    if show_plot:
        from barometer.view.renderer import plot_scene
        tube = simulation.tubes[0]
        plot_scene(simulation, probe=(tube.center.x, tube.top + 5.0))


if __name__ == "__main__":
    main()
