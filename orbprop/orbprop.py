"""
Propagate an ISS-like orbit for one period and report closure and energy drift.

Run with:
    python -m orbprop.orbprop
"""
import numpy as np

from orbprop.src.almanac.bodies import CentralBody
from orbprop.src.almanac.constants import MU_EARTH
from orbprop.src.calc.kepler import orbital_period, specific_energy
from orbprop.src.logging_config import configure_logging, get_logger
from orbprop.src.model.mission import CoordinateSystem, KeplerElements, Mission, Orbit
from orbprop.src.propagator.integrators import OdeSolver
from orbprop.src.propagator.propagator import propagate

logger = get_logger(__name__)


# Example: ISS-like orbit (JPL Horizons osculating elements)
elements = KeplerElements(
    semi_major_axis=6.791301224674748e6,
    eccentricity=8.510618198049622e-4,
    inclination=np.radians(4.949314343620572e1),
    longitude_of_ascending_node=np.radians(9.440099680297747e1),
    argument_of_periapsis=np.radians(8.122131421322101e1),
    true_anomaly=np.radians(3.244321752988205e2),
)


def main(plot=False):
    configure_logging()

    mission = Mission(
        orbit=Orbit(
            kepler_elements=elements,
            central_body=CentralBody.EARTH,
            coordinate_system=CoordinateSystem.EARTH_CENTERED_INERTIAL,
            ode_solver=OdeSolver.DORMAND_PRINCE_5,
        ),
        epoch=0.0,
        duration=orbital_period(elements.semi_major_axis, MU_EARTH),
    )
    trajectory = propagate(mission)

    start, end = trajectory[0], trajectory.final
    energy_0 = specific_energy(start.position, start.velocity, trajectory.mu)
    energy_1 = specific_energy(end.position, end.velocity, trajectory.mu)

    logger.info("Completed %d adaptive steps (%d rejected).", len(trajectory) - 1, trajectory.rejected_steps)
    logger.info("Position [m]: %s", end.position)
    logger.info("Velocity [m/s]: %s", end.velocity)
    logger.info("Closure error after one period: %.3f m", np.linalg.norm(end.position - start.position))
    logger.info("Relative energy error: %.2e", abs((energy_1 - energy_0) / energy_0))

    if plot:
        import matplotlib.pyplot as plt
        from orbprop.src.viz.trajectory import plot_trajectory

        plot_trajectory(trajectory)
        plt.show()

    return trajectory


if __name__ == "__main__":
    main(plot=True)
