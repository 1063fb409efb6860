"""
Visualization Tests
===================
"""
import matplotlib.pyplot as plt
import pytest

from orbprop.src.model.mission import Mission, Orbit
from orbprop.src.propagator.integrators import OdeSolver
from orbprop.src.propagator.propagator import propagate
from orbprop.src.viz.trajectory import plot_trajectory, save_trajectory_plot


@pytest.fixture
def trajectory(iss_elements):
    mission = Mission(
        orbit=Orbit(kepler_elements=iss_elements, ode_solver=OdeSolver.DORMAND_PRINCE_5),
        duration=1800.0,
    )
    return propagate(mission)


class TestPlotTrajectory:

    def test_plot_returns_figure_and_axes(self, trajectory):
        fig, ax = plot_trajectory(trajectory)

        trajectory_line = ax.get_lines()[0]
        assert len(trajectory_line.get_xdata()) == len(trajectory)
        assert trajectory_line.get_xdata()[0] == pytest.approx(trajectory.positions[0, 0] / 1e3)
        assert "DormandPrince5" in ax.get_title()
        plt.close(fig)

    def test_plot_on_existing_axes(self, trajectory):
        fig, ax = plt.subplots()
        returned_fig, returned_ax = plot_trajectory(trajectory, ax=ax, title="ISS")

        assert returned_fig is fig
        assert returned_ax is ax
        assert ax.get_title() == "ISS"
        plt.close(fig)

    def test_save_trajectory_plot(self, trajectory, tmp_path):
        path = save_trajectory_plot(trajectory, tmp_path / "iss.png")

        assert path.exists()
        assert path.stat().st_size > 0
