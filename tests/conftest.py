"""
Pytest Configuration and Fixtures
=================================

Shared fixtures for the orbprop tests.
"""
import logging

import matplotlib
matplotlib.use("Agg")

import numpy as np
import pytest

from orbprop.src.almanac.constants import MU_EARTH
from orbprop.src.model.mission import KeplerElements


@pytest.fixture
def mu():
    """Earth gravitational parameter [m^3/s^2]."""
    return MU_EARTH


@pytest.fixture
def iss_elements():
    """ISS osculating elements from JPL Horizons."""
    return KeplerElements(
        semi_major_axis             = 6.791301224674748e6,
        eccentricity                = 8.510618198049622e-4,
        inclination                 = np.radians(4.949314343620572e1),
        longitude_of_ascending_node = np.radians(9.440099680297747e1),
        argument_of_periapsis       = np.radians(8.122131421322101e1),
        true_anomaly                = np.radians(3.244321752988205e2),
    )


@pytest.fixture
def iss_state():
    """Horizons state matching ``iss_elements`` ([m], [m/s])."""
    position = np.array([-3.507115480698001e6, 4.487914768092333e6, 3.690078020656149e6])
    velocity = np.array([-3.047824659988581e3, -5.735901699645484e3, 4.072387230323159e3])
    return position, velocity


@pytest.fixture
def leo_circular_elements():
    """Circular equatorial LEO at 7000 km radius."""
    return KeplerElements(semi_major_axis=7.0e6)


@pytest.fixture
def eccentric_elements():
    """Inclined eccentric orbit with all angles non-zero."""
    return KeplerElements(
        semi_major_axis             = 2.4e7,
        eccentricity                = 0.7,
        inclination                 = np.radians(63.4),
        longitude_of_ascending_node = np.radians(210.0),
        argument_of_periapsis       = np.radians(270.0),
        true_anomaly                = np.radians(40.0),
    )


@pytest.fixture
def restore_root_logger():
    """Undo handler/level changes made to the root logger by a test."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)
