"""
Orbit and mission description.

KeplerElements, StateVector, Orbit and Mission are immutable value objects
built once per propagation request. Lengths are in meters, angles in radians
and times in seconds.
"""
from dataclasses import dataclass, field
from typing import NamedTuple

import numpy as np

from orbprop.src.almanac.bodies import CentralBody
from orbprop.src.errors import InvalidOrbitGeometry
from orbprop.src.model.text_enum import TextEnum
from orbprop.src.propagator.integrators import OdeSolver
from orbprop.src.solver.kepler import mean_to_true_anomaly, true_to_mean_anomaly


class CoordinateSystem(TextEnum):
    EARTH_CENTERED_INERTIAL = "EarthCenteredInertial"
    EARTH_CENTERED_EARTH_FIXED = "EarthCenteredEarthFixed"


class KeplerElements(NamedTuple):
    """
    Classical orbital elements at epoch.

    Attributes:
        semi_major_axis: Semi-major axis (m)
        eccentricity: Eccentricity (dimensionless)
        inclination: Inclination (rad), [0, pi]
        longitude_of_ascending_node: Right ascension of the ascending node (rad)
        argument_of_periapsis: Argument of periapsis (rad)
        true_anomaly: True anomaly at epoch (rad)
    """
    semi_major_axis: float = 1000.0
    eccentricity: float = 0.0
    inclination: float = 0.0
    longitude_of_ascending_node: float = 0.0
    argument_of_periapsis: float = 0.0
    true_anomaly: float = 0.0

    @property
    def semi_latus_rectum(self):
        return self.semi_major_axis * (1.0 - self.eccentricity**2)

    def validate(self):
        """Raise InvalidOrbitGeometry unless the elements describe a real conic position."""
        if not all(np.isfinite(value) for value in self):
            raise InvalidOrbitGeometry(f"Kepler elements must be finite: {self}")
        if self.eccentricity < 0.0:
            raise InvalidOrbitGeometry(f"Eccentricity must be non-negative, got {self.eccentricity}")
        if not self.semi_latus_rectum > 0.0:
            raise InvalidOrbitGeometry(
                f"Semi-latus rectum a*(1 - e^2) must be positive, got {self.semi_latus_rectum} "
                f"(a={self.semi_major_axis}, e={self.eccentricity})"
            )
        # Hyperbolic true anomaly past the asymptote
        if not 1.0 + self.eccentricity * np.cos(self.true_anomaly) > 0.0:
            raise InvalidOrbitGeometry(
                f"True anomaly {self.true_anomaly} is unreachable for eccentricity {self.eccentricity}"
            )
        return self

    @classmethod
    def from_mean_anomaly(cls, semi_major_axis, eccentricity, inclination,
                          longitude_of_ascending_node, argument_of_periapsis, mean_anomaly):
        """Elements with the true anomaly solved from a mean anomaly (elliptical orbits only)."""
        nu = mean_to_true_anomaly(mean_anomaly, eccentricity)
        return cls(semi_major_axis, eccentricity, inclination,
                   longitude_of_ascending_node, argument_of_periapsis, nu)

    def mean_anomaly(self):
        return true_to_mean_anomaly(self.true_anomaly, self.eccentricity)


class StateVector(NamedTuple):
    position: np.ndarray  # [m]
    velocity: np.ndarray  # [m/s]

    def as_array(self):
        return np.concatenate([self.position, self.velocity])

    @classmethod
    def from_array(cls, y):
        y = np.asarray(y, dtype=float)
        return cls(y[:3].copy(), y[3:6].copy())


@dataclass(frozen=True)
class Orbit:
    kepler_elements: KeplerElements = field(default_factory=KeplerElements)
    central_body: CentralBody = CentralBody.EARTH
    coordinate_system: CoordinateSystem = CoordinateSystem.EARTH_CENTERED_INERTIAL
    ode_solver: OdeSolver = OdeSolver.RUNGE_KUTTA_4


@dataclass(frozen=True)
class Mission:
    orbit: Orbit = field(default_factory=Orbit)
    epoch: float = 0.0     # s
    duration: float = 0.0  # s
