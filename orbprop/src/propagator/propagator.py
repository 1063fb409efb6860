"""
Two-body orbit propagation.

``propagate`` turns a Mission into the sequence of states accepted by an
adaptive (or fixed-step) Runge-Kutta integration of the two-body equations
of motion. Failures abort the whole propagation: no partial trajectory is
ever returned.
"""
from dataclasses import dataclass
from typing import NamedTuple

import numpy as np

from orbprop.src.almanac.bodies import DEFAULT_BODIES, get_body
from orbprop.src.almanac.constants import (
    ATOL, INITIAL_STEP, MAX_FACTOR, MAX_STEPS, MIN_FACTOR, MIN_STEP, RTOL, SAFETY,
)
from orbprop.src.calc.kepler import to_state_vector
from orbprop.src.errors import IntegrationFailure
from orbprop.src.logging_config import get_logger
from orbprop.src.model.mission import CoordinateSystem, StateVector
from orbprop.src.propagator.integrators import OdeSolver, get_integrator
from orbprop.src.propagator.two_body import TwoBodyDynamics

logger = get_logger(__name__)


@dataclass(frozen=True)
class PropagatorSettings:
    rtol: float = RTOL
    atol: float = ATOL
    initial_step: float = INITIAL_STEP  # s, also the fixed step of non-adaptive schemes
    max_steps: int = MAX_STEPS          # attempted steps, accepted and rejected
    min_step: float = MIN_STEP          # s
    max_step: float = np.inf            # s
    safety: float = SAFETY
    min_factor: float = MIN_FACTOR
    max_factor: float = MAX_FACTOR


class IntegrationResult(NamedTuple):
    times: np.ndarray
    states: np.ndarray
    rejected_steps: int


@dataclass(frozen=True, eq=False)
class Trajectory:
    """
    Accepted integration points of one propagation.

    Behaves as a sequence of StateVector; ``times`` and ``states`` hold the
    raw (N,) and (N, 6) arrays.
    """
    times: np.ndarray
    states: np.ndarray
    mu: float
    ode_solver: OdeSolver
    coordinate_system: CoordinateSystem = CoordinateSystem.EARTH_CENTERED_INERTIAL
    rejected_steps: int = 0

    def __len__(self):
        return len(self.times)

    def __getitem__(self, index):
        if isinstance(index, slice):
            return [StateVector.from_array(y) for y in self.states[index]]
        return StateVector.from_array(self.states[index])

    def __iter__(self):
        for y in self.states:
            yield StateVector.from_array(y)

    @property
    def positions(self):
        return self.states[:, :3]

    @property
    def velocities(self):
        return self.states[:, 3:]

    @property
    def final(self):
        return self[-1]


def _failure(message):
    logger.error(message)
    return IntegrationFailure(message)


def _finite_rhs(fun):
    def rhs(t, y):
        dy = fun(t, y)
        if not np.all(np.isfinite(dy)):
            raise _failure(f"Non-finite derivative at t={t}: {dy}")
        return dy
    return rhs


def integrate(fun, t0, y0, t_final, scheme, settings=None):
    """
    Integrate dy/dt = fun(t, y) from t0 to t_final with ``scheme``.

    Adaptive schemes control the step with the scaled RMS error
    (atol + rtol * max(|y|, |y_new|)); fixed-step schemes take steps of
    ``settings.initial_step``. The last step lands exactly on t_final and a
    negative span integrates backward.

    Returns every accepted point, including (t0, y0).
    """
    settings = settings or PropagatorSettings()
    if not (np.isfinite(t0) and np.isfinite(t_final)):
        raise _failure(f"Non-finite integration span [{t0}, {t_final}]")

    t = float(t0)
    y = np.array(y0, dtype=float)
    direction = 1.0 if t_final >= t0 else -1.0

    t_vals = [t]
    y_vals = [y.copy()]

    rhs = _finite_rhs(fun)
    h = min(abs(settings.initial_step), settings.max_step)
    n_steps = 0
    n_rejected = 0

    while direction * (t_final - t) > 0:
        if n_steps >= settings.max_steps:
            raise _failure(
                f"Step budget of {settings.max_steps} exhausted at t={t} before reaching {t_final}"
            )
        min_step = max(settings.min_step, 10 * np.spacing(abs(t)))
        if h < min_step:
            raise _failure(f"Step size underflow at t={t}: h={h} < {min_step}")

        # Land exactly on the final time
        if h >= abs(t_final - t):
            h = abs(t_final - t)
            t_new = t_final
        else:
            t_new = t + direction * h

        y_new, error = scheme.step(rhs, t, y, t_new - t)
        n_steps += 1
        if not np.all(np.isfinite(y_new)):
            raise _failure(f"Non-finite state at t={t_new}: {y_new}")

        if not scheme.adaptive:
            t, y = t_new, y_new
            t_vals.append(t)
            y_vals.append(y.copy())
            continue

        scale = settings.atol + settings.rtol * np.maximum(np.abs(y), np.abs(y_new))
        eps = scheme.error_norm(error, scale)
        if not np.isfinite(eps):
            raise _failure(f"Non-finite error estimate at t={t}")

        if eps == 0:
            factor = settings.max_factor
        else:
            factor = min(settings.max_factor,
                         max(settings.min_factor,
                             settings.safety * eps ** (-1 / (scheme.error_estimator_order + 1))))

        if eps <= 1.0:
            # Accept step
            t, y = t_new, y_new
            t_vals.append(t)
            y_vals.append(y.copy())
            h = min(h * factor, settings.max_step)
        else:
            n_rejected += 1
            h *= min(1.0, factor)

    return IntegrationResult(np.array(t_vals), np.array(y_vals), n_rejected)


def propagate(mission, bodies=DEFAULT_BODIES, settings=None):
    """
    Propagate a mission's orbit over [epoch, epoch + duration].

    Raises UnknownBody, InvalidOrbitGeometry or UnsupportedSolver before any
    integration work, and IntegrationFailure or SingularState if the
    integration itself cannot complete.
    """
    orbit = mission.orbit
    body = get_body(orbit.central_body, bodies)
    position, velocity = to_state_vector(orbit.kepler_elements, body.mu)
    scheme = get_integrator(orbit.ode_solver)

    if orbit.coordinate_system != CoordinateSystem.EARTH_CENTERED_INERTIAL:
        logger.warning("%s requested; propagating in %s", orbit.coordinate_system,
                       CoordinateSystem.EARTH_CENTERED_INERTIAL)

    t0 = mission.epoch
    t_final = mission.epoch + mission.duration
    y0 = np.concatenate([position, velocity])
    logger.debug("Propagating %s around %s (mu=%.6e) from t=%s to t=%s with %s",
                 orbit.kepler_elements, orbit.central_body, body.mu, t0, t_final, scheme.name)

    result = integrate(TwoBodyDynamics(body.mu), t0, y0, t_final, scheme, settings)

    logger.debug("Accepted %d steps, rejected %d", len(result.times) - 1, result.rejected_steps)
    return Trajectory(
        times=result.times,
        states=result.states,
        mu=body.mu,
        ode_solver=orbit.ode_solver,
        rejected_steps=result.rejected_steps,
    )
