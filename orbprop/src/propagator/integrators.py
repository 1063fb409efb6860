"""
Runge-Kutta integration schemes.

Every scheme exposes ``step(fun, t, y, h) -> (y_new, error)``. ``error`` is
the scheme's local error estimate (None for fixed-step schemes) and is only
interpreted by the same scheme's ``error_norm``, so the driver loop in
``propagator.py`` stays scheme agnostic.
"""
import numpy as np
from scipy.integrate import DOP853

from orbprop.src.errors import UnsupportedSolver
from orbprop.src.model.text_enum import TextEnum


class OdeSolver(TextEnum):
    RUNGE_KUTTA_4 = "RungeKutta4"
    DORMAND_PRINCE_5 = "DormandPrince5"
    DORMAND_PRINCE_853 = "DormandPrince853"


def rms_norm(x):
    return np.sqrt(np.mean(x**2))


class RungeKutta4:
    """Classic fourth-order Runge-Kutta, fixed step, no error estimate."""

    name = "RK4"
    order = 4
    error_estimator_order = None
    adaptive = False

    def step(self, fun, t, y, h):
        k1 = fun(t, y)
        k2 = fun(t + h/2, y + h/2 * k1)
        k3 = fun(t + h/2, y + h/2 * k2)
        k4 = fun(t + h, y + h * k3)
        return y + h/6 * (k1 + 2*k2 + 2*k3 + k4), None

    def error_norm(self, error, scale):
        return 0.0


class EmbeddedRungeKutta:
    """
    Explicit embedded Runge-Kutta pair.

    Subclasses provide the tableau: ``A`` (n_stages x n_stages), ``B`` and
    ``C`` (n_stages) and the error weights ``E`` (n_stages + 1). The extra
    stage is f(t + h, y_new), as in first-same-as-last pairs.
    """

    name = None
    order = None
    error_estimator_order = None
    adaptive = True

    A = None
    B = None
    C = None
    E = None

    def _stages(self, fun, t, y, h):
        n_stages = len(self.B)
        K = np.empty((n_stages + 1, y.size))
        K[0] = fun(t, y)
        for s in range(1, n_stages):
            dy = h * (K[:s].T @ self.A[s, :s])
            K[s] = fun(t + self.C[s] * h, y + dy)

        y_new = y + h * (K[:-1].T @ self.B)
        K[-1] = fun(t + h, y_new)
        return y_new, K

    def step(self, fun, t, y, h):
        y_new, K = self._stages(fun, t, y, h)
        return y_new, h * (K.T @ self.E)

    def error_norm(self, error, scale):
        return rms_norm(error / scale)


# Dormand–Prince 5(4) coefficients (7 stages)
# From: https://en.wikipedia.org/wiki/Dormand–Prince_method
_DP5_A = [
    [],
    [1/5],
    [3/40, 9/40],
    [44/45, -56/15, 32/9],
    [19372/6561, -25360/2187, 64448/6561, -212/729],
    [9017/3168, -355/33, 46732/5247, 49/176, -5103/18656],
    [35/384, 0, 500/1113, 125/192, -2187/6784, 11/84]
]

_DP5_B = [35/384, 0, 500/1113, 125/192, -2187/6784, 11/84, 0]  # 5th order
_DP5_B_HAT = [5179/57600, 0, 7571/16695, 393/640, -92097/339200, 187/2100, 1/40]  # 4th order

_DP5_C = [0, 1/5, 3/10, 4/5, 8/9, 1, 1]


def _lower_triangular(rows, size):
    A = np.zeros((size, size))
    for i, row in enumerate(rows[:size]):
        A[i, :len(row)] = row
    return A


class DormandPrince5(EmbeddedRungeKutta):
    """Dormand–Prince 5(4); the seventh stage is the FSAL evaluation at y_new."""

    name = "DOPRI5"
    order = 5
    error_estimator_order = 4

    A = _lower_triangular(_DP5_A, 6)
    B = np.array(_DP5_B[:6])
    C = np.array(_DP5_C[:6])
    E = np.array(_DP5_B) - np.array(_DP5_B_HAT)


class DormandPrince853(EmbeddedRungeKutta):
    """
    Dormand–Prince 8(5,3) with Hairer's blended error estimate.

    Tableau from scipy's DOP853 (Hairer, Norsett & Wanner).
    """

    name = "DOP853"
    order = 8
    error_estimator_order = 7

    A = DOP853.A
    B = DOP853.B
    C = DOP853.C
    E3 = DOP853.E3
    E5 = DOP853.E5

    def step(self, fun, t, y, h):
        y_new, K = self._stages(fun, t, y, h)
        return y_new, (h * (K.T @ self.E5), h * (K.T @ self.E3))

    def error_norm(self, error, scale):
        err5, err3 = error
        err5_norm_2 = np.sum((err5 / scale)**2)
        err3_norm_2 = np.sum((err3 / scale)**2)
        if err5_norm_2 == 0 and err3_norm_2 == 0:
            return 0.0
        denom = err5_norm_2 + 0.01 * err3_norm_2
        return err5_norm_2 / np.sqrt(denom * scale.size)


INTEGRATORS = {
    OdeSolver.RUNGE_KUTTA_4: RungeKutta4,
    OdeSolver.DORMAND_PRINCE_5: DormandPrince5,
    OdeSolver.DORMAND_PRINCE_853: DormandPrince853,
}


def get_integrator(solver):
    """Fresh integration scheme for an OdeSolver kind."""
    try:
        scheme = INTEGRATORS[solver]
    except (KeyError, TypeError):
        raise UnsupportedSolver(f"No integration scheme for ODE solver {solver!r}") from None
    return scheme()
