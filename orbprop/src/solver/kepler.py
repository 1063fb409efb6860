import numpy as np

from orbprop.src.almanac.constants import KEPLER_MAX_ITER, KEPLER_TOL
from orbprop.src.errors import IntegrationFailure, InvalidOrbitGeometry


def _check_elliptic(e):
    if not 0.0 <= e < 1.0:
        raise InvalidOrbitGeometry(f"Eccentricity must satisfy 0 <= e < 1 for elliptical orbits, got {e}")


def solve_kepler(M, e, tol=KEPLER_TOL, max_iter=KEPLER_MAX_ITER):
    """
    Solve Kepler's equation M = E - e*sin(E) for the eccentric anomaly.

    Newton iteration, M wrapped to [-pi, pi]. Returns E in the same branch.
    """
    _check_elliptic(e)
    M = np.mod(M + np.pi, 2*np.pi) - np.pi  # wrap to [-pi, pi]

    # Initial guess
    if e < 0.8:
        E = M
    else:
        E = np.pi if M > 0 else -np.pi

    for _ in range(max_iter):
        dE = (M - (E - e * np.sin(E))) / (1 - e * np.cos(E))
        E += dE
        if np.abs(dE) < tol:
            return E
    raise IntegrationFailure(
        f"Kepler's equation did not converge in {max_iter} iterations (M={M}, e={e})"
    )


def eccentric_to_true_anomaly(E, e):
    _check_elliptic(e)
    return 2 * np.arctan2(
        np.sqrt(1 + e) * np.sin(E / 2),
        np.sqrt(1 - e) * np.cos(E / 2)
    )


def true_to_eccentric_anomaly(nu, e):
    _check_elliptic(e)
    return 2 * np.arctan2(
        np.sqrt(1 - e) * np.sin(nu / 2),
        np.sqrt(1 + e) * np.cos(nu / 2)
    )


def mean_to_true_anomaly(M, e):
    """True anomaly in [0, 2*pi) for mean anomaly M."""
    E = solve_kepler(M, e)
    return np.mod(eccentric_to_true_anomaly(E, e), 2*np.pi)


def true_to_mean_anomaly(nu, e):
    """Mean anomaly in [0, 2*pi) for true anomaly nu."""
    E = true_to_eccentric_anomaly(nu, e)
    return np.mod(E - e * np.sin(E), 2*np.pi)


def kepler_propagate(elements, mu, dt):
    """
    Advance Kepler elements by dt seconds along the unperturbed ellipse.

    Only the true anomaly changes. Only supports elliptic orbits (e < 1).
    """
    _check_elliptic(elements.eccentricity)
    if not (mu > 0 and elements.semi_major_axis > 0):
        raise InvalidOrbitGeometry(
            f"Analytic propagation needs mu > 0 and a > 0 (mu={mu}, a={elements.semi_major_axis})"
        )

    n = np.sqrt(mu / elements.semi_major_axis**3)  # mean motion (rad/s)
    M = true_to_mean_anomaly(elements.true_anomaly, elements.eccentricity) + n * dt
    nu = mean_to_true_anomaly(M, elements.eccentricity)
    return elements._replace(true_anomaly=nu)
