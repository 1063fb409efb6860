import numpy as np

from orbprop.src.almanac.constants import MU_EARTH
from orbprop.src.errors import InvalidOrbitGeometry
from orbprop.src.model.mission import KeplerElements, StateVector

# Relative threshold below which eccentricity / node vector count as zero
SINGULARITY_TOL = 1e-11


def _check_mu(mu):
    if not (np.isfinite(mu) and mu > 0):
        raise InvalidOrbitGeometry(f"Gravitational parameter must be positive and finite, got {mu}")


def to_state_vector(elements, mu):
    """
    Convert Kepler elements to inertial position and velocity vectors.

    Parameters:
    -----------
    elements : KeplerElements
        Orbit shape and orientation at epoch [m, rad]
    mu : float
        Gravitational parameter of central body [m^3/s^2]

    Returns:
    --------
    StateVector
        (position [m], velocity [m/s]) in the inertial frame of the elements
    """
    _check_mu(mu)
    elements.validate()

    a = elements.semi_major_axis
    e = elements.eccentricity
    i = elements.inclination
    Omega = elements.longitude_of_ascending_node
    omega = elements.argument_of_periapsis
    nu = elements.true_anomaly

    # Semi-latus rectum and distance from central body
    p = a * (1 - e**2)
    r = p / (1 + e * np.cos(nu))

    # Argument of latitude
    u = omega + nu

    cos_Omega, sin_Omega = np.cos(Omega), np.sin(Omega)
    cos_i, sin_i = np.cos(i), np.sin(i)
    cos_u, sin_u = np.cos(u), np.sin(u)

    position = r * np.array([
        cos_Omega*cos_u - sin_Omega*sin_u*cos_i,
        cos_u*sin_Omega + sin_u*cos_i*cos_Omega,
        sin_u*sin_i,
    ])

    # Perifocal velocity (mu/h) * [-sin(nu), e + cos(nu), 0] under the same
    # 3-1-3 rotation (Omega, i, omega) as the position
    h = np.sqrt(mu * a * (1 - e**2))  # specific angular momentum
    sin_term = sin_u + e * np.sin(omega)
    cos_term = cos_u + e * np.cos(omega)

    velocity = (mu / h) * np.array([
        -(cos_Omega*sin_term + sin_Omega*cos_i*cos_term),
        -(sin_Omega*sin_term - cos_Omega*cos_i*cos_term),
        sin_i*cos_term,
    ])

    return StateVector(position, velocity)


def keplerian_to_cartesian(a, e, i, Omega, omega, nu, mu=MU_EARTH):
    """
    Convert Keplerian orbital elements to inertial position and velocity vectors.

    Parameters:
    -----------
    a : float
        Semi-major axis [m]
    e : float
        Eccentricity (dimensionless)
    i : float
        Inclination [rad]
    Omega : float
        Right ascension of ascending node [rad]
    omega : float
        Argument of periapsis [rad]
    nu : float
        True anomaly [rad]
    mu : float, optional
        Gravitational parameter of central body [m^3/s^2] (default: Earth)

    Returns:
    --------
    r : ndarray, shape (3,)
        Position vector in inertial frame [m]
    v : ndarray, shape (3,)
        Velocity vector in inertial frame [m/s]
    """
    r, v = to_state_vector(KeplerElements(a, e, i, Omega, omega, nu), mu)
    return r, v


def cartesian_to_keplerian(position, velocity, mu=MU_EARTH):
    """
    Osculating Kepler elements of an inertial state.

    Undefined angles follow the usual conventions: an equatorial orbit has
    Omega = 0 and measures omega from the x axis; a circular orbit has
    omega = 0 and reports the argument of latitude (or true longitude) as
    the true anomaly.
    """
    _check_mu(mu)
    r_vec = np.asarray(position, dtype=float)
    v_vec = np.asarray(velocity, dtype=float)

    r_mag = np.linalg.norm(r_vec)
    v_mag = np.linalg.norm(v_vec)

    # Specific angular momentum
    h_vec = np.cross(r_vec, v_vec)
    h_mag = np.linalg.norm(h_vec)
    if r_mag == 0 or h_mag == 0:
        raise InvalidOrbitGeometry("Rectilinear or zero-radius state has no Kepler elements")

    # Node vector
    n_vec = np.cross([0.0, 0.0, 1.0], h_vec)
    n_mag = np.linalg.norm(n_vec)

    # Eccentricity vector
    e_vec = ((v_mag**2 - mu/r_mag) * r_vec - np.dot(r_vec, v_vec) * v_vec) / mu
    e = np.linalg.norm(e_vec)

    energy = v_mag**2 / 2 - mu / r_mag
    if energy == 0:
        raise InvalidOrbitGeometry("Parabolic state has no finite semi-major axis")
    a = -mu / (2 * energy)

    i = np.arccos(np.clip(h_vec[2] / h_mag, -1.0, 1.0))

    equatorial = n_mag / h_mag < SINGULARITY_TOL
    circular = e < SINGULARITY_TOL

    if equatorial:
        Omega = 0.0
    else:
        Omega = np.arccos(np.clip(n_vec[0] / n_mag, -1.0, 1.0))
        if n_vec[1] < 0:
            Omega = 2*np.pi - Omega

    if circular:
        e = 0.0
        omega = 0.0
        if equatorial:
            # True longitude
            nu = np.arctan2(r_vec[1], r_vec[0])
            if h_vec[2] < 0:
                nu = -nu
        else:
            # Argument of latitude
            nu = np.arccos(np.clip(np.dot(n_vec, r_vec) / (n_mag * r_mag), -1.0, 1.0))
            if r_vec[2] < 0:
                nu = 2*np.pi - nu
    else:
        if equatorial:
            # Longitude of periapsis
            omega = np.arctan2(e_vec[1], e_vec[0])
            if h_vec[2] < 0:
                omega = -omega
        else:
            omega = np.arccos(np.clip(np.dot(n_vec, e_vec) / (n_mag * e), -1.0, 1.0))
            if e_vec[2] < 0:
                omega = 2*np.pi - omega
        nu = np.arccos(np.clip(np.dot(e_vec, r_vec) / (e * r_mag), -1.0, 1.0))
        if np.dot(r_vec, v_vec) < 0:
            nu = 2*np.pi - nu

    return KeplerElements(
        semi_major_axis=float(a),
        eccentricity=float(e),
        inclination=float(i),
        longitude_of_ascending_node=float(Omega),
        argument_of_periapsis=float(np.mod(omega, 2*np.pi)),
        true_anomaly=float(np.mod(nu, 2*np.pi)),
    )


def orbital_period(a, mu=MU_EARTH):
    _check_mu(mu)
    if not a > 0:
        raise InvalidOrbitGeometry(f"Orbital period needs a positive semi-major axis, got {a}")
    return 2*np.pi * np.sqrt(a**3 / mu)


def specific_energy(position, velocity, mu=MU_EARTH):
    """Specific orbital energy v^2/2 - mu/r [m^2/s^2]."""
    return np.dot(velocity, velocity) / 2 - mu / np.linalg.norm(position)
