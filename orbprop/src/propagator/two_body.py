import numpy as np

from orbprop.src.errors import SingularState


class TwoBodyDynamics:
    """
    Kepler orbit equations of motion.

    Point-mass gravity of the central body only. Called as
    ``dynamics(t, y)`` with ``y = [x, y, z, vx, vy, vz]``; returns
    ``[vx, vy, vz, ax, ay, az]``.
    """

    def __init__(self, mu):
        self.mu = mu

    def acceleration(self, r):
        """Inverse-square acceleration toward the origin [m/s^2]."""
        dist2 = np.dot(r, r)
        if dist2 == 0:
            raise SingularState(f"Zero radius state {r}: two-body acceleration is undefined")
        dist = np.sqrt(dist2)
        return -self.mu * r / (dist2 * dist)

    def __call__(self, t, y):
        r = y[:3]
        v = y[3:]
        return np.concatenate([v, self.acceleration(r)])
