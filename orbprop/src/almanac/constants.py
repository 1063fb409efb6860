import numpy as np

# Astronomical constants (SI units)
MU_EARTH = 398600.4418e9  # m^3/s^2
DAY = 86400.0
RAD2DEG = 180.0 / np.pi
DEG2RAD = np.pi / 180.0

# SPICE kernel pool stores GM in km^3/s^2
KM3_TO_M3 = 1.0e9

# ----------------------------
# Propagator defaults
# ----------------------------

RTOL = 1e-6
ATOL = 1e-8
INITIAL_STEP = 10.0  # s
MAX_STEPS = 100_000
MIN_STEP = 1e-10  # s

# Step-size controller
SAFETY = 0.9
MIN_FACTOR = 0.2
MAX_FACTOR = 2.0

# Kepler's equation
KEPLER_TOL = 1e-12
KEPLER_MAX_ITER = 50
