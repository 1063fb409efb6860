from typing import Dict, Iterable, Mapping, NamedTuple

import spiceypy as spice

from orbprop.src.almanac.constants import KM3_TO_M3, MU_EARTH
from orbprop.src.errors import UnknownBody
from orbprop.src.logging_config import get_logger
from orbprop.src.model.text_enum import TextEnum

logger = get_logger(__name__)


class CentralBody(TextEnum):
    EARTH = "EARTH"


class Body(NamedTuple):
    mu: float  # gravitational parameter [m^3/s^2]


DEFAULT_BODIES: Mapping[CentralBody, Body] = {
    CentralBody.EARTH: Body(mu=MU_EARTH),
}


def get_body(central_body, table=DEFAULT_BODIES):
    """Look up the gravitational parameters of ``central_body`` in ``table``."""
    try:
        return table[central_body]
    except KeyError:
        raise UnknownBody(f"No body data for central body {central_body!r}") from None


# -----------------------------
# SPICE kernel pool
# -----------------------------

def load_spice_kernels(*paths):
    for path in paths:
        logger.debug("Furnishing SPICE kernel %s", path)
        spice.furnsh(str(path))


def body_from_spice(name):
    """
    Build a Body from the GM stored in the loaded SPICE kernel pool.

    The pool stores GM in km^3/s^2; the result is in m^3/s^2.
    """
    _, values = spice.bodvrd(name, "GM", 1)
    return Body(mu=float(values[0]) * KM3_TO_M3)


def load_body_table(central_bodies: Iterable[CentralBody]) -> Dict[CentralBody, Body]:
    """Body table for ``central_bodies`` read from the kernel pool (a Gravity.tpc kernel must be loaded)."""
    table = {}
    for central_body in central_bodies:
        table[central_body] = body_from_spice(str(central_body))
        logger.debug("Loaded %s: mu = %.6e m^3/s^2", central_body, table[central_body].mu)
    return table
