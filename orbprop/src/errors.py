"""
Error taxonomy for element conversion and orbit propagation.

Each error also derives from the closest builtin exception so callers that
catch ``ValueError`` or ``RuntimeError`` keep working.
"""


class OrbpropError(Exception):
    """Base class for every error raised by orbprop."""


class InvalidOrbitGeometry(OrbpropError, ValueError):
    """Non-physical element set or gravitational parameter."""


class SingularState(OrbpropError, ArithmeticError):
    """State at the center of the central body (zero radius)."""


class IntegrationFailure(OrbpropError, RuntimeError):
    """Numerical integration could not complete the requested span."""


class UnknownBody(OrbpropError, LookupError):
    """Central body missing from the body table."""


class UnsupportedSolver(OrbpropError, ValueError):
    """ODE solver kind with no integration scheme behind it."""


class ParseError(OrbpropError, ValueError):
    """Text that does not name any member of an enum."""
