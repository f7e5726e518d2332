"""
Exceptions and warning categories raised by quatsym.
"""


class DegeneratePointSetError(ValueError):
    """
    Raised when a point set has no defined principal axes.

    This covers empty or single-point sets, a non-positive total weight and
    sets whose points all coincide (zero inertia tensor).
    """


class DegenerateAxesWarning(UserWarning):
    """
    Two or more principal moments are equal within tolerance.

    The orientation is still returned, but the principal axes spanning the
    degenerate subspace are only defined up to a rotation inside it.
    """
