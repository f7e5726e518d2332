"""
quatsym - Quaternion orientation primitives for quaternary symmetry detection

Compares the orientations of repeated subunits of a 3D structure. Each
subunit's point cloud is reduced to the rotation of its principal axes,
expressed as a unit quaternion, and two orientations are compared with the
quaternion metric arccos(|q1 · q2|) in [0, π/2].

Quick Start:
    >>> import numpy as np
    >>> from quatsym import orientation, orientation_metric
    >>> a = np.random.default_rng(0).normal(size=(50, 3)) * [3.0, 2.0, 1.0]
    >>> qa = orientation(a)
    >>> orientation_metric(qa, -qa)
    0.0
"""

__version__ = "0.1.0"

from .core.inertia import (
    MomentsOfInertia,
    SymmetryClass,
    inertia_tensor,
    principal_axes,
    principal_moments,
    asymmetry_parameter,
)
from .core.quaternions import (
    dot_product,
    length_squared,
    length,
    normalize,
    conjugate,
    multiply,
    rotation_angle,
    rotation_matrix_to_quaternion,
    quaternion_to_rotation_matrix,
    orientation,
    orientation_metric,
)
from .config import SymmetryParameters, load_parameters_with_overrides
from .exceptions import DegenerateAxesWarning, DegeneratePointSetError


__all__ = [
    "__version__",
    # Moments of inertia
    "MomentsOfInertia",
    "SymmetryClass",
    "inertia_tensor",
    "principal_axes",
    "principal_moments",
    "asymmetry_parameter",
    # Quaternions
    "dot_product",
    "length_squared",
    "length",
    "normalize",
    "conjugate",
    "multiply",
    "rotation_angle",
    "rotation_matrix_to_quaternion",
    "quaternion_to_rotation_matrix",
    "orientation",
    "orientation_metric",
    # Configuration
    "SymmetryParameters",
    "load_parameters_with_overrides",
    # Errors
    "DegenerateAxesWarning",
    "DegeneratePointSetError",
]
