"""
Core numerical routines: moments of inertia and quaternion orientations.
"""

from .inertia import (
    MomentsOfInertia,
    SymmetryClass,
    inertia_tensor,
    principal_axes,
    principal_moments,
    asymmetry_parameter,
)
from .quaternions import (
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
