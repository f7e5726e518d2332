"""
Quaternion Orientations of Point Clouds

This module compares the orientations of 3D point sets. The orientation of a
set is the rotation of its principal axes with respect to the reference frame,
expressed as a unit quaternion; two orientations are compared with the
quaternion metric

    d(q1, q2) = arccos(|q1 · q2|)

which lies in [0, π/2]. 0 means the same orientation; the absolute value
makes q and -q, which encode the same rotation, indistinguishable. For
q2 = r ⊗ q1 the metric equals half the rotation angle of r.

Quaternions are (4,) arrays ordered [x, y, z, w] (scalar last), the same
ordering as scipy.spatial.transform.Rotation.

Key Features:
- Quaternion algebra (dot product, length, Hamilton product)
- Rotation matrix ↔ quaternion conversion
- Principal-axis orientation of weighted point sets
- Orientation metric between quaternions or point sets

References:
-----------
- Huynh, D. Q. (2009). Metrics for 3D rotations: comparison and analysis.
  Journal of Mathematical Imaging and Vision, 35(2), 155-164.
- Shepperd, S. W. (1978). Quaternion from rotation matrix. Journal of
  Guidance and Control, 1(3), 223-224.
"""

import numpy as np
from typing import Optional
from scipy.spatial.transform import Rotation

from .inertia import MomentsOfInertia


def _as_quaternion(q) -> np.ndarray:
    q = np.asarray(q, dtype=float)
    if q.shape != (4,):
        raise ValueError(f"Quaternion must have shape (4,), got {q.shape}")
    return q


def dot_product(q1: np.ndarray, q2: np.ndarray) -> float:
    """Dot (inner) product of two quaternions."""
    return float(np.dot(_as_quaternion(q1), _as_quaternion(q2)))


def length_squared(q: np.ndarray) -> float:
    """Squared euclidean length of a quaternion, the dot product with itself."""
    return dot_product(q, q)


def length(q: np.ndarray) -> float:
    """Euclidean length (norm) of a quaternion."""
    return float(np.sqrt(length_squared(q)))


def normalize(q: np.ndarray) -> np.ndarray:
    """
    Scale a quaternion to unit length.

    Raises:
        ValueError: If the quaternion has zero length
    """
    q = _as_quaternion(q)
    n = length(q)
    if n == 0.0:
        raise ValueError("Cannot normalize a zero-length quaternion")
    return q / n


def conjugate(q: np.ndarray) -> np.ndarray:
    """Conjugate [-x, -y, -z, w]; the inverse rotation for unit quaternions."""
    q = _as_quaternion(q)
    return np.array([-q[0], -q[1], -q[2], q[3]])


def multiply(q1: np.ndarray, q2: np.ndarray) -> np.ndarray:
    """
    Hamilton product q1 ⊗ q2.

    As rotations, the product applies q2 first and then q1, matching
    Rotation.from_quat(q1) * Rotation.from_quat(q2).
    """
    q1 = _as_quaternion(q1)
    q2 = _as_quaternion(q2)
    v1, w1 = q1[:3], q1[3]
    v2, w2 = q2[:3], q2[3]

    w = w1 * w2 - np.dot(v1, v2)
    v = w1 * v2 + w2 * v1 + np.cross(v1, v2)

    return np.array([v[0], v[1], v[2], w])


def rotation_angle(q: np.ndarray) -> float:
    """Rotation angle in [0, π] encoded by a unit quaternion."""
    w = abs(_as_quaternion(q)[3])
    return float(2 * np.arccos(np.clip(w, 0.0, 1.0)))


def rotation_matrix_to_quaternion(R: np.ndarray) -> np.ndarray:
    """
    Convert a rotation matrix to a unit quaternion.

    Args:
        R: (3, 3) proper rotation matrix

    Returns:
        q: (4,) quaternion [x, y, z, w] with ||q|| = 1 and w >= 0

    Notes:
        The component with the largest magnitude is recovered first from
        whichever of trace(R), R_00, R_11, R_22 is largest, and the others
        are obtained by dividing by it. This keeps the square root argument
        away from zero. The result is renormalised to absorb rounding.
    """
    R = np.asarray(R, dtype=float)
    if R.shape != (3, 3):
        raise ValueError(f"Rotation matrix must be 3×3, got {R.shape}")

    trace = R[0, 0] + R[1, 1] + R[2, 2]
    diagonal = np.diag(R)
    k = int(np.argmax(diagonal))

    if trace >= diagonal[k]:
        w = 0.5 * np.sqrt(1.0 + trace)
        s = 0.25 / w
        x = (R[2, 1] - R[1, 2]) * s
        y = (R[0, 2] - R[2, 0]) * s
        z = (R[1, 0] - R[0, 1]) * s
    elif k == 0:
        x = 0.5 * np.sqrt(1.0 + R[0, 0] - R[1, 1] - R[2, 2])
        s = 0.25 / x
        w = (R[2, 1] - R[1, 2]) * s
        y = (R[0, 1] + R[1, 0]) * s
        z = (R[0, 2] + R[2, 0]) * s
    elif k == 1:
        y = 0.5 * np.sqrt(1.0 - R[0, 0] + R[1, 1] - R[2, 2])
        s = 0.25 / y
        w = (R[0, 2] - R[2, 0]) * s
        x = (R[0, 1] + R[1, 0]) * s
        z = (R[1, 2] + R[2, 1]) * s
    else:
        z = 0.5 * np.sqrt(1.0 - R[0, 0] - R[1, 1] + R[2, 2])
        s = 0.25 / z
        w = (R[1, 0] - R[0, 1]) * s
        x = (R[0, 2] + R[2, 0]) * s
        y = (R[1, 2] + R[2, 1]) * s

    q = normalize(np.array([x, y, z, w]))

    # q and -q are the same rotation
    if q[3] < 0:
        q = -q

    return q


def quaternion_to_rotation_matrix(q: np.ndarray) -> np.ndarray:
    """
    Convert a unit quaternion [x, y, z, w] to a rotation matrix.

    Args:
        q: (4,) quaternion

    Returns:
        R: (3, 3) rotation matrix
    """
    return Rotation.from_quat(_as_quaternion(q)).as_matrix()


def orientation(
    points: np.ndarray,
    weights: Optional[np.ndarray] = None
) -> np.ndarray:
    """
    Orientation of a point cloud as a unit quaternion.

    The orientation represents the rotation of the principal axes of the
    (weighted) point set with respect to the axes of the coordinate system.

    Args:
        points: (N, 3) point coordinates
        weights: Optional (N,) point weights, default 1.0 each

    Returns:
        q: (4,) unit quaternion [x, y, z, w]

    Raises:
        DegeneratePointSetError: Fewer than two points, or coincident points

    Notes:
        - Invariant to translation and uniform scaling of the points
        - Rotating the points by Q rotates the orientation by Q, provided the
          principal moments are distinct and the cloud is not symmetric along
          its principal axes

    Example:
        >>> q = orientation([[0, 0, 0], [1, 0, 0], [0, 1, 0]])
        >>> bool(np.isclose(length(q), 1.0))
        True
    """
    moi = MomentsOfInertia()
    moi.add_points(points, weights)

    return rotation_matrix_to_quaternion(moi.orientation_matrix())


def orientation_metric(a: np.ndarray, b: np.ndarray) -> float:
    """
    Quaternion orientation metric arccos(|a · b|).

    Accepts either two unit quaternions of shape (4,) or two point sets of
    shape (N, 3); point sets are first reduced to their orientation().
    Quaternions are not normalised here.

    Args:
        a: quaternion or point set
        b: quaternion or point set of the same kind

    Returns:
        angle: Metric in radians, 0 ≤ angle ≤ π/2

    Example:
        >>> q = np.array([0.0, 0.0, 0.0, 1.0])
        >>> orientation_metric(q, -q)
        0.0
    """
    a = np.asarray(a, dtype=float)
    b = np.asarray(b, dtype=float)

    if a.ndim == 2 and b.ndim == 2:
        a = orientation(a)
        b = orientation(b)
    elif a.ndim != 1 or b.ndim != 1:
        raise ValueError(
            f"Expected two quaternions (4,) or two point sets (N, 3), "
            f"got shapes {a.shape} and {b.shape}"
        )

    # Rounding can push |a · b| slightly above 1
    d = np.clip(abs(dot_product(a, b)), -1.0, 1.0)

    return float(np.arccos(d))
