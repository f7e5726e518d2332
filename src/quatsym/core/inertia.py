"""
Moments of Inertia of Weighted Point Sets

This module turns a weighted 3D point cloud into its principal axes and a
proper rotation matrix describing how those axes are rotated relative to the
reference frame (unit vectors [1,0,0], [0,1,0], [0,0,1]).

Mathematical Background:
========================

The inertia tensor about the weighted centroid is

    I_ij = Σ_α w_α [(r_α · r_α) δ_ij - r_α,i r_α,j]

with r_α the position of point α relative to the centroid. I is real and
symmetric, so

    I = R · diag(I_a, I_b, I_c) · R^T,    I_a ≤ I_b ≤ I_c

where the columns of R are the principal axes.

Sign Convention:
----------------
Eigenvectors are only defined up to sign. The orientation matrix fixes the
sign of the first two axes by making the third moment Σ w (r · v)³ of the
centred cloud along each axis positive, and completes the frame with
v_c = v_a × v_b. Under a rigid rotation Q of the cloud every term is carried
along, so the orientation matrix becomes Q · R. When the third moment
vanishes (the cloud is symmetric along that axis) the axis is oriented so
that its largest-magnitude component is positive; that fallback is
deterministic but not rotation covariant.

Degenerate Inputs:
------------------
- fewer than two points, non-positive total weight or coincident points:
  DegeneratePointSetError
- equal principal moments (symmetric or linear tops): the matrix is
  returned and a DegenerateAxesWarning is emitted

References:
-----------
- Goldstein, Poole, Safko (2002). Classical Mechanics (3rd ed.), Chapter 5.
"""

import warnings
from enum import Enum
from typing import Optional, Sequence, Tuple

import numpy as np

from ..exceptions import DegenerateAxesWarning, DegeneratePointSetError

# Relative tolerance below which two principal moments count as equal.
MOMENT_TOLERANCE = 1e-8

# Relative tolerance for the third moment used to orient an axis.
SKEWNESS_TOLERANCE = 1e-10

# Squared relative tolerance on the spread of the cloud for coincident points,
# at the level of rounding in the coordinates.
COINCIDENT_TOLERANCE = (100 * np.finfo(float).eps) ** 2


class SymmetryClass(Enum):
    """Shape classification of a point cloud from its principal moments."""

    LINEAR = "linear"
    PROLATE = "prolate"
    OBLATE = "oblate"
    SYMMETRIC = "symmetric"
    ASYMMETRIC = "asymmetric"


def inertia_tensor(
    positions: np.ndarray,
    masses: np.ndarray,
    center_of_mass: Optional[np.ndarray] = None
) -> np.ndarray:
    """
    Compute the 3×3 inertia tensor of a weighted point set.

    Args:
        positions: Point coordinates, shape (N, 3)
        masses: Point weights, shape (N,)
        center_of_mass: Reference point (3,). If None, the weighted centroid.

    Returns:
        Inertia tensor I, shape (3, 3)

    Notes:
        - Diagonal elements: I_xx = Σ w(y² + z²), etc.
        - Off-diagonal elements: I_xy = -Σ w·x·y, etc.
        - Result is symmetric positive semi-definite

    Example:
        >>> positions = np.array([[0., 0., 0.], [1., 0., 0.], [0., 1., 0.]])
        >>> I = inertia_tensor(positions, np.ones(3))
        >>> bool(np.allclose(I, I.T))
        True
    """
    positions = np.asarray(positions, dtype=float)
    masses = np.asarray(masses, dtype=float)

    if positions.ndim != 2 or positions.shape[1] != 3:
        raise ValueError(f"Positions must have shape (N, 3), got {positions.shape}")

    if positions.shape[0] != len(masses):
        raise ValueError(
            f"Number of positions ({positions.shape[0]}) must match "
            f"number of masses ({len(masses)})"
        )

    if center_of_mass is None:
        center_of_mass = np.average(positions, weights=masses, axis=0)

    r = positions - center_of_mass

    # Σ w r r^T is the weighted scatter matrix
    scatter = np.einsum("n,ni,nj->ij", masses, r, r)

    return np.trace(scatter) * np.eye(3) - scatter


def principal_axes(I: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """
    Diagonalize an inertia tensor.

    Args:
        I: Inertia tensor, shape (3, 3)

    Returns:
        Tuple of:
            - moments: Principal moments (I_a, I_b, I_c), sorted ascending
            - axes: Orthonormal matrix with the principal axes as columns,
              det(axes) = +1

    Example:
        >>> moments, axes = principal_axes(np.diag([100., 200., 300.]))
        >>> moments.tolist()
        [100.0, 200.0, 300.0]
    """
    I = np.asarray(I, dtype=float)

    if I.shape != (3, 3):
        raise ValueError(f"Inertia tensor must be 3×3, got {I.shape}")

    if not np.allclose(I, I.T):
        raise ValueError("Inertia tensor must be symmetric")

    eigenvalues, eigenvectors = np.linalg.eigh(I)

    sort_indices = np.argsort(eigenvalues)
    moments = eigenvalues[sort_indices]
    axes = eigenvectors[:, sort_indices]

    # Flip one axis to convert a reflection into a rotation
    if np.linalg.det(axes) < 0:
        axes[:, 0] *= -1

    return moments, axes


def principal_moments(
    positions: np.ndarray,
    masses: np.ndarray,
    center_of_mass: Optional[np.ndarray] = None
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Principal moments and axes directly from positions and weights.

    Convenience composition of inertia_tensor() and principal_axes().
    """
    I = inertia_tensor(positions, masses, center_of_mass)
    return principal_axes(I)


def asymmetry_parameter(moments: np.ndarray) -> float:
    """
    Ray's asymmetry parameter κ = (2I_b - I_a - I_c) / (I_c - I_a).

    Returns 0 for a spherical top, where κ is undefined.
    """
    I_a, I_b, I_c = moments

    if np.isclose(I_c, I_a):
        return 0.0

    return float((2 * I_b - I_a - I_c) / (I_c - I_a))


class MomentsOfInertia:
    """
    Accumulator for weighted points and their principal-axis frame.

    Points are added one at a time (or in bulk) and every derived quantity is
    computed on demand from the accumulated set.

    Example:
        >>> moi = MomentsOfInertia()
        >>> for p in [[0, 0, 0], [1, 0, 0], [0, 1, 0]]:
        ...     moi.add_point(p)
        >>> R = moi.orientation_matrix()
        >>> bool(np.isclose(np.linalg.det(R), 1.0))
        True
    """

    def __init__(self):
        self._points = []
        self._weights = []
        self._cache = None

    def __len__(self) -> int:
        return len(self._points)

    def add_point(self, point: Sequence[float], weight: float = 1.0) -> None:
        """Accumulate one point with the given weight."""
        p = np.asarray(point, dtype=float)
        if p.shape != (3,):
            raise ValueError(f"Point must have shape (3,), got {p.shape}")
        self._points.append(p)
        self._weights.append(float(weight))
        self._cache = None

    def add_points(
        self,
        points: np.ndarray,
        weights: Optional[np.ndarray] = None
    ) -> None:
        """Accumulate a (N, 3) array of points; weights default to 1.0."""
        points = np.asarray(points, dtype=float)
        if points.size == 0:
            points = points.reshape(0, 3)
        if points.ndim != 2 or points.shape[1] != 3:
            raise ValueError(f"Points must have shape (N, 3), got {points.shape}")

        if weights is None:
            weights = np.ones(len(points))
        weights = np.asarray(weights, dtype=float)
        if weights.shape != (len(points),):
            raise ValueError(
                f"Number of points ({len(points)}) must match "
                f"number of weights ({weights.shape})"
            )

        for p, w in zip(points, weights):
            self.add_point(p, w)

    @property
    def total_weight(self) -> float:
        """Sum of the accumulated weights."""
        return float(np.sum(self._weights))

    def _arrays(self) -> Tuple[np.ndarray, np.ndarray]:
        if len(self._points) < 2:
            raise DegeneratePointSetError(
                f"At least two points are required, got {len(self._points)}"
            )
        weights = np.asarray(self._weights)
        if weights.sum() <= 0:
            raise DegeneratePointSetError(
                f"Total weight must be positive, got {weights.sum()}"
            )
        return np.vstack(self._points), weights

    def center_of_mass(self) -> np.ndarray:
        """Weighted centroid of the accumulated points."""
        points, weights = self._arrays()
        return np.average(points, weights=weights, axis=0)

    def _decompose(self) -> dict:
        if self._cache is not None:
            return self._cache

        points, weights = self._arrays()
        com = np.average(points, weights=weights, axis=0)
        r = points - com

        spread = np.sum(weights * np.sum(r**2, axis=1)) / weights.sum()
        scale = float(np.max(np.abs(points)))
        if scale == 0.0 or spread <= COINCIDENT_TOLERANCE * scale**2:
            raise DegeneratePointSetError(
                "All points coincide; the inertia tensor is zero"
            )

        I = inertia_tensor(points, weights, com)
        moments, axes = principal_axes(I)

        self._cache = {
            "centered": r,
            "weights": weights,
            "spread": spread,
            "tensor": I,
            "moments": moments,
            "axes": axes,
        }
        return self._cache

    def inertia_tensor(self) -> np.ndarray:
        """Inertia tensor about the weighted centroid, shape (3, 3)."""
        return self._decompose()["tensor"].copy()

    def principal_moments(self) -> np.ndarray:
        """Principal moments (I_a, I_b, I_c), ascending."""
        return self._decompose()["moments"].copy()

    def principal_axes(self) -> np.ndarray:
        """Principal axes as columns, ordered by ascending moment."""
        return self._decompose()["axes"].copy()

    def radius_of_gyration(self) -> float:
        """sqrt(Σ w |r|² / Σ w) about the weighted centroid."""
        return float(np.sqrt(self._decompose()["spread"]))

    def ellipsoid_radii(self) -> np.ndarray:
        """
        Semi-axes of the uniform ellipsoid with the same principal moments.

        For a solid ellipsoid of mass m, I_a = m (b² + c²) / 5 and
        cyclically, hence a² = 5 (I_b + I_c - I_a) / (2m). The radii are
        returned in the order of the principal axes.
        """
        moments = self._decompose()["moments"]
        m = self.total_weight
        squared = 5.0 * (np.sum(moments) - 2.0 * moments) / (2.0 * m)
        return np.sqrt(np.clip(squared, 0.0, None))

    def symmetry_coefficient(self) -> float:
        """
        Closeness of the nearest pair of adjacent moments, in [0, 1].

        1 means two principal moments are equal (a symmetric top).
        """
        I_a, I_b, I_c = self._decompose()["moments"]
        c1 = 1.0 - (I_b - I_a) / (I_b + I_a)
        c2 = 1.0 - (I_c - I_b) / (I_c + I_b)
        return float(max(c1, c2))

    def symmetry_class(self, threshold: float = 0.05) -> SymmetryClass:
        """
        Classify the top from its principal moments.

        Args:
            threshold: Relative difference below which two moments are
                considered equal

        Returns:
            SymmetryClass
        """
        I_a, I_b, I_c = self._decompose()["moments"]

        if I_a <= threshold * I_c:
            return SymmetryClass.LINEAR

        oblate = (I_b - I_a) / (I_b + I_a) < threshold
        prolate = (I_c - I_b) / (I_c + I_b) < threshold

        if oblate and prolate:
            return SymmetryClass.SYMMETRIC
        if oblate:
            return SymmetryClass.OBLATE
        if prolate:
            return SymmetryClass.PROLATE
        return SymmetryClass.ASYMMETRIC

    def orientation_matrix(self) -> np.ndarray:
        """
        Proper rotation matrix with the principal axes as columns.

        Column k is the axis of the k-th smallest principal moment, so the
        matrix maps the reference unit vector e_k onto that axis. See the
        module docstring for the sign convention.

        Returns:
            R: (3, 3) orthonormal matrix with det(R) = +1

        Warns:
            DegenerateAxesWarning: if principal moments coincide
        """
        d = self._decompose()
        moments, axes = d["moments"], d["axes"].copy()
        r, weights = d["centered"], d["weights"]

        gaps = np.diff(moments)
        if np.any(gaps <= MOMENT_TOLERANCE * max(moments[-1], 1e-300)):
            warnings.warn(
                f"Degenerate principal moments {moments}; principal axes are "
                f"not unique",
                DegenerateAxesWarning,
                stacklevel=2,
            )

        norm = np.sum(weights * np.sum(r**2, axis=1) ** 1.5)
        for k in range(2):
            v = axes[:, k]
            skew = np.sum(weights * (r @ v) ** 3)
            if abs(skew) > SKEWNESS_TOLERANCE * norm:
                if skew < 0:
                    axes[:, k] = -v
            elif v[np.argmax(np.abs(v))] < 0:
                axes[:, k] = -v

        axes[:, 2] = np.cross(axes[:, 0], axes[:, 1])

        return axes
