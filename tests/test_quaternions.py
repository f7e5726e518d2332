import numpy as np
import pytest
from scipy.constants import pi
from scipy.spatial.transform import Rotation

from quatsym.core.quaternions import dot_product, length_squared, length, normalize, conjugate, multiply, \
    rotation_angle, rotation_matrix_to_quaternion, quaternion_to_rotation_matrix, orientation, orientation_metric
from quatsym.exceptions import DegeneratePointSetError


def random_quaternions(n, seed=1):
    return Rotation.random(n, random_state=seed).as_quat()


def skewed_cloud(n=40, seed=3):
    rng = np.random.default_rng(seed)
    return rng.exponential(size=(n, 3)) * np.array([3.0, 2.0, 1.0])


def test_dot_product_and_length():
    q1 = np.array([1.0, 2.0, 3.0, 4.0])
    q2 = np.array([-1.0, 0.5, 2.0, -0.5])
    assert dot_product(q1, q2) == pytest.approx(-1.0 + 1.0 + 6.0 - 2.0)
    assert length_squared(q1) == pytest.approx(30.0)
    assert length(q1) == pytest.approx(np.sqrt(30.0))
    for q in np.random.default_rng(4).normal(size=(20, 4)):
        assert length_squared(q) == dot_product(q, q)
        assert length(q) == np.sqrt(length_squared(q))
    with pytest.raises(ValueError):
        dot_product(np.ones(3), np.ones(3))


def test_normalize():
    q = normalize(np.array([0.0, 3.0, 0.0, 4.0]))
    assert np.allclose(q, [0.0, 0.6, 0.0, 0.8])
    assert length(q) == pytest.approx(1.0)
    with pytest.raises(ValueError):
        normalize(np.zeros(4))


def test_multiply_matches_scipy():
    q1s = random_quaternions(30, seed=2)
    q2s = random_quaternions(30, seed=3)
    for q1, q2 in zip(q1s, q2s):
        expected = (Rotation.from_quat(q1) * Rotation.from_quat(q2)).as_quat()
        result = multiply(q1, q2)
        assert np.isclose(abs(dot_product(result, expected)), 1.0)
    # q ⊗ q* is the identity
    q = q1s[0]
    assert np.allclose(multiply(q, conjugate(q)), [0.0, 0.0, 0.0, 1.0])


def test_rotation_angle():
    assert rotation_angle(np.array([0.0, 0.0, 0.0, 1.0])) == pytest.approx(0.0)
    for angle in (0.1, pi / 2, pi - 0.01):
        q = Rotation.from_rotvec(angle * np.array([0.0, 0.6, 0.8])).as_quat()
        assert rotation_angle(q) == pytest.approx(angle)
        assert rotation_angle(-q) == pytest.approx(angle)


def test_rotation_matrix_to_quaternion_special_cases():
    assert np.allclose(rotation_matrix_to_quaternion(np.eye(3)), [0.0, 0.0, 0.0, 1.0])
    # 180 degree rotations exercise the branches where a vector component is largest
    assert np.allclose(rotation_matrix_to_quaternion(np.diag([1.0, -1.0, -1.0])), [1.0, 0.0, 0.0, 0.0])
    assert np.allclose(rotation_matrix_to_quaternion(np.diag([-1.0, 1.0, -1.0])), [0.0, 1.0, 0.0, 0.0])
    assert np.allclose(rotation_matrix_to_quaternion(np.diag([-1.0, -1.0, 1.0])), [0.0, 0.0, 1.0, 0.0])
    # 90 degrees about z
    R = np.array([[0.0, -1.0, 0.0], [1.0, 0.0, 0.0], [0.0, 0.0, 1.0]])
    assert np.allclose(rotation_matrix_to_quaternion(R), [0.0, 0.0, np.sqrt(0.5), np.sqrt(0.5)])
    with pytest.raises(ValueError):
        rotation_matrix_to_quaternion(np.eye(4))


def test_rotation_matrix_to_quaternion_matches_scipy():
    rotations = Rotation.random(200, random_state=8)
    # rotations close to 180 degrees about random axes
    axes = np.random.default_rng(9).normal(size=(50, 3))
    axes /= np.linalg.norm(axes, axis=1)[:, None]
    near_pi = Rotation.from_rotvec((pi - 1e-3) * axes)
    for rot in list(rotations) + list(near_pi):
        q = rotation_matrix_to_quaternion(rot.as_matrix())
        assert length(q) == pytest.approx(1.0, abs=1e-12)
        assert q[3] >= 0
        assert np.isclose(abs(dot_product(q, rot.as_quat())), 1.0)
        assert np.allclose(quaternion_to_rotation_matrix(q), rot.as_matrix())


def test_metric_properties():
    qs = random_quaternions(50, seed=6)
    for q1, q2 in zip(qs[:-1], qs[1:]):
        assert orientation_metric(q1, q1) == pytest.approx(0.0, abs=1e-7)
        assert orientation_metric(q1, -q1) == pytest.approx(0.0, abs=1e-7)
        assert orientation_metric(q1, q2) == orientation_metric(q2, q1)
        assert 0.0 <= orientation_metric(q1, q2) <= pi / 2


def test_metric_is_half_the_relative_angle():
    q1 = random_quaternions(1, seed=12)[0]
    for angle in (0.2, pi / 2, 2.5):
        r = Rotation.from_rotvec(angle * np.array([1.0, 0.0, 0.0])).as_quat()
        q2 = multiply(r, q1)
        assert orientation_metric(q1, q2) == pytest.approx(angle / 2)
    # 180 degrees apart is the maximum
    r = Rotation.from_rotvec(pi * np.array([0.0, 0.0, 1.0])).as_quat()
    assert orientation_metric(q1, multiply(r, q1)) == pytest.approx(pi / 2)


def test_metric_clamps_rounding():
    q = np.array([0.6, 0.8, 0.0, 0.0]) * (1 + 1e-12)
    assert dot_product(q, q) > 1.0
    assert orientation_metric(q, q) == 0.0
    assert orientation_metric(q, -q) == 0.0


def test_metric_shape_mismatch():
    with pytest.raises(ValueError):
        orientation_metric(np.array([0.0, 0.0, 0.0, 1.0]), skewed_cloud())


def test_orientation_is_unit_quaternion():
    triangle = np.array([[0.0, 0.0, 0.0], [1.0, 0.0, 0.0], [0.0, 1.0, 0.0]])
    q = orientation(triangle)
    assert abs(length(q) - 1.0) < 1e-9
    assert orientation_metric(q, q) == pytest.approx(0.0, abs=1e-7)
    assert orientation_metric(triangle, triangle) == pytest.approx(0.0, abs=1e-7)
    for seed in range(5):
        assert length(orientation(skewed_cloud(seed=seed))) == pytest.approx(1.0, abs=1e-9)


def test_orientation_follows_rotation():
    points = skewed_cloud(seed=21)
    q = orientation(points)
    for rot in Rotation.random(25, random_state=22):
        rotated = points @ rot.as_matrix().T
        expected = multiply(rot.as_quat(), q)
        assert orientation_metric(orientation(rotated), expected) < 1e-6


def test_orientation_scale_and_translation():
    points = skewed_cloud(seed=5)
    q = orientation(points)
    for factor in (1e-9, 1e-7, 1e-3, 0.5, 7.0, 1e4, 1e8):
        assert orientation_metric(orientation(factor * points), q) < 1e-6
    assert orientation_metric(orientation(points + [10.0, -3.0, 2.0]), q) < 1e-6
    assert orientation_metric(orientation(points + 1e6), q) < 1e-6
    # small spread far from the origin still resolves
    distant = orientation(1e-3 * points + 1e6)
    assert length(distant) == pytest.approx(1.0, abs=1e-9)
    assert orientation_metric(distant, q) < 1e-4


def test_orientation_weights():
    points = skewed_cloud(seed=6)
    q = orientation(points)
    # uniform weights are the same as no weights
    assert orientation_metric(orientation(points, 2.5 * np.ones(len(points))), q) < 1e-6
    weights = np.ones(len(points))
    weights[0] = 50.0
    assert orientation_metric(orientation(points, weights), q) > 1e-3


def test_point_sets_rotated_by_90_degrees():
    points = skewed_cloud(seed=31)
    rot = Rotation.from_euler("z", 90, degrees=True)
    rotated = rot.apply(points)
    assert orientation_metric(points, rotated) == pytest.approx(pi / 4)
    # order of the point sets does not matter
    assert orientation_metric(rotated, points) == pytest.approx(pi / 4)


def test_orientation_degenerate():
    with pytest.raises(DegeneratePointSetError):
        orientation(np.empty((0, 3)))
    with pytest.raises(DegeneratePointSetError):
        orientation([[1.0, 2.0, 3.0]])
    with pytest.raises(DegeneratePointSetError):
        orientation(np.ones((4, 3)))
