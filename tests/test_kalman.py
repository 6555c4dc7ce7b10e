import numpy as np
import pytest

from track.kalman import constant_velocity, constant_velocity_noise, make_filter, reseed


def test_constant_velocity_layout() -> None:
    F = constant_velocity(2, 0.5)

    expected = np.array(
        [[1.0, 0.0, 0.5, 0.0], [0.0, 1.0, 0.0, 0.5], [0.0, 0.0, 1.0, 0.0], [0.0, 0.0, 0.0, 1.0]]
    )
    assert np.allclose(F, expected)


def test_noise_matches_position_velocity_layout() -> None:
    dt, var = 0.1, 2.0
    Q = constant_velocity_noise(2, dt, accel_var=var)

    block = np.array([[dt**4 / 4.0, dt**3 / 2.0], [dt**3 / 2.0, dt**2]]) * var
    assert Q.shape == (4, 4)
    assert np.allclose(Q, np.kron(block, np.eye(2)))


def test_filter_recovers_constant_velocity() -> None:
    kf = make_filter(np.array([0.0, 0.0]), np.diag([1.0, 100.0]), dim_z=1)
    dt = 0.1
    H = np.array([[1.0, 0.0]])
    for i in range(1, 60):
        kf.predict(F=constant_velocity(1, dt), Q=constant_velocity_noise(1, dt, 1.0))
        kf.update(np.array([3.0 * i * dt]), R=np.array([[0.01]]), H=H)

    assert kf.x.shape == (2,)
    assert kf.x[0] == pytest.approx(3.0 * 59 * dt, abs=0.05)
    assert kf.x[1] == pytest.approx(3.0, abs=0.1)


def test_reseed_replaces_state_and_covariance() -> None:
    kf = make_filter(np.zeros(2), np.eye(2), dim_z=1)

    reseed(kf, np.array([5.0, -1.0]), np.diag([2.0, 3.0]))

    assert np.allclose(kf.x, [5.0, -1.0])
    assert np.allclose(kf.P, np.diag([2.0, 3.0]))


def test_shape_mismatch_rejected() -> None:
    with pytest.raises(ValueError):
        make_filter(np.zeros(3), np.eye(2), dim_z=1)
