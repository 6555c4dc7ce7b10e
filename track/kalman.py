"""Kalman filter construction shared by the trackers (filterpy with variable dt)."""

from __future__ import annotations

import numpy as np
from filterpy.common import Q_discrete_white_noise
from filterpy.kalman import KalmanFilter


def make_filter(x0: np.ndarray, P0: np.ndarray, dim_z: int) -> KalmanFilter:
    """Linear filter seeded with a 1-D state ``x0`` and covariance ``P0``.

    The transition depends on the elapsed time, so callers pass ``F`` and ``Q``
    to ``predict`` and ``H`` and ``R`` to ``update`` on every step.
    """
    x0 = np.asarray(x0, dtype=np.float64).reshape(-1)
    P0 = np.asarray(P0, dtype=np.float64)
    if P0.shape != (x0.size, x0.size):
        raise ValueError(f"Covariance shape {P0.shape} does not match state size {x0.size}")
    kf = KalmanFilter(dim_x=x0.size, dim_z=dim_z)
    reseed(kf, x0, P0)
    return kf


def reseed(kf: KalmanFilter, x0: np.ndarray, P0: np.ndarray) -> None:
    """Restart the filter from a fresh state estimate."""
    kf.x = np.asarray(x0, dtype=np.float64).reshape(-1).copy()
    kf.P = np.asarray(P0, dtype=np.float64).copy()


def constant_velocity(dims: int, dt: float) -> np.ndarray:
    """Transition for a state laid out as [p_1..p_dims, v_1..v_dims]."""
    F = np.eye(2 * dims)
    F[:dims, dims:] = np.eye(dims) * dt
    return F


def constant_velocity_noise(dims: int, dt: float, accel_var: float) -> np.ndarray:
    """Discrete white-noise acceleration for ``constant_velocity``."""
    return Q_discrete_white_noise(dim=2, dt=dt, var=accel_var, block_size=dims, order_by_dim=False)
