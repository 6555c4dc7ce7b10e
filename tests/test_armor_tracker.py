import math
from collections import deque

import numpy as np
import pytest

from combo import Armor
from contracts import CameraModel, ImuData, RobotType
from exceptions import InvalidArgumentError, TrackerKindError
from feature import LightBlob
from track import ArmorTracker, RuneTracker, VanishState, majority_type
from track.sim import SimConfig, make_armor, make_rune, simulate_armor


def _track(frames) -> ArmorTracker:
    first, imu = frames[0]
    tracker = ArmorTracker.make_tracker(first, imu)
    for armor, imu in frames[1:]:
        tracker.update(armor, armor.t_ns, imu)
    return tracker


def test_spin_rate_converges() -> None:
    tracker = _track(simulate_armor(SimConfig(steps=100), spin_rad_s=2.0))

    assert tracker.rotated_speed == pytest.approx(2.0, abs=0.3)
    heading = 2.0 * 0.99
    assert tracker.pose[0] == pytest.approx(math.sin(heading), abs=0.1)
    assert tracker.pose[1] == pytest.approx(math.cos(heading), abs=0.1)


def test_gimbal_rotation_is_compensated() -> None:
    tracker = _track(
        simulate_armor(SimConfig(steps=100), spin_rad_s=0.0, gimbal_yaw_speed_deg_s=90.0)
    )

    assert tracker.rotated_speed == pytest.approx(0.0, abs=0.05)
    assert tracker.pose == pytest.approx((0.0, 1.0), abs=0.02)
    assert tracker.center3d == pytest.approx((0.0, 0.0, 3.0), abs=0.05)


def test_stationary_plate_keeps_center_and_orientation() -> None:
    tracker = _track(simulate_armor(SimConfig(steps=30), spin_rad_s=0.0))

    assert tracker.velocity3d == pytest.approx((0.0, 0.0, 0.0), abs=1e-6)
    w, x, y, z = tracker.orientation
    assert math.sqrt(w * w + x * x + y * y + z * z) == pytest.approx(1.0)
    assert w == pytest.approx(1.0, abs=1e-6)


def test_type_is_majority_vote() -> None:
    types = [RobotType.HERO, RobotType.HERO, RobotType.SENTRY, RobotType.HERO, RobotType.HERO]
    tracker = _track(simulate_armor(SimConfig(steps=5), types=types))

    assert tracker.front().type == RobotType.HERO
    assert tracker.type == RobotType.HERO


def test_type_tie_goes_to_latest_label() -> None:
    tracker = _track(
        simulate_armor(SimConfig(steps=2), types=[RobotType.HERO, RobotType.SENTRY])
    )

    assert tracker.type == RobotType.SENTRY


def test_majority_type_helper() -> None:
    assert majority_type(deque()) == RobotType.UNKNOWN
    labels = deque([RobotType.HERO, RobotType.SENTRY, RobotType.SENTRY, RobotType.HERO])
    assert majority_type(labels) == RobotType.HERO


def test_vanish_predicts_and_recovers_spin() -> None:
    frames = simulate_armor(SimConfig(steps=60), spin_rad_s=2.0)
    tracker = _track(frames[:50])

    for armor, imu in frames[50:52]:
        tracker.update(None, armor.t_ns, imu)

    assert tracker.vanish_num == 2
    assert tracker.front().t_ns == frames[51][0].t_ns
    assert tracker.front().translation == pytest.approx((0.0, 0.0, 3.0), abs=0.05)
    assert tracker.history[0].vanished

    armor, imu = frames[52]
    tracker.update(armor, armor.t_ns, imu)
    assert tracker.vanish_num == 0
    assert tracker.rotated_speed == pytest.approx(2.0, abs=0.3)


def test_vanish_state_counter() -> None:
    tracker = _track(simulate_armor(SimConfig(steps=1)))

    tracker.update_vanish_state(VanishState.VANISH)
    tracker.update_vanish_state(VanishState.VANISH)
    assert tracker.vanish_num == 2
    tracker.update_vanish_state(VanishState.APPEAR)
    assert tracker.vanish_num == 0


def test_armor_without_pose_rejected() -> None:
    left = LightBlob.from_geometry((100.0, 200.0), 5.0, 20.0)
    right = LightBlob.from_geometry((140.0, 200.0), 5.0, 20.0)
    armor = Armor.make_combo(left, right, t_ns=0)

    with pytest.raises(InvalidArgumentError):
        ArmorTracker.make_tracker(armor, ImuData())
    with pytest.raises(InvalidArgumentError):
        ArmorTracker.make_tracker(None)


def test_rune_observation_rejected() -> None:
    tracker = _track(simulate_armor(SimConfig(steps=2)))

    with pytest.raises(InvalidArgumentError):
        tracker.update(make_rune(0.0, 50_000_000), 50_000_000)


def test_cast_accepts_matching_kind() -> None:
    tracker = _track(simulate_armor(SimConfig(steps=2)))

    assert ArmorTracker.cast(tracker) is tracker
    with pytest.raises(TrackerKindError):
        RuneTracker.cast(tracker)


def test_vanished_armor_turns_with_predicted_heading() -> None:
    frames = simulate_armor(SimConfig(steps=60), spin_rad_s=2.0)
    tracker = _track(frames[:50])
    last_real = tracker.front()

    for armor, imu in frames[50:52]:
        tracker.update(None, armor.t_ns, imu)

    synthesized = tracker.front()
    assert synthesized.pose == pytest.approx(tracker.pose, abs=1e-6)
    assert synthesized.pose != pytest.approx(last_real.pose, abs=1e-3)


def test_vanished_moving_armor_is_reprojected() -> None:
    camera = CameraModel.from_intrinsics(fx=1000.0, fy=1000.0, cx=640.0, cy=360.0)
    frames = []
    for i in range(100):
        t_s = i * 0.01
        translation = (0.5 * t_s, 0.0, 3.0)
        center_px = tuple(float(v) for v in camera.project(np.array(translation)))
        frames.append((make_armor(translation, 0.0, int(round(t_s * 1e9)), center_px=center_px), ImuData()))
    first, imu = frames[0]
    tracker = ArmorTracker.make_tracker(first, imu, camera=camera)
    for armor, imu in frames[1:]:
        tracker.update(armor, armor.t_ns, imu)
    last_real = tracker.front()

    tracker.update(None, 1_090_000_000, ImuData())

    synthesized = tracker.front()
    expected = camera.project(np.array([0.5 * 1.09, 0.0, 3.0]))
    assert synthesized.center == pytest.approx(tuple(expected), abs=2.0)
    assert synthesized.translation[0] == pytest.approx(0.545, abs=0.006)
    dx = synthesized.center[0] - last_real.center[0]
    assert dx > 10.0
    assert synthesized.corners[0][0] == pytest.approx(last_real.corners[0][0] + dx)
    assert synthesized.left.center[0] == pytest.approx(last_real.left.center[0] + dx)


def test_spin_survives_long_gap() -> None:
    frames = simulate_armor(SimConfig(steps=200), spin_rad_s=2.0)
    tracker = _track(frames[:100])

    armor, imu = frames[199]
    tracker.update(armor, armor.t_ns, imu)

    assert tracker.sample_time == pytest.approx(1.0)
    assert tracker.rotated_speed == pytest.approx(2.0, abs=1e-6)
    assert tracker.center3d == pytest.approx((0.0, 0.0, 3.0), abs=1e-6)


def test_rejected_update_leaves_timing_untouched() -> None:
    frames = simulate_armor(SimConfig(steps=2))
    tracker = _track(frames[:1])

    with pytest.raises(InvalidArgumentError):
        tracker.update(make_rune(0.0, 5_000_000), 5_000_000)
    armor, imu = frames[1]
    tracker.update(armor, armor.t_ns, imu)

    assert tracker.sample_time == pytest.approx(0.01)
