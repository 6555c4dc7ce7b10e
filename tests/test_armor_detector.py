import numpy as np
import pytest

from combo import Armor
from contracts import RobotType
from detect import ArmorDetector, DetectorConfig, FilterConfig
from detect.filters import sample_points, total_brightness
from feature import LightBlob


def _blob(x: float, y: float = 200.0, height: float = 20.0, angle: float = 0.0) -> LightBlob:
    return LightBlob.from_geometry((x, y), 5.0, height, angle)


def _rect_contour(x1: int, y1: int, x2: int, y2: int) -> np.ndarray:
    return np.array([[[x1, y1]], [[x2, y1]], [[x2, y2]], [[x1, y2]]], dtype=np.int32)


def test_single_pair_matches() -> None:
    detector = ArmorDetector()
    result = detector.match(None, [_blob(140.0), _blob(100.0)], t_ns=3)

    assert len(result.combos) == 1
    assert [blob.center[0] for blob in result.features] == [100.0, 140.0]
    assert result.combos[0].t_ns == 3


def test_intervening_blob_prunes_enclosing_pair() -> None:
    a, b, c = _blob(100.0), _blob(140.0), _blob(180.0)
    detector = ArmorDetector()

    armors = detector.find_armors([c, a, b])

    pairs = {(armor.left.center[0], armor.right.center[0]) for armor in armors}
    assert (100.0, 180.0) not in pairs
    assert pairs == {(100.0, 140.0), (140.0, 180.0)}


def test_spurious_blob_inside_pair_yields_no_combo() -> None:
    left, spurious, right = _blob(100.0), _blob(120.0, height=8.0), _blob(140.0)
    detector = ArmorDetector()

    result = detector.match(None, [left, spurious, right])

    assert result.combos == []
    assert len(result.features) == 3


def test_find_from_contours_end_to_end() -> None:
    detector = ArmorDetector()
    contours = [
        _rect_contour(98, 190, 102, 210),
        _rect_contour(138, 190, 142, 210),
    ]

    result = detector.find(None, contours, t_ns=1)
    assert len(result.combos) == 1

    contours.append(_rect_contour(119, 196, 121, 204))
    result = detector.find(None, contours, t_ns=2)
    assert result.combos == []


def test_small_contours_are_dropped() -> None:
    detector = ArmorDetector(DetectorConfig(filters=FilterConfig(min_contour_area=500.0)))

    assert detector.find_light_blobs([_rect_contour(98, 190, 102, 210)]) == []


def test_opposite_roles_keep_smaller_error() -> None:
    a, b, c = _blob(100.0), _blob(140.0), _blob(180.0, angle=5.0)
    ab = Armor.make_combo(a, b, t_ns=0)
    bc = Armor.make_combo(b, c, t_ns=0)

    for armors in ([ab, bc], [bc, ab]):
        survivors = ArmorDetector.erase_error_armors(armors)
        assert survivors == [ab]


def test_same_role_keeps_narrower() -> None:
    a, b, c = _blob(100.0), _blob(140.0), _blob(170.0, y=215.0)
    ab = Armor.make_combo(a, b, t_ns=0)
    ac = Armor.make_combo(a, c, t_ns=0)
    assert ac is not None and ac.width > ab.width

    for armors in ([ab, ac], [ac, ab]):
        assert ArmorDetector.erase_error_armors(armors) == [ab]


def test_shared_x_tie_is_order_independent() -> None:
    a, b, c = _blob(100.0), _blob(140.0, y=190.0), _blob(140.0, y=210.0)
    ab = Armor.make_combo(a, b, t_ns=0)
    ac = Armor.make_combo(a, c, t_ns=0)
    assert ab.width == ac.width

    for armors in ([ab, ac], [ac, ab]):
        assert ArmorDetector.erase_error_armors(armors) == [ab]


def test_conflict_resolution_is_single_pass() -> None:
    # ab loses to bc (error), bc loses to cd (error); ab and cd do not conflict.
    a, b = _blob(100.0, angle=4.0), _blob(140.0, angle=-4.0)
    c, d = _blob(180.0, angle=1.0), _blob(220.0, angle=1.0)
    ab = Armor.make_combo(a, b, t_ns=0)
    bc = Armor.make_combo(b, c, t_ns=0)
    cd = Armor.make_combo(c, d, t_ns=0)
    assert ab.error > bc.error > cd.error

    survivors = ArmorDetector.erase_error_armors([cd, ab, bc])

    assert survivors == [cd]


def test_non_conflicting_armors_survive() -> None:
    ab = Armor.make_combo(_blob(100.0), _blob(140.0), t_ns=0)
    cd = Armor.make_combo(_blob(300.0), _blob(340.0), t_ns=0)

    assert ArmorDetector.erase_error_armors([cd, ab]) == [ab, cd]


def test_overexposed_blob_is_erased() -> None:
    image = np.zeros((400, 400, 3), dtype=np.uint8)
    image[170:231, 95:106] = 255
    bright, dark = _blob(100.0), _blob(140.0)
    detector = ArmorDetector()

    result = detector.match(image, [bright, dark])

    assert result.features == [dark]
    assert result.combos == []


def test_brightness_uses_weighted_channels() -> None:
    image = np.zeros((100, 100, 3), dtype=np.uint8)
    image[:, :, 1] = 100  # green only
    blob = LightBlob.from_geometry((50.0, 50.0), 2.0, 20.0)

    assert total_brightness(image, blob, samples=5) == pytest.approx(10 * 0.6 * 100)


def test_brightness_samples_are_clamped_into_image() -> None:
    blob = LightBlob.from_geometry((2.0, 2.0), 2.0, 40.0)
    points = sample_points(blob, samples=5, shape=(50, 60))

    assert len(points) == 10
    assert all(0 <= x < 60 and 0 <= y < 50 for x, y in points)
    gray = np.full((50, 60), 200, dtype=np.uint8)
    assert total_brightness(gray, blob, samples=5) == pytest.approx(2000.0)


def test_classifier_labels_armors() -> None:
    image = np.zeros((400, 400, 3), dtype=np.uint8)
    detector = ArmorDetector(classifier=lambda roi: RobotType.HERO)

    result = detector.match(image, [_blob(100.0), _blob(140.0)])

    assert [armor.type for armor in result.combos] == [RobotType.HERO]
    assert len(result.rois) == 1
    assert result.rois[0].shape == (32, 32, 3)


def test_unknown_armors_dropped_when_configured() -> None:
    image = np.zeros((400, 400, 3), dtype=np.uint8)
    detector = ArmorDetector(
        DetectorConfig(drop_unknown_type=True), classifier=lambda roi: RobotType.UNKNOWN
    )

    result = detector.match(image, [_blob(100.0), _blob(140.0)])

    assert result.combos == []
