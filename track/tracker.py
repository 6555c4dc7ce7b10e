"""Tracking interfaces and shared time-series bookkeeping."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections import deque
from enum import Enum, IntEnum
from typing import ClassVar, Deque, List, Optional, Type, TypeVar

from combo import Combo
from contracts import ImuData, RobotType, TrackerSnapshot
from exceptions import InvalidArgumentError, TrackerKindError
from log_config.logger import get_logger
from track.config import TrackerConfig

logger = get_logger(__name__)

T = TypeVar("T", bound="Tracker")


class TrackerKind(str, Enum):
    RUNE = "RUNE"
    ARMOR = "ARMOR"


class VanishState(IntEnum):
    VANISH = 0
    APPEAR = 1


class Tracker(ABC):
    """Time series of one physical target.

    ``combos`` and ``history`` hold the newest entry first. Trackers are only
    handed out after the first real observation has initialised every filter.
    """

    kind: ClassVar[TrackerKind]

    def __init__(self, first: Combo, config: TrackerConfig) -> None:
        if first is None:
            raise InvalidArgumentError(f"{type(self).__name__} needs a first combo")
        self._tracker_config = config
        self._combos: Deque[Combo] = deque(maxlen=config.history_depth)
        self._history: Deque[TrackerSnapshot] = deque(maxlen=config.history_depth)
        self._vanish_num = 0
        self._sample_time = 0.0
        self._last_t_ns = first.t_ns
        self._last_seen_t_ns = first.t_ns
        self._combos.appendleft(first)

    @classmethod
    def cast(cls: Type[T], tracker: "Tracker") -> T:
        """Checked match of a tracker handle against this kind."""
        if tracker.kind != cls.kind:
            raise TrackerKindError(
                f"expected a {cls.kind.value} tracker, got {tracker.kind.value}",
                expected=cls.kind.value,
                actual=tracker.kind.value,
            )
        return tracker

    @abstractmethod
    def update(self, combo: Optional[Combo], t_ns: int, imu: Optional[ImuData] = None) -> None:
        """Advance with a new observation (or None if the target was not seen)."""

    @property
    @abstractmethod
    def rotated_speed(self) -> float:
        """Primary fused angular velocity consumed by the aiming logic."""

    @property
    def type(self) -> RobotType:
        return self.front().type

    @property
    def vanish_num(self) -> int:
        return self._vanish_num

    @property
    def vanished(self) -> bool:
        return self._vanish_num > 0

    @property
    def sample_time(self) -> float:
        """Elapsed time (seconds) fed to the filters on the last update."""
        return self._sample_time

    @property
    def combos(self) -> List[Combo]:
        return list(self._combos)

    @property
    def history(self) -> List[TrackerSnapshot]:
        return list(self._history)

    def front(self) -> Combo:
        return self._combos[0]

    def should_destroy(self) -> bool:
        return self._vanish_num > self._tracker_config.max_vanish_num

    def update_vanish_state(self, state: VanishState) -> None:
        if state == VanishState.VANISH:
            self._vanish_num += 1
        else:
            self._vanish_num = 0

    def _elapsed(self, t_ns: int) -> float:
        """Seconds since the previous update; non-positive deltas become ``min_dt_s``."""
        config = self._tracker_config
        dt = (t_ns - self._last_t_ns) / 1e9
        if dt <= 0:
            logger.debug(f"Non-positive elapsed time {dt:.6f}s, clamping to {config.min_dt_s}s")
            dt = config.min_dt_s
        self._last_t_ns = max(self._last_t_ns, t_ns)
        self._sample_time = dt
        return dt

    def _unseen_for(self, t_ns: int) -> float:
        """Seconds since the last real observation."""
        return max((t_ns - self._last_seen_t_ns) / 1e9, self._tracker_config.min_dt_s)

    def _needs_reseed(self, t_ns: int) -> bool:
        gap_s = self._unseen_for(t_ns)
        if gap_s > self._tracker_config.reseed_gap_s:
            logger.info(f"{type(self).__name__} unseen for {gap_s:.3f}s, reseeding velocity states")
            return True
        return False

    def _mark_seen(self, t_ns: int) -> None:
        self._last_seen_t_ns = max(self._last_seen_t_ns, t_ns)

    def _push(self, combo: Combo, snapshot: TrackerSnapshot) -> None:
        self._combos.appendleft(combo)
        self._history.appendleft(snapshot)
