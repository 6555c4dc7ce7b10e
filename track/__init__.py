"""Tracking module."""

from .armor_tracker import ArmorTracker, majority_type
from .config import ArmorTrackerConfig, RuneTrackerConfig, TrackerConfig
from .kalman import make_filter
from .rune_tracker import RuneTracker
from .tracker import Tracker, TrackerKind, VanishState

__all__ = [
    "ArmorTracker",
    "ArmorTrackerConfig",
    "RuneTracker",
    "RuneTrackerConfig",
    "Tracker",
    "TrackerConfig",
    "TrackerKind",
    "VanishState",
    "majority_type",
    "make_filter",
]
