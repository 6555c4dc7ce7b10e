"""Feature module."""

from .feature import Feature
from .light_blob import LightBlob, LightBlobConfig
from .rune import RuneCenter, RuneTarget
from .tag import Tag

__all__ = [
    "Feature",
    "LightBlob",
    "LightBlobConfig",
    "RuneCenter",
    "RuneTarget",
    "Tag",
]
