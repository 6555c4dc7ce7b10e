"""Combo module."""

from .armor import Armor, ArmorConfig
from .combo import Combo, DefaultCombo
from .rune import Rune

__all__ = ["Armor", "ArmorConfig", "Combo", "DefaultCombo", "Rune"]
