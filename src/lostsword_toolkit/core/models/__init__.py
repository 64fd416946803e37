"""
Core Models Package

Immutable data models shared by the roster, layout and compositor.

All models here are frozen dataclasses so snapshots can be handed to the
render thread and the overlay without copying.
"""

from .assets import (
    Asset,
    EquipmentKind,
    EQUIPMENT_KINDS,
    OTHER,
    classify_equipment,
    is_equipment_compatible,
)

__all__ = [
    "Asset",
    "EquipmentKind",
    "EQUIPMENT_KINDS",
    "OTHER",
    "classify_equipment",
    "is_equipment_compatible",
]
