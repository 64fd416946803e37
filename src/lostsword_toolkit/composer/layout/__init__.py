"""
Module: composer.layout

Purpose:
    Fixed template geometry shared by drawing and hit-testing.

Key Functions:
    - compute_layout(): Canvas width -> LayoutTree
    - hit_regions(): Overlay click targets
    - hit_test(): Region under a point

Key Classes:
    - LayoutTree, CharacterCell, PetLane, NoteRegion, Rect, HitRegion
"""

from .engine import compute_layout, hit_regions, hit_test
from .models import (
    CharacterCell,
    EquipmentCell,
    HitRegion,
    LayoutTree,
    NoteRegion,
    PetLane,
    Rect,
)

__all__ = [
    # Functions
    "compute_layout",
    "hit_regions",
    "hit_test",
    # Models
    "CharacterCell",
    "EquipmentCell",
    "HitRegion",
    "LayoutTree",
    "NoteRegion",
    "PetLane",
    "Rect",
]
