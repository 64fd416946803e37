"""
Module: composer.layout.models

Purpose:
    Geometry tree produced by the layout engine. Immutable dataclasses in
    logical (unscaled) pixels, shared by the compositor and hit-testing.

Key Classes:
    - Rect: Axis-aligned rectangle
    - EquipmentCell: One equipment item box
    - CharacterCell: Character/card/equipment sub-regions of one slot
    - PetLane: One pet formation lane box
    - NoteRegion: Note box, title anchor and text area
    - LayoutTree: Complete canvas geometry
    - HitRegion: Clickable region for an overlay

Dependencies:
    - dataclasses (std)

Used By:
    - composer.layout.engine: Creates the tree
    - composer.output.renderer: Draws from it
    - gui.preview_widget: Click targets
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from lostsword_toolkit.core.models import EquipmentKind


@dataclass(frozen=True, slots=True)
class Rect:
    """
    Rectangle in logical pixels; [x, right) x [y, bottom).

    Example:
        >>> Rect(10, 20, 30, 40).right
        40
        >>> Rect(10, 20, 30, 40).contains(39.9, 59.9)
        True
    """

    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        """Right edge (exclusive)."""
        return self.x + self.width

    @property
    def bottom(self) -> float:
        """Bottom edge (exclusive)."""
        return self.y + self.height

    @property
    def center(self) -> Tuple[float, float]:
        """Centre point."""
        return self.x + self.width / 2, self.y + self.height / 2

    def contains(self, px: float, py: float) -> bool:
        """True if the point lies inside the rectangle."""
        return self.x <= px < self.right and self.y <= py < self.bottom


@dataclass(frozen=True, slots=True)
class EquipmentCell:
    """Equipment item box for one kind."""

    kind: EquipmentKind
    rect: Rect


@dataclass(frozen=True, slots=True)
class CharacterCell:
    """
    Geometry of one character slot.

    Attributes:
        index: Slot index (0-4)
        rect: Whole cell (background/border)
        char_rect: Character image
        card_rect: Card image
        equip_row: Equipment row background
        equips: Four equipment boxes in EQUIPMENT_KINDS order
    """

    index: int
    rect: Rect
    char_rect: Rect
    card_rect: Rect
    equip_row: Rect
    equips: Tuple[EquipmentCell, ...]


@dataclass(frozen=True, slots=True)
class PetLane:
    """
    Geometry of one pet formation lane box.

    Attributes:
        index: Lane index (0 back, 1 mid, 2 front)
        rect: Lane box
        label_row: Icon + label band at the top of the box
        image_rect: Pet image slot
    """

    index: int
    rect: Rect
    label_row: Rect
    image_rect: Rect


@dataclass(frozen=True, slots=True)
class NoteRegion:
    """
    Geometry of the note region.

    Attributes:
        rect: Note box
        title_center: Centre point of the title text
        text_rect: Area available to wrapped note lines
        line_height: Line advance
        max_lines: Lines that fit in text_rect
    """

    rect: Rect
    title_center: Tuple[float, float]
    text_rect: Rect
    line_height: float
    max_lines: int


@dataclass(frozen=True, slots=True)
class LayoutTree:
    """
    Complete canvas geometry (immutable).

    Attributes:
        width: Logical canvas width
        height: Logical canvas height
        cell_width: Character cell width
        cells: Character cells, left to right
        pet_region: Pet formation region
        lanes: Pet lane boxes, back to front
        note: Note region
    """

    width: float
    height: float
    cell_width: float
    cells: Tuple[CharacterCell, ...]
    pet_region: Rect
    lanes: Tuple[PetLane, ...]
    note: NoteRegion

    @property
    def bounds(self) -> Rect:
        """Whole canvas."""
        return Rect(0, 0, self.width, self.height)


@dataclass(frozen=True, slots=True)
class HitRegion:
    """
    Clickable region mapped to a picker target.

    Attributes:
        kind: "char", "card", "equip", "pet" or "note"
        index: Slot index (or lane index for "pet"; 0 for "note")
        rect: Region in logical pixels (identical to the drawn rect)
        equip_kind: Equipment kind for "equip" regions
    """

    kind: str
    index: int
    rect: Rect
    equip_kind: Optional[EquipmentKind] = None
