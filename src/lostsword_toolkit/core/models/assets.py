"""
Module: assets

Purpose:
    Provides the Asset dataclass - a read-only catalog entry (character,
    card, pet or equipment image) - and the equipment kind classifier
    that decides which equipment slot an item may occupy.

Key Functions:
    - classify_equipment(src): Derive EquipmentKind (or "other") from a source path
    - is_equipment_compatible(asset, kind): Check slot eligibility

Dependencies:
    - dataclasses (std)
    - enum (std)

Used By:
    - catalog.loader: Builds Assets from JSON
    - roster.model: Slot and formation contents
    - composer.output.renderer: Labels and image sources
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union


@dataclass(frozen=True, slots=True)
class Asset:
    """
    A catalog entry (immutable).

    Attributes:
        id: Identifier, unique within its category
        name: Display name drawn on labels and placeholders
        src: Image source identifier, e.g. "/assets/char/c_012.png"

    Example:
        >>> hero = Asset(id="c_012", name="Arin", src="/assets/char/c_012.png")
        >>> hero.id
        'c_012'
    """

    id: str
    name: str
    src: str

    def __post_init__(self) -> None:
        """Validate fields on construction."""
        if not self.id:
            raise ValueError("Asset id must be non-empty")
        if not self.src:
            raise ValueError(f"Asset {self.id!r} has no src")


class EquipmentKind(str, Enum):
    """Equipment slot kinds, in display order."""

    WEAPON = "weapon"
    ARMOR = "armor"
    HELMET = "helmet"
    ROON = "roon"

    @property
    def glyph(self) -> str:
        """One-letter glyph drawn on an empty equipment cell."""
        return _GLYPHS[self]


_GLYPHS = {
    EquipmentKind.WEAPON: "W",
    EquipmentKind.ARMOR: "A",
    EquipmentKind.HELMET: "H",
    EquipmentKind.ROON: "R",
}

EQUIPMENT_KINDS: tuple[EquipmentKind, ...] = tuple(EquipmentKind)

# Items whose src matches none of the kind segments; eligible for any slot.
OTHER = "other"

EquipmentClass = Union[EquipmentKind, str]


def classify_equipment(src: str) -> EquipmentClass:
    """
    Classify an equipment image by its source path.

    The first kind whose path segment ("/weapon/", "/armor/", ...) occurs
    in ``src`` wins, in EQUIPMENT_KINDS order.

    Args:
        src: Asset source identifier

    Returns:
        The matching EquipmentKind, or OTHER

    Example:
        >>> classify_equipment("/assets/equip/helmet/h_03.png")
        <EquipmentKind.HELMET: 'helmet'>
        >>> classify_equipment("/assets/equip/misc/x.png")
        'other'
    """
    for kind in EQUIPMENT_KINDS:
        if f"/{kind.value}/" in src:
            return kind
    return OTHER


def is_equipment_compatible(asset: Asset, kind: EquipmentKind) -> bool:
    """Return True if ``asset`` may be placed in the ``kind`` equipment slot."""
    found = classify_equipment(asset.src)
    return found == OTHER or found == kind
