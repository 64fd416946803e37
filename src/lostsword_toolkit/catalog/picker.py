"""
Module: catalog.picker

Purpose:
    Selection helpers for a picker UI. Builds the candidate list for a
    target slot (this is where character/card/pet uniqueness is enforced)
    and routes the chosen asset to the right model operation.

Key Functions:
    - available_candidates(): Filter, search and sort candidates for a slot
    - apply_selection(): Send a chosen asset to the SlotAssignmentModel
    - toggle_pet_lane(): Clear an occupied pet lane on click

Key Classes:
    - SlotTarget: Which slot the picker is filling

Dependencies:
    - re (std)
    - catalog.loader: Catalog
    - roster.model: SlotAssignmentModel, RosterSnapshot

Used By:
    - gui.preview_widget consumers (picker dialogs)
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import List, Optional, Set

from lostsword_toolkit.core.models import Asset, EquipmentKind, is_equipment_compatible
from lostsword_toolkit.roster.formation import PET_FORMATION
from lostsword_toolkit.roster.model import (
    CHARACTER_SLOT_COUNT,
    RosterSnapshot,
    SlotAssignmentModel,
    check_index,
    coerce_kind,
)

from .loader import Catalog

logger = logging.getLogger(__name__)

TARGET_KINDS = ("char", "card", "pet", "equip")

_DIGITS = re.compile(r"\d+")


@dataclass(frozen=True)
class SlotTarget:
    """
    Slot a picker is filling.

    Attributes:
        kind: "char", "card", "pet" (pet formation lane) or "equip"
        slot_index: Character slot index, or pet lane index for "pet"
        equip_kind: Equipment kind (or its name), required when kind is "equip"

    Raises:
        ValueError: For an unknown target or equipment kind
        IndexError/TypeError: For an invalid slot or lane index
    """

    kind: str
    slot_index: int
    equip_kind: Optional[EquipmentKind] = None

    def __post_init__(self) -> None:
        """Validate target on construction."""
        if self.kind not in TARGET_KINDS:
            raise ValueError(f"Unknown target kind: {self.kind!r}")
        if self.kind == "equip" and self.equip_kind is None:
            raise ValueError("equip targets need an equip_kind")
        if self.equip_kind is not None:
            object.__setattr__(self, "equip_kind", coerce_kind(self.equip_kind))
        if self.kind == "pet":
            check_index(self.slot_index, PET_FORMATION.size, "pet lane")
        else:
            check_index(self.slot_index, CHARACTER_SLOT_COUNT, "slot")

    @property
    def category(self) -> str:
        """Catalog category that supplies candidates."""
        return self.kind


def _current(snapshot: RosterSnapshot, target: SlotTarget) -> Optional[Asset]:
    if target.kind == "char":
        return snapshot.char_slots[target.slot_index].char
    if target.kind == "card":
        return snapshot.char_slots[target.slot_index].card
    if target.kind == "pet":
        return snapshot.pet_formation[target.slot_index]
    return None


def _used_ids(snapshot: RosterSnapshot, kind: str) -> Set[str]:
    if kind == "char":
        items = [slot.char for slot in snapshot.char_slots]
    elif kind == "card":
        items = [slot.card for slot in snapshot.char_slots]
    elif kind == "pet":
        items = list(snapshot.pet_formation)
    else:
        items = []
    return {item.id for item in items if item is not None}


def _id_number(asset: Asset) -> int:
    match = _DIGITS.search(asset.id)
    return int(match.group()) if match else 0


def available_candidates(
    catalog: Catalog,
    snapshot: RosterSnapshot,
    target: SlotTarget,
    query: str = "",
) -> List[Asset]:
    """
    Candidate assets for ``target``.

    Filtering:
    - Characters, cards and pets already used elsewhere are excluded;
      the asset currently in the target slot stays selectable.
    - Equipment is limited to the target kind plus "other" items.
    - ``query`` matches names case-insensitively (substring).

    Candidates are sorted by the first number in their id, highest first.

    Args:
        catalog: Asset catalog
        snapshot: Current roster state
        target: Slot being filled
        query: Optional search text

    Returns:
        Sorted list of candidate Assets

    Example:
        >>> target = SlotTarget("char", 0)
        >>> [a.id for a in available_candidates(catalog, model.snapshot, target)]
        ['c_120', 'c_087', 'c_003']
    """
    pool = catalog.items(target.category)
    if target.kind == "equip":
        candidates = [item for item in pool if is_equipment_compatible(item, target.equip_kind)]
    else:
        used = _used_ids(snapshot, target.kind)
        current = _current(snapshot, target)
        current_id = current.id if current is not None else None
        candidates = [item for item in pool if item.id not in used or item.id == current_id]

    needle = query.strip().lower()
    if needle:
        candidates = [item for item in candidates if needle in item.name.lower()]

    return sorted(candidates, key=_id_number, reverse=True)


def apply_selection(
    model: SlotAssignmentModel,
    target: SlotTarget,
    asset: Optional[Asset],
) -> RosterSnapshot:
    """
    Route a picker choice to the matching model operation.

    "pet" targets fill the pet formation lane of ``slot_index``.

    Returns:
        The model's snapshot after the operation
    """
    logger.debug(f"Applying selection {asset.id if asset else None} to {target}")
    if target.kind == "char":
        return model.set_character(target.slot_index, asset)
    if target.kind == "card":
        return model.set_card(target.slot_index, asset)
    if target.kind == "pet":
        return model.assign_pet_formation(target.slot_index, asset)
    return model.set_equipment(target.slot_index, target.equip_kind, asset)


def toggle_pet_lane(model: SlotAssignmentModel, lane_index: int) -> bool:
    """
    Handle a click on a pet lane box.

    Returns:
        True if the lane was occupied and has been cleared; False if it
        is empty and the caller should open the pet picker.
    """
    if model.snapshot.pet_formation[lane_index] is None:
        return False
    model.assign_pet_formation(lane_index, None)
    return True
