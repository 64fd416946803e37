"""
Module: roster.model

Purpose:
    Session-lifetime roster state: five character slots (character, card,
    four equipment pieces), three pet slots, the six-position character
    formation and the three-lane pet formation. All mutation goes through
    SlotAssignmentModel, which swaps in a new immutable RosterSnapshot on
    every change and notifies listeners.

Key Classes:
    - CharacterSlot: One roster entry (immutable)
    - RosterSnapshot: Complete roster state (immutable)
    - SlotAssignmentModel: Owner of the state and its mutation operations

Dependencies:
    - dataclasses (std)
    - core.models: Asset, EquipmentKind
    - roster.formation: Placement state machine

Used By:
    - composer.controller: Triggers renders on change
    - composer.output.renderer: Reads snapshots
    - catalog.picker: Candidate filtering and selection routing
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Callable, List, Mapping, Optional, Set

from lostsword_toolkit.core.models import (
    Asset,
    EquipmentKind,
    EQUIPMENT_KINDS,
    is_equipment_compatible,
)

from .formation import (
    CHARACTER_FORMATION,
    PET_FORMATION,
    FormationOutcome,
    Positions,
    assign_position,
    find_asset,
)

logger = logging.getLogger(__name__)

CHARACTER_SLOT_COUNT = 5
PET_SLOT_COUNT = 3

Listener = Callable[["RosterSnapshot"], None]


def _empty_equips() -> Mapping[EquipmentKind, Optional[Asset]]:
    return MappingProxyType({kind: None for kind in EQUIPMENT_KINDS})


@dataclass(frozen=True)
class CharacterSlot:
    """
    One roster entry (immutable).

    Attributes:
        id: Stable slot id ("slot-1" .. "slot-5")
        char: Assigned character, or None
        card: Assigned card, or None
        equips: Read-only mapping of every EquipmentKind to an Asset or None
    """

    id: str
    char: Optional[Asset] = None
    card: Optional[Asset] = None
    equips: Mapping[EquipmentKind, Optional[Asset]] = field(default_factory=_empty_equips)

    @classmethod
    def pristine(cls, index: int) -> "CharacterSlot":
        """Empty slot for position ``index`` (0-based)."""
        return cls(id=f"slot-{index + 1}")

    @property
    def is_empty(self) -> bool:
        """True if nothing at all is assigned."""
        return self.char is None and self.card is None and all(
            item is None for item in self.equips.values()
        )

    def with_equipment(self, kind: EquipmentKind, asset: Optional[Asset]) -> "CharacterSlot":
        """Copy of this slot with one equipment piece replaced."""
        equips = dict(self.equips)
        equips[kind] = asset
        return replace(self, equips=MappingProxyType(equips))

    def assets(self) -> List[Asset]:
        """Every asset assigned to this slot, character first."""
        found = [self.char, self.card, *(self.equips[kind] for kind in EQUIPMENT_KINDS)]
        return [item for item in found if item is not None]


@dataclass(frozen=True)
class RosterSnapshot:
    """
    Complete roster state at one point in time (immutable).

    Attributes:
        char_slots: The five character slots
        pet_slots: Three independent pet slots
        formation: Six character formation positions (0-1 back, 2-3 mid, 4-5 front)
        pet_formation: Three pet formation positions (back, mid, front)
    """

    char_slots: tuple[CharacterSlot, ...]
    pet_slots: Positions
    formation: Positions
    pet_formation: Positions

    @classmethod
    def initial(cls) -> "RosterSnapshot":
        """All-null skeleton created at session start."""
        return cls(
            char_slots=tuple(CharacterSlot.pristine(i) for i in range(CHARACTER_SLOT_COUNT)),
            pet_slots=(None,) * PET_SLOT_COUNT,
            formation=CHARACTER_FORMATION.empty(),
            pet_formation=PET_FORMATION.empty(),
        )

    def required_sources(self) -> Set[str]:
        """Image sources referenced anywhere in this snapshot."""
        sources = {asset.src for slot in self.char_slots for asset in slot.assets()}
        for group in (self.pet_slots, self.formation, self.pet_formation):
            sources.update(item.src for item in group if item is not None)
        return sources


class SlotAssignmentModel:
    """
    Owns the roster state and enforces placement invariants.

    Every operation returns the resulting snapshot. Placement-policy
    violations (full formation, full lane, mismatched equipment) leave the
    state unchanged and return the current snapshot; they never raise.
    Caller misuse (bad index, unknown kind) raises.

    Uniqueness of characters and cards across slots is the picker's job
    (see catalog.picker.available_candidates); set_character/set_card
    store what they are given.

    Example:
        >>> model = SlotAssignmentModel()
        >>> model.assign_formation(0, hero).formation[0] is hero
        True
    """

    def __init__(self) -> None:
        self._state = RosterSnapshot.initial()
        self._listeners: List[Listener] = []

    # ─────────────────────────────────────────────────────────────────────
    # Reads
    # ─────────────────────────────────────────────────────────────────────

    @property
    def snapshot(self) -> RosterSnapshot:
        """Current immutable state."""
        return self._state

    def slot(self, index: int) -> CharacterSlot:
        """Character slot at ``index``."""
        return self._state.char_slots[check_index(index, CHARACTER_SLOT_COUNT, "slot")]

    def required_sources(self) -> Set[str]:
        """Image sources referenced by the current state."""
        return self._state.required_sources()

    # ─────────────────────────────────────────────────────────────────────
    # Listeners
    # ─────────────────────────────────────────────────────────────────────

    def add_listener(self, listener: Listener) -> None:
        """Call ``listener(snapshot)`` after each state change."""
        self._listeners.append(listener)

    def remove_listener(self, listener: Listener) -> None:
        """Stop notifying ``listener``; unknown listeners are ignored."""
        if listener in self._listeners:
            self._listeners.remove(listener)

    # ─────────────────────────────────────────────────────────────────────
    # Character slots
    # ─────────────────────────────────────────────────────────────────────

    def set_character(self, index: int, asset: Optional[Asset]) -> RosterSnapshot:
        """Replace the character of slot ``index``."""
        slot = self.slot(index)
        return self._replace_slot(index, replace(slot, char=asset))

    def set_card(self, index: int, asset: Optional[Asset]) -> RosterSnapshot:
        """Replace the card of slot ``index``."""
        slot = self.slot(index)
        return self._replace_slot(index, replace(slot, card=asset))

    def set_equipment(
        self,
        index: int,
        kind: EquipmentKind,
        asset: Optional[Asset],
    ) -> RosterSnapshot:
        """
        Replace one equipment piece of slot ``index``.

        Items classified as a different kind are rejected (no-op); items
        classified "other" fit any kind.

        Raises:
            IndexError: If index is out of range
            ValueError: If kind is not an equipment kind
        """
        slot = self.slot(index)
        kind = coerce_kind(kind)
        if asset is not None and not is_equipment_compatible(asset, kind):
            logger.debug(f"Rejected {asset.id} for {kind.value} slot of {slot.id}: wrong kind")
            return self._state
        return self._replace_slot(index, slot.with_equipment(kind, asset))

    def reset_slot(self, index: int) -> RosterSnapshot:
        """Restore slot ``index`` to its pristine empty shape."""
        check_index(index, CHARACTER_SLOT_COUNT, "slot")
        return self._replace_slot(index, CharacterSlot.pristine(index))

    # ─────────────────────────────────────────────────────────────────────
    # Pets
    # ─────────────────────────────────────────────────────────────────────

    def set_pet(self, index: int, asset: Optional[Asset]) -> RosterSnapshot:
        """
        Put ``asset`` in pet slot ``index``.

        A pet already held by another pet slot is moved rather than copied.
        """
        check_index(index, PET_SLOT_COUNT, "pet slot")
        pets = list(self._state.pet_slots)
        if asset is not None:
            existing = find_asset(self._state.pet_slots, asset.id)
            if existing is not None and existing != index:
                pets[existing] = None
        pets[index] = asset
        return self._commit(replace(self._state, pet_slots=tuple(pets)))

    # ─────────────────────────────────────────────────────────────────────
    # Formations
    # ─────────────────────────────────────────────────────────────────────

    def assign_formation(self, position: int, asset: Optional[Asset]) -> RosterSnapshot:
        """
        Assign (or clear) a character formation position.

        See roster.formation.assign_position for the transition rules;
        capacity violations are silently rejected.
        """
        positions, outcome = assign_position(
            self._state.formation, position, asset, CHARACTER_FORMATION
        )
        if outcome is FormationOutcome.REJECTED:
            return self._state
        return self._commit(replace(self._state, formation=positions))

    def assign_pet_formation(self, position: int, asset: Optional[Asset]) -> RosterSnapshot:
        """Assign (or clear) a pet formation lane; relocation only, no capacity."""
        positions, _ = assign_position(
            self._state.pet_formation, position, asset, PET_FORMATION
        )
        return self._commit(replace(self._state, pet_formation=positions))

    # ─────────────────────────────────────────────────────────────────────
    # Internals
    # ─────────────────────────────────────────────────────────────────────

    def _replace_slot(self, index: int, slot: CharacterSlot) -> RosterSnapshot:
        slots = list(self._state.char_slots)
        slots[index] = slot
        return self._commit(replace(self._state, char_slots=tuple(slots)))

    def _commit(self, state: RosterSnapshot) -> RosterSnapshot:
        if state == self._state:
            return self._state
        self._state = state
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception:
                logger.exception("Roster listener failed")
        return state


def check_index(index: int, size: int, what: str) -> int:
    """Return ``index`` or raise TypeError/IndexError if it is not a valid position."""
    if isinstance(index, bool) or not isinstance(index, int):
        raise TypeError(f"{what} index must be an int: {index!r}")
    if not 0 <= index < size:
        raise IndexError(f"{what} index {index} out of range 0..{size - 1}")
    return index


def coerce_kind(kind: EquipmentKind | str) -> EquipmentKind:
    """EquipmentKind for ``kind``; ValueError for unknown kinds."""
    try:
        return EquipmentKind(kind)
    except ValueError:
        raise ValueError(f"Unknown equipment kind: {kind!r}") from None
