"""
Module: roster

Purpose:
    Roster and formation assignment state for the composition canvas.

Key Classes:
    - SlotAssignmentModel: Mutation operations and listeners
    - RosterSnapshot: Immutable state handed to renderers
    - CharacterSlot: One roster entry

Key Functions:
    - assign_position(): Formation transition function
"""

from .formation import (
    CHARACTER_FORMATION,
    PET_FORMATION,
    FormationOutcome,
    FormationPolicy,
    Lane,
    LANES,
    assign_position,
    lane_counts,
    occupied_count,
)
from .model import (
    CHARACTER_SLOT_COUNT,
    PET_SLOT_COUNT,
    CharacterSlot,
    RosterSnapshot,
    SlotAssignmentModel,
)

__all__ = [
    # Formation
    "CHARACTER_FORMATION",
    "PET_FORMATION",
    "FormationOutcome",
    "FormationPolicy",
    "Lane",
    "LANES",
    "assign_position",
    "lane_counts",
    "occupied_count",
    # Model
    "CHARACTER_SLOT_COUNT",
    "PET_SLOT_COUNT",
    "CharacterSlot",
    "RosterSnapshot",
    "SlotAssignmentModel",
]
