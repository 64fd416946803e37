"""
Module: roster.formation

Purpose:
    Formation placement state machine. Each formation position is either
    empty or occupied by one asset; assign_position() is the only
    transition function. Positions are grouped into lanes (back/mid/front)
    and a FormationPolicy caps total and per-lane occupancy.

Key Functions:
    - assign_position(): Apply one clear/place/move/toggle transition
    - lane_counts(): Occupied positions per lane
    - occupied_count(): Occupied positions overall

Key Classes:
    - Lane: back/mid/front
    - FormationPolicy: Lane geometry and capacity limits
    - FormationOutcome: Which transition was taken

Dependencies:
    - dataclasses (std)
    - enum (std)

Used By:
    - roster.model: Character and pet formations
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple

from lostsword_toolkit.core.models import Asset

logger = logging.getLogger(__name__)

Positions = Tuple[Optional[Asset], ...]


class Lane(str, Enum):
    """Formation lane, ordered back to front."""

    BACK = "back"
    MID = "mid"
    FRONT = "front"


LANES: tuple[Lane, ...] = tuple(Lane)


class FormationOutcome(str, Enum):
    """Transition taken by assign_position()."""

    CLEARED = "cleared"          # target set to empty by request
    PLACED = "placed"            # asset put into an empty position
    MOVED = "moved"              # asset relocated from another position
    REPLACED = "replaced"        # asset put over another asset
    TOGGLED_OFF = "toggled_off"  # asset assigned to its own position
    REJECTED = "rejected"        # capacity exceeded, state unchanged


@dataclass(frozen=True)
class FormationPolicy:
    """
    Lane geometry and capacity rules for a formation (immutable).

    Attributes:
        lanes: Lane of each position, indexed by position
        max_total: Maximum occupied positions (None = unlimited)
        max_per_lane: Maximum occupied positions in one lane (None = unlimited)

    Example:
        >>> CHARACTER_FORMATION.lane_of(3)
        <Lane.MID: 'mid'>
    """

    lanes: tuple[Lane, ...]
    max_total: Optional[int] = None
    max_per_lane: Optional[int] = None

    def __post_init__(self) -> None:
        """Validate policy on construction."""
        if not self.lanes:
            raise ValueError("A formation needs at least one position")
        if self.max_total is not None and self.max_total <= 0:
            raise ValueError(f"max_total must be positive: {self.max_total}")
        if self.max_per_lane is not None and self.max_per_lane <= 0:
            raise ValueError(f"max_per_lane must be positive: {self.max_per_lane}")

    @property
    def size(self) -> int:
        """Number of positions."""
        return len(self.lanes)

    def lane_of(self, position: int) -> Lane:
        """Lane containing ``position``."""
        return self.lanes[self.check_position(position)]

    def check_position(self, position: int) -> int:
        """Return ``position`` or raise IndexError if it is out of range."""
        if isinstance(position, bool) or not isinstance(position, int):
            raise TypeError(f"position must be an int: {position!r}")
        if not 0 <= position < self.size:
            raise IndexError(f"position {position} out of range 0..{self.size - 1}")
        return position

    def empty(self) -> Positions:
        """All-empty positions tuple."""
        return (None,) * self.size


# Positions 0-1 back, 2-3 mid, 4-5 front; five heroes at most, two per lane.
CHARACTER_FORMATION = FormationPolicy(
    lanes=(Lane.BACK, Lane.BACK, Lane.MID, Lane.MID, Lane.FRONT, Lane.FRONT),
    max_total=5,
    max_per_lane=2,
)

# One pet per lane, no capacity rules beyond uniqueness.
PET_FORMATION = FormationPolicy(lanes=(Lane.BACK, Lane.MID, Lane.FRONT))


def occupied_count(positions: Positions) -> int:
    """Number of occupied positions."""
    return sum(1 for item in positions if item is not None)


def lane_counts(positions: Positions, policy: FormationPolicy) -> Dict[Lane, int]:
    """Occupied positions per lane (every lane present, possibly 0)."""
    counts = {lane: 0 for lane in LANES}
    for index, item in enumerate(positions):
        if item is not None:
            counts[policy.lanes[index]] += 1
    return counts


def find_asset(positions: Positions, asset_id: str) -> Optional[int]:
    """Index of the position holding ``asset_id``, or None."""
    for index, item in enumerate(positions):
        if item is not None and item.id == asset_id:
            return index
    return None


def assign_position(
    positions: Positions,
    position: int,
    asset: Optional[Asset],
    policy: FormationPolicy,
) -> Tuple[Positions, FormationOutcome]:
    """
    Apply one formation transition.

    Rules:
    - ``asset`` None: the position becomes empty unconditionally.
    - ``asset`` already at ``position``: toggle off (position cleared).
    - ``asset`` elsewhere: that position is vacated in the same transition,
      before the capacity check.
    - Placing into an empty position is rejected when the total or the
      target lane would exceed the policy limits. Placing over an occupied
      position is always allowed.

    Args:
        positions: Current positions (not modified)
        position: Target position index
        asset: Asset to place, or None to clear
        policy: Lane geometry and limits

    Returns:
        (new positions, outcome). On REJECTED the input tuple is returned.

    Raises:
        IndexError: If position is out of range
        ValueError: If positions does not match the policy size

    Example:
        >>> empty = CHARACTER_FORMATION.empty()
        >>> state, outcome = assign_position(empty, 0, hero, CHARACTER_FORMATION)
        >>> outcome
        <FormationOutcome.PLACED: 'placed'>
    """
    if len(positions) != policy.size:
        raise ValueError(f"Expected {policy.size} positions, got {len(positions)}")
    policy.check_position(position)

    if asset is None:
        updated = list(positions)
        updated[position] = None
        return tuple(updated), FormationOutcome.CLEARED

    existing = find_asset(positions, asset.id)
    if existing == position:
        updated = list(positions)
        updated[position] = None
        return tuple(updated), FormationOutcome.TOGGLED_OFF

    updated = list(positions)
    if existing is not None:
        updated[existing] = None

    if updated[position] is not None:
        outcome = FormationOutcome.REPLACED
    else:
        if policy.max_total is not None and occupied_count(updated) + 1 > policy.max_total:
            logger.debug(
                f"Rejected {asset.id} at {position}: formation full "
                f"({occupied_count(positions)}/{policy.max_total})"
            )
            return positions, FormationOutcome.REJECTED
        lane = policy.lanes[position]
        if policy.max_per_lane is not None:
            if lane_counts(tuple(updated), policy)[lane] + 1 > policy.max_per_lane:
                logger.debug(f"Rejected {asset.id} at {position}: {lane.value} lane full")
                return positions, FormationOutcome.REJECTED
        outcome = FormationOutcome.MOVED if existing is not None else FormationOutcome.PLACED

    updated[position] = asset
    return tuple(updated), outcome
