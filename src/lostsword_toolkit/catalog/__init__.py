"""
Module: catalog

Purpose:
    Static asset catalog loading and picker selection helpers.

Key Functions:
    - load_catalog(): Load JSON catalog files
    - available_candidates(): Candidate list for a slot
    - apply_selection(): Route a choice to the roster model

Key Classes:
    - Catalog: Read-only asset lists
    - SlotTarget: Picker target
    - CatalogError: Loading/query failures
"""

from .loader import CATEGORIES, Catalog, CatalogError, load_catalog, parse_assets
from .picker import SlotTarget, apply_selection, available_candidates, toggle_pet_lane

__all__ = [
    # Loading
    "CATEGORIES",
    "Catalog",
    "CatalogError",
    "load_catalog",
    "parse_assets",
    # Picker
    "SlotTarget",
    "apply_selection",
    "available_candidates",
    "toggle_pet_lane",
]
