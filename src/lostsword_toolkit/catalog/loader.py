"""
Module: catalog.loader

Purpose:
    Load the static asset catalog (cards, characters, pets, equipment)
    from JSON files into immutable Asset tuples with basic validation.

Key Functions:
    - load_catalog(): Load all categories from a data directory
    - parse_assets(): Validate one category's raw JSON list

Key Classes:
    - Catalog: Read-only per-category asset lists with lookups
    - CatalogError: Exception for missing or malformed catalog data

Dependencies:
    - json (std)
    - pathlib (std)
    - core.models: Asset

Used By:
    - catalog.picker: Candidate lists
    - Applications wiring a session together
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

from lostsword_toolkit.core.models import Asset

logger = logging.getLogger(__name__)

# Category name -> file name inside the data directory
CATEGORY_FILES: Dict[str, str] = {
    "card": "cards.json",
    "char": "chars.json",
    "pet": "pets.json",
    "equip": "equip.json",
}

CATEGORIES = tuple(CATEGORY_FILES)


class CatalogError(Exception):
    """Error loading or querying the asset catalog."""
    pass


@dataclass(frozen=True)
class Catalog:
    """
    Static asset catalog (immutable).

    Attributes:
        cards: Card assets
        chars: Character assets
        pets: Pet assets
        equips: Equipment assets (all kinds)

    Example:
        >>> catalog = load_catalog(Path("data"))
        >>> catalog.find("char", name="Arin").src
        '/assets/char/c_012.png'
    """

    cards: tuple[Asset, ...] = ()
    chars: tuple[Asset, ...] = ()
    pets: tuple[Asset, ...] = ()
    equips: tuple[Asset, ...] = ()

    def items(self, category: str) -> tuple[Asset, ...]:
        """
        Assets in ``category``.

        Raises:
            CatalogError: If category is unknown
        """
        if category == "card":
            return self.cards
        if category == "char":
            return self.chars
        if category == "pet":
            return self.pets
        if category == "equip":
            return self.equips
        raise CatalogError(f"Unknown catalog category: {category!r}")

    def find(
        self,
        category: str,
        *,
        id: Optional[str] = None,
        name: Optional[str] = None,
        src: Optional[str] = None,
    ) -> Optional[Asset]:
        """
        First asset in ``category`` matching every given key.

        Returns:
            Matching Asset, or None if nothing matches

        Raises:
            CatalogError: If no key is given or the category is unknown
        """
        if id is None and name is None and src is None:
            raise CatalogError("find() needs at least one of id, name, src")
        for asset in self.items(category):
            if id is not None and asset.id != id:
                continue
            if name is not None and asset.name != name:
                continue
            if src is not None and asset.src != src:
                continue
            return asset
        return None

    @property
    def total(self) -> int:
        """Number of assets across all categories."""
        return len(self.cards) + len(self.chars) + len(self.pets) + len(self.equips)


def parse_assets(raw: Any, category: str) -> tuple[Asset, ...]:
    """
    Validate a raw JSON list and build Assets.

    Each entry must be an object with string ``id``, ``name`` and ``src``.
    Ids must be unique within the category.

    Args:
        raw: Decoded JSON value
        category: Category name (for error messages)

    Returns:
        Tuple of Assets in file order

    Raises:
        CatalogError: If the data is malformed
    """
    if not isinstance(raw, list):
        raise CatalogError(f"{category}: expected a JSON list, got {type(raw).__name__}")

    assets: List[Asset] = []
    seen: set[str] = set()
    for position, entry in enumerate(raw):
        if not isinstance(entry, dict):
            raise CatalogError(f"{category}[{position}]: expected an object")
        values = {}
        for key in ("id", "name", "src"):
            value = entry.get(key)
            if not isinstance(value, str):
                raise CatalogError(f"{category}[{position}]: missing or non-string {key!r}")
            values[key] = value
        if values["id"] in seen:
            raise CatalogError(f"{category}: duplicate id {values['id']!r}")
        seen.add(values["id"])
        try:
            assets.append(Asset(**values))
        except ValueError as e:
            raise CatalogError(f"{category}[{position}]: {e}") from e
    return tuple(assets)


def load_catalog(data_dir: Path, *, required: bool = True) -> Catalog:
    """
    Load every catalog category from ``data_dir``.

    Args:
        data_dir: Directory holding cards.json, chars.json, pets.json, equip.json
        required: If False, missing files load as empty categories

    Returns:
        Populated Catalog

    Raises:
        CatalogError: If the directory or a required file is missing,
            or any file is malformed

    Example:
        >>> catalog = load_catalog(Path("public/data"))
        >>> len(catalog.chars)
        87
    """
    data_dir = Path(data_dir)
    if not data_dir.is_dir():
        raise CatalogError(f"Catalog directory does not exist: {data_dir}")

    loaded: Dict[str, tuple[Asset, ...]] = {}
    for category, filename in CATEGORY_FILES.items():
        path = data_dir / filename
        if not path.exists():
            if required:
                raise CatalogError(f"Catalog file missing: {path}")
            logger.warning(f"Catalog file missing, using empty {category} list: {path}")
            loaded[category] = ()
            continue
        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise CatalogError(f"Invalid JSON in {path}: {e}") from e
        loaded[category] = parse_assets(raw, category)

    catalog = Catalog(
        cards=loaded["card"],
        chars=loaded["char"],
        pets=loaded["pet"],
        equips=loaded["equip"],
    )
    logger.info(
        f"Loaded catalog from {data_dir}: {len(catalog.chars)} chars, "
        f"{len(catalog.cards)} cards, {len(catalog.pets)} pets, {len(catalog.equips)} equips"
    )
    return catalog
