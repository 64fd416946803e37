import json
import os
import sys
from pathlib import Path

import pytest
from PIL import Image

# Run Qt headless when no display is available
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

# Add src to sys.path so we can import lostsword_toolkit
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())

from lostsword_toolkit.core.models import Asset  # noqa: E402
from lostsword_toolkit.roster import SlotAssignmentModel  # noqa: E402

LANE_ICONS = ("/assets/lane-back.png", "/assets/lane-mid.png", "/assets/lane-front.png")


def make_asset(asset_id: str, category: str = "char", name: str | None = None) -> Asset:
    """Build an Asset whose src follows the catalog layout."""
    return Asset(id=asset_id, name=name or asset_id.upper(), src=f"/assets/{category}/{asset_id}.png")


# Common test fixtures
@pytest.fixture
def asset_factory():
    """Factory for assets: asset_factory("h1", "char", name="Hero")."""
    return make_asset


@pytest.fixture
def heroes():
    """Seven distinct character assets (h1..h7)."""
    return [make_asset(f"h{i}", "char", name=f"Hero {i}") for i in range(1, 8)]


@pytest.fixture
def pets():
    """Three distinct pet assets."""
    return [make_asset(f"p{i}", "pet", name=f"Pet {i}") for i in range(1, 4)]


@pytest.fixture
def model():
    """Fresh roster model."""
    return SlotAssignmentModel()


@pytest.fixture
def asset_root(tmp_path: Path):
    """
    Asset directory with solid-colour PNGs for the lane icons and a few
    characters, cards and equipment pieces.
    """
    root = tmp_path / "public"
    files = {
        "assets/lane-back.png": (14, 165, 233, 255),
        "assets/lane-mid.png": (245, 158, 11, 255),
        "assets/lane-front.png": (244, 63, 94, 255),
        "assets/char/h1.png": (255, 0, 0, 255),
        "assets/char/h2.png": (0, 255, 0, 255),
        "assets/card/k1.png": (0, 0, 255, 255),
        "assets/pet/p1.png": (255, 255, 0, 255),
        "assets/equip/weapon/w1.png": (255, 0, 255, 255),
    }
    for rel, color in files.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        Image.new("RGBA", (40, 40), color).save(path)
    return root


@pytest.fixture
def catalog_dir(tmp_path: Path):
    """Data directory with small valid catalog files."""
    data = tmp_path / "data"
    data.mkdir()
    content = {
        "chars.json": [
            {"id": "c_003", "name": "Arin", "src": "/assets/char/c_003.png"},
            {"id": "c_120", "name": "Bellatrix", "src": "/assets/char/c_120.png"},
            {"id": "c_087", "name": "Cyra", "src": "/assets/char/c_087.png"},
        ],
        "cards.json": [
            {"id": "k_1", "name": "Dawn", "src": "/assets/card/k_1.png"},
            {"id": "k_2", "name": "Dusk", "src": "/assets/card/k_2.png"},
        ],
        "pets.json": [
            {"id": "p_1", "name": "Mochi", "src": "/assets/pet/p_1.png"},
            {"id": "p_2", "name": "Pip", "src": "/assets/pet/p_2.png"},
        ],
        "equip.json": [
            {"id": "e_10", "name": "Longsword", "src": "/assets/equip/weapon/e_10.png"},
            {"id": "e_11", "name": "Chainmail", "src": "/assets/equip/armor/e_11.png"},
            {"id": "e_12", "name": "Lucky Charm", "src": "/assets/equip/misc/e_12.png"},
            {"id": "e_13", "name": "Rune Stone", "src": "/assets/equip/roon/e_13.png"},
        ],
    }
    for name, entries in content.items():
        (data / name).write_text(json.dumps(entries), encoding="utf-8")
    return data
