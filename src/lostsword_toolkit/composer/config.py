"""
Module: composer.config

Purpose:
    Configuration for the composition canvas. TemplateConfig holds the
    fixed template geometry constants consumed by the layout engine;
    RenderConfig holds colours, fonts and labels used by the compositor;
    CacheConfig sizes the image loading pool.

Key Classes:
    - TemplateConfig: Layout constants (immutable, hashable)
    - RenderConfig: Drawing settings (immutable)
    - LabelSet: Localized template labels
    - CacheConfig: Image loader settings

Dependencies:
    - dataclasses (std)

Used By:
    - composer.layout.engine: Geometry
    - composer.output.renderer: Drawing
    - composer.images.cache: Loader pool
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Tuple

Color = Tuple[int, int, int, int]

# Default logical canvas width of the editor preview
DEFAULT_CANVAS_WIDTH = 1280


@dataclass(frozen=True)
class TemplateConfig:
    """
    Fixed template geometry in logical pixels (immutable).

    Attributes:
        padding: Outer canvas padding
        cell_gap: Horizontal gap between character cells
        cell_count: Number of character cells
        cell_padding: Inner padding of a character cell
        section_gap: Vertical gap between cell sub-regions and sections
        max_image_height: Cap for character and card image heights
        char_aspect: Character image height / width
        card_aspect: Card image height / width
        equip_size: Equipment item height
        equip_gap: Horizontal gap between equipment items
        equip_row_padding: Vertical padding inside the equipment row
        bottom_height: Height of the pet/note section
        pet_share: Share of the bottom content width used by pets
        pet_inner_padding: Inset of lane boxes inside the pet region
        pet_box_height: Lane box height
        pet_box_gap: Gap between lane boxes
        pet_image_size: Pet image edge length
        pet_image_offset: Pet image top offset inside a lane box
        lane_icon_size: Lane icon edge length
        note_header_height: Note title band height
        note_padding: Note text inset
        note_line_height: Note line advance

    Example:
        >>> TemplateConfig().cell_count
        5
    """

    padding: float = 16
    cell_gap: float = 16
    cell_count: int = 5
    cell_padding: float = 8
    section_gap: float = 12
    max_image_height: float = 280
    char_aspect: float = 4 / 3
    card_aspect: float = 8 / 5
    equip_size: float = 52
    equip_gap: float = 6
    equip_row_padding: float = 6
    bottom_height: float = 180
    pet_share: float = 0.6
    pet_inner_padding: float = 8
    pet_box_height: float = 144
    pet_box_gap: float = 4
    pet_image_size: float = 80
    pet_image_offset: float = 36
    lane_icon_size: float = 16
    note_header_height: float = 40
    note_padding: float = 12
    note_line_height: float = 20

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if self.cell_count <= 0:
            raise ValueError(f"cell_count must be positive: {self.cell_count}")
        if not 0 < self.pet_share < 1:
            raise ValueError(f"pet_share must be between 0 and 1: {self.pet_share}")
        if self.note_line_height <= 0:
            raise ValueError(f"note_line_height must be positive: {self.note_line_height}")
        if self.pet_box_height + self.pet_inner_padding > self.bottom_height:
            raise ValueError("Pet lane boxes do not fit the bottom section")
        if self.note_header_height + self.note_padding >= self.bottom_height:
            raise ValueError("Note header and padding exceed the bottom section")


DEFAULT_TEMPLATE = TemplateConfig()


@dataclass(frozen=True)
class LabelSet:
    """
    Localized text drawn by the template.

    Attributes:
        select_character: Hint in an empty character slot
        select_card: Hint in an empty card slot
        empty_pet: Glyph in an empty pet lane
        note_title: Note region title
        lane_back: Back lane label
        lane_mid: Mid lane label
        lane_front: Front lane label
    """

    select_character: str = "캐릭터 선택"
    select_card: str = "카드 선택"
    empty_pet: str = "빈칸"
    note_title: str = "노트"
    lane_back: str = "후열"
    lane_mid: str = "중열"
    lane_front: str = "전열"

    def lane(self, index: int) -> str:
        """Label of lane ``index`` (0 back, 1 mid, 2 front)."""
        return (self.lane_back, self.lane_mid, self.lane_front)[index]


KOREAN_LABELS = LabelSet()

ENGLISH_LABELS = LabelSet(
    select_character="Select character",
    select_card="Select card",
    empty_pet="Empty",
    note_title="Notes",
    lane_back="Back",
    lane_mid="Mid",
    lane_front="Front",
)


@dataclass(frozen=True)
class RenderConfig:
    """
    Compositor settings (immutable).

    Attributes:
        background: Canvas fill
        lane_colors: Back/mid/front lane hues
        lane_icon_srcs: Back/mid/front lane icon image sources
        labels: Localized template text
        font_path: Explicit TrueType/OpenType font; None searches system fonts
        name_bar_height: Height of the character name bar
        card_bar_height: Height of the card name bar
        corner_radius: Rounded rectangle radius
    """

    background: Color = (11, 11, 20, 255)
    lane_colors: Tuple[Color, Color, Color] = (
        (14, 165, 233, 178),
        (245, 158, 11, 178),
        (244, 63, 94, 178),
    )
    lane_icon_srcs: Tuple[str, str, str] = (
        "/assets/lane-back.png",
        "/assets/lane-mid.png",
        "/assets/lane-front.png",
    )
    labels: LabelSet = field(default_factory=LabelSet)
    font_path: Optional[Path] = None
    name_bar_height: float = 40
    card_bar_height: float = 32
    corner_radius: float = 4

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if len(self.lane_colors) != 3 or len(self.lane_icon_srcs) != 3:
            raise ValueError("Exactly three lane colours and icons are required")
        if self.corner_radius < 0:
            raise ValueError(f"corner_radius must be non-negative: {self.corner_radius}")


@dataclass(frozen=True)
class CacheConfig:
    """
    Image cache settings.

    Attributes:
        asset_root: Directory that catalog ``src`` paths are resolved against
        max_workers: Concurrent image loads
    """

    asset_root: Path
    max_workers: int = 4

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if self.max_workers <= 0:
            raise ValueError(f"max_workers must be positive: {self.max_workers}")
