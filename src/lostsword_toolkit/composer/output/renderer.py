"""
Module: composer.output.renderer

Purpose:
    Paint a roster snapshot onto a raster surface using the geometry from
    the layout engine. Reads images from the cache without waiting: an
    assigned asset that is not resident is drawn as a named placeholder,
    and a later render picks the image up once it has loaded.

Key Functions:
    - render_scene(): LayoutTree + RosterSnapshot -> RasterSurface
    - required_sources(): Every image a render of a snapshot can use

Key Classes:
    - RasterSurface: Drawn image plus export helpers

Dependencies:
    - PIL: Image handling
    - composer.output.drawing: ScaledCanvas
    - composer.output.text: Note wrapping

Used By:
    - composer.controller: Frame production and PNG export
"""

from __future__ import annotations

import io
import logging
import math
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Set

from PIL import Image

from lostsword_toolkit.core.models import Asset
from lostsword_toolkit.roster import CharacterSlot, RosterSnapshot

from ..config import Color, RenderConfig
from ..images.cache import AssetCache
from ..layout.models import CharacterCell, LayoutTree, NoteRegion, PetLane, Rect
from .drawing import ScaledCanvas
from .text import wrap_note_text

logger = logging.getLogger(__name__)

DEFAULT_RENDER_CONFIG = RenderConfig()

# Palette
CELL_FILL: Color = (24, 24, 38, 255)
CELL_BORDER: Color = (63, 63, 90, 255)
PLACEHOLDER_FILL: Color = (45, 45, 66, 255)
DASH_COLOR: Color = (100, 100, 130, 255)
HINT_COLOR: Color = (140, 140, 170, 255)
TEXT_COLOR: Color = (240, 240, 245, 255)
BAR_FILL: Color = (0, 0, 0, 150)
EQUIP_ROW_FILL: Color = (17, 17, 28, 255)
PET_REGION_FILL: Color = (19, 19, 31, 255)
NOTE_FILL: Color = (19, 19, 31, 255)
PET_BORDER: Color = (255, 255, 255, 200)

# Logical font sizes
NAME_FONT = 14
CARD_FONT = 12
HINT_FONT = 13
GLYPH_FONT = 16
LANE_FONT = 12
NOTE_TITLE_FONT = 15
NOTE_FONT = 13

LANE_FADE_ALPHA = 40
LANE_ICON_GAP = 4


@dataclass
class RasterSurface:
    """
    Result of one render.

    Attributes:
        image: RGBA image in device pixels
        width: Logical width
        height: Logical height
        scale: Device pixels per logical pixel
    """

    image: Image.Image
    width: float
    height: float
    scale: float

    @property
    def device_size(self) -> tuple[int, int]:
        """(width, height) in device pixels."""
        return self.image.size

    def to_png(self) -> bytes:
        """Encode the drawn image as PNG bytes."""
        buf = io.BytesIO()
        self.image.save(buf, format="PNG")
        return buf.getvalue()

    def save(self, path: Path) -> Path:
        """
        Write the drawn image as PNG (atomic replace).

        Args:
            path: Destination file; parent directories are created

        Returns:
            The written path
        """
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            mode="wb",
            suffix=".png",
            dir=path.parent,
            delete=False,
        ) as f:
            self.image.save(f, format="PNG")
            temp_path = Path(f.name)
        temp_path.replace(path)
        logger.info(f"Saved {self.image.width}x{self.image.height} PNG to {path}")
        return path


def required_sources(snapshot: RosterSnapshot, config: RenderConfig = DEFAULT_RENDER_CONFIG) -> Set[str]:
    """
    Image sources a render of ``snapshot`` draws: every assigned asset
    plus the three lane icons.
    """
    return snapshot.required_sources() | set(config.lane_icon_srcs)


def render_scene(
    layout: LayoutTree,
    snapshot: RosterSnapshot,
    cache: AssetCache,
    note_text: str = "",
    *,
    scale: float = 1.0,
    config: RenderConfig = DEFAULT_RENDER_CONFIG,
) -> RasterSurface:
    """
    Draw the full template for ``snapshot``.

    Draw order: background, then per character cell (frame, character,
    card, equipment row), then pet lanes, then the note region.

    Args:
        layout: Geometry from compute_layout()
        snapshot: Roster state to draw
        cache: Image cache; only resident images are drawn
        note_text: Free text for the note region
        scale: Device pixels per logical pixel
        config: Colours, labels and fonts

    Returns:
        New RasterSurface of layout size times scale

    Raises:
        ValueError: If scale is not a positive finite number

    Example:
        >>> surface = render_scene(compute_layout(1280), model.snapshot, cache, scale=2)
        >>> surface.device_size
        (2560, 1760)
    """
    if isinstance(scale, bool) or not isinstance(scale, (int, float)):
        raise ValueError(f"scale must be a number: {scale!r}")
    if not math.isfinite(scale) or scale <= 0:
        raise ValueError(f"scale must be positive and finite: {scale}")

    canvas = ScaledCanvas(layout.width, layout.height, scale, config.background, config.font_path)

    for cell, slot in zip(layout.cells, snapshot.char_slots):
        _draw_character_cell(canvas, cell, slot, cache, config)

    canvas.rounded_rect(layout.pet_region, config.corner_radius, fill=PET_REGION_FILL)
    for lane in layout.lanes:
        _draw_pet_lane(canvas, lane, snapshot.pet_formation[lane.index], cache, config)

    _draw_note(canvas, layout.note, note_text, config)

    logger.debug(f"Rendered scene {canvas.image.width}x{canvas.image.height} at scale {scale}")
    return RasterSurface(image=canvas.image, width=layout.width, height=layout.height, scale=scale)


# ─────────────────────────────────────────────────────────────────────────────
# Character cells
# ─────────────────────────────────────────────────────────────────────────────

def _draw_character_cell(
    canvas: ScaledCanvas,
    cell: CharacterCell,
    slot: CharacterSlot,
    cache: AssetCache,
    config: RenderConfig,
) -> None:
    labels = config.labels
    canvas.rounded_rect(cell.rect, config.corner_radius, fill=CELL_FILL, outline=CELL_BORDER)

    _draw_portrait(canvas, cell.char_rect, slot.char, cache, config,
                   hint=labels.select_character, bar_height=config.name_bar_height,
                   font_size=NAME_FONT)
    _draw_portrait(canvas, cell.card_rect, slot.card, cache, config,
                   hint=labels.select_card, bar_height=config.card_bar_height,
                   font_size=CARD_FONT)

    canvas.rounded_rect(cell.equip_row, config.corner_radius, fill=EQUIP_ROW_FILL)
    for equip in cell.equips:
        _draw_equipment(canvas, equip.rect, slot.equips[equip.kind], equip.kind.glyph, cache, config)


def _draw_portrait(
    canvas: ScaledCanvas,
    rect: Rect,
    asset: Optional[Asset],
    cache: AssetCache,
    config: RenderConfig,
    *,
    hint: str,
    bar_height: float,
    font_size: float,
) -> None:
    """Character or card image with its name bar, a placeholder, or an empty hint."""
    if asset is None:
        canvas.dashed_rect(rect, DASH_COLOR)
        canvas.label(rect, hint, canvas.font(HINT_FONT), HINT_COLOR)
        return

    image = cache.get(asset.src)
    if image is None:
        _draw_placeholder(canvas, rect, asset, config, font_size)
        return

    canvas.paste_image(rect, image, config.corner_radius)
    bar = Rect(rect.x, rect.bottom - bar_height, rect.width, bar_height)
    canvas.rounded_rect(bar, 0, fill=BAR_FILL)
    canvas.label(bar, asset.name, canvas.font(font_size, bold=True), TEXT_COLOR)


def _draw_equipment(
    canvas: ScaledCanvas,
    rect: Rect,
    asset: Optional[Asset],
    glyph: str,
    cache: AssetCache,
    config: RenderConfig,
) -> None:
    if asset is None:
        canvas.dashed_rect(rect, DASH_COLOR)
        canvas.label(rect, glyph, canvas.font(GLYPH_FONT, bold=True), HINT_COLOR, inset=0)
        return
    image = cache.get(asset.src)
    if image is None:
        _draw_placeholder(canvas, rect, asset, config, CARD_FONT)
        return
    canvas.paste_image(rect, image, config.corner_radius)


def _draw_placeholder(
    canvas: ScaledCanvas,
    rect: Rect,
    asset: Asset,
    config: RenderConfig,
    font_size: float,
) -> None:
    """Solid box with the asset name, for assets that are not resident."""
    canvas.rounded_rect(rect, config.corner_radius, fill=PLACEHOLDER_FILL)
    canvas.label(rect, asset.name, canvas.font(font_size), TEXT_COLOR)


# ─────────────────────────────────────────────────────────────────────────────
# Pet lanes
# ─────────────────────────────────────────────────────────────────────────────

def _draw_pet_lane(
    canvas: ScaledCanvas,
    lane: PetLane,
    pet: Optional[Asset],
    cache: AssetCache,
    config: RenderConfig,
) -> None:
    hue = config.lane_colors[lane.index]
    faded = (*hue[:3], LANE_FADE_ALPHA)
    canvas.gradient_fill(lane.rect, hue, faded, config.corner_radius)

    _draw_lane_label(canvas, lane, cache, config)

    if pet is None:
        canvas.dashed_rect(lane.image_rect, DASH_COLOR)
        canvas.label(lane.image_rect, config.labels.empty_pet, canvas.font(HINT_FONT), HINT_COLOR)
        return
    image = cache.get(pet.src)
    if image is None:
        _draw_placeholder(canvas, lane.image_rect, pet, config, CARD_FONT)
        return
    canvas.paste_image(lane.image_rect, image, config.corner_radius)
    canvas.rounded_rect(lane.image_rect, config.corner_radius, outline=PET_BORDER, width=2)


def _draw_lane_label(
    canvas: ScaledCanvas,
    lane: PetLane,
    cache: AssetCache,
    config: RenderConfig,
) -> None:
    """Lane icon (when resident) and lane name, centred together in the label row."""
    row = lane.label_row
    font = canvas.font(LANE_FONT, bold=True)
    text = config.labels.lane(lane.index)
    icon = cache.get(config.lane_icon_srcs[lane.index])
    if icon is None:
        canvas.label(row, text, font, TEXT_COLOR)
        return

    icon_size = row.height
    text_width = canvas.text_width(text, font)
    total = icon_size + LANE_ICON_GAP + text_width
    x = row.x + max(0.0, (row.width - total) / 2)
    canvas.paste_image(Rect(x, row.y, icon_size, icon_size), icon)
    text_rect = Rect(x + icon_size + LANE_ICON_GAP, row.y,
                     max(0.0, row.right - x - icon_size - LANE_ICON_GAP), row.height)
    if text_width <= text_rect.width:
        canvas.text_centered(text_rect.x + text_width / 2, text_rect.center[1], text, font, TEXT_COLOR)
    else:
        canvas.label(text_rect, text, font, TEXT_COLOR, inset=0)


# ─────────────────────────────────────────────────────────────────────────────
# Note
# ─────────────────────────────────────────────────────────────────────────────

def _draw_note(canvas: ScaledCanvas, note: NoteRegion, note_text: str, config: RenderConfig) -> None:
    canvas.rounded_rect(note.rect, config.corner_radius, fill=NOTE_FILL, outline=CELL_BORDER)
    cx, cy = note.title_center
    canvas.text_centered(cx, cy, config.labels.note_title, canvas.font(NOTE_TITLE_FONT, bold=True), TEXT_COLOR)

    font = canvas.font(NOTE_FONT)
    area = note.text_rect
    lines = wrap_note_text(
        note_text or "",
        lambda s: canvas.text_width(s, font),
        area.width,
        note.max_lines,
    )
    for i, line in enumerate(lines):
        if line:
            canvas.text(area.x, area.y + i * note.line_height, line, font, TEXT_COLOR)
