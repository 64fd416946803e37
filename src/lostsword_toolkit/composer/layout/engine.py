"""
Module: composer.layout.engine

Purpose:
    Compute the fixed template geometry for a canvas width. This is the
    only place the template arithmetic lives: the compositor draws from
    the returned LayoutTree and overlays derive click targets from the
    same tree via hit_regions()/hit_test().

    Each character cell encloses its equipment row, so a cell is
    char + card + 96 tall (8 top padding, two 12px gaps, 52px items with
    6px row padding above and below). At width 1280 the canvas is 880px
    tall, a few pixels taller than templates that let the row overhang.

Key Functions:
    - compute_layout(): Canvas width -> LayoutTree (pure, memoized)
    - hit_regions(): Clickable regions of a LayoutTree
    - hit_test(): Region under a logical point

Dependencies:
    - functools (std): lru_cache memoization
    - math (std)
    - composer.config: TemplateConfig

Used By:
    - composer.controller: Per-session layout
    - composer.output.renderer: Drawing coordinates
    - gui.preview_widget: Mouse mapping
"""

from __future__ import annotations

import logging
import math
from functools import lru_cache
from numbers import Real
from typing import List, Optional

from lostsword_toolkit.core.models import EQUIPMENT_KINDS

from ..config import DEFAULT_TEMPLATE, TemplateConfig
from .models import (
    CharacterCell,
    EquipmentCell,
    HitRegion,
    LayoutTree,
    NoteRegion,
    PetLane,
    Rect,
)

logger = logging.getLogger(__name__)


def compute_layout(canvas_width: float, template: TemplateConfig = DEFAULT_TEMPLATE) -> LayoutTree:
    """
    Compute the template geometry for ``canvas_width``.

    Deterministic: the same width and template always yield an equal
    LayoutTree (and, while memoized, the same object).

    Args:
        canvas_width: Logical canvas width in pixels
        template: Template constants

    Returns:
        LayoutTree in logical pixels

    Raises:
        TypeError: If canvas_width is not a real number
        ValueError: If canvas_width is not finite, not positive, or too
            small for every sub-region to have a positive size

    Example:
        >>> layout = compute_layout(1280)
        >>> layout.cell_width, layout.height
        (236.8, 880.0)
    """
    if isinstance(canvas_width, bool) or not isinstance(canvas_width, Real):
        raise TypeError(f"canvas_width must be a number: {canvas_width!r}")
    if not math.isfinite(canvas_width) or canvas_width <= 0:
        raise ValueError(f"canvas_width must be positive and finite: {canvas_width}")
    return _compute_layout(float(canvas_width), template)


@lru_cache(maxsize=32)
def _compute_layout(width: float, t: TemplateConfig) -> LayoutTree:
    cell_width = (width - 2 * t.padding - (t.cell_count - 1) * t.cell_gap) / t.cell_count
    inner_width = cell_width - 2 * t.cell_padding
    equip_count = len(EQUIPMENT_KINDS)
    equip_width = (inner_width - (equip_count - 1) * t.equip_gap) / equip_count
    if equip_width <= 0:
        raise ValueError(f"canvas_width {width} too small for {t.cell_count} character cells")

    char_height = min(cell_width * t.char_aspect, t.max_image_height)
    card_height = min(cell_width * t.card_aspect, t.max_image_height)
    # cell top padding, two section gaps and the equipment row (which closes the cell)
    cell_height = (
        char_height + card_height + t.equip_size
        + t.cell_padding + 2 * t.section_gap + 2 * t.equip_row_padding
    )

    top = t.padding
    cells = tuple(
        _character_cell(i, t.padding + i * (cell_width + t.cell_gap), top,
                        cell_width, cell_height, char_height, card_height, equip_width, t)
        for i in range(t.cell_count)
    )

    bottom_y = top + cell_height + t.section_gap
    content_width = width - 2 * t.padding - t.section_gap
    pet_width = content_width * t.pet_share
    note_width = content_width * (1 - t.pet_share)
    pet_region = Rect(t.padding, bottom_y, pet_width, t.bottom_height)

    lane_count = 3
    box_width = (pet_width - 2 * t.pet_inner_padding - (lane_count - 1) * t.pet_box_gap) / lane_count
    if box_width <= 0:
        raise ValueError(f"canvas_width {width} too small for the pet lanes")
    lanes = tuple(
        _pet_lane(i, pet_region.x + t.pet_inner_padding + i * (box_width + t.pet_box_gap),
                  bottom_y + t.pet_inner_padding, box_width, t)
        for i in range(lane_count)
    )

    note = _note_region(pet_region.right + t.section_gap, bottom_y, note_width, t)
    if note.text_rect.width <= 0:
        raise ValueError(f"canvas_width {width} too small for the note region")

    height = t.padding + cell_height + t.section_gap + t.bottom_height + t.padding
    logger.debug(f"Computed layout for width {width}: height {height}, cell {cell_width:.2f}")
    return LayoutTree(
        width=width,
        height=height,
        cell_width=cell_width,
        cells=cells,
        pet_region=pet_region,
        lanes=lanes,
        note=note,
    )


def _character_cell(
    index: int,
    x: float,
    y: float,
    cell_width: float,
    cell_height: float,
    char_height: float,
    card_height: float,
    equip_width: float,
    t: TemplateConfig,
) -> CharacterCell:
    inner_x = x + t.cell_padding
    inner_width = cell_width - 2 * t.cell_padding
    char_rect = Rect(inner_x, y + t.cell_padding, inner_width, char_height)
    card_rect = Rect(inner_x, char_rect.bottom + t.section_gap, inner_width, card_height)
    equip_row = Rect(
        inner_x,
        card_rect.bottom + t.section_gap,
        inner_width,
        t.equip_size + 2 * t.equip_row_padding,
    )
    equips = tuple(
        EquipmentCell(
            kind=kind,
            rect=Rect(
                inner_x + j * (equip_width + t.equip_gap),
                equip_row.y + t.equip_row_padding,
                equip_width,
                t.equip_size,
            ),
        )
        for j, kind in enumerate(EQUIPMENT_KINDS)
    )
    return CharacterCell(
        index=index,
        rect=Rect(x, y, cell_width, cell_height),
        char_rect=char_rect,
        card_rect=card_rect,
        equip_row=equip_row,
        equips=equips,
    )


def _pet_lane(index: int, x: float, y: float, box_width: float, t: TemplateConfig) -> PetLane:
    rect = Rect(x, y, box_width, t.pet_box_height)
    label_row = Rect(x, y + t.pet_inner_padding, box_width, t.lane_icon_size)
    image_rect = Rect(
        x + (box_width - t.pet_image_size) / 2,
        y + t.pet_image_offset,
        t.pet_image_size,
        t.pet_image_size,
    )
    return PetLane(index=index, rect=rect, label_row=label_row, image_rect=image_rect)


def _note_region(x: float, y: float, width: float, t: TemplateConfig) -> NoteRegion:
    rect = Rect(x, y, width, t.bottom_height)
    text_rect = Rect(
        x + t.note_padding,
        y + t.note_header_height,
        width - 2 * t.note_padding,
        t.bottom_height - t.note_header_height - t.note_padding,
    )
    return NoteRegion(
        rect=rect,
        title_center=(x + width / 2, y + t.note_header_height / 2),
        text_rect=text_rect,
        line_height=t.note_line_height,
        max_lines=int(text_rect.height // t.note_line_height),
    )


def hit_regions(layout: LayoutTree) -> List[HitRegion]:
    """
    Clickable regions of ``layout``, front-most first.

    Rects are taken from the layout unchanged so click targets line up
    with the drawn regions exactly.

    Args:
        layout: Geometry from compute_layout()

    Returns:
        Regions for every character image, card image, equipment item,
        pet lane box and the note text area
    """
    regions: List[HitRegion] = []
    for cell in layout.cells:
        regions.append(HitRegion("char", cell.index, cell.char_rect))
        regions.append(HitRegion("card", cell.index, cell.card_rect))
        for equip in cell.equips:
            regions.append(HitRegion("equip", cell.index, equip.rect, equip_kind=equip.kind))
    for lane in layout.lanes:
        regions.append(HitRegion("pet", lane.index, lane.rect))
    regions.append(HitRegion("note", 0, layout.note.text_rect))
    return regions


def hit_test(layout: LayoutTree, x: float, y: float) -> Optional[HitRegion]:
    """
    Region under logical point (x, y), or None for background.

    Example:
        >>> hit_test(compute_layout(1280), 30, 30).kind
        'char'
    """
    for region in _cached_regions(layout):
        if region.rect.contains(x, y):
            return region
    return None


@lru_cache(maxsize=8)
def _cached_regions(layout: LayoutTree) -> tuple[HitRegion, ...]:
    return tuple(hit_regions(layout))
