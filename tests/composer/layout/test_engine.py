"""
Tests for composer.layout.engine

Test Coverage:
- compute_layout(): determinism, reference geometry at 1280, invalid input
- hit_regions() / hit_test(): alignment with drawn rects
"""
import math

import pytest

from lostsword_toolkit.composer import TemplateConfig
from lostsword_toolkit.composer.layout import compute_layout, hit_regions, hit_test
from lostsword_toolkit.core.models import EQUIPMENT_KINDS, EquipmentKind


@pytest.fixture
def layout():
    return compute_layout(1280)


class TestDeterminism:
    """compute_layout() is a pure function of its inputs."""

    @pytest.mark.parametrize("width", [400, 1280, 1919.5, 3840])
    def test_same_width_gives_equal_geometry(self, width):
        assert compute_layout(width) == compute_layout(width)

    def test_int_and_float_width_agree(self):
        assert compute_layout(1280) == compute_layout(1280.0)

    def test_different_templates_give_different_geometry(self):
        assert compute_layout(1280) != compute_layout(1280, TemplateConfig(padding=24))


class TestReferenceGeometry:
    """Geometry at the default 1280px editor width."""

    def test_cell_width(self, layout):
        assert layout.cell_width == pytest.approx(236.8)

    def test_image_heights_capped(self, layout):
        cell = layout.cells[0]
        assert cell.char_rect.height == 280
        assert cell.card_rect.height == 280

    def test_canvas_height(self, layout):
        assert layout.height == pytest.approx(880)

    def test_cells_are_evenly_spaced(self, layout):
        xs = [cell.rect.x for cell in layout.cells]
        assert xs[0] == 16
        assert all(b - a == pytest.approx(236.8 + 16) for a, b in zip(xs, xs[1:]))
        assert layout.cells[-1].rect.right == pytest.approx(1280 - 16)

    def test_cell_subregions_stack(self, layout):
        cell = layout.cells[0]
        assert (cell.char_rect.x, cell.char_rect.y) == (24, 24)
        assert cell.char_rect.width == pytest.approx(236.8 - 16)
        assert cell.card_rect.y == pytest.approx(cell.char_rect.bottom + 12)
        assert cell.equip_row.y == pytest.approx(cell.card_rect.bottom + 12)
        assert cell.equip_row.height == 64
        assert cell.equip_row.bottom == pytest.approx(cell.rect.bottom)

    def test_equipment_items(self, layout):
        cell = layout.cells[2]
        assert [e.kind for e in cell.equips] == list(EQUIPMENT_KINDS)
        inner = 236.8 - 16
        for item in cell.equips:
            assert item.rect.width == pytest.approx((inner - 18) / 4)
            assert item.rect.height == 52
            assert item.rect.y == pytest.approx(cell.equip_row.y + 6)
        assert cell.equips[-1].rect.right == pytest.approx(cell.equip_row.right)

    def test_bottom_section(self, layout):
        content = 1280 - 32 - 12
        assert layout.pet_region.y == pytest.approx(16 + layout.cells[0].rect.height + 12)
        assert layout.pet_region.width == pytest.approx(content * 0.6)
        assert layout.note.rect.width == pytest.approx(content * 0.4)
        assert layout.note.rect.x == pytest.approx(layout.pet_region.right + 12)
        assert layout.note.rect.right == pytest.approx(1280 - 16)

    def test_pet_lanes(self, layout):
        box_width = (layout.pet_region.width - 16 - 8) / 3
        for i, lane in enumerate(layout.lanes):
            assert lane.rect.x == pytest.approx(layout.pet_region.x + 8 + i * (box_width + 4))
            assert lane.rect.y == pytest.approx(layout.pet_region.y + 8)
            assert lane.rect.height == 144
            assert lane.label_row.y == pytest.approx(lane.rect.y + 8)
            assert lane.image_rect.width == lane.image_rect.height == 80
            assert lane.image_rect.center[0] == pytest.approx(lane.rect.center[0])
            assert lane.image_rect.y == pytest.approx(lane.rect.y + 36)

    def test_note_region(self, layout):
        note = layout.note
        assert note.title_center[1] == pytest.approx(note.rect.y + 20)
        assert note.text_rect.x == pytest.approx(note.rect.x + 12)
        assert note.text_rect.y == pytest.approx(note.rect.y + 40)
        assert note.text_rect.height == 128
        assert note.max_lines == 6


class TestInvalidInput:
    """Misuse fails fast."""

    @pytest.mark.parametrize("width", [0, -10, math.inf, math.nan])
    def test_when_width_not_positive_finite_then_value_error(self, width):
        with pytest.raises(ValueError):
            compute_layout(width)

    @pytest.mark.parametrize("width", ["1280", None, True])
    def test_when_width_not_number_then_type_error(self, width):
        with pytest.raises(TypeError):
            compute_layout(width)

    def test_when_width_too_small_for_cells_then_value_error(self):
        with pytest.raises(ValueError, match="too small"):
            compute_layout(100)


class TestHitTesting:
    """Overlay regions line up with the drawn geometry."""

    def test_regions_reuse_layout_rects(self, layout):
        regions = hit_regions(layout)
        cell = layout.cells[1]

        char = next(r for r in regions if r.kind == "char" and r.index == 1)
        weapon = next(r for r in regions if r.kind == "equip" and r.index == 1
                      and r.equip_kind is EquipmentKind.WEAPON)

        assert char.rect == cell.char_rect
        assert weapon.rect == cell.equips[0].rect

    def test_region_count(self, layout):
        # 5 cells x (char + card + 4 equips) + 3 lanes + note
        assert len(hit_regions(layout)) == 5 * 6 + 3 + 1

    def test_hit_test_maps_points_to_regions(self, layout):
        card = layout.cells[4].card_rect
        lane = layout.lanes[2].rect

        assert hit_test(layout, *card.center).kind == "card"
        assert hit_test(layout, *card.center).index == 4
        assert hit_test(layout, *lane.center).kind == "pet"
        assert hit_test(layout, *lane.center).index == 2
        assert hit_test(layout, *layout.note.text_rect.center).kind == "note"

    def test_hit_test_background_returns_none(self, layout):
        assert hit_test(layout, 2, 2) is None

    def test_equipment_gap_is_background(self, layout):
        first = layout.cells[0].equips[0].rect
        assert hit_test(layout, first.right + 1, first.center[1]) is None
