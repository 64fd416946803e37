"""
Tests for roster.model

Test Coverage:
- Initial skeleton shape
- Character/card/equipment setters and reset_slot()
- Pet slots and formations via the model
- Listener notification
- Misuse errors
"""
import pytest

from lostsword_toolkit.core.models import EQUIPMENT_KINDS, EquipmentKind
from lostsword_toolkit.roster import CharacterSlot, RosterSnapshot, SlotAssignmentModel


class TestInitialState:
    """Tests for the session-start skeleton."""

    def test_five_pristine_character_slots(self, model):
        slots = model.snapshot.char_slots

        assert [s.id for s in slots] == ["slot-1", "slot-2", "slot-3", "slot-4", "slot-5"]
        assert all(s.is_empty for s in slots)
        assert all(set(s.equips) == set(EQUIPMENT_KINDS) for s in slots)

    def test_formations_and_pets_empty(self, model):
        snapshot = model.snapshot

        assert snapshot.formation == (None,) * 6
        assert snapshot.pet_formation == (None,) * 3
        assert snapshot.pet_slots == (None,) * 3

    def test_no_sources_required(self, model):
        assert model.required_sources() == set()


class TestCharacterSlots:
    """Tests for slot field setters."""

    def test_set_character_replaces_only_character(self, model, heroes, asset_factory):
        card = asset_factory("k1", "card")
        model.set_card(0, card)

        snapshot = model.set_character(0, heroes[0])

        assert snapshot.char_slots[0].char == heroes[0]
        assert snapshot.char_slots[0].card == card

    def test_set_equipment_with_matching_kind(self, model, asset_factory):
        sword = asset_factory("w1", "equip/weapon")

        snapshot = model.set_equipment(2, EquipmentKind.WEAPON, sword)

        assert snapshot.char_slots[2].equips[EquipmentKind.WEAPON] == sword

    def test_set_equipment_accepts_kind_name(self, model, asset_factory):
        helm = asset_factory("h1", "equip/helmet")

        snapshot = model.set_equipment(0, "helmet", helm)

        assert snapshot.char_slots[0].equips[EquipmentKind.HELMET] == helm

    def test_when_equipment_kind_mismatched_then_no_op(self, model, asset_factory):
        sword = asset_factory("w1", "equip/weapon")
        before = model.snapshot

        after = model.set_equipment(0, EquipmentKind.ARMOR, sword)

        assert after is before

    def test_other_equipment_fits_any_kind(self, model, asset_factory):
        charm = asset_factory("x1", "equip/misc")

        snapshot = model.set_equipment(0, EquipmentKind.ROON, charm)

        assert snapshot.char_slots[0].equips[EquipmentKind.ROON] == charm

    def test_when_equipment_kind_unknown_then_raises(self, model, asset_factory):
        with pytest.raises(ValueError, match="Unknown equipment kind"):
            model.set_equipment(0, "boots", asset_factory("b1", "equip/boots"))

    def test_equips_mapping_is_read_only(self, model):
        with pytest.raises(TypeError):
            model.snapshot.char_slots[0].equips[EquipmentKind.WEAPON] = None

    def test_reset_slot_restores_pristine_shape(self, model, heroes, asset_factory):
        # Arrange
        model.set_character(1, heroes[0])
        model.set_card(1, asset_factory("k1", "card"))
        model.set_equipment(1, EquipmentKind.WEAPON, asset_factory("w1", "equip/weapon"))

        # Act
        model.reset_slot(1)

        # Assert
        slot = model.slot(1)
        assert slot == CharacterSlot.pristine(1)
        assert slot.char is None and slot.card is None
        assert all(item is None for item in slot.equips.values())

    def test_reset_slot_leaves_other_slots(self, model, heroes):
        model.set_character(0, heroes[0])

        model.reset_slot(1)

        assert model.slot(0).char == heroes[0]

    def test_required_sources_cover_every_assignment(self, model, heroes, pets, asset_factory):
        model.set_character(0, heroes[0])
        model.set_equipment(0, EquipmentKind.ARMOR, asset_factory("a1", "equip/armor"))
        model.assign_formation(3, heroes[1])
        model.assign_pet_formation(0, pets[0])
        model.set_pet(1, pets[1])

        assert model.required_sources() == {
            heroes[0].src, heroes[1].src, pets[0].src, pets[1].src, "/assets/equip/armor/a1.png",
        }


class TestMisuse:
    """Tests for caller errors."""

    @pytest.mark.parametrize("index", [-1, 5])
    def test_when_slot_index_out_of_range_then_raises(self, model, heroes, index):
        with pytest.raises(IndexError):
            model.set_character(index, heroes[0])

    def test_when_slot_index_not_int_then_raises(self, model):
        with pytest.raises(TypeError):
            model.reset_slot("0")

    def test_when_pet_index_out_of_range_then_raises(self, model, pets):
        with pytest.raises(IndexError):
            model.set_pet(3, pets[0])

    def test_when_formation_position_out_of_range_then_raises(self, model, heroes):
        with pytest.raises(IndexError):
            model.assign_formation(6, heroes[0])


class TestPets:
    """Tests for pet slots and the pet formation."""

    def test_set_pet_relocates_duplicate(self, model, pets):
        model.set_pet(0, pets[0])

        snapshot = model.set_pet(2, pets[0])

        assert snapshot.pet_slots == (None, None, pets[0])

    def test_pet_formation_relocates_and_toggles(self, model, pets):
        model.assign_pet_formation(0, pets[0])
        assert model.assign_pet_formation(2, pets[0]).pet_formation == (None, None, pets[0])
        assert model.assign_pet_formation(2, pets[0]).pet_formation == (None, None, None)


class TestFormationViaModel:
    """Tests for assign_formation() through the model."""

    def test_when_rejected_then_snapshot_unchanged(self, model, heroes):
        for i in range(5):
            model.assign_formation(i, heroes[i])
        before = model.snapshot

        after = model.assign_formation(5, heroes[5])

        assert after is before
        assert after.formation[5] is None

    def test_formation_independent_of_character_slots(self, model, heroes):
        snapshot = model.assign_formation(0, heroes[0])

        assert all(slot.char is None for slot in snapshot.char_slots)


class TestListeners:
    """Tests for change notification."""

    def test_listener_receives_new_snapshot(self, model, heroes):
        received = []
        model.add_listener(received.append)

        snapshot = model.set_character(0, heroes[0])

        assert received == [snapshot]

    def test_listener_not_called_for_no_op(self, model, heroes):
        received = []
        model.add_listener(received.append)

        model.reset_slot(0)
        for i in range(5):
            model.assign_formation(i, heroes[i])
        received.clear()
        model.assign_formation(5, heroes[5])

        assert received == []

    def test_removed_listener_not_called(self, model, heroes):
        received = []
        model.add_listener(received.append)
        model.remove_listener(received.append)

        model.set_character(0, heroes[0])

        assert received == []

    def test_failing_listener_does_not_block_others(self, model, heroes, caplog):
        # Arrange
        received = []

        def broken(snapshot):
            raise RuntimeError("AssetCache is closed")

        model.add_listener(broken)
        model.add_listener(received.append)

        # Act
        with caplog.at_level("ERROR"):
            snapshot = model.set_character(0, heroes[0])

        # Assert
        assert snapshot.char_slots[0].char == heroes[0]
        assert received == [snapshot]
        assert "Roster listener failed" in caplog.text

    def test_removing_unknown_listener_is_ignored(self, model):
        model.remove_listener(lambda s: None)


def test_snapshots_are_immutable(model, heroes):
    first = model.snapshot

    model.set_character(0, heroes[0])

    assert first == RosterSnapshot.initial()
    assert isinstance(model, SlotAssignmentModel)
