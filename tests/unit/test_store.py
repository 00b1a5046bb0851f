"""Unit tests for mapping/store.py."""

import pytest

from pycabinetwiring.exceptions import (
    InvalidArgumentsError,
    MappingPersistenceWarning,
    PersistenceWriteError,
)
from pycabinetwiring.mapping.models import BulkRangeMapping, ComponentMapping
from pycabinetwiring.mapping.persistence import MemoryMappingPersistence
from pycabinetwiring.mapping.store import BULK_SUMMARY_ROW, MappingStore
from pycabinetwiring.model.targets import BottomCell, DoorAnchor, MotorAnchor


class FailingPersistence(MemoryMappingPersistence):
    def save(self, mappings, ranges):
        raise PersistenceWriteError("mappings.json", OSError("disk full"))


# ---------------------------------------------------------------------------
# Individual mappings
# ---------------------------------------------------------------------------


class TestAddMapping:
    def test_round_trip(self, store):
        store.add_mapping("J01-X1:", 1, 2)
        mapping = store.get_mapping("J01-X1:4")
        assert (mapping.grid_row, mapping.grid_col) == (1, 2)

    def test_starred_twin_is_stored(self, store):
        store.add_mapping("X1:4", 3, 5, default_to_bottom=False)
        twin = store.snapshot.get("X1:4*")
        assert twin == ComponentMapping("X1:4*", 3, 5, True)

    def test_starred_reference_stores_base(self, store):
        store.add_mapping("X1:4*", 3, 5, default_to_bottom=True)
        assert store.snapshot.get("X1:4") == ComponentMapping("X1:4", 3, 5, False)

    def test_returns_stored_record(self, store):
        mapping = store.add_mapping("  A2 ", 1, 1)
        assert mapping == ComponentMapping("A2", 1, 1, False)

    def test_replaces_same_key(self, store):
        store.add_mapping("A2", 1, 1)
        store.add_mapping("a2", 5, 5)
        assert len(store) == 2
        assert store.get_mapping("A2").grid_row == 5

    @pytest.mark.parametrize("reference", ["", "   ", "*", " ** "])
    def test_blank_reference_is_rejected(self, store, persistence, reference):
        store.add_mapping("X2:55", 3, 1)
        with pytest.raises(InvalidArgumentsError, match="must not be empty"):
            store.add_mapping(reference, 1, 1)
        assert len(store) == 2
        assert persistence.save_count == 1
        assert store.get_mapping("X2:55*").reference == "X2:55*"

    def test_add_target(self, store):
        assert store.add_target("M1", MotorAnchor(2)).grid_col == 1002
        assert store.add_target("D1", DoorAnchor(0)).grid_row == -2
        bottom = store.add_target("K1", BottomCell(3, 4))
        assert (bottom.grid_row, bottom.grid_col, bottom.default_to_bottom) == (-4, 4, True)
        assert store.get_mapping("M1").target == MotorAnchor(2)


class TestRemoveMapping:
    def test_removes_twin(self, store):
        store.add_mapping("A2", 1, 1)
        store.remove_mapping("A2")
        assert len(store) == 0
        assert not store.has_mapping("A2")

    def test_unknown_reference_is_noop(self, store):
        store.add_mapping("A2", 1, 1)
        store.remove_mapping("K7")
        assert len(store) == 2

    def test_range_label_removes_bulk_range(self, store):
        store.add_range("X2", 21, 100, [(3, 1)])
        store.remove_mapping("X2:21-100")
        assert store.all_ranges() == []
        assert not store.has_mapping("X2:55")

    def test_clear(self, store):
        store.add_mapping("A2", 1, 1)
        store.add_range("X2", 21, 100, [(3, 1)])
        store.clear()
        assert len(store) == 0
        assert store.all_ranges() == []


# ---------------------------------------------------------------------------
# Bulk ranges
# ---------------------------------------------------------------------------


class TestBulkRanges:
    def test_add_range(self, store):
        bulk = store.add_range("X2", 21, 100, [(3, 1), (3, 2)], selected_is_top=True)
        assert isinstance(bulk, BulkRangeMapping)
        assert store.is_reference_in_bulk_range("X2:55")
        assert store.find_range("X2:55*") == bulk
        assert store.get_mapping("X2:55") == ComponentMapping("X2:55", 3, 1, False)
        assert not store.is_reference_in_bulk_range("X2:101")

    def test_invalid_range_leaves_store_unchanged(self, store, persistence):
        with pytest.raises(InvalidArgumentsError):
            store.add_range("X2", 21, 100, [])
        assert store.all_ranges() == []
        assert persistence.save_count == 0

    def test_remove_range(self, store):
        store.add_range("X2", 21, 100, [(3, 1)])
        store.remove_range("x2", 21, 100)
        assert store.all_ranges() == []

    def test_summary_records(self, store):
        store.add_mapping("A2", 1, 1)
        store.add_range("X2", 21, 100, [(3, 1), (3, 2)], selected_is_top=True)
        records = store.all_mappings_including_bulk()
        assert len(records) == 3
        summary = records[-1]
        assert summary.reference == "X2:21-100"
        assert summary.grid_row == BULK_SUMMARY_ROW
        assert summary.grid_col == 2


class TestQueries:
    def test_is_position_mapped(self, store):
        store.add_mapping("A2", 3, 5, default_to_bottom=False)
        assert store.is_position_mapped(3, 5, bottom=False)
        # the starred twin covers the other side
        assert store.is_position_mapped(3, 5, bottom=True)
        assert not store.is_position_mapped(3, 6, bottom=False)

    def test_all_mappings(self, store):
        store.add_mapping("A2", 1, 1)
        refs = sorted(m.reference for m in store.all_mappings())
        assert refs == ["A2", "A2*"]


# ---------------------------------------------------------------------------
# Snapshots and persistence
# ---------------------------------------------------------------------------


class TestSnapshots:
    def test_old_snapshot_is_unchanged(self, store):
        store.add_mapping("A2", 1, 1)
        before = store.snapshot
        store.add_mapping("K7", 2, 2)
        assert before.get("K7") is None
        assert store.snapshot.get("K7") is not None

    def test_resolver_is_bound_to_snapshot(self, store):
        resolver = store.resolver()
        store.add_mapping("A2", 1, 1)
        assert resolver.resolve("A2") is None
        assert store.resolver().resolve("A2") is not None


class TestPersistence:
    def test_every_mutation_is_saved(self, store, persistence):
        store.add_mapping("A2", 1, 1)
        store.add_range("X2", 1, 10, [(3, 1)])
        store.remove_mapping("A2")
        assert persistence.save_count == 3
        assert persistence.mappings == []
        assert len(persistence.ranges) == 1

    def test_loads_at_construction(self):
        persistence = MemoryMappingPersistence(
            mappings=[ComponentMapping("A2", 1, 1)],
            ranges=[BulkRangeMapping("X2", 1, 10, ((3, 1),))],
        )
        store = MappingStore(persistence)
        assert store.get_mapping("A2") is not None
        assert store.is_reference_in_bulk_range("X2:5")

    def test_write_failure_keeps_change_in_memory(self):
        store = MappingStore(FailingPersistence())
        with pytest.warns(MappingPersistenceWarning, match="not saved"):
            store.add_mapping("A2", 1, 1)
        assert store.get_mapping("A2") is not None
