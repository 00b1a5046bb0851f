"""
End-to-end tests: wiring list -> resolution -> routing -> written lengths.
"""

import pytest

from pycabinetwiring.exceptions import (
    InvalidArgumentsError,
    NoPathFoundError,
    RowSourceUnavailableError,
    UnresolvedReferenceError,
)
from pycabinetwiring.layout.cabinet import AnchorDirectory, CabinetConfig, build_cabinet
from pycabinetwiring.layout.topology import GridTopology
from pycabinetwiring.mapping.persistence import JsonMappingPersistence
from pycabinetwiring.mapping.store import MappingStore
from pycabinetwiring.model.targets import (
    DoorAnchor,
    MotorAnchor,
    RegularCell,
)
from pycabinetwiring.processing.processor import ConnectionProcessor, RecordOutcome
from pycabinetwiring.processing.row_source import WorksheetRowSource


@pytest.fixture
def topology():
    # a narrow vertical duct plus one unreachable cell
    return GridTopology([(r, 0) for r in range(5)] + [(0, 7)])


@pytest.fixture
def anchors():
    return AnchorDirectory(motors={0: (4, 0)}, doors={0: (3, 0)})


@pytest.fixture
def mapped_store(store):
    store.add_target("A1", RegularCell(0, 0))
    store.add_target("A5", RegularCell(4, 0))
    store.add_target("M1", MotorAnchor(0))
    store.add_target("D1", DoorAnchor(0))
    store.add_target("M4", MotorAnchor(3))
    store.add_target("Z9", RegularCell(9, 9))
    store.add_target("ISL", RegularCell(0, 7))
    return store


@pytest.fixture
def processor(mapped_store, topology, anchors):
    return ConnectionProcessor(mapped_store, topology, anchors)


@pytest.fixture
def wiring_list(make_source):
    return make_source(
        [None, "A1", "A5"],       # 2: 600
        [None, "M1", "D1"],       # 3: 1550
        [None, "A1", "UNKNOWN"],  # 4: unresolved
        [123.0, "A1", "A5"],      # 5: already measured
        [None, None, None],       # 6: empty
        [None, "A1", "Z9"],       # 7: cell not in grid
        [None, "A1", "ISL"],      # 8: no path
        [None, "M4", "A1"],       # 9: no motor in section 3
    )


# ---------------------------------------------------------------------------
# Batch
# ---------------------------------------------------------------------------


class TestProcessBatch:
    def test_outcomes(self, processor, wiring_list):
        report = processor.process_batch(wiring_list)
        outcomes = {e.record.row: e.outcome for e in report.evaluations}
        assert outcomes == {
            2: RecordOutcome.UPDATED,
            3: RecordOutcome.UPDATED,
            4: RecordOutcome.UNRESOLVED,
            5: RecordOutcome.ALREADY_MEASURED,
            6: RecordOutcome.EMPTY,
            7: RecordOutcome.MISSING_CELL,
            8: RecordOutcome.NO_PATH,
            9: RecordOutcome.MISSING_ANCHOR,
        }
        assert report.updated_count == 2
        assert [e.record.row for e in report.failures()] == [4, 7, 8, 9]

    def test_written_lengths(self, processor, wiring_list):
        assert processor.process_all(wiring_list) == 2
        ws = wiring_list.worksheet
        assert ws["A2"].value == 600.0
        assert ws["A3"].value == 1550.0

    def test_unresolved_row_is_left_alone(self, processor, wiring_list):
        processor.process_all(wiring_list)
        assert wiring_list.worksheet["A4"].value is None

    def test_measured_row_is_not_reprocessed(self, processor, wiring_list):
        processor.process_all(wiring_list)
        assert wiring_list.worksheet["A5"].value == 123.0

    def test_second_run_changes_nothing(self, processor, wiring_list):
        processor.process_all(wiring_list)
        assert processor.process_all(wiring_list) == 0

    def test_requires_row_source(self, processor):
        with pytest.raises(RowSourceUnavailableError):
            processor.process_all(None)
        with pytest.raises(RowSourceUnavailableError):
            processor.dry_run(None)

    def test_bulk_range_resolves_during_batch(self, processor, mapped_store, make_source):
        mapped_store.add_range("X2", 1, 10, [(1, 0)], selected_is_top=True)
        source = make_source([None, "X2:5", "A5"])
        assert processor.process_all(source) == 1
        # interior (2,0),(3,0)
        assert source.worksheet["A2"].value == 550.0

    def test_report_counts(self, processor, wiring_list):
        counts = processor.process_batch(wiring_list).counts()
        assert counts[RecordOutcome.UPDATED] == 2
        assert counts[RecordOutcome.NO_PATH] == 1


class TestManualResolver:
    def test_callback_mapping_is_used_and_stored(self, mapped_store, topology, anchors, wiring_list):
        asked = []

        def ask(reference):
            asked.append(reference)
            return RegularCell(2, 0) if reference == "UNKNOWN" else None

        processor = ConnectionProcessor(mapped_store, topology, anchors, manual_resolver=ask)
        report = processor.process_batch(wiring_list)

        assert asked == ["UNKNOWN"]
        assert report.updated_count == 3
        # (0,0) -> (2,0): one narrow interior cell
        assert wiring_list.worksheet["A4"].value == 500.0
        assert mapped_store.get_mapping("UNKNOWN").target == RegularCell(2, 0)

    def test_later_rows_see_callback_mappings(self, mapped_store, topology, anchors, make_source):
        asked = []

        def ask(reference):
            asked.append(reference)
            return RegularCell(2, 0)

        source = make_source([None, "A1", "NEW"], [None, "NEW", "A5"])
        processor = ConnectionProcessor(mapped_store, topology, anchors, manual_resolver=ask)
        assert processor.process_all(source) == 2
        assert asked == ["NEW"]

    def test_same_reference_twice_in_one_row(self, mapped_store, topology, anchors, make_source):
        answers = iter([RegularCell(2, 0), RegularCell(4, 0)])
        asked = []

        def ask(reference):
            asked.append(reference)
            return next(answers)

        source = make_source([None, "NEW", "NEW"])
        processor = ConnectionProcessor(mapped_store, topology, anchors, manual_resolver=ask)
        assert processor.process_all(source) == 1
        assert asked == ["NEW"]
        assert mapped_store.get_mapping("NEW").target == RegularCell(2, 0)
        # a single-cell path: two connectors and the tail
        assert source.worksheet["A2"].value == 450.0

    def test_declined_reference_stays_unresolved(self, mapped_store, topology, anchors, wiring_list):
        processor = ConnectionProcessor(
            mapped_store, topology, anchors, manual_resolver=lambda ref: None
        )
        assert processor.process_all(wiring_list) == 2
        assert mapped_store.get_mapping("UNKNOWN") is None


# ---------------------------------------------------------------------------
# Dry run
# ---------------------------------------------------------------------------


class TestDryRun:
    def test_writes_nothing(self, processor, wiring_list):
        processor.dry_run(wiring_list)
        assert wiring_list.worksheet["A2"].value is None
        assert wiring_list.worksheet["A3"].value is None

    def test_matches_batch(self, processor, wiring_list):
        preview = processor.dry_run(wiring_list, limit=None)
        report = processor.process_batch(wiring_list)
        assert [(e.record.row, e.outcome, e.distance) for e in preview.evaluations] == [
            (e.record.row, e.outcome, e.distance) for e in report.evaluations
        ]

    def test_limit(self, processor, make_source):
        source = make_source(*([[None, "A1", "A5"]] * 15))
        assert len(processor.dry_run(source).evaluations) == 10
        assert len(processor.dry_run(source, limit=3).evaluations) == 3

    def test_does_not_ask_for_mappings(self, mapped_store, topology, anchors, wiring_list):
        asked = []
        processor = ConnectionProcessor(
            mapped_store, topology, anchors, manual_resolver=lambda ref: asked.append(ref)
        )
        report = processor.dry_run(wiring_list)
        assert asked == []
        assert report.evaluations[2].outcome is RecordOutcome.UNRESOLVED

    def test_format(self, processor, wiring_list):
        text = processor.dry_run(wiring_list).format()
        assert "=== DRY RUN ===" in text
        assert "ROW 2:" in text
        assert "TOTAL: 600.00 mm" in text
        assert "TOTAL: 1550.00 mm" in text
        assert "Match B: NOT FOUND" in text
        assert "already measured: 123.0" in text


# ---------------------------------------------------------------------------
# Manual measurement
# ---------------------------------------------------------------------------


class TestManualMeasurement:
    def test_matches_batch(self, processor, wiring_list):
        processor.process_all(wiring_list)
        manual = processor.measure(RegularCell(0, 0), RegularCell(4, 0))
        assert manual.distance == wiring_list.worksheet["A2"].value == 600.0
        assert manual.path[0] == (0, 0)
        assert manual.path[-1] == (4, 0)

    def test_anchors(self, processor):
        assert processor.measure(MotorAnchor(0), DoorAnchor(0)).distance == 1550.0

    def test_symmetric(self, processor):
        a = processor.measure(MotorAnchor(0), RegularCell(0, 0)).distance
        b = processor.measure(RegularCell(0, 0), MotorAnchor(0)).distance
        assert a == b == 900.0

    def test_references(self, processor):
        assert processor.measure_references("A1", "A5").distance == 600.0

    def test_unresolved_reference(self, processor):
        with pytest.raises(UnresolvedReferenceError):
            processor.measure_references("A1", "UNKNOWN")

    def test_missing_anchor(self, processor):
        with pytest.raises(InvalidArgumentsError, match="Motor 3"):
            processor.measure(MotorAnchor(3), RegularCell(0, 0))

    def test_no_path(self, processor):
        with pytest.raises(NoPathFoundError):
            processor.measure(RegularCell(0, 0), RegularCell(0, 7))


# ---------------------------------------------------------------------------
# Standard cabinet, stored mappings on disk
# ---------------------------------------------------------------------------


class TestStandardCabinet:
    @pytest.fixture
    def layout(self):
        return build_cabinet(CabinetConfig(sections=1, rows=3, cols=3))

    def test_motor_to_door(self, layout, store):
        processor = ConnectionProcessor.for_layout(store, layout)
        # (2,2) -> (2,1) -> (2,0) -> (1,0) -> (0,0): 100 + 100 + 50 interior
        assert processor.measure(MotorAnchor(0), DoorAnchor(0)).distance == 1800.0

    def test_wiring_list_on_disk(self, layout, tmp_path):
        path = str(tmp_path / "Cabinet.xlsx")
        source = WorksheetRowSource.open(path)
        source.worksheet.append(["Length", "From", "To"])
        source.worksheet.append([None, "J01-X1:4", "M1"])
        source.worksheet.append([None, "J01-X1:5", "J01-X2:1"])
        source.save()

        store = MappingStore(JsonMappingPersistence.for_workbook(path))
        store.add_mapping("J01-X1:", 1, 1)
        store.add_target("J01-X2:", RegularCell(1, 2, default_to_bottom=True))
        store.add_target("M1", MotorAnchor(0))

        # a fresh store and workbook, as after restarting the application
        source = WorksheetRowSource.open(path)
        store = MappingStore(JsonMappingPersistence.for_workbook(path))
        processor = ConnectionProcessor.for_layout(store, layout)
        assert processor.process_all(source) == 2
        source.save()

        result = WorksheetRowSource.open(path)
        # (0,1) -> (0,0) -> (1,0) -> (2,0) -> (2,1) -> (2,2)
        assert result.record(2).measured == 1100.0
        # J01-X2: prefers the row below, so the same path between two cells
        assert result.record(3).measured == 800.0
