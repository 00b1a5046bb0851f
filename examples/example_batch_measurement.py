"""
Example: automatic wire-length measurement of a wiring list.

Builds a small cabinet, maps a few component references, writes a wiring
list workbook and lets the ConnectionProcessor fill in the lengths.

Run with:
    python -m examples.example_batch_measurement
"""

import os
import tempfile

from openpyxl import Workbook

from pycabinetwiring import (
    CabinetConfig,
    ConnectionProcessor,
    DoorAnchor,
    JsonMappingPersistence,
    MappingStore,
    MotorAnchor,
    RegularCell,
    WorksheetRowSource,
    build_cabinet,
)


def write_wiring_list(path: str) -> None:
    wb = Workbook()
    ws = wb.active
    ws.append(["Length", "From", "To"])
    ws.append([None, "J01-X1:4", "E01-A2-X4:10"])
    ws.append([None, "M1", "D1"])
    ws.append([None, "X2:55", "X2:56*"])
    ws.append([None, "UNKNOWN", "A2"])
    wb.save(path)


def main():
    print("=" * 60)
    print("pycabinetwiring: Batch Measurement Example")
    print("=" * 60)

    layout = build_cabinet(CabinetConfig(sections=2, rows=5, cols=4))

    with tempfile.TemporaryDirectory() as tmpdir:
        workbook_path = os.path.join(tmpdir, "wiring_list.xlsx")
        write_wiring_list(workbook_path)

        store = MappingStore(JsonMappingPersistence.for_workbook(workbook_path))
        store.add_mapping("J01-X1:", 1, 1)
        store.add_target("A2", RegularCell(3, 6, default_to_bottom=True))
        store.add_target("M1", MotorAnchor(0))
        store.add_target("D1", DoorAnchor(1))
        store.add_range("X2", 21, 100, [(1, 2), (1, 3)], selected_is_top=True)

        source = WorksheetRowSource.open(workbook_path)
        processor = ConnectionProcessor.for_layout(store, layout)

        print(processor.dry_run(source).format())

        report = processor.process_batch(source)
        for evaluation in report.evaluations:
            rec = evaluation.record
            length = f"{evaluation.distance:.0f} mm" if evaluation.distance else "-"
            print(f"Row {rec.row}: {rec.description:<30} {length:>10}  ({evaluation.outcome.value})")

        print(f"\nUpdated {report.updated_count} rows")
        source.save()


if __name__ == "__main__":
    main()
