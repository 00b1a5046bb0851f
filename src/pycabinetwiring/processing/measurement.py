"""
Measurement log: where manual measurements are written in the wiring list.

The log keeps a row cursor. A measurement goes to the first row at or after
the cursor whose result column is still empty, and the cursor then moves
past it.
"""

from __future__ import annotations

from pycabinetwiring.exceptions import MeasurementLogFullError, RowSourceUnavailableError
from pycabinetwiring.model.constants import FIRST_DATA_ROW, MAX_LOG_ROW
from pycabinetwiring.processing.processor import Measurement
from pycabinetwiring.processing.row_source import RowSource


class MeasurementLog:
    """
    Row cursor for manual measurements.

    Args:
        row_source: Wiring list to write into.
        max_row: Last row the cursor may scan to.
    """

    def __init__(self, row_source: RowSource | None, max_row: int = MAX_LOG_ROW):
        if row_source is None:
            raise RowSourceUnavailableError()
        self.row_source = row_source
        self.max_row = max_row
        self.current_row = FIRST_DATA_ROW

    def reset(self) -> None:
        self.current_row = FIRST_DATA_ROW

    def next_available_row(self) -> int:
        """Advance the cursor to the first row with an empty result."""
        while self.current_row <= self.max_row:
            if self.row_source.record(self.current_row).result in (None, ""):
                break
            self.current_row += 1
        return self.current_row

    def next_pending_row(self) -> int:
        """
        Advance the cursor to the next unmeasured row that lists endpoints.
        """
        while self.current_row <= self.max_row:
            record = self.row_source.record(self.current_row)
            if record.result in (None, "") and not record.is_empty:
                break
            self.current_row += 1
        return self.current_row

    def pending_description(self) -> str:
        """``"A - B"`` of the next row waiting for a measurement, or ""."""
        row = self.next_pending_row()
        if row > self.max_row:
            return ""
        return self.row_source.record(row).description

    def log(self, measurement: Measurement | float) -> int:
        """
        Write a measurement to the next available row.

        Returns:
            The row written.

        Raises:
            MeasurementLogFullError: If every row up to ``max_row`` already
                holds a result. Nothing is written.
        """
        distance = measurement.distance if isinstance(measurement, Measurement) else measurement
        row = self.next_available_row()
        if row > self.max_row:
            raise MeasurementLogFullError(self.max_row)
        self.row_source.write_result(row, float(distance))
        self.current_row = row + 1
        return row

    def delete_last(self) -> float | None:
        """
        Clear the result of the row before the cursor.

        Returns:
            The cleared value, or None when there was nothing to delete (the
            cursor is then reset to the first data row).
        """
        last_row = self.current_row - 1
        if last_row >= FIRST_DATA_ROW:
            record = self.row_source.record(last_row)
            if record.result not in (None, ""):
                self.row_source.clear_result(last_row)
                self.current_row = last_row
                return record.measured
        self.reset()
        return None
