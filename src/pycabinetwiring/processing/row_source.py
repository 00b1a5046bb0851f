"""
Wiring-list row sources.

A wiring list is a worksheet where row 1 is a header and every later row is
one wire: column A holds the measured length (empty until measured), columns
B and C hold the two endpoint references.
"""

from __future__ import annotations

import math
import os
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any, Protocol

from pycabinetwiring.exceptions import RowSourceUnavailableError
from pycabinetwiring.model.constants import (
    ENDPOINT_A_COLUMN,
    ENDPOINT_B_COLUMN,
    FIRST_DATA_ROW,
    RESULT_COLUMN,
)


def parse_measurement(value: Any) -> float | None:
    """
    The numeric value of a result cell, or None if it is not a finite number.

    Examples::

        parse_measurement(123.0)    # 123.0
        parse_measurement("600")    # 600.0
        parse_measurement("n/a")    # None
        parse_measurement("inf")    # None
        parse_measurement(None)     # None
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = str(value).strip()
        if not text or "_" in text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    return number if math.isfinite(number) else None


def _cell_text(value: Any) -> str:
    return "" if value is None else str(value).strip()


@dataclass(frozen=True)
class WiringRecord:
    """
    One wiring-list row.

    Attributes:
        row: 1-based worksheet row.
        endpoint_a: Text of column B.
        endpoint_b: Text of column C.
        result: Raw value of column A.
    """

    row: int
    endpoint_a: str
    endpoint_b: str
    result: Any = None

    @property
    def measured(self) -> float | None:
        return parse_measurement(self.result)

    @property
    def is_measured(self) -> bool:
        return self.measured is not None

    @property
    def is_empty(self) -> bool:
        return not self.endpoint_a and not self.endpoint_b

    @property
    def description(self) -> str:
        if self.is_empty:
            return ""
        return f"{self.endpoint_a} - {self.endpoint_b}".strip()


class RowSource(Protocol):
    """Ordered wiring records with a writable result field."""

    @property
    def last_row(self) -> int: ...

    def records(self) -> Iterator[WiringRecord]: ...

    def record(self, row: int) -> WiringRecord: ...

    def read_result(self, row: int) -> Any: ...

    def endpoints(self, row: int) -> tuple[str, str]: ...

    def write_result(self, row: int, value: float) -> None: ...

    def clear_result(self, row: int) -> None: ...


class WorksheetRowSource:
    """
    Row source backed by an openpyxl worksheet.

    Args:
        worksheet: The worksheet holding the wiring list.
        path: File the workbook is saved to by :meth:`save`.

    Raises:
        RowSourceUnavailableError: If *worksheet* is None.

    Example::

        source = WorksheetRowSource.open("wires.xlsx")
        processor.process_all(source)
        source.save()
    """

    def __init__(self, worksheet, path: str | None = None):
        if worksheet is None:
            raise RowSourceUnavailableError()
        self.worksheet = worksheet
        self.path = path

    @classmethod
    def open(cls, path: str) -> "WorksheetRowSource":
        """
        Open the first worksheet of *path*, creating a new workbook if the
        file does not exist yet.

        Raises:
            RowSourceUnavailableError: If the file exists but cannot be read.
        """
        from openpyxl import Workbook, load_workbook

        if os.path.exists(path):
            try:
                workbook = load_workbook(path)
            except Exception as e:  # openpyxl raises several unrelated types
                raise RowSourceUnavailableError(
                    f"Could not open workbook '{path}': {e}"
                ) from e
        else:
            workbook = Workbook()
        return cls(workbook.worksheets[0], path)

    @property
    def last_row(self) -> int:
        return self.worksheet.max_row

    def record(self, row: int) -> WiringRecord:
        if row > self.last_row:
            # reading would create the cells and grow the sheet
            return WiringRecord(row=row, endpoint_a="", endpoint_b="")
        ws = self.worksheet
        return WiringRecord(
            row=row,
            endpoint_a=_cell_text(ws.cell(row=row, column=ENDPOINT_A_COLUMN).value),
            endpoint_b=_cell_text(ws.cell(row=row, column=ENDPOINT_B_COLUMN).value),
            result=ws.cell(row=row, column=RESULT_COLUMN).value,
        )

    def read_result(self, row: int) -> Any:
        return self.record(row).result

    def endpoints(self, row: int) -> tuple[str, str]:
        rec = self.record(row)
        return rec.endpoint_a, rec.endpoint_b

    def records(self) -> Iterator[WiringRecord]:
        """Records from the first data row to the last used row."""
        for row in range(FIRST_DATA_ROW, self.last_row + 1):
            yield self.record(row)

    def write_result(self, row: int, value: float) -> None:
        self.worksheet.cell(row=row, column=RESULT_COLUMN, value=value)

    def clear_result(self, row: int) -> None:
        self.worksheet.cell(row=row, column=RESULT_COLUMN).value = None

    def save(self, path: str | None = None) -> str:
        """
        Save the workbook.

        Raises:
            RowSourceUnavailableError: If no path is known.
        """
        path = path or self.path
        if not path:
            raise RowSourceUnavailableError("No file path to save the workbook to.")
        os.makedirs(os.path.dirname(os.path.abspath(path)), exist_ok=True)
        self.worksheet.parent.save(path)
        return path
