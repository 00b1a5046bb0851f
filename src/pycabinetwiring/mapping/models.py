"""
Component mapping records.

A :class:`ComponentMapping` binds one reference text (e.g. ``"J01-X1:"`` or
``"A2"``) to one grid target. A :class:`BulkRangeMapping` binds a whole
numeric interval of terminal references (``"X2:21"`` .. ``"X2:100"``) to a
set of cells at once.

The ``to_dict``/``from_dict`` field names are those of the stored mapping
files and must not change.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from pycabinetwiring.exceptions import InvalidArgumentsError
from pycabinetwiring.model.constants import STAR_MARKER
from pycabinetwiring.model.targets import (
    Coordinate,
    EndpointKind,
    GridTarget,
    decode_target,
)


def reference_key(reference: str) -> str:
    """Case-insensitive lookup key for a reference text."""
    return reference.strip().casefold()


def starred_twin(reference: str) -> str:
    """``"X2:4"`` -> ``"X2:4*"`` and ``"X2:4*"`` -> ``"X2:4"``."""
    reference = reference.strip()
    if reference.endswith(STAR_MARKER):
        return reference.rstrip(STAR_MARKER)
    return reference + STAR_MARKER


@dataclass(frozen=True)
class ComponentMapping:
    """
    A single reference-to-grid binding.

    Attributes:
        reference: The reference text as entered.
        grid_row: Persisted row (see :mod:`pycabinetwiring.model.targets`).
        grid_col: Persisted column.
        default_to_bottom: Prefer the lower neighbour when the position is
            not routable itself.
    """

    reference: str
    grid_row: int
    grid_col: int
    default_to_bottom: bool = False

    @property
    def key(self) -> str:
        return reference_key(self.reference)

    @property
    def target(self) -> GridTarget:
        return decode_target(self.grid_row, self.grid_col, self.default_to_bottom)

    @property
    def kind(self) -> EndpointKind:
        return self.target.kind

    def to_dict(self) -> dict[str, Any]:
        return {
            "ExcelReference": self.reference,
            "GridRow": self.grid_row,
            "GridColumn": self.grid_col,
            "DefaultToBottom": self.default_to_bottom,
        }

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> "ComponentMapping":
        return cls(
            reference=str(d["ExcelReference"]),
            grid_row=int(d["GridRow"]),
            grid_col=int(d["GridColumn"]),
            default_to_bottom=bool(d.get("DefaultToBottom", False)),
        )


@dataclass(frozen=True)
class BulkRangeMapping:
    """
    One mapping applied to every reference ``prefix:i`` for
    ``start_index <= i <= end_index``.

    Attributes:
        prefix: Reference prefix before the colon, e.g. ``"X2"``.
        start_index: First covered index.
        end_index: Last covered index (inclusive).
        cells: Selected cells, distinct, in selection order.
        selected_is_top: True when the top sub-row was selected.

    Raises:
        InvalidArgumentsError: On an empty prefix, no cells, or
            ``end_index < start_index``.
    """

    prefix: str
    start_index: int
    end_index: int
    cells: tuple[Coordinate, ...]
    selected_is_top: bool = True

    def __post_init__(self):
        prefix = self.prefix.strip() if isinstance(self.prefix, str) else ""
        if not prefix:
            raise InvalidArgumentsError("Bulk range prefix must not be empty")
        if self.end_index < self.start_index:
            raise InvalidArgumentsError(
                f"Bulk range end {self.end_index} is before start {self.start_index}"
            )
        cells = tuple(dict.fromkeys((int(r), int(c)) for r, c in self.cells))
        if not cells:
            raise InvalidArgumentsError(
                f"Bulk range {prefix}:{self.start_index}-{self.end_index} has no cells"
            )
        object.__setattr__(self, "prefix", prefix)
        object.__setattr__(self, "cells", cells)

    @property
    def key(self) -> tuple[str, int, int]:
        return reference_key(self.prefix), self.start_index, self.end_index

    @property
    def label(self) -> str:
        return f"{self.prefix}:{self.start_index}-{self.end_index}"

    def covers(self, prefix: str, index: int) -> bool:
        return (
            reference_key(prefix) == reference_key(self.prefix)
            and self.start_index <= index <= self.end_index
        )

    def mapping_for(self, reference: str) -> ComponentMapping:
        """
        The individual mapping of a covered reference.

        The base reference maps to the first selected cell on the selected
        side. The starred reference maps to the opposite sub-row.
        """
        reference = reference.strip()
        row, col = self.cells[0]
        if reference.endswith(STAR_MARKER):
            opposite = row + 1 if self.selected_is_top else row - 1
            return ComponentMapping(reference, opposite, col, self.selected_is_top)
        return ComponentMapping(reference, row, col, not self.selected_is_top)

    def to_dict(self) -> dict[str, Any]:
        return {
            "Prefix": self.prefix,
            "StartIndex": self.start_index,
            "EndIndex": self.end_index,
            "Cells": [{"Row": r, "Col": c} for r, c in self.cells],
            "SelectedIsTop": self.selected_is_top,
        }

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> "BulkRangeMapping":
        return cls(
            prefix=str(d["Prefix"]),
            start_index=int(d["StartIndex"]),
            end_index=int(d["EndIndex"]),
            cells=tuple((int(c["Row"]), int(c["Col"])) for c in d.get("Cells", [])),
            selected_is_top=bool(d.get("SelectedIsTop", True)),
        )
