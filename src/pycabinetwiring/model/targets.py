"""
Grid targets: the places a component reference can point at.

A target is one of four explicit variants:

    RegularCell(row, col)  a top sub-row position (may fall back to a neighbour)
    BottomCell(row, col)   the bottom sub-row of a position, exact
    MotorAnchor(section)   the motor anchor of a cabinet section
    DoorAnchor(section)    the door anchor of a cabinet section

The persisted form still uses the integer encoding of the stored mapping
files (negative rows for bottom sub-rows, rows -1/-2 with ``1000 + section``
columns for anchors). ``decode_target`` and ``encode_target`` are the only
places that know about it.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from functools import singledispatch

from pycabinetwiring.model.constants import (
    ANCHOR_COLUMN_OFFSET,
    DOOR_ANCHOR_ROW,
    MOTOR_ANCHOR_ROW,
)

Coordinate = tuple[int, int]


class EndpointKind(Enum):
    """Classification of a path endpoint, driving its connector length."""

    REGULAR = "regular"
    MOTOR = "motor"
    DOOR = "door"


@dataclass(frozen=True)
class RegularCell:
    """
    A top sub-row grid position.

    Attributes:
        row: Grid row (non-negative).
        col: Global grid column.
        default_to_bottom: When the position itself is not routable, prefer
            the row below it before the row above.
    """

    row: int
    col: int
    default_to_bottom: bool = False

    kind = EndpointKind.REGULAR

    def __str__(self) -> str:
        side = "B" if self.default_to_bottom else "T"
        return f"({self.row}, {self.col}) ({side})"


@dataclass(frozen=True)
class BottomCell:
    """The bottom sub-row of grid position ``(row, col)``."""

    row: int
    col: int

    kind = EndpointKind.REGULAR

    def __str__(self) -> str:
        return f"({self.row}, {self.col}) (bottom)"


@dataclass(frozen=True)
class MotorAnchor:
    """Motor anchor of cabinet section ``section`` (0-based)."""

    section: int

    kind = EndpointKind.MOTOR

    def __str__(self) -> str:
        return f"Motor {self.section}"


@dataclass(frozen=True)
class DoorAnchor:
    """Door anchor of cabinet section ``section`` (0-based)."""

    section: int

    kind = EndpointKind.DOOR

    def __str__(self) -> str:
        return f"Door {self.section}"


GridTarget = RegularCell | BottomCell | MotorAnchor | DoorAnchor


def decode_target(grid_row: int, grid_col: int, default_to_bottom: bool = False) -> GridTarget:
    """
    Decode a persisted (row, col) pair into a grid target.

    Examples::

        decode_target(-1, 1002)  # MotorAnchor(section=2)
        decode_target(-2, 1000)  # DoorAnchor(section=0)
        decode_target(-4, 5)     # BottomCell(row=3, col=5)
        decode_target(3, 5)      # RegularCell(row=3, col=5)
    """
    if grid_row == MOTOR_ANCHOR_ROW and grid_col >= ANCHOR_COLUMN_OFFSET:
        return MotorAnchor(grid_col - ANCHOR_COLUMN_OFFSET)
    if grid_row == DOOR_ANCHOR_ROW and grid_col >= ANCHOR_COLUMN_OFFSET:
        return DoorAnchor(grid_col - ANCHOR_COLUMN_OFFSET)
    if grid_row < 0:
        return BottomCell(-(grid_row + 1), grid_col)
    return RegularCell(grid_row, grid_col, default_to_bottom)


@singledispatch
def encode_target(target) -> tuple[int, int, bool]:
    """
    Encode a grid target as the persisted ``(row, col, default_to_bottom)``.
    """
    raise TypeError(f"encode_target() has no handler for {type(target).__name__}")


@encode_target.register
def _(target: RegularCell) -> tuple[int, int, bool]:
    return target.row, target.col, target.default_to_bottom


@encode_target.register
def _(target: BottomCell) -> tuple[int, int, bool]:
    return -(target.row + 1), target.col, True


@encode_target.register
def _(target: MotorAnchor) -> tuple[int, int, bool]:
    return MOTOR_ANCHOR_ROW, ANCHOR_COLUMN_OFFSET + target.section, False


@encode_target.register
def _(target: DoorAnchor) -> tuple[int, int, bool]:
    return DOOR_ANCHOR_ROW, ANCHOR_COLUMN_OFFSET + target.section, False
