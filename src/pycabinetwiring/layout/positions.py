"""
Grid target -> concrete grid coordinate.
"""

from functools import singledispatch

from pycabinetwiring.layout.cabinet import AnchorDirectory
from pycabinetwiring.layout.topology import GridTopology
from pycabinetwiring.model.targets import (
    BottomCell,
    Coordinate,
    DoorAnchor,
    MotorAnchor,
    RegularCell,
)


@singledispatch
def resolve_position(
    target, topology: GridTopology, anchors: AnchorDirectory
) -> Coordinate | None:
    """
    The grid coordinate a target is routed from.

    Returns:
        A coordinate, or None when an anchor section does not exist. A
        returned coordinate is not guaranteed to be routable: a regular cell
        with no routable neighbour comes back unchanged and fails later as a
        missing cell.
    """
    raise TypeError(f"resolve_position() has no handler for {type(target).__name__}")


@resolve_position.register
def _(target: MotorAnchor, topology: GridTopology, anchors: AnchorDirectory):
    return anchors.motor(target.section)


@resolve_position.register
def _(target: DoorAnchor, topology: GridTopology, anchors: AnchorDirectory):
    return anchors.door(target.section)


@resolve_position.register
def _(target: BottomCell, topology: GridTopology, anchors: AnchorDirectory):
    return target.row, target.col


@resolve_position.register
def _(target: RegularCell, topology: GridTopology, anchors: AnchorDirectory):
    row, col = target.row, target.col
    if topology.exists(row, col):
        return row, col
    if target.default_to_bottom and topology.exists(row + 1, col):
        return row + 1, col
    if topology.exists(row - 1, col):
        return row - 1, col
    return row, col
