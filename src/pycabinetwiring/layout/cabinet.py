"""
Standard sectioned cabinet layout.

A cabinet is ``sections`` side-by-side sections of ``rows`` x ``cols`` grid
positions. Even rows are full cable-duct rows; odd rows only route through
column 0, the remaining positions of an odd row are component mounting
positions that references get mapped to, not routable cells.

Each section also has two fixed anchors: the door anchor at the top-left
cell and the motor anchor at the bottom-right cell of the section.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from pycabinetwiring.exceptions import InvalidArgumentsError
from pycabinetwiring.layout.topology import GridTopology
from pycabinetwiring.model.constants import (
    DEFAULT_COLS,
    DEFAULT_ROWS,
    DEFAULT_SECTIONS,
    MAX_COLS,
    MAX_ROWS,
    MAX_SECTIONS,
)
from pycabinetwiring.model.targets import Coordinate, EndpointKind


@dataclass(frozen=True)
class CabinetConfig:
    """
    Shape of a cabinet.

    Attributes:
        sections: Number of sections, 1-20.
        rows: Rows per section, 1-20.
        cols: Columns per section, 1-10.
    """

    sections: int = DEFAULT_SECTIONS
    rows: int = DEFAULT_ROWS
    cols: int = DEFAULT_COLS

    def __post_init__(self):
        for name, value, upper in (
            ("sections", self.sections, MAX_SECTIONS),
            ("rows", self.rows, MAX_ROWS),
            ("cols", self.cols, MAX_COLS),
        ):
            if not isinstance(value, int) or not 1 <= value <= upper:
                raise InvalidArgumentsError(
                    f"{name} must be an integer between 1 and {upper}, got {value!r}"
                )

    def global_col(self, section: int, local_col: int) -> int:
        return section * self.cols + local_col

    def section_of(self, col: int) -> int:
        return col // self.cols


@dataclass
class AnchorDirectory:
    """
    Read-only lookup of motor and door anchors by section index.

    Attributes:
        motors: Section index -> motor anchor coordinate.
        doors: Section index -> door anchor coordinate.
    """

    motors: dict[int, Coordinate] = field(default_factory=dict)
    doors: dict[int, Coordinate] = field(default_factory=dict)

    def motor(self, section: int) -> Coordinate | None:
        return self.motors.get(section)

    def door(self, section: int) -> Coordinate | None:
        return self.doors.get(section)

    def lookup(self, kind: EndpointKind, section: int) -> Coordinate | None:
        """Anchor of *kind* in *section*, or None if the section has none."""
        if kind is EndpointKind.MOTOR:
            return self.motor(section)
        if kind is EndpointKind.DOOR:
            return self.door(section)
        return None


@dataclass
class CabinetLayout:
    """
    A built cabinet: routable topology, anchors and mapping positions.

    Attributes:
        config: The cabinet shape.
        topology: Routable cells.
        anchors: Motor/door anchors per section.
        mapping_positions: Component mounting positions (not routable).
    """

    config: CabinetConfig
    topology: GridTopology
    anchors: AnchorDirectory
    mapping_positions: frozenset[Coordinate] = frozenset()

    def is_mapping_position(self, row: int, col: int) -> bool:
        return (row, col) in self.mapping_positions

    def remove_cell(self, row: int, col: int) -> bool:
        """Take a routable cell out of the cabinet (e.g. a blocked duct)."""
        return self.topology.remove(row, col)


def build_cabinet(config: CabinetConfig | None = None) -> CabinetLayout:
    """
    Build the standard cabinet grid.

    Args:
        config: Cabinet shape; defaults to 5 sections of 7 x 4.

    Returns:
        A new :class:`CabinetLayout`.

    Example::

        layout = build_cabinet(CabinetConfig(sections=2, rows=3, cols=3))
        layout.anchors.door(1)   # (0, 3)
        layout.anchors.motor(1)  # (2, 5)
    """
    config = config or CabinetConfig()
    topology = GridTopology()
    mapping_positions: set[Coordinate] = set()
    anchors = AnchorDirectory()

    for s in range(config.sections):
        for row in range(config.rows):
            for local_col in range(config.cols):
                col = config.global_col(s, local_col)
                if row % 2 == 0 or local_col == 0:
                    topology.add(row, col)
                else:
                    mapping_positions.add((row, col))

        anchors.doors[s] = (0, config.global_col(s, 0))
        anchors.motors[s] = (config.rows - 1, config.global_col(s, config.cols - 1))

    return CabinetLayout(
        config=config,
        topology=topology,
        anchors=anchors,
        mapping_positions=frozenset(mapping_positions),
    )
