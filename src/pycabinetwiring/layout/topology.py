"""
Grid topology for a cabinet layout.

The topology is the set of routable cell coordinates. Adjacency is
orthogonal only: no diagonals, no wraparound, and a coordinate that is not
present has no edges at all.
"""

from collections.abc import Iterable, Iterator

from pycabinetwiring.model.targets import Coordinate

_DIRECTIONS = ((-1, 0), (1, 0), (0, -1), (0, 1))


class GridTopology:
    """
    Mutable set of routable grid cells.

    Cells are ``(row, col)`` tuples with global column numbering across all
    cabinet sections.

    Example::

        topo = GridTopology([(0, 0), (0, 1), (1, 0)])
        topo.neighbors(0, 0)                # {(0, 1), (1, 0)}
        topo.has_horizontal_neighbor(1, 0)  # False
    """

    def __init__(self, cells: Iterable[Coordinate] = ()):
        self._cells: set[Coordinate] = {(int(r), int(c)) for r, c in cells}

    def __contains__(self, cell: object) -> bool:
        return cell in self._cells

    def __iter__(self) -> Iterator[Coordinate]:
        return iter(sorted(self._cells))

    def __len__(self) -> int:
        return len(self._cells)

    def __repr__(self) -> str:
        return f"GridTopology({len(self._cells)} cells)"

    def exists(self, row: int, col: int) -> bool:
        return (row, col) in self._cells

    def add(self, row: int, col: int) -> None:
        self._cells.add((row, col))

    def remove(self, row: int, col: int) -> bool:
        """
        Remove a cell so it no longer takes part in routing.

        Returns:
            True if the cell was present.
        """
        if (row, col) not in self._cells:
            return False
        self._cells.discard((row, col))
        return True

    def neighbors(self, row: int, col: int) -> list[Coordinate]:
        """Present orthogonal neighbours, in up/down/left/right order."""
        return [
            (row + dr, col + dc)
            for dr, dc in _DIRECTIONS
            if (row + dr, col + dc) in self._cells
        ]

    def has_horizontal_neighbor(self, row: int, col: int) -> bool:
        """
        True iff ``(row, col-1)`` or ``(row, col+1)`` is present.

        A horizontally adjacent position means the segment runs in the wide
        duct, which costs more per cell.
        """
        return (row, col - 1) in self._cells or (row, col + 1) in self._cells

    def copy(self) -> "GridTopology":
        return GridTopology(self._cells)
