"""
Shortest-path search over a cabinet grid topology.

Dijkstra with a duct-width cost: stepping *into* a cell costs
``WIDE_DUCT_COST`` when that cell has a horizontal neighbour and
``NARROW_DUCT_COST`` otherwise. The weight depends on the destination cell
only, never on the cell being left.
"""

from heapq import heappop, heappush

from pycabinetwiring.exceptions import NoPathFoundError
from pycabinetwiring.layout.topology import GridTopology
from pycabinetwiring.model.constants import NARROW_DUCT_COST, WIDE_DUCT_COST
from pycabinetwiring.model.targets import Coordinate


def cell_cost(topology: GridTopology, cell: Coordinate) -> int:
    """Cost of entering (or passing through) *cell*."""
    if topology.has_horizontal_neighbor(*cell):
        return WIDE_DUCT_COST
    return NARROW_DUCT_COST


def find_shortest_path(
    start: Coordinate,
    end: Coordinate,
    topology: GridTopology,
) -> list[Coordinate]:
    """
    Find a minimum-cost path between two cells.

    Args:
        start: Start cell.
        end: End cell.
        topology: Routable cells.

    Returns:
        Ordered cells from *start* to *end* inclusive. ``[start]`` when
        ``start == end``.

    Raises:
        NoPathFoundError: If either cell is missing from the topology or
            *end* cannot be reached from *start*.
    """
    if start not in topology:
        raise NoPathFoundError(start, end, "start cell is not in the grid")
    if end not in topology:
        raise NoPathFoundError(start, end, "end cell is not in the grid")

    dist: dict[Coordinate, int] = {start: 0}
    prev: dict[Coordinate, Coordinate] = {}
    visited: set[Coordinate] = set()
    heap: list[tuple[int, Coordinate]] = [(0, start)]

    while heap:
        d, cell = heappop(heap)
        if cell in visited:
            continue
        visited.add(cell)
        if cell == end:
            break

        for neighbor in topology.neighbors(*cell):
            if neighbor in visited:
                continue
            alt = d + cell_cost(topology, neighbor)
            if neighbor not in dist or alt < dist[neighbor]:
                dist[neighbor] = alt
                prev[neighbor] = cell
                heappush(heap, (alt, neighbor))

    if end not in visited:
        raise NoPathFoundError(start, end)

    path = [end]
    while path[-1] != start:
        path.append(prev[path[-1]])
    path.reverse()
    return path


def path_cost(path: list[Coordinate], topology: GridTopology) -> int:
    """Sum of edge weights along *path* (every cell after the first)."""
    return sum(cell_cost(topology, cell) for cell in path[1:])
