"""
Physical wire length from a grid path.

    total = interior cost + C(start kind) + C(end kind) + TAIL_ALLOWANCE

Interior cost counts every path cell strictly between the two endpoints.
``C`` is the connector contribution of an endpoint kind and does not depend
on which end of the path the endpoint sits, so the rule is symmetric.

This is the only place the rule is implemented; batch processing, the dry
run and manual measurement all call :func:`compose_distance`.
"""

from collections.abc import Sequence
from dataclasses import dataclass

from pycabinetwiring.layout.topology import GridTopology
from pycabinetwiring.model.constants import (
    DOOR_CONNECTION,
    MOTOR_CONNECTION,
    REGULAR_CONNECTION,
    TAIL_ALLOWANCE,
)
from pycabinetwiring.model.targets import Coordinate, EndpointKind
from pycabinetwiring.routing.pathfinding import cell_cost

_CONNECTION_LENGTHS = {
    EndpointKind.REGULAR: REGULAR_CONNECTION,
    EndpointKind.MOTOR: MOTOR_CONNECTION,
    EndpointKind.DOOR: DOOR_CONNECTION,
}


@dataclass(frozen=True)
class DistanceBreakdown:
    """The parts of a composed distance, in millimetres."""

    interior: float
    start_connection: float
    end_connection: float
    tail: float = TAIL_ALLOWANCE

    @property
    def total(self) -> float:
        return self.interior + self.start_connection + self.end_connection + self.tail


def endpoint_contribution(kind: EndpointKind) -> int:
    """Fixed connector length of an endpoint of *kind*."""
    return _CONNECTION_LENGTHS[kind]


def interior_cost(path: Sequence[Coordinate], topology: GridTopology) -> int:
    """Sum of cell costs strictly between the first and last path cell."""
    return sum(cell_cost(topology, cell) for cell in path[1:-1])


def distance_breakdown(
    path: Sequence[Coordinate],
    start_kind: EndpointKind,
    end_kind: EndpointKind,
    topology: GridTopology,
) -> DistanceBreakdown:
    return DistanceBreakdown(
        interior=float(interior_cost(path, topology)),
        start_connection=float(endpoint_contribution(start_kind)),
        end_connection=float(endpoint_contribution(end_kind)),
    )


def compose_distance(
    path: Sequence[Coordinate],
    start_kind: EndpointKind,
    end_kind: EndpointKind,
    topology: GridTopology,
) -> float:
    """
    Compose the physical wire length of a path.

    Args:
        path: Cells from start to end, as returned by ``find_shortest_path``.
        start_kind: Kind of the start endpoint.
        end_kind: Kind of the end endpoint.
        topology: Topology the path was found in.

    Returns:
        Length in millimetres.

    Example::

        # three isolated interior cells between two regular endpoints
        compose_distance(path, EndpointKind.REGULAR, EndpointKind.REGULAR, topo)
        # 150 + 200 + 200 + 50 = 600.0
    """
    return distance_breakdown(path, start_kind, end_kind, topology).total
