"""Unit tests for distance.py (wire length composition)."""

import pytest

from pycabinetwiring.distance import (
    DistanceBreakdown,
    compose_distance,
    distance_breakdown,
    endpoint_contribution,
    interior_cost,
)
from pycabinetwiring.layout.cabinet import CabinetConfig, build_cabinet
from pycabinetwiring.layout.topology import GridTopology
from pycabinetwiring.model.targets import EndpointKind
from pycabinetwiring.routing.pathfinding import find_shortest_path

REGULAR = EndpointKind.REGULAR
MOTOR = EndpointKind.MOTOR
DOOR = EndpointKind.DOOR


class TestEndpointContribution:
    @pytest.mark.parametrize(
        "kind, expected",
        [(REGULAR, 200), (MOTOR, 500), (DOOR, 1000)],
    )
    def test_contribution(self, kind, expected):
        assert endpoint_contribution(kind) == expected


class TestInteriorCost:
    def test_excludes_endpoints(self, line_topology):
        path = [(0, 0), (1, 0), (2, 0), (3, 0), (4, 0)]
        assert interior_cost(path, line_topology) == 150

    def test_wide_interior_cells(self):
        topo = GridTopology([(0, c) for c in range(4)])
        path = [(0, 0), (0, 1), (0, 2), (0, 3)]
        assert interior_cost(path, topo) == 200

    def test_short_paths_have_no_interior(self, line_topology):
        assert interior_cost([(0, 0)], line_topology) == 0
        assert interior_cost([(0, 0), (1, 0)], line_topology) == 0
        assert interior_cost([], line_topology) == 0


class TestComposeDistance:
    def test_three_narrow_interior_cells(self, line_topology):
        path = [(0, 0), (1, 0), (2, 0), (3, 0), (4, 0)]
        assert compose_distance(path, REGULAR, REGULAR, line_topology) == 600.0

    def test_motor_to_door_without_interior(self, line_topology):
        path = [(3, 0), (4, 0)]
        assert compose_distance(path, MOTOR, DOOR, line_topology) == 1550.0

    def test_single_cell_path(self, line_topology):
        assert compose_distance([(2, 0)], REGULAR, REGULAR, line_topology) == 450.0

    def test_wide_duct_path(self):
        topo = GridTopology([(0, c) for c in range(4)])
        path = [(0, 0), (0, 1), (0, 2), (0, 3)]
        assert compose_distance(path, REGULAR, REGULAR, topo) == 650.0

    @pytest.mark.parametrize(
        "start_kind, end_kind",
        [(REGULAR, MOTOR), (MOTOR, DOOR), (DOOR, REGULAR), (REGULAR, REGULAR)],
    )
    def test_symmetric(self, start_kind, end_kind):
        layout = build_cabinet(CabinetConfig(sections=2, rows=5, cols=4))
        topo = layout.topology
        path = find_shortest_path((4, 0), (0, 7), topo)
        forward = compose_distance(path, start_kind, end_kind, topo)
        backward = compose_distance(list(reversed(path)), end_kind, start_kind, topo)
        assert forward == backward

    def test_returns_float(self, line_topology):
        result = compose_distance([(0, 0), (1, 0)], REGULAR, REGULAR, line_topology)
        assert isinstance(result, float)


class TestDistanceBreakdown:
    def test_parts(self, line_topology):
        path = [(0, 0), (1, 0), (2, 0)]
        b = distance_breakdown(path, MOTOR, REGULAR, line_topology)
        assert b.interior == 50.0
        assert b.start_connection == 500.0
        assert b.end_connection == 200.0
        assert b.tail == 50.0
        assert b.total == 800.0

    def test_total(self):
        assert DistanceBreakdown(100.0, 200.0, 1000.0).total == 1350.0
