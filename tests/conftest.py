import pytest
from openpyxl import Workbook

from pycabinetwiring.layout.topology import GridTopology
from pycabinetwiring.mapping.persistence import MemoryMappingPersistence
from pycabinetwiring.mapping.store import MappingStore
from pycabinetwiring.processing.row_source import WorksheetRowSource


@pytest.fixture
def line_topology():
    """A single vertical duct (0, 0)..(4, 0): every cell is narrow."""
    return GridTopology([(r, 0) for r in range(5)])


@pytest.fixture
def persistence():
    return MemoryMappingPersistence()


@pytest.fixture
def store(persistence):
    return MappingStore(persistence)


@pytest.fixture
def make_source():
    """
    Factory for an in-memory wiring list.

    Usage:
        def test_something(make_source):
            source = make_source([None, "A1", "A5"], [123.0, "A1", "A2"])
    """

    def _make(*rows):
        wb = Workbook()
        ws = wb.active
        ws.append(["Length", "From", "To"])
        for row in rows:
            ws.append(list(row))
        return WorksheetRowSource(ws)

    return _make
