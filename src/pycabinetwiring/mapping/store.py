"""
The mapping store: the single writer of component and bulk mappings.

The store is one of the intentional mutable classes of the library. Its
state lives in an immutable :class:`MappingSnapshot`; every mutation builds a
new snapshot, swaps it in and then persists it. Readers take
``store.snapshot`` (or ``store.resolver()``) once and keep a consistent view
for as long as they need it.
"""

from __future__ import annotations

import logging
import re
import warnings
from collections.abc import Iterable

from pycabinetwiring.exceptions import (
    InvalidArgumentsError,
    MappingPersistenceWarning,
    PersistenceWriteError,
)
from pycabinetwiring.mapping.models import (
    BulkRangeMapping,
    ComponentMapping,
    starred_twin,
)
from pycabinetwiring.mapping.persistence import (
    MappingPersistence,
    MemoryMappingPersistence,
)
from pycabinetwiring.mapping.resolver import ReferenceResolver
from pycabinetwiring.mapping.snapshot import BulkRangeIndex, MappingSnapshot
from pycabinetwiring.model.constants import STAR_MARKER
from pycabinetwiring.model.targets import Coordinate, GridTarget, encode_target

logger = logging.getLogger(__name__)

_RANGE_REFERENCE_RE = re.compile(r"^(?P<prefix>.+):(?P<start>\d+)-(?P<end>\d+)$")

# Persisted row used for bulk summary lines in all_mappings_including_bulk()
BULK_SUMMARY_ROW = -99


class MappingStore:
    """
    Component and bulk mappings of one layout identity.

    Args:
        persistence: Where mappings are loaded from at construction and saved
            to after every mutation. Defaults to in-memory.

    Example::

        store = MappingStore(JsonMappingPersistence.for_workbook("wires.xlsx"))
        store.add_mapping("J01-X1:", 1, 2)
        store.add_range("X2", 21, 100, [(3, 1), (3, 2)], selected_is_top=True)
        store.resolver().resolve("X2:55")
    """

    def __init__(self, persistence: MappingPersistence | None = None):
        self.persistence = persistence or MemoryMappingPersistence()
        mappings, ranges = self.persistence.load()
        bulk = BulkRangeIndex()
        for b in ranges:
            bulk = bulk.add_range(b.prefix, b.start_index, b.end_index, b.cells, b.selected_is_top)
        self._snapshot = MappingSnapshot().with_mappings(*mappings).with_bulk(bulk)

    def __len__(self) -> int:
        return len(self._snapshot)

    @property
    def snapshot(self) -> MappingSnapshot:
        """The current immutable view."""
        return self._snapshot

    def resolver(self) -> ReferenceResolver:
        """A resolver bound to the current snapshot."""
        return ReferenceResolver(self._snapshot)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_mapping(self, reference: str) -> ComponentMapping | None:
        """Resolve *reference* with the full matching rules."""
        return self.resolver().resolve(reference)

    def has_mapping(self, reference: str) -> bool:
        return self.resolver().has_any_mapping(reference)

    def is_reference_in_bulk_range(self, reference: str) -> bool:
        return self._snapshot.bulk.find_range(reference) is not None

    def find_range(self, reference: str) -> BulkRangeMapping | None:
        return self._snapshot.bulk.find_range(reference)

    def all_mappings(self) -> list[ComponentMapping]:
        return list(self._snapshot.mappings)

    def all_ranges(self) -> list[BulkRangeMapping]:
        return list(self._snapshot.bulk.ranges)

    def all_mappings_including_bulk(self) -> list[ComponentMapping]:
        """
        Individual mappings plus one summary record per bulk range.

        Summary records use the ``PREFIX:START-END`` label as reference,
        ``BULK_SUMMARY_ROW`` as row and the number of selected cells as
        column. Passing the label to :meth:`remove_mapping` removes the range.
        """
        summaries = [
            ComponentMapping(b.label, BULK_SUMMARY_ROW, len(b.cells), not b.selected_is_top)
            for b in self._snapshot.bulk
        ]
        return self.all_mappings() + summaries

    def is_position_mapped(self, row: int, col: int, bottom: bool) -> bool:
        """True if any individual mapping points at ``(row, col)`` on that side."""
        return any(
            m.grid_row == row and m.grid_col == col and m.default_to_bottom == bottom
            for m in self._snapshot.mappings
        )

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add_mapping(
        self,
        reference: str,
        grid_row: int,
        grid_col: int,
        default_to_bottom: bool = False,
    ) -> ComponentMapping:
        """
        Map *reference* and its starred twin.

        ``"X1:4"`` is stored as given and ``"X1:4*"`` is stored with the
        opposite ``default_to_bottom``; a starred reference stores its base
        the same way. Existing records with the same keys are replaced.

        Returns:
            The record stored for *reference* itself.

        Raises:
            InvalidArgumentsError: If *reference* is blank or only ``*``;
                the store is left unchanged.
        """
        reference = reference.strip()
        if not reference.strip(STAR_MARKER).strip():
            raise InvalidArgumentsError(f"Invalid reference {reference!r}: it must not be empty")
        mapping = ComponentMapping(reference, grid_row, grid_col, default_to_bottom)
        twin = ComponentMapping(
            starred_twin(reference), grid_row, grid_col, not default_to_bottom
        )
        self._commit(self._snapshot.with_mappings(mapping, twin))
        logger.debug("Mapped %r to (%d, %d)", reference, grid_row, grid_col)
        return mapping

    def add_target(self, reference: str, target: GridTarget) -> ComponentMapping:
        """Map *reference* to a grid target (cell or anchor)."""
        row, col, default_to_bottom = encode_target(target)
        return self.add_mapping(reference, row, col, default_to_bottom)

    def remove_mapping(self, reference: str) -> None:
        """
        Remove *reference* and its starred twin.

        A ``PREFIX:START-END`` reference removes that bulk range instead.
        Removing an unknown reference is a no-op.
        """
        reference = reference.strip()
        match = _RANGE_REFERENCE_RE.match(reference)
        if match:
            self.remove_range(
                match.group("prefix"), int(match.group("start")), int(match.group("end"))
            )
            return
        self._commit(self._snapshot.without(reference, starred_twin(reference)))

    def add_range(
        self,
        prefix: str,
        start: int,
        end: int,
        cells: Iterable[Coordinate],
        selected_is_top: bool = True,
    ) -> BulkRangeMapping:
        """
        Map every ``prefix:i`` for ``start <= i <= end`` at once.

        Raises:
            InvalidArgumentsError: On empty *cells*, empty prefix or
                ``end < start``; the store is left unchanged.
        """
        bulk = self._snapshot.bulk.add_range(prefix, start, end, cells, selected_is_top)
        self._commit(self._snapshot.with_bulk(bulk))
        return bulk.ranges[-1]

    def remove_range(self, prefix: str, start: int, end: int) -> None:
        bulk = self._snapshot.bulk.remove_range(prefix, start, end)
        self._commit(self._snapshot.with_bulk(bulk))

    def clear(self) -> None:
        """Remove every mapping and bulk range."""
        self._commit(MappingSnapshot())

    def _commit(self, snapshot: MappingSnapshot) -> None:
        self._snapshot = snapshot
        try:
            self.persistence.save(list(snapshot.mappings), list(snapshot.bulk.ranges))
        except PersistenceWriteError as e:
            logger.error("%s", e)
            warnings.warn(
                f"Mapping change kept in memory but not saved: {e}",
                MappingPersistenceWarning,
                stacklevel=3,
            )
