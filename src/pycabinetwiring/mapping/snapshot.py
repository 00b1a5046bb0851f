"""
Immutable views of the mapping data.

:class:`BulkRangeIndex` and :class:`MappingSnapshot` never change after
construction; every mutation returns a new instance. The mapping store
publishes its current snapshot and readers (a batch run, a dry run) keep the
one they started with.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass, field, replace
from functools import cached_property

from pycabinetwiring.mapping.models import (
    BulkRangeMapping,
    ComponentMapping,
    reference_key,
)
from pycabinetwiring.model.constants import STAR_MARKER
from pycabinetwiring.model.targets import Coordinate

_INDEX_RE = re.compile(r"\d+", re.ASCII)


def parse_terminal_reference(text: str) -> tuple[str, int] | None:
    """
    Split a terminal reference into ``(prefix, index)``.

    A trailing ``*`` is ignored. Returns ``None`` unless the text has exactly
    one colon followed by an integer.

    Examples::

        parse_terminal_reference("X2:55")   # ("X2", 55)
        parse_terminal_reference("X2:55*")  # ("X2", 55)
        parse_terminal_reference("X2:A")    # None
        parse_terminal_reference("A:B:1")   # None
    """
    if not text:
        return None
    parts = text.strip().split(":")
    if len(parts) != 2:
        return None
    prefix, number = parts[0].strip(), parts[1].strip().rstrip(STAR_MARKER)
    if not prefix or not _INDEX_RE.fullmatch(number):
        return None
    return prefix, int(number)


@dataclass(frozen=True)
class BulkRangeIndex:
    """
    Immutable collection of bulk range mappings.

    At most one range exists per (prefix, start, end) key; adding a range
    with an existing key replaces it.
    """

    ranges: tuple[BulkRangeMapping, ...] = field(default_factory=tuple)

    def __len__(self) -> int:
        return len(self.ranges)

    def __iter__(self):
        return iter(self.ranges)

    def find_range(self, text: str) -> BulkRangeMapping | None:
        """The range covering reference *text*, or None."""
        parsed = parse_terminal_reference(text)
        if parsed is None:
            return None
        prefix, index = parsed
        for bulk in self.ranges:
            if bulk.covers(prefix, index):
                return bulk
        return None

    def add_range(
        self,
        prefix: str,
        start: int,
        end: int,
        cells: Iterable[Coordinate],
        selected_is_top: bool = True,
    ) -> "BulkRangeIndex":
        """
        Return a new index with the range added.

        Raises:
            InvalidArgumentsError: On empty *cells*, empty prefix or
                ``end < start``. The current index is left unchanged.
        """
        bulk = BulkRangeMapping(prefix, start, end, tuple(cells), selected_is_top)
        kept = tuple(b for b in self.ranges if b.key != bulk.key)
        return BulkRangeIndex(kept + (bulk,))

    def remove_range(self, prefix: str, start: int, end: int) -> "BulkRangeIndex":
        """Return a new index without the range; unchanged if absent."""
        key = (reference_key(prefix), start, end)
        return BulkRangeIndex(tuple(b for b in self.ranges if b.key != key))


@dataclass(frozen=True)
class MappingSnapshot:
    """
    Point-in-time view of all component and bulk mappings.

    Attributes:
        mappings: Individual mappings, unique by case-insensitive reference.
        bulk: Bulk range index.
    """

    mappings: tuple[ComponentMapping, ...] = field(default_factory=tuple)
    bulk: BulkRangeIndex = field(default_factory=BulkRangeIndex)

    @cached_property
    def by_key(self) -> dict[str, ComponentMapping]:
        return {m.key: m for m in self.mappings}

    def __len__(self) -> int:
        return len(self.mappings)

    def get(self, reference: str) -> ComponentMapping | None:
        """Exact (case-insensitive) lookup, no smart matching."""
        return self.by_key.get(reference_key(reference))

    def with_mappings(self, *mappings: ComponentMapping) -> "MappingSnapshot":
        """New snapshot where *mappings* replace any with the same key."""
        new_keys = {m.key for m in mappings}
        kept = tuple(m for m in self.mappings if m.key not in new_keys)
        return replace(self, mappings=kept + tuple(mappings))

    def without(self, *references: str) -> "MappingSnapshot":
        keys = {reference_key(r) for r in references}
        return replace(self, mappings=tuple(m for m in self.mappings if m.key not in keys))

    def with_bulk(self, bulk: BulkRangeIndex) -> "MappingSnapshot":
        return replace(self, bulk=bulk)
