"""
Connection processor: wiring-list rows in, wire lengths out.

For every row the processor resolves both endpoint references, turns the
mappings into grid coordinates, finds the shortest path and composes the
physical length. The same evaluation backs three entry points:

    process_all / process_batch   write lengths into unmeasured rows
    dry_run                       report what a batch would do, write nothing
    measure / measure_references  one manual measurement

Per-row failures are recorded as a :class:`RecordOutcome` and never stop a
batch. Only a missing row source is fatal.
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum

from pycabinetwiring.distance import DistanceBreakdown, distance_breakdown
from pycabinetwiring.exceptions import (
    InvalidArgumentsError,
    NoPathFoundError,
    RowSourceUnavailableError,
)
from pycabinetwiring.layout.cabinet import AnchorDirectory, CabinetLayout
from pycabinetwiring.layout.positions import resolve_position
from pycabinetwiring.layout.topology import GridTopology
from pycabinetwiring.mapping.models import ComponentMapping
from pycabinetwiring.mapping.resolver import ReferenceResolver
from pycabinetwiring.mapping.store import MappingStore
from pycabinetwiring.model.constants import DRY_RUN_ROW_LIMIT
from pycabinetwiring.model.targets import Coordinate, GridTarget
from pycabinetwiring.processing.row_source import RowSource, WiringRecord
from pycabinetwiring.routing.pathfinding import find_shortest_path

logger = logging.getLogger(__name__)

ManualResolver = Callable[[str], GridTarget | None]


class RecordOutcome(Enum):
    """What happened to one wiring-list row."""

    UPDATED = "updated"
    ALREADY_MEASURED = "already measured"
    EMPTY = "empty row"
    UNRESOLVED = "reference not mapped"
    MISSING_ANCHOR = "anchor not in cabinet"
    MISSING_CELL = "cell not in grid"
    NO_PATH = "no path found"


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ResolvedEndpoint:
    """One endpoint of a row after resolution."""

    text: str
    mapping: ComponentMapping | None = None
    position: Coordinate | None = None

    @property
    def reference(self) -> str:
        return self.mapping.reference if self.mapping else ""


@dataclass(frozen=True)
class Measurement:
    """A computed wire length with the path it follows."""

    start: Coordinate
    end: Coordinate
    path: tuple[Coordinate, ...]
    breakdown: DistanceBreakdown

    @property
    def distance(self) -> float:
        return self.breakdown.total


@dataclass(frozen=True)
class RecordEvaluation:
    """The evaluation of one row, with everything a report needs."""

    record: WiringRecord
    outcome: RecordOutcome
    start: ResolvedEndpoint | None = None
    end: ResolvedEndpoint | None = None
    measurement: Measurement | None = None

    @property
    def distance(self) -> float | None:
        return self.measurement.distance if self.measurement else None


@dataclass
class BatchReport:
    """Per-row outcomes of a batch run."""

    evaluations: list[RecordEvaluation] = field(default_factory=list)

    @property
    def updated_count(self) -> int:
        return self.counts()[RecordOutcome.UPDATED]

    def counts(self) -> Counter:
        return Counter(e.outcome for e in self.evaluations)

    def failures(self) -> list[RecordEvaluation]:
        """Rows that had endpoints but could not be measured."""
        skipped = (RecordOutcome.UPDATED, RecordOutcome.ALREADY_MEASURED, RecordOutcome.EMPTY)
        return [e for e in self.evaluations if e.outcome not in skipped]


@dataclass
class DryRunReport:
    """Mappings in effect and the evaluation of the first rows."""

    mappings: list[ComponentMapping]
    evaluations: list[RecordEvaluation]

    def format(self) -> str:
        lines = ["=== DRY RUN ===", "", f"Mappings: {len(self.mappings)}"]
        for m in self.mappings:
            lines.append(f"  {m.reference} -> {m.target}")
        lines.append("")

        for e in self.evaluations:
            rec = e.record
            lines.append(f"ROW {rec.row}:")
            lines.append(f"  A: '{rec.endpoint_a}'")
            lines.append(f"  B: '{rec.endpoint_b}'")
            if e.outcome is RecordOutcome.ALREADY_MEASURED:
                lines.append(f"  -> already measured: {rec.result}")
                lines.append("")
                continue
            if e.outcome is RecordOutcome.EMPTY:
                lines.append("  -> empty row")
                lines.append("")
                continue
            if e.start and e.end:
                lines.append(f"  Match A: {e.start.reference or 'NOT FOUND'}")
                lines.append(f"  Match B: {e.end.reference or 'NOT FOUND'}")
                lines.append(f"  Pos A: {e.start.position or 'NOT FOUND'}")
                lines.append(f"  Pos B: {e.end.position or 'NOT FOUND'}")
            if e.measurement:
                b = e.measurement.breakdown
                lines.append(f"  Interior: {b.interior:.2f} mm")
                lines.append(f"  Connection A: {b.start_connection:.2f} mm")
                lines.append(f"  Connection B: {b.end_connection:.2f} mm")
                lines.append(f"  Tail: {b.tail:.2f} mm")
                lines.append(f"  TOTAL: {b.total:.2f} mm")
            else:
                lines.append(f"  -> {e.outcome.value}")
            lines.append("")
        return "\n".join(lines)


# ---------------------------------------------------------------------------
# Processor
# ---------------------------------------------------------------------------


class ConnectionProcessor:
    """
    Measures wiring-list rows against a cabinet grid.

    Args:
        store: Mapping store the endpoints are resolved against.
        topology: Routable cells.
        anchors: Motor/door anchors per section.
        manual_resolver: Optional callback asked for a target when a
            reference cannot be resolved during a batch. A returned target
            is stored like ``MappingStore.add_target``; None leaves the row
            unresolved.

    Example::

        layout = build_cabinet()
        processor = ConnectionProcessor.for_layout(store, layout)
        updated = processor.process_all(WorksheetRowSource.open("wires.xlsx"))
    """

    def __init__(
        self,
        store: MappingStore,
        topology: GridTopology,
        anchors: AnchorDirectory | None = None,
        manual_resolver: ManualResolver | None = None,
    ):
        self.store = store
        self.topology = topology
        self.anchors = anchors or AnchorDirectory()
        self.manual_resolver = manual_resolver
        self._manual_additions = 0

    @classmethod
    def for_layout(
        cls,
        store: MappingStore,
        layout: CabinetLayout,
        manual_resolver: ManualResolver | None = None,
    ) -> "ConnectionProcessor":
        return cls(store, layout.topology, layout.anchors, manual_resolver)

    # -- batch -------------------------------------------------------------

    def process_all(self, row_source: RowSource | None) -> int:
        """
        Measure every unmeasured row and write the lengths.

        Returns:
            Number of rows written.

        Raises:
            RowSourceUnavailableError: If *row_source* is None.
        """
        return self.process_batch(row_source).updated_count

    def process_batch(self, row_source: RowSource | None) -> BatchReport:
        """Like :meth:`process_all` but returns every row's outcome."""
        if row_source is None:
            raise RowSourceUnavailableError()

        resolver = self.store.resolver()
        seen_additions = self._manual_additions
        report = BatchReport()

        for record in row_source.records():
            evaluation = self._evaluate(record, resolver, interactive=True)
            if evaluation.outcome is RecordOutcome.UPDATED:
                row_source.write_result(record.row, evaluation.distance)
            logger.debug("Row %d: %s", record.row, evaluation.outcome.value)
            report.evaluations.append(evaluation)

            if self._manual_additions != seen_additions:
                # pick up mappings this run created through the callback
                resolver = self.store.resolver()
                seen_additions = self._manual_additions

        logger.info(
            "Batch finished: %d updated, %d failed",
            report.updated_count,
            len(report.failures()),
        )
        return report

    def dry_run(
        self, row_source: RowSource | None, limit: int | None = DRY_RUN_ROW_LIMIT
    ) -> DryRunReport:
        """
        Evaluate rows without writing anything or asking for mappings.

        Args:
            row_source: Wiring list.
            limit: Evaluate at most this many rows; None for all.
        """
        if row_source is None:
            raise RowSourceUnavailableError()

        resolver = self.store.resolver()
        evaluations = []
        for record in row_source.records():
            if limit is not None and len(evaluations) >= limit:
                break
            evaluations.append(self._evaluate(record, resolver, interactive=False))
        return DryRunReport(list(resolver.snapshot.mappings), evaluations)

    # -- manual ------------------------------------------------------------

    def measure(self, start: GridTarget, end: GridTarget) -> Measurement:
        """
        Measure between two targets picked directly (cells or anchors).

        Raises:
            InvalidArgumentsError: If an anchor does not exist.
            NoPathFoundError: If the cells are missing or not connected.
        """
        start_pos = self._position(start)
        end_pos = self._position(end)
        return self._measure(start, end, start_pos, end_pos)

    def measure_references(self, reference_a: str, reference_b: str) -> Measurement:
        """
        Measure between two reference texts.

        Raises:
            UnresolvedReferenceError: If either reference is unmapped.
        """
        resolver = self.store.resolver()
        return self.measure(
            resolver.require(reference_a).target, resolver.require(reference_b).target
        )

    # -- internals ---------------------------------------------------------

    def _position(self, target: GridTarget) -> Coordinate:
        position = resolve_position(target, self.topology, self.anchors)
        if position is None:
            raise InvalidArgumentsError(f"{target} does not exist in this cabinet")
        return position

    def _measure(
        self,
        start: GridTarget,
        end: GridTarget,
        start_pos: Coordinate,
        end_pos: Coordinate,
    ) -> Measurement:
        path = find_shortest_path(start_pos, end_pos, self.topology)
        breakdown = distance_breakdown(path, start.kind, end.kind, self.topology)
        return Measurement(start_pos, end_pos, tuple(path), breakdown)

    def _resolve(
        self, text: str, resolver: ReferenceResolver, interactive: bool
    ) -> ComponentMapping | None:
        if not text:
            return None
        mapping = resolver.resolve(text)
        if mapping is None and interactive and self.manual_resolver is not None:
            target = self.manual_resolver(text)
            if target is not None:
                mapping = self.store.add_target(text, target)
                self._manual_additions += 1
        return mapping

    def _evaluate(
        self, record: WiringRecord, resolver: ReferenceResolver, interactive: bool
    ) -> RecordEvaluation:
        if record.is_measured:
            return RecordEvaluation(record, RecordOutcome.ALREADY_MEASURED)
        if record.is_empty:
            return RecordEvaluation(record, RecordOutcome.EMPTY)

        additions = self._manual_additions
        mapping_a = self._resolve(record.endpoint_a, resolver, interactive)
        if self._manual_additions != additions:
            # endpoint B must see a mapping just made for endpoint A
            resolver = self.store.resolver()
        mapping_b = self._resolve(record.endpoint_b, resolver, interactive)
        start = ResolvedEndpoint(record.endpoint_a, mapping_a)
        end = ResolvedEndpoint(record.endpoint_b, mapping_b)
        if mapping_a is None or mapping_b is None:
            return RecordEvaluation(record, RecordOutcome.UNRESOLVED, start, end)

        pos_a = resolve_position(mapping_a.target, self.topology, self.anchors)
        pos_b = resolve_position(mapping_b.target, self.topology, self.anchors)
        start = ResolvedEndpoint(record.endpoint_a, mapping_a, pos_a)
        end = ResolvedEndpoint(record.endpoint_b, mapping_b, pos_b)
        if pos_a is None or pos_b is None:
            return RecordEvaluation(record, RecordOutcome.MISSING_ANCHOR, start, end)
        if pos_a not in self.topology or pos_b not in self.topology:
            return RecordEvaluation(record, RecordOutcome.MISSING_CELL, start, end)

        try:
            measurement = self._measure(mapping_a.target, mapping_b.target, pos_a, pos_b)
        except NoPathFoundError as e:
            logger.debug("Row %d: %s", record.row, e)
            return RecordEvaluation(record, RecordOutcome.NO_PATH, start, end)

        return RecordEvaluation(record, RecordOutcome.UPDATED, start, end, measurement)
