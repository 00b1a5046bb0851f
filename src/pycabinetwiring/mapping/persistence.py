"""
Persistence of component and bulk mappings.

One store per layout identity (normally the workbook file name without its
extension), written as two JSON files next to each other:

    <identity>_ComponentMapping.json   {reference: {ExcelReference, GridRow,
                                                    GridColumn, DefaultToBottom}}
    <identity>_BulkMapping.json        [{Prefix, StartIndex, EndIndex,
                                         Cells: [{Row, Col}], SelectedIsTop}]

Missing files load as an empty store. Unreadable files also load empty, with
a logged warning, so a corrupt file never blocks the application.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from typing import Protocol

from pycabinetwiring.exceptions import PersistenceReadError, PersistenceWriteError
from pycabinetwiring.mapping.models import BulkRangeMapping, ComponentMapping

logger = logging.getLogger(__name__)

MAPPING_SUFFIX = "_ComponentMapping.json"
BULK_SUFFIX = "_BulkMapping.json"


class MappingPersistence(Protocol):
    """Load/save contract used by :class:`~pycabinetwiring.mapping.store.MappingStore`."""

    def load(self) -> tuple[list[ComponentMapping], list[BulkRangeMapping]]: ...

    def save(
        self,
        mappings: list[ComponentMapping],
        ranges: list[BulkRangeMapping],
    ) -> None: ...


def layout_identity(workbook_path: str) -> str:
    """``"/data/Wiring list.xlsx"`` -> ``"Wiring list"``."""
    return os.path.splitext(os.path.basename(workbook_path))[0]


class JsonMappingPersistence:
    """
    JSON file persistence for one layout identity.

    Args:
        directory: Directory holding the mapping files.
        identity: Layout identity (file name prefix).
    """

    def __init__(self, directory: str, identity: str):
        self.directory = directory
        self.identity = identity

    @classmethod
    def for_workbook(cls, workbook_path: str) -> "JsonMappingPersistence":
        """Store mapping files beside the workbook they belong to."""
        directory = os.path.dirname(os.path.abspath(workbook_path))
        return cls(directory, layout_identity(workbook_path))

    @property
    def mapping_path(self) -> str:
        return os.path.join(self.directory, f"{self.identity}{MAPPING_SUFFIX}")

    @property
    def bulk_path(self) -> str:
        return os.path.join(self.directory, f"{self.identity}{BULK_SUFFIX}")

    def load(self) -> tuple[list[ComponentMapping], list[BulkRangeMapping]]:
        """Load both collections; each falls back to empty on failure."""
        try:
            mappings = self._read_mappings()
        except PersistenceReadError as e:
            logger.warning("%s; starting with no component mappings", e)
            mappings = []

        try:
            ranges = self._read_ranges()
        except PersistenceReadError as e:
            logger.warning("%s; starting with no bulk mappings", e)
            ranges = []

        return mappings, ranges

    def save(
        self,
        mappings: list[ComponentMapping],
        ranges: list[BulkRangeMapping],
    ) -> None:
        """
        Write both collections.

        Both files are written to temporary files first and only moved into
        place once both are complete, so a failed save leaves the previous
        pair on disk.

        Raises:
            PersistenceWriteError: If either file cannot be written.
        """
        payloads = (
            (self.mapping_path, {m.reference: m.to_dict() for m in mappings}),
            (self.bulk_path, [b.to_dict() for b in ranges]),
        )
        staged: list[tuple[str, str]] = []
        try:
            for path, payload in payloads:
                staged.append((self._stage(path, payload), path))
            for tmp_path, path in staged:
                try:
                    os.replace(tmp_path, path)
                except OSError as e:
                    raise PersistenceWriteError(path, e) from e
        finally:
            for tmp_path, _ in staged:
                if os.path.exists(tmp_path):
                    os.remove(tmp_path)

    def _read_json(self, path: str):
        if not os.path.exists(path):
            return None
        try:
            with open(path, encoding="utf-8") as f:
                return json.load(f)
        except (OSError, ValueError) as e:
            raise PersistenceReadError(path, e) from e

    def _read_mappings(self) -> list[ComponentMapping]:
        path = self.mapping_path
        data = self._read_json(path)
        if data is None:
            return []
        try:
            return [ComponentMapping.from_dict(d) for d in data.values()]
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise PersistenceReadError(path, e) from e

    def _read_ranges(self) -> list[BulkRangeMapping]:
        path = self.bulk_path
        data = self._read_json(path)
        if data is None:
            return []
        try:
            return [BulkRangeMapping.from_dict(d) for d in data]
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise PersistenceReadError(path, e) from e

    def _stage(self, path: str, payload) -> str:
        """Write *payload* to a temporary file beside *path*."""
        directory = os.path.dirname(os.path.abspath(path))
        tmp_path = None
        try:
            os.makedirs(directory, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                prefix=os.path.basename(path) + ".", suffix=".tmp", dir=directory
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(payload, f, indent=2, ensure_ascii=False)
        except OSError as e:
            if tmp_path is not None and os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise PersistenceWriteError(path, e) from e
        return tmp_path


class MemoryMappingPersistence:
    """In-memory persistence, for tests and throwaway stores."""

    def __init__(
        self,
        mappings: list[ComponentMapping] | None = None,
        ranges: list[BulkRangeMapping] | None = None,
    ):
        self.mappings = list(mappings or [])
        self.ranges = list(ranges or [])
        self.save_count = 0

    def load(self) -> tuple[list[ComponentMapping], list[BulkRangeMapping]]:
        return list(self.mappings), list(self.ranges)

    def save(
        self,
        mappings: list[ComponentMapping],
        ranges: list[BulkRangeMapping],
    ) -> None:
        self.mappings = list(mappings)
        self.ranges = list(ranges)
        self.save_count += 1
