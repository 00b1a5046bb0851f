"""
pycabinetwiring Library.

Wire lengths between terminal points of a sectioned electrical cabinet,
measured on a duct grid and written back into a wiring list.
"""

from .distance import (
    DistanceBreakdown,
    compose_distance,
    distance_breakdown,
    endpoint_contribution,
    interior_cost,
)
from .exceptions import (
    InvalidArgumentsError,
    MappingPersistenceWarning,
    MappingSessionError,
    MeasurementLogFullError,
    NoPathFoundError,
    PersistenceReadError,
    PersistenceWriteError,
    RowSourceUnavailableError,
    UnresolvedReferenceError,
    WiringError,
)
from .layout.cabinet import AnchorDirectory, CabinetConfig, CabinetLayout, build_cabinet
from .layout.positions import resolve_position
from .layout.topology import GridTopology
from .mapping.models import BulkRangeMapping, ComponentMapping
from .mapping.persistence import JsonMappingPersistence, MemoryMappingPersistence
from .mapping.references import extract_base_references, parse_range_text
from .mapping.resolver import MatchRule, ReferenceResolver
from .mapping.session import MappingSession, SessionState
from .mapping.snapshot import BulkRangeIndex, MappingSnapshot
from .mapping.store import MappingStore
from .model.targets import (
    BottomCell,
    DoorAnchor,
    EndpointKind,
    MotorAnchor,
    RegularCell,
    decode_target,
    encode_target,
)
from .processing.discovery import (
    find_unmapped_references,
    unique_endpoint_texts,
    unmapped_endpoint_texts,
)
from .processing.measurement import MeasurementLog
from .processing.processor import (
    BatchReport,
    ConnectionProcessor,
    DryRunReport,
    Measurement,
    RecordOutcome,
)
from .processing.row_source import WiringRecord, WorksheetRowSource, parse_measurement
from .routing.pathfinding import find_shortest_path, path_cost
from .utils.utils import natural_sort_key
