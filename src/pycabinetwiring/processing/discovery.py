"""Finding the references of a wiring list that still need a mapping."""

from pycabinetwiring.mapping.references import extract_base_references
from pycabinetwiring.mapping.resolver import ReferenceResolver
from pycabinetwiring.processing.row_source import RowSource
from pycabinetwiring.utils.utils import natural_sort_key


def unique_endpoint_texts(row_source: RowSource) -> list[str]:
    """Distinct non-empty endpoint texts, naturally sorted."""
    texts: set[str] = set()
    for record in row_source.records():
        if record.endpoint_a:
            texts.add(record.endpoint_a)
        if record.endpoint_b:
            texts.add(record.endpoint_b)
    return sorted(texts, key=natural_sort_key)


def unmapped_endpoint_texts(row_source: RowSource, resolver: ReferenceResolver) -> list[str]:
    """Endpoint texts that neither a mapping nor a bulk range covers."""
    return [t for t in unique_endpoint_texts(row_source) if not resolver.has_any_mapping(t)]


def find_unmapped_references(row_source: RowSource, resolver: ReferenceResolver) -> list[str]:
    """
    Base references (``"J01-X1"``, ``"X2:"``, ``"A2"``) found in the wiring
    list that have no mapping and are not inside a bulk range.

    Endpoint texts that already resolve contribute nothing, so a terminal
    covered by a bulk range does not report its prefix.
    """
    found: set[str] = set()
    for text in unmapped_endpoint_texts(row_source, resolver):
        found.update(extract_base_references(text))

    return [
        ref
        for ref in sorted(found, key=natural_sort_key)
        if not resolver.is_in_bulk_range(ref) and not resolver.has_any_mapping(ref)
    ]
