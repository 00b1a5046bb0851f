"""
Reference resolution: free-text component identifiers to mappings.

Every stored key is scored against the input and the best candidate wins,
ranked first by rule and then by key length:

    EXACT     the key equals the input (case-insensitive)
    PREFIX    the key ends with ":" and the input starts with it
              ("X20:" matches "X20:41")
    CONTAINS  the key occurs inside the input, not followed by a digit
              ("A2" matches "E01-A2-X4:10" but "F3:1" does not match "F3:11")

Only when no stored key matches is the bulk range index consulted.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

from pycabinetwiring.exceptions import UnresolvedReferenceError
from pycabinetwiring.mapping.models import ComponentMapping
from pycabinetwiring.mapping.snapshot import MappingSnapshot


class MatchRule(IntEnum):
    """Match rules, higher value wins."""

    BULK = 0
    CONTAINS = 1
    PREFIX = 2
    EXACT = 3


@dataclass(frozen=True)
class MatchCandidate:
    """A stored key that matches an input, with the rule it matched by."""

    mapping: ComponentMapping
    rule: MatchRule

    @property
    def rank(self) -> tuple[int, int]:
        return int(self.rule), len(self.mapping.key)


def _contains_on_boundary(text: str, key: str) -> bool:
    """True if *key* occurs in *text* with no digit right after it."""
    start = text.find(key)
    while start >= 0:
        end = start + len(key)
        if end >= len(text) or not text[end].isdigit():
            return True
        start = text.find(key, start + 1)
    return False


def match_rule(text: str, key: str) -> MatchRule | None:
    """
    Best rule by which stored *key* matches input *text*.

    Both arguments must already be case-folded and stripped.
    """
    if not key:
        return None
    if text == key:
        return MatchRule.EXACT
    if key.endswith(":") and text.startswith(key):
        return MatchRule.PREFIX
    if _contains_on_boundary(text, key):
        return MatchRule.CONTAINS
    return None


class ReferenceResolver:
    """
    Resolve reference texts against one :class:`MappingSnapshot`.

    The resolver never sees later changes to the store; build a new one (or
    call ``MappingStore.resolver()``) to pick them up.

    Example::

        resolver = ReferenceResolver(store.snapshot)
        mapping = resolver.resolve("E01-A2-X4:10")
        if mapping is None:
            ...  # unresolved
    """

    def __init__(self, snapshot: MappingSnapshot):
        self.snapshot = snapshot

    def candidates(self, text: str) -> list[MatchCandidate]:
        """
        All stored mappings matching *text*, best first.

        Bulk ranges are not included; see :meth:`resolve`.
        """
        if not text or not text.strip():
            return []
        folded = text.strip().casefold()
        found = []
        for mapping in self.snapshot.mappings:
            rule = match_rule(folded, mapping.key)
            if rule is not None:
                found.append(MatchCandidate(mapping, rule))
        found.sort(key=lambda c: c.rank, reverse=True)
        return found

    def best_candidate(self, text: str) -> MatchCandidate | None:
        """Best matching candidate including bulk coverage, or None."""
        found = self.candidates(text)
        if found:
            return found[0]

        bulk = self.snapshot.bulk.find_range(text)
        if bulk is not None:
            return MatchCandidate(bulk.mapping_for(text), MatchRule.BULK)
        return None

    def resolve(self, text: str) -> ComponentMapping | None:
        """The mapping for *text*, or None when unresolved."""
        candidate = self.best_candidate(text)
        return candidate.mapping if candidate else None

    def require(self, text: str) -> ComponentMapping:
        """
        Like :meth:`resolve` but strict.

        Raises:
            UnresolvedReferenceError: If nothing matches.
        """
        mapping = self.resolve(text)
        if mapping is None:
            raise UnresolvedReferenceError(text)
        return mapping

    def has_any_mapping(self, text: str) -> bool:
        """Coverage check under the same rules as :meth:`resolve`."""
        if not text or not text.strip():
            return False
        folded = text.strip().casefold()
        if any(match_rule(folded, key) is not None for key in self.snapshot.by_key):
            return True
        return self.snapshot.bulk.find_range(text) is not None

    def is_in_bulk_range(self, text: str) -> bool:
        return self.snapshot.bulk.find_range(text) is not None
