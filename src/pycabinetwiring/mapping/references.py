"""
Helpers for finding and parsing component references in wiring lists.
"""

from __future__ import annotations

import re

from pycabinetwiring.exceptions import InvalidArgumentsError

_COMPONENT_RE = re.compile(r"([A-Z]\d+-[A-Z]\d+)")
_TERMINAL_RE = re.compile(r"[A-Z]\d+:\d+")
_SIMPLE_RE = re.compile(r"[A-Z]\d+")
_RANGE_TEXT_RE = re.compile(r"^([A-Za-z]+\d+):(\d+)(?:-(\d+))?$")


def extract_base_references(text: str) -> list[str]:
    """
    Base references mentioned in one endpoint text.

    Component references of the form ``J01-X1`` take precedence. When there
    are none, terminal references contribute their prefix including the
    colon (``"X2:41"`` -> ``"X2:"``) and plain tokens such as ``"A2"`` that
    are not directly followed by a colon are returned as they are.

    Examples::

        extract_base_references("J01-X1:4")     # ["J01-X1"]
        extract_base_references("X2:41 / A2")   # ["X2:", "A2"]
    """
    if not text or not text.strip():
        return []

    found = [m.group(1) for m in _COMPONENT_RE.finditer(text)]
    if not found:
        for m in _TERMINAL_RE.finditer(text):
            found.append(m.group(0)[: m.group(0).index(":") + 1])
        for m in _SIMPLE_RE.finditer(text):
            end = m.end()
            if end < len(text) and text[end] == ":":
                continue
            found.append(m.group(0))

    return list(dict.fromkeys(found))


def parse_range_text(text: str) -> tuple[str, int, int]:
    """
    Parse a bulk range entry like ``"X2:21-100"`` or ``"X2:21"``.

    Returns:
        ``(prefix, start, end)``; a single index gives ``start == end``.

    Raises:
        InvalidArgumentsError: If the text is malformed or end < start.
    """
    match = _RANGE_TEXT_RE.match((text or "").strip())
    if not match:
        raise InvalidArgumentsError(
            f"Invalid range '{text}'. Use e.g. X2:21-100 or X2:21"
        )
    prefix = match.group(1)
    start = int(match.group(2))
    end = int(match.group(3)) if match.group(3) else start
    if end < start:
        raise InvalidArgumentsError(
            f"Range end {end} must be greater than or equal to start {start}"
        )
    return prefix, start, end
