"""
Small shared helpers.
"""

from __future__ import annotations

import re


def natural_sort_key(tag: str) -> list[int | str]:
    """
    Return a sort key that orders numeric parts naturally.

    Splits the text into alternating text and number parts so that
    ``"X2:4"`` sorts before ``"X2:10"``.

    Example::

        sorted(["X2:10", "X2:4", "A2"], key=natural_sort_key)
        # -> ["A2", "X2:4", "X2:10"]
    """
    return [int(p) if p.isdigit() else p for p in re.split(r"(\d+)", tag)]
