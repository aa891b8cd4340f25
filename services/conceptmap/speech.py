"""Spoken rendering of claim labels."""
from __future__ import annotations

from typing import Sequence


def to_speech(labels: Sequence[str]) -> str:
    """Render ``labels`` as a spoken list.

    Every label is followed by ``",\\n"``; when there is more than one label the
    literal ``" and "`` is appended right after the second-to-last label's
    terminator, so ``["A", "B", "C"]`` renders as ``"A,\\nB,\\n and C,\\n"``.
    """

    parts = []
    last_pair_index = len(labels) - 2
    for index, label in enumerate(labels):
        parts.append(f"{label},\n")
        if len(labels) > 1 and index == last_pair_index:
            parts.append(" and ")
    return "".join(parts)


__all__ = ["to_speech"]
