"""
Regex-based structural detectors and the complexity multiplier.

These are shallow text signals, not an AST walk: they work for any
language and never fail on unparsable input.
"""

from __future__ import annotations

import re
from typing import Pattern, Protocol, Sequence

BASE_COMPLEXITY = 1.0
MAX_COMPLEXITY  = 3.0


class Detector(Protocol):
    name:   str
    weight: float

    def scan(self, text: str) -> int: ...


class RegexDetector:
    """
    Counts non-overlapping matches of *pattern* in a text.

    ``\\b`` and ``\\w`` are ASCII-only by default: a letter such as ``é``
    counts as a word boundary, not part of an identifier.
    """

    def __init__(self, name: str, pattern: str, weight: float, flags: int = re.ASCII) -> None:
        self.name    = name
        self.weight  = weight
        self.pattern: Pattern[str] = re.compile(pattern, flags)

    def scan(self, text: str) -> int:
        return sum(1 for _ in self.pattern.finditer(text))

    def __repr__(self) -> str:
        return f"RegexDetector({self.name!r}, weight={self.weight})"


LOOPS = RegexDetector(
    "loops", r"\b(?:for|while|do|forEach|map|filter|reduce)\b", 0.10,
)
# `{ {` or `[ [`: an approximate nesting signal.
NESTING = RegexDetector(
    "nesting", r"\{\s*\{|\[\s*\[", 0.15,
)
# A named function calling itself before the next closing brace.
RECURSION = RegexDetector(
    "recursion", r"function\s+(\w+)[^}]*\1\s*\(", 0.20,
)
ASYNC_OPS = RegexDetector(
    "async", r"\b(?:async|await|Promise|fetch|axios)\b", 0.05,
)

DEFAULT_DETECTORS: tuple[RegexDetector, ...] = (LOOPS, NESTING, RECURSION, ASYNC_OPS)


def scan_all(
    content: str,
    detectors: Sequence[Detector] = DEFAULT_DETECTORS,
) -> dict[str, int]:
    """Occurrence count per detector name."""
    return {d.name: d.scan(content) for d in detectors}


def estimate_complexity(
    content: str,
    detectors: Sequence[Detector] = DEFAULT_DETECTORS,
) -> float:
    """
    Complexity multiplier in ``[1.0, 3.0]``.

    Starts at 1.0 and adds ``weight × occurrences`` for each detector in
    order; the sum is capped at 3.0.
    """
    complexity = BASE_COMPLEXITY
    for detector in detectors:
        complexity += detector.scan(content) * detector.weight
    return min(complexity, MAX_COMPLEXITY)
