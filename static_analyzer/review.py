"""
Heuristic energy review.

An ordered list of rules is folded over a baseline verdict.  Every rule
that fires replaces all three advice strings, while the score is only
capped or decremented.  The final text therefore names the *last* rule
that fired, whereas the score reflects all of them: DOM access in a
250-line file yields score 4 with the modularisation advice.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, NamedTuple, Sequence

from schemas import ReviewResult

_LOOPS = re.compile(r"\b(?:for|while|forEach|map)\b", re.ASCII)
_ASYNC = re.compile(r"\b(?:async|await|Promise)\b", re.ASCII)
_DOM   = re.compile(r"\b(?:document|window|querySelector)\b", re.ASCII)

LOOP_LINE_THRESHOLD  = 50
LARGE_FILE_THRESHOLD = 200


class Advice(NamedTuple):
    bottleneck:   str
    optimization: str
    improvement:  str


@dataclass(frozen=True)
class ReviewRule:
    name:    str
    applies: Callable[[str, int], bool]
    score:   Callable[[int], int]
    advice:  Advice


BASELINE_SCORE = 7
BASELINE_ADVICE = Advice(
    "No major energy concerns detected",
    "Code appears reasonably efficient",
    "5-10% potential improvement with minor optimizations",
)

RULES: tuple[ReviewRule, ...] = (
    ReviewRule(
        name="loops",
        applies=lambda code, lines: bool(_LOOPS.search(code)) and lines > LOOP_LINE_THRESHOLD,
        score=lambda _: 5,
        advice=Advice(
            "Multiple loops detected that may cause redundant iterations",
            "Consider using more efficient data structures or combining loops",
            "15-25% reduction in computational overhead",
        ),
    ),
    ReviewRule(
        name="async",
        applies=lambda code, _: bool(_ASYNC.search(code)),
        score=lambda s: min(s, 6),
        advice=Advice(
            "Async operations may cause unnecessary waiting",
            "Batch async operations and use Promise.all for parallel execution",
            "20-30% reduction in execution time and energy",
        ),
    ),
    ReviewRule(
        name="dom",
        applies=lambda code, _: bool(_DOM.search(code)),
        score=lambda s: min(s, 5),
        advice=Advice(
            "DOM manipulation is computationally expensive",
            "Minimize DOM queries, cache selectors, use DocumentFragment",
            "30-40% reduction in browser energy consumption",
        ),
    ),
    ReviewRule(
        name="size",
        applies=lambda _, lines: lines > LARGE_FILE_THRESHOLD,
        score=lambda s: max(s - 1, 3),
        advice=Advice(
            "Large file with potential for modularization",
            "Split into smaller modules to enable better tree-shaking",
            "10-20% reduction through dead code elimination",
        ),
    ),
)


def generate_review(content: str, rules: Sequence[ReviewRule] = RULES) -> ReviewResult:
    lines  = len(content.split("\n"))
    score  = BASELINE_SCORE
    advice = BASELINE_ADVICE

    for rule in rules:
        if rule.applies(content, lines):
            score  = rule.score(score)
            advice = rule.advice

    return ReviewResult(score=score, **advice._asdict())
