"""
Unit tests for the complexity detectors and the heuristic review.
These tests require no LLM and no network — safe to run in CI.
"""

import textwrap

import pytest

from static_analyzer.detectors import (
    ASYNC_OPS,
    DEFAULT_DETECTORS,
    LOOPS,
    NESTING,
    RECURSION,
    RegexDetector,
    estimate_complexity,
    scan_all,
)
from static_analyzer.review import BASELINE_ADVICE, RULES, generate_review


# ── Fixtures ──────────────────────────────────────────────────────────────────

RECURSIVE_SOURCE = textwrap.dedent("""\
    function fact(n) {
      return n <= 1 ? 1 : n * fact(n - 1);
    }
""")

ASYNC_SOURCE = "const load = async (url) => await fetch(url);\n"


def _lines(n, line="const x = 1;"):
    return "\n".join([line] * n)


# ── detectors ─────────────────────────────────────────────────────────────────

def test_loop_keywords_whole_word():
    assert LOOPS.scan("for while do forEach map filter reduce") == 7
    assert LOOPS.scan("format doing mapper foreach") == 0


def test_keywords_next_to_non_ascii_letters():
    # Only ASCII letters and digits are identifier characters
    assert LOOPS.scan("éfor") == 1
    assert LOOPS.scan("whileß") == 1
    assert ASYNC_OPS.scan("ñawait") == 1


def test_recursion_name_is_ascii_identifier():
    # `\w+` captures just "f", which is never followed by "("
    assert RECURSION.scan("function fäct(n) { return fäct(n - 1) }") == 0


def test_detector_flags_override():
    unicode_loops = RegexDetector("loops", r"\bfor\b", 0.1, flags=0)
    assert unicode_loops.scan("éfor") == 0


def test_nesting():
    assert NESTING.scan("[[1, 2], [3]]") == 1
    assert NESTING.scan("{ \n {") == 1
    assert NESTING.scan("{ a: { b } }") == 0


def test_recursion():
    assert RECURSION.scan(RECURSIVE_SOURCE) == 1


def test_recursion_stops_at_closing_brace():
    src = "function a() { return 1 }\nconst b = a();"
    assert RECURSION.scan(src) == 0


def test_async():
    assert ASYNC_OPS.scan(ASYNC_SOURCE) == 3
    assert ASYNC_OPS.scan("new Promise(r => axios.get(u))") == 2


def test_scan_all_keys_in_order():
    assert list(scan_all("")) == ["loops", "nesting", "recursion", "async"]


def test_default_order():
    assert DEFAULT_DETECTORS == (LOOPS, NESTING, RECURSION, ASYNC_OPS)


# ── estimate_complexity ───────────────────────────────────────────────────────

def test_complexity_empty_is_baseline():
    assert estimate_complexity("") == 1.0


def test_complexity_garbage_is_baseline():
    assert estimate_complexity("\x00\x01 ??? ~~~") == 1.0


def test_complexity_single_loop():
    assert estimate_complexity("for (;;) {}") == pytest.approx(1.1)


def test_complexity_nesting_weight():
    assert estimate_complexity("[[1]]") == pytest.approx(1.15)


def test_complexity_recursion_weight():
    assert estimate_complexity(RECURSIVE_SOURCE) == pytest.approx(1.2)


def test_complexity_async_weight():
    assert estimate_complexity(ASYNC_SOURCE) == pytest.approx(1.15)


def test_complexity_signals_add_up():
    src = "for (;;) { await x; [[0]] }"
    assert estimate_complexity(src) == pytest.approx(1.0 + 0.1 + 0.15 + 0.05)


def test_complexity_capped_at_three():
    assert estimate_complexity("for " * 1000) == 3.0


def test_complexity_monotonic_in_occurrences():
    values = [estimate_complexity("while " * n) for n in range(40)]
    assert values == sorted(values)
    assert values[0] == 1.0 and values[-1] == 3.0


def test_complexity_custom_detectors():
    todo = RegexDetector("todo", r"TODO", 1.0)
    assert estimate_complexity("TODO TODO", detectors=[todo]) == 3.0


# ── generate_review ───────────────────────────────────────────────────────────

def test_review_empty_content_is_baseline():
    review = generate_review("")
    assert review.score == 7
    assert review.bottleneck == BASELINE_ADVICE.bottleneck
    assert review.optimization == BASELINE_ADVICE.optimization
    assert review.improvement == BASELINE_ADVICE.improvement


def test_review_loops_in_short_file_ignored():
    review = generate_review(_lines(50, "for (;;) {}"))
    assert review.score == 7


def test_review_loops_in_long_file():
    review = generate_review(_lines(51, "items.map(f)"))
    assert review.score == 5
    assert "loops" in review.bottleneck


def test_review_async_caps_at_six():
    review = generate_review(ASYNC_SOURCE)
    assert review.score == 6
    assert "Async" in review.bottleneck


def test_review_async_text_wins_over_loops():
    review = generate_review(_lines(60, "for (;;) { await tick() }"))
    assert review.score == 5
    assert "Async" in review.bottleneck


def test_review_dom_caps_at_five():
    review = generate_review("window.scrollTo(0, 0)")
    assert review.score == 5
    assert "DOM" in review.bottleneck


def test_review_dom_keyword_after_non_ascii_letter():
    review = generate_review("éwindow.scrollTo(0, 0)")
    assert review.score == 5
    assert "DOM" in review.bottleneck


def test_review_large_file_decrements():
    review = generate_review(_lines(201))
    assert review.score == 6
    assert "modularization" in review.bottleneck


def test_review_dom_and_large_file_score_and_text_diverge():
    content = "document.querySelector('#app')\n" + _lines(250)
    review = generate_review(content)
    # DOM caps to min(7, 5) = 5, size then gives max(5 - 1, 3) = 4 ...
    assert review.score == 4
    # ... but only the size rule's advice survives
    assert review.bottleneck == RULES[-1].advice.bottleneck
    assert "DOM" not in review.bottleneck
    assert "DOM" not in review.optimization


def test_review_every_rule_fires():
    content = "for (const n of document.all) { await n }\n" + _lines(250)
    review = generate_review(content)
    assert review.score == 4
    assert "modularization" in review.bottleneck


def test_review_score_always_in_range():
    for content in ("", ASYNC_SOURCE, _lines(500, "await window.map(x)")):
        assert 1 <= generate_review(content).score <= 10


def test_review_deterministic():
    src = _lines(300, "fetch(url).then(r => document.body.append(r))")
    assert generate_review(src) == generate_review(src)
