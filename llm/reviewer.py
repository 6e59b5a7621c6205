"""
Code reviewers.

Every reviewer exposes ``review(code) -> ReviewResult``.  The LLM reviewer
is optional; ``FallbackReviewer`` tries it first and answers with the
heuristic review whenever it fails for any reason.
"""

from __future__ import annotations

import json
import re
from typing import Any, Callable, Dict, Iterator, Optional, Protocol

from config import LLM_MAX_CODE_CHARS, LLM_MODEL
from llm import client
from llm.prompts import REVIEW_PROMPT, SYSTEM_PROMPT
from schemas import ReviewResult
from static_analyzer.review import generate_review

# Everything an unreachable, misconfigured or misbehaving model can raise:
# requests exceptions are OSErrors, JSON and pydantic errors are ValueErrors.
REVIEW_FAILURES = (OSError, ValueError, KeyError, IndexError, TypeError, RuntimeError)


class Reviewer(Protocol):
    def review(self, code: str) -> ReviewResult: ...


# ── JSON extraction ───────────────────────────────────────────────────────────

def _candidates(text: str) -> Iterator[str]:
    # The bare reply, the reply without markdown fences, the outermost {...}.
    yield text.strip()
    yield re.sub(r"```(?:json)?", "", text).strip()
    match = re.search(r"\{[\s\S]+\}", text)
    if match:
        yield match.group()


def _extract_json(text: object) -> Optional[Dict[str, Any]]:
    """
    Return the first JSON *object* recoverable from a model reply, or None.

    Arrays, scalars and non-text replies yield None so that the caller
    reports a parse failure instead of a confusing validation error.
    """
    if not isinstance(text, str):
        return None
    for candidate in _candidates(text):
        try:
            parsed = json.loads(candidate)
        except json.JSONDecodeError:
            continue
        if isinstance(parsed, dict):
            return parsed
    return None


# ── Reviewers ─────────────────────────────────────────────────────────────────

class HeuristicReviewer:
    """Rule-based review; never fails."""

    name = "heuristic"

    def review(self, code: str) -> ReviewResult:
        return generate_review(code)


class LLMReviewer:
    """
    Review by a chat-completions model.

    Raises on network errors, non-2xx responses, missing credentials,
    unparsable replies and replies that fail ``ReviewResult`` validation.
    """

    name = "llm"

    def __init__(
        self,
        model: str = LLM_MODEL,
        api_key: Optional[str] = None,
        max_chars: int = LLM_MAX_CODE_CHARS,
    ) -> None:
        self.model     = model
        self.api_key   = api_key
        self.max_chars = max_chars

    def review(self, code: str) -> ReviewResult:
        if not code:
            raise ValueError("No code provided")

        messages = [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user",   "content": REVIEW_PROMPT.format(code=code[: self.max_chars])},
        ]
        raw    = client.chat(messages, model=self.model, api_key=self.api_key)
        parsed = _extract_json(raw)
        if parsed is None:
            raise ValueError(f"Failed to parse LLM JSON response: {raw[:200]!r}")

        return ReviewResult.model_validate(parsed)


class FallbackReviewer:
    """
    Try *primary*; on any failure report it through *on_fallback* and
    return *fallback*'s review instead.
    """

    def __init__(
        self,
        primary: Reviewer,
        fallback: Reviewer,
        on_fallback: Optional[Callable[[Exception], None]] = None,
    ) -> None:
        self.primary     = primary
        self.fallback    = fallback
        self.on_fallback = on_fallback

    def review(self, code: str) -> ReviewResult:
        try:
            return self.primary.review(code)
        except REVIEW_FAILURES as exc:
            if self.on_fallback:
                self.on_fallback(exc)
            return self.fallback.review(code)


def build_reviewer(
    use_llm: bool = True,
    model: str = LLM_MODEL,
    api_key: Optional[str] = None,
    on_fallback: Optional[Callable[[Exception], None]] = None,
) -> Reviewer:
    """
    Heuristic reviewer alone when the LLM is disabled or has no API key,
    otherwise the LLM reviewer with heuristic fallback.
    """
    heuristic = HeuristicReviewer()
    if not use_llm or not client.is_configured(api_key):
        return heuristic
    return FallbackReviewer(
        LLMReviewer(model=model, api_key=api_key),
        heuristic,
        on_fallback=on_fallback,
    )
