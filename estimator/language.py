"""
Language detection from a file name's extension.

Each language carries an energy-intensity multiplier relative to
JavaScript (= 1.0).
"""

from __future__ import annotations

from types import MappingProxyType

from schemas import LanguageProfile

DEFAULT_LANGUAGE = "js"

LANGUAGE_MULTIPLIERS = MappingProxyType({
    "js":   1.0,
    "ts":   1.1,    # transpilation overhead
    "py":   1.8,    # interpreted
    "rs":   0.4,
    "go":   0.6,
    "cpp":  0.35,
    "java": 1.4,    # JVM overhead
})


def detect_language(file_name: str) -> str:
    """Return the language tag for *file_name*, ``js`` when unrecognised."""
    if "." not in file_name:
        return DEFAULT_LANGUAGE
    ext = file_name.rsplit(".", 1)[1].lower()
    return ext if ext in LANGUAGE_MULTIPLIERS else DEFAULT_LANGUAGE


def classify(file_name: str) -> LanguageProfile:
    tag = detect_language(file_name)
    return LanguageProfile(tag=tag, multiplier=LANGUAGE_MULTIPLIERS[tag])
