"""Decide whether a generated blob holds more than one file."""

from __future__ import annotations

import re

DEFAULT_THRESHOLD = 2

INDICATOR_PATTERNS = (
    re.compile(r"//\s*(?:src/|\./|\.\./)[^\s]+\.[a-zA-Z]+"),
    re.compile(r"/\*\s*(?:src/|\./|\.\./)[^\s]+\.[a-zA-Z]+\s*\*/"),
    re.compile(r"#\s*(?:src/|\./|\.\./)[^\s]+\.[a-zA-Z]+"),
    re.compile(r"```[a-zA-Z]*\n.*?```", re.DOTALL),
    re.compile(
        r"(?:<!DOCTYPE html>|<html|import\s+React|from\s+['\"]react['\"]"
        r"|def\s+\w+|class\s+\w+|function\s+\w+)"
    ),
)


def count_indicators(text: str) -> int:
    """Return the total number of indicator matches across all patterns."""
    return sum(len(pattern.findall(text)) for pattern in INDICATOR_PATTERNS)


def needs_segmentation(text: str, threshold: int = DEFAULT_THRESHOLD) -> bool:
    """Return True when ``text`` carries more than ``threshold`` indicator matches."""
    return count_indicators(text) > threshold


__all__ = ["DEFAULT_THRESHOLD", "INDICATOR_PATTERNS", "count_indicators", "needs_segmentation"]
