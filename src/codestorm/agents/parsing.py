"""Helpers for pulling structured data out of free-form completions."""

from __future__ import annotations

import json
import re
from typing import Any, Iterable, Optional

_FENCED_JSON = re.compile(r"```json\s*(.*?)\s*```", re.DOTALL | re.IGNORECASE)
_FENCED_BLOCK = re.compile(r"```([A-Za-z0-9_+-]*)[ \t]*\r?\n?(.*?)```", re.DOTALL)


def extract_json(text: str) -> Any:
    """Decode the JSON payload embedded in ``text``.

    A fenced ``json`` block wins; otherwise the span from the first ``{`` to
    the last ``}`` is decoded; otherwise the whole text is.

    Raises:
        ValueError: If the selected candidate is not valid JSON.
    """

    match = _FENCED_JSON.search(text)
    if match:
        candidate = match.group(1)
    else:
        start, end = text.find("{"), text.rfind("}")
        candidate = text[start : end + 1] if start != -1 and end > start else text.strip()
    return json.loads(candidate)


def first_code_block(text: str, *, skip_languages: Iterable[str] = ()) -> Optional[str]:
    """Return the trimmed body of the first non-empty fenced block.

    Blocks tagged with one of ``skip_languages`` are ignored.
    """

    skipped = {language.lower() for language in skip_languages}
    for match in _FENCED_BLOCK.finditer(text):
        if match.group(1).lower() in skipped:
            continue
        body = match.group(2).strip()
        if body:
            return body
    return None


__all__ = ["extract_json", "first_code_block"]
