"""Recover discrete files from one blob of generated text."""

from __future__ import annotations

import logging
import re
import textwrap
from typing import Iterable, Optional

from codestorm.files.models import FileRecord, file_name_from_path

from .detectors import ContentHasher, LanguageDetector
from .inference import infer_identity
from .models import SplitResult

LOGGER = logging.getLogger(__name__)

DEFAULT_MIN_LENGTH = 50
ROOT_PREFIXES = ("src/", "public/", "package.json")
NEWLINE_TERMINATED_LANGUAGES = frozenset({"javascript", "typescript", "css", "html", "json"})

_PATH = r"(?:src/|\./)?[^\s]+\.[a-zA-Z]+"


def _header_family(opening: str, closing: str = "") -> re.Pattern[str]:
    header = rf"^[ \t]*{opening}[ \t]*{_PATH}{closing}[ \t]*$"
    return re.compile(
        rf"^[ \t]*{opening}[ \t]*({_PATH}){closing}[ \t]*[\r\n]+(.+?)(?={header}|\Z)",
        re.MULTILINE | re.DOTALL,
    )


HEADER_FAMILIES = (
    ("line-comment", _header_family(r"//")),
    ("block-comment", _header_family(r"/\*", r"[ \t]*\*/")),
    ("hash-comment", _header_family(r"#")),
    ("bold", _header_family(r"\*\*", r"[ \t]*\*\*")),
    ("heading", _header_family(r"###")),
    ("file-label", _header_family(r"File:")),
    ("archivo-label", _header_family(r"Archivo:")),
)

_FENCED_BLOCK = re.compile(r"```([a-zA-Z0-9_+-]*)[ \t]*\r?\n(.*?)```", re.DOTALL)
_INDENTED_BLOCK = re.compile(r"(?:^|\n)((?:    .+\n?)+)")
_LEADING_FENCE = re.compile(r"^```[a-zA-Z]*\n?")
_TRAILING_FENCE = re.compile(r"\n?```$")


class CodeSplitter:
    """Split generated text into files using header markers or fenced blocks.

    Header families (``// path``, ``/* path */``, ``# path``, ``**path**``,
    ``### path``, ``File: path``, ``Archivo: path``) run independently and
    their results are unioned. Only when none of them matches does the
    splitter fall back to fenced (then indented) code blocks, naming each
    block from its content.
    """

    def __init__(
        self,
        *,
        min_length: int = DEFAULT_MIN_LENGTH,
        detector: LanguageDetector | None = None,
        hasher: ContentHasher | None = None,
    ) -> None:
        self.min_length = min_length
        self.detector = detector or LanguageDetector()
        self.hasher = hasher or ContentHasher()

    def split(self, text: str) -> SplitResult:
        """Return the files recoverable from ``text``.

        Never raises on malformed input; an empty recovery is reported through
        ``SplitResult.success``.
        """

        files = self.extract(text)
        if not files:
            LOGGER.info("No files could be identified in a %d character blob.", len(text))
            return SplitResult(
                success=False,
                error="No files could be identified in the supplied text.",
            )
        return SplitResult(
            success=True,
            files=files,
            message=f"Extracted {len(files)} file(s) from the supplied text.",
        )

    def extract(self, text: str) -> list[FileRecord]:
        """Return deduplicated candidates in discovery order."""

        candidates = self._extract_by_headers(text)
        if not candidates:
            candidates = self._extract_by_blocks(text)
        return self.deduplicate(candidates)

    def normalize_path(self, path: str) -> str:
        """Strip a leading ``./`` and root the path under ``src/`` when needed."""

        normalized = path[2:] if path.startswith("./") else path
        if not normalized.startswith(ROOT_PREFIXES):
            normalized = f"src/{normalized}"
        return normalized

    def clean_content(self, content: str, language: str) -> str:
        """Drop surrounding fences and whitespace; newline-terminate source files."""

        cleaned = _LEADING_FENCE.sub("", content, count=1)
        cleaned = _TRAILING_FENCE.sub("", cleaned, count=1)
        cleaned = cleaned.strip()
        if language in NEWLINE_TERMINATED_LANGUAGES and not cleaned.endswith("\n"):
            cleaned += "\n"
        return cleaned

    def deduplicate(self, files: Iterable[FileRecord]) -> list[FileRecord]:
        """Keep the first file for each ``name-hash`` key."""

        seen: set[str] = set()
        unique: list[FileRecord] = []
        for record in files:
            key = f"{record.name}-{self.hasher.compute(record.content)}"
            if key in seen:
                continue
            seen.add(key)
            unique.append(record)
        return unique

    # ------------------------------------------------------------------ #
    # Strategies                                                         #
    # ------------------------------------------------------------------ #

    def _extract_by_headers(self, text: str) -> list[FileRecord]:
        files: list[FileRecord] = []
        for family, pattern in HEADER_FAMILIES:
            for match in pattern.finditer(text):
                raw_path = match.group(1).strip()
                content = match.group(2).strip()
                if not raw_path or not self._long_enough(content):
                    continue
                path = self.normalize_path(raw_path)
                language = self.detector.from_path(path)
                files.append(self._record(path, content, language))
                LOGGER.debug("Header family %s matched %s.", family, path)
        return files

    def _extract_by_blocks(self, text: str) -> list[FileRecord]:
        blocks: list[tuple[Optional[str], str]] = [
            (match.group(1) or None, match.group(2)) for match in _FENCED_BLOCK.finditer(text)
        ]
        if not blocks:
            blocks = [
                (None, textwrap.dedent(match.group(1)))
                for match in _INDENTED_BLOCK.finditer(text)
            ]

        files: list[FileRecord] = []
        for index, (declared, raw) in enumerate(blocks, start=1):
            content = raw.strip()
            if not self._long_enough(content):
                continue
            identity = infer_identity(content, index, declared, detector=self.detector)
            files.append(self._record(identity.path, content, identity.language, identity.name))
        return files

    def _long_enough(self, content: str) -> bool:
        return bool(content) and len(content) >= self.min_length

    def _record(
        self,
        path: str,
        content: str,
        language: str,
        name: Optional[str] = None,
    ) -> FileRecord:
        return FileRecord(
            name=name or file_name_from_path(path),
            path=path,
            content=self.clean_content(content, language),
            language=language,
            is_new=True,
        )


__all__ = [
    "CodeSplitter",
    "DEFAULT_MIN_LENGTH",
    "HEADER_FAMILIES",
    "NEWLINE_TERMINATED_LANGUAGES",
    "ROOT_PREFIXES",
]
