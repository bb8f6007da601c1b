"""Regex-based structure parsers keyed by language.

Each parser turns file content into sections and dependencies. The regex
layer is intentionally shallow; a real grammar-backed parser can replace any
entry of the registry as long as it returns a :class:`ParsedStructure`.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from .models import FileDependency, FileSection


@dataclass(slots=True)
class ParsedStructure:
    """Sections and dependencies extracted from one file."""

    sections: List[FileSection] = field(default_factory=list)
    dependencies: List[FileDependency] = field(default_factory=list)


class StructureParser:
    """Interface for language-specific structure extraction."""

    def parse(self, content: str) -> ParsedStructure:
        """Return the sections and dependencies found in ``content``."""
        raise NotImplementedError


def line_number(content: str, index: int) -> int:
    """Return the 1-based line holding character offset ``index``."""
    return content.count("\n", 0, index) + 1


def balanced_end(lines: Sequence[str], start_line: int) -> int:
    """Return the 1-based line closing the brace block opened at or after ``start_line``.

    Counting starts on the first line containing ``{``. A statement that ends
    with ``;`` before any brace opens is a single-line declaration. When the
    block never closes, the last line of the file is returned.
    """

    depth = 0
    opened = False
    for offset in range(start_line - 1, len(lines)):
        line = lines[offset]
        if not opened:
            if "{" not in line:
                if line.rstrip().endswith(";"):
                    return offset + 1
                continue
            opened = True
        depth += line.count("{") - line.count("}")
        if depth <= 0:
            return offset + 1
    return len(lines) if opened else start_line


def _slice(lines: Sequence[str], start_line: int, end_line: int) -> str:
    return "\n".join(lines[start_line - 1 : end_line])


class ScriptParser(StructureParser):
    """Imports, exports, functions, and classes of JavaScript/TypeScript modules.

    An exported class or function yields a single section flagged as exported
    rather than one section per keyword.
    """

    IMPORT = re.compile(
        r"import\s+(?:\{([^}]+)\}|\*\s+as\s+([A-Za-z0-9_$]+)|([A-Za-z0-9_$]+))"
        r"\s+from\s+['\"]([^'\"]+)['\"]"
    )
    EXPORT = re.compile(
        r"\bexport\s+(?:default\s+)?(?:async\s+)?"
        r"(?:(class|function|const|let|var|interface|type|enum)\s+)?([A-Za-z0-9_$]+)"
    )
    FUNCTION = re.compile(r"\bfunction\s+([A-Za-z0-9_$]+)\s*\(")
    CLASS = re.compile(r"\bclass\s+([A-Za-z0-9_$]+)(?:\s+extends\s+([A-Za-z0-9_$.]+))?")

    def parse(self, content: str) -> ParsedStructure:
        structure = ParsedStructure()
        lines = content.split("\n")

        for match in self.IMPORT.finditer(content):
            items = " ".join((match.group(1) or match.group(2) or match.group(3)).split())
            source = match.group(4)
            structure.dependencies.append(
                FileDependency(
                    path=source,
                    type="import",
                    description=f"Imports {items} from {source}",
                    is_required=True,
                )
            )

        exported_declarations: set[tuple[str, str]] = set()
        for match in self.EXPORT.finditer(content):
            keyword, name = match.group(1), match.group(2)
            if keyword in {"class", "function"}:
                exported_declarations.add((keyword, name))
                continue
            start = line_number(content, match.start())
            end = balanced_end(lines, start)
            structure.sections.append(
                FileSection(
                    start_line=start,
                    end_line=end,
                    content=_slice(lines, start, end),
                    description=f"Export of {name}",
                    kind="export",
                    label=name,
                    is_critical=True,
                    exported=True,
                )
            )

        for match in self.FUNCTION.finditer(content):
            name = match.group(1)
            exported = ("function", name) in exported_declarations
            start = line_number(content, match.start())
            end = balanced_end(lines, start)
            structure.sections.append(
                FileSection(
                    start_line=start,
                    end_line=end,
                    content=_slice(lines, start, end),
                    description=f"{'Exported function' if exported else 'Function'} {name}",
                    kind="function",
                    label=name,
                    is_critical=exported,
                    exported=exported,
                )
            )

        for match in self.CLASS.finditer(content):
            name, base = match.group(1), match.group(2)
            exported = ("class", name) in exported_declarations
            start = line_number(content, match.start())
            end = balanced_end(lines, start)
            section_dependencies: List[FileDependency] = []
            description = f"{'Exported class' if exported else 'Class'} {name}"
            if base:
                inheritance = FileDependency(
                    path="unknown",
                    type="inheritance",
                    description=f"Inherits from class {base}",
                    is_required=True,
                )
                section_dependencies.append(inheritance)
                structure.dependencies.append(inheritance)
                description += f" extending {base}"
            structure.sections.append(
                FileSection(
                    start_line=start,
                    end_line=end,
                    content=_slice(lines, start, end),
                    description=description,
                    kind="class",
                    label=name,
                    is_critical=True,
                    exported=exported,
                    dependencies=section_dependencies,
                )
            )

        structure.sections.sort(key=lambda section: section.start_line)
        return structure


class MarkupParser(StructureParser):
    """External references and the head/body sections of HTML documents."""

    SCRIPT = re.compile(r"<script[^>]*\ssrc=['\"]([^'\"]+)['\"]", re.IGNORECASE)
    LINK = re.compile(r"<link[^>]*\shref=['\"]([^'\"]+)['\"]", re.IGNORECASE)
    HEAD = re.compile(r"<head[^>]*>.*?</head>", re.IGNORECASE | re.DOTALL)
    BODY = re.compile(r"<body[^>]*>.*?</body>", re.IGNORECASE | re.DOTALL)

    def parse(self, content: str) -> ParsedStructure:
        structure = ParsedStructure()

        for match in self.SCRIPT.finditer(content):
            src = match.group(1)
            structure.dependencies.append(
                FileDependency(
                    path=src,
                    type="reference",
                    description=f"External script: {src}",
                    is_required=True,
                )
            )
        for match in self.LINK.finditer(content):
            href = match.group(1)
            if not href.endswith(".css"):
                continue
            structure.dependencies.append(
                FileDependency(
                    path=href,
                    type="reference",
                    description=f"External stylesheet: {href}",
                    is_required=True,
                )
            )

        for kind, pattern in (("head", self.HEAD), ("body", self.BODY)):
            match = pattern.search(content)
            if match is None:
                continue
            structure.sections.append(
                FileSection(
                    start_line=line_number(content, match.start()),
                    end_line=line_number(content, match.end()),
                    content=match.group(0),
                    description=f"Document {kind} section",
                    kind=kind,
                    label=kind,
                    is_critical=True,
                )
            )
        return structure


class StylesheetParser(StructureParser):
    """``@import`` dependencies and rule blocks of CSS/SCSS stylesheets."""

    IMPORT = re.compile(r"@import\s+(?:url\(['\"]?([^'\")]+)['\"]?\)|['\"]([^'\"]+)['\"])\s*;")
    RULE = re.compile(r"([^{};]+)\{([^{}]*)\}")
    COMMENT = re.compile(r"/\*.*?\*/", re.DOTALL)

    def parse(self, content: str) -> ParsedStructure:
        structure = ParsedStructure()

        for match in self.IMPORT.finditer(content):
            target = match.group(1) or match.group(2)
            structure.dependencies.append(
                FileDependency(
                    path=target,
                    type="import",
                    description=f"Imports styles from {target}",
                    is_required=True,
                )
            )

        # Blank out comments without shifting offsets.
        searchable = self.COMMENT.sub(lambda m: re.sub(r"[^\n]", " ", m.group(0)), content)
        for match in self.RULE.finditer(searchable):
            raw_selector = match.group(1)
            selector = raw_selector.strip()
            if not selector:
                continue
            start = match.start(1) + (len(raw_selector) - len(raw_selector.lstrip()))
            structure.sections.append(
                FileSection(
                    start_line=line_number(content, start),
                    end_line=line_number(content, match.end()),
                    content=content[start : match.end()],
                    description=f'Style rule for "{selector}"',
                    kind="rule",
                    label=selector,
                    is_critical=False,
                )
            )
        return structure


def default_parsers() -> Dict[str, StructureParser]:
    """Return a fresh registry mapping language labels to parsers."""

    script = ScriptParser()
    stylesheet = StylesheetParser()
    return {
        "javascript": script,
        "typescript": script,
        "html": MarkupParser(),
        "css": stylesheet,
        "scss": stylesheet,
    }


def parser_for(
    language: Optional[str],
    registry: Dict[str, StructureParser],
) -> Optional[StructureParser]:
    """Return the parser registered for ``language``, if any."""
    if not language:
        return None
    return registry.get(language.lower())


__all__ = [
    "MarkupParser",
    "ParsedStructure",
    "ScriptParser",
    "StructureParser",
    "StylesheetParser",
    "balanced_end",
    "default_parsers",
    "line_number",
    "parser_for",
]
