"""Structural and change-impact analysis of individual files."""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence

from codestorm.files.models import FileRecord

from .models import (
    CriticalArea,
    FileAnalysis,
    FileChangeAnalysis,
    FileChangeImpact,
    FileDependency,
    FileSection,
)
from .parsers import ParsedStructure, StructureParser, default_parsers, parser_for

LOGGER = logging.getLogger(__name__)

MODULE_EXPORTS = "Module exports"
CLASS_DEFINITIONS = "Class definitions"

_REACT_COMPONENT_MARKERS = ("extends React.Component", "React.FC")


class StructuralAnalyzer:
    """Describe a file's sections, dependencies, and critical areas.

    Parsing is delegated to a registry of :class:`StructureParser` objects
    keyed by language label. Files whose language has no parser produce an
    analysis with no sections and no dependencies.
    """

    def __init__(self, parsers: Optional[Dict[str, StructureParser]] = None) -> None:
        self.parsers = parsers if parsers is not None else default_parsers()

    def analyze(self, file: FileRecord) -> FileAnalysis:
        """Return the structural analysis of ``file``.

        Args:
            file: File to analyze.

        Returns:
            FileAnalysis: Sections, dependencies, critical areas, and summary text.
        """

        parser = parser_for(file.language, self.parsers)
        structure = parser.parse(file.content) if parser is not None else ParsedStructure()
        LOGGER.debug(
            "Analyzed %s: %d section(s), %d dependency(ies).",
            file.path,
            len(structure.sections),
            len(structure.dependencies),
        )
        return FileAnalysis(
            file_id=file.id,
            path=file.path,
            language=file.language,
            sections=structure.sections,
            dependencies=structure.dependencies,
            critical_areas=self.critical_areas(structure.sections),
            purpose=self.purpose(file, structure),
            description=self.describe(file, structure),
        )

    def analyze_change(
        self,
        file: FileRecord,
        proposed_text: str,
        analysis: FileAnalysis,
    ) -> FileChangeAnalysis:
        """Assess the impact of replacing ``file`` content with ``proposed_text``.

        Every section and every dependency of the analysis is treated as
        affected; no diff between the original and the proposal is computed.
        """

        affected_ids = {section.id for section in self.affected_sections(analysis, proposed_text)}
        impacts: List[FileChangeImpact] = []

        for area in analysis.critical_areas:
            if not any(section_id in affected_ids for section_id in area.sections):
                continue
            impacts.append(
                FileChangeImpact(
                    description=f"Changes touch a critical area: {area.description}",
                    level="critical",
                    affected_files=[file.path],
                    affected_functionality=area.description,
                    recommendation=(
                        "Review the changes carefully and make sure existing behaviour still works."
                    ),
                )
            )

        for dependency in self.affected_dependencies(analysis, proposed_text):
            impacts.append(
                FileChangeImpact(
                    description=f"Changes affect a dependency: {dependency.description}",
                    level="critical" if dependency.is_required else "important",
                    affected_files=[dependency.path],
                    affected_functionality=(
                        f"{dependency.type} dependency: {dependency.description}"
                    ),
                    recommendation=(
                        "Make sure the changes stay compatible with dependent files."
                        if dependency.is_required
                        else "Check that related files are not affected negatively."
                    ),
                )
            )

        return FileChangeAnalysis(
            original_file=file,
            proposed_changes=proposed_text,
            impacts=impacts,
            summary=summarize_impacts(impacts),
            recommendation=recommend(impacts),
        )

    def affected_sections(self, analysis: FileAnalysis, proposed_text: str) -> List[FileSection]:
        """Return the sections a proposal may touch (currently all of them)."""
        return list(analysis.sections)

    def affected_dependencies(
        self,
        analysis: FileAnalysis,
        proposed_text: str,
    ) -> List[FileDependency]:
        """Return the dependencies a proposal may touch (currently all of them)."""
        return list(analysis.dependencies)

    # ------------------------------------------------------------------ #
    # Summaries                                                          #
    # ------------------------------------------------------------------ #

    @staticmethod
    def critical_areas(sections: Sequence[FileSection]) -> List[CriticalArea]:
        """Group critical sections into named areas."""

        critical = [section for section in sections if section.is_critical]
        groups = (
            (MODULE_EXPORTS, [section.id for section in critical if section.exported]),
            (CLASS_DEFINITIONS, [section.id for section in critical if section.kind == "class"]),
        )
        return [
            CriticalArea(description=description, sections=ids)
            for description, ids in groups
            if ids
        ]

    @staticmethod
    def purpose(file: FileRecord, structure: ParsedStructure) -> str:
        """Return a short label for what the file is for."""

        language = (file.language or "").lower()
        if language in {"javascript", "typescript"}:
            imports_react = any("react" in dep.path for dep in structure.dependencies)
            component_class = any(
                section.kind == "class"
                and any(marker in section.content for marker in _REACT_COMPONENT_MARKERS)
                for section in structure.sections
            )
            if imports_react and component_class:
                return "React component"
            if any(section.exported for section in structure.sections):
                return "JavaScript/TypeScript module"
        elif language == "html":
            return "HTML document"
        elif language in {"css", "scss"}:
            return "CSS stylesheet"
        return "Source file"

    @staticmethod
    def describe(file: FileRecord, structure: ParsedStructure) -> str:
        """Return the language label followed by section and dependency counts."""

        parts = [f"{(file.language or 'text').upper()} file"]
        exports = sum(1 for section in structure.sections if section.exported)
        functions = sum(1 for section in structure.sections if section.kind == "function")
        classes = sum(1 for section in structure.sections if section.kind == "class")
        if exports:
            parts.append(f"exports {exports} element(s)")
        if functions:
            parts.append(f"contains {functions} function(s)")
        if classes:
            parts.append(f"defines {classes} class(es)")
        if structure.dependencies:
            parts.append(f"has {len(structure.dependencies)} external dependency(ies)")
        return ", ".join(parts)


def summarize_impacts(impacts: Sequence[FileChangeImpact]) -> str:
    """Return a one-sentence count of impacts per level."""

    if not impacts:
        return "The proposed changes do not appear to affect existing functionality."

    counts = {
        level: sum(1 for impact in impacts if impact.level == level)
        for level in ("critical", "important", "normal")
    }
    parts = []
    if counts["critical"]:
        parts.append(f"{counts['critical']} critical impact(s) that need immediate attention")
    if counts["important"]:
        parts.append(f"{counts['important']} important impact(s) that should be reviewed")
    if counts["normal"]:
        parts.append(f"{counts['normal']} normal impact(s)")
    return f"The proposed changes have {', '.join(parts)}."


def recommend(impacts: Sequence[FileChangeImpact]) -> str:
    """Return the overall recommendation for a set of impacts."""

    if not impacts:
        return "The proposed changes can be applied with confidence."
    if any(impact.level == "critical" for impact in impacts):
        return "Review the critical impacts carefully before applying the changes."
    return "Review the identified impacts and proceed with caution."


__all__ = [
    "CLASS_DEFINITIONS",
    "MODULE_EXPORTS",
    "StructuralAnalyzer",
    "recommend",
    "summarize_impacts",
]
