"""Structural analysis (Lector) of generated files."""

from .analyzer import (
    CLASS_DEFINITIONS,
    MODULE_EXPORTS,
    StructuralAnalyzer,
    recommend,
    summarize_impacts,
)
from .models import (
    CriticalArea,
    FileAnalysis,
    FileChangeAnalysis,
    FileChangeImpact,
    FileDependency,
    FileSection,
    LectorResult,
    LectorState,
)
from .parsers import (
    MarkupParser,
    ParsedStructure,
    ScriptParser,
    StructureParser,
    StylesheetParser,
    default_parsers,
)
from .service import LectorService

__all__ = [
    "CLASS_DEFINITIONS",
    "CriticalArea",
    "FileAnalysis",
    "FileChangeAnalysis",
    "FileChangeImpact",
    "FileDependency",
    "FileSection",
    "LectorResult",
    "LectorService",
    "LectorState",
    "MODULE_EXPORTS",
    "MarkupParser",
    "ParsedStructure",
    "ScriptParser",
    "StructuralAnalyzer",
    "StructureParser",
    "StylesheetParser",
    "default_parsers",
    "recommend",
    "summarize_impacts",
]
