"""Structural analysis data models."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Literal, Optional
from uuid import uuid4

from pydantic import BaseModel, Field

from codestorm.files.models import FileRecord

DependencyType = Literal["import", "reference", "inheritance"]
SectionKind = Literal["export", "function", "class", "head", "body", "rule"]
ImpactLevel = Literal["critical", "important", "normal"]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id(prefix: str) -> str:
    return f"{prefix}-{uuid4().hex[:12]}"


class FileDependency(BaseModel):
    """A reference from one file to another resource.

    Attributes:
        path: Referenced module or resource; ``unknown`` when it cannot be resolved.
        type: How the file depends on it.
        description: Human-readable summary.
        is_required: Whether the file breaks without it.
    """

    path: str
    type: DependencyType
    description: str
    is_required: bool = True


class FileSection(BaseModel):
    """A contiguous, 1-based line range of a file."""

    id: str = Field(default_factory=lambda: _new_id("section"))
    start_line: int
    end_line: int
    content: str
    description: str
    kind: SectionKind
    label: str
    is_critical: bool = False
    exported: bool = False
    dependencies: List[FileDependency] = Field(default_factory=list)


class CriticalArea(BaseModel):
    """A named group of critical sections."""

    description: str
    sections: List[str] = Field(default_factory=list)


class FileAnalysis(BaseModel):
    """Structure, dependencies, and purpose of one file."""

    id: str = Field(default_factory=lambda: _new_id("analysis"))
    file_id: str
    path: str
    language: Optional[str] = None
    sections: List[FileSection] = Field(default_factory=list)
    dependencies: List[FileDependency] = Field(default_factory=list)
    critical_areas: List[CriticalArea] = Field(default_factory=list)
    purpose: str = ""
    description: str = ""
    timestamp: datetime = Field(default_factory=_utcnow)


class FileChangeImpact(BaseModel):
    """One consequence of applying a proposed change."""

    id: str = Field(default_factory=lambda: _new_id("impact"))
    description: str
    level: ImpactLevel
    affected_files: List[str] = Field(default_factory=list)
    affected_functionality: str = ""
    recommendation: str = ""


class FileChangeAnalysis(BaseModel):
    """Impact assessment of replacing a file's content."""

    original_file: FileRecord
    proposed_changes: str
    impacts: List[FileChangeImpact] = Field(default_factory=list)
    summary: str = ""
    recommendation: str = ""
    timestamp: datetime = Field(default_factory=_utcnow)

    @property
    def requires_action(self) -> bool:
        """Return True when any impact is critical."""
        return any(impact.level == "critical" for impact in self.impacts)


class LectorState(BaseModel):
    """Cached analyses and pending change assessments held by a Lector service."""

    analyzed_files: List[FileAnalysis] = Field(default_factory=list)
    pending_changes: List[FileChangeAnalysis] = Field(default_factory=list)
    is_active: bool = True
    last_analysis: datetime = Field(default_factory=_utcnow)

    def find_analysis(self, file_id: str) -> Optional[FileAnalysis]:
        """Return the cached analysis for ``file_id`` if one exists."""
        return next((item for item in self.analyzed_files if item.file_id == file_id), None)


class LectorResult(BaseModel):
    """Outcome of one Lector execution."""

    success: bool
    file_analysis: Optional[FileAnalysis] = None
    change_analysis: Optional[FileChangeAnalysis] = None
    error: Optional[str] = None


__all__ = [
    "CriticalArea",
    "DependencyType",
    "FileAnalysis",
    "FileChangeAnalysis",
    "FileChangeImpact",
    "FileDependency",
    "FileSection",
    "ImpactLevel",
    "LectorResult",
    "LectorState",
    "SectionKind",
]
