"""Payload models produced by the agents.

Completions are requested in camelCase JSON; every model accepts either the
camelCase key or the snake_case field name.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, List, Literal, Optional
from uuid import uuid4

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from codestorm.files.models import FileRecord


class AgentPayload(BaseModel):
    """Base for completion payloads; unknown keys are ignored."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)


def _none_to_list(value: Any) -> Any:
    return [] if value is None else value


class FileDescription(AgentPayload):
    """A file the plan asks for."""

    path: str
    description: str = ""
    dependencies: List[str] = Field(default_factory=list)

    @field_validator("dependencies", mode="before")
    @classmethod
    def default_dependencies(cls, value: Any) -> Any:
        return _none_to_list(value)


class ProjectStructure(AgentPayload):
    name: str = "Untitled project"
    description: str = ""
    files: List[FileDescription] = Field(default_factory=list)

    @field_validator("files", mode="before")
    @classmethod
    def default_files(cls, value: Any) -> Any:
        return _none_to_list(value)


class ImplementationStep(AgentPayload):
    """An ordered unit of work naming the files it creates."""

    id: Optional[str] = None
    title: str = ""
    description: str = ""
    files_to_create: List[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("filesToCreate", "files_to_create"),
    )

    @field_validator("id", mode="before")
    @classmethod
    def stringify_id(cls, value: Any) -> Any:
        return None if value is None else str(value)

    @field_validator("files_to_create", mode="before")
    @classmethod
    def default_files(cls, value: Any) -> Any:
        return _none_to_list(value)


class PlanData(AgentPayload):
    """Structured plan returned by the planning agent."""

    project_structure: ProjectStructure = Field(
        validation_alias=AliasChoices("projectStructure", "project_structure"),
    )
    implementation_steps: List[ImplementationStep] = Field(
        validation_alias=AliasChoices("implementationSteps", "implementation_steps"),
    )

    def find_file(self, path: str) -> Optional[FileDescription]:
        """Return the description of ``path`` if the plan lists it."""
        return next((item for item in self.project_structure.files if item.path == path), None)


class ColorPalette(AgentPayload):
    primary: str = "#1565c0"
    secondary: str = "#42a5f5"
    accent: str = "#ffb300"
    background: str = "#0d1421"
    text: str = "#ffffff"


class DesignComponent(AgentPayload):
    id: str = Field(default_factory=lambda: f"component-{uuid4().hex[:12]}")
    name: str
    type: str = "section"
    description: str = ""
    html_template: str = Field(
        default="",
        validation_alias=AliasChoices("htmlTemplate", "html_template"),
    )
    css_styles: str = Field(
        default="",
        validation_alias=AliasChoices("cssStyles", "css_styles"),
    )
    js_code: str = Field(
        default="",
        validation_alias=AliasChoices("jsCode", "js_code"),
    )


class DesignProposal(AgentPayload):
    """Visual design direction for a generated site."""

    id: str = Field(default_factory=lambda: f"proposal-{uuid4().hex[:12]}")
    title: str = "Design proposal"
    description: str = ""
    site_type: str = Field(
        default="static",
        validation_alias=AliasChoices("siteType", "site_type"),
    )
    color_palette: ColorPalette = Field(
        default_factory=ColorPalette,
        validation_alias=AliasChoices("colorPalette", "color_palette"),
    )
    components: List[DesignComponent] = Field(default_factory=list)
    layout: str = ""
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @field_validator("components", mode="before")
    @classmethod
    def default_components(cls, value: Any) -> Any:
        return _none_to_list(value)


class CodeChange(AgentPayload):
    """One change reported by the modification agent."""

    type: Literal["add", "remove", "modify", "create"] = "modify"
    description: str = ""
    line_numbers: Optional[List[int]] = Field(
        default=None,
        validation_alias=AliasChoices("lineNumbers", "line_numbers"),
    )


class ModificationData(BaseModel):
    """Original and modified file plus the reported changes."""

    original_file: FileRecord
    modified_file: FileRecord
    changes: List[CodeChange] = Field(default_factory=list)


__all__ = [
    "CodeChange",
    "ColorPalette",
    "DesignComponent",
    "DesignProposal",
    "FileDescription",
    "ImplementationStep",
    "ModificationData",
    "PlanData",
    "ProjectStructure",
]
