"""Persisted workspace state."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, Field

from codestorm.agents.models import DesignProposal
from codestorm.files.models import FileRecord
from codestorm.orchestration.models import ProjectPlan, Task


class WorkspaceState(BaseModel):
    """Aggregate of everything a pipeline run produced for one workspace root."""

    root: str
    files: List[FileRecord] = Field(default_factory=list)
    tasks: List[Task] = Field(default_factory=list)
    plan: Optional[ProjectPlan] = None
    design: Optional[DesignProposal] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


__all__ = ["WorkspaceState"]
