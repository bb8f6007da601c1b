"""Task, plan, and outcome models for the orchestration pipeline."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, List, Literal, Optional
from uuid import uuid4

from pydantic import BaseModel, Field

from codestorm.agents.models import CodeChange, DesignProposal, PlanData
from codestorm.analysis.models import FileChangeAnalysis
from codestorm.files.models import FileRecord

from .errors import TaskStateError

TaskType = Literal[
    "planner",
    "designArchitect",
    "codeGenerator",
    "codeSplitter",
    "codeModifier",
    "fileSynchronizer",
]
TaskStatus = Literal["idle", "working", "completed", "failed"]
StepStatus = Literal["pending", "in_progress", "completed", "failed"]

TERMINAL_TASK_STATUSES = frozenset({"completed", "failed"})
_STEP_TRANSITIONS = {
    "pending": {"in_progress", "completed", "failed"},
    "in_progress": {"completed", "failed"},
    "completed": set(),
    "failed": set(),
}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Task(BaseModel):
    """Audit record of one agent invocation.

    Attributes:
        id: Unique task identifier.
        type: Agent kind that served the task.
        instruction: Human-readable description of the work requested.
        status: Lifecycle state; terminal once ``completed`` or ``failed``.
        start_time: When the task was created.
        end_time: When the task reached a terminal state.
        result: Raw agent result recorded on completion.
    """

    id: str = Field(default_factory=lambda: f"task-{uuid4().hex[:12]}")
    type: TaskType
    instruction: str
    status: TaskStatus = "working"
    start_time: datetime = Field(default_factory=_utcnow)
    end_time: Optional[datetime] = None
    result: Any = None

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_TASK_STATUSES

    def finish(self, succeeded: bool, result: Any = None) -> None:
        """Move the task to ``completed`` or ``failed`` and record ``result``.

        Raises:
            TaskStateError: If the task already reached a terminal state.
        """

        if self.is_terminal:
            raise TaskStateError(f"Task {self.id} is already {self.status}.")
        self.status = "completed" if succeeded else "failed"
        self.result = result
        self.end_time = _utcnow()


class ProjectStep(BaseModel):
    """One ordered implementation step of a plan."""

    id: str
    title: str = ""
    description: str = ""
    status: StepStatus = "pending"

    def transition(self, status: StepStatus) -> None:
        """Advance the step; transitions are one-way.

        Raises:
            TaskStateError: If ``status`` is not reachable from the current status.
        """

        if status not in _STEP_TRANSITIONS[self.status]:
            raise TaskStateError(f"Step {self.id} cannot move from {self.status} to {status}.")
        self.status = status


class ProjectPlan(BaseModel):
    """Plan assembled from the planning agent's output."""

    title: str
    description: str = ""
    files: List[str] = Field(default_factory=list)
    steps: List[ProjectStep] = Field(default_factory=list)
    current_step_id: Optional[str] = None

    @classmethod
    def from_plan_data(cls, data: PlanData) -> ProjectPlan:
        """Build a plan with every step pending and the first step current."""

        steps = [
            ProjectStep(
                id=step.id or f"step-{index}",
                title=step.title,
                description=step.description,
            )
            for index, step in enumerate(data.implementation_steps, start=1)
        ]
        return cls(
            title=data.project_structure.name,
            description=data.project_structure.description,
            files=[item.path for item in data.project_structure.files],
            steps=steps,
            current_step_id=steps[0].id if steps else None,
        )


class GenerationOutcome(BaseModel):
    """Result of generating a whole project."""

    plan: ProjectPlan
    files: List[FileRecord] = Field(default_factory=list)
    tasks: List[Task] = Field(default_factory=list)
    design: Optional[DesignProposal] = None


class ModificationOutcome(BaseModel):
    """Result of modifying one file."""

    original_file: FileRecord
    modified_file: FileRecord
    changes: List[CodeChange] = Field(default_factory=list)
    tasks: List[Task] = Field(default_factory=list)


class ModificationReview(BaseModel):
    """A modification plus the impact assessment of the change, when available."""

    modification: ModificationOutcome
    change_analysis: Optional[FileChangeAnalysis] = None


__all__ = [
    "GenerationOutcome",
    "ModificationOutcome",
    "ModificationReview",
    "ProjectPlan",
    "ProjectStep",
    "StepStatus",
    "TERMINAL_TASK_STATUSES",
    "Task",
    "TaskStatus",
    "TaskType",
]
