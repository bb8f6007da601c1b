"""Task orchestration pipeline."""

from .errors import (
    FileNotFoundInCollectionError,
    ModificationError,
    OrchestrationError,
    PlanningError,
    TaskStateError,
)
from .models import (
    GenerationOutcome,
    ModificationOutcome,
    ModificationReview,
    ProjectPlan,
    ProjectStep,
    Task,
)
from .orchestrator import VISUAL_MARKUP_PATH, VISUAL_STYLESHEET_PATH, Orchestrator

__all__ = [
    "FileNotFoundInCollectionError",
    "GenerationOutcome",
    "ModificationError",
    "ModificationOutcome",
    "ModificationReview",
    "OrchestrationError",
    "Orchestrator",
    "PlanningError",
    "ProjectPlan",
    "ProjectStep",
    "Task",
    "TaskStateError",
    "VISUAL_MARKUP_PATH",
    "VISUAL_STYLESHEET_PATH",
]
