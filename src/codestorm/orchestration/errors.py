"""Orchestration errors."""


class OrchestrationError(Exception):
    """Base exception for pipeline operations."""


class PlanningError(OrchestrationError):
    """Raised when the planning agent fails to produce a plan."""


class ModificationError(OrchestrationError):
    """Raised when the modification agent fails."""


class FileNotFoundInCollectionError(OrchestrationError):
    """Raised when a file id is not part of the current collection."""


class TaskStateError(OrchestrationError):
    """Raised when a task or plan step is moved out of a terminal state."""
