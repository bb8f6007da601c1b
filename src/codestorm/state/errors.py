"""State management errors."""


class StateError(Exception):
    """Base exception for workspace repository operations."""


class MissingStateError(StateError):
    """Raised when no state is available for a workspace."""
