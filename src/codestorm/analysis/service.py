"""Stateful Lector service wrapping the structural analyzer."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable, List, Optional

from codestorm.files.models import FileRecord

from .analyzer import StructuralAnalyzer
from .models import FileAnalysis, FileChangeAnalysis, LectorResult, LectorState

LOGGER = logging.getLogger(__name__)

Listener = Callable[[LectorState], None]


class LectorService:
    """Cache file analyses and change assessments, notifying subscribers on updates.

    The service is an explicit object: callers create one per session and pass
    it where it is needed. While inactive, analysis requests return ``None``.
    """

    def __init__(
        self,
        analyzer: Optional[StructuralAnalyzer] = None,
        *,
        active: bool = True,
    ) -> None:
        self.analyzer = analyzer or StructuralAnalyzer()
        self._state = LectorState(is_active=active)
        self._listeners: List[Listener] = []

    @property
    def state(self) -> LectorState:
        """Return a snapshot of the current state."""
        return self._state.model_copy(deep=True)

    @property
    def is_active(self) -> bool:
        return self._state.is_active

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener`` and return a callable that removes it."""

        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def activate(self) -> None:
        self._state.is_active = True
        self._notify()

    def deactivate(self) -> None:
        self._state.is_active = False
        self._notify()

    def analyze_file(self, file: FileRecord) -> Optional[FileAnalysis]:
        """Return the analysis of ``file``, computing and caching it on first request."""

        if not self._state.is_active:
            return None
        result = self.execute(file)
        if not result.success:
            LOGGER.warning("Analysis of %s failed: %s", file.path, result.error)
            return None
        return result.file_analysis

    def analyze_changes(self, file: FileRecord, proposed: str) -> Optional[FileChangeAnalysis]:
        """Return the impact assessment of replacing ``file`` content with ``proposed``."""

        if not self._state.is_active:
            return None
        result = self.execute(file, proposed)
        if not result.success:
            LOGGER.warning("Change analysis of %s failed: %s", file.path, result.error)
            return None
        return result.change_analysis

    def execute(self, file: FileRecord, proposed: Optional[str] = None) -> LectorResult:
        """Analyze ``file`` and, when ``proposed`` is given, the impact of the change.

        The first analysis recorded for a file id is kept for the lifetime of
        the service. A new change assessment replaces any pending one for the
        same file.

        Args:
            file: File to analyze.
            proposed: Proposed replacement content, if any.

        Returns:
            LectorResult: Analysis outcome; failures are reported, not raised.
        """

        try:
            existing = self._state.find_analysis(file.id)
            if existing is not None and proposed is None:
                return LectorResult(success=True, file_analysis=existing)

            analysis = existing or self.analyzer.analyze(file)
            if existing is None:
                self._state.analyzed_files.append(analysis)

            change: Optional[FileChangeAnalysis] = None
            if proposed is not None:
                change = self.analyzer.analyze_change(file, proposed, analysis)
                self._state.pending_changes = [
                    pending
                    for pending in self._state.pending_changes
                    if pending.original_file.id != file.id
                ]
                self._state.pending_changes.append(change)
            else:
                self._state.last_analysis = datetime.now(timezone.utc)
        except Exception as exc:  # pragma: no cover - parser failures are unexpected
            LOGGER.exception("Lector failed while analyzing %s.", file.path)
            return LectorResult(success=False, error=f"Failed to analyze {file.path}: {exc}")

        self._notify()
        return LectorResult(success=True, file_analysis=analysis, change_analysis=change)

    def describe_analysis(self, analysis: FileAnalysis) -> str:
        """Return a short multi-line summary of ``analysis``."""

        areas = ", ".join(area.description for area in analysis.critical_areas) or "none"
        return (
            f"Analyzed {analysis.path}:\n\n{analysis.description}\n\n"
            f"Purpose: {analysis.purpose}\n\nCritical areas: {areas}"
        )

    def describe_change(self, change: FileChangeAnalysis) -> str:
        """Return a short multi-line summary of ``change``."""

        return (
            f"Analyzed the proposed changes to {change.original_file.path}:\n\n"
            f"{change.summary}\n\nRecommendation: {change.recommendation}"
        )

    def _notify(self) -> None:
        snapshot = self._state.model_copy(deep=True)
        for listener in list(self._listeners):
            listener(snapshot)


__all__ = ["LectorService", "Listener"]
