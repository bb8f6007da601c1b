"""Segmentation result models."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from pydantic import BaseModel, Field

from codestorm.files.models import FileRecord


@dataclass(frozen=True, slots=True)
class FileIdentity:
    """Name, path, and language inferred for an unlabeled code block."""

    name: str
    path: str
    language: str


class SplitResult(BaseModel):
    """Outcome of splitting one blob of generated text.

    Attributes:
        success: False when no file could be recovered.
        files: Recovered files in discovery order, deduplicated.
        message: Short human-readable summary.
        error: Reason for failure, when ``success`` is False.
    """

    success: bool
    files: List[FileRecord] = Field(default_factory=list)
    message: str = ""
    error: Optional[str] = None


__all__ = ["FileIdentity", "SplitResult"]
