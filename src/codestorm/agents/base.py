"""Shared agent plumbing: the text-generation boundary and result envelope."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

LOGGER = logging.getLogger(__name__)


class GenerationResponse(BaseModel):
    """Result of one text-generation call.

    Attributes:
        success: Whether the backend produced a completion.
        content: Completion text; empty on failure.
        model: Model identifier that served the call.
        latency: Wall-clock duration of the call in seconds.
        error: Failure reason when ``success`` is False.
    """

    success: bool
    content: str = ""
    model: str = ""
    latency: float = 0.0
    error: Optional[str] = None


class AgentResult(BaseModel):
    """Common envelope returned by every agent."""

    success: bool
    data: Any = None
    error: Optional[str] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)


class TextGenerator:
    """Interface for the external text-generation call used by every agent."""

    def generate(self, prompt: str, model_hint: Optional[str] = None) -> GenerationResponse:
        """Return the completion for ``prompt``.

        Args:
            prompt: Full prompt text.
            model_hint: Optional model identifier overriding the default.

        Returns:
            GenerationResponse: Completion or failure details.
        """
        raise NotImplementedError


class Agent:
    """Base class wiring an agent to a :class:`TextGenerator`."""

    name = "agent"

    def __init__(self, generator: TextGenerator, *, model_hint: Optional[str] = None) -> None:
        self.generator = generator
        self.model_hint = model_hint

    def _generate(self, prompt: str) -> GenerationResponse:
        """Call the generator, converting raised errors into failed responses."""

        try:
            response = self.generator.generate(prompt, self.model_hint)
        except Exception as exc:
            LOGGER.warning("%s text generation raised: %s", self.name, exc)
            return GenerationResponse(success=False, error=str(exc) or exc.__class__.__name__)
        if not response.success:
            LOGGER.warning("%s text generation failed: %s", self.name, response.error)
        return response

    def _failure(self, response: GenerationResponse) -> AgentResult:
        return AgentResult(
            success=False,
            error=response.error or f"{self.name} text generation failed",
            metadata=self._metadata(response),
        )

    @staticmethod
    def _metadata(response: GenerationResponse) -> Dict[str, Any]:
        return {"model": response.model, "latency": response.latency}


__all__ = ["Agent", "AgentResult", "GenerationResponse", "TextGenerator"]
