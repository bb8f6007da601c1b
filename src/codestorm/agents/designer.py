"""Design architect agent: propose a visual direction for the project."""

from __future__ import annotations

import logging
from typing import Any, Optional

from pydantic import ValidationError

from .base import Agent, AgentResult
from .models import DesignComponent, DesignProposal, PlanData
from .parsing import extract_json

LOGGER = logging.getLogger(__name__)

DESIGN_DIRECTIVE = """\
Act as a senior UI/UX designer. Propose a visual design for the project below.

REQUEST: "{instruction}"
{plan_context}
Reply ONLY with JSON of this shape:

{{
  "title": "Proposal title",
  "description": "Design direction and rationale",
  "siteType": "static",
  "colorPalette": {{
    "primary": "#hex", "secondary": "#hex", "accent": "#hex",
    "background": "#hex", "text": "#hex"
  }},
  "layout": "Overall page layout",
  "components": [
    {{"name": "Header", "type": "header", "description": "...",
      "htmlTemplate": "...", "cssStyles": "...", "jsCode": ""}}
  ]
}}
"""

_DEFAULT_COMPONENTS = (
    ("Header", "header", "Site title and primary navigation."),
    ("Hero", "hero", "Headline section introducing the project."),
    ("Content", "section", "Main content area."),
    ("Footer", "footer", "Secondary links and credits."),
)


def fallback_proposal(instruction: str) -> DesignProposal:
    """Return the default palette proposal used when a completion is malformed."""

    return DesignProposal(
        title="Default design proposal",
        description=f"Default modern layout for: {instruction}",
        layout="Single column with header, hero, content, and footer.",
        components=[
            DesignComponent(name=name, type=kind, description=description)
            for name, kind, description in _DEFAULT_COMPONENTS
        ],
    )


class DesignArchitectAgent(Agent):
    """Request a design proposal, falling back to a default palette."""

    name = "designArchitect"

    def build_prompt(self, instruction: str, plan: Optional[PlanData] = None) -> str:
        plan_context = ""
        if plan is not None:
            structure = plan.project_structure
            plan_context = f"PROJECT: {structure.name}\n{structure.description}\n"
        return DESIGN_DIRECTIVE.format(instruction=instruction, plan_context=plan_context)

    def execute(self, instruction: str, plan: Optional[PlanData] = None) -> AgentResult:
        """Propose a design for ``instruction``.

        Returns:
            AgentResult: ``data`` holds a :class:`DesignProposal`.
        """

        response = self._generate(self.build_prompt(instruction, plan))
        if not response.success:
            return self._failure(response)
        return AgentResult(
            success=True,
            data=self.parse(response.content, instruction),
            metadata=self._metadata(response),
        )

    def parse(self, content: str, instruction: str) -> DesignProposal:
        try:
            payload: Any = extract_json(content)
            if isinstance(payload, dict) and isinstance(payload.get("proposal"), dict):
                payload = payload["proposal"]
            return DesignProposal.model_validate(payload)
        except (ValueError, ValidationError) as exc:
            LOGGER.warning("Design proposal could not be parsed; using default: %s", exc)
            return fallback_proposal(instruction)


__all__ = ["DESIGN_DIRECTIVE", "DesignArchitectAgent", "fallback_proposal"]
