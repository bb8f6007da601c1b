"""Planning agent: turn an instruction into a structured project plan."""

from __future__ import annotations

import logging

from pydantic import ValidationError

from .base import Agent, AgentResult
from .models import FileDescription, ImplementationStep, PlanData, ProjectStructure
from .parsing import extract_json

LOGGER = logging.getLogger(__name__)

PLANNER_DIRECTIVE = """\
Act as an experienced software architect. Analyse the request below and produce
a detailed plan for implementing it.

USER REQUEST: "{instruction}"

Describe the project (purpose, main features, technologies, architecture), every
file it needs (purpose, contents, relation to other files), and the ordered
implementation steps.

Reply ONLY with JSON of this shape, using double quotes and no comments:

{{
  "projectStructure": {{
    "name": "Project name",
    "description": "Detailed project description",
    "files": [
      {{
        "path": "path/to/file.ext",
        "description": "What the file contains and does",
        "dependencies": ["path/to/other/file.ext"]
      }}
    ]
  }},
  "implementationSteps": [
    {{
      "id": "step-1",
      "title": "Step title",
      "description": "What the step implements and why",
      "filesToCreate": ["path/to/file.ext"]
    }}
  ]
}}
"""


def fallback_plan() -> PlanData:
    """Return the minimal plan used when a completion cannot be parsed."""

    return PlanData(
        project_structure=ProjectStructure(
            name="Untitled project",
            description="A project description could not be generated.",
            files=[
                FileDescription(path="main.py", description="Main project module"),
                FileDescription(path="README.md", description="Project documentation"),
            ],
        ),
        implementation_steps=[
            ImplementationStep(
                id="step-1",
                title="Create the basic structure",
                description="Create the main project files.",
                files_to_create=["main.py", "README.md"],
            )
        ],
    )


class PlannerAgent(Agent):
    """Request a project plan and parse it, falling back to a fixed plan."""

    name = "planner"

    def build_prompt(self, instruction: str) -> str:
        return PLANNER_DIRECTIVE.format(instruction=instruction)

    def execute(self, instruction: str) -> AgentResult:
        """Plan the project described by ``instruction``.

        Returns:
            AgentResult: ``data`` holds a :class:`PlanData`. Malformed
            completions still succeed with :func:`fallback_plan`; only a failed
            text-generation call is reported as a failure.
        """

        response = self._generate(self.build_prompt(instruction))
        if not response.success:
            return self._failure(response)
        return AgentResult(
            success=True,
            data=self.parse(response.content),
            metadata=self._metadata(response),
        )

    def parse(self, content: str) -> PlanData:
        """Return the plan embedded in ``content`` or the fallback plan."""

        try:
            plan = PlanData.model_validate(extract_json(content))
        except (ValueError, ValidationError) as exc:
            LOGGER.warning("Planner returned an unusable plan; using fallback: %s", exc)
            return fallback_plan()

        for index, step in enumerate(plan.implementation_steps, start=1):
            if not step.id:
                step.id = f"step-{index}"
        return plan


__all__ = ["PLANNER_DIRECTIVE", "PlannerAgent", "fallback_plan"]
