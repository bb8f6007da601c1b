"""Text-generation agents used by the orchestration pipeline.

The DSPy-backed generator lives in :mod:`codestorm.agents.dspy_backend` and is
imported on demand so the rest of the package loads without initializing DSPy.
"""

from .base import Agent, AgentResult, GenerationResponse, TextGenerator
from .designer import DesignArchitectAgent, fallback_proposal
from .generator import CodeGeneratorAgent, default_content
from .models import (
    CodeChange,
    ColorPalette,
    DesignComponent,
    DesignProposal,
    FileDescription,
    ImplementationStep,
    ModificationData,
    PlanData,
    ProjectStructure,
)
from .modifier import GENERIC_CHANGE, CodeModifierAgent
from .parsing import extract_json, first_code_block
from .planner import PlannerAgent, fallback_plan

__all__ = [
    "Agent",
    "AgentResult",
    "CodeChange",
    "CodeGeneratorAgent",
    "CodeModifierAgent",
    "ColorPalette",
    "DesignArchitectAgent",
    "DesignComponent",
    "DesignProposal",
    "FileDescription",
    "GENERIC_CHANGE",
    "GenerationResponse",
    "ImplementationStep",
    "ModificationData",
    "PlanData",
    "PlannerAgent",
    "ProjectStructure",
    "TextGenerator",
    "default_content",
    "extract_json",
    "fallback_plan",
    "fallback_proposal",
    "first_code_block",
]
