"""Shared fixtures: a scripted text generator standing in for a language model."""

from __future__ import annotations

import json
import os
import re
from pathlib import Path
from typing import Dict, Iterable, List, Optional

import pytest

from codestorm.agents import GenerationResponse, TextGenerator

FIXTURES = Path(__file__).parent / "fixtures"

_PATH_LINE = re.compile(r"^Path: (.+)$", re.MULTILINE)


def plan_payload(
    files: Iterable[tuple[str, str]],
    *,
    name: str = "Landing page",
    steps: Optional[List[List[str]]] = None,
) -> str:
    """Return a camelCase plan completion listing ``files``."""

    files = list(files)
    steps = steps if steps is not None else [[path for path, _ in files]]
    return json.dumps(
        {
            "projectStructure": {
                "name": name,
                "description": f"{name} built with plain web technologies.",
                "files": [
                    {"path": path, "description": description, "dependencies": []}
                    for path, description in files
                ],
            },
            "implementationSteps": [
                {
                    "id": f"step-{index}",
                    "title": f"Step {index}",
                    "description": "Create the listed files.",
                    "filesToCreate": paths,
                }
                for index, paths in enumerate(steps, start=1)
            ],
        }
    )


class ScriptedGenerator(TextGenerator):
    """Answer each agent prompt with canned completions.

    Prompts are routed by the directive each agent sends: planning, design,
    per-file generation (keyed by the ``Path:`` line), and modification.
    """

    def __init__(
        self,
        *,
        plan: Optional[str] = None,
        design: Optional[str] = None,
        files: Optional[Dict[str, str]] = None,
        modification: Optional[str] = None,
        failing_paths: Iterable[str] = (),
        raising_paths: Iterable[str] = (),
        offline: bool = False,
    ) -> None:
        self.plan = plan
        self.design = design
        self.files = dict(files or {})
        self.modification = modification
        self.failing_paths = set(failing_paths)
        self.raising_paths = set(raising_paths)
        self.offline = offline
        self.prompts: List[str] = []
        self.model_hints: List[Optional[str]] = []

    def generate(self, prompt: str, model_hint: Optional[str] = None) -> GenerationResponse:
        self.prompts.append(prompt)
        self.model_hints.append(model_hint)
        if self.offline:
            return GenerationResponse(success=False, model="scripted", error="backend offline")

        if "software architect" in prompt:
            return self._reply(self.plan)
        if "UI/UX designer" in prompt:
            return self._reply(self.design)
        if "Modify an existing file" in prompt:
            return self._reply(self.modification)

        match = _PATH_LINE.search(prompt)
        path = match.group(1).strip() if match else ""
        if path in self.raising_paths:
            raise RuntimeError(f"connection reset while generating {path}")
        if path in self.failing_paths:
            return GenerationResponse(success=False, model="scripted", error="rate limited")
        default = f"```\n// {path}\nconst value = 1;\n```"
        return self._reply(self.files.get(path, default))

    @staticmethod
    def _reply(content: Optional[str]) -> GenerationResponse:
        if content is None:
            return GenerationResponse(success=False, model="scripted", error="no script")
        return GenerationResponse(success=True, content=content, model="scripted", latency=0.01)

    def prompts_containing(self, marker: str) -> List[str]:
        return [prompt for prompt in self.prompts if marker in prompt]


@pytest.fixture()
def home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point HOME at a temporary directory so configuration stays isolated."""
    fake_home = tmp_path / "home"
    fake_home.mkdir()
    monkeypatch.setenv("HOME", str(fake_home))
    for key in [key for key in os.environ if key.startswith("CODESTORM__")]:
        monkeypatch.delenv(key, raising=False)
    return fake_home
