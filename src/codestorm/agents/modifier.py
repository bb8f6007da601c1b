"""Code modification agent: rewrite an existing file per an instruction."""

from __future__ import annotations

import logging
from typing import List

from pydantic import ValidationError

from codestorm.files.models import FileRecord

from .base import Agent, AgentResult
from .models import CodeChange, ModificationData
from .parsing import extract_json, first_code_block

LOGGER = logging.getLogger(__name__)

MODIFIER_DIRECTIVE = """\
Act as an expert {language} developer. Modify an existing file according to the
instruction below.

FILE: {path}
LANGUAGE: {language}

INSTRUCTION:
{instruction}

CURRENT CODE:
```{language}
{content}
```

Keep the structure and style of the original, keep changes minimal and focused,
and preserve existing behaviour unless told otherwise.

Reply with the complete modified file in a fenced block, followed by a fenced
json block summarising the changes:

```json
{{"changes": [{{"type": "add|remove|modify", "description": "...", "lineNumbers": [1, 2]}}]}}
```
"""

GENERIC_CHANGE = "Modified the file according to the instruction."


class CodeModifierAgent(Agent):
    """Ask for a modified version of a file and parse the reported changes."""

    name = "codeModifier"

    def build_prompt(self, instruction: str, file: FileRecord) -> str:
        language = file.language or "text"
        return MODIFIER_DIRECTIVE.format(
            language=language,
            path=file.path,
            instruction=instruction,
            content=file.content,
        )

    def execute(self, instruction: str, file: FileRecord) -> AgentResult:
        """Modify ``file`` according to ``instruction``.

        Returns:
            AgentResult: ``data`` holds a :class:`ModificationData`. The
            modified file keeps the original id and path; its content falls
            back to the original when the completion has no code block.
        """

        response = self._generate(self.build_prompt(instruction, file))
        if not response.success:
            return self._failure(response)

        skip = () if (file.language or "").lower() == "json" else ("json",)
        content = first_code_block(response.content, skip_languages=skip)
        if content is None:
            content = file.content
        modified = file.model_copy(update={"content": content})
        data = ModificationData(
            original_file=file,
            modified_file=modified,
            changes=self.parse_changes(response.content),
        )
        return AgentResult(success=True, data=data, metadata=self._metadata(response))

    def parse_changes(self, completion: str) -> List[CodeChange]:
        """Return the changes listed in the completion, or one generic change."""

        changes: List[CodeChange] = []
        try:
            payload = extract_json(completion) if "```json" in completion else None
            if isinstance(payload, dict) and isinstance(payload.get("changes"), list):
                changes = [CodeChange.model_validate(item) for item in payload["changes"]]
        except (ValueError, ValidationError) as exc:
            LOGGER.debug("Could not parse reported changes: %s", exc)
            changes = []
        return changes or [CodeChange(type="modify", description=GENERIC_CHANGE)]


__all__ = ["CodeModifierAgent", "GENERIC_CHANGE", "MODIFIER_DIRECTIVE"]
