"""Code generation agent: produce the content of one planned file."""

from __future__ import annotations

import logging
from typing import Optional

from codestorm.files.models import FileRecord, file_name_from_path
from codestorm.segmentation.detectors import LanguageDetector

from .base import Agent, AgentResult, TextGenerator
from .models import FileDescription
from .parsing import first_code_block

LOGGER = logging.getLogger(__name__)

GENERATOR_DIRECTIVE = """\
Act as an expert {language} developer. Generate the code for one file of a project.

PROJECT CONTEXT:
{project_context}

FILE TO GENERATE:
Path: {path}
Description: {description}
{dependencies}
Write complete, working code (not a skeleton) that implements everything the
description asks for and stays compatible with the listed dependencies.

Reply ONLY with the file content in a single fenced block:

```{language}
// code here
```
"""

_HTML_SKELETON = """\
<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>{stem}</title>
  <link rel="stylesheet" href="styles.css">
</head>
<body>
  <main>
    <h1>{stem}</h1>
  </main>
</body>
</html>
"""

_CSS_SKELETON = """\
/* Default stylesheet generated for {path} */
body {{
  margin: 0;
  font-family: system-ui, sans-serif;
  background: #0d1421;
  color: #ffffff;
}}
"""

_SCRIPT_SKELETON = """\
// Default content generated for {path}
function init() {{
  console.log("{name} loaded");
}}

document.addEventListener("DOMContentLoaded", init);
"""

_PYTHON_SKELETON = '''\
"""Default content generated for {path}."""


def main() -> None:
    print("{name} loaded")


if __name__ == "__main__":
    main()
'''


def default_content(path: str) -> str:
    """Return placeholder content for ``path`` based on its extension."""

    name = file_name_from_path(path)
    stem, _, extension = name.rpartition(".")
    extension = extension.lower() if stem else ""
    stem = stem or name
    if extension == "html":
        return _HTML_SKELETON.format(stem=stem)
    if extension in {"css", "scss"}:
        return _CSS_SKELETON.format(path=path)
    if extension in {"js", "jsx", "ts", "tsx"}:
        return _SCRIPT_SKELETON.format(path=path, name=name)
    if extension == "py":
        return _PYTHON_SKELETON.format(path=path, name=name)
    if extension == "md":
        return f"# {stem}\n"
    if extension == "json":
        return "{}\n"
    return f"Default content generated for {path}\n"


class CodeGeneratorAgent(Agent):
    """Generate a single file from its description and the project context."""

    name = "codeGenerator"

    def __init__(
        self,
        generator: TextGenerator,
        *,
        model_hint: Optional[str] = None,
        detector: Optional[LanguageDetector] = None,
    ) -> None:
        super().__init__(generator, model_hint=model_hint)
        self.detector = detector or LanguageDetector()

    def build_prompt(self, description: FileDescription, project_context: str) -> str:
        dependencies = ""
        if description.dependencies:
            dependencies = f"Dependencies: {', '.join(description.dependencies)}\n"
        return GENERATOR_DIRECTIVE.format(
            language=self.detector.from_path(description.path),
            project_context=project_context,
            path=description.path,
            description=description.description,
            dependencies=dependencies,
        )

    def execute(self, description: FileDescription, project_context: str) -> AgentResult:
        """Generate the file described by ``description``.

        Args:
            description: Planned file path, purpose, and dependencies.
            project_context: Overall project description.

        Returns:
            AgentResult: ``data`` holds the generated :class:`FileRecord`.
        """

        response = self._generate(self.build_prompt(description, project_context))
        if not response.success:
            return self._failure(response)

        record = FileRecord(
            name=file_name_from_path(description.path),
            path=description.path,
            content=self.extract_content(response.content, description.path),
            language=self.detector.from_path(description.path),
            is_new=True,
        )
        return AgentResult(success=True, data=record, metadata=self._metadata(response))

    def extract_content(self, completion: str, path: str) -> str:
        """Return the first fenced block, else the trimmed completion, else a skeleton."""

        block = first_code_block(completion)
        if block:
            return block
        trimmed = completion.strip()
        if trimmed:
            return trimmed
        LOGGER.warning("Empty completion for %s; using default content.", path)
        return default_content(path)


__all__ = ["CodeGeneratorAgent", "GENERATOR_DIRECTIVE", "default_content"]
