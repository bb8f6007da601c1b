"""Infer a file identity for a code block from its content alone."""

from __future__ import annotations

import re
from typing import Optional

from .detectors import LanguageDetector
from .models import FileIdentity

_COMPONENT_MARKERS = ("import React", "React.FC", "JSX.Element")
_COMPONENT_NAME = re.compile(
    r"(?:export\s+(?:default\s+)?(?:class|const|function)\s+([A-Z][a-zA-Z0-9]+))"
    r"|(?:(?:class|const|function)\s+([A-Z][a-zA-Z0-9]+))"
)
_HOOK_EXPORT = re.compile(r"export\s+(?:const|function)\s+(use[A-Z][a-zA-Z0-9]+)")
_EXPORTED_NAME = re.compile(r"export\s+(?:class|const|function)\s+([A-Z][a-zA-Z0-9]+)")
_SERVICE_HINTS = ("Service", "API", "Client")
_UTIL_HINTS = ("Utils", "Helper", "Util")
_STYLE_PROPERTIES = ("margin", "padding", "color", "display")
_SCSS_MARKERS = ("$", "@mixin", "@include")
_TEST_CALLS = ("test(", "describe(", "it(", "expect(")
_MARKUP_MARKERS = ("<!DOCTYPE", "<html", "<body")
_TYPE_MARKERS = ("interface ", "type ", "enum ")


def infer_identity(
    content: str,
    index: int,
    declared_language: Optional[str] = None,
    *,
    detector: LanguageDetector | None = None,
) -> FileIdentity:
    """Return the most plausible identity for a code block.

    Signatures are checked in priority order: framework component, hook,
    exported service/utility, stylesheet, package manifest, test suite,
    markup document, type declarations, then the block's declared language,
    then a generic text file.

    Args:
        content: Block content without fences.
        index: 1-based position of the block, used to name anonymous files.
        declared_language: Language tag from the opening fence, if any.
        detector: Optional language detector override.

    Returns:
        FileIdentity: Inferred name, path, and language.
    """

    detector = detector or LanguageDetector()

    if any(marker in content for marker in _COMPONENT_MARKERS):
        match = _COMPONENT_NAME.search(content)
        if match:
            component = match.group(1) or match.group(2)
            return FileIdentity(f"{component}.tsx", f"src/components/{component}.tsx", "typescript")

    if "useState" in content or "useEffect" in content or _HOOK_EXPORT.search(content):
        match = _HOOK_EXPORT.search(content)
        if match:
            hook = match.group(1)
            return FileIdentity(f"{hook}.ts", f"src/hooks/{hook}.ts", "typescript")

    if any(marker in content for marker in ("export class", "export const", "export function")):
        match = _EXPORTED_NAME.search(content)
        if match:
            exported = match.group(1)
            if any(hint in exported for hint in _SERVICE_HINTS):
                return FileIdentity(f"{exported}.ts", f"src/services/{exported}.ts", "typescript")
            if any(hint in exported for hint in _UTIL_HINTS):
                return FileIdentity(f"{exported}.ts", f"src/utils/{exported}.ts", "typescript")

    if (
        "{" in content
        and "}" in content
        and any(prop in content for prop in _STYLE_PROPERTIES)
    ):
        extension = "scss" if any(marker in content for marker in _SCSS_MARKERS) else "css"
        name = f"styles{index}.{extension}"
        return FileIdentity(name, f"src/styles/{name}", extension)

    if '"name"' in content and '"version"' in content and '"dependencies"' in content:
        return FileIdentity("package.json", "package.json", "json")

    if any(call in content for call in _TEST_CALLS):
        name = f"test{index}.test.tsx"
        return FileIdentity(name, f"src/tests/{name}", "typescript")

    if any(marker in content for marker in _MARKUP_MARKERS):
        name = f"index{index}.html"
        return FileIdentity(name, f"public/{name}", "html")

    if any(marker in content for marker in _TYPE_MARKERS):
        name = f"types{index}.ts"
        return FileIdentity(name, f"src/types/{name}", "typescript")

    if declared_language:
        name = f"file{index}.{detector.extension_for(declared_language)}"
        return FileIdentity(name, f"src/generated/{name}", declared_language)

    name = f"file{index}.txt"
    return FileIdentity(name, f"src/generated/{name}", "text")


__all__ = ["infer_identity"]
