"""Language detection and content hashing used by the splitter."""

from __future__ import annotations

_BASE36_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"

_EXTENSION_TO_LANGUAGE = {
    "js": "javascript",
    "jsx": "javascript",
    "ts": "typescript",
    "tsx": "typescript",
    "css": "css",
    "scss": "scss",
    "html": "html",
    "json": "json",
    "md": "markdown",
    "py": "python",
    "java": "java",
    "c": "c",
    "cpp": "cpp",
    "cs": "csharp",
    "go": "go",
    "rb": "ruby",
    "php": "php",
    "swift": "swift",
    "kt": "kotlin",
}

_LANGUAGE_TO_EXTENSION = {
    "javascript": "js",
    "typescript": "ts",
    "jsx": "jsx",
    "tsx": "tsx",
    "css": "css",
    "scss": "scss",
    "html": "html",
    "json": "json",
    "markdown": "md",
    "python": "py",
    "java": "java",
    "c": "c",
    "cpp": "cpp",
    "csharp": "cs",
    "go": "go",
    "ruby": "rb",
    "php": "php",
    "swift": "swift",
    "kotlin": "kt",
}


class LanguageDetector:
    """Map between file extensions and language labels."""

    def from_extension(self, extension: str) -> str:
        """Return the language for an extension, or ``text`` when unknown."""
        return _EXTENSION_TO_LANGUAGE.get(extension.lower().lstrip("."), "text")

    def from_path(self, path: str) -> str:
        """Return the language implied by the extension of ``path``."""
        name = path.rsplit("/", 1)[-1]
        if "." not in name:
            return "text"
        return self.from_extension(name.rsplit(".", 1)[-1])

    def extension_for(self, language: str) -> str:
        """Return the canonical extension for a language tag, or ``txt``."""
        return _LANGUAGE_TO_EXTENSION.get(language.lower(), "txt")


class ContentHasher:
    """Compute a 32-bit rolling hash of text content.

    The hash walks UTF-16 code units with ``h = h * 31 + unit`` wrapped to a
    signed 32-bit integer and renders the absolute value in base 36. It is a
    cheap fingerprint for spotting repeated candidates, not a collision-proof
    digest.
    """

    def compute(self, content: str) -> str:
        """Return the base-36 fingerprint of ``content``."""
        data = content.encode("utf-16-le", errors="surrogatepass")
        value = 0
        for offset in range(0, len(data), 2):
            unit = data[offset] | (data[offset + 1] << 8)
            value = (value * 31 + unit) & 0xFFFFFFFF
        if value >= 0x80000000:
            value -= 0x100000000
        return _to_base36(abs(value))


def _to_base36(number: int) -> str:
    if number == 0:
        return "0"
    digits = []
    while number:
        number, remainder = divmod(number, 36)
        digits.append(_BASE36_DIGITS[remainder])
    return "".join(reversed(digits))


__all__ = ["ContentHasher", "LanguageDetector"]
