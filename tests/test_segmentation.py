"""Tests for multi-file detection and code splitting."""

from __future__ import annotations

from conftest import FIXTURES

from codestorm.segmentation import (
    CodeSplitter,
    ContentHasher,
    LanguageDetector,
    count_indicators,
    infer_identity,
    needs_segmentation,
)

CART = """\
export class Cart {
  private items: string[] = [];

  add(item: string): void {
    this.items.push(item);
  }
}
"""


def test_two_line_comment_headers_yield_two_files() -> None:
    text = (
        "// src/x.ts\n"
        "export const first = 'a value long enough to keep this section';\n"
        "// src/y.ts\n"
        "export const second = 'another value long enough to keep this one';\n"
    )

    result = CodeSplitter().split(text)

    assert result.success
    assert [record.path for record in result.files] == ["src/x.ts", "src/y.ts"]
    assert all(record.language == "typescript" for record in result.files)
    assert all(record.content.endswith("\n") for record in result.files)
    assert "// src/" not in result.files[0].content


def test_fixture_response_splits_into_modules() -> None:
    text = (FIXTURES / "multi_file_response.md").read_text(encoding="utf-8")

    result = CodeSplitter().split(text)

    assert result.success
    assert [record.name for record in result.files] == ["cart.ts", "checkout.ts"]
    assert result.files[0].content.startswith("export class Cart")
    assert result.message == "Extracted 2 file(s) from the supplied text."


def test_header_paths_are_rooted_under_src() -> None:
    text = f"File: ./lib/cart.ts\n{CART}\nFile: package.json\n" + (
        '{"name": "shop", "version": "1.0.0", "dependencies": {"left-pad": "1.3.0"}}\n'
    )

    result = CodeSplitter().split(text)

    assert [record.path for record in result.files] == ["src/lib/cart.ts", "package.json"]
    assert result.files[1].language == "json"


def test_short_header_sections_are_discarded() -> None:
    text = f"// src/tiny.ts\nexport const a = 1;\n// src/cart.ts\n{CART}"

    result = CodeSplitter().split(text)

    assert [record.path for record in result.files] == ["src/cart.ts"]


def test_fenced_blocks_are_named_from_content() -> None:
    text = (
        "Component:\n```tsx\nimport React from 'react';\n\n"
        "export const Navbar = () => <nav className=\"navbar\">Links</nav>;\n```\n"
        "Styles:\n```css\n.navbar {\n  display: flex;\n  padding: 1rem 2rem;\n"
        "  color: #fff;\n}\n```\n"
    )

    result = CodeSplitter().split(text)

    assert result.success
    assert [record.path for record in result.files] == [
        "src/components/Navbar.tsx",
        "src/styles/styles2.css",
    ]


def test_short_fenced_blocks_still_advance_the_index() -> None:
    text = (
        "```js\nlet a = 1;\n```\n"
        "```python\nvalues = [number * 2 for number in range(100) if number % 3 == 0]\n```\n"
    )

    result = CodeSplitter().split(text)

    assert [record.path for record in result.files] == ["src/generated/file2.py"]


def test_indented_blocks_are_used_without_fences() -> None:
    text = (
        "The helper looks like this:\n\n"
        "    const total = items.reduce((sum, item) => sum + item.price, 0);\n"
        "    console.log(total);\n"
    )

    result = CodeSplitter().split(text)

    assert result.success
    assert result.files[0].path == "src/generated/file1.txt"
    assert result.files[0].content.startswith("const total")


def test_identical_component_blocks_are_deduplicated() -> None:
    block = (
        "```tsx\nimport React from 'react';\n\n"
        "export const Navbar = () => <nav className=\"navbar\">Links</nav>;\n```\n"
    )

    result = CodeSplitter().split(block + "Repeated:\n" + block)

    assert [record.name for record in result.files] == ["Navbar.tsx"]


def test_same_content_under_different_names_is_kept() -> None:
    block = "```python\nvalues = [number * 2 for number in range(100) if number % 3 == 0]\n```\n"

    result = CodeSplitter().split(block + "Again:\n" + block)

    assert [record.name for record in result.files] == ["file1.py", "file2.py"]


def test_duplicate_headers_keep_first_occurrence() -> None:
    text = f"// src/cart.ts\n{CART}// src/cart.ts\n{CART}"

    result = CodeSplitter().split(text)

    assert [record.path for record in result.files] == ["src/cart.ts"]


def test_split_reports_failure_when_nothing_is_found() -> None:
    result = CodeSplitter().split("Just prose, no code at all.")

    assert not result.success
    assert result.files == []
    assert result.error == "No files could be identified in the supplied text."


def test_segmentation_threshold_is_exclusive() -> None:
    two = "function a() {}\nfunction b() {}\n"
    three = two + "function c() {}\n"

    assert count_indicators(two) == 2
    assert not needs_segmentation(two)
    assert needs_segmentation(three)
    assert not needs_segmentation(three, threshold=3)


def test_infer_identity_priorities() -> None:
    assert infer_identity("export const useCart = () => useState([]);", 1).path == (
        "src/hooks/useCart.ts"
    )
    assert infer_identity("export class PaymentService {}", 1).path == (
        "src/services/PaymentService.ts"
    )
    assert infer_identity("describe('cart', () => { it('adds', () => {}); });", 4).path == (
        "src/tests/test4.test.tsx"
    )
    assert infer_identity("<!DOCTYPE html><html></html>", 2).path == "public/index2.html"
    assert infer_identity("interface Item { id: string }", 3).path == "src/types/types3.ts"
    assert infer_identity("print('hi')", 5, "python").path == "src/generated/file5.py"
    assert infer_identity("plain words", 6).language == "text"


def test_scss_is_detected_from_variables() -> None:
    identity = infer_identity("$accent: #ffb300;\n.button {\n  color: $accent;\n}", 1)

    assert identity.path == "src/styles/styles1.scss"
    assert identity.language == "scss"


def test_language_detector_and_hasher() -> None:
    detector = LanguageDetector()
    hasher = ContentHasher()

    assert detector.from_path("src/app.tsx") == "typescript"
    assert detector.from_path("Makefile") == "text"
    assert detector.extension_for("python") == "py"
    assert detector.extension_for("brainfuck") == "txt"
    assert hasher.compute("same") == hasher.compute("same")
    assert hasher.compute("same") != hasher.compute("different")
