from __future__ import annotations

from pathlib import Path
from typing import List, Tuple

import pytest

from refdocs.config import DocsOptions
from refdocs.examples import ExampleRenderer
from tests._fixtures.project_builder import ProjectBuilder


class StubHighlighter:
    """Highlighter double that records calls and wraps code in a marker."""

    def __init__(self) -> None:
        self.calls: List[Tuple[str, str]] = []

    def highlight(self, code: str, lang: str) -> str:
        self.calls.append((code, lang))
        return f'<pre class="stub-{lang}">{code}</pre>'

    def css(self) -> str:
        return ".stub{}"


@pytest.fixture
def project_builder(tmp_path: Path) -> ProjectBuilder:
    """Provide a reusable project builder rooted at the pytest tmp_path."""
    return ProjectBuilder(tmp_path)


@pytest.fixture
def highlighter() -> StubHighlighter:
    return StubHighlighter()


@pytest.fixture
def options(tmp_path: Path) -> DocsOptions:
    return DocsOptions(
        root=tmp_path,
        include=["src/**/*.js", "src/**/*.ts"],
        url="https://test.docs",
    )


@pytest.fixture
def examples(tmp_path: Path, highlighter: StubHighlighter) -> ExampleRenderer:
    return ExampleRenderer(tmp_path, highlighter)
