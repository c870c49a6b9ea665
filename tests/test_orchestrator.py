"""Tests for refdocs.orchestrator."""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path

import pytest

from refdocs.config import DocsOptions
from refdocs.models import DocSet
from refdocs.orchestrator import Orchestrator
from refdocs.render.page import HtmlOutput
from tests._fixtures.project_builder import ProjectBuilder
from tests._fixtures.records import raw, record


def _docset(out_dir: bool = False) -> DocSet:
    units = {
        "src/test": [
            record("one", "function", description="One."),
            record("two", "function"),
        ],
        "src/test/const": [
            record("A", "constant", dir="src/test/const", types=["number"]),
            record("B", "constant", dir="src/test/const", types=["number"]),
        ],
    }
    docset = DocSet()
    for dir, items in units.items():
        records = raw(*items)
        if out_dir:
            for item in records:
                item.meta.filename_out = dir.replace("src/", "", 1)
        docset.records.extend(records)
        docset.units[dir] = records
    docset.index_records = raw(
        record("index", "file", dir="src", description="title: Home\nWelcome.", tags=[{"title": "index"}])
    )
    return docset


def test_run_markdown_writes_a_readme_per_unit(options: DocsOptions, highlighter) -> None:
    orchestrator = Orchestrator(highlighter=highlighter)

    written = orchestrator.run_markdown(options, _docset())

    root = options.root
    assert written == [
        root / "src" / "test" / "README.md",
        root / "src" / "test" / "const" / "README.md",
        root / "README.md",
    ]
    assert (root / "src" / "test" / "README.md").read_text(encoding="utf-8").startswith("# Test")
    index = (root / "README.md").read_text(encoding="utf-8")
    assert index.startswith("# Home  \n\nWelcome.")
    assert '<a href="https://test.docs/src/test/const/README.md">Const</a>' in index


def test_run_markdown_honours_out_dir(options: DocsOptions, highlighter) -> None:
    options = replace(options, out_dir="reference")

    written = Orchestrator(highlighter=highlighter).run_markdown(options, _docset(out_dir=True))

    root = options.root
    assert written == [
        root / "reference" / "src" / "test" / "README.md",
        root / "reference" / "src" / "test" / "const" / "README.md",
        root / "reference" / "README.md",
    ]
    index = written[-1].read_text(encoding="utf-8")
    assert '<a href="https://test.docs/test/const/README.md">Const</a>' in index


def test_run_html_passes_page_data_to_the_output_filter(options: DocsOptions, highlighter) -> None:
    options = replace(options, out_dir="docs")
    outputs = []

    def output_filter(output: HtmlOutput) -> str:
        outputs.append(output)
        return f"<main>{output.body}</main>"

    written = Orchestrator(highlighter=highlighter).run_html(
        options, _docset(out_dir=True), output_filter=output_filter
    )

    docs = options.root / "docs"
    assert written == [
        docs / "test" / "index.html",
        docs / "test" / "const" / "index.html",
        docs / "index.html",
    ]
    assert [(o.id, o.title, o.slug) for o in outputs] == [
        ("test", "Test", "/test/"),
        ("test-const", "Const", "/test/const/"),
        ("", "Home", "/"),
    ]
    assert [item.to_dict() for item in outputs[0].navigation] == [
        {
            "id": "test",
            "title": "Test",
            "link": "/test/",
            "children": [{"id": "test-const", "title": "Const", "link": "/test/const/"}],
        }
    ]
    assert outputs[0].css == ".stub{}"
    assert [heading.title for heading in outputs[0].headings] == ["one", "two"]
    assert written[0].read_text(encoding="utf-8").startswith('<main><h1 id="test">Test')


def test_run_html_uses_the_page_template_by_default(options: DocsOptions, highlighter) -> None:
    options = replace(options, out_dir="docs")

    written = Orchestrator(highlighter=highlighter).run_html(options, _docset(out_dir=True))

    document = written[0].read_text(encoding="utf-8")
    assert document.startswith('<!DOCTYPE html><html lang="en"><head><title>Test</title>')
    assert "<style>.stub{}</style>" in document


def test_run_html_applies_the_attr_filter(options: DocsOptions, highlighter) -> None:
    options = replace(options, out_dir="docs")

    def attr_filter(attrs, node, parent_tag):
        if node.tag == "h1":
            return {**attrs, "class": "title"}
        return attrs

    written = Orchestrator(highlighter=highlighter).run_html(
        options, _docset(out_dir=True), attr_filter=attr_filter, output_filter=lambda o: o.body
    )

    assert written[0].read_text(encoding="utf-8").startswith('<h1 id="test" class="title">')


def test_write_failures_propagate(options: DocsOptions, highlighter) -> None:
    options = replace(options, out_dir="docs")
    (options.root / "docs").write_text("not a directory", encoding="utf-8")

    with pytest.raises(OSError):
        Orchestrator(highlighter=highlighter).run_html(options, _docset(out_dir=True))


def test_run_markdown_collects_sources_when_no_docset_given(
    project_builder: ProjectBuilder, highlighter
) -> None:
    project_builder.write({"src/test/a.js": "/** A. */\nexport const a = 1\n"})
    options = DocsOptions(root=project_builder.path(), include=["src/**/*.js"])

    class Explainer:
        def explain(self, source: str, *, cwd: Path):
            return [record("a", "constant", exported=True, types=["number"], description="A.")]

    written = Orchestrator(explainer=Explainer(), highlighter=highlighter).run_markdown(options)

    assert written == [project_builder.path() / "src" / "test" / "README.md"]
    assert written[0].read_text(encoding="utf-8").startswith("# a")
