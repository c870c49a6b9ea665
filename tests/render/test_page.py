"""Tests for refdocs.render.page."""

from __future__ import annotations

from pathlib import Path

from refdocs.models import NavigationItem
from refdocs.render.page import HtmlOutput, PageTemplate


def _output(**overrides) -> HtmlOutput:
    values = dict(
        body="<h1>Test</h1>",
        id="test",
        title="Test & More",
        slug="/test/",
        navigation=[NavigationItem(id="test", title="Test", link="/test/")],
        headings=[],
        css=".highlight{}",
    )
    values.update(overrides)
    return HtmlOutput(**values)


def test_default_template_wraps_body_and_css() -> None:
    document = PageTemplate().render(_output())

    assert document == (
        '<!DOCTYPE html><html lang="en"><head><title>Test &amp; More</title>'
        "<style>.highlight{}</style></head><body><h1>Test</h1></body></html>"
    )


def test_templates_dir_overrides_the_default(tmp_path: Path) -> None:
    (tmp_path / "page.html.j2").write_text(
        "{{ id }}|{{ slug }}|{% for item in navigation %}{{ item.link }}{% endfor %}",
        encoding="utf-8",
    )

    document = PageTemplate(tmp_path).render(_output())

    assert document == "test|/test/|/test/"
