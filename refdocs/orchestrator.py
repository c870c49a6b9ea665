"""Pipeline orchestration for the markdown and html runs."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

from .config import DocsOptions
from .examples import ExampleRenderer, Highlighter, PygmentsHighlighter
from .logging import get_logger
from .models import ContentNode, DocSet, Heading, NavigationItem, OutputFormat
from .render.html import AttrFilter, HtmlRenderer
from .render.markdown import render_markdown
from .render.navigation import build_navigation
from .render.page import HtmlOutput, OutputFilter, PageTemplate
from .sources import JsdocExplainer, SourceCollector, Transpiler
from .units import UnitAssembler

README_NAME = "README.md"
HTML_INDEX_NAME = "index.html"


@dataclass
class _PendingPage:
    path: Path
    body: str
    id: str
    title: str
    slug: str
    headings: List[Heading]


class Orchestrator:
    """Coordinates record collection, unit assembly and file output."""

    def __init__(
        self,
        explainer: JsdocExplainer | None = None,
        highlighter: Highlighter | None = None,
        transpile: Transpiler | None = None,
    ) -> None:
        self.explainer = explainer
        self.highlighter = highlighter
        self.transpile = transpile
        self.logger = get_logger("orchestrator")

    def run_markdown(self, options: DocsOptions, docset: DocSet | None = None) -> List[Path]:
        """Write one ``README.md`` per unit and return the written paths.

        The index unit lands beside the source directory rather than in it.
        """
        units, _ = self._assemble(options, docset, OutputFormat.MARKDOWN)
        written: List[Path] = []

        for dir, node in units.items():
            parts = [options.out_dir or "", dir]
            if dir == options.src_dir:
                parts.append("..")
            path = Path(os.path.normpath(options.root.joinpath(*parts))) / README_NAME
            self._write(path, render_markdown(node))
            written.append(path)

        self.logger.info("Wrote %d Markdown files", len(written))
        return written

    def run_html(
        self,
        options: DocsOptions,
        docset: DocSet | None = None,
        *,
        attr_filter: AttrFilter | None = None,
        output_filter: OutputFilter | None = None,
    ) -> List[Path]:
        """Write one ``index.html`` per unit below ``out_dir``."""
        units, examples = self._assemble(options, docset, OutputFormat.HTML)
        renderer = HtmlRenderer(attr_filter)
        out_dir = options.root / (options.out_dir or "docs")
        css = examples.css()

        pages: List[_PendingPage] = []
        nav_items: List[NavigationItem] = []

        for dir, node in units.items():
            rel_dir = options.relative_dir(dir)
            page_id = rel_dir.replace("/", "-")
            slug = f"/{rel_dir}/" if rel_dir else "/"
            rendered = renderer.render(node)
            pages.append(
                _PendingPage(
                    path=out_dir / rel_dir / HTML_INDEX_NAME,
                    body=rendered.body,
                    id=page_id,
                    title=rendered.title,
                    slug=slug,
                    headings=rendered.headings,
                )
            )
            if rel_dir:
                nav_items.append(NavigationItem(id=page_id, title=rendered.title, link=slug))

        navigation = build_navigation(nav_items)
        render_page = output_filter or PageTemplate(options.templates_dir).render

        for page in pages:
            output = HtmlOutput(
                body=page.body,
                id=page.id,
                title=page.title,
                slug=page.slug,
                navigation=navigation,
                headings=page.headings,
                css=css,
            )
            self._write(page.path, render_page(output))

        self.logger.info("Wrote %d HTML files to %s", len(pages), out_dir)
        return [page.path for page in pages]

    def collect(self, options: DocsOptions) -> DocSet:
        collector = SourceCollector(options, self.explainer, self.transpile)
        return collector.collect()

    def _assemble(
        self, options: DocsOptions, docset: Optional[DocSet], fmt: OutputFormat
    ) -> tuple[Dict[str, ContentNode], ExampleRenderer]:
        if docset is None:
            docset = self.collect(options)
        highlighter = self.highlighter or PygmentsHighlighter(options.themes, options.class_prefix)
        examples = ExampleRenderer(options.root, highlighter)
        units = UnitAssembler(options, examples).assemble(docset, fmt)
        self.logger.debug("Assembled %d %s units", len(units), fmt.value)
        return units, examples

    def _write(self, path: Path, text: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        self.logger.debug("Wrote %s", path)


__all__ = ["HTML_INDEX_NAME", "Orchestrator", "README_NAME"]
