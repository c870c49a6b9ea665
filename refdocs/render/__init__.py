"""Markdown and HTML renderers for content trees."""

from .html import AttrFilter, HtmlPage, HtmlRenderer, render_html
from .markdown import MarkdownRenderer, render_markdown
from .navigation import build_navigation
from .page import HtmlOutput, OutputFilter, PageTemplate

__all__ = [
    "AttrFilter",
    "HtmlOutput",
    "HtmlPage",
    "HtmlRenderer",
    "MarkdownRenderer",
    "OutputFilter",
    "PageTemplate",
    "build_navigation",
    "render_html",
    "render_markdown",
]
