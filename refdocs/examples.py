"""Example blocks: the ``title:/desc:/lang:`` mini-format and highlighting."""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Mapping, Optional, Protocol, Sequence, Union

from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexers import TextLexer, get_lexer_by_name
from pygments.util import ClassNotFound

from .config import DEFAULT_THEMES
from .logging import get_logger
from .models import ContentNode, OutputFormat

logger = get_logger("examples")

EXAMPLE_LANGUAGES = ("shell", "json", "javascript", "typescript", "js", "ts")

_EXAMPLE_PATTERN = re.compile(
    r"^(?:title:\s*(.+?)\n)?"
    r"(?:desc:\s*(.+?)\n)?"
    r"(?:(%s):\s*)?"
    r"([\s\S]*)$" % "|".join(EXAMPLE_LANGUAGES)
)

# Heading prefixes used inside Markdown example blocks.
_MARKDOWN_HEADINGS = {f"h{level}": "#" * level + " " for level in range(1, 7)}

ExampleContent = Union[str, List[ContentNode]]


@dataclass(frozen=True)
class Example:
    """One parsed ``@example`` block."""

    title: Optional[str]
    desc: Optional[str]
    lang: Optional[str]
    code: str


def parse_example(text: str) -> Example:
    match = _EXAMPLE_PATTERN.match(text)
    if match is None:  # pragma: no cover - the trailing group matches anything
        return Example(title=None, desc=None, lang=None, code=text)
    title, desc, lang, code = match.groups()
    return Example(title=title, desc=desc, lang=lang, code=code or "")


class Highlighter(Protocol):
    """Turns example code into styled markup plus the CSS it needs."""

    def highlight(self, code: str, lang: str) -> str: ...

    def css(self) -> str: ...


class PygmentsHighlighter:
    """Class-based Pygments output with light and dark stylesheets."""

    def __init__(self, themes: Mapping[str, str] | None = None, class_prefix: str = "") -> None:
        self.themes = {**DEFAULT_THEMES, **dict(themes or {})}
        self.class_prefix = class_prefix
        self.css_class = f"{class_prefix}highlight"

    def _formatter(self, theme: str) -> HtmlFormatter:
        return HtmlFormatter(
            style=self.themes[theme],
            classprefix=self.class_prefix,
            cssclass=self.css_class,
            wrapcode=True,
        )

    def highlight(self, code: str, lang: str) -> str:
        try:
            lexer = get_lexer_by_name(lang)
        except ClassNotFound:
            lexer = TextLexer()
        return highlight(code, lexer, self._formatter("light"))

    def css(self) -> str:
        selector = f".{self.css_class}"
        light = self._formatter("light").get_style_defs(selector)
        dark = self._formatter("dark").get_style_defs(selector)
        return f"{light}\n@media (prefers-color-scheme: dark) {{\n{dark}\n}}"


def _read_text(path: Path) -> str:
    return path.read_text(encoding="utf-8")


class ExampleRenderer:
    """Renders ``@example`` blocks for one output format.

    Code starting with ``.`` names a file relative to the documented
    directory; a file that cannot be read drops that example's code only.
    """

    def __init__(
        self,
        root: Path,
        highlighter: Highlighter | None = None,
        reader: Callable[[Path], str] | None = None,
    ) -> None:
        self.root = root
        self.highlighter = highlighter or PygmentsHighlighter()
        self._reader = reader or _read_text

    def render(
        self, examples: Sequence[str], dir: str, tag: str, fmt: OutputFormat
    ) -> Optional[ExampleContent]:
        """Return Markdown text or HTML nodes, or ``None`` when nothing remains."""
        blocks: List[str] = []
        nodes: List[ContentNode] = []

        for text in examples:
            example = parse_example(text)
            code = self._load_code(example.code, dir)

            block = ""
            if example.title:
                block += "\n" + _MARKDOWN_HEADINGS[tag] + example.title + "\n"
                nodes.append(ContentNode(tag=tag, content=example.title))
            if example.desc:
                block += "\n" + example.desc + "\n"
                nodes.append(ContentNode(tag="p", content=example.desc))
            if example.lang and code:
                block += f"\n```{example.lang}\n{code}\n```"
                if fmt is OutputFormat.HTML:
                    markup = self.highlighter.highlight(code, example.lang)
                    nodes.append(ContentNode(content=markup, raw=True))
            if block:
                blocks.append(block)

        if fmt is OutputFormat.HTML:
            return nodes or None
        return "\n" + "\n".join(blocks) if blocks else None

    def css(self) -> str:
        return self.highlighter.css()

    def _load_code(self, code: str, dir: str) -> Optional[str]:
        if not code.startswith("."):
            return code
        path = (self.root / dir / code.strip()).resolve()
        try:
            return self._reader(path)
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Skipping example code from %s: %s", path, exc)
            return None


__all__ = [
    "EXAMPLE_LANGUAGES",
    "Example",
    "ExampleRenderer",
    "Highlighter",
    "PygmentsHighlighter",
    "parse_example",
]
