"""HTML walker with heading anchors and a nested heading index."""

from __future__ import annotations

import html
import re
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Set

from ..models import ContentNode, Heading
from ..normalize import slugify

AttrFilter = Callable[[Dict[str, str], ContentNode, str], Dict[str, str]]

HEADING_LEVELS: Dict[str, int] = {f"h{level}": level for level in range(1, 7)}

_INLINE_RULES = (
    (re.compile(r"\*\*(.*?)\*\*"), r"<strong>\1</strong>"),
    (re.compile(r"\*(.*?)\*"), r"<em>\1</em>"),
    (re.compile(r"`([^`]+)`"), r"<code>\1</code>"),
    (re.compile(r"\[([^\]]+)\]\(([^)]+)\)"), r'<a href="\2">\1</a>'),
)


def markdown_to_html(value: str) -> str:
    """Convert inline bold, italic, code and links."""
    for pattern, replacement in _INLINE_RULES:
        value = pattern.sub(replacement, value)
    return value


def keep_attrs(attrs: Dict[str, str], node: ContentNode, parent_tag: str) -> Dict[str, str]:
    return attrs


@dataclass
class HtmlPage:
    """Rendered body plus the metadata collected while walking."""

    body: str
    title: str
    headings: List[Heading]


@dataclass
class _PageState:
    attr_filter: AttrFilter
    title: str = ""
    headings: List[Heading] = field(default_factory=list)
    ids: Set[str] = field(default_factory=set)
    out: List[str] = field(default_factory=list)


class HtmlRenderer:
    """Serializes content trees to HTML.

    Each call to :meth:`render` works on fresh page state, so one renderer
    can be shared between pages and threads.
    """

    def __init__(self, attr_filter: AttrFilter | None = None) -> None:
        self.attr_filter = attr_filter or keep_attrs

    def render(self, node: ContentNode) -> HtmlPage:
        state = _PageState(attr_filter=self.attr_filter)
        self._walk(node, "", state)
        return HtmlPage(body="".join(state.out), title=state.title, headings=state.headings)

    def _walk(self, node: ContentNode, parent_tag: str, state: _PageState) -> None:
        content = node.content
        if not content:
            return

        tag = node.tag or ""
        is_text = isinstance(content, str)
        level = HEADING_LEVELS.get(tag)
        is_link = bool(node.link) and tag == "a"
        is_permalink = is_link and is_text and parent_tag in HEADING_LEVELS

        attrs: Dict[str, str] = {}
        anchor = ""
        if level and is_text:
            anchor = self._register_heading(state, tag, level, content)
            attrs["id"] = anchor
        if is_link:
            attrs["href"] = node.link or ""
        if is_permalink:
            attrs["aria-label"] = content

        attrs = state.attr_filter(attrs, node, parent_tag)
        rendered_attrs = "".join(f' {key}="{html.escape(value)}"' for key, value in attrs.items())

        if tag:
            state.out.append(f"<{tag}{rendered_attrs}>")

        if is_text:
            if is_permalink:
                state.out.append("#")
            else:
                state.out.append(content if node.raw else markdown_to_html(content))
            if level:
                permalink = ContentNode(tag="a", content=f"Permalink: {content}", link=f"#{anchor}")
                self._walk(permalink, tag, state)
        else:
            for child in content:
                self._walk(child, tag or parent_tag, state)

        if tag:
            state.out.append(f"</{tag}>")

    def _register_heading(self, state: _PageState, tag: str, level: int, title: str) -> str:
        base = slugify(title)
        anchor = base
        suffix = 0
        while anchor in state.ids:
            suffix += 1
            anchor = f"{base}-{suffix}"
        state.ids.add(anchor)

        if level == 1:
            if not state.title:
                state.title = title
            return anchor

        entry = Heading(id=anchor, tag=tag, title=title)
        if level == 2:
            state.headings.append(entry)
        elif state.headings:
            # Attach below the nearest open heading one level up, tolerating skipped levels.
            parent = state.headings[-1]
            while HEADING_LEVELS[parent.tag] < level - 1 and parent.children:
                parent = parent.children[-1]
            parent.children.append(entry)
        return anchor


def render_html(node: ContentNode, attr_filter: AttrFilter | None = None) -> HtmlPage:
    return HtmlRenderer(attr_filter).render(node)


__all__ = [
    "AttrFilter",
    "HEADING_LEVELS",
    "HtmlPage",
    "HtmlRenderer",
    "keep_attrs",
    "markdown_to_html",
    "render_html",
]
