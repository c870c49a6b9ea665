"""Markdown walker over content trees."""

from __future__ import annotations

from typing import Dict, List

from ..models import ContentNode

SYMBOLS: Dict[str, str] = {
    "h1": "# ",
    "h2": "\n\n## ",
    "h3": "\n\n### ",
    "h4": "\n\n#### ",
    "h5": "\n\n##### ",
    "h6": "\n\n###### ",
    "strong": "**",
    "code": "`",
    "li": "  \n- ",
    "hr": "\n***",
    "p": "  \n",
}

_PAIRED = {"strong", "code"}


class MarkdownRenderer:
    """Concatenates a content tree into one Markdown string.

    Tags map to the prefix symbols above; ``strong`` and ``code`` also close
    with them. Code holding nested nodes becomes ``<code>`` so links inside it
    survive, and ``a`` nodes with a link become inline HTML anchors.
    """

    def render(self, node: ContentNode) -> str:
        out: List[str] = []
        self._walk(node, "", out)
        return "".join(out)

    def _walk(self, node: ContentNode, outer_tag: str, out: List[str]) -> None:
        tag = node.tag or ""
        content = node.content
        nested = isinstance(content, list)

        start = SYMBOLS.get(tag, "")
        end = start if tag in _PAIRED else ""

        if node.link and tag == "a":
            start, end = f'<a href="{node.link}">', "</a>"
        elif tag == "details":
            start, end = "\n<details>", "\n\n</details>"
        elif tag == "summary":
            start, end = "\n<summary>", "</summary>\n"
        elif nested and tag == "code":
            start, end = "<code>", "</code>"

        out.append(start)
        if tag == "p" and outer_tag != "li":
            out.append("\n")

        if nested:
            for child in content:
                self._walk(child, tag, out)
        else:
            out.append(content)

        out.append(end)


def render_markdown(node: ContentNode) -> str:
    return MarkdownRenderer().render(node)


__all__ = ["MarkdownRenderer", "SYMBOLS", "render_markdown"]
