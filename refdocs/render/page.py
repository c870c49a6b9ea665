"""Full HTML documents around rendered page bodies."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List

from jinja2 import Environment, FileSystemLoader, select_autoescape

from ..models import Heading, NavigationItem

PAGE_TEMPLATE = "page.html.j2"


@dataclass(frozen=True)
class HtmlOutput:
    """Everything an output filter may need to build its own document."""

    body: str
    id: str
    title: str
    slug: str
    navigation: List[NavigationItem]
    headings: List[Heading]
    css: str = ""


OutputFilter = Callable[[HtmlOutput], str]


class PageTemplate:
    """Default document wrapper, looked up in ``templates_dir`` first."""

    def __init__(self, templates_dir: Path | None = None) -> None:
        directories = []
        if templates_dir:
            directories.append(str(templates_dir))
        directories.append(str(Path(__file__).with_name("templates")))
        self._env = Environment(
            loader=FileSystemLoader(directories),
            autoescape=select_autoescape(["html", "j2"]),
        )

    def render(self, output: HtmlOutput) -> str:
        template = self._env.get_template(PAGE_TEMPLATE)
        return template.render(
            body=output.body,
            id=output.id,
            title=output.title,
            slug=output.slug,
            navigation=output.navigation,
            headings=output.headings,
            css=output.css,
        )


__all__ = ["HtmlOutput", "OutputFilter", "PAGE_TEMPLATE", "PageTemplate"]
