"""Assembly of per-directory output units."""

from __future__ import annotations

import posixpath
import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set, Union

from .builder import TYPES_DEPTH, ContentBuilder
from .config import DocsOptions
from .examples import ExampleRenderer
from .logging import get_logger
from .models import ContentNode, DocSet, OutputFormat, RawRecord
from .normalize import title_case
from .registry import Registry, build_registry
from .resolver import UnitContext

logger = get_logger("units")

_FILE_DESCRIPTION = re.compile(r"^(?:title:\s*(.+?)\n)?([\s\S]*)$")


@dataclass
class IndexEntry:
    title: str
    link: str


@dataclass
class _UnitSections:
    """Content collected for one directory, in output order."""

    vars: List[ContentNode] = field(default_factory=list)
    classes: List[ContentNode] = field(default_factory=list)
    functions: List[ContentNode] = field(default_factory=list)
    used_vars: Set[str] = field(default_factory=set)
    used_classes: Set[str] = field(default_factory=set)
    used_functions: Set[str] = field(default_factory=set)
    title: Optional[str] = None
    desc: Optional[str] = None
    guide: Union[str, List[ContentNode]] = ""
    has_index: bool = False


class UnitAssembler:
    """Turns a :class:`DocSet` into one content tree per output directory.

    Every unit gets its own :class:`UnitContext`, so the used-type sets and
    the trailing types section never leak from one page to the next.
    """

    def __init__(self, options: DocsOptions, examples: ExampleRenderer) -> None:
        self.options = options
        self.examples = examples

    def assemble(self, docset: DocSet, fmt: OutputFormat) -> Dict[str, ContentNode]:
        registry = build_registry(docset.records)
        src_dir = self.options.src_dir
        has_index = docset.index_records is not None

        units: Dict[str, List[RawRecord]] = {
            dir: records for dir, records in docset.units.items() if not (has_index and dir == src_dir)
        }
        if has_index:
            # The index page lists every other unit, so it is built last.
            units[src_dir] = [*docset.units.get(src_dir, []), *(docset.index_records or [])]

        index_map: Dict[str, List[IndexEntry]] = {}
        result: Dict[str, ContentNode] = {}

        for dir, records in units.items():
            is_index = has_index and dir == src_dir
            node = self._assemble_unit(registry, fmt, dir, records, is_index, index_map)
            if node is None:
                logger.debug("Skipping %s: nothing documented", dir)
                continue
            result[dir] = node
            logger.debug("Assembled unit %s (%d nodes)", dir, len(node.content))

        return result

    def _assemble_unit(
        self,
        registry: Registry,
        fmt: OutputFormat,
        dir: str,
        records: List[RawRecord],
        is_index: bool,
        index_map: Dict[str, List[IndexEntry]],
    ) -> Optional[ContentNode]:
        context = UnitContext(registry=registry, fmt=fmt, dir=dir, base_url=self.options.url)
        context.classes = {
            record.name
            for record in records
            if record.kind == "class" and not record.hidden and record.name in registry.classes
        }
        builder = ContentBuilder(context, self.examples)
        single = sum(1 for record in records if record.exported) == 1
        depth = 0 if single else 1
        sections = _UnitSections()

        for record in records:
            if record.hidden:
                continue

            if is_index and record.tags and record.tags[0].title == "index":
                sections.has_index = True

            name = record.name
            kind = record.kind

            if kind == "file":
                match = _FILE_DESCRIPTION.match(record.description or "")
                if match:
                    sections.title, sections.desc = match.group(1), match.group(2)
                if record.examples:
                    sections.guide = self.examples.render(record.examples, dir, "h2", fmt) or ""

            elif kind == "typedef":
                info = registry.types.get(name)
                if info is not None and name not in context.used_types:
                    context.used_types.add(name)
                    context.types.extend(builder.build(info, "typedef", TYPES_DEPTH))

            elif kind in ("member", "constant"):
                info = registry.variables.get(name)
                if info is not None and name not in sections.used_vars:
                    sections.used_vars.add(name)
                    sections.vars.extend(builder.build(info, "typedef", depth))

            elif kind == "function":
                info = registry.functions.get(name)
                if info is not None and name not in sections.used_functions:
                    sections.used_functions.add(name)
                    sections.functions.extend(builder.build(info, "function", depth))

            elif kind == "class":
                info = registry.classes.get(name)
                if info is not None and name not in sections.used_classes:
                    sections.used_classes.add(name)
                    sections.classes.extend(builder.build(info, "class", depth))

        types = context.types
        if not (sections.vars or types or sections.classes or sections.functions or is_index):
            return None

        if types:
            types = [ContentNode(tag="h2", content="Types"), *types]

        rel_dir = self.options.relative_dir(dir)
        dir_base = posixpath.basename(rel_dir)
        dir_title = title_case(dir_base)
        title_filter = self.options.title_filter
        if title_filter is not None and not (single and is_index):
            dir_title = title_filter(dir_title, dir_base)

        guides: List[ContentNode] = []
        if not single:
            guides.append(ContentNode(tag="h1", content=sections.title or dir_title))
            if sections.desc:
                guides.append(ContentNode(tag="p", content=sections.desc))
            guides.append(ContentNode(content=sections.guide))

        if is_index and sections.has_index and index_map:
            guides.extend(self._index_section(index_map))

        if not is_index:
            section = rel_dir.split("/")[0]
            target = rel_dir if self.options.out_dir else dir
            index_map.setdefault(section, []).append(
                IndexEntry(title=dir_title, link=f"{self.options.url}/{target}/{fmt.page_token}")
            )

        return ContentNode(
            content=[*guides, *sections.vars, *sections.classes, *sections.functions, *types]
        )

    @staticmethod
    def _index_section(index_map: Dict[str, List[IndexEntry]]) -> List[ContentNode]:
        nodes = [ContentNode(tag="h2", content="Index")]
        for key in sorted(index_map):
            entries = sorted(index_map[key], key=lambda entry: entry.title.lower())
            links = [
                ContentNode(
                    tag="li",
                    content=[ContentNode(tag="a", content=entry.title, link=entry.link)],
                )
                for entry in entries
            ]
            nodes.append(
                ContentNode(
                    tag="details",
                    content=[
                        ContentNode(tag="summary", content=title_case(key)),
                        ContentNode(tag="ul", content=links),
                    ],
                )
            )
        return nodes


__all__ = ["IndexEntry", "UnitAssembler"]
