"""Cross-reference resolution for type expressions."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Callable, List, Sequence, Set

from .models import ClassEntity, ContentNode, OutputFormat, Referenceable
from .normalize import escape
from .registry import Registry

BUILTIN_TYPES = (
    "Promise",
    "Object",
    "Array",
    "Map",
    "Set",
    "Function",
    "function",
    "string",
    "number",
    "boolean",
    "void",
    "null",
    "undefined",
)

_CANDIDATE = re.compile(r"\b(?!(?:%s)\b)\w+\b" % "|".join(BUILTIN_TYPES))
_TOKEN = re.compile(r"\w+|\W")

UNION_SEPARATOR = " | "

Materializer = Callable[[Referenceable], List[ContentNode]]


@dataclass
class UnitContext:
    """State scoped to one output unit.

    ``types`` collects the trailing "Types" section and ``used_types`` records
    which entities were already expanded into it. ``classes`` names the classes
    rendered in the unit body.
    """

    registry: Registry
    fmt: OutputFormat
    dir: str
    base_url: str = ""
    types: List[ContentNode] = field(default_factory=list)
    used_types: Set[str] = field(default_factory=set)
    classes: Set[str] = field(default_factory=set)

    @property
    def is_html(self) -> bool:
        return self.fmt is OutputFormat.HTML

    def link_to(self, entity: Referenceable) -> str:
        if entity.dir and entity.dir != self.dir:
            target = entity.out_dir or entity.dir
            return f"{self.base_url}/{target}/{self.fmt.page_token}#{entity.id}"
        return f"#{entity.id}"


class TypeResolver:
    """Turns type expressions into text and link nodes.

    The first reference to a typedef, or to a class the unit body does not
    render, expands it into the unit's types section through
    ``materialize``; later references only link.
    """

    def __init__(self, context: UnitContext, materialize: Materializer) -> None:
        self.context = context
        self._materialize = materialize

    def resolve(self, expression: Sequence[str], current: object) -> List[ContentNode]:
        nodes: List[ContentNode] = []
        for segment in expression:
            if nodes:
                nodes.append(ContentNode(content=UNION_SEPARATOR))
            candidates = set(_CANDIDATE.findall(segment))
            if not candidates:
                nodes.append(ContentNode(content=escape(segment)))
                continue
            nodes.append(ContentNode(content=self._segment(segment, candidates, current)))
        return nodes

    def _segment(self, segment: str, candidates: Set[str], current: object) -> List[ContentNode]:
        tokens: List[ContentNode] = []
        for token in _TOKEN.findall(segment):
            entity = self.context.registry.reference(token) if token in candidates else None
            if entity is None:
                tokens.append(ContentNode(content=escape(token)))
                continue

            tokens.append(ContentNode(tag="a", content=entity.name, link=self.context.link_to(entity)))

            # Self references link without expanding again.
            if entity is current or self._rendered_elsewhere(entity):
                continue
            if entity.name not in self.context.used_types:
                self.context.used_types.add(entity.name)
                self.context.types.extend(self._materialize(entity))
        return tokens

    def _rendered_elsewhere(self, entity: Referenceable) -> bool:
        if not isinstance(entity, ClassEntity):
            return False
        return entity.dir != self.context.dir or entity.name in self.context.classes


__all__ = ["BUILTIN_TYPES", "TypeResolver", "UnitContext"]
