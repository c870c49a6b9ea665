"""Content tree construction for documented entities."""

from __future__ import annotations

from typing import List, Literal, Optional, Sequence

from .examples import ExampleRenderer
from .models import (
    ClassEntity,
    ContentNode,
    Entity,
    FunctionEntity,
    Param,
    Referenceable,
    ReturnInfo,
)
from .normalize import escape
from .resolver import TypeResolver, UnitContext

EntityKind = Literal["function", "typedef", "class"]

TYPES_DEPTH = 2


def heading(level: int) -> str:
    """Heading tag for ``level``, clamped to ``h6``."""
    return f"h{min(max(level, 1), 6)}"


def text(content: str) -> ContentNode:
    return ContentNode(content=content)


def paragraph(content: str | List[ContentNode]) -> ContentNode:
    return ContentNode(tag="p", content=content)


class ContentBuilder:
    """Builds the section list of one entity inside one output unit."""

    def __init__(self, context: UnitContext, examples: ExampleRenderer) -> None:
        self.context = context
        self.examples = examples
        self.resolver = TypeResolver(context, self._materialize)

    def build(self, entity: Entity, kind: EntityKind, depth: int = 1) -> List[ContentNode]:
        """Return the nodes for ``entity`` with its heading at ``h{depth + 1}``.

        Sections appear in a fixed order and only when they have content:
        heading, class intro and constructor heading, signature, description,
        type, augments, properties, parameters, returns, yields, members and
        examples. Typedefs owned by another directory yield nothing.
        """
        is_type = kind == "typedef"
        is_function = kind == "function"
        is_class = kind == "class"

        info = entity
        if is_function and isinstance(entity, FunctionEntity):
            info = self.context.registry.signature_of(entity)

        if is_type and getattr(info, "dir", None) != self.context.dir:
            return []

        nodes: List[ContentNode] = [ContentNode(tag=heading(depth + 1), content=info.name)]

        if is_class:
            if info.description:
                nodes.append(paragraph(info.description))
            nodes.append(ContentNode(tag=heading(depth + 2), content="Constructor"))

        if is_function or is_class:
            nodes.append(self._signature(info, is_class))

        description = (
            getattr(info, "constructor_description", None) if is_class else info.description
        )
        if description:
            nodes.append(paragraph(description))

        if is_type:
            nodes.append(self._labelled("Type:", getattr(info, "type", []), info))

        augments = getattr(info, "augments", None)
        if augments:
            nodes.append(self._labelled("Augments:", augments, info))

        props: Optional[Sequence[Param]] = getattr(info, "props", None)
        if props:
            nodes.append(ContentNode(tag=heading(depth + 2), content="Properties"))
            nodes.append(self._definitions(props, info))

        params: Optional[Sequence[Param]] = getattr(info, "params", None)
        if params:
            offset = 3 if is_class else 2
            nodes.append(ContentNode(tag=heading(depth + offset), content="Parameters"))
            nodes.append(self._definitions(params, info))

        returns: Optional[ReturnInfo] = getattr(info, "returns", None)
        if returns:
            nodes.append(ContentNode(tag=heading(depth + 2), content="Returns"))
            nodes.append(self._described_type(returns, info))

        yields: Optional[ReturnInfo] = getattr(info, "yields", None)
        if yields:
            nodes.append(ContentNode(tag=heading(depth + 2), content="Yields"))
            nodes.append(self._described_type(yields, info))

        if is_class and isinstance(info, ClassEntity):
            nodes.extend(self._members(info, depth))

        if info.examples:
            rendered = self.examples.render(
                info.examples, self.context.dir, heading(depth + 3), self.context.fmt
            )
            if rendered:
                nodes.append(ContentNode(tag=heading(depth + 2), content="Examples"))
                nodes.append(ContentNode(content=rendered))

        return nodes

    def _materialize(self, entity: Referenceable) -> List[ContentNode]:
        return self.build(entity, "typedef", TYPES_DEPTH)

    def _signature(self, info: Entity, is_class: bool) -> ContentNode:
        params = [
            f"{param.name}{'?' if param.optional else ''}: {' | '.join(param.type)}"
            for param in getattr(info, "params", None) or []
        ]
        if is_class:
            line = f"new {info.name}({escape(', '.join(params))}): {info.name}"
        else:
            returns: Optional[ReturnInfo] = getattr(info, "returns", None)
            return_type = " | ".join(returns.type) if returns else ""
            line = f"{info.name}({escape(', '.join(params))}): {escape(return_type)}"
        # Array content keeps the Markdown walker from using backticks.
        code = ContentNode(tag="code", content=[text(line)])
        return paragraph([ContentNode(tag="strong", content=[code])])

    def _labelled(self, label: str, expression: Sequence[str], current: Entity) -> ContentNode:
        return paragraph(
            [
                ContentNode(tag="strong", content=label),
                text(" "),
                ContentNode(tag="code", content=self.resolver.resolve(expression, current)),
            ]
        )

    def _described_type(self, info: ReturnInfo, current: Entity) -> ContentNode:
        nodes = [ContentNode(tag="code", content=self.resolver.resolve(info.type, current))]
        if info.description:
            nodes.extend([text(" "), text(info.description)])
        return paragraph(nodes)

    def _definitions(self, entries: Sequence[Param], current: Entity) -> ContentNode:
        """Properties or parameters: ``dl`` rows for HTML, ``ul`` items for Markdown."""
        is_html = self.context.is_html
        rows: List[ContentNode] = []

        for entry in entries:
            term = [
                ContentNode(tag="strong", content=[ContentNode(tag="code", content=entry.name)]),
                text(" "),
                ContentNode(tag="code", content=self.resolver.resolve(entry.type, current)),
                text(" "),
                text("optional" if entry.optional else "required"),
            ]
            details: List[ContentNode] = []
            if entry.description:
                details.append(paragraph(entry.description))
            if entry.default is not None:
                details.append(
                    paragraph([text("Default: "), ContentNode(tag="code", content=entry.default)])
                )

            if is_html:
                row = [ContentNode(tag="dt", content=term), ContentNode(tag="dd", content=details)]
            else:
                row = [*term, *details]
            rows.append(ContentNode(tag="div" if is_html else "li", content=row))

        return ContentNode(tag="dl" if is_html else "ul", content=rows)

    def _members(self, info: ClassEntity, depth: int) -> List[ContentNode]:
        properties: List[ContentNode] = []
        methods: List[ContentNode] = []
        for member in info.members:
            is_method = getattr(member, "params", None) is not None
            kind: EntityKind = "function" if is_method else "typedef"
            (methods if is_method else properties).extend(self.build(member, kind, depth + 2))

        nodes: List[ContentNode] = []
        if properties:
            nodes.append(ContentNode(tag=heading(depth + 2), content="Properties"))
            nodes.extend(properties)
        if methods:
            nodes.append(ContentNode(tag=heading(depth + 2), content="Methods"))
            nodes.extend(methods)
        return nodes


__all__ = ["ContentBuilder", "EntityKind", "heading"]
