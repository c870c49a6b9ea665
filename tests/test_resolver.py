"""Tests for refdocs.resolver."""

from __future__ import annotations

from typing import List

from refdocs.models import ContentNode, OutputFormat, TypeEntity
from refdocs.registry import build_registry
from refdocs.resolver import TypeResolver, UnitContext
from tests._fixtures.records import param, raw, record


def _registry():
    return build_registry(
        raw(
            record(
                "TestObj",
                "typedef",
                types=["object"],
                properties=[param("ref", "TestObj", optional=True)],
            ),
            record("Generic", "typedef", dir="src/global", types=["Object.<string, *>"]),
            record("Widget", "class"),
        )
    )


class _Recorder:
    def __init__(self) -> None:
        self.calls: List[str] = []

    def __call__(self, entity: TypeEntity) -> List[ContentNode]:
        self.calls.append(entity.name)
        return [ContentNode(tag="h3", content=entity.name)]


def _resolver(fmt: OutputFormat = OutputFormat.MARKDOWN, dir: str = "src/test"):
    context = UnitContext(registry=_registry(), fmt=fmt, dir=dir, base_url="https://test.docs")
    recorder = _Recorder()
    return TypeResolver(context, recorder), context, recorder


def test_builtin_only_segments_become_escaped_text() -> None:
    resolver, context, recorder = _resolver()

    nodes = resolver.resolve(["string", "Array<string>"], None)

    assert nodes == [
        ContentNode(content="string"),
        ContentNode(content=" | "),
        ContentNode(content="Array&lt;string&gt;"),
    ]
    assert recorder.calls == []
    assert context.types == []


def test_known_type_links_and_materializes_once() -> None:
    resolver, context, recorder = _resolver()

    first = resolver.resolve(["TestObj", "null"], None)
    resolver.resolve(["Object<string, TestObj>"], None)

    assert first == [
        ContentNode(content=[ContentNode(tag="a", content="TestObj", link="#testobj")]),
        ContentNode(content=" | "),
        ContentNode(content="null"),
    ]
    assert recorder.calls == ["TestObj"]
    assert context.used_types == {"TestObj"}
    assert context.types == [ContentNode(tag="h3", content="TestObj")]


def test_tokens_around_references_are_escaped() -> None:
    resolver, _, _ = _resolver()

    (segment,) = resolver.resolve(["Object<string, TestObj>"], None)

    assert segment.content == [
        ContentNode(content="Object"),
        ContentNode(content="&lt;"),
        ContentNode(content="string"),
        ContentNode(content=","),
        ContentNode(content=" "),
        ContentNode(tag="a", content="TestObj", link="#testobj"),
        ContentNode(content="&gt;"),
    ]


def test_self_reference_links_without_expanding() -> None:
    resolver, context, recorder = _resolver()
    current = context.registry.types["TestObj"]

    (segment,) = resolver.resolve(["TestObj"], current)

    assert segment.content[0].link == "#testobj"
    assert recorder.calls == []


def test_classes_rendered_in_the_unit_only_link() -> None:
    resolver, context, recorder = _resolver()
    context.classes.add("Widget")

    (segment,) = resolver.resolve(["Widget"], None)

    assert segment.content == [ContentNode(tag="a", content="Widget", link="#widget")]
    assert recorder.calls == []


def test_classes_missing_from_the_unit_are_materialized_once() -> None:
    resolver, context, recorder = _resolver()

    resolver.resolve(["Widget"], None)
    resolver.resolve(["Widget[]"], None)

    assert recorder.calls == ["Widget"]
    assert context.used_types == {"Widget"}


def test_classes_from_other_directories_only_link() -> None:
    resolver, _, recorder = _resolver(dir="src/other")

    (segment,) = resolver.resolve(["Widget"], None)

    assert segment.content[0].link == "https://test.docs/src/test/README.md#widget"
    assert recorder.calls == []


def test_cross_directory_links_point_at_the_owning_page() -> None:
    resolver, _, _ = _resolver(OutputFormat.MARKDOWN)
    (segment,) = resolver.resolve(["Generic"], None)
    assert segment.content[0].link == "https://test.docs/src/global/README.md#generic"

    html_resolver, _, _ = _resolver(OutputFormat.HTML)
    (segment,) = html_resolver.resolve(["Generic"], None)
    assert segment.content[0].link == "https://test.docs/src/global/#generic"


def test_cross_directory_links_prefer_the_output_directory() -> None:
    resolver, context, _ = _resolver(OutputFormat.HTML)
    context.registry.types["Generic"].out_dir = "global"

    (segment,) = resolver.resolve(["Generic"], None)

    assert segment.content[0].link == "https://test.docs/global/#generic"
