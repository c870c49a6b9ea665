"""Core data models shared across refdocs components."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union


class _Missing:
    """Marker for a ``defaultvalue`` key that was never written."""

    def __repr__(self) -> str:
        return "MISSING"


MISSING: Any = _Missing()


class OutputFormat(str, Enum):
    """Render target threaded through tree construction and rendering."""

    MARKDOWN = "markdown"
    HTML = "html"

    @property
    def page_token(self) -> str:
        """File name appended to cross-page links."""
        return "README.md" if self is OutputFormat.MARKDOWN else ""


# Raw parser records


@dataclass
class RawParam:
    """A param/property/return entry as emitted by the comment parser."""

    name: str
    type_names: List[str]
    description: Optional[str] = None
    optional: bool = False
    default: Any = MISSING

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RawParam":
        type_data = data.get("type")
        names = type_data.get("names", []) if isinstance(type_data, Mapping) else []
        return cls(
            name=str(data.get("name") or ""),
            type_names=[str(name) for name in names],
            description=data.get("description") or None,
            optional=bool(data.get("optional")),
            default=data["defaultvalue"] if "defaultvalue" in data else MISSING,
        )


@dataclass
class RecordTag:
    """Custom block tag such as ``@index``."""

    title: str
    text: str = ""


@dataclass
class RecordMeta:
    """Where a record came from."""

    filename: str
    filename_out: Optional[str] = None
    code_name: Optional[str] = None


@dataclass
class RawRecord:
    """Loosely typed doc comment record; one shape for every kind."""

    name: str
    kind: str
    meta: Optional[RecordMeta] = None
    description: Optional[str] = None
    classdesc: Optional[str] = None
    params: Optional[List[RawParam]] = None
    returns: Optional[List[RawParam]] = None
    properties: Optional[List[RawParam]] = None
    yields: Optional[List[RawParam]] = None
    type_names: Optional[List[str]] = None
    augments: Optional[List[str]] = None
    memberof: Optional[str] = None
    undocumented: bool = False
    access: Optional[str] = None
    tags: List[RecordTag] = field(default_factory=list)
    examples: Optional[List[str]] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RawRecord":
        meta_data = data.get("meta")
        meta = None
        if isinstance(meta_data, Mapping):
            code = meta_data.get("code")
            meta = RecordMeta(
                filename=str(meta_data.get("filename") or ""),
                filename_out=meta_data.get("filenameOut") or meta_data.get("filename_out"),
                code_name=code.get("name") if isinstance(code, Mapping) else None,
            )

        type_data = data.get("type")
        type_names = None
        if isinstance(type_data, Mapping) and "names" in type_data:
            type_names = [str(name) for name in type_data["names"]]

        return cls(
            name=str(data.get("name") or ""),
            kind=str(data.get("kind") or ""),
            meta=meta,
            description=data.get("description") or None,
            classdesc=data.get("classdesc") or None,
            params=_param_list(data.get("params")),
            returns=_param_list(data.get("returns")),
            properties=_param_list(data.get("properties")),
            yields=_param_list(data.get("yields")),
            type_names=type_names,
            augments=[str(name) for name in data["augments"]] if data.get("augments") else None,
            memberof=data.get("memberof") or None,
            undocumented=bool(data.get("undocumented")),
            access=data.get("access") or None,
            tags=[
                RecordTag(title=str(tag.get("title") or ""), text=str(tag.get("text") or ""))
                for tag in data.get("tags") or []
                if isinstance(tag, Mapping)
            ],
            examples=[str(example) for example in data["examples"]] if data.get("examples") else None,
        )

    @property
    def hidden(self) -> bool:
        """Private and undocumented records never reach the registries."""
        return self.access == "private" or self.undocumented

    @property
    def dir(self) -> Optional[str]:
        return self.meta.filename if self.meta else None

    @property
    def exported(self) -> bool:
        return bool(self.meta and self.meta.code_name and "export" in self.meta.code_name)


def _param_list(value: Any) -> Optional[List[RawParam]]:
    if not isinstance(value, Sequence) or isinstance(value, str):
        return None
    return [RawParam.from_dict(item) for item in value if isinstance(item, Mapping)]


# Canonical entities


@dataclass
class Param:
    """Normalized parameter or property."""

    name: str
    type: List[str]
    description: Optional[str] = None
    optional: bool = False
    default: Optional[str] = None


@dataclass
class ReturnInfo:
    """Normalized return or yield descriptor."""

    type: List[str]
    description: Optional[str] = None


@dataclass
class TypeEntity:
    """Typedef, variable or class property."""

    name: str
    type: List[str]
    id: str = ""
    dir: Optional[str] = None
    out_dir: Optional[str] = None
    description: Optional[str] = None
    props: Optional[List[Param]] = None
    params: Optional[List[Param]] = None
    returns: Optional[ReturnInfo] = None
    augments: Optional[List[str]] = None
    examples: Optional[List[str]] = None


@dataclass
class FunctionEntity:
    """Standalone function or class method."""

    name: str
    params: Optional[List[Param]] = None
    returns: Optional[ReturnInfo] = None
    yields: Optional[ReturnInfo] = None
    description: Optional[str] = None
    examples: Optional[List[str]] = None
    alias: Optional[str] = None


@dataclass
class ClassEntity:
    """Class with its constructor and accumulated members."""

    name: str
    type: List[str] = field(default_factory=list)
    id: str = ""
    dir: Optional[str] = None
    out_dir: Optional[str] = None
    description: Optional[str] = None
    constructor_description: Optional[str] = None
    params: Optional[List[Param]] = None
    augments: Optional[List[str]] = None
    members: List[Union[TypeEntity, FunctionEntity]] = field(default_factory=list)
    examples: Optional[List[str]] = None


Entity = Union[TypeEntity, FunctionEntity, ClassEntity]
Referenceable = Union[TypeEntity, ClassEntity]


# Output tree


@dataclass
class ContentNode:
    """Format-agnostic tree element consumed by both walkers."""

    content: Union[str, List["ContentNode"]]
    tag: Optional[str] = None
    link: Optional[str] = None
    raw: bool = False


@dataclass
class Heading:
    """Entry in a page's nested heading index."""

    id: str
    tag: str
    title: str
    children: List["Heading"] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"id": self.id, "tag": self.tag, "title": self.title}
        if self.children:
            data["children"] = [child.to_dict() for child in self.children]
        return data


@dataclass
class NavigationItem:
    """Entry in the site-wide navigation forest."""

    id: str
    title: str
    link: str
    children: List["NavigationItem"] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"id": self.id, "title": self.title, "link": self.link}
        if self.children:
            data["children"] = [child.to_dict() for child in self.children]
        return data


@dataclass
class DocSet:
    """Records for one invocation.

    ``records`` feeds the registries; ``units`` maps each directory to the
    records of its result files, in discovery order.
    """

    records: List[RawRecord] = field(default_factory=list)
    units: Dict[str, List[RawRecord]] = field(default_factory=dict)
    index_records: Optional[List[RawRecord]] = None
