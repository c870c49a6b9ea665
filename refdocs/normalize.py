"""Normalization of raw parser records into canonical entities."""

from __future__ import annotations

import json
import re
from typing import Any, Iterable, List, Optional, Sequence

from .models import (
    MISSING,
    ClassEntity,
    FunctionEntity,
    Param,
    RawParam,
    RawRecord,
    ReturnInfo,
    TypeEntity,
)

_ARRAY_GENERIC = re.compile(r"Array\.<(.+)>")
_DOTTED_GENERIC = re.compile(r"\.<")
_ENTITIES = {
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    '"': "&quot;",
    "'": "&#39;",
    "*": "&ast;",
}
_ENTITY_PATTERN = re.compile(r"[&<>\"'*]")


def escape(value: str) -> str:
    """Escape HTML-significant characters (and ``*``, which Markdown would eat)."""
    return _ENTITY_PATTERN.sub(lambda match: _ENTITIES[match.group(0)], value)


def slugify(name: str) -> str:
    """Kebab-case anchor id: ``"Test function two"`` -> ``"test-function-two"``."""
    cleaned = re.sub(r"[^\w\s]|_", "", name.strip())
    return re.sub(r"\s+", "-", cleaned).lower()


def title_case(value: str) -> str:
    spaced = re.sub(r"([a-z])([A-Z])", r"\1 \2", value)
    return spaced[:1].upper() + spaced[1:]


def normalize_types(names: Iterable[str]) -> List[str]:
    """Rewrite ``Array.<T>`` to ``T[]`` and ``Map.<K, V>`` to ``Map<K, V>``."""
    normalized = []
    for name in names:
        flattened = _ARRAY_GENERIC.sub(r"\1[]", name, count=1)
        normalized.append(_DOTTED_GENERIC.sub("<", flattened))
    return normalized


def normalize_params(params: Sequence[RawParam]) -> List[Param]:
    result = []
    for raw in params:
        param = Param(name=raw.name, type=normalize_types(raw.type_names))
        if raw.description:
            param.description = raw.description
        if raw.optional:
            param.optional = True
        if raw.default is not MISSING:
            param.default = js_string(raw.default)
        result.append(param)
    return result


def normalize_return(raw: RawParam) -> ReturnInfo:
    return ReturnInfo(
        type=normalize_types(raw.type_names),
        description=raw.description or None,
    )


def js_string(value: Any) -> str:
    """String form of a default value as the documented source would print it.

    ``False`` becomes ``"false"``, ``None`` becomes ``"null"`` and the empty
    string is shown quoted; falsy values are still values.
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    if value == "":
        return '""'
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (str, int, float)):
        return str(value)
    return json.dumps(value, separators=(",", ":"))


def to_function(record: RawRecord) -> FunctionEntity:
    """Function or method entity.

    A function typed through an alias keeps only its own prose; the signature
    is merged in from the alias later, see :func:`merge_alias`.
    """
    if record.type_names:
        return FunctionEntity(
            name=record.name,
            description=record.description,
            examples=record.examples,
            alias=normalize_types(record.type_names)[0],
        )

    entity = FunctionEntity(name=record.name, params=normalize_params(record.params or []))
    if record.returns:
        entity.returns = normalize_return(record.returns[0])
    if record.description:
        entity.description = record.description
    if record.yields:
        entity.yields = normalize_return(record.yields[0])
    if record.examples:
        entity.examples = record.examples
    return entity


def to_type(record: RawRecord) -> TypeEntity:
    """Typedef, variable or class property entity."""
    entity = TypeEntity(
        name=record.name,
        type=normalize_types(record.type_names or []),
        id=slugify(record.name),
        dir=record.dir,
        out_dir=record.meta.filename_out if record.meta else None,
    )
    if record.description:
        entity.description = record.description
    if record.properties:
        entity.props = normalize_params(record.properties)
    if record.params is not None:
        entity.params = normalize_params(record.params)
    if record.returns:
        entity.returns = normalize_return(record.returns[0])
    if record.augments:
        entity.augments = list(record.augments)
    if record.examples:
        entity.examples = record.examples
    return entity


def to_class(record: RawRecord) -> ClassEntity:
    """Class entity; ``classdesc`` describes the class, ``description`` the constructor."""
    entity = ClassEntity(
        name=record.name,
        id=slugify(record.name),
        dir=record.dir,
        out_dir=record.meta.filename_out if record.meta else None,
    )
    if record.classdesc:
        entity.description = record.classdesc
    if record.description:
        entity.constructor_description = record.description
    if record.augments:
        entity.augments = list(record.augments)
        entity.type = list(record.augments)
    if record.params is not None:
        entity.params = normalize_params(record.params)
    if record.examples:
        entity.examples = record.examples
    return entity


def merge_alias(function: FunctionEntity, alias: Optional[TypeEntity]) -> FunctionEntity:
    """Fill a function's signature from the typedef it was declared with.

    Fields the function documents itself take precedence over the alias.
    """
    if alias is None:
        return function
    return FunctionEntity(
        name=function.name,
        params=function.params if function.params is not None else alias.params,
        returns=function.returns or alias.returns,
        yields=function.yields,
        description=function.description,
        examples=function.examples,
        alias=function.alias,
    )


__all__ = [
    "escape",
    "js_string",
    "merge_alias",
    "normalize_params",
    "normalize_return",
    "normalize_types",
    "slugify",
    "title_case",
    "to_class",
    "to_function",
    "to_type",
]
