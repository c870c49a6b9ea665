"""Factories for parser-shaped record dictionaries used across tests."""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional

from refdocs.models import RawRecord

_UNSET: Any = object()


def param(
    name: str,
    *types: str,
    description: Optional[str] = None,
    optional: bool = False,
    default: Any = _UNSET,
) -> Dict[str, Any]:
    """Build a ``params``/``properties`` entry."""
    data: Dict[str, Any] = {"name": name, "type": {"names": list(types)}}
    if description is not None:
        data["description"] = description
    if optional:
        data["optional"] = True
    if default is not _UNSET:
        data["defaultvalue"] = default
    return data


def returns(*types: str, description: Optional[str] = None) -> Dict[str, Any]:
    data: Dict[str, Any] = {"type": {"names": list(types)}}
    if description is not None:
        data["description"] = description
    return data


def record(
    name: str,
    kind: str,
    *,
    dir: str = "src/test",
    exported: bool = False,
    types: Optional[Iterable[str]] = None,
    **fields: Any,
) -> Dict[str, Any]:
    """Build one record the way ``jsdoc -X`` would emit it."""
    code_name = f"exports.{name}" if exported else name
    data: Dict[str, Any] = {
        "name": name,
        "kind": kind,
        "meta": {"filename": dir, "code": {"name": code_name}},
    }
    if types is not None:
        data["type"] = {"names": list(types)}
    data.update(fields)
    return data


def raw(*items: Dict[str, Any]) -> List[RawRecord]:
    return [RawRecord.from_dict(item) for item in items]


__all__ = ["param", "raw", "record", "returns"]
