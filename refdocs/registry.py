"""Entity registries: populated once per run, then frozen for rendering."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Iterable, Mapping, Optional

from .logging import get_logger
from .models import ClassEntity, FunctionEntity, RawRecord, Referenceable, TypeEntity
from .normalize import merge_alias, to_class, to_function, to_type

logger = get_logger("registry")


@dataclass(frozen=True)
class Registry:
    """Read-only view over the normalized entities, keyed by name."""

    types: Mapping[str, Referenceable]
    variables: Mapping[str, TypeEntity]
    functions: Mapping[str, FunctionEntity]
    classes: Mapping[str, ClassEntity]

    def reference(self, name: str) -> Optional[Referenceable]:
        return self.types.get(name)

    def signature_of(self, function: FunctionEntity) -> FunctionEntity:
        """Return ``function`` with its alias signature merged in, if any."""
        if not function.alias:
            return function
        alias = self.types.get(function.alias)
        return merge_alias(function, alias if isinstance(alias, TypeEntity) else None)


class RegistryBuilder:
    """Collects entities from raw records in a single pass."""

    def __init__(self) -> None:
        self._types: Dict[str, Referenceable] = {}
        self._variables: Dict[str, TypeEntity] = {}
        self._functions: Dict[str, FunctionEntity] = {}
        self._classes: Dict[str, ClassEntity] = {}

    def add_all(self, records: Iterable[RawRecord]) -> "RegistryBuilder":
        for record in records:
            self.add(record)
        return self

    def add(self, record: RawRecord) -> None:
        if record.hidden:
            return

        owner = record.memberof
        if owner and owner not in self._classes:
            # Members may arrive before the class they belong to.
            self._classes[owner] = ClassEntity(name=owner)

        kind = record.kind
        if kind == "typedef" and record.type_names:
            self._types[record.name] = to_type(record)
        elif kind == "class":
            self._add_class(record)
        elif kind == "constant":
            self._variables[record.name] = to_type(record)
        elif kind == "member":
            entity = to_type(record)
            if owner:
                self._classes[owner].members.append(entity)
            else:
                self._variables[record.name] = entity
        elif kind == "function":
            function = to_function(record)
            if owner:
                self._classes[owner].members.append(function)
            else:
                self._functions[record.name] = function

    def _add_class(self, record: RawRecord) -> None:
        entity = to_class(record)
        placeholder = self._classes.get(record.name)
        if placeholder is not None:
            entity.members = placeholder.members
        self._classes[record.name] = entity
        self._types[record.name] = entity

    def freeze(self) -> Registry:
        logger.debug(
            "Registry holds %d types, %d variables, %d functions, %d classes",
            len(self._types),
            len(self._variables),
            len(self._functions),
            len(self._classes),
        )
        return Registry(
            types=MappingProxyType(dict(self._types)),
            variables=MappingProxyType(dict(self._variables)),
            functions=MappingProxyType(dict(self._functions)),
            classes=MappingProxyType(dict(self._classes)),
        )


def build_registry(records: Iterable[RawRecord]) -> Registry:
    return RegistryBuilder().add_all(records).freeze()


__all__ = ["Registry", "RegistryBuilder", "build_registry"]
