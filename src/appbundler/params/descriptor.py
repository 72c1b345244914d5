# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Typed, stateless parameter descriptors."""

from __future__ import annotations

from collections.abc import Callable, Mapping, Set
from dataclasses import dataclass
from enum import Enum
from pathlib import PurePath
from typing import TYPE_CHECKING, Final, Generic, TypeVar

if TYPE_CHECKING:
    from .store import ParameterStore

ValueT = TypeVar("ValueT")


class ValueType(str, Enum):
    """Enumerate the semantic value types a descriptor may carry."""

    STRING = "string"
    BOOLEAN = "boolean"
    INTEGER = "integer"
    PATH = "path"
    STRING_LIST = "list-of-string"
    STRING_MAP = "map-of-string-to-string"
    STRING_SET = "set-of-string"
    PATH_LIST = "list-of-path"
    OBJECT = "object"


_PYTHON_TYPES: Final[dict[ValueType, tuple[type, ...]]] = {
    ValueType.STRING: (str,),
    ValueType.BOOLEAN: (bool,),
    ValueType.INTEGER: (int,),
    ValueType.PATH: (PurePath,),
    ValueType.STRING_LIST: (list, tuple),
    ValueType.STRING_MAP: (Mapping,),
    ValueType.STRING_SET: (Set,),
    ValueType.PATH_LIST: (list, tuple),
    ValueType.OBJECT: (object,),
}

DefaultDeriver = Callable[["ParameterStore"], ValueT | None]
StringParser = Callable[[str, "ParameterStore"], ValueT | None]


@dataclass(frozen=True, slots=True)
class ParameterDescriptor(Generic[ValueT]):
    """Describe one configuration key, its type, default and raw-string parser.

    Descriptors hold no per-run state and may be shared by any number of
    :class:`~appbundler.params.store.ParameterStore` instances.

    Attributes:
        id: Key under which values are stored.
        value_type: Semantic type tag used to check stored values.
        default_deriver: Callable computing the default from the store. It may
            fetch other descriptors but must not write to the store.
        string_parser: Callable converting a raw string override into a value.
        name: Short human-readable label.
        description: Longer explanation used in listings.
    """

    id: str
    value_type: ValueType
    default_deriver: DefaultDeriver[ValueT] | None = None
    string_parser: StringParser[ValueT] | None = None
    name: str = ""
    description: str = ""

    def fetch(self, store: ParameterStore) -> ValueT | None:
        """Return the value for this descriptor from ``store``.

        Args:
            store: Parameter store owning the run's values.

        Returns:
            ValueT | None: Stored, parsed or derived value.
        """

        return store.fetch(self)

    def is_instance(self, value: object) -> bool:
        """Return ``True`` when ``value`` is acceptable for this descriptor.

        ``None`` is always acceptable; booleans are rejected for integer
        descriptors.

        Args:
            value: Candidate value.

        Returns:
            bool: Whether ``value`` matches :attr:`value_type`.
        """

        if value is None:
            return True
        if self.value_type is ValueType.INTEGER and isinstance(value, bool):
            return False
        return isinstance(value, _PYTHON_TYPES[self.value_type])


__all__ = ["DefaultDeriver", "ParameterDescriptor", "StringParser", "ValueType"]
