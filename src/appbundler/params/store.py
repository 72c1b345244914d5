# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Per-run memoizing parameter store."""

from __future__ import annotations

import copy
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Final, TypeVar

from ..errors import ConfigurationInvalidError, ParameterCycleError
from .descriptor import ParameterDescriptor, ValueType

ValueT = TypeVar("ValueT")

MULTI_VALUE_KEYS: Final[frozenset[str]] = frozenset(
    {
        "jvmProperties",
        "jvmOptions",
        "userJvmOptions",
        "arguments",
        "module-path",
        "add-modules",
        "limit-modules",
        "strip-native-commands",
        "detect-modules",
    }
)

_TEXT_JOINER: Final[str] = "\n\n"


class EntryState(str, Enum):
    """Enumerate how a store entry came to hold its value."""

    UNSET = "unset"
    DEFAULTED = "defaulted"
    OVERRIDDEN = "overridden"


@dataclass(slots=True)
class StoreEntry:
    """Value held by the store together with its provenance.

    Attributes:
        value: Stored value; may be ``None``.
        state: Whether the value was derived or supplied by a caller.
        raw: ``True`` while ``value`` is an unparsed string override.
    """

    value: object
    state: EntryState
    raw: bool = False


class ParameterStore:
    """Mutable map of parameter values owned by a single packaging run.

    Values are keyed by descriptor id. :meth:`fetch` parses raw string
    overrides on first access and memoizes derived defaults, so every
    descriptor's default deriver runs at most once per store.
    """

    def __init__(self, values: Mapping[str, object] | None = None) -> None:
        """Initialise the store, optionally seeding caller overrides.

        Args:
            values: Initial values recorded as explicit overrides.
        """

        self._entries: dict[str, StoreEntry] = {}
        self._deriving: list[str] = []
        for key, value in (values or {}).items():
            self.set(key, value)

    # -- Mapping-like helpers -------------------------------------------------

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def items(self) -> Iterator[tuple[str, object]]:
        """Yield ``(id, value)`` pairs without triggering derivation.

        Returns:
            Iterator[tuple[str, object]]: Stored pairs in insertion order.
        """

        return ((key, entry.value) for key, entry in self._entries.items())

    # -- Resolution ------------------------------------------------------------

    def fetch(self, descriptor: ParameterDescriptor[ValueT]) -> ValueT | None:
        """Return the value for ``descriptor``, parsing or deriving it as needed.

        Args:
            descriptor: Descriptor whose value is requested.

        Returns:
            ValueT | None: Stored value, the parsed raw override, or the
            memoized default.

        Raises:
            ParameterCycleError: If derivation re-enters ``descriptor``.
            ConfigurationInvalidError: If the stored value has the wrong type or
                is unparsed text for a structured descriptor.
        """

        entry = self._entries.get(descriptor.id)
        if entry is None:
            return self._derive(descriptor)
        if entry.raw and isinstance(entry.value, str) and descriptor.string_parser is not None:
            entry.value = descriptor.string_parser(entry.value, self)
            entry.raw = False
        elif entry.raw and descriptor.value_type is ValueType.STRING:
            entry.raw = False
        elif entry.raw and isinstance(entry.value, str):
            raise ConfigurationInvalidError(
                f"Parameter {descriptor.id} of type {descriptor.value_type.value} can not be given as text",
                f"Supply a structured {descriptor.value_type.value} value for {descriptor.id}.",
            )
        if not descriptor.is_instance(entry.value):
            raise ConfigurationInvalidError(
                f"Parameter {descriptor.id} should be of type {descriptor.value_type.value} "
                f"but is a {type(entry.value).__name__}",
                f"Supply a {descriptor.value_type.value} value for {descriptor.id}.",
            )
        return entry.value  # type: ignore[return-value]

    def _derive(self, descriptor: ParameterDescriptor[ValueT]) -> ValueT | None:
        """Run the default deriver for ``descriptor`` once and memoize the result.

        Args:
            descriptor: Descriptor lacking a stored value.

        Returns:
            ValueT | None: Derived default.

        Raises:
            ParameterCycleError: If ``descriptor`` is already being derived.
        """

        if descriptor.id in self._deriving:
            raise ParameterCycleError([*self._deriving, descriptor.id])
        if descriptor.default_deriver is None:
            value: ValueT | None = None
        else:
            self._deriving.append(descriptor.id)
            try:
                value = descriptor.default_deriver(self)
            finally:
                self._deriving.pop()
        existing = self._entries.get(descriptor.id)
        if existing is not None and existing.state is EntryState.OVERRIDDEN:
            return self.fetch(descriptor)
        self._entries[descriptor.id] = StoreEntry(value, EntryState.DEFAULTED)
        return value

    # -- Mutation --------------------------------------------------------------

    def set(self, key: str | ParameterDescriptor[ValueT], value: object) -> None:
        """Record ``value`` as an explicit caller override.

        String values are kept raw and parsed by the descriptor's string
        parser on the next :meth:`fetch`.

        Args:
            key: Descriptor or descriptor id.
            value: Override value.
        """

        self._entries[_key(key)] = StoreEntry(value, EntryState.OVERRIDDEN, raw=isinstance(value, str))

    def put_default(self, key: str | ParameterDescriptor[ValueT], value: object) -> None:
        """Record ``value`` as a derived default.

        Args:
            key: Descriptor or descriptor id.
            value: Derived value.
        """

        self._entries[_key(key)] = StoreEntry(value, EntryState.DEFAULTED)

    def remove(self, key: str | ParameterDescriptor[ValueT]) -> None:
        """Forget any value stored for ``key``.

        Args:
            key: Descriptor or descriptor id.
        """

        self._entries.pop(_key(key), None)

    def add_argument(self, key: str, value: object) -> None:
        """Apply one raw bundle argument, accumulating multi-value keys.

        For keys in :data:`MULTI_VALUE_KEYS` a string ``value`` is folded into
        the existing entry: appended to a list, merged into a map when it
        contains ``=``, or joined to existing text with a blank line. Any
        other combination replaces the stored value.

        Args:
            key: Descriptor id.
            value: Raw argument value.
        """

        entry = self._entries.get(key)
        if key not in MULTI_VALUE_KEYS or not isinstance(value, str) or entry is None:
            self.set(key, value)
            return
        existing = entry.value
        if isinstance(existing, str):
            self._entries[key] = StoreEntry(f"{existing}{_TEXT_JOINER}{value}", EntryState.OVERRIDDEN, raw=True)
        elif isinstance(existing, list):
            self._entries[key] = StoreEntry([*existing, value], EntryState.OVERRIDDEN)
        elif isinstance(existing, Mapping) and "=" in value:
            name, _, item = value.partition("=")
            self._entries[key] = StoreEntry({**existing, name: item}, EntryState.OVERRIDDEN)
        else:
            self.set(key, value)

    def add_arguments(self, arguments: Mapping[str, object]) -> None:
        """Apply :meth:`add_argument` to every pair in ``arguments``.

        Args:
            arguments: Raw arguments keyed by descriptor id.
        """

        for key, value in arguments.items():
            self.add_argument(key, value)

    # -- Introspection ---------------------------------------------------------

    def state(self, key: str | ParameterDescriptor[ValueT]) -> EntryState:
        """Return how the entry for ``key`` was populated.

        Args:
            key: Descriptor or descriptor id.

        Returns:
            EntryState: ``UNSET`` when no entry exists.
        """

        entry = self._entries.get(_key(key))
        return EntryState.UNSET if entry is None else entry.state

    def is_overridden(self, key: str | ParameterDescriptor[ValueT]) -> bool:
        """Return ``True`` when a caller supplied the value for ``key``.

        Args:
            key: Descriptor or descriptor id.

        Returns:
            bool: Whether the entry state is ``OVERRIDDEN``.
        """

        return self.state(key) is EntryState.OVERRIDDEN

    def get_raw(self, key: str | ParameterDescriptor[ValueT], default: object = None) -> object:
        """Return the stored value for ``key`` without parsing or derivation.

        Args:
            key: Descriptor or descriptor id.
            default: Value returned when no entry exists.

        Returns:
            object: Stored value or ``default``.
        """

        entry = self._entries.get(_key(key))
        return default if entry is None else entry.value

    def copy(self, *, overrides_only: bool = False) -> ParameterStore:
        """Return an independent store holding copies of the entries.

        Args:
            overrides_only: Copy only caller overrides so that defaults are
                derived afresh in the new store.

        Returns:
            ParameterStore: Store sharing no mutable entries with this one.
        """

        duplicate = ParameterStore()
        for key, entry in self._entries.items():
            if overrides_only and entry.state is not EntryState.OVERRIDDEN:
                continue
            duplicate._entries[key] = StoreEntry(copy.copy(entry.value), entry.state, entry.raw)
        return duplicate


def _key(key: str | ParameterDescriptor[ValueT]) -> str:
    """Return the id for a descriptor or id argument.

    Args:
        key: Descriptor or descriptor id.

    Returns:
        str: Descriptor id.
    """

    return key if isinstance(key, str) else key.id


__all__ = ["EntryState", "MULTI_VALUE_KEYS", "ParameterStore", "StoreEntry"]
