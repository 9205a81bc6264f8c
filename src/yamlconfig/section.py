"""Typed, path-addressed read access into a configuration mapping."""

from __future__ import annotations

import json
from datetime import timedelta
from typing import Any, TypeVar

from pydantic import TypeAdapter, ValidationError

from yamlconfig.duration import INVALID_DURATION, coerce_duration
from yamlconfig.errors import (
    FatalConfigError,
    KeyNotFoundError,
    NotAMappingError,
    SectionNotAvailableError,
    UnmarshalError,
    YamlConfigError,
)
from yamlconfig.node import NodeKind, expect, format_scalar, kind_of
from yamlconfig.utils.rwlock import ReadWriteLock

__all__ = ["ConfigSection", "KEY_SEPARATOR"]

KEY_SEPARATOR = ":"

T = TypeVar("T")


class ConfigSection:
    """A view over one mapping node of a parsed configuration tree.

    Keys are colon-delimited paths (``"server:http:port"``) walked through
    nested mappings. Getters come in three flavours:

    * ``get_*`` raise :class:`FatalConfigError` when the key is missing or
      holds a value of the wrong type.
    * ``get_*_default`` return the supplied default when the key is missing.
      The default is returned as given, without a type check.
    * ``get_section`` raises a recoverable :class:`KeyNotFoundError`;
      ``must_get_section`` raises :class:`FatalConfigError`.

    Thread safety:
        Each section owns a reader/writer lock guarding its own reference to
        the node. Sections derived with :meth:`get_section` get their own
        lock; the contents of the tree are never locked, so a tree must not
        be mutated while sections read it.
    """

    def __init__(self, data: Any) -> None:
        self._data = data
        self._lock = ReadWriteLock()

    def __repr__(self) -> str:
        return f"ConfigSection(kind={kind_of(self._data).value})"

    # ----- Lookup -----

    def _resolve(self, key: str) -> Any:
        """Walk ``key`` through nested mappings and return the node it names.

        Raises:
            NotAMappingError: If this section's data is not a mapping.
            KeyNotFoundError: If any segment is missing or an intermediate
                node is not a mapping. The error names the whole ``key``.
        """
        segments = key.split(KEY_SEPARATOR)
        with self._lock.read_locked():
            current = self._data
            if not isinstance(current, dict):
                raise NotAMappingError(actual=kind_of(current).value)
            for segment in segments:
                if not isinstance(current, dict) or segment not in current:
                    raise KeyNotFoundError(key)
                current = current[segment]
            return current

    def _typed(self, key: str, kind: NodeKind) -> Any:
        try:
            return expect(key, self._resolve(key), kind)
        except YamlConfigError as e:
            raise FatalConfigError(key=key, cause=e) from e

    def _typed_default(self, key: str, kind: NodeKind, default: Any) -> Any:
        try:
            value = self._resolve(key)
        except YamlConfigError:
            return default
        try:
            return expect(key, value, kind)
        except YamlConfigError as e:
            raise FatalConfigError(key=key, cause=e) from e

    def has(self, key: str) -> bool:
        """Return True if ``key`` resolves to a value."""
        try:
            self._resolve(key)
        except YamlConfigError:
            return False
        return True

    def keys(self) -> list[str]:
        """Top-level keys of this section, empty if it is not a mapping."""
        with self._lock.read_locked():
            data = self._data
            if not isinstance(data, dict):
                return []
            return list(data.keys())

    # ----- Objects -----

    def get_object(self, key: str) -> Any:
        """Return the raw node at ``key``."""
        try:
            return self._resolve(key)
        except YamlConfigError as e:
            raise FatalConfigError(key=key, cause=e) from e

    def get_object_default(self, key: str, default: Any) -> Any:
        try:
            return self._resolve(key)
        except YamlConfigError:
            return default

    # ----- Scalars -----

    def get_string(self, key: str) -> str:
        return self._typed(key, NodeKind.STRING)

    def get_string_default(self, key: str, default: str) -> str:
        return self._typed_default(key, NodeKind.STRING, default)

    def get_bool(self, key: str) -> bool:
        return self._typed(key, NodeKind.BOOL)

    def get_bool_default(self, key: str, default: bool) -> bool:
        return self._typed_default(key, NodeKind.BOOL, default)

    def get_int(self, key: str) -> int:
        return self._typed(key, NodeKind.INT)

    def get_int_default(self, key: str, default: int) -> int:
        return self._typed_default(key, NodeKind.INT, default)

    def get_float(self, key: str) -> float:
        """Return the float at ``key``; integers are not widened."""
        return self._typed(key, NodeKind.FLOAT)

    def get_float_default(self, key: str, default: float) -> float:
        return self._typed_default(key, NodeKind.FLOAT, default)

    # ----- Coercing getters -----

    def get_string_list(self, key: str) -> list[str]:
        """Return the sequence at ``key`` with every element rendered as a string.

        A value that is not a sequence yields an empty list.
        """
        value = self.get_object(key)
        if not isinstance(value, list):
            return []
        if all(isinstance(item, str) for item in value):
            return list(value)
        return [format_scalar(item) for item in value]

    def get_duration(self, key: str) -> timedelta:
        """Return the duration at ``key``.

        Missing keys and values that cannot be read as a duration yield
        :data:`~yamlconfig.duration.INVALID_DURATION`.
        """
        try:
            value = self._resolve(key)
        except YamlConfigError:
            return INVALID_DURATION
        return coerce_duration(value)

    def get_duration_default(self, key: str, default: timedelta) -> timedelta:
        value = self.get_duration(key)
        if value == INVALID_DURATION:
            return default
        return value

    # ----- Sections -----

    def get_section(self, key: str) -> ConfigSection:
        """Return a new section over the node at ``key``.

        The node's shape is not checked here; a section over a non-mapping
        fails on its first lookup.

        Raises:
            KeyNotFoundError: If ``key`` does not resolve.
            NotAMappingError: If this section's data is not a mapping.
            SectionNotAvailableError: If ``key`` holds a null value.
        """
        data = self._resolve(key)
        if data is None:
            raise SectionNotAvailableError(key)
        return ConfigSection(data)

    def must_get_section(self, key: str) -> ConfigSection:
        try:
            return self.get_section(key)
        except YamlConfigError as e:
            raise FatalConfigError(key=key, cause=e) from e

    # ----- Bulk access -----

    def unmarshal(self, target: type[T]) -> T:
        """Decode the top level of this section into ``target``.

        The first-level pairs are encoded to JSON and validated against
        ``target`` with pydantic, so any type pydantic accepts works:
        models, dataclasses, typed dicts and plain ``dict`` annotations.

        All top-level keys must be strings; anything else is a
        :class:`FatalConfigError`.

        Raises:
            NotAMappingError: If this section's data is not a mapping.
            UnmarshalError: If encoding or validation fails.
        """
        with self._lock.read_locked():
            data = self._data
        if not isinstance(data, dict):
            raise NotAMappingError(actual=kind_of(data).value)

        top: dict[str, Any] = {}
        for k, v in data.items():
            if not isinstance(k, str):
                raise FatalConfigError(
                    key=repr(k),
                    cause=TypeError(f"top-level key {k!r} is {type(k).__name__}, expected str"),
                )
            top[k] = v

        try:
            encoded = json.dumps(top)
        except (TypeError, ValueError) as e:
            raise UnmarshalError("marshal data", str(e)) from e
        try:
            return TypeAdapter(target).validate_json(encoded)
        except ValidationError as e:
            raise UnmarshalError("unmarshal data", str(e)) from e

    def get_raw(self) -> Any:
        """Return the underlying node. It is not copied and must not be mutated."""
        return self._data

    def replace(self, data: Any) -> None:
        """Swap the node this section reads from."""
        with self._lock.write_locked():
            self._data = data
