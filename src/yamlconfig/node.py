"""Type tags for the values of a parsed configuration tree."""

from __future__ import annotations

import math
from decimal import Decimal
from enum import Enum
from typing import Any

from yamlconfig.errors import TypeMismatchError

__all__ = ["NodeKind", "kind_of", "expect", "format_scalar"]


class NodeKind(str, Enum):
    """Tag of a configuration node."""

    MAPPING = "mapping"
    SEQUENCE = "sequence"
    STRING = "string"
    INT = "int"
    FLOAT = "float"
    BOOL = "bool"
    NULL = "null"
    OTHER = "other"


def kind_of(value: Any) -> NodeKind:
    """Return the tag of a node.

    ``bool`` is checked before ``int`` since it is a subclass of it.
    """
    if value is None:
        return NodeKind.NULL
    if isinstance(value, bool):
        return NodeKind.BOOL
    if isinstance(value, int):
        return NodeKind.INT
    if isinstance(value, float):
        return NodeKind.FLOAT
    if isinstance(value, str):
        return NodeKind.STRING
    if isinstance(value, dict):
        return NodeKind.MAPPING
    if isinstance(value, list):
        return NodeKind.SEQUENCE
    return NodeKind.OTHER


def expect(key: str, value: Any, kind: NodeKind) -> Any:
    """Return ``value`` if it is tagged ``kind``, raise TypeMismatchError otherwise."""
    actual = kind_of(value)
    if actual is not kind:
        raise TypeMismatchError(key=key, expected=kind.value, actual=actual.value)
    return value


def _format_float(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    # repr() is the shortest round-tripping form; Decimal drops the exponent.
    return format(Decimal(repr(value)).normalize(), "f")


def format_scalar(value: Any) -> str:
    """Render a list element as a string."""
    kind = kind_of(value)
    if kind is NodeKind.BOOL:
        return "true" if value else "false"
    if kind is NodeKind.INT:
        return str(value)
    if kind is NodeKind.FLOAT:
        return _format_float(value)
    if kind is NodeKind.STRING:
        return value
    return str(value)
