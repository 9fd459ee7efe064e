"""In-memory partition model.

Covers: IdentityPartition, RangePartition, ListPartition

These are the objects callers build and receive. They are plain, frozen
dataclasses; their wire form lives in floe_metalake.dto and the mapping
between the two in floe_metalake.converters.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Union


@dataclass(frozen=True)
class LiteralValue:
    """A typed literal used in partition bounds and values.

    Attributes:
        data_type: Type name as understood by the service (e.g. "date", "integer").
        value: String form of the value; None for SQL NULL.
    """

    data_type: str
    value: str | None

    @classmethod
    def of(cls, value: object, data_type: str | None = None) -> LiteralValue:
        """Build a literal from a Python value, inferring simple types."""
        if value is None:
            return cls(data_type=data_type or "null", value=None)
        if data_type is None:
            if isinstance(value, bool):
                data_type = "boolean"
            elif isinstance(value, int):
                data_type = "long"
            elif isinstance(value, float):
                data_type = "double"
            else:
                data_type = "string"
        if isinstance(value, bool):
            return cls(data_type=data_type, value=str(value).lower())
        return cls(data_type=data_type, value=str(value))


@dataclass(frozen=True)
class IdentityPartition:
    """Partition defined by exact values of one or more columns.

    Example:
        >>> p = identity("dt=2024-01-01", [["dt"]], [LiteralValue("date", "2024-01-01")])
        >>> p.name
        'dt=2024-01-01'
    """

    name: str
    field_names: tuple[tuple[str, ...], ...] = ()
    values: tuple[LiteralValue, ...] = ()
    properties: Mapping[str, str] = field(default_factory=dict, hash=False)


@dataclass(frozen=True)
class RangePartition:
    """Partition covering the half-open interval [lower, upper)."""

    name: str
    upper: LiteralValue | None = None
    lower: LiteralValue | None = None
    properties: Mapping[str, str] = field(default_factory=dict, hash=False)


@dataclass(frozen=True)
class ListPartition:
    """Partition holding rows whose key matches one of several value lists."""

    name: str
    lists: tuple[tuple[LiteralValue, ...], ...] = ()
    properties: Mapping[str, str] = field(default_factory=dict, hash=False)


Partition = Union[IdentityPartition, RangePartition, ListPartition]
"""Any partition kind."""


def identity(
    name: str,
    field_names: Iterable[Iterable[str]] = (),
    values: Iterable[LiteralValue] = (),
    properties: Mapping[str, str] | None = None,
) -> IdentityPartition:
    """Create an identity partition."""
    return IdentityPartition(
        name=name,
        field_names=tuple(tuple(f) for f in field_names),
        values=tuple(values),
        properties=dict(properties or {}),
    )


def range_partition(
    name: str,
    upper: LiteralValue | None = None,
    lower: LiteralValue | None = None,
    properties: Mapping[str, str] | None = None,
) -> RangePartition:
    """Create a range partition."""
    return RangePartition(name=name, upper=upper, lower=lower, properties=dict(properties or {}))


def list_partition(
    name: str,
    lists: Iterable[Iterable[LiteralValue]] = (),
    properties: Mapping[str, str] | None = None,
) -> ListPartition:
    """Create a list partition."""
    return ListPartition(
        name=name,
        lists=tuple(tuple(values) for values in lists),
        properties=dict(properties or {}),
    )
