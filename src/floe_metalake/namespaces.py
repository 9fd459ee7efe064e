"""Namespace addressing for metalake resources.

This module provides:
- Namespace: immutable, ordered namespace levels
- table_request_path: REST path of a table
- partition_request_path: REST path of a table's partition collection
- format_partition_request_path: REST path of one partition

A table is addressed by a three-level namespace (metalake, catalog, schema)
plus its own name.
"""

from __future__ import annotations

from urllib.parse import quote

from pydantic import BaseModel, ConfigDict, Field, field_validator

from floe_metalake.errors import IllegalNamespaceError

TABLE_NAMESPACE_LEVELS = 3


class Namespace(BaseModel):
    """Ordered, immutable sequence of namespace levels.

    Attributes:
        levels: Namespace levels from outermost to innermost.

    Example:
        >>> ns = Namespace.of("ml", "hive_cat", "sales")
        >>> ns.level(1)
        'hive_cat'
        >>> str(ns)
        'ml.hive_cat.sales'
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    levels: tuple[str, ...] = Field(
        default=(),
        description="Namespace levels, outermost first",
    )

    @field_validator("levels")
    @classmethod
    def levels_must_be_non_empty(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        """Reject blank levels."""
        for level in v:
            if not level:
                msg = f"Namespace levels cannot be empty: {v!r}"
                raise ValueError(msg)
        return v

    @classmethod
    def of(cls, *levels: str) -> Namespace:
        """Create a namespace from its levels."""
        return cls(levels=levels)

    def level(self, pos: int) -> str:
        """Return the level at position pos (0 = metalake)."""
        return self.levels[pos]

    def length(self) -> int:
        return len(self.levels)

    def __str__(self) -> str:
        return ".".join(self.levels)


def _check_table_namespace(namespace: Namespace) -> None:
    if namespace.length() != TABLE_NAMESPACE_LEVELS:
        raise IllegalNamespaceError(
            str(namespace),
            f"Table namespace must have exactly {TABLE_NAMESPACE_LEVELS} levels "
            f"(metalake, catalog, schema), got {namespace.length()}",
        )


def table_request_path(namespace: Namespace, table_name: str) -> str:
    """Build the REST path of a table.

    Args:
        namespace: Three-level namespace (metalake, catalog, schema).
        table_name: Table name.

    Returns:
        Path of the form
        ``api/metalakes/{m}/catalogs/{c}/schemas/{s}/tables/{table}``.

    Raises:
        IllegalNamespaceError: If the namespace does not have 3 levels.
    """
    _check_table_namespace(namespace)
    return (
        f"api/metalakes/{namespace.level(0)}"
        f"/catalogs/{namespace.level(1)}"
        f"/schemas/{namespace.level(2)}"
        f"/tables/{table_name}"
    )


def partition_request_path(namespace: Namespace, table_name: str) -> str:
    """Build the REST path of a table's partition collection.

    Args:
        namespace: Three-level namespace (metalake, catalog, schema).
        table_name: Table name.

    Returns:
        Path ending in ``/tables/{table}/partitions``.

    Raises:
        IllegalNamespaceError: If the namespace does not have 3 levels.

    Example:
        >>> partition_request_path(Namespace.of("ml", "hive_cat", "sales"), "orders")
        'api/metalakes/ml/catalogs/hive_cat/schemas/sales/tables/orders/partitions'
    """
    return f"{table_request_path(namespace, table_name)}/partitions"


def format_partition_request_path(prefix: str, partition_name: str) -> str:
    """Append a percent-encoded partition name to a collection path.

    The name is UTF-8 percent-encoded with no safe characters, so ``/``,
    ``=``, spaces and non-ASCII characters all survive the round trip.

    Example:
        >>> format_partition_request_path("t/partitions", "dt=2024-01-01")
        't/partitions/dt%3D2024-01-01'
    """
    return f"{prefix}/{quote(partition_name, safe='', encoding='utf-8')}"
