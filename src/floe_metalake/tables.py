"""Table abstraction and optional table capabilities.

A Table exposes the base capability set: identity, schema description,
properties and audit info. Extra behavior such as partition management is a
separate capability interface. Each table class lists the capabilities it
implements in CAPABILITIES, and callers ask for one with capability() rather
than relying on isinstance checks or inheritance depth.

Example:
    >>> partitions = table.capability(SupportsPartitions)
    >>> if partitions is not None:
    ...     partitions.list_partition_names()
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, ClassVar, TypeVar

from floe_metalake.dto import AuditDTO, ColumnDTO, TableDTO
from floe_metalake.errors import NoSuchPartitionError, UnsupportedOperationError
from floe_metalake.namespaces import Namespace
from floe_metalake.partitions import Partition

C = TypeVar("C")


class SupportsPartitions(ABC):
    """Partition management capability of a table."""

    @abstractmethod
    def list_partition_names(self) -> list[str]:
        """List the names of all partitions, in service order."""

    @abstractmethod
    def list_partitions(self) -> list[Partition]:
        """List all partitions with full detail, in service order."""

    @abstractmethod
    def get_partition(self, partition_name: str) -> Partition:
        """Return the partition with the given name.

        Raises:
            NoSuchPartitionError: If the partition does not exist.
        """

    @abstractmethod
    def add_partition(self, partition: Partition) -> Partition:
        """Add a partition and return it as stored by the service.

        Raises:
            PartitionAlreadyExistsError: If a partition with the same name exists.
        """

    @abstractmethod
    def drop_partition(self, partition_name: str) -> bool:
        """Drop a partition, returning True if one was removed."""

    def partition_exists(self, partition_name: str) -> bool:
        """Check whether a partition exists."""
        try:
            self.get_partition(partition_name)
        except NoSuchPartitionError:
            return False
        return True


class Table:
    """Read-only view of a relational table, backed by a TableDTO snapshot.

    A plain Table declares no optional capabilities.

    Attributes:
        namespace: Namespace (metalake, catalog, schema) the table lives in.
    """

    CAPABILITIES: ClassVar[tuple[type, ...]] = ()

    def __init__(self, namespace: Namespace, table_dto: TableDTO) -> None:
        """Initialize Table.

        Args:
            namespace: Three-level namespace of the table.
            table_dto: Table description returned by the service.
        """
        self.namespace = namespace
        self._table_dto = table_dto

    @property
    def name(self) -> str:
        return self._table_dto.name

    @property
    def columns(self) -> tuple[ColumnDTO, ...]:
        return tuple(self._table_dto.columns)

    @property
    def partitioning(self) -> tuple[Mapping[str, Any], ...]:
        return tuple(self._table_dto.partitioning)

    @property
    def sort_order(self) -> tuple[Mapping[str, Any], ...]:
        return tuple(self._table_dto.sort_orders)

    @property
    def distribution(self) -> Mapping[str, Any] | None:
        return self._table_dto.distribution

    @property
    def comment(self) -> str | None:
        return self._table_dto.comment

    @property
    def properties(self) -> Mapping[str, str]:
        return MappingProxyType(self._table_dto.properties)

    @property
    def audit_info(self) -> AuditDTO:
        return self._table_dto.audit

    @property
    def index(self) -> tuple[Mapping[str, Any], ...]:
        return tuple(self._table_dto.indexes)

    def capability(self, capability: type[C]) -> C | None:
        """Return this table as the requested capability, if declared.

        Args:
            capability: Capability interface, e.g. SupportsPartitions.

        Returns:
            The capability handle, or None if this table type does not
            implement it.
        """
        if capability in type(self).CAPABILITIES and isinstance(self, capability):
            return self
        return None

    def support_partitions(self) -> SupportsPartitions:
        """Return the partition capability of this table.

        Raises:
            UnsupportedOperationError: If the table does not support partitions.
        """
        partitions = self.capability(SupportsPartitions)
        if partitions is None:
            raise UnsupportedOperationError(
                f"Table {self.name} does not support partition operations",
                operation="support_partitions",
            )
        return partitions

    def __repr__(self) -> str:
        return f"{type(self).__name__}(namespace={str(self.namespace)!r}, name={self.name!r})"
