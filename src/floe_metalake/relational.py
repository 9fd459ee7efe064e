"""Relational table with partition operations over REST.

RelationalTable is the partition-capable table returned by load_table().
Each partition operation issues exactly one request through the REST
client, maps failures via PartitionErrorHandler, and keeps no local state:
every read goes back to the service.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar

from floe_metalake.converters import from_dto, to_dto
from floe_metalake.dto import TableDTO
from floe_metalake.error_handlers import partition_error_handler
from floe_metalake.errors import UnsupportedOperationError
from floe_metalake.namespaces import (
    Namespace,
    format_partition_request_path,
    partition_request_path,
)
from floe_metalake.observability import get_logger, partition_operation
from floe_metalake.requests import AddPartitionsRequest
from floe_metalake.responses import (
    PartitionListResponse,
    PartitionNameListResponse,
    PartitionResponse,
)
from floe_metalake.tables import SupportsPartitions, Table

if TYPE_CHECKING:
    from structlog.stdlib import BoundLogger

    from floe_metalake.partitions import Partition
    from floe_metalake.rest import RESTClient


class RelationalTable(Table, SupportsPartitions):
    """Relational table supporting partition management.

    Attributes:
        namespace: Namespace (metalake, catalog, schema) of the table.

    Example:
        >>> table = RelationalTable(Namespace.of("ml", "hive_cat", "sales"), dto, client)
        >>> table.add_partition(identity("dt=2024-01-01"))
        >>> table.list_partition_names()
        ['dt=2024-01-01']
    """

    CAPABILITIES: ClassVar[tuple[type, ...]] = (SupportsPartitions,)

    def __init__(
        self,
        namespace: Namespace,
        table_dto: TableDTO,
        rest_client: RESTClient,
        *,
        logger: BoundLogger | None = None,
    ) -> None:
        """Initialize RelationalTable.

        Args:
            namespace: Three-level namespace of the table.
            table_dto: Table description returned by the service.
            rest_client: REST client shared with the rest of the application.
            logger: Optional structlog logger. Uses default if not provided.
        """
        super().__init__(namespace, table_dto)
        self._rest_client = rest_client
        self._logger = logger or get_logger(namespace=str(namespace), table=self.name)

    def partition_request_path(self) -> str:
        """Return the REST path of this table's partition collection."""
        return partition_request_path(self.namespace, self.name)

    def list_partition_names(self) -> list[str]:
        """List partition names.

        Returns:
            Partition names in service order; empty if the table has none.
        """
        with partition_operation(
            "list_partition_names", namespace=str(self.namespace), table=self.name
        ):
            resp = self._rest_client.get(
                self.partition_request_path(),
                PartitionNameListResponse,
                error_handler=partition_error_handler(),
            )
            resp.validate_response()
            self._logger.debug("partition_names_listed", count=len(resp.names))
            return list(resp.names)

    def list_partitions(self) -> list[Partition]:
        """List partitions with full detail.

        Returns:
            Partitions in service order; empty if the table has none.
        """
        with partition_operation("list_partitions", namespace=str(self.namespace), table=self.name):
            resp = self._rest_client.get(
                self.partition_request_path(),
                PartitionListResponse,
                params={"details": "true"},
                error_handler=partition_error_handler(),
            )
            for dto in resp.partitions:
                dto.validate_partition()
            self._logger.debug("partitions_listed", count=len(resp.partitions))
            return [from_dto(dto) for dto in resp.partitions]

    def get_partition(self, partition_name: str) -> Partition:
        """Get a partition by name.

        Args:
            partition_name: Name of the partition.

        Returns:
            The partition.

        Raises:
            NoSuchPartitionError: If the partition does not exist.
        """
        with partition_operation(
            "get_partition",
            namespace=str(self.namespace),
            table=self.name,
            partition=partition_name,
        ):
            resp = self._rest_client.get(
                format_partition_request_path(self.partition_request_path(), partition_name),
                PartitionResponse,
                error_handler=partition_error_handler(),
            )
            resp.validate_response()
            return from_dto(resp.partition)  # type: ignore[arg-type]

    def add_partition(self, partition: Partition) -> Partition:
        """Add a partition to the table.

        The request is validated locally first; nothing is sent if it is
        malformed.

        Args:
            partition: Partition to add.

        Returns:
            The partition as stored by the service.

        Raises:
            DTOValidationError: If the partition or the response is malformed.
            PartitionAlreadyExistsError: If the partition name is taken.
        """
        with partition_operation(
            "add_partition",
            namespace=str(self.namespace),
            table=self.name,
            partition=partition.name,
        ):
            req = AddPartitionsRequest(partitions=[to_dto(partition)])
            req.validate_request()

            resp = self._rest_client.post(
                self.partition_request_path(),
                req,
                PartitionListResponse,
                error_handler=partition_error_handler(),
            )
            resp.validate_response()

            added = from_dto(resp.partitions[0])
            self._logger.info("partition_added", partition=added.name)
            return added

    def drop_partition(self, partition_name: str) -> bool:
        """Drop a partition.

        Not supported: the service contract used here has no partition
        delete endpoint.

        Raises:
            UnsupportedOperationError: Always.
        """
        raise UnsupportedOperationError(
            f"Dropping partition {partition_name} of table {self.name} is not supported",
            operation="drop_partition",
        )
