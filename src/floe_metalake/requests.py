"""Request bodies sent to the catalog service."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from floe_metalake.dto import PartitionDTO
from floe_metalake.errors import DTOValidationError


class AddPartitionsRequest(BaseModel):
    """Body of POST .../tables/{table}/partitions.

    The service accepts exactly one partition per call.

    Example:
        >>> req = AddPartitionsRequest(partitions=[IdentityPartitionDTO(name="p1")])
        >>> req.validate_request()
    """

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    partitions: list[PartitionDTO] = Field(
        default_factory=list,
        description="Partitions to add",
    )

    def validate_request(self) -> None:
        """Check the request before it is sent.

        Raises:
            DTOValidationError: If there is not exactly one partition, or the
                partition itself is malformed.
        """
        if not self.partitions:
            raise DTOValidationError("partitions must not be empty", dto=type(self).__name__)
        if len(self.partitions) > 1:
            raise DTOValidationError(
                f"Only one partition can be added per request, got {len(self.partitions)}",
                dto=type(self).__name__,
            )
        for partition in self.partitions:
            partition.validate_partition()
