"""Response bodies returned by the catalog service.

Every successful response carries a numeric ``code`` (0 on success). The two
partition collection shapes are distinct models: PartitionNameListResponse
for the name-only listing and PartitionListResponse for full records.
"""

from __future__ import annotations

from typing import NoReturn

from pydantic import BaseModel, ConfigDict, Field

from floe_metalake.dto import PartitionDTO, TableDTO
from floe_metalake.errors import DTOValidationError

_RESPONSE_CONFIG = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)


class BaseResponse(BaseModel):
    """Fields shared by all service responses."""

    model_config = _RESPONSE_CONFIG

    code: int = Field(default=0, description="Service status code, 0 on success")

    def validate_response(self) -> None:
        """Check the response after it is received.

        Raises:
            DTOValidationError: If the response is malformed.
        """
        if self.code < 0:
            self._fail(f"code must be >= 0, got {self.code}")

    def _fail(self, message: str) -> NoReturn:
        raise DTOValidationError(message, dto=type(self).__name__)


class PartitionNameListResponse(BaseResponse):
    """Name-only partition listing."""

    names: list[str] = Field(default_factory=list, description="Partition names")

    def validate_response(self) -> None:
        super().validate_response()
        for name in self.names:
            if not name:
                self._fail("partition names must not be empty")


class PartitionListResponse(BaseResponse):
    """Detailed partition listing, also returned by add-partitions.

    An empty array is a valid listing but not a valid add result, so
    list callers skip validate_response() and add callers run it.
    """

    partitions: list[PartitionDTO] = Field(default_factory=list)

    def validate_response(self) -> None:
        super().validate_response()
        if not self.partitions:
            self._fail("partitions must not be empty")
        for partition in self.partitions:
            partition.validate_partition()


class PartitionResponse(BaseResponse):
    """Single partition, returned by get-partition."""

    partition: PartitionDTO | None = None

    def validate_response(self) -> None:
        super().validate_response()
        if self.partition is None:
            self._fail("partition must not be null")
        self.partition.validate_partition()


class TableResponse(BaseResponse):
    """Single table, returned by load-table."""

    table: TableDTO | None = None

    def validate_response(self) -> None:
        super().validate_response()
        if self.table is None:
            self._fail("table must not be null")


class ErrorResponse(BaseModel):
    """Error payload returned with a non-success status.

    Example payload::

        {"code": 1003, "type": "NoSuchPartitionException",
         "message": "Partition p1 does not exist", "stack": []}
    """

    model_config = _RESPONSE_CONFIG

    code: int = Field(..., description="Service error code")
    type: str | None = Field(default=None, description="Service exception type name")
    message: str | None = Field(default=None, description="Error message")
    stack: list[str] = Field(default_factory=list, description="Server-side stack trace")

    def format_message(self) -> str:
        if self.type and self.message:
            return f"{self.type}: {self.message}"
        return self.message or self.type or f"Service error code {self.code}"
