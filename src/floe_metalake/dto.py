"""Wire-format transfer objects for tables and partitions.

Covers: LiteralDTO, IdentityPartitionDTO, RangePartitionDTO, ListPartitionDTO,
AuditDTO, ColumnDTO, TableDTO

Field names follow the service's camelCase JSON. Models accept either the
camelCase alias or the Python field name on input and serialize by alias.
Structural checks that must run explicitly (before a request is sent or
after a response is received) live in validate_partition(), not in field
constraints, so a malformed payload can still be parsed and then rejected
with a DTOValidationError.
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Discriminator, Field

from floe_metalake.errors import DTOValidationError

_WIRE_CONFIG = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)


class LiteralDTO(BaseModel):
    """Typed literal value on the wire."""

    model_config = _WIRE_CONFIG

    type: Literal["literal"] = Field(
        default="literal",
        description="Expression type discriminator",
    )
    data_type: str = Field(
        ...,
        alias="dataType",
        description="Type name of the literal",
    )
    value: str | None = Field(
        default=None,
        description="String form of the value; null for SQL NULL",
    )


class _PartitionDTOBase(BaseModel):
    model_config = _WIRE_CONFIG

    name: str | None = Field(
        default=None,
        description="Partition name, unique within the table",
    )
    properties: dict[str, str] = Field(
        default_factory=dict,
        description="Partition properties",
    )

    def validate_partition(self) -> None:
        """Check the partition is well formed.

        Raises:
            DTOValidationError: If the partition name is missing or blank.
        """
        if not self.name or not self.name.strip():
            raise DTOValidationError(
                "Partition name cannot be null or empty",
                dto=type(self).__name__,
            )


class IdentityPartitionDTO(_PartitionDTOBase):
    """Identity partition: exact values for one or more columns.

    Example:
        >>> IdentityPartitionDTO(
        ...     name="dt=2024-01-01",
        ...     field_names=[["dt"]],
        ...     values=[LiteralDTO(data_type="date", value="2024-01-01")],
        ... )
    """

    type: Literal["identity"] = Field(
        default="identity",
        description="Partition type discriminator",
    )
    field_names: list[list[str]] = Field(
        default_factory=list,
        alias="fieldNames",
        description="Column references, each a list of nested field names",
    )
    values: list[LiteralDTO] = Field(
        default_factory=list,
        description="One literal per field name",
    )

    def validate_partition(self) -> None:
        """Check name, and that field names and values line up."""
        super().validate_partition()
        if len(self.field_names) != len(self.values):
            raise DTOValidationError(
                f"Identity partition {self.name!r} has {len(self.field_names)} field names "
                f"but {len(self.values)} values",
                dto=type(self).__name__,
            )


class RangePartitionDTO(_PartitionDTOBase):
    """Range partition: rows in [lower, upper)."""

    type: Literal["range"] = Field(
        default="range",
        description="Partition type discriminator",
    )
    upper: LiteralDTO | None = Field(
        default=None,
        description="Exclusive upper bound",
    )
    lower: LiteralDTO | None = Field(
        default=None,
        description="Inclusive lower bound",
    )


class ListPartitionDTO(_PartitionDTOBase):
    """List partition: rows whose key matches one of the value lists."""

    type: Literal["list"] = Field(
        default="list",
        description="Partition type discriminator",
    )
    lists: list[list[LiteralDTO]] = Field(
        default_factory=list,
        description="Accepted value tuples",
    )


PartitionDTO = Annotated[
    IdentityPartitionDTO | RangePartitionDTO | ListPartitionDTO,
    Discriminator("type"),
]
"""Partition transfer object, discriminated on the "type" field."""


class AuditDTO(BaseModel):
    """Audit information attached to catalog objects."""

    model_config = _WIRE_CONFIG

    creator: str | None = None
    create_time: datetime | None = Field(default=None, alias="createTime")
    last_modifier: str | None = Field(default=None, alias="lastModifier")
    last_modified_time: datetime | None = Field(default=None, alias="lastModifiedTime")


class ColumnDTO(BaseModel):
    """Table column. The data type is carried as the service sends it."""

    model_config = _WIRE_CONFIG

    name: str
    data_type: Any = Field(default=None, alias="type")
    comment: str | None = None
    nullable: bool = True
    auto_increment: bool = Field(default=False, alias="autoIncrement")


class TableDTO(BaseModel):
    """Snapshot of a relational table as described by the service.

    Partitioning, distribution, sort order and indexes are kept as raw JSON
    objects; this package does not interpret them.
    """

    model_config = _WIRE_CONFIG

    name: str = Field(..., min_length=1, description="Table name")
    comment: str | None = None
    columns: list[ColumnDTO] = Field(default_factory=list)
    properties: dict[str, str] = Field(default_factory=dict)
    audit: AuditDTO = Field(default_factory=AuditDTO)
    partitioning: list[dict[str, Any]] = Field(default_factory=list)
    distribution: dict[str, Any] | None = None
    sort_orders: list[dict[str, Any]] = Field(default_factory=list, alias="sortOrders")
    indexes: list[dict[str, Any]] = Field(default_factory=list)
