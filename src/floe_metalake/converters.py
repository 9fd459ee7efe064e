"""Conversion between in-memory partitions and their transfer objects."""

from __future__ import annotations

from floe_metalake.dto import (
    IdentityPartitionDTO,
    ListPartitionDTO,
    LiteralDTO,
    PartitionDTO,
    RangePartitionDTO,
)
from floe_metalake.partitions import (
    IdentityPartition,
    ListPartition,
    LiteralValue,
    Partition,
    RangePartition,
)


def literal_to_dto(literal: LiteralValue) -> LiteralDTO:
    return LiteralDTO(data_type=literal.data_type, value=literal.value)


def literal_from_dto(dto: LiteralDTO) -> LiteralValue:
    return LiteralValue(data_type=dto.data_type, value=dto.value)


def to_dto(partition: Partition) -> PartitionDTO:
    """Convert a partition to its wire form.

    Args:
        partition: Identity, range or list partition.

    Returns:
        The matching partition DTO.

    Raises:
        TypeError: If partition is not a known partition kind.
    """
    if isinstance(partition, IdentityPartition):
        return IdentityPartitionDTO(
            name=partition.name,
            field_names=[list(f) for f in partition.field_names],
            values=[literal_to_dto(v) for v in partition.values],
            properties=dict(partition.properties),
        )
    if isinstance(partition, RangePartition):
        return RangePartitionDTO(
            name=partition.name,
            upper=literal_to_dto(partition.upper) if partition.upper else None,
            lower=literal_to_dto(partition.lower) if partition.lower else None,
            properties=dict(partition.properties),
        )
    if isinstance(partition, ListPartition):
        return ListPartitionDTO(
            name=partition.name,
            lists=[[literal_to_dto(v) for v in values] for values in partition.lists],
            properties=dict(partition.properties),
        )
    msg = f"Unsupported partition type: {type(partition).__name__}"
    raise TypeError(msg)


def from_dto(dto: PartitionDTO) -> Partition:
    """Convert a partition DTO received from the service to a partition."""
    name = dto.name or ""
    if isinstance(dto, IdentityPartitionDTO):
        return IdentityPartition(
            name=name,
            field_names=tuple(tuple(f) for f in dto.field_names),
            values=tuple(literal_from_dto(v) for v in dto.values),
            properties=dict(dto.properties),
        )
    if isinstance(dto, RangePartitionDTO):
        return RangePartition(
            name=name,
            upper=literal_from_dto(dto.upper) if dto.upper else None,
            lower=literal_from_dto(dto.lower) if dto.lower else None,
            properties=dict(dto.properties),
        )
    return ListPartition(
        name=name,
        lists=tuple(tuple(literal_from_dto(v) for v in values) for values in dto.lists),
        properties=dict(dto.properties),
    )
