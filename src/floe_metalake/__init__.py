"""floe-metalake: partition management client for metalake catalogs.

This package provides:
- Namespace addressing for metalake/catalog/schema/table REST paths
- Partition transfer objects with explicit request/response validation
- A capability-based table model (SupportsPartitions)
- RelationalTable: list/get/add partition operations over REST
- Typed exceptions mapped from service error responses

Example:
    >>> from floe_metalake import Namespace, create_rest_client, load_table, identity
    >>> client = create_rest_client({"uri": "http://localhost:8090"})
    >>> table = load_table(client, Namespace.of("ml", "hive_cat", "sales"), "orders")
    >>> table.support_partitions().add_partition(identity("dt=2024-01-01"))
"""

from __future__ import annotations

__version__ = "0.1.0"

__all__ = [
    # Factory functions
    "create_rest_client",
    "load_table",
    # Clients and tables
    "HTTPClient",
    "RESTClient",
    "Table",
    "RelationalTable",
    "SupportsPartitions",
    # Configuration models
    "MetalakeClientConfig",
    "RetryConfig",
    # Addressing
    "Namespace",
    # Partitions
    "IdentityPartition",
    "RangePartition",
    "ListPartition",
    "LiteralValue",
    "Partition",
    "identity",
    "range_partition",
    "list_partition",
    # Exceptions
    "FloeMetalakeError",
    "RESTError",
    "NotFoundError",
    "NoSuchMetalakeError",
    "NoSuchCatalogError",
    "NoSuchSchemaError",
    "NoSuchTableError",
    "NoSuchPartitionError",
    "AlreadyExistsError",
    "PartitionAlreadyExistsError",
    "NonEmptyError",
    "IllegalArgumentError",
    "InternalServerError",
    "UnsupportedOperationError",
    "MetalakeConnectionError",
    "CircuitOpenError",
    "DTOValidationError",
    "IllegalNamespaceError",
]

_MODULES = {
    "floe_metalake.factory": ("create_rest_client", "load_table"),
    "floe_metalake.rest": ("HTTPClient", "RESTClient"),
    "floe_metalake.tables": ("Table", "SupportsPartitions"),
    "floe_metalake.relational": ("RelationalTable",),
    "floe_metalake.config": ("MetalakeClientConfig", "RetryConfig"),
    "floe_metalake.namespaces": ("Namespace",),
    "floe_metalake.partitions": (
        "IdentityPartition",
        "RangePartition",
        "ListPartition",
        "LiteralValue",
        "Partition",
        "identity",
        "range_partition",
        "list_partition",
    ),
}


def __getattr__(name: str) -> object:
    """Lazy import of public API members."""
    import importlib

    for module_name, names in _MODULES.items():
        if name in names:
            return getattr(importlib.import_module(module_name), name)
    if name in __all__:
        from floe_metalake import errors as errors_module

        return getattr(errors_module, name)
    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
