"""Client and table factories.

This module provides:
- create_rest_client(): build an HTTPClient from configuration
- load_table(): fetch a table description and wrap it in a RelationalTable
"""

from __future__ import annotations

from typing import Any

from floe_metalake.config import MetalakeClientConfig
from floe_metalake.error_handlers import table_error_handler
from floe_metalake.namespaces import Namespace, table_request_path
from floe_metalake.observability import get_logger, span
from floe_metalake.relational import RelationalTable
from floe_metalake.responses import TableResponse
from floe_metalake.rest import HTTPClient, RESTClient


def create_rest_client(config: MetalakeClientConfig | dict[str, Any], **kwargs: Any) -> HTTPClient:
    """Create an HTTP client for the catalog service.

    Args:
        config: MetalakeClientConfig, or a dict of its fields.
        **kwargs: Passed through to HTTPClient (e.g. transport).

    Returns:
        HTTPClient: Configured client. Close it when done.

    Raises:
        pydantic.ValidationError: If a dict config is invalid.

    Example:
        >>> client = create_rest_client({"uri": "http://localhost:8090", "token": "t0k"})
    """
    if not isinstance(config, MetalakeClientConfig):
        config = MetalakeClientConfig.model_validate(config)

    get_logger().info(
        "creating_rest_client",
        uri=config.uri,
        max_attempts=config.retry.max_attempts,
    )
    return HTTPClient(config, **kwargs)


def load_table(
    rest_client: RESTClient,
    namespace: Namespace,
    table_name: str,
) -> RelationalTable:
    """Load a table handle from the catalog service.

    Args:
        rest_client: Client used for this and all later partition calls.
        namespace: Three-level namespace (metalake, catalog, schema).
        table_name: Table name.

    Returns:
        RelationalTable wrapping the returned table description.

    Raises:
        IllegalNamespaceError: If the namespace does not have 3 levels.
        NoSuchTableError: If the table does not exist.
        NoSuchSchemaError: If the schema does not exist (likewise catalog, metalake).

    Example:
        >>> table = load_table(client, Namespace.of("ml", "hive_cat", "sales"), "orders")
        >>> table.support_partitions().list_partition_names()
    """
    path = table_request_path(namespace, table_name)
    attrs = {"metalake.namespace": str(namespace), "metalake.table": table_name}

    with span("table.load_table", attributes=attrs):
        resp = rest_client.get(path, TableResponse, error_handler=table_error_handler())
        resp.validate_response()
        return RelationalTable(namespace, resp.table, rest_client)  # type: ignore[arg-type]
