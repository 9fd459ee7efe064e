"""Shared pytest fixtures for floe-metalake tests.

Provides an in-memory catalog service behind httpx.MockTransport, so the
real HTTPClient, error handlers and RelationalTable run end to end without
a network.
"""

from __future__ import annotations

import json
import sys
from collections.abc import Iterator
from typing import Any
from urllib.parse import unquote

import httpx
import pytest
import structlog

from floe_metalake.config import MetalakeClientConfig, RetryConfig
from floe_metalake.dto import TableDTO
from floe_metalake.namespaces import Namespace
from floe_metalake.relational import RelationalTable
from floe_metalake.rest import HTTPClient

SALES_NAMESPACE = Namespace.of("ml", "hive_cat", "sales")

ORDERS_TABLE: dict[str, Any] = {
    "name": "orders",
    "comment": "Customer orders",
    "columns": [
        {"name": "id", "type": "long", "nullable": False},
        {"name": "dt", "type": "date", "nullable": True},
    ],
    "properties": {"format": "parquet"},
    "audit": {"creator": "alice", "createTime": "2024-01-01T00:00:00Z"},
    "partitioning": [{"strategy": "identity", "fieldName": ["dt"]}],
    "sortOrders": [],
    "indexes": [],
}


@pytest.fixture(autouse=True)
def configure_structlog_for_tests() -> None:
    """Configure structlog to output to stdout for test capture."""
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=False,
    )


class FakeCatalogService:
    """Stateful stand-in for the catalog service's table and partition endpoints."""

    def __init__(self, tables: dict[str, dict[str, Any]] | None = None) -> None:
        self.tables = tables if tables is not None else {"orders": ORDERS_TABLE}
        self.partitions: dict[str, dict[str, dict[str, Any]]] = {t: {} for t in self.tables}
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        raw_path = request.url.raw_path.split(b"?")[0].decode("ascii")
        segments = [unquote(s) for s in raw_path.strip("/").split("/")]

        if segments[:2] != ["api", "metalakes"] or len(segments) < 9:
            return _error(404, "NotFoundException", f"No route for {raw_path}")
        table = segments[8]
        if table not in self.tables:
            return _error(404, "NoSuchTableException", f"Table {table} does not exist")

        if len(segments) == 9 and request.method == "GET":
            return httpx.Response(200, json={"code": 0, "table": self.tables[table]})
        if len(segments) == 10 and request.method == "GET":
            if request.url.params.get("details") == "true":
                items = list(self.partitions[table].values())
                return httpx.Response(200, json={"code": 0, "partitions": items})
            return httpx.Response(200, json={"code": 0, "names": list(self.partitions[table])})
        if len(segments) == 10 and request.method == "POST":
            return self._add(table, json.loads(request.content))
        if len(segments) == 11 and request.method == "GET":
            name = segments[10]
            if name not in self.partitions[table]:
                return _error(404, "NoSuchPartitionException", f"Partition {name} does not exist")
            return httpx.Response(200, json={"code": 0, "partition": self.partitions[table][name]})
        return _error(405, None, "Method not allowed")

    def _add(self, table: str, body: dict[str, Any]) -> httpx.Response:
        partition = body["partitions"][0]
        name = partition["name"]
        if name in self.partitions[table]:
            return _error(409, "PartitionAlreadyExistsException", f"Partition {name} exists")
        self.partitions[table][name] = partition
        return httpx.Response(200, json={"code": 0, "partitions": [partition]})


def _error(status: int, error_type: str | None, message: str) -> httpx.Response:
    codes = {404: 1003, 409: 1004}
    payload: dict[str, Any] = {"code": codes.get(status, 1002), "message": message, "stack": []}
    if error_type:
        payload["type"] = error_type
    return httpx.Response(status, json=payload)


@pytest.fixture
def client_config() -> MetalakeClientConfig:
    """Client config with fast retries."""
    return MetalakeClientConfig(
        uri="http://catalog.test:8090",
        token="test-token",
        retry=RetryConfig(max_attempts=2, initial_wait_seconds=0.01, jitter_seconds=0),
    )


@pytest.fixture
def catalog_service() -> FakeCatalogService:
    return FakeCatalogService()


@pytest.fixture
def http_client(
    client_config: MetalakeClientConfig, catalog_service: FakeCatalogService
) -> Iterator[HTTPClient]:
    """HTTPClient wired to the fake catalog service."""
    client = HTTPClient(client_config, transport=httpx.MockTransport(catalog_service))
    yield client
    client.close()


@pytest.fixture
def sales_namespace() -> Namespace:
    return SALES_NAMESPACE


@pytest.fixture
def orders_table_dto() -> TableDTO:
    return TableDTO.model_validate(ORDERS_TABLE)


@pytest.fixture
def orders_table(http_client: HTTPClient, orders_table_dto: TableDTO) -> RelationalTable:
    """RelationalTable for ml.hive_cat.sales.orders against the fake service."""
    return RelationalTable(SALES_NAMESPACE, orders_table_dto, http_client)
