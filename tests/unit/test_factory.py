"""Unit tests for client and table factories."""

from __future__ import annotations

import httpx
import pytest
from pydantic import ValidationError

import floe_metalake
from floe_metalake.config import MetalakeClientConfig
from floe_metalake.errors import IllegalNamespaceError, NoSuchSchemaError, NoSuchTableError
from floe_metalake.factory import create_rest_client, load_table
from floe_metalake.namespaces import Namespace
from floe_metalake.partitions import identity
from floe_metalake.relational import RelationalTable
from floe_metalake.responses import PartitionNameListResponse
from floe_metalake.rest import HTTPClient
from floe_metalake.tables import SupportsPartitions


class TestCreateRestClient:
    """Tests for create_rest_client."""

    def test_from_config(self) -> None:
        """Test a config model is used as is."""
        config = MetalakeClientConfig(uri="http://localhost:8090")
        with create_rest_client(config) as client:
            assert isinstance(client, HTTPClient)
            assert client.config is config

    def test_from_dict(self) -> None:
        """Test a dict is validated into a config."""
        with create_rest_client({"uri": "http://localhost:8090/", "token": "t"}) as client:
            assert client.config.uri == "http://localhost:8090"
            assert client.config.token is not None

    def test_invalid_dict(self) -> None:
        """Test an invalid dict raises ValidationError."""
        with pytest.raises(ValidationError):
            create_rest_client({"uri": "localhost"})

    def test_transport_passed_through(self) -> None:
        """Test keyword arguments reach HTTPClient."""
        transport = httpx.MockTransport(lambda r: httpx.Response(200, json={"names": []}))
        with create_rest_client({"uri": "http://localhost:8090"}, transport=transport) as client:
            assert client.get("x", PartitionNameListResponse).names == []


class TestLoadTable:
    """Tests for load_table."""

    def test_loads_relational_table(
        self, http_client: HTTPClient, sales_namespace: Namespace
    ) -> None:
        """Test the loaded table describes the service table."""
        table = load_table(http_client, sales_namespace, "orders")

        assert isinstance(table, RelationalTable)
        assert table.name == "orders"
        assert table.namespace == sales_namespace
        assert [c.name for c in table.columns] == ["id", "dt"]
        assert table.capability(SupportsPartitions) is table

    def test_loaded_table_manages_partitions(
        self, http_client: HTTPClient, sales_namespace: Namespace
    ) -> None:
        """Test the full load, add and list flow."""
        partitions = load_table(http_client, sales_namespace, "orders").support_partitions()

        partitions.add_partition(identity("dt=2024-01-01"))

        assert partitions.list_partition_names() == ["dt=2024-01-01"]

    def test_missing_table(self, http_client: HTTPClient, sales_namespace: Namespace) -> None:
        """Test an unknown table raises NoSuchTableError."""
        with pytest.raises(NoSuchTableError):
            load_table(http_client, sales_namespace, "missing")

    def test_missing_schema(self, client_config: MetalakeClientConfig) -> None:
        """Test a typed not-found is reported as such."""
        payload = {"code": 1003, "type": "NoSuchSchemaException", "message": "no schema"}
        transport = httpx.MockTransport(lambda r: httpx.Response(404, json=payload))
        with HTTPClient(client_config, transport=transport) as client:
            with pytest.raises(NoSuchSchemaError):
                load_table(client, Namespace.of("ml", "hive_cat", "nope"), "orders")

    def test_bad_namespace_sends_nothing(
        self, http_client: HTTPClient, catalog_service: object
    ) -> None:
        """Test namespace shape is checked before any request."""
        with pytest.raises(IllegalNamespaceError):
            load_table(http_client, Namespace.of("ml", "hive_cat"), "orders")
        assert catalog_service.requests == []  # type: ignore[attr-defined]


class TestPublicAPI:
    """Tests for the package's lazy exports."""

    def test_lazy_exports(self) -> None:
        """Test public names resolve from the package root."""
        assert floe_metalake.load_table is load_table
        assert floe_metalake.NoSuchTableError is NoSuchTableError
        assert floe_metalake.Namespace is Namespace

    def test_every_export_resolves(self) -> None:
        """Test each name in __all__ is importable."""
        for name in floe_metalake.__all__:
            assert getattr(floe_metalake, name) is not None

    def test_unknown_attribute(self) -> None:
        """Test unknown names raise AttributeError."""
        with pytest.raises(AttributeError):
            floe_metalake.does_not_exist  # noqa: B018
