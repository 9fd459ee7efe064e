"""Unit tests for spans and structured logs around partition operations."""

from __future__ import annotations

from collections.abc import Iterator

import pytest
import structlog
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter
from opentelemetry.trace import SpanKind, StatusCode
from structlog.testing import capture_logs

from floe_metalake import observability
from floe_metalake.errors import NoSuchPartitionError, PartitionAlreadyExistsError
from floe_metalake.partitions import identity
from floe_metalake.relational import RelationalTable


@pytest.fixture
def span_exporter(monkeypatch: pytest.MonkeyPatch) -> Iterator[InMemorySpanExporter]:
    """Route floe-metalake spans to an in-memory exporter."""
    exporter = InMemorySpanExporter()
    provider = TracerProvider()
    provider.add_span_processor(SimpleSpanProcessor(exporter))
    monkeypatch.setattr(observability, "_tracer", provider.get_tracer(observability.TRACER_NAME))

    yield exporter

    exporter.shutdown()
    provider.shutdown()


class TestPartitionSpans:
    """Tests for spans emitted by partition operations."""

    def test_add_partition_spans(
        self, orders_table: RelationalTable, span_exporter: InMemorySpanExporter
    ) -> None:
        """Test add_partition emits an operation span around a client span."""
        orders_table.add_partition(identity("p1"))

        spans = {s.name: s for s in span_exporter.get_finished_spans()}
        op = spans["partition.add_partition"]
        rest = spans["rest.post"]

        assert op.attributes["metalake.namespace"] == "ml.hive_cat.sales"
        assert op.attributes["metalake.table"] == "orders"
        assert op.attributes["metalake.partition"] == "p1"
        assert op.status.status_code == StatusCode.OK
        assert rest.kind == SpanKind.CLIENT
        assert rest.parent is not None
        assert rest.parent.span_id == op.context.span_id

    def test_failed_operation_marks_span(
        self, orders_table: RelationalTable, span_exporter: InMemorySpanExporter
    ) -> None:
        """Test a failed get_partition records the error on its span."""
        with pytest.raises(NoSuchPartitionError):
            orders_table.get_partition("missing")

        spans = {s.name: s for s in span_exporter.get_finished_spans()}
        op = spans["partition.get_partition"]
        assert op.status.status_code == StatusCode.ERROR
        assert any(event.name == "exception" for event in op.events)


class TestLogging:
    """Tests for structured log events."""

    def test_add_partition_logged(self, orders_table: RelationalTable) -> None:
        """Test a successful add logs partition_added."""
        with capture_logs() as logs:
            orders_table.add_partition(identity("p1"))

        added = [e for e in logs if e["event"] == "partition_added"]
        assert added == [
            {
                "event": "partition_added",
                "log_level": "info",
                "namespace": "ml.hive_cat.sales",
                "table": "orders",
                "partition": "p1",
            }
        ]

    def test_failure_logged_with_type(self, orders_table: RelationalTable) -> None:
        """Test a missing partition logs its failure at info level with the type."""
        with capture_logs() as logs, pytest.raises(NoSuchPartitionError):
            orders_table.get_partition("missing")

        failed = [e for e in logs if e["event"] == "partition.get_partition_failed"]
        assert len(failed) == 1
        assert failed[0]["error_type"] == "NoSuchPartitionError"
        assert failed[0]["log_level"] == "info"

    def test_partition_exists_logs_no_errors(self, orders_table: RelationalTable) -> None:
        """Test probing an absent partition logs nothing at error level."""
        with capture_logs() as logs:
            assert orders_table.partition_exists("missing") is False

        assert [e for e in logs if e["log_level"] == "error"] == []
        assert {e["event"] for e in logs if e["event"].endswith("_failed")} == {
            "rest.get_failed",
            "partition.get_partition_failed",
        }

    def test_conflict_logged_as_error(self, orders_table: RelationalTable) -> None:
        """Test failures other than not-found log at error level."""
        orders_table.add_partition(identity("p1"))
        with capture_logs() as logs, pytest.raises(PartitionAlreadyExistsError):
            orders_table.add_partition(identity("p1"))

        failed = [e for e in logs if e["event"] == "partition.add_partition_failed"]
        assert len(failed) == 1
        assert failed[0]["log_level"] == "error"


class TestConfigureLogging:
    """Tests for configure_logging."""

    @pytest.mark.parametrize(
        ("fmt", "renderer"),
        [("json", structlog.processors.JSONRenderer), ("console", structlog.dev.ConsoleRenderer)],
    )
    def test_renderer_selected(
        self, monkeypatch: pytest.MonkeyPatch, fmt: str, renderer: type
    ) -> None:
        """Test the output format picks the final processor."""
        monkeypatch.setattr(observability, "_logger", None)

        observability.configure_logging("DEBUG", fmt=fmt)  # type: ignore[arg-type]

        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], renderer)
        assert isinstance(processors[0], structlog.processors.TimeStamper)

    def test_without_timestamp(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test timestamps can be turned off."""
        monkeypatch.setattr(observability, "_logger", None)

        observability.configure_logging(timestamps=False)

        processors = structlog.get_config()["processors"]
        assert not any(isinstance(p, structlog.processors.TimeStamper) for p in processors)
