"""Logging and tracing for floe-metalake.

Log events go through structlog under the "floe.metalake" logger. Spans go
through the OpenTelemetry API, so they are no-ops until the application
installs a tracer provider.

Span names:
- ``partition.<operation>`` for RelationalTable operations
- ``table.load_table`` for table lookups
- ``rest.<method>`` (CLIENT kind) for each HTTP request
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, Literal

import structlog
from opentelemetry import trace
from opentelemetry.trace import SpanKind, Status, StatusCode

from floe_metalake.errors import NotFoundError

if TYPE_CHECKING:
    from opentelemetry.trace import Span, Tracer
    from structlog.stdlib import BoundLogger

TRACER_NAME = "floe.metalake"

_logger: BoundLogger | None = None
_tracer: Tracer | None = None


def get_logger(**context: Any) -> BoundLogger:
    """Return the package logger, bound to context if any is given.

    Example:
        >>> log = get_logger(table="orders")
        >>> log.info("partition_added", partition="dt=2024-01-01")
    """
    global _logger
    if _logger is None:
        _logger = structlog.get_logger(TRACER_NAME)
    return _logger.bind(**context) if context else _logger


def get_tracer() -> Tracer:
    global _tracer
    if _tracer is None:
        _tracer = trace.get_tracer(TRACER_NAME)
    return _tracer


def configure_logging(
    level: str = "INFO",
    *,
    fmt: Literal["json", "console"] = "json",
    timestamps: bool = True,
) -> None:
    """Route structlog through the stdlib logging module.

    Applications that already configure structlog should not call this.

    Args:
        level: Root log level name, e.g. "DEBUG".
        fmt: "json" for one JSON object per line, "console" for a
            human-readable rendering.
        timestamps: Prefix each event with an ISO timestamp.
    """
    processors: list[Any] = []
    if timestamps:
        processors.append(structlog.processors.TimeStamper(fmt="iso", utc=True))
    processors += [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.format_exc_info,
        structlog.processors.JSONRenderer() if fmt == "json" else structlog.dev.ConsoleRenderer(),
    ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    logging.basicConfig(format="%(message)s", level=level.upper())


@contextmanager
def span(
    name: str,
    *,
    kind: SpanKind = SpanKind.INTERNAL,
    attributes: Mapping[str, Any] | None = None,
    log_start: bool = True,
    log_end: bool = True,
) -> Iterator[Span]:
    """Run the block inside a span, logging its start, end and failure.

    A failure sets the span status to ERROR, records the exception and an
    ``error.type`` attribute, logs ``<name>_failed`` and re-raises. The log
    is at info level for NotFoundError and at error level otherwise.

    Args:
        name: Span name, also the prefix of the log events.
        kind: OpenTelemetry span kind.
        attributes: Span attributes, repeated in each log event.
        log_start: Log ``<name>_started`` at debug level.
        log_end: Log ``<name>_completed`` at debug level.
    """
    attrs = dict(attributes or {})
    logger = get_logger()

    with get_tracer().start_as_current_span(
        name, kind=kind, attributes=attrs, record_exception=False, set_status_on_exception=False
    ) as current:
        if log_start:
            logger.debug(f"{name}_started", **attrs)
        try:
            yield current
        except Exception as exc:
            current.set_attribute("error.type", type(exc).__name__)
            current.record_exception(exc)
            current.set_status(Status(StatusCode.ERROR, str(exc)))
            log = logger.info if isinstance(exc, NotFoundError) else logger.error
            log(f"{name}_failed", error=str(exc), error_type=type(exc).__name__, **attrs)
            raise
        current.set_status(Status(StatusCode.OK))
        if log_end:
            logger.debug(f"{name}_completed", **attrs)


@contextmanager
def partition_operation(
    operation: str,
    *,
    namespace: str | None = None,
    table: str | None = None,
    partition: str | None = None,
) -> Iterator[Span]:
    """Span for one RelationalTable operation.

    Attributes are ``metalake.operation`` plus ``metalake.namespace``,
    ``metalake.table`` and ``metalake.partition`` when given.

    Example:
        >>> with partition_operation("get_partition", table="orders", partition="p1"):
        ...     ...
    """
    attrs = {
        f"metalake.{key}": value
        for key, value in (
            ("operation", operation),
            ("namespace", namespace),
            ("table", table),
            ("partition", partition),
        )
        if value
    }
    with span(f"partition.{operation}", attributes=attrs) as current:
        yield current


@contextmanager
def rest_call(method: str, path: str) -> Iterator[Span]:
    """CLIENT span around one HTTP request."""
    attrs = {"http.request.method": method, "url.path": path}
    with span(
        f"rest.{method.lower()}", kind=SpanKind.CLIENT, attributes=attrs, log_end=False
    ) as current:
        yield current


def log_retry_attempt(
    operation: str,
    attempt: int,
    max_attempts: int,
    wait_seconds: float,
    error: str,
) -> None:
    """Log that a request failed in transport and will be sent again."""
    get_logger().warning(
        "rest_retry",
        operation=operation,
        attempt=attempt,
        remaining=max_attempts - attempt,
        wait_seconds=round(wait_seconds, 3),
        error=error,
    )
