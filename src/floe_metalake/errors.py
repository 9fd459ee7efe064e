"""Custom exceptions for floe-metalake.

This module defines the exception hierarchy:
- FloeMetalakeError (base)
- RESTError (service reported a failure)
  - NotFoundError
    - NoSuchMetalakeError, NoSuchCatalogError, NoSuchSchemaError
    - NoSuchTableError
    - NoSuchPartitionError
  - AlreadyExistsError
    - PartitionAlreadyExistsError
  - NonEmptyError
  - IllegalArgumentError
  - InternalServerError
- UnsupportedOperationError
- MetalakeConnectionError
- CircuitOpenError
- DTOValidationError
- IllegalNamespaceError
"""

from __future__ import annotations


class FloeMetalakeError(Exception):
    """Base exception for all floe-metalake operations.

    Attributes:
        message: Human-readable error description.
        details: Optional additional context about the error.

    Example:
        >>> try:
        ...     table.get_partition("dt=2024-01-01")
        ... except FloeMetalakeError as e:
        ...     print(f"Metalake error: {e}")
    """

    def __init__(self, message: str, *, details: dict[str, str] | None = None) -> None:
        """Initialize FloeMetalakeError.

        Args:
            message: Human-readable error description.
            details: Optional additional context about the error.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Return string representation with details if present."""
        if self.details:
            detail_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({detail_str})"
        return self.message


class RESTError(FloeMetalakeError):
    """The catalog service answered with a non-success response.

    This is the generic failure kind. Subclasses narrow it down to the
    cases callers usually branch on.

    Attributes:
        status_code: HTTP status of the response, if known.
        error_code: Service error code from the error payload, if any.
        error_type: Service exception type name from the error payload, if any.
    """

    def __init__(
        self,
        message: str = "Catalog service request failed",
        *,
        status_code: int | None = None,
        error_code: int | None = None,
        error_type: str | None = None,
    ) -> None:
        """Initialize RESTError.

        Args:
            message: Human-readable error description.
            status_code: HTTP status code.
            error_code: Service error code.
            error_type: Service exception type name.
        """
        details: dict[str, str] = {}
        if status_code is not None:
            details["status"] = str(status_code)
        if error_type:
            details["type"] = error_type
        super().__init__(message, details=details)
        self.status_code = status_code
        self.error_code = error_code
        self.error_type = error_type


class NotFoundError(RESTError):
    """The requested catalog object does not exist."""


class NoSuchMetalakeError(NotFoundError):
    """Metalake not found in the catalog service."""


class NoSuchCatalogError(NotFoundError):
    """Catalog not found in the metalake."""


class NoSuchSchemaError(NotFoundError):
    """Schema not found in the catalog."""


class NoSuchTableError(NotFoundError):
    """Table not found in the schema.

    Example:
        >>> try:
        ...     load_table(client, Namespace.of("ml", "hive_cat", "sales"), "nope")
        ... except NoSuchTableError as e:
        ...     print(f"Table not found: {e}")
    """


class NoSuchPartitionError(NotFoundError):
    """Partition not found in the table.

    Example:
        >>> try:
        ...     table.get_partition("dt=1999-01-01")
        ... except NoSuchPartitionError:
        ...     print("partition does not exist")
    """


class AlreadyExistsError(RESTError):
    """The catalog object being created already exists."""


class PartitionAlreadyExistsError(AlreadyExistsError):
    """A partition with the same name already exists in the table.

    Raised by add_partition when the service reports a name collision.
    """


class NonEmptyError(RESTError):
    """The catalog object still has children and cannot be removed."""


class IllegalArgumentError(RESTError, ValueError):
    """The service rejected the request arguments."""


class InternalServerError(RESTError):
    """The service failed while processing the request."""


class UnsupportedOperationError(FloeMetalakeError, NotImplementedError):
    """Operation or capability is not supported.

    Raised when:
    - A capability (e.g. partition support) is requested from a table type
      that does not declare it
    - A table type deliberately does not implement an operation
    - The service reports the operation as unsupported
    """

    def __init__(
        self,
        message: str = "Operation is not supported",
        *,
        operation: str | None = None,
    ) -> None:
        """Initialize UnsupportedOperationError.

        Args:
            message: Human-readable error description.
            operation: Name of the unsupported operation.
        """
        details = {"operation": operation} if operation else {}
        super().__init__(message, details=details)
        self.operation = operation


class MetalakeConnectionError(FloeMetalakeError):
    """Failed to reach the catalog service.

    Raised when:
    - Network connectivity issues prevent reaching the service
    - The request times out
    - SSL/TLS handshake fails
    """

    def __init__(
        self,
        message: str = "Failed to connect to catalog service",
        *,
        uri: str | None = None,
        cause: str | None = None,
    ) -> None:
        """Initialize MetalakeConnectionError.

        Args:
            message: Human-readable error description.
            uri: The URI that was unreachable.
            cause: The underlying cause of the connection failure.
        """
        details: dict[str, str] = {}
        if uri:
            details["uri"] = uri
        if cause:
            details["cause"] = cause
        super().__init__(message, details=details)
        self.uri = uri
        self.cause = cause


class CircuitOpenError(FloeMetalakeError):
    """Raised when circuit breaker is open and the request is not attempted."""

    def __init__(self, message: str = "Circuit breaker is open") -> None:
        super().__init__(message)


class DTOValidationError(FloeMetalakeError, ValueError):
    """A request or response object failed structural validation.

    Raised locally, before sending a request or before returning a
    response to the caller. No network call is made for an invalid request.

    Example:
        >>> try:
        ...     AddPartitionsRequest(partitions=[]).validate_request()
        ... except DTOValidationError as e:
        ...     print(e.dto)
        AddPartitionsRequest
    """

    def __init__(self, message: str, *, dto: str | None = None) -> None:
        """Initialize DTOValidationError.

        Args:
            message: Human-readable error description.
            dto: Name of the transfer object that failed validation.
        """
        details = {"dto": dto} if dto else {}
        super().__init__(message, details=details)
        self.dto = dto


class IllegalNamespaceError(FloeMetalakeError, ValueError):
    """Namespace does not have the shape the operation requires."""

    def __init__(self, namespace: str, message: str | None = None) -> None:
        """Initialize IllegalNamespaceError.

        Args:
            namespace: The offending namespace, dotted.
            message: Optional custom error message.
        """
        msg = message or f"Illegal namespace: {namespace}"
        super().__init__(msg, details={"namespace": namespace})
        self.namespace = namespace
