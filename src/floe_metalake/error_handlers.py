"""Map catalog service error responses to floe-metalake exceptions.

The REST client calls an error handler whenever the service answers with a
non-success status. Handlers are operation specific: the same "not found"
becomes NoSuchPartitionError for partition calls and NoSuchTableError for
table calls, so callers branch on exception class rather than on status
codes.

The service error code in the payload takes precedence over the HTTP
status; the status is used when the payload carries no known code.
"""

from __future__ import annotations

from typing import NoReturn

from floe_metalake.errors import (
    AlreadyExistsError,
    FloeMetalakeError,
    IllegalArgumentError,
    InternalServerError,
    NoSuchCatalogError,
    NoSuchMetalakeError,
    NoSuchPartitionError,
    NoSuchSchemaError,
    NoSuchTableError,
    NonEmptyError,
    NotFoundError,
    PartitionAlreadyExistsError,
    RESTError,
    UnsupportedOperationError,
)
from floe_metalake.responses import ErrorResponse

# Service error codes
ILLEGAL_ARGUMENTS_CODE = 1001
INTERNAL_ERROR_CODE = 1002
NOT_FOUND_CODE = 1003
ALREADY_EXISTS_CODE = 1004
NON_EMPTY_CODE = 1005
UNSUPPORTED_OPERATION_CODE = 1006

_STATUS_TO_CODE: dict[int, int] = {
    400: ILLEGAL_ARGUMENTS_CODE,
    404: NOT_FOUND_CODE,
    409: ALREADY_EXISTS_CODE,
    501: UNSUPPORTED_OPERATION_CODE,
}

_NOT_FOUND_TYPES: dict[str, type[NotFoundError]] = {
    "NoSuchMetalakeException": NoSuchMetalakeError,
    "NoSuchCatalogException": NoSuchCatalogError,
    "NoSuchSchemaException": NoSuchSchemaError,
    "NoSuchTableException": NoSuchTableError,
    "NoSuchPartitionException": NoSuchPartitionError,
}


def resolve_error_code(status_code: int, error: ErrorResponse) -> int | None:
    """Pick the service error code for a failed response.

    Args:
        status_code: HTTP status of the response.
        error: Parsed error payload.

    Returns:
        A known service error code, or None when neither the payload nor
        the status identify one.
    """
    if ILLEGAL_ARGUMENTS_CODE <= error.code <= UNSUPPORTED_OPERATION_CODE:
        return error.code
    if status_code in _STATUS_TO_CODE:
        return _STATUS_TO_CODE[status_code]
    if 500 <= status_code < 600:
        return INTERNAL_ERROR_CODE
    return None


class RestErrorHandler:
    """Generic mapping from error responses to exceptions."""

    def handle(self, status_code: int, error: ErrorResponse) -> NoReturn:
        """Raise the exception matching an error response.

        Args:
            status_code: HTTP status of the response.
            error: Parsed error payload.

        Raises:
            FloeMetalakeError: Always; the concrete subclass depends on the error.
        """
        raise self.to_exception(status_code, error)

    def to_exception(self, status_code: int, error: ErrorResponse) -> FloeMetalakeError:
        code = resolve_error_code(status_code, error)
        message = error.format_message()
        kwargs = {"status_code": status_code, "error_code": error.code, "error_type": error.type}

        if code == ILLEGAL_ARGUMENTS_CODE:
            return IllegalArgumentError(message, **kwargs)
        if code == INTERNAL_ERROR_CODE:
            return InternalServerError(message, **kwargs)
        if code == NOT_FOUND_CODE:
            return self.not_found(message, error.type, kwargs)
        if code == ALREADY_EXISTS_CODE:
            return self.already_exists(message, kwargs)
        if code == NON_EMPTY_CODE:
            return NonEmptyError(message, **kwargs)
        if code == UNSUPPORTED_OPERATION_CODE:
            return UnsupportedOperationError(message)
        return RESTError(message, **kwargs)

    def not_found(self, message: str, error_type: str | None, kwargs: dict) -> RESTError:
        exc_cls = _NOT_FOUND_TYPES.get(error_type or "", NotFoundError)
        return exc_cls(message, **kwargs)

    def already_exists(self, message: str, kwargs: dict) -> RESTError:
        return AlreadyExistsError(message, **kwargs)


class TableErrorHandler(RestErrorHandler):
    """Mapping for table lookups; untyped not-found means the table."""

    def not_found(self, message: str, error_type: str | None, kwargs: dict) -> RESTError:
        exc_cls = _NOT_FOUND_TYPES.get(error_type or "", NoSuchTableError)
        return exc_cls(message, **kwargs)


class PartitionErrorHandler(RestErrorHandler):
    """Mapping for partition operations.

    Not-found is refined by the service exception type, and defaults to
    NoSuchPartitionError. Already-exists is always a partition collision.
    """

    def not_found(self, message: str, error_type: str | None, kwargs: dict) -> RESTError:
        exc_cls = _NOT_FOUND_TYPES.get(error_type or "", NoSuchPartitionError)
        return exc_cls(message, **kwargs)

    def already_exists(self, message: str, kwargs: dict) -> RESTError:
        return PartitionAlreadyExistsError(message, **kwargs)


_REST_ERROR_HANDLER = RestErrorHandler()
_TABLE_ERROR_HANDLER = TableErrorHandler()
_PARTITION_ERROR_HANDLER = PartitionErrorHandler()


def rest_error_handler() -> RestErrorHandler:
    return _REST_ERROR_HANDLER


def table_error_handler() -> TableErrorHandler:
    return _TABLE_ERROR_HANDLER


def partition_error_handler() -> PartitionErrorHandler:
    return _PARTITION_ERROR_HANDLER
