"""REST client used to talk to the catalog service.

This module provides:
- RESTClient: the protocol partition operations are written against
- HTTPClient: httpx implementation with auth headers, timeouts, retry of
  transport failures and pluggable error handlers
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Protocol, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from floe_metalake.config import MetalakeClientConfig
from floe_metalake.error_handlers import RestErrorHandler, rest_error_handler
from floe_metalake.errors import DTOValidationError, MetalakeConnectionError
from floe_metalake.observability import get_logger, rest_call
from floe_metalake.responses import ErrorResponse
from floe_metalake.retry import CircuitBreaker, create_retry_decorator

if TYPE_CHECKING:
    from structlog.stdlib import BoundLogger

T = TypeVar("T", bound=BaseModel)

JSON_CONTENT_TYPE = "application/json"


class RESTClient(Protocol):
    """Minimal REST surface needed by tables and partitions.

    Implementations raise through error_handler when the service answers
    with a non-success status, and DTOValidationError when a success body
    cannot be parsed as response_type.
    """

    def get(
        self,
        path: str,
        response_type: type[T],
        *,
        params: Mapping[str, str] | None = None,
        headers: Mapping[str, str] | None = None,
        error_handler: RestErrorHandler | None = None,
    ) -> T: ...

    def post(
        self,
        path: str,
        body: BaseModel,
        response_type: type[T],
        *,
        headers: Mapping[str, str] | None = None,
        error_handler: RestErrorHandler | None = None,
    ) -> T: ...


class HTTPClient:
    """httpx-backed RESTClient.

    Paths are relative to config.uri. Transport failures (connection errors,
    timeouts) are retried per config.retry; responses with an error status
    are never retried and go straight to the error handler.

    Attributes:
        config: Client configuration.

    Example:
        >>> with HTTPClient(MetalakeClientConfig(uri="http://localhost:8090")) as client:
        ...     resp = client.get("api/metalakes/ml/...", PartitionNameListResponse)
    """

    def __init__(
        self,
        config: MetalakeClientConfig,
        *,
        transport: httpx.BaseTransport | None = None,
        logger: BoundLogger | None = None,
    ) -> None:
        """Initialize HTTPClient.

        Args:
            config: Connection, auth and retry settings.
            transport: Optional httpx transport (tests pass httpx.MockTransport).
            logger: Optional structlog logger. Uses default if not provided.
        """
        self.config = config
        self._logger = logger or get_logger()
        self._client = httpx.Client(
            base_url=config.uri,
            headers=self._build_headers(),
            timeout=config.timeout_seconds,
            transport=transport,
        )
        self._circuit_breaker = CircuitBreaker(
            config.retry.circuit_breaker_threshold,
            reset_timeout=config.retry.reset_timeout_seconds,
        )
        self._send = create_retry_decorator(
            config.retry,
            operation_name="rest_request",
            circuit_breaker=self._circuit_breaker,
        )(self._send_once)

    def _build_headers(self) -> dict[str, str]:
        headers = {"Accept": JSON_CONTENT_TYPE, **self.config.headers}
        if self.config.token is not None:
            headers["Authorization"] = f"Bearer {self.config.token.get_secret_value()}"
        return headers

    def get(
        self,
        path: str,
        response_type: type[T],
        *,
        params: Mapping[str, str] | None = None,
        headers: Mapping[str, str] | None = None,
        error_handler: RestErrorHandler | None = None,
    ) -> T:
        """Send a GET request and parse the body as response_type.

        Raises:
            FloeMetalakeError: Raised by error_handler on an error status.
            DTOValidationError: If the body does not match response_type.
            MetalakeConnectionError: If the service stays unreachable.
        """
        request = self._client.build_request(
            "GET", path, params=dict(params) if params else None, headers=headers
        )
        return self._execute(request, response_type, error_handler)

    def post(
        self,
        path: str,
        body: BaseModel,
        response_type: type[T],
        *,
        headers: Mapping[str, str] | None = None,
        error_handler: RestErrorHandler | None = None,
    ) -> T:
        """Send body as JSON in a POST request and parse the response.

        The body is serialized by alias, dropping unset optional fields.
        """
        payload = body.model_dump(mode="json", by_alias=True, exclude_none=True)
        request = self._client.build_request("POST", path, json=payload, headers=headers)
        return self._execute(request, response_type, error_handler)

    def _execute(
        self,
        request: httpx.Request,
        response_type: type[T],
        error_handler: RestErrorHandler | None,
    ) -> T:
        with rest_call(request.method, request.url.path):
            response = self._send(request)
            self._logger.debug(
                "rest_response",
                method=request.method,
                path=request.url.path,
                status=response.status_code,
            )
            if not response.is_success:
                handler = error_handler or rest_error_handler()
                handler.handle(response.status_code, self._parse_error(response))
            return self._parse(response, response_type)

    def _send_once(self, request: httpx.Request) -> httpx.Response:
        try:
            return self._client.send(request)
        except httpx.TransportError as exc:
            raise MetalakeConnectionError(uri=str(request.url), cause=str(exc)) from exc

    @staticmethod
    def _parse(response: httpx.Response, response_type: type[T]) -> T:
        try:
            return response_type.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            raise DTOValidationError(
                f"Malformed {response_type.__name__} body: {exc}",
                dto=response_type.__name__,
            ) from exc

    @staticmethod
    def _parse_error(response: httpx.Response) -> ErrorResponse:
        """Parse an error payload, or synthesize one from the status line."""
        try:
            return ErrorResponse.model_validate(response.json())
        except (ValueError, ValidationError):
            return ErrorResponse(
                code=0,
                message=f"HTTP {response.status_code}: {response.text[:200]}",
            )

    @property
    def circuit_breaker(self) -> CircuitBreaker:
        return self._circuit_breaker

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> HTTPClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
