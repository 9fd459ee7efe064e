"""Client configuration models.

MetalakeClientConfig holds everything HTTPClient needs: where the catalog
service lives, how to authenticate, and how to retry transport failures.
Both models are frozen and reject unknown keys, so a typo in a config dict
fails loudly.
"""

from __future__ import annotations

from urllib.parse import urlsplit

from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator, model_validator


class RetryConfig(BaseModel):
    """Backoff policy for requests that never reached the service.

    Waits grow exponentially from initial_wait_seconds, are capped at
    max_wait_seconds and get up to jitter_seconds of random spread. A
    response with an error status is not a transport failure and is never
    retried.

    Example:
        >>> RetryConfig(max_attempts=5, circuit_breaker_threshold=0).max_attempts
        5
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    max_attempts: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Attempts per request, including the first",
    )
    initial_wait_seconds: float = Field(
        default=0.5,
        ge=0.01,
        le=30.0,
        description="Wait before the first retry",
    )
    max_wait_seconds: float = Field(
        default=10.0,
        ge=0.01,
        le=300.0,
        description="Upper bound on any single wait",
    )
    jitter_seconds: float = Field(
        default=0.5,
        ge=0.0,
        le=10.0,
        description="Maximum random spread added to each wait",
    )
    circuit_breaker_threshold: int = Field(
        default=5,
        ge=0,
        le=100,
        description="Exhausted requests in a row before failing fast; 0 disables",
    )
    reset_timeout_seconds: float = Field(
        default=30.0,
        gt=0.0,
        le=3600.0,
        description="How long an open circuit fails fast before letting a trial request through",
    )

    @model_validator(mode="after")
    def waits_are_ordered(self) -> RetryConfig:
        if self.max_wait_seconds < self.initial_wait_seconds:
            msg = (
                f"max_wait_seconds ({self.max_wait_seconds}) is below "
                f"initial_wait_seconds ({self.initial_wait_seconds})"
            )
            raise ValueError(msg)
        return self


class MetalakeClientConfig(BaseModel):
    """Connection settings for the catalog service.

    Attributes:
        uri: Service base URL, without a trailing slash.
        token: Bearer token; sent as ``Authorization: Bearer <token>``.
        timeout_seconds: Connect and read timeout per request.
        headers: Static headers added to every request.
        retry: Transport retry policy.

    Example:
        >>> config = MetalakeClientConfig(uri="http://localhost:8090/", token="t0k")
        >>> config.uri
        'http://localhost:8090'
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    uri: str = Field(..., min_length=1, description="Catalog service base URL")
    token: SecretStr | None = Field(default=None, description="Bearer token")
    timeout_seconds: float = Field(
        default=30.0,
        gt=0.0,
        le=300.0,
        description="Per-request timeout in seconds",
    )
    headers: dict[str, str] = Field(
        default_factory=dict,
        description="Extra headers sent with every request",
    )
    retry: RetryConfig = Field(
        default_factory=RetryConfig,
        description="Transport retry policy",
    )

    @field_validator("uri")
    @classmethod
    def uri_is_http(cls, v: str) -> str:
        """Require an absolute http(s) URL and drop trailing slashes."""
        parts = urlsplit(v)
        if parts.scheme not in ("http", "https") or not parts.netloc:
            msg = f"uri must be an absolute http:// or https:// URL, got: {v!r}"
            raise ValueError(msg)
        return v.rstrip("/")
