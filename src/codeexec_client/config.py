"""Configuration loader.

The client reads its configuration from environment variables so the same
package can be pointed at a local executor during development or at a
hosted one in production.  The executor location and credential have no
defaults: starting without them would only produce malformed requests
later, so loading fails immediately instead.

Environment variables:

``CODEEXEC_EXECUTOR_URL``
    Base URL of the executor, e.g. ``https://executor.example.com``.
    Required.  Must include the ``http://`` or ``https://`` scheme.

``CODEEXEC_API_KEY``
    Shared secret sent in the ``X-API-Key`` header on ``/submit`` and
    ``/result`` requests.  Required.

``CODEEXEC_POLL_INTERVAL``
    Seconds to wait between consecutive result polls.  Default is 1.0.

``CODEEXEC_REQUEST_TIMEOUT``
    Per-request timeout (in seconds) for calls to the executor.  Default is 10.

``CODEEXEC_MAX_CODE_CHARS``
    Client-side ceiling on the size of submitted code.  Default is 100000.

``PORT``
    The port on which the presentation API listens.  Defaults to 8080.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from .guard import MAX_CODE_CHARS


def _required_var(name: str) -> str:
    value = (os.getenv(name) or "").strip()
    if not value:
        raise RuntimeError(f"{name} must be set")
    return value


def _int_var(name: str, default: int) -> int:
    val = os.getenv(name)
    if val is None:
        return default
    try:
        parsed = int(val)
    except ValueError:
        raise ValueError(f"Invalid integer for {name}: {val}")
    if parsed <= 0:
        raise ValueError(f"{name} must be positive, got {parsed}")
    return parsed


def _float_var(name: str, default: float) -> float:
    val = os.getenv(name)
    if val is None:
        return default
    try:
        parsed = float(val)
    except ValueError:
        raise ValueError(f"Invalid number for {name}: {val}")
    if parsed <= 0:
        raise ValueError(f"{name} must be positive, got {parsed}")
    return parsed


@dataclass
class Config:
    """Centralised configuration object."""

    executor_url: str
    api_key: str
    poll_interval: float = 1.0
    request_timeout: float = 10.0
    max_code_chars: int = MAX_CODE_CHARS
    port: int = 8080

    @classmethod
    def load(cls) -> "Config":
        executor_url = _required_var("CODEEXEC_EXECUTOR_URL")
        if not executor_url.startswith(("http://", "https://")):
            raise ValueError(
                f"Invalid CODEEXEC_EXECUTOR_URL: {executor_url}. Include the http:// or https:// scheme."
            )
        api_key = _required_var("CODEEXEC_API_KEY")

        return cls(
            executor_url=executor_url.rstrip("/"),
            api_key=api_key,
            poll_interval=_float_var("CODEEXEC_POLL_INTERVAL", 1.0),
            request_timeout=_float_var("CODEEXEC_REQUEST_TIMEOUT", 10.0),
            max_code_chars=_int_var("CODEEXEC_MAX_CODE_CHARS", MAX_CODE_CHARS),
            port=_int_var("PORT", 8080),
        )

    @classmethod
    def from_env(cls) -> "Config":
        """Load from the process environment; raises if the executor URL or key is unset."""
        return cls.load()

    def __repr__(self) -> str:
        return (
            f"Config(executor_url={self.executor_url!r}, api_key='***', "
            f"poll_interval={self.poll_interval!r}, request_timeout={self.request_timeout!r}, "
            f"max_code_chars={self.max_code_chars!r}, port={self.port!r})"
        )
