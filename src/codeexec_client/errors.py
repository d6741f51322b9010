"""Exceptions raised by the executor client.

Every failure a run can hit is one of these.  They are terminal for the run
that raised them; nothing here is retried automatically.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional


class CodeExecClientError(Exception):
    """Base class for all client errors."""


class CodeTooLargeError(CodeExecClientError):
    """The code payload exceeds the client-side size ceiling."""

    def __init__(self, length: int, limit: int) -> None:
        super().__init__(f"Code is {length} characters long; the limit is {limit}.")
        self.length = length
        self.limit = limit


class TransportErrorKind(str, Enum):
    NETWORK_OR_STATUS = "network_or_status"
    SUBMIT_REJECTED = "submit_rejected"
    MALFORMED_RESPONSE = "malformed_response"


class TransportError(CodeExecClientError):
    """A request to the executor failed or returned a non-success status."""

    def __init__(
        self,
        kind: TransportErrorKind,
        message: str,
        status_code: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.status_code = status_code

    def __repr__(self) -> str:
        return f"{type(self).__name__}(kind={self.kind.value!r}, message={self.message!r}, status_code={self.status_code!r})"


class ProtocolError(TransportError):
    """The executor answered successfully but the body broke the contract."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(TransportErrorKind.MALFORMED_RESPONSE, message, status_code)


class ResultMissingError(ProtocolError):
    """A ``/result`` response arrived without its ``data`` object."""
