"""Client for a remote asynchronous code execution service.

This package submits code to an executor service, polls the resulting job
until it finishes and turns the final record into a single string for
display.  It does not run code itself.

The top-level modules include:

* ``config`` – configuration handling for environment variables.
* ``models`` – Pydantic models for the executor's request and response bodies.
* ``errors`` – the exception taxonomy shared by every module.
* ``guard`` – client-side size check applied before submission.
* ``transport`` – async HTTP client for the executor's endpoints.
* ``interpreter`` – renders a terminal job record as display text.
* ``catalog`` – the executor's language list, fetched once per session.
* ``orchestrator`` – the submit/poll/resolve state machine.
* ``api`` – FastAPI application exposing the orchestrator to a front-end.
"""

from .errors import CodeExecClientError, CodeTooLargeError, ProtocolError, TransportError
from .orchestrator import JobOrchestrator, RunSnapshot, RunState
from .transport import ExecutorClient

__all__ = [
    "CodeExecClientError",
    "CodeTooLargeError",
    "ExecutorClient",
    "JobOrchestrator",
    "ProtocolError",
    "RunSnapshot",
    "RunState",
    "TransportError",
]
