"""
Job lifecycle orchestration.

:class:`JobOrchestrator` drives one job at a time from submission to a
terminal record::

    IDLE -> SUBMITTING -> POLLING -> RESOLVED
                 \\            \\
                  +-> ERRORED  +-> ERRORED

``RESOLVED`` and ``ERRORED`` are terminal for a run; the next call to
:meth:`JobOrchestrator.run` starts over from ``SUBMITTING``.

Polling waits a fixed interval before every ``fetch_result`` call and keeps
going until the executor reports a status other than ``QUEUED`` or
``RUNNING``.  There is no attempt cap and no backoff.  Only one fetch is
outstanding at a time and the same job handle is presented on every poll.

Supersession
------------
Each run allocates a fresh integer token.  After every suspension point
(submit, sleep, fetch) the run compares its token against the current one
and, if a newer run has started, returns without touching any shared
state.  A late response from an abandoned run therefore can never replace
the outcome of the run that superseded it.  The underlying coroutine is not
cancelled; it simply stops issuing requests at its next check.

The wait between polls goes through the ``sleep`` callable given to the
constructor (``asyncio.sleep`` by default) so tests can substitute a fake
scheduler and run without real delays.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, Optional

from .errors import CodeExecClientError, CodeTooLargeError, ProtocolError, ResultMissingError, TransportError
from .guard import MAX_CODE_CHARS, TOO_LARGE_MESSAGE, validate
from .interpreter import interpret
from .models import JobHandle, JobRecord, SubmissionRequest


logger = logging.getLogger(__name__)

SUBMITTING_MESSAGE = "Submitting..."
INVALID_RESPONSE_MESSAGE = "Invalid response from server."
RESULT_MISSING_MESSAGE = "Failed to retrieve result."
CANCELLED_MESSAGE = "Execution cancelled."


class RunState(str, Enum):
    IDLE = "idle"
    SUBMITTING = "submitting"
    POLLING = "polling"
    RESOLVED = "resolved"
    ERRORED = "errored"


ACTIVE_STATES = frozenset({RunState.SUBMITTING, RunState.POLLING})


@dataclass(frozen=True)
class RunSnapshot:
    """What the presentation layer sees of the current run."""

    token: int
    state: RunState
    display: str
    running: bool
    job_id: Optional[str] = None
    status: Optional[str] = None
    error_kind: Optional[str] = None


def error_message(exc: BaseException) -> str:
    """User-facing text for a failed run."""
    if isinstance(exc, ResultMissingError):
        return RESULT_MISSING_MESSAGE
    if isinstance(exc, ProtocolError):
        return INVALID_RESPONSE_MESSAGE
    if isinstance(exc, asyncio.CancelledError):
        return CANCELLED_MESSAGE
    detail = exc.message if isinstance(exc, TransportError) else str(exc)
    return f"Execution error. {detail}".rstrip()


class JobOrchestrator:
    """Submit code to the executor and poll the job until it finishes.

    ``client`` must provide async ``submit_job(SubmissionRequest)`` and
    ``fetch_result(JobHandle)`` methods, normally an
    :class:`~codeexec_client.transport.ExecutorClient`.
    """

    def __init__(
        self,
        client,
        poll_interval: float = 1.0,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        max_code_chars: int = MAX_CODE_CHARS,
        on_change: Optional[Callable[[RunSnapshot], None]] = None,
    ) -> None:
        self._client = client
        self.poll_interval = poll_interval
        self._sleep = sleep
        self.max_code_chars = max_code_chars
        self._on_change = on_change

        self._token = 0
        self._state = RunState.IDLE
        self._display = ""
        self._handle: Optional[JobHandle] = None
        self._record: Optional[JobRecord] = None
        self._status: Optional[str] = None
        self._error: Optional[BaseException] = None

    @property
    def state(self) -> RunState:
        return self._state

    @property
    def display(self) -> str:
        return self._display

    @property
    def running(self) -> bool:
        return self._state in ACTIVE_STATES

    @property
    def job_id(self) -> Optional[str]:
        return self._handle.job_id if self._handle else None

    @property
    def record(self) -> Optional[JobRecord]:
        return self._record

    @property
    def error(self) -> Optional[BaseException]:
        return self._error

    def snapshot(self) -> RunSnapshot:
        error_kind = None
        if isinstance(self._error, TransportError):
            error_kind = self._error.kind.value
        elif self._error is not None:
            error_kind = type(self._error).__name__
        return RunSnapshot(
            token=self._token,
            state=self._state,
            display=self._display,
            running=self.running,
            job_id=self.job_id,
            status=self._status,
            error_kind=error_kind,
        )

    def admit(self, code: str) -> bool:
        """Check ``code`` against the size ceiling.

        On rejection the display shows the size-limit message; the run state
        is left alone and no run is started.
        """
        try:
            validate(code, self.max_code_chars)
        except CodeTooLargeError as exc:
            logger.info("Rejected submission: %s", exc)
            self._display = TOO_LARGE_MESSAGE
            self._notify()
            return False
        return True

    async def run(self, language: str, code: str, stdin: str = "") -> RunSnapshot:
        """Run ``code`` and return the orchestrator's snapshot once this run ends.

        If the code is too large nothing is submitted and only the display
        text changes.  If a newer run starts while this one is in flight,
        this run stops at its next suspension point and the returned
        snapshot describes the newer run.
        """
        if not self.admit(code):
            return self.snapshot()
        return await self.run_admitted(language, code, stdin)

    async def run_admitted(self, language: str, code: str, stdin: str = "") -> RunSnapshot:
        """Like :meth:`run` for code that already passed :meth:`admit`.

        Cancelling the task running this coroutine moves the current run to
        ``ERRORED`` before the cancellation propagates.
        """
        self._token += 1
        token = self._token
        self._handle = None
        self._record = None
        self._status = None
        self._error = None
        self._transition(token, RunState.SUBMITTING, SUBMITTING_MESSAGE)

        request = SubmissionRequest(language=language, code=code, inputs=[stdin])
        try:
            record = await self._drive(token, request)
        except CodeExecClientError as exc:
            if self._is_current(token):
                logger.warning("Run %d failed: %r", token, exc)
                self._fail(token, exc)
            else:
                logger.debug("Dropping failure from superseded run %d: %r", token, exc)
            return self.snapshot()
        except asyncio.CancelledError as exc:
            if self._is_current(token):
                logger.info("Run %d cancelled", token)
                self._fail(token, exc)
            raise
        except Exception as exc:
            if self._is_current(token):
                logger.exception("Unexpected error in run %d", token)
                self._fail(token, exc)
            raise

        if record is not None:
            self._record = record
            self._transition(token, RunState.RESOLVED, interpret(record))
            logger.info("Run %d resolved: job=%s status=%s", token, self.job_id, record.status)
        return self.snapshot()

    async def _drive(self, token: int, request: SubmissionRequest) -> Optional[JobRecord]:
        """Submit and poll; return ``None`` if the run was superseded."""
        handle = await self._client.submit_job(request)
        if not self._is_current(token):
            return None
        self._handle = handle
        self._transition(token, RunState.POLLING, self._display)
        logger.info("Run %d polling job %s", token, handle.job_id)

        while True:
            await self._sleep(self.poll_interval)
            if not self._is_current(token):
                return None
            record = await self._client.fetch_result(handle)
            if not self._is_current(token):
                return None
            self._status = record.status
            if record.is_terminal:
                return record
            logger.debug("Job %s is %s", handle.job_id, record.status)

    def _is_current(self, token: int) -> bool:
        return token == self._token

    def _fail(self, token: int, exc: BaseException) -> None:
        self._error = exc
        self._transition(token, RunState.ERRORED, error_message(exc))

    def _transition(self, token: int, state: RunState, display: str) -> None:
        if state is not self._state:
            logger.info("Run %d: %s -> %s", token, self._state.value, state.value)
        self._state = state
        self._display = display
        self._notify()

    def _notify(self) -> None:
        if self._on_change is not None:
            self._on_change(self.snapshot())
