"""Pydantic models for the executor's request and response bodies.

These models express the structure of the three executor endpoints the
client consumes (``/languages``, ``/submit`` and ``/result/{job_id}``).
Every success body wraps its payload in a top-level ``data`` object; the
models below describe the payload inside it.  Fields the executor may add
in the future are ignored rather than rejected.
"""

from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class JobStatus(str, Enum):
    """Statuses the executor is known to report for a job."""

    QUEUED = "QUEUED"
    RUNNING = "RUNNING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


NON_TERMINAL_STATUSES = frozenset({JobStatus.QUEUED.value, JobStatus.RUNNING.value})


def is_terminal_status(status: str) -> bool:
    """Return ``True`` unless ``status`` is ``QUEUED`` or ``RUNNING``.

    Unknown strings are terminal too: the executor is trusted to stop
    reporting a job once it leaves the queue.
    """
    return status not in NON_TERMINAL_STATUSES


class LanguageDescriptor(BaseModel):
    """A runtime or compiler supported by the executor."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str
    name: str
    version: str = ""
    description: str = ""
    example: str = Field(default="", description="Starter program shown in the editor.")


class SubmissionRequest(BaseModel):
    """Request body for submitting a job."""

    language: str = Field(..., description="Language id from the executor's language list.")
    code: str = Field(..., description="Source code to execute.")
    inputs: List[str] = Field(
        default_factory=lambda: [""],
        description="Standard input per execution unit. Only one is populated today.",
    )


class JobHandle(BaseModel):
    """Opaque key returned by ``/submit`` and presented on every poll."""

    model_config = ConfigDict(frozen=True)

    job_id: str


class ExecutionResult(BaseModel):
    """Outcome of one execution unit."""

    model_config = ConfigDict(extra="ignore")

    stdout: Optional[str] = None
    stderr: Optional[str] = None


class JobRecord(BaseModel):
    """Snapshot of a job as returned by ``/result/{job_id}``.

    ``status`` keeps the raw string the executor sent so that values outside
    :class:`JobStatus` are preserved for display.
    """

    model_config = ConfigDict(extra="ignore")

    status: str
    results: List[ExecutionResult] = Field(default_factory=list)

    @property
    def is_terminal(self) -> bool:
        return is_terminal_status(self.status)


class RunRequest(BaseModel):
    """Request body for ``POST /run`` on the presentation API."""

    language: str = Field(..., description="Language id to run the code with.")
    code: str = Field(..., description="Current contents of the editor.")
    stdin: str = Field(default="", description="Program input.")


class RunSnapshotModel(BaseModel):
    """Response body describing the orchestrator's current run."""

    token: int
    state: str
    display: str
    running: bool
    job_id: Optional[str] = None
    status: Optional[str] = None
    error_kind: Optional[str] = None


class LanguagesResponse(BaseModel):
    languages: List[LanguageDescriptor] = Field(default_factory=list)
    default: Optional[str] = Field(
        default=None, description="Id of the language selected on first load."
    )
