"""Render a terminal job record as a single display string."""

from __future__ import annotations

from .models import JobRecord


def status_message(status: str) -> str:
    return f"Execution finished with status: {status}"


def interpret(record: JobRecord) -> str:
    """Return the text to show for ``record``.

    Only the first execution result is consulted.  Non-empty stdout wins over
    non-empty stderr; when neither is present the job status is reported
    instead.  Output is passed through untouched.
    """
    if record.results:
        first = record.results[0]
        if first.stdout:
            return first.stdout
        if first.stderr:
            return first.stderr
    return status_message(record.status)
