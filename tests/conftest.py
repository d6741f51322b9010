"""Shared fakes for the executor client tests."""

from __future__ import annotations

import asyncio
from typing import List, Optional

import pytest

from codeexec_client.models import ExecutionResult, JobHandle, JobRecord, LanguageDescriptor


def record(status: str, *results: dict) -> JobRecord:
    return JobRecord(status=status, results=[ExecutionResult(**r) for r in results])


class FakeExecutor:
    """In-memory stand-in for ``ExecutorClient``.

    ``records`` is consumed one item per poll; an exception instance in the
    list is raised instead of returned.  Running out of records raises
    ``IndexError`` so an unexpected extra poll fails the test.
    """

    def __init__(
        self,
        records: Optional[list] = None,
        job_id: str = "job-1",
        submit_error: Optional[Exception] = None,
        languages: Optional[List[LanguageDescriptor]] = None,
    ) -> None:
        self.records = list(records or [])
        self.job_id = job_id
        self.submit_error = submit_error
        self.languages = list(languages or [])
        self.submissions = []
        self.polls: List[JobHandle] = []
        self.language_fetches = 0

    async def fetch_languages(self) -> List[LanguageDescriptor]:
        self.language_fetches += 1
        return self.languages

    async def submit_job(self, request):
        self.submissions.append(request)
        if self.submit_error is not None:
            raise self.submit_error
        return JobHandle(job_id=self.job_id)

    async def fetch_result(self, handle: JobHandle) -> JobRecord:
        self.polls.append(handle)
        item = self.records.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


class FakeSleep:
    """Records requested delays and yields to the event loop without waiting."""

    def __init__(self) -> None:
        self.delays: List[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)
        await asyncio.sleep(0)


@pytest.fixture
def fake_sleep() -> FakeSleep:
    return FakeSleep()


@pytest.fixture
def languages() -> List[LanguageDescriptor]:
    return [
        LanguageDescriptor(
            id="python",
            name="Python",
            version="3.12",
            description="CPython interpreter",
            example='print("Hello, World!")',
        ),
        LanguageDescriptor(
            id="bash",
            name="Bash",
            version="5.2",
            description="GNU Bash",
            example='echo "Hello, World!"',
        ),
    ]
