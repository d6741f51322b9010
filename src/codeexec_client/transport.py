"""
Async HTTP client for the executor's three endpoints.

:class:`ExecutorClient` wraps an ``httpx.AsyncClient`` and turns every
request into one round trip: list languages, submit a job, or fetch a job's
current record.  It is stateless between calls and never retries; the
caller decides what to do with a failure.

Failures are reported as :class:`~codeexec_client.errors.TransportError`
with a ``kind`` describing what went wrong.  A response that arrived with a
success status but does not match the expected shape raises
:class:`~codeexec_client.errors.ProtocolError` instead, so callers can tell
"the service is unreachable" apart from "the service answered nonsense".

Only ``/submit`` and ``/result/{job_id}`` carry the ``X-API-Key`` header;
``/languages`` is public.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from .config import Config
from .errors import ProtocolError, ResultMissingError, TransportError, TransportErrorKind
from .models import JobHandle, JobRecord, LanguageDescriptor, SubmissionRequest


logger = logging.getLogger(__name__)

API_KEY_HEADER = "X-API-Key"


class ExecutorClient:
    """Thin async client for the executor API."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """
        Parameters
        ----------
        base_url: str
            Executor base URL.  Endpoint paths are appended to it, so a
            path prefix such as ``https://host/api`` is preserved.
        api_key: str
            Credential sent as ``X-API-Key`` on authenticated endpoints.
        timeout: float, optional
            Per-request timeout in seconds.  A timeout surfaces as a
            ``TransportError`` like any other network failure.
        transport: httpx.AsyncBaseTransport, optional
            Custom transport, mainly for tests (``httpx.MockTransport``).
        """
        self.base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
        )

    @classmethod
    def from_config(
        cls,
        config: Config,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "ExecutorClient":
        return cls(
            config.executor_url,
            config.api_key,
            timeout=config.request_timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "ExecutorClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def fetch_languages(self) -> List[LanguageDescriptor]:
        """Return the languages the executor supports.

        A success body without a language list yields an empty list.
        """
        body = await self._request(
            "GET",
            "/languages",
            failure_kind=TransportErrorKind.NETWORK_OR_STATUS,
            failure_message="Failed to fetch languages",
        )
        data = body.get("data") if isinstance(body, dict) else None
        raw_languages = data.get("languages") if isinstance(data, dict) else None
        if not raw_languages:
            return []
        if not isinstance(raw_languages, list):
            raise ProtocolError("Language list is not an array")
        try:
            return [LanguageDescriptor.model_validate(item) for item in raw_languages]
        except ValidationError as exc:
            raise ProtocolError(f"Malformed language descriptor: {exc}") from exc

    async def submit_job(self, request: SubmissionRequest) -> JobHandle:
        """Submit ``request`` and return the handle used for polling."""
        body = await self._request(
            "POST",
            "/submit",
            failure_kind=TransportErrorKind.SUBMIT_REJECTED,
            failure_message="Submit failed",
            authenticated=True,
            json=request.model_dump(),
        )
        data = self._data(body)
        job_id = data.get("job_id")
        if not isinstance(job_id, str) or not job_id:
            raise ProtocolError("Submit response did not include a job id")
        logger.debug("Submitted %s job as %s", request.language, job_id)
        return JobHandle(job_id=job_id)

    async def fetch_result(self, handle: JobHandle) -> JobRecord:
        """Fetch the current record of the job identified by ``handle``."""
        body = await self._request(
            "GET",
            f"/result/{quote(handle.job_id, safe='')}",
            failure_kind=TransportErrorKind.NETWORK_OR_STATUS,
            failure_message="Result fetch failed",
            authenticated=True,
        )
        data = body.get("data") if isinstance(body, dict) else None
        if not isinstance(data, dict):
            raise ResultMissingError(f"Result for job {handle.job_id} is missing the 'data' object")
        if not isinstance(data.get("status"), str):
            raise ProtocolError(f"Result for job {handle.job_id} did not include a status")
        if data.get("results") is None:
            data = {**data, "results": []}
        try:
            return JobRecord.model_validate(data)
        except ValidationError as exc:
            raise ProtocolError(f"Malformed result for job {handle.job_id}: {exc}") from exc

    async def _request(
        self,
        method: str,
        path: str,
        failure_kind: TransportErrorKind,
        failure_message: str,
        authenticated: bool = False,
        **kwargs: Any,
    ) -> Any:
        """Perform one request and return the decoded JSON body."""
        headers: Dict[str, str] = {}
        if authenticated:
            headers[API_KEY_HEADER] = self._api_key
        logger.debug("Executor request: %s %s%s", method, self.base_url, path)
        try:
            response = await self._client.request(method, path, headers=headers, **kwargs)
        except httpx.HTTPError as exc:
            logger.warning("Executor request %s %s failed: %s", method, path, exc)
            raise TransportError(
                TransportErrorKind.NETWORK_OR_STATUS,
                f"{failure_message}: {exc.__class__.__name__}",
            ) from exc

        if not response.is_success:
            logger.warning("Executor request %s %s -> %s", method, path, response.status_code)
            raise TransportError(
                failure_kind,
                f"{failure_message} (HTTP {response.status_code})",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as exc:
            raise ProtocolError(
                f"Executor returned a non-JSON body for {method} {path}",
                status_code=response.status_code,
            ) from exc

    @staticmethod
    def _data(body: Any) -> Dict[str, Any]:
        data = body.get("data") if isinstance(body, dict) else None
        if not isinstance(data, dict):
            raise ProtocolError("Response body is missing the 'data' object")
        return data
