"""
FastAPI application exposing the job orchestrator to a front-end.

The application is the presentation surface for the client: a browser
editor posts the current code to ``/run``, reads the language list from
``/languages`` and can poll ``/state`` to enable or disable its run
control.  The editor widget itself lives in the front-end; this module
only wires HTTP requests to :class:`~codeexec_client.orchestrator.JobOrchestrator`.

One orchestrator is shared by every request to an application instance,
so a ``/run`` that arrives while another is in flight supersedes it.
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Any, Awaitable, Callable, Dict, Optional

from fastapi import FastAPI, HTTPException, Request

from ..catalog import FAILED_TO_LOAD_MESSAGE, LanguageCatalog
from ..config import Config
from ..errors import TransportError
from ..guard import TOO_LARGE_MESSAGE
from ..models import LanguagesResponse, RunRequest, RunSnapshotModel
from ..orchestrator import JobOrchestrator, RunSnapshot
from ..transport import ExecutorClient


logger = logging.getLogger("codeexec_client")

if not logger.handlers:
    handler = logging.StreamHandler()
    formatter = logging.Formatter("[codeexec-client] %(levelname)s - %(message)s")
    handler.setFormatter(formatter)
    logger.addHandler(handler)

logger.setLevel(logging.INFO)


def _snapshot_model(snapshot: RunSnapshot) -> RunSnapshotModel:
    return RunSnapshotModel(
        token=snapshot.token,
        state=snapshot.state.value,
        display=snapshot.display,
        running=snapshot.running,
        job_id=snapshot.job_id,
        status=snapshot.status,
        error_kind=snapshot.error_kind,
    )


def create_app(
    config: Config,
    client: Optional[Any] = None,
    sleep: Optional[Callable[[float], Awaitable[None]]] = None,
) -> FastAPI:
    """Build the application.

    Parameters
    ----------
    config: Config
        Loaded configuration; see :mod:`codeexec_client.config`.
    client: optional
        Executor client to use.  Defaults to an :class:`ExecutorClient`
        built from ``config``, which is closed on shutdown.
    sleep: callable, optional
        Replacement for ``asyncio.sleep`` between polls.
    """
    owns_client = client is None
    if client is None:
        client = ExecutorClient.from_config(config)

    orchestrator = JobOrchestrator(
        client,
        poll_interval=config.poll_interval,
        sleep=sleep or asyncio.sleep,
        max_code_chars=config.max_code_chars,
    )

    logger.info(
        "Loaded config: executor_url=%s, poll_interval=%s, max_code_chars=%s",
        config.executor_url,
        config.poll_interval,
        config.max_code_chars,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        if owns_client:
            await client.aclose()

    app = FastAPI(title="Code Execution Client", version="0.1.0", lifespan=lifespan)
    app.state.config = config
    app.state.orchestrator = orchestrator
    app.state.catalog = None
    catalog_lock = asyncio.Lock()

    async def get_catalog() -> LanguageCatalog:
        async with catalog_lock:
            if app.state.catalog is None:
                app.state.catalog = await LanguageCatalog.load(client)
                logger.info("Loaded %d languages", len(app.state.catalog))
        return app.state.catalog

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        method = request.method
        path = request.url.path
        logger.info("Incoming request: %s %s", method, path)
        response = await call_next(request)
        logger.info("Response: %s %s -> %s", method, path, response.status_code)
        return response

    @app.get("/health")
    async def health() -> Dict[str, str]:
        """Return a simple health check response."""
        return {"status": "ok"}

    @app.get("/languages", response_model=LanguagesResponse)
    async def list_languages() -> LanguagesResponse:
        """Return the executor's languages, fetched once per application."""
        try:
            catalog = await get_catalog()
        except TransportError as exc:
            logger.warning("Could not load languages: %r", exc)
            raise HTTPException(status_code=502, detail=FAILED_TO_LOAD_MESSAGE)
        default = catalog.default
        return LanguagesResponse(
            languages=list(catalog.languages),
            default=default.id if default else None,
        )

    @app.post("/run", response_model=RunSnapshotModel)
    async def run(req: RunRequest) -> RunSnapshotModel:
        """Run code to completion and return the resulting snapshot."""
        catalog = app.state.catalog
        if catalog is not None and len(catalog) and req.language not in catalog:
            raise HTTPException(status_code=400, detail=f"Unsupported language: {req.language}")
        if not orchestrator.admit(req.code):
            raise HTTPException(status_code=413, detail=TOO_LARGE_MESSAGE)
        snapshot = await orchestrator.run_admitted(req.language, req.code, req.stdin)
        return _snapshot_model(snapshot)

    @app.get("/state", response_model=RunSnapshotModel)
    async def state() -> RunSnapshotModel:
        """Return the orchestrator's current state and display text."""
        return _snapshot_model(orchestrator.snapshot())

    return app
