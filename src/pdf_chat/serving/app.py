"""FastAPI application exposing the document chat worker over HTTP.

Both POST routes stream the request's events back as NDJSON, one
:class:`~pdf_chat.orchestrator.events.StreamEvent` per line, ending with
the ``complete`` event.  The heavy lifting happens on the worker thread,
never on the event loop.
"""

from __future__ import annotations

import json
from collections.abc import AsyncIterator, Iterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import StreamingResponse

from pdf_chat.config import settings
from pdf_chat.logging_config import setup_logging
from pdf_chat.orchestrator.events import IngestRequest, QueryRequest
from pdf_chat.orchestrator.worker import EventChannel, OrchestratorWorker

NDJSON = "application/x-ndjson"


def _ndjson(channel: EventChannel) -> Iterator[str]:
    try:
        for event in channel:
            yield json.dumps(event.model_dump(mode="json")) + "\n"
    finally:
        # Client went away: discard whatever the worker still emits.
        channel.close()


def create_app(worker: OrchestratorWorker | None = None) -> FastAPI:
    """Build the API around *worker* (default: one built from settings)."""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        setup_logging(settings.log_level)
        if app.state.worker is None:
            from pdf_chat.orchestrator.orchestrator import Orchestrator

            app.state.worker = OrchestratorWorker(Orchestrator.from_settings())
        app.state.worker.start()
        try:
            yield
        finally:
            app.state.worker.stop(timeout=5.0)

    app = FastAPI(
        title="PDF Chat API",
        version="0.1.0",
        description="Chat with a document through a local, retrieval-augmented LLM.",
        lifespan=lifespan,
    )
    app.state.worker = worker

    # ── Routes ────────────────────────────────────────────────────────
    @app.get("/health")
    async def health() -> dict[str, str]:
        """Liveness probe."""
        return {"status": "ok"}

    @app.post("/documents")
    async def upload_document(request: Request, filename: str | None = None) -> StreamingResponse:
        """Index the raw request body as the chat document."""
        body = await request.body()
        channel = app.state.worker.submit(IngestRequest(document=body, filename=filename))
        return StreamingResponse(_ndjson(channel), media_type=NDJSON)

    @app.post("/chat")
    async def chat(query: QueryRequest) -> StreamingResponse:
        """Answer the last human message of the conversation."""
        channel = app.state.worker.submit(query)
        return StreamingResponse(_ndjson(channel), media_type=NDJSON)

    return app
