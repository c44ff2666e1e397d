"""Unit tests for the serving layer."""

from __future__ import annotations

import json
from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

from pdf_chat.orchestrator.orchestrator import Orchestrator
from pdf_chat.orchestrator.worker import OrchestratorWorker
from pdf_chat.serving.app import create_app


def _events(response) -> list[dict]:  # noqa: ANN001
    return [json.loads(line) for line in response.text.splitlines() if line]


@pytest.fixture()
def client(embedder, index, make_llm) -> Iterator[TestClient]:  # noqa: ANN001
    orchestrator = Orchestrator(embedder, index, make_llm(["Dolphins ", "swim."]), chunk_size=200, chunk_overlap=20)
    with TestClient(create_app(OrchestratorWorker(orchestrator))) as test_client:
        yield test_client


def test_health_endpoint(client: TestClient) -> None:
    """GET /health should return 200 with status ok."""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_upload_then_chat(client: TestClient) -> None:
    upload = client.post(
        "/documents",
        params={"filename": "notes.txt"},
        content="Dolphins live in the ocean.".encode(),
    )
    assert upload.status_code == 200
    assert upload.headers["content-type"].startswith("application/x-ndjson")
    assert [e["type"] for e in _events(upload)] == ["log", "log", "ready", "complete"]

    chat = client.post("/chat", json={"messages": [{"role": "human", "content": "Where do dolphins live?"}]})
    events = _events(chat)
    assert [e["payload"] for e in events if e["type"] == "chunk"] == ["Dolphins ", "swim."]
    assert events[-1] == {"type": "complete", "payload": "OK"}


def test_empty_upload_streams_error(client: TestClient) -> None:
    events = _events(client.post("/documents", content=b""))
    assert [e["type"] for e in events] == ["log", "error", "complete"]


def test_malformed_chat_body_rejected(client: TestClient) -> None:
    response = client.post("/chat", json={"messages": [{"role": "robot", "content": "hi"}]})
    assert response.status_code == 422
