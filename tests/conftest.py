"""Shared pytest configuration and fixtures.

Nothing here talks to a real model: embeddings come from a keyword-count
fake with a known similarity ordering, and chat output from a scripted
fake whose responses are queued per test.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from typing import Any

import pytest
from langchain_core.embeddings import Embeddings
from langchain_core.language_models import BaseChatModel
from langchain_core.messages import AIMessage, AIMessageChunk, BaseMessage
from langchain_core.outputs import ChatGeneration, ChatGenerationChunk, ChatResult
from pydantic import Field

from pdf_chat.ingestion.embedder import Embedder
from pdf_chat.retrieval.memory_store import InMemoryVectorIndex

VOCABULARY = ["dolphin", "ocean", "volcano", "lava", "piano", "music", "rocket", "orbit"]


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "integration: marks tests requiring external services")


class KeywordEmbeddings(Embeddings):
    """One dimension per vocabulary word, valued by its occurrence count."""

    def __init__(self, vocabulary: list[str]) -> None:
        self.vocabulary = vocabulary
        self.fail = False
        self.document_calls: list[list[str]] = []
        self.query_calls: list[str] = []

    def _vector(self, text: str) -> list[float]:
        lowered = text.lower()
        return [float(lowered.count(word)) for word in self.vocabulary]

    def embed_documents(self, texts: list[str]) -> list[list[float]]:
        self.document_calls.append(list(texts))
        if self.fail:
            raise RuntimeError("embedding backend down")
        return [self._vector(t) for t in texts]

    def embed_query(self, text: str) -> list[float]:
        self.query_calls.append(text)
        if self.fail:
            raise RuntimeError("embedding backend down")
        return self._vector(text)


class ScriptedChatModel(BaseChatModel):
    """Chat model that replays queued responses.

    Each queued response is a list of text pieces (streamed one per chunk,
    joined for ``invoke``).  An exception anywhere in the list is raised
    when that point of the stream is reached.
    """

    responses: list[Any] = Field(default_factory=list)
    received: list[Any] = Field(default_factory=list)

    @property
    def _llm_type(self) -> str:
        return "scripted"

    def _next(self, messages: list[BaseMessage]) -> list[Any]:
        self.received.append(messages)
        if not self.responses:
            raise AssertionError("unexpected model call")
        return self.responses.pop(0)

    def _generate(self, messages, stop=None, run_manager=None, **kwargs: Any) -> ChatResult:  # noqa: ANN001
        pieces = self._next(messages)
        for piece in pieces:
            if isinstance(piece, BaseException):
                raise piece
        return ChatResult(generations=[ChatGeneration(message=AIMessage(content="".join(pieces)))])

    def _stream(self, messages, stop=None, run_manager=None, **kwargs: Any) -> Iterator[ChatGenerationChunk]:  # noqa: ANN001
        for piece in self._next(messages):
            if isinstance(piece, BaseException):
                raise piece
            yield ChatGenerationChunk(message=AIMessageChunk(content=piece))


@pytest.fixture()
def keyword_embeddings() -> KeywordEmbeddings:
    return KeywordEmbeddings(VOCABULARY)


@pytest.fixture()
def embedder(keyword_embeddings: KeywordEmbeddings) -> Embedder:
    return Embedder(keyword_embeddings, batch_size=2)


@pytest.fixture()
def index() -> InMemoryVectorIndex:
    return InMemoryVectorIndex()


@pytest.fixture()
def make_llm() -> Callable[..., ScriptedChatModel]:
    """Factory: ``make_llm(["Hel", "lo"], ["second answer"])``."""

    def _make(*responses: list[Any]) -> ScriptedChatModel:
        return ScriptedChatModel(responses=[list(r) for r in responses])

    return _make
