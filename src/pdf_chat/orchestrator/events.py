"""Caller-facing message protocol: requests in, stream events out."""

from __future__ import annotations

from typing import Any, Literal, Union

from pydantic import BaseModel, Field

from pdf_chat.retrieval.models import ConversationTurn

EventType = Literal["log", "chunk", "error", "complete", "ready"]


class StreamEvent(BaseModel):
    """One event emitted by the orchestrator.

    Attributes
    ----------
    type:
        ``log`` (diagnostics), ``chunk`` (answer text), ``error`` (failure
        message), ``ready`` (document indexed) or ``complete`` (terminal:
        no further events for this request).
    payload:
        Event data; ``None`` for ``ready`` / ``complete``.
    """

    type: EventType
    payload: Any = None

    # -- helpers ---------------------------------------------------------------

    @classmethod
    def log(cls, message: Any) -> StreamEvent:
        return cls(type="log", payload=message)

    @classmethod
    def chunk(cls, text: str) -> StreamEvent:
        return cls(type="chunk", payload=text)

    @classmethod
    def error(cls, message: str) -> StreamEvent:
        return cls(type="error", payload=message)

    @classmethod
    def ready(cls) -> StreamEvent:
        return cls(type="ready")

    @classmethod
    def complete(cls) -> StreamEvent:
        return cls(type="complete", payload="OK")

    @property
    def is_terminal(self) -> bool:
        return self.type == "complete"


class IngestRequest(BaseModel):
    """Index a document: ``{document: bytes}``."""

    document: bytes
    filename: str | None = None


class QueryRequest(BaseModel):
    """Answer a question: the full conversation, newest human turn last."""

    messages: list[ConversationTurn] = Field(default_factory=list)

    @property
    def question(self) -> str:
        return self.messages[-1].content

    @property
    def history(self) -> list[ConversationTurn]:
        return self.messages[:-1]


Request = Union[IngestRequest, QueryRequest]
