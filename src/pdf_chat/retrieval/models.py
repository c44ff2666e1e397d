"""Domain models for indexed segments, search hits and conversation turns."""

from __future__ import annotations

from typing import Any, Literal

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage
from pydantic import BaseModel, ConfigDict, Field


class Segment(BaseModel):
    """A bounded piece of source text: the atomic retrieval unit.

    Attributes
    ----------
    text:
        The segment content.
    metadata:
        Provenance such as ``page``, ``source``, ``chunk_index`` and the
        ``start_index`` / ``end_index`` character offsets in the page text.
    """

    model_config = ConfigDict(frozen=True)

    text: str
    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def start_index(self) -> int | None:
        return self.metadata.get("start_index")

    @property
    def end_index(self) -> int | None:
        return self.metadata.get("end_index")


class IndexEntry(BaseModel):
    """A stored ``(vector, segment)`` pair with its insertion identifier."""

    model_config = ConfigDict(frozen=True)

    entry_id: int
    vector: tuple[float, ...]
    segment: Segment


class SearchHit(BaseModel):
    """One ranked result of a similarity search."""

    entry_id: int
    score: float
    segment: Segment

    def __str__(self) -> str:  # noqa: D105
        return f"#{self.entry_id} ({self.score:.3f}) {self.segment.text[:120]}…"


class ConversationTurn(BaseModel):
    """One message of the chat, as exchanged with the caller."""

    role: Literal["human", "ai"]
    content: str

    def to_message(self) -> BaseMessage:
        """Convert to the LangChain message type matching :attr:`role`."""
        if self.role == "human":
            return HumanMessage(content=self.content)
        return AIMessage(content=self.content)


ConversationHistory = list[ConversationTurn]
"""Chronological list of turns preceding the current question."""
