"""Unit tests for the retriever: search, formatting and the rewrite branch."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from pdf_chat.chain.rewriter import HistoryRewriter
from pdf_chat.ingestion.embedder import Embedder
from pdf_chat.retrieval.memory_store import InMemoryVectorIndex
from pdf_chat.retrieval.models import ConversationTurn, SearchHit, Segment
from pdf_chat.retrieval.retriever import Retriever, format_hits

CORPUS = [
    "Dolphins are mammals that live in the ocean.",
    "A volcano erupts when lava reaches the surface.",
    "The piano is a keyboard instrument used in classical music.",
    "A rocket must reach orbit velocity to circle the earth.",
]


@pytest.fixture()
def populated_index(embedder: Embedder, index: InMemoryVectorIndex) -> InMemoryVectorIndex:
    segments = [Segment(text=t, metadata={"chunk_index": i}) for i, t in enumerate(CORPUS)]
    index.add(list(zip(embedder.embed_many(CORPUS), segments)))
    return index


@pytest.fixture()
def rewriter() -> MagicMock:
    return MagicMock(spec=HistoryRewriter)


@pytest.fixture()
def retriever(embedder: Embedder, populated_index: InMemoryVectorIndex, rewriter: MagicMock) -> Retriever:
    return Retriever(embedder, populated_index, rewriter, k=2)


def test_format_hits_tags_each_segment() -> None:
    hits = [
        SearchHit(entry_id=7, score=0.9, segment=Segment(text="first")),
        SearchHit(entry_id=3, score=0.5, segment=Segment(text="second")),
    ]
    assert format_hits(hits) == "<doc id='0'>first</doc>\n<doc id='1'>second</doc>"


def test_format_hits_empty() -> None:
    assert format_hits([]) == ""


def test_search_ranks_best_match_first(retriever: Retriever) -> None:
    hits = retriever.search("Where do dolphins swim? In the ocean?")
    assert len(hits) == 2
    assert hits[0].segment.text == CORPUS[0]


def test_retrieve_without_history_skips_rewriter(retriever: Retriever, rewriter: MagicMock) -> None:
    context = retriever.retrieve("Tell me about lava", history=[])

    rewriter.rewrite.assert_not_called()
    assert context.startswith(f"<doc id='0'>{CORPUS[1]}</doc>")


def test_retrieve_with_history_searches_rewritten_question(
    retriever: Retriever, rewriter: MagicMock, keyword_embeddings
) -> None:  # noqa: ANN001
    history = [
        ConversationTurn(role="human", content="What is a rocket?"),
        ConversationTurn(role="ai", content="A vehicle that reaches orbit."),
    ]
    rewriter.rewrite.return_value = "How does a piano make music?"

    context = retriever.retrieve("And that instrument?", history=history)

    rewriter.rewrite.assert_called_once_with(history, "And that instrument?")
    assert keyword_embeddings.query_calls[-1] == "How does a piano make music?"
    assert context.startswith(f"<doc id='0'>{CORPUS[2]}</doc>")


def test_build_chain_shape_depends_on_history(retriever: Retriever) -> None:
    assert len(retriever.build_chain([])) == 2
    assert len(retriever.build_chain([ConversationTurn(role="human", content="hi")])) == 3


def test_default_k_comes_from_settings(embedder: Embedder, index: InMemoryVectorIndex, rewriter: MagicMock) -> None:
    from pdf_chat.config import settings

    assert Retriever(embedder, index, rewriter).k == settings.retrieval_k


def test_empty_index_gives_empty_context(embedder: Embedder, index: InMemoryVectorIndex, rewriter: MagicMock) -> None:
    assert Retriever(embedder, index, rewriter).retrieve("anything") == ""
