"""Retriever: turns a question into a formatted context block.

Usage::

    retriever = Retriever(embedder, index, rewriter, k=4)
    context = retriever.retrieve("What does section 2 cover?", history=[])

When *history* is non-empty the question is first rewritten into a
standalone question, so a follow-up like "and why?" still retrieves the
right segments.
"""

from __future__ import annotations

import functools
import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING

from pdf_chat.chain.sequence import StepSequence
from pdf_chat.config import settings

if TYPE_CHECKING:
    from pdf_chat.chain.rewriter import HistoryRewriter
    from pdf_chat.ingestion.embedder import Embedder
    from pdf_chat.retrieval.base import VectorIndexBase
    from pdf_chat.retrieval.models import ConversationTurn, SearchHit

logger = logging.getLogger(__name__)


def format_hits(hits: Sequence[SearchHit]) -> str:
    """Wrap each segment in a ``<doc id='i'>`` tag, one per line."""
    return "\n".join(f"<doc id='{i}'>{hit.segment.text}</doc>" for i, hit in enumerate(hits))


class Retriever:
    """Embeds a query, searches the index and formats the top-*k* segments.

    Parameters
    ----------
    embedder:
        Embeds query text.  Must be the embedder used at ingestion.
    index:
        The vector index to search.
    rewriter:
        Applied to the query whenever conversation history is present.
    k:
        Number of segments to retrieve (defaults to ``settings.retrieval_k``).
    """

    def __init__(
        self,
        embedder: Embedder,
        index: VectorIndexBase,
        rewriter: HistoryRewriter,
        *,
        k: int | None = None,
    ) -> None:
        self._embedder = embedder
        self._index = index
        self._rewriter = rewriter
        self.k = k if k is not None else settings.retrieval_k

    # -- public API -----------------------------------------------------------

    def search(self, query: str) -> list[SearchHit]:
        """Return the top-*k* hits for *query*, best first."""
        hits = self._index.search(self._embedder.embed(query), self.k)
        logger.info("Retrieved %d segment(s) for %r", len(hits), query)
        return hits

    def build_chain(self, history: Sequence[ConversationTurn]) -> StepSequence:
        """Pick the step sequence for this turn.

        ``rewrite → search → format`` with history, ``search → format``
        without.
        """
        if history:
            return StepSequence(
                functools.partial(self._rewriter.rewrite, history),
                self.search,
                format_hits,
            )
        return StepSequence(self.search, format_hits)

    def retrieve(self, query_text: str, history: Sequence[ConversationTurn] = ()) -> str:
        """Return the formatted context block for *query_text*."""
        return self.build_chain(history)(query_text)
