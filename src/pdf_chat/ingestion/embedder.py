"""Embedding service wrapper."""

from __future__ import annotations

import logging
import time
from collections.abc import Sequence
from typing import TYPE_CHECKING

from pdf_chat.config import settings
from pdf_chat.exceptions import EmbeddingFailure, InvalidConfiguration

if TYPE_CHECKING:
    from langchain_core.embeddings import Embeddings

logger = logging.getLogger(__name__)


def get_embedding_function(
    model_name: str | None = None,
    *,
    normalize: bool | None = None,
) -> Embeddings:
    """Return the configured sentence-transformer embedding function."""
    # Imported lazily: loading sentence-transformers is slow.
    from langchain_huggingface import HuggingFaceEmbeddings

    if normalize is None:
        normalize = settings.normalize_embeddings
    return HuggingFaceEmbeddings(
        model_name=model_name or settings.embedding_model,
        encode_kwargs={"normalize_embeddings": normalize},
    )


class Embedder:
    """Maps text to fixed-dimension vectors through a LangChain ``Embeddings``.

    The backend may block for a long time (model load, inference); this is
    the main suspension point during ingestion.  Any backend error, or a
    response that does not look like one vector per input of a consistent
    dimension, is raised as :class:`EmbeddingFailure`.

    Parameters
    ----------
    embeddings:
        The backend.  When *None*, :func:`get_embedding_function` is used.
    batch_size:
        Number of texts sent per :meth:`embed_many` backend call; a positive
        integer, defaulting to ``settings.embedding_batch_size``.
    """

    def __init__(self, embeddings: Embeddings | None = None, *, batch_size: int | None = None) -> None:
        if batch_size is None:
            batch_size = settings.embedding_batch_size
        if isinstance(batch_size, bool) or not isinstance(batch_size, int) or batch_size < 1:
            raise InvalidConfiguration(f"embedding batch_size must be a positive integer (got {batch_size!r})")
        self.batch_size = batch_size
        self._embeddings = embeddings if embeddings is not None else get_embedding_function()
        self._dimension: int | None = None

    @property
    def dimension(self) -> int | None:
        """Vector dimension, known after the first successful call."""
        return self._dimension

    def embed(self, text: str) -> list[float]:
        """Embed a single query text."""
        try:
            vector = self._embeddings.embed_query(text)
        except Exception as exc:
            raise EmbeddingFailure("Embedding service failed", details=str(exc)) from exc
        return self._check(vector)

    def embed_many(self, texts: Sequence[str]) -> list[list[float]]:
        """Embed *texts* in batches, preserving input order."""
        if not texts:
            return []

        vectors: list[list[float]] = []
        t0 = time.monotonic()
        for start in range(0, len(texts), self.batch_size):
            batch = list(texts[start : start + self.batch_size])
            try:
                result = self._embeddings.embed_documents(batch)
            except Exception as exc:
                raise EmbeddingFailure("Embedding service failed", details=str(exc)) from exc
            if len(result) != len(batch):
                raise EmbeddingFailure(
                    f"Embedding service returned {len(result)} vectors for {len(batch)} texts"
                )
            vectors.extend(self._check(v) for v in result)
            logger.debug("  embedded %d / %d", len(vectors), len(texts))

        logger.info(
            "Embedded %d texts (dim=%s) in %.1fs", len(vectors), self._dimension, time.monotonic() - t0
        )
        return vectors

    def _check(self, vector: Sequence[float]) -> list[float]:
        values = [float(x) for x in vector]
        if not values:
            raise EmbeddingFailure("Embedding service returned an empty vector")
        if self._dimension is None:
            self._dimension = len(values)
        elif len(values) != self._dimension:
            raise EmbeddingFailure(
                f"Embedding dimension changed from {self._dimension} to {len(values)}"
            )
        return values
