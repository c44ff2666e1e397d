"""In-memory vector index using exact cosine similarity."""

from __future__ import annotations

import itertools
import logging
from collections.abc import Sequence

import numpy as np

from pdf_chat.exceptions import DimensionMismatch
from pdf_chat.retrieval.base import VectorIndexBase
from pdf_chat.retrieval.models import IndexEntry, SearchHit, Segment

logger = logging.getLogger(__name__)


def _normalize_rows(matrix: np.ndarray) -> np.ndarray:
    """L2-normalise each row; zero rows stay zero."""
    norms = np.linalg.norm(matrix, axis=1, keepdims=True)
    return np.divide(matrix, norms, out=np.zeros_like(matrix), where=norms > 0)


class InMemoryVectorIndex(VectorIndexBase):
    """Exact linear-scan index scored by cosine similarity.

    Rows are stored unit-normalised so a search is a single matrix-vector
    product.  Zero vectors have similarity 0 with everything.

    Not safe for concurrent ``add`` / ``search``; callers serialise access.
    """

    def __init__(self) -> None:
        self._entries: list[IndexEntry] = []
        self._matrix: np.ndarray | None = None
        self._dimension: int | None = None
        self._ids = itertools.count()

    @property
    def dimension(self) -> int | None:
        return self._dimension

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def entries(self) -> tuple[IndexEntry, ...]:
        """Snapshot of the stored entries in insertion order."""
        return tuple(self._entries)

    # -- VectorIndexBase overrides --------------------------------------------

    def add(self, entries: Sequence[tuple[Sequence[float], Segment]]) -> list[int]:
        if not entries:
            return []

        vectors = [np.asarray(vector, dtype=np.float64) for vector, _ in entries]
        expected = self._dimension if self._dimension is not None else len(vectors[0])
        if expected == 0:
            raise DimensionMismatch(expected=1, actual=0)
        # Validate the whole batch before touching any state.
        for vector in vectors:
            if vector.ndim != 1 or vector.shape[0] != expected:
                raise DimensionMismatch(expected=expected, actual=int(vector.size))

        rows = _normalize_rows(np.vstack(vectors))
        new_entries = [
            IndexEntry(entry_id=next(self._ids), vector=tuple(vector.tolist()), segment=segment)
            for vector, (_, segment) in zip(vectors, entries)
        ]

        self._matrix = rows if self._matrix is None else np.vstack([self._matrix, rows])
        self._entries.extend(new_entries)
        self._dimension = expected
        logger.debug("Indexed %d entries (total=%d, dim=%d)", len(new_entries), len(self), expected)
        return [entry.entry_id for entry in new_entries]

    def search(self, query: Sequence[float], k: int) -> list[SearchHit]:
        if k <= 0 or not self._entries or self._matrix is None:
            return []

        q = np.asarray(query, dtype=np.float64)
        if q.ndim != 1 or q.shape[0] != self._dimension:
            raise DimensionMismatch(expected=self._dimension, actual=int(q.size))

        norm = np.linalg.norm(q)
        if norm > 0:
            scores = self._matrix @ (q / norm)
        else:
            scores = np.zeros(len(self._entries))

        # Stable sort keeps insertion order among equal scores.
        order = np.argsort(-scores, kind="stable")[: min(k, len(self._entries))]
        return [
            SearchHit(
                entry_id=self._entries[i].entry_id,
                score=float(scores[i]),
                segment=self._entries[i].segment,
            )
            for i in order
        ]
