"""Abstract base class for vector-index backends.

The shipped backend is an exact linear scan
(:class:`~pdf_chat.retrieval.memory_store.InMemoryVectorIndex`), which is
plenty for the chunks of a single document.  An approximate-nearest-neighbour
backend only needs to subclass :class:`VectorIndexBase`; the retriever and
orchestrator never look past this interface.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence

from pdf_chat.retrieval.models import SearchHit, Segment


class VectorIndexBase(ABC):
    """Backend-agnostic vector-index interface.

    Contract
    --------
    * The dimension is fixed by the first successful :meth:`add`.
    * :meth:`add` is all-or-nothing: a failing batch leaves the index
      unchanged.
    * Entries are never removed; identifiers are never reused.
    """

    # -- required overrides ---------------------------------------------------

    @abstractmethod
    def add(self, entries: Sequence[tuple[Sequence[float], Segment]]) -> list[int]:
        """Append ``(vector, segment)`` pairs and return their entry ids.

        Raises
        ------
        DimensionMismatch
            If any vector's length differs from the index dimension.
        """
        ...

    @abstractmethod
    def search(self, query: Sequence[float], k: int) -> list[SearchHit]:
        """Return up to *k* hits ranked by descending similarity.

        Ties are broken by insertion order.  An empty index (or ``k <= 0``)
        returns an empty list rather than raising.
        """
        ...

    @property
    @abstractmethod
    def dimension(self) -> int | None:
        """The established vector dimension, or ``None`` while empty."""
        ...

    @abstractmethod
    def __len__(self) -> int:
        ...
