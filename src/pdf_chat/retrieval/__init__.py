"""
Retrieval: vector index, similarity search and context assembly.

Public surface
--------------
- :class:`Retriever`: question → formatted context block.
- :class:`VectorIndexBase`: abstract index backend.
- :class:`InMemoryVectorIndex`: default exact cosine-similarity backend.
- :class:`Segment`, :class:`IndexEntry`, :class:`SearchHit`,
  :class:`ConversationTurn`: data models.
"""

from pdf_chat.retrieval.base import VectorIndexBase
from pdf_chat.retrieval.memory_store import InMemoryVectorIndex
from pdf_chat.retrieval.models import ConversationTurn, IndexEntry, SearchHit, Segment
from pdf_chat.retrieval.retriever import Retriever, format_hits

__all__ = [
    "ConversationTurn",
    "InMemoryVectorIndex",
    "IndexEntry",
    "Retriever",
    "SearchHit",
    "Segment",
    "VectorIndexBase",
    "format_hits",
]
