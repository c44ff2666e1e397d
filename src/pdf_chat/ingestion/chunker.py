"""Text chunking strategies."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from langchain_text_splitters import RecursiveCharacterTextSplitter

from pdf_chat.exceptions import InvalidConfiguration
from pdf_chat.retrieval.models import Segment

if TYPE_CHECKING:
    from langchain_core.documents import Document

CHUNK_STRATEGIES = ("fixed", "recursive")


def validate_chunking(size: int, overlap: int) -> None:
    """Raise :class:`InvalidConfiguration` unless ``size > overlap >= 0``."""
    if isinstance(size, bool) or isinstance(overlap, bool) or not isinstance(size, int) or not isinstance(overlap, int):
        raise InvalidConfiguration(f"chunk size and overlap must be integers (got {size!r}, {overlap!r})")
    if overlap < 0:
        raise InvalidConfiguration(f"chunk_overlap ({overlap}) must be >= 0")
    if overlap >= size:
        raise InvalidConfiguration(f"chunk_overlap ({overlap}) must be < chunk_size ({size})")


def validate_strategy(strategy: str) -> None:
    """Raise :class:`InvalidConfiguration` for an unknown chunk strategy."""
    if strategy not in CHUNK_STRATEGIES:
        raise InvalidConfiguration(f"Unknown chunk strategy {strategy!r}; expected one of {CHUNK_STRATEGIES}")


def chunk(
    text: str,
    size: int,
    overlap: int,
    metadata: Mapping[str, Any] | None = None,
) -> list[Segment]:
    """Split *text* into fixed windows of *size* characters.

    Consecutive windows start ``size - overlap`` characters apart, so each
    shares exactly *overlap* characters with its predecessor.  The last
    window may be shorter.  Every segment records its ``start_index`` /
    ``end_index`` offsets into *text* and its ``chunk_index``.

    Parameters
    ----------
    text:
        Source text.  Empty text yields no segments.
    size:
        Window length in characters.
    overlap:
        Characters shared by neighbouring windows.
    metadata:
        Base metadata copied into every segment.

    Raises
    ------
    InvalidConfiguration
        Unless ``size > overlap >= 0``.
    """
    validate_chunking(size, overlap)
    base = dict(metadata or {})
    step = size - overlap

    segments: list[Segment] = []
    start = 0
    while start < len(text):
        end = min(start + size, len(text))
        segments.append(
            Segment(
                text=text[start:end],
                metadata={**base, "chunk_index": len(segments), "start_index": start, "end_index": end},
            )
        )
        if end == len(text):
            break
        start += step
    return segments


def _recursive_split(document: Document, size: int, overlap: int) -> list[Segment]:
    splitter = RecursiveCharacterTextSplitter(
        chunk_size=size,
        chunk_overlap=overlap,
        length_function=len,
        add_start_index=True,
    )
    segments: list[Segment] = []
    for piece in splitter.split_documents([document]):
        start = piece.metadata.get("start_index", -1)
        end = start + len(piece.page_content) if start >= 0 else -1
        segments.append(
            Segment(text=piece.page_content, metadata={**piece.metadata, "start_index": start, "end_index": end})
        )
    return segments


def chunk_documents(
    documents: list[Document],
    chunk_size: int = 500,
    chunk_overlap: int = 50,
    strategy: str = "fixed",
) -> list[Segment]:
    """Split extracted pages into segments ready for embedding.

    Parameters
    ----------
    documents:
        Pages produced by :func:`~pdf_chat.ingestion.loader.load_document`.
    chunk_size:
        Maximum number of characters per segment.
    chunk_overlap:
        Number of overlapping characters between consecutive segments.
    strategy:
        ``"fixed"`` for exact character windows, ``"recursive"`` to prefer
        paragraph / sentence / word boundaries.

    Returns
    -------
    list[Segment]
        Segments in document order.  Page metadata is preserved, offsets
        are relative to the page text and ``chunk_index`` runs across the
        whole document.
    """
    validate_chunking(chunk_size, chunk_overlap)
    validate_strategy(strategy)

    segments: list[Segment] = []
    for document in documents:
        if strategy == "fixed":
            pieces = chunk(document.page_content, chunk_size, chunk_overlap, metadata=document.metadata)
        else:
            pieces = _recursive_split(document, chunk_size, chunk_overlap)
        for piece in pieces:
            segments.append(
                Segment(text=piece.text, metadata={**piece.metadata, "chunk_index": len(segments)})
            )
    return segments
