"""Unit tests for the chunker module."""

import pytest
from langchain_core.documents import Document

from pdf_chat.exceptions import InvalidConfiguration
from pdf_chat.ingestion.chunker import chunk, chunk_documents

SAMPLE = "The quick brown fox jumps over the lazy dog. " * 7


@pytest.mark.parametrize(
    ("size", "overlap"),
    [(10, 0), (10, 3), (7, 6), (50, 10), (1, 0), (500, 50)],
)
def test_windows_cover_text_with_exact_overlap(size: int, overlap: int) -> None:
    """Offsets cover the whole text; neighbours share exactly `overlap` chars."""
    segments = chunk(SAMPLE, size, overlap)

    assert segments[0].start_index == 0
    assert segments[-1].end_index == len(SAMPLE)
    for seg in segments:
        assert seg.text == SAMPLE[seg.start_index : seg.end_index]
    for prev, nxt in zip(segments, segments[1:]):
        assert len(prev.text) == size
        assert prev.end_index - nxt.start_index == overlap
    assert len(segments[-1].text) <= size


def test_non_overlapping_parts_rebuild_the_text() -> None:
    segments = chunk(SAMPLE, 40, 8)
    rebuilt = segments[0].text + "".join(s.text[8:] for s in segments[1:])
    assert rebuilt == SAMPLE


def test_text_shorter_than_window_is_one_segment() -> None:
    segments = chunk("short", 100, 10)
    assert [s.text for s in segments] == ["short"]


def test_empty_text_yields_nothing() -> None:
    assert chunk("", 10, 2) == []


def test_chunking_is_deterministic() -> None:
    assert chunk(SAMPLE, 33, 5) == chunk(SAMPLE, 33, 5)


def test_metadata_is_copied_into_segments() -> None:
    segments = chunk(SAMPLE, 60, 0, metadata={"page": 3, "source": "a.pdf"})
    assert all(s.metadata["page"] == 3 and s.metadata["source"] == "a.pdf" for s in segments)
    assert [s.metadata["chunk_index"] for s in segments] == list(range(len(segments)))


@pytest.mark.parametrize(
    ("size", "overlap"),
    [(10, 10), (10, 11), (5, -1), (0, 0), (10.0, 2), (True, 0)],
)
def test_invalid_configuration_rejected(size, overlap) -> None:  # noqa: ANN001
    with pytest.raises(InvalidConfiguration):
        chunk(SAMPLE, size, overlap)


# ── chunk_documents ────────────────────────────────────────────────────


def _pages() -> list[Document]:
    return [
        Document(page_content="a" * 25, metadata={"source": "doc.pdf", "page": 1}),
        Document(page_content="b" * 12, metadata={"source": "doc.pdf", "page": 2}),
    ]


def test_chunk_documents_keeps_page_metadata_and_global_index() -> None:
    segments = chunk_documents(_pages(), chunk_size=10, chunk_overlap=2)

    assert [s.metadata["page"] for s in segments] == [1, 1, 1, 2, 2]
    assert [s.metadata["chunk_index"] for s in segments] == [0, 1, 2, 3, 4]
    # offsets are relative to each page
    assert segments[3].start_index == 0
    assert all(s.metadata["source"] == "doc.pdf" for s in segments)


def test_chunk_documents_empty_input() -> None:
    assert chunk_documents([]) == []


def test_recursive_strategy_tracks_offsets() -> None:
    text = "Paragraph one talks about oceans.\n\nParagraph two talks about volcanoes and lava. " * 4
    page = Document(page_content=text, metadata={"page": 1})

    segments = chunk_documents([page], chunk_size=80, chunk_overlap=10, strategy="recursive")

    assert len(segments) > 1
    for seg in segments:
        assert len(seg.text) <= 80
        assert text[seg.start_index : seg.end_index] == seg.text
        assert seg.metadata["page"] == 1


def test_unknown_strategy_rejected() -> None:
    with pytest.raises(InvalidConfiguration, match="Unknown chunk strategy"):
        chunk_documents(_pages(), strategy="semantic")
