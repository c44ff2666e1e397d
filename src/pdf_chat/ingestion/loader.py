"""Document text extraction: raw bytes in, one LangChain ``Document`` per page out."""

from __future__ import annotations

import logging

from langchain_community.document_loaders.parsers import PyPDFParser
from langchain_core.documents import Document
from langchain_core.documents.base import Blob

from pdf_chat.exceptions import IngestionFailure

logger = logging.getLogger(__name__)

PDF_MAGIC = b"%PDF"


def load_pdf(data: bytes, source: str = "document.pdf") -> list[Document]:
    """Parse PDF bytes into per-page documents.

    Page numbers in metadata are 1-based.  Pages without text are dropped.

    Raises
    ------
    IngestionFailure
        If the bytes cannot be parsed as a PDF.
    """
    blob = Blob.from_data(data, mime_type="application/pdf", path=source)
    try:
        pages = list(PyPDFParser().lazy_parse(blob))
    except Exception as exc:
        raise IngestionFailure("PDF is corrupted or unreadable", source=source, details=str(exc)) from exc

    documents: list[Document] = []
    for i, page in enumerate(pages):
        if not page.page_content.strip():
            continue
        page_number = page.metadata.get("page", i)
        documents.append(
            Document(
                page_content=page.page_content,
                metadata={**page.metadata, "source": source, "page": int(page_number) + 1},
            )
        )
    return documents


def load_text(data: bytes, source: str = "document.txt") -> list[Document]:
    """Decode UTF-8 text bytes into a single-page document."""
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise IngestionFailure("Unsupported document: not a PDF or UTF-8 text", source=source, details=str(exc)) from exc
    if not text.strip():
        return []
    return [Document(page_content=text, metadata={"source": source, "page": 1})]


def load_document(data: bytes, filename: str | None = None) -> list[Document]:
    """Extract the text of an uploaded document.

    Parameters
    ----------
    data:
        Raw document bytes.  PDFs are detected by their ``%PDF`` header;
        anything else is treated as UTF-8 text.
    filename:
        Optional name recorded as the ``source`` metadata of every page.

    Returns
    -------
    list[Document]
        Ordered pages, each with ``source`` and 1-based ``page`` metadata.

    Raises
    ------
    IngestionFailure
        If the document is empty, corrupt, unsupported, or yields no text.
    """
    if not data:
        raise IngestionFailure("Document is empty", source=filename)

    if data.lstrip()[:4] == PDF_MAGIC:
        documents = load_pdf(data, source=filename or "document.pdf")
    else:
        documents = load_text(data, source=filename or "document.txt")

    if not documents:
        raise IngestionFailure("No extractable text found in document", source=filename)

    logger.info("Extracted %d page(s) from %s", len(documents), filename or "upload")
    return documents
