"""Orchestrator: runs one ingestion or query request as a stream of events.

Request lifecycle::

    ingest:  IDLE ─► EMBEDDING ─────────────────────► COMPLETE
    query:   IDLE ─► RETRIEVING ─► SYNTHESIZING ────► COMPLETE
                         └──────────────┴──► ERRORED

Every accepted request produces a ``log`` event first and exactly one terminal
``complete`` event last.  A failure emits one ``error`` event (and nothing
else but the ``complete``).  No retries happen here: re-submitting is the
caller's decision.

Only one request may be active at a time.  The in-memory index is not safe
for concurrent mutation and search, and this single-flight rule is what
protects it; :class:`~pdf_chat.orchestrator.worker.OrchestratorWorker`
queues requests so callers never trip it.
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Callable, Iterator
from typing import TYPE_CHECKING

from pdf_chat.chain.rewriter import HistoryRewriter
from pdf_chat.chain.synthesizer import AnswerSynthesizer
from pdf_chat.config import Settings, settings
from pdf_chat.exceptions import InvalidRequest, ModelUnavailable, PdfChatError
from pdf_chat.ingestion.chunker import chunk_documents, validate_chunking, validate_strategy
from pdf_chat.ingestion.loader import load_document
from pdf_chat.orchestrator.events import IngestRequest, QueryRequest, Request, StreamEvent
from pdf_chat.retrieval.retriever import Retriever

if TYPE_CHECKING:
    from langchain_core.documents import Document
    from langchain_core.language_models import BaseChatModel

    from pdf_chat.ingestion.embedder import Embedder
    from pdf_chat.retrieval.base import VectorIndexBase

logger = logging.getLogger(__name__)

OLLAMA_HINT = "Make sure you are running Ollama."


class RequestState(str, enum.Enum):
    IDLE = "idle"
    EMBEDDING = "embedding"
    RETRIEVING = "retrieving"
    SYNTHESIZING = "synthesizing"
    COMPLETE = "complete"
    ERRORED = "errored"


ACTIVE_STATES = frozenset({RequestState.EMBEDDING, RequestState.RETRIEVING, RequestState.SYNTHESIZING})


class Orchestrator:
    """Owns the pipeline components and drives one request at a time.

    Parameters
    ----------
    embedder:
        Used for both ingestion and query embedding.
    index:
        The vector index; owned exclusively by this orchestrator.
    llm:
        Chat model used for rewriting and synthesis.
    chunk_size, chunk_overlap, chunk_strategy:
        Chunking configuration, validated at construction.
    top_k:
        Segments retrieved per question.
    loader:
        Document extractor, ``(bytes, filename) -> list[Document]``.
    """

    def __init__(
        self,
        embedder: Embedder,
        index: VectorIndexBase,
        llm: BaseChatModel,
        *,
        chunk_size: int = 500,
        chunk_overlap: int = 50,
        chunk_strategy: str = "fixed",
        top_k: int = 4,
        loader: Callable[[bytes, str | None], list[Document]] = load_document,
    ) -> None:
        validate_chunking(chunk_size, chunk_overlap)
        validate_strategy(chunk_strategy)
        self.embedder = embedder
        self.index = index
        self.chunk_size = chunk_size
        self.chunk_overlap = chunk_overlap
        self.chunk_strategy = chunk_strategy
        self._loader = loader
        self.rewriter = HistoryRewriter(llm)
        self.retriever = Retriever(embedder, index, self.rewriter, k=top_k)
        self.synthesizer = AnswerSynthesizer(llm)
        self.state = RequestState.IDLE

    @classmethod
    def from_settings(cls, config: Settings | None = None) -> Orchestrator:
        """Build the default stack: HuggingFace embeddings, in-memory index, Ollama."""
        from pdf_chat.chain.llm import get_llm
        from pdf_chat.ingestion.embedder import Embedder, get_embedding_function
        from pdf_chat.retrieval.memory_store import InMemoryVectorIndex

        config = config or settings
        return cls(
            Embedder(
                get_embedding_function(config.embedding_model, normalize=config.normalize_embeddings),
                batch_size=config.embedding_batch_size,
            ),
            InMemoryVectorIndex(),
            get_llm(
                temperature=config.llm_temperature,
                base_url=config.ollama_base_url,
                model=config.llm_model_name,
            ),
            chunk_size=config.chunk_size,
            chunk_overlap=config.chunk_overlap,
            chunk_strategy=config.chunk_strategy,
            top_k=config.retrieval_k,
        )

    @property
    def busy(self) -> bool:
        return self.state in ACTIVE_STATES

    # -- public API -----------------------------------------------------------

    def handle(self, request: Request) -> Iterator[StreamEvent]:
        """Run *request*, yielding its events in order.

        Closing the returned generator abandons the request; the
        orchestrator is then free for the next one.
        """
        if self.busy:
            logger.warning("Rejecting %s: a %s request is in flight", type(request).__name__, self.state.value)
            yield StreamEvent.error("Another request is still in progress")
            yield StreamEvent.complete()
            return

        if isinstance(request, IngestRequest):
            self.state = RequestState.EMBEDDING
            steps = self._ingest(request)
        elif isinstance(request, QueryRequest):
            self.state = RequestState.RETRIEVING
            steps = self._query(request)
        else:
            yield StreamEvent.error(f"Unsupported request type: {type(request).__name__}")
            yield StreamEvent.complete()
            return

        try:
            yield StreamEvent.log("Received data!")
            yield from steps
            self.state = RequestState.COMPLETE
        except PdfChatError as exc:
            self.state = RequestState.ERRORED
            logger.error("%s failed: %s", type(request).__name__, exc)
            yield StreamEvent.error(_user_message(exc))
        except Exception as exc:
            self.state = RequestState.ERRORED
            logger.exception("%s failed unexpectedly", type(request).__name__)
            yield StreamEvent.error(str(exc) or type(exc).__name__)
        finally:
            steps.close()
            if self.busy:
                # Generator closed mid-request by the caller.
                logger.info("%s abandoned by caller", type(request).__name__)
                self.state = RequestState.ERRORED
        yield StreamEvent.complete()

    def ingest(self, document: bytes, filename: str | None = None) -> Iterator[StreamEvent]:
        """Shortcut for ``handle(IngestRequest(...))``."""
        return self.handle(IngestRequest(document=document, filename=filename))

    def query(self, messages: list) -> Iterator[StreamEvent]:
        """Shortcut for ``handle(QueryRequest(messages=...))``."""
        return self.handle(QueryRequest(messages=messages))

    # -- internals ------------------------------------------------------------

    def _ingest(self, request: IngestRequest) -> Iterator[StreamEvent]:
        pages = self._loader(request.document, request.filename)
        segments = chunk_documents(
            pages,
            chunk_size=self.chunk_size,
            chunk_overlap=self.chunk_overlap,
            strategy=self.chunk_strategy,
        )
        yield StreamEvent.log(f"Split document into {len(segments)} segment(s) from {len(pages)} page(s)")

        vectors = self.embedder.embed_many([s.text for s in segments])
        # Single all-or-nothing insertion after every vector is ready.
        self.index.add(list(zip(vectors, segments, strict=True)))
        logger.info("Indexed %d segment(s); index size is now %d", len(segments), len(self.index))
        yield StreamEvent.ready()

    def _query(self, request: QueryRequest) -> Iterator[StreamEvent]:
        if not request.messages:
            raise InvalidRequest("Query request contains no messages")
        if request.messages[-1].role != "human":
            raise InvalidRequest("The last message of a query must be the human question")

        question, history = request.question, request.history
        context = self.retriever.retrieve(question, history)

        self.state = RequestState.SYNTHESIZING
        for text in self.synthesizer.synthesize(context, history, question):
            yield StreamEvent.chunk(text)


def _user_message(exc: PdfChatError) -> str:
    if isinstance(exc, ModelUnavailable):
        return f"{exc.message}. {OLLAMA_HINT}"
    return exc.message
