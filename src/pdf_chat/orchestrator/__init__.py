"""
Orchestrator: request handling, event protocol and the background worker.

Public API
----------
- :class:`Orchestrator`: runs one request as a stream of events.
- :class:`OrchestratorWorker`: runs the orchestrator on a background thread.
- :class:`StreamEvent`, :class:`IngestRequest`, :class:`QueryRequest`: protocol.
"""

from pdf_chat.orchestrator.events import IngestRequest, QueryRequest, StreamEvent
from pdf_chat.orchestrator.orchestrator import Orchestrator, RequestState
from pdf_chat.orchestrator.worker import EventChannel, OrchestratorWorker

__all__ = [
    "EventChannel",
    "IngestRequest",
    "Orchestrator",
    "OrchestratorWorker",
    "QueryRequest",
    "RequestState",
    "StreamEvent",
]
