"""Background worker: runs the orchestrator off the caller's thread.

The interactive surface and the worker share nothing but queues: a
request goes in through :meth:`OrchestratorWorker.submit`, and its events
come back through the :class:`EventChannel` returned for that request.

Usage::

    with OrchestratorWorker(Orchestrator.from_settings()) as worker:
        for event in worker.submit(IngestRequest(document=pdf_bytes)):
            print(event.type)
        for event in worker.submit(QueryRequest(messages=[{"role": "human", "content": "Hi"}])):
            if event.type == "chunk":
                print(event.payload, end="")
"""

from __future__ import annotations

import logging
import queue
import threading
from collections.abc import Iterator
from typing import TYPE_CHECKING

from pdf_chat.orchestrator.events import Request, StreamEvent

if TYPE_CHECKING:
    from pdf_chat.orchestrator.orchestrator import Orchestrator

logger = logging.getLogger(__name__)


class EventChannel:
    """One-request event stream from the worker to a caller.

    Iterating yields events in emission order and stops after the terminal
    ``complete`` event.  :meth:`close` abandons the request: events emitted
    afterwards are discarded and iteration ends.
    """

    def __init__(self, poll_interval: float = 0.1) -> None:
        self._queue: queue.Queue[StreamEvent] = queue.Queue()
        self._closed = threading.Event()
        self.poll_interval = poll_interval

    @property
    def closed(self) -> bool:
        return self._closed.is_set()

    def close(self) -> None:
        self._closed.set()

    def put(self, event: StreamEvent) -> bool:
        """Deliver *event*; return ``False`` (and drop it) once closed."""
        if self.closed:
            return False
        self._queue.put(event)
        return True

    def get(self, timeout: float | None = None) -> StreamEvent:
        """Return the next event; raise ``queue.Empty`` after *timeout* seconds."""
        return self._queue.get(timeout=timeout)

    def __iter__(self) -> Iterator[StreamEvent]:
        while not self.closed:
            try:
                event = self._queue.get(timeout=self.poll_interval)
            except queue.Empty:
                continue
            yield event
            if event.is_terminal:
                return


class OrchestratorWorker:
    """Owns a daemon thread that processes requests one at a time, in order.

    Requests submitted while another is running wait in a FIFO queue, so
    all events of request N (including its ``complete``) are emitted before
    any event of request N+1.
    """

    def __init__(self, orchestrator: Orchestrator, *, name: str = "pdf-chat-worker") -> None:
        self._orchestrator = orchestrator
        self._name = name
        self._requests: queue.Queue[tuple[Request, EventChannel] | None] = queue.Queue()
        self._thread: threading.Thread | None = None

    @property
    def orchestrator(self) -> Orchestrator:
        return self._orchestrator

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> OrchestratorWorker:
        if not self.running:
            self._thread = threading.Thread(target=self._run, name=self._name, daemon=True)
            self._thread.start()
            logger.info("Worker %s started", self._name)
        return self

    def stop(self, timeout: float | None = None) -> None:
        """Finish queued requests, then stop the thread."""
        if self._thread is None:
            return
        self._requests.put(None)
        self._thread.join(timeout)
        if self._thread.is_alive():
            logger.warning("Worker %s did not stop within %ss", self._name, timeout)
        else:
            logger.info("Worker %s stopped", self._name)
            self._thread = None

    def submit(self, request: Request) -> EventChannel:
        """Queue *request* and return the channel its events arrive on."""
        if not self.running:
            raise RuntimeError("Worker is not running; call start() first")
        channel = EventChannel()
        self._requests.put((request, channel))
        return channel

    def __enter__(self) -> OrchestratorWorker:
        return self.start()

    def __exit__(self, *exc_info: object) -> None:
        self.stop()

    # -- internals ------------------------------------------------------------

    def _run(self) -> None:
        while True:
            item = self._requests.get()
            if item is None:
                break
            request, channel = item
            self._process(request, channel)

    def _process(self, request: Request, channel: EventChannel) -> None:
        if channel.closed:
            logger.info("Skipping %s: channel closed before start", type(request).__name__)
            return

        events: Iterator[StreamEvent] = iter(())
        try:
            events = self._orchestrator.handle(request)
            for event in events:
                if not channel.put(event):
                    logger.info("Channel closed; abandoning %s", type(request).__name__)
                    break
        except Exception as exc:
            # Keep the worker alive and still honour the terminal-event contract.
            logger.exception("Worker failed while processing %s", type(request).__name__)
            channel.put(StreamEvent.error(str(exc) or type(exc).__name__))
            channel.put(StreamEvent.complete())
        finally:
            close = getattr(events, "close", None)
            if close is not None:
                close()
