from __future__ import annotations

from itertools import count

from PySide6.QtCore import QObject, QRunnable, QThreadPool, Signal, Slot
from loguru import logger

from core.services.interfaces import FetchCallback, FetchRequest, FetchResult, PhotoSource, run_fetch


class _FetchTask(QRunnable):
    """QRunnable for a background photo fetch.

    Emits `receiver.fetchFinished(ticket, result)` upon completion. Collaborator
    errors are already folded into the `FetchResult`.
    """

    def __init__(
        self, *, request: FetchRequest, source: PhotoSource, receiver: QObject, ticket: int
    ) -> None:
        super().__init__()
        self._request = request
        self._source = source
        self._receiver = receiver
        self._ticket = ticket

    def run(self) -> None:  # type: ignore[override]
        result = run_fetch(self._source, self._request)
        try:
            self._receiver.fetchFinished.emit(self._ticket, result)  # type: ignore[attr-defined]
        except RuntimeError as ex:  # pragma: no cover - receiver already destroyed
            logger.debug("Fetch {} finished after receiver was deleted: {}", self._request.token, ex)


class QtFetchRunner(QObject):
    """Dispatches photo fetches to a thread pool.

    Completion callbacks run on the thread that owns this object, through a
    queued signal, so controllers only ever mutate state on the UI thread.
    """

    fetchFinished = Signal(int, object)  # ticket, FetchResult

    def __init__(
        self,
        *,
        source: PhotoSource,
        pool: QThreadPool | None = None,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._source = source
        self._pool = pool or QThreadPool.globalInstance()
        self._tickets = count(1)
        self._callbacks: dict[int, FetchCallback] = {}
        self.fetchFinished.connect(self._on_finished)

    @property
    def pending_count(self) -> int:
        return len(self._callbacks)

    def submit(self, request: FetchRequest, on_done: FetchCallback) -> None:
        """Queue `request`; `on_done` fires later on this object's thread."""
        ticket = next(self._tickets)
        self._callbacks[ticket] = on_done
        task = _FetchTask(request=request, source=self._source, receiver=self, ticket=ticket)
        self._pool.start(task)

    def wait_for_done(self, msecs: int = -1) -> bool:
        """Block until the pool is idle; queued callbacks still need the event loop."""
        return self._pool.waitForDone(msecs)

    @Slot(int, object)
    def _on_finished(self, ticket: int, result: FetchResult) -> None:
        callback = self._callbacks.pop(ticket, None)
        if callback is None:
            logger.warning("No callback for fetch ticket {}", ticket)
            return
        callback(result)
