"""Windowing controllers deciding how much of the photo collection is materialized.

Two interchangeable strategies share one fetch path:

- `PaginatedPhotos`: fixed-size, randomly addressable pages with a known total.
- `InfinitePhotos`: a growing list fed by sequential chunks, plus a terminal
  "load everything" transition used before client-side filtering.

Controllers never block. Each fetch goes through a `FetchRunner`, and state is
only touched in the completion callback. Every request carries a sequence
number; a response that is not for the latest request is dropped.
"""

from __future__ import annotations

from collections.abc import Callable

from loguru import logger

from core.models import (
    FullyLoaded,
    InfiniteLoadState,
    NotStarted,
    PaginationState,
    Paging,
    Photo,
    WindowPhase,
)
from core.services.interfaces import FetchRequest, FetchResult, FetchRunner, LoadFailure

PAGE_SIZE = 45
PAGE_SIZE_INFINITE = 3
LOAD_FAILED_MESSAGE = "Failed to load photos"


class _WindowController:
    """Request bookkeeping shared by both strategies."""

    def __init__(
        self,
        runner: FetchRunner,
        on_change: Callable[[], None] | None = None,
        on_error: Callable[[LoadFailure], None] | None = None,
    ) -> None:
        self._runner = runner
        self._on_change = on_change
        self._on_error = on_error
        self._seq = 0
        self._pending: FetchRequest | None = None
        self.photos: list[Photo] = []
        self.error: str | None = None
        self.failure: LoadFailure | None = None

    @property
    def is_loading(self) -> bool:
        """True while a request is in flight."""
        return self._pending is not None

    def _issue(
        self,
        kind: str,
        limit: int | None,
        offset: int | None,
        handler: Callable[[FetchResult], None],
    ) -> None:
        self._seq += 1
        request = FetchRequest(kind=kind, seq=self._seq, limit=limit, offset=offset)
        if self._pending is not None:
            logger.debug("Request {} supersedes {}", request.token, self._pending.token)
        self._pending = request
        self.error = None
        self.failure = None
        logger.debug("Fetch issued: {}", request.token)
        self._runner.submit(request, lambda result: self._complete(result, handler))

    def _complete(self, result: FetchResult, handler: Callable[[FetchResult], None]) -> None:
        pending = self._pending
        if pending is None or result.request.seq != pending.seq:
            logger.debug("Discarding stale response {}", result.request.token)
            return
        self._pending = None
        if not result.ok:
            self._fail(result)
            return
        handler(result)

    def _fail(self, result: FetchResult) -> None:
        logger.error("{}: {} ({})", LOAD_FAILED_MESSAGE, result.error, result.request.token)
        self.error = LOAD_FAILED_MESSAGE
        self.failure = LoadFailure(
            message=LOAD_FAILED_MESSAGE, request=result.request, detail=result.error
        )
        if self._on_error is not None:
            self._on_error(self.failure)

    def _notify(self) -> None:
        if self._on_change is not None:
            self._on_change()


class PaginatedPhotos(_WindowController):
    """Discrete pagination over the photo collaborator.

    The total count comes from a separate unpaged fetch. `refresh()` holds the
    new count aside and only swaps it in together with the page it fetched, so
    a failure in either round trip leaves the previous page, count and
    `PaginationState` untouched.
    """

    def __init__(
        self,
        runner: FetchRunner,
        page_size: int = PAGE_SIZE,
        on_change: Callable[[], None] | None = None,
        on_error: Callable[[LoadFailure], None] | None = None,
    ) -> None:
        super().__init__(runner, on_change=on_change, on_error=on_error)
        if page_size < 1:
            raise ValueError(f"page_size must be >= 1, got {page_size}")
        self.page_size = page_size
        self.pagination = PaginationState()

    def start(self) -> None:
        """Initial load: total count, then page 1."""
        self.refresh()

    def go_to_page(self, page: int) -> bool:
        """Fetch `page`; returns False when ignored (out of range or busy)."""
        if self.is_loading:
            logger.debug("go_to_page({}) ignored: request in flight", page)
            return False
        if page < 1 or page > self.pagination.total_pages:
            logger.debug("go_to_page({}) ignored: {} pages", page, self.pagination.total_pages)
            return False
        self._load_page(page, self.pagination.total_photos)
        return True

    def next_page(self) -> bool:
        if not self.pagination.has_next_page:
            return False
        return self.go_to_page(self.pagination.current_page + 1)

    def prev_page(self) -> bool:
        if not self.pagination.has_prev_page:
            return False
        return self.go_to_page(self.pagination.current_page - 1)

    def refresh(self) -> None:
        """Re-count the collection, then reload the current page."""
        self._issue("count", None, None, self._on_count)

    def _on_count(self, result: FetchResult) -> None:
        total = len(result.photos)
        new_state = PaginationState.compute(self.pagination.current_page, total, self.page_size)
        # Keep the page in range when the collection shrank
        page = min(self.pagination.current_page, new_state.total_pages)
        logger.info("Photo count: {} ({} pages)", total, new_state.total_pages)
        self._load_page(page, total)

    def _load_page(self, page: int, total: int) -> None:
        def _apply(result: FetchResult) -> None:
            self.photos = list(result.photos)
            self.pagination = PaginationState.compute(page, total, self.page_size)
            logger.info(
                "Loaded page {}/{} ({} photos)",
                page,
                self.pagination.total_pages,
                len(self.photos),
            )
            self._notify()

        self._issue("page", self.page_size, (page - 1) * self.page_size, _apply)


class InfinitePhotos(_WindowController):
    """Infinite accumulation over the photo collaborator.

    `has_more` is a heuristic: a chunk shorter than requested ends the
    sequence, but a full chunk that happened to be the last one does not, so
    one extra empty fetch may be needed to discover the end.
    """

    def __init__(
        self,
        runner: FetchRunner,
        chunk_size: int = PAGE_SIZE_INFINITE,
        on_change: Callable[[], None] | None = None,
        on_error: Callable[[LoadFailure], None] | None = None,
    ) -> None:
        super().__init__(runner, on_change=on_change, on_error=on_error)
        if chunk_size < 1:
            raise ValueError(f"chunk_size must be >= 1, got {chunk_size}")
        self.chunk_size = chunk_size
        self.phase: WindowPhase = NotStarted()

    @property
    def state(self) -> InfiniteLoadState:
        return InfiniteLoadState.from_phase(self.phase)

    @property
    def has_more(self) -> bool:
        return self.state.has_more

    @property
    def fully_loaded(self) -> bool:
        return isinstance(self.phase, FullyLoaded)

    def start(self) -> bool:
        """Initial load: the first chunk at offset 0."""
        return self.load_more()

    def load_more(self) -> bool:
        """Append the next chunk; returns False when ignored."""
        if self.is_loading:
            logger.debug("load_more ignored: request in flight")
            return False
        phase = self.phase
        if isinstance(phase, FullyLoaded):
            return False
        if isinstance(phase, Paging):
            if not phase.has_more:
                return False
            offset = phase.offset
        else:
            offset = 0
        self._issue("chunk", self.chunk_size, offset, self._on_chunk)
        return True

    def load_all(self) -> bool:
        """Terminal transition to the full, unpaged collection.

        When chunking already reached the end nothing is fetched; the phase is
        simply marked fully loaded.
        """
        phase = self.phase
        if isinstance(phase, FullyLoaded):
            return False
        if self._pending is not None and self._pending.kind == "all":
            return False
        if isinstance(phase, Paging) and not phase.has_more and not self.is_loading:
            self.phase = FullyLoaded(count=len(self.photos))
            self._notify()
            return False
        self._issue("all", None, None, self._on_all)
        return True

    def refresh(self) -> None:
        """Refetch the whole collection and make it the current state."""
        self._issue("all", None, None, self._on_all)

    def _on_chunk(self, result: FetchResult) -> None:
        request = result.request
        received = len(result.photos)
        self.photos = self.photos + list(result.photos)
        self.phase = Paging(
            offset=(request.offset or 0) + received,
            has_more=received == request.limit,
        )
        logger.info(
            "Loaded chunk at offset {}: {} photos (has_more={})",
            request.offset,
            received,
            self.phase.has_more,
        )
        self._notify()

    def _on_all(self, result: FetchResult) -> None:
        self.photos = list(result.photos)
        self.phase = FullyLoaded(count=len(self.photos))
        logger.info("Loaded all photos: {}", len(self.photos))
        self._notify()
