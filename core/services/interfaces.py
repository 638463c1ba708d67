"""Core service interfaces and shared data structures.

This module defines the collaborator contracts the windowing controllers and
view-models depend on, plus the request/result records that travel between a
controller and whichever runner executes its fetches.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Protocol

from loguru import logger

from core.models import Category, Photo


class PhotoSource(Protocol):
    """Photo collaborator. Omitting both arguments means the whole collection."""

    def fetch_photos(self, limit: int | None = None, offset: int | None = None) -> list[Photo]:
        """Return photos in display order."""
        ...


class CatalogSource(Protocol):
    """Catalog collaborator supplying the category tree."""

    def load_categories(self, include_inactive: bool = False) -> list[Category]:
        """Return categories with their subcategories, in display order."""
        ...


@dataclass(frozen=True)
class FetchRequest:
    """A single round trip to the photo collaborator.

    Attributes:
        kind: "page", "chunk", "all" or "count"; used for logging and routing.
        seq: Sequence number issued by the owning controller.
        limit: Page/chunk size, or None for the unpaged collection.
        offset: Start offset, or None for the unpaged collection.
    """

    kind: str
    seq: int
    limit: int | None = None
    offset: int | None = None

    @property
    def token(self) -> str:
        """Stable textual identity, e.g. "chunk|3|3|6"."""
        return f"{self.kind}|{self.seq}|{self.limit}|{self.offset}"


@dataclass
class FetchResult:
    """Outcome of a `FetchRequest`.

    Attributes:
        request: The request that produced this result.
        photos: Photos returned on success.
        error: The collaborator exception on failure.
    """

    request: FetchRequest
    photos: list[Photo] = field(default_factory=list)
    error: BaseException | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


FetchCallback = Callable[[FetchResult], None]


def run_fetch(source: PhotoSource, request: FetchRequest) -> FetchResult:
    """Execute `request` against `source`, capturing any collaborator failure."""
    try:
        if request.limit is None and request.offset is None:
            photos = list(source.fetch_photos())
        else:
            photos = list(source.fetch_photos(request.limit, request.offset))
    except Exception as ex:  # pylint: disable=broad-exception-caught
        logger.error("Fetch {} failed: {}", request.token, ex)
        return FetchResult(request=request, error=ex)
    return FetchResult(request=request, photos=photos)


class FetchRunner(Protocol):
    """Executes fetches and reports completion on the owning thread."""

    def submit(self, request: FetchRequest, on_done: FetchCallback) -> None:
        """Start `request`; `on_done` must be invoked exactly once."""
        ...


class InlineFetchRunner:
    """Runs each fetch synchronously inside `submit`."""

    def __init__(self, source: PhotoSource) -> None:
        self._source = source

    def submit(self, request: FetchRequest, on_done: FetchCallback) -> None:
        on_done(run_fetch(self._source, request))


@dataclass
class LoadFailure:
    """Generic "load failed" signal surfaced to the presentation layer."""

    message: str
    request: FetchRequest | None = None
    detail: Any = None
