from __future__ import annotations

from collections.abc import Callable

import pytest

from core.models import Category, Photo, Subcategory, Taxonomy
from core.services.interfaces import FetchCallback, FetchRequest, run_fetch


def _photo(photo_id: str, categories: list[str], subcategories: list[str]) -> Photo:
    return Photo(
        id=photo_id,
        categories=frozenset(categories),
        subcategories=frozenset(subcategories),
        title=photo_id,
    )


class FakeSource:
    """Photo collaborator recording its calls; raises `error` when set."""

    def __init__(self, photos: list[Photo]) -> None:
        self.photos = list(photos)
        self.calls: list[tuple[int | None, int | None]] = []
        self.error: Exception | None = None

    def fetch_photos(self, limit: int | None = None, offset: int | None = None) -> list[Photo]:
        self.calls.append((limit, offset))
        if self.error is not None:
            raise self.error
        start = offset or 0
        if limit is None:
            return self.photos[start:]
        return self.photos[start : start + limit]


class ManualRunner:
    """Holds submitted fetches until the test delivers them."""

    def __init__(self, source: FakeSource) -> None:
        self.source = source
        self.pending: list[tuple[FetchRequest, FetchCallback]] = []

    def submit(self, request: FetchRequest, on_done: FetchCallback) -> None:
        self.pending.append((request, on_done))

    def deliver(self, index: int = 0) -> FetchRequest:
        request, on_done = self.pending.pop(index)
        on_done(run_fetch(self.source, request))
        return request

    def deliver_all(self) -> None:
        while self.pending:
            self.deliver()


@pytest.fixture
def make_photo() -> Callable[[str, list[str], list[str]], Photo]:
    return _photo


@pytest.fixture
def sample_photos() -> list[Photo]:
    return [
        _photo("1", ["Travel"], ["Beach", "Mountain"]),
        _photo("2", ["Travel"], ["Beach"]),
        _photo("3", ["Travel"], ["Mountain"]),
        _photo("4", ["Travel", "Nature"], ["Beach", "Forest"]),
        _photo("5", ["Nature"], ["Forest"]),
    ]


@pytest.fixture
def taxonomy() -> Taxonomy:
    return Taxonomy(
        [
            Category(
                id=1,
                name="Travel",
                subcategories=(
                    Subcategory(id=11, name="Beach", parent_category_id=1),
                    Subcategory(id=12, name="Mountain", parent_category_id=1),
                ),
            ),
            Category(
                id=2,
                name="Nature",
                subcategories=(Subcategory(id=21, name="Forest", parent_category_id=2),),
            ),
            Category(id=3, name="Empty"),
        ]
    )


@pytest.fixture
def numbered_photos() -> Callable[[int], list[Photo]]:
    def _make(n: int) -> list[Photo]:
        return [_photo(str(i), ["Travel"], []) for i in range(1, n + 1)]

    return _make


@pytest.fixture
def fake_source_factory() -> Callable[[list[Photo]], FakeSource]:
    return FakeSource


@pytest.fixture
def manual_runner_factory() -> Callable[[FakeSource], ManualRunner]:
    return ManualRunner

