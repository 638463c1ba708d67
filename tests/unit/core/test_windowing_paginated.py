from __future__ import annotations

import pytest

from core.models import PaginationState
from core.services.interfaces import InlineFetchRunner, LoadFailure
from core.services.windowing import LOAD_FAILED_MESSAGE, PAGE_SIZE, PaginatedPhotos


@pytest.fixture
def source(fake_source_factory, numbered_photos):
    return fake_source_factory(numbered_photos(23))


@pytest.fixture
def pager(source) -> PaginatedPhotos:
    ctrl = PaginatedPhotos(InlineFetchRunner(source), page_size=10)
    ctrl.start()
    return ctrl


def _ids(ctrl: PaginatedPhotos) -> list[str]:
    return [p.id for p in ctrl.photos]


def test_default_page_size() -> None:
    assert PAGE_SIZE == 45


def test_pagination_state_invariants() -> None:
    assert PaginationState.compute(1, 0, 45) == PaginationState(1, 1, 0, False, False)
    assert PaginationState.compute(2, 91, 45) == PaginationState(2, 3, 91, True, True)
    assert PaginationState.compute(3, 90, 45).has_next_page is False


def test_start_counts_then_loads_first_page(pager: PaginatedPhotos, source) -> None:
    assert source.calls == [(None, None), (10, 0)]
    assert _ids(pager) == [str(i) for i in range(1, 11)]
    assert pager.pagination == PaginationState(1, 3, 23, True, False)


def test_go_to_page_fetches_offset(pager: PaginatedPhotos, source) -> None:
    assert pager.go_to_page(3) is True
    assert source.calls[-1] == (10, 20)
    assert _ids(pager) == ["21", "22", "23"]
    assert pager.pagination == PaginationState(3, 3, 23, False, True)


def test_out_of_range_pages_are_noops(pager: PaginatedPhotos, source) -> None:
    calls = len(source.calls)
    before = (pager.photos, pager.pagination)
    assert pager.go_to_page(0) is False
    assert pager.go_to_page(pager.pagination.total_pages + 1) is False
    assert len(source.calls) == calls
    assert (pager.photos, pager.pagination) == before


def test_next_and_prev_are_guarded(pager: PaginatedPhotos) -> None:
    assert pager.prev_page() is False
    assert pager.next_page() is True
    assert pager.pagination.current_page == 2
    assert pager.next_page() is True
    assert pager.next_page() is False
    assert pager.pagination.current_page == 3
    assert pager.prev_page() is True
    assert pager.pagination.current_page == 2


def test_refresh_picks_up_new_total(pager: PaginatedPhotos, source, numbered_photos) -> None:
    pager.go_to_page(2)
    source.photos = numbered_photos(35)
    pager.refresh()
    assert pager.pagination == PaginationState(2, 4, 35, True, True)
    assert _ids(pager)[0] == "11"


def test_refresh_clamps_page_when_collection_shrinks(pager, source, numbered_photos) -> None:
    pager.go_to_page(3)
    source.photos = numbered_photos(12)
    pager.refresh()
    assert pager.pagination.current_page == 2
    assert pager.pagination.total_pages == 2
    assert _ids(pager) == ["11", "12"]


def test_page_fetch_failure_leaves_state_unchanged(pager: PaginatedPhotos, source) -> None:
    before = (list(pager.photos), pager.pagination)
    source.error = RuntimeError("network down")
    assert pager.go_to_page(2) is True
    assert (pager.photos, pager.pagination) == before
    assert pager.error == LOAD_FAILED_MESSAGE
    assert pager.is_loading is False


def test_failure_is_reported_and_cleared_by_next_success(source) -> None:
    failures: list[LoadFailure] = []
    ctrl = PaginatedPhotos(InlineFetchRunner(source), page_size=10, on_error=failures.append)
    source.error = RuntimeError("down")
    ctrl.start()
    assert len(failures) == 1
    assert failures[0].request is not None and failures[0].request.kind == "count"
    assert ctrl.photos == []
    source.error = None
    ctrl.refresh()
    assert ctrl.error is None
    assert ctrl.pagination.total_photos == 23


def test_refresh_snapshot_survives_page_failure(
    source, manual_runner_factory, numbered_photos
) -> None:
    runner = manual_runner_factory(source)
    ctrl = PaginatedPhotos(runner, page_size=10)
    ctrl.start()
    runner.deliver_all()
    before = (list(ctrl.photos), ctrl.pagination)

    source.photos = numbered_photos(50)
    ctrl.refresh()
    runner.deliver()  # count succeeds with the new total
    source.error = RuntimeError("page fetch failed")
    runner.deliver()

    assert (ctrl.photos, ctrl.pagination) == before
    assert ctrl.pagination.total_photos == 23
    assert ctrl.error == LOAD_FAILED_MESSAGE


def test_go_to_page_ignored_while_in_flight(source, manual_runner_factory) -> None:
    runner = manual_runner_factory(source)
    ctrl = PaginatedPhotos(runner, page_size=10)
    ctrl.start()
    runner.deliver_all()

    assert ctrl.go_to_page(2) is True
    assert ctrl.is_loading
    assert ctrl.go_to_page(3) is False
    assert len(runner.pending) == 1
    runner.deliver()
    assert ctrl.pagination.current_page == 2


def test_refresh_supersedes_in_flight_page(source, manual_runner_factory) -> None:
    runner = manual_runner_factory(source)
    ctrl = PaginatedPhotos(runner, page_size=10)
    ctrl.start()
    runner.deliver_all()

    ctrl.go_to_page(3)
    ctrl.refresh()
    runner.deliver(1)  # count for the refresh
    runner.deliver(0)  # stale page 3 response arrives late
    assert ctrl.pagination.current_page == 1
    runner.deliver()  # refreshed page 1
    assert ctrl.pagination.current_page == 1
    assert [p.id for p in ctrl.photos][0] == "1"
    assert not ctrl.is_loading


def test_invalid_page_size() -> None:
    with pytest.raises(ValueError):
        PaginatedPhotos(InlineFetchRunner(None), page_size=0)  # type: ignore[arg-type]
