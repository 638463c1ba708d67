"""ViewModel wiring the catalog, a windowing controller and the facet filters."""

from __future__ import annotations

from collections.abc import Callable

from loguru import logger

from core.models import Category, FilterState, Photo, Taxonomy
from core.services.facet_stats import (
    CategoryFacet,
    active_filter_label,
    active_filters_count,
    all_subcategories_selected,
    build_facets,
    some_subcategories_selected,
    subcategory_photo_count,
)
from core.services.filter_service import FilterStateManager
from core.services.interfaces import CatalogSource, FetchRunner, LoadFailure
from core.services.match_engine import filter_photos
from core.services.pagination_view import page_numbers, pagination_summary, showing_summary
from core.services.windowing import (
    PAGE_SIZE,
    PAGE_SIZE_INFINITE,
    InfinitePhotos,
    PaginatedPhotos,
)

MODE_PAGINATED = "paginated"
MODE_INFINITE = "infinite"
CATALOG_FAILED_MESSAGE = "Failed to load categories"


class GalleryVM:
    """Gallery view-model.

    Owns the filter state and one windowing controller, and derives the
    filtered photo list from them. The filtered list is cached per
    (materialized list, filter snapshot) pair.
    """

    def __init__(
        self,
        catalog: CatalogSource,
        runner: FetchRunner,
        mode: str = MODE_PAGINATED,
        page_size: int | None = None,
        on_change: Callable[[], None] | None = None,
    ) -> None:
        """Create a GalleryVM.

        Args:
            catalog: Catalog collaborator with `load_categories()`.
            runner: Fetch runner used by the windowing controller.
            mode: MODE_PAGINATED or MODE_INFINITE.
            page_size: Page (or chunk) size; defaults per mode.
            on_change: Called after any state the view renders has changed.
        """
        if mode not in (MODE_PAGINATED, MODE_INFINITE):
            raise ValueError(f"Unknown gallery mode: {mode}")
        self.mode = mode
        self._catalog = catalog
        self._on_change = on_change
        self.taxonomy = Taxonomy()
        self.catalog_error: str | None = None
        self.filters = FilterStateManager(self.taxonomy, on_change=self._filters_changed)
        self.window: PaginatedPhotos | InfinitePhotos
        if mode == MODE_PAGINATED:
            self.window = PaginatedPhotos(
                runner,
                page_size=page_size or PAGE_SIZE,
                on_change=self._notify,
                on_error=self._window_failed,
            )
        else:
            self.window = InfinitePhotos(
                runner,
                chunk_size=page_size or PAGE_SIZE_INFINITE,
                on_change=self._notify,
                on_error=self._window_failed,
            )
        self._cache: tuple[list[Photo], FilterState, list[Photo]] | None = None

    # ----- loading -----

    def start(self) -> None:
        """Load the catalog and the first window of photos."""
        self.load_catalog()
        self.window.start()

    def load_catalog(self) -> bool:
        """(Re)load categories; on failure the previous taxonomy is kept."""
        try:
            categories = self._catalog.load_categories()
        except (OSError, ValueError) as ex:
            logger.error("{}: {}", CATALOG_FAILED_MESSAGE, ex)
            self.catalog_error = CATALOG_FAILED_MESSAGE
            self._notify()
            return False
        self.catalog_error = None
        self.taxonomy = Taxonomy(list(categories))
        self.filters.set_taxonomy(self.taxonomy)
        self._notify()
        return True

    @property
    def categories(self) -> list[Category]:
        return self.taxonomy.categories

    @property
    def photos(self) -> list[Photo]:
        """Materialized (unfiltered) photos."""
        return self.window.photos

    @property
    def is_loading(self) -> bool:
        return self.window.is_loading

    @property
    def error(self) -> str | None:
        return self.window.error or self.catalog_error

    # ----- filtering -----

    @property
    def filter_state(self) -> FilterState:
        return self.filters.state

    @property
    def filtered_photos(self) -> list[Photo]:
        photos = self.window.photos
        state = self.filters.state
        cache = self._cache
        if cache is not None and cache[0] is photos and cache[1] == state:
            return cache[2]
        result = filter_photos(photos, state)
        self._cache = (photos, state, result)
        return result

    def toggle_category(self, name: str) -> bool:
        return self.filters.toggle_category(name)

    def toggle_subcategory_facet(self, category: str, subcategory: str) -> bool:
        return self.filters.toggle_subcategory_facet(category, subcategory)

    def select_all_subcategory_facets(self, category: str) -> bool:
        return self.filters.select_all_subcategory_facets(category)

    def deselect_all_subcategory_facets(self, category: str) -> bool:
        return self.filters.deselect_all_subcategory_facets(category)

    def clear_all(self) -> bool:
        return self.filters.clear_all()

    # ----- facet helpers -----

    def subcategory_photo_count(self, category: str, subcategory: str) -> int:
        return subcategory_photo_count(self.window.photos, category, subcategory)

    def all_subcategories_selected(self, category: str) -> bool:
        return all_subcategories_selected(self.taxonomy, self.filters.state, category)

    def some_subcategories_selected(self, category: str) -> bool:
        return some_subcategories_selected(self.filters.state, category)

    def facets(self) -> list[CategoryFacet]:
        return build_facets(self.taxonomy.categories, self.window.photos, self.filters.state)

    @property
    def active_filter_label(self) -> str:
        return active_filter_label(self.filters.state)

    @property
    def active_filters_count(self) -> int:
        return active_filters_count(self.filters.state)

    @property
    def showing_summary(self) -> str:
        return showing_summary(len(self.filtered_photos), len(self.window.photos))

    # ----- windowing -----

    def go_to_page(self, page: int) -> bool:
        if not isinstance(self.window, PaginatedPhotos):
            logger.debug("go_to_page ignored in {} mode", self.mode)
            return False
        return self.window.go_to_page(page)

    def next_page(self) -> bool:
        if not isinstance(self.window, PaginatedPhotos):
            return False
        return self.window.next_page()

    def prev_page(self) -> bool:
        if not isinstance(self.window, PaginatedPhotos):
            return False
        return self.window.prev_page()

    def load_more(self) -> bool:
        if not isinstance(self.window, InfinitePhotos):
            logger.debug("load_more ignored in {} mode", self.mode)
            return False
        return self.window.load_more()

    def load_all(self) -> bool:
        if not isinstance(self.window, InfinitePhotos):
            return False
        return self.window.load_all()

    def refresh(self) -> None:
        self.window.refresh()

    @property
    def page_numbers(self) -> list[int | str]:
        if not isinstance(self.window, PaginatedPhotos):
            return []
        state = self.window.pagination
        return page_numbers(state.current_page, state.total_pages)

    @property
    def pagination_summary(self) -> str:
        if not isinstance(self.window, PaginatedPhotos):
            return f"{len(self.window.photos)} photos"
        return pagination_summary(self.window.pagination)

    # ----- internals -----

    def _filters_changed(self, state: FilterState) -> None:
        # Client-side filtering needs every photo, not just the fetched chunks
        if (
            state.active_categories
            and isinstance(self.window, InfinitePhotos)
            and not self.window.fully_loaded
        ):
            logger.info("Category filter active; loading all photos")
            self.window.load_all()
        self._notify()

    def _window_failed(self, failure: LoadFailure) -> None:
        logger.warning("Window load failed: {}", failure.message)
        self._notify()

    def _notify(self) -> None:
        if self._on_change is not None:
            self._on_change()
