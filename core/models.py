"""Core domain models for the photo taxonomy, filter state and windowing."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
import math
from typing import NamedTuple, Union


def slugify(name: str) -> str:
    """Lower-case, dash-separated slug used when the catalog omits one."""
    parts = "".join(ch.lower() if ch.isalnum() else " " for ch in name).split()
    return "-".join(parts)


@dataclass(frozen=True)
class Subcategory:
    """A value scoped under a category. Displayed qualified by its parent name."""

    id: int
    name: str
    parent_category_id: int
    slug: str = ""
    display_order: int = 0
    is_active: bool = True


@dataclass(frozen=True)
class Category:
    """Top-level filterable dimension. `name` is the join key used by photos."""

    id: int
    name: str
    subcategories: tuple[Subcategory, ...] = ()
    slug: str = ""
    display_order: int = 0
    is_active: bool = True

    @property
    def subcategory_names(self) -> list[str]:
        """Subcategory names in catalog order."""
        return [s.name for s in self.subcategories]


@dataclass(frozen=True)
class Photo:
    """A tagged photo as seen by the filter engine.

    `subcategories` is the flat union of subcategory names across every one of
    the photo's categories; which category a subcategory came from is not
    recorded.
    """

    id: str
    categories: frozenset[str] = frozenset()
    subcategories: frozenset[str] = frozenset()
    # Display metadata; not used for matching
    title: str = ""
    filename: str = ""
    date_taken: datetime | None = None
    location: str | None = None
    display_order: int = 0


class FacetKey(NamedTuple):
    """Identity of one sub-facet selection: (category name, subcategory name)."""

    category: str
    subcategory: str


@dataclass(frozen=True)
class FilterState:
    """Immutable snapshot of the active selections."""

    active_categories: frozenset[str] = frozenset()
    active_subcategory_keys: frozenset[FacetKey] = frozenset()


@dataclass(frozen=True)
class PaginationState:
    """Bookkeeping for discrete pagination."""

    current_page: int = 1
    total_pages: int = 1
    total_photos: int = 0
    has_next_page: bool = False
    has_prev_page: bool = False

    @classmethod
    def compute(cls, current_page: int, total_photos: int, page_size: int) -> PaginationState:
        """Derive a consistent state from the page number and total count."""
        total_pages = max(1, math.ceil(total_photos / page_size))
        return cls(
            current_page=current_page,
            total_pages=total_pages,
            total_photos=total_photos,
            has_next_page=current_page < total_pages,
            has_prev_page=current_page > 1,
        )


# Infinite accumulation phases. Exhausted is Paging(has_more=False).
@dataclass(frozen=True)
class NotStarted:
    """No chunk has been fetched yet."""


@dataclass(frozen=True)
class Paging:
    """Chunks fetched so far cover `offset` items."""

    offset: int
    has_more: bool


@dataclass(frozen=True)
class FullyLoaded:
    """The entire collection was fetched unpaged. Terminal."""

    count: int


WindowPhase = Union[NotStarted, Paging, FullyLoaded]


@dataclass(frozen=True)
class InfiniteLoadState:
    """Flat view of a `WindowPhase` for presentation bindings."""

    offset: int = 0
    has_more: bool = True
    fully_loaded: bool = False

    @classmethod
    def from_phase(cls, phase: WindowPhase) -> InfiniteLoadState:
        if isinstance(phase, Paging):
            return cls(offset=phase.offset, has_more=phase.has_more, fully_loaded=False)
        if isinstance(phase, FullyLoaded):
            return cls(offset=phase.count, has_more=False, fully_loaded=True)
        return cls()


@dataclass
class Taxonomy:
    """Ordered category tree with name lookup."""

    categories: list[Category] = field(default_factory=list)

    def get(self, name: str) -> Category | None:
        """Return the category called `name`, or None when unknown."""
        for category in self.categories:
            if category.name == name:
                return category
        return None

    @property
    def names(self) -> list[str]:
        return [c.name for c in self.categories]
