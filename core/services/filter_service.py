"""Filter state management for category and subcategory facet selections.

The manager owns a single `FilterState` snapshot and replaces it on every
change, so callers can compare or cache snapshots freely.
"""

from __future__ import annotations

from collections.abc import Callable

from loguru import logger

from core.models import FacetKey, FilterState, Taxonomy


class FilterStateManager:
    """Toggle, bulk-select and clear facet selections.

    Unknown category or subcategory names are accepted and simply never match
    anything. Every mutator returns True when the state actually changed.
    """

    def __init__(
        self,
        taxonomy: Taxonomy | None = None,
        on_change: Callable[[FilterState], None] | None = None,
    ) -> None:
        """Create a manager.

        Args:
            taxonomy: Category tree used by `select_all_subcategory_facets`.
            on_change: Optional callback receiving each new snapshot.
        """
        self._taxonomy = taxonomy or Taxonomy()
        self._on_change = on_change
        self._state = FilterState()

    @property
    def state(self) -> FilterState:
        return self._state

    def set_taxonomy(self, taxonomy: Taxonomy) -> None:
        """Replace the category tree; current selections are kept as-is."""
        self._taxonomy = taxonomy

    def toggle_category(self, name: str) -> bool:
        """Add `name`, or remove it together with all of its facet keys."""
        cats = set(self._state.active_categories)
        keys = self._state.active_subcategory_keys
        if name in cats:
            cats.discard(name)
            keys = frozenset(k for k in keys if k.category != name)
        else:
            cats.add(name)
        return self._replace(FilterState(frozenset(cats), keys))

    def toggle_subcategory_facet(self, category: str, subcategory: str) -> bool:
        """Flip membership of (category, subcategory); the category may be inactive."""
        key = FacetKey(category, subcategory)
        keys = set(self._state.active_subcategory_keys)
        if key in keys:
            keys.discard(key)
        else:
            keys.add(key)
        return self._replace(FilterState(self._state.active_categories, frozenset(keys)))

    def select_all_subcategory_facets(self, category: str) -> bool:
        """Add a facet key for every subcategory the taxonomy lists under `category`."""
        cat = self._taxonomy.get(category)
        if cat is None:
            logger.debug("select all: unknown category {}", category)
            return False
        keys = self._state.active_subcategory_keys | {
            FacetKey(category, name) for name in cat.subcategory_names
        }
        return self._replace(FilterState(self._state.active_categories, keys))

    def deselect_all_subcategory_facets(self, category: str) -> bool:
        """Remove every facet key whose category component is `category`."""
        keys = frozenset(k for k in self._state.active_subcategory_keys if k.category != category)
        return self._replace(FilterState(self._state.active_categories, keys))

    def clear_all(self) -> bool:
        """Empty both selection sets."""
        return self._replace(FilterState())

    def _replace(self, new_state: FilterState) -> bool:
        if new_state == self._state:
            return False
        self._state = new_state
        logger.debug(
            "Filter state: categories={} facets={}",
            sorted(new_state.active_categories),
            sorted(new_state.active_subcategory_keys),
        )
        if self._on_change is not None:
            self._on_change(new_state)
        return True
