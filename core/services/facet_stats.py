"""Read-only aggregates backing facet controls.

Counts are taken over the full materialized collection and ignore the current
selection; the tri-state flags read the selection only. Everything here is
recomputed from scratch on each call.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from core.models import Category, FacetKey, FilterState, Photo, Taxonomy

TRI_ALL = "all"
TRI_SOME = "some"
TRI_NONE = "none"


def subcategory_photo_count(photos: Iterable[Photo], category: str, subcategory: str) -> int:
    """Number of photos tagged with both `category` and `subcategory`."""
    return sum(
        1
        for p in photos
        if category in (p.categories or ()) and subcategory in (p.subcategories or ())
    )


def all_subcategories_selected(taxonomy: Taxonomy, state: FilterState, category: str) -> bool:
    """True iff every subcategory listed under `category` has an active facet key.

    A category without subcategories is vacuously fully selected. An unknown
    category is never selected.
    """
    cat = taxonomy.get(category)
    if cat is None:
        return False
    keys = state.active_subcategory_keys
    return all(FacetKey(category, name) in keys for name in cat.subcategory_names)


def some_subcategories_selected(state: FilterState, category: str) -> bool:
    """True iff at least one facet key for `category` is active."""
    return any(k.category == category for k in state.active_subcategory_keys)


def tri_state(taxonomy: Taxonomy, state: FilterState, category: str) -> str:
    """Collapse the two flags into TRI_ALL / TRI_SOME / TRI_NONE."""
    if not some_subcategories_selected(state, category):
        return TRI_NONE
    if all_subcategories_selected(taxonomy, state, category):
        return TRI_ALL
    return TRI_SOME


def active_filters_count(state: FilterState) -> int:
    return len(state.active_categories) + len(state.active_subcategory_keys)


def active_filter_label(state: FilterState) -> str:
    """Short human label for the current selection, e.g. "Travel (2 sub)"."""
    cat_count = len(state.active_categories)
    sub_count = len(state.active_subcategory_keys)
    if cat_count == 0:
        return "All Photos"
    if cat_count == 1:
        (name,) = state.active_categories
        return f"{name} ({sub_count} sub)" if sub_count else name
    label = f"{cat_count} Categories"
    if sub_count:
        label += f", {sub_count} sub"
    return label


@dataclass
class SubcategoryFacet:
    """One subcategory row in the facet panel."""

    name: str
    photo_count: int
    selected: bool


@dataclass
class CategoryFacet:
    """One category row in the facet panel with its subcategory rows."""

    name: str
    active: bool
    check_state: str
    subcategories: list[SubcategoryFacet] = field(default_factory=list)


def build_facets(
    categories: Sequence[Category], photos: Sequence[Photo], state: FilterState
) -> list[CategoryFacet]:
    """Build facet rows for every category in catalog order."""
    taxonomy = Taxonomy(list(categories))
    rows: list[CategoryFacet] = []
    for cat in categories:
        subs = [
            SubcategoryFacet(
                name=sub.name,
                photo_count=subcategory_photo_count(photos, cat.name, sub.name),
                selected=FacetKey(cat.name, sub.name) in state.active_subcategory_keys,
            )
            for sub in cat.subcategories
        ]
        rows.append(
            CategoryFacet(
                name=cat.name,
                active=cat.name in state.active_categories,
                check_state=tri_state(taxonomy, state, cat.name),
                subcategories=subs,
            )
        )
    return rows
