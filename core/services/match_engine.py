"""Faceted match predicate over tagged photos.

Rules, in evaluation order:

1. No active category admits every photo.
2. A photo must belong to at least one active category.
3. No facet keys at all means the category match is sufficient.
4. Facet keys are grouped per category. Among the photo's active categories,
   those with no facet keys impose nothing; if none of them has keys the photo
   passes through.
5. Every active category of the photo that does have keys requires all of its
   selected subcategory names to be present in the photo's flat subcategory
   set. Two categories can therefore be satisfied by the same tag list.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable

from core.models import FacetKey, FilterState, Photo


def required_by_category(keys: Iterable[FacetKey]) -> dict[str, frozenset[str]]:
    """Partition facet keys into category name -> required subcategory names."""
    grouped: dict[str, set[str]] = defaultdict(set)
    for key in keys:
        grouped[key.category].add(key.subcategory)
    return {cat: frozenset(subs) for cat, subs in grouped.items()}


def matches(photo: Photo, state: FilterState) -> bool:
    """Return True when `photo` belongs in the result set for `state`."""
    if not state.active_categories:
        return True

    photo_active = state.active_categories.intersection(photo.categories or ())
    if not photo_active:
        return False

    if not state.active_subcategory_keys:
        return True

    required = required_by_category(state.active_subcategory_keys)
    constrained = [cat for cat in photo_active if cat in required]
    tags = photo.subcategories or ()
    # all() over an empty list is the pass-through case
    return all(required[cat].issubset(tags) for cat in constrained)


def filter_photos(photos: Iterable[Photo], state: FilterState) -> list[Photo]:
    """Stable filter of `photos`; input order is preserved."""
    if not state.active_categories:
        return list(photos)
    return [p for p in photos if matches(p, state)]
