"""Mapping of API-shaped photo and category payloads onto core models.

Payload tag lists may hold objects (`{"id": 1, "name": "Travel", "slug": ...}`)
or bare names; either way only the names are kept, since photos join to the
catalog by name.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import datetime
from typing import Any

from loguru import logger

from core.models import Category, Photo, Subcategory, slugify


def _tag_names(raw: Any) -> frozenset[str]:
    if not raw:
        return frozenset()
    names: set[str] = set()
    for item in raw:
        if isinstance(item, dict):
            name = item.get("name")
        else:
            name = item
        if name:
            names.add(str(name))
    return frozenset(names)


def _parse_date(value: Any) -> datetime | None:
    if not value:
        return None
    if isinstance(value, datetime):
        return value
    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        logger.warning("Invalid date_taken: {}", value)
        return None


def _first(payload: dict, *keys: str, default: Any = None) -> Any:
    for key in keys:
        if key in payload and payload[key] is not None:
            return payload[key]
    return default


def photo_from_api(payload: dict) -> Photo:
    """Build a `Photo` from an API record; missing tag lists become empty sets."""
    return Photo(
        id=str(payload["id"]),
        categories=_tag_names(payload.get("categories")),
        subcategories=_tag_names(payload.get("subcategories")),
        title=str(payload.get("title") or ""),
        filename=str(payload.get("filename") or ""),
        date_taken=_parse_date(_first(payload, "date_taken", "dateTaken")),
        location=payload.get("location"),
        display_order=int(_first(payload, "display_order", "displayOrder", default=0)),
    )


def subcategory_from_api(payload: dict, parent_id: int) -> Subcategory:
    name = str(payload["name"])
    return Subcategory(
        id=int(payload["id"]),
        name=name,
        parent_category_id=int(_first(payload, "categoryId", "category_id", default=parent_id)),
        slug=str(payload.get("slug") or slugify(name)),
        display_order=int(_first(payload, "displayOrder", "display_order", default=0)),
        is_active=bool(_first(payload, "isActive", "is_active", default=True)),
    )


def _ordered(items: Iterable[Any]) -> list[Any]:
    return sorted(items, key=lambda x: (x.display_order, x.id))


def category_from_api(payload: dict, include_inactive: bool = False) -> Category:
    """Build a `Category`; inactive subcategories are dropped unless requested."""
    cat_id = int(payload["id"])
    name = str(payload["name"])
    subs = [subcategory_from_api(s, cat_id) for s in payload.get("subcategories") or []]
    if not include_inactive:
        subs = [s for s in subs if s.is_active]
    return Category(
        id=cat_id,
        name=name,
        subcategories=tuple(_ordered(subs)),
        slug=str(payload.get("slug") or slugify(name)),
        display_order=int(_first(payload, "displayOrder", "display_order", default=0)),
        is_active=bool(_first(payload, "isActive", "is_active", default=True)),
    )


def categories_from_api(payloads: Sequence[dict], include_inactive: bool = False) -> list[Category]:
    """Map, filter and order a category list.

    Raises:
        ValueError: If two categories share a name.
    """
    cats = [category_from_api(p, include_inactive) for p in payloads]
    if not include_inactive:
        cats = [c for c in cats if c.is_active]
    seen: set[str] = set()
    for cat in cats:
        if cat.name in seen:
            raise ValueError(f"Duplicate category name in catalog: {cat.name!r}")
        seen.add(cat.name)
    return _ordered(cats)


def window(items: Sequence[Any], limit: int | None = None, offset: int | None = None) -> list[Any]:
    """Slice `items` the way the photo API does; None means unbounded."""
    start = max(0, offset or 0)
    if limit is None:
        return list(items[start:])
    return list(items[start : start + max(0, limit)])
