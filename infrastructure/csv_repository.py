"""CSV-backed photo collaborator.

Each row is one photo; multi-valued tag columns are separated by `|`. The
file is re-read on every fetch so a refresh sees edits made in between.
"""

from __future__ import annotations

from collections.abc import Iterator
import csv
from datetime import datetime
from pathlib import Path

from loguru import logger

from core.models import Photo
from infrastructure.api_payloads import window

CSV_HEADERS = [
    "Id",
    "Title",
    "Filename",
    "Categories",
    "Subcategories",
    "Date Taken",
    "Location",
    "Display Order",
]
REQUIRED_HEADERS = ["Id", "Categories", "Subcategories"]
TAG_SEPARATOR = "|"


def _parse_datetime(value: str) -> datetime | None:
    """Parse `%Y-%m-%d` or `%Y-%m-%d %H:%M:%S`; None if empty or invalid."""
    if not value:
        return None
    for fmt in ("%Y-%m-%d %H:%M:%S", "%Y-%m-%d"):
        try:
            return datetime.strptime(value.strip(), fmt)
        except ValueError:
            continue
    logger.warning("Invalid datetime: {}", value)
    return None


def _parse_tags(value: str | None) -> frozenset[str]:
    if not value:
        return frozenset()
    return frozenset(t.strip() for t in value.split(TAG_SEPARATOR) if t.strip())


class CsvPhotoRepository:
    """Serve `fetch_photos(limit, offset)` from a CSV file."""

    def __init__(self, csv_path: str | Path) -> None:
        self._path = Path(csv_path)

    def load(self) -> Iterator[Photo]:
        """Yield photos in file order, skipping malformed rows."""
        with self._path.open("r", encoding="utf-8", newline="") as f:
            reader = csv.DictReader(f)
            missing = [h for h in REQUIRED_HEADERS if h not in (reader.fieldnames or [])]
            if missing:
                raise ValueError(f"CSV missing required headers: {missing}")

            for row in reader:
                try:
                    photo_id = (row.get("Id") or "").strip()
                    if not photo_id:
                        raise ValueError("empty Id")
                    yield Photo(
                        id=photo_id,
                        categories=_parse_tags(row.get("Categories")),
                        subcategories=_parse_tags(row.get("Subcategories")),
                        title=row.get("Title", "") or "",
                        filename=row.get("Filename", "") or "",
                        date_taken=_parse_datetime(row.get("Date Taken", "") or ""),
                        location=row.get("Location") or None,
                        display_order=int(row.get("Display Order") or 0),
                    )
                except (ValueError, TypeError) as ex:
                    logger.error("CSV row error: {} | row={} ", ex, row)
                    continue

    def fetch_photos(self, limit: int | None = None, offset: int | None = None) -> list[Photo]:
        """Return a window of the collection; no arguments means all photos."""
        photos = list(self.load())
        result = window(photos, limit, offset)
        logger.debug(
            "CSV fetch limit={} offset={} -> {} of {}", limit, offset, len(result), len(photos)
        )
        return result


class MemoryPhotoRepository:
    """In-memory photo collaborator, e.g. for API payloads already in hand."""

    def __init__(self, photos: list[Photo] | None = None) -> None:
        self.photos: list[Photo] = list(photos or [])

    def fetch_photos(self, limit: int | None = None, offset: int | None = None) -> list[Photo]:
        return window(self.photos, limit, offset)
