"""JSON-backed catalog collaborator supplying the category tree."""

from __future__ import annotations

import json
from pathlib import Path

from loguru import logger

from core.models import Category
from infrastructure.api_payloads import categories_from_api


class JsonCatalogRepository:
    """Read categories from a JSON file.

    The file holds either a list of category objects or an API envelope of the
    form `{"data": [...]}`.
    """

    def __init__(self, json_path: str | Path) -> None:
        self._path = Path(json_path)

    def load_categories(self, include_inactive: bool = False) -> list[Category]:
        """Return categories ordered by display order, active ones only by default.

        Raises:
            FileNotFoundError: If the catalog file is missing.
            ValueError: If the JSON is malformed or names collide.
        """
        with self._path.open("r", encoding="utf-8") as f:
            try:
                raw = json.load(f)
            except json.JSONDecodeError as ex:
                raise ValueError(f"Invalid catalog JSON {self._path}: {ex}") from ex

        if isinstance(raw, dict):
            raw = raw.get("data") or []
        if not isinstance(raw, list):
            raise ValueError(f"Catalog must be a list of categories: {self._path}")

        try:
            categories = categories_from_api(raw, include_inactive=include_inactive)
        except (KeyError, TypeError) as ex:
            raise ValueError(f"Malformed category entry in {self._path}: {ex}") from ex
        logger.info("Catalog loaded: {} categories from {}", len(categories), self._path)
        return categories
