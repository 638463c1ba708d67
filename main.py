from __future__ import annotations

from pathlib import Path
import sys

from loguru import logger

from app.viewmodels.gallery_vm import MODE_PAGINATED, GalleryVM
from core.services.interfaces import InlineFetchRunner
from core.services.windowing import PAGE_SIZE, PAGE_SIZE_INFINITE
from infrastructure.catalog_repository import JsonCatalogRepository
from infrastructure.csv_repository import CsvPhotoRepository
from infrastructure.logging import init_logging
from infrastructure.settings import JsonSettings

BASE_DIR = Path(__file__).parent


def _apply_filter_args(vm: GalleryVM, args: list[str]) -> None:
    # "Travel" selects a category, "Travel:Beach" selects a subcategory under it
    for arg in args:
        category, sep, subcategory = arg.partition(":")
        if category not in vm.filter_state.active_categories:
            vm.toggle_category(category)
        if sep and subcategory:
            vm.toggle_subcategory_facet(category, subcategory)


def main(argv: list[str] | None = None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    settings = JsonSettings(BASE_DIR / "settings.json")
    init_logging(settings.get_path("logging.dir"), level=str(settings.get("logging.level", "INFO")))

    mode = str(settings.get("gallery.mode", MODE_PAGINATED))
    if mode == MODE_PAGINATED:
        page_size = settings.get_int("paging.page_size", PAGE_SIZE)
    else:
        page_size = settings.get_int("paging.infinite_chunk_size", PAGE_SIZE_INFINITE)

    photos_csv = settings.get_path("data.photos_csv", "samples/photos.csv")
    catalog_json = settings.get_path("data.catalog_json", "samples/categories.json")
    repo = CsvPhotoRepository(photos_csv)
    catalog = JsonCatalogRepository(catalog_json)

    vm = GalleryVM(catalog, InlineFetchRunner(repo), mode=mode, page_size=page_size)
    vm.start()
    if vm.error:
        logger.error("Startup failed: {}", vm.error)
        return 1

    _apply_filter_args(vm, args)

    logger.info("Filter: {} -> {}", vm.active_filter_label, vm.showing_summary)
    print(f"{vm.active_filter_label}: {vm.showing_summary} | {vm.pagination_summary}")
    for photo in vm.filtered_photos:
        print(f"{photo.id}\t{photo.title}\t{', '.join(sorted(photo.categories))}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
