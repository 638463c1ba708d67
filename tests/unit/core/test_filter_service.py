from __future__ import annotations

from core.models import FacetKey, FilterState, Photo, Taxonomy
from core.services.filter_service import FilterStateManager
from core.services.match_engine import filter_photos


def test_toggle_category_adds_and_removes(taxonomy: Taxonomy) -> None:
    mgr = FilterStateManager(taxonomy)
    assert mgr.toggle_category("Travel") is True
    assert mgr.state.active_categories == {"Travel"}
    assert mgr.toggle_category("Travel") is True
    assert mgr.state.active_categories == frozenset()


def test_removing_category_cascades_its_facet_keys(taxonomy: Taxonomy) -> None:
    mgr = FilterStateManager(taxonomy)
    mgr.toggle_category("Travel")
    mgr.toggle_category("Nature")
    mgr.toggle_subcategory_facet("Travel", "Beach")
    mgr.toggle_subcategory_facet("Nature", "Forest")

    mgr.toggle_category("Travel")

    assert mgr.state.active_categories == {"Nature"}
    assert mgr.state.active_subcategory_keys == {FacetKey("Nature", "Forest")}


def test_toggle_subcategory_does_not_require_active_category(taxonomy: Taxonomy) -> None:
    mgr = FilterStateManager(taxonomy)
    mgr.toggle_subcategory_facet("Travel", "Beach")
    assert mgr.state.active_categories == frozenset()
    assert mgr.state.active_subcategory_keys == {FacetKey("Travel", "Beach")}
    mgr.toggle_subcategory_facet("Travel", "Beach")
    assert mgr.state.active_subcategory_keys == frozenset()


def test_unknown_names_are_accepted(taxonomy: Taxonomy) -> None:
    mgr = FilterStateManager(taxonomy)
    assert mgr.toggle_category("Nope") is True
    assert mgr.toggle_subcategory_facet("Nope", "Never") is True
    assert mgr.select_all_subcategory_facets("Nope") is False


def test_select_all_is_additive_and_idempotent(taxonomy: Taxonomy) -> None:
    mgr = FilterStateManager(taxonomy)
    mgr.toggle_subcategory_facet("Nature", "Forest")
    assert mgr.select_all_subcategory_facets("Travel") is True
    expected = {
        FacetKey("Nature", "Forest"),
        FacetKey("Travel", "Beach"),
        FacetKey("Travel", "Mountain"),
    }
    assert mgr.state.active_subcategory_keys == expected
    assert mgr.select_all_subcategory_facets("Travel") is False
    assert mgr.state.active_subcategory_keys == expected


def test_deselect_all_removes_only_that_category(taxonomy: Taxonomy) -> None:
    mgr = FilterStateManager(taxonomy)
    mgr.select_all_subcategory_facets("Travel")
    mgr.select_all_subcategory_facets("Nature")
    mgr.deselect_all_subcategory_facets("Travel")
    assert mgr.state.active_subcategory_keys == {FacetKey("Nature", "Forest")}


def test_clear_all_restores_identity(taxonomy: Taxonomy, sample_photos: list[Photo]) -> None:
    mgr = FilterStateManager(taxonomy)
    mgr.toggle_category("Travel")
    mgr.toggle_subcategory_facet("Travel", "Beach")
    mgr.toggle_category("Nature")
    mgr.select_all_subcategory_facets("Nature")

    mgr.clear_all()

    assert mgr.state == FilterState()
    assert filter_photos(sample_photos, mgr.state) == sample_photos


def test_on_change_fires_only_on_real_changes(taxonomy: Taxonomy) -> None:
    seen: list[FilterState] = []
    mgr = FilterStateManager(taxonomy, on_change=seen.append)
    mgr.clear_all()
    mgr.deselect_all_subcategory_facets("Travel")
    assert seen == []
    mgr.toggle_category("Travel")
    assert seen == [mgr.state]


def test_snapshots_are_not_mutated(taxonomy: Taxonomy) -> None:
    mgr = FilterStateManager(taxonomy)
    before = mgr.state
    mgr.toggle_category("Travel")
    assert before == FilterState()
    assert mgr.state is not before


def test_reference_scenario(taxonomy: Taxonomy, sample_photos: list[Photo]) -> None:
    mgr = FilterStateManager(taxonomy)

    def ids() -> list[str]:
        return [p.id for p in filter_photos(sample_photos, mgr.state)]

    mgr.toggle_category("Travel")
    assert ids() == ["1", "2", "3", "4"]
    mgr.toggle_subcategory_facet("Travel", "Beach")
    assert ids() == ["1", "2", "4"]
    mgr.toggle_subcategory_facet("Travel", "Mountain")
    assert ids() == ["1"]

    mgr.toggle_subcategory_facet("Travel", "Mountain")
    mgr.toggle_category("Nature")
    mgr.toggle_subcategory_facet("Nature", "Forest")
    assert ids() == ["1", "2", "4", "5"]
