"""Domain Types — verifies identity wrappers, constants, and enum values.

Tests:
    - PostId wraps int
    - "all" pseudo-category and "post" route parameter constants
    - Enums have expected members and serialize to string
"""

from postindex.core.domain_types import (
    ALL_CATEGORIES, ROUTE_POST_PARAM, Derivation, LoadStatus, PostId,
    SearchField, SearchMode, ViewKind,
)


def test_post_id_wraps_int():
    assert PostId(7) == 7


def test_all_categories_constant():
    assert ALL_CATEGORIES == "all"


def test_route_param_is_post():
    assert ROUTE_POST_PARAM == "post"


def test_load_status_has_three_states():
    assert {s.value for s in LoadStatus} == {"loading", "ready", "failed"}


def test_view_kind_values():
    assert ViewKind.HOME.value == "home"
    assert ViewKind.SINGLE.value == "single"


def test_search_mode_values():
    assert {m.value for m in SearchMode} == {"simple", "scored"}


def test_derivation_values():
    assert {d.value for d in Derivation} == {"category", "search"}


def test_search_fields_are_the_five_scored_fields():
    assert {f.value for f in SearchField} == {
        "title", "category", "tags", "excerpt", "content",
    }


def test_enums_are_str_subclasses():
    assert isinstance(LoadStatus.READY, str)
    assert ViewKind.SINGLE == "single"
