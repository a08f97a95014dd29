"""Tests for the fixed taxonomy and the category normalizer."""

import pytest

from tag_catalog.core.models.tag import FALLBACK_CATEGORY, TagCategory
from tag_catalog.core.services.taxonomy_service import (
    labelled_category_list,
    normalize_category,
    numbered_category_list,
)


class TestTaxonomy:
    @pytest.mark.unit
    def test_has_thirteen_entries_with_fallback_last(self):
        ordered = TagCategory.ordered()

        assert len(ordered) == 13
        assert ordered[0] is TagCategory.TEMPO_METER
        assert ordered[-1] is FALLBACK_CATEGORY
        assert FALLBACK_CATEGORY.value == "Miscellaneous / Meta"

    @pytest.mark.unit
    def test_from_position_is_one_based(self):
        assert TagCategory.from_position(1) is TagCategory.TEMPO_METER
        assert TagCategory.from_position(13) is TagCategory.MISC
        with pytest.raises(IndexError):
            TagCategory.from_position(0)

    @pytest.mark.unit
    def test_numbered_list_matches_positions(self):
        lines = numbered_category_list().splitlines()

        assert lines[0] == "1. Tempo & Meter"
        assert lines[6] == "7. Mood / Emotion"
        assert lines[12] == "13. Miscellaneous / Meta"

    @pytest.mark.unit
    def test_labelled_list_contains_every_label(self):
        text = labelled_category_list()
        for category in TagCategory:
            assert f"- {category.value}" in text


class TestNormalizeCategory:
    @pytest.mark.unit
    def test_index_seven_is_mood(self):
        assert normalize_category(7) is TagCategory.MOOD

    @pytest.mark.unit
    @pytest.mark.parametrize("position", range(1, 14))
    def test_every_valid_index_maps_to_its_entry(self, position):
        assert normalize_category(position) is TagCategory.ordered()[position - 1]

    @pytest.mark.unit
    def test_lyrical_fuzzy_rule(self):
        assert normalize_category("something lyrical-ish") is TagCategory.LANGUAGE_LYRICS
        assert normalize_category("LYRICAL") is TagCategory.LANGUAGE_LYRICS

    @pytest.mark.unit
    def test_exact_labels_in_any_case_and_spacing(self):
        assert normalize_category("Era/Time-Period Vibe") is TagCategory.ERA_VIBE
        assert normalize_category("  core genre   family ") is TagCategory.CORE_GENRE
        assert normalize_category("Production&Mix Aesthetics") is TagCategory.PRODUCTION

    @pytest.mark.unit
    def test_digit_strings_are_treated_as_indices(self):
        assert normalize_category("3") is TagCategory.CORE_GENRE
        assert normalize_category(" 9 ") is TagCategory.RHYTHM_STRUCTURE
        assert normalize_category("99") is FALLBACK_CATEGORY
        assert normalize_category("0007") is TagCategory.MOOD
        assert normalize_category("0" * 5000 + "7") is TagCategory.MOOD

    @pytest.mark.unit
    def test_integral_floats_are_indices(self):
        assert normalize_category(2.0) is TagCategory.ERA_VIBE
        assert normalize_category(2.5) is FALLBACK_CATEGORY

    @pytest.mark.unit
    def test_fuzzy_rules_cover_loose_wording(self):
        assert normalize_category("vocal style") is TagCategory.VOCALS
        assert normalize_category("Emotional mood") is TagCategory.MOOD
        assert normalize_category("instrumentation") is TagCategory.INSTRUMENTATION

    @pytest.mark.unit
    def test_overlapping_rules_resolve_in_taxonomy_order(self):
        # "vocal" (6) comes before "mood" (7)
        assert normalize_category("vocal mood") is TagCategory.VOCALS
        assert normalize_category("mood of the vocals") is TagCategory.VOCALS

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "raw",
        [
            0,
            14,
            -1,
            10**12,
            True,
            False,
            None,
            "",
            "   ",
            "no idea",
            "²",
            "7" * 5000,
            "0" * 5000 + "99",
            {"category": 3},
            [3],
            (7,),
            float("nan"),
            float("inf"),
            b"3",
            object(),
        ],
    )
    def test_unmappable_values_fall_back(self, raw):
        assert normalize_category(raw) is FALLBACK_CATEGORY

    @pytest.mark.unit
    def test_category_members_pass_through(self):
        assert normalize_category(TagCategory.THEMES) is TagCategory.THEMES

    @pytest.mark.unit
    def test_is_deterministic(self):
        values = ["lyrical", 4, "Mood / Emotion", None, "vocal"]
        first = [normalize_category(v) for v in values]
        second = [normalize_category(v) for v in values]
        assert first == second
