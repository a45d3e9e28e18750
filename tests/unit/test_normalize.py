"""Unit tests for pure name normalization functions."""

from __future__ import annotations

import pytest

from routecheck.core.identity import (
    apostrophe_form,
    near_plural_key,
    normalize_key,
    plural_drift,
    strip_apostrophes,
    strip_order_prefix,
    strip_possessive,
)


class TestNormalizeKey:
    """Test normalized comparison keys."""

    def test_case_and_apostrophe_insensitive(self):
        assert normalize_key("Lion's Arch") == normalize_key("LIONS ARCH")
        assert normalize_key("Lion's Arch") == "lions arch"

    def test_typographic_apostrophes(self):
        assert normalize_key("Lion’s Arch") == "lions arch"
        assert normalize_key("Lion`s Arch") == "lions arch"

    def test_punctuation_collapses_to_single_spaces(self):
        assert normalize_key("  Dragon's   Stand -- (Meta)  ") == "dragons stand meta"
        assert normalize_key("Silverwastes_Part.2") == "silverwastes part 2"

    def test_non_ascii_letters_become_separators(self):
        assert normalize_key("Café Route") == "caf route"

    def test_empty_and_none(self):
        assert normalize_key("") == ""
        assert normalize_key(None) == ""
        assert normalize_key("'''") == ""

    @pytest.mark.parametrize(
        "value",
        ["Lion's Arch", "  Mistlock   Sanctuary ", "Grottos!", "01 Core Tyria", "a-b_c.d", "Ωmega"],
    )
    def test_idempotent(self, value):
        once = normalize_key(value)
        assert normalize_key(once) == once


class TestNearPluralKey:
    """Test token-wise plural folding."""

    def test_strips_one_trailing_s_per_token(self):
        assert near_plural_key("Grottos") == "grotto"
        assert near_plural_key("Sirens Landing") == "siren landing"
        assert near_plural_key("Lion's Arch") == "lion arch"

    def test_single_letter_s_token_is_kept(self):
        assert near_plural_key("Plan S") == "plan s"

    def test_singular_and_plural_share_key(self):
        assert near_plural_key("Grotto") == near_plural_key("Grottos")


class TestApostropheVariants:
    """Test display variants used for apostrophe matching."""

    def test_strip_apostrophes(self):
        assert strip_apostrophes("Lion's Arch") == "Lions Arch"
        assert strip_apostrophes("Lion’s Arch") == "Lions Arch"

    def test_strip_possessive(self):
        assert strip_possessive("Lion's Arch") == "Lion Arch"
        assert strip_possessive("Dragon’s Stand") == "Dragon Stand"
        assert strip_possessive("Rata Sum") == "Rata Sum"

    def test_strip_possessive_removes_non_possessive_apostrophes(self):
        assert strip_possessive("Ember's O'Keefe") == "Ember OKeefe"

    def test_apostrophe_form_keeps_apostrophes(self):
        assert apostrophe_form("Lion’s  ARCH") == "lion's arch"
        assert apostrophe_form("Lions-Arch") == "lions arch"
        assert apostrophe_form(None) == ""


class TestStripOrderPrefix:
    """Test removal of numeric ordering prefixes."""

    @pytest.mark.parametrize(
        ("segment", "expected"),
        [
            ("01 Core Tyria", "Core Tyria"),
            ("3_Heart of Thorns", "Heart of Thorns"),
            ("12 - Janthir", "Janthir"),
            ("02.Maguuma", "Maguuma"),
            ("Core Tyria", "Core Tyria"),
            ("2024", "2024"),
            ("4Winds", "4Winds"),
        ],
    )
    def test_prefixes(self, segment, expected):
        assert strip_order_prefix(segment) == expected


class TestPluralDrift:
    """Test token-by-token singular/plural comparison."""

    def test_trailing_s_difference_is_drift(self):
        assert plural_drift("Grottos", "Grotto") is True
        assert plural_drift("Grotto", "Grottos") is True

    def test_multi_token_drift(self):
        assert plural_drift("Sirens Landings", "Siren's Landing") is True

    def test_identical_names_are_never_drift(self):
        assert plural_drift("Grotto", "Grotto") is False
        assert plural_drift("grotto", "GROTTO") is False

    def test_other_differences_are_not_drift(self):
        assert plural_drift("Grottoes", "Grotto") is False
        assert plural_drift("Grottos Deep", "Grotto") is False
        assert plural_drift("", "") is False
