"""Unit tests for the static substitution table."""

import pytest

from wasfa.services.substitutions import (
    NO_SUBSTITUTE_AR,
    NO_SUBSTITUTE_EN,
    SUBSTITUTIONS,
    find_substitutes,
)


class TestSubstringLookup:
    """Test contains-in-either-direction matching."""

    def test_query_inside_key(self):
        """Test that 'زيت' matches the olive oil entry and its three 1:1 substitutes."""
        result = find_substitutes("زيت")

        assert result.original_ingredient == "زيت زيتون"
        assert [s.name for s in result.substitutes] == ["زيت الكانولا", "زيت الأفوكادو", "زيت جوز الهند"]
        assert [s.ratio for s in result.substitutes] == ["1:1", "1:1", "1:1"]

    def test_key_inside_query(self):
        """Test that a longer query containing a key matches that key."""
        result = find_substitutes("دقيق أبيض متعدد الاستخدامات")

        assert result.original_ingredient == "دقيق أبيض"
        assert result.substitutes[2].ratio == "3/4 كوب دقيق ذرة لكل كوب دقيق"

    def test_query_is_trimmed_and_lowercased(self):
        """Test normalization before matching."""
        assert find_substitutes("  Butter ").original_ingredient == "Butter"
        assert find_substitutes("OLIVE OIL").original_ingredient == "Olive oil"

    def test_first_key_in_table_order_wins(self):
        """Test that scanning follows the table's insertion order."""
        # Contains both "سكر" and "حليب"; sugar comes first in the table
        assert find_substitutes("سكر حليب").original_ingredient == "سكر أبيض"

    def test_optional_notes(self):
        """Test that substitutes without notes leave them unset."""
        result = find_substitutes("سكر")

        assert result.substitutes[0].notes is not None
        assert result.substitutes[1].notes is None


class TestNoMatch:
    """Test the placeholder result."""

    def test_arabic_placeholder(self):
        """Test that an unknown Arabic ingredient gets the Arabic placeholder."""
        result = find_substitutes("زعفران")

        assert result.original_ingredient == "زعفران"
        assert len(result.substitutes) == 1
        assert result.substitutes[0].name == NO_SUBSTITUTE_AR["name"]
        assert result.substitutes[0].ratio == "غير متوفر"

    def test_english_placeholder(self):
        """Test that an unknown English ingredient gets the English placeholder."""
        result = find_substitutes("saffron")

        assert result.original_ingredient == "saffron"
        assert result.substitutes[0].name == NO_SUBSTITUTE_EN["name"]
        assert result.substitutes[0].ratio == "unavailable"

    @pytest.mark.parametrize("query", ["", "   ", "🍕", "x" * 500])
    def test_lookup_is_total(self, query):
        """Test that odd queries never raise."""
        result = find_substitutes(query)

        assert result.substitutes


class TestIsolation:
    """Test that results do not alias the shared table."""

    def test_results_are_fresh_copies(self):
        """Test that mutating a result leaves the table intact."""
        find_substitutes("حليب").substitutes.clear()

        assert len(find_substitutes("حليب").substitutes) == 3

    def test_table_is_read_only(self):
        """Test that the shared table cannot be modified."""
        with pytest.raises(TypeError):
            SUBSTITUTIONS["جبنة"] = {}
