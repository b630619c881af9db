"""
Tests for placeholder validation.

Tests cover:
- Missing and added placeholders
- Corruption heuristics
- Warnings derived from the three lists
- Symmetry of the comparison
"""

import pytest

from mergeguard.models import ValidationResult
from mergeguard.validation import find_corruptions, validate_placeholders


class TestSetComparison:
    """Placeholders are compared as sets of raw strings."""

    def test_identical_texts_are_valid(self):
        """Test an unchanged text is valid."""
        text = "Hi *|FNAME|*, {{url}} *|GLOBAL:SIG|* *|IF:VIP|*x*|END:IF|*"
        result = validate_placeholders(text, text)
        assert result.is_valid
        assert result.missing == []
        assert result.added == []
        assert result.corrupted == []
        assert result.warnings == []

    def test_translated_prose_is_ignored(self):
        """Test only placeholders are compared."""
        result = validate_placeholders("Hello *|FNAME|*!", "Bonjour *|FNAME|* !")
        assert result.is_valid

    def test_missing_in_original_order(self):
        """Test missing placeholders keep source order."""
        result = validate_placeholders("*|B|* *|A|* *|B|* {{c}}", "{{c}}")
        assert result.missing == ["*|B|*", "*|A|*"]
        assert not result.is_valid

    def test_added(self):
        """Test placeholders new in the translation."""
        result = validate_placeholders("*|A|*", "*|A|* *|EMAIL|*")
        assert result.added == ["*|EMAIL|*"]
        assert result.missing == []
        assert not result.is_valid

    def test_case_change_is_missing_and_added(self):
        """Test a case change counts both ways."""
        result = validate_placeholders("*|FNAME|*", "*|fname|*")
        assert result.missing == ["*|FNAME|*"]
        assert result.added == ["*|fname|*"]

    def test_duplicates_do_not_matter(self):
        """Test repeats do not change the result."""
        result = validate_placeholders("*|A|*", "*|A|* *|A|*")
        assert result.is_valid

    def test_reverse_comparison_is_complementary(self):
        """Test swapping the texts swaps missing and added."""
        a = "*|A|* *|B|* {{c}}"
        b = "*|B|* {{d}}"
        forward = validate_placeholders(a, b)
        backward = validate_placeholders(b, a)
        assert forward.missing == backward.added
        assert forward.added == backward.missing

    @pytest.mark.parametrize("original,translated", [(None, None), ("", ""), (None, "text")])
    def test_empty_input(self, original, translated):
        """Test None and empty texts are valid."""
        assert validate_placeholders(original, translated).is_valid


class TestCorruption:
    """Malformed remnants are reported as corrupted."""

    def test_missing_closing_star(self):
        """Test *|NAME| without its final star."""
        result = validate_placeholders("*|FNAME|*", "*|FNAME|")
        assert result.corrupted
        assert "*|FNAME|" in result.corrupted
        assert not result.is_valid

    def test_unclosed_pipe_at_end(self):
        """Test *| left open at the end of text."""
        assert find_corruptions("Hola *|FNAM") == ["*|FNAM"]

    def test_unclosed_braces_at_end(self):
        """Test {{ left open at the end of text."""
        assert find_corruptions("Visit {{url") == ["{{url"]

    def test_well_formed_text_has_no_corruption(self):
        """Test valid placeholders are never flagged."""
        assert find_corruptions("*|A|* {{b}} *|GLOBAL:C|* *|IF:D|*x*|ELSE:|*y*|END:IF|*") == []

    def test_all_matches_are_collected(self):
        """Test every match is reported."""
        assert find_corruptions("*|A| then *|B| end") == ["*|A|", "*|B|"]

    def test_not_deduplicated(self):
        """Test repeated damage is reported each time."""
        assert find_corruptions("*|A| *|A| ") == ["*|A|", "*|A|"]

    def test_empty(self):
        """Test None and empty input."""
        assert find_corruptions(None) == []


class TestWarnings:
    """Warnings restate the three lists and nothing else."""

    def test_warning_text(self):
        """Test the wording of each warning."""
        result = ValidationResult.from_lists(["*|A|*"], ["*|B|*", "{{c}}"], ["*|D|"])
        assert result.warnings == [
            "Missing 1 placeholder(s): *|A|*",
            "Added 2 unexpected placeholder(s): *|B|*, {{c}}",
            "Found 1 corrupted placeholder(s): *|D|",
        ]
        assert not result.is_valid

    def test_warnings_rebuild_from_lists(self):
        """Test warnings follow from the three lists."""
        result = validate_placeholders("*|A|* {{b}}", "{{b}} {{z}} *|Q|")
        rebuilt = ValidationResult.from_lists(result.missing, result.added, result.corrupted)
        assert rebuilt == result

    def test_added_only_is_not_critical(self):
        """Test extra placeholders only warn."""
        result = validate_placeholders("*|A|*", "*|A|* *|B|*")
        assert not result.is_valid
        assert not result.has_critical_issues

    def test_missing_is_critical(self):
        """Test missing placeholders are critical."""
        assert validate_placeholders("*|A|*", "").has_critical_issues
