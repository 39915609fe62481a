"""Tests for version parsing and ordering."""

import pytest

from description_lint.errors import InvalidVersion
from description_lint.version import Version, compare_versions, parse_version, sort_versions


class TestParseVersion:
    """Test suite for parse_version."""

    def test_dotted_version(self):
        """Test parsing a dot-separated version."""
        version = parse_version("1.2.3")
        assert version.components == (1, 2, 3)
        assert version.text == "1.2.3"

    def test_hyphenated_version(self):
        """Test that hyphens separate components like dots."""
        assert parse_version("0.5-1").components == (0, 5, 1)

    def test_surrounding_whitespace_ignored(self):
        """Test that leading and trailing whitespace is stripped."""
        assert parse_version("  2.0 ").text == "2.0"

    @pytest.mark.parametrize("text", ["1.x", "1..2", "a.b", "1.2-", "", "1.2 3", "-1.2"])
    def test_invalid_versions(self, text):
        """Test that non-numeric or empty components are rejected."""
        with pytest.raises(InvalidVersion):
            parse_version(text)

    def test_single_component_rejected(self):
        """Test that a version needs at least two components."""
        with pytest.raises(InvalidVersion, match="at least 2"):
            parse_version("3")

    def test_development_version(self):
        """Test detection of in-development versions."""
        assert parse_version("0.1.0.9000").is_development
        assert not parse_version("0.1.0").is_development


class TestVersionOrdering:
    """Test suite for Version comparison."""

    def test_trailing_zero_equality(self):
        """Test that 1.9 and 1.9.0 are equal."""
        assert parse_version("1.9") == parse_version("1.9.0")
        assert compare_versions("1.9", "1.9.0") == 0

    def test_equal_versions_hash_alike(self):
        """Test that equal versions can be used interchangeably as keys."""
        assert hash(parse_version("1.9")) == hash(parse_version("1.9.0.0"))
        assert len({parse_version("1.9"), parse_version("1.9.0")}) == 1

    def test_numeric_not_lexical_ordering(self):
        """Test that 1.9.0 sorts before 1.10.0."""
        assert parse_version("1.9.0") < parse_version("1.10.0")
        assert compare_versions("1.9.0", "1.10.0") == -1
        assert compare_versions("1.10.0", "1.9.0") == 1

    def test_shorter_version_padded(self):
        """Test that missing trailing components compare as zero."""
        assert parse_version("1.2") < parse_version("1.2.1")
        assert parse_version("2.0") > parse_version("1.99.99")

    def test_mixed_separators_compare_equal(self):
        """Test that the separator does not affect ordering."""
        assert parse_version("0.5-1") == parse_version("0.5.1")

    def test_strings_are_not_coerced(self):
        """Test that a Version never equals a plain string."""
        assert parse_version("1.9") != "1.9.0"
        assert parse_version("1.9") != "1.9"
        with pytest.raises(TypeError):
            parse_version("1.0") < "1.1"
        assert compare_versions(parse_version("1.0"), "1.0.0") == 0

    def test_equal_versions_share_hash_buckets(self):
        """Test that zero-padded equal versions collapse in sets and dicts."""
        versions = {parse_version("1.9"), parse_version("1.9.0"), parse_version("1.9-0-0")}
        assert len(versions) == 1
        assert {parse_version("1.9"): "x"}[parse_version("1.9.0")] == "x"
        assert "1.9" not in {parse_version("1.9")}

    def test_sort_versions(self):
        """Test sorting a mixed list of versions."""
        ordered = sort_versions(["1.10.0", "1.9", "1.9.1", "0.99"])
        assert [v.text for v in ordered] == ["0.99", "1.9", "1.9.1", "1.10.0"]

    def test_ordering_is_transitive(self):
        """Test transitivity across a chain of versions."""
        a, b, c = parse_version("1.0"), parse_version("1.0.1"), parse_version("1.1")
        assert a < b < c
        assert a < c

    def test_compare_invalid_raises(self):
        """Test that compare_versions rejects invalid input."""
        with pytest.raises(InvalidVersion):
            compare_versions("1.0", "banana")

    def test_version_from_components(self):
        """Test that text defaults to the dotted components."""
        assert str(Version(components=(1, 2))) == "1.2"
