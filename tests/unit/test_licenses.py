"""Tests for License field parsing."""

import pytest

from description_lint.licenses import is_placeholder, normalize_component, parse_license


class TestNormalizeComponent:
    """Test suite for normalize_component."""

    @pytest.mark.parametrize(
        "component, expected",
        [
            ("GPL-3", "GPL-3.0-only"),
            ("GPL (>= 2)", "GPL-2.0-or-later"),
            ("GPL  (>=  2)", "GPL-2.0-or-later"),
            ("MIT", "MIT"),
            ("BSD_3_clause", "BSD-3-Clause"),
            ("Apache License (== 2.0)", "Apache-2.0"),
            ("CC0", "CC0-1.0"),
        ],
    )
    def test_description_short_names(self, component, expected):
        """Test mapping of DESCRIPTION license names to SPDX."""
        assert normalize_component(component) == expected

    def test_spdx_identifier_passthrough(self):
        """Test that valid SPDX identifiers are accepted as-is."""
        assert normalize_component("Apache-2.0") == "Apache-2.0"

    def test_unknown_license(self):
        """Test that unknown names are not recognised."""
        assert normalize_component("My Own License") is None


class TestParseLicense:
    """Test suite for parse_license."""

    def test_file_reference(self):
        """Test detection of '+ file LICENSE'."""
        info = parse_license("MIT + file LICENSE")

        assert info.alternatives == ("MIT",)
        assert info.file_reference == "LICENSE"
        assert info.spdx_expression == "MIT"
        assert info.is_recognised

    def test_british_spelling(self):
        """Test that LICENCE is accepted as the file name."""
        assert parse_license("BSD_2_clause + file LICENCE").file_reference == "LICENCE"

    def test_alternatives(self):
        """Test '|' separated alternatives."""
        info = parse_license("GPL-2 | GPL-3")

        assert info.alternatives == ("GPL-2", "GPL-3")
        assert info.spdx_expression == "GPL-2.0-only OR GPL-3.0-only"

    def test_file_only(self):
        """Test a license given only as a file."""
        info = parse_license("file LICENSE")

        assert info.alternatives == ()
        assert info.file_reference == "LICENSE"
        assert info.spdx_expression is None

    def test_unrecognised_component(self):
        """Test that unknown components are reported."""
        info = parse_license("GPL-3 | Something Custom")

        assert info.unrecognised == ("Something Custom",)
        assert info.spdx_expression is None
        assert not info.is_recognised

    def test_multiline_value(self):
        """Test that folded values are joined."""
        assert parse_license("GPL (>=\n2)").alternatives == ("GPL (>= 2)",)


def test_placeholder_detection():
    """Test recognition of template text left in the License field."""
    assert is_placeholder("`use_mit_license()`, `use_gpl3_license()` or friends to pick a license")
    assert not is_placeholder("MIT + file LICENSE")
