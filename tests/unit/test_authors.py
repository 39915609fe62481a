"""Tests for Authors@R and legacy author parsing."""

import pytest

from description_lint.authors import (
    parse_authors,
    parse_authors_r,
    parse_legacy_authors,
    tokenize,
)
from description_lint.errors import InvalidAuthors
from description_lint.models import Author, MetadataRecord
from description_lint.reader import parse_record


class TestTokenize:
    """Test suite for the R expression tokenizer."""

    def test_skips_whitespace_and_comments(self):
        """Test that comments and whitespace produce no tokens."""
        tokens = tokenize('person("A", # given\n "B")')
        assert [t.text for t in tokens] == ["person", "(", '"A"', ",", '"B"', ")"]

    def test_unexpected_character(self):
        """Test that stray characters are rejected."""
        with pytest.raises(InvalidAuthors, match="unexpected character"):
            tokenize('person("A") + 1')


class TestParseAuthorsR:
    """Test suite for parse_authors_r."""

    def test_single_person_named_arguments(self):
        """Test a single person() call with named arguments."""
        authors = parse_authors_r(
            'person(given = "Jane", family = "Doe", email = "jane@example.org", role = c("aut", "cre"))'
        )

        assert authors == [
            Author(
                given="Jane",
                family="Doe",
                email="jane@example.org",
                roles=frozenset({"aut", "cre"}),
            )
        ]
        assert authors[0].is_creator
        assert authors[0].full_name == "Jane Doe"

    def test_positional_arguments(self):
        """Test positional arguments, including an empty middle slot."""
        authors = parse_authors_r('person("Jane", "Doe", , "jane@example.org", "cre")')

        assert authors[0].email == "jane@example.org"
        assert authors[0].roles == frozenset({"cre"})

    def test_positional_after_named(self):
        """Test that positional arguments skip parameters given by name."""
        authors = parse_authors_r('person(family = "Doe", "Jane", role = "ctb")')

        assert authors[0].given == "Jane"
        assert authors[0].family == "Doe"

    def test_combined_people(self):
        """Test c() of several persons."""
        authors = parse_authors_r(
            """c(
                person("Jane", "Doe", email = 'jane@example.org', role = c("aut", "cre")),
                person("John", "Roe", role = "ctb")
            )"""
        )

        assert [a.full_name for a in authors] == ["Jane Doe", "John Roe"]
        assert authors[1].roles == frozenset({"ctb"})
        assert authors[1].email is None

    def test_default_role_is_author(self):
        """Test that a person without role is an author."""
        assert parse_authors_r('person("Jane", "Doe")')[0].roles == frozenset({"aut"})

    def test_orcid_and_comment(self):
        """Test that ORCID is extracted from a named comment vector."""
        authors = parse_authors_r(
            'person("Jane", "Doe", comment = c(ORCID = "0000-0001-2345-6789", "Original author"))'
        )

        assert authors[0].orcid == "0000-0001-2345-6789"
        assert authors[0].comment == "Original author"

    def test_given_vector_and_middle(self):
        """Test that given-name vectors and middle names are joined."""
        authors = parse_authors_r('person(c("Mary", "Ann"), "Smith", middle = "Q")')
        assert authors[0].given == "Mary Ann Q"

    def test_organisation(self):
        """Test a person() with only a given name."""
        authors = parse_authors_r('person("RStudio", role = c("cph", "fnd"))')

        assert authors[0].full_name == "RStudio"
        assert authors[0].family == ""

    def test_escaped_quotes(self):
        """Test backslash escapes inside strings."""
        authors = parse_authors_r('person("Jane \\"JD\\"", "Doe")')
        assert authors[0].given == 'Jane "JD"'

    def test_as_person(self):
        """Test the as.person() text form."""
        authors = parse_authors_r('as.person("Jane Doe <jane@example.org> [aut, cre]")')

        assert authors[0].full_name == "Jane Doe"
        assert authors[0].email == "jane@example.org"
        assert authors[0].roles == frozenset({"aut", "cre"})

    @pytest.mark.parametrize(
        "source, message",
        [
            ("", "empty"),
            ('person("A"', "end of Authors@R"),
            ('person("A", nickname = "B")', "unknown person"),
            ('system("rm -rf /")', "unsupported function"),
            ("author_list", "cannot evaluate variable"),
            ('c("just", "strings")', "must evaluate to person"),
            ('person("A") person("B")', "unexpected"),
        ],
    )
    def test_invalid_expressions(self, source, message):
        """Test that malformed or unsupported expressions are rejected."""
        with pytest.raises(InvalidAuthors, match=message):
            parse_authors_r(source)

    def test_error_names_field(self):
        """Test that errors refer to the Authors@R field."""
        with pytest.raises(InvalidAuthors) as exc_info:
            parse_authors_r("person(")
        assert exc_info.value.field == "Authors@R"


class TestLegacyAuthors:
    """Test suite for the Author/Maintainer fallback."""

    def test_maintainer_merged_with_author(self):
        """Test that the maintainer listed in Author becomes the creator."""
        authors = parse_legacy_authors("Ann Smith, Bob Jones", "Ann Smith <ann@example.org>")

        assert [a.full_name for a in authors] == ["Ann Smith", "Bob Jones"]
        assert authors[0].roles == frozenset({"aut", "cre"})
        assert authors[0].email == "ann@example.org"
        assert not authors[1].is_creator

    def test_maintainer_not_in_author(self):
        """Test that a separate maintainer is appended."""
        authors = parse_legacy_authors("Ann Smith and Bob Jones", "Cy Young <cy@example.org>")

        assert [a.full_name for a in authors] == ["Ann Smith", "Bob Jones", "Cy Young"]
        assert authors[-1].roles == frozenset({"cre"})

    def test_roles_in_brackets(self):
        """Test bracketed role lists in the Author field."""
        authors = parse_legacy_authors("Ann Smith [aut, cph], Bob Jones [ctb]", None)

        assert authors[0].roles == frozenset({"aut", "cph"})
        assert authors[1].roles == frozenset({"ctb"})

    def test_no_fields(self):
        """Test that missing fields yield no authors."""
        assert parse_legacy_authors(None, None) == []


class TestParseAuthors:
    """Test suite for record-level author parsing."""

    def test_fixture_authors(self, description_text):
        """Test parsing the multi-line Authors@R of the fixture."""
        authors = parse_authors(parse_record(description_text))

        assert len(authors) == 3
        assert authors[0].is_creator
        assert authors[0].orcid == "0000-0001-2345-6789"
        assert authors[2].roles == frozenset({"cph", "fnd"})

    def test_authors_r_preferred(self):
        """Test that Authors@R wins over the legacy fields."""
        record = MetadataRecord.from_pairs(
            [
                ("Authors@R", 'person("Jane", "Doe", role = "cre")'),
                ("Maintainer", "Someone Else <else@example.org>"),
            ]
        )
        assert [a.full_name for a in parse_authors(record)] == ["Jane Doe"]

    def test_legacy_fallback(self, legacy_path):
        """Test falling back to Author and Maintainer."""
        authors = parse_authors(parse_record(legacy_path.read_text(encoding="utf-8")))
        assert authors[0].is_creator
