import pytest

from description_lint.models import (
    Author,
    DependencySpec,
    Field,
    MetadataRecord,
    Severity,
    ValidationResult,
    VersionConstraint,
    Violation,
)
from description_lint.version import parse_version


def test_field_folded_collapses_whitespace():
    """Test that folded joins continuation lines with single spaces."""
    field = Field(name="Description", value="One  line\nand\tanother")
    assert field.folded == "One line and another"
    assert field.lines == ["One  line", "and\tanother"]


def test_record_rejects_invalid_field_name():
    """Test that field names must be valid tokens."""
    with pytest.raises(ValueError):
        MetadataRecord([Field(name="Bad Name", value="x")])


def test_record_rejects_duplicate_names():
    """Test that a record holds each field once."""
    with pytest.raises(ValueError):
        MetadataRecord.from_pairs([("Package", "a"), ("Package", "b")])


def test_record_preserves_order():
    """Test that iteration follows insertion order."""
    record = MetadataRecord.from_pairs([("Version", "1.0"), ("Package", "a")])
    assert list(record) == ["Version", "Package"]
    assert record.items() == [("Version", "1.0"), ("Package", "a")]


def test_constraint_rejects_unknown_operator():
    """Test that VersionConstraint validates its operator."""
    with pytest.raises(ValueError):
        VersionConstraint(operator="~=", version=parse_version("1.0"))


def test_dependency_spec_requires_name():
    """Test that DependencySpec needs a non-empty name."""
    with pytest.raises(ValueError):
        DependencySpec(name="")


def test_dependency_spec_is_hashable():
    """Test that specs can be used in sets."""
    spec = DependencySpec(name="dplyr", field="Imports")
    assert spec in {DependencySpec(name="dplyr", field="Imports")}


def test_author_string():
    """Test the human-readable author form."""
    author = Author(given="Jane", family="Doe", email="jane@example.org", roles=frozenset({"cre", "aut"}))
    assert str(author) == "Jane Doe <jane@example.org> [aut, cre]"
    assert author.unknown_roles == frozenset()


def test_validation_result_add_routes_by_severity():
    """Test that add() files violations under errors or warnings."""
    result = ValidationResult(record=MetadataRecord())
    result.add(Violation("REQ-01", Severity.ERROR, "missing"))
    result.add(Violation("TITLE-01", Severity.WARNING, "long"))

    assert not result.ok
    assert [v.rule_id for v in result.errors] == ["REQ-01"]
    assert [v.rule_id for v in result.warnings] == ["TITLE-01"]


def test_violation_to_dict():
    """Test the serialisable form of a violation."""
    violation = Violation("VER-01", Severity.ERROR, "bad", field="Version", line=3)
    assert violation.to_dict() == {
        "rule_id": "VER-01",
        "severity": "error",
        "message": "bad",
        "field": "Version",
        "line": 3,
    }
