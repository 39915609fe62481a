"""Tests for the JSON reporter."""
import json

import pytest

from description_lint.reporters import JsonReporter, MarkdownReporter, get_reporter
from description_lint.validator import check_file


def test_render_structure(description_path):
    """Test the JSON document for a clean file."""
    data = json.loads(JsonReporter().render(check_file(description_path)))

    assert data["package"] == "tidyexample"
    assert data["version"] == "1.2.3"
    assert data["ok"] is True
    assert data["errors"] == []
    assert data["fields"]["License"] == "MIT + file LICENSE"
    assert data["license"] == {"raw": "MIT + file LICENSE", "spdx": "MIT", "file": "LICENSE"}
    assert {"field": "Suggests", "name": "ggvis", "operator": ">=", "version": "0.2"} in data["dependencies"]
    assert data["authors"][0]["roles"] == ["aut", "cre"]
    assert data["authors"][0]["orcid"] == "0000-0001-2345-6789"


def test_render_violations(broken_path):
    """Test that violations are serialised with severity and field."""
    data = json.loads(JsonReporter().render(check_file(broken_path)))

    assert data["ok"] is False
    assert data["errors"][0] == {
        "rule_id": "PKG-01",
        "severity": "error",
        "message": data["errors"][0]["message"],
        "field": "Package",
        "line": 1,
    }
    assert all(w["severity"] == "warning" for w in data["warnings"])


def test_get_reporter():
    """Test reporter lookup by format name."""
    assert isinstance(get_reporter("json"), JsonReporter)
    assert isinstance(get_reporter("markdown"), MarkdownReporter)
    with pytest.raises(ValueError, match="Unknown report format"):
        get_reporter("html")
