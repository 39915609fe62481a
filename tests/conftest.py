"""Pytest configuration and fixtures."""

from pathlib import Path

import pytest

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the directory holding DESCRIPTION fixtures."""
    return FIXTURES


@pytest.fixture
def description_path() -> Path:
    """Path to a well-formed DESCRIPTION file with no violations."""
    return FIXTURES / "DESCRIPTION"


@pytest.fixture
def description_text(description_path: Path) -> str:
    """Contents of the well-formed DESCRIPTION fixture."""
    return description_path.read_text(encoding="utf-8")


@pytest.fixture
def legacy_path() -> Path:
    """Path to a DESCRIPTION using the legacy Author/Maintainer fields."""
    return FIXTURES / "DESCRIPTION.legacy"


@pytest.fixture
def broken_path() -> Path:
    """Path to a DESCRIPTION with many rule violations."""
    return FIXTURES / "DESCRIPTION.broken"


@pytest.fixture
def minimal_text() -> str:
    """Smallest DESCRIPTION text that passes validation."""
    return (
        "Package: minimal\n"
        "Title: A Minimal Package\n"
        "Version: 0.1.0\n"
        'Authors@R: person("Ann", "Smith", email = "ann@example.org", role = c("aut", "cre"))\n'
        "Description: Does very little. Exists for testing.\n"
        "License: GPL-3\n"
    )
