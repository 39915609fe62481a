"""Description Lint - Parser and validator for DESCRIPTION metadata files.

This package reads control-format package metadata, parses dependency
constraints and authors, compares versions, and reports blocking errors
and advisory warnings.
"""

__version__ = "0.1.0"

from description_lint.authors import parse_authors, parse_authors_r
from description_lint.config import ValidatorConfig, load_config
from description_lint.dependencies import parse_dependencies, parse_dependency
from description_lint.errors import (
    ConfigError,
    DescriptionError,
    InvalidAuthors,
    InvalidConstraint,
    InvalidVersion,
    MalformedField,
)
from description_lint.licenses import parse_license
from description_lint.models import (
    Author,
    DependencySpec,
    DuplicatePolicy,
    Field,
    LicenseInfo,
    MetadataRecord,
    Severity,
    ValidationResult,
    VersionConstraint,
    Violation,
)
from description_lint.reader import load, parse_record, serialize
from description_lint.validator import Validator, check_file, check_text
from description_lint.version import Version, compare_versions, parse_version

__all__ = [
    "__version__",
    "Author",
    "ConfigError",
    "DependencySpec",
    "DescriptionError",
    "DuplicatePolicy",
    "Field",
    "InvalidAuthors",
    "InvalidConstraint",
    "InvalidVersion",
    "LicenseInfo",
    "MalformedField",
    "MetadataRecord",
    "Severity",
    "ValidationResult",
    "Validator",
    "ValidatorConfig",
    "Version",
    "VersionConstraint",
    "Violation",
    "check_file",
    "check_text",
    "compare_versions",
    "load",
    "load_config",
    "parse_authors",
    "parse_authors_r",
    "parse_dependencies",
    "parse_dependency",
    "parse_license",
    "parse_record",
    "parse_version",
    "serialize",
]
