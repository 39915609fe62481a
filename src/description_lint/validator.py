"""Rule-based validation of DESCRIPTION records.

The validator never stops at the first problem: every rule runs and each
finding is recorded as a :class:`Violation`, split into blocking errors and
advisory warnings. Only structural parse failures from the reader
(:class:`MalformedField`) abort the pipeline.
"""

import logging
import re
from pathlib import Path
from typing import Optional, Union

from description_lint.authors import (
    AUTHOR_FIELD,
    AUTHORS_R_FIELD,
    MAINTAINER_FIELD,
    parse_authors,
)
from description_lint.config import ValidatorConfig
from description_lint.dependencies import collect_dependencies, find_duplicates
from description_lint.errors import InvalidAuthors, InvalidVersion
from description_lint.licenses import (
    FILE_REQUIRED,
    NO_FILE_NEEDED,
    is_placeholder,
    parse_license,
)
from description_lint.models import (
    Author,
    MetadataRecord,
    Severity,
    ValidationResult,
    Violation,
)
from description_lint.reader import load, parse_record, split_lines
from description_lint.version import parse_version

logger = logging.getLogger(__name__)

# Package names: letters, digits and dots; start with a letter; no trailing dot
PACKAGE_NAME_PATTERN = re.compile(r"^[A-Za-z][A-Za-z0-9.]*[A-Za-z0-9]$")

EMAIL_PATTERN = re.compile(r"^[^@\s<>]+@[^@\s<>]+\.[^@\s<>]+$")

TITLE_CASE_LOWERCASE = {
    "a", "an", "the", "and", "but", "or", "nor", "for", "in", "on", "at",
    "to", "by", "of", "with", "from", "as", "into", "onto", "upon", "vs",
    "via", "per",
}

DESCRIPTION_OPENERS = ("a package", "this package", "the package")


def title_case_problems(title: str) -> list[str]:
    """Return Title Case problems in ``title``; empty when it is fine.

    Words inside single quotes and all-caps acronyms are ignored.
    """
    problems = []
    stripped = re.sub(r"'[^']*'", "QUOTED", title)
    for index, word in enumerate(stripped.split()):
        if word == "QUOTED" or word.isupper() or not word[0].isalpha():
            continue
        if index == 0:
            if word[0].islower():
                problems.append(f"first word '{word}' should be capitalized")
        elif word.lower() in TITLE_CASE_LOWERCASE:
            if word[0].isupper():
                problems.append(f"'{word}' should be lowercase")
        elif word[0].islower() and not word.startswith("e.g"):
            problems.append(f"'{word}' should be capitalized")
    return problems


class Validator:
    """Applies the DESCRIPTION rule set to a parsed record.

    Attributes:
        config: Thresholds, required fields and disabled rules.
    """

    def __init__(self, config: Optional[ValidatorConfig] = None) -> None:
        self.config = config or ValidatorConfig()

    def validate(self, record: MetadataRecord) -> ValidationResult:
        """Validate ``record`` and return every violation found.

        Args:
            record: Parsed DESCRIPTION record.

        Returns:
            ValidationResult with parsed dependencies, authors, license,
            and errors/warnings in detection order.
        """
        result = ValidationResult(record=record)

        self._check_required(result)
        self._check_package(result)
        self._check_version(result)
        self._check_title(result)
        self._check_description(result)
        self._check_authors(result)
        self._check_dependencies(result)
        self._check_license(result)

        logger.debug(
            "Validated %s: %d errors, %d warnings",
            record.get("Package", "<unnamed>"),
            len(result.errors),
            len(result.warnings),
        )
        return result

    def _report(
        self,
        result: ValidationResult,
        rule_id: str,
        severity: Severity,
        message: str,
        field: Optional[str] = None,
        line: Optional[int] = None,
    ) -> None:
        if not self.config.is_enabled(rule_id):
            return
        if line is None and field is not None:
            source = result.record.field(field)
            if source is not None and source.line:
                line = source.line
        result.add(Violation(rule_id, severity, message, field=field, line=line))

    def _check_required(self, result: ValidationResult) -> None:
        for name in self.config.required_fields:
            value = result.record.get(name)
            if value is None:
                self._report(
                    result,
                    "REQ-01",
                    Severity.ERROR,
                    f"Missing required field '{name}'",
                    field=name,
                )
            elif not value.strip():
                self._report(
                    result,
                    "REQ-01",
                    Severity.ERROR,
                    f"Required field '{name}' is empty",
                    field=name,
                )

    def _check_package(self, result: ValidationResult) -> None:
        name = result.record.get("Package")
        if name and name.strip() and not PACKAGE_NAME_PATTERN.match(name.strip()):
            self._report(
                result,
                "PKG-01",
                Severity.ERROR,
                f"Package name '{name.strip()}' must start with a letter, contain "
                "only letters, digits and dots, have at least two characters "
                "and not end in a dot",
                field="Package",
            )

    def _check_version(self, result: ValidationResult) -> None:
        text = result.record.get("Version")
        if not text or not text.strip():
            return
        try:
            version = parse_version(text)
        except InvalidVersion as e:
            self._report(
                result,
                "VER-01",
                Severity.ERROR,
                f"Invalid Version: {e.message}",
                field="Version",
            )
            return
        if version.is_development:
            self._report(
                result,
                "VER-02",
                Severity.WARNING,
                f"Version '{version}' is a development version",
                field="Version",
            )

    def _check_title(self, result: ValidationResult) -> None:
        source = result.record.field("Title")
        if source is None or not source.folded:
            return
        title = source.folded

        limit = self.config.title_max_length
        if len(title) > limit:
            self._report(
                result,
                "TITLE-01",
                Severity.WARNING,
                f"Title is {len(title)} characters long (limit {limit})",
                field="Title",
            )

        if self.config.check_title_case:
            problems = title_case_problems(title)
            if problems:
                self._report(
                    result,
                    "TITLE-02",
                    Severity.WARNING,
                    f"Title is not in Title Case: {'; '.join(problems)}",
                    field="Title",
                )

        if title.endswith(".") and not title.endswith("..."):
            self._report(
                result,
                "TITLE-03",
                Severity.WARNING,
                "Title should not end with a period",
                field="Title",
            )

    def _check_description(self, result: ValidationResult) -> None:
        source = result.record.field("Description")
        if source is None or not source.folded:
            return

        width = self.config.description_line_width
        if source.raw:
            rows = split_lines(source.raw)
            while rows and not rows[0].strip():
                rows.pop(0)
        else:
            rows = [f"Description: {source.lines[0]}", *source.lines[1:]]
        for offset, row in enumerate(rows):
            shown = len(row.rstrip())
            if shown > width:
                self._report(
                    result,
                    "DESC-01",
                    Severity.WARNING,
                    f"Description line is {shown} characters wide (limit {width})",
                    field="Description",
                    line=source.line + offset,
                )

        text = source.folded.lower()
        package = (result.record.get("Package") or "").strip().lower()
        first_word = text.split()[0].strip(".,'")
        if text.startswith(DESCRIPTION_OPENERS) or (package and first_word == package):
            self._report(
                result,
                "DESC-02",
                Severity.WARNING,
                "Description should not start with 'This package', 'A package' "
                "or the package name",
                field="Description",
            )

    def _check_authors(self, result: ValidationResult) -> None:
        record = result.record
        has_authors_r = AUTHORS_R_FIELD in record

        try:
            authors = parse_authors(record)
        except InvalidAuthors as e:
            self._report(
                result,
                "AUTH-06",
                Severity.ERROR,
                f"Cannot parse Authors@R: {e.message}",
                field=AUTHORS_R_FIELD,
            )
            return
        result.authors = authors

        if not has_authors_r:
            if AUTHOR_FIELD in record or MAINTAINER_FIELD in record:
                self._report(
                    result,
                    "AUTH-07",
                    Severity.WARNING,
                    "Author/Maintainer fields are deprecated; use Authors@R",
                    field=AUTHOR_FIELD if AUTHOR_FIELD in record else MAINTAINER_FIELD,
                )
            else:
                self._report(
                    result,
                    "AUTH-08",
                    Severity.ERROR,
                    "No Authors@R field",
                    field=AUTHORS_R_FIELD,
                )
                return

        field_name = AUTHORS_R_FIELD if has_authors_r else MAINTAINER_FIELD
        creators = [a for a in authors if a.is_creator]
        if not creators:
            self._report(
                result,
                "AUTH-01",
                Severity.ERROR,
                "No author has the 'cre' (maintainer) role",
                field=field_name,
            )
        elif len(creators) > 1:
            names = ", ".join(a.full_name for a in creators)
            self._report(
                result,
                "AUTH-03",
                Severity.ERROR,
                f"Exactly one maintainer is allowed, found {len(creators)}: {names}",
                field=field_name,
            )

        for creator in creators:
            self._check_creator_email(result, creator, field_name)

        for author in authors:
            unknown = author.unknown_roles
            if unknown:
                self._report(
                    result,
                    "AUTH-05",
                    Severity.WARNING,
                    f"Unknown role(s) {', '.join(sorted(unknown))} for "
                    f"{author.full_name or 'unnamed author'}",
                    field=field_name,
                )

    def _check_creator_email(
        self, result: ValidationResult, creator: Author, field_name: str
    ) -> None:
        name = creator.full_name or "unnamed maintainer"
        email = (creator.email or "").strip()
        if not email:
            self._report(
                result,
                "AUTH-02",
                Severity.ERROR,
                f"Maintainer {name} has no email address",
                field=field_name,
            )
        elif not EMAIL_PATTERN.match(email):
            self._report(
                result,
                "AUTH-04",
                Severity.ERROR,
                f"Maintainer email '{email}' is not a valid address",
                field=field_name,
            )

    def _check_dependencies(self, result: ValidationResult) -> None:
        specs, errors = collect_dependencies(result.record)
        result.dependencies = specs

        for error in errors:
            rule_id = "DEP-02" if isinstance(error, InvalidVersion) else "DEP-01"
            self._report(
                result,
                rule_id,
                Severity.ERROR,
                f"{error.field}: {error.message}",
                field=error.field,
            )

        for name, group in find_duplicates(specs).items():
            where = ", ".join(spec.field or "?" for spec in group)
            self._report(
                result,
                "DEP-03",
                Severity.WARNING,
                f"Package '{name}' is declared more than once ({where})",
                field=group[-1].field,
            )

    def _check_license(self, result: ValidationResult) -> None:
        value = result.record.get("License")
        if not value or not value.strip():
            return

        if is_placeholder(value):
            self._report(
                result,
                "LIC-01",
                Severity.ERROR,
                f"License field contains placeholder text: "
                f"'{' '.join(value.split())[:60]}'",
                field="License",
            )
            return

        info = parse_license(value)
        result.license = info

        for component in info.unrecognised:
            self._report(
                result,
                "LIC-02",
                Severity.WARNING,
                f"License '{component}' is not a recognised license",
                field="License",
            )

        if info.file_reference:
            for component in info.alternatives:
                if component in NO_FILE_NEEDED:
                    self._report(
                        result,
                        "LIC-03",
                        Severity.WARNING,
                        f"License '{component}' does not need "
                        f"'+ file {info.file_reference}'",
                        field="License",
                    )
        else:
            for component in info.alternatives:
                if component in FILE_REQUIRED:
                    self._report(
                        result,
                        "LIC-04",
                        Severity.WARNING,
                        f"License '{component}' needs '+ file LICENSE' "
                        "with year and copyright holder",
                        field="License",
                    )


def check_text(text: str, config: Optional[ValidatorConfig] = None) -> ValidationResult:
    """Parse and validate DESCRIPTION text.

    Raises:
        MalformedField: If the text cannot be split into fields.
    """
    config = config or ValidatorConfig()
    record = parse_record(text, duplicate_policy=config.duplicate_policy)
    return Validator(config).validate(record)


def check_file(
    path: Union[str, Path], config: Optional[ValidatorConfig] = None
) -> ValidationResult:
    """Load and validate a DESCRIPTION file or package directory.

    Raises:
        FileNotFoundError: If the file does not exist.
        MalformedField: If the file cannot be split into fields.
    """
    config = config or ValidatorConfig()
    record = load(path, duplicate_policy=config.duplicate_policy)
    return Validator(config).validate(record)
