"""Core data models for description_lint.

This module defines the value objects produced by parsing a DESCRIPTION
file: the ordered field record, dependency specifications, authors,
license information, and the validation result with its violations.
"""

import re
from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from description_lint.version import Version

OPERATORS = (">=", ">", "==", "<=", "<")

ROLE_CODES = frozenset(
    {"aut", "com", "cph", "cre", "ctb", "ctr", "dtc", "fnd", "rev", "ths", "trl"}
)

FIELD_NAME_PATTERN = re.compile(r"^[A-Za-z][A-Za-z0-9@._/-]*$")


class Severity(str, Enum):
    """Violation severity: errors block, warnings advise."""

    ERROR = "error"
    WARNING = "warning"


class DuplicatePolicy(str, Enum):
    """How the reader treats a field name that appears twice."""

    REJECT = "reject"
    LAST_WINS = "last-wins"


@dataclass(frozen=True)
class Field:
    """A single field read from a control-format file.

    Attributes:
        name: Field name (e.g., "Imports"). Case-sensitive.
        value: Value with continuation indentation stripped, one source
            line per ``\\n``-separated line.
        line: 1-based line number of the field header.
        raw: Exact source text of the field including the header and
            trailing newline. Empty for fields built in code.
    """

    name: str
    value: str
    line: int = 0
    raw: str = ""

    @property
    def folded(self) -> str:
        """Value on a single line with whitespace runs collapsed."""
        return " ".join(self.value.split())

    @property
    def lines(self) -> list[str]:
        """Value split into its source lines."""
        return self.value.split("\n")


class MetadataRecord:
    """Ordered, immutable mapping of field names to fields.

    Behaves like a read-only mapping from field name to the field's value
    string; use :meth:`field` to access line numbers and raw text.
    """

    __slots__ = ("_fields",)

    def __init__(self, fields: Optional[list[Field]] = None) -> None:
        ordered: dict[str, Field] = {}
        for item in fields or []:
            if not FIELD_NAME_PATTERN.match(item.name):
                raise ValueError(f"Invalid field name: {item.name!r}")
            if item.name in ordered:
                raise ValueError(f"Duplicate field name: {item.name!r}")
            ordered[item.name] = item
        object.__setattr__(self, "_fields", ordered)

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError("MetadataRecord is immutable")

    @classmethod
    def from_pairs(cls, pairs: list[tuple[str, str]]) -> "MetadataRecord":
        """Build a record from (name, value) pairs without source positions."""
        return cls([Field(name=name, value=value) for name, value in pairs])

    def __getitem__(self, name: str) -> str:
        return self._fields[name].value

    def __contains__(self, name: object) -> bool:
        return name in self._fields

    def __iter__(self) -> Iterator[str]:
        return iter(self._fields)

    def __len__(self) -> int:
        return len(self._fields)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MetadataRecord):
            return NotImplemented
        return self.items() == other.items()

    def __hash__(self) -> int:
        return hash(tuple(self.items()))

    def __repr__(self) -> str:
        return f"MetadataRecord({self.names!r})"

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Return the value of a field, or ``default`` when absent."""
        item = self._fields.get(name)
        return item.value if item is not None else default

    def field(self, name: str) -> Optional[Field]:
        """Return the Field object for ``name``, or None."""
        return self._fields.get(name)

    @property
    def names(self) -> list[str]:
        """Field names in source order."""
        return list(self._fields)

    @property
    def fields(self) -> list[Field]:
        """Fields in source order."""
        return list(self._fields.values())

    def items(self) -> list[tuple[str, str]]:
        """(name, value) pairs in source order."""
        return [(f.name, f.value) for f in self._fields.values()]


@dataclass(frozen=True)
class VersionConstraint:
    """A comparison against a version, e.g. ``>= 1.2.3``.

    Attributes:
        operator: One of ``>=``, ``>``, ``==``, ``<=``, ``<``.
        version: Version to compare against.
    """

    operator: str
    version: Version

    def __post_init__(self) -> None:
        if self.operator not in OPERATORS:
            raise ValueError(f"Unknown operator: {self.operator!r}")

    def is_satisfied_by(self, version: Version) -> bool:
        """Check whether ``version`` meets this constraint."""
        if self.operator == ">=":
            return version >= self.version
        if self.operator == ">":
            return version > self.version
        if self.operator == "==":
            return version == self.version
        if self.operator == "<=":
            return version <= self.version
        return version < self.version

    def __str__(self) -> str:
        return f"{self.operator} {self.version}"


@dataclass(frozen=True)
class DependencySpec:
    """Immutable dependency declaration from a DESCRIPTION dependency field.

    Frozen for hashability so specs can be grouped and deduplicated.

    Attributes:
        name: Package name (e.g., "dplyr").
        constraint: Optional version constraint.
        field: Source field (e.g., "Imports").
    """

    name: str
    constraint: Optional[VersionConstraint] = None
    field: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("DependencySpec name must be non-empty")

    def is_satisfied_by(self, version: Version) -> bool:
        """True when no constraint is set or ``version`` satisfies it."""
        return self.constraint is None or self.constraint.is_satisfied_by(version)

    def __str__(self) -> str:
        if self.constraint is None:
            return self.name
        return f"{self.name} ({self.constraint})"


@dataclass(frozen=True)
class Author:
    """A person listed in Authors@R (or the legacy Author/Maintainer fields).

    Attributes:
        given: Given name(s).
        family: Family name, may be empty for organisations.
        email: Contact address, if given.
        roles: Role codes such as "aut", "cre", "cph".
        comment: Free-text comment, if any.
        orcid: ORCID identifier taken from the comment, if any.
    """

    given: str = ""
    family: str = ""
    email: Optional[str] = None
    roles: frozenset[str] = field(default_factory=lambda: frozenset({"aut"}))
    comment: Optional[str] = None
    orcid: Optional[str] = None

    @property
    def full_name(self) -> str:
        """Given and family names joined by a space."""
        return " ".join(part for part in (self.given, self.family) if part)

    @property
    def is_creator(self) -> bool:
        """True if this author is the maintainer (role ``cre``)."""
        return "cre" in self.roles

    @property
    def unknown_roles(self) -> frozenset[str]:
        """Role codes outside the recognised vocabulary."""
        return self.roles - ROLE_CODES

    def __str__(self) -> str:
        text = self.full_name
        if self.email:
            text = f"{text} <{self.email}>"
        return f"{text} [{', '.join(sorted(self.roles))}]"


@dataclass(frozen=True)
class LicenseInfo:
    """Parsed License field.

    Attributes:
        raw: Field value as written.
        alternatives: License components separated by ``|``, with any
            ``+ file LICENSE`` suffix removed.
        spdx_expression: Normalised SPDX expression, or None when any
            component could not be mapped.
        file_reference: "LICENSE" or "LICENCE" when the field refers to a
            license file.
        unrecognised: Components that could not be mapped to SPDX.
    """

    raw: str
    alternatives: tuple[str, ...] = ()
    spdx_expression: Optional[str] = None
    file_reference: Optional[str] = None
    unrecognised: tuple[str, ...] = ()

    @property
    def is_recognised(self) -> bool:
        """True when every component mapped to an SPDX identifier."""
        return not self.unrecognised and self.spdx_expression is not None


@dataclass(frozen=True)
class Violation:
    """A rule violation found during validation.

    Attributes:
        rule_id: Stable rule identifier (e.g., "REQ-01").
        severity: Blocking error or advisory warning.
        message: Human-readable description.
        field: Field the violation refers to, when applicable.
        line: 1-based source line, when known.
    """

    rule_id: str
    severity: Severity
    message: str
    field: Optional[str] = None
    line: Optional[int] = None

    @property
    def is_error(self) -> bool:
        return self.severity is Severity.ERROR

    def to_dict(self) -> dict:
        return {
            "rule_id": self.rule_id,
            "severity": self.severity.value,
            "message": self.message,
            "field": self.field,
            "line": self.line,
        }


@dataclass
class ValidationResult:
    """Outcome of validating one DESCRIPTION file.

    Attributes:
        record: The parsed record.
        dependencies: Parsed dependency specs across all dependency fields.
        authors: Parsed authors.
        license: Parsed License field, if present.
        errors: Blocking violations in detection order.
        warnings: Advisory violations in detection order.
    """

    record: MetadataRecord
    dependencies: list[DependencySpec] = field(default_factory=list)
    authors: list[Author] = field(default_factory=list)
    license: Optional[LicenseInfo] = None
    errors: list[Violation] = field(default_factory=list)
    warnings: list[Violation] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        """True when there are no blocking errors."""
        return not self.errors

    @property
    def violations(self) -> list[Violation]:
        """Errors followed by warnings."""
        return [*self.errors, *self.warnings]

    @property
    def package(self) -> Optional[str]:
        """Package name from the record, if present."""
        return self.record.get("Package")

    def add(self, violation: Violation) -> None:
        """Append a violation to the list matching its severity."""
        if violation.is_error:
            self.errors.append(violation)
        else:
            self.warnings.append(violation)

    def dependencies_in(self, field_name: str) -> list[DependencySpec]:
        """Dependencies declared in a single field."""
        return [d for d in self.dependencies if d.field == field_name]
