"""Parser for DESCRIPTION dependency fields.

Handles ``Depends``, ``Imports``, ``LinkingTo``, ``Suggests`` and
``Enhances`` values: comma-separated package names, each optionally
followed by a parenthesised version constraint, e.g.
``dplyr, ggvis (>= 0.2), R (>= 4.1.0)``.
"""

import logging
import re
from typing import Optional

from description_lint.errors import DescriptionError, InvalidConstraint, InvalidVersion
from description_lint.models import (
    OPERATORS,
    DependencySpec,
    MetadataRecord,
    VersionConstraint,
)
from description_lint.version import parse_version

logger = logging.getLogger(__name__)

DEPENDENCY_FIELDS = ("Depends", "Imports", "LinkingTo", "Suggests", "Enhances")

# Fields whose entries must not repeat one another
OVERLAP_FIELDS = ("Depends", "Imports", "Suggests")

PACKAGE_NAME_PATTERN = re.compile(r"^[A-Za-z][A-Za-z0-9.]*$")

# name [ ( op version ) ]
ENTRY_PATTERN = re.compile(
    r"^(?P<name>[^\s(]*)\s*(?:\((?P<constraint>[^()]*)\))?\s*$",
    re.DOTALL,
)

CONSTRAINT_PATTERN = re.compile(r"^\s*(?P<op>[<>=!~]+)\s*(?P<version>\S+)\s*$")


def split_entries(value: str, field: Optional[str] = None) -> list[str]:
    """Split a dependency value on commas outside parentheses.

    Empty entries (e.g. from a trailing comma) are dropped.

    Raises:
        InvalidConstraint: If parentheses are unbalanced.
    """
    entries: list[str] = []
    depth = 0
    current: list[str] = []
    for char in value:
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth < 0:
                raise InvalidConstraint(
                    f"unbalanced ')' in {value.strip()!r}", field=field
                )
        if char == "," and depth == 0:
            entries.append("".join(current))
            current = []
        else:
            current.append(char)
    if depth != 0:
        raise InvalidConstraint(f"unbalanced '(' in {value.strip()!r}", field=field)
    entries.append("".join(current))
    return [" ".join(e.split()) for e in entries if e.strip()]


def parse_constraint(text: str, field: Optional[str] = None) -> VersionConstraint:
    """Parse the inside of a ``(op version)`` group.

    Raises:
        InvalidConstraint: On a missing or unrecognised operator.
        InvalidVersion: On a malformed version.
    """
    match = CONSTRAINT_PATTERN.match(text)
    if not match:
        raise InvalidConstraint(
            f"malformed version constraint '({text.strip()})'", field=field
        )

    operator = match.group("op")
    if operator not in OPERATORS:
        raise InvalidConstraint(
            f"unknown operator '{operator}' (expected one of {', '.join(OPERATORS)})",
            field=field,
        )

    try:
        version = parse_version(match.group("version"))
    except InvalidVersion as e:
        raise InvalidVersion(e.message, field=field) from e
    return VersionConstraint(operator=operator, version=version)


def parse_dependency(entry: str, field: Optional[str] = None) -> DependencySpec:
    """Parse a single dependency entry such as ``ggvis (>= 0.2)``.

    Raises:
        InvalidConstraint: On an empty or invalid package name, or a bad
            constraint.
        InvalidVersion: On a malformed constraint version.
    """
    text = entry.strip()
    match = ENTRY_PATTERN.match(text)
    if not match:
        raise InvalidConstraint(f"cannot parse dependency {text!r}", field=field)

    name = match.group("name")
    if not name:
        raise InvalidConstraint(f"missing package name in {text!r}", field=field)
    if not PACKAGE_NAME_PATTERN.match(name):
        raise InvalidConstraint(f"invalid package name {name!r}", field=field)

    constraint = None
    if match.group("constraint") is not None:
        constraint = parse_constraint(match.group("constraint"), field=field)

    return DependencySpec(name=name, constraint=constraint, field=field)


def parse_dependencies(
    value: str, field: Optional[str] = None
) -> tuple[list[DependencySpec], list[DescriptionError]]:
    """Parse a whole dependency field, collecting per-entry errors.

    A bad entry is reported and skipped; the remaining entries are still
    parsed.

    Args:
        value: The raw field value.
        field: Field name, recorded on each spec and error.

    Returns:
        Tuple of (parsed specs in source order, errors in source order).
    """
    try:
        entries = split_entries(value, field=field)
    except InvalidConstraint as e:
        return [], [e]

    specs: list[DependencySpec] = []
    errors: list[DescriptionError] = []
    for entry in entries:
        try:
            specs.append(parse_dependency(entry, field=field))
        except (InvalidConstraint, InvalidVersion) as e:
            logger.debug("Skipping dependency entry %r: %s", entry, e)
            errors.append(e)
    return specs, errors


def parse_dependency_field(
    value: str, field: Optional[str] = None
) -> list[DependencySpec]:
    """Parse a dependency field, raising on the first bad entry."""
    entries = split_entries(value, field=field)
    return [parse_dependency(entry, field=field) for entry in entries]


def collect_dependencies(
    record: MetadataRecord,
) -> tuple[list[DependencySpec], list[DescriptionError]]:
    """Parse every dependency field present in ``record``.

    Returns:
        Tuple of (specs across all fields in field order, errors).
    """
    specs: list[DependencySpec] = []
    errors: list[DescriptionError] = []
    for name in DEPENDENCY_FIELDS:
        value = record.get(name)
        if value is None:
            continue
        field_specs, field_errors = parse_dependencies(value, field=name)
        specs.extend(field_specs)
        errors.extend(field_errors)
    return specs, errors


def find_duplicates(specs: list[DependencySpec]) -> dict[str, list[DependencySpec]]:
    """Group specs declared more than once across overlapping fields.

    Returns:
        Package name mapped to every spec declaring it, for names declared
        more than once in Depends, Imports or Suggests.
    """
    seen: dict[str, list[DependencySpec]] = {}
    for spec in specs:
        if spec.field in OVERLAP_FIELDS:
            seen.setdefault(spec.name, []).append(spec)
    return {name: group for name, group in seen.items() if len(group) > 1}
