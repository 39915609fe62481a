"""Exception hierarchy for description_lint.

Structural failures (``MalformedField``) abort parsing. The remaining
errors are raised by single-item parsers and collected into violations by
the validator.
"""

from typing import Optional


class DescriptionError(ValueError):
    """Base class for all DESCRIPTION parsing and validation errors.

    Attributes:
        field: Name of the field the error relates to, if known.
        line: 1-based line number in the source text, if known.
    """

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        line: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.field = field
        self.line = line

    def __str__(self) -> str:
        if self.line is not None:
            return f"line {self.line}: {self.message}"
        return self.message


class MalformedField(DescriptionError):
    """The text cannot be split into field/value pairs."""


class InvalidConstraint(DescriptionError):
    """A dependency entry could not be parsed."""


class InvalidVersion(DescriptionError):
    """A version string is not a dot/hyphen separated sequence of integers."""


class InvalidAuthors(DescriptionError):
    """The Authors@R expression could not be evaluated."""


class ConfigError(DescriptionError):
    """Configuration file is unreadable or holds unknown/invalid settings."""
