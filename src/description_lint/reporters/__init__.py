"""Output reporters for validation results.

This module provides reporters for rendering a validation result to
various output formats (Markdown, JSON).
"""

from description_lint.reporters.base import BaseReporter
from description_lint.reporters.json import JsonReporter
from description_lint.reporters.markdown import MarkdownReporter

__all__ = ["BaseReporter", "JsonReporter", "MarkdownReporter", "get_reporter"]

_REPORTERS: dict[str, type[BaseReporter]] = {
    "markdown": MarkdownReporter,
    "json": JsonReporter,
}


def get_reporter(format_name: str) -> BaseReporter:
    """Get a reporter instance by format name.

    Args:
        format_name: "markdown" or "json".

    Raises:
        ValueError: If no reporter handles the format.
    """
    try:
        return _REPORTERS[format_name]()
    except KeyError:
        raise ValueError(
            f"Unknown report format '{format_name}'. "
            f"Supported formats: {', '.join(_REPORTERS)}"
        ) from None
