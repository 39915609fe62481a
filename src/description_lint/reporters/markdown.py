"""Markdown reporter for validation results.

This module provides a reporter that renders a validation result as a
Markdown document using Jinja2 templates.
"""

import re
from datetime import datetime
from importlib.resources import files
from pathlib import Path
from typing import Any, Optional

from jinja2 import Environment, FileSystemLoader, Template
from markupsafe import Markup

from description_lint.models import ValidationResult
from description_lint.reporters.base import BaseReporter

_MARKDOWN_SPECIAL = {"&": "&amp;", "<": "&lt;", ">": "&gt;", "|": "\\|"}


def escape_markdown(value: Any) -> str:
    """Escape text placed in Markdown prose or table cells.

    Only characters that start HTML or break table rows are replaced;
    quotes are left as they are.
    """
    if isinstance(value, Markup):
        return value
    text = "" if value is None else str(value)
    return "".join(_MARKDOWN_SPECIAL.get(char, char) for char in text)


def code_span(value: Any) -> Markup:
    """Render ``value`` as an inline code span.

    Code span contents are shown literally, so no escaping is applied; the
    fence is made longer than any backtick run inside the value.
    """
    text = " ".join(str(value).split())
    longest = max((len(run) for run in re.findall(r"`+", text)), default=0)
    fence = "`" * (longest + 1)
    if longest:
        text = f" {text} "
    return Markup(f"{fence}{text}{fence}")


def _environment(**options: Any) -> Environment:
    env = Environment(autoescape=False, finalize=escape_markdown, **options)
    env.filters["code"] = code_span
    return env


class MarkdownReporter(BaseReporter):
    """Reporter that generates a Markdown validation report.

    Values taken from the DESCRIPTION file have ``&``, ``<`` and ``>``
    replaced by entities so raw HTML cannot reach a rendered page. Values
    wrapped with the ``code`` filter are emitted verbatim inside a code
    span, where Markdown shows them literally.

    Attributes:
        template: The Jinja2 template to use for rendering.
    """

    def __init__(self, template_path: Optional[Path] = None) -> None:
        """Initialize the Markdown reporter.

        Args:
            template_path: Optional path to a custom Jinja2 template.
                If not provided, uses the default bundled template.
        """
        if template_path:
            env = _environment(
                loader=FileSystemLoader(template_path.parent),
                keep_trailing_newline=True,
            )
            self.template = env.get_template(template_path.name)
        else:
            self.template = self._load_default_template()

    def _load_default_template(self) -> Template:
        """Load the default bundled Jinja2 template."""
        template_content = (
            files("description_lint.templates")
            .joinpath("report.md.j2")
            .read_text(encoding="utf-8")
        )
        env = _environment(
            keep_trailing_newline=True, trim_blocks=True, lstrip_blocks=True
        )
        return env.from_string(template_content)

    def render(self, result: ValidationResult) -> str:
        """Render a validation result to Markdown.

        Args:
            result: Result of validating one DESCRIPTION file.

        Returns:
            Rendered Markdown document as a string.
        """
        return self.template.render(
            result=result,
            package=result.package,
            version=result.record.get("Version"),
            errors=result.errors,
            warnings=result.warnings,
            dependencies=result.dependencies,
            authors=result.authors,
            license=result.license,
            generated_at=datetime.now(),
        )

    @property
    def format_name(self) -> str:
        return "markdown"

    @property
    def default_extension(self) -> str:
        return ".md"
