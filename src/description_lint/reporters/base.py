"""Base interface for output reporters.

Reporters generate formatted output (Markdown, JSON, etc.) from a
validation result.
"""

from abc import ABC, abstractmethod
from pathlib import Path

from description_lint.models import ValidationResult


class BaseReporter(ABC):
    """Abstract base class for output reporters.

    Reporters take a validation result and generate a formatted report
    listing the parsed metadata, errors and warnings.
    """

    @abstractmethod
    def render(self, result: ValidationResult) -> str:
        """Render a validation result to formatted output.

        Args:
            result: Result of validating one DESCRIPTION file.

        Returns:
            Rendered output as a string.
        """
        ...

    def write(self, result: ValidationResult, output_path: Path) -> None:
        """Render and write output to a file.

        Args:
            result: Result of validating one DESCRIPTION file.
            output_path: Path to write the output file.
        """
        content = self.render(result)
        output_path.write_text(content, encoding="utf-8")

    @property
    @abstractmethod
    def format_name(self) -> str:
        """Return the output format name.

        Returns:
            Format name like "markdown" or "json".
        """
        ...

    @property
    @abstractmethod
    def default_extension(self) -> str:
        """Return the default file extension for this format.

        Returns:
            Extension like ".md" or ".json".
        """
        ...
