"""JSON reporter for validation results."""

import json
from typing import Any

from description_lint.models import ValidationResult
from description_lint.reporters.base import BaseReporter


class JsonReporter(BaseReporter):
    """Reporter that serialises a validation result as a JSON document."""

    def __init__(self, indent: int = 2) -> None:
        self.indent = indent

    def to_dict(self, result: ValidationResult) -> dict[str, Any]:
        """Build the JSON-compatible structure for ``result``."""
        license_data = None
        if result.license is not None:
            license_data = {
                "raw": result.license.raw,
                "spdx": result.license.spdx_expression,
                "file": result.license.file_reference,
            }

        return {
            "package": result.package,
            "version": result.record.get("Version"),
            "ok": result.ok,
            "fields": dict(result.record.items()),
            "dependencies": [
                {
                    "field": spec.field,
                    "name": spec.name,
                    "operator": spec.constraint.operator if spec.constraint else None,
                    "version": (
                        str(spec.constraint.version) if spec.constraint else None
                    ),
                }
                for spec in result.dependencies
            ],
            "authors": [
                {
                    "given": author.given,
                    "family": author.family,
                    "email": author.email,
                    "roles": sorted(author.roles),
                    "orcid": author.orcid,
                }
                for author in result.authors
            ],
            "license": license_data,
            "errors": [v.to_dict() for v in result.errors],
            "warnings": [v.to_dict() for v in result.warnings],
        }

    def render(self, result: ValidationResult) -> str:
        return json.dumps(self.to_dict(result), indent=self.indent) + "\n"

    @property
    def format_name(self) -> str:
        return "json"

    @property
    def default_extension(self) -> str:
        return ".json"
