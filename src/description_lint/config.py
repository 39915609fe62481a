"""Validator configuration.

Settings come from, in order of precedence: an explicit file passed on the
command line, ``.description-lint.toml`` in the working directory, or a
``[tool.description-lint]`` table in ``pyproject.toml``. Anything not set
keeps its default.
"""

import logging
import tomllib
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Optional

from description_lint.errors import ConfigError
from description_lint.models import DuplicatePolicy

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".description-lint.toml"
PYPROJECT_FILENAME = "pyproject.toml"
PYPROJECT_TABLE = "description-lint"

DEFAULT_REQUIRED_FIELDS = ("Package", "Version", "Title", "Description", "License")


@dataclass(frozen=True)
class ValidatorConfig:
    """Thresholds and policies applied by the validator.

    Attributes:
        title_max_length: Titles longer than this produce a warning.
        description_line_width: Description lines wider than this produce
            a warning.
        required_fields: Fields whose absence is a blocking error.
        duplicate_policy: How repeated field names are handled.
        disabled_rules: Rule ids to skip (e.g. ``{"TITLE-02"}``).
        check_title_case: Whether to check Title Case at all.
    """

    title_max_length: int = 65
    description_line_width: int = 80
    required_fields: tuple[str, ...] = DEFAULT_REQUIRED_FIELDS
    duplicate_policy: DuplicatePolicy = DuplicatePolicy.REJECT
    disabled_rules: frozenset[str] = field(default_factory=frozenset)
    check_title_case: bool = True

    def is_enabled(self, rule_id: str) -> bool:
        return rule_id not in self.disabled_rules

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ValidatorConfig":
        """Build a config from a TOML table.

        Keys may use dashes or underscores.

        Raises:
            ConfigError: On unknown keys or values of the wrong type.
        """
        known = {f.name for f in fields(cls)}
        kwargs: dict[str, Any] = {}
        for key, value in data.items():
            name = key.replace("-", "_")
            if name not in known:
                raise ConfigError(f"Unknown configuration key: {key!r}")
            kwargs[name] = value

        try:
            if "title_max_length" in kwargs:
                kwargs["title_max_length"] = _positive_int(
                    kwargs["title_max_length"], "title-max-length"
                )
            if "description_line_width" in kwargs:
                kwargs["description_line_width"] = _positive_int(
                    kwargs["description_line_width"], "description-line-width"
                )
            if "required_fields" in kwargs:
                kwargs["required_fields"] = tuple(
                    _string_list(kwargs["required_fields"], "required-fields")
                )
            if "disabled_rules" in kwargs:
                kwargs["disabled_rules"] = frozenset(
                    _string_list(kwargs["disabled_rules"], "disabled-rules")
                )
            if "duplicate_policy" in kwargs:
                kwargs["duplicate_policy"] = DuplicatePolicy(kwargs["duplicate_policy"])
            check_case = kwargs.get("check_title_case", True)
            if not isinstance(check_case, bool):
                raise ConfigError("check-title-case must be true or false")
        except ValueError as e:
            if isinstance(e, ConfigError):
                raise
            raise ConfigError(f"Invalid configuration value: {e}") from e

        return cls(**kwargs)


def _positive_int(value: Any, key: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ConfigError(f"{key} must be a positive integer, got {value!r}")
    return value


def _string_list(value: Any, key: str) -> list[str]:
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigError(f"{key} must be a list of strings")
    return value


def _read_toml(path: Path) -> dict[str, Any]:
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Cannot read configuration file {path}: {e}") from e


def load_config(
    path: Optional[Path] = None, cwd: Optional[Path] = None
) -> ValidatorConfig:
    """Load validator configuration.

    Args:
        path: Explicit configuration file. Its top-level table (or its
            ``[tool.description-lint]`` table, for a pyproject.toml) is used.
        cwd: Directory searched for configuration files when ``path`` is
            not given. Defaults to the current directory.

    Returns:
        The loaded configuration, or defaults when no file is found.

    Raises:
        ConfigError: If a configuration file is unreadable or invalid.
    """
    if path is not None:
        data = _read_toml(path)
        if path.name == PYPROJECT_FILENAME:
            data = data.get("tool", {}).get(PYPROJECT_TABLE, {})
        logger.debug("Using configuration from %s", path)
        return ValidatorConfig.from_dict(data)

    base = cwd or Path.cwd()
    local = base / CONFIG_FILENAME
    if local.is_file():
        logger.debug("Using configuration from %s", local)
        return ValidatorConfig.from_dict(_read_toml(local))

    pyproject = base / PYPROJECT_FILENAME
    if pyproject.is_file():
        table = _read_toml(pyproject).get("tool", {}).get(PYPROJECT_TABLE)
        if table is not None:
            logger.debug("Using [tool.%s] from %s", PYPROJECT_TABLE, pyproject)
            return ValidatorConfig.from_dict(table)

    return ValidatorConfig()
