"""Package version parsing and ordering.

Versions are sequences of non-negative integers separated by ``.`` or
``-`` (e.g. ``1.2.3`` or ``0.1-7``). Comparison treats missing trailing
components as zero, so ``1.9`` and ``1.9.0`` are equal.
"""

import functools
import logging
import re
from dataclasses import dataclass, field
from typing import Union

from description_lint.errors import InvalidVersion

logger = logging.getLogger(__name__)

VERSION_SEPARATOR = re.compile(r"[.-]")

# Last component at or above this marks an in-development version (0.1.0.9000)
DEVELOPMENT_THRESHOLD = 9000

MIN_COMPONENTS = 2


@functools.total_ordering
@dataclass(frozen=True, eq=False)
class Version:
    """Immutable, totally ordered package version.

    Attributes:
        components: Integer components in source order.
        text: The version as written in the source.
    """

    components: tuple[int, ...]
    text: str = field(default="")

    def __post_init__(self) -> None:
        if not self.text:
            object.__setattr__(self, "text", ".".join(str(c) for c in self.components))

    @property
    def _key(self) -> tuple[int, ...]:
        """Components with trailing zeros removed; equal versions share a key."""
        key = list(self.components)
        while key and key[-1] == 0:
            key.pop()
        return tuple(key)

    @property
    def is_development(self) -> bool:
        """True for versions like ``0.1.0.9000`` used between releases."""
        return self.components[-1] >= DEVELOPMENT_THRESHOLD

    def _padded(self, other: "Version") -> tuple[tuple[int, ...], tuple[int, ...]]:
        width = max(len(self.components), len(other.components))
        left = self.components + (0,) * (width - len(self.components))
        right = other.components + (0,) * (width - len(other.components))
        return left, right

    def __eq__(self, other: object) -> bool:
        # Strings are not coerced; hashes must agree for equal objects
        if not isinstance(other, Version):
            return NotImplemented
        left, right = self._padded(other)
        return left == right

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        left, right = self._padded(other)
        return left < right

    def __hash__(self) -> int:
        return hash(self._key)

    def __str__(self) -> str:
        return self.text


VersionLike = Union[str, Version]


def parse_version(text: str) -> Version:
    """Parse a version string.

    Args:
        text: Version such as ``"1.2.3"`` or ``"0.1-7"``. Surrounding
            whitespace is ignored.

    Returns:
        The parsed Version, keeping the original text.

    Raises:
        InvalidVersion: If a component is empty or non-numeric, or there
            are fewer than two components.
    """
    stripped = text.strip() if text else ""
    if not stripped:
        raise InvalidVersion("empty version string")

    parts = VERSION_SEPARATOR.split(stripped)
    if len(parts) < MIN_COMPONENTS:
        raise InvalidVersion(
            f"version '{stripped}' needs at least {MIN_COMPONENTS} components"
        )

    components = []
    for part in parts:
        if not part.isdigit() or not part.isascii():
            raise InvalidVersion(
                f"version '{stripped}' has non-numeric component '{part}'"
            )
        components.append(int(part))

    return Version(components=tuple(components), text=stripped)


def _coerce(value: VersionLike) -> Version:
    if isinstance(value, Version):
        return value
    return parse_version(value)


def compare_versions(a: VersionLike, b: VersionLike) -> int:
    """Compare two versions.

    Returns:
        -1 if ``a < b``, 0 if equal, 1 if ``a > b``.

    Raises:
        InvalidVersion: If either string is not a valid version.
    """
    left, right = _coerce(a), _coerce(b)
    if left < right:
        return -1
    if left == right:
        return 0
    return 1


def sort_versions(versions: list[VersionLike]) -> list[Version]:
    """Return versions parsed and sorted ascending."""
    return sorted(_coerce(v) for v in versions)
