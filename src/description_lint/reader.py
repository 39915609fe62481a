"""Reader and writer for the DESCRIPTION control format.

A DESCRIPTION file is a sequence of ``Field: value`` headers. Lines that
start with whitespace continue the value of the previous field. This module
turns such text into a :class:`MetadataRecord` and writes records back out,
reproducing the source byte-for-byte when fields carry their raw text.
"""

import logging
import re
from pathlib import Path
from typing import Optional, Union

from description_lint.errors import MalformedField
from description_lint.models import DuplicatePolicy, Field, MetadataRecord

logger = logging.getLogger(__name__)

# Field header: a name starting with a letter, then a colon
HEADER_PATTERN = re.compile(r"^([A-Za-z][A-Za-z0-9@._/-]*):(.*)$")

CONTINUATION_INDENT = "    "

DESCRIPTION_FILENAME = "DESCRIPTION"


def split_lines(text: str) -> list[str]:
    """Split text into lines at "\\n" only, keeping line endings.

    Unlike :meth:`str.splitlines`, form feeds, NEL and the Unicode line and
    paragraph separators stay inside the line they appear in.
    """
    lines = re.split(r"(?<=\n)", text)
    if lines and not lines[-1]:
        lines.pop()
    return lines


def read_fields(text: str) -> list[Field]:
    """Split control-format text into fields in source order.

    Duplicate names are returned as-is; :func:`parse_record` applies the
    duplicate policy.

    Args:
        text: Full file contents.

    Returns:
        Fields with values, header line numbers and raw source text.

    Raises:
        MalformedField: On a continuation line with no field to continue,
            or a line that is neither a header nor a continuation.
    """
    fields: list[Field] = []
    name: Optional[str] = None
    closed = False
    start = 0
    value_lines: list[str] = []
    raw_lines: list[str] = []
    leading: list[str] = []

    def flush() -> None:
        if name is not None:
            fields.append(
                Field(
                    name=name,
                    value="\n".join(value_lines),
                    line=start,
                    raw="".join(raw_lines),
                )
            )

    for line_num, source_line in enumerate(split_lines(text), start=1):
        line = source_line.rstrip("\r\n")

        if not line.strip():
            # A blank line ends the current field; keep it in the raw text
            if name is None:
                leading.append(source_line)
            else:
                raw_lines.append(source_line)
            closed = True
            continue

        if line[0] in " \t":
            if name is None or closed:
                raise MalformedField(
                    "continuation line without a preceding field",
                    line=line_num,
                )
            value_lines.append(line.strip())
            raw_lines.append(source_line)
            continue

        match = HEADER_PATTERN.match(line)
        if not match:
            raise MalformedField(
                f"expected 'Field: value', got {line[:40]!r}",
                line=line_num,
            )

        flush()
        name = match.group(1)
        closed = False
        start = line_num
        value_lines = [match.group(2).strip()]
        raw_lines = [*leading, source_line]
        leading = []

    flush()
    logger.debug("Read %d fields", len(fields))
    return fields


def parse_record(
    text: str,
    duplicate_policy: DuplicatePolicy = DuplicatePolicy.REJECT,
) -> MetadataRecord:
    """Parse control-format text into a MetadataRecord.

    Args:
        text: Full file contents.
        duplicate_policy: ``REJECT`` raises on a repeated field name;
            ``LAST_WINS`` keeps the position of the first occurrence and
            the value of the last.

    Returns:
        The parsed record.

    Raises:
        MalformedField: If the text is structurally invalid or a field is
            repeated under the ``REJECT`` policy.
    """
    ordered: dict[str, Field] = {}
    for item in read_fields(text):
        if item.name in ordered:
            if duplicate_policy is DuplicatePolicy.REJECT:
                first = ordered[item.name]
                raise MalformedField(
                    f"field '{item.name}' repeated "
                    f"(first defined on line {first.line})",
                    field=item.name,
                    line=item.line,
                )
            logger.warning(
                "Field '%s' repeated on line %d; keeping the last value",
                item.name,
                item.line,
            )
        ordered[item.name] = item
    return MetadataRecord(list(ordered.values()))


def format_field(name: str, value: str) -> str:
    """Render a field with continuation lines indented by four spaces."""
    first, *rest = value.split("\n")
    lines = [f"{name}: {first}".rstrip()]
    lines.extend(f"{CONTINUATION_INDENT}{line}" for line in rest)
    return "\n".join(lines) + "\n"


def serialize(record: MetadataRecord, canonical: bool = False) -> str:
    """Write a record back to control-format text.

    Fields that were read from text are written from their raw source, so
    parsing then serialising reproduces the input. Fields built in code are
    formatted with :func:`format_field`.

    Args:
        record: The record to write.
        canonical: Ignore raw source text and format every field with
            :func:`format_field`.
    """
    parts = []
    fields = record.fields
    for index, item in enumerate(fields):
        if canonical or not item.raw:
            parts.append(format_field(item.name, item.value))
        elif item.raw.endswith("\n") or index == len(fields) - 1:
            parts.append(item.raw)
        else:
            # Only the final line of the source may lack a newline
            parts.append(item.raw + "\n")
    return "".join(parts)


def resolve_path(path: Path) -> Path:
    """Return the DESCRIPTION file for a file or package directory path."""
    if path.is_dir():
        return path / DESCRIPTION_FILENAME
    return path


def load(
    path: Union[str, Path],
    duplicate_policy: DuplicatePolicy = DuplicatePolicy.REJECT,
) -> MetadataRecord:
    """Read and parse a DESCRIPTION file.

    Args:
        path: Path to the file, or to a package directory containing one.
        duplicate_policy: See :func:`parse_record`.

    Raises:
        FileNotFoundError: If the file does not exist.
        MalformedField: If the contents are structurally invalid.
    """
    source = resolve_path(Path(path))
    if not source.exists():
        raise FileNotFoundError(f"DESCRIPTION file not found: {source}")

    logger.debug("Loading %s", source)
    return parse_record(source.read_text(encoding="utf-8"), duplicate_policy)
