"""Author parsing for DESCRIPTION files.

The ``Authors@R`` field holds an R expression, typically::

    c(person("Jane", "Doe", email = "jane@example.org", role = c("aut", "cre")),
      person("John", "Roe", role = "ctb", comment = c(ORCID = "0000-0001-2345-6789")))

This module tokenises and evaluates the small subset of R used there
(``c()``, ``person()``, strings, ``NULL``, named and positional arguments)
without running R. The legacy ``Author`` and ``Maintainer`` fields are
supported as a fallback.
"""

import logging
import re
from dataclasses import dataclass
from typing import Optional, Union

from description_lint.errors import InvalidAuthors
from description_lint.models import Author, MetadataRecord

logger = logging.getLogger(__name__)

AUTHORS_R_FIELD = "Authors@R"
AUTHOR_FIELD = "Author"
MAINTAINER_FIELD = "Maintainer"

# Positional parameter order of R's person()
PERSON_PARAMS = (
    "given", "family", "middle", "email", "role", "comment", "first", "last",
)

DEFAULT_ROLES = frozenset({"aut"})

TOKEN_PATTERN = re.compile(
    r"""
    (?P<ws>\s+)
    |(?P<string>"(?:[^"\\]|\\.)*"|'(?:[^'\\]|\\.)*')
    |(?P<name>[A-Za-z.][A-Za-z0-9._]*|`[^`]*`)
    |(?P<number>\d+(?:\.\d*)?(?:[eE][+-]?\d+)?L?)
    |(?P<punct>[(),=])
    |(?P<comment>\#[^\n]*)
    """,
    re.VERBOSE,
)

MAINTAINER_PATTERN = re.compile(r"^(?P<name>[^<]*?)\s*<(?P<email>[^>]*)>\s*$")

LEGACY_ROLES_PATTERN = re.compile(r"\[(?P<roles>[^\]]*)\]")


@dataclass(frozen=True)
class _Token:
    kind: str
    text: str
    pos: int


# An evaluated R vector: list of (name, value) pairs
_Vector = list[tuple[Optional[str], object]]
_Value = Union[None, str, Author, _Vector]


def _unquote(text: str) -> str:
    body = text[1:-1]
    return re.sub(r"\\(.)", r"\1", body)


def tokenize(source: str) -> list[_Token]:
    """Split an R expression into tokens, dropping whitespace and comments.

    Raises:
        InvalidAuthors: On a character that starts no token.
    """
    tokens: list[_Token] = []
    pos = 0
    while pos < len(source):
        match = TOKEN_PATTERN.match(source, pos)
        if not match:
            raise InvalidAuthors(
                f"unexpected character {source[pos]!r} at offset {pos}",
                field=AUTHORS_R_FIELD,
            )
        kind = match.lastgroup or ""
        if kind not in ("ws", "comment"):
            tokens.append(_Token(kind, match.group(), pos))
        pos = match.end()
    return tokens


class _Evaluator:
    """Recursive-descent evaluator over a token list."""

    def __init__(self, tokens: list[_Token]) -> None:
        self.tokens = tokens
        self.index = 0

    def _peek(self, offset: int = 0) -> Optional[_Token]:
        index = self.index + offset
        return self.tokens[index] if index < len(self.tokens) else None

    def _next(self) -> _Token:
        token = self._peek()
        if token is None:
            raise InvalidAuthors(
                "unexpected end of Authors@R expression", field=AUTHORS_R_FIELD
            )
        self.index += 1
        return token

    def _expect(self, text: str) -> None:
        token = self._next()
        if token.text != text:
            raise InvalidAuthors(
                f"expected {text!r} at offset {token.pos}, got {token.text!r}",
                field=AUTHORS_R_FIELD,
            )

    def parse(self) -> _Value:
        value = self.expression()
        trailing = self._peek()
        if trailing is not None:
            raise InvalidAuthors(
                f"unexpected {trailing.text!r} at offset {trailing.pos}",
                field=AUTHORS_R_FIELD,
            )
        return value

    def expression(self) -> _Value:
        token = self._next()
        if token.kind == "string":
            return _unquote(token.text)
        if token.kind == "number":
            return token.text.rstrip("L")
        if token.kind == "name":
            name = token.text.strip("`")
            following = self._peek()
            if following is not None and following.text == "(":
                return self.call(name)
            if name == "NULL":
                return None
            if name in ("TRUE", "FALSE", "NA"):
                return name
            raise InvalidAuthors(
                f"cannot evaluate variable {name!r} in Authors@R",
                field=AUTHORS_R_FIELD,
            )
        raise InvalidAuthors(
            f"unexpected {token.text!r} at offset {token.pos}",
            field=AUTHORS_R_FIELD,
        )

    def arguments(self) -> list[tuple[Optional[str], _Value]]:
        """Parse ``( [name =] expr, ... )``; empty slots evaluate to None."""
        self._expect("(")
        args: list[tuple[Optional[str], _Value]] = []
        token = self._peek()
        if token is not None and token.text == ")":
            self._next()
            return args

        while True:
            token = self._peek()
            if token is None:
                raise InvalidAuthors(
                    "unterminated argument list", field=AUTHORS_R_FIELD
                )
            if token.text in (",", ")"):
                args.append((None, None))
            else:
                name = None
                assign = self._peek(1)
                is_named = assign is not None and assign.text == "="
                if token.kind in ("name", "string") and is_named:
                    if token.kind == "name":
                        name = token.text.strip("`")
                    else:
                        name = _unquote(token.text)
                    self.index += 2
                args.append((name, self.expression()))

            separator = self._next()
            if separator.text == ")":
                return args
            if separator.text != ",":
                raise InvalidAuthors(
                    f"expected ',' or ')' at offset {separator.pos}, "
                    f"got {separator.text!r}",
                    field=AUTHORS_R_FIELD,
                )

    def call(self, function: str) -> _Value:
        args = self.arguments()
        if function in ("c", "list"):
            return _combine(args)
        if function == "person":
            return _make_person(args)
        if function == "as.person" and len(args) == 1 and isinstance(args[0][1], str):
            return _person_from_text(args[0][1])
        raise InvalidAuthors(
            f"unsupported function {function}() in Authors@R",
            field=AUTHORS_R_FIELD,
        )


def _combine(args: list[tuple[Optional[str], _Value]]) -> _Vector:
    """Flatten ``c()`` arguments into a single named vector."""
    vector: _Vector = []
    for name, value in args:
        if value is None:
            continue
        if isinstance(value, list):
            vector.extend(value)
        else:
            vector.append((name, value))
    return vector


def _strings(value: _Value) -> list[str]:
    if value is None:
        return []
    if isinstance(value, list):
        return [str(v) for _, v in value if isinstance(v, str)]
    if isinstance(value, str):
        return [value]
    raise InvalidAuthors("person() argument must be a string", field=AUTHORS_R_FIELD)


def _make_person(args: list[tuple[Optional[str], _Value]]) -> Author:
    bound: dict[str, _Value] = {}
    positional = iter(PERSON_PARAMS)
    named = {name for name, _ in args if name}

    for name, value in args:
        if name is not None:
            if name not in PERSON_PARAMS:
                raise InvalidAuthors(
                    f"unknown person() argument {name!r}", field=AUTHORS_R_FIELD
                )
            bound[name] = value
            continue
        # Positional arguments fill the parameters not given by name
        for param in positional:
            if param not in named:
                bound[param] = value
                break
        else:
            raise InvalidAuthors(
                "too many arguments to person()", field=AUTHORS_R_FIELD
            )

    given = _strings(bound.get("given")) or _strings(bound.get("first"))
    given += _strings(bound.get("middle"))
    family = _strings(bound.get("family")) or _strings(bound.get("last"))
    emails = _strings(bound.get("email"))
    roles = frozenset(_strings(bound.get("role"))) or DEFAULT_ROLES

    comment_parts: list[str] = []
    orcid = None
    comment = bound.get("comment")
    if isinstance(comment, list):
        for key, value in comment:
            if key == "ORCID":
                orcid = str(value)
            elif key:
                comment_parts.append(f"{key}: {value}")
            else:
                comment_parts.append(str(value))
    elif isinstance(comment, str):
        comment_parts.append(comment)

    return Author(
        given=" ".join(given),
        family=" ".join(family),
        email=emails[0] if emails else None,
        roles=roles,
        comment="; ".join(comment_parts) or None,
        orcid=orcid,
    )


def _person_from_text(text: str) -> Author:
    """Build an author from ``"Given Family <email> [roles]"`` text."""
    roles = DEFAULT_ROLES
    role_match = LEGACY_ROLES_PATTERN.search(text)
    if role_match:
        listed = role_match.group("roles").split(",")
        roles = frozenset(r.strip() for r in listed if r.strip())
        text = text[: role_match.start()] + text[role_match.end() :]

    email = None
    text = text.strip()
    email_match = MAINTAINER_PATTERN.match(text)
    if email_match:
        email = email_match.group("email").strip() or None
        text = email_match.group("name")

    given, _, family = text.strip().rpartition(" ")
    if not given:
        given, family = family, ""
    return Author(given=given, family=family, email=email, roles=roles)


def parse_authors_r(source: str) -> list[Author]:
    """Evaluate an ``Authors@R`` expression.

    Args:
        source: The field value, e.g. ``c(person("A", "B", role = "cre"))``.

    Returns:
        Authors in declaration order.

    Raises:
        InvalidAuthors: If the expression is empty, malformed, uses
            unsupported functions, or yields something other than persons.
    """
    if not source.strip():
        raise InvalidAuthors("Authors@R is empty", field=AUTHORS_R_FIELD)

    value = _Evaluator(tokenize(source)).parse()
    if isinstance(value, Author):
        return [value]
    if isinstance(value, list):
        authors = [v for _, v in value if isinstance(v, Author)]
        if len(authors) == len(value):
            return authors
    raise InvalidAuthors(
        "Authors@R must evaluate to person() entries", field=AUTHORS_R_FIELD
    )


def _split_legacy(text: str) -> list[str]:
    """Split a legacy Author field on commas and 'and' outside brackets."""
    flattened = " ".join(text.split())
    parts: list[str] = []
    depth = 0
    current = ""
    for char in flattened:
        if char in "[(<":
            depth += 1
        elif char in "])>":
            depth -= 1
        if char == "," and depth == 0:
            parts.append(current)
            current = ""
        else:
            current += char
    parts.append(current)

    names: list[str] = []
    for part in parts:
        names.extend(re.split(r"\s+and\s+", part.strip()))
    return [n.strip() for n in names if n.strip()]


def parse_legacy_authors(
    author: Optional[str], maintainer: Optional[str]
) -> list[Author]:
    """Build authors from the legacy ``Author`` and ``Maintainer`` fields.

    The maintainer becomes the creator. If they are also listed in
    ``Author`` the two entries are merged.
    """
    authors = [_person_from_text(entry) for entry in _split_legacy(author or "")]

    if maintainer and maintainer.strip():
        creator = _person_from_text(" ".join(maintainer.split()))
        for index, existing in enumerate(authors):
            if existing.full_name == creator.full_name:
                authors[index] = Author(
                    given=existing.given,
                    family=existing.family,
                    email=creator.email or existing.email,
                    roles=existing.roles | {"cre"},
                    comment=existing.comment,
                    orcid=existing.orcid,
                )
                break
        else:
            authors.append(
                Author(
                    given=creator.given,
                    family=creator.family,
                    email=creator.email,
                    roles=frozenset({"cre"}),
                )
            )
    return authors


def parse_authors(record: MetadataRecord) -> list[Author]:
    """Return the authors declared in ``record``.

    ``Authors@R`` takes precedence; otherwise the legacy ``Author`` and
    ``Maintainer`` fields are used.

    Raises:
        InvalidAuthors: If ``Authors@R`` is present but cannot be evaluated.
    """
    authors_r = record.get(AUTHORS_R_FIELD)
    if authors_r is not None:
        authors = parse_authors_r(authors_r)
        logger.debug("Parsed %d authors from Authors@R", len(authors))
        return authors
    return parse_legacy_authors(record.get(AUTHOR_FIELD), record.get(MAINTAINER_FIELD))
