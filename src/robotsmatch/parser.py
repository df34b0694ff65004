# SPDX-License-Identifier: BSD-3-Clause

"""
Tokenizer for robots.txt files.

There is no strict grammar that real-world robots.txt files follow, so
this parser accepts anything and skips what does not look like a
directive. Some common mistakes are tolerated:
  - a UTF-8 byte order mark at the start of the file
  - LF, CR and CR LF line endings, even mixed
  - whitespace instead of a colon between key and value
  - misspelled keys, such as C{disalow} (see L{robotsmatch.keys})

Parsing produces a stream of events:
  - one L{StartOfFile}
  - per logical line, optionally a L{Directive}, followed by exactly
    one L{LineMetadata} that describes the line
  - one L{EndOfFile}

Several consumers can share a single parse through L{parse_into}.
"""

from __future__ import annotations

import re
from codecs import BOM_UTF8
from collections.abc import Iterator
from logging import getLogger
from typing import NamedTuple, Protocol, Union

from robotsmatch.keys import DirectiveKind, classify_key
from robotsmatch.typing import LoggerT
from robotsmatch.urls import escape_pattern

MAX_LINE_LEN = 2083 * 8
"""
Line length limit in bytes.

Certain browsers limit URLs to 2083 bytes, so it is fairly safe to assume
that a valid line is never longer than several times that. Longer lines
keep their first C{MAX_LINE_LEN - 1} bytes.
"""

UTF8_BOM = BOM_UTF8

_LINE_END = re.compile(rb"\r\n|\r|\n")
_WHITESPACE = re.compile(r"[ \t]+")

_LOG = getLogger(__name__)


class StartOfFile(NamedTuple):
    """Emitted before the first line."""


class EndOfFile(NamedTuple):
    """Emitted after the last line."""

    line_count: int
    """Number of logical lines in the file."""


class Directive(NamedTuple):
    """A key/value line."""

    kind: DirectiveKind
    lineno: int
    value: str
    """
    The value, stripped of whitespace. For C{allow} and C{disallow}
    it has been normalized by L{escape_pattern}.
    """
    key: str
    """The key as written; this is how unknown directives are told apart."""


class LineMetadata(NamedTuple):
    """What the parser found on a line, whether or not it was a directive."""

    lineno: int
    is_empty: bool = False
    """The line contains nothing but whitespace."""
    has_comment: bool = False
    is_comment: bool = False
    """The line contains nothing but a comment."""
    has_directive: bool = False
    is_acceptable_typo: bool = False
    is_line_too_long: bool = False
    is_missing_colon_separator: bool = False


ParseEvent = Union[StartOfFile, Directive, LineMetadata, EndOfFile]


class ParseConsumer(Protocol):
    """Anything that accepts parse events, one at a time."""

    def feed(self, event: ParseEvent) -> None:
        ...


def split_robots_lines(body: str | bytes) -> list[bytes]:
    """
    Splits the contents of a robots.txt file into logical lines.

    A leading byte order mark, or any prefix of one, is dropped.
    A line terminator at the very end yields a final empty line.

    @param body:
        Contents of a robots.txt file. Text is encoded as UTF-8,
        so lengths are measured in bytes either way.
    """
    if isinstance(body, str):
        body = body.encode("utf-8", "surrogatepass")
    bom_len = 0
    for actual, expected in zip(body, UTF8_BOM):
        if actual != expected:
            break
        bom_len += 1
    return _LINE_END.split(body[bom_len:])


def _parse_line(
    lineno: int, line: str, too_long: bool, unknowns: set[str], logger: LoggerT
) -> Iterator[Directive | LineMetadata]:
    content, hash_sign, _ = line.partition("#")
    has_comment = bool(hash_sign)
    content = content.strip()
    if not content:
        yield LineMetadata(
            lineno,
            is_empty=not has_comment,
            has_comment=has_comment,
            is_comment=has_comment,
            is_line_too_long=too_long,
        )
        return

    key, colon, value = content.partition(":")
    key = key.strip()
    if colon:
        value = value.strip()
        if not key:
            logger.error("Line %d has no field name; ignoring line", lineno)
    else:
        # Some people forget the colon; accept whitespace instead as long
        # as it separates exactly two tokens.
        parts = _WHITESPACE.split(content)
        if len(parts) == 2:
            key, value = parts
            logger.warning('Line %d contains no ":"; assuming "%s"', lineno, key)
        else:
            logger.error('Line %d contains no ":"; ignoring line', lineno)
            key = ""
    if not key:
        yield LineMetadata(
            lineno, has_comment=has_comment, is_line_too_long=too_long
        )
        return

    parsed_key = classify_key(key)
    kind = parsed_key.kind
    if parsed_key.is_acceptable_typo:
        logger.warning(
            'Line %d: reading misspelled field "%s" as "%s"', lineno, key, kind.value
        )
    elif kind is DirectiveKind.UNKNOWN:
        field = key.lower()
        if field not in unknowns:
            unknowns.add(field)
            logger.info('Unknown field "%s" (line %d)', key, lineno)
    if kind in (DirectiveKind.ALLOW, DirectiveKind.DISALLOW):
        value = escape_pattern(value)

    yield Directive(kind, lineno, value, key)
    yield LineMetadata(
        lineno,
        has_comment=has_comment,
        has_directive=True,
        is_acceptable_typo=parsed_key.is_acceptable_typo,
        is_line_too_long=too_long,
        is_missing_colon_separator=not colon,
    )


def parse_robots_txt(
    body: str | bytes, logger: LoggerT = _LOG
) -> Iterator[ParseEvent]:
    """
    Parses the contents of a robots.txt file.

    Any input is accepted: lines that do not look like directives
    are described by their L{LineMetadata} only.

    @param body:
        Contents of a robots.txt file.
    @param logger:
        Problems found while parsing are logged here.
    @return:
        Yields parse events in file order.
    """
    yield StartOfFile()
    unknowns: set[str] = set()
    lineno = 0
    for lineno, raw_line in enumerate(split_robots_lines(body), 1):
        too_long = len(raw_line) >= MAX_LINE_LEN
        if too_long:
            logger.warning(
                "Line %d is longer than %d bytes; truncating it",
                lineno,
                MAX_LINE_LEN,
            )
            raw_line = raw_line[: MAX_LINE_LEN - 1]
        line = raw_line.decode("utf-8", "surrogateescape")
        yield from _parse_line(lineno, line, too_long, unknowns, logger)
    yield EndOfFile(lineno)


def parse_into(
    body: str | bytes, *consumers: ParseConsumer, logger: LoggerT = _LOG
) -> None:
    """
    Parses a robots.txt file once, feeding every event to all consumers.
    """
    for event in parse_robots_txt(body, logger):
        for consumer in consumers:
            consumer.feed(event)
