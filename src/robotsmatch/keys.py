# SPDX-License-Identifier: BSD-3-Clause

"""Classification of the field names (keys) of robots.txt lines."""

from __future__ import annotations

from enum import Enum
from typing import NamedTuple


class DirectiveKind(Enum):
    """The kinds of directives that we distinguish."""

    USER_AGENT = "user-agent"
    ALLOW = "allow"
    DISALLOW = "disallow"
    SITEMAP = "sitemap"
    UNKNOWN = "unknown"
    """Any field we do not recognize; the raw key is kept alongside."""


# Misspellings seen often enough in the wild to accept them.
# No misspelling of "allow" is accepted.
_KEY_TABLE: tuple[tuple[DirectiveKind, str, tuple[str, ...]], ...] = (
    (DirectiveKind.USER_AGENT, "user-agent", ("useragent", "user agent")),
    (DirectiveKind.ALLOW, "allow", ()),
    (
        DirectiveKind.DISALLOW,
        "disallow",
        ("dissallow", "dissalow", "disalow", "diasllow", "disallaw"),
    ),
    (DirectiveKind.SITEMAP, "sitemap", ("site-map",)),
)


class ParsedKey(NamedTuple):
    """Result of L{classify_key}."""

    kind: DirectiveKind
    is_acceptable_typo: bool
    text: str
    """The key exactly as it was written."""


def classify_key(key: str) -> ParsedKey:
    """
    Determines which directive a key stands for.

    Keys are compared case-insensitively and by prefix, so C{Disallowed}
    is read as C{disallow}. A fixed set of common misspellings is accepted
    as well; such keys are flagged as typos.

    @param key:
        Field name, with surrounding whitespace already removed.
    """
    folded = key.lower()
    for kind, canonical, typos in _KEY_TABLE:
        if folded.startswith(canonical):
            return ParsedKey(kind, False, key)
        if typos and folded.startswith(typos):
            return ParsedKey(kind, True, key)
    return ParsedKey(DirectiveKind.UNKNOWN, False, key)
