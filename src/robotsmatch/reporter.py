# SPDX-License-Identifier: BSD-3-Clause

"""
Collects a line-by-line account of how a robots.txt file was parsed.

This is meant for tools that give feedback on robots.txt files:
feed the parse events to a L{ParsingReporter} and inspect its
L{ParsingReporter.parse_results}.
"""

from __future__ import annotations

from enum import Enum, auto
from typing import NamedTuple

from robotsmatch.keys import DirectiveKind
from robotsmatch.parser import Directive, LineMetadata, ParseEvent, StartOfFile

UNSUPPORTED_TAGS = frozenset(
    ("clean-param", "crawl-delay", "host", "noarchive", "noindex", "nofollow")
)
"""
Keys that are in popular use but have no effect on matching.
Other search engines than the major ones may use them.
"""


class TagName(Enum):
    """What a line was recognized as."""

    UNKNOWN = auto()
    """
    The line was skipped, either because it could not be parsed
    or because its key was not recognized.
    """

    USER_AGENT = auto()
    ALLOW = auto()
    DISALLOW = auto()
    SITEMAP = auto()

    UNUSED = auto()
    """The key is recognized but not used, for example C{crawl-delay}."""


_KIND_TO_TAG = {
    DirectiveKind.USER_AGENT: TagName.USER_AGENT,
    DirectiveKind.ALLOW: TagName.ALLOW,
    DirectiveKind.DISALLOW: TagName.DISALLOW,
    DirectiveKind.SITEMAP: TagName.SITEMAP,
}


class ParsedLine(NamedTuple):
    """Parse result of a single line."""

    lineno: int
    tag: TagName
    is_typo: bool
    metadata: LineMetadata


class ParsingReporter:
    """
    Parse event consumer that records what was found on each line.
    """

    def __init__(self) -> None:
        self._tags: dict[int, TagName] = {}
        self._metadata: dict[int, LineMetadata] = {}
        self.last_line_seen = 0
        """Highest line number that an event was received for."""
        self.valid_directives = 0
        """Number of user-agent, allow, disallow and sitemap lines."""
        self.unused_directives = 0
        """Number of lines with a key that has no effect on matching."""

    def feed(self, event: ParseEvent) -> None:
        """Processes a single parse event."""
        if isinstance(event, StartOfFile):
            self._tags.clear()
            self._metadata.clear()
            self.last_line_seen = 0
            self.valid_directives = 0
            self.unused_directives = 0
        elif isinstance(event, Directive):
            tag = _KIND_TO_TAG.get(event.kind)
            if tag is None:
                self.unused_directives += 1
                if event.key.lower() in UNSUPPORTED_TAGS:
                    tag = TagName.UNUSED
                else:
                    tag = TagName.UNKNOWN
            else:
                self.valid_directives += 1
            self._tags[event.lineno] = tag
            self._see_line(event.lineno)
        elif isinstance(event, LineMetadata):
            self._metadata[event.lineno] = event
            self._see_line(event.lineno)

    def _see_line(self, lineno: int) -> None:
        self.last_line_seen = max(self.last_line_seen, lineno)

    def parse_results(self) -> list[ParsedLine]:
        """
        Returns the parse results of all lines that events were
        received for, sorted by line number.
        """
        return [
            ParsedLine(
                lineno,
                self._tags.get(lineno, TagName.UNKNOWN),
                metadata.is_acceptable_typo,
                metadata,
            )
            for lineno, metadata in sorted(self._metadata.items())
        ]
