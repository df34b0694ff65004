# SPDX-License-Identifier: BSD-3-Clause

"""
Decides whether a crawler may fetch a URL, according to a robots.txt file.

The rules are the ones of RFC 9309, plus a few extensions that
major search engines apply:
  - rules are grouped under one or more consecutive C{user-agent} lines;
    a C{user-agent} line that follows an C{allow} or C{disallow} line
    starts a new group
  - a group naming the crawler takes precedence over the C{*} group
  - the longest matching pattern decides; on a tie C{allow} wins
  - C{allow: /dir/index.html} also allows C{/dir/}

L{MatchResolver} evaluates a single path while the file is being parsed.
To check many URLs against the same file, L{robotsmatch.rules.RuleIndex}
avoids parsing it again for each URL.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from enum import Enum, auto
from logging import getLogger
from typing import NamedTuple

from robotsmatch.keys import DirectiveKind
from robotsmatch.parser import (
    Directive,
    ParseEvent,
    StartOfFile,
    parse_into,
)
from robotsmatch.pattern import NO_MATCH_PRIORITY, match_priority
from robotsmatch.typing import LoggerT
from robotsmatch.urls import path_of

_LOG = getLogger(__name__)

_AGENT_NAME = re.compile(r"[A-Za-z_-]*")
_INDEX_PAGE = re.compile(r"/index\.html?$")


def extract_user_agent(user_agent: str) -> str:
    """
    Returns the part of a user agent string that is matched against
    robots.txt: everything up to the first character outside C{[A-Za-z_-]}.

    For example C{Googlebot/2.1} becomes C{Googlebot}.
    """
    match = _AGENT_NAME.match(user_agent)
    assert match is not None
    return match.group()


def is_valid_user_agent_to_obey(user_agent: str) -> bool:
    """
    Returns C{True} iff C{user_agent} can be matched against robots.txt
    as a whole, meaning it is non-empty and consists of C{[A-Za-z_-]} only.
    """
    return bool(user_agent) and extract_user_agent(user_agent) == user_agent


def is_global_agent(value: str) -> bool:
    """
    Returns C{True} iff a C{user-agent} value addresses all crawlers.

    Besides a plain C{*}, this accepts C{*} followed by whitespace and
    anything else; such a value is not searched for agent names.
    """
    return value[:1] == "*" and (len(value) == 1 or value[1].isspace())


def implied_directory_pattern(pattern: str) -> str | None:
    """
    Returns the pattern for the directory of an index page.

    If C{pattern} ends in C{/index.htm} or C{/index.html}, the directory
    itself is allowed too: C{/dir/index.html} implies C{/dir/$}.
    Returns C{None} for other patterns.
    """
    match = _INDEX_PAGE.search(pattern)
    if match is None:
        return None
    return pattern[: match.start() + 1] + "$"


class Match(NamedTuple):
    """The priority and line of the best match of one kind of rule."""

    priority: int = NO_MATCH_PRIORITY
    lineno: int = 0

    def improve(self, priority: int, lineno: int) -> Match:
        """
        Returns a match for C{priority} at C{lineno} if that beats this
        match, otherwise returns this match.
        """
        return Match(priority, lineno) if priority > self.priority else self


def higher_priority_match(disallow: Match, allow: Match) -> Match:
    """Returns the stronger of two matches; a tie favors C{allow}."""
    return disallow if disallow.priority > allow.priority else allow


def decide(allow: Match, disallow: Match) -> bool | None:
    """
    Compares the best C{allow} and C{disallow} matches of one scope.

    @return:
        C{True} if the URL is disallowed, C{False} if it is allowed,
        or C{None} if neither kind of rule matched with a non-empty
        pattern, in which case this scope has no say.
    """
    if allow.priority > 0 or disallow.priority > 0:
        return disallow.priority > allow.priority
    return None


class Scope(Enum):
    """Which crawlers the group currently being parsed applies to."""

    GLOBAL = auto()
    """All crawlers, via C{user-agent: *}."""

    SPECIFIC = auto()
    """One of the crawlers we are evaluating for."""


class _BestMatches:
    __slots__ = ("allow", "disallow")

    def __init__(self) -> None:
        self.allow = Match()
        self.disallow = Match()


class MatchResolver:
    """
    Evaluates the rules of a robots.txt file for one path while the file
    is being parsed.

    Feed it the events of L{robotsmatch.parser.parse_robots_txt},
    then read the verdict from L{disallowed}. Every L{StartOfFile}
    event resets the evaluation, but a resolver is meant for a single
    query and must not be shared between threads.
    """

    def __init__(self, user_agents: Iterable[str], path: str):
        """
        Initializes a resolver.

        @param user_agents:
            Names of the crawler to evaluate for. A group applies if its
            agent name matches any of these, ignoring case. Like in
            C{user-agent} lines, only the leading name counts, so
            C{FooBot/1.0} is treated as C{FooBot}.
        @param path:
            Path, parameters and query of the URL, as returned by
            L{path_of}.
        @raise ValueError:
            If C{path} does not start with C{/}.
        """
        if not path.startswith("/"):
            raise ValueError(f'Path must start with "/", got "{path}"')
        self.path = path
        self.user_agents = frozenset(
            extract_user_agent(agent).lower() for agent in user_agents
        )
        self._best = {scope: _BestMatches() for scope in Scope}
        self._group_scopes: set[Scope] = set()
        self._seen_separator = False
        self._ever_seen_specific_agent = False

    @property
    def ever_seen_specific_agent(self) -> bool:
        """
        C{True} iff the file has a group that explicitly names one of
        our user agents.
        """
        return self._ever_seen_specific_agent

    def feed(self, event: ParseEvent) -> None:
        """Processes a single parse event."""
        if isinstance(event, StartOfFile):
            self._start()
        elif isinstance(event, Directive):
            kind = event.kind
            if kind is DirectiveKind.USER_AGENT:
                self._user_agent(event.value)
            elif kind is DirectiveKind.ALLOW:
                self._rule(event.lineno, event.value, True)
            elif kind is DirectiveKind.DISALLOW:
                self._rule(event.lineno, event.value, False)

    def _start(self) -> None:
        self._best = {scope: _BestMatches() for scope in Scope}
        self._group_scopes = set()
        self._seen_separator = False
        self._ever_seen_specific_agent = False

    def _user_agent(self, value: str) -> None:
        if self._seen_separator:
            self._group_scopes = set()
            self._seen_separator = False

        if is_global_agent(value):
            self._group_scopes.add(Scope.GLOBAL)
        else:
            name = extract_user_agent(value).lower()
            if name and name in self.user_agents:
                self._group_scopes.add(Scope.SPECIFIC)
                self._ever_seen_specific_agent = True

    def _rule(self, lineno: int, pattern: str, allow: bool) -> None:
        scopes = self._group_scopes
        if not scopes:
            # Rules outside of any group are void.
            return
        self._seen_separator = True
        if not pattern:
            # An empty rule never decides anything, but still ends the group.
            return

        scope = Scope.SPECIFIC if Scope.SPECIFIC in scopes else Scope.GLOBAL
        best = self._best[scope]
        if allow:
            best.allow = best.allow.improve(
                match_priority(self.path, pattern), lineno
            )
            directory = implied_directory_pattern(pattern)
            if directory is not None:
                best.allow = best.allow.improve(
                    match_priority(self.path, directory), lineno
                )
        else:
            best.disallow = best.disallow.improve(
                match_priority(self.path, pattern), lineno
            )

    def disallowed(self) -> bool:
        """
        Returns C{True} iff the rules seen disallow fetching our path.

        Rules from a group for one of our agents decide if any of them
        matched. A group naming one of our agents that has no matching
        rules allows everything; only if no such group exists do the
        rules for C{*} apply.
        """
        specific = self._best[Scope.SPECIFIC]
        verdict = decide(specific.allow, specific.disallow)
        if verdict is not None:
            return verdict
        if self._ever_seen_specific_agent:
            return False
        glob = self._best[Scope.GLOBAL]
        return bool(decide(glob.allow, glob.disallow))

    def disallowed_ignoring_global(self) -> bool:
        """
        Like L{disallowed}, but ignores the rules for C{*}: only groups
        naming one of our agents are taken into account.
        """
        specific = self._best[Scope.SPECIFIC]
        return bool(decide(specific.allow, specific.disallow))

    @property
    def matching_line(self) -> int:
        """Line number of the rule that decided, or 0 if no rule matched."""
        scope = Scope.SPECIFIC if self._ever_seen_specific_agent else Scope.GLOBAL
        best = self._best[scope]
        return higher_priority_match(best.disallow, best.allow).lineno


def allowed_by_robots(
    body: str | bytes,
    user_agents: Sequence[str],
    url: str,
    logger: LoggerT = _LOG,
) -> bool:
    """
    Checks whether any of the given user agents may fetch a URL.

    @param body:
        Contents of a robots.txt file.
    @param user_agents:
        Names of the crawler, such as C{["Googlebot"]}.
    @param url:
        The URL to check; it must be percent-encoded already.
    @param logger:
        Problems found in C{body} are logged here.
    @return:
        C{True} iff fetching C{url} is allowed.
    """
    resolver = MatchResolver(user_agents, path_of(url))
    parse_into(body, resolver, logger=logger)
    return not resolver.disallowed()


def one_agent_allowed_by_robots(
    body: str | bytes, user_agent: str, url: str, logger: LoggerT = _LOG
) -> bool:
    """Like L{allowed_by_robots}, for a single user agent."""
    return allowed_by_robots(body, [user_agent], url, logger)
