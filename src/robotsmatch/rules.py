# SPDX-License-Identifier: BSD-3-Clause

"""
Checking many URLs against one robots.txt file.

L{RuleIndex.parse} parses the file once and stores its rules per user
agent. Checks against the index give the same verdicts as
L{robotsmatch.matcher.MatchResolver}, but only cost a pass over the
rules that apply, instead of a full parse per URL.

A built index is never modified, so it can be shared freely, also
between threads.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from logging import getLogger
from typing import NamedTuple

from robotsmatch.keys import DirectiveKind
from robotsmatch.matcher import (
    Match,
    decide,
    extract_user_agent,
    implied_directory_pattern,
    is_global_agent,
)
from robotsmatch.parser import (
    Directive,
    EndOfFile,
    ParseEvent,
    StartOfFile,
    parse_into,
)
from robotsmatch.pattern import match_priority
from robotsmatch.typing import LoggerT
from robotsmatch.urls import path_of

_LOG = getLogger(__name__)


class Rule(NamedTuple):
    """An C{allow} or C{disallow} rule."""

    pattern: str
    """Pattern, as normalized by the parser."""
    lineno: int
    allow: bool


class UrlCheckResult(NamedTuple):
    """The verdict for one URL."""

    url: str
    allowed: bool
    rule: Rule | None
    """The rule that decided, or C{None} if no rule matched."""

    @property
    def matching_line(self) -> int:
        """Line number of the deciding rule, or 0 if no rule matched."""
        return 0 if self.rule is None else self.rule.lineno

    @property
    def matched_pattern(self) -> str:
        """Pattern of the deciding rule, or an empty string."""
        return "" if self.rule is None else self.rule.pattern


class _Group:
    __slots__ = ("agents", "is_global", "rules")

    def __init__(self) -> None:
        self.agents: list[str] = []
        self.is_global = False
        self.rules: list[Rule] = []


class RuleCollector:
    """
    Parse event consumer that collects rules into a L{RuleIndex}.

    Groups are delimited the same way as in
    L{robotsmatch.matcher.MatchResolver}: a C{user-agent} line after
    an C{allow} or C{disallow} line starts a new group.
    """

    def __init__(self) -> None:
        self._groups: list[_Group] = []
        self._group: _Group | None = None
        self._seen_separator = False

    def feed(self, event: ParseEvent) -> None:
        """Processes a single parse event."""
        if isinstance(event, StartOfFile):
            self._groups = []
            self._group = None
            self._seen_separator = False
        elif isinstance(event, EndOfFile):
            self._group = None
        elif isinstance(event, Directive):
            kind = event.kind
            if kind is DirectiveKind.USER_AGENT:
                self._user_agent(event.value)
            elif kind is DirectiveKind.ALLOW:
                self._rule(event.lineno, event.value, True)
            elif kind is DirectiveKind.DISALLOW:
                self._rule(event.lineno, event.value, False)

    def _user_agent(self, value: str) -> None:
        group = self._group
        if group is None or self._seen_separator:
            group = self._group = _Group()
            self._groups.append(group)
            self._seen_separator = False

        if is_global_agent(value):
            group.is_global = True
        else:
            name = extract_user_agent(value).lower()
            if name and name not in group.agents:
                group.agents.append(name)

    def _rule(self, lineno: int, pattern: str, allow: bool) -> None:
        group = self._group
        if group is None:
            # Rules outside of any group are void.
            return
        self._seen_separator = True

        if allow:
            # An empty allow rule would only ever match with priority 0,
            # which never decides anything.
            if pattern:
                group.rules.append(Rule(pattern, lineno, True))
                directory = implied_directory_pattern(pattern)
                if directory is not None:
                    group.rules.append(Rule(directory, lineno, True))
        elif pattern:
            # An empty disallow rule disallows nothing.
            group.rules.append(Rule(pattern, lineno, False))

    def build(self) -> RuleIndex:
        """Creates an index of the rules collected so far."""
        global_rules: list[Rule] = []
        agent_rules: dict[str, list[Rule]] = {}
        for group in self._groups:
            if group.is_global:
                global_rules += group.rules
            for agent in group.agents:
                # An agent in multiple groups gets the rules of all of them.
                agent_rules.setdefault(agent, []).extend(group.rules)
        return RuleIndex(global_rules, agent_rules)


class RuleIndex:
    """
    The rules of a robots.txt file, indexed by user agent.

    Use L{parse} to create an index from the contents of a file.
    """

    @classmethod
    def parse(cls, body: str | bytes, logger: LoggerT = _LOG) -> RuleIndex:
        """
        Parses a robots.txt file into an index.

        @param body:
            Contents of a robots.txt file.
        @param logger:
            Problems found while parsing are logged here.
        """
        collector = RuleCollector()
        parse_into(body, collector, logger=logger)
        return collector.build()

    def __init__(
        self, global_rules: Iterable[Rule], agent_rules: Mapping[str, Iterable[Rule]]
    ):
        """
        Initializes an index.

        @param global_rules:
            Rules of the groups for C{*}.
        @param agent_rules:
            C{{ agent: rules }}
            Rules per user agent; the agent names must be lower case.
            Agents that are named in a group without rules must be
            present with an empty sequence.
        """
        self._global_rules = tuple(global_rules)
        self._agent_rules = {
            agent: tuple(rules) for agent, rules in agent_rules.items()
        }

    @property
    def explicit_agents(self) -> Sequence[str]:
        """
        The lower case names of the user agents that the file addresses
        explicitly, in order of first appearance. C{*} is not included.
        """
        return tuple(self._agent_rules)

    def has_specific_agent(self, user_agent: str) -> bool:
        """
        Returns C{True} iff the file has a group for C{user_agent}.
        """
        return extract_user_agent(user_agent).lower() in self._agent_rules

    def rules_for(self, user_agent: str) -> Sequence[Rule]:
        """
        Returns the rules that apply to C{user_agent}.

        The name is cut at the first character that cannot be part of an
        agent name, so C{Googlebot/2.1} gets the rules for C{Googlebot}.
        If the file has no group for the agent, the rules for C{*} apply.
        """
        agent = extract_user_agent(user_agent).lower()
        return self._agent_rules.get(agent, self._global_rules)

    def check_url(self, user_agent: str, url: str) -> UrlCheckResult:
        """
        Checks whether C{user_agent} may fetch C{url}.

        @param url:
            The URL to check; it must be percent-encoded already.
            If no path can be found in it, C{/} is checked.
        """
        return self._check(url, self.rules_for(user_agent))

    def check_urls(
        self, user_agent: str, urls: Iterable[str]
    ) -> list[UrlCheckResult]:
        """
        Checks whether C{user_agent} may fetch each of C{urls}.

        @return:
            One result per URL, in the same order.
        """
        rules = self.rules_for(user_agent)
        return [self._check(url, rules) for url in urls]

    @staticmethod
    def _check(url: str, rules: Sequence[Rule]) -> UrlCheckResult:
        path = path_of(url)
        best_allow = best_disallow = Match()
        allow_rule = disallow_rule = None
        for rule in rules:
            priority = match_priority(path, rule.pattern)
            if rule.allow:
                if priority > best_allow.priority:
                    best_allow = Match(priority, rule.lineno)
                    allow_rule = rule
            elif priority > best_disallow.priority:
                best_disallow = Match(priority, rule.lineno)
                disallow_rule = rule

        # Without a deciding rule, everything is allowed: this also covers
        # agents that are named in a group that has no rules.
        disallowed = bool(decide(best_allow, best_disallow))
        if disallowed:
            return UrlCheckResult(url, False, disallow_rule)
        else:
            return UrlCheckResult(url, True, allow_rule)


def batch_check(
    body: str | bytes, user_agent: str, urls: Iterable[str], logger: LoggerT = _LOG
) -> list[UrlCheckResult]:
    """
    Checks whether C{user_agent} may fetch each of C{urls},
    parsing the robots.txt file only once.
    """
    return RuleIndex.parse(body, logger).check_urls(user_agent, urls)
