"""
Unit tests for `robotsmatch.rules`.
"""

from logging import WARNING, getLogger

from pytest import mark

from robotsmatch.matcher import MatchResolver, one_agent_allowed_by_robots
from robotsmatch.parser import parse_into
from robotsmatch.rules import Rule, RuleIndex, UrlCheckResult, batch_check

logger = getLogger(__name__)

EXAMPLE = """
User-agent: unhipbot
Disallow: /

User-agent: webcrawler
User-agent: excite      # comment
Disallow:

User-agent: *
Disallow: /org/plans.html
Allow: /org/
Allow: /serv
# Comment-only lines do not end a group.
Allow: /~mak
Disallow: /
"""

EXAMPLE_URLS = (
    "http://www.example.org/",
    "http://www.example.org/index.html",
    "http://www.example.org/server.html",
    "http://www.example.org/services/fast.html",
    "http://www.example.org/services/slow.html",
    "http://www.example.org/orgo.gif",
    "http://www.example.org/org/about.html",
    "http://www.example.org/org/plans.html",
    "http://www.example.org/%7Ejim/jim.html",
    "http://www.example.org/~mak/mak.html",
)


@mark.parametrize(
    "agent, verdicts",
    (
        ("unhipbot", (False,) * 10),
        ("webcrawler", (True,) * 10),
        ("excite", (True,) * 10),
        (
            "OtherBot",
            (False, False, True, True, True, False, True, False, False, True),
        ),
    ),
)
def test_example(agent, verdicts):
    """Test the verdicts for the example from the robots.txt Internet-Draft."""
    index = RuleIndex.parse(EXAMPLE, logger)
    results = index.check_urls(agent, EXAMPLE_URLS)
    assert [result.url for result in results] == list(EXAMPLE_URLS)
    assert tuple(result.allowed for result in results) == verdicts


def test_explicit_agents():
    """Test the list of agents that have their own group."""
    index = RuleIndex.parse(EXAMPLE, logger)
    assert index.explicit_agents == ("unhipbot", "webcrawler", "excite")
    assert index.has_specific_agent("UnhipBot")
    assert index.has_specific_agent("excite/1.0")
    assert not index.has_specific_agent("OtherBot")
    assert not index.has_specific_agent("*")


def test_rules_for():
    """Test lookup of the rules that apply to an agent."""
    index = RuleIndex.parse(EXAMPLE, logger)
    assert index.rules_for("unhipbot") == (Rule("/", 3, False),)
    assert index.rules_for("excite") == ()
    assert index.rules_for("OtherBot") == (
        Rule("/org/plans.html", 10, False),
        Rule("/org/", 11, True),
        Rule("/serv", 12, True),
        Rule("/~mak", 14, True),
        Rule("/", 15, False),
    )


def test_deciding_rule():
    """Test that the result names the rule that decided."""
    index = RuleIndex.parse(EXAMPLE, logger)
    result = index.check_url("OtherBot", "http://www.example.org/org/plans.html")
    assert result == UrlCheckResult(
        "http://www.example.org/org/plans.html",
        False,
        Rule("/org/plans.html", 10, False),
    )
    assert result.matching_line == 10
    assert result.matched_pattern == "/org/plans.html"

    result = index.check_url("excite", "http://www.example.org/")
    assert result.allowed
    assert result.rule is None
    assert result.matching_line == 0
    assert result.matched_pattern == ""


def test_agent_in_several_groups():
    """Test that an agent named in several groups gets all their rules."""
    body = (
        "user-agent: FooBot\n"
        "disallow: /a\n"
        "user-agent: BarBot\n"
        "disallow: /b\n"
        "user-agent: foobot\n"
        "user-agent: FooBot\n"
        "disallow: /c\n"
    )
    index = RuleIndex.parse(body, logger)
    assert index.explicit_agents == ("foobot", "barbot")
    assert [rule.pattern for rule in index.rules_for("FooBot")] == ["/a", "/c"]


def test_global_and_specific_group():
    """Test a group that names both "*" and a specific agent."""
    body = "user-agent: FooBot\nuser-agent: *\ndisallow: /x\n"
    index = RuleIndex.parse(body, logger)
    assert index.rules_for("FooBot") == (Rule("/x", 3, False),)
    assert index.rules_for("BarBot") == (Rule("/x", 3, False),)


def test_index_page_rule():
    """Test that allowing an index page adds a rule for its directory."""
    body = "user-agent: *\ndisallow: /\nallow: /d/index.htm\n"
    index = RuleIndex.parse(body, logger)
    assert index.rules_for("FooBot") == (
        Rule("/", 2, False),
        Rule("/d/index.htm", 3, True),
        Rule("/d/$", 3, True),
    )
    result = index.check_url("FooBot", "http://example.org/d/")
    assert result.allowed
    assert result.rule == Rule("/d/$", 3, True)


def test_empty_rules_skipped():
    """Test that empty patterns do not end up in the index."""
    body = "user-agent: FooBot\nallow:\ndisallow:\nuser-agent: BarBot\ndisallow: /\n"
    index = RuleIndex.parse(body, logger)
    assert index.rules_for("FooBot") == ()
    assert index.rules_for("BarBot") == (Rule("/", 5, False),)


def test_batch_check(caplog):
    """Test checking several URLs at once and that problems are logged."""
    body = "user-agent: FooBot\ndisalow: /private\n"
    with caplog.at_level(WARNING, logger=__name__):
        results = batch_check(
            body,
            "FooBot",
            ["http://example.org/private/x", "http://example.org/public"],
            logger,
        )
    assert [result.allowed for result in results] == [False, True]
    assert caplog.record_tuples == [
        (
            "test_rules",
            WARNING,
            'Line 2: reading misspelled field "disalow" as "disallow"',
        )
    ]


CONSISTENCY_BODIES = (
    "",
    EXAMPLE,
    "user-agent: *\ndisallow: /\nuser-agent: FooBot\nallow: /x/\n",
    "user-agent: FooBot\ndisallow: /private\n\nuser-agent: *\ndisallow: /\n",
    "user-agent: FooBot\nallow: /x/page.html\ndisallow: /x/\n",
    "user-agent: FooBot\ndisallow: /page\nallow: /page\n",
    "user-agent: FooBot\nallow: /$\ndisallow: /\n",
    "user-agent: FooBot\ndisallow: /\nallow: /x/index.html\n",
    "allow: /x/\nuser-agent: BarBot\n\nuser-agent: FooBot\nallow: /y/\ndisallow: /\n",
    "user-agent: FooBot\ndisallow:\nuser-agent: BarBot\ndisallow: /\n",
    "user-agent: FooBot\n",
    "user-agent: FooBot/1.0 bla\nuser-agent: *\ndisallow: /*.gif$\nallow: /x\n",
    "user-agent: * foo\ndisallow: /x\nuser-agent: foo\nallow: /x/y\n",
    "user-agent: barbot\nallow: /\nuser-agent: FOOBOT\ndisallow: /*/page\n",
)

CONSISTENCY_URLS = (
    "http://example.org/",
    "http://example.org/x/",
    "http://example.org/x/y",
    "http://example.org/x/page.html",
    "http://example.org/x/index.html",
    "http://example.org/page",
    "http://example.org/private/1",
    "http://example.org/img.gif",
    "http://example.org/y/z",
    "http://example.org/org/plans.html",
)


@mark.parametrize("body", CONSISTENCY_BODIES)
@mark.parametrize("agent", ("FooBot", "FooBot/1.0", "BarBot", "foo", "excite"))
def test_consistent_with_resolver(body, agent):
    """Test that the index agrees with parsing the file for each URL."""
    index = RuleIndex.parse(body, logger)
    for result in index.check_urls(agent, CONSISTENCY_URLS):
        expected = one_agent_allowed_by_robots(body, agent, result.url, logger)
        assert result.allowed is expected, result.url


def test_empty_allow_decides_nothing():
    """Test that an empty allow rule is not reported as the deciding rule."""
    body = "user-agent: *\nallow:\n"
    result = RuleIndex.parse(body, logger).check_url("FooBot", "http://x/x")
    assert result.allowed
    assert result.matching_line == 0
    resolver = MatchResolver(["FooBot"], "/x")
    parse_into(body, resolver, logger=logger)
    assert not resolver.disallowed()
    assert resolver.matching_line == result.matching_line


def test_agent_with_version_in_both():
    """Test that a caller agent with a version finds its group either way."""
    body = "user-agent: FooBot\ndisallow: /\n"
    result = RuleIndex.parse(body, logger).check_url("FooBot/1.0", "http://x/a")
    assert not result.allowed
    assert not one_agent_allowed_by_robots(body, "FooBot/1.0", "http://x/a", logger)
