"""Robots Exclusion Protocol (robots.txt) parsing and URL matching.

Given the contents of a robots.txt file, the name of a crawler and a URL,
this package decides whether the crawler may fetch the URL, following
RFC 9309 and the conventions of the major search engines.

Overview
========

Parsing is done by `robotsmatch.parser.parse_robots_txt`, which turns the
file into a stream of events: one per directive, plus a description of
every line. It never fails: anything that does not look like a directive
is skipped. Field names are classified by `robotsmatch.keys`, which also
accepts common misspellings such as `disalow`.

The events can be consumed by:

  - `robotsmatch.matcher.MatchResolver`, which evaluates the rules for
    a single URL while the file is being parsed;
  - `robotsmatch.rules.RuleCollector`, which builds a
    `robotsmatch.rules.RuleIndex` for checking many URLs without
    parsing the file again;
  - `robotsmatch.reporter.ParsingReporter`, which records what was found
    on each line, for example to render it with `robotsmatch.report`.

`robotsmatch.parser.parse_into` feeds one parse to several consumers.

Matching
========

Rule patterns are matched against the path of a URL by
`robotsmatch.pattern.matches`. When rules conflict, the longest pattern
wins, and if an `allow` and a `disallow` rule are equally long, the
`allow` rule wins. A group of rules for a specific crawler replaces the
rules for all crawlers (`*`).

Entry Point
===========

`robotsmatch.cmdline.main` checks URLs from the command line.
"""
