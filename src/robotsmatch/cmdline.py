# SPDX-License-Identifier: BSD-3-Clause

"""Command line interface."""

from __future__ import annotations

import logging
from argparse import ArgumentParser
from collections.abc import Sequence
from pathlib import Path

from robotsmatch.parser import parse_into
from robotsmatch.report import render_report
from robotsmatch.reporter import ParsingReporter
from robotsmatch.rules import RuleCollector, UrlCheckResult
from robotsmatch.version import VERSION_STRING


def describe_result(result: UrlCheckResult) -> str:
    """Returns a one-line description of the verdict for a URL."""
    verdict = "allowed" if result.allowed else "disallowed"
    rule = result.rule
    if rule is None:
        return f"{result.url}: {verdict}"
    kind = "allow" if rule.allow else "disallow"
    return f"{result.url}: {verdict} by line {rule.lineno} ({kind}: {rule.pattern})"


def run(
    robots_file_name: str,
    user_agent: str,
    urls: Sequence[str],
    report_file_name: str | None = None,
) -> int:
    """
    Checks URLs against a robots.txt file and prints the verdicts.

    @param robots_file_name:
        Path of the robots.txt file to read.
    @param user_agent:
        Name of the crawler to check for.
    @param urls:
        URLs to check, percent-encoded.
    @param report_file_name:
        Path to write an HTML parse report to, or C{None} to not write one.
    @return:
        0 if all URLs are allowed, 1 if any URL is disallowed or
        the robots.txt file could not be read.
    """

    robots_path = Path(robots_file_name)
    try:
        body = robots_path.read_bytes()
    except OSError as ex:
        print(f'Cannot read "{robots_file_name}": {ex}')
        return 1

    collector = RuleCollector()
    reporter = ParsingReporter()
    parse_into(body, collector, reporter)
    results = collector.build().check_urls(user_agent, urls)
    for result in results:
        print(describe_result(result))

    if report_file_name is not None:
        print(f'Writing report to "{report_file_name}"...')
        with open(
            report_file_name, "w", encoding="ascii", errors="xmlcharrefreplace"
        ) as out:
            out.write(render_report(body, reporter, results, robots_path.name))

    return 0 if all(result.allowed for result in results) else 1


def main(argv: Sequence[str] | None = None) -> int:
    """
    Parse command line arguments and call L{run} with the results.

    This is the entry point that gets called by the wrapper script.
    """

    parser = ArgumentParser(
        description="Check whether a crawler may fetch URLs "
        "according to a robots.txt file"
    )
    parser.add_argument("robots", metavar="ROBOTS", help="robots.txt file to read")
    parser.add_argument("agent", metavar="AGENT", help="name of the crawler")
    parser.add_argument(
        "urls", metavar="URL", nargs="+", help="percent-encoded URL to check"
    )
    parser.add_argument(
        "--report", metavar="REPORT", help="file to write an HTML parse report to"
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="increase amount of logging, can be passed multiple times",
    )
    parser.add_argument(
        "-V", "--version", action="version", version=f"robotsmatch {VERSION_STRING}"
    )

    args = parser.parse_args(argv)

    level_map = {0: logging.WARNING, 1: logging.INFO, 2: logging.DEBUG}
    level = level_map.get(args.verbose, logging.DEBUG)
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")

    return run(args.robots, args.agent, args.urls, args.report)
